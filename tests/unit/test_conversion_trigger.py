"""Тесты AutoConversionTrigger.

Coverage:
- Порог: ровно один цикл на перевод, пересекающий порог
- Разбиение выручки пропорционально накопленным долям
- Сбой площадки: откат цикла, перевод-инициатор завершается
- ExecutionGuard: вложенный перевод из цикла не запускает новый цикл
- Ручной запуск и пустой treasury
"""

import pytest

from taxledger.conversion import ConversionProceeds, ConversionVenue
from taxledger.core.domain.events import EventName
from taxledger.core.domain.swap_config import ConversionState
from taxledger.core.errors import EmptyTreasuryError
from taxledger.token import TaxToken

from tests.factories import ALICE, AUTHORITY, BOB, CAROL, MARKETING, POOL, SELF, FakeVenue, make_config


def funded(token: TaxToken) -> TaxToken:
    token.transfer(AUTHORITY, ALICE, 100_000)
    token.transfer(AUTHORITY, POOL, 200_000)
    return token


class TestThreshold:

    def test_below_threshold_accumulates(self, token: TaxToken, venue: FakeVenue) -> None:
        token.transfer(POOL, ALICE, 1000)
        assert token.treasury_balance() == 50
        assert venue.converted == []

    def test_crossing_triggers_once(self, token: TaxToken, venue: FakeVenue) -> None:
        """Вторая покупка доводит treasury до порога — ровно один цикл."""
        token.transfer(POOL, ALICE, 1000)
        token.transfer(POOL, ALICE, 1000)

        assert venue.converted == [100]
        assert token.treasury_balance() == 0
        assert token.trigger.cycles_completed == 1
        assert token.conversion_state == ConversionState.IDLE

    def test_recrossing_triggers_again(self, token: TaxToken, venue: FakeVenue) -> None:
        for _ in range(4):
            token.transfer(POOL, ALICE, 1000)
        assert venue.converted == [100, 100]

    def test_proceeds_split_by_shares(self, token: TaxToken, venue: FakeVenue) -> None:
        token.transfer(POOL, ALICE, 2000)

        proceeds, wallet = venue.settled[0]
        assert proceeds == ConversionProceeds(liquidity_proceeds=20, marketing_proceeds=80)
        assert wallet == MARKETING
        assert token.pending_fee_shares().total == 0

        event = token.events.filter(EventName.SWAP_AND_DISTRIBUTE)[0]
        assert event.args == (100, 20, 80)

    def test_treasury_moves_to_venue(self, token: TaxToken) -> None:
        token.transfer(POOL, ALICE, 2000)
        assert token.balance_of(POOL) == 200_000 - 2000 + 100
        assert token.balance_of(ALICE) == 100_000 + 1900

    def test_treasury_drain_skips_fee_path(self, token: TaxToken, venue: FakeVenue) -> None:
        """Движок снят с exclusion: площадка всё равно получает весь treasury."""
        token.set_exclusion(AUTHORITY, SELF, False)
        token.transfer(POOL, ALICE, 2000)

        assert venue.converted == [100]
        assert token.treasury_balance() == 0
        assert token.balance_of(POOL) == 200_000 - 2000 + 100
        assert token.events.filter(EventName.SWAP_AND_DISTRIBUTE)[0].args == (100, 20, 80)

    def test_disabled(self, token: TaxToken, venue: FakeVenue) -> None:
        token.toggle_auto_conversion(AUTHORITY, False)
        token.transfer(POOL, ALICE, 4000)
        assert token.treasury_balance() == 200
        assert venue.converted == []

    def test_excluded_transfer_does_not_evaluate(self, token: TaxToken, venue: FakeVenue) -> None:
        """Прямое пополнение treasury от authority — NO_FEE, оценки нет."""
        token.transfer(AUTHORITY, SELF, 500)
        assert venue.converted == []
        assert token.treasury_balance() == 500

    def test_plain_transfer_evaluates(self, token: TaxToken, venue: FakeVenue) -> None:
        """Обычный перевод с нулевой ставкой всё равно проходит fee-путь."""
        token.transfer(AUTHORITY, SELF, 500)
        token.transfer(ALICE, BOB, 10)
        assert venue.converted == [500]

    def test_unshared_proceeds_go_to_marketing(self, token: TaxToken, venue: FakeVenue) -> None:
        token.transfer(AUTHORITY, SELF, 500)
        token.transfer(ALICE, BOB, 10)
        proceeds, _ = venue.settled[0]
        assert proceeds.marketing_proceeds == 500
        assert proceeds.liquidity_proceeds == 0

    def test_evaluate_result(self, token: TaxToken) -> None:
        result = token.trigger.evaluate()
        assert not result.triggered
        assert result.reason == "below_threshold"

    def test_no_venue(self) -> None:
        token = funded(TaxToken(make_config()))
        token.transfer(POOL, ALICE, 2000)
        assert token.treasury_balance() == 100
        assert token.trigger.evaluate().reason == "no_venue"


class TestVenueFailure:

    @pytest.fixture
    def failing(self) -> FakeVenue:
        return FakeVenue(fail=True)

    @pytest.fixture
    def token(self, failing: FakeVenue) -> TaxToken:
        return funded(TaxToken(make_config(), venue=failing))

    def test_transfer_completes(self, token: TaxToken) -> None:
        token.transfer(POOL, ALICE, 2000)
        assert token.balance_of(ALICE) == 100_000 + 1900

    def test_cycle_rolled_back(self, token: TaxToken) -> None:
        token.transfer(POOL, ALICE, 2000)
        assert token.treasury_balance() == 100
        assert token.balance_of(POOL) == 200_000 - 2000
        assert token.pending_fee_shares().total == 100
        assert token.conversion_state == ConversionState.IDLE
        assert token.trigger.cycles_failed == 1
        assert token.events.filter(EventName.SWAP_AND_DISTRIBUTE) == []

    def test_failure_event(self, token: TaxToken) -> None:
        token.transfer(POOL, ALICE, 2000)
        event = token.events.filter(EventName.SWAP_BACK_FAILED)[0]
        assert event.args == (100, "Conversion venue call failed")

    def test_registry_changes_rolled_back(self, failing: FakeVenue, token: TaxToken) -> None:
        """Изменения реестров из колбэка площадки откатываются вместе с циклом."""

        def reconfigure(amount_in: int) -> None:
            token.set_venue(AUTHORITY, BOB, 500, True)
            token.set_exclusion(AUTHORITY, CAROL, True)

        failing.on_convert = reconfigure
        token.transfer(POOL, ALICE, 2000)

        assert not token.is_any_venue(BOB)
        assert not token.is_excluded(CAROL)
        assert token.events.filter(EventName.UPDATE_V3_POOL) == []

    def test_retry_after_recovery(self, token: TaxToken, failing: FakeVenue) -> None:
        token.transfer(POOL, ALICE, 2000)
        failing.fail = False
        token.transfer(POOL, ALICE, 1000)
        assert failing.converted == [150]
        assert token.treasury_balance() == 0


class TestExecutionGuard:

    def test_nested_transfer_does_not_reenter(self) -> None:
        venue = FakeVenue()
        token = funded(TaxToken(make_config(), venue=venue))
        states = []

        def nested_buy(amount_in: int) -> None:
            states.append(token.conversion_state)
            token.transfer(POOL, BOB, 2000)

        venue.on_convert = nested_buy
        token.transfer(POOL, ALICE, 2000)

        assert states == [ConversionState.CONVERTING]
        assert venue.converted == [100]
        assert token.trigger.cycles_completed == 1
        # Комиссия вложенного перевода осталась в treasury вместе со своими долями
        assert token.treasury_balance() == 100
        assert token.pending_fee_shares().liquidity == 20
        assert token.pending_fee_shares().marketing == 80
        assert token.conversion_state == ConversionState.IDLE

    def test_guard_result(self, token: TaxToken) -> None:
        token.state.conversion_state = ConversionState.CONVERTING
        result = token.trigger.evaluate()
        assert result.reason == "guard_active"
        assert not result.triggered


class TestManualTrigger:

    def test_empty_treasury(self, token: TaxToken) -> None:
        with pytest.raises(EmptyTreasuryError) as exc_info:
            token.manual_trigger(AUTHORITY)
        assert str(exc_info.value) == "Cant Swap Back 0 Token!"

    def test_below_threshold(self, token: TaxToken, venue: FakeVenue) -> None:
        token.transfer(POOL, ALICE, 1000)
        result = token.manual_trigger(AUTHORITY)
        assert result.success
        assert result.reason == "manual"
        assert result.amount_in == 50
        assert venue.converted == [50]
        assert token.treasury_balance() == 0

    def test_ignores_disabled_flag(self, token: TaxToken, venue: FakeVenue) -> None:
        token.toggle_auto_conversion(AUTHORITY, False)
        token.transfer(POOL, ALICE, 1000)
        token.manual_trigger(AUTHORITY)
        assert venue.converted == [50]


def test_fake_venue_satisfies_port() -> None:
    assert isinstance(FakeVenue(), ConversionVenue)
