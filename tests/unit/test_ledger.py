"""Тесты базового Ledger и EventLog."""

import pytest

from taxledger.core.domain.events import EventLog, EventName
from taxledger.core.domain.units import ZERO_ADDRESS
from taxledger.core.errors import InsufficientBalanceError, InvalidDestinationError
from taxledger.ledger import Ledger

from tests.factories import ALICE, BOB


class _Counter:
    """Минимальный Checkpointable."""

    def __init__(self) -> None:
        self.value = 0

    def snapshot(self) -> int:
        return self.value

    def restore(self, snapshot: int) -> None:
        self.value = snapshot


@pytest.fixture
def ledger() -> Ledger:
    ledger = Ledger()
    ledger.mint(ALICE, 1000)
    return ledger


class TestLedger:

    def test_mint(self, ledger: Ledger) -> None:
        assert ledger.total_supply == 1000
        assert ledger.balance_of(ALICE) == 1000
        assert ledger.events.last().args == (ZERO_ADDRESS, ALICE, 1000)

    def test_move(self, ledger: Ledger) -> None:
        ledger.move(ALICE, BOB, 300)
        assert ledger.balance_of(ALICE) == 700
        assert ledger.balance_of(BOB) == 300

    def test_move_from_zero(self, ledger: Ledger) -> None:
        with pytest.raises(InvalidDestinationError) as exc_info:
            ledger.move(ZERO_ADDRESS, BOB, 1)
        assert str(exc_info.value) == "ERC20: transfer from the zero address"

    def test_mint_to_zero(self, ledger: Ledger) -> None:
        with pytest.raises(InvalidDestinationError):
            ledger.mint(ZERO_ADDRESS, 1)

    def test_contracts(self, ledger: Ledger) -> None:
        assert not ledger.is_contract(BOB)
        ledger.register_contract(BOB)
        assert ledger.is_contract(BOB.upper().replace("0X", "0x"))

    def test_empty_event_log_is_shared(self) -> None:
        events = EventLog()
        ledger = Ledger(events)
        ledger.mint(ALICE, 1)
        assert len(events) == 1


class TestAtomic:

    def test_commit(self, ledger: Ledger) -> None:
        counter = _Counter()
        with ledger.atomic(counter):
            ledger.move(ALICE, BOB, 100)
            counter.value = 5
        assert ledger.balance_of(BOB) == 100
        assert counter.value == 5

    def test_rollback(self, ledger: Ledger) -> None:
        counter = _Counter()
        events_before = len(ledger.events)
        with pytest.raises(InsufficientBalanceError):
            with ledger.atomic(counter):
                ledger.move(ALICE, BOB, 100)
                ledger.approve(ALICE, BOB, 50)
                counter.value = 5
                ledger.move(BOB, ALICE, 1000)
        assert ledger.balance_of(ALICE) == 1000
        assert ledger.balance_of(BOB) == 0
        assert ledger.allowance(ALICE, BOB) == 0
        assert counter.value == 0
        assert len(ledger.events) == events_before

    def test_nested_inner_rollback(self, ledger: Ledger) -> None:
        with ledger.atomic():
            ledger.move(ALICE, BOB, 100)
            with pytest.raises(RuntimeError):
                with ledger.atomic():
                    ledger.move(ALICE, BOB, 200)
                    raise RuntimeError("inner")
        assert ledger.balance_of(BOB) == 100


class TestEventLog:

    def test_emit_and_filter(self) -> None:
        log = EventLog()
        log.emit(EventName.UPDATE_BUY_FEES, 1, 2)
        log.emit(EventName.UPDATE_SELL_FEES, 3, 4)
        log.emit(EventName.UPDATE_BUY_FEES, 5, 6)
        assert [e.args for e in log.filter(EventName.UPDATE_BUY_FEES)] == [(1, 2), (5, 6)]
        assert [e.seq for e in log] == [0, 1, 2]

    def test_truncate(self) -> None:
        log = EventLog()
        log.emit(EventName.APPROVAL, ALICE, BOB, 1)
        mark = log.mark()
        log.emit(EventName.APPROVAL, ALICE, BOB, 2)
        log.truncate(mark)
        assert len(log) == 1
        assert log.last().args == (ALICE, BOB, 1)

    def test_empty_last(self) -> None:
        assert EventLog().last() is None

    def test_event_names(self) -> None:
        assert EventName.UPDATE_V3_POOL.value == "UpdateV3Pool"
        assert EventName.UPDATE_SWAP_TOKENS_AT_AMOUNT.value == "UpdateSwapTokensAtAmount"


class TestAtomicJournal:
    """Откат через undo-журнал: только изменённые ключи."""

    def test_inner_commit_undone_by_outer_rollback(self, ledger: Ledger) -> None:
        with pytest.raises(RuntimeError):
            with ledger.atomic():
                with ledger.atomic():
                    ledger.move(ALICE, BOB, 400)
                    ledger.approve(BOB, ALICE, 10)
                raise RuntimeError("outer")
        assert ledger.balance_of(ALICE) == 1000
        assert ledger.balance_of(BOB) == 0
        assert ledger.allowance(BOB, ALICE) == 0

    def test_repeated_writes_restore_first_value(self, ledger: Ledger) -> None:
        ledger.approve(ALICE, BOB, 5)
        with pytest.raises(RuntimeError):
            with ledger.atomic():
                ledger.approve(ALICE, BOB, 6)
                ledger.approve(ALICE, BOB, 7)
                ledger.spend_allowance(ALICE, BOB, 3)
                raise RuntimeError("fail")
        assert ledger.allowance(ALICE, BOB) == 5

    def test_self_transfer_rollback(self, ledger: Ledger) -> None:
        with pytest.raises(RuntimeError):
            with ledger.atomic():
                ledger.move(ALICE, ALICE, 300)
                raise RuntimeError("fail")
        assert ledger.balance_of(ALICE) == 1000

    def test_supply_rollback(self, ledger: Ledger) -> None:
        with pytest.raises(RuntimeError):
            with ledger.atomic():
                ledger.mint(BOB, 50)
                raise RuntimeError("fail")
        assert ledger.total_supply == 1000
        assert ledger.balance_of(BOB) == 0

    def test_commit_after_rollback(self, ledger: Ledger) -> None:
        """После отката следующий блок пишет в чистый журнал."""
        with pytest.raises(RuntimeError):
            with ledger.atomic():
                ledger.move(ALICE, BOB, 1)
                raise RuntimeError("fail")
        with ledger.atomic():
            ledger.move(ALICE, BOB, 2)
        assert ledger.balance_of(BOB) == 2
