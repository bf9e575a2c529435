"""GovernanceGate: единственный authority и все мутаторы конфигурации

Порядок проверок каждого мутатора:
1. authorize(caller) → AuthorizationError
2. Bound / формат входа → BoundViolationError / InvalidAddressError / InvalidAmountError
3. Идемпотентность (compare-and-set) → DuplicateStateError
4. Мутация + событие в EventLog + INFO лог

claim_stuck_tokens не меняет конфигурацию движка: событие Transfer пишет
сам чужой актив.

Любая ошибка — состояние не изменено.
"""

import logging
from typing import Callable, Optional, TypeVar

from taxledger.core.domain.events import EventLog, EventName
from taxledger.core.domain.fee_schedule import FeeRates, TradeDirection, fee_cap_bps
from taxledger.core.domain.token_state import TokenState
from taxledger.core.domain.units import ZERO_ADDRESS, normalize_address
from taxledger.core.errors import (
    AuthorizationError,
    BoundViolationError,
    DuplicateStateError,
    ErrorReason,
    InvalidAddressError,
    InvalidAmountError,
)
from taxledger.ledger import ForeignAsset

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# HELPERS
# =============================================================================


def authorize(state: TokenState, caller: str) -> None:
    """Проверка, что caller — текущий authority.

    После renounce authority == None, и проверка не проходит ни для кого.

    Raises:
        AuthorizationError: caller != authority
    """
    caller = normalize_address(caller)
    if state.authority is None or caller != state.authority:
        raise AuthorizationError(ErrorReason.NOT_AUTHORITY, detail=f"caller={caller}")


def compare_and_set(
    getter: Callable[[], T],
    setter: Callable[[T], None],
    new_value: T,
    reason: ErrorReason,
) -> T:
    """Compare-and-set: записать new_value, если оно отличается от текущего.

    Args:
        getter: чтение текущего значения поля
        setter: запись нового значения
        new_value: требуемое значение
        reason: метка DuplicateStateError для этого поля

    Returns:
        Предыдущее значение

    Raises:
        DuplicateStateError: new_value == текущее значение
    """
    current = getter()
    if current == new_value:
        raise DuplicateStateError(reason, detail=f"value={new_value!r}")
    setter(new_value)
    return current


_FEE_EVENTS = {
    TradeDirection.BUY: EventName.UPDATE_BUY_FEES,
    TradeDirection.SELL: EventName.UPDATE_SELL_FEES,
    TradeDirection.TRANSFER: EventName.UPDATE_TRANSFER_FEES,
}


# =============================================================================
# GATE
# =============================================================================


class GovernanceGate:
    """Authority-gated мутаторы конфигурации движка."""

    def __init__(
        self,
        state: TokenState,
        events: EventLog,
        is_contract: Optional[Callable[[str], bool]] = None,
    ):
        """
        Args:
            state: контекст движка (мутируется по ссылке)
            events: журнал событий
            is_contract: проверка "адрес — контракт" (по умолчанию только self_address)
        """
        self.state = state
        self.events = events
        self._is_contract = is_contract or (lambda address: address == state.self_address)

    # -------------------------------------------------------------------------
    # Fees
    # -------------------------------------------------------------------------

    def update_buy_fees(self, caller: str, liquidity: int, marketing: int) -> None:
        self._update_fees(caller, TradeDirection.BUY, liquidity, marketing)

    def update_sell_fees(self, caller: str, liquidity: int, marketing: int) -> None:
        self._update_fees(caller, TradeDirection.SELL, liquidity, marketing)

    def update_transfer_fees(self, caller: str, liquidity: int, marketing: int) -> None:
        self._update_fees(caller, TradeDirection.TRANSFER, liquidity, marketing)

    def _update_fees(self, caller: str, direction: TradeDirection, liquidity: int, marketing: int) -> None:
        authorize(self.state, caller)

        for value in (liquidity, marketing):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidAmountError(ErrorReason.AMOUNT_NOT_INTEGER, detail=repr(value))
            if value < 0:
                raise InvalidAmountError(ErrorReason.NEGATIVE_AMOUNT, detail=str(value))

        cap = fee_cap_bps(direction)
        if liquidity + marketing > cap:
            reason = (
                ErrorReason.TRANSFER_FEES_ABOVE_CAP
                if direction == TradeDirection.TRANSFER
                else ErrorReason.TRADE_FEES_ABOVE_CAP
            )
            raise BoundViolationError(reason, detail=f"{direction.value}: {liquidity} + {marketing} > {cap}")

        compare_and_set(
            lambda: self.state.fee_schedule.rates_for(direction),
            lambda rates: setattr(self.state, "fee_schedule", self.state.fee_schedule.with_rates(direction, rates)),
            FeeRates(liquidity_rate=liquidity, marketing_rate=marketing),
            ErrorReason.FEES_UNCHANGED,
        )

        self.events.emit(_FEE_EVENTS[direction], liquidity, marketing)
        logger.info("%s fees updated: liquidity=%d bps, marketing=%d bps", direction.value, liquidity, marketing)

    # -------------------------------------------------------------------------
    # Marketing wallet
    # -------------------------------------------------------------------------

    def set_marketing_wallet(self, caller: str, wallet: str) -> None:
        authorize(self.state, caller)
        wallet = normalize_address(wallet)

        if wallet == ZERO_ADDRESS:
            raise InvalidAddressError(ErrorReason.MARKETING_WALLET_ZERO)
        if wallet == self.state.self_address or self._is_contract(wallet):
            raise InvalidAddressError(ErrorReason.MARKETING_WALLET_CONTRACT, detail=f"wallet={wallet}")

        compare_and_set(
            lambda: self.state.marketing_wallet,
            lambda value: setattr(self.state, "marketing_wallet", value),
            wallet,
            ErrorReason.MARKETING_WALLET_UNCHANGED,
        )

        self.events.emit(EventName.UPDATE_MARKETING_WALLET, wallet)
        logger.info("Marketing wallet set to %s", wallet)

    # -------------------------------------------------------------------------
    # Swap config
    # -------------------------------------------------------------------------

    def set_swap_threshold(self, caller: str, amount: int) -> None:
        authorize(self.state, caller)

        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidAmountError(ErrorReason.AMOUNT_NOT_INTEGER, detail=repr(amount))
        if amount <= 0:
            raise InvalidAmountError(ErrorReason.SWAP_THRESHOLD_ZERO, detail=str(amount))

        compare_and_set(
            lambda: self.state.swap_config.threshold_amount,
            lambda value: setattr(
                self.state, "swap_config", self.state.swap_config.model_copy(update={"threshold_amount": value})
            ),
            amount,
            ErrorReason.SWAP_THRESHOLD_UNCHANGED,
        )

        self.events.emit(EventName.UPDATE_SWAP_TOKENS_AT_AMOUNT, amount)
        logger.info("Swap threshold set to %d", amount)

    def toggle_auto_conversion(self, caller: str, enabled: bool) -> None:
        authorize(self.state, caller)

        compare_and_set(
            lambda: self.state.swap_config.enabled,
            lambda value: setattr(
                self.state, "swap_config", self.state.swap_config.model_copy(update={"enabled": value})
            ),
            bool(enabled),
            ErrorReason.AUTO_CONVERSION_UNCHANGED,
        )

        self.events.emit(EventName.UPDATE_SWAP_BACK_STATUS, bool(enabled))
        logger.info("Auto-conversion %s", "enabled" if enabled else "disabled")

    # -------------------------------------------------------------------------
    # Registries
    # -------------------------------------------------------------------------

    def set_exclusion(self, caller: str, address: str, excluded: bool) -> None:
        authorize(self.state, caller)
        address = normalize_address(address)

        self.state.exclusions.set_excluded(address, bool(excluded))

        self.events.emit(EventName.UPDATE_EXCLUDE_FROM_FEES, address, bool(excluded))
        logger.info("Fee exclusion for %s set to %s", address, bool(excluded))

    def set_venue(self, caller: str, address: str, tier: int, present: bool) -> None:
        authorize(self.state, caller)
        address = normalize_address(address)

        self.state.venues.register(address, tier, bool(present))

        self.events.emit(EventName.UPDATE_V3_POOL, address, tier, bool(present))
        logger.info("Venue %s tier=%d set to %s", address, tier, bool(present))

    # -------------------------------------------------------------------------
    # Authority pass-through
    # -------------------------------------------------------------------------

    def transfer_authority(self, caller: str, new_authority: str) -> None:
        authorize(self.state, caller)
        new_authority = normalize_address(new_authority)
        if new_authority == ZERO_ADDRESS:
            raise InvalidAddressError(ErrorReason.NEW_AUTHORITY_ZERO)
        self._set_authority(new_authority)

    def renounce_authority(self, caller: str) -> None:
        authorize(self.state, caller)
        self._set_authority(None)

    # -------------------------------------------------------------------------
    # Stuck assets
    # -------------------------------------------------------------------------

    def claim_stuck_tokens(self, caller: str, asset: ForeignAsset) -> int:
        """Вывести чужой актив с адреса движка на authority.

        Собственный баланс движка (treasury) выводится только циклом
        конверсии, поэтому адрес самого движка отклоняется.

        Returns:
            Выведенная сумма

        Raises:
            AuthorizationError: caller не authority
            InvalidAddressError: asset — сам движок
        """
        authorize(self.state, caller)
        asset_address = normalize_address(asset.address)
        if asset_address == self.state.self_address:
            raise InvalidAddressError(ErrorReason.NATIVE_TOKEN_CLAIM, detail=f"asset={asset_address}")

        amount = asset.balance_of(self.state.self_address)
        asset.transfer(self.state.self_address, self.state.authority, amount)
        logger.info("Claimed %d of stuck asset %s to %s", amount, asset_address, self.state.authority)
        return amount

    def _set_authority(self, new_authority: Optional[str]) -> None:
        previous = self.state.authority
        self.state.authority = new_authority
        self.events.emit(EventName.OWNERSHIP_TRANSFERRED, previous, new_authority or ZERO_ADDRESS)
        logger.info("Authority transferred: %s -> %s", previous, new_authority or ZERO_ADDRESS)
