"""AutoConversionTrigger — state machine авто-конверсии treasury

Состояния: IDLE / CONVERTING (ExecutionGuard поднят, пока CONVERTING).

IDLE → CONVERTING, в конце charged-перевода, если одновременно:
- swap_config.enabled
- treasury_balance >= swap_config.threshold_amount
- ExecutionGuard не поднят (вызов не является частью цикла конверсии)

CONVERTING:
- весь баланс treasury уходит на площадку сырым переводом ledger (без комиссии,
  даже если адрес движка снят с exclusion)
- выручка делится между marketing и liquidity пропорционально running totals
  marketing/liquidity долей, накопленных с последнего слива
- running totals уменьшаются на слитые доли после успешного цикла
  (доли вложенных переводов во время цикла сохраняются)

CONVERTING → IDLE безусловно: и при успехе, и при сбое площадки. Сбой
логируется и не пробрасывается — перевод-инициатор всегда завершается.
Ledger и running totals при сбое откатываются к началу цикла.

Вложенные попытки войти в CONVERTING при поднятом guard — тихий no-op.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from taxledger.core.domain.events import EventLog, EventName
from taxledger.core.domain.swap_config import ConversionState
from taxledger.core.domain.token_state import TokenState
from taxledger.core.domain.units import pro_rata
from taxledger.core.errors import EmptyTreasuryError, ErrorReason
from taxledger.gatekeeper.governance import authorize
from taxledger.ledger import Ledger

from .venue import ConversionProceeds, ConversionVenue

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class ConversionResult:
    """Результат оценки триггера."""

    triggered: bool
    success: bool
    amount_in: int
    proceeds: Optional[ConversionProceeds]

    # Диагностика
    reason: str
    state_before: ConversionState
    details: str


# =============================================================================
# TRIGGER
# =============================================================================


class AutoConversionTrigger:
    """State machine IDLE/CONVERTING поверх TokenState."""

    def __init__(
        self,
        state: TokenState,
        ledger: Ledger,
        events: EventLog,
        venue: Optional[ConversionVenue] = None,
    ):
        """
        Args:
            state: контекст движка
            ledger: базовый ledger (баланс treasury, atomic)
            events: журнал событий
            venue: порт площадки (None — конверсия недоступна)
        """
        self.state = state
        self.ledger = ledger
        self.events = events
        self.venue = venue
        self.cycles_completed = 0
        self.cycles_failed = 0

    @property
    def treasury_balance(self) -> int:
        return self.ledger.balance_of(self.state.self_address)

    def evaluate(self) -> ConversionResult:
        """Оценка перехода IDLE → CONVERTING после charged-перевода."""
        state_before = self.state.conversion_state

        # 1. Re-entrancy: вложенный вызов из цикла конверсии
        if self.state.execution_guard:
            return self._skipped("guard_active", state_before, "Nested trigger attempt ignored")

        # 2. Авто-конверсия выключена
        if not self.state.swap_config.enabled:
            return self._skipped("disabled", state_before, "Auto-conversion disabled")

        # 3. Порог
        balance = self.treasury_balance
        threshold = self.state.swap_config.threshold_amount
        if balance < threshold:
            return self._skipped(
                "below_threshold", state_before, f"treasury={balance} < threshold={threshold}"
            )

        return self._run_cycle(balance, "threshold_reached")

    def manual_trigger(self, caller: str) -> ConversionResult:
        """Принудительный цикл конверсии без проверки порога и флага enabled.

        Raises:
            AuthorizationError: caller не authority
            EmptyTreasuryError: treasury пуст
        """
        authorize(self.state, caller)

        balance = self.treasury_balance
        if balance == 0:
            raise EmptyTreasuryError(ErrorReason.EMPTY_TREASURY)

        if self.state.execution_guard:
            return self._skipped("guard_active", self.state.conversion_state, "Nested manual trigger ignored")

        return self._run_cycle(balance, "manual")

    def _run_cycle(self, amount_in: int, reason: str) -> ConversionResult:
        state_before = self.state.conversion_state

        if self.venue is None:
            return self._skipped("no_venue", state_before, "Conversion venue not configured")

        self.state.conversion_state = ConversionState.CONVERTING
        try:
            with self.ledger.atomic(self.state):
                proceeds = self._convert_and_settle(amount_in)
        except Exception as exc:
            self.cycles_failed += 1
            logger.warning("Conversion cycle failed (amount_in=%d): %s", amount_in, exc, exc_info=True)
            self.events.emit(EventName.SWAP_BACK_FAILED, amount_in, str(exc))
            return ConversionResult(
                triggered=True,
                success=False,
                amount_in=amount_in,
                proceeds=None,
                reason=f"{reason}_failed",
                state_before=state_before,
                details=f"{type(exc).__name__}: {exc}",
            )
        finally:
            self.state.conversion_state = ConversionState.IDLE

        self.cycles_completed += 1
        logger.info(
            "Conversion cycle completed: amount_in=%d, liquidity=%d, marketing=%d",
            amount_in, proceeds.liquidity_proceeds, proceeds.marketing_proceeds,
        )
        return ConversionResult(
            triggered=True,
            success=True,
            amount_in=amount_in,
            proceeds=proceeds,
            reason=reason,
            state_before=state_before,
            details=f"Converted {amount_in} into {proceeds.total}",
        )

    def _convert_and_settle(self, amount_in: int) -> ConversionProceeds:
        shares = self.state.pending_shares

        # Сырой перевод: treasury уходит на площадку целиком, мимо fee-пути
        self.ledger.move(self.state.self_address, self.venue.address, amount_in)
        total = self.venue.convert(amount_in)

        # Без накопленных долей (treasury пополнен напрямую) вся выручка уходит в marketing
        if shares.total == 0:
            marketing = total
        else:
            marketing = pro_rata(total, shares.marketing, shares.total)
        proceeds = ConversionProceeds(liquidity_proceeds=total - marketing, marketing_proceeds=marketing)

        self.venue.settle(proceeds, self.state.marketing_wallet)
        self.state.release(shares)
        self.events.emit(
            EventName.SWAP_AND_DISTRIBUTE,
            amount_in,
            proceeds.liquidity_proceeds,
            proceeds.marketing_proceeds,
        )
        return proceeds

    def _skipped(self, reason: str, state_before: ConversionState, details: str) -> ConversionResult:
        logger.debug("Conversion skipped: %s (%s)", reason, details)
        return ConversionResult(
            triggered=False,
            success=False,
            amount_in=0,
            proceeds=None,
            reason=reason,
            state_before=state_before,
            details=details,
        )
