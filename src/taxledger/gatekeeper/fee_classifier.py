"""FeeClassifier: направление перевода и применимость комиссии

Порядок проверок (фиксированный, единственный источник направленности):
1. amount == 0 → NO_FEE (без вычислений и side effects)
2. sender или recipient в ExclusionRegistry → NO_FEE
3. sender — площадка (any tier) → BUY
4. recipient — площадка (any tier) → SELL
5. иначе → TRANSFER (ставки могут быть нулевыми)

Если обе стороны — площадки, срабатывает правило 3 (BUY): перевод трактуется
как buy-нога с точки зрения площадки-отправителя. Порядок сохранять как есть.

Расчёт: fee = floor(amount * (liquidity + marketing) / 10000),
net_amount = amount - fee.
"""

import logging
from dataclasses import dataclass

from taxledger.core.domain.fee_schedule import TradeDirection
from taxledger.core.domain.token_state import TokenState
from taxledger.core.domain.units import normalize_address, split_fee, validate_amount

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class FeeClassification:
    """Результат классификации перевода."""

    direction: TradeDirection
    amount: int

    # Применённые ставки (0, 0 для NO_FEE)
    liquidity_rate: int
    marketing_rate: int

    # Разбиение суммы
    fee: int
    liquidity_share: int
    marketing_share: int
    net_amount: int

    # Детали
    reason: str

    @property
    def fee_applies(self) -> bool:
        """True если перевод проходит fee-путь (charged transfer)."""
        return self.direction != TradeDirection.NO_FEE


# =============================================================================
# CLASSIFIER
# =============================================================================


class FeeClassifier:
    """Классификатор переводов поверх TokenState.

    Stateless: вся конфигурация читается из переданного контекста.
    """

    def classify(self, state: TokenState, sender: str, recipient: str, amount: int) -> FeeClassification:
        """Классификация перевода и расчёт комиссии.

        Args:
            state: контекст движка (ставки, реестры)
            sender: отправитель
            recipient: получатель
            amount: сумма перевода

        Returns:
            FeeClassification с направлением, ставками и разбиением суммы
        """
        validate_amount(amount)
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)

        # 1. Нулевая сумма
        if amount == 0:
            return self._no_fee(amount, "zero_amount")

        # 2. Exclusion любой стороны
        if state.exclusions.is_excluded(sender):
            return self._no_fee(amount, "sender_excluded")
        if state.exclusions.is_excluded(recipient):
            return self._no_fee(amount, "recipient_excluded")

        # 3-5. Направление
        if state.venues.is_any_member(sender):
            direction = TradeDirection.BUY
            reason = "sender_is_venue"
        elif state.venues.is_any_member(recipient):
            direction = TradeDirection.SELL
            reason = "recipient_is_venue"
        else:
            direction = TradeDirection.TRANSFER
            reason = "plain_transfer"

        rates = state.fee_schedule.rates_for(direction)
        liquidity_share, marketing_share, net_amount = split_fee(
            amount, rates.liquidity_rate, rates.marketing_rate
        )
        fee = liquidity_share + marketing_share

        logger.debug(
            "Classified %s -> %s amount=%d as %s: fee=%d (liq=%d, mkt=%d)",
            sender, recipient, amount, direction.value, fee, liquidity_share, marketing_share,
        )

        return FeeClassification(
            direction=direction,
            amount=amount,
            liquidity_rate=rates.liquidity_rate,
            marketing_rate=rates.marketing_rate,
            fee=fee,
            liquidity_share=liquidity_share,
            marketing_share=marketing_share,
            net_amount=net_amount,
            reason=reason,
        )

    @staticmethod
    def _no_fee(amount: int, reason: str) -> FeeClassification:
        return FeeClassification(
            direction=TradeDirection.NO_FEE,
            amount=amount,
            liquidity_rate=0,
            marketing_rate=0,
            fee=0,
            liquidity_share=0,
            marketing_share=0,
            net_amount=amount,
            reason=reason,
        )
