"""
FeeSchedule — Модель ставок комиссии по направлениям

Три направления (buy / sell / transfer), у каждого две компоненты:
liquidity_rate и marketing_rate в basis points (10000 = 100%).

Инварианты:
- buy/sell: liquidity_rate + marketing_rate <= 4000 (40%)
- transfer: liquidity_rate + marketing_rate <= 1000 (10%)

Immutable Pydantic модели: обновление направления — атомарная замена
обеих компонент через FeeSchedule.with_rates().
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from .units import MAX_TRADE_FEE_BPS, MAX_TRANSFER_FEE_BPS


# =============================================================================
# ENUMS
# =============================================================================


class TradeDirection(str, Enum):
    """
    Направление перевода с точки зрения комиссии.

    NO_FEE — комиссия не считается вообще (нулевая сумма или exclusion).
    """

    NO_FEE = "NO_FEE"
    BUY = "BUY"
    SELL = "SELL"
    TRANSFER = "TRANSFER"


def fee_cap_bps(direction: TradeDirection) -> int:
    """Потолок суммарной ставки для направления (bps)."""
    if direction == TradeDirection.TRANSFER:
        return MAX_TRANSFER_FEE_BPS
    if direction in (TradeDirection.BUY, TradeDirection.SELL):
        return MAX_TRADE_FEE_BPS
    raise ValueError(f"Direction {direction.value} has no fee schedule")


# =============================================================================
# MODELS
# =============================================================================


class FeeRates(BaseModel):
    """Пара ставок одного направления."""

    liquidity_rate: int = Field(..., ge=0, description="Liquidity-доля (bps)")
    marketing_rate: int = Field(..., ge=0, description="Marketing-доля (bps)")

    model_config = {"frozen": True}

    @property
    def total(self) -> int:
        """Суммарная ставка (bps)."""
        return self.liquidity_rate + self.marketing_rate

    def as_tuple(self) -> tuple[int, int]:
        return self.liquidity_rate, self.marketing_rate


class FeeSchedule(BaseModel):
    """
    Полная таблица ставок.

    Значения по умолчанию: buy (100, 400), sell (100, 400), transfer (0, 0).
    """

    buy: FeeRates = Field(
        default_factory=lambda: FeeRates(liquidity_rate=100, marketing_rate=400),
        description="Ставки при покупке (отправитель — venue)",
    )
    sell: FeeRates = Field(
        default_factory=lambda: FeeRates(liquidity_rate=100, marketing_rate=400),
        description="Ставки при продаже (получатель — venue)",
    )
    transfer: FeeRates = Field(
        default_factory=lambda: FeeRates(liquidity_rate=0, marketing_rate=0),
        description="Ставки обычного перевода",
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_caps(self) -> "FeeSchedule":
        for direction in (TradeDirection.BUY, TradeDirection.SELL, TradeDirection.TRANSFER):
            rates = self.rates_for(direction)
            cap = fee_cap_bps(direction)
            if rates.total > cap:
                raise ValueError(
                    f"{direction.value} fees {rates.total} bps exceed cap {cap} bps"
                )
        return self

    def rates_for(self, direction: TradeDirection) -> FeeRates:
        """
        Ставки для направления.

        Raises:
            ValueError: Для NO_FEE (у него нет ставок)
        """
        if direction == TradeDirection.BUY:
            return self.buy
        if direction == TradeDirection.SELL:
            return self.sell
        if direction == TradeDirection.TRANSFER:
            return self.transfer
        raise ValueError(f"Direction {direction.value} has no fee schedule")

    def with_rates(self, direction: TradeDirection, rates: FeeRates) -> "FeeSchedule":
        """Новая таблица с заменённой парой ставок одного направления."""
        field_name = direction.value.lower()
        if field_name not in ("buy", "sell", "transfer"):
            raise ValueError(f"Direction {direction.value} has no fee schedule")
        return self.model_copy(update={field_name: rates})
