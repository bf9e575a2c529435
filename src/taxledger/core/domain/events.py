"""
Ledger events — журнал событий движка

Каждая успешная governance-мутация, перевод и цикл конверсии оставляют
запись в EventLog. Имена событий совпадают с именами исходного контракта,
поэтому внешние индексаторы читают их без маппинга.
"""

from enum import Enum
from typing import Any, Iterator

from pydantic import BaseModel, Field


class EventName(str, Enum):
    """Имена событий."""

    TRANSFER = "Transfer"
    APPROVAL = "Approval"
    OWNERSHIP_TRANSFERRED = "OwnershipTransferred"
    UPDATE_BUY_FEES = "UpdateBuyFees"
    UPDATE_SELL_FEES = "UpdateSellFees"
    UPDATE_TRANSFER_FEES = "UpdateTransferFees"
    UPDATE_MARKETING_WALLET = "UpdateMarketingWallet"
    UPDATE_SWAP_TOKENS_AT_AMOUNT = "UpdateSwapTokensAtAmount"
    UPDATE_SWAP_BACK_STATUS = "UpdateSwapBackStatus"
    UPDATE_EXCLUDE_FROM_FEES = "UpdateExcludeFromFees"
    UPDATE_V3_POOL = "UpdateV3Pool"
    SWAP_AND_DISTRIBUTE = "SwapAndDistribute"
    SWAP_BACK_FAILED = "SwapBackFailed"


class LedgerEvent(BaseModel):
    """Одна запись журнала."""

    seq: int = Field(..., ge=0, description="Монотонный номер записи")
    name: EventName = Field(..., description="Имя события")
    args: tuple[Any, ...] = Field(default=(), description="Аргументы события в порядке объявления")

    model_config = {"frozen": True}


class EventLog:
    """
    Append-only журнал событий.

    Поддерживает откат до отметки (truncate) — используется Ledger.atomic(),
    чтобы откатившаяся операция не оставляла записей.
    """

    def __init__(self) -> None:
        self._events: list[LedgerEvent] = []

    def emit(self, name: EventName, *args: Any) -> LedgerEvent:
        event = LedgerEvent(seq=len(self._events), name=name, args=args)
        self._events.append(event)
        return event

    def mark(self) -> int:
        return len(self._events)

    def truncate(self, mark: int) -> None:
        del self._events[mark:]

    def filter(self, name: EventName) -> list[LedgerEvent]:
        """Все записи с указанным именем."""
        return [e for e in self._events if e.name == name]

    def last(self) -> LedgerEvent | None:
        return self._events[-1] if self._events else None

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[LedgerEvent]:
        return iter(self._events)
