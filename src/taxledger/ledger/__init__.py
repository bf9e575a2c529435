"""Ledger — базовый учёт балансов (внешний коллаборатор fee-движка)."""

from .assets import ForeignAsset
from .balances import UNLIMITED_ALLOWANCE, Checkpointable, Ledger

__all__ = [
    "UNLIMITED_ALLOWANCE",
    "Checkpointable",
    "ForeignAsset",
    "Ledger",
]
