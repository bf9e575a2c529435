"""
Domain models and value objects.

Contains fundamental domain entities: fee units, FeeSchedule, SwapConfig,
ledger events. TokenState (mutable engine context) is imported from
taxledger.core.domain.token_state directly.
"""

from taxledger.core.domain.events import EventLog, EventName, LedgerEvent
from taxledger.core.domain.fee_schedule import FeeRates, FeeSchedule, TradeDirection, fee_cap_bps
from taxledger.core.domain.swap_config import ConversionState, SwapConfig
from taxledger.core.domain.units import (
    FEE_DENOMINATOR,
    MAX_TRADE_FEE_BPS,
    MAX_TRANSFER_FEE_BPS,
    ZERO_ADDRESS,
    compute_fee,
    is_zero_address,
    normalize_address,
    pro_rata,
    split_fee,
    validate_amount,
)

__all__ = [
    # Units module
    "FEE_DENOMINATOR",
    "MAX_TRADE_FEE_BPS",
    "MAX_TRANSFER_FEE_BPS",
    "ZERO_ADDRESS",
    "compute_fee",
    "split_fee",
    "pro_rata",
    "normalize_address",
    "is_zero_address",
    "validate_amount",
    # Fee schedule
    "TradeDirection",
    "FeeRates",
    "FeeSchedule",
    "fee_cap_bps",
    # Swap config
    "SwapConfig",
    "ConversionState",
    # Events
    "EventName",
    "LedgerEvent",
    "EventLog",
]
