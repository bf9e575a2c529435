"""
taxledger — fee/tax ledger engine для fungible-актива

Направленная комиссия (buy / sell / transfer), реестры площадок и
исключений, накопление treasury и авто-конверсия через внешнюю площадку,
единственный authority для всех изменений конфигурации.
"""

from taxledger.core.config import TokenConfig, load_token_config
from taxledger.core.domain.fee_schedule import FeeRates, FeeSchedule, TradeDirection
from taxledger.core.errors import ErrorReason, TaxLedgerError
from taxledger.token import TaxToken

__version__ = "0.3.0"

__all__ = [
    "TaxToken",
    "TokenConfig",
    "load_token_config",
    "FeeRates",
    "FeeSchedule",
    "TradeDirection",
    "ErrorReason",
    "TaxLedgerError",
]
