"""
Error taxonomy — типизированные ошибки ledger-движка

Каждая ошибка несёт ErrorReason (машиночитаемая метка) и фиксированное
человекочитаемое сообщение. Сообщения — часть внешнего контракта:
вызывающая сторона сверяет их буквально, менять тексты нельзя.
"""

from enum import Enum
from typing import Final, Optional


class ErrorReason(str, Enum):
    """Метка причины ошибки."""

    # Authority
    NOT_AUTHORITY = "NOT_AUTHORITY"
    NEW_AUTHORITY_ZERO = "NEW_AUTHORITY_ZERO"

    # Bounds
    TRADE_FEES_ABOVE_CAP = "TRADE_FEES_ABOVE_CAP"
    TRANSFER_FEES_ABOVE_CAP = "TRANSFER_FEES_ABOVE_CAP"

    # Duplicate state
    FEES_UNCHANGED = "FEES_UNCHANGED"
    MARKETING_WALLET_UNCHANGED = "MARKETING_WALLET_UNCHANGED"
    VENUE_STATUS_UNCHANGED = "VENUE_STATUS_UNCHANGED"
    SWAP_THRESHOLD_UNCHANGED = "SWAP_THRESHOLD_UNCHANGED"
    AUTO_CONVERSION_UNCHANGED = "AUTO_CONVERSION_UNCHANGED"
    EXCLUSION_UNCHANGED = "EXCLUSION_UNCHANGED"

    # Invalid input
    MARKETING_WALLET_ZERO = "MARKETING_WALLET_ZERO"
    MARKETING_WALLET_CONTRACT = "MARKETING_WALLET_CONTRACT"
    INVALID_ADDRESS_FORMAT = "INVALID_ADDRESS_FORMAT"
    SWAP_THRESHOLD_ZERO = "SWAP_THRESHOLD_ZERO"
    NEGATIVE_AMOUNT = "NEGATIVE_AMOUNT"
    AMOUNT_NOT_INTEGER = "AMOUNT_NOT_INTEGER"
    NEGATIVE_FEE_TIER = "NEGATIVE_FEE_TIER"
    NATIVE_TOKEN_CLAIM = "NATIVE_TOKEN_CLAIM"

    # Conversion
    EMPTY_TREASURY = "EMPTY_TREASURY"
    VENUE_FAILURE = "VENUE_FAILURE"

    # Base ledger
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    INSUFFICIENT_ALLOWANCE = "INSUFFICIENT_ALLOWANCE"
    TRANSFER_TO_ZERO = "TRANSFER_TO_ZERO"
    TRANSFER_FROM_ZERO = "TRANSFER_FROM_ZERO"
    APPROVE_TO_ZERO = "APPROVE_TO_ZERO"
    APPROVE_FROM_ZERO = "APPROVE_FROM_ZERO"


ERROR_MESSAGES: Final[dict[ErrorReason, str]] = {
    ErrorReason.NOT_AUTHORITY: "Ownable: caller is not the owner",
    ErrorReason.NEW_AUTHORITY_ZERO: "Ownable: new owner is the zero address",
    ErrorReason.TRADE_FEES_ABOVE_CAP: "Total fees cannot be more than 40%",
    ErrorReason.TRANSFER_FEES_ABOVE_CAP: "Total fees cannot be more than 10%",
    ErrorReason.FEES_UNCHANGED: "Fees already on those values",
    ErrorReason.MARKETING_WALLET_UNCHANGED: "Marketing wallet is already that address",
    ErrorReason.VENUE_STATUS_UNCHANGED: "Pool already in this status",
    ErrorReason.SWAP_THRESHOLD_UNCHANGED: "SwapTokensAtAmount already on that amount",
    ErrorReason.AUTO_CONVERSION_UNCHANGED: "SwapBack already on status",
    ErrorReason.EXCLUSION_UNCHANGED: "Account is already the value of 'excluded'",
    ErrorReason.MARKETING_WALLET_ZERO: "Marketing wallet cannot be the zero address",
    ErrorReason.MARKETING_WALLET_CONTRACT: "Marketing wallet cannot be a contract",
    ErrorReason.INVALID_ADDRESS_FORMAT: "Invalid address format",
    ErrorReason.SWAP_THRESHOLD_ZERO: "Amount must be equal or greater than 1 Wei",
    ErrorReason.NEGATIVE_AMOUNT: "Amount cannot be negative",
    ErrorReason.AMOUNT_NOT_INTEGER: "Amount must be an integer",
    ErrorReason.NEGATIVE_FEE_TIER: "Fee tier cannot be negative",
    ErrorReason.NATIVE_TOKEN_CLAIM: "Owner cannot claim native tokens",
    ErrorReason.EMPTY_TREASURY: "Cant Swap Back 0 Token!",
    ErrorReason.VENUE_FAILURE: "Conversion venue call failed",
    ErrorReason.INSUFFICIENT_BALANCE: "ERC20: transfer amount exceeds balance",
    ErrorReason.INSUFFICIENT_ALLOWANCE: "ERC20: insufficient allowance",
    ErrorReason.TRANSFER_TO_ZERO: "ERC20: transfer to the zero address",
    ErrorReason.TRANSFER_FROM_ZERO: "ERC20: transfer from the zero address",
    ErrorReason.APPROVE_TO_ZERO: "ERC20: approve to the zero address",
    ErrorReason.APPROVE_FROM_ZERO: "ERC20: approve from the zero address",
}


class TaxLedgerError(Exception):
    """
    Базовая ошибка движка.

    Attributes:
        reason: метка причины
        message: фиксированное сообщение (str(err) == message)
        detail: необязательный диагностический контекст, в сообщение не входит
    """

    def __init__(self, reason: ErrorReason, detail: Optional[str] = None):
        self.reason = reason
        self.message = ERROR_MESSAGES[reason]
        self.detail = detail
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(reason={self.reason.value}, detail={self.detail!r})"


class AuthorizationError(TaxLedgerError):
    """Вызывающий не является authority."""


class BoundViolationError(TaxLedgerError):
    """Значение превышает жёсткий потолок ставки."""


class DuplicateStateError(TaxLedgerError):
    """Setter вызван со значением, которое уже действует."""


class InvalidAddressError(TaxLedgerError):
    """Некорректный адрес для setter-а."""


class InvalidAmountError(TaxLedgerError):
    """Некорректная сумма."""


class EmptyTreasuryError(TaxLedgerError):
    """Ручная конверсия при пустом treasury."""


class InsufficientBalanceError(TaxLedgerError):
    """Недостаточно баланса для перевода."""


class InsufficientAllowanceError(TaxLedgerError):
    """Недостаточно allowance для transfer_from."""


class InvalidDestinationError(TaxLedgerError):
    """Перевод на / с нулевого адреса."""


class VenueError(TaxLedgerError):
    """Сбой внешней площадки конверсии."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(ErrorReason.VENUE_FAILURE, detail=detail)
