"""
FeeUnits — Централизованный модуль единиц комиссии

Единственный допустимый способ преобразований между:
- amount (целые единицы токена, минимальные доли)
- rate_bps (basis points, 1/10000)
- fee / net_amount (целые единицы после округления)

ЗАПРЕЩЕНО считать комиссию вне этого модуля: округление всегда floor,
остаток всегда уходит получателю, fee + net_amount == amount.
"""

import re
from typing import Final

from taxledger.core.errors import ErrorReason, InvalidAddressError, InvalidAmountError


# =============================================================================
# BASIS POINTS
# =============================================================================
# Знаменатель ставок (10000 = 100%)
FEE_DENOMINATOR: Final[int] = 10_000

# Потолок суммарной ставки buy/sell (40%)
MAX_TRADE_FEE_BPS: Final[int] = 4_000

# Потолок суммарной ставки transfer (10%)
MAX_TRANSFER_FEE_BPS: Final[int] = 1_000


# =============================================================================
# ADDRESSES
# =============================================================================
ZERO_ADDRESS: Final[str] = "0x" + "0" * 40

_ADDRESS_RE: Final[re.Pattern[str]] = re.compile(r"^0x[0-9a-fA-F]{40}$")


def normalize_address(address: str) -> str:
    """
    Приведение адреса к каноническому виду (lowercase hex).

    Args:
        address: Адрес вида 0x + 40 hex символов

    Returns:
        Адрес в нижнем регистре

    Raises:
        InvalidAddressError: Если адрес не соответствует формату
    """
    if not isinstance(address, str) or not _ADDRESS_RE.match(address):
        raise InvalidAddressError(ErrorReason.INVALID_ADDRESS_FORMAT, detail=repr(address))
    return address.lower()


def is_zero_address(address: str) -> bool:
    """True если адрес — нулевой."""
    return normalize_address(address) == ZERO_ADDRESS


# =============================================================================
# FEE MATH
# =============================================================================


def validate_amount(amount: int) -> None:
    """
    Проверка, что amount — неотрицательное целое.

    Raises:
        InvalidAmountError: Если amount отрицательный или не int
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(ErrorReason.AMOUNT_NOT_INTEGER, detail=repr(amount))
    if amount < 0:
        raise InvalidAmountError(ErrorReason.NEGATIVE_AMOUNT, detail=str(amount))


def compute_fee(amount: int, total_rate_bps: int) -> int:
    """
    Комиссия в единицах токена.

    fee = floor(amount * total_rate_bps / FEE_DENOMINATOR)

    Args:
        amount: Сумма перевода (>= 0)
        total_rate_bps: Суммарная ставка liquidity + marketing (bps)

    Returns:
        Комиссия (округление вниз, в пользу получателя)
    """
    validate_amount(amount)
    if total_rate_bps < 0 or total_rate_bps > FEE_DENOMINATOR:
        raise ValueError(f"Fee rate out of range: {total_rate_bps} bps")
    return amount * total_rate_bps // FEE_DENOMINATOR


def split_fee(amount: int, liquidity_rate_bps: int, marketing_rate_bps: int) -> tuple[int, int, int]:
    """
    Разбиение перевода на (liquidity_share, marketing_share, net_amount).

    Общая комиссия считается одним floor по суммарной ставке. Liquidity-доля
    считается отдельным floor, marketing-доля — остаток комиссии, поэтому
    liquidity_share + marketing_share == fee и fee + net_amount == amount.

    Args:
        amount: Сумма перевода
        liquidity_rate_bps: Ставка liquidity (bps)
        marketing_rate_bps: Ставка marketing (bps)

    Returns:
        (liquidity_share, marketing_share, net_amount)
    """
    fee = compute_fee(amount, liquidity_rate_bps + marketing_rate_bps)
    liquidity_share = amount * liquidity_rate_bps // FEE_DENOMINATOR
    marketing_share = fee - liquidity_share
    return liquidity_share, marketing_share, amount - fee


def pro_rata(total: int, weight: int, total_weight: int) -> int:
    """
    Доля total пропорционально weight / total_weight (floor).

    При total_weight == 0 возвращает 0.
    """
    if total_weight <= 0:
        return 0
    return total * weight // total_weight
