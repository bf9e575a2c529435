"""
VenueRegistry — реестр торговых площадок (пулов)

Ключ — (address, fee_tier), значение — флаг членства. Один адрес может
одновременно иметь несколько независимых регистраций на разных tier-ах.

is_any_member(address) истинно тогда и только тогда, когда хотя бы одна
регистрация адреса сейчас True. Снятые (False) регистрации не считаются.
"""

import logging

from taxledger.core.domain.units import normalize_address
from taxledger.core.errors import DuplicateStateError, ErrorReason, InvalidAmountError

logger = logging.getLogger(__name__)


class VenueRegistry:
    """Multi-key реестр (address, tier) → bool."""

    def __init__(self) -> None:
        self._entries: dict[tuple[str, int], bool] = {}
        # Счётчик активных tier-ов на адрес, чтобы is_any_member был O(1)
        self._active_tiers: dict[str, int] = {}

    def register(self, address: str, tier: int, present: bool) -> None:
        """
        Установка флага членства для (address, tier).

        Args:
            address: адрес площадки
            tier: fee tier (>= 0)
            present: True — зарегистрировать, False — снять

        Raises:
            DuplicateStateError: present совпадает с текущим значением
            InvalidAmountError: tier отрицательный
        """
        key = self._key(address, tier)
        current = self._entries.get(key, False)
        if current == present:
            raise DuplicateStateError(
                ErrorReason.VENUE_STATUS_UNCHANGED,
                detail=f"address={key[0]}, tier={tier}, present={present}",
            )

        self._entries[key] = present
        delta = 1 if present else -1
        self._active_tiers[key[0]] = self._active_tiers.get(key[0], 0) + delta
        logger.debug("Venue %s tier=%d -> %s", key[0], tier, present)

    def is_member(self, address: str, tier: int) -> bool:
        return self._entries.get(self._key(address, tier), False)

    def is_any_member(self, address: str) -> bool:
        return self._active_tiers.get(normalize_address(address), 0) > 0

    def tiers_of(self, address: str) -> list[int]:
        """Активные tier-ы адреса (по возрастанию)."""
        address = normalize_address(address)
        return sorted(t for (a, t), present in self._entries.items() if a == address and present)

    def snapshot(self) -> tuple[dict, dict]:
        return dict(self._entries), dict(self._active_tiers)

    def restore(self, snapshot: tuple[dict, dict]) -> None:
        entries, active_tiers = snapshot
        self._entries = dict(entries)
        self._active_tiers = dict(active_tiers)

    @staticmethod
    def _key(address: str, tier: int) -> tuple[str, int]:
        if isinstance(tier, bool) or not isinstance(tier, int):
            raise InvalidAmountError(ErrorReason.AMOUNT_NOT_INTEGER, detail=f"tier={tier!r}")
        if tier < 0:
            raise InvalidAmountError(ErrorReason.NEGATIVE_FEE_TIER, detail=f"tier={tier}")
        return normalize_address(address), tier
