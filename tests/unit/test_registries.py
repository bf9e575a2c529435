"""
Тесты VenueRegistry и ExclusionRegistry

Coverage:
- Multi-tier регистрация одного адреса
- is_any_member: только активные регистрации
- Идемпотентность setter-ов (DuplicateStateError)
- Нормализация адресов
"""

import pytest

from taxledger.core.errors import DuplicateStateError, ErrorReason, InvalidAmountError
from taxledger.registry import ExclusionRegistry, VenueRegistry

from tests.factories import ALICE, POOL


class TestVenueRegistry:

    def test_register_and_query(self) -> None:
        registry = VenueRegistry()
        registry.register(POOL, 3000, True)
        assert registry.is_member(POOL, 3000)
        assert not registry.is_member(POOL, 500)
        assert registry.is_any_member(POOL)

    def test_multiple_tiers_independent(self) -> None:
        registry = VenueRegistry()
        registry.register(POOL, 500, True)
        registry.register(POOL, 3000, True)
        assert registry.tiers_of(POOL) == [500, 3000]

        registry.register(POOL, 500, False)
        assert registry.is_any_member(POOL)
        assert registry.tiers_of(POOL) == [3000]

        registry.register(POOL, 3000, False)
        assert not registry.is_any_member(POOL)
        assert registry.tiers_of(POOL) == []

    def test_duplicate_registration(self) -> None:
        registry = VenueRegistry()
        registry.register(POOL, 3000, True)
        with pytest.raises(DuplicateStateError) as exc_info:
            registry.register(POOL, 3000, True)
        assert str(exc_info.value) == "Pool already in this status"

    def test_removing_unknown_is_duplicate(self) -> None:
        """Незарегистрированный ключ уже имеет статус False."""
        registry = VenueRegistry()
        with pytest.raises(DuplicateStateError):
            registry.register(POOL, 3000, False)
        assert not registry.is_any_member(POOL)

    def test_case_insensitive(self) -> None:
        registry = VenueRegistry()
        registry.register(POOL.upper().replace("0X", "0x"), 100, True)
        assert registry.is_member(POOL, 100)

    def test_negative_tier(self) -> None:
        with pytest.raises(InvalidAmountError) as exc_info:
            VenueRegistry().register(POOL, -1, True)
        assert exc_info.value.reason == ErrorReason.NEGATIVE_FEE_TIER

    def test_tier_zero_allowed(self) -> None:
        registry = VenueRegistry()
        registry.register(POOL, 0, True)
        assert registry.is_member(POOL, 0)


class TestExclusionRegistry:

    def test_toggle(self) -> None:
        registry = ExclusionRegistry()
        registry.set_excluded(ALICE, True)
        assert registry.is_excluded(ALICE)
        assert len(registry) == 1
        registry.set_excluded(ALICE, False)
        assert not registry.is_excluded(ALICE)
        assert len(registry) == 0

    @pytest.mark.parametrize("flag", [True, False])
    def test_duplicate(self, flag: bool) -> None:
        registry = ExclusionRegistry()
        if flag:
            registry.set_excluded(ALICE, True)
        with pytest.raises(DuplicateStateError) as exc_info:
            registry.set_excluded(ALICE, flag)
        assert str(exc_info.value) == "Account is already the value of 'excluded'"
