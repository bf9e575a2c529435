"""ExclusionRegistry — адреса, освобождённые от комиссии."""

from taxledger.core.domain.units import normalize_address
from taxledger.core.errors import DuplicateStateError, ErrorReason


class ExclusionRegistry:
    """Множество fee-exempt адресов с idempotency-guard на setter-е."""

    def __init__(self) -> None:
        self._excluded: set[str] = set()

    def set_excluded(self, address: str, excluded: bool) -> None:
        """
        Raises:
            DuplicateStateError: флаг уже равен excluded
        """
        address = normalize_address(address)
        if (address in self._excluded) == excluded:
            raise DuplicateStateError(
                ErrorReason.EXCLUSION_UNCHANGED, detail=f"address={address}, excluded={excluded}"
            )
        if excluded:
            self._excluded.add(address)
        else:
            self._excluded.discard(address)

    def is_excluded(self, address: str) -> bool:
        return normalize_address(address) in self._excluded

    def __len__(self) -> int:
        return len(self._excluded)

    def snapshot(self) -> frozenset[str]:
        return frozenset(self._excluded)

    def restore(self, snapshot: frozenset[str]) -> None:
        self._excluded = set(snapshot)
