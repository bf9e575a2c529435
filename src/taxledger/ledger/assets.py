"""ForeignAsset — порт чужого fungible-актива, застрявшего на адресе движка."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ForeignAsset(Protocol):
    """Минимальная ERC-20 поверхность чужого актива.

    TaxToken сам удовлетворяет этому порту, поэтому застрявшие токены
    другого развёртывания выводятся тем же вызовом.
    """

    @property
    def address(self) -> str: ...

    def balance_of(self, address: str) -> int: ...

    def transfer(self, caller: str, recipient: str, amount: int) -> bool: ...
