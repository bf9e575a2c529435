"""
ConversionVenue — узкий порт внешней площадки конверсии

Движок не знает, как площадка меняет токены на reference currency и как
добавляет ликвидность. Ему нужны две операции:

- convert(amount_in) → выручка в reference currency за amount_in токенов,
  уже переведённых на venue.address;
- settle(proceeds, marketing_wallet) → доставка marketing-доли на кошелёк
  и liquidity-доли в пул.

Любое исключение из порта считается сбоем площадки. Тестовый набор
подставляет детерминированную fake-реализацию.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ConversionProceeds:
    """Разбиение выручки цикла конверсии (reference currency)."""

    liquidity_proceeds: int
    marketing_proceeds: int

    @property
    def total(self) -> int:
        return self.liquidity_proceeds + self.marketing_proceeds


@runtime_checkable
class ConversionVenue(Protocol):
    """Порт площадки конверсии."""

    @property
    def address(self) -> str:
        """Адрес площадки в ledger (получатель токенов treasury)."""
        ...

    def convert(self, amount_in: int) -> int:
        """Обмен amount_in токенов на reference currency, возвращает выручку."""
        ...

    def settle(self, proceeds: ConversionProceeds, marketing_wallet: str) -> None:
        """Распределение выручки между marketing wallet и пулом ликвидности."""
        ...
