"""
Ledger — базовый учёт fungible-актива (балансы, allowance, supply)

Внешний коллаборатор fee-движка: ничего не знает о комиссиях, только
двигает единицы между адресами с проверками ERC-20 уровня.

Атомарность:
- Ledger.atomic(*participants) — контекст с undo-журналом. Каждая запись в
  балансы и allowance внутри блока сохраняет прежнее значение ключа; при
  исключении журнал проигрывается в обратном порядке, supply, журнал событий
  и participants (объекты с snapshot()/restore()) возвращаются к входу.
- Стоимость блока пропорциональна числу изменённых ключей, а не числу счетов.
- Вложенные atomic() допустимы: успешный внутренний блок передаёт свои
  записи внешнему, чтобы откат внешнего блока отменил и их.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Protocol

from taxledger.core.domain.events import EventLog, EventName
from taxledger.core.domain.units import ZERO_ADDRESS, normalize_address, validate_amount
from taxledger.core.errors import (
    ErrorReason,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    InvalidDestinationError,
)


# uint256 max: "бесконечный" allowance
UNLIMITED_ALLOWANCE = 2**256 - 1

# Ключа не было до записи
_MISSING = object()


class Checkpointable(Protocol):
    """Участник атомарного блока."""

    def snapshot(self) -> Any: ...

    def restore(self, snapshot: Any) -> None: ...


class Ledger:
    """In-memory ledger с балансами и allowance."""

    def __init__(self, events: EventLog | None = None):
        self.events = events if events is not None else EventLog()
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self._total_supply: int = 0
        self._contracts: set[str] = set()
        # Стек undo-журналов открытых atomic-блоков
        self._journals: list[list[tuple[dict, Any, Any]]] = []

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, address: str) -> int:
        return self._balances.get(normalize_address(address), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def is_contract(self, address: str) -> bool:
        return normalize_address(address) in self._contracts

    def register_contract(self, address: str) -> None:
        """Пометить адрес как контракт (адрес с кодом)."""
        self._contracts.add(normalize_address(address))

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def mint(self, account: str, amount: int) -> None:
        """Эмиссия (только при инициализации)."""
        account = normalize_address(account)
        validate_amount(amount)
        if account == ZERO_ADDRESS:
            raise InvalidDestinationError(ErrorReason.TRANSFER_TO_ZERO)
        self._total_supply += amount
        self._write(self._balances, account, self._balances.get(account, 0) + amount)
        self.events.emit(EventName.TRANSFER, ZERO_ADDRESS, account, amount)

    def check_transfer(self, sender: str, recipient: str, amount: int) -> None:
        """
        Предварительная проверка перевода без мутаций.

        Raises:
            InvalidDestinationError: sender или recipient — нулевой адрес
            InsufficientBalanceError: баланса sender не хватает
        """
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        validate_amount(amount)
        if sender == ZERO_ADDRESS:
            raise InvalidDestinationError(ErrorReason.TRANSFER_FROM_ZERO)
        if recipient == ZERO_ADDRESS:
            raise InvalidDestinationError(ErrorReason.TRANSFER_TO_ZERO)
        if self._balances.get(sender, 0) < amount:
            raise InsufficientBalanceError(
                ErrorReason.INSUFFICIENT_BALANCE,
                detail=f"balance={self._balances.get(sender, 0)}, amount={amount}",
            )

    def move(self, sender: str, recipient: str, amount: int) -> None:
        """Сырой перевод без комиссий, с событием Transfer."""
        self.check_transfer(sender, recipient, amount)
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        self._write(self._balances, sender, self._balances[sender] - amount)
        self._write(self._balances, recipient, self._balances.get(recipient, 0) + amount)
        self.events.emit(EventName.TRANSFER, sender, recipient, amount)

    def approve(self, owner: str, spender: str, amount: int) -> None:
        owner = normalize_address(owner)
        spender = normalize_address(spender)
        validate_amount(amount)
        if owner == ZERO_ADDRESS:
            raise InvalidDestinationError(ErrorReason.APPROVE_FROM_ZERO)
        if spender == ZERO_ADDRESS:
            raise InvalidDestinationError(ErrorReason.APPROVE_TO_ZERO)
        self._write(self._allowances, (owner, spender), amount)
        self.events.emit(EventName.APPROVAL, owner, spender, amount)

    def spend_allowance(self, owner: str, spender: str, amount: int) -> None:
        """Списание allowance (бесконечный allowance не уменьшается)."""
        current = self.allowance(owner, spender)
        if current == UNLIMITED_ALLOWANCE:
            return
        if current < amount:
            raise InsufficientAllowanceError(
                ErrorReason.INSUFFICIENT_ALLOWANCE,
                detail=f"allowance={current}, amount={amount}",
            )
        self._write(self._allowances, (normalize_address(owner), normalize_address(spender)), current - amount)

    # =========================================================================
    # ATOMICITY
    # =========================================================================

    def _write(self, table: dict, key: Any, value: int) -> None:
        """Запись в таблицу с сохранением прежнего значения в открытый журнал."""
        if self._journals:
            self._journals[-1].append((table, key, table.get(key, _MISSING)))
        table[key] = value

    @contextmanager
    def atomic(self, *participants: Checkpointable) -> Iterator[None]:
        """
        Атомарный блок: при исключении состояние возвращается к входу.

        Исключение пробрасывается дальше без изменений.
        """
        journal: list[tuple[dict, Any, Any]] = []
        total_supply = self._total_supply
        events_mark = self.events.mark()
        snapshots = [p.snapshot() for p in participants]
        self._journals.append(journal)
        try:
            yield
        except BaseException:
            self._journals.pop()
            for table, key, previous in reversed(journal):
                if previous is _MISSING:
                    table.pop(key, None)
                else:
                    table[key] = previous
            self._total_supply = total_supply
            self.events.truncate(events_mark)
            for participant, snap in zip(participants, snapshots):
                participant.restore(snap)
            raise
        else:
            self._journals.pop()
            if self._journals:
                self._journals[-1].extend(journal)
