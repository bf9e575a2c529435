"""
TaxToken — fungible-актив с направленной комиссией и авто-конверсией

Путь каждого перевода (одна атомарная операция):
1. Ledger.check_transfer — проверки базового ledger до любых side effects
2. FeeClassifier — направление и комиссия
3. fee → treasury (баланс self_address), running totals += доли
4. net_amount → получатель
5. Для charged-перевода (direction != NO_FEE) — AutoConversionTrigger.evaluate()

Любое исключение на шагах 1-4 откатывает всю операцию (Ledger.atomic).
Сбой площадки на шаге 5 локализован внутри триггера.
"""

import logging
from typing import Optional

from taxledger.conversion import AutoConversionTrigger, ConversionResult, ConversionVenue
from taxledger.core.config import TokenConfig
from taxledger.core.domain.events import EventLog, EventName
from taxledger.core.domain.fee_schedule import FeeRates, TradeDirection
from taxledger.core.domain.swap_config import ConversionState, SwapConfig
from taxledger.core.domain.token_state import PendingFeeShares, TokenState
from taxledger.core.domain.units import ZERO_ADDRESS, normalize_address
from taxledger.gatekeeper import FeeClassification, FeeClassifier, GovernanceGate
from taxledger.ledger import ForeignAsset, Ledger

logger = logging.getLogger(__name__)


class TaxToken:
    """Движок: базовый ledger + fee-путь + governance + авто-конверсия."""

    def __init__(self, config: TokenConfig, venue: Optional[ConversionVenue] = None):
        """
        Args:
            config: конфигурация развёртывания
            venue: порт площадки конверсии (None — авто-конверсия только копит treasury)
        """
        self.config = config
        self.address = config.self_address

        self.events = EventLog()
        self.ledger = Ledger(self.events)
        self.ledger.register_contract(self.address)
        if venue is not None:
            self.ledger.register_contract(venue.address)

        self.state = TokenState(
            self_address=self.address,
            fee_schedule=config.fee_schedule,
            swap_config=SwapConfig(threshold_amount=config.swap_threshold, enabled=config.swap.enabled),
            marketing_wallet=config.marketing_wallet,
            authority=config.authority,
        )

        # Исключения по умолчанию: сам движок, authority, marketing wallet
        defaults = [self.address, config.authority, config.marketing_wallet, *config.excluded_accounts]
        for account in dict.fromkeys(defaults):
            self.state.exclusions.set_excluded(account, True)

        for seed in dict.fromkeys(config.venues):
            self.state.venues.register(seed.address, seed.tier, True)

        self.classifier = FeeClassifier()
        self.governance = GovernanceGate(self.state, self.events, is_contract=self.ledger.is_contract)
        self.trigger = AutoConversionTrigger(self.state, self.ledger, self.events, venue=venue)

        self.events.emit(EventName.OWNERSHIP_TRANSFERRED, ZERO_ADDRESS, config.authority)
        self.ledger.mint(config.authority, config.total_supply)

        logger.info(
            "%s (%s) initialized at %s: supply=%d, threshold=%d",
            config.name, config.symbol, self.address, config.total_supply, config.swap_threshold,
        )

    # =========================================================================
    # TOKEN METADATA / BASE LEDGER QUERIES
    # =========================================================================

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def symbol(self) -> str:
        return self.config.symbol

    @property
    def decimals(self) -> int:
        return self.config.decimals

    @property
    def total_supply(self) -> int:
        return self.ledger.total_supply

    def balance_of(self, address: str) -> int:
        return self.ledger.balance_of(address)

    def allowance(self, owner: str, spender: str) -> int:
        return self.ledger.allowance(owner, spender)

    # =========================================================================
    # TRANSFERS
    # =========================================================================

    def transfer(self, caller: str, recipient: str, amount: int) -> bool:
        """Перевод от caller к recipient через fee-путь."""
        with self.ledger.atomic(self.state):
            self._transfer(caller, recipient, amount)
        return True

    def transfer_from(self, caller: str, sender: str, recipient: str, amount: int) -> bool:
        """Перевод от sender к recipient по allowance, выданному caller."""
        with self.ledger.atomic(self.state):
            self.ledger.spend_allowance(sender, caller, amount)
            self._transfer(sender, recipient, amount)
        return True

    def approve(self, caller: str, spender: str, amount: int) -> bool:
        self.ledger.approve(caller, spender, amount)
        return True

    def preview_transfer(self, sender: str, recipient: str, amount: int) -> FeeClassification:
        """Классификация перевода без исполнения."""
        return self.classifier.classify(self.state, sender, recipient, amount)

    def _transfer(self, sender: str, recipient: str, amount: int) -> FeeClassification:
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        self.ledger.check_transfer(sender, recipient, amount)

        classification = self.classifier.classify(self.state, sender, recipient, amount)

        if classification.fee > 0:
            self.ledger.move(sender, self.address, classification.fee)
            self.state.accrue(classification.liquidity_share, classification.marketing_share)

        self.ledger.move(sender, recipient, classification.net_amount)

        if classification.fee_applies:
            self.trigger.evaluate()

        return classification

    # =========================================================================
    # GOVERNANCE
    # =========================================================================

    def update_buy_fees(self, caller: str, liquidity: int, marketing: int) -> None:
        with self.ledger.atomic(self.state):
            self.governance.update_buy_fees(caller, liquidity, marketing)

    def update_sell_fees(self, caller: str, liquidity: int, marketing: int) -> None:
        with self.ledger.atomic(self.state):
            self.governance.update_sell_fees(caller, liquidity, marketing)

    def update_transfer_fees(self, caller: str, liquidity: int, marketing: int) -> None:
        with self.ledger.atomic(self.state):
            self.governance.update_transfer_fees(caller, liquidity, marketing)

    def set_marketing_wallet(self, caller: str, wallet: str) -> None:
        with self.ledger.atomic(self.state):
            self.governance.set_marketing_wallet(caller, wallet)

    def set_swap_threshold(self, caller: str, amount: int) -> None:
        with self.ledger.atomic(self.state):
            self.governance.set_swap_threshold(caller, amount)

    def toggle_auto_conversion(self, caller: str, enabled: bool) -> None:
        with self.ledger.atomic(self.state):
            self.governance.toggle_auto_conversion(caller, enabled)

    def set_exclusion(self, caller: str, address: str, excluded: bool) -> None:
        with self.ledger.atomic(self.state):
            self.governance.set_exclusion(caller, address, excluded)

    def set_venue(self, caller: str, address: str, tier: int, present: bool) -> None:
        with self.ledger.atomic(self.state):
            self.governance.set_venue(caller, address, tier, present)

    def transfer_authority(self, caller: str, new_authority: str) -> None:
        with self.ledger.atomic(self.state):
            self.governance.transfer_authority(caller, new_authority)

    def renounce_authority(self, caller: str) -> None:
        with self.ledger.atomic(self.state):
            self.governance.renounce_authority(caller)

    def claim_stuck_tokens(self, caller: str, asset: ForeignAsset) -> int:
        """Вывод чужого актива с адреса движка на authority."""
        with self.ledger.atomic(self.state):
            return self.governance.claim_stuck_tokens(caller, asset)

    def manual_trigger(self, caller: str) -> ConversionResult:
        """Принудительный цикл конверсии (authority only)."""
        with self.ledger.atomic(self.state):
            return self.trigger.manual_trigger(caller)

    # =========================================================================
    # READ-ONLY QUERIES
    # =========================================================================

    def fee_schedule(self, direction: TradeDirection) -> FeeRates:
        return self.state.fee_schedule.rates_for(direction)

    def is_excluded(self, address: str) -> bool:
        return self.state.exclusions.is_excluded(address)

    def is_venue(self, address: str, tier: int) -> bool:
        return self.state.venues.is_member(address, tier)

    def is_any_venue(self, address: str) -> bool:
        return self.state.venues.is_any_member(address)

    def treasury_balance(self) -> int:
        return self.ledger.balance_of(self.address)

    def swap_config(self) -> SwapConfig:
        return self.state.swap_config

    @property
    def marketing_wallet(self) -> str:
        return self.state.marketing_wallet

    @property
    def authority(self) -> Optional[str]:
        return self.state.authority

    @property
    def conversion_state(self) -> ConversionState:
        return self.state.conversion_state

    def pending_fee_shares(self) -> PendingFeeShares:
        return self.state.pending_shares
