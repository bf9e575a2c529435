"""
TokenState — явный контекст конфигурации fee-движка

Вся изменяемая конфигурация (ставки, реестры, swap config, marketing wallet,
authority) и состояние авто-конверсии (running totals, ExecutionGuard)
собраны в одну структуру. FeeClassifier, AutoConversionTrigger и
GovernanceGate получают её по ссылке — ambient state отсутствует, граница
атомарной операции видна явно.
"""

from dataclasses import dataclass, field
from typing import Optional

from taxledger.registry import ExclusionRegistry, VenueRegistry

from .fee_schedule import FeeSchedule
from .swap_config import ConversionState, SwapConfig


@dataclass(frozen=True)
class PendingFeeShares:
    """Накопленные с последнего слива доли комиссии (в единицах токена)."""

    liquidity: int = 0
    marketing: int = 0

    @property
    def total(self) -> int:
        return self.liquidity + self.marketing


@dataclass
class TokenState:
    """Мутабельный контекст движка."""

    self_address: str
    fee_schedule: FeeSchedule
    swap_config: SwapConfig
    marketing_wallet: str
    authority: Optional[str]

    venues: VenueRegistry = field(default_factory=VenueRegistry)
    exclusions: ExclusionRegistry = field(default_factory=ExclusionRegistry)

    pending_shares: PendingFeeShares = field(default_factory=PendingFeeShares)
    conversion_state: ConversionState = ConversionState.IDLE

    @property
    def execution_guard(self) -> bool:
        """ExecutionGuard: поднят на время цикла конверсии."""
        return self.conversion_state == ConversionState.CONVERTING

    def accrue(self, liquidity_share: int, marketing_share: int) -> None:
        """Добавить доли комиссии к running totals."""
        self.pending_shares = PendingFeeShares(
            liquidity=self.pending_shares.liquidity + liquidity_share,
            marketing=self.pending_shares.marketing + marketing_share,
        )

    def release(self, drained: PendingFeeShares) -> None:
        """Списать доли, ушедшие в цикл конверсии.

        Доли, накопленные вложенными переводами во время цикла, остаются.
        """
        self.pending_shares = PendingFeeShares(
            liquidity=self.pending_shares.liquidity - drained.liquidity,
            marketing=self.pending_shares.marketing - drained.marketing,
        )

    # Checkpointable: конфигурация, реестры и running totals откатываются вместе с ledger
    def snapshot(self) -> tuple:
        return (
            self.fee_schedule,
            self.swap_config,
            self.marketing_wallet,
            self.authority,
            self.pending_shares,
            self.venues.snapshot(),
            self.exclusions.snapshot(),
        )

    def restore(self, snapshot: tuple) -> None:
        (
            self.fee_schedule,
            self.swap_config,
            self.marketing_wallet,
            self.authority,
            self.pending_shares,
            venues,
            exclusions,
        ) = snapshot
        self.venues.restore(venues)
        self.exclusions.restore(exclusions)
