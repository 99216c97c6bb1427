"""Slot session models: symbols, outcomes, stats and autoplay state."""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Symbol(str, Enum):
    """Reel alphabet, in display order."""
    CHERRY = "🍒"
    BELL = "🔔"
    DIAMOND = "💎"
    SEVEN = "7️⃣"
    LEMON = "🍋"
    STAR = "⭐"
    CLOVER = "🍀"
    GRAPE = "🍇"


class WinTier(str, Enum):
    """Spin classification, ordered by payout."""
    LOSS = "loss"
    SINGLE = "single"
    DOUBLE = "double"
    JACKPOT = "jackpot"


class SpinSource(str, Enum):
    """What triggered a spin request."""
    MANUAL = "manual"
    AUTOPLAY = "autoplay"


# Fixed payout per tier, in credits
PAYOUTS: dict[WinTier, int] = {
    WinTier.LOSS: 0,
    WinTier.SINGLE: 4,
    WinTier.DOUBLE: 12,
    WinTier.JACKPOT: 48,
}

TIER_LABELS: dict[WinTier, str] = {
    WinTier.LOSS: "Loss",
    WinTier.SINGLE: "Lucky Seven",
    WinTier.DOUBLE: "Lucky Streak",
    WinTier.JACKPOT: "Jackpot",
}


class Classification(BaseModel):
    """Win tier and payout for one reel set."""
    model_config = ConfigDict(frozen=True)

    win_tier: WinTier
    payout: int = Field(ge=0)


class SpinOutcome(BaseModel):
    """Settled result of one spin. Never mutated after creation."""
    model_config = ConfigDict(frozen=True)

    symbols: tuple[Symbol, ...]
    win_tier: WinTier
    payout: int = Field(ge=0)
    timestamp: int  # epoch milliseconds, strictly increasing per session

    @property
    def is_win(self) -> bool:
        return self.win_tier != WinTier.LOSS

    @property
    def label(self) -> str:
        return TIER_LABELS[self.win_tier]


class SessionStats(BaseModel):
    """
    Bankroll and counters for one session.

    Replaced wholesale on every update so readers never observe a
    half-applied spin. profit == balance - initial stake at all times.
    """
    model_config = ConfigDict(frozen=True)

    spins_count: int = 0
    wins_count: int = 0
    jackpots_count: int = 0
    balance: int = 0
    profit: int = 0

    @property
    def win_rate(self) -> int:
        """Whole-number win percentage, halves rounded up."""
        if not self.spins_count:
            return 0
        return (self.wins_count * 200 + self.spins_count) // (self.spins_count * 2)


class AutoplayState(BaseModel):
    """Autoplay toggle and inter-spin delay."""

    enabled: bool = False
    delay_ms: int = 750


class MachineSnapshot(BaseModel):
    """Read-only view of a session for presentation."""
    model_config = ConfigDict(frozen=True)

    reels: tuple[Symbol, ...]
    is_spinning: bool
    stats: SessionStats
    history: tuple[SpinOutcome, ...]
    autoplay: AutoplayState
    spin_cost: int
