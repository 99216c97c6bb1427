"""Protocol models for the slot machine HTTP API."""
from pydantic import BaseModel, Field

from app.config import settings
from app.logic.models import MachineSnapshot, SpinOutcome


# === Request Models ===


class AutoplayRequest(BaseModel):
    """POST /autoplay request body."""

    enabled: bool = Field(..., description="Turn autoplay on or off")


class AutoplayDelayRequest(BaseModel):
    """POST /autoplay/delay request body."""

    delayMs: int = Field(..., description="Clamped to the allowed range, never rejected")


# === Response Models ===


class Stats(BaseModel):
    """Session stats block."""

    spins: int
    wins: int
    jackpots: int
    balance: int
    profit: int
    winRate: int


class HistoryEntry(BaseModel):
    """One settled spin in the history list."""

    symbols: list[str]
    winType: str
    label: str
    payout: int
    timestamp: int

    @classmethod
    def from_outcome(cls, outcome: SpinOutcome) -> "HistoryEntry":
        return cls(
            symbols=[s.value for s in outcome.symbols],
            winType=outcome.win_tier.value,
            label=outcome.label,
            payout=outcome.payout,
            timestamp=outcome.timestamp,
        )


class Autoplay(BaseModel):
    """Autoplay block."""

    enabled: bool
    delayMs: int


class StateResponse(BaseModel):
    """Observable machine state."""

    protocolVersion: str = settings.protocol_version
    reels: list[str]
    isSpinning: bool
    spinCost: int
    stats: Stats
    history: list[HistoryEntry] = Field(default_factory=list)
    autoplay: Autoplay

    @classmethod
    def from_snapshot(cls, snapshot: MachineSnapshot) -> "StateResponse":
        stats = snapshot.stats
        return cls(
            reels=[s.value for s in snapshot.reels],
            isSpinning=snapshot.is_spinning,
            spinCost=snapshot.spin_cost,
            stats=Stats(
                spins=stats.spins_count,
                wins=stats.wins_count,
                jackpots=stats.jackpots_count,
                balance=stats.balance,
                profit=stats.profit,
                winRate=stats.win_rate,
            ),
            history=[HistoryEntry.from_outcome(o) for o in snapshot.history],
            autoplay=Autoplay(
                enabled=snapshot.autoplay.enabled,
                delayMs=snapshot.autoplay.delay_ms,
            ),
        )


class SpinResponse(BaseModel):
    """POST /spin response."""

    protocolVersion: str = settings.protocol_version
    accepted: bool
    reason: str | None = None  # "SPIN_IN_PROGRESS" | "INSUFFICIENT_FUNDS" | "SESSION_RESET"
    outcome: HistoryEntry | None = None
    state: StateResponse
