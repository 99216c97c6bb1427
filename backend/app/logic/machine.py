"""Slot machine session: the command and snapshot boundary for presentation."""
import logging

from app.config import Settings
from app.logic.autoplay import MAX_DELAY_MS, MIN_DELAY_MS, AutoplayScheduler
from app.logic.bankroll import BankrollTracker
from app.logic.engine import (
    FRAME_COUNT,
    FRAME_DELAY_MS,
    REJECT_INSUFFICIENT_FUNDS,
    REJECT_SPIN_IN_PROGRESS,
    SPIN_COST,
    SessionState,
    SpinOrchestrator,
)
from app.logic.history import HISTORY_LIMIT, HistoryLog
from app.logic.models import (
    AutoplayState,
    MachineSnapshot,
    SpinOutcome,
    SpinSource,
    Symbol,
)
from app.logic.rng import RNGBase
from app.logic.symbols import SymbolGenerator
from app.telemetry import SessionResetEvent, TelemetryService, telemetry_service


logger = logging.getLogger(__name__)

INITIAL_STAKE = 200
DEFAULT_AUTOPLAY_DELAY_MS = 750


class SlotMachine:
    """
    One in-process slot session.

    Commands: request_spin, set_autoplay, set_autoplay_delay, reset_session.
    Everything else reads snapshot().
    """

    def __init__(
        self,
        generator: SymbolGenerator | None = None,
        initial_stake: int = INITIAL_STAKE,
        spin_cost: int = SPIN_COST,
        frame_count: int = FRAME_COUNT,
        frame_delay_ms: int = FRAME_DELAY_MS,
        lucky_symbol: Symbol = Symbol.SEVEN,
        history_limit: int = HISTORY_LIMIT,
        autoplay_delay_ms: int = DEFAULT_AUTOPLAY_DELAY_MS,
        min_delay_ms: int = MIN_DELAY_MS,
        max_delay_ms: int = MAX_DELAY_MS,
        telemetry: TelemetryService | None = None,
    ):
        self.generator = generator or SymbolGenerator()
        self.telemetry = telemetry or telemetry_service
        self.state = SessionState(
            reels=self.generator.draw_reels(),
            bankroll=BankrollTracker(initial_stake),
            history=HistoryLog(history_limit),
            autoplay=AutoplayState(delay_ms=autoplay_delay_ms),
        )
        self.orchestrator = SpinOrchestrator(
            self.state,
            self.generator,
            spin_cost=spin_cost,
            frame_count=frame_count,
            frame_delay_ms=frame_delay_ms,
            lucky_symbol=lucky_symbol,
            telemetry=self.telemetry,
        )
        self.autoplay = AutoplayScheduler(
            self.state,
            self.orchestrator,
            min_delay_ms=min_delay_ms,
            max_delay_ms=max_delay_ms,
        )
        # Out-of-range defaults are clamped like any other delay
        self.autoplay.set_delay(autoplay_delay_ms)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        rng: RNGBase | None = None,
        telemetry: TelemetryService | None = None,
    ) -> "SlotMachine":
        """Build a machine from application settings."""
        return cls(
            generator=SymbolGenerator(rng, reel_count=settings.reel_count),
            initial_stake=settings.initial_stake,
            spin_cost=settings.spin_cost,
            frame_count=settings.frame_count,
            frame_delay_ms=settings.frame_delay_ms,
            lucky_symbol=Symbol(settings.lucky_symbol),
            history_limit=settings.history_limit,
            autoplay_delay_ms=settings.autoplay_default_delay_ms,
            min_delay_ms=settings.autoplay_min_delay_ms,
            max_delay_ms=settings.autoplay_max_delay_ms,
            telemetry=telemetry,
        )

    @property
    def spin_cost(self) -> int:
        return self.orchestrator.spin_cost

    def spin_blocker(self) -> str | None:
        """Reason a spin requested now would be rejected, or None."""
        if self.state.is_spinning:
            return REJECT_SPIN_IN_PROGRESS
        if not self.orchestrator.can_afford():
            return REJECT_INSUFFICIENT_FUNDS
        return None

    async def request_spin(self) -> SpinOutcome | None:
        """Manual spin. None if rejected or discarded by a reset."""
        return await self.orchestrator.request_spin(SpinSource.MANUAL)

    def set_autoplay(self, enabled: bool) -> bool:
        """Toggle autoplay. Returns whether autoplay is now enabled."""
        if enabled:
            return self.autoplay.enable()
        self.autoplay.disable()
        return False

    def set_autoplay_delay(self, delay_ms: int) -> int:
        """Store a clamped delay and return it."""
        return self.autoplay.set_delay(delay_ms)

    def reset_session(self) -> None:
        """
        Restore a fresh session.

        Cancels pending autoplay, zeroes stats and history, and orphans any
        spin in flight so it cannot settle into the new session. The machine
        is idle right away; the orphaned spin exits at its next frame without
        touching state.
        """
        before = self.state.bankroll.stats
        self.autoplay.disable("session_reset")
        self.state.epoch += 1
        self.state.is_spinning = False
        self.state.bankroll.reset()
        self.state.history.clear()
        logger.info(
            "Session reset (spins_before=%d, balance_before=%d)",
            before.spins_count,
            before.balance,
        )
        self.telemetry.emit_session_reset(
            SessionResetEvent(
                spins_before=before.spins_count,
                balance_before=before.balance,
            )
        )

    def snapshot(self) -> MachineSnapshot:
        state = self.state
        return MachineSnapshot(
            reels=state.reels,
            is_spinning=state.is_spinning,
            stats=state.bankroll.stats,
            history=state.history.snapshot(),
            autoplay=state.autoplay.model_copy(),
            spin_cost=self.spin_cost,
        )

    async def shutdown(self) -> None:
        await self.autoplay.shutdown()
