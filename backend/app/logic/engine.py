"""Spin orchestration: cost debit, rolling reveal, classification, settlement."""
import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from app.config_hash import get_config_hash
from app.logic.bankroll import BankrollTracker
from app.logic.classifier import LUCKY_SYMBOL, classify
from app.logic.history import HistoryLog
from app.logic.models import AutoplayState, SpinOutcome, SpinSource, Symbol
from app.logic.symbols import SymbolGenerator
from app.telemetry import (
    AutoplayChangedEvent,
    SpinRejectedEvent,
    SpinSettledEvent,
    TelemetryService,
    telemetry_service,
)


logger = logging.getLogger(__name__)

# Defaults for a live session
SPIN_COST = 2
FRAME_COUNT = 26
FRAME_DELAY_MS = 45

REJECT_SPIN_IN_PROGRESS = "SPIN_IN_PROGRESS"
REJECT_INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"


@dataclass
class SessionState:
    """
    Single owned state object for one slot session.

    Mutated only by the spin pipeline and the session commands.
    epoch advances on reset; a spin started in an older epoch never settles.
    """

    reels: tuple[Symbol, ...]
    bankroll: BankrollTracker
    history: HistoryLog
    autoplay: AutoplayState = field(default_factory=AutoplayState)
    is_spinning: bool = False
    epoch: int = 0


def stop_autoplay(
    state: SessionState, telemetry: TelemetryService, reason: str
) -> bool:
    """Disable autoplay. Returns True if it was enabled."""
    if not state.autoplay.enabled:
        return False
    state.autoplay.enabled = False
    logger.info("Autoplay disabled (reason=%s, balance=%d)", reason, state.bankroll.balance)
    telemetry.emit_autoplay_changed(
        AutoplayChangedEvent(
            enabled=False,
            delay_ms=state.autoplay.delay_ms,
            reason=reason,
        )
    )
    return True


class SpinOrchestrator:
    """
    Runs one spin at a time: Idle -> Spinning -> Idle.

    Implements:
    - Affordability and re-entrancy guards (rejections are no-ops)
    - Cost debit on entry
    - Rolling animation frames published to state.reels
    - Independent final draw after the animation
    - Classification, settlement and history update in one step
    """

    def __init__(
        self,
        state: SessionState,
        generator: SymbolGenerator,
        spin_cost: int = SPIN_COST,
        frame_count: int = FRAME_COUNT,
        frame_delay_ms: int = FRAME_DELAY_MS,
        lucky_symbol: Symbol = LUCKY_SYMBOL,
        telemetry: TelemetryService | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.state = state
        self.generator = generator
        self.spin_cost = spin_cost
        self.frame_count = frame_count
        self.frame_delay_ms = frame_delay_ms
        self.lucky_symbol = lucky_symbol
        self.telemetry = telemetry or telemetry_service
        self._clock = clock
        self._last_timestamp = 0
        self._listeners: list[Callable[[], None]] = []
        self.config_hash = get_config_hash(
            spin_cost=spin_cost,
            lucky_symbol=lucky_symbol.value,
            initial_stake=state.bankroll.initial_stake,
        )

    def add_listener(self, listener: Callable[[], None]) -> None:
        """Register a callback run after every spin state change."""
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()

    @property
    def is_spinning(self) -> bool:
        return self.state.is_spinning

    def can_afford(self) -> bool:
        return self.state.bankroll.can_afford(self.spin_cost)

    def _reject(self, reason: str, source: SpinSource, autoplay_disabled: bool) -> None:
        logger.debug("Spin rejected: %s (source=%s)", reason, source.value)
        self.telemetry.emit_spin_rejected(
            SpinRejectedEvent(
                reason=reason,
                source=source.value,
                balance=self.state.bankroll.balance,
                autoplay_disabled=autoplay_disabled,
            )
        )

    async def request_spin(self, source: SpinSource = SpinSource.MANUAL) -> SpinOutcome | None:
        """
        Run one full spin if the guards allow it.

        Returns the settled outcome, or None when the request was rejected
        or the session was reset while the spin was in flight.
        """
        state = self.state

        if state.is_spinning:
            self._reject(REJECT_SPIN_IN_PROGRESS, source, autoplay_disabled=False)
            return None

        if not self.can_afford():
            disabled = stop_autoplay(state, self.telemetry, "insufficient_funds")
            self._reject(REJECT_INSUFFICIENT_FUNDS, source, autoplay_disabled=disabled)
            self._notify()
            return None

        # Idle -> Spinning
        epoch = state.epoch
        state.bankroll.apply_spin_cost(self.spin_cost)
        state.is_spinning = True
        logger.debug("Spin started (source=%s, balance=%d)", source.value, state.bankroll.balance)
        self._notify()

        outcome = None
        try:
            try:
                await self._roll(epoch)
            except asyncio.CancelledError:
                # Never leave a debit without a settlement
                if state.epoch == epoch:
                    state.bankroll.refund_spin_cost(self.spin_cost)
                    logger.debug("Spin cancelled: cost refunded (balance=%d)", state.bankroll.balance)
                raise
            if state.epoch == epoch:
                outcome = self._settle(source)
            else:
                logger.debug("Spin discarded: session reset while spinning")
        finally:
            # Spinning -> Idle; after a reset the new session owns the flag
            if state.epoch == epoch:
                state.is_spinning = False

        self._notify()
        return outcome

    async def _roll(self, epoch: int) -> None:
        """Publish animation frames. Frames never affect the outcome."""
        delay = self.frame_delay_ms / 1000
        for _ in range(self.frame_count):
            await asyncio.sleep(delay)
            if self.state.epoch != epoch:
                return
            self.state.reels = self.generator.draw_reels()

    def _settle(self, source: SpinSource) -> SpinOutcome:
        """Draw the final reel set and apply it. Runs without suspension."""
        state = self.state

        # Fresh draw, not the last animation frame
        final = self.generator.draw_reels()
        state.reels = final

        classification = classify(final, self.lucky_symbol)
        outcome = SpinOutcome(
            symbols=final,
            win_tier=classification.win_tier,
            payout=classification.payout,
            timestamp=self._next_timestamp(),
        )

        stats = state.bankroll.apply_settlement(outcome)
        state.history.record(outcome)

        logger.debug(
            "Spin settled: %s %s +%d (balance=%d)",
            "".join(s.value for s in final),
            outcome.win_tier.value,
            outcome.payout,
            stats.balance,
        )
        self.telemetry.emit_spin_settled(
            SpinSettledEvent(
                spin_number=stats.spins_count,
                symbols=[s.value for s in final],
                win_tier=outcome.win_tier.value,
                payout=outcome.payout,
                balance=stats.balance,
                profit=stats.profit,
                source=source.value,
                config_hash=self.config_hash,
            )
        )
        return outcome

    def _next_timestamp(self) -> int:
        now = int(self._clock() * 1000)
        self._last_timestamp = max(now, self._last_timestamp + 1)
        return self._last_timestamp
