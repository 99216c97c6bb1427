"""Autoplay: a self-rescheduling timer chain over the spin orchestrator."""
import asyncio
import logging

from app.logic.engine import SessionState, SpinOrchestrator, stop_autoplay
from app.logic.models import SpinSource
from app.telemetry import AutoplayChangedEvent


logger = logging.getLogger(__name__)

MIN_DELAY_MS = 300
MAX_DELAY_MS = 2000


class AutoplayScheduler:
    """
    Keeps at most one future spin scheduled while autoplay can run.

    A spin is scheduled when autoplay is enabled, the orchestrator is idle
    and the balance covers the spin cost. Any state change that breaks one
    of those conditions cancels the pending timer. The orchestrator calls
    evaluate() after every transition, which is what keeps the chain going.
    """

    def __init__(
        self,
        state: SessionState,
        orchestrator: SpinOrchestrator,
        min_delay_ms: int = MIN_DELAY_MS,
        max_delay_ms: int = MAX_DELAY_MS,
    ):
        self.state = state
        self.orchestrator = orchestrator
        self.min_delay_ms = min_delay_ms
        self.max_delay_ms = max_delay_ms
        self._handle: asyncio.TimerHandle | None = None
        self._task: asyncio.Task | None = None
        orchestrator.add_listener(self.evaluate)

    @property
    def enabled(self) -> bool:
        return self.state.autoplay.enabled

    @property
    def pending(self) -> bool:
        """True while a scheduled spin has not fired yet."""
        return self._handle is not None

    def enable(self) -> bool:
        """Turn autoplay on if the balance covers a spin. Returns the new state."""
        if not self.orchestrator.can_afford():
            logger.debug("Autoplay not enabled: insufficient balance")
            return False
        if not self.state.autoplay.enabled:
            self.state.autoplay.enabled = True
            logger.info("Autoplay enabled (delay_ms=%d)", self.state.autoplay.delay_ms)
            self.orchestrator.telemetry.emit_autoplay_changed(
                AutoplayChangedEvent(
                    enabled=True,
                    delay_ms=self.state.autoplay.delay_ms,
                    reason="user",
                )
            )
        self.evaluate()
        return True

    def disable(self, reason: str = "user") -> None:
        stop_autoplay(self.state, self.orchestrator.telemetry, reason)
        self.cancel()

    def set_delay(self, delay_ms: int) -> int:
        """Clamp and store the delay. A pending timer keeps its original delay."""
        clamped = max(self.min_delay_ms, min(self.max_delay_ms, int(delay_ms)))
        self.state.autoplay.delay_ms = clamped
        return clamped

    def evaluate(self) -> None:
        """Schedule, keep, or cancel the next spin to match current state."""
        if not self.state.autoplay.enabled or self.state.is_spinning:
            self.cancel()
            return

        if not self.orchestrator.can_afford():
            stop_autoplay(self.state, self.orchestrator.telemetry, "insufficient_funds")
            self.cancel()
            return

        if self._handle is None:
            loop = asyncio.get_running_loop()
            delay = self.state.autoplay.delay_ms / 1000
            self._handle = loop.call_later(delay, self._fire)

    def cancel(self) -> None:
        """Drop the pending timer so it never fires."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._autoplay_spin())
        self._task.add_done_callback(self._on_spin_done)

    async def _autoplay_spin(self):
        # Autoplay may have been switched off between the timer firing and now
        if not self.state.autoplay.enabled:
            return None
        return await self.orchestrator.request_spin(SpinSource.AUTOPLAY)

    def _on_spin_done(self, task: asyncio.Task) -> None:
        if task is self._task:
            self._task = None
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Autoplay spin failed: %s", exc, exc_info=exc)
            stop_autoplay(self.state, self.orchestrator.telemetry, "error")
            self.cancel()

    async def shutdown(self) -> None:
        """Turn autoplay off and cancel any autoplay spin still running."""
        self.disable("shutdown")
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._task = None
