"""Engine telemetry: settlement, rejection, autoplay and reset events."""
import logging
from dataclasses import dataclass
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class TelemetrySink(Protocol):
    """Protocol for telemetry sinks."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Emit a telemetry event."""
        ...


class LoggingTelemetrySink:
    """Default sink that logs telemetry events."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Log telemetry event."""
        logger.info("TELEMETRY %s: %s", event_name, data)


@dataclass
class SpinSettledEvent:
    """spin_settled telemetry event."""

    spin_number: int
    symbols: list[str]
    win_tier: str  # "loss" | "single" | "double" | "jackpot"
    payout: int
    balance: int
    profit: int
    source: str  # "manual" | "autoplay"
    config_hash: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "spin_number": self.spin_number,
            "symbols": self.symbols,
            "win_tier": self.win_tier,
            "payout": self.payout,
            "balance": self.balance,
            "profit": self.profit,
            "source": self.source,
            "config_hash": self.config_hash,
        }


@dataclass
class SpinRejectedEvent:
    """spin_rejected telemetry event."""

    reason: str  # "SPIN_IN_PROGRESS" | "INSUFFICIENT_FUNDS"
    source: str
    balance: int
    autoplay_disabled: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "reason": self.reason,
            "source": self.source,
            "balance": self.balance,
            "autoplay_disabled": self.autoplay_disabled,
        }


@dataclass
class AutoplayChangedEvent:
    """autoplay_changed telemetry event."""

    enabled: bool
    delay_ms: int
    reason: str  # "user" | "insufficient_funds" | "session_reset" | "shutdown" | "error"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for emission."""
        return {
            "enabled": self.enabled,
            "delay_ms": self.delay_ms,
            "reason": self.reason,
        }


@dataclass
class SessionResetEvent:
    """session_reset telemetry event."""

    spins_before: int
    balance_before: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "spins_before": self.spins_before,
            "balance_before": self.balance_before,
        }


class TelemetryService:
    """Service for emitting engine telemetry events."""

    def __init__(self, sink: TelemetrySink | None = None):
        self._sink = sink or LoggingTelemetrySink()
        self._sink_errors = 0  # Counter for sink failures

    def set_sink(self, sink: TelemetrySink) -> None:
        """Set the telemetry sink (useful for testing)."""
        self._sink = sink

    @property
    def sink_errors(self) -> int:
        return self._sink_errors

    def _safe_emit(self, event_name: str, data: dict[str, Any]) -> None:
        """
        Emit event with exception safety.

        Sink failures MUST NOT break a spin or a request.
        """
        try:
            self._sink.emit(event_name, data)
        except Exception as e:
            self._sink_errors += 1
            logger.warning(
                "Telemetry sink error (count=%d): %s - %s",
                self._sink_errors,
                event_name,
                str(e),
            )

    def emit_spin_settled(self, event: SpinSettledEvent) -> None:
        self._safe_emit("spin_settled", event.to_dict())

    def emit_spin_rejected(self, event: SpinRejectedEvent) -> None:
        self._safe_emit("spin_rejected", event.to_dict())

    def emit_autoplay_changed(self, event: AutoplayChangedEvent) -> None:
        self._safe_emit("autoplay_changed", event.to_dict())

    def emit_session_reset(self, event: SessionResetEvent) -> None:
        self._safe_emit("session_reset", event.to_dict())


# Global instance
telemetry_service = TelemetryService()
