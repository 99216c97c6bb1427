"""Pytest fixtures for backend tests."""
from collections import deque
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

from app.logic.machine import SlotMachine
from app.logic.models import Symbol
from app.logic.symbols import SymbolGenerator
from app.main import app
from app.telemetry import TelemetryService


S = Symbol

LOSS_REELS = (S.CHERRY, S.BELL, S.DIAMOND)
SINGLE_REELS = (S.SEVEN, S.LEMON, S.STAR)
DOUBLE_REELS = (S.GRAPE, S.GRAPE, S.CLOVER)
JACKPOT_REELS = (S.SEVEN, S.SEVEN, S.SEVEN)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (run full simulations)"
    )


class ScriptedGenerator(SymbolGenerator):
    """Generator that replays queued reel sets, then a fixed default."""

    def __init__(self, default: tuple[Symbol, ...] = LOSS_REELS):
        super().__init__()
        self.default = default
        self._queue: deque[tuple[Symbol, ...]] = deque()
        self.draws = 0

    def queue(self, *reel_sets: tuple[Symbol, ...]) -> None:
        self._queue.extend(reel_sets)

    def draw_reels(self) -> tuple[Symbol, ...]:
        self.draws += 1
        if self._queue:
            return self._queue.popleft()
        return self.default


class RecordingTelemetrySink:
    """Telemetry sink that records events for assertions."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        self.events.append((event_name, data))

    def get_events(self, event_name: str) -> list[dict[str, Any]]:
        return [data for name, data in self.events if name == event_name]


@pytest.fixture
def generator() -> ScriptedGenerator:
    """Scripted generator that settles every spin as a loss by default."""
    return ScriptedGenerator()


@pytest.fixture
def telemetry_sink() -> RecordingTelemetrySink:
    return RecordingTelemetrySink()


@pytest.fixture
def telemetry(telemetry_sink: RecordingTelemetrySink) -> TelemetryService:
    return TelemetryService(sink=telemetry_sink)


@pytest.fixture
def make_machine(generator: ScriptedGenerator, telemetry: TelemetryService):
    """Factory for machines without animation delay."""

    def _make(**kwargs: Any) -> SlotMachine:
        options: dict[str, Any] = {
            "generator": generator,
            "frame_count": 0,
            "frame_delay_ms": 0,
            "telemetry": telemetry,
        }
        options.update(kwargs)
        return SlotMachine(**options)

    return _make


@pytest.fixture
def machine(make_machine) -> SlotMachine:
    return make_machine()


@pytest.fixture
def client_with_machine(
    machine: SlotMachine,
) -> Generator[tuple[TestClient, SlotMachine], None, None]:
    """TestClient serving a fresh fast machine."""
    import app.main as main_module

    original_machine = main_module.machine
    main_module.machine = machine

    with TestClient(app) as client:
        yield client, machine

    main_module.machine = original_machine
