"""Auto Slot Engine FastAPI Application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from app.config import settings
from app.logic.machine import SlotMachine
from app.middleware import ErrorHandlerMiddleware, validation_error_handler
from app.protocol import (
    AutoplayDelayRequest,
    AutoplayRequest,
    HistoryEntry,
    SpinResponse,
    StateResponse,
)


logger = logging.getLogger(__name__)

REJECT_SESSION_RESET = "SESSION_RESET"


def configure_logging() -> None:
    """Configure root logging from settings."""
    level = "DEBUG" if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and stop autoplay timers on exit."""
    configure_logging()
    logger.info(
        "Slot engine starting (stake=%d, spin_cost=%d)",
        settings.initial_stake,
        settings.spin_cost,
    )
    yield
    await machine.shutdown()


app = FastAPI(
    title="Auto Slot Engine",
    version="0.1.0",
    description="Three-reel slot machine with bankroll tracking and autoplay",
    lifespan=lifespan,
)

app.add_middleware(ErrorHandlerMiddleware)
app.add_exception_handler(RequestValidationError, validation_error_handler)

# Single in-process session
machine = SlotMachine.from_settings(settings)


def _state() -> dict:
    return StateResponse.from_snapshot(machine.snapshot()).model_dump()


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/state")
async def state() -> dict:
    """Current reels, stats, history and autoplay settings."""
    return _state()


@app.post("/spin")
async def spin() -> dict:
    """
    POST /spin.

    Runs one manual spin to completion. Rejections are not errors:
    the response carries accepted=false and the reason.
    """
    reason = machine.spin_blocker()
    outcome = None
    if reason is None:
        outcome = await machine.request_spin()
        if outcome is None:
            reason = REJECT_SESSION_RESET
    else:
        # Still routed through the engine so autoplay is stopped when broke
        await machine.request_spin()

    response = SpinResponse(
        accepted=outcome is not None,
        reason=reason,
        outcome=HistoryEntry.from_outcome(outcome) if outcome else None,
        state=StateResponse.from_snapshot(machine.snapshot()),
    )
    return response.model_dump()


@app.post("/autoplay")
async def autoplay(body: AutoplayRequest) -> dict:
    """Enable or disable autoplay. Enabling is ignored when funds are short."""
    machine.set_autoplay(body.enabled)
    return _state()


@app.post("/autoplay/delay")
async def autoplay_delay(body: AutoplayDelayRequest) -> dict:
    """Set the delay between autoplay spins (clamped)."""
    machine.set_autoplay_delay(body.delayMs)
    return _state()


@app.post("/reset")
async def reset() -> dict:
    """Restore a fresh session and stop autoplay."""
    machine.reset_session()
    return _state()
