"""Config hash for correlating telemetry and simulation reports.

Used by:
- telemetry.py (spin_settled event)
- scripts/simulate.py (report header)

The hash MUST be computed identically in both locations.
"""
import hashlib
import json

from app.config import settings
from app.logic.models import PAYOUTS, Symbol


def get_config_hash(
    spin_cost: int | None = None,
    lucky_symbol: str | None = None,
    initial_stake: int | None = None,
) -> str:
    """
    Generate hash of the game-defining configuration.

    Values not given fall back to the application settings.
    Returns 16-char hex hash of config snapshot.
    """
    config_snapshot = {
        "alphabet": [symbol.value for symbol in Symbol],
        "lucky_symbol": settings.lucky_symbol if lucky_symbol is None else lucky_symbol,
        "payouts": {tier.value: payout for tier, payout in PAYOUTS.items()},
        "spin_cost": settings.spin_cost if spin_cost is None else spin_cost,
        "initial_stake": settings.initial_stake if initial_stake is None else initial_stake,
    }
    canonical = json.dumps(config_snapshot, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()[:16]
