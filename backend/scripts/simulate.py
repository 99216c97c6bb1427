#!/usr/bin/env python3
"""
Headless spin simulation for the payout table.

Draws seeded reel sets, classifies them and reports tier frequencies,
hit frequency and return-to-player against the exact enumerated value.

Usage:
    python -m scripts.simulate --spins 100000 --seed SIM_2025
    python -m scripts.simulate --spins 20000 --seed SIM_2025 --out out/sim.json
"""
import argparse
import hashlib
import itertools
import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from fractions import Fraction
from pathlib import Path
from typing import Any

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import settings
from app.config_hash import get_config_hash
from app.logic.classifier import classify
from app.logic.models import PAYOUTS, Symbol, WinTier
from app.logic.rng import SeededRNG
from app.logic.symbols import ALPHABET, SymbolGenerator


@dataclass
class SimulationStats:
    """Statistics accumulated during simulation."""
    spins: int = 0
    total_cost: int = 0
    total_payout: int = 0
    wins: int = 0
    tier_counts: dict[str, int] = field(
        default_factory=lambda: {tier.value: 0 for tier in WinTier}
    )

    @property
    def rtp(self) -> float:
        return self.total_payout / self.total_cost if self.total_cost else 0.0

    @property
    def hit_frequency(self) -> float:
        return self.wins / self.spins if self.spins else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "spins": self.spins,
            "total_cost": self.total_cost,
            "total_payout": self.total_payout,
            "wins": self.wins,
            "tier_counts": dict(self.tier_counts),
            "rtp": round(self.rtp, 6),
            "hit_frequency": round(self.hit_frequency, 6),
        }


def seed_to_int(seed_str: str) -> int:
    """Convert string seed to integer deterministically."""
    return int(hashlib.sha256(seed_str.encode()).hexdigest(), 16) % (2**31)


def get_timestamp_iso() -> str:
    """Get ISO 8601 UTC timestamp."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def run_simulation(
    spins: int,
    seed_str: str,
    spin_cost: int | None = None,
    lucky: Symbol | None = None,
) -> SimulationStats:
    """
    Classify `spins` independent seeded reel draws.

    Bankroll is not tracked; every spin is paid for regardless of balance.
    """
    cost = settings.spin_cost if spin_cost is None else spin_cost
    lucky = lucky or Symbol(settings.lucky_symbol)
    generator = SymbolGenerator(SeededRNG(seed_to_int(seed_str)), reel_count=settings.reel_count)

    stats = SimulationStats()
    for _ in range(spins):
        result = classify(generator.draw_reels(), lucky)
        stats.spins += 1
        stats.total_cost += cost
        stats.total_payout += result.payout
        stats.tier_counts[result.win_tier.value] += 1
        if result.win_tier != WinTier.LOSS:
            stats.wins += 1
    return stats


def tier_probabilities(lucky: Symbol | None = None) -> dict[WinTier, Fraction]:
    """Exact tier probabilities by enumerating every reel set."""
    lucky = lucky or Symbol(settings.lucky_symbol)
    counts = {tier: 0 for tier in WinTier}
    combos = list(itertools.product(ALPHABET, repeat=settings.reel_count))
    for reels in combos:
        counts[classify(reels, lucky).win_tier] += 1
    return {tier: Fraction(count, len(combos)) for tier, count in counts.items()}


def theoretical_rtp(spin_cost: int | None = None, lucky: Symbol | None = None) -> Fraction:
    """Exact expected payout per credit wagered."""
    cost = settings.spin_cost if spin_cost is None else spin_cost
    expected = sum(
        prob * PAYOUTS[tier] for tier, prob in tier_probabilities(lucky).items()
    )
    return expected / cost


def build_report(stats: SimulationStats, seed_str: str) -> dict[str, Any]:
    return {
        "generated_at": get_timestamp_iso(),
        "config_hash": get_config_hash(),
        "seed": seed_str,
        "theoretical_rtp": float(theoretical_rtp()),
        **stats.to_dict(),
    }


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Headless slot spin simulation")
    parser.add_argument(
        "--spins",
        type=int,
        required=True,
        help="Number of spins to simulate",
    )
    parser.add_argument(
        "--seed",
        type=str,
        required=True,
        help="Seed string for reproducibility",
    )
    parser.add_argument(
        "--out",
        type=str,
        default=None,
        help="Optional JSON report path",
    )

    args = parser.parse_args()
    if args.spins <= 0:
        parser.error("--spins must be positive")

    print(f"Running simulation: spins={args.spins}, seed={args.seed}")
    stats = run_simulation(spins=args.spins, seed_str=args.seed)
    report = build_report(stats, args.seed)

    print(f"RTP: {report['rtp']:.4f} (theoretical {report['theoretical_rtp']:.4f})")
    print(f"Hit frequency: {report['hit_frequency'] * 100:.2f}%")
    for tier, count in report["tier_counts"].items():
        print(f"  {tier:8s} {count}")

    if args.out:
        path = Path(args.out)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(report, indent=2, ensure_ascii=False))
        print(f"Report written to: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
