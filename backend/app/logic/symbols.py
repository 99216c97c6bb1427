"""Uniform symbol draws for reel faces."""
from app.logic.models import Symbol
from app.logic.rng import ProductionRNG, RNGBase

ALPHABET: tuple[Symbol, ...] = tuple(Symbol)
REEL_COUNT = 3


class SymbolGenerator:
    """Draws symbols uniformly, with replacement, from the fixed alphabet."""

    def __init__(self, rng: RNGBase | None = None, reel_count: int = REEL_COUNT):
        self.rng = rng or ProductionRNG()
        self.reel_count = reel_count

    def next(self) -> Symbol:
        """Return one independent draw."""
        return ALPHABET[self.rng.randint(0, len(ALPHABET) - 1)]

    def draw_reels(self) -> tuple[Symbol, ...]:
        """Return a fresh reel set of reel_count independent draws."""
        return tuple(self.next() for _ in range(self.reel_count))
