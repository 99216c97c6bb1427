"""Win classification for a settled reel set."""
from collections.abc import Sequence

from app.logic.models import PAYOUTS, Classification, Symbol, WinTier

LUCKY_SYMBOL = Symbol.SEVEN


def classify(reels: Sequence[Symbol], lucky: Symbol = LUCKY_SYMBOL) -> Classification:
    """
    Assign a win tier and payout to a reel set.

    Tie-break order:
    1. one distinct symbol -> jackpot
    2. two distinct symbols -> double
    3. all distinct but lucky symbol present -> single
    4. otherwise -> loss

    Pure: no randomness, no clock.
    """
    distinct = len(set(reels))

    if distinct == 1:
        tier = WinTier.JACKPOT
    elif distinct == 2:
        tier = WinTier.DOUBLE
    elif lucky in reels:
        tier = WinTier.SINGLE
    else:
        tier = WinTier.LOSS

    return Classification(win_tier=tier, payout=PAYOUTS[tier])
