"""Win classification tests.

Tie-break order:
1. three equal symbols -> jackpot (48)
2. exactly two distinct symbols -> double (12)
3. all distinct with the lucky symbol -> single (4)
4. all distinct without it -> loss (0)
"""
import itertools

import pytest

from app.logic.classifier import LUCKY_SYMBOL, classify
from app.logic.models import PAYOUTS, Symbol, WinTier


ALL_REEL_SETS = list(itertools.product(list(Symbol), repeat=3))


class TestWinTiers:
    """Each tier over every reel set that qualifies for it."""

    @pytest.mark.parametrize("symbol", list(Symbol))
    def test_three_equal_is_jackpot(self, symbol: Symbol):
        result = classify((symbol, symbol, symbol))
        assert result.win_tier == WinTier.JACKPOT
        assert result.payout == 48

    def test_two_distinct_is_double(self):
        reel_sets = [r for r in ALL_REEL_SETS if len(set(r)) == 2]
        assert len(reel_sets) == 168
        for reels in reel_sets:
            result = classify(reels)
            assert result.win_tier == WinTier.DOUBLE, reels
            assert result.payout == 12

    def test_all_distinct_with_lucky_is_single(self):
        reel_sets = [r for r in ALL_REEL_SETS if len(set(r)) == 3 and LUCKY_SYMBOL in r]
        assert len(reel_sets) == 126
        for reels in reel_sets:
            result = classify(reels)
            assert result.win_tier == WinTier.SINGLE, reels
            assert result.payout == 4

    def test_all_distinct_without_lucky_is_loss(self):
        reel_sets = [r for r in ALL_REEL_SETS if len(set(r)) == 3 and LUCKY_SYMBOL not in r]
        assert len(reel_sets) == 210
        for reels in reel_sets:
            result = classify(reels)
            assert result.win_tier == WinTier.LOSS, reels
            assert result.payout == 0


class TestTieBreaks:
    """Matches outrank the lucky symbol."""

    def test_pair_of_lucky_is_double_not_single(self):
        reels = (Symbol.SEVEN, Symbol.SEVEN, Symbol.CHERRY)
        assert classify(reels).win_tier == WinTier.DOUBLE

    def test_triple_lucky_is_jackpot(self):
        reels = (Symbol.SEVEN,) * 3
        assert classify(reels).win_tier == WinTier.JACKPOT

    def test_pair_position_does_not_matter(self):
        a, b = Symbol.BELL, Symbol.STAR
        for reels in [(a, a, b), (a, b, a), (b, a, a)]:
            assert classify(reels).win_tier == WinTier.DOUBLE

    def test_custom_lucky_symbol(self):
        reels = (Symbol.CHERRY, Symbol.BELL, Symbol.DIAMOND)
        assert classify(reels).win_tier == WinTier.LOSS
        assert classify(reels, lucky=Symbol.BELL).win_tier == WinTier.SINGLE

    def test_accepts_lists(self):
        reels = [Symbol.LEMON, Symbol.LEMON, Symbol.LEMON]
        assert classify(reels).win_tier == WinTier.JACKPOT


class TestPayoutTable:
    """Payouts are ordered with the tiers."""

    def test_payout_values(self):
        assert PAYOUTS == {
            WinTier.LOSS: 0,
            WinTier.SINGLE: 4,
            WinTier.DOUBLE: 12,
            WinTier.JACKPOT: 48,
        }

    def test_tiers_ordered_by_payout(self):
        payouts = [PAYOUTS[tier] for tier in WinTier]
        assert payouts == sorted(payouts)

    def test_classification_is_deterministic(self):
        for reels in ALL_REEL_SETS[:64]:
            assert classify(reels) == classify(reels)
