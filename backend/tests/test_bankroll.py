"""Bankroll and stats bookkeeping tests."""
import pytest
from pydantic import ValidationError

from app.logic.bankroll import BankrollTracker
from app.logic.models import SessionStats, SpinOutcome, Symbol, WinTier


def make_outcome(tier: WinTier, payout: int, timestamp: int = 1) -> SpinOutcome:
    return SpinOutcome(
        symbols=(Symbol.CHERRY, Symbol.BELL, Symbol.DIAMOND),
        win_tier=tier,
        payout=payout,
        timestamp=timestamp,
    )


class TestBankrollTracker:
    """Debit, settlement and reset."""

    def test_initial_stats(self):
        stats = BankrollTracker(200).stats
        assert stats == SessionStats(balance=200, profit=0)

    def test_spin_cost_debits_balance_and_profit(self):
        tracker = BankrollTracker(200)
        stats = tracker.apply_spin_cost(2)
        assert stats.balance == 198
        assert stats.profit == -2
        assert stats.spins_count == 0

    def test_spin_cost_is_unconditional(self):
        tracker = BankrollTracker(1)
        assert tracker.apply_spin_cost(2).balance == -1

    def test_refund_undoes_debit(self):
        tracker = BankrollTracker(200)
        tracker.apply_spin_cost(2)
        stats = tracker.refund_spin_cost(2)
        assert stats == SessionStats(balance=200, profit=0)

    def test_jackpot_settlement(self):
        tracker = BankrollTracker(200)
        tracker.apply_spin_cost(2)
        stats = tracker.apply_settlement(make_outcome(WinTier.JACKPOT, 48))
        assert stats.balance == 246
        assert stats.profit == 46
        assert stats.spins_count == 1
        assert stats.wins_count == 1
        assert stats.jackpots_count == 1

    def test_loss_counts_spin_only(self):
        tracker = BankrollTracker(200)
        tracker.apply_spin_cost(2)
        stats = tracker.apply_settlement(make_outcome(WinTier.LOSS, 0))
        assert stats.spins_count == 1
        assert stats.wins_count == 0
        assert stats.jackpots_count == 0
        assert stats.balance == 198

    @pytest.mark.parametrize("tier,payout", [(WinTier.SINGLE, 4), (WinTier.DOUBLE, 12)])
    def test_non_jackpot_wins(self, tier: WinTier, payout: int):
        tracker = BankrollTracker(200)
        tracker.apply_spin_cost(2)
        stats = tracker.apply_settlement(make_outcome(tier, payout))
        assert stats.wins_count == 1
        assert stats.jackpots_count == 0
        assert stats.balance == 198 + payout

    def test_profit_tracks_balance(self):
        tracker = BankrollTracker(200)
        tiers = [
            (WinTier.LOSS, 0),
            (WinTier.DOUBLE, 12),
            (WinTier.SINGLE, 4),
            (WinTier.JACKPOT, 48),
            (WinTier.LOSS, 0),
        ]
        for tier, payout in tiers:
            tracker.apply_spin_cost(2)
            stats = tracker.apply_settlement(make_outcome(tier, payout))
            assert stats.profit == stats.balance - 200
            assert stats.wins_count <= stats.spins_count
            assert stats.jackpots_count <= stats.wins_count

    def test_updates_replace_stats(self):
        tracker = BankrollTracker(200)
        before = tracker.stats
        tracker.apply_spin_cost(2)
        assert before.balance == 200
        assert tracker.stats is not before

    def test_stats_are_frozen(self):
        stats = BankrollTracker(200).stats
        with pytest.raises(ValidationError):
            stats.balance = 0

    def test_reset_restores_defaults(self):
        tracker = BankrollTracker(200)
        for _ in range(3):
            tracker.apply_spin_cost(2)
            tracker.apply_settlement(make_outcome(WinTier.JACKPOT, 48))
        stats = tracker.reset()
        assert stats == SessionStats(balance=200, profit=0)


class TestWinRate:
    """Whole-number win rate."""

    def test_zero_spins(self):
        assert SessionStats().win_rate == 0

    @pytest.mark.parametrize(
        "wins,spins,expected",
        [(1, 3, 33), (2, 3, 67), (1, 2, 50), (1, 8, 13), (3, 3, 100), (0, 5, 0)],
    )
    def test_rounding(self, wins: int, spins: int, expected: int):
        stats = SessionStats(spins_count=spins, wins_count=wins)
        assert stats.win_rate == expected
