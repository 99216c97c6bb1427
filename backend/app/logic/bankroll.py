"""Bankroll and session statistics bookkeeping."""
from app.logic.models import SessionStats, SpinOutcome, WinTier


class BankrollTracker:
    """
    Owns a session's credits and counters.

    Every mutation swaps in a new frozen SessionStats, so a reader between
    two spins always sees a fully applied state.
    """

    def __init__(self, initial_stake: int = 200):
        self.initial_stake = initial_stake
        self._stats = self._initial_stats()

    def _initial_stats(self) -> SessionStats:
        return SessionStats(balance=self.initial_stake, profit=0)

    @property
    def stats(self) -> SessionStats:
        return self._stats

    @property
    def balance(self) -> int:
        return self._stats.balance

    def can_afford(self, cost: int) -> bool:
        return self._stats.balance >= cost

    def apply_spin_cost(self, cost: int) -> SessionStats:
        """Debit cost unconditionally. Caller checks affordability."""
        current = self._stats
        self._stats = current.model_copy(
            update={
                "balance": current.balance - cost,
                "profit": current.profit - cost,
            }
        )
        return self._stats

    def refund_spin_cost(self, cost: int) -> SessionStats:
        """Undo a debit for a spin that was cancelled before settling."""
        current = self._stats
        self._stats = current.model_copy(
            update={
                "balance": current.balance + cost,
                "profit": current.profit + cost,
            }
        )
        return self._stats

    def apply_settlement(self, outcome: SpinOutcome) -> SessionStats:
        """Credit the payout and count the spin."""
        current = self._stats
        self._stats = current.model_copy(
            update={
                "balance": current.balance + outcome.payout,
                "profit": current.profit + outcome.payout,
                "spins_count": current.spins_count + 1,
                "wins_count": current.wins_count + (outcome.win_tier != WinTier.LOSS),
                "jackpots_count": current.jackpots_count + (outcome.win_tier == WinTier.JACKPOT),
            }
        )
        return self._stats

    def reset(self) -> SessionStats:
        """Restore session defaults."""
        self._stats = self._initial_stats()
        return self._stats
