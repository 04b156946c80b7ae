"""
Time-based reward accrual (accumulator pattern).

The engine keeps one global accumulator, ``reward_per_stake_accumulated``: the
reward earned by a single unit of stake since inception, scaled by the pool
precision. Each account stores the accumulator value at its last settlement
(``reward_snapshot``); whatever the accumulator gained since then, times the
account's principal, is reward the account has earned but not yet recorded.

Ordering contract for every mutating operation:

1. ``accrue(now)`` advances the accumulator using the total stake that was in
   effect for the elapsed window,
2. ``settle(account)`` moves the account's pending reward into its claimable
   balance using its *current* (pre-mutation) principal,
3. only then may the caller change principal, rate or claimable balance.

Both steps are O(1); nothing ever iterates over accounts.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional

from .errors import ClockRegression, InvalidAmount, NothingToClaim, Overflow
from .ledger import StakeLedger
from .math import (
    MAX_ACCRUAL_WINDOW,
    PRECISION,
    accumulator_delta,
    checked_add,
    is_uint,
    max_reward_rate,
    pending_reward,
)
from .types import Account, AccrualState, RewardCheckpoint


@dataclass(frozen=True)
class Savepoint:
    """Engine fields touched by one operation, captured before it ran."""

    account: Optional[Account]
    accrual: AccrualState
    checkpoint: Optional[RewardCheckpoint]


class RewardAccrualEngine:
    def __init__(
        self,
        ledger: StakeLedger,
        *,
        start_time: int = 0,
        reward_rate: int = 0,
        precision: int = PRECISION,
        max_accrual_window: int = MAX_ACCRUAL_WINDOW,
    ) -> None:
        if not is_uint(precision) or precision == 0:
            raise ValueError(f"precision must be a positive int: {precision!r}")
        if not is_uint(start_time):
            raise ValueError(f"start_time must be a non-negative int: {start_time!r}")
        if not is_uint(reward_rate):
            raise ValueError(f"reward_rate must be a non-negative int: {reward_rate!r}")
        if not is_uint(max_accrual_window) or max_accrual_window == 0:
            raise ValueError(f"max_accrual_window must be a positive int: {max_accrual_window!r}")
        if reward_rate > max_reward_rate(precision, max_accrual_window):
            raise ValueError(f"reward_rate {reward_rate} exceeds the accrual bound")
        self._ledger = ledger
        self.precision = precision
        self.max_accrual_window = max_accrual_window
        self._state = AccrualState(reward_rate=reward_rate, last_accrual_time=start_time)
        self._checkpoints: Dict[Account, RewardCheckpoint] = {}

    # -- Reads ---------------------------------------------------------------

    @property
    def state(self) -> AccrualState:
        return self._state

    def checkpoint_of(self, account: Account) -> RewardCheckpoint:
        return self._checkpoints.get(account, RewardCheckpoint())

    def claimable_of(self, account: Account) -> int:
        return self.checkpoint_of(account).claimable_reward

    def max_rate(self) -> int:
        """Largest rate ``set_rate`` accepts."""
        return max_reward_rate(self.precision, self.max_accrual_window)

    def get_all_checkpoints(self) -> Dict[Account, RewardCheckpoint]:
        return dict(self._checkpoints)

    def projected_accumulator(self, now: int) -> int:
        """Accumulator value ``accrue(now)`` would produce, without mutating."""
        return self._state.reward_per_stake_accumulated + self._delta_for(now)

    def preview_pending(self, account: Account, now: int) -> int:
        """Claimable balance *account* would have after ``accrue(now)`` + ``settle``."""
        cp = self.checkpoint_of(account)
        pending = pending_reward(
            self._ledger.principal_of(account),
            self.projected_accumulator(now),
            cp.reward_snapshot,
            self.precision,
        )
        return checked_add(cp.claimable_reward, pending, what="claimable reward")

    # -- Accrual / settlement ------------------------------------------------

    def _delta_for(self, now: int) -> int:
        if not is_uint(now):
            raise ClockRegression(f"time must be a non-negative int: {now!r}")
        last = self._state.last_accrual_time
        if now < last:
            raise ClockRegression(f"time {now} is before last accrual {last}")
        elapsed = now - last
        total = self._ledger.total_principal()
        if elapsed == 0 or total == 0:
            return 0
        return accumulator_delta(self._state.reward_rate, elapsed, total, self.precision)

    def accrue(self, now: int) -> int:
        """Advance the accumulator to *now*. Returns the increment applied.

        Idempotent within one time unit. While the pool is empty the clock
        moves forward but the accumulator does not: that emission goes to no one.
        """
        delta = self._delta_for(now)
        if now == self._state.last_accrual_time:
            return 0
        acc = checked_add(self._state.reward_per_stake_accumulated, delta, what="accumulator")
        self._state = replace(
            self._state,
            reward_per_stake_accumulated=acc,
            last_accrual_time=now,
        )
        return delta

    def settle(self, account: Account) -> int:
        """Credit the account's pending reward to its claimable balance.

        Must run after ``accrue`` and before the account's principal changes.
        Returns the amount credited.
        """
        cp = self.checkpoint_of(account)
        acc = self._state.reward_per_stake_accumulated
        pending = pending_reward(
            self._ledger.principal_of(account), acc, cp.reward_snapshot, self.precision,
        )
        claimable = checked_add(cp.claimable_reward, pending, what="claimable reward")
        self._checkpoints[account] = RewardCheckpoint(
            reward_snapshot=acc,
            claimable_reward=claimable,
        )
        return pending

    def set_rate(self, new_rate: int, now: int) -> int:
        """Bake the old rate in up to *now*, then switch. Returns the old rate."""
        if not is_uint(new_rate):
            raise InvalidAmount(f"reward rate must be a non-negative int: {new_rate!r}")
        bound = self.max_rate()
        if new_rate > bound:
            raise Overflow(f"reward rate {new_rate} exceeds {bound} for a {self.max_accrual_window} time-unit window")
        self.accrue(now)
        old = self._state.reward_rate
        self._state = replace(self._state, reward_rate=new_rate)
        return old

    def take_claimable(self, account: Account) -> int:
        """Zero the account's claimable balance and return what it held."""
        cp = self.checkpoint_of(account)
        if cp.claimable_reward == 0:
            raise NothingToClaim(f"{account!r} has no claimable reward")
        self._checkpoints[account] = replace(cp, claimable_reward=0)
        return cp.claimable_reward

    # -- Rollback ------------------------------------------------------------

    def savepoint(self, account: Optional[Account] = None) -> Savepoint:
        return Savepoint(
            account=account,
            accrual=self._state,
            checkpoint=self._checkpoints.get(account) if account is not None else None,
        )

    def rollback(self, sp: Savepoint) -> None:
        self._state = sp.accrual
        if sp.account is None:
            return
        if sp.checkpoint is None:
            self._checkpoints.pop(sp.account, None)
        else:
            self._checkpoints[sp.account] = sp.checkpoint

    def load(self, state: AccrualState, checkpoints: Mapping[Account, RewardCheckpoint]) -> None:
        """Replace all engine state (used when restoring a snapshot)."""
        self._state = state
        self._checkpoints = dict(checkpoints)

    def __repr__(self) -> str:
        s = self._state
        return (
            f"RewardAccrualEngine(rate={s.reward_rate}, acc={s.reward_per_stake_accumulated}, "
            f"last={s.last_accrual_time}, accounts={len(self._checkpoints)})"
        )
