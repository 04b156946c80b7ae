"""Data types for the staking kernel.

All value types are frozen dataclasses; the mutable tables live in
`ledger.py` and `accrual.py` and replace these records wholesale.

Units/conventions:
- amounts are integer units of the staked asset (rewards are paid in the same asset),
- `reward_rate` is reward units per time unit,
- `reward_per_stake_accumulated` and `reward_snapshot` are scaled by the pool precision,
- times are whatever unit the clock reports (block height or seconds).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

Account = str


@unique
class Action(Enum):
    STAKE = "stake"
    UNSTAKE = "unstake"
    CLAIM = "claim"
    SET_REWARD_RATE = "set_reward_rate"
    PAUSE = "pause"
    RESUME = "resume"


@unique
class Event(Enum):
    STAKED = "Staked"
    UNSTAKED = "Unstaked"
    REWARD_CLAIMED = "RewardClaimed"
    REWARD_RATE_SET = "RewardRateSet"
    PAUSED = "Paused"
    RESUMED = "Resumed"


@dataclass(frozen=True)
class AccrualState:
    """Engine-owned global fields (everything but the total, which the ledger owns)."""

    reward_rate: int = 0
    reward_per_stake_accumulated: int = 0
    last_accrual_time: int = 0


@dataclass(frozen=True)
class RewardCheckpoint:
    """Engine-owned per-account fields."""

    reward_snapshot: int = 0
    claimable_reward: int = 0


@dataclass(frozen=True)
class GlobalState:
    """Read-only view of the pool-wide bookkeeping."""

    total_staked: int
    reward_rate: int
    reward_per_stake_accumulated: int
    last_accrual_time: int


@dataclass(frozen=True)
class AccountState:
    """Read-only view of one account. Unknown accounts read as all zeros."""

    principal: int = 0
    reward_snapshot: int = 0
    claimable_reward: int = 0

    @property
    def is_staked(self) -> bool:
        return self.principal > 0


@dataclass(frozen=True)
class ActionParams:
    """Parameters for ``StakingPool.step``. Unused fields default to 0."""

    action: Action
    caller: Account
    amount: int = 0      # stake / unstake
    new_rate: int = 0    # set_reward_rate


@dataclass(frozen=True)
class Receipt:
    """Post-state observables returned by a successful mutating call."""

    event: Event
    account: Account
    time: int
    amount: int = 0
    principal_after: int = 0
    claimable_after: int = 0
    total_staked_after: int = 0
    accumulator_after: int = 0


@dataclass(frozen=True)
class StepResult:
    accepted: bool
    receipt: Receipt | None = None
    rejection: str | None = None
