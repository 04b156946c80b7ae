"""`staking`: integer-only stake ledger and reward-accrual kernel.

- `StakeLedger` owns principal per account and the pool total.
- `RewardAccrualEngine` owns the reward accumulator, the emission rate and
  per-account settlement records, and reads the total from the ledger.

Neither touches external balances, clocks or permissions; the imperative shell
in `src/integration/staking_pool.py` wires those in.
"""

from .accrual import RewardAccrualEngine, Savepoint
from .errors import (
    ClockRegression,
    InsufficientExternalBalance,
    InsufficientStake,
    InvalidAmount,
    NothingToClaim,
    Overflow,
    Paused,
    ReentrantCall,
    StakingError,
    StakingInvariantError,
    TransferFailed,
    Unauthorized,
)
from .invariants import check_all
from .ledger import StakeLedger
from .math import MAX_ACCRUAL_WINDOW, MAX_UINT256, PRECISION, max_reward_rate
from .state import initial_global_state, state_from_dict, state_to_dict
from .types import (
    AccountState,
    AccrualState,
    Action,
    ActionParams,
    Event,
    GlobalState,
    Receipt,
    RewardCheckpoint,
    StepResult,
)

__all__ = [
    "RewardAccrualEngine",
    "Savepoint",
    "StakeLedger",
    "check_all",
    "max_reward_rate",
    "initial_global_state",
    "state_from_dict",
    "state_to_dict",
    "MAX_ACCRUAL_WINDOW",
    "MAX_UINT256",
    "PRECISION",
    "AccountState",
    "AccrualState",
    "Action",
    "ActionParams",
    "Event",
    "GlobalState",
    "Receipt",
    "RewardCheckpoint",
    "StepResult",
    "StakingError",
    "InvalidAmount",
    "InsufficientStake",
    "InsufficientExternalBalance",
    "NothingToClaim",
    "TransferFailed",
    "Overflow",
    "Unauthorized",
    "Paused",
    "ReentrantCall",
    "ClockRegression",
    "StakingInvariantError",
]
