"""
Core staking algorithms
"""

from .staking import (
    RewardAccrualEngine,
    StakeLedger,
    StakingError,
    check_all,
    state_from_dict,
    state_to_dict,
)

__all__ = [
    "RewardAccrualEngine",
    "StakeLedger",
    "StakingError",
    "check_all",
    "state_from_dict",
    "state_to_dict",
]
