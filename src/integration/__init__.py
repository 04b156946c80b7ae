"""
Staking pool integration layer (collaborators, configuration, entry points)
"""

from .collaborators import (
    AssetTransfer,
    Authorization,
    Clock,
    InMemoryAssetTransfer,
    ManualClock,
    OperationalGate,
    OperatorSet,
    PauseSwitch,
    ReentrancyGuard,
    ReentrancyLock,
    SystemClock,
    TransferError,
)
from .config import StakingConfig, load_config
from .staking_pool import StakingPool

__all__ = [
    "AssetTransfer",
    "Authorization",
    "Clock",
    "InMemoryAssetTransfer",
    "ManualClock",
    "OperationalGate",
    "OperatorSet",
    "PauseSwitch",
    "ReentrancyGuard",
    "ReentrancyLock",
    "SystemClock",
    "TransferError",
    "StakingConfig",
    "load_config",
    "StakingPool",
]
