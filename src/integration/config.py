"""
Staking pool configuration.

`StakingConfig` is a frozen dataclass validated on construction; hosts usually
load it from YAML with `load_config()`:

    staking:
      precision: 1000000000000000000
      minimum_stake_amount: 100
      initial_reward_rate: 10
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from ..core.staking.math import MAX_ACCRUAL_WINDOW, MAX_UINT256, PRECISION, max_reward_rate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StakingConfig:
    # Fixed-point scale of the reward accumulator.
    precision: int = PRECISION
    # Smallest accepted single deposit (must be >= 1).
    minimum_stake_amount: int = 1
    # Emission rate at creation, reward units per time unit.
    initial_reward_rate: int = 0
    # Longest expected gap between two accruals; bounds the reward rate.
    max_accrual_window: int = MAX_ACCRUAL_WINDOW
    # Accrual start; None means "the clock's current time at creation".
    start_time: Optional[int] = None

    def __post_init__(self) -> None:
        for name, v in (
            ("precision", self.precision),
            ("minimum_stake_amount", self.minimum_stake_amount),
            ("initial_reward_rate", self.initial_reward_rate),
            ("max_accrual_window", self.max_accrual_window),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if not (0 <= v <= MAX_UINT256):
                raise ValueError(f"{name} must be in [0, 2**256 - 1]: {v}")
        if self.precision == 0:
            raise ValueError("precision must be positive")
        if self.minimum_stake_amount == 0:
            raise ValueError("minimum_stake_amount must be positive")
        if self.max_accrual_window == 0:
            raise ValueError("max_accrual_window must be positive")
        if self.initial_reward_rate > max_reward_rate(self.precision, self.max_accrual_window):
            raise ValueError(
                f"initial_reward_rate {self.initial_reward_rate} overflows a "
                f"{self.max_accrual_window} time-unit accrual window"
            )
        if self.start_time is not None:
            if not isinstance(self.start_time, int) or isinstance(self.start_time, bool):
                raise TypeError("start_time must be an int or None")
            if self.start_time < 0:
                raise ValueError(f"start_time must be non-negative: {self.start_time}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "StakingConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown staking config keys: {', '.join(unknown)}")
        return cls(**dict(data))


def load_config(path: Union[str, Path]) -> StakingConfig:
    """Load a `StakingConfig` from a YAML file.

    The file may hold the fields at top level or under a `staking:` key.
    An empty file yields the defaults.
    """
    p = Path(path)
    obj = yaml.safe_load(p.read_text(encoding="utf-8"))
    if obj is None:
        obj = {}
    if not isinstance(obj, Mapping):
        raise TypeError("staking config YAML must be a mapping")
    if "staking" in obj:
        obj = obj["staking"]
        if not isinstance(obj, Mapping):
            raise TypeError("'staking' section must be a mapping")
    cfg = StakingConfig.from_mapping(obj)
    logger.info(
        "loaded staking config from %s (minimum_stake=%s, rate=%s)",
        p, cfg.minimum_stake_amount, cfg.initial_reward_rate,
    )
    return cfg
