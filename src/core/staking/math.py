"""Pure arithmetic for the staking accrual kernel.

Every function is stateless and operates on plain Python ints.

Python ints never wrap, so "overflow" here means leaving the unsigned 256-bit
range. The checked helpers raise instead of returning an out-of-range value.
Integer division is `//` (floor); all quantities are non-negative so floor and
truncation agree.
"""

from __future__ import annotations

from .errors import InsufficientStake, Overflow, StakingInvariantError

PRECISION: int = 10**18
MAX_UINT256: int = 2**256 - 1
# Longest gap between two accruals the rate bound is sized for.
MAX_ACCRUAL_WINDOW: int = 10**12


def is_uint(x: object) -> bool:
    """True for a non-negative int that is not a bool."""
    return isinstance(x, int) and not isinstance(x, bool) and x >= 0


# -- Checked arithmetic ------------------------------------------------------

def checked_add(a: int, b: int, *, what: str = "value") -> int:
    out = a + b
    if out > MAX_UINT256:
        raise Overflow(f"{what} exceeds uint256")
    return out


def checked_sub(a: int, b: int, *, what: str = "value") -> int:
    """``a - b``; a negative result raises ``InsufficientStake``."""
    if b > a:
        raise InsufficientStake(f"{what}: {b} > {a}")
    return a - b


def checked_mul(a: int, b: int, *, what: str = "value") -> int:
    out = a * b
    if out > MAX_UINT256:
        raise Overflow(f"{what} exceeds uint256")
    return out


# -- Accumulator helpers -----------------------------------------------------

def max_reward_rate(precision: int = PRECISION, max_accrual_window: int = MAX_ACCRUAL_WINDOW) -> int:
    """Largest rate whose scaled emission over *max_accrual_window* fits in uint256."""
    return MAX_UINT256 // (precision * max_accrual_window)


def accumulator_delta(rate: int, elapsed: int, total_staked: int, precision: int = PRECISION) -> int:
    """Reward per stake unit (scaled) emitted over *elapsed* time units.

    ``rate * elapsed * precision // total_staked``: multiply before dividing so
    no precision is lost before the single floor division.
    """
    if total_staked <= 0:
        raise ValueError("accumulator_delta requires a non-empty pool")
    emitted = checked_mul(rate, elapsed, what="emission")
    scaled = checked_mul(emitted, precision, what="scaled emission")
    return scaled // total_staked


def pending_reward(principal: int, accumulator: int, snapshot: int, precision: int = PRECISION) -> int:
    """Reward earned by *principal* since *snapshot*: ``principal * (acc - snapshot) // precision``."""
    if snapshot > accumulator:
        raise StakingInvariantError(["inv_snapshot_le_accumulator"])
    growth = accumulator - snapshot
    return checked_mul(principal, growth, what="pending reward") // precision
