"""Tests for src/core/staking/math.py — checked and fixed-point arithmetic."""

import pytest

from src.core.staking.errors import InsufficientStake, Overflow, StakingInvariantError
from src.core.staking.math import (
    MAX_UINT256,
    PRECISION,
    accumulator_delta,
    checked_add,
    checked_mul,
    checked_sub,
    is_uint,
    max_reward_rate,
    pending_reward,
)


# ---------------------------------------------------------------------------
# is_uint
# ---------------------------------------------------------------------------

class TestIsUint:
    def test_zero_and_positive(self):
        assert is_uint(0)
        assert is_uint(7)

    def test_negative(self):
        assert not is_uint(-1)

    def test_bool_rejected(self):
        assert not is_uint(True)

    def test_float_rejected(self):
        assert not is_uint(1.0)


# ---------------------------------------------------------------------------
# Checked arithmetic
# ---------------------------------------------------------------------------

class TestChecked:
    def test_add_at_boundary(self):
        assert checked_add(MAX_UINT256 - 1, 1) == MAX_UINT256

    def test_add_overflow(self):
        with pytest.raises(Overflow):
            checked_add(MAX_UINT256, 1)

    def test_sub_basic(self):
        assert checked_sub(10, 4) == 6

    def test_sub_to_zero(self):
        assert checked_sub(4, 4) == 0

    def test_sub_underflow(self):
        with pytest.raises(InsufficientStake):
            checked_sub(3, 4)

    def test_mul_overflow(self):
        with pytest.raises(Overflow):
            checked_mul(2**200, 2**60)


# ---------------------------------------------------------------------------
# Accumulator helpers
# ---------------------------------------------------------------------------

class TestAccumulatorDelta:
    def test_single_staker(self):
        # rate 10 for 10 units over 100 staked -> 1.0 reward per stake unit
        assert accumulator_delta(10, 10, 100) == PRECISION

    def test_multiplies_before_dividing(self):
        # rate / total alone would floor to 0
        assert accumulator_delta(1, 1, 3, precision=1_000) == 333

    def test_zero_rate(self):
        assert accumulator_delta(0, 50, 100) == 0

    def test_empty_pool_refused(self):
        with pytest.raises(ValueError):
            accumulator_delta(10, 10, 0)

    def test_overflow(self):
        with pytest.raises(Overflow):
            accumulator_delta(MAX_UINT256, 2, 1)


class TestMaxRewardRate:
    def test_window_of_emission_fits(self):
        bound = max_reward_rate(10**6, 1_000)
        assert bound * 1_000 * 10**6 <= MAX_UINT256
        assert (bound + 1) * 1_000 * 10**6 > MAX_UINT256
        # the largest delta a bounded rate can produce, on a one-unit pool
        assert accumulator_delta(bound, 1_000, 1, 10**6) <= MAX_UINT256

    def test_shrinks_with_window(self):
        assert max_reward_rate(PRECISION, 10) > max_reward_rate(PRECISION, 10**6)


class TestPendingReward:
    def test_basic(self):
        assert pending_reward(100, PRECISION, 0) == 100

    def test_since_snapshot(self):
        assert pending_reward(100, 3 * PRECISION, PRECISION) == 200

    def test_floor(self):
        assert pending_reward(1, PRECISION - 1, 0) == 0

    def test_zero_principal(self):
        assert pending_reward(0, 5 * PRECISION, 0) == 0

    def test_snapshot_ahead_is_invariant_error(self):
        with pytest.raises(StakingInvariantError):
            pending_reward(1, 5, 6)
