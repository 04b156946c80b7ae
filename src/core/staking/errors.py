"""Exception types for the staking kernel and its shell.

Every error carries a stable ``code`` string. ``StakingPool.step()`` reports the
code as the rejection reason; ``step_or_raise()`` and the direct entry points
raise the exception itself.
"""

from __future__ import annotations


class StakingError(Exception):
    """Base class for every rejection the staking pool can produce."""

    code: str = "staking_error"


class InvalidAmount(StakingError):
    """Zero, negative, non-int, or below-minimum amount."""

    code = "invalid_amount"


class InsufficientStake(StakingError):
    """Withdrawal larger than the account's principal."""

    code = "insufficient_stake"


class InsufficientExternalBalance(StakingError):
    """Caller's external asset balance is below the requested deposit."""

    code = "insufficient_external_balance"


class NothingToClaim(StakingError):
    code = "nothing_to_claim"


class TransferFailed(StakingError):
    """The asset-transfer collaborator reported failure; nothing was applied."""

    code = "transfer_failed"


class Overflow(StakingError):
    """A checked arithmetic step left the uint256 range."""

    code = "overflow"


class Unauthorized(StakingError):
    code = "unauthorized"


class Paused(StakingError):
    code = "paused"


class ReentrantCall(StakingError):
    """A guarded entry point was entered while another was still running."""

    code = "reentrant_call"


class ClockRegression(StakingError):
    """The clock reported a time earlier than the last accrual."""

    code = "clock_regression"


class StakingInvariantError(StakingError):
    """Raised when pool state violates one or more invariants."""

    code = "invariant"

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")
