"""Invariant checkers for the staking pool.

Each function returns True when the invariant holds, and `check_all()` returns
the list of violated invariant IDs (empty = all pass).

These walk every account, so they belong in tests, audits and snapshot
restores, not on the per-operation path.
"""

from __future__ import annotations

from typing import Callable, Optional

from .accrual import RewardAccrualEngine
from .ledger import StakeLedger
from .math import MAX_UINT256


def inv_total_matches_sum(ledger: StakeLedger, engine: RewardAccrualEngine) -> bool:
    return ledger.total_principal() == sum(ledger.get_all_principals().values())


def inv_principal_in_range(ledger: StakeLedger, engine: RewardAccrualEngine) -> bool:
    return all(0 <= p <= MAX_UINT256 for p in ledger.get_all_principals().values())


def inv_snapshot_le_accumulator(ledger: StakeLedger, engine: RewardAccrualEngine) -> bool:
    acc = engine.state.reward_per_stake_accumulated
    return all(cp.reward_snapshot <= acc for cp in engine.get_all_checkpoints().values())


def inv_claimable_nonneg(ledger: StakeLedger, engine: RewardAccrualEngine) -> bool:
    return all(cp.claimable_reward >= 0 for cp in engine.get_all_checkpoints().values())


def inv_global_fields_in_range(ledger: StakeLedger, engine: RewardAccrualEngine) -> bool:
    s = engine.state
    return (
        0 <= s.reward_rate <= MAX_UINT256
        and 0 <= s.reward_per_stake_accumulated <= MAX_UINT256
        and s.last_accrual_time >= 0
    )


# ---------------------------------------------------------------------------
# Registry + check_all
# ---------------------------------------------------------------------------

INVARIANT_REGISTRY: dict[str, Callable[[StakeLedger, RewardAccrualEngine], bool]] = {
    "inv_total_matches_sum": inv_total_matches_sum,
    "inv_principal_in_range": inv_principal_in_range,
    "inv_snapshot_le_accumulator": inv_snapshot_le_accumulator,
    "inv_claimable_nonneg": inv_claimable_nonneg,
    "inv_global_fields_in_range": inv_global_fields_in_range,
}


def check_all(
    ledger: StakeLedger,
    engine: RewardAccrualEngine,
    now: Optional[int] = None,
) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass).

    With *now*, also checks that the last accrual is not in the future.
    """
    violations = [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(ledger, engine)
    ]
    if now is not None and engine.state.last_accrual_time > now:
        violations.append("inv_last_accrual_not_future")
    return violations
