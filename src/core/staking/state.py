"""State construction and serialization for the staking kernel.

`state_to_dict()` flattens a ledger + engine pair into plain JSON-friendly
types; `state_from_dict()` rebuilds a fresh pair and refuses anything that
would violate an invariant.

Round-trip property (tested): `state_to_dict(*state_from_dict(state_to_dict(l, e))) == state_to_dict(l, e)`.
"""

from __future__ import annotations

from typing import Any, Mapping

from .accrual import RewardAccrualEngine
from .errors import StakingInvariantError
from .invariants import check_all
from .ledger import StakeLedger
from .math import is_uint
from .types import AccountState, AccrualState, GlobalState, RewardCheckpoint

GLOBAL_VAR_NAMES: tuple[str, ...] = tuple(AccrualState.__dataclass_fields__)
ACCOUNT_VAR_NAMES: tuple[str, ...] = tuple(AccountState.__dataclass_fields__)


def initial_global_state(start_time: int = 0, reward_rate: int = 0) -> GlobalState:
    """Global state of a freshly created pool."""
    return GlobalState(
        total_staked=0,
        reward_rate=reward_rate,
        reward_per_stake_accumulated=0,
        last_accrual_time=start_time,
    )


def global_state_of(ledger: StakeLedger, engine: RewardAccrualEngine) -> GlobalState:
    s = engine.state
    return GlobalState(
        total_staked=ledger.total_principal(),
        reward_rate=s.reward_rate,
        reward_per_stake_accumulated=s.reward_per_stake_accumulated,
        last_accrual_time=s.last_accrual_time,
    )


def account_state_of(ledger: StakeLedger, engine: RewardAccrualEngine, account: str) -> AccountState:
    cp = engine.checkpoint_of(account)
    return AccountState(
        principal=ledger.principal_of(account),
        reward_snapshot=cp.reward_snapshot,
        claimable_reward=cp.claimable_reward,
    )


def state_to_dict(ledger: StakeLedger, engine: RewardAccrualEngine) -> dict[str, Any]:
    """Serialize the pool bookkeeping to a plain dict."""
    accounts = set(ledger.get_all_principals()) | set(engine.get_all_checkpoints())
    out: dict[str, Any] = {
        "precision": engine.precision,
        "max_accrual_window": engine.max_accrual_window,
        "minimum_stake_amount": ledger.minimum_stake_amount,
        "total_staked": ledger.total_principal(),
    }
    for name in GLOBAL_VAR_NAMES:
        out[name] = getattr(engine.state, name)
    out["accounts"] = {
        account: {
            name: getattr(account_state_of(ledger, engine, account), name)
            for name in ACCOUNT_VAR_NAMES
        }
        for account in sorted(accounts)
    }
    return out


def _uint(d: Mapping[str, Any], name: str) -> int:
    val = d[name]
    if not is_uint(val):
        raise TypeError(f"state var {name!r} must be a non-negative int, got {val!r}")
    return int(val)  # normalize int subclasses


def state_from_dict(d: Mapping[str, Any]) -> tuple[StakeLedger, RewardAccrualEngine]:
    """Rebuild a ledger + engine pair. Raises KeyError on missing fields."""
    ledger = StakeLedger(minimum_stake_amount=_uint(d, "minimum_stake_amount"))
    accrual = AccrualState(**{name: _uint(d, name) for name in GLOBAL_VAR_NAMES})
    engine = RewardAccrualEngine(
        ledger,
        start_time=accrual.last_accrual_time,
        reward_rate=accrual.reward_rate,
        precision=_uint(d, "precision"),
        max_accrual_window=_uint(d, "max_accrual_window"),
    )

    accounts = d["accounts"]
    if not isinstance(accounts, Mapping):
        raise TypeError("state var 'accounts' must be a mapping")
    principals: dict[str, int] = {}
    checkpoints: dict[str, RewardCheckpoint] = {}
    for account, fields in accounts.items():
        if not isinstance(account, str):
            raise TypeError(f"account id must be a string, got {account!r}")
        principals[account] = _uint(fields, "principal")
        checkpoints[account] = RewardCheckpoint(
            reward_snapshot=_uint(fields, "reward_snapshot"),
            claimable_reward=_uint(fields, "claimable_reward"),
        )
    ledger.load(principals)
    engine.load(accrual, checkpoints)

    if ledger.total_principal() != _uint(d, "total_staked"):
        raise StakingInvariantError(["inv_total_matches_sum"])
    violations = check_all(ledger, engine)
    if violations:
        raise StakingInvariantError(violations)
    return ledger, engine
