"""
Staking pool: imperative shell around the staking kernel.

This wires `StakeLedger` + `RewardAccrualEngine` to the collaborators in
`collaborators.py` and exposes the public entry points:

- user operations: `stake`, `unstake`, `claim` (pause-gated, re-entrancy guarded),
- operator operations: `set_reward_rate`, `pause`, `resume` (not pause-gated;
  refused while a user operation holds the guard),
- views: `principal_of`, `claimable_of`, `earned`, `account_state`, `global_state`, ...,
- `step()` / `step_or_raise()`: dispatch over `ActionParams`.

Every mutating call follows the same order:

1. gate checks and every precondition (no mutation yet),
2. `accrue(now)` then `settle(caller)` against the pre-call principal,
3. the external transfer, if any,
4. the local principal / claimable update.

A failure in steps 2-3 restores the engine fields captured before step 2, so
a rejected call leaves no trace. The ledger is only touched in step 4.
"""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Mapping, Optional

from ..core.staking.accrual import RewardAccrualEngine
from ..core.staking.errors import (
    InsufficientExternalBalance,
    InvalidAmount,
    NothingToClaim,
    Paused,
    ReentrantCall,
    StakingError,
    TransferFailed,
    Unauthorized,
)
from ..core.staking.invariants import check_all
from ..core.staking.ledger import StakeLedger
from ..core.staking.math import is_uint
from ..core.staking.state import account_state_of, global_state_of, state_from_dict, state_to_dict
from ..core.staking.types import (
    Account,
    AccountState,
    Action,
    ActionParams,
    Event,
    GlobalState,
    Receipt,
    StepResult,
)
from .collaborators import (
    AssetTransfer,
    Authorization,
    Clock,
    OperationalGate,
    PauseSwitch,
    ReentrancyGuard,
    ReentrancyLock,
    TransferError,
)
from .config import StakingConfig

logger = logging.getLogger(__name__)


def _logs_rejection(action: Action) -> Callable:
    def decorate(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(self: "StakingPool", caller: Account, *args: Any) -> Receipt:
            try:
                return fn(self, caller, *args)
            except StakingError as exc:
                logger.info("%s by %r rejected: %s (%s)", action.value, caller, exc.code, exc)
                raise
        return wrapper
    return decorate


class StakingPool:
    def __init__(
        self,
        *,
        assets: AssetTransfer,
        clock: Clock,
        authorization: Authorization,
        gate: Optional[OperationalGate] = None,
        guard: Optional[ReentrancyGuard] = None,
        config: StakingConfig = StakingConfig(),
        ledger: Optional[StakeLedger] = None,
        engine: Optional[RewardAccrualEngine] = None,
    ) -> None:
        self.assets = assets
        self.clock = clock
        self.authorization = authorization
        self.gate = gate if gate is not None else PauseSwitch()
        self.guard = guard if guard is not None else ReentrancyLock()
        self.config = config

        if (ledger is None) != (engine is None):
            raise ValueError("ledger and engine must be given together")
        if ledger is None:
            start = config.start_time if config.start_time is not None else clock.current_time()
            ledger = StakeLedger(minimum_stake_amount=config.minimum_stake_amount)
            engine = RewardAccrualEngine(
                ledger,
                start_time=start,
                reward_rate=config.initial_reward_rate,
                precision=config.precision,
                max_accrual_window=config.max_accrual_window,
            )
        self.ledger = ledger
        self.engine = engine

    @classmethod
    def from_snapshot(cls, data: Mapping[str, Any], **collaborators: Any) -> "StakingPool":
        """Rebuild a pool from `snapshot()` output plus fresh collaborators."""
        ledger, engine = state_from_dict(data)
        config = StakingConfig(
            precision=engine.precision,
            minimum_stake_amount=ledger.minimum_stake_amount,
            initial_reward_rate=engine.state.reward_rate,
            max_accrual_window=engine.max_accrual_window,
            start_time=engine.state.last_accrual_time,
        )
        return cls(config=config, ledger=ledger, engine=engine, **collaborators)

    # -- Helpers -------------------------------------------------------------

    def _now(self) -> int:
        now = self.clock.current_time()
        # Surfaces ClockRegression / Overflow before anything is mutated.
        self.engine.projected_accumulator(now)
        return now

    def _require_open(self) -> None:
        if self.gate.is_paused():
            raise Paused("pool is paused")

    def _require_operator(self, caller: Account) -> None:
        if not self.authorization.is_operator(caller):
            raise Unauthorized(f"{caller!r} is not an operator")

    def _require_unguarded(self) -> None:
        # Operator calls made from inside a transfer callback would be undone
        # by the outer operation's rollback.
        if self.guard.entered:
            raise ReentrantCall("operator action during a guarded operation")

    @contextmanager
    def _atomic(self, account: Optional[Account]) -> Iterator[None]:
        sp = self.engine.savepoint(account)
        try:
            yield
        except TransferError as exc:
            self.engine.rollback(sp)
            raise TransferFailed(str(exc)) from exc
        except StakingError:
            self.engine.rollback(sp)
            raise

    def _receipt(self, event: Event, account: Account, now: int, amount: int = 0) -> Receipt:
        return Receipt(
            event=event,
            account=account,
            time=now,
            amount=amount,
            principal_after=self.ledger.principal_of(account),
            claimable_after=self.engine.claimable_of(account),
            total_staked_after=self.ledger.total_principal(),
            accumulator_after=self.engine.state.reward_per_stake_accumulated,
        )

    # -- User operations -----------------------------------------------------

    @_logs_rejection(Action.STAKE)
    def stake(self, caller: Account, amount: int) -> Receipt:
        self._require_open()
        with self.guard:
            self.ledger.validate_deposit(caller, amount)
            now = self._now()
            external = self.assets.balance_of(caller)
            if external < amount:
                raise InsufficientExternalBalance(
                    f"{caller!r} holds {external}, cannot stake {amount}"
                )
            with self._atomic(caller):
                self.engine.accrue(now)
                self.engine.settle(caller)
                self.assets.transfer_in(caller, amount)
            self.ledger.deposit(caller, amount)
            logger.debug("stake %r amount=%d t=%d", caller, amount, now)
            return self._receipt(Event.STAKED, caller, now, amount)

    @_logs_rejection(Action.UNSTAKE)
    def unstake(self, caller: Account, amount: int) -> Receipt:
        self._require_open()
        with self.guard:
            self.ledger.validate_withdraw(caller, amount)
            now = self._now()
            with self._atomic(caller):
                self.engine.accrue(now)
                self.engine.settle(caller)
                self.assets.transfer_out(caller, amount)
            self.ledger.withdraw(caller, amount)
            logger.debug("unstake %r amount=%d t=%d", caller, amount, now)
            return self._receipt(Event.UNSTAKED, caller, now, amount)

    @_logs_rejection(Action.CLAIM)
    def claim(self, caller: Account) -> Receipt:
        self._require_open()
        with self.guard:
            now = self._now()
            owed = self.engine.preview_pending(caller, now)
            if owed == 0:
                raise NothingToClaim(f"{caller!r} has no claimable reward")
            # Custody also holds every staker's principal; only the excess may pay rewards.
            reserve = self.reward_reserve()
            if owed > reserve:
                raise TransferFailed(
                    f"reward reserve {reserve} cannot cover claim of {owed} by {caller!r}"
                )
            with self._atomic(caller):
                self.engine.accrue(now)
                self.engine.settle(caller)
                amount = self.engine.claimable_of(caller)
                self.assets.transfer_out(caller, amount)
            self.engine.take_claimable(caller)
            logger.debug("claim %r amount=%d t=%d", caller, amount, now)
            return self._receipt(Event.REWARD_CLAIMED, caller, now, amount)

    # -- Operator operations -------------------------------------------------

    @_logs_rejection(Action.SET_REWARD_RATE)
    def set_reward_rate(self, caller: Account, new_rate: int) -> Receipt:
        self._require_operator(caller)
        self._require_unguarded()
        if not is_uint(new_rate):
            raise InvalidAmount(f"reward rate must be a non-negative int: {new_rate!r}")
        now = self._now()
        with self._atomic(None):
            old = self.engine.set_rate(new_rate, now)
        logger.info("reward rate %d -> %d at t=%d by %r", old, new_rate, now, caller)
        return self._receipt(Event.REWARD_RATE_SET, caller, now, new_rate)

    @_logs_rejection(Action.PAUSE)
    def pause(self, caller: Account) -> Receipt:
        self._require_operator(caller)
        self._require_unguarded()
        self.gate.pause()
        logger.info("pool paused by %r", caller)
        return self._receipt(Event.PAUSED, caller, self.clock.current_time())

    @_logs_rejection(Action.RESUME)
    def resume(self, caller: Account) -> Receipt:
        self._require_operator(caller)
        self._require_unguarded()
        self.gate.resume()
        logger.info("pool resumed by %r", caller)
        return self._receipt(Event.RESUMED, caller, self.clock.current_time())

    # -- Views ---------------------------------------------------------------

    def principal_of(self, account: Account) -> int:
        return self.ledger.principal_of(account)

    def total_staked(self) -> int:
        return self.ledger.total_principal()

    def claimable_of(self, account: Account) -> int:
        """Settled reward only; see `earned()` for the up-to-now figure."""
        return self.engine.claimable_of(account)

    def earned(self, account: Account) -> int:
        """What `claim()` would pay out right now."""
        return self.engine.preview_pending(account, self.clock.current_time())

    def reward_rate(self) -> int:
        return self.engine.state.reward_rate

    def reward_reserve(self) -> int:
        """Custody balance not backing staked principal; the most claims may pay out."""
        return max(0, self.assets.custody_balance() - self.ledger.total_principal())

    def is_paused(self) -> bool:
        return self.gate.is_paused()

    def account_state(self, account: Account) -> AccountState:
        return account_state_of(self.ledger, self.engine, account)

    def global_state(self) -> GlobalState:
        return global_state_of(self.ledger, self.engine)

    def invariant_violations(self) -> list[str]:
        return check_all(self.ledger, self.engine, now=self.clock.current_time())

    def snapshot(self) -> Dict[str, Any]:
        return state_to_dict(self.ledger, self.engine)

    # -- Dispatch ------------------------------------------------------------

    def step(self, params: ActionParams) -> StepResult:
        """Run one action. Never raises `StakingError`; rejections come back as codes."""
        try:
            return self.step_or_raise(params)
        except StakingError as exc:
            return StepResult(accepted=False, rejection=exc.code)

    def step_or_raise(self, params: ActionParams) -> StepResult:
        handler = _DISPATCH.get(params.action)
        if handler is None:
            raise ValueError(f"unknown action: {params.action!r}")
        return StepResult(accepted=True, receipt=handler(self, params))


_DISPATCH: Dict[Action, Callable[[StakingPool, ActionParams], Receipt]] = {
    Action.STAKE: lambda pool, p: pool.stake(p.caller, p.amount),
    Action.UNSTAKE: lambda pool, p: pool.unstake(p.caller, p.amount),
    Action.CLAIM: lambda pool, p: pool.claim(p.caller),
    Action.SET_REWARD_RATE: lambda pool, p: pool.set_reward_rate(p.caller, p.new_rate),
    Action.PAUSE: lambda pool, p: pool.pause(p.caller),
    Action.RESUME: lambda pool, p: pool.resume(p.caller),
}
