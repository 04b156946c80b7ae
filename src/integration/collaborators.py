"""
Collaborator interfaces for the staking pool (imperative shell).

The staking kernel never moves tokens, reads clocks or checks permissions
itself. `StakingPool` receives one object per concern:

- `AssetTransfer`: debit/credit of the external token ledger,
- `Authorization`: who may run operator actions,
- `OperationalGate`: the emergency pause switch,
- `Clock`: current time (block height or seconds; the pool does not care),
- `ReentrancyGuard`: rejects nested entry into guarded operations.

Each interface comes with a small in-memory implementation used by tests and
single-process hosts.
"""

from __future__ import annotations

import time
from typing import Iterable, Optional

from ..core.staking.errors import ReentrantCall
from ..state.balances import Account, Amount, BalanceTable

DEFAULT_CUSTODY_ACCOUNT: Account = "staking-pool"


class TransferError(ValueError):
    """Raised by an `AssetTransfer` when a debit or credit cannot be applied."""


# -- Asset transfer ----------------------------------------------------------

class AssetTransfer:
    """Interface for moving the staked asset in and out of pool custody."""

    def balance_of(self, account: Account) -> Amount:
        raise NotImplementedError

    def custody_balance(self) -> Amount:
        """Everything the pool holds: staked principal plus reward funding."""
        raise NotImplementedError

    def transfer_in(self, src: Account, amount: Amount) -> None:
        """Move *amount* from *src* into custody. Raises `TransferError`."""
        raise NotImplementedError

    def transfer_out(self, dst: Account, amount: Amount) -> None:
        """Move *amount* from custody to *dst*. Raises `TransferError`."""
        raise NotImplementedError


class InMemoryAssetTransfer(AssetTransfer):
    """
    `AssetTransfer` over a `BalanceTable`.

    Staked principal and reward funding share the custody balance; the operator
    funds rewards with `fund_rewards()` (or by crediting the custody account).
    """

    def __init__(
        self,
        balances: Optional[BalanceTable] = None,
        custody_account: Account = DEFAULT_CUSTODY_ACCOUNT,
    ) -> None:
        self.balances = balances if balances is not None else BalanceTable()
        self.custody_account = custody_account

    def balance_of(self, account: Account) -> Amount:
        return self.balances.get(account)

    def custody_balance(self) -> Amount:
        return self.balances.get(self.custody_account)

    def fund_rewards(self, amount: Amount) -> None:
        self.balances.add(self.custody_account, amount)

    def transfer_in(self, src: Account, amount: Amount) -> None:
        try:
            self.balances.move(src, self.custody_account, amount)
        except ValueError as exc:
            raise TransferError(f"transfer_in from {src!r} failed: {exc}") from exc

    def transfer_out(self, dst: Account, amount: Amount) -> None:
        try:
            self.balances.move(self.custody_account, dst, amount)
        except ValueError as exc:
            raise TransferError(f"transfer_out to {dst!r} failed: {exc}") from exc


# -- Authorization -----------------------------------------------------------

class Authorization:
    def is_operator(self, caller: Account) -> bool:
        raise NotImplementedError


class OperatorSet(Authorization):
    """Fixed set of operator accounts."""

    def __init__(self, operators: Iterable[Account] = ()) -> None:
        self._operators = frozenset(operators)

    def is_operator(self, caller: Account) -> bool:
        return caller in self._operators


# -- Pause gate --------------------------------------------------------------

class OperationalGate:
    def is_paused(self) -> bool:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    def resume(self) -> None:
        raise NotImplementedError


class PauseSwitch(OperationalGate):
    def __init__(self, paused: bool = False) -> None:
        self._paused = bool(paused)

    def is_paused(self) -> bool:
        return self._paused

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False


# -- Clock -------------------------------------------------------------------

class Clock:
    def current_time(self) -> int:
        raise NotImplementedError


class ManualClock(Clock):
    """Caller-driven clock; never moves backwards."""

    def __init__(self, start: int = 0) -> None:
        if not isinstance(start, int) or isinstance(start, bool) or start < 0:
            raise ValueError(f"start must be a non-negative int: {start!r}")
        self._now = start

    def current_time(self) -> int:
        return self._now

    def advance(self, delta: int = 1) -> int:
        if not isinstance(delta, int) or isinstance(delta, bool) or delta < 0:
            raise ValueError(f"delta must be a non-negative int: {delta!r}")
        self._now += delta
        return self._now

    def set(self, t: int) -> None:
        if not isinstance(t, int) or isinstance(t, bool) or t < self._now:
            raise ValueError(f"clock cannot move from {self._now} to {t!r}")
        self._now = t


class SystemClock(Clock):
    """Integer unix seconds."""

    def current_time(self) -> int:
        return int(time.time())


# -- Re-entrancy guard -------------------------------------------------------

class ReentrancyGuard:
    """Context manager held for the whole duration of a guarded operation."""

    @property
    def entered(self) -> bool:
        raise NotImplementedError

    def __enter__(self) -> "ReentrancyGuard":
        raise NotImplementedError

    def __exit__(self, exc_type, exc, tb) -> None:
        raise NotImplementedError


class ReentrancyLock(ReentrancyGuard):
    def __init__(self) -> None:
        self._entered = False

    @property
    def entered(self) -> bool:
        return self._entered

    def __enter__(self) -> "ReentrancyLock":
        if self._entered:
            raise ReentrantCall("operation already in progress")
        self._entered = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._entered = False
