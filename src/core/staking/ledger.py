"""
Principal bookkeeping for the staking pool.

`StakeLedger` is the authoritative record of each account's staked principal
and of the pool total. It knows nothing about rewards or time.
"""

from __future__ import annotations

from typing import Dict, Iterator

from .errors import InsufficientStake, InvalidAmount
from .math import checked_add, checked_sub, is_uint
from .types import Account


class StakeLedger:
    """
    Mutable table mapping account -> principal, plus the running total.

    Notes:
    - ``total_principal() == sum(principal_of(a) for a in accounts())`` always.
    - Accounts are created on first deposit and never removed; a fully
      withdrawn account keeps a zero entry.
    - ``validate_*`` performs every check ``deposit``/``withdraw`` would, without
      mutating, so callers can reject before touching any other state.
    """

    def __init__(self, minimum_stake_amount: int = 1) -> None:
        if not is_uint(minimum_stake_amount) or minimum_stake_amount == 0:
            raise ValueError(f"minimum_stake_amount must be a positive int: {minimum_stake_amount!r}")
        self.minimum_stake_amount = minimum_stake_amount
        self._principal: Dict[Account, int] = {}
        self._total = 0

    def principal_of(self, account: Account) -> int:
        """Principal for *account*. Returns 0 if never staked."""
        return self._principal.get(account, 0)

    def total_principal(self) -> int:
        return self._total

    def validate_deposit(self, account: Account, amount: int) -> tuple[int, int]:
        """Return ``(new_principal, new_total)`` for a deposit, or raise."""
        if not is_uint(amount) or amount == 0:
            raise InvalidAmount(f"deposit amount must be a positive int: {amount!r}")
        if amount < self.minimum_stake_amount:
            raise InvalidAmount(
                f"deposit amount {amount} is below the minimum stake {self.minimum_stake_amount}"
            )
        new_principal = checked_add(self.principal_of(account), amount, what="principal")
        new_total = checked_add(self._total, amount, what="total staked")
        return new_principal, new_total

    def validate_withdraw(self, account: Account, amount: int) -> tuple[int, int]:
        """Return ``(new_principal, new_total)`` for a withdrawal, or raise."""
        if not is_uint(amount) or amount == 0:
            raise InvalidAmount(f"withdraw amount must be a positive int: {amount!r}")
        current = self.principal_of(account)
        if amount > current:
            raise InsufficientStake(f"withdraw {amount} exceeds principal {current}")
        new_principal = checked_sub(current, amount, what="principal")
        new_total = checked_sub(self._total, amount, what="total staked")
        return new_principal, new_total

    def deposit(self, account: Account, amount: int) -> int:
        """Add *amount* to the account's principal. Returns the new principal."""
        new_principal, new_total = self.validate_deposit(account, amount)
        self._principal[account] = new_principal
        self._total = new_total
        return new_principal

    def withdraw(self, account: Account, amount: int) -> int:
        """Remove *amount* from the account's principal. Returns the new principal."""
        new_principal, new_total = self.validate_withdraw(account, amount)
        self._principal[account] = new_principal
        self._total = new_total
        return new_principal

    def accounts(self) -> Iterator[Account]:
        """Known accounts in sorted order."""
        return iter(sorted(self._principal))

    def get_all_principals(self) -> Dict[Account, int]:
        """Return a copy of the account -> principal table."""
        return dict(self._principal)

    def load(self, principals: Dict[Account, int]) -> None:
        """Replace the whole table (used when restoring a snapshot)."""
        total = 0
        table: Dict[Account, int] = {}
        for account, amount in principals.items():
            if not is_uint(amount):
                raise ValueError(f"principal for {account!r} must be a non-negative int: {amount!r}")
            table[account] = amount
            total = checked_add(total, amount, what="total staked")
        self._principal = table
        self._total = total

    def __repr__(self) -> str:
        return f"StakeLedger({len(self._principal)} accounts, total={self._total})"
