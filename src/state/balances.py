"""
External asset balance tracking for the staked token.

Implements BalanceTable[Account] -> Amount, the backing store of the in-memory
asset-transfer collaborator.
"""

from typing import Dict, Optional


# Type aliases
Account = str
Amount = int  # Non-negative integer (arbitrary precision)


class BalanceTable:
    """
    Balance table mapping account -> amount for a single asset.

    Note: this class stores balances in a plain dict. Do not rely on dict
    iteration order; callers should sort keys explicitly when they need a
    stable ordering (see `get_all_balances`).
    """

    def __init__(self, initial: Optional[Dict[Account, Amount]] = None):
        """Initialize the table, optionally seeded with starting balances."""
        self._balances: Dict[Account, Amount] = {}
        for account, amount in (initial or {}).items():
            self.set(account, amount)

    def get(self, account: Account) -> Amount:
        """Get balance for account. Returns 0 if not found."""
        return self._balances.get(account, 0)

    def set(self, account: Account, amount: Amount) -> None:
        """
        Set balance for account.

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop(account, None)
        else:
            self._balances[account] = amount

    def add(self, account: Account, delta: Amount) -> None:
        """
        Add delta to balance (delta may be negative).

        Raises:
            ValueError: If resulting balance would be negative
        """
        current = self.get(account)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(account, new_balance)

    def subtract(self, account: Account, delta: Amount) -> None:
        """
        Subtract a non-negative delta from balance.

        Raises:
            ValueError: If delta is negative or insufficient balance
        """
        if delta < 0:
            raise ValueError(f"Delta must be non-negative: {delta}")
        self.add(account, -delta)

    def move(self, src: Account, dst: Account, amount: Amount) -> None:
        """
        Move amount from src to dst; neither side changes on failure.

        Raises:
            ValueError: If amount is negative or src has insufficient balance
        """
        if amount < 0:
            raise ValueError(f"Amount must be non-negative: {amount}")
        self.subtract(src, amount)
        self.add(dst, amount)

    def total_supply(self) -> Amount:
        return sum(self._balances.values())

    def get_all_balances(self) -> Dict[Account, Amount]:
        """Return all non-zero balances, sorted by account."""
        return {k: self._balances[k] for k in sorted(self._balances)}

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
