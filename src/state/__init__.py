"""
State tables for the staking pool's external collaborators
"""

from .balances import BalanceTable

__all__ = [
    "BalanceTable",
]
