"""Tests for src/core/staking/ledger.py — principal bookkeeping."""

import pytest

from src.core.staking.errors import InsufficientStake, InvalidAmount, Overflow
from src.core.staking.ledger import StakeLedger
from src.core.staking.math import MAX_UINT256


class TestDeposit:
    def test_basic(self):
        ledger = StakeLedger()
        assert ledger.deposit("alice", 50) == 50
        assert ledger.principal_of("alice") == 50
        assert ledger.total_principal() == 50

    def test_accumulates(self):
        ledger = StakeLedger()
        ledger.deposit("alice", 50)
        ledger.deposit("alice", 25)
        ledger.deposit("bob", 5)
        assert ledger.principal_of("alice") == 75
        assert ledger.total_principal() == 80

    @pytest.mark.parametrize("amount", [0, -1, True, 1.5, "10"])
    def test_invalid_amount(self, amount):
        ledger = StakeLedger()
        with pytest.raises(InvalidAmount):
            ledger.deposit("alice", amount)
        assert ledger.total_principal() == 0

    def test_below_minimum(self):
        ledger = StakeLedger(minimum_stake_amount=100)
        with pytest.raises(InvalidAmount):
            ledger.deposit("alice", 99)
        assert ledger.deposit("alice", 100) == 100

    def test_overflow_leaves_state(self):
        ledger = StakeLedger()
        ledger.deposit("alice", MAX_UINT256)
        with pytest.raises(Overflow):
            ledger.deposit("bob", 1)
        assert ledger.principal_of("bob") == 0
        assert ledger.total_principal() == MAX_UINT256

    def test_bad_minimum(self):
        with pytest.raises(ValueError):
            StakeLedger(minimum_stake_amount=0)


class TestWithdraw:
    def test_partial(self):
        ledger = StakeLedger()
        ledger.deposit("alice", 50)
        assert ledger.withdraw("alice", 20) == 30
        assert ledger.total_principal() == 30

    def test_full_keeps_zero_entry(self):
        ledger = StakeLedger()
        ledger.deposit("alice", 50)
        ledger.withdraw("alice", 50)
        assert ledger.principal_of("alice") == 0
        assert ledger.get_all_principals() == {"alice": 0}

    def test_more_than_principal(self):
        ledger = StakeLedger()
        ledger.deposit("alice", 50)
        ledger.deposit("bob", 500)
        with pytest.raises(InsufficientStake):
            ledger.withdraw("alice", 51)
        assert ledger.principal_of("alice") == 50
        assert ledger.total_principal() == 550

    def test_zero(self):
        ledger = StakeLedger()
        ledger.deposit("alice", 50)
        with pytest.raises(InvalidAmount):
            ledger.withdraw("alice", 0)

    def test_unknown_account(self):
        with pytest.raises(InsufficientStake):
            StakeLedger().withdraw("nobody", 1)

    def test_minimum_does_not_apply(self):
        ledger = StakeLedger(minimum_stake_amount=100)
        ledger.deposit("alice", 100)
        assert ledger.withdraw("alice", 1) == 99


class TestReads:
    def test_accounts_sorted(self):
        ledger = StakeLedger()
        ledger.deposit("carol", 1)
        ledger.deposit("alice", 1)
        assert list(ledger.accounts()) == ["alice", "carol"]

    def test_load_recomputes_total(self):
        ledger = StakeLedger()
        ledger.load({"alice": 3, "bob": 4})
        assert ledger.total_principal() == 7

    def test_load_rejects_negative(self):
        with pytest.raises(ValueError):
            StakeLedger().load({"alice": -1})
