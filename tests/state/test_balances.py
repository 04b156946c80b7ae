"""Tests for src/state/balances.py — external asset balance table."""

import pytest

from src.state.balances import BalanceTable


class TestBalanceTable:
    def test_missing_is_zero(self):
        assert BalanceTable().get("alice") == 0

    def test_seeded(self):
        t = BalanceTable({"bob": 2, "alice": 1, "zero": 0})
        assert t.get_all_balances() == {"alice": 1, "bob": 2}
        assert list(t.get_all_balances()) == ["alice", "bob"]
        assert t.total_supply() == 3

    def test_subtract_insufficient(self):
        t = BalanceTable({"alice": 5})
        with pytest.raises(ValueError):
            t.subtract("alice", 6)
        assert t.get("alice") == 5

    def test_negative_delta_rejected(self):
        with pytest.raises(ValueError):
            BalanceTable({"alice": 5}).subtract("alice", -1)

    def test_move(self):
        t = BalanceTable({"alice": 5})
        t.move("alice", "bob", 5)
        assert t.get_all_balances() == {"bob": 5}

    def test_move_failure_changes_nothing(self):
        t = BalanceTable({"alice": 5})
        with pytest.raises(ValueError):
            t.move("alice", "bob", 6)
        assert t.get_all_balances() == {"alice": 5}
