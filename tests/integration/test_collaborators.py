"""Tests for src/integration/collaborators.py — reference collaborator implementations."""

import pytest

from src.core.staking import ReentrantCall
from src.integration.collaborators import (
    DEFAULT_CUSTODY_ACCOUNT,
    InMemoryAssetTransfer,
    ManualClock,
    OperatorSet,
    PauseSwitch,
    ReentrancyLock,
    SystemClock,
    TransferError,
)
from src.state.balances import BalanceTable


class TestInMemoryAssetTransfer:
    def test_transfer_in_and_out(self):
        assets = InMemoryAssetTransfer(BalanceTable({"alice": 100}))
        assets.transfer_in("alice", 60)
        assert assets.balance_of("alice") == 40
        assert assets.custody_balance() == 60
        assets.transfer_out("bob", 10)
        assert assets.balance_of("bob") == 10
        assert assets.balance_of(DEFAULT_CUSTODY_ACCOUNT) == 50

    def test_transfer_in_insufficient(self):
        assets = InMemoryAssetTransfer(BalanceTable({"alice": 5}))
        with pytest.raises(TransferError):
            assets.transfer_in("alice", 6)
        assert assets.balance_of("alice") == 5
        assert assets.custody_balance() == 0

    def test_transfer_out_insufficient_custody(self):
        assets = InMemoryAssetTransfer(custody_account="vault")
        assets.fund_rewards(3)
        with pytest.raises(TransferError):
            assets.transfer_out("alice", 4)
        assert assets.balance_of("vault") == 3

    def test_transfer_error_is_value_error(self):
        assert issubclass(TransferError, ValueError)


class TestOperatorSet:
    def test_membership(self):
        auth = OperatorSet(["op1", "op2"])
        assert auth.is_operator("op1")
        assert not auth.is_operator("alice")

    def test_empty(self):
        assert not OperatorSet().is_operator("anyone")


class TestPauseSwitch:
    def test_toggle(self):
        gate = PauseSwitch()
        assert not gate.is_paused()
        gate.pause()
        assert gate.is_paused()
        gate.resume()
        assert not gate.is_paused()


class TestClocks:
    def test_manual_advance(self):
        clock = ManualClock(5)
        assert clock.advance(3) == 8
        assert clock.current_time() == 8

    def test_manual_never_backwards(self):
        clock = ManualClock(5)
        with pytest.raises(ValueError):
            clock.set(4)
        with pytest.raises(ValueError):
            clock.advance(-1)

    def test_manual_bad_start(self):
        with pytest.raises(ValueError):
            ManualClock(-1)

    def test_system_clock_is_int(self):
        t = SystemClock().current_time()
        assert isinstance(t, int) and t > 0


class TestReentrancyLock:
    def test_nested_entry_rejected(self):
        lock = ReentrancyLock()
        with lock:
            assert lock.entered
            with pytest.raises(ReentrantCall):
                with lock:
                    pass
            assert lock.entered
        assert not lock.entered

    def test_released_on_error(self):
        lock = ReentrancyLock()
        with pytest.raises(RuntimeError):
            with lock:
                raise RuntimeError("boom")
        assert not lock.entered
