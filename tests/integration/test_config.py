"""Tests for src/integration/config.py — StakingConfig validation and YAML loading."""

import pytest

from src.core.staking import MAX_ACCRUAL_WINDOW, MAX_UINT256, PRECISION
from src.integration.config import StakingConfig, load_config


class TestStakingConfig:
    def test_defaults(self):
        cfg = StakingConfig()
        assert cfg.precision == PRECISION
        assert cfg.minimum_stake_amount == 1
        assert cfg.initial_reward_rate == 0
        assert cfg.start_time is None
        assert cfg.max_accrual_window == MAX_ACCRUAL_WINDOW

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"precision": 0},
            {"minimum_stake_amount": 0},
            {"initial_reward_rate": -1},
            {"initial_reward_rate": 2**256},
            {"start_time": -3},
            {"max_accrual_window": 0},
            {"initial_reward_rate": 2**200},
            {"initial_reward_rate": 11, "precision": 10**6, "max_accrual_window": MAX_UINT256 // (10**7)},
        ],
    )
    def test_out_of_range(self, kwargs):
        with pytest.raises(ValueError):
            StakingConfig(**kwargs)

    @pytest.mark.parametrize("kwargs", [{"precision": True}, {"initial_reward_rate": 1.5}, {"start_time": "0"}])
    def test_wrong_type(self, kwargs):
        with pytest.raises(TypeError):
            StakingConfig(**kwargs)

    def test_from_mapping_unknown_key(self):
        with pytest.raises(ValueError, match="penalty_bps"):
            StakingConfig.from_mapping({"penalty_bps": 50})


class TestLoadConfig:
    def test_nested_section(self, tmp_path):
        p = tmp_path / "staking.yaml"
        p.write_text(
            "staking:\n"
            "  minimum_stake_amount: 100\n"
            "  initial_reward_rate: 10\n"
            "  start_time: 0\n",
            encoding="utf-8",
        )
        cfg = load_config(p)
        assert cfg == StakingConfig(minimum_stake_amount=100, initial_reward_rate=10, start_time=0)

    def test_top_level_fields(self, tmp_path):
        p = tmp_path / "staking.yaml"
        p.write_text("precision: 1000000\n", encoding="utf-8")
        assert load_config(str(p)).precision == 1_000_000

    def test_empty_file_gives_defaults(self, tmp_path):
        p = tmp_path / "staking.yaml"
        p.write_text("", encoding="utf-8")
        assert load_config(p) == StakingConfig()

    def test_non_mapping(self, tmp_path):
        p = tmp_path / "staking.yaml"
        p.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(TypeError):
            load_config(p)
