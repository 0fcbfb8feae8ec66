"""Unit tests for config loading, env interpolation, and validation."""
from __future__ import annotations

from pathlib import Path

import pytest

from position_risk.config import (
    AppConfig,
    RiskConfig,
    SimulationConfig,
    TimeframeConfig,
    _interpolate_env,
    load_config,
)
from position_risk.models import RiskLevel


def _write(tmp_path: Path, content: str) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(content)
    return cfg_file


class TestInterpolateEnv:
    def test_simple_substitution(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_VAR", "hello")
        assert _interpolate_env("${MY_VAR}") == "hello"

    def test_missing_var_becomes_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NONEXISTENT_VAR_XYZ", raising=False)
        assert _interpolate_env("${NONEXISTENT_VAR_XYZ}") == ""

    def test_nested_dict(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOL", "Aggressive")
        result = _interpolate_env({"risk": {"default_tolerance": "${TOL}"}, "n": 1})
        assert result == {"risk": {"default_tolerance": "Aggressive"}, "n": 1}

    def test_nested_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("A", "x")
        assert _interpolate_env(["${A}", "y"]) == ["x", "y"]

    def test_non_string_passthrough(self) -> None:
        assert _interpolate_env(0.85) == 0.85
        assert _interpolate_env(True) is True


class TestLoadConfig:
    def test_loads_valid_yaml(self, sample_yaml_path: Path) -> None:
        cfg = load_config(sample_yaml_path)
        assert isinstance(cfg, AppConfig)
        assert cfg.risk.default_tolerance is RiskLevel.CONSERVATIVE
        assert cfg.risk.default_volatility == 0.4
        assert cfg.simulation.price_change_scenarios == (1.0, 2.5)
        assert cfg.simulation.timeframes[1] == TimeframeConfig("1 Week", 168.0)

    def test_symbols_upper_cased(self, sample_yaml_path: Path) -> None:
        cfg = load_config(sample_yaml_path)
        assert cfg.risk.volatility == {"AVAX": 0.85, "BTC": 0.65}

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nonexistent.yaml")

    def test_default_path_used_when_omitted(
        self, sample_yaml_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("position_risk.config.DEFAULT_CONFIG_PATH", sample_yaml_path)
        cfg = load_config()
        assert cfg.risk.default_volatility == 0.4
        assert cfg.simulation.price_change_scenarios == (1.0, 2.5)

    def test_missing_default_path_uses_builtin_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "position_risk.config.DEFAULT_CONFIG_PATH", tmp_path / "missing.yaml"
        )
        assert load_config() == AppConfig()

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        cfg = load_config(_write(tmp_path, ""))
        assert cfg == AppConfig()
        assert len(cfg.simulation.timeframes) == 4

    def test_env_interpolation_in_yaml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TEST_TOLERANCE", "Aggressive")
        cfg = load_config(
            _write(tmp_path, "risk:\n  default_tolerance: ${TEST_TOLERANCE}\n")
        )
        assert cfg.risk.default_tolerance is RiskLevel.AGGRESSIVE

    def test_unset_env_falls_back_to_default(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("UNSET_TOLERANCE_XYZ", raising=False)
        cfg = load_config(
            _write(tmp_path, "risk:\n  default_tolerance: ${UNSET_TOLERANCE_XYZ}\n")
        )
        assert cfg.risk.default_tolerance is RiskLevel.MODERATE

    def test_unlabelled_timeframe(self, tmp_path: Path) -> None:
        cfg = load_config(
            _write(tmp_path, "simulation:\n  timeframes:\n    - {hours: 12}\n")
        )
        assert cfg.simulation.timeframes == (TimeframeConfig("12h", 12.0),)

    def test_project_config_is_valid(self) -> None:
        root = Path(__file__).resolve().parents[2]
        cfg = load_config(root / "config.yaml")
        assert set(cfg.risk.volatility) == {"AVAX", "BTC", "ETH", "USDC"}


class TestValidation:
    def test_unknown_tolerance_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unknown risk tolerance"):
            load_config(_write(tmp_path, "risk:\n  default_tolerance: Reckless\n"))

    def test_zero_volatility_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="'AVAX' must be greater than 0"):
            load_config(_write(tmp_path, "risk:\n  volatility: {AVAX: 0}\n"))

    def test_zero_default_volatility_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="default_volatility"):
            load_config(_write(tmp_path, "risk:\n  default_volatility: 0\n"))

    def test_no_scenarios_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="At least one price change scenario"):
            load_config(_write(tmp_path, "simulation:\n  price_change_scenarios: []\n"))

    def test_negative_hours_raises(self, tmp_path: Path) -> None:
        content = "simulation:\n  timeframes:\n    - {label: bad, hours: -1}\n"
        with pytest.raises(ValueError, match="hours >= 0"):
            load_config(_write(tmp_path, content))

    def test_nan_hours_raises(self, tmp_path: Path) -> None:
        content = "simulation:\n  timeframes:\n    - {label: bad, hours: .nan}\n"
        with pytest.raises(ValueError, match="hours >= 0"):
            load_config(_write(tmp_path, content))


class TestRiskConfig:
    def test_volatility_for_listed(self, sample_risk_config: RiskConfig) -> None:
        assert sample_risk_config.volatility_for("AVAX") == 0.85

    def test_volatility_for_unlisted(self) -> None:
        assert RiskConfig(default_volatility=0.3).volatility_for("DOGE") == 0.3


class TestFrozenConfigs:
    def test_risk_config_immutable(self) -> None:
        r = RiskConfig()
        with pytest.raises(AttributeError):
            r.default_volatility = 0.9  # type: ignore[misc]

    def test_simulation_config_immutable(self) -> None:
        s = SimulationConfig()
        with pytest.raises(AttributeError):
            s.price_change_scenarios = ()  # type: ignore[misc]
