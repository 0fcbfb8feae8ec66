"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .models import RiskLevel

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RiskConfig:
    default_tolerance: RiskLevel = RiskLevel.MODERATE
    default_volatility: float = 0.5
    volatility: dict[str, float] = field(default_factory=dict)

    def volatility_for(self, symbol: str) -> float:
        """Annualized volatility of ``symbol``, or the default if unlisted."""
        return self.volatility.get(symbol, self.default_volatility)


@dataclass(frozen=True)
class TimeframeConfig:
    label: str = ""
    hours: float = 0.0


@dataclass(frozen=True)
class SimulationConfig:
    price_change_scenarios: tuple[float, ...] = (5.0, 10.0, 20.0, 50.0)
    timeframes: tuple[TimeframeConfig, ...] = (
        TimeframeConfig("1 Hour", 1),
        TimeframeConfig("1 Day", 24),
        TimeframeConfig("7 Days", 168),
        TimeframeConfig("30 Days", 720),
    )


@dataclass(frozen=True)
class AppConfig:
    risk: RiskConfig = field(default_factory=RiskConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _get(raw: dict[str, Any], key: str, default: Any) -> Any:
    """Like ``raw.get`` but treats an empty string (unset ${VAR}) as missing."""
    value = raw.get(key)
    if value is None or value == "":
        return default
    return value


def _build_risk(raw: dict[str, Any]) -> RiskConfig:
    tolerance = _get(raw, "default_tolerance", RiskLevel.MODERATE.value)
    try:
        default_tolerance = RiskLevel(tolerance)
    except ValueError:
        raise ValueError(
            f"Unknown risk tolerance '{tolerance}' "
            f"(expected one of: {', '.join(r.value for r in RiskLevel)})"
        ) from None

    return RiskConfig(
        default_tolerance=default_tolerance,
        default_volatility=float(_get(raw, "default_volatility", 0.5)),
        volatility={
            str(symbol).upper(): float(vol)
            for symbol, vol in (raw.get("volatility") or {}).items()
        },
    )


def _build_timeframes(raw: list[dict[str, Any]]) -> tuple[TimeframeConfig, ...]:
    timeframes: list[TimeframeConfig] = []
    for tf in raw:
        hours = float(tf.get("hours", 0))
        timeframes.append(
            TimeframeConfig(label=tf.get("label") or f"{hours:g}h", hours=hours)
        )
    return tuple(timeframes)


def _build_simulation(raw: dict[str, Any]) -> SimulationConfig:
    defaults = SimulationConfig()
    scenarios = raw.get("price_change_scenarios")
    timeframes = raw.get("timeframes")
    return SimulationConfig(
        price_change_scenarios=(
            tuple(float(s) for s in scenarios)
            if scenarios is not None
            else defaults.price_change_scenarios
        ),
        timeframes=(
            _build_timeframes(timeframes)
            if timeframes is not None
            else defaults.timeframes
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file); when that default
            file is absent, as after a non-editable install, the built-in
            defaults are used instead.
    """
    load_dotenv()

    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.info(
                "No config file at %s, using built-in defaults", DEFAULT_CONFIG_PATH
            )
            return AppConfig()
        config_path = DEFAULT_CONFIG_PATH
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        risk=_build_risk(raw.get("risk") or {}),
        simulation=_build_simulation(raw.get("simulation") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.risk.default_volatility > 0:
        raise ValueError("default_volatility must be greater than 0")

    for symbol, vol in cfg.risk.volatility.items():
        if not vol > 0:
            raise ValueError(f"Volatility for '{symbol}' must be greater than 0")

    if not cfg.simulation.price_change_scenarios:
        raise ValueError("At least one price change scenario must be configured")

    for tf in cfg.simulation.timeframes:
        if not tf.hours >= 0:
            raise ValueError(f"Timeframe '{tf.label}' must have hours >= 0")
