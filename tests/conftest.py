"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from position_risk.config import (
    AppConfig,
    RiskConfig,
    SimulationConfig,
    TimeframeConfig,
)
from position_risk.models import PositionParams, RiskLevel


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_risk_config() -> RiskConfig:
    return RiskConfig(
        default_tolerance=RiskLevel.MODERATE,
        default_volatility=0.5,
        volatility={"AVAX": 0.85, "BTC": 0.65, "ETH": 0.75, "USDC": 0.05},
    )


@pytest.fixture()
def sample_simulation_config() -> SimulationConfig:
    return SimulationConfig(
        price_change_scenarios=(5.0, 10.0),
        timeframes=(
            TimeframeConfig(label="1 Hour", hours=1),
            TimeframeConfig(label="1 Day", hours=24),
        ),
    )


@pytest.fixture()
def sample_app_config(
    sample_risk_config: RiskConfig,
    sample_simulation_config: SimulationConfig,
) -> AppConfig:
    return AppConfig(risk=sample_risk_config, simulation=sample_simulation_config)


# ---------------------------------------------------------------------------
# Position fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def avax_long() -> PositionParams:
    return PositionParams(
        asset="AVAX",
        collateral=1000.0,
        leverage=5,
        is_long=True,
        entry_price=25.50,
    )


@pytest.fixture()
def avax_short() -> PositionParams:
    return PositionParams(
        asset="AVAX",
        collateral=1000.0,
        leverage=5,
        is_long=False,
        entry_price=25.50,
    )


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    risk:
      default_tolerance: Conservative
      default_volatility: 0.4
      volatility:
        AVAX: 0.85
        btc: 0.65
    simulation:
      price_change_scenarios: [1, 2.5]
      timeframes:
        - {label: 1 Hour, hours: 1}
        - {label: 1 Week, hours: 168}
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
