"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RiskLevel(str, Enum):
    """Risk tolerance of a trader, or risk classification of a leverage value."""

    CONSERVATIVE = "Conservative"
    MODERATE = "Moderate"
    AGGRESSIVE = "Aggressive"


@dataclass(frozen=True)
class AssetConfig:
    """Static reference data for a tradable asset."""

    symbol: str
    name: str
    address: str
    decimals: int
    price_decimals: int
    min_leverage: float
    max_leverage: float
    default_leverage: float


@dataclass(frozen=True)
class PositionParams:
    """A leveraged perpetual position, as described by the caller."""

    asset: str
    collateral: float
    leverage: float
    is_long: bool
    entry_price: float

    @property
    def position_size(self) -> float:
        return self.collateral * self.leverage


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class LiquidationResult:
    liquidation_price: float
    distance_to_liquidation: float
    distance_percentage: float
    margin_ratio: float


@dataclass(frozen=True)
class PnLResult:
    pnl: float
    pnl_percentage: float
    roi: float
    breakeven_price: float


@dataclass(frozen=True)
class FeeResult:
    position_fee: float
    borrowing_fee: float
    funding_fee: float
    total_fees: float


@dataclass(frozen=True)
class RiskRewardResult:
    risk_reward_ratio: float
    expected_value: float
    probability_of_profit: float
    max_loss: float
    max_profit: float


@dataclass(frozen=True)
class PnLScenario:
    """PnL at a simulated price move; ``price_change`` is in the position's favour."""

    price_change: float
    price: float
    pnl: float
    pnl_percentage: float
    roi: float


@dataclass(frozen=True)
class FeeTimeframe:
    label: str
    hours: float
    fees: FeeResult


@dataclass(frozen=True)
class LeverageRecommendation:
    recommended_leverage: int
    risk_level: RiskLevel
    volatility: float
    max_safe_leverage: int
    reasoning: str


@dataclass(frozen=True)
class RiskRewardAssessment:
    result: RiskRewardResult
    stop_loss: float
    take_profit: float
    recommendation: str


@dataclass(frozen=True)
class RiskReport:
    """Every derived view of a position; views are ``None`` when it is invalid."""

    position: PositionParams
    validation: ValidationResult
    liquidation: LiquidationResult | None = None
    breakeven_price: float | None = None
    scenarios: tuple[PnLScenario, ...] = ()
    fee_timeframes: tuple[FeeTimeframe, ...] = ()
    leverage: LeverageRecommendation | None = None
    risk_reward: RiskRewardAssessment | None = None
