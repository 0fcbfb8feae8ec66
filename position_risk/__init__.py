"""Risk calculator for leveraged perpetual positions (GMX V2 approximation)."""
from .assets import SUPPORTED_ASSETS, UnsupportedAssetError, get_asset
from .calculations import (
    calculate_liquidation_price,
    calculate_margin_requirement,
    calculate_max_position_size,
    calculate_pnl,
    calculate_position_size,
    calculate_risk_reward,
    calculate_safe_leverage,
    calculate_total_fees,
    estimate_fee_timeframes,
    get_risk_level,
    risk_reward_recommendation,
    simulate_pnl_scenarios,
    suggest_stop_levels,
    validate_position,
    validate_stop_levels,
)
from .models import (
    AssetConfig,
    FeeResult,
    LiquidationResult,
    PnLResult,
    PositionParams,
    RiskLevel,
    RiskRewardResult,
    ValidationResult,
)

__all__ = [
    "SUPPORTED_ASSETS",
    "UnsupportedAssetError",
    "get_asset",
    "AssetConfig",
    "PositionParams",
    "ValidationResult",
    "LiquidationResult",
    "PnLResult",
    "FeeResult",
    "RiskRewardResult",
    "RiskLevel",
    "validate_position",
    "calculate_liquidation_price",
    "calculate_pnl",
    "calculate_total_fees",
    "calculate_safe_leverage",
    "calculate_risk_reward",
    "calculate_position_size",
    "calculate_margin_requirement",
    "calculate_max_position_size",
    "simulate_pnl_scenarios",
    "estimate_fee_timeframes",
    "get_risk_level",
    "validate_stop_levels",
    "suggest_stop_levels",
    "risk_reward_recommendation",
]
