"""Pure risk calculations for leveraged perpetual positions — no I/O.

The liquidation threshold and fee rates are flat approximations of GMX V2,
not a replica of the protocol's per-market parameters.
"""
from __future__ import annotations

import math
from typing import Iterable

from .assets import find_asset, get_asset
from .models import (
    FeeResult,
    FeeTimeframe,
    LiquidationResult,
    PnLResult,
    PnLScenario,
    PositionParams,
    RiskLevel,
    RiskRewardResult,
    ValidationResult,
)

# Share of the margin that can be lost before liquidation.
LIQUIDATION_THRESHOLD = 0.85

POSITION_FEE_RATE = 0.0001  # one-time, 0.01% of size
BORROWING_FEE_RATE = 0.0001  # 0.01% of size per hour
FUNDING_FEE_RATE = 0.0001  # 0.01% of size per hour, same for every asset

# Breakeven always prices in one day of fees.
BREAKEVEN_FEE_HOURS = 24

MIN_LEVERAGE = 1
MAX_LEVERAGE = 50

# Leverage that a 100% annualized volatility maps to.
VOLATILITY_LEVERAGE_FACTOR = 10

RISK_MULTIPLIERS: dict[RiskLevel, float] = {
    RiskLevel.CONSERVATIVE: 0.5,
    RiskLevel.MODERATE: 1.0,
    RiskLevel.AGGRESSIVE: 1.5,
}

DEFAULT_TIMEFRAMES: tuple[tuple[str, float], ...] = (
    ("1 Hour", 1),
    ("1 Day", 24),
    ("7 Days", 168),
    ("30 Days", 720),
)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_position(params: PositionParams) -> ValidationResult:
    """Check a position and collect every violation.

    Never raises; comparisons are phrased so NaN inputs fail.
    """
    errors: list[str] = []
    asset_config = None

    if not params.asset:
        errors.append("Asset is required")
    else:
        asset_config = find_asset(params.asset)
        if asset_config is None:
            errors.append(f"Asset {params.asset} is not supported")

    if not params.collateral > 0:
        errors.append("Collateral must be greater than 0")

    if not MIN_LEVERAGE <= params.leverage <= MAX_LEVERAGE:
        errors.append(
            f"Leverage must be between {MIN_LEVERAGE}x and {MAX_LEVERAGE}x"
        )
    elif asset_config is not None:
        if params.leverage > asset_config.max_leverage:
            errors.append(
                f"Maximum leverage for {asset_config.symbol} is "
                f"{asset_config.max_leverage:g}x"
            )
        elif params.leverage < asset_config.min_leverage:
            errors.append(
                f"Minimum leverage for {asset_config.symbol} is "
                f"{asset_config.min_leverage:g}x"
            )

    if not params.entry_price > 0:
        errors.append("Entry price must be greater than 0")

    return ValidationResult(is_valid=not errors, errors=tuple(errors))


def validate_stop_levels(
    params: PositionParams, stop_loss: float, take_profit: float
) -> list[str]:
    """Check that stop-loss and take-profit sit on the correct sides of entry."""
    errors: list[str] = []
    if not stop_loss > 0:
        errors.append("Stop-loss must be greater than 0")
    if not take_profit > 0:
        errors.append("Take-profit must be greater than 0")
    if errors:
        return errors

    entry = params.entry_price
    if params.is_long:
        if not stop_loss < entry:
            errors.append("Stop-loss must be below entry price for long positions")
        if not take_profit > entry:
            errors.append("Take-profit must be above entry price for long positions")
    else:
        if not stop_loss > entry:
            errors.append("Stop-loss must be above entry price for short positions")
        if not take_profit < entry:
            errors.append("Take-profit must be below entry price for short positions")
    return errors


# ---------------------------------------------------------------------------
# Liquidation
# ---------------------------------------------------------------------------


def calculate_liquidation_price(params: PositionParams) -> LiquidationResult:
    """Calculate the liquidation price of a validated position.

    long:  entry * (1 - margin_ratio * threshold)
    short: entry * (1 + margin_ratio * threshold)

    Raises:
        UnsupportedAssetError: if the asset is not in the reference table.
    """
    get_asset(params.asset)

    margin_ratio = 1 / params.leverage
    if params.is_long:
        liquidation_price = params.entry_price * (
            1 - margin_ratio * LIQUIDATION_THRESHOLD
        )
    else:
        liquidation_price = params.entry_price * (
            1 + margin_ratio * LIQUIDATION_THRESHOLD
        )

    distance = abs(params.entry_price - liquidation_price)
    return LiquidationResult(
        liquidation_price=liquidation_price,
        distance_to_liquidation=distance,
        distance_percentage=distance / params.entry_price * 100,
        margin_ratio=margin_ratio * 100,
    )


# ---------------------------------------------------------------------------
# PnL
# ---------------------------------------------------------------------------


def calculate_pnl(params: PositionParams, current_price: float) -> PnLResult:
    """Calculate PnL of a position if the market moved to ``current_price``.

    The breakeven price offsets ``BREAKEVEN_FEE_HOURS`` of fees, whatever
    holding period the caller has in mind.
    """
    position_size = params.position_size
    price_change_pct = (current_price - params.entry_price) / params.entry_price * 100

    if params.is_long:
        pnl = position_size * price_change_pct / 100
        pnl_percentage = price_change_pct * params.leverage
    else:
        pnl = position_size * -price_change_pct / 100
        pnl_percentage = -price_change_pct * params.leverage

    roi = pnl / params.collateral * 100

    fees = calculate_total_fees(params, BREAKEVEN_FEE_HOURS).total_fees
    breakeven_change_pct = fees / position_size * 100
    if params.is_long:
        breakeven_price = params.entry_price * (1 + breakeven_change_pct / 100)
    else:
        breakeven_price = params.entry_price * (1 - breakeven_change_pct / 100)

    return PnLResult(
        pnl=pnl,
        pnl_percentage=pnl_percentage,
        roi=roi,
        breakeven_price=breakeven_price,
    )


def simulate_pnl_scenarios(
    params: PositionParams, price_changes: Iterable[float]
) -> tuple[PnLScenario, ...]:
    """Evaluate PnL for price moves given in percent in the position's favour.

    A change of 10 is a +10% move for a long and a -10% move for a short;
    negative changes are adverse moves.
    """
    scenarios: list[PnLScenario] = []
    for change in price_changes:
        move = change if params.is_long else -change
        price = params.entry_price * (1 + move / 100)
        result = calculate_pnl(params, price)
        scenarios.append(
            PnLScenario(
                price_change=change,
                price=price,
                pnl=result.pnl,
                pnl_percentage=result.pnl_percentage,
                roi=result.roi,
            )
        )
    return tuple(scenarios)


# ---------------------------------------------------------------------------
# Fees
# ---------------------------------------------------------------------------


def calculate_total_fees(params: PositionParams, hours: float) -> FeeResult:
    """Fees accrued after holding a position for ``hours``.

    The position fee is charged once; borrowing and funding scale with time.
    """
    position_size = params.position_size
    position_fee = position_size * POSITION_FEE_RATE
    borrowing_fee = position_size * BORROWING_FEE_RATE * hours
    funding_fee = position_size * FUNDING_FEE_RATE * hours
    return FeeResult(
        position_fee=position_fee,
        borrowing_fee=borrowing_fee,
        funding_fee=funding_fee,
        total_fees=position_fee + borrowing_fee + funding_fee,
    )


def estimate_fee_timeframes(
    params: PositionParams,
    timeframes: Iterable[tuple[str, float]] = DEFAULT_TIMEFRAMES,
) -> tuple[FeeTimeframe, ...]:
    """Fee breakdown for each ``(label, hours)`` holding period."""
    return tuple(
        FeeTimeframe(label=label, hours=hours, fees=calculate_total_fees(params, hours))
        for label, hours in timeframes
    )


# ---------------------------------------------------------------------------
# Leverage
# ---------------------------------------------------------------------------


def calculate_safe_leverage(
    asset: str,
    volatility: float,
    risk_tolerance: RiskLevel | str = RiskLevel.MODERATE,
) -> int:
    """Recommend a leverage for an asset's annualized volatility (0-1).

    base = clamp(10 / volatility, 1, 50), scaled by the tolerance multiplier
    and rounded half-up. ``asset`` does not affect the result; volatility
    must be looked up by the caller.
    """
    if not volatility > 0:
        raise ValueError(f"Volatility for {asset} must be greater than 0")

    tolerance = RiskLevel(risk_tolerance)
    base_leverage = _clamp(
        VOLATILITY_LEVERAGE_FACTOR / volatility, MIN_LEVERAGE, MAX_LEVERAGE
    )
    recommended = _round_half_up(base_leverage * RISK_MULTIPLIERS[tolerance])
    return int(_clamp(recommended, MIN_LEVERAGE, MAX_LEVERAGE))


def get_risk_level(leverage: float) -> RiskLevel:
    """Classify a leverage value: up to 3x conservative, up to 10x moderate."""
    if leverage <= 3:
        return RiskLevel.CONSERVATIVE
    if leverage <= 10:
        return RiskLevel.MODERATE
    return RiskLevel.AGGRESSIVE


# ---------------------------------------------------------------------------
# Risk / reward
# ---------------------------------------------------------------------------


def calculate_risk_reward(
    params: PositionParams, stop_loss: float, take_profit: float
) -> RiskRewardResult:
    """Risk/reward of a trade with the given stop-loss and take-profit.

    probability_of_profit = 1 / (1 + ratio) is a heuristic that weights
    larger targets as less likely; it is not derived from market data.
    A stop at the entry price raises ZeroDivisionError, so callers should
    run ``validate_stop_levels`` first.
    """
    entry = params.entry_price
    if params.is_long:
        max_loss = abs(entry - stop_loss)
        max_profit = abs(take_profit - entry)
    else:
        max_loss = abs(stop_loss - entry)
        max_profit = abs(entry - take_profit)

    ratio = max_profit / max_loss
    probability = 1 / (1 + ratio)
    expected_value = max_profit * probability - max_loss * (1 - probability)

    return RiskRewardResult(
        risk_reward_ratio=ratio,
        expected_value=expected_value,
        probability_of_profit=probability * 100,
        max_loss=max_loss,
        max_profit=max_profit,
    )


def suggest_stop_levels(
    params: PositionParams, ratio: float, stop_distance_pct: float = 5.0
) -> tuple[float, float]:
    """Return ``(stop_loss, take_profit)`` for a target risk/reward ratio."""
    stop_move = stop_distance_pct / 100
    target_move = stop_move * ratio
    if params.is_long:
        return (
            params.entry_price * (1 - stop_move),
            params.entry_price * (1 + target_move),
        )
    return (
        params.entry_price * (1 + stop_move),
        params.entry_price * (1 - target_move),
    )


def risk_reward_recommendation(ratio: float) -> str:
    # 1:2 levels from suggest_stop_levels land a few ulps below 2
    ratio = round(ratio, 9)
    if ratio >= 3:
        return "Excellent risk/reward ratio. This trade setup looks very favorable."
    if ratio >= 2:
        return "Good risk/reward ratio. This trade setup is reasonable."
    if ratio >= 1.5:
        return (
            "Acceptable risk/reward ratio. "
            "Consider adjusting stop-loss or take-profit levels."
        )
    return (
        "Poor risk/reward ratio. "
        "Consider revising your trade setup or avoiding this trade."
    )


# ---------------------------------------------------------------------------
# Sizing helpers
# ---------------------------------------------------------------------------


def calculate_position_size(
    account_value: float, risk_percentage: float, stop_loss_percentage: float
) -> float:
    """Size so that hitting the stop loses ``risk_percentage`` of the account."""
    risk_amount = account_value * (risk_percentage / 100)
    return risk_amount / (stop_loss_percentage / 100)


def calculate_margin_requirement(position_size: float, leverage: float) -> float:
    return position_size / leverage


def calculate_max_position_size(
    available_liquidity: float, max_leverage: float, price: float
) -> float:
    return min(available_liquidity, price * max_leverage)
