"""Risk analysis — composes the pure calculations into per-position views."""
from __future__ import annotations

import logging

from .. import calculations as calc
from ..config import AppConfig
from ..models import (
    FeeTimeframe,
    LeverageRecommendation,
    LiquidationResult,
    PnLResult,
    PnLScenario,
    PositionParams,
    RiskLevel,
    RiskReport,
    RiskRewardAssessment,
    ValidationResult,
)

logger = logging.getLogger(__name__)

# Ratio used to place default stop-loss / take-profit levels.
DEFAULT_TARGET_RATIO = 2.0


class InvalidPositionError(ValueError):
    """Raised by the analyzer views when a position fails validation."""

    def __init__(self, errors: tuple[str, ...] | list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = tuple(errors)


class RiskAnalyzer:
    """Builds liquidation, PnL, fee, leverage and risk/reward views of a position."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._risk = config.risk
        self._simulation = config.simulation

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def require_valid(params: PositionParams) -> None:
        """Raise InvalidPositionError listing every validation error."""
        validation = calc.validate_position(params)
        if not validation.is_valid:
            logger.warning(
                "Invalid position %s: %s", params.asset, "; ".join(validation.errors)
            )
            raise InvalidPositionError(validation.errors)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def liquidation(self, params: PositionParams) -> LiquidationResult:
        self.require_valid(params)
        return calc.calculate_liquidation_price(params)

    def pnl_at(self, params: PositionParams, current_price: float) -> PnLResult:
        self.require_valid(params)
        if not current_price > 0:
            raise InvalidPositionError(["Current price must be greater than 0"])
        return calc.calculate_pnl(params, current_price)

    def pnl_scenarios(self, params: PositionParams) -> tuple[PnLScenario, ...]:
        """PnL for each configured move, favourable moves first, then adverse."""
        self.require_valid(params)
        changes = list(self._simulation.price_change_scenarios)
        changes += [-c for c in self._simulation.price_change_scenarios]
        return calc.simulate_pnl_scenarios(params, changes)

    def fee_timeframes(
        self, params: PositionParams, hours: float | None = None
    ) -> tuple[FeeTimeframe, ...]:
        """Fees for ``hours``, or for every configured timeframe when omitted."""
        self.require_valid(params)
        if hours is None:
            timeframes = [(tf.label, tf.hours) for tf in self._simulation.timeframes]
        elif not hours >= 0:
            raise InvalidPositionError(["Hours must be 0 or greater"])
        else:
            timeframes = [(f"{hours:g}h", hours)]
        return calc.estimate_fee_timeframes(params, timeframes)

    def recommend_leverage(
        self,
        params: PositionParams,
        risk_tolerance: RiskLevel | str | None = None,
    ) -> LeverageRecommendation:
        self.require_valid(params)
        tolerance = (
            RiskLevel(risk_tolerance)
            if risk_tolerance is not None
            else self._risk.default_tolerance
        )
        volatility = self._risk.volatility_for(params.asset)

        recommended = calc.calculate_safe_leverage(params.asset, volatility, tolerance)
        max_safe = calc.calculate_safe_leverage(
            params.asset, volatility, RiskLevel.CONSERVATIVE
        )

        if volatility > 0.8:
            reasoning = "High volatility asset - consider lower leverage for risk management"
        elif volatility > 0.5:
            reasoning = "Moderate volatility - balanced leverage recommended"
        else:
            reasoning = "Low volatility asset - higher leverage may be acceptable"
        reasoning += f" ({volatility * 100:.2f}% annualized volatility)"

        logger.debug(
            "Leverage for %s at %.2f volatility (%s): %dx",
            params.asset,
            volatility,
            tolerance.value,
            recommended,
        )
        return LeverageRecommendation(
            recommended_leverage=recommended,
            risk_level=calc.get_risk_level(params.leverage),
            volatility=volatility,
            max_safe_leverage=max_safe,
            reasoning=reasoning,
        )

    def assess_risk_reward(
        self,
        params: PositionParams,
        stop_loss: float | None = None,
        take_profit: float | None = None,
    ) -> RiskRewardAssessment:
        """Risk/reward for the given levels; missing levels default to a 1:2 setup."""
        self.require_valid(params)
        default_sl, default_tp = calc.suggest_stop_levels(params, DEFAULT_TARGET_RATIO)
        if stop_loss is None:
            stop_loss = default_sl
        if take_profit is None:
            take_profit = default_tp

        errors = calc.validate_stop_levels(params, stop_loss, take_profit)
        if errors:
            raise InvalidPositionError(errors)

        result = calc.calculate_risk_reward(params, stop_loss, take_profit)
        return RiskRewardAssessment(
            result=result,
            stop_loss=stop_loss,
            take_profit=take_profit,
            recommendation=calc.risk_reward_recommendation(result.risk_reward_ratio),
        )

    def analyze(
        self,
        params: PositionParams,
        risk_tolerance: RiskLevel | str | None = None,
        stop_loss: float | None = None,
        take_profit: float | None = None,
    ) -> RiskReport:
        """Build every view of a position, or only its validation if invalid."""
        validation = calc.validate_position(params)
        if not validation.is_valid:
            logger.warning(
                "Invalid position %s: %s", params.asset, "; ".join(validation.errors)
            )
            return RiskReport(position=params, validation=validation)

        report = RiskReport(
            position=params,
            validation=validation,
            liquidation=self.liquidation(params),
            breakeven_price=calc.calculate_pnl(params, params.entry_price).breakeven_price,
            scenarios=self.pnl_scenarios(params),
            fee_timeframes=self.fee_timeframes(params),
            leverage=self.recommend_leverage(params, risk_tolerance),
            risk_reward=self.assess_risk_reward(params, stop_loss, take_profit),
        )
        logger.info(
            "Analyzed %s %s %.2fx · Liq: $%.4f (%.2f%% away)",
            params.asset,
            self._side(params),
            params.leverage,
            report.liquidation.liquidation_price,
            report.liquidation.distance_percentage,
        )
        return report

    # ------------------------------------------------------------------
    # Formatting helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _side(params: PositionParams) -> str:
        return "LONG" if params.is_long else "SHORT"

    @staticmethod
    def _signed_pct(value: float) -> str:
        return f"{value:+,.2f}%"

    def format_header(self, params: PositionParams) -> str:
        return (
            f"📊 {params.asset} · {self._side(params)} · {params.leverage:g}x\n"
            f"Collateral: ${params.collateral:,.2f} · "
            f"Size: ${params.position_size:,.2f} · "
            f"Entry: ${params.entry_price:,.4f}"
        )

    @staticmethod
    def format_errors(validation: ValidationResult) -> str:
        return "❌ Invalid position\n" + "\n".join(f"  - {e}" for e in validation.errors)

    def format_liquidation(
        self, params: PositionParams, result: LiquidationResult
    ) -> str:
        return (
            f"Liquidation price: ${result.liquidation_price:,.4f}\n"
            f"Distance: ${result.distance_to_liquidation:,.4f} "
            f"({result.distance_percentage:.2f}%)\n"
            f"Margin ratio: {result.margin_ratio:.2f}% · "
            f"Risk level: {calc.get_risk_level(params.leverage).value}"
        )

    @staticmethod
    def format_pnl(current_price: float, result: PnLResult) -> str:
        return (
            f"Price: ${current_price:,.4f}\n"
            f"PnL: ${result.pnl:,.2f} ({result.pnl_percentage:+.2f}%) · "
            f"ROI: {result.roi:+.2f}%\n"
            f"Breakeven: ${result.breakeven_price:,.4f}"
        )

    def format_scenarios(
        self, params: PositionParams, scenarios: tuple[PnLScenario, ...]
    ) -> str:
        """Scenario table; the move column is the signed move of the price itself."""
        lines = ["Move        Price            PnL          PnL %       ROI"]
        for s in scenarios:
            price_move = s.price_change if params.is_long else -s.price_change
            lines.append(
                f"{self._signed_pct(price_move):>8}  "
                f"${s.price:>12,.4f}  "
                f"${s.pnl:>12,.2f}  "
                f"{self._signed_pct(s.pnl_percentage):>10}  "
                f"{self._signed_pct(s.roi):>10}"
            )
        return "\n".join(lines)

    @staticmethod
    def format_fees(timeframes: tuple[FeeTimeframe, ...]) -> str:
        lines = ["Period        Position    Borrowing     Funding       Total"]
        for tf in timeframes:
            f = tf.fees
            lines.append(
                f"{tf.label:<10}  ${f.position_fee:>9,.2f}  ${f.borrowing_fee:>10,.2f}  "
                f"${f.funding_fee:>10,.2f}  ${f.total_fees:>10,.2f}"
            )
        return "\n".join(lines)

    @staticmethod
    def format_leverage(
        params: PositionParams, rec: LeverageRecommendation
    ) -> str:
        if params.leverage > rec.recommended_leverage * 1.5:
            verdict = (
                f"⚠️ {params.leverage:g}x is significantly higher than the "
                f"recommended {rec.recommended_leverage}x"
            )
        elif params.leverage < rec.recommended_leverage * 0.5:
            verdict = (
                f"{params.leverage:g}x is well below the recommended "
                f"{rec.recommended_leverage}x; safer but may limit returns"
            )
        else:
            verdict = "✅ Leverage is in line with the recommendation"
        safe_range = (
            "Within Safe Range"
            if params.leverage <= rec.max_safe_leverage
            else "Above Safe Range"
        )
        return (
            f"Recommended leverage: {rec.recommended_leverage}x · "
            f"Max safe: {rec.max_safe_leverage}x ({safe_range})\n"
            f"{rec.reasoning}\n"
            f"{verdict}"
        )

    @staticmethod
    def format_risk_reward(assessment: RiskRewardAssessment) -> str:
        r = assessment.result
        return (
            f"Stop-loss: ${assessment.stop_loss:,.4f} · "
            f"Take-profit: ${assessment.take_profit:,.4f}\n"
            f"Risk/reward: 1:{r.risk_reward_ratio:.2f} · "
            f"Win probability: {r.probability_of_profit:.1f}%\n"
            f"Max loss: ${r.max_loss:,.4f} · Max profit: ${r.max_profit:,.4f} · "
            f"EV: ${r.expected_value:,.4f}\n"
            f"{assessment.recommendation}"
        )

    def format_report(self, report: RiskReport) -> str:
        """Render a full report as plain text."""
        params = report.position
        header = self.format_header(params)
        if not report.validation.is_valid:
            return f"{header}\n\n{self.format_errors(report.validation)}"

        sections = [header]
        if report.liquidation is not None:
            sections.append(
                "── Liquidation ──\n" + self.format_liquidation(params, report.liquidation)
            )
        if report.scenarios:
            pnl = "── PnL scenarios ──\n" + self.format_scenarios(params, report.scenarios)
            if report.breakeven_price is not None:
                pnl += (
                    f"\nBreakeven (incl. {calc.BREAKEVEN_FEE_HOURS}h fees): "
                    f"${report.breakeven_price:,.4f}"
                )
            sections.append(pnl)
        if report.fee_timeframes:
            sections.append("── Fees ──\n" + self.format_fees(report.fee_timeframes))
        if report.leverage is not None:
            sections.append(
                "── Leverage ──\n" + self.format_leverage(params, report.leverage)
            )
        if report.risk_reward is not None:
            sections.append(
                "── Risk / reward ──\n" + self.format_risk_reward(report.risk_reward)
            )
        return "\n\n".join(sections)
