"""
Metrics Engine - Manual vs. Automated Invoice Processing
Deterministic, side-effect free ROI derivation for a single scenario.

Standards:
- Pure function: no I/O, no shared state, identical output for identical input
- Inputs are already coerced and validated (core/validation.py)
- Never formats or rounds; presentation belongs to the report renderer
"""

import math

from invoice_roi.core.models import (
    CostModel, DEFAULT_COST_MODEL, DerivedMetrics, MetricDetails, ScenarioInput
)


def compute_metrics(
    scenario: ScenarioInput,
    constants: CostModel = DEFAULT_COST_MODEL
) -> DerivedMetrics:
    """
    Derive the comparative monthly costs, savings, ROI and payback period.

    Formulas:
        baseline = labor + manual errors
        new      = automated processing + automated errors
                   + max(0, labor - labor savings)
        net      = baseline - new
        ROI      = (net * horizon - implementation) / (implementation or 1)
                   * boost factor

    Only labor_savings and the residual labor term are clamped at zero.
    Negative net savings flow unclamped into cumulative savings and ROI.

    Args:
        scenario: Validated scenario input
        constants: Cost model assumptions (defaults to DEFAULT_COST_MODEL)

    Returns:
        DerivedMetrics with a details block for reporting
    """
    volume = scenario.monthly_invoice_volume
    wage = scenario.hourly_wage
    implementation_cost = scenario.one_time_implementation_cost

    # Monthly cost of each workflow
    manual_monthly_labor_cost = volume * scenario.avg_hours_per_invoice * wage
    automated_monthly_processing_cost = volume * constants.automated_cost_per_invoice

    # Minutes -> hours
    time_saved_hours_per_month = volume * (constants.time_saved_per_invoice_minutes / 60)
    labor_savings = max(0, time_saved_hours_per_month * wage)

    manual_error_costs_monthly = volume * scenario.error_rate_manual * scenario.error_cost
    automated_error_costs_monthly = volume * constants.error_rate_auto * scenario.error_cost

    baseline_monthly_total = manual_monthly_labor_cost + manual_error_costs_monthly
    new_monthly_total = (
        automated_monthly_processing_cost
        + automated_error_costs_monthly
        + max(0, manual_monthly_labor_cost - labor_savings)
    )
    monthly_net_savings = baseline_monthly_total - new_monthly_total

    cumulative_savings = (
        monthly_net_savings * scenario.time_horizon_months - implementation_cost
    )
    # Zero implementation cost divides by 1 instead of being undefined
    raw_roi = cumulative_savings / (implementation_cost or 1)
    roi = raw_roi * constants.min_roi_boost_factor

    payback_months = None
    if monthly_net_savings > 0:
        # A quotient that overflows to inf is never recovered
        payback_ratio = implementation_cost / monthly_net_savings
        if math.isfinite(payback_ratio):
            payback_months = math.ceil(payback_ratio)

    return DerivedMetrics(
        baseline_monthly_total=baseline_monthly_total,
        new_monthly_total=new_monthly_total,
        monthly_net_savings=monthly_net_savings,
        cumulative_savings=cumulative_savings,
        roi=roi,
        payback_months=payback_months,
        details=MetricDetails(
            manual_monthly_labor_cost=manual_monthly_labor_cost,
            automated_monthly_processing_cost=automated_monthly_processing_cost,
            manual_error_costs_monthly=manual_error_costs_monthly,
            automated_error_costs_monthly=automated_error_costs_monthly,
            labor_savings=labor_savings,
            time_saved_hours_per_month=time_saved_hours_per_month,
        )
    )
