"""
Pydantic Data Models - Type-Safe Schema Definitions
Defines all data structures used across the ROI service.

Standards:
- Scenario inputs are validated at the boundary (core/validation.py), so the
  numeric fields here carry no range constraints of their own
- Derived metrics are never persisted; they are recomputed per request
- Cost model constants are immutable and passed into the engine explicitly
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# COST MODEL (engine constants)
# ============================================================================

class CostModel(BaseModel):
    """
    Fixed assumptions of the automated workflow.

    Passed into the metrics engine so alternate cost models can be
    evaluated without touching module state.
    """
    model_config = ConfigDict(frozen=True)

    automated_cost_per_invoice: float = Field(
        0.20,
        description="Flat processing cost per invoice under automation (USD)"
    )
    error_rate_auto: float = Field(
        0.10,
        description="Automated error fraction, independent of the scenario"
    )
    time_saved_per_invoice_minutes: float = Field(
        8.0,
        description="Labor minutes saved per invoice by automating"
    )
    min_roi_boost_factor: float = Field(
        1.1,
        description="Multiplier applied to the raw ROI"
    )


DEFAULT_COST_MODEL = CostModel()


# ============================================================================
# SCENARIO MODELS
# ============================================================================

class ScenarioInput(BaseModel):
    """
    One named ROI estimate, as accepted by the engine.

    num_ap_staff is informational only and does not enter any formula.
    """
    id: Optional[str] = None
    scenario_name: str = "Untitled"
    monthly_invoice_volume: float
    num_ap_staff: float = 0.0
    avg_hours_per_invoice: float = 0.0
    hourly_wage: float
    error_rate_manual: float = Field(0.0, description="Fraction, 0-1 expected")
    error_cost: float = Field(0.0, description="Cost per erroneous invoice")
    time_horizon_months: float = 12.0
    one_time_implementation_cost: float = 0.0

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "scenario_name": "Q3 AP automation",
                "monthly_invoice_volume": 1000,
                "num_ap_staff": 3,
                "avg_hours_per_invoice": 0.1,
                "hourly_wage": 20,
                "error_rate_manual": 0.05,
                "error_cost": 50,
                "time_horizon_months": 12,
                "one_time_implementation_cost": 5000
            }
        }
    )


class ScenarioRecord(ScenarioInput):
    """A stored scenario. created_at is stamped by the store on every save."""
    id: str
    created_at: str = Field(..., description="ISO8601 UTC timestamp of the last save")

    def to_input(self) -> ScenarioInput:
        return ScenarioInput(**self.model_dump(exclude={"created_at"}))


class ScenarioSummary(BaseModel):
    """List view of a stored scenario; never carries the inputs."""
    id: str
    scenario_name: str
    created_at: str


# ============================================================================
# DERIVED METRICS
# ============================================================================

class MetricDetails(BaseModel):
    """Intermediate monthly quantities required by the report."""
    manual_monthly_labor_cost: float
    automated_monthly_processing_cost: float
    manual_error_costs_monthly: float
    automated_error_costs_monthly: float
    labor_savings: float
    time_saved_hours_per_month: float


class DerivedMetrics(BaseModel):
    """
    Output of the metrics engine.

    monthly_net_savings, cumulative_savings and roi may be negative.
    payback_months is None when the investment is not recoverable at the
    current monthly run rate.
    """
    baseline_monthly_total: float
    new_monthly_total: float
    monthly_net_savings: float
    cumulative_savings: float
    roi: float = Field(..., description="Raw ROI multiplied by the cost model's boost factor")
    payback_months: Optional[int] = None
    details: MetricDetails


# ============================================================================
# REPORT DOCUMENT
# ============================================================================

class ReportRow(BaseModel):
    label: str
    value: str
    emphasis: bool = False


class ReportSection(BaseModel):
    heading: str
    rows: List[ReportRow]


class ReportDocument(BaseModel):
    """
    Structured, format-independent report.

    Both the HTML and the PDF renderings are projections of this document,
    so their content never differs.
    """
    title: str
    intro: str
    sections: List[ReportSection]
    notes: str


# ============================================================================
# API REQUEST MODELS
# ============================================================================

class ReportRequest(BaseModel):
    """Body of POST /api/report/{id}."""
    email: Optional[str] = None
