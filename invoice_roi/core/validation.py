# invoice_roi/core/validation.py

import math
from typing import Any, Mapping

from invoice_roi.core.errors import ValidationError
from invoice_roi.core.models import ScenarioInput

DEFAULT_TIME_HORIZON_MONTHS = 12.0

_MISSING = object()

# Fields coerced to numbers, in the order the form submits them
NUMERIC_FIELDS = (
    "monthly_invoice_volume",
    "num_ap_staff",
    "avg_hours_per_invoice",
    "hourly_wage",
    "error_rate_manual",
    "error_cost",
    "time_horizon_months",
    "one_time_implementation_cost",
)

# Not range-checked; a failed or non-finite coercion falls back to zero
_ZERO_DEFAULT_FIELDS = (
    "num_ap_staff",
    "avg_hours_per_invoice",
    "error_cost",
    "one_time_implementation_cost",
)


def coerce_number(value: Any) -> float:
    """
    Coerce a raw payload value to float with browser Number() semantics.

    None and blank strings become 0, booleans 0/1, numeric strings are
    parsed. Anything else yields NaN.
    """
    if value is _MISSING:
        return math.nan
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            # JSON integers beyond float range
            return math.inf if value > 0 else -math.inf
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def _is_non_negative(value: float) -> bool:
    return math.isfinite(value) and value >= 0


def coerce_and_validate(raw: Mapping[str, Any]) -> ScenarioInput:
    """
    Validation boundary in front of the metrics engine.

    Args:
        raw: Untrusted scenario payload (parsed JSON body or stored row)

    Returns:
        ScenarioInput with finite numeric fields

    Raises:
        ValidationError: If volume, horizon, wage or manual error rate is
            out of range. The engine is never called in that case.
    """
    if not isinstance(raw, Mapping):
        raise ValidationError("invalid input")

    fields = {name: coerce_number(raw.get(name, _MISSING)) for name in NUMERIC_FIELDS}

    if math.isnan(fields["time_horizon_months"]):
        fields["time_horizon_months"] = DEFAULT_TIME_HORIZON_MONTHS

    for name in _ZERO_DEFAULT_FIELDS:
        if not math.isfinite(fields[name]):
            fields[name] = 0.0

    if not _is_non_negative(fields["monthly_invoice_volume"]):
        raise ValidationError("monthly_invoice_volume must be a non-negative number")

    horizon = fields["time_horizon_months"]
    if not math.isfinite(horizon) or horizon <= 0:
        raise ValidationError("time_horizon_months must be a positive number")

    if not _is_non_negative(fields["hourly_wage"]):
        raise ValidationError("hourly_wage must be a non-negative number")

    if not _is_non_negative(fields["error_rate_manual"]):
        raise ValidationError("error_rate_manual must be a non-negative number")

    scenario_id = raw.get("id")
    return ScenarioInput(
        id=str(scenario_id) if scenario_id else None,
        scenario_name=str(raw.get("scenario_name") or "Untitled"),
        **fields
    )
