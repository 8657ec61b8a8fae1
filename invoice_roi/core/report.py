"""
Report Renderer - Human-Readable ROI Report
Builds a structured ReportDocument from a scenario and its derived metrics,
and renders it as a printable HTML page.

Standards:
- Section order is fixed: title, inputs, key results, details
- Currency formatting happens here only; the engine returns raw floats
- Every renderer (HTML, PDF) consumes the same ReportDocument
"""

import html
import importlib.util
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel

from invoice_roi.core.models import (
    DerivedMetrics, ReportDocument, ReportRow, ReportSection, ScenarioInput
)

logger = logging.getLogger("ReportRenderer")
logger.setLevel(logging.INFO)

NOT_RECOVERABLE_TEXT = "More than horizon / not recoverable"

INTRO_TEXT = (
    "This report summarizes expected monthly savings, cumulative savings, ROI, "
    "and payback period based on the inputs provided."
)
NOTES_TEXT = (
    "Notes: This is a model and uses simplified assumptions. For a detailed "
    "analysis, validate local costs and processes."
)


def humanize_key(key: str) -> str:
    """'monthly_invoice_volume' -> 'Monthly Invoice Volume'"""
    return " ".join(word.capitalize() for word in key.replace("_", " ").split(" "))


# Scenario fields shown in the inputs table, in display order.
# id and created_at are deliberately absent.
INPUT_FIELDS: List[Tuple[str, str]] = [
    (name, humanize_key(name)) for name in (
        "scenario_name",
        "monthly_invoice_volume",
        "num_ap_staff",
        "avg_hours_per_invoice",
        "hourly_wage",
        "error_rate_manual",
        "error_cost",
        "time_horizon_months",
        "one_time_implementation_cost",
    )
]


# ============================================================================
# FORMATTING HELPERS
# ============================================================================

def format_money(value: Optional[float]) -> str:
    """USD, en-US grouping, two fraction digits: -1234.5 -> '-$1,234.50'"""
    amount = float(value or 0)
    sign = "-" if amount < 0 and round(abs(amount), 2) != 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_plain(value: Union[str, int, float, None]) -> str:
    """Render a raw input verbatim: integral floats lose their '.0'."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_fixed(value: Optional[float], digits: int = 2) -> str:
    return f"{float(value or 0):.{digits}f}"


# ============================================================================
# DOCUMENT BUILDER
# ============================================================================

def build_report(scenario: ScenarioInput, metrics: DerivedMetrics) -> ReportDocument:
    """
    Assemble the four report sections for a scenario.

    Args:
        scenario: Scenario the metrics were computed from
        metrics: Output of compute_metrics(scenario)

    Returns:
        ReportDocument consumed by every renderer
    """
    display_name = scenario.scenario_name or scenario.id or ""

    inputs = ReportSection(
        heading="Inputs",
        rows=[
            ReportRow(label=label, value=format_plain(getattr(scenario, field)))
            for field, label in INPUT_FIELDS
        ]
    )

    payback = (
        f"{metrics.payback_months} months"
        if metrics.payback_months is not None
        else NOT_RECOVERABLE_TEXT
    )
    horizon = format_plain(scenario.time_horizon_months or 12)
    key_results = ReportSection(
        heading="Key results",
        rows=[
            ReportRow(label="Baseline monthly cost",
                      value=format_money(metrics.baseline_monthly_total)),
            ReportRow(label="Estimated monthly cost after automation",
                      value=format_money(metrics.new_monthly_total)),
            ReportRow(label="Estimated monthly savings",
                      value=format_money(metrics.monthly_net_savings), emphasis=True),
            ReportRow(label=f"Cumulative savings ({horizon} months)",
                      value=format_money(metrics.cumulative_savings)),
            ReportRow(label="Estimated ROI (adjusted)",
                      value=format_fixed(metrics.roi)),
            ReportRow(label="Payback period", value=payback),
        ]
    )

    d = metrics.details
    details = ReportSection(
        heading="Details",
        rows=[
            ReportRow(label="Manual labor cost / month",
                      value=format_money(d.manual_monthly_labor_cost)),
            ReportRow(label="Automated processing cost / month",
                      value=format_money(d.automated_monthly_processing_cost)),
            ReportRow(label="Manual error cost / month",
                      value=format_money(d.manual_error_costs_monthly)),
            ReportRow(label="Automated error cost / month",
                      value=format_money(d.automated_error_costs_monthly)),
            ReportRow(label="Estimated time saved (hours/month)",
                      value=format_fixed(d.time_saved_hours_per_month)),
        ]
    )

    return ReportDocument(
        title=f"ROI Report - {display_name}",
        intro=INTRO_TEXT,
        sections=[inputs, key_results, details],
        notes=NOTES_TEXT
    )


# ============================================================================
# HTML RENDERING
# ============================================================================

_STYLE = (
    "body{font-family:Helvetica,Arial,sans-serif;padding:20px;color:#111} "
    ".wrap{max-width:800px;margin:0 auto} h1{color:#0b74de} "
    ".card{background:#fff;padding:14px;border-radius:8px;"
    "box-shadow:0 2px 8px rgba(16,24,40,0.06);margin-bottom:12px} "
    "table{width:100%;border-collapse:collapse} "
    "th{text-align:left;padding:6px;color:#444;width:40%} td{padding:6px;color:#000} "
    ".big{font-size:1.4rem;font-weight:700;color:#0b5} .muted{color:#666}"
)


def render_html(document: ReportDocument) -> str:
    """Render a ReportDocument as a standalone, print-friendly HTML page."""
    esc = html.escape
    lines = [
        '<!doctype html><html><head><meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width,initial-scale=1">',
        f"<title>{esc(document.title)}</title>",
        f"<style>{_STYLE}</style>",
        '</head><body><div class="wrap">',
        f"<h1>{esc(document.title)}</h1>",
        f'<p class="muted">{esc(document.intro)}</p>',
    ]

    for section in document.sections:
        lines.append(f'<div class="card"><h3>{esc(section.heading)}</h3><table>')
        for row in section.rows:
            css = ' class="big"' if row.emphasis else ""
            lines.append(
                f"<tr><th{css}>{esc(row.label)}</th><td{css}>{esc(row.value)}</td></tr>"
            )
        lines.append("</table></div>")

    lines.append(f'<p class="muted">{esc(document.notes)}</p>')
    lines.append("</div></body></html>")
    return "\n".join(lines)


# ============================================================================
# RENDERER STRATEGY
# ============================================================================

class RenderedReport(BaseModel):
    """A report artifact ready to be returned or attached."""
    content: bytes
    media_type: str
    filename: str


class ReportRenderer(ABC):
    """
    Renders a ReportDocument.

    render_html is always available. render_binary returns None for
    textual-only renderers and raises RenderingUnavailable on failure.
    """
    name: str = "base"

    def render_html(self, document: ReportDocument) -> str:
        return render_html(document)

    @abstractmethod
    def render_binary(self, document: ReportDocument, basename: str) -> Optional[RenderedReport]:
        ...


class HtmlReportRenderer(ReportRenderer):
    """Textual-only renderer; never produces a binary artifact."""
    name = "html"

    def render_binary(self, document: ReportDocument, basename: str) -> Optional[RenderedReport]:
        return None


def select_renderer(pdf_enabled: bool = True, pdf_timeout_seconds: float = 20.0) -> ReportRenderer:
    """
    Pick the renderer at startup.

    The PDF renderer is used only when enabled and reportlab is importable;
    otherwise reports are served as HTML.
    """
    if pdf_enabled and importlib.util.find_spec("reportlab") is not None:
        from invoice_roi.core.pdf import PdfReportRenderer
        logger.info("Report renderer: pdf (reportlab)")
        return PdfReportRenderer(timeout_seconds=pdf_timeout_seconds)

    if pdf_enabled:
        logger.warning("reportlab not installed; reports will be served as HTML only")
    logger.info("Report renderer: html")
    return HtmlReportRenderer()
