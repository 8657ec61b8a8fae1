# invoice_roi/services/report_service.py

import logging
from typing import Optional

from pydantic import BaseModel

from invoice_roi.core.errors import NotFoundError, RenderingUnavailable
from invoice_roi.core.metrics import compute_metrics
from invoice_roi.core.models import CostModel, DEFAULT_COST_MODEL, ReportDocument
from invoice_roi.core.report import RenderedReport, ReportRenderer, build_report
from invoice_roi.core.storage import ScenarioStorage
from invoice_roi.services.delivery import EmailDelivery

logger = logging.getLogger("ReportService")
logger.setLevel(logging.INFO)


class ReportOutcome(BaseModel):
    """
    What the caller gets back from a report request.

    Exactly one of: an email acknowledgement (emailed=True, no artifact),
    or an artifact (PDF when available, else the HTML page).
    """
    emailed: bool = False
    artifact: Optional[RenderedReport] = None


class ReportService:
    """
    Store -> Engine -> Renderer -> Delivery.
    Recomputes metrics on every request; nothing derived is cached.
    """

    def __init__(
        self,
        storage: ScenarioStorage,
        renderer: ReportRenderer,
        delivery: Optional[EmailDelivery] = None,
        cost_model: CostModel = DEFAULT_COST_MODEL
    ):
        self.storage = storage
        self.renderer = renderer
        self.delivery = delivery
        self.cost_model = cost_model

    def build_document(self, scenario_id: str) -> ReportDocument:
        """Load a scenario and build its report document."""
        record = self.storage.get(scenario_id)
        if record is None:
            raise NotFoundError(scenario_id)

        metrics = compute_metrics(record.to_input(), self.cost_model)
        return build_report(record, metrics)

    def render_page(self, scenario_id: str) -> str:
        """Printable HTML report for GET /report/{id}."""
        return self.renderer.render_html(self.build_document(scenario_id))

    def generate(self, scenario_id: str, email: Optional[str] = None) -> ReportOutcome:
        """
        Produce a report, optionally emailing it.

        Raises:
            NotFoundError: If the scenario does not exist
        """
        document = self.build_document(scenario_id)
        html_page = self.renderer.render_html(document)
        basename = f"report-{scenario_id}"

        binary: Optional[RenderedReport] = None
        try:
            binary = self.renderer.render_binary(document, basename)
        except RenderingUnavailable as e:
            logger.warning(f"PDF generation failed for {scenario_id}: {e}")

        if email and self.delivery is not None:
            result = self.delivery.deliver(
                recipient=email,
                subject=document.title,
                html_body=html_page,
                attachment=binary
            )
            if result.ok:
                return ReportOutcome(emailed=True)
            logger.info(f"Falling back to direct response for {scenario_id}")

        if binary is not None:
            return ReportOutcome(artifact=binary)

        return ReportOutcome(
            artifact=RenderedReport(
                content=html_page.encode("utf-8"),
                media_type="text/html",
                filename=f"{basename}.html"
            )
        )
