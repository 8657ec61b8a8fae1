"""
Service wiring for the API layer.
Each collaborator is built once per process; tests replace them through
app.dependency_overrides.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends

from invoice_roi.config.cost_model import load_cost_model
from invoice_roi.config.settings import settings
from invoice_roi.core.models import CostModel
from invoice_roi.core.report import ReportRenderer, select_renderer
from invoice_roi.core.storage import ScenarioStorage
from invoice_roi.services.delivery import EmailDelivery
from invoice_roi.services.report_service import ReportService


@lru_cache(maxsize=1)
def get_storage() -> ScenarioStorage:
    return ScenarioStorage(settings.db_path)


@lru_cache(maxsize=1)
def get_cost_model() -> CostModel:
    return load_cost_model(settings.COST_MODEL_FILE)


@lru_cache(maxsize=1)
def get_renderer() -> ReportRenderer:
    return select_renderer(
        pdf_enabled=settings.PDF_ENABLED,
        pdf_timeout_seconds=settings.PDF_TIMEOUT_SECONDS
    )


@lru_cache(maxsize=1)
def get_delivery() -> Optional[EmailDelivery]:
    return EmailDelivery.from_settings(settings)


def get_report_service(
    storage: ScenarioStorage = Depends(get_storage),
    renderer: ReportRenderer = Depends(get_renderer),
    delivery: Optional[EmailDelivery] = Depends(get_delivery),
    cost_model: CostModel = Depends(get_cost_model)
) -> ReportService:
    return ReportService(
        storage=storage,
        renderer=renderer,
        delivery=delivery,
        cost_model=cost_model
    )
