"""
FastAPI Routes - ROI Calculator API
Endpoints for ad-hoc calculation, scenario CRUD and report generation.

Standards:
- Inputs pass the validation boundary before the engine is called
- Domain errors map to 400 / 404; anything else is a logged 500
- JSON envelope {"ok": bool, ...} on every /api endpoint
"""

import uuid
import logging
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from urllib.parse import quote

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import HTMLResponse, JSONResponse, Response

from invoice_roi.api.dependencies import (
    get_cost_model, get_delivery, get_renderer, get_report_service, get_storage
)
from invoice_roi.core.errors import NotFoundError, ValidationError
from invoice_roi.core.metrics import compute_metrics
from invoice_roi.core.models import CostModel, ReportRequest
from invoice_roi.core.storage import ScenarioStorage
from invoice_roi.core.validation import coerce_and_validate
from invoice_roi.services.report_service import ReportService

logger = logging.getLogger("RoiAPI")
logger.setLevel(logging.INFO)

router = APIRouter(prefix="/api", tags=["roi"])
pages = APIRouter(tags=["reports"])


# ============================================================================
# CALCULATION
# ============================================================================

@router.post("/calc")
async def calculate(
    payload: Dict[str, Any] = Body(...),
    cost_model: CostModel = Depends(get_cost_model)
):
    """
    Compute derived metrics for an unsaved scenario.

    Returns the coerced input alongside the metrics.
    """
    try:
        scenario = coerce_and_validate(payload)
        metrics = compute_metrics(scenario, cost_model)
        return {
            "ok": True,
            "input": scenario.model_dump(exclude={"id"}),
            "metrics": metrics.model_dump()
        }

    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Calculation failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


# ============================================================================
# SCENARIO CRUD OPERATIONS
# ============================================================================

@router.post("/scenario")
async def save_scenario(
    payload: Dict[str, Any] = Body(...),
    storage: ScenarioStorage = Depends(get_storage)
):
    """
    Create or overwrite a scenario.

    A missing id gets a fresh uuid4; an existing id replaces that record.
    """
    try:
        scenario = coerce_and_validate(payload)
        if not scenario.id:
            scenario.id = str(uuid.uuid4())

        record = storage.save(scenario)
        logger.info(f"Scenario saved via API: {record.id} ({record.scenario_name})")
        return {"ok": True, "scenario": record.model_dump()}

    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Scenario save failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@router.get("/scenario")
async def list_scenarios(storage: ScenarioStorage = Depends(get_storage)):
    """List saved scenarios (id, name, created_at only)."""
    try:
        summaries = storage.list()
        return {"ok": True, "list": [s.model_dump() for s in summaries]}

    except Exception as e:
        logger.error(f"Scenario listing failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@router.get("/scenario/{scenario_id}")
async def get_scenario(scenario_id: str, storage: ScenarioStorage = Depends(get_storage)):
    """Retrieve a full scenario by id."""
    try:
        record = storage.get(scenario_id)
        if not record:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")

        return {"ok": True, "scenario": record.model_dump()}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Scenario retrieval failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@router.delete("/scenario/{scenario_id}")
async def delete_scenario(scenario_id: str, storage: ScenarioStorage = Depends(get_storage)):
    """Delete a scenario. Unknown ids succeed as a no-op."""
    try:
        storage.delete(scenario_id)
        return {"ok": True}

    except Exception as e:
        logger.error(f"Scenario deletion failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


# ============================================================================
# REPORTS
# ============================================================================

@router.post("/report/{scenario_id}")
async def request_report(
    scenario_id: str,
    payload: Optional[ReportRequest] = None,
    reports: ReportService = Depends(get_report_service)
):
    """
    Generate a report and email it when SMTP is configured.

    Response is one of:
    - {"ok": true, "emailed": true} after a successful delivery
    - the PDF as an attachment, when a PDF could be rendered
    - the HTML report otherwise
    """
    try:
        email = payload.email if payload else None
        if not email:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="email required")

        outcome = reports.generate(scenario_id, email=email)
        if outcome.emailed:
            return {"ok": True, "emailed": True}

        artifact = outcome.artifact
        if artifact.media_type == "application/pdf":
            return Response(
                content=artifact.content,
                media_type=artifact.media_type,
                headers={"Content-Disposition": f"attachment; filename*=utf-8''{quote(artifact.filename)}"}
            )
        return HTMLResponse(content=artifact.content.decode("utf-8"))

    except HTTPException:
        raise
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="scenario not found")
    except Exception as e:
        logger.error(f"Report generation failed for {scenario_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@pages.get("/report/{scenario_id}", response_class=HTMLResponse)
async def report_page(scenario_id: str, reports: ReportService = Depends(get_report_service)):
    """Printable HTML report, for opening in a browser."""
    try:
        return HTMLResponse(content=reports.render_page(scenario_id))

    except NotFoundError:
        return HTMLResponse(
            content="<h1>Scenario not found</h1>",
            status_code=status.HTTP_404_NOT_FOUND
        )
    except Exception as e:
        logger.error(f"Report page failed for {scenario_id}: {e}", exc_info=True)
        return HTMLResponse(
            content="<h1>Error generating report</h1>",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


# ============================================================================
# HEALTH CHECK
# ============================================================================

@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(
    storage: ScenarioStorage = Depends(get_storage),
    renderer=Depends(get_renderer),
    delivery=Depends(get_delivery)
):
    """
    Service health check.

    Storage failure marks the service degraded (503). Renderer and email
    only report which mode is active; both have fallbacks.
    """
    health_status = {
        "service": "invoice-roi",
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {
            "renderer": renderer.name,
            "email": "configured" if delivery is not None else "disabled"
        }
    }

    try:
        stats = storage.get_stats()
        health_status["components"]["storage"] = "healthy"
        health_status["components"]["total_scenarios"] = stats["total_scenarios"]
    except Exception as e:
        health_status["components"]["storage"] = f"unhealthy: {str(e)}"
        health_status["status"] = "degraded"

    logger.info(f"Health check: {health_status['status']}")

    if health_status["status"] == "healthy":
        return health_status
    return JSONResponse(
        content=health_status,
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE
    )
