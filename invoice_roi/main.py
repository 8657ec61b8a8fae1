# invoice_roi/main.py

from dotenv import load_dotenv
load_dotenv()

import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from invoice_roi import __version__
from invoice_roi.api.routes import router as api_router, pages as report_pages
from invoice_roi.config.settings import settings

logger = logging.getLogger("RoiApp")

# -----------------------------------------------------------------------------
# Application Configuration
# -----------------------------------------------------------------------------

def create_app() -> FastAPI:
    """Factory function to create the FastAPI application."""

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )

    app = FastAPI(
        title="Invoice Automation ROI",
        description="ROI calculator, scenario store and printable reports for AP automation.",
        version=__version__
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Errors use the same {"ok": false, "error": ...} envelope as successes
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"ok": False, "error": exc.detail}
        )

    @app.exception_handler(RequestValidationError)
    async def request_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"ok": False, "error": "invalid input"}
        )

    app.include_router(api_router)
    app.include_router(report_pages)

    return app

app = create_app()

# -----------------------------------------------------------------------------
# Entry Point
# -----------------------------------------------------------------------------

def run():
    logger.info(f"Invoice ROI v{__version__} listening on http://{settings.APP_HOST}:{settings.APP_PORT}")
    uvicorn.run(app, host=settings.APP_HOST, port=settings.APP_PORT)


if __name__ == "__main__":
    run()
