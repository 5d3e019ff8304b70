"""
FastAPI application for the inquiry intake service.

Serves the inquiry API, health and metrics endpoints, and the static
marketing site from PUBLIC_DIR when that directory exists.
"""
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.responses import Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.inquiry import (
    InquiryPipeline,
    inquiry_http_exception_handler,
    router as inquiry_router,
)
from backend.relays import MailingListRelay, WebhookRelay
from backend.storage import InquiryLog, InquiryStore
from core.config import CONFIG_VARIABLES, InquirySettings
from core.logging_config import get_logger, setup_json_logging
from core.metrics import get_metrics_content_type, get_metrics_text
from core.secrets import secrets_manager

logger = get_logger(__name__)

HTML_CACHE_CONTROL = "no-cache"
ASSET_CACHE_CONTROL = "public, max-age=31536000, immutable"


class CachedStaticFiles(StaticFiles):
    """Static files with no-cache HTML and long-lived immutable assets."""

    def file_response(self, full_path, stat_result, scope, status_code=200):
        response = super().file_response(full_path, stat_result, scope, status_code)
        if str(full_path).lower().endswith(".html"):
            response.headers["Cache-Control"] = HTML_CACHE_CONTROL
        else:
            response.headers["Cache-Control"] = ASSET_CACHE_CONTROL
        return response


def create_app(
    settings: Optional[InquirySettings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    store: Optional[InquiryStore] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration; read from the environment when omitted,
                  in which case JSON logging is configured from it too
        http_client: Client for outbound relay calls; created and closed
                     by the app when omitted
        store: Inquiry store; an InquiryLog at settings.log_path when omitted
    """
    if settings is None:
        settings = InquirySettings.from_env()
        setup_json_logging(log_level=settings.log_level, environment=settings.environment)
        logger.info(
            "configuration_loaded",
            variables=secrets_manager.describe(CONFIG_VARIABLES),
        )

    owns_client = http_client is None
    client = http_client or httpx.AsyncClient(timeout=settings.relay_timeout_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "inquiry_service_started",
            mailing_list_configured=settings.mailing_list_configured,
            webhook_configured=settings.webhook_configured,
            log_path=str(settings.log_path),
        )
        yield
        if owns_client:
            await client.aclose()

    app = FastAPI(title="Inquiry Intake API", lifespan=lifespan)
    app.state.settings = settings
    app.state.pipeline = InquiryPipeline(
        settings,
        mailing_list=MailingListRelay(settings, client),
        webhook=WebhookRelay(settings, client),
        store=store or InquiryLog(settings.log_path),
    )

    app.include_router(inquiry_router)
    app.add_exception_handler(StarletteHTTPException, inquiry_http_exception_handler)

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        return Response(content=get_metrics_text(), media_type=get_metrics_content_type())

    if settings.public_dir.is_dir():
        app.mount("/", CachedStaticFiles(directory=settings.public_dir, html=True), name="public")
    else:
        logger.info("static_site_disabled", public_dir=str(settings.public_dir))

    return app
