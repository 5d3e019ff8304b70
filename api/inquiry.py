"""
Inquiry API

Accepts contact-form submissions: honeypot check, validation, optional relay
to Mailchimp and a webhook, then an append to the inquiry log. Every
response carries CORS and security headers.
"""

import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.relays import InquiryRelay
from backend.storage import InquiryStore
from core.config import InquirySettings
from core.errors import (
    InquiryServiceError,
    InquiryValidationError,
    MalformedRequestError,
    PersistenceError,
    RelayError,
)
from core.logging_config import get_logger, log_error
from core.metrics import (
    INQUIRY_LOG_WRITE_FAILURES_TOTAL,
    record_relay_failure,
    record_submission,
)
from core.validation import build_inquiry, is_honeypot_triggered, validate_payload

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["inquiry"])

INQUIRY_PATH = "/api/inquiry"
GENERIC_FAILURE = "Unable to process request right now."
ALLOWED_METHODS = "POST, OPTIONS"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": (
        "accelerometer=(), camera=(), geolocation=(), gyroscope=(), "
        "microphone=(), magnetometer=()"
    ),
}


class InquiryJSONResponse(JSONResponse):
    media_type = "application/json; charset=utf-8"


class HealthResponse(BaseModel):
    """Response for the health check"""
    status: str
    logged_inquiries: int
    mailing_list_configured: bool
    webhook_configured: bool


class InquiryPipeline:
    """
    End-to-end handling of one decoded submission.

    List relay failures abort the request. Webhook and log failures are
    logged and the submission is still acknowledged.
    """

    def __init__(
        self,
        settings: InquirySettings,
        mailing_list: InquiryRelay,
        webhook: InquiryRelay,
        store: InquiryStore,
    ):
        self.settings = settings
        self.mailing_list = mailing_list
        self.webhook = webhook
        self.store = store

    async def submit(self, payload: Any) -> Optional[Dict[str, Any]]:
        """
        Process a submission.

        Returns:
            The stored record, or None when the honeypot discarded it

        Raises:
            InquiryValidationError: If the submission is invalid
            RelayError: If the mailing-list upsert is rejected
        """
        if is_honeypot_triggered(payload):
            record_submission("honeypot")
            logger.info("honeypot_triggered")
            return None

        error = validate_payload(payload)
        if error:
            record_submission("invalid")
            raise InquiryValidationError(error)

        inquiry = build_inquiry(payload)

        mailchimp_synced = False
        if self.mailing_list.configured:
            try:
                await self.mailing_list.relay(inquiry)
            except RelayError as e:
                record_relay_failure(e.relay)
                log_error(logger, e, "mailing_list_relay_failed")
                raise
            mailchimp_synced = True

        try:
            await self.webhook.relay(inquiry)
        except RelayError as e:
            record_relay_failure(e.relay)
            logger.warning("webhook_relay_failed", **e.to_dict())

        record = {**inquiry.to_dict(), "mailchimpSynced": mailchimp_synced}
        try:
            await self.store.append(record)
        except PersistenceError as e:
            INQUIRY_LOG_WRITE_FAILURES_TOTAL.inc()
            log_error(logger, e, "inquiry_log_write_failed")

        record_submission("accepted")
        logger.info("inquiry_accepted", mailchimp_synced=mailchimp_synced)
        return record


def apply_response_headers(response: Response, request: Request,
                           settings: InquirySettings) -> Response:
    """Attach security headers, no-store caching and the CORS origin echo."""
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    response.headers["Cache-Control"] = "no-store"

    origin = request.headers.get("origin")
    if settings.is_origin_allowed(origin):
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Vary"] = "Origin"
    return response


def _json(request: Request, status_code: int, content: Dict[str, Any],
          headers: Optional[Dict[str, str]] = None) -> Response:
    response = InquiryJSONResponse(status_code=status_code, content=content, headers=headers)
    return apply_response_headers(response, request, request.app.state.settings)


def _failure(request: Request, error: InquiryServiceError,
             headers: Optional[Dict[str, str]] = None) -> Response:
    return _json(
        request,
        error.status_code,
        {"success": False, "message": error.message},
        headers=headers,
    )


async def parse_body(request: Request) -> Any:
    """
    Decode the JSON body. An empty body decodes to an empty object.

    Raises:
        MalformedRequestError: If the body is not valid JSON
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise MalformedRequestError("Invalid JSON.")


@router.options("/inquiry", include_in_schema=False)
async def inquiry_preflight(request: Request):
    response = Response(status_code=204)
    response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return apply_response_headers(response, request, request.app.state.settings)


@router.post("/inquiry")
async def submit_inquiry(request: Request):
    """
    Submit a contact-form inquiry

    - **name**, **email**, **message**: required
    - **organization**, **phone**: optional
    - **city**: must stay empty

    Returns `{"success": true}` on acceptance.
    """
    pipeline: InquiryPipeline = request.app.state.pipeline

    try:
        payload = await parse_body(request)
        await pipeline.submit(payload)
    except MalformedRequestError as e:
        record_submission("invalid")
        return _failure(request, e)
    except InquiryValidationError as e:
        return _failure(request, e)
    except RelayError as e:
        record_submission("failed")
        return _failure(request, e)
    except Exception as e:
        record_submission("failed")
        log_error(logger, e, "inquiry_processing_failed")
        return _json(request, 500, {"success": False, "message": GENERIC_FAILURE})

    return _json(request, 200, {"success": True})


async def inquiry_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Answer every unsupported method on the inquiry route with the JSON envelope.

    Other HTTP errors go to FastAPI's default handler.
    """
    if exc.status_code == 405 and request.url.path == INQUIRY_PATH:
        error = MalformedRequestError("Method not allowed", status_code=405)
        return _failure(request, error, headers={"Allow": ALLOWED_METHODS})
    return await http_exception_handler(request, exc)


@router.get("/health", response_model=HealthResponse)
async def inquiry_health(request: Request):
    """Check inquiry service health"""
    pipeline: InquiryPipeline = request.app.state.pipeline
    return HealthResponse(
        status="healthy",
        logged_inquiries=await pipeline.store.count(),
        mailing_list_configured=pipeline.mailing_list.configured,
        webhook_configured=pipeline.webhook.configured,
    )
