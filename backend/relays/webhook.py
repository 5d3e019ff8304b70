"""
Webhook Relay

Forwards each accepted inquiry as a JSON POST to an operator-configured URL.
"""

import logging

import httpx

from core.config import InquirySettings
from core.errors import RelayError
from core.validation import ValidatedInquiry

logger = logging.getLogger(__name__)

RELAY_NAME = "webhook"


class WebhookRelay:
    """POST inquiries to INQUIRY_WEBHOOK_URL; a no-op when unset."""

    name = RELAY_NAME

    def __init__(self, settings: InquirySettings, client: httpx.AsyncClient):
        self.url = settings.webhook_url
        self.timeout = settings.relay_timeout_seconds
        self.client = client

    @property
    def configured(self) -> bool:
        return bool(self.url)

    async def relay(self, inquiry: ValidatedInquiry) -> None:
        """
        Send the inquiry to the webhook.

        Raises:
            RelayError: On a non-2xx response or a transport failure
        """
        if not self.configured:
            return

        try:
            response = await self.client.post(
                self.url,
                json=inquiry.to_dict(),
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise RelayError(
                f"Webhook request failed ({type(e).__name__}).",
                relay=RELAY_NAME,
            ) from e

        if not response.is_success:
            raise RelayError(
                f"Webhook request failed ({response.status_code}).",
                relay=RELAY_NAME,
                upstream_status=response.status_code,
            )
        logger.debug("Webhook accepted inquiry (%s)", response.status_code)
