"""
Mailchimp Mailing-List Relay

Subscribes the submitter to the configured audience and attaches the inquiry
as a member note:
- Idempotent member upsert keyed by the subscriber hash
- Double opt-in for new members (status_if_new = pending)
- Best-effort note with organization, phone and message
"""

import hashlib
import logging
from typing import Any, Dict, Optional

import httpx

from core.config import InquirySettings
from core.errors import RelayError
from core.secrets import mask_secret
from core.validation import ValidatedInquiry

logger = logging.getLogger(__name__)

RELAY_NAME = "mailing_list"
MAILCHIMP_API_VERSION = "3.0"


def subscriber_hash(email: str) -> str:
    """Mailchimp member lookup key: MD5 hex digest of the lower-cased email."""
    return hashlib.md5(email.lower().encode("utf-8")).hexdigest()


def build_note(inquiry: ValidatedInquiry) -> Optional[str]:
    """Join the non-empty free-text fields into a note, or None if all are empty."""
    parts = []
    if inquiry.organization:
        parts.append(f"Organization: {inquiry.organization}")
    if inquiry.phone:
        parts.append(f"Phone: {inquiry.phone}")
    if inquiry.message:
        parts.append(f"Message: {inquiry.message}")
    return "\n\n".join(parts) if parts else None


def _decode_body(response: httpx.Response) -> Dict[str, Any]:
    text = response.text
    if not text:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {"raw": text}
    return data if isinstance(data, dict) else {"raw": data}


class MailingListRelay:
    """
    Relay inquiries to a Mailchimp audience.

    Only used when the API key, server prefix and list ID are all configured.
    """

    name = RELAY_NAME

    def __init__(self, settings: InquirySettings, client: httpx.AsyncClient):
        self.api_key = settings.mailchimp_api_key
        self.server_prefix = settings.mailchimp_server_prefix
        self.list_id = settings.mailchimp_list_id
        self.timeout = settings.relay_timeout_seconds
        self.client = client

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.server_prefix and self.list_id)

    @property
    def base_url(self) -> str:
        return f"https://{self.server_prefix}.api.mailchimp.com/{MAILCHIMP_API_VERSION}"

    def member_path(self, member_hash: str) -> str:
        return f"/lists/{self.list_id}/members/{member_hash}"

    async def _request(self, method: str, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send one authenticated request to the Mailchimp API.

        Raises:
            RelayError: On a non-2xx response or a transport failure
        """
        if not self.configured:
            raise RelayError("Mailchimp not configured.", relay=RELAY_NAME)

        try:
            response = await self.client.request(
                method,
                f"{self.base_url}{path}",
                json=payload,
                headers={"Authorization": f"apikey {self.api_key}"},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise RelayError(
                f"Mailchimp request failed ({type(e).__name__}).",
                relay=RELAY_NAME,
                context={"path": path},
            ) from e

        data = _decode_body(response)
        if not response.is_success:
            message = (
                data.get("detail")
                or data.get("title")
                or f"Mailchimp request failed ({response.status_code})."
            )
            raise RelayError(
                str(message),
                relay=RELAY_NAME,
                upstream_status=response.status_code,
                context={"path": path},
            )
        return data

    async def upsert_member(self, inquiry: ValidatedInquiry) -> str:
        """Create or update the subscriber and return its hash."""
        member_hash = subscriber_hash(inquiry.email)
        payload = {
            "email_address": inquiry.email,
            "status_if_new": "pending",
            "merge_fields": {
                "FNAME": inquiry.name or "",
                "PHONE": inquiry.phone or "",
                "COMPANY": inquiry.organization or "",
            },
        }
        await self._request("PUT", self.member_path(member_hash), payload)
        return member_hash

    async def add_note(self, member_hash: str, note: str) -> bool:
        """
        Attach a note to the member.

        Returns False instead of raising; the subscription already succeeded.
        """
        try:
            await self._request("POST", f"{self.member_path(member_hash)}/notes", {"note": note})
        except RelayError as e:
            logger.warning(
                "mailing_list_note_failed: %s", e.message,
                extra={"member_hash": member_hash, "list_id": self.list_id},
            )
            return False
        return True

    async def relay(self, inquiry: ValidatedInquiry) -> None:
        """
        Upsert the submitter, then attach the inquiry note.

        Raises:
            RelayError: If the member upsert is rejected
        """
        logger.debug(
            "Relaying inquiry to Mailchimp list %s (key %s)",
            self.list_id, mask_secret(self.api_key),
        )
        member_hash = await self.upsert_member(inquiry)

        note = build_note(inquiry)
        if note:
            await self.add_note(member_hash, note)
