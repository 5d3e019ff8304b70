"""
Inquiry Input Validation

Checks raw contact-form submissions, detects honeypot spam and builds the
normalized inquiry record.
"""

import re
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAX_MESSAGE_LENGTH = 5000
HONEYPOT_FIELD = "city"

INVALID_PAYLOAD = "Invalid payload."
REQUIRED_FIELDS_MISSING = "Name, email, and message are required."
INVALID_EMAIL = "Please use a valid email address."
MESSAGE_TOO_LONG = "Message is too long."


def _clean(payload: Dict[str, Any], field: str) -> str:
    """Trimmed string value of a field; non-strings count as empty."""
    value = payload.get(field)
    return value.strip() if isinstance(value, str) else ""


def is_honeypot_triggered(payload: Any) -> bool:
    """True when the hidden honeypot field was filled in, i.e. a bot sent it."""
    if not isinstance(payload, dict):
        return False
    return bool(_clean(payload, HONEYPOT_FIELD))


def validate_payload(payload: Any) -> Optional[str]:
    """
    Validate a raw submission.

    Rules are applied in order and the first failure wins.

    Args:
        payload: Decoded request body

    Returns:
        None if the submission is valid, otherwise a message for the submitter
    """
    if not isinstance(payload, dict):
        return INVALID_PAYLOAD

    name = _clean(payload, "name")
    email = _clean(payload, "email")
    message = _clean(payload, "message")

    if not name or not email or not message:
        return REQUIRED_FIELDS_MISSING
    if not EMAIL_PATTERN.match(email):
        return INVALID_EMAIL
    if len(message) > MAX_MESSAGE_LENGTH:
        return MESSAGE_TOO_LONG
    return None


@dataclass(frozen=True)
class ValidatedInquiry:
    """Normalized inquiry, only built from a payload that passed validation."""
    name: str
    email: str
    organization: str
    phone: str
    message: str
    received_at: str

    def to_dict(self) -> Dict[str, str]:
        """Wire/storage representation with camelCase timestamp key."""
        data = asdict(self)
        data["receivedAt"] = data.pop("received_at")
        return data


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_inquiry(payload: Dict[str, Any], now: Optional[datetime] = None) -> ValidatedInquiry:
    """Trim all fields and stamp the acceptance time."""
    return ValidatedInquiry(
        name=_clean(payload, "name"),
        email=_clean(payload, "email"),
        organization=_clean(payload, "organization"),
        phone=_clean(payload, "phone"),
        message=_clean(payload, "message"),
        received_at=utc_timestamp(now),
    )
