"""
Inquiry Service Configuration

Builds an immutable settings object once at startup. The app factory passes
it to the relay clients and the log appender, so nothing reads the process
environment while a request is being handled.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from core.secrets import get_secret

DEFAULT_PORT = 3000
DEFAULT_RELAY_TIMEOUT_SECONDS = 10.0
DEFAULT_LOG_PATH = "data/inquiries.json"
DEFAULT_PUBLIC_DIR = "public"

CONFIG_VARIABLES = (
    "ALLOWED_ORIGINS",
    "MAILCHIMP_API_KEY",
    "MAILCHIMP_SERVER_PREFIX",
    "MAILCHIMP_LIST_ID",
    "INQUIRY_WEBHOOK_URL",
    "INQUIRY_LOG_PATH",
    "PUBLIC_DIR",
    "RELAY_TIMEOUT_SECONDS",
    "PORT",
    "LOG_LEVEL",
)


def parse_origin_list(value: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated origin list, dropping blanks."""
    return tuple(part.strip() for part in (value or "").split(",") if part.strip())


def _parse_float(name: str, raw: Optional[str], default: float) -> float:
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def _parse_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class InquirySettings:
    """Read-only configuration for the lifetime of the process."""

    allowed_origins: Tuple[str, ...] = ()
    mailchimp_api_key: str = ""
    mailchimp_server_prefix: str = ""
    mailchimp_list_id: str = ""
    webhook_url: str = ""
    log_path: Path = field(default_factory=lambda: Path(DEFAULT_LOG_PATH))
    public_dir: Path = field(default_factory=lambda: Path(DEFAULT_PUBLIC_DIR))
    relay_timeout_seconds: float = DEFAULT_RELAY_TIMEOUT_SECONDS
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    environment: str = "development"

    @property
    def mailing_list_configured(self) -> bool:
        return bool(
            self.mailchimp_api_key
            and self.mailchimp_server_prefix
            and self.mailchimp_list_id
        )

    @property
    def webhook_configured(self) -> bool:
        return bool(self.webhook_url)

    def allows_any_origin(self) -> bool:
        return not self.allowed_origins or "*" in self.allowed_origins

    def is_origin_allowed(self, origin: Optional[str]) -> bool:
        """An origin is allowed only if it is non-empty and matches the allow-list."""
        if not origin:
            return False
        return self.allows_any_origin() or origin in self.allowed_origins

    @classmethod
    def from_env(cls) -> "InquirySettings":
        """
        Read settings from the environment (and .env files).

        Raises:
            ValueError: If a numeric setting cannot be parsed
        """
        return cls(
            allowed_origins=parse_origin_list(get_secret("ALLOWED_ORIGINS")),
            mailchimp_api_key=(get_secret("MAILCHIMP_API_KEY") or "").strip(),
            mailchimp_server_prefix=(get_secret("MAILCHIMP_SERVER_PREFIX") or "").strip(),
            mailchimp_list_id=(get_secret("MAILCHIMP_LIST_ID") or "").strip(),
            webhook_url=(get_secret("INQUIRY_WEBHOOK_URL") or "").strip(),
            log_path=Path(get_secret("INQUIRY_LOG_PATH") or DEFAULT_LOG_PATH),
            public_dir=Path(get_secret("PUBLIC_DIR") or DEFAULT_PUBLIC_DIR),
            relay_timeout_seconds=_parse_float(
                "RELAY_TIMEOUT_SECONDS",
                get_secret("RELAY_TIMEOUT_SECONDS"),
                DEFAULT_RELAY_TIMEOUT_SECONDS,
            ),
            host=get_secret("HOST") or "0.0.0.0",
            port=_parse_int("PORT", get_secret("PORT"), DEFAULT_PORT),
            log_level=(get_secret("LOG_LEVEL") or "INFO").upper(),
            environment=get_secret("ENVIRONMENT") or "development",
        )
