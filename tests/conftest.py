"""Pytest configuration and fixtures for the inquiry service test suite."""
import json
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

# Ensure project modules are importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.inquiry_app import create_app  # noqa: E402
from core.config import InquirySettings  # noqa: E402


MAILCHIMP_SETTINGS = {
    "mailchimp_api_key": "0123456789abcdef-us21",
    "mailchimp_server_prefix": "us21",
    "mailchimp_list_id": "a1b2c3d4",
}


# ============================================================================
# UPSTREAM TEST DOUBLE
# ============================================================================

class UpstreamRecorder:
    """
    Stand-in for Mailchimp and the webhook endpoint.

    Captures every outbound request and answers from configured rules.
    Unmatched requests get 200 with an empty JSON object.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._rules: List[Tuple[str, str, Callable[[httpx.Request], httpx.Response]]] = []

    def respond(self, method: str, url_fragment: str, status_code: int = 200,
                json_body: Any = None, text: Optional[str] = None):
        """Answer matching requests with a fixed response."""
        def action(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json_body if json_body is not None else {})
        self._rules.append((method, url_fragment, action))

    def fail(self, method: str, url_fragment: str, exc_type=httpx.ConnectError):
        """Raise a transport error for matching requests."""
        def action(request: httpx.Request) -> httpx.Response:
            raise exc_type("simulated failure", request=request)
        self._rules.append((method, url_fragment, action))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for method, fragment, action in reversed(self._rules):
            if request.method == method and fragment in str(request.url):
                return action(request)
        return httpx.Response(200, json={})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def matching(self, method: str, url_fragment: str = "") -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and url_fragment in str(r.url)
        ]

    @staticmethod
    def body(request: httpx.Request) -> Dict[str, Any]:
        return json.loads(request.content)


@pytest.fixture
def upstream() -> UpstreamRecorder:
    """Fresh upstream double per test."""
    return UpstreamRecorder()


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================

@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "inquiries.json"


@pytest.fixture
def make_settings(tmp_path: Path, log_path: Path):
    """Build settings isolated to tmp_path, with keyword overrides."""
    def _make(**overrides) -> InquirySettings:
        values = {
            "log_path": log_path,
            "public_dir": tmp_path / "public",
        }
        values.update(overrides)
        return InquirySettings(**values)
    return _make


@pytest.fixture
def mailchimp_settings(make_settings) -> InquirySettings:
    return make_settings(**MAILCHIMP_SETTINGS)


# ============================================================================
# SUBMISSION FIXTURES
# ============================================================================

@pytest.fixture
def valid_inquiry_data() -> Dict[str, str]:
    """Complete, valid contact-form submission."""
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "organization": "Analytical Engines Ltd",
        "phone": "+44 20 7946 0000",
        "message": "We would like a quote for a site redesign.",
    }


@pytest.fixture
def minimal_inquiry_data() -> Dict[str, str]:
    """Required fields only."""
    return {
        "name": "A",
        "email": "a@b.com",
        "message": "hi",
    }


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================

@pytest.fixture
def make_client(make_settings, upstream):
    """
    Build a TestClient around a fresh app.

    Outbound relay calls go to the upstream double. Clients are closed at
    teardown.
    """
    stack = ExitStack()

    def _make(**overrides) -> TestClient:
        app = create_app(make_settings(**overrides), http_client=upstream.client())
        return stack.enter_context(TestClient(app))

    yield _make
    stack.close()


@pytest.fixture
def client(make_client) -> TestClient:
    """Client with no relays configured."""
    return make_client()


@pytest.fixture
def read_log(log_path: Path) -> Callable[[], List[Dict[str, Any]]]:
    """Parsed inquiry log, or an empty list if it was never written."""
    def _read() -> List[Dict[str, Any]]:
        if not log_path.exists():
            return []
        return json.loads(log_path.read_text(encoding="utf-8"))
    return _read


# ============================================================================
# PYTEST MARKERS
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "e2e: mark test as end-to-end test"
    )
