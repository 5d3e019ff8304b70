"""
End-to-End Tests for the Inquiry Submission Flow

Tests the complete flow:
API → Honeypot → Validation → Mailchimp → Webhook → Inquiry log

Scenarios covered:
1. Plain acceptance with no relays configured
2. Validation rejection
3. Honeypot discard
4. Mailchimp rejection surfaced to the caller
5. CORS preflight from an allowed origin
6. Repeat submitters and log ordering
"""

from datetime import datetime
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from backend.relays.mailing_list import subscriber_hash


# Mark all tests in this module as e2e tests
pytestmark = pytest.mark.e2e

MAILCHIMP = {
    "mailchimp_api_key": "0123456789abcdef-us21",
    "mailchimp_server_prefix": "us21",
    "mailchimp_list_id": "a1b2c3d4",
}
WEBHOOK_URL = "https://hooks.example.com/inquiry"


class TestInquiryScenarios:
    """Reference request/response scenarios."""

    def test_accepted_without_relays(self, client: TestClient, read_log):
        """No relay configured: success, one record, not synced."""
        response = client.post(
            "/api/inquiry",
            json={"name": "A", "email": "a@b.com", "message": "hi"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}

        records = read_log()
        assert len(records) == 1
        assert records[0]["mailchimpSynced"] is False
        assert set(records[0]) == {
            "name", "email", "organization", "phone", "message",
            "receivedAt", "mailchimpSynced",
        }

    def test_invalid_email_rejected(self, client: TestClient):
        response = client.post(
            "/api/inquiry",
            json={"name": "A", "email": "bad", "message": "hi"},
        )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Please use a valid email address.",
        }

    def test_honeypot_leaves_log_unchanged(self, client: TestClient, read_log):
        client.post("/api/inquiry", json={"name": "B", "email": "b@c.com", "message": "first"})
        before = read_log()

        response = client.post(
            "/api/inquiry",
            json={"name": "A", "email": "a@b.com", "message": "hi", "city": "NYC"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert read_log() == before

    def test_mailchimp_rejection_surfaced(self, make_client, upstream, read_log):
        upstream.respond("PUT", "/members/", 400, {"detail": "Invalid Resource"})
        client = make_client(**MAILCHIMP)

        response = client.post(
            "/api/inquiry",
            json={"name": "A", "email": "a@b.com", "message": "hi"},
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Invalid Resource"}
        assert read_log() == []

    def test_preflight_from_allowed_origin(self, make_client):
        client = make_client(allowed_origins=("https://example.com",))

        response = client.options(
            "/api/inquiry",
            headers={
                "Origin": "https://example.com",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 204
        assert response.headers["access-control-allow-origin"] == "https://example.com"


class TestInquiryFullRelay:
    """Everything configured: one submission fans out to every destination."""

    def test_all_destinations_receive_inquiry(
        self, make_client, upstream, valid_inquiry_data: Dict[str, str], read_log
    ):
        client = make_client(**MAILCHIMP, webhook_url=WEBHOOK_URL)

        response = client.post("/api/inquiry", json=valid_inquiry_data)

        assert response.status_code == 200
        methods = [(r.method, r.url.host) for r in upstream.requests]
        assert methods == [
            ("PUT", "us21.api.mailchimp.com"),
            ("POST", "us21.api.mailchimp.com"),
            ("POST", "hooks.example.com"),
        ]
        webhook_body = upstream.body(upstream.requests[-1])
        record = read_log()[0]
        assert record["mailchimpSynced"] is True
        assert webhook_body["receivedAt"] == record["receivedAt"]

    def test_repeat_submitter_upserts_same_member(
        self, make_client, upstream, valid_inquiry_data: Dict[str, str], read_log
    ):
        client = make_client(**MAILCHIMP)

        client.post("/api/inquiry", json=valid_inquiry_data)
        client.post("/api/inquiry", json={**valid_inquiry_data, "email": "ADA@example.com"})

        member_paths = {r.url.path for r in upstream.matching("PUT")}
        assert member_paths == {
            f"/3.0/lists/a1b2c3d4/members/{subscriber_hash('ada@example.com')}"
        }
        assert len(read_log()) == 2


class TestInquiryLogOrdering:

    def test_log_keeps_submission_order(self, client: TestClient, read_log):
        for i in range(5):
            response = client.post(
                "/api/inquiry",
                json={"name": f"User {i}", "email": f"user{i}@example.com", "message": "hi"},
            )
            assert response.status_code == 200

        records = read_log()
        assert [r["name"] for r in records] == [f"User {i}" for i in range(5)]
        stamps = [
            datetime.fromisoformat(r["receivedAt"].replace("Z", "+00:00"))
            for r in records
        ]
        assert stamps == sorted(stamps)

    def test_rejected_submissions_never_logged(self, client: TestClient, read_log):
        client.post("/api/inquiry", json={"name": "A", "email": "a@b.com", "message": ""})
        client.post("/api/inquiry", json={"name": "A", "email": "nope", "message": "hi"})
        client.post("/api/inquiry", content=b"{oops")

        assert read_log() == []
        assert client.get("/api/health").json()["logged_inquiries"] == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
