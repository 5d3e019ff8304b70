"""
Prometheus Metrics for the Inquiry Service

Exposes metrics for:
- Submissions by outcome
- Relay failures by relay
- Inquiry log write failures
"""

from prometheus_client import (
    Counter,
    CollectorRegistry, generate_latest,
    CONTENT_TYPE_LATEST
)

REGISTRY = CollectorRegistry()

INQUIRY_SUBMISSIONS_TOTAL = Counter(
    'inquiry_submissions_total',
    'Inquiry submissions by outcome (accepted, honeypot, invalid, failed)',
    ['outcome'],
    registry=REGISTRY
)

INQUIRY_RELAY_FAILURES_TOTAL = Counter(
    'inquiry_relay_failures_total',
    'Failed outbound relay calls',
    ['relay'],
    registry=REGISTRY
)

INQUIRY_LOG_WRITE_FAILURES_TOTAL = Counter(
    'inquiry_log_write_failures_total',
    'Failed appends to the inquiry log',
    registry=REGISTRY
)


def record_submission(outcome: str) -> None:
    INQUIRY_SUBMISSIONS_TOTAL.labels(outcome=outcome).inc()


def record_relay_failure(relay: str) -> None:
    INQUIRY_RELAY_FAILURES_TOTAL.labels(relay=relay).inc()


def get_metrics_text() -> bytes:
    """Render all inquiry metrics in Prometheus text format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
