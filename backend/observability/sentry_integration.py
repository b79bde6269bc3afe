"""Sentry error monitoring for the dashboard API.

Upstream failures are reported from the 502 handler and chart requests leave
breadcrumbs. Without a DSN every helper here is a no-op.
"""

import logging

import sentry_sdk
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

logger = logging.getLogger(__name__)

APP_RELEASE = "f1-dashboard-api@0.1.0"

# Request headers never sent to Sentry
SCRUBBED_HEADERS = ("authorization", "cookie", "x-api-key")


def init_sentry(
    dsn: str | None,
    environment: str = "development",
    traces_sample_rate: float = 0.1,
) -> bool:
    """
    Start Sentry when a DSN is configured.

    Args:
        dsn: Project DSN, monitoring stays off when empty
        environment: Deployment name reported with every event
        traces_sample_rate: Fraction of requests traced (0-1)

    Returns:
        True if Sentry was started
    """
    if not dsn:
        logger.info("SENTRY_DSN not set, error monitoring off")
        return False

    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            release=APP_RELEASE,
            traces_sample_rate=traces_sample_rate,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                StarletteIntegration(transaction_style="endpoint"),
                AsyncioIntegration(),
                # Errors logged by the upstream client become events
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            ],
            send_default_pii=False,
            max_breadcrumbs=50,
            before_send=_scrub_event,
            before_send_transaction=_drop_health_transactions,
        )
    except Exception as e:
        logger.error(f"Sentry failed to start: {e}")
        return False

    logger.info(f"Sentry started for {environment}")
    return True


def _scrub_event(event: dict, hint: dict) -> dict | None:
    headers = event.get("request", {}).get("headers")
    if headers:
        for name in SCRUBBED_HEADERS:
            if name in headers:
                headers[name] = "[Filtered]"
    return event


def _drop_health_transactions(event: dict, hint: dict) -> dict | None:
    if "health" in event.get("transaction", ""):
        return None
    return event


def capture_exception(exception: Exception, tags: dict | None = None) -> str | None:
    """Report an exception with optional tags, returning the Sentry event id."""
    with sentry_sdk.new_scope() as scope:
        for key, value in (tags or {}).items():
            scope.set_tag(key, value)
        return sentry_sdk.capture_exception(exception)


def add_breadcrumb(message: str, category: str, data: dict | None = None):
    """Record a step of the current request for later error reports."""
    sentry_sdk.add_breadcrumb(message=message, category=category, level="info", data=data or {})
