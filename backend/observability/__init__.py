"""Observability module for the F1 Dashboard API.

Provides Sentry integration for error monitoring and alerting.
"""

from observability.sentry_integration import (
    init_sentry,
    capture_exception,
    add_breadcrumb,
)

__all__ = [
    "init_sentry",
    "capture_exception",
    "add_breadcrumb",
]
