"""
Remote data sources

Clients for the upstream statistics API the dashboard proxies.
"""

from sources.ergast import (
    ErgastClient,
    UpstreamError,
    build_driver_lookup,
    init_client,
    close_client,
    get_client,
)

__all__ = [
    "ErgastClient",
    "UpstreamError",
    "build_driver_lookup",
    "init_client",
    "close_client",
    "get_client",
]
