"""
F1 Dashboard analytics

Pure transforms between the upstream statistics API and the dashboard charts:

upstream JSON → processors (comparison, timeline, standings) → chart specs
"""

from analytics.selection import Debouncer, RequestGeneration

# Import Pydantic schemas for external use
from analytics.schemas.analysis import (
    ChartType,
    Statistic,
    DriverStatValue,
    ComparisonSeriesPoint,
    RaceEvent,
    VisualizationSpec,
)

__all__ = [
    # Selection coordination
    "Debouncer",
    "RequestGeneration",
    # Schemas
    "ChartType",
    "Statistic",
    "DriverStatValue",
    "ComparisonSeriesPoint",
    "RaceEvent",
    "VisualizationSpec",
]
