"""Pydantic schemas for dashboard data."""

from analytics.schemas.analysis import (
    ChartType,
    Statistic,
    STATISTIC_LABELS,
    LOWER_IS_BETTER,
    DriverStatValue,
    ComparisonSeriesPoint,
    PitStopRecord,
    LapTiming,
    LapRecord,
    RaceData,
    RaceEvent,
    WidgetSection,
    DashboardWidget,
    VisualizationSpec,
)

__all__ = [
    # Chart vocabulary
    "ChartType",
    "Statistic",
    "STATISTIC_LABELS",
    "LOWER_IS_BETTER",
    # Comparison
    "DriverStatValue",
    "ComparisonSeriesPoint",
    # Race timeline
    "PitStopRecord",
    "LapTiming",
    "LapRecord",
    "RaceData",
    "RaceEvent",
    # Dashboard
    "WidgetSection",
    "DashboardWidget",
    "VisualizationSpec",
]
