"""Data processors that turn upstream payloads into chart-ready data."""

from analytics.processors.comparison import transform_comparison, average_fastest_lap
from analytics.processors.timeline import reconstruct_timeline, derive_lap_clock
from analytics.processors.standings import build_dashboard_widgets, points_progression
from analytics.processors.visualization import generate_viz_spec, build_comparison_chart, build_timeline_chart

__all__ = [
    "transform_comparison",
    "average_fastest_lap",
    "reconstruct_timeline",
    "derive_lap_clock",
    "build_dashboard_widgets",
    "points_progression",
    "generate_viz_spec",
    "build_comparison_chart",
    "build_timeline_chart",
]
