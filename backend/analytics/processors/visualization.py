"""Visualization specification generation."""

import uuid
from collections.abc import Mapping, Sequence
from typing import Any

from analytics.processors.standings import POINTS_RACE_TOP_N, points_race_frame
from analytics.processors.timeline import event_epoch_ms
from analytics.schemas.analysis import (
    STATISTIC_LABELS,
    ChartType,
    ComparisonSeriesPoint,
    RaceEvent,
    Statistic,
    VisualizationSpec,
)


# Comparison series colours, the last one repeats for extra statistics
SERIES_COLORS = ["#00473f", "#cedc00", "#5191F0"]

BAR_RACE_COLORS = [
    "#4caefe",
    "#3fbdf3",
    "#35c3e8",
    "#2bc9dc",
    "#20cfe1",
    "#16d4e6",
    "#0dd9db",
    "#03dfd0",
    "#00e4c5",
    "#00e9ba",
    "#00eeaf",
    "#23e274",
]

# Timeline markers: events tied to a driver vs. race-level events
DRIVER_MARKER = {"symbol": "circle", "fillColor": "#FF0000"}
RACE_MARKER = {"symbol": "diamond", "fillColor": "#0000FF"}


def generate_viz_spec(
    viz_type: ChartType,
    data: dict[str, Any],
    drivers: list[str],
    title: str = "",
) -> VisualizationSpec | None:
    """
    Generate a visualization specification for the frontend.

    Args:
        viz_type: Type of chart to generate
        data: Processed data dict
        drivers: Driver display names (chart categories)
        title: Chart title

    Returns:
        VisualizationSpec or None if insufficient data
    """
    generators = {
        ChartType.COMPARISON_AREA: _generate_comparison_area,
        ChartType.RACE_TIMELINE: _generate_race_timeline,
        ChartType.BAR_RACE: _generate_bar_race,
    }

    generator = generators.get(viz_type)
    if not generator:
        return None

    return generator(data, drivers, title)


def build_comparison_chart(
    series: Mapping[str, Sequence[ComparisonSeriesPoint]],
    drivers: list[str],
    statistics: Sequence[str],
    title: str = "",
) -> VisualizationSpec | None:
    """Chart spec for transformed driver comparison series."""
    return generate_viz_spec(
        ChartType.COMPARISON_AREA,
        {"series": series, "statistics": list(statistics)},
        drivers,
        title,
    )


def build_timeline_chart(events: Sequence[RaceEvent], title: str = "") -> VisualizationSpec | None:
    """Chart spec for a reconstructed race timeline."""
    drivers = sorted({event.driver_id for event in events if event.driver_id})
    return generate_viz_spec(ChartType.RACE_TIMELINE, {"events": list(events)}, drivers, title)


def build_points_race_chart(
    progression: Mapping[str, Mapping[str, int]],
    year: int | str,
    top_n: int = POINTS_RACE_TOP_N,
) -> VisualizationSpec | None:
    """Chart spec for one season frame of the constructor points race."""
    return generate_viz_spec(
        ChartType.BAR_RACE,
        {"progression": progression, "year": year, "top_n": top_n},
        [],
    )


def _statistic_label(statistic: str) -> str:
    try:
        return STATISTIC_LABELS[Statistic(statistic)]
    except ValueError:
        return statistic


def _generate_comparison_area(
    data: dict[str, Any],
    drivers: list[str],
    title: str,
) -> VisualizationSpec | None:
    """Generate per-statistic area series over a shared driver axis."""
    statistics = data.get("statistics", [])
    series = data.get("series", {})
    if not statistics or not drivers:
        return None

    labels = [_statistic_label(stat) for stat in statistics]
    chart_data = []
    y_axes = []

    for index, stat in enumerate(statistics):
        # Align to categories by name; drivers without a value become gaps
        by_name = {point.name: point for point in series.get(stat, [])}
        points = [by_name.get(driver) for driver in drivers]

        chart_data.append({
            "name": labels[index],
            "statistic": stat,
            "yAxis": index,
            "color": SERIES_COLORS[min(index, len(SERIES_COLORS) - 1)],
            "fillOpacity": 0.5,
            "data": [point.inverted_value if point else None for point in points],
            "originalValues": [point.original_value if point else None for point in points],
        })
        y_axes.append({
            "title": {"text": labels[index]},
            "opposite": index % 2 != 0,
            "gridLineWidth": 0,
        })

    return VisualizationSpec(
        id=str(uuid.uuid4()),
        type=ChartType.COMPARISON_AREA,
        title=title or f"Driver Comparison - {', '.join(labels)}",
        data=chart_data,
        config={
            "chart": {"type": "areaspline", "height": 650, "marginTop": 50},
            "xAxis": {"categories": drivers, "gridLineWidth": 0},
            "yAxis": y_axes,
            "tooltip": {"shared": True, "valueField": "originalValues"},
            "legend": {"align": "center", "verticalAlign": "bottom", "layout": "horizontal"},
        },
        drivers=drivers,
    )


def _generate_race_timeline(
    data: dict[str, Any],
    drivers: list[str],
    title: str,
) -> VisualizationSpec | None:
    """Generate a timeline of race events on a clock axis."""
    events: list[RaceEvent] = data.get("events", [])
    if not events:
        return None

    chart_data = [
        {
            "x": event_epoch_ms(event.time),
            "name": event.name,
            "description": event.description,
            "label": event.time,
            "marker": DRIVER_MARKER if event.driver_id else RACE_MARKER,
        }
        for event in events
    ]

    return VisualizationSpec(
        id=str(uuid.uuid4()),
        type=ChartType.RACE_TIMELINE,
        title=title or "Race Analysis",
        data=chart_data,
        config={
            "chart": {"type": "timeline"},
            "xAxis": {"type": "datetime", "labels": {"format": "{value:%H:%M:%S}"}},
            "yAxis": {"title": {"text": "Race Events"}},
            "dataLabels": {
                "allowOverlap": False,
                "format": "{point.name}<br/>{point.description}",
            },
        },
        drivers=drivers,
        annotations=[
            {"type": "pit_stop", "time": event.time, "driverId": event.driver_id}
            for event in events
            if "Pit stop" in event.description
        ],
    )


def _generate_bar_race(
    data: dict[str, Any],
    drivers: list[str],
    title: str,
) -> VisualizationSpec | None:
    """Generate one season frame of the constructor points bar race."""
    progression = data.get("progression", {})
    year = data.get("year")
    if not progression or year is None:
        return None

    frame = points_race_frame(progression, year, data.get("top_n", POINTS_RACE_TOP_N))

    return VisualizationSpec(
        id=str(uuid.uuid4()),
        type=ChartType.BAR_RACE,
        title=title or f"Team's Points Progression Over the Years {year}",
        data=[{"name": team, "y": points} for team, points in frame],
        config={
            "chart": {"type": "bar", "animation": True},
            "xAxis": {"type": "category", "title": {"text": "Teams"}},
            "yAxis": {"opposite": True, "title": {"text": "Points"}},
            "series": {
                "name": str(year),
                "colorByPoint": True,
                "dataSorting": {"enabled": True, "matchByName": True},
                "dataLabels": {"enabled": True},
            },
            "colors": BAR_RACE_COLORS,
        },
        drivers=drivers,
    )
