"""
Charts router - Driver comparison and race timeline chart data.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from analytics.processors.comparison import transform_comparison
from analytics.processors.timeline import reconstruct_timeline
from analytics.processors.visualization import (
    build_comparison_chart,
    build_points_race_chart,
    build_timeline_chart,
)
from analytics.processors.standings import points_progression
from observability.sentry_integration import add_breadcrumb
from sources.ergast import ErgastClient, build_driver_lookup, get_client

router = APIRouter()
logger = logging.getLogger(__name__)


class ComparisonRequest(BaseModel):
    """Driver comparison selection."""

    season: str | int | None = None
    drivers: list[str] = Field(default_factory=list, description="Driver ids")
    statistics: list[str] = Field(
        default_factory=list,
        description="Statistics to compare (position, points, fastestLap)",
    )


def _invalid_comparison(request: ComparisonRequest) -> JSONResponse | None:
    if not request.season or not request.drivers or not request.statistics:
        return JSONResponse(status_code=400, content={"error": "Invalid input parameters"})
    return None


@router.post("/driver-comparison")
async def driver_comparison(
    request: ComparisonRequest,
    client: ErgastClient = Depends(get_client),
):
    """
    Raw per-statistic values for the selected drivers.

    Drivers without data for the season get a null value.
    """
    if invalid := _invalid_comparison(request):
        return invalid

    raw = await client.compare_drivers(request.season, request.drivers, request.statistics)
    return {
        stat: [value.model_dump() for value in values]
        for stat, values in raw.items()
    }


@router.post("/driver-comparison/chart")
async def driver_comparison_chart(
    request: ComparisonRequest,
    client: ErgastClient = Depends(get_client),
):
    """
    Chart-ready comparison series for the selected drivers.

    Lower-is-better statistics are inverted against the worst value in this
    selection so a taller point always means a better result.
    """
    if invalid := _invalid_comparison(request):
        return invalid

    add_breadcrumb(
        message=f"Comparison chart for {len(request.drivers)} drivers in {request.season}",
        category="comparison",
        data={"statistics": request.statistics},
    )

    raw = await client.compare_drivers(request.season, request.drivers, request.statistics)
    series = transform_comparison(raw)

    # Category order follows the request; names come from upstream
    categories = [value.name for value in raw[request.statistics[0]]]
    chart = build_comparison_chart(series, categories, request.statistics)

    return {
        "series": {
            stat: [point.model_dump(by_alias=True) for point in points]
            for stat, points in series.items()
        },
        "chart": chart.model_dump(mode="json") if chart else None,
    }


@router.get("/race/{season}/{round_num}/timeline")
async def race_timeline(
    season: str,
    round_num: int,
    client: ErgastClient = Depends(get_client),
):
    """
    Pit stops and lap timings of one race as a single time-ordered event list.

    ``noData`` is true when the race has neither pit stops nor lap timings.
    """
    add_breadcrumb(
        message=f"Timeline requested for {season} round {round_num}",
        category="timeline",
    )

    race, drivers = await asyncio.gather(
        client.get_race_data(season, round_num),
        client.get_season_drivers(season),
    )

    events = reconstruct_timeline(race.pit_stops, race.laps, build_driver_lookup(drivers))
    logger.info(f"Reconstructed {len(events)} timeline events for {season} round {round_num}")

    chart = build_timeline_chart(events, title=f"Race Analysis - {season} Round {round_num}")
    return {
        "events": [event.model_dump(by_alias=True) for event in events],
        "noData": not events,
        "chart": chart.model_dump(mode="json") if chart else None,
    }


@router.get("/constructor-points-progress/{year}/chart")
async def constructor_points_chart(
    year: int,
    client: ErgastClient = Depends(get_client),
):
    """
    One season frame of the constructor points bar race.
    """
    progression = points_progression(await client.get_constructor_standings_history())
    chart = build_points_race_chart(progression, year)
    if chart is None:
        raise HTTPException(status_code=404, detail="No constructor standings available")
    return chart.model_dump(mode="json")
