"""
Dashboard router - Headline widgets for the current season.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from analytics.processors.standings import (
    build_dashboard_widgets,
    countdown,
    points_progression,
    race_start,
    status_sections,
    summarize_constructor_standing,
)
from analytics.schemas.analysis import DashboardWidget
from api.settings import AppSettings, get_settings
from sources.ergast import ErgastClient, UpstreamError, get_client

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/races-completed")
async def races_completed(client: ErgastClient = Depends(get_client)):
    """
    Current season and number of races already run.
    """
    return await client.get_current_season()


async def _constructor_standing(client: ErgastClient, constructor_id: str) -> dict:
    standings_list = await client.get_constructor_standing(constructor_id)
    if standings_list is None:
        raise HTTPException(
            status_code=404,
            detail=f"No standings for constructor {constructor_id} this season",
        )
    return summarize_constructor_standing(standings_list)


@router.get("/constructor-standings")
@router.get("/aston-martin-standings", include_in_schema=False)
async def constructor_standings(
    constructor: str | None = Query(None, description="Constructor id (default from settings)"),
    client: ErgastClient = Depends(get_client),
    settings: AppSettings = Depends(get_settings),
):
    """
    Points, position, round and wins of the featured constructor.
    """
    return await _constructor_standing(client, constructor or settings.constructor_id)


async def _constructor_status(client: ErgastClient, constructor_id: str) -> dict:
    statuses = await client.get_constructor_status(constructor_id)
    return {"title": "Status", "sections": status_sections(statuses)}


@router.get("/current-status")
async def current_status(
    constructor: str | None = Query(None, description="Constructor id (default from settings)"),
    client: ErgastClient = Depends(get_client),
    settings: AppSettings = Depends(get_settings),
):
    """
    Finishing status counts of the featured constructor this season.
    """
    return await _constructor_status(client, constructor or settings.constructor_id)


def _countdown_payload(race: dict) -> dict:
    return {
        "raceName": race["raceName"],
        "season": race["season"],
        "date": race["date"],
        "time": race.get("time"),
        "remaining": countdown(race_start(race["date"], race.get("time"))),
    }


@router.get("/countdown")
async def next_race_countdown(client: ErgastClient = Depends(get_client)):
    """
    Next race and the time left until it starts.
    """
    race = await client.get_next_race()
    if race is None:
        raise HTTPException(status_code=404, detail="No upcoming race this season")
    return _countdown_payload(race)


@router.get("/constructor-points-progress")
async def constructor_points_progress(client: ErgastClient = Depends(get_client)):
    """
    Final points of every constructor in every season: {team: {season: points}}.
    """
    history = await client.get_constructor_standings_history()
    return points_progression(history)


async def _optional(piece: str, coro):
    """Await a widget piece, returning None if it fails."""
    try:
        return await coro
    except (UpstreamError, HTTPException) as e:
        logger.warning(f"Dashboard widget {piece} unavailable: {e}")
        return None


@router.get("/dashboard", response_model=list[DashboardWidget])
async def dashboard(
    client: ErgastClient = Depends(get_client),
    settings: AppSettings = Depends(get_settings),
):
    """
    All headline widgets, fetched in parallel.

    A widget whose data could not be loaded is left out.
    """
    completed, standing, status, next_race = await asyncio.gather(
        _optional("races-completed", client.get_current_season()),
        _optional("standings", _constructor_standing(client, settings.constructor_id)),
        _optional("status", _constructor_status(client, settings.constructor_id)),
        _optional("countdown", client.get_next_race()),
    )
    return build_dashboard_widgets(completed, standing, status, next_race)
