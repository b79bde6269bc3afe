"""
Data router - Seasons, drivers, races and per-race data.
"""

from fastapi import APIRouter, Depends, Query

from analytics.schemas.analysis import RaceData
from sources.ergast import ErgastClient, get_client

router = APIRouter()


@router.get("/seasons")
async def list_seasons(
    limit: int = Query(100, ge=1, le=100),
    offset: int = Query(0, ge=0),
    client: ErgastClient = Depends(get_client),
) -> list[str]:
    """
    List championship seasons, oldest first.
    """
    return await client.get_seasons(limit=limit, offset=offset)


@router.get("/drivers/{season}")
async def list_drivers(
    season: str,
    client: ErgastClient = Depends(get_client),
):
    """
    List drivers entered in a season.

    Each entry carries the upstream name fields plus a combined display name.
    """
    drivers = await client.get_season_drivers(season)
    return [
        {
            "driverId": driver["driverId"],
            "givenName": driver["givenName"],
            "familyName": driver["familyName"],
            "name": f"{driver['givenName']} {driver['familyName']}",
        }
        for driver in drivers
    ]


@router.get("/races/{season}")
async def list_races(
    season: str,
    client: ErgastClient = Depends(get_client),
):
    """
    List the races of a season (round, raceName, date, circuit).
    """
    return await client.get_season_races(season)


@router.get("/race/{season}/{round_num}", response_model=RaceData)
async def race_data(
    season: str,
    round_num: int,
    client: ErgastClient = Depends(get_client),
):
    """
    Pit stops and lap timings for one race.
    """
    return await client.get_race_data(season, round_num)
