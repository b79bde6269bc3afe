"""
Ergast API Integration

Fetches seasons, drivers, races, standings, pit stops and lap timings from
an Ergast-compatible statistics API and re-shapes them for the dashboard.

API: https://github.com/jolpica/jolpica-f1 (Ergast-compatible mirror)
"""

import asyncio
import logging
from collections.abc import Sequence
from datetime import date

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from analytics.processors.comparison import average_fastest_lap, extract_standing_value
from analytics.schemas.analysis import (
    DriverStatValue,
    LapRecord,
    LapTiming,
    PitStopRecord,
    RaceData,
    Statistic,
)
from db.cache import _generate_cache_key, cache_get, cache_set, ttl_for

logger = logging.getLogger(__name__)

ERGAST_BASE_URL = "https://api.jolpi.ca/ergast/f1"

# Largest page the upstream API serves
PAGE_SIZE = 100


class UpstreamError(Exception):
    """Raised when the statistics API fails or returns an unusable payload."""

    def __init__(self, message: str, endpoint: str | None = None):
        super().__init__(message)
        self.endpoint = endpoint


def build_driver_lookup(drivers: Sequence[dict]) -> dict[str, str]:
    """Map driver id to ``"<givenName> <familyName>"``."""
    return {
        driver["driverId"]: f"{driver['givenName']} {driver['familyName']}"
        for driver in drivers
    }


class ErgastClient:
    """
    Client for the Ergast F1 API.

    Responses are served from the Redis cache when it is enabled.
    """

    def __init__(self, base_url: str = ERGAST_BASE_URL, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _request(self, url: str, params: dict | None) -> httpx.Response:
        client = await self._get_client()
        return await client.get(url, params=params)

    async def _fetch(self, endpoint: str, params: dict | None = None) -> dict:
        """
        Fetch an endpoint and return its ``MRData`` body.

        Raises:
            UpstreamError: On transport errors, error statuses or bad JSON
        """
        key = _generate_cache_key(endpoint, **(params or {}))
        cached = await cache_get(key)
        if cached is not None:
            return cached

        url = f"{self.base_url}/{endpoint}.json"
        try:
            response = await self._request(url, params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Ergast API error for {endpoint}: {e}")
            raise UpstreamError(f"Failed to fetch {endpoint}", endpoint) from e
        except ValueError as e:
            logger.error(f"Ergast API returned invalid JSON for {endpoint}: {e}")
            raise UpstreamError(f"Invalid response for {endpoint}", endpoint) from e

        if not isinstance(data, dict) or "MRData" not in data:
            raise UpstreamError(f"Unexpected response shape for {endpoint}", endpoint)

        body = data["MRData"]
        await cache_set(key, body, ttl_for(endpoint))
        return body

    async def _fetch_pages(self, endpoint: str, page_size: int = PAGE_SIZE) -> list[dict]:
        """Fetch every page of a paginated endpoint, later pages concurrently."""
        first = await self._fetch(endpoint, {"limit": page_size, "offset": 0})
        total = int(first.get("total", 0))

        rest = await asyncio.gather(*(
            self._fetch(endpoint, {"limit": page_size, "offset": offset})
            for offset in range(page_size, total, page_size)
        ))
        return [first, *rest]

    async def get_current_season(self, today: date | None = None) -> dict:
        """Current season and how many of its races have taken place."""
        data = await self._fetch("current", {"limit": PAGE_SIZE})
        table = data["RaceTable"]
        today = today or date.today()
        completed = sum(
            1 for race in table.get("Races", [])
            if date.fromisoformat(race["date"]) <= today
        )
        return {"season": table.get("season"), "racesCompleted": completed}

    async def get_next_race(self) -> dict | None:
        """Next scheduled race of the current season."""
        data = await self._fetch("current/next")
        races = data["RaceTable"].get("Races", [])
        return races[0] if races else None

    async def get_seasons(self, limit: int = PAGE_SIZE, offset: int = 0) -> list[str]:
        """Championship seasons, oldest first."""
        data = await self._fetch("seasons", {"limit": limit, "offset": offset})
        return [season["season"] for season in data["SeasonTable"]["Seasons"]]

    async def get_season_drivers(self, season: int | str) -> list[dict]:
        """Drivers entered in a season."""
        data = await self._fetch(f"{season}/drivers", {"limit": PAGE_SIZE})
        return data["DriverTable"]["Drivers"]

    async def get_season_races(self, season: int | str) -> list[dict]:
        """All races for a season."""
        data = await self._fetch(f"{season}", {"limit": PAGE_SIZE})
        return data["RaceTable"]["Races"]

    async def get_pit_stops(self, season: int | str, round_num: int | str) -> list[PitStopRecord]:
        """Pit stops of one race in upstream order."""
        pages = await self._fetch_pages(f"{season}/{round_num}/pitstops")
        stops = []
        for page in pages:
            races = page["RaceTable"].get("Races", [])
            for stop in races[0].get("PitStops", []) if races else []:
                stops.append(
                    PitStopRecord(
                        driver_id=stop["driverId"],
                        lap=int(stop["lap"]),
                        stop=int(stop["stop"]) if stop.get("stop") else None,
                        time=stop["time"],
                        duration=stop["duration"],
                    )
                )
        return stops

    async def get_laps(self, season: int | str, round_num: int | str) -> list[LapRecord]:
        """Lap timings of one race, one record per lap."""
        pages = await self._fetch_pages(f"{season}/{round_num}/laps")

        # A lap's timings can be split across two pages
        laps: dict[int, LapRecord] = {}
        for page in pages:
            races = page["RaceTable"].get("Races", [])
            for lap in races[0].get("Laps", []) if races else []:
                number = int(lap["number"])
                record = laps.setdefault(number, LapRecord(lap=number))
                record.timings.extend(
                    LapTiming(driver_id=timing["driverId"], time=timing["time"])
                    for timing in lap.get("Timings", [])
                )
        return [laps[number] for number in sorted(laps)]

    async def get_race_data(self, season: int | str, round_num: int | str) -> RaceData:
        """Pit stops and lap timings for one race, fetched concurrently."""
        pit_stops, laps = await asyncio.gather(
            self.get_pit_stops(season, round_num),
            self.get_laps(season, round_num),
        )
        return RaceData(laps=laps, pit_stops=pit_stops)

    async def get_driver_standing(self, season: int | str, driver_id: str) -> dict | None:
        """A driver's championship standing entry, None if they have none."""
        data = await self._fetch(f"{season}/drivers/{driver_id}/driverStandings")
        standings_lists = data.get("StandingsTable", {}).get("StandingsLists", [])
        if not standings_lists:
            return None
        standings = standings_lists[0].get("DriverStandings", [])
        return standings[0] if standings else None

    async def get_driver_results(self, season: int | str, driver_id: str) -> list[dict]:
        """A driver's race results for a season."""
        data = await self._fetch(f"{season}/drivers/{driver_id}/results", {"limit": PAGE_SIZE})
        return data["RaceTable"].get("Races", [])

    async def get_fastest_lap_average(self, season: int | str, driver_id: str) -> str | None:
        """Average of a driver's per-race fastest laps, None when unavailable."""
        try:
            races = await self.get_driver_results(season, driver_id)
        except UpstreamError as e:
            logger.error(f"Error fetching fastest lap time for {driver_id} in {season}: {e}")
            return None
        return average_fastest_lap(races, driver_id)

    async def get_constructor_standing(self, constructor_id: str) -> dict | None:
        """Current-season standings list holding one constructor's entry."""
        data = await self._fetch(f"current/constructors/{constructor_id}/constructorStandings")
        standings_lists = data["StandingsTable"].get("StandingsLists", [])
        if not standings_lists or not standings_lists[0].get("ConstructorStandings"):
            return None
        return standings_lists[0]

    async def get_constructor_status(self, constructor_id: str) -> list[dict]:
        """Finishing status counts for a constructor in the current season."""
        data = await self._fetch(f"current/constructors/{constructor_id}/status", {"limit": PAGE_SIZE})
        return data["StatusTable"].get("Status", [])

    async def get_constructor_standings_history(self) -> list[dict]:
        """Final constructor standings of every season, oldest first."""
        pages = await self._fetch_pages("constructorStandings")

        # A season's standings can be split across two pages
        seasons: dict[str, dict] = {}
        for page in pages:
            for standings_list in page["StandingsTable"].get("StandingsLists", []):
                merged = seasons.setdefault(
                    standings_list["season"],
                    {"season": standings_list["season"], "ConstructorStandings": []},
                )
                merged["ConstructorStandings"].extend(standings_list.get("ConstructorStandings", []))
        return list(seasons.values())

    async def compare_drivers(
        self,
        season: int | str,
        drivers: Sequence[str],
        statistics: Sequence[str],
    ) -> dict[str, list[DriverStatValue]]:
        """
        Collect raw per-statistic values for a set of drivers.

        Driver requests run concurrently. A driver without standings gets a
        None value named after their driver id.

        Args:
            season: Championship season
            drivers: Driver ids in display order
            statistics: Statistic names to collect

        Returns:
            Mapping of statistic name to one value per driver
        """
        standings = await asyncio.gather(
            *(self.get_driver_standing(season, driver_id) for driver_id in drivers)
        )

        fastest_laps: Sequence[str | None] = [None] * len(drivers)
        if Statistic.FASTEST_LAP.value in statistics:
            fastest_laps = await asyncio.gather(
                *(self.get_fastest_lap_average(season, driver_id) for driver_id in drivers)
            )

        comparison: dict[str, list[DriverStatValue]] = {}
        for stat in statistics:
            values = []
            for driver_id, standing, fastest_lap in zip(drivers, standings, fastest_laps):
                if standing is None:
                    logger.warning(f"No standings data found for driver {driver_id} in season {season}")
                    values.append(DriverStatValue(name=driver_id, value=None))
                    continue

                driver = standing["Driver"]
                if stat == Statistic.FASTEST_LAP.value:
                    value = fastest_lap
                else:
                    value = extract_standing_value(standing, stat)
                values.append(
                    DriverStatValue(name=f"{driver['givenName']} {driver['familyName']}", value=value)
                )
            comparison[stat] = values

        return comparison


# Shared client, created in the application lifespan
_client: ErgastClient | None = None


def init_client(base_url: str = ERGAST_BASE_URL, timeout: float = 30.0) -> ErgastClient:
    """Create the shared client."""
    global _client
    _client = ErgastClient(base_url=base_url, timeout=timeout)
    logger.info(f"Ergast client initialized: {base_url}")
    return _client


async def close_client():
    """Close the shared client."""
    global _client
    if _client:
        await _client.close()
        _client = None


def get_client() -> ErgastClient:
    """Get the shared client, creating a default one if needed."""
    global _client
    if _client is None:
        _client = ErgastClient()
    return _client
