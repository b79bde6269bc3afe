"""
Tests for the dashboard, data and chart routes.

The upstream client is replaced with an AsyncMock via dependency overrides.
"""

import pytest

from analytics.schemas.analysis import (
    DriverStatValue,
    LapRecord,
    PitStopRecord,
    RaceData,
)
from sources.ergast import UpstreamError


@pytest.fixture
def comparison_values():
    return {
        "position": [
            DriverStatValue(name="Max Verstappen", value=1),
            DriverStatValue(name="Fernando Alonso", value=4),
            DriverStatValue(name="nyck_de_vries", value=None),
        ],
        "points": [
            DriverStatValue(name="Max Verstappen", value=575),
            DriverStatValue(name="Fernando Alonso", value=206),
            DriverStatValue(name="nyck_de_vries", value=None),
        ],
    }


class TestDriverComparison:
    """Tests for the comparison endpoints."""

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"season": 2023, "drivers": [], "statistics": ["points"]},
            {"season": 2023, "drivers": ["alonso"], "statistics": []},
            {"drivers": ["alonso"], "statistics": ["points"]},
        ],
    )
    def test_invalid_input(self, client, fake_ergast, body):
        for path in ("/api/driver-comparison", "/api/driver-comparison/chart"):
            response = client.post(path, json=body)
            assert response.status_code == 400
            assert response.json() == {"error": "Invalid input parameters"}
        fake_ergast.compare_drivers.assert_not_called()

    def test_raw_values(self, client, fake_ergast, comparison_values):
        fake_ergast.compare_drivers.return_value = comparison_values
        body = {
            "season": 2023,
            "drivers": ["max_verstappen", "alonso", "nyck_de_vries"],
            "statistics": ["position", "points"],
        }

        response = client.post("/api/driver-comparison", json=body)

        assert response.status_code == 200
        data = response.json()
        assert data["position"][2] == {"name": "nyck_de_vries", "value": None}
        assert data["position"][1] == {"name": "Fernando Alonso", "value": 4}
        assert isinstance(data["position"][1]["value"], int)
        assert data["points"][0]["value"] == 575

    def test_chart_series(self, client, fake_ergast, comparison_values):
        fake_ergast.compare_drivers.return_value = comparison_values
        body = {
            "season": 2023,
            "drivers": ["max_verstappen", "alonso", "nyck_de_vries"],
            "statistics": ["position", "points"],
        }

        response = client.post("/api/driver-comparison/chart", json=body)

        assert response.status_code == 200
        data = response.json()
        assert data["series"]["position"] == [
            {"name": "Max Verstappen", "originalValue": 1, "invertedValue": 4},
            {"name": "Fernando Alonso", "originalValue": 4, "invertedValue": 1},
        ]
        assert data["series"]["fastestLap"] == []

        chart = data["chart"]
        assert chart["type"] == "comparison_area"
        assert chart["config"]["xAxis"]["categories"] == [
            "Max Verstappen",
            "Fernando Alonso",
            "nyck_de_vries",
        ]
        assert chart["data"][0]["data"] == [4, 1, None]

    def test_upstream_failure(self, client, fake_ergast):
        fake_ergast.compare_drivers.side_effect = UpstreamError("Failed to fetch 2023/drivers", "2023/drivers")
        body = {"season": 2023, "drivers": ["alonso"], "statistics": ["points"]}

        response = client.post("/api/driver-comparison", json=body)

        assert response.status_code == 502
        assert response.json() == {"error": "Failed to fetch 2023/drivers"}


class TestRaceTimeline:
    """Tests for the race timeline endpoint."""

    def test_timeline_events(self, client, fake_ergast, sample_drivers, sample_pit_stops, sample_laps):
        fake_ergast.get_race_data.return_value = RaceData(
            pit_stops=[PitStopRecord.model_validate(s) for s in sample_pit_stops],
            laps=[LapRecord.model_validate(lap) for lap in sample_laps],
        )
        fake_ergast.get_season_drivers.return_value = sample_drivers

        response = client.get("/api/race/2023/1/timeline")

        assert response.status_code == 200
        data = response.json()
        assert data["noData"] is False
        assert len(data["events"]) == 6
        assert data["events"][-1] == {
            "name": "Max Verstappen",
            "description": "Lap 17: Pit stop duration of 21.998 seconds.",
            "time": "15:36:48",
            "driverId": "max_verstappen",
        }
        assert data["chart"]["type"] == "race_timeline"
        fake_ergast.get_race_data.assert_awaited_once_with("2023", 1)

    def test_no_data(self, client, fake_ergast, sample_drivers):
        fake_ergast.get_race_data.return_value = RaceData()
        fake_ergast.get_season_drivers.return_value = sample_drivers

        response = client.get("/api/race/1955/3/timeline")

        assert response.status_code == 200
        assert response.json() == {"events": [], "noData": True, "chart": None}

    def test_race_data_uses_aliases(self, client, fake_ergast, sample_pit_stops):
        fake_ergast.get_race_data.return_value = RaceData(
            pit_stops=[PitStopRecord.model_validate(s) for s in sample_pit_stops],
        )

        response = client.get("/api/race/2023/1")

        assert response.status_code == 200
        data = response.json()
        assert data["laps"] == []
        assert data["pitStops"][0]["driverId"] == "alonso"


class TestDataRoutes:
    """Tests for selector data."""

    def test_seasons(self, client, fake_ergast):
        fake_ergast.get_seasons.return_value = ["1950", "1951"]

        response = client.get("/api/seasons?limit=2")

        assert response.json() == ["1950", "1951"]
        fake_ergast.get_seasons.assert_awaited_once_with(limit=2, offset=0)

    def test_seasons_limit_bounds(self, client, fake_ergast):
        assert client.get("/api/seasons?limit=500").status_code == 422

    def test_drivers(self, client, fake_ergast, sample_drivers):
        fake_ergast.get_season_drivers.return_value = sample_drivers

        response = client.get("/api/drivers/2023")

        assert response.json()[1] == {
            "driverId": "alonso",
            "givenName": "Fernando",
            "familyName": "Alonso",
            "name": "Fernando Alonso",
        }


class TestDashboard:
    """Tests for dashboard widgets."""

    def test_constructor_standings(self, client, fake_ergast):
        fake_ergast.get_constructor_standing.return_value = {
            "round": "3",
            "ConstructorStandings": [{"position": "2", "points": "102", "wins": "0"}],
        }

        for path in ("/api/constructor-standings", "/api/aston-martin-standings"):
            response = client.get(path)
            assert response.status_code == 200
            assert response.json() == {"points": "102", "position": "2nd", "round": "3rd", "wins": "0"}

        fake_ergast.get_constructor_standing.assert_awaited_with("aston_martin")

    def test_constructor_standings_missing(self, client, fake_ergast):
        fake_ergast.get_constructor_standing.return_value = None

        response = client.get("/api/constructor-standings?constructor=haas")

        assert response.status_code == 404

    def test_points_progress(self, client, fake_ergast):
        fake_ergast.get_constructor_standings_history.return_value = [
            {"season": "2022", "ConstructorStandings": [{"points": "55", "Constructor": {"name": "Aston Martin"}}]},
        ]

        response = client.get("/api/constructor-points-progress")
        assert response.json() == {"Aston Martin": {"2022": 55}}

        chart = client.get("/api/constructor-points-progress/2022/chart").json()
        assert chart["data"] == [{"name": "Aston Martin", "y": 55}]

    def test_dashboard_skips_failed_widgets(self, client, fake_ergast):
        fake_ergast.get_current_season.return_value = {"season": "2023", "racesCompleted": 5}
        fake_ergast.get_constructor_standing.side_effect = UpstreamError("Failed to fetch standings")
        fake_ergast.get_constructor_status.return_value = [{"status": "Finished", "count": "10"}]
        fake_ergast.get_next_race.return_value = None

        response = client.get("/api/dashboard")

        assert response.status_code == 200
        titles = [widget["title"] for widget in response.json()]
        assert titles == ["Completed in current season", "Status"]

    def test_countdown_without_next_race(self, client, fake_ergast):
        fake_ergast.get_next_race.return_value = None
        assert client.get("/api/countdown").status_code == 404
