"""Reshaping of standings, status and schedule data for dashboard widgets."""

from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from analytics.schemas.analysis import DashboardWidget, WidgetSection

# Number of constructors shown per bar-race frame
POINTS_RACE_TOP_N = 15

_SUFFIXES = ["th", "st", "nd", "rd"]


def ordinal_suffix(number: int | str | None) -> str | None:
    """
    Format a number with its English ordinal suffix (1st, 2nd, 11th, 23rd).

    Returns None for missing input.
    """
    if not number:
        return None

    value = int(number)
    tens = value % 100
    if 11 <= tens <= 13:
        return f"{value}th"
    suffix = _SUFFIXES[value % 10] if value % 10 < 4 else "th"
    return f"{value}{suffix}"


def summarize_constructor_standing(standings_list: Mapping) -> dict:
    """
    Summarize a constructor's entry from a StandingsLists element.

    Args:
        standings_list: One upstream StandingsLists entry holding a single
            ConstructorStandings row

    Returns:
        Dict with points, ordinal position, ordinal round and wins
    """
    standing = standings_list["ConstructorStandings"][0]
    return {
        "points": standing.get("points"),
        "position": ordinal_suffix(standing.get("position")),
        "round": ordinal_suffix(standings_list.get("round")),
        "wins": standing.get("wins"),
    }


def status_sections(statuses: Sequence[Mapping]) -> list[dict]:
    """Turn upstream finishing-status counts into widget sections."""
    return [
        {"number": int(status["count"]), "label": status["status"]}
        for status in statuses
    ]


def points_progression(standings_lists: Sequence[Mapping]) -> dict[str, dict[str, int]]:
    """
    Collect each constructor's final points per season.

    Args:
        standings_lists: Upstream StandingsLists, one per season

    Returns:
        Mapping of team name to {season: points}
    """
    data: dict[str, dict[str, int]] = {}
    for season in standings_lists:
        for standing in season.get("ConstructorStandings", []):
            team = standing["Constructor"]["name"]
            # Fractional points ("9.5") are truncated
            data.setdefault(team, {})[str(season["season"])] = int(float(standing["points"]))
    return data


def points_race_frame(
    progression: Mapping[str, Mapping[str, int]],
    year: int | str,
    top_n: int = POINTS_RACE_TOP_N,
) -> list[tuple[str, int]]:
    """
    Rank constructors by points for one season.

    Teams without an entry for ``year`` count as zero points.
    """
    frame = [(team, seasons.get(str(year), 0)) for team, seasons in progression.items()]
    frame.sort(key=lambda pair: pair[1], reverse=True)
    return frame[:top_n]


def race_start(date: str, time: str | None) -> datetime:
    """Combine an upstream race date and optional UTC time."""
    clock = (time or "00:00:00Z").rstrip("Z")
    return datetime.fromisoformat(f"{date}T{clock}").replace(tzinfo=timezone.utc)


def countdown(target: datetime, now: datetime | None = None) -> dict[str, int]:
    """
    Split the time left until ``target`` into days, hours, minutes and seconds.

    All fields are zero once the target has passed.
    """
    now = now or datetime.now(timezone.utc)
    remaining = int((target - now).total_seconds())
    if remaining <= 0:
        return {"days": 0, "hours": 0, "minutes": 0, "seconds": 0}

    days, remaining = divmod(remaining, 86400)
    hours, remaining = divmod(remaining, 3600)
    minutes, seconds = divmod(remaining, 60)
    return {"days": days, "hours": hours, "minutes": minutes, "seconds": seconds}


def build_dashboard_widgets(
    races_completed: Mapping[str, Any] | None,
    standing: Mapping[str, Any] | None,
    status: Mapping[str, Any] | None,
    next_race: Mapping[str, Any] | None,
    now: datetime | None = None,
) -> list[DashboardWidget]:
    """
    Assemble dashboard tiles from independently fetched pieces.

    A piece that failed to load is passed as None and its tile is left out.
    """
    widgets = []

    if races_completed:
        widgets.append(
            DashboardWidget(
                title="Completed in current season",
                sections=[WidgetSection(number=races_completed["racesCompleted"], label="Races")],
            )
        )

    if standing:
        widgets.append(
            DashboardWidget(
                title="Standings",
                sections=[
                    WidgetSection(number=standing["points"], label="Points"),
                    WidgetSection(number=standing["position"], label="Position"),
                    WidgetSection(number=standing["round"], label="Round"),
                    WidgetSection(number=standing["wins"], label="Wins"),
                ],
            )
        )

    if status:
        widgets.append(
            DashboardWidget(
                title=status["title"],
                sections=[WidgetSection(**section) for section in status["sections"]],
            )
        )

    if next_race:
        remaining = countdown(race_start(next_race["date"], next_race.get("time")), now)
        widgets.append(
            DashboardWidget(
                title=f"Countdown - {next_race['raceName']} - {next_race['season']}",
                sections=[
                    WidgetSection(number=remaining["days"], label="days"),
                    WidgetSection(number=remaining["hours"], label="hrs"),
                    WidgetSection(number=remaining["minutes"], label="mins"),
                    WidgetSection(number=remaining["seconds"], label="secs"),
                ],
            )
        )

    return widgets
