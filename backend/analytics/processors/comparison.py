"""Driver comparison processing."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from analytics.schemas.analysis import (
    LOWER_IS_BETTER,
    ComparisonSeriesPoint,
    DriverStatValue,
    Statistic,
)

logger = logging.getLogger(__name__)


def _as_float(value: Any) -> float | None:
    """Coerce a raw upstream value to float, None if missing or unparsable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _coerce_entry(entry: DriverStatValue | Mapping) -> DriverStatValue:
    if isinstance(entry, DriverStatValue):
        return entry
    return DriverStatValue.model_validate(entry)


def transform_statistic(
    statistic: Statistic,
    entries: Sequence[DriverStatValue | Mapping] | None,
) -> list[ComparisonSeriesPoint]:
    """
    Normalize one statistic's values into plottable points.

    Lower-is-better statistics are inverted against the worst value in
    ``entries`` so the best driver gets the tallest bar. Entries without a
    usable value are dropped.

    Args:
        statistic: Which statistic the entries belong to
        entries: Raw per-driver values for the current selection

    Returns:
        Series points in input order
    """
    if not entries:
        return []

    values: list[tuple[str, float]] = []
    for entry in entries:
        item = _coerce_entry(entry)
        number = _as_float(item.value)
        if number is None:
            logger.debug(f"Dropping {statistic.value} for {item.name}: no value")
            continue
        values.append((item.name, number))

    if not values:
        return []

    if statistic in LOWER_IS_BETTER:
        # Worst value within this selection
        worst = max(number for _, number in values)
        return [
            ComparisonSeriesPoint(
                name=name,
                original_value=number,
                inverted_value=worst - number + 1,
            )
            for name, number in values
        ]

    return [
        ComparisonSeriesPoint(name=name, original_value=number, inverted_value=number)
        for name, number in values
    ]


def transform_comparison(
    raw: Mapping[str, Sequence[DriverStatValue | Mapping]],
) -> dict[str, list[ComparisonSeriesPoint]]:
    """
    Turn raw driver comparison data into chart-ready series.

    Every known statistic is present in the result, empty when ``raw`` has no
    data for it. Unknown keys in ``raw`` are ignored.

    Args:
        raw: Mapping of statistic name to per-driver values

    Returns:
        Mapping of statistic name to series points
    """
    return {
        statistic.value: transform_statistic(statistic, raw.get(statistic.value))
        for statistic in Statistic
    }


def parse_lap_time(text: str | None) -> float | None:
    """
    Convert a lap time string like ``"1:32.045"`` to seconds.

    Returns None for missing or malformed input.
    """
    if not text:
        return None
    try:
        total = 0.0
        for part in text.strip().split(":"):
            total = total * 60 + float(part)
    except ValueError:
        return None
    return total


def average_fastest_lap(races: Sequence[Mapping], driver_id: str) -> str | None:
    """
    Average a driver's fastest lap across a season of race results.

    Args:
        races: Upstream race entries, each with a ``Results`` list
        driver_id: Driver whose results to read

    Returns:
        Average in seconds formatted with two decimals, or None without data
    """
    fastest_laps = []
    for race in races:
        result = next(
            (r for r in race.get("Results", []) if r.get("Driver", {}).get("driverId") == driver_id),
            None,
        )
        if not result or not result.get("FastestLap"):
            continue
        seconds = parse_lap_time(result["FastestLap"].get("Time", {}).get("time"))
        if seconds is not None:
            fastest_laps.append(seconds)

    if not fastest_laps:
        return None

    return f"{sum(fastest_laps) / len(fastest_laps):.2f}"


def extract_standing_value(standing: Mapping, statistic: str) -> float | int | None:
    """Read a standings-derived statistic from a DriverStandings entry."""
    if statistic == Statistic.POSITION.value:
        position = standing.get("position")
        return int(position) if position else None
    if statistic == Statistic.POINTS.value:
        return _as_float(standing.get("points"))
    return None
