"""Race timeline reconstruction from pit stops and lap timings."""

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta, timezone

from analytics.schemas.analysis import LapRecord, PitStopRecord, RaceEvent

logger = logging.getLogger(__name__)

# Every event clock is read on this date so times of day become comparable
TIMELINE_DATE = datetime(2023, 1, 1, tzinfo=timezone.utc)

# Lap events are spread across this hour of the timeline axis
LAP_CLOCK_HOUR = 12


def derive_lap_clock(raw_time: str, lap: int) -> str:
    """
    Place a lap timing on the timeline clock.

    The minute field of the raw timing is offset by the lap number and the
    seconds field is reused as-is, giving ``"12:<MM>:<seconds>"``. Both
    ``"1:32:045"`` and Ergast's ``"1:32.045"`` read as minute ``32``,
    seconds ``045``. A minute past 59 carries into the hour.

    Args:
        raw_time: Lap time as reported upstream
        lap: Lap number the timing belongs to

    Returns:
        Derived clock string

    Raises:
        ValueError: If the raw timing cannot be split into its fields
    """
    fields = raw_time.strip().split(":")
    if len(fields) == 3:
        minute_field, seconds = fields[1], fields[2]
    elif len(fields) == 2:
        minute_field, _, seconds = fields[1].partition(".")
    else:
        raise ValueError(f"Unrecognised lap time {raw_time!r}")

    if not minute_field.isdigit() or not seconds.isdigit():
        raise ValueError(f"Unrecognised lap time {raw_time!r}")

    minute = int(minute_field) + int(lap)
    hour = LAP_CLOCK_HOUR + minute // 60
    if minute > 59:
        logger.debug(f"Lap {lap} clock minute {minute} carried into hour {hour}")
    return f"{hour}:{minute % 60:02d}:{seconds}"


def event_timestamp(time: str) -> datetime:
    """
    Read an event clock string on the fixed timeline date.

    A three-digit seconds field holds the raw millisecond digits of a
    derived lap clock and is read as thousandths of a second
    (``"12:03:500"`` is 12:03:00.500), so a lap event stays inside its
    derived minute. Any other seconds field must be below 60.

    Raises:
        ValueError: If hour, minute or seconds are out of range, or the
            string is not ``H:M:S``
    """
    fields = time.strip().split(":")
    if len(fields) != 3:
        raise ValueError(f"Unrecognised event time {time!r}")

    hour, minute = int(fields[0]), int(fields[1])
    seconds_field = fields[2]
    if len(seconds_field) == 3 and seconds_field.isdigit():
        seconds = int(seconds_field) / 1000
    else:
        seconds = float(seconds_field)
        if not 0 <= seconds < 60:
            raise ValueError(f"Invalid seconds in {time!r}")

    return TIMELINE_DATE.replace(hour=hour, minute=minute) + timedelta(seconds=seconds)


def event_epoch_ms(time: str) -> int:
    """Milliseconds since the Unix epoch for an event clock string."""
    return int(event_timestamp(time).timestamp() * 1000)


def _pit_stop_events(
    pit_stops: Sequence[PitStopRecord | Mapping],
    driver_names: Mapping[str, str],
) -> list[RaceEvent]:
    events = []
    for raw in pit_stops:
        stop = raw if isinstance(raw, PitStopRecord) else PitStopRecord.model_validate(raw)
        events.append(
            RaceEvent(
                name=driver_names.get(stop.driver_id, stop.driver_id),
                description=f"Lap {stop.lap}: Pit stop duration of {stop.duration} seconds.",
                time=stop.time,
                driver_id=stop.driver_id,
            )
        )
    return events


def _lap_events(
    laps: Sequence[LapRecord | Mapping],
    driver_names: Mapping[str, str],
) -> list[RaceEvent]:
    events = []
    for raw in laps:
        lap = raw if isinstance(raw, LapRecord) else LapRecord.model_validate(raw)
        for timing in lap.timings:
            try:
                clock = derive_lap_clock(timing.time, lap.lap)
            except ValueError as e:
                logger.warning(f"Skipping lap {lap.lap} timing for {timing.driver_id}: {e}")
                continue

            driver = driver_names.get(timing.driver_id, timing.driver_id)
            events.append(
                RaceEvent(
                    name=f"{driver} Lap Time",
                    description=f"Lap {lap.lap}: Time - {timing.time}",
                    time=clock,
                    driver_id=timing.driver_id,
                )
            )
    return events


def reconstruct_timeline(
    pit_stops: Sequence[PitStopRecord | Mapping],
    laps: Sequence[LapRecord | Mapping],
    driver_names: Mapping[str, str],
) -> list[RaceEvent]:
    """
    Merge pit stops and lap timings into one time-ordered event list.

    Pit stop events come first in insertion order, so on a tied clock a pit
    stop stays ahead of a lap event. Events whose clock cannot be read are
    dropped with a warning.

    Args:
        pit_stops: Pit stop records for the race
        laps: Lap records with per-driver timings
        driver_names: Driver id to display name lookup

    Returns:
        Events sorted by clock, empty when the race has no data
    """
    keyed: list[tuple[datetime, RaceEvent]] = []
    for event in _pit_stop_events(pit_stops, driver_names) + _lap_events(laps, driver_names):
        try:
            keyed.append((event_timestamp(event.time), event))
        except ValueError as e:
            logger.warning(f"Dropping timeline event {event.name!r}: {e}")

    # list.sort is stable, ties keep insertion order
    keyed.sort(key=lambda pair: pair[0])
    return [event for _, event in keyed]
