"""Schemas for dashboard transforms and chart specifications."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ChartType(str, Enum):
    """Supported visualization types."""
    COMPARISON_AREA = "comparison_area"     # Per-statistic driver comparison
    RACE_TIMELINE = "race_timeline"         # Pit stops and lap times on a clock axis
    BAR_RACE = "bar_race"                   # Constructor points per season frame


class Statistic(str, Enum):
    """Driver statistics the comparison chart knows how to plot."""
    POSITION = "position"
    POINTS = "points"
    FASTEST_LAP = "fastestLap"


STATISTIC_LABELS = {
    Statistic.POSITION: "Position",
    Statistic.POINTS: "Points",
    Statistic.FASTEST_LAP: "Fastest Lap Time",
}

# Statistics where a smaller number is the better result
LOWER_IS_BETTER = frozenset({Statistic.POSITION, Statistic.FASTEST_LAP})


class DriverStatValue(BaseModel):
    """One driver's raw value for one statistic."""

    name: str = Field(description="Driver display name")
    value: int | float | str | None = Field(
        default=None,
        description="Raw value; None when upstream has no data",
    )


class ComparisonSeriesPoint(BaseModel):
    """Chart-ready comparison value for a driver."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    original_value: float = Field(alias="originalValue")
    inverted_value: float = Field(
        alias="invertedValue",
        description="Plotted value, higher is always better",
    )


class PitStopRecord(BaseModel):
    """A single pit stop as re-shaped from upstream."""

    model_config = ConfigDict(populate_by_name=True)

    driver_id: str = Field(alias="driverId")
    lap: int
    stop: int | None = Field(default=None)
    time: str = Field(description="Wall-clock time of day, HH:MM:SS")
    duration: str = Field(description="Stationary time in seconds")


class LapTiming(BaseModel):
    """One driver's timing within a lap."""

    model_config = ConfigDict(populate_by_name=True)

    driver_id: str = Field(alias="driverId")
    time: str


class LapRecord(BaseModel):
    """All driver timings for one lap."""

    lap: int
    timings: list[LapTiming] = Field(default_factory=list)


class RaceData(BaseModel):
    """Pit stops and lap timings for one race."""

    model_config = ConfigDict(populate_by_name=True)

    laps: list[LapRecord] = Field(default_factory=list)
    pit_stops: list[PitStopRecord] = Field(default_factory=list, alias="pitStops")


class RaceEvent(BaseModel):
    """A labelled point on the race timeline."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    time: str = Field(description="Clock position on the timeline axis")
    driver_id: str | None = Field(default=None, alias="driverId")


class WidgetSection(BaseModel):
    """A number/label pair shown inside a dashboard widget."""

    number: int | float | str | None
    label: str


class DashboardWidget(BaseModel):
    """A titled dashboard tile."""

    title: str
    sections: list[WidgetSection] = Field(default_factory=list)


class VisualizationSpec(BaseModel):
    """Specification for frontend chart rendering."""

    id: str = Field(description="Unique ID for this visualization")
    type: ChartType = Field(description="Type of chart to render")
    title: str = Field(description="Chart title")
    data: list[dict] = Field(
        default_factory=list,
        description="Data points for the chart"
    )
    config: dict = Field(
        default_factory=dict,
        description="Chart-specific configuration"
    )
    drivers: list[str] = Field(
        default_factory=list,
        description="Drivers in the chart (for color coding)"
    )
    annotations: list[dict] = Field(
        default_factory=list,
        description="Annotations (pit stops, incidents, etc.)"
    )
