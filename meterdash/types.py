from __future__ import annotations
from typing import Literal, List, Optional
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import pandas as pd
from pydantic import BaseModel, model_validator


# Reading DataFrame
class ReadingFrame(pd.DataFrame):
    """
    Strongly-typed canonical readings dataframe.

    Expected:
      - DatetimeIndex named 'timestamp', tz-aware, sorted ascending
      - Float columns: phase1/phase2 current, apparent and peak current,
        total_apparent, total_energy, daily_energy
    """

    @property
    def _constructor(self):
        return ReadingFrame

    @property
    def phase1_apparent(self) -> pd.Series:
        return self["phase1_apparent"]

    @property
    def phase2_apparent(self) -> pd.Series:
        return self["phase2_apparent"]

    @property
    def daily_energy(self) -> pd.Series:
        return self["daily_energy"]


class Reading(BaseModel):
    """A single normalised sample from the metering source.

    Attributes:
        timestamp: Tz-aware instant, or None when the source value could not be parsed
        phase1_current / phase2_current: Instantaneous current per phase (A)
        phase1_apparent / phase2_apparent: Apparent power per phase (VA)
        phase1_peak_current / phase2_peak_current: Peak current reported for the interval (A)
        total_apparent: Combined apparent power (VA)
        total_energy: Cumulative apparent energy (kVAh)
        daily_energy: Apparent energy for the reading's calendar day so far (kVAh)
    """

    timestamp: Optional[datetime]
    phase1_current: float = 0.0
    phase1_apparent: float = 0.0
    phase2_current: float = 0.0
    phase2_apparent: float = 0.0
    phase1_peak_current: float = 0.0
    phase2_peak_current: float = 0.0
    total_apparent: float = 0.0
    total_energy: float = 0.0
    daily_energy: float = 0.0


@dataclass
class DaySummary:
    """Cumulative series and same-day peaks for one selection.

    ``points`` columns: timestamp, phase1_cumulative_va, phase2_cumulative_va, daily_energy.
    """

    points: pd.DataFrame
    peak_phase1_current: float = 0.0
    peak_phase2_current: float = 0.0
    last_phase1_apparent: float = 0.0


FilterKind = Literal["day", "week"]


@dataclass(frozen=True)
class ActiveFilter:
    kind: FilterKind
    value: str  # YYYY-MM-DD (a day, or any date inside the week)


## Chart payloads
class ChartSlot(str, Enum):
    CUMULATIVE_VA = "vaChart"
    DAILY_PEAK = "peakChart"
    DAILY_KVAH = "kvahChart"
    WEEKLY = "weeklyChart"
    LIVE_GAUGE = "liveGaugeChart"


ChartKind = Literal["line", "bar", "gauge"]


class NamedSeries(BaseModel):
    name: str
    values: List[float]
    color: Optional[str] = None
    fill: bool = False
    secondary_axis: bool = False


class ChartPayload(BaseModel):
    """Everything a renderer needs to draw one chart slot.

    Attributes:
        slot: Visual slot the chart replaces
        kind: 'line', 'bar' or 'gauge'
        title: Human readable heading
        labels: Ordered x labels (timestamps, dates or category names)
        series: One or more named numeric series, each as long as ``labels``
        y_axis_label: Primary axis title
        y2_axis_label: Secondary axis title, for series with ``secondary_axis``
        max_value: Upper bound of the gauge scale
    """

    slot: ChartSlot
    kind: ChartKind
    title: str
    labels: List[str]
    series: List[NamedSeries]
    y_axis_label: str = ""
    y2_axis_label: str = ""
    max_value: Optional[float] = None

    @model_validator(mode="after")
    def _series_match_labels(self) -> "ChartPayload":
        for s in self.series:
            if len(s.values) != len(self.labels):
                raise ValueError(
                    f"Series {s.name!r} has {len(s.values)} values, expected {len(self.labels)}"
                )
        return self
