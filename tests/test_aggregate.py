"""Tests for the day and week aggregators."""

import numpy as np
import pandas as pd

import meterdash as md
from conftest import rec, frame_of


def test_day_cumulative_scenario(scenario_records):
    df = md.filters.filter_by_day(frame_of(scenario_records), "2025-07-04")
    day = md.aggregate.summarise_day(df)
    assert list(day.points["phase1_cumulative_va"]) == [10.0, 25.0]
    assert list(day.points["phase2_cumulative_va"]) == [5.0, 10.0]
    assert list(day.points["daily_energy"]) == [1.0, 2.0]
    assert day.last_phase1_apparent == 15.0


def test_day_sorts_unordered_input():
    idx = pd.DatetimeIndex(
        ["2025-07-04T00:10:00Z", "2025-07-04T00:00:00Z"], name="timestamp"
    )
    df = pd.DataFrame(
        {c: 0.0 for c in md.canon.NUMERIC_COLS}, index=idx
    ).assign(phase1_apparent=[15.0, 10.0])
    day = md.aggregate.summarise_day(df)
    assert list(day.points["phase1_cumulative_va"]) == [10.0, 25.0]
    assert day.points["timestamp"].is_monotonic_increasing


def test_day_cumulative_non_decreasing():
    rng = np.random.default_rng(7)
    ts = pd.date_range("2025-07-04", periods=144, freq="10min", tz="UTC")
    records = [
        rec(t.isoformat(), l1_va=float(a), l2_va=float(b))
        for t, a, b in zip(ts, rng.uniform(0, 500, 144), rng.uniform(0, 500, 144))
    ]
    day = md.aggregate.summarise_day(frame_of(records))
    assert day.points["phase1_cumulative_va"].is_monotonic_increasing
    assert day.points["phase2_cumulative_va"].is_monotonic_increasing


def test_day_peak_uses_peak_current_not_apparent_power(week_records):
    df = md.filters.filter_by_day(frame_of(week_records), "2025-07-04")
    day = md.aggregate.summarise_day(df)
    # VA values are 10/15 and 5/5; peak currents are 2/7 and 3/1
    assert day.peak_phase1_current == 7.0
    assert day.peak_phase2_current == 3.0


def test_day_empty_input():
    day = md.aggregate.summarise_day(frame_of([]))
    assert day.points.empty
    assert day.peak_phase1_current == 0.0
    assert day.peak_phase2_current == 0.0
    assert day.last_phase1_apparent == 0.0


def test_week_one_row_per_observed_day(week_records):
    df = md.filters.filter_by_week(frame_of(week_records), "2025-07-01")
    week = md.aggregate.summarise_week(df)
    assert list(week["date"]) == ["2025-07-01", "2025-07-02", "2025-07-04"]
    assert len(week) <= 7


def test_week_maxima_are_apparent_power(week_records):
    df = md.filters.filter_by_week(frame_of(week_records), "2025-07-01")
    week = md.aggregate.summarise_week(df).set_index("date")
    assert week.loc["2025-07-01", "max_daily_energy"] == 2.5
    assert week.loc["2025-07-01", "max_phase1_apparent"] == 120.0
    assert week.loc["2025-07-01", "max_phase2_apparent"] == 50.0
    # peak-current fields (up to 7 A on the 4th) do not leak into the week view
    assert week.loc["2025-07-04", "max_phase1_apparent"] == 15.0
    assert week.loc["2025-07-04", "max_phase2_apparent"] == 5.0


def test_week_rows_ascending_for_unordered_input(week_records):
    shuffled = list(reversed(week_records))
    week = md.aggregate.summarise_week(frame_of(shuffled))
    assert list(week["date"]) == sorted(week["date"])
    assert week["date"].is_unique


def test_week_groups_by_local_date():
    records = [rec("2025-07-04T20:00:00Z", l1_va=5), rec("2025-07-04T10:00:00Z", l1_va=3)]
    tz = "Australia/Brisbane"
    week = md.aggregate.summarise_week(frame_of(records, tz=tz), tz=tz)
    assert list(week["date"]) == ["2025-07-04", "2025-07-05"]


def test_week_empty_input():
    week = md.aggregate.summarise_week(frame_of([]))
    assert week.empty
    assert list(week.columns) == md.aggregate.WEEK_COLS
