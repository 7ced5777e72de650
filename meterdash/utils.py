# meterdash/utils.py
from __future__ import annotations
import numpy as np
import pandas as pd
from zoneinfo import ZoneInfo
from typing import cast

from . import canon, exceptions
from .types import ReadingFrame


def ensure_tz_aware_index(df: pd.DataFrame, tz: str) -> pd.DataFrame:
    if df.index.name != canon.INDEX_NAME:
        raise ValueError(f"Index must be '{canon.INDEX_NAME}', got {df.index.name}")
    idx = pd.DatetimeIndex(df.index)
    if idx.tz is None:
        df = df.tz_localize(ZoneInfo(tz))
    else:
        df = df.tz_convert(ZoneInfo(tz))
    return df


def safe_localize_series(ts: pd.Series, tz: str) -> pd.Series:
    """Parse ISO-8601 values to tz-aware timestamps; unparseable values become NaT.

    Offsets in the source ("Z", "+10:00") are honoured and converted to ``tz``.
    Naive values are taken to be in ``tz`` already.
    """
    parsed = [_parse_one(v if isinstance(v, str) else None, tz) for v in ts]
    s = pd.to_datetime(pd.Series(parsed, index=ts.index, dtype=object), utc=True)
    return s.dt.tz_convert(ZoneInfo(tz))


# Readings and selector dates must sit far enough inside the nanosecond
# Timestamp range that ISO week arithmetic (±7 days) cannot overflow.
MIN_YEAR = pd.Timestamp.min.year + 1
MAX_YEAR = pd.Timestamp.max.year - 1


def in_supported_range(t: pd.Timestamp) -> bool:
    return MIN_YEAR <= t.year <= MAX_YEAR


def _parse_one(value: str | None, tz: str) -> pd.Timestamp:
    # ISO-8601 only: keywords like 'now' or 'today' are not readings
    if value is None or not value.strip() or not value.strip()[0].isdigit():
        return pd.NaT
    try:
        t = pd.to_datetime(value.strip(), format="ISO8601")
    except (ValueError, TypeError, OverflowError):
        return pd.NaT
    if pd.isna(t) or not in_supported_range(t):
        return pd.NaT
    if t.tz is None:
        try:
            return t.tz_localize(ZoneInfo(tz), ambiguous="NaT", nonexistent="NaT")
        except (ValueError, TypeError):
            return pd.NaT
    return t.tz_convert(ZoneInfo(tz))


def coerce_numeric(values: pd.Series) -> pd.Series:
    """Numeric coercion where anything missing, boolean, malformed or non-finite becomes 0.0."""
    s = values.map(_numeric_candidate).astype(object)
    out = pd.to_numeric(s, errors="coerce").astype(float)
    out = out.replace([np.inf, -np.inf], np.nan)
    return out.fillna(0.0)


def _numeric_candidate(v: object) -> object:
    # bools are ints to Python but not readings; containers never coerce
    if isinstance(v, (bool, np.bool_)):
        return None
    if isinstance(v, str):
        return v.strip() or None
    if isinstance(v, (int, float, np.integer, np.floating)):
        return v
    return None


def parse_date_str(s: str) -> pd.Timestamp:
    """'YYYY-MM-DD' → naive midnight Timestamp; raises FilterError otherwise."""
    try:
        day = pd.Timestamp(pd.to_datetime(s.strip(), format="%Y-%m-%d"))
    except (ValueError, TypeError, AttributeError) as e:
        raise exceptions.FilterError(f"Expected a YYYY-MM-DD date, got {s!r}") from e
    if pd.isna(day):
        raise exceptions.FilterError(f"Expected a YYYY-MM-DD date, got {s!r}")
    if not in_supported_range(day):
        raise exceptions.FilterError(f"Date {s!r} is outside the supported range.")
    return day


def local_dates(idx: pd.DatetimeIndex, tz: str) -> np.ndarray:
    """Return YYYY-MM-DD labels of each timestamp's calendar date in tz."""
    if len(idx) == 0:
        return np.array([], dtype=object)
    if idx.tz is None:
        raise ValueError("Index must be tz-aware for local_dates.")
    return np.asarray(idx.tz_convert(ZoneInfo(tz)).strftime("%Y-%m-%d"), dtype=object)


def iso_week_bounds(anchor: str, *, tz: str) -> tuple[pd.Timestamp, pd.Timestamp]:
    """
    Return the inclusive [Monday 00:00, Sunday 23:59:59.999999999] bounds, in tz,
    of the ISO week containing the anchor date.
    """
    day = parse_date_str(anchor)
    monday = day - pd.Timedelta(days=int(day.dayofweek))  # Mon=0..Sun=6
    try:
        start = monday.tz_localize(ZoneInfo(tz))
        end = (monday + pd.Timedelta(days=7)).tz_localize(ZoneInfo(tz)) - pd.Timedelta(1, "ns")
    except (OverflowError, ValueError, NotImplementedError) as e:
        raise exceptions.FilterError(f"Week of {anchor!r} is outside the supported range.") from e
    return start, end


def week_start_label(anchor: str) -> str:
    day = parse_date_str(anchor)
    return (day - pd.Timedelta(days=int(day.dayofweek))).strftime("%Y-%m-%d")


def week_range_label(anchor: str) -> str:
    """'Week of Jun 30, 2025 - Jul 6, 2025' for the ISO week containing anchor."""
    monday = parse_date_str(week_start_label(anchor))
    sunday = monday + pd.Timedelta(days=6)
    return f"Week of {_long_date(monday)} - {_long_date(sunday)}"


def _long_date(ts: pd.Timestamp) -> str:
    return f"{ts.strftime('%b')} {ts.day}, {ts.year}"


def empty_reading_frame(tz: str = canon.DEFAULT_TZ) -> ReadingFrame:
    """
    Return an empty ReadingFrame with the correct tz-aware index and numeric columns.
    """
    idx = pd.DatetimeIndex([], tz=ZoneInfo(tz), name=canon.INDEX_NAME)
    out = pd.DataFrame(columns=canon.NUMERIC_COLS, index=idx, dtype=float)
    out.__class__ = ReadingFrame
    return cast(ReadingFrame, out)
