from __future__ import annotations
import pandas as pd

from . import canon, utils
from .types import ReadingFrame


def filter_by_day(
    df: ReadingFrame, date: str, *, tz: str = canon.DEFAULT_TZ
) -> ReadingFrame:
    """Readings whose calendar date in tz equals ``date`` (YYYY-MM-DD)."""
    day = utils.parse_date_str(date).strftime("%Y-%m-%d")
    dates = utils.local_dates(pd.DatetimeIndex(df.index), tz)
    return df.loc[dates == day]


def filter_by_week(
    df: ReadingFrame, anchor: str, *, tz: str = canon.DEFAULT_TZ
) -> ReadingFrame:
    """
    Readings inside the ISO week (Monday 00:00 through Sunday 23:59:59, inclusive)
    containing ``anchor``. Any date in the week works as the anchor.
    """
    start, end = utils.iso_week_bounds(anchor, tz=tz)
    idx = pd.DatetimeIndex(df.index)
    mask = (idx >= start) & (idx <= end)
    return df.loc[mask]
