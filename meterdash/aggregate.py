from __future__ import annotations
import pandas as pd

from . import canon, utils
from .types import DaySummary, ReadingFrame

DAY_POINT_COLS = ["timestamp", "phase1_cumulative_va", "phase2_cumulative_va", "daily_energy"]
WEEK_COLS = ["date", "max_daily_energy", "max_phase1_apparent", "max_phase2_apparent"]


def _max_or_zero(s: pd.Series) -> float:
    return float(s.max()) if len(s) else 0.0


def summarise_day(df: ReadingFrame) -> DaySummary:
    """
    Running per-phase apparent-power totals plus the day's peak currents.

    - Cumulative columns start from 0 and add each reading's VA in timestamp order.
    - Peaks are the max of the *peak-current* fields, not of the VA series.
    - Empty input yields no points and zero peaks.
    """
    if df.empty:
        return DaySummary(points=pd.DataFrame(columns=DAY_POINT_COLS))

    d = df.sort_index(kind="stable")
    points = pd.DataFrame(
        {
            "timestamp": d.index,
            "phase1_cumulative_va": d["phase1_apparent"].cumsum().to_numpy(),
            "phase2_cumulative_va": d["phase2_apparent"].cumsum().to_numpy(),
            "daily_energy": d["daily_energy"].to_numpy(),
        }
    )
    return DaySummary(
        points=points,
        peak_phase1_current=_max_or_zero(d["phase1_peak_current"]),
        peak_phase2_current=_max_or_zero(d["phase2_peak_current"]),
        last_phase1_apparent=float(d["phase1_apparent"].iloc[-1]),
    )


def summarise_week(df: ReadingFrame, *, tz: str = canon.DEFAULT_TZ) -> pd.DataFrame:
    """
    One row per calendar date (in tz) observed in the input, ascending by date.

    Columns:
      - 'date' (YYYY-MM-DD)
      - 'max_daily_energy': highest daily kVAh seen that day
      - 'max_phase1_apparent' / 'max_phase2_apparent': highest VA reading that day

    Days without readings are not synthesised. The per-phase maxima here are
    apparent power, a different signal from the day view's peak currents.
    Aggregates start at 0, so a day of negative values reports 0.
    """
    if df.empty:
        return pd.DataFrame(columns=WEEK_COLS)

    s = pd.DataFrame(
        {
            "date": utils.local_dates(pd.DatetimeIndex(df.index), tz),
            "max_daily_energy": df["daily_energy"].to_numpy(),
            "max_phase1_apparent": df["phase1_apparent"].to_numpy(),
            "max_phase2_apparent": df["phase2_apparent"].to_numpy(),
        }
    )
    out = (
        s.groupby("date", sort=True)[WEEK_COLS[1:]]
        .max()
        .clip(lower=0.0)
        .reset_index()
    )
    return out[WEEK_COLS]
