"""ReadingSet cache behaviour."""

import pandas as pd
import pytest

import meterdash as md
from conftest import frame_of


def test_replace_and_clear(week_records):
    rs = md.store.ReadingSet()
    assert rs.is_empty and rs.latest_day() is None

    frame = frame_of(week_records)
    rs.replace(frame)
    assert len(rs) == len(week_records)
    assert rs.frame is frame

    rs.clear()
    assert rs.is_empty
    assert rs.frame.index.tz is not None


def test_replace_rejects_invalid_frame():
    rs = md.store.ReadingSet()
    naive = pd.DataFrame(
        {c: [0.0] for c in md.canon.NUMERIC_COLS},
        index=pd.DatetimeIndex(["2025-07-04"], name="timestamp"),
    )
    with pytest.raises(md.exceptions.ReadingsError):
        rs.replace(naive)
    assert rs.is_empty


def test_selectors_newest_first(week_records):
    rs = md.store.ReadingSet()
    rs.replace(frame_of(week_records))
    assert rs.latest_day() == "2025-07-04"
    assert rs.available_days() == [
        "2025-07-04",
        "2025-07-02",
        "2025-07-01",
        "2025-06-29",
    ]
    assert rs.available_weeks() == ["2025-06-30", "2025-06-23"]
