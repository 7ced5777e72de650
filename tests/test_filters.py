"""Day and ISO-week selection over the reading cache."""

import pandas as pd
import pytest

import meterdash as md
from conftest import rec, frame_of


def test_filter_by_day(week_records):
    df = frame_of(week_records)
    out = md.filters.filter_by_day(df, "2025-07-01")
    assert len(out) == 2
    assert (out.index.strftime("%Y-%m-%d") == "2025-07-01").all()


def test_filter_by_day_is_idempotent(week_records):
    df = frame_of(week_records)
    once = md.filters.filter_by_day(df, "2025-07-04")
    twice = md.filters.filter_by_day(once, "2025-07-04")
    pd.testing.assert_frame_equal(once, twice)


def test_filter_by_day_uses_configured_zone():
    df = frame_of([rec("2025-07-04T20:00:00Z", l1_va=1)], tz="Australia/Brisbane")
    assert md.filters.filter_by_day(df, "2025-07-04", tz="Australia/Brisbane").empty
    assert len(md.filters.filter_by_day(df, "2025-07-05", tz="Australia/Brisbane")) == 1


def test_filter_by_day_does_not_mutate(week_records):
    df = frame_of(week_records)
    before = df.copy()
    md.filters.filter_by_day(df, "2025-07-01")
    pd.testing.assert_frame_equal(df, before)


def test_filter_by_week_excludes_other_weeks():
    df = frame_of(
        [
            rec("2025-06-25T12:00:00Z", l1_va=1),  # week of Jun 23
            rec("2025-07-02T12:00:00Z", l1_va=2),  # week of Jun 30
        ]
    )
    out = md.filters.filter_by_week(df, "2025-06-24")
    assert list(out["phase1_apparent"]) == [1.0]


def test_filter_by_week_bounds_are_inclusive():
    df = frame_of(
        [
            rec("2025-06-29T23:59:59Z", l1_va=1),
            rec("2025-06-30T00:00:00Z", l1_va=2),
            rec("2025-07-06T23:59:59Z", l1_va=3),
            rec("2025-07-07T00:00:00Z", l1_va=4),
        ]
    )
    # any day inside the week is a valid anchor
    for anchor in ("2025-06-30", "2025-07-03", "2025-07-06"):
        out = md.filters.filter_by_week(df, anchor)
        assert list(out["phase1_apparent"]) == [2.0, 3.0]


def test_filter_by_week_is_idempotent(week_records):
    df = frame_of(week_records)
    once = md.filters.filter_by_week(df, "2025-07-04")
    pd.testing.assert_frame_equal(once, md.filters.filter_by_week(once, "2025-07-04"))
    assert len(once) == 5


def test_malformed_date_raises():
    df = frame_of([rec("2025-07-04T00:00:00Z")])
    with pytest.raises(md.exceptions.FilterError):
        md.filters.filter_by_day(df, "04/07/2025")
    with pytest.raises(md.exceptions.FilterError):
        md.filters.filter_by_week(df, "")


def test_filters_on_empty_frame():
    df = frame_of([])
    assert md.filters.filter_by_day(df, "2025-07-04").empty
    assert md.filters.filter_by_week(df, "2025-07-04").empty


@pytest.mark.parametrize("anchor", ["9999-12-31", "2262-04-10", "1677-09-22"])
def test_out_of_range_dates_raise(anchor):
    df = frame_of([rec("2025-07-04T00:00:00Z")])
    with pytest.raises(md.exceptions.FilterError):
        md.filters.filter_by_week(df, anchor)
    with pytest.raises(md.exceptions.FilterError):
        md.filters.filter_by_day(df, anchor)
