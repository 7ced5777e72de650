from __future__ import annotations
import logging
from typing import Any, Iterable, Mapping, cast

import pandas as pd

from . import canon, utils, validate
from .types import Reading, ReadingFrame

logger = logging.getLogger(__name__)


def _lower_keys(record: Any) -> dict[str, Any]:
    """Lower-case one record's keys; the first spelling wins if it repeats a key in two casings."""
    out: dict[str, Any] = {}
    if isinstance(record, Mapping):
        for k, v in record.items():
            out.setdefault(str(k).lower(), v)
    return out


def _pick(rows: list[dict[str, Any]], aliases: Iterable[str]) -> pd.Series:
    """Per record, the value of the first alias that record carries (None if it has none)."""
    aliases = tuple(aliases)
    return pd.Series(
        [next((r[k] for k in aliases if r.get(k) is not None), None) for r in rows],
        dtype=object,
    )


def from_records(
    records: Iterable[Any],
    *,
    tz: str = canon.DEFAULT_TZ,
) -> pd.DataFrame:
    """
    Normalise raw reading records into a flat canonical frame:
      - column 'timestamp': tz-aware, NaT where the source value is unparseable
      - numeric columns (canon.NUMERIC_COLS): float, finite, 0.0 when missing or malformed

    Keys are matched case-insensitively record by record, so one payload may mix
    spellings such as 'l1_peak_i_a' and 'L1_Peak_I_A'.
    One row is returned per input record; nothing is dropped here.
    """
    rows = [_lower_keys(r) for r in records]

    out = pd.DataFrame(index=pd.RangeIndex(len(rows)))
    out[canon.INDEX_NAME] = utils.safe_localize_series(
        _pick(rows, canon.TIMESTAMP_ALIASES), tz
    )
    for field in canon.NUMERIC_COLS:
        out[field] = utils.coerce_numeric(_pick(rows, canon.FIELD_ALIASES[field]))

    return out[[canon.INDEX_NAME, *canon.NUMERIC_COLS]]


def normalize_record(raw: Mapping[str, Any], *, tz: str = canon.DEFAULT_TZ) -> Reading:
    """Normalise one raw record. A malformed field never rejects the record."""
    row = from_records([raw], tz=tz).iloc[0]
    ts = row[canon.INDEX_NAME]
    return Reading(
        timestamp=None if pd.isna(ts) else ts.to_pydatetime(),
        **{field: float(row[field]) for field in canon.NUMERIC_COLS},
    )


def to_reading_frame(df: pd.DataFrame, *, tz: str = canon.DEFAULT_TZ) -> ReadingFrame:
    """
    Index a normalised frame by timestamp for downstream queries:
      - rows whose timestamp failed to parse are dropped (logged, not raised)
      - index: tz-aware 'timestamp', sorted ascending
    """
    if df.empty:
        return utils.empty_reading_frame(tz)

    bad = df[canon.INDEX_NAME].isna()
    if bad.any():
        logger.info("Excluding %d reading(s) with unparseable timestamps", int(bad.sum()))

    out = df.loc[~bad].set_index(canon.INDEX_NAME)
    if out.empty:
        return utils.empty_reading_frame(tz)

    out = utils.ensure_tz_aware_index(out.sort_index(kind="stable"), tz)
    out = out[canon.NUMERIC_COLS].astype(float)
    out.__class__ = ReadingFrame
    validate.assert_readings(out)
    return cast(ReadingFrame, out)


def from_payload(payload: Any, *, tz: str = canon.DEFAULT_TZ) -> ReadingFrame:
    """Validate a decoded JSON body and normalise it into a ReadingFrame."""
    records = validate.validate_payload(payload)
    return to_reading_frame(from_records(records, tz=tz), tz=tz)
