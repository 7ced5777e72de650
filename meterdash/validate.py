from __future__ import annotations
import numpy as np
import pandas as pd
from typing import Any, cast

from . import canon, exceptions


def validate_payload(payload: Any) -> list:
    """The source must answer with a JSON array of reading objects."""
    if not isinstance(payload, list):
        raise exceptions.PayloadError(
            f"Expected a JSON array of readings, got {type(payload).__name__}."
        )
    return payload


def assert_readings(df: pd.DataFrame) -> None:
    if df.index.name != canon.INDEX_NAME:
        raise exceptions.ReadingsError(f"Index must be '{canon.INDEX_NAME}'.")
    if not isinstance(df.index, pd.DatetimeIndex):
        raise exceptions.ReadingsError("Index must be a DatetimeIndex.")
    tz_index = cast(pd.DatetimeIndex, df.index)
    if tz_index.tz is None:
        raise exceptions.ReadingsError("Index must be tz-aware.")
    if tz_index.hasnans:
        raise exceptions.ReadingsError("Index must not contain NaT timestamps.")
    for col in canon.NUMERIC_COLS:
        if col not in df.columns:
            raise exceptions.ReadingsError(f"Missing required column '{col}'.")
    if not df.index.is_monotonic_increasing:
        raise exceptions.ReadingsError("Index must be sorted ascending.")
    values = df[canon.NUMERIC_COLS].to_numpy(dtype=float)
    if not np.isfinite(values).all():
        raise exceptions.ReadingsError("Non-finite numeric values detected.")
