from __future__ import annotations
import logging
from typing import Optional

import pandas as pd

from . import canon, utils, validate
from .types import ReadingFrame

logger = logging.getLogger(__name__)


class ReadingSet:
    """
    In-memory cache of normalised readings.

    The held frame is only ever swapped whole (``replace`` / ``clear``) so a
    reader never sees a half-updated cache. Callers must treat ``frame`` as
    read-only.
    """

    def __init__(self, tz: str = canon.DEFAULT_TZ):
        self.tz = tz
        self._frame: ReadingFrame = utils.empty_reading_frame(tz)

    @property
    def frame(self) -> ReadingFrame:
        return self._frame

    @property
    def is_empty(self) -> bool:
        return self._frame.empty

    def __len__(self) -> int:
        return len(self._frame)

    def replace(self, frame: ReadingFrame) -> None:
        validate.assert_readings(frame)
        self._frame = frame
        logger.debug("Reading cache replaced: %d reading(s)", len(frame))

    def clear(self) -> None:
        self._frame = utils.empty_reading_frame(self.tz)

    def _dates(self) -> pd.Series:
        return pd.Series(utils.local_dates(pd.DatetimeIndex(self._frame.index), self.tz))

    def latest_day(self) -> Optional[str]:
        """Calendar date (YYYY-MM-DD, in tz) of the most recent reading."""
        if self.is_empty:
            return None
        return str(self._dates().iloc[-1])

    def available_days(self) -> list[str]:
        """Distinct reading dates, newest first."""
        return sorted(self._dates().unique(), reverse=True)

    def available_weeks(self) -> list[str]:
        """Distinct ISO week start dates (Mondays), newest first."""
        weeks = {utils.week_start_label(d) for d in self._dates().unique()}
        return sorted(weeks, reverse=True)
