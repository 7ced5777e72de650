from __future__ import annotations
import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

import httpx

from . import aggregate, charts, exceptions, fetch, filters, ingest, utils
from .config import DashboardConfig
from .store import ReadingSet
from .types import ActiveFilter, ChartPayload

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


class RefreshState(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"


def _log_notification(message: str) -> None:
    logger.warning("%s", message)


class RefreshOrchestrator:
    """
    Owns the reading cache and the chart registry, and drives
    fetch → normalise → filter → aggregate → render.

    Active filter priority, consulted on every render:
      1. the day the user last picked
      2. the week the user last picked
      3. the latest day present in the cache

    Every fetch takes a sequence number; a response that is no longer the
    latest request is discarded so an older fetch cannot overwrite a newer one.
    """

    def __init__(
        self,
        config: DashboardConfig,
        client: httpx.AsyncClient,
        registry: charts.ChartRegistry,
        *,
        notify: Optional[Notifier] = None,
        on_render: Optional[Callable[["RefreshOrchestrator"], None]] = None,
    ):
        self.config = config
        self.client = client
        self.registry = registry
        self.notify: Notifier = notify or _log_notification
        self.on_render = on_render

        self.readings = ReadingSet(config.tz)
        self.state = RefreshState.EMPTY
        self.selected_day: Optional[str] = None
        self.selected_week: Optional[str] = None
        self.active_filter: Optional[ActiveFilter] = None
        self.available_days: list[str] = []
        self.available_weeks: list[str] = []
        self.week_range_label = ""
        self._seq = 0
        self._selectors_populated = False

    ## Fetching

    async def _fetch(self) -> bool:
        self._seq += 1
        seq = self._seq
        self.state = RefreshState.LOADING

        try:
            records = await fetch.fetch_records(self.client, self.config.api_url)
            frame = ingest.to_reading_frame(
                ingest.from_records(records, tz=self.config.tz), tz=self.config.tz
            )
        except exceptions.FetchError as e:
            if seq != self._seq:
                logger.info("Ignoring failure of superseded request #%d: %s", seq, e)
                return False
            logger.error("Error fetching data: %s", e)
            self.readings.clear()
            self.state = RefreshState.EMPTY
            self.notify(f"Failed to fetch data: {e}")
            return False

        if seq != self._seq:
            logger.info("Discarding stale response #%d (latest is #%d)", seq, self._seq)
            return False

        if frame.empty:
            self.readings.clear()
            self.state = RefreshState.EMPTY
            self.notify("No data available to display.")
            return False

        self.readings.replace(frame)
        if not self._selectors_populated:
            self.available_days = self.readings.available_days()
            self.available_weeks = self.readings.available_weeks()
            self._selectors_populated = True
        return True

    async def load(self) -> bool:
        """Fetch into the cache and render. Returns False when nothing was drawn."""
        if not await self._fetch():
            return False
        self.render()
        self.state = RefreshState.READY
        return True

    async def refresh(self) -> bool:
        """Timer path: discard the cache, fetch afresh, re-render the active filter."""
        self.readings.clear()
        return await self.load()

    ## Selection

    async def select_day(self, date: str) -> bool:
        utils.parse_date_str(date)
        self.selected_day, self.selected_week = date, None
        return await self._apply_selection()

    async def select_week(self, week_start: str) -> bool:
        utils.parse_date_str(week_start)
        self.selected_day, self.selected_week = None, week_start
        return await self._apply_selection()

    async def _apply_selection(self) -> bool:
        if self.readings.is_empty:
            return await self.load()
        return self.render()

    def resolve_filter(self) -> Optional[ActiveFilter]:
        latest = self.readings.latest_day()
        candidates = [
            ActiveFilter("day", self.selected_day) if self.selected_day else None,
            ActiveFilter("week", self.selected_week) if self.selected_week else None,
            ActiveFilter("day", latest) if latest else None,
        ]
        return next((c for c in candidates if c is not None), None)

    ## Rendering

    def _select(self, active: ActiveFilter):
        frame, tz = self.readings.frame, self.config.tz
        if active.kind == "week":
            return filters.filter_by_week(frame, active.value, tz=tz)
        return filters.filter_by_day(frame, active.value, tz=tz)

    def build_payloads(self, active: ActiveFilter) -> list[ChartPayload]:
        """Chart payloads for the active selection; empty when it has no readings."""
        data = self._select(active)
        if data.empty:
            return []
        day = aggregate.summarise_day(data)
        # the weekly chart always covers the ISO week around the selection
        week_rows = filters.filter_by_week(self.readings.frame, active.value, tz=self.config.tz)
        week = aggregate.summarise_week(week_rows, tz=self.config.tz)
        return [
            charts.cumulative_va_chart(day),
            charts.daily_peak_chart(day),
            charts.daily_kvah_chart(day),
            charts.gauge_chart(day.last_phase1_apparent, self.config.gauge_max_va),
            charts.weekly_chart(week),
        ]

    def render(self) -> bool:
        active = self.resolve_filter()
        self.active_filter = active
        payloads = self.build_payloads(active) if active is not None else []

        if not payloads:
            if active is not None:
                logger.warning("No data for selected %s: %s.", active.kind, active.value)
            self.registry.clear()
            self.week_range_label = ""
            self._rendered()
            return False

        self.registry.replace_all(payloads)
        self.week_range_label = utils.week_range_label(active.value)
        logger.debug("Rendered %s %s", active.kind, active.value)
        self._rendered()
        return True

    def _rendered(self) -> None:
        if self.on_render is not None:
            self.on_render(self)

    ## Scheduling

    async def run(self, stop: asyncio.Event) -> None:
        """Initial load, then a full refresh every refresh_interval_sec until stop is set."""
        await self._tick(self.load)
        while not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), timeout=self.config.refresh_interval_sec)
            except asyncio.TimeoutError:
                await self._tick(self.refresh)

    async def _tick(self, step) -> None:
        try:
            await step()
        except exceptions.MeterDashError as e:
            # the next tick retries
            logger.error("Refresh cycle failed: %s", e)
            if self.readings.is_empty:
                self.state = RefreshState.EMPTY
