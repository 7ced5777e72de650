from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Protocol

import pandas as pd
import plotly.graph_objects as go
import plotly.io as pio

from . import canon
from .types import ChartPayload, ChartSlot, DaySummary, NamedSeries

logger = logging.getLogger(__name__)

COLORS = {
    "phase1": "#007bff",
    "phase2": "#28a745",
    "kvah": "purple",
    "weekly_kvah": "#ffc107",
    "weekly_phase1": "#dc3545",
    "weekly_phase2": "#17a2b8",
    "gauge_rest": "#e9ecef",
}


# Payload builders


def _timestamp_labels(points: pd.DataFrame) -> list[str]:
    return [pd.Timestamp(t).isoformat() for t in points["timestamp"]]


def cumulative_va_chart(day: DaySummary) -> ChartPayload:
    labels = _timestamp_labels(day.points)
    return ChartPayload(
        slot=ChartSlot.CUMULATIVE_VA,
        kind="line",
        title="Cumulative VA",
        labels=labels,
        series=[
            NamedSeries(
                name="L1 VA Cumulative",
                values=day.points["phase1_cumulative_va"].astype(float).tolist(),
                color=COLORS["phase1"],
            ),
            NamedSeries(
                name="L2 VA Cumulative",
                values=day.points["phase2_cumulative_va"].astype(float).tolist(),
                color=COLORS["phase2"],
            ),
        ],
        y_axis_label="Cumulative VA",
    )


def daily_peak_chart(day: DaySummary) -> ChartPayload:
    return ChartPayload(
        slot=ChartSlot.DAILY_PEAK,
        kind="bar",
        title="Daily Peak",
        labels=["L1 Peak", "L2 Peak"],
        series=[
            NamedSeries(
                name="Daily Peak Current",
                values=[day.peak_phase1_current, day.peak_phase2_current],
            )
        ],
        y_axis_label="Peak current (A)",
    )


def daily_kvah_chart(day: DaySummary) -> ChartPayload:
    return ChartPayload(
        slot=ChartSlot.DAILY_KVAH,
        kind="line",
        title="Daily kVAh",
        labels=_timestamp_labels(day.points),
        series=[
            NamedSeries(
                name="Daily kVAh",
                values=day.points["daily_energy"].astype(float).tolist(),
                color=COLORS["kvah"],
                fill=True,
            )
        ],
        y_axis_label="kVAh",
    )


def weekly_chart(week: pd.DataFrame) -> ChartPayload:
    """Max daily kVAh on the primary axis, per-phase max VA on the secondary one."""
    return ChartPayload(
        slot=ChartSlot.WEEKLY,
        kind="bar",
        title="Weekly Summary",
        labels=[str(d) for d in week["date"]],
        series=[
            NamedSeries(
                name="Max Daily kVAh",
                values=week["max_daily_energy"].astype(float).tolist(),
                color=COLORS["weekly_kvah"],
            ),
            NamedSeries(
                name="L1 Max VA",
                values=week["max_phase1_apparent"].astype(float).tolist(),
                color=COLORS["weekly_phase1"],
                secondary_axis=True,
            ),
            NamedSeries(
                name="L2 Max VA",
                values=week["max_phase2_apparent"].astype(float).tolist(),
                color=COLORS["weekly_phase2"],
                secondary_axis=True,
            ),
        ],
        y_axis_label="Max Daily kVAh",
        y2_axis_label="Max VA",
    )


def gauge_chart(value: float, max_va: float = canon.GAUGE_MAX_VA) -> ChartPayload:
    return ChartPayload(
        slot=ChartSlot.LIVE_GAUGE,
        kind="gauge",
        title="Live L1 VA",
        labels=["Used VA", "Remaining"],
        series=[NamedSeries(name="L1 VA", values=[value, max(0.0, max_va - value)])],
        max_value=max_va,
    )


# Rendering


class ChartRenderer(Protocol):
    def draw(self, payload: ChartPayload) -> Any: ...

    def destroy(self, handle: Any) -> None: ...


class ChartRegistry:
    """
    Live chart handle per slot. Every draw for a slot first destroys the
    handle already there, so a slot never holds two visuals.
    """

    def __init__(self, renderer: ChartRenderer):
        self.renderer = renderer
        self._live: Dict[ChartSlot, Any] = {}

    def replace(self, payload: ChartPayload) -> Any:
        old = self._live.pop(payload.slot, None)
        if old is not None:
            self.renderer.destroy(old)
        handle = self.renderer.draw(payload)
        self._live[payload.slot] = handle
        return handle

    def replace_all(self, payloads: Iterable[ChartPayload]) -> None:
        for p in payloads:
            self.replace(p)

    def clear(self) -> None:
        for slot in list(self._live):
            self.renderer.destroy(self._live.pop(slot))

    def live_slots(self) -> list[ChartSlot]:
        return list(self._live)

    def get(self, slot: ChartSlot) -> Optional[Any]:
        return self._live.get(slot)


def _line_figure(p: ChartPayload) -> go.Figure:
    fig = go.Figure()
    for s in p.series:
        fig.add_trace(
            go.Scatter(
                x=p.labels,
                y=s.values,
                name=s.name,
                mode="lines",
                line={"color": s.color, "shape": "spline", "smoothing": 0.1},
                fill="tozeroy" if s.fill else None,
            )
        )
    fig.update_xaxes(tickformat="%H:%M", nticks=10)
    return fig


def _bar_figure(p: ChartPayload) -> go.Figure:
    fig = go.Figure()
    for s in p.series:
        fig.add_trace(
            go.Bar(
                x=p.labels,
                y=s.values,
                name=s.name,
                marker_color=s.color,
                yaxis="y2" if s.secondary_axis else "y",
                offsetgroup=s.name,
            )
        )
    if any(s.secondary_axis for s in p.series):
        fig.update_layout(
            yaxis2={
                "title": p.y2_axis_label,
                "overlaying": "y",
                "side": "right",
                "rangemode": "tozero",
                "showgrid": False,
            }
        )
    return fig


def _gauge_figure(p: ChartPayload) -> go.Figure:
    value = p.series[0].values[0] if p.series and p.series[0].values else 0.0
    return go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=value,
            title={"text": p.title},
            gauge={
                "axis": {"range": [0, p.max_value or canon.GAUGE_MAX_VA]},
                "bar": {"color": COLORS["phase1"]},
                "bgcolor": COLORS["gauge_rest"],
            },
        )
    )


class PlotlyRenderer:
    """Draws payloads as plotly figures; handles are the figures themselves."""

    def __init__(self):
        self.figures: Dict[ChartSlot, go.Figure] = {}
        self.heading: str = ""

    def draw(self, payload: ChartPayload) -> go.Figure:
        if payload.kind == "line":
            fig = _line_figure(payload)
        elif payload.kind == "bar":
            fig = _bar_figure(payload)
        else:
            fig = _gauge_figure(payload)
        if payload.kind != "gauge":
            fig.update_layout(
                title=payload.title,
                template="plotly_white",
                yaxis={"title": {"text": payload.y_axis_label}, "rangemode": "tozero"},
            )
        self.figures[payload.slot] = fig
        return fig

    def destroy(self, handle: go.Figure) -> None:
        for slot, fig in list(self.figures.items()):
            if fig is handle:
                del self.figures[slot]

    def to_html(self) -> str:
        parts = [f"<h2>{self.heading}</h2>"] if self.heading else []
        if not self.figures:
            parts.append("<p>No data for the selected period.</p>")
        include_js: Any = "cdn"
        for slot in ChartSlot:
            fig = self.figures.get(slot)
            if fig is None:
                continue
            parts.append(
                pio.to_html(fig, full_html=False, include_plotlyjs=include_js, div_id=slot.value)
            )
            include_js = False
        body = "\n".join(parts)
        return f"<!DOCTYPE html>\n<html><head><meta charset='utf-8'><title>meterdash</title></head><body>\n{body}\n</body></html>\n"

    def write_html(self, path: str | Path) -> Path:
        out = Path(path)
        out.write_text(self.to_html(), encoding="utf-8")
        logger.debug("Dashboard written to %s", out)
        return out
