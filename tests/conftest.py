import httpx
import pytest

import meterdash as md

TZ = "UTC"


def rec(ts, l1_va=0.0, l2_va=0.0, daily=0.0, **extra):
    """Raw record in the source's wire shape."""
    r = {"Timestamp": ts, "L1_VA": l1_va, "L2_VA": l2_va, "Daily_kVAh": daily}
    r.update(extra)
    return r


def frame_of(records, tz=TZ):
    return md.ingest.from_payload(records, tz=tz)


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def json_handler(payload, status=200):
    def handler(request):
        return httpx.Response(status, json=payload)

    return handler


class RecordingRenderer:
    """Renderer double: handles are ints, every draw/destroy is recorded."""

    def __init__(self):
        self.drawn = []
        self.destroyed = []
        self._next = 0

    def draw(self, payload):
        self._next += 1
        self.drawn.append((self._next, payload))
        return self._next

    def destroy(self, handle):
        self.destroyed.append(handle)

    def latest(self, slot):
        return next(p for _, p in reversed(self.drawn) if p.slot == slot)


@pytest.fixture
def scenario_records():
    return [
        rec("2025-07-04T00:00:00Z", l1_va=10, l2_va=5, daily=1),
        rec("2025-07-04T00:10:00Z", l1_va=15, l2_va=5, daily=2),
    ]


@pytest.fixture
def week_records():
    # ISO week 2025-06-30 (Mon) .. 2025-07-06 (Sun), with gaps on some days,
    # plus one reading in the previous week
    return [
        rec("2025-06-29T12:00:00Z", l1_va=999, l2_va=999, daily=9),
        rec("2025-07-01T08:00:00Z", l1_va=100, l2_va=50, daily=1.5, l1_peak_i_a=4),
        rec("2025-07-01T09:00:00Z", l1_va=120, l2_va=40, daily=2.5, l1_peak_i_a=6),
        rec("2025-07-02T10:00:00Z", l1_va=80, l2_va=90, daily=0.7),
        rec("2025-07-04T00:00:00Z", l1_va=10, l2_va=5, daily=1, l1_peak_i_a=2, l2_peak_i_a=3),
        rec("2025-07-04T00:10:00Z", l1_va=15, l2_va=5, daily=2, l1_peak_i_a=7, l2_peak_i_a=1),
    ]


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def registry(renderer):
    return md.charts.ChartRegistry(renderer)


@pytest.fixture
def dash_config():
    return md.config.DashboardConfig(api_url="http://meter.test/readings", tz=TZ)
