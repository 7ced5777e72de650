from __future__ import annotations
from typing import Final, Dict, Tuple

INDEX_NAME: Final[str] = "timestamp"
DEFAULT_TZ: Final[str] = "UTC"
REFRESH_INTERVAL_SEC: Final[int] = 60
GAUGE_MAX_VA: Final[float] = 500.0

NUMERIC_COLS: Final[list[str]] = [
    "phase1_current",
    "phase1_apparent",
    "phase2_current",
    "phase2_apparent",
    "phase1_peak_current",
    "phase2_peak_current",
    "total_apparent",
    "total_energy",
    "daily_energy",
]

# Raw source key → canonical column. Matched case-insensitively; the source
# has been seen sending both 'l1_peak_i_a' and 'L1_Peak_I_A'.
TIMESTAMP_ALIASES: Tuple[str, ...] = ("timestamp", "time", "ts", "datetime")
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "phase1_current": ("l1_i_a",),
    "phase1_apparent": ("l1_va",),
    "phase2_current": ("l2_i_a",),
    "phase2_apparent": ("l2_va",),
    "phase1_peak_current": ("l1_peak_i_a",),
    "phase2_peak_current": ("l2_peak_i_a",),
    "total_apparent": ("total_va",),
    "total_energy": ("total_kvah",),
    "daily_energy": ("daily_kvah",),
}
