"""Environment-variable-based configuration for the rest engine and timer."""

from __future__ import annotations

import os
from pathlib import Path

from rest_engine.models.enums import (
    DEFAULT_REST_SECONDS,
    HISTORY_TIMEOUT_S,
    REST_CEILING_SECONDS,
    REST_FLOOR_SECONDS,
)
from rest_engine.models.tuning import RestTuning

REST_FLOOR: int = int(os.environ.get("REST_FLOOR_SECONDS", str(REST_FLOOR_SECONDS)))
REST_CEILING: int = int(os.environ.get("REST_CEILING_SECONDS", str(REST_CEILING_SECONDS)))
HISTORY_TIMEOUT: float = float(os.environ.get("REST_HISTORY_TIMEOUT_S", str(HISTORY_TIMEOUT_S)))
TIMER_TICK_INTERVAL: float = float(os.environ.get("REST_TIMER_TICK_INTERVAL_S", "1.0"))
TIMER_DEFAULT_SECONDS: int = int(
    os.environ.get("REST_TIMER_DEFAULT_SECONDS", str(DEFAULT_REST_SECONDS))
)
TIMER_ALERT_CHECKPOINTS: str = os.environ.get("REST_TIMER_ALERT_CHECKPOINTS", "")
CATALOGUE_PATH: Path | None = (
    Path(os.environ["REST_CATALOGUE_PATH"]).expanduser()
    if os.environ.get("REST_CATALOGUE_PATH")
    else None
)


def load_tuning() -> RestTuning:
    """RestTuning with the environment overrides applied."""
    return RestTuning(
        floor_seconds=REST_FLOOR,
        ceiling_seconds=REST_CEILING,
        history_timeout_s=HISTORY_TIMEOUT,
    )


def parse_checkpoints(raw: str) -> frozenset[int]:
    """Parse a comma-separated checkpoint list, e.g. "30,60,90"."""
    return frozenset(int(part) for part in raw.split(",") if part.strip())
