"""Reference history providers.

``InMemoryHistoryProvider`` aggregates raw set logs held in memory (demo
dashboard, tests). ``ResilientHistoryProvider`` wraps any provider with
retry and exponential backoff and reports exhaustion as
``UnavailableError`` so the engine can degrade gracefully.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional

from history_client.profile_mapper import build_profile
from rest_engine.collaborators import HistoryProvider
from rest_engine.exceptions import UnavailableError
from rest_engine.models.history import HistoricalProfile

logger = logging.getLogger(__name__)

_MAX_RETRIES = 3
_BASE_BACKOFF_S = 0.2

# Transient failures worth retrying; anything else propagates immediately
_RETRYABLE_ERRORS = (UnavailableError, OSError, TimeoutError, asyncio.TimeoutError)


class InMemoryHistoryProvider:
    """History provider over raw set logs keyed by (user_id, exercise_id)."""

    def __init__(
        self,
        set_logs: Optional[Mapping[tuple[str, str], Iterable[Mapping[str, Any]]]] = None,
    ) -> None:
        self._logs: dict[tuple[str, str], list[dict[str, Any]]] = defaultdict(list)
        for key, rows in (set_logs or {}).items():
            self._logs[key].extend(dict(row) for row in rows)

    def record_set(
        self,
        user_id: str,
        exercise_id: str,
        rest_seconds: float,
        rpe: Optional[int] = None,
        session_id: Optional[str] = None,
        completed_at: Optional[str] = None,
    ) -> None:
        """Append one observed rest (the rest actually taken after a set)."""
        self._logs[(user_id, exercise_id)].append(
            {
                "rest_seconds": rest_seconds,
                "rpe": rpe,
                "session_id": session_id,
                "completed_at": completed_at,
            }
        )

    def set_logs(self, user_id: str, exercise_id: str) -> list[dict[str, Any]]:
        return list(self._logs.get((user_id, exercise_id), []))

    async def fetch_historical_profile(
        self, user_id: str, exercise_id: str
    ) -> Optional[HistoricalProfile]:
        rows = self._logs.get((user_id, exercise_id))
        if not rows:
            return None
        return build_profile(exercise_id, rows)


class ResilientHistoryProvider:
    """Retry + exponential backoff around another HistoryProvider."""

    def __init__(
        self,
        inner: HistoryProvider,
        max_retries: int = _MAX_RETRIES,
        base_backoff_s: float = _BASE_BACKOFF_S,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._inner = inner
        self._max_retries = max(1, max_retries)
        self._base_backoff_s = base_backoff_s
        self._sleep = sleep

    async def fetch_historical_profile(
        self, user_id: str, exercise_id: str
    ) -> Optional[HistoricalProfile]:
        last_exc: Exception | None = None
        for attempt in range(self._max_retries):
            try:
                return await self._inner.fetch_historical_profile(user_id, exercise_id)
            except _RETRYABLE_ERRORS as exc:
                last_exc = exc
                if attempt + 1 >= self._max_retries:
                    break
                wait = self._base_backoff_s * (2 ** attempt)
                logger.warning(
                    "History lookup failed (attempt %d/%d), retrying in %.2fs: %s",
                    attempt + 1,
                    self._max_retries,
                    wait,
                    exc,
                )
                await self._sleep(wait)

        raise UnavailableError(
            f"History unavailable after {self._max_retries} attempts: {last_exc}",
            attempts=self._max_retries,
        ) from last_exc
