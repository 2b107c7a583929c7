"""Kernel time – the clock that stamps roles, assignments and audit records.

Every timestamp the engine writes is timezone-aware UTC, so exported
``created_at`` / ``assigned_at`` / ``occurred_at`` values compare and sort
consistently across processes.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port: source of assignment / audit timestamps."""

    def now(self) -> datetime: ...


class SystemClock:
    """Production clock that delegates to ``datetime.now(UTC)``."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FrozenClock:
    """Test clock pinned to a fixed point in time.

    The instant must be timezone-aware; it is normalised to UTC so frozen
    stamps look exactly like :class:`SystemClock` ones in exports.
    """

    def __init__(self, fixed: datetime) -> None:
        if fixed.tzinfo is None or fixed.utcoffset() is None:
            raise ValueError("FrozenClock needs a timezone-aware datetime")
        self._fixed = fixed.astimezone(UTC)

    def now(self) -> datetime:
        return self._fixed

    def advance(self, **kwargs: int | float) -> None:
        """Advance the frozen time by the given ``timedelta`` kwargs."""
        self._fixed += timedelta(**kwargs)


__all__ = ["Clock", "FrozenClock", "SystemClock"]
