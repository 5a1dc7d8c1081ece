"""Controllable clocks for token and revocation tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


class ManualClock:
    """A UTC clock that only moves when told to.

    Exposes both a ``datetime`` source (for the token codec) and a ``float``
    epoch source (for the in-memory revocation store).
    """

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.current

    def epoch(self) -> float:
        return self.current.timestamp()

    def advance(self, **delta: float) -> None:
        self.current += timedelta(**delta)
