"""Cancellable time budget for a single outbound call."""
from __future__ import annotations

import time
from typing import Callable


class Deadline:
    """Monotonic deadline that can also be cancelled explicitly.

    ``seconds=None`` means no deadline; the budget only ends on ``cancel()``.
    Used as a context manager the deadline is cancelled on exit, so nothing
    holding a reference can keep using it once the scoped call is done.
    """

    def __init__(
        self,
        seconds: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if seconds is not None and seconds < 0:
            raise ValueError("deadline seconds must be non-negative")
        self._clock = clock
        self._expires_at = None if seconds is None else clock() + seconds
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def remaining(self) -> float | None:
        """Seconds left, ``0.0`` once cancelled or expired, ``None`` if unbounded."""
        if self._cancelled:
            return 0.0
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0

    def reason(self) -> str:
        if self._cancelled:
            return "deadline cancelled"
        return "deadline exceeded"

    def __enter__(self) -> "Deadline":
        return self

    def __exit__(self, *exc_info) -> None:
        self.cancel()


__all__ = ["Deadline"]
