"""Cancellable operation context threaded through one synchronization pass."""
from __future__ import annotations

import threading
import time
from typing import Optional

from common.errors import SyncCancelledError


class SyncContext:
    """Cancellation flag plus optional deadline.

    The host creates one context per pass. Subprocesses are killed and HTTP
    requests refuse to start once the context is done.
    """

    def __init__(self, timeout: Optional[float] = None, cancel_event: Optional[threading.Event] = None):
        self._event = cancel_event if cancel_event is not None else threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def done(self) -> bool:
        return self.cancelled or self.expired

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def timeout_for(self, default: float) -> float:
        """Bound a per-call timeout by the remaining deadline."""
        remaining = self.remaining()
        if remaining is None:
            return default
        return min(default, remaining)

    def check(self) -> None:
        """Raise SyncCancelledError when the context is done."""
        if self.cancelled:
            raise SyncCancelledError("operation cancelled")
        if self.expired:
            raise SyncCancelledError("operation deadline exceeded")
