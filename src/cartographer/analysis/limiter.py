"""Requests-per-minute limiter shared by the analysis workers."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable, Deque

WINDOW_S = 60.0


class RateLimiter:
    """Sliding-window limiter: at most ``rpm_limit`` admissions per 60 seconds.

    ``acquire`` blocks the calling thread until a slot is free. A limit of
    zero (or less) admits everything immediately.
    """

    def __init__(
        self,
        rpm_limit: int,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.rpm_limit = rpm_limit
        self._clock = clock
        self._sleep = sleep
        self._admitted: Deque[float] = deque()
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.rpm_limit > 0

    def acquire(self) -> float:
        """Wait for a slot. Returns the number of seconds spent waiting."""
        if not self.enabled:
            return 0.0
        waited = 0.0
        while True:
            with self._lock:
                now = self._clock()
                while self._admitted and now - self._admitted[0] >= WINDOW_S:
                    self._admitted.popleft()
                if len(self._admitted) < self.rpm_limit:
                    self._admitted.append(now)
                    return waited
                delay = WINDOW_S - (now - self._admitted[0])
            self._sleep(delay)
            waited += delay
