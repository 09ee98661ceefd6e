"""
Request pacing for the Voyager transport.

Every request is preceded by a random pause so the traffic does not look
scripted, and a sliding one-minute window caps the request rate.  The
limiter is shared by the concurrent fragment fetches of one profile, so
``wait`` serializes on a lock.
"""

import logging
import random
import time
from collections import deque
from threading import Lock
from typing import Callable, Deque, Dict, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """Random delay in ``[min_delay, max_delay]`` plus a per-minute cap."""

    WINDOW_SECONDS = 60.0

    def __init__(
        self,
        min_delay: float = 2.0,
        max_delay: float = 5.0,
        requests_per_minute: int = 20,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if min_delay < 0 or max_delay < min_delay:
            raise ValueError(f"invalid delay range {min_delay}-{max_delay}")
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.requests_per_minute = requests_per_minute
        self._clock = clock
        self._sleep = sleep
        self._sent: Deque[float] = deque()
        self._lock = Lock()

    def wait(self) -> float:
        """Sleep until the next request may go out; returns the delay used."""
        with self._lock:
            now = self._clock()
            while self._sent and now - self._sent[0] > self.WINDOW_SECONDS:
                self._sent.popleft()

            delay = random.uniform(self.min_delay, self.max_delay)
            if self.requests_per_minute and len(self._sent) >= self.requests_per_minute:
                window_wait = self.WINDOW_SECONDS - (now - self._sent[0])
                if window_wait > delay:
                    logger.warning("Request cap reached, waiting %.1fs", window_wait)
                    delay = window_wait

            if delay > 0:
                logger.debug("Pausing %.2fs before request", delay)
                self._sleep(delay)
            self._sent.append(self._clock())
            return delay

    def reset(self) -> None:
        with self._lock:
            self._sent.clear()

    def get_stats(self) -> Dict[str, Optional[float]]:
        with self._lock:
            return {
                "requests_in_window": len(self._sent),
                "max_requests_per_minute": self.requests_per_minute,
                "min_delay": self.min_delay,
                "max_delay": self.max_delay,
            }
