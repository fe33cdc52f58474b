# app/services/rate_limiter.py
"""
Login attempt limiter.
Fixed window per client key (IP): at most `max_attempts` attempts per
`window_seconds`. The store is bounded: once `max_keys` clients are tracked
the oldest entries are evicted, and expired windows are dropped on access.
Kept behind a small interface so it can later be backed by a shared store.
"""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class _Window:
    count: int
    reset_at: float


class LoginAttemptLimiter:
    def __init__(self, max_attempts: int = 10, window_seconds: float = 900,
                 max_keys: int = 10_000, clock: Callable[[], float] = time.monotonic):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.max_keys = max_keys
        self._clock = clock
        self._windows: "OrderedDict[str, _Window]" = OrderedDict()
        self._lock = threading.Lock()

    def hit(self, key: str) -> bool:
        """Count one attempt for `key`. Returns False when the key is over its limit."""
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or now > window.reset_at:
                self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
                self._windows.move_to_end(key)
                self._evict(now)
                return True
            if window.count >= self.max_attempts:
                logger.warning(f"Login attempts exceeded for {key}")
                return False
            window.count += 1
            return True

    def reset(self, key: str):
        """Forget a key (after a successful login)."""
        with self._lock:
            self._windows.pop(key, None)

    def __len__(self):
        return len(self._windows)

    def _evict(self, now: float):
        # Windows are opened in clock order, so expired ones sit at the front
        while self._windows:
            oldest = next(iter(self._windows.values()))
            if now <= oldest.reset_at:
                break
            self._windows.popitem(last=False)
        while len(self._windows) > self.max_keys:
            self._windows.popitem(last=False)


login_limiter = LoginAttemptLimiter(
    max_attempts=settings.LOGIN_MAX_ATTEMPTS,
    window_seconds=settings.LOGIN_WINDOW_SECONDS,
    max_keys=settings.LOGIN_MAX_TRACKED_CLIENTS,
)
