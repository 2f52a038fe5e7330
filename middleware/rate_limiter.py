"""
In-memory fixed-window rate limiting for the contact endpoint.

State lives in a RateLimitStore owned by the application (app.state), so it
only holds within a single running process. Expired records are dropped by a
RateLimitSweeper task started in the application lifespan.
"""
import asyncio
import time
from dataclasses import dataclass, replace
from threading import Lock
from typing import Callable, Dict, Optional

from constants import (
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_SWEEP_INTERVAL_SECONDS,
    RATE_LIMIT_WINDOW_SECONDS,
)
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RateLimitRecord:
    count: int
    window_end: float


class RateLimitStore:
    """Fixed-window request counters keyed by client identifier."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._records: Dict[str, RateLimitRecord] = {}
        self._lock = Lock()

    def check(
        self,
        identifier: str,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
    ) -> bool:
        """
        Count one request for ``identifier``.

        Returns True when the request exceeds ``max_requests`` within the
        current window. A record whose window has elapsed is replaced, not
        incremented.
        """
        with self._lock:
            now = self._clock()
            record = self._records.get(identifier)

            if record is None or now > record.window_end:
                self._records[identifier] = RateLimitRecord(count=1, window_end=now + window_seconds)
                return False

            record.count += 1
            return record.count > max_requests

    def sweep(self) -> int:
        """Drop records whose window already ended. Returns how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [key for key, record in self._records.items() if now > record.window_end]
            for key in expired:
                del self._records[key]
        return len(expired)

    def get(self, identifier: str) -> Optional[RateLimitRecord]:
        """Snapshot of the record for ``identifier``, or None."""
        with self._lock:
            record = self._records.get(identifier)
            return replace(record) if record is not None else None

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class RateLimitSweeper:
    """Periodically sweeps a RateLimitStore until stopped."""

    def __init__(self, store: RateLimitStore, interval_seconds: float = RATE_LIMIT_SWEEP_INTERVAL_SECONDS):
        self.store = store
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="rate-limit-sweeper")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                removed = self.store.sweep()
            except Exception:
                logger.exception("Rate limit sweep failed")
                continue
            if removed:
                logger.debug(f"Rate limit sweep removed {removed} expired record(s)")
