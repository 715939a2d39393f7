"""
Background job scheduling.

A job runs its callback in a daemon thread. Before each run it asks a wait
function how long to sleep; the rounded-interval wait runs the job at most
once per epoch-aligned bucket (e.g. once per wall-clock hour).
"""

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

WaitFunction = Callable[[datetime, Optional[datetime]], float]


def _truncate(moment: datetime, interval: timedelta) -> datetime:
    """Round moment down to a multiple of interval since the epoch."""
    return EPOCH + ((moment - EPOCH) // interval) * interval


def make_wait_for_rounded_interval(interval: timedelta) -> WaitFunction:
    """
    Build a wait function for jobs that run once per interval bucket.

    The returned function gives 0 if the job never finished or last finished
    in an earlier bucket, otherwise the seconds until the next bucket starts.
    """
    if interval <= timedelta(0):
        raise ValueError("interval must be positive")

    def wait(now: datetime, last_finished: Optional[datetime]) -> float:
        if last_finished is None:
            return 0.0

        bucket = _truncate(last_finished, interval)
        if _truncate(now, interval) != bucket:
            return 0.0

        return ((bucket + interval) - now).total_seconds()

    return wait


class BackgroundJob:
    """Periodic callback running in its own thread."""

    def __init__(self, name: str, wait_fn: WaitFunction, callback: Callable[[], None]):
        self.name = name
        self.wait_fn = wait_fn
        self.callback = callback
        self.last_finished: Optional[datetime] = None
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name=f"job-{name}", daemon=True
        )

    @classmethod
    def schedule(
        cls,
        name: str,
        wait_fn: WaitFunction,
        callback: Callable[[], None]
    ) -> "BackgroundJob":
        """Create and start a job."""
        job = cls(name, wait_fn, callback)
        job.start()
        return job

    def start(self) -> None:
        self._thread.start()
        logger.info(f"Scheduled background job '{self.name}'")

    def _run(self) -> None:
        while not self._stop.is_set():
            wait = self.wait_fn(datetime.now(timezone.utc), self.last_finished)
            if self._stop.wait(max(wait, 0.0)):
                break

            try:
                self.callback()
            except Exception:
                logger.exception(f"Background job '{self.name}' failed")

            self.last_finished = datetime.now(timezone.utc)

    def close(self, timeout: float = 5.0) -> None:
        """Stop the job and wait for the thread to exit."""
        self._stop.set()
        if self._thread.is_alive():
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                raise TimeoutError(
                    f"Background job '{self.name}' did not stop within {timeout}s"
                )
        logger.info(f"Closed background job '{self.name}'")
