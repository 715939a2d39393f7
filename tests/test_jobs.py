"""
tests/test_jobs.py

Tests for the rounded-interval wait function and BackgroundJob.
"""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from image_guard.jobs import BackgroundJob, make_wait_for_rounded_interval

HOUR = timedelta(hours=1)


def at(hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2024, 5, 1, hour, minute, second, tzinfo=timezone.utc)


class TestRoundedInterval:

    def test_never_run_waits_zero(self) -> None:
        wait = make_wait_for_rounded_interval(HOUR)
        assert wait(at(10, 30), None) == 0

    def test_same_bucket_waits_until_next_hour(self) -> None:
        wait = make_wait_for_rounded_interval(HOUR)
        assert wait(at(10, 30), at(10, 5)) == 30 * 60

    def test_previous_bucket_waits_zero(self) -> None:
        wait = make_wait_for_rounded_interval(HOUR)
        assert wait(at(11, 1), at(10, 59)) == 0

    def test_non_positive_interval_rejected(self) -> None:
        with pytest.raises(ValueError):
            make_wait_for_rounded_interval(timedelta(0))


class TestBackgroundJob:

    def test_runs_callback_and_closes(self) -> None:
        ran = threading.Event()
        job = BackgroundJob.schedule("test", lambda now, last: 0 if last is None else 3600, ran.set)

        assert ran.wait(timeout=2)
        job.close()
        assert job.last_finished is not None

    def test_failing_callback_keeps_loop_alive(self) -> None:
        calls = []
        second_call = threading.Event()

        def callback():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")
            second_call.set()

        job = BackgroundJob.schedule("flaky", lambda now, last: 0 if len(calls) < 2 else 3600, callback)

        assert second_call.wait(timeout=2)
        job.close()
        assert len(calls) == 2

    def test_close_twice_is_harmless(self) -> None:
        job = BackgroundJob.schedule("idle", lambda now, last: 3600, lambda: None)
        job.close()
        job.close()
