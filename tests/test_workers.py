import asyncio
import threading
import time

import pytest

from filemanager.workers import DaemonThreadExecutor


def test_submit_runs_on_daemon_thread():
    executor = DaemonThreadExecutor()
    future = executor.submit(lambda: threading.current_thread().daemon)
    assert future.result(timeout=5) is True


def test_shutdown_does_not_wait_for_blocked_job():
    executor = DaemonThreadExecutor()
    release = threading.Event()
    future = executor.submit(release.wait, 30)
    started = time.monotonic()
    executor.shutdown(wait=True, cancel_futures=True)
    assert time.monotonic() - started < 1
    release.set()
    assert future.result(timeout=5) is True


def test_submit_after_shutdown_is_rejected():
    executor = DaemonThreadExecutor()
    executor.shutdown()
    with pytest.raises(RuntimeError):
        executor.submit(print)


def test_errors_propagate_through_future():
    executor = DaemonThreadExecutor()
    future = executor.submit(int, "not a number")
    with pytest.raises(ValueError):
        future.result(timeout=5)


@pytest.mark.asyncio
async def test_serves_as_default_loop_executor():
    asyncio.get_running_loop().set_default_executor(DaemonThreadExecutor())
    assert await asyncio.to_thread(lambda: threading.current_thread().name.startswith("filemanager-io"))
