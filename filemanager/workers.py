import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Set


class DaemonThreadExecutor(ThreadPoolExecutor):
    """
    Default executor for a session's event loop. Every job runs on its own daemon
    thread, so closing the session (or the interpreter) never joins a file
    operation that is still blocked.
    """

    def __init__(self, thread_name_prefix: str = "filemanager-io") -> None:
        super().__init__(max_workers=1, thread_name_prefix=thread_name_prefix)
        self._pending: Set[Future] = set()
        self._guard = threading.Lock()
        self._closed = False
        self._counter = 0

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:
        future: Future = Future()
        with self._guard:
            if self._closed:
                raise RuntimeError("cannot schedule new futures after shutdown")
            self._pending.add(future)
            self._counter += 1
            name = f"{self._thread_name_prefix}_{self._counter}"

        def _work() -> None:
            try:
                if not future.set_running_or_notify_cancel():
                    return
                try:
                    result = fn(*args, **kwargs)
                except BaseException as exc:
                    future.set_exception(exc)
                else:
                    future.set_result(result)
            finally:
                with self._guard:
                    self._pending.discard(future)

        threading.Thread(target=_work, name=name, daemon=True).start()
        return future

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        # running jobs are never waited for; ``wait`` is accepted for the executor protocol
        with self._guard:
            self._closed = True
            pending = list(self._pending)
        if cancel_futures:
            for future in pending:
                future.cancel()
