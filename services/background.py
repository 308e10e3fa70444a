"""
Fire-and-forget background tasks (e.g. sending the welcome email).

Tasks run on a bounded thread pool. A failing task is logged and dropped,
never retried and never reported to the request that scheduled it. On
shutdown the runner waits a bounded amount of time for outstanding tasks;
running tasks cannot be cancelled.
"""
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable

from utils.logger import get_logger

logger = get_logger(__name__)


class BackgroundRunner:
    def __init__(self, max_workers: int = 4):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="background")
        self._pending: set[Future] = set()
        self._lock = threading.Lock()
        self._closed = False

    def submit(self, fn: Callable[..., Any], *args, **kwargs) -> Future | None:
        """Schedule ``fn``. Returns None if the runner is already shutting down."""
        with self._lock:
            if self._closed:
                logger.warning(f"[Background] Runner is shutting down, dropping task {fn.__name__}")
                return None
            future = self._executor.submit(self._run, fn, *args, **kwargs)
            self._pending.add(future)

        future.add_done_callback(self._discard)
        return future

    def _run(self, fn: Callable[..., Any], *args, **kwargs) -> None:
        try:
            fn(*args, **kwargs)
        except Exception:
            logger.exception(f"[Background] Task {fn.__name__} failed")

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def drain(self, timeout: float | None = None) -> bool:
        """
        Stop accepting tasks and wait up to ``timeout`` seconds for the rest.

        Returns True when every task finished in time.
        """
        with self._lock:
            self._closed = True
            outstanding = set(self._pending)

        if outstanding:
            logger.info(f"[Background] Waiting for {len(outstanding)} background task(s) to complete")
        _, not_done = wait(outstanding, timeout=timeout)
        if not_done:
            logger.warning(f"[Background] {len(not_done)} background task(s) still running after {timeout}s")

        self._executor.shutdown(wait=False)
        return not not_done
