"""
Store Worker - runs blocking store operations in background threads.

Uses ThreadPoolExecutor so a slow store (disk, remote service) never blocks
the caller. Results are delivered through callbacks, which run on the
worker thread that finished the operation.
"""

from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from typing import Callable, Optional
import threading
import traceback

from .debug import debug_print, is_debug


ResultCallback = Callable[[object], None]
ErrorCallback = Callable[[BaseException], None]


class StoreWorker:
    """
    Runs store operations in background threads.

    Each operation is identified by a caller-chosen id so it can be polled
    or cancelled. An operation id can only be pending once at a time.
    """

    def __init__(self, max_workers: int = 2):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="store")
        self._pending: dict[str, Future] = {}
        self._lock = threading.Lock()

    def submit(self, operation_id: str, func: Callable, *args,
               on_finished: Optional[ResultCallback] = None,
               on_error: Optional[ErrorCallback] = None, **kwargs) -> Future:
        """
        Submit a blocking operation to run in a background thread.

        Args:
            operation_id: Unique identifier for this operation
            func: The blocking function to run
            on_finished: Called with the result when func returns
            on_error: Called with the exception when func raises or the
                operation is cancelled (CancelledError)
            *args, **kwargs: Arguments to pass to func
        """
        with self._lock:
            if operation_id in self._pending:
                raise ValueError(f"Operation already pending: {operation_id}")
            future = self._executor.submit(func, *args, **kwargs)
            self._pending[operation_id] = future
        future.add_done_callback(lambda f: self._on_done(operation_id, f, on_finished, on_error))
        return future

    def _on_done(self, operation_id: str, future: Future,
                 on_finished: Optional[ResultCallback],
                 on_error: Optional[ErrorCallback]) -> None:
        """Handle completion of a background operation."""
        with self._lock:
            self._pending.pop(operation_id, None)

        if future.cancelled():
            debug_print("WORKER", f"Operation '{operation_id}' cancelled")
            if on_error:
                on_error(CancelledError(operation_id))
            return

        error = future.exception()
        if error is None:
            if on_finished:
                on_finished(future.result())
            return

        debug_print("WORKER", f"Operation '{operation_id}' failed: {type(error).__name__}: {error}")
        if is_debug():
            traceback.print_exception(type(error), error, error.__traceback__)
        if on_error:
            on_error(error)

    def is_pending(self, operation_id: str) -> bool:
        """Check if an operation is still pending."""
        with self._lock:
            return operation_id in self._pending

    def cancel(self, operation_id: str) -> bool:
        """
        Attempt to cancel a pending operation.

        Returns True if cancelled, False if already running or completed.
        """
        with self._lock:
            future = self._pending.get(operation_id)
        if future:
            return future.cancel()
        return False

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the executor, optionally waiting for pending operations."""
        self._executor.shutdown(wait=wait)


# Global worker instance (created lazily)
_global_worker: Optional[StoreWorker] = None


def get_store_worker() -> StoreWorker:
    """Get the global StoreWorker instance."""
    global _global_worker
    if _global_worker is None:
        _global_worker = StoreWorker()
    return _global_worker


def shutdown_store_worker() -> None:
    """Shutdown the global StoreWorker."""
    global _global_worker
    if _global_worker is not None:
        _global_worker.shutdown(wait=False)
        _global_worker = None
