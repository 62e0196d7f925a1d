"""Single-threaded execution context for reader state.

Responsibilities:
- Run control operations and engine callbacks one at a time, in order.
- Let callers block for a result (`call`) or fire and forget (`post`).
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
import threading
from typing import Any, Callable, TypeVar

T = TypeVar("T")


class SerialExecutor:
    """One worker thread that owns every mutation of the reader state."""

    def __init__(self, name: str = "pdfvoice-serial") -> None:
        self._worker_ident: int | None = None
        self._closed = False
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=name,
            initializer=self._remember_worker,
        )

    def _remember_worker(self) -> None:
        self._worker_ident = threading.get_ident()

    @property
    def closed(self) -> bool:
        return self._closed

    def on_worker_thread(self) -> bool:
        return threading.get_ident() == self._worker_ident

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> Future[T]:
        return self._executor.submit(fn, *args, **kwargs)

    def call(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run `fn` on the worker and wait; runs inline when already on the worker."""

        if self.on_worker_thread():
            return fn(*args, **kwargs)
        return self.submit(fn, *args, **kwargs).result()

    def post(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """Queue `fn` behind pending work without waiting; dropped once closed."""

        with self._lock:
            if self._closed:
                return
            self._executor.submit(fn, *args, **kwargs)

    def flush(self) -> None:
        """Block until everything queued so far has run."""

        if self._closed or self.on_worker_thread():
            return
        self.submit(lambda: None).result()

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)
