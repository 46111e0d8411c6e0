"""
Main-context dispatchers.

All view model state changes and observer notifications run as callables
posted here. The thread that owns the screen drains the queue.
"""

import queue
import threading
from typing import Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class Dispatcher(Protocol):
    """Protocol for main contexts (interface)."""

    def post(self, fn: Callable[[], None]) -> None:
        """Schedule fn on the main context (callable from any thread)."""
        ...

    def run_pending(self, timeout: Optional[float] = None) -> int:
        """Run scheduled callables; returns how many ran."""
        ...


class MainThreadDispatcher:
    """
    Thread-safe FIFO of callables executed on the owning thread.

    Usage:
        dispatcher = MainThreadDispatcher()
        worker: dispatcher.post(lambda: apply(result))
        main loop: dispatcher.run_pending(timeout=0.1)

    Thread Safety:
        post() may be called from any thread; run_pending() only from the
        owner. Calls from another thread raise RuntimeError.
    """

    def __init__(self, owner: Optional[threading.Thread] = None):
        self._queue: "queue.Queue[Callable[[], None]]" = queue.Queue()
        self._owner = owner or threading.current_thread()

    def post(self, fn: Callable[[], None]) -> None:
        self._queue.put(fn)

    def run_pending(self, timeout: Optional[float] = None) -> int:
        """
        Run queued callables.

        Args:
            timeout: Seconds to wait for the first callable (None = don't wait)

        Returns:
            Number of callables executed
        """
        if threading.current_thread() is not self._owner:
            raise RuntimeError("run_pending() must be called from the owning thread")

        executed = 0
        try:
            if timeout is not None:
                fn = self._queue.get(timeout=timeout)
            else:
                fn = self._queue.get_nowait()
        except queue.Empty:
            return executed

        while True:
            fn()
            executed += 1
            try:
                fn = self._queue.get_nowait()
            except queue.Empty:
                return executed

    @property
    def pending(self) -> int:
        return self._queue.qsize()


class ImmediateDispatcher:
    """Runs posted callables inline, for callers without a main loop."""

    def post(self, fn: Callable[[], None]) -> None:
        fn()

    def run_pending(self, timeout: Optional[float] = None) -> int:
        return 0
