"""One-shot completion signal of a job pool."""

import logging
import threading
from collections.abc import Callable

from attrs import frozen

logger = logging.getLogger(__name__)


@frozen
class ShutdownResult:
    """Outcome delivered by the completion signal.

    A pool currently always shuts down cleanly, so ``error`` is always None.
    Consumers should check ``ok`` rather than assume success, so that a failure
    outcome can be reported later without breaking them.
    """

    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CompletionSignal:
    """Fires exactly once, after the pool has shut down.

    Any number of threads may wait on the signal or register callbacks.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._result: ShutdownResult | None = None
        self._callbacks: list[Callable[[ShutdownResult], object]] = []

    @property
    def result(self) -> ShutdownResult | None:
        """The shutdown result, or None while the pool is still running."""
        with self._lock:
            return self._result

    def is_set(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the signal fires.

        Args:
            timeout: Maximum time to wait in seconds, or None to wait forever

        Returns:
            True if the signal fired, False if the timeout expired
        """
        return self._event.wait(timeout)

    def add_done_callback(self, fn: Callable[[ShutdownResult], object]) -> None:
        """Call ``fn(result)`` once the signal fires.

        If the signal already fired, ``fn`` is called immediately in the
        calling thread. Otherwise it runs in the thread that fires the signal.
        """
        with self._lock:
            if self._result is None:
                self._callbacks.append(fn)
                return
            result = self._result
        fn(result)

    def fire(self, result: ShutdownResult | None = None) -> None:
        """Deliver the result and wake all waiters.

        Raises:
            RuntimeError: If the signal already fired
        """
        if result is None:
            result = ShutdownResult()

        with self._lock:
            if self._result is not None:
                raise RuntimeError("Completion signal fired twice")
            self._result = result
            self._event.set()
            callbacks = self._callbacks
            self._callbacks = []

        for fn in callbacks:
            try:
                fn(result)
            except Exception:
                logger.exception(f"Completion callback {fn!r} failed")
