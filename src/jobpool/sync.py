"""Synchronization helpers shared by the pool components."""

import threading


class WaitGroup:
    """Countdown of live workers, scoped to a single pool.

    ``wait`` returns once the count has dropped to zero (or below, which only
    happens when the group was created with a negative count).
    """

    def __init__(self, count: int = 0):
        self._count = count
        self._cond = threading.Condition(threading.Lock())

    @property
    def count(self) -> int:
        with self._cond:
            return self._count

    def add(self, delta: int = 1) -> None:
        with self._cond:
            self._count += delta
            if self._count <= 0:
                self._cond.notify_all()

    def done(self) -> None:
        self.add(-1)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the count reaches zero.

        Args:
            timeout: Maximum time to wait in seconds, or None to wait forever

        Returns:
            True if the count reached zero, False if the timeout expired
        """
        with self._cond:
            return self._cond.wait_for(lambda: self._count <= 0, timeout=timeout)
