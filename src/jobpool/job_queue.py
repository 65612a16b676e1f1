"""Bounded, closable job queue.

This module provides the JobQueue class that hands jobs from producers to the
pool's worker threads, and the Submitter class, the producer-side view of a
queue that only allows submitting and closing.

A queue with capacity ``C > 0`` buffers up to ``C`` jobs; producers block
while the buffer is full. A queue with capacity 0 (or less) buffers nothing:
``put`` returns only once a worker has taken the job from the producer.

Jobs are taken in the order they were admitted, so the submission order of a
single producer is preserved. Producers blocked at the same time are admitted
in the order they started waiting.
"""

import logging
import threading
from collections import deque
from collections.abc import Callable, Iterator

from jobpool.errors import QueueClosedError, QueueExhausted

logger = logging.getLogger(__name__)

Job = Callable[[], object]

# States of a producer waiting to hand off its job
_PENDING = "pending"
_TAKEN = "taken"
_REJECTED = "rejected"


class _Handoff:
    """A job offered by a blocked producer."""

    __slots__ = ("job", "state")

    def __init__(self, job: Job):
        self.job = job
        self.state = _PENDING


class JobQueue:
    """Thread-safe bounded FIFO of jobs with an explicit end of input.

    All state is guarded by a single condition variable; the queue needs no
    external locking.
    """

    def __init__(self, capacity: int = 0):
        """Initialize job queue.

        Args:
            capacity: Number of jobs that can be buffered. 0 (or a negative
                value) means every hand-off is a rendezvous with a worker.
        """
        self._capacity = capacity
        self._buffer: deque[Job] = deque()
        self._waiting: deque[_Handoff] = deque()
        self._closed = False
        self._cond = threading.Condition(threading.Lock())

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def __len__(self) -> int:
        """Number of buffered jobs (producers still blocked are not counted)."""
        with self._cond:
            return len(self._buffer)

    def put(self, job: Job) -> None:
        """Admit a job, blocking until there is room for it.

        Args:
            job: Zero-argument callable. It is not inspected.

        Raises:
            QueueClosedError: If the queue is closed before the job is admitted
        """
        with self._cond:
            if self._closed:
                raise QueueClosedError("put on closed job queue")

            if not self._waiting and len(self._buffer) < self._capacity:
                self._buffer.append(job)
                self._cond.notify_all()
                return

            handoff = _Handoff(job)
            self._waiting.append(handoff)
            self._cond.notify_all()
            while handoff.state == _PENDING:
                self._cond.wait()

            if handoff.state == _REJECTED:
                raise QueueClosedError("job queue was closed while put was blocked")

    def get(self) -> Job:
        """Take the next job, blocking while the queue is open and empty.

        Returns:
            The next admitted job

        Raises:
            QueueExhausted: If the queue is closed and no job is left
        """
        with self._cond:
            while True:
                if self._buffer:
                    job = self._buffer.popleft()
                    self._admit_waiting()
                    self._cond.notify_all()
                    return job

                if self._waiting:
                    handoff = self._waiting.popleft()
                    handoff.state = _TAKEN
                    self._cond.notify_all()
                    return handoff.job

                if self._closed:
                    raise QueueExhausted("job queue is closed and drained")

                self._cond.wait()

    def close(self) -> None:
        """Signal that no more jobs will be submitted.

        Buffered jobs stay available to consumers. Producers still blocked in
        ``put`` are woken up and raise ``QueueClosedError``.

        Raises:
            QueueClosedError: If the queue was already closed
        """
        with self._cond:
            if self._closed:
                raise QueueClosedError("close of closed job queue")
            rejected = self._shut()

        if rejected:
            logger.warning(f"Job queue closed with {rejected} blocked producer(s)")

    def close_if_open(self) -> bool:
        """Close the queue unless it is already closed.

        Returns:
            True if this call closed the queue, False if it was closed before
        """
        with self._cond:
            if self._closed:
                return False
            rejected = self._shut()

        if rejected:
            logger.warning(f"Job queue closed with {rejected} blocked producer(s)")
        return True

    def wait_exhausted(self, timeout: float | None = None) -> bool:
        """Block until the queue is closed and no job is left in it.

        Args:
            timeout: Maximum time to wait in seconds, or None to wait forever

        Returns:
            True if the queue is exhausted, False if the timeout expired
        """
        with self._cond:
            return self._cond.wait_for(
                lambda: self._closed and not self._buffer and not self._waiting,
                timeout=timeout,
            )

    def __iter__(self) -> Iterator[Job]:
        """Yield jobs until the queue is closed and drained."""
        while True:
            try:
                job = self.get()
            except QueueExhausted:
                return
            yield job

    def _shut(self) -> int:
        # Caller holds the lock; returns the number of rejected producers
        self._closed = True
        rejected = len(self._waiting)
        for handoff in self._waiting:
            handoff.state = _REJECTED
        self._waiting.clear()
        self._cond.notify_all()
        return rejected

    def _admit_waiting(self) -> None:
        # Caller holds the lock
        while self._waiting and len(self._buffer) < self._capacity:
            handoff = self._waiting.popleft()
            handoff.state = _TAKEN
            self._buffer.append(handoff.job)


class Submitter:
    """Producer-side handle of a job queue.

    Only submitting and closing are exposed. Used as a context manager, the
    queue is closed when the block is left (unless it was closed inside it).
    """

    def __init__(self, queue: JobQueue):
        self._queue = queue

    @property
    def capacity(self) -> int:
        return self._queue.capacity

    @property
    def closed(self) -> bool:
        return self._queue.closed

    def __len__(self) -> int:
        return len(self._queue)

    def put(self, job: Job) -> None:
        """Submit a job; see ``JobQueue.put``."""
        self._queue.put(job)

    submit = put

    def close(self) -> None:
        """Close the queue; see ``JobQueue.close``."""
        self._queue.close()

    def __enter__(self) -> "Submitter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._queue.close_if_open()
