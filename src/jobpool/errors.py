"""Exceptions raised by the job pool.

Protocol violations by producers (submitting after the queue was closed,
closing it twice) raise ``QueueClosedError`` in the violating caller. They are
never reported through the completion signal.
"""


class PoolError(Exception):
    """Base class for all job pool errors."""


class QueueClosedError(PoolError):
    """The job queue was already closed.

    Raised by ``put`` after ``close``, by a second ``close``, and by a
    producer that was blocked in ``put`` while the queue got closed.
    """


class QueueExhausted(PoolError):
    """The job queue is closed and every admitted job has been taken."""
