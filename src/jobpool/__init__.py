"""jobpool - a bounded thread pool for zero-argument jobs.

Jobs are submitted to a fixed-capacity queue and run by a fixed number of
worker threads. Closing the queue lets the pool shut down once every
submitted job has finished, which is reported through a completion signal.
"""

from jobpool.__version__ import __version__
from jobpool.completion import CompletionSignal, ShutdownResult
from jobpool.config import (
    PoolConfig,
    get_config,
    new_pool_from_config,
    setup_logging_from_config,
)
from jobpool.errors import PoolError, QueueClosedError, QueueExhausted
from jobpool.job_queue import Job, JobQueue, Submitter
from jobpool.logging import setup_logging
from jobpool.pool import WorkerPool, default_worker_count, new_default_pool, new_pool

__all__ = [
    "__version__",
    "CompletionSignal",
    "Job",
    "JobQueue",
    "PoolConfig",
    "PoolError",
    "QueueClosedError",
    "QueueExhausted",
    "ShutdownResult",
    "Submitter",
    "WorkerPool",
    "default_worker_count",
    "get_config",
    "new_default_pool",
    "new_pool",
    "new_pool_from_config",
    "setup_logging",
    "setup_logging_from_config",
]
