"""Bounded thread pool for zero-argument jobs.

This module provides the WorkerPool class and the ``new_pool`` /
``new_default_pool`` helpers. A pool is made up of ``num_workers`` worker
threads plus one supervisor thread, all started by the constructor, which
returns immediately.

Producers submit jobs through the pool's Submitter and close it once no more
jobs will follow. When the queue has been closed and every admitted job has
finished, the supervisor fires the pool's CompletionSignal. A queue that is
never closed keeps the pool running forever.

Things the pool does not do:

- Jobs run concurrently on different workers. Any state shared between job
  bodies must be protected by the caller; the only guarantee is that one
  worker runs one job at a time.
- Exceptions raised by a job are not caught. They end the worker thread that
  ran the job (and are reported by ``threading.excepthook``). That worker never
  reports termination, so the completion signal will not fire for the pool.
- A pool with zero workers never drains its queue. Submitting more jobs than
  the queue can buffer blocks the producer forever.
"""

import logging
import os
import threading

from jobpool.completion import CompletionSignal, ShutdownResult
from jobpool.job_queue import JobQueue, Submitter
from jobpool.sync import WaitGroup

logger = logging.getLogger(__name__)

DEFAULT_THREAD_NAME_PREFIX = "jobpool"


def default_worker_count() -> int:
    """Number of logical CPUs of the host (1 if it cannot be determined)."""
    return os.cpu_count() or 1


class WorkerPool:
    """A running job pool.

    Attributes:
        submitter: Producer endpoint (``put`` / ``close``)
        done: Completion endpoint, fires once after shutdown
    """

    def __init__(
        self,
        num_workers: int,
        queue_size: int,
        thread_name_prefix: str = DEFAULT_THREAD_NAME_PREFIX,
        daemon: bool = True,
    ):
        """Create the queue and start all threads.

        Neither argument is validated. ``num_workers <= 0`` starts no worker.

        Args:
            num_workers: Number of worker threads
            queue_size: Capacity of the job queue; 0 means rendezvous hand-off
            thread_name_prefix: Prefix of the thread names
            daemon: Whether the threads are daemon threads
        """
        self.num_workers = num_workers
        self.queue_size = queue_size
        self._queue = JobQueue(queue_size)
        self._live_workers = WaitGroup(num_workers)
        self.submitter = Submitter(self._queue)
        self.done = CompletionSignal()

        self.workers: list[threading.Thread] = [
            threading.Thread(
                target=self._run_worker,
                args=(index,),
                name=f"{thread_name_prefix}-worker-{index}",
                daemon=daemon,
            )
            for index in range(num_workers)
        ]
        self.supervisor = threading.Thread(
            target=self._supervise,
            name=f"{thread_name_prefix}-supervisor",
            daemon=daemon,
        )

        for worker in self.workers:
            worker.start()
        self.supervisor.start()

        logger.info(f"Started job pool: {num_workers} worker(s), queue size {queue_size}")

    @property
    def live_workers(self) -> int:
        """Workers that have not (normally) terminated yet."""
        return max(self._live_workers.count, 0)

    def _run_worker(self, index: int) -> None:
        logger.debug(f"Worker {index} started")
        for job in self._queue:
            job()
        logger.debug(f"Worker {index} finished: job queue drained")
        self._live_workers.done()

    def _supervise(self) -> None:
        self._live_workers.wait()
        # Without workers nobody drains the queue, so check it separately
        self._queue.wait_exhausted()
        logger.info("Job pool shut down: all jobs completed")
        self.done.fire(ShutdownResult())


def new_pool(num_workers: int, queue_size: int) -> tuple[Submitter, CompletionSignal]:
    """Create and start a job pool.

    Args:
        num_workers: Number of worker threads
        queue_size: Capacity of the job queue; 0 means a worker must be idle
            for a submission to succeed

    Returns:
        Tuple of the submission endpoint and the completion signal
    """
    pool = WorkerPool(num_workers, queue_size)
    return pool.submitter, pool.done


def new_default_pool() -> tuple[Submitter, CompletionSignal]:
    """Create a pool with one worker per logical CPU and a queue size of 0."""
    return new_pool(default_worker_count(), 0)
