"""Tests for JobQueue and Submitter."""

import threading

import pytest

from jobpool.errors import QueueClosedError, QueueExhausted
from jobpool.job_queue import JobQueue, Submitter

from tests.fixtures.threads import BLOCK_CHECK, WAIT_TIMEOUT


def make_job(name):
    def job():
        return name

    job.name = name
    return job


class TestBufferedQueue:
    """Queues with a positive capacity."""

    def test_put_within_capacity_does_not_block(self):
        queue = JobQueue(3)
        for i in range(3):
            queue.put(make_job(i))

        assert len(queue) == 3

    def test_put_blocks_when_full(self, background):
        queue = JobQueue(2)
        queue.put(make_job(0))
        queue.put(make_job(1))

        call = background(queue.put, make_job(2))
        assert not call.join(BLOCK_CHECK)
        assert len(queue) == 2

        queue.get()
        assert call.join()
        assert call.exception is None
        assert len(queue) == 2

    def test_jobs_are_taken_in_submission_order(self):
        queue = JobQueue(5)
        jobs = [make_job(i) for i in range(5)]
        for job in jobs:
            queue.put(job)

        assert [queue.get() for _ in range(5)] == jobs

    def test_blocked_producer_keeps_its_place(self, background):
        queue = JobQueue(1)
        first, second = make_job(0), make_job(1)
        queue.put(first)
        call = background(queue.put, second)
        assert not call.join(BLOCK_CHECK)

        assert queue.get() is first
        assert call.join()
        assert queue.get() is second


class TestRendezvousQueue:
    """Queues with capacity 0 hand jobs directly to a consumer."""

    def test_put_blocks_until_a_consumer_takes_the_job(self, background):
        queue = JobQueue(0)
        job = make_job("x")

        call = background(queue.put, job)
        assert not call.join(BLOCK_CHECK)
        assert len(queue) == 0

        assert queue.get() is job
        assert call.join()
        assert call.exception is None

    def test_put_succeeds_with_waiting_consumer(self, background):
        queue = JobQueue(0)
        job = make_job("x")
        consumer = background(queue.get)

        queue.put(job)

        assert consumer.join()
        assert consumer.result is job

    def test_negative_capacity_behaves_like_zero(self, background):
        queue = JobQueue(-3)
        call = background(queue.put, make_job("x"))

        assert not call.join(BLOCK_CHECK)
        queue.get()
        assert call.join()

    def test_multiple_producers_are_all_served(self, background):
        queue = JobQueue(0)
        jobs = [make_job(i) for i in range(4)]
        calls = [background(queue.put, job) for job in jobs]

        taken = [queue.get() for _ in range(4)]

        assert all(call.join() for call in calls)
        assert sorted(job.name for job in taken) == [0, 1, 2, 3]


class TestClose:
    """Closing the queue."""

    def test_put_after_close_raises(self):
        queue = JobQueue(1)
        queue.close()

        with pytest.raises(QueueClosedError):
            queue.put(make_job(0))

    def test_double_close_raises(self):
        queue = JobQueue(0)
        queue.close()

        with pytest.raises(QueueClosedError):
            queue.close()

    def test_closed_queue_is_drained_before_exhaustion(self):
        queue = JobQueue(2)
        jobs = [make_job(0), make_job(1)]
        for job in jobs:
            queue.put(job)
        queue.close()

        assert queue.get() is jobs[0]
        assert queue.get() is jobs[1]
        with pytest.raises(QueueExhausted):
            queue.get()
        with pytest.raises(QueueExhausted):
            queue.get()

    def test_close_wakes_waiting_consumers(self, background):
        queue = JobQueue(0)
        consumer = background(queue.get)
        assert not consumer.join(BLOCK_CHECK)

        queue.close()

        assert consumer.join()
        assert isinstance(consumer.exception, QueueExhausted)

    def test_close_rejects_blocked_producer(self, background):
        queue = JobQueue(1)
        queue.put(make_job(0))
        producer = background(queue.put, make_job(1))
        assert not producer.join(BLOCK_CHECK)

        queue.close()

        assert producer.join()
        assert isinstance(producer.exception, QueueClosedError)
        # Only the admitted job is left
        assert len(queue) == 1
        queue.get()
        with pytest.raises(QueueExhausted):
            queue.get()

    def test_close_rejects_blocked_rendezvous_producer(self, background):
        queue = JobQueue(0)
        producer = background(queue.put, make_job(0))
        assert not producer.join(BLOCK_CHECK)

        queue.close()

        assert producer.join()
        assert isinstance(producer.exception, QueueClosedError)
        with pytest.raises(QueueExhausted):
            queue.get()

    def test_close_if_open(self):
        queue = JobQueue(1)

        assert queue.close_if_open() is True
        assert queue.closed
        assert queue.close_if_open() is False

    def test_close_if_open_rejects_blocked_producer(self, background):
        queue = JobQueue(0)
        producer = background(queue.put, make_job("late"))
        assert not producer.join(BLOCK_CHECK)

        assert queue.close_if_open() is True
        assert producer.join()
        assert isinstance(producer.exception, QueueClosedError)

    def test_closed_property(self):
        queue = JobQueue(0)
        assert queue.closed is False
        queue.close()
        assert queue.closed is True


class TestWaitExhausted:
    """Waiting for a closed queue to run empty."""

    def test_open_queue_is_not_exhausted(self):
        assert JobQueue(1).wait_exhausted(BLOCK_CHECK) is False

    def test_closed_empty_queue_is_exhausted(self):
        queue = JobQueue(1)
        queue.close()
        assert queue.wait_exhausted(0) is True

    def test_closed_queue_with_jobs_is_exhausted_after_drain(self, background):
        queue = JobQueue(2)
        queue.put(make_job(0))
        queue.close()
        waiter = background(queue.wait_exhausted)
        assert not waiter.join(BLOCK_CHECK)

        queue.get()

        assert waiter.join()
        assert waiter.result is True


class TestIteration:
    """Iterating a queue consumes it until exhaustion."""

    def test_iteration_stops_when_closed_and_drained(self):
        queue = JobQueue(3)
        jobs = [make_job(i) for i in range(3)]
        for job in jobs:
            queue.put(job)
        queue.close()

        assert list(queue) == jobs

    def test_iteration_follows_live_producer(self):
        queue = JobQueue(0)
        jobs = [make_job(i) for i in range(20)]

        def produce():
            for job in jobs:
                queue.put(job)
            queue.close()

        producer = threading.Thread(target=produce, daemon=True)
        producer.start()

        assert list(queue) == jobs
        producer.join(WAIT_TIMEOUT)
        assert not producer.is_alive()


class TestSubmitter:
    """The producer-side handle."""

    def test_put_and_submit_forward_to_queue(self):
        queue = JobQueue(2)
        submitter = Submitter(queue)
        a, b = make_job("a"), make_job("b")

        submitter.put(a)
        submitter.submit(b)

        assert len(submitter) == 2
        assert submitter.capacity == 2
        assert queue.get() is a
        assert queue.get() is b

    def test_submitter_has_no_consumer_side(self):
        submitter = Submitter(JobQueue(1))

        assert not hasattr(submitter, "get")
        assert not hasattr(submitter, "__iter__")

    def test_context_manager_closes_queue(self):
        queue = JobQueue(1)
        with Submitter(queue) as submitter:
            submitter.put(make_job(0))
            assert not submitter.closed

        assert queue.closed

    def test_context_manager_tolerates_explicit_close(self):
        queue = JobQueue(1)
        with Submitter(queue) as submitter:
            submitter.close()

        assert queue.closed

    def test_close_twice_through_submitter_raises(self):
        submitter = Submitter(JobQueue(0))
        submitter.close()

        with pytest.raises(QueueClosedError):
            submitter.close()

    def test_context_manager_tolerates_concurrent_close(self):
        class StaleClosedQueue(JobQueue):
            """Reports the queue as open although another thread closed it."""

            @property
            def closed(self):
                return False

        queue = StaleClosedQueue(1)
        with Submitter(queue):
            queue.close()

        assert queue.close_if_open() is False
