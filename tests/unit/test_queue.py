"""Unit tests for the MLFQ Queue.

Covers FIFO ownership, CPU work outcomes, quantum accounting,
the timeslice drain policy and blocking work.
"""

import pytest

from core.process import ProcessState
from core.queue import Queue
from core.scheduler_base import (
    QueueType,
    SchedulerInterrupt,
    EmptyQueueError,
    ProcessAlreadyQueuedError,
    QueueTypeError,
)


# =============================================================================
# Ownership and FIFO
# =============================================================================

class TestEnqueue:

    def test_enqueue_appends_in_fifo_order(self, cpu_queue, make_process):
        processes = [make_process(pid, 5) for pid in (1, 2, 3)]
        for p in processes:
            cpu_queue.enqueue(p)

        assert list(cpu_queue) == processes
        assert cpu_queue.peek() is processes[0]
        assert len(cpu_queue) == 3

    def test_enqueue_sets_owner_and_level(self, make_process):
        queue = Queue(30, 1, QueueType.CPU_QUEUE)
        p = make_process(1, 5)

        queue.enqueue(p)

        assert p.queue is queue
        assert p.priority_level == 1
        assert p.state == ProcessState.READY

    def test_blocking_enqueue_marks_blocked(self, blocking_queue, make_process):
        p = make_process(1, 5, 8)
        p.priority_level = 2

        blocking_queue.enqueue(p)

        assert p.state == ProcessState.BLOCKED
        assert p.priority_level == 2

    def test_enqueue_twice_fails(self, cpu_queue, make_process):
        p = make_process(1, 5)
        cpu_queue.enqueue(p)

        with pytest.raises(ProcessAlreadyQueuedError):
            cpu_queue.enqueue(p)
        assert len(cpu_queue) == 1

    def test_enqueue_owned_by_other_queue_fails(self, cpu_queue, blocking_queue, make_process):
        p = make_process(1, 5)
        cpu_queue.enqueue(p)

        with pytest.raises(ProcessAlreadyQueuedError):
            blocking_queue.enqueue(p)
        assert blocking_queue.is_empty()

    def test_dequeue_releases_ownership(self, cpu_queue, make_process):
        p = make_process(1, 5)
        cpu_queue.enqueue(p)

        assert cpu_queue.dequeue() is p
        assert p.queue is None
        assert cpu_queue.is_empty()

    def test_dequeue_empty_fails(self, cpu_queue):
        with pytest.raises(EmptyQueueError):
            cpu_queue.dequeue()

    def test_accessors(self):
        queue = Queue(50, 2, QueueType.CPU_QUEUE)
        assert queue.get_queue_type() == QueueType.CPU_QUEUE
        assert queue.get_priority_level() == 2
        assert queue.get_quantum() == 50

    def test_non_positive_quantum_rejected(self):
        with pytest.raises(ValueError):
            Queue(0, 0, QueueType.CPU_QUEUE)


# =============================================================================
# CPU work
# =============================================================================

class TestCPUWork:

    def test_short_process_terminates_within_quantum(self, cpu_queue, make_process):
        p = make_process(1, 5)
        cpu_queue.enqueue(p)

        outcomes = cpu_queue.do_cpu_work(10)

        assert len(outcomes) == 1
        assert outcomes[0].terminated
        assert outcomes[0].interrupt is None
        assert outcomes[0].ran == 5
        assert p.remaining_cpu_burst == 0
        assert cpu_queue.is_empty()

    def test_quantum_exhaustion_lowers_priority(self, cpu_queue, make_process):
        p = make_process(1, 25)
        cpu_queue.enqueue(p)

        outcomes = cpu_queue.do_cpu_work(10)

        assert outcomes[0].interrupt == SchedulerInterrupt.LOWER_PRIORITY
        assert outcomes[0].ran == 10
        assert p.remaining_cpu_burst == 15
        assert p.time_slice_used == 0
        assert cpu_queue.is_empty()

    def test_demoted_process_finishes_in_larger_quantum(self, cpu_queue, make_process):
        p = make_process(1, 25)
        cpu_queue.enqueue(p)
        cpu_queue.do_cpu_work(10)

        tier1 = Queue(30, 1, QueueType.CPU_QUEUE)
        tier1.enqueue(p)
        outcomes = tier1.do_cpu_work(30)

        assert len(outcomes) == 1
        assert outcomes[0].terminated
        assert outcomes[0].ran == 15

    def test_cpu_burst_done_with_io_pending_blocks(self, cpu_queue, make_process):
        p = make_process(1, 5, 8)
        cpu_queue.enqueue(p)

        outcomes = cpu_queue.do_cpu_work(10)

        assert outcomes[0].interrupt == SchedulerInterrupt.PROCESS_BLOCKED
        assert not outcomes[0].terminated
        assert p.remaining_cpu_burst == 0
        assert p.remaining_blocking_burst == 8

    def test_burst_exactly_quantum_is_not_demoted(self, cpu_queue, make_process):
        p = make_process(1, 10)
        cpu_queue.enqueue(p)

        outcomes = cpu_queue.do_cpu_work(10)

        assert outcomes[0].terminated
        assert outcomes[0].interrupt is None

    def test_budget_exhausted_mid_quantum_keeps_process_at_front(self, cpu_queue, make_process):
        p1 = make_process(1, 25)
        p2 = make_process(2, 5)
        cpu_queue.enqueue(p1)
        cpu_queue.enqueue(p2)

        outcomes = cpu_queue.do_cpu_work(4)

        assert len(outcomes) == 1
        assert outcomes[0].interrupt is None
        assert not outcomes[0].terminated
        assert outcomes[0].ran == 4
        assert list(cpu_queue) == [p1, p2]
        assert p1.queue is cpu_queue
        assert p1.time_slice_used == 4

    def test_quantum_carries_over_between_calls(self, cpu_queue, make_process):
        p = make_process(1, 25)
        cpu_queue.enqueue(p)

        cpu_queue.do_cpu_work(4)
        outcomes = cpu_queue.do_cpu_work(10)

        # only the rest of the quantum is granted
        assert outcomes[0].ran == 6
        assert outcomes[0].interrupt == SchedulerInterrupt.LOWER_PRIORITY
        assert p.remaining_cpu_burst == 15

    def test_single_quantum_timeslice_dispatches_one_process(self, cpu_queue, make_process):
        p1, p2 = make_process(1, 25), make_process(2, 5)
        cpu_queue.enqueue(p1)
        cpu_queue.enqueue(p2)

        outcomes = cpu_queue.do_cpu_work(10)

        assert [o.process for o in outcomes] == [p1]
        assert list(cpu_queue) == [p2]

    def test_multi_quantum_timeslice_drains_queue(self, cpu_queue, make_process):
        p1, p2, p3 = make_process(1, 25), make_process(2, 5), make_process(3, 40)
        for p in (p1, p2, p3):
            cpu_queue.enqueue(p)

        outcomes = cpu_queue.do_cpu_work(100)

        assert [o.process for o in outcomes] == [p1, p2, p3]
        assert [o.ran for o in outcomes] == [10, 5, 10]
        assert [o.interrupt for o in outcomes] == [
            SchedulerInterrupt.LOWER_PRIORITY,
            None,
            SchedulerInterrupt.LOWER_PRIORITY,
        ]
        assert outcomes[1].terminated
        assert cpu_queue.is_empty()

    def test_drain_stops_when_budget_spent(self, cpu_queue, make_process):
        p1, p2, p3 = make_process(1, 25), make_process(2, 25), make_process(3, 25)
        for p in (p1, p2, p3):
            cpu_queue.enqueue(p)

        outcomes = cpu_queue.do_cpu_work(15)

        assert [o.ran for o in outcomes] == [10, 5]
        assert list(cpu_queue) == [p2, p3]
        assert p2.time_slice_used == 5

    def test_quantum_bound_per_dispatch(self, make_process):
        queue = Queue(30, 1, QueueType.CPU_QUEUE)
        processes = [make_process(pid, burst) for pid, burst in ((1, 100), (2, 31), (3, 7))]
        for p in processes:
            queue.enqueue(p)

        before = {p.pid: p.remaining_cpu_burst for p in processes}
        outcomes = queue.do_cpu_work(1000)

        for outcome in outcomes:
            consumed = before[outcome.process.pid] - outcome.process.remaining_cpu_burst
            assert consumed == outcome.ran
            assert consumed <= queue.get_quantum()

    def test_zero_timeslice_does_nothing(self, cpu_queue, make_process):
        p = make_process(1, 5)
        cpu_queue.enqueue(p)

        assert cpu_queue.do_cpu_work(0) == []
        assert p.remaining_cpu_burst == 5

    def test_empty_queue_fails(self, cpu_queue):
        with pytest.raises(EmptyQueueError):
            cpu_queue.do_cpu_work(10)

    def test_cpu_work_on_blocking_queue_fails(self, blocking_queue, make_process):
        blocking_queue.enqueue(make_process(1, 5, 8))
        with pytest.raises(QueueTypeError):
            blocking_queue.do_cpu_work(10)


# =============================================================================
# Blocking work
# =============================================================================

class TestBlockingWork:

    def _blocked(self, make_process, *pattern):
        p = make_process(1, *pattern)
        p.execute(p.remaining_cpu_burst)
        return p

    def test_io_completion_reports_ready(self, blocking_queue, make_process):
        p = self._blocked(make_process, 5, 8)
        blocking_queue.enqueue(p)

        outcomes = blocking_queue.do_blocking_work(10)

        assert outcomes[0].interrupt == SchedulerInterrupt.PROCESS_READY
        assert outcomes[0].ran == 8
        assert p.remaining_blocking_burst == 0
        assert p.blocked_time == 8

    def test_unfinished_io_keeps_waiting(self, blocking_queue, make_process):
        p = self._blocked(make_process, 5, 30)
        blocking_queue.enqueue(p)

        outcomes = blocking_queue.do_blocking_work(10)

        assert outcomes[0].interrupt == SchedulerInterrupt.LOWER_PRIORITY
        assert p.remaining_blocking_burst == 20
        assert blocking_queue.is_empty()

    def test_blocking_budget_caps_wait(self, make_process):
        queue = Queue(5, 0, QueueType.BLOCKING_QUEUE)
        p = self._blocked(make_process, 1, 12)
        queue.enqueue(p)

        outcomes = queue.do_blocking_work(100)

        assert outcomes[0].ran == 5
        assert p.remaining_blocking_burst == 7

    def test_ready_loads_next_cpu_burst(self, blocking_queue, make_process):
        p = self._blocked(make_process, 5, 8, 12)
        blocking_queue.enqueue(p)

        blocking_queue.do_blocking_work(10)

        assert p.remaining_cpu_burst == 12
        assert p.remaining_blocking_burst == 0
        assert not p.is_completed()

    def test_blocking_work_on_cpu_queue_fails(self, cpu_queue, make_process):
        cpu_queue.enqueue(make_process(1, 5))
        with pytest.raises(QueueTypeError):
            cpu_queue.do_blocking_work(10)

    def test_empty_blocking_queue_fails(self, blocking_queue):
        with pytest.raises(EmptyQueueError):
            blocking_queue.do_blocking_work(10)
