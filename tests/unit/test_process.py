"""Unit tests for the Process control block."""

import pytest

from core.process import Process, ProcessState, create_process_copy


class TestProcess:

    def test_cpu_only_process(self):
        p = Process(1, [25])

        assert p.remaining_cpu_burst == 25
        assert p.remaining_blocking_burst == 0
        assert not p.has_pending_io()
        assert p.state == ProcessState.NEW
        assert p.priority_level == 0
        assert p.queue is None

    def test_pattern_loads_first_cpu_io_pair(self):
        p = Process(2, [5, 8, 3, 4, 2])

        assert p.remaining_cpu_burst == 5
        assert p.remaining_blocking_burst == 8
        assert p.get_total_burst_time() == 10
        assert p.get_total_io_time() == 12

    def test_execute_reports_burst_completion(self):
        p = Process(1, [5])

        assert p.execute(3) is False
        assert p.execute(2) is True
        assert p.cpu_time == 5
        assert p.is_completed()

    def test_execute_beyond_remaining_fails(self):
        p = Process(1, [5])
        with pytest.raises(ValueError):
            p.execute(6)

    def test_wait_io_beyond_remaining_fails(self):
        p = Process(1, [5, 3])
        with pytest.raises(ValueError):
            p.wait_io(4)

    def test_complete_io_advances_pattern(self):
        p = Process(1, [5, 8, 3, 4, 2])
        p.execute(5)
        p.wait_io(8)

        p.complete_io()
        assert (p.remaining_cpu_burst, p.remaining_blocking_burst) == (3, 4)

        p.execute(3)
        p.wait_io(4)
        p.complete_io()
        assert (p.remaining_cpu_burst, p.remaining_blocking_burst) == (2, 0)
        assert not p.is_completed()

        p.execute(2)
        assert p.is_completed()

    def test_trailing_io_completes_process(self):
        p = Process(1, [5, 8])
        p.execute(5)
        assert not p.is_completed()

        p.wait_io(8)
        p.complete_io()
        assert p.remaining_cpu_burst == 0
        assert p.is_completed()

    def test_infinite_burst_never_completes(self):
        p = Process(1, [float('inf')])
        assert p.execute(1000) is False
        assert not p.is_completed()

    @pytest.mark.parametrize("pattern", [[], [5, -1], [-3]])
    def test_invalid_pattern_rejected(self, pattern):
        with pytest.raises(ValueError):
            Process(1, pattern)

    def test_copy_is_independent_and_unowned(self, cpu_queue):
        p = Process(1, [25])
        cpu_queue.enqueue(p)

        copy = create_process_copy(p)
        copy.execute(10)

        assert copy.queue is None
        assert p.remaining_cpu_burst == 25
        assert p.queue is cpu_queue
