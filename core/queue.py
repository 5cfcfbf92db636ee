"""
MLFQ 큐 모듈: 타임 슬라이스 단위로 프로세스를 실행하고 인터럽트를 보고
"""

from collections import deque
from typing import Iterator, List, Optional
from .process import Process, ProcessState
from .scheduler_base import (QueueType, SchedulerInterrupt, QueueOutcome,
                             EmptyQueueError, ProcessAlreadyQueuedError, QueueTypeError)


class Queue:
    """
    CPU 단계 큐 또는 블로킹 큐

    큐는 스케줄러를 참조하지 않는다. 작업 실행 결과는 QueueOutcome 리스트로
    반환되고, 호출한 스케줄러가 인터럽트를 처리한다.
    """

    def __init__(self, quantum: float, priority_level: int, queue_type: QueueType):
        """
        Args:
            quantum: 디스패치당 최대 실행 시간 (블로킹 큐는 실행 예산)
            priority_level: 우선순위 단계 (CPU 큐에서만 의미 있음)
            queue_type: 큐 종류
        """
        if quantum <= 0:
            raise ValueError(f"퀀텀은 양수여야 합니다: {quantum}")

        self.quantum = quantum
        self.priority_level = priority_level
        self.queue_type = queue_type
        self._processes = deque()

    def enqueue(self, process: Process):
        """큐 맨 뒤에 프로세스 추가"""
        if process.queue is not None:
            raise ProcessAlreadyQueuedError(
                f"P{process.pid}는 이미 {process.queue!r}에 있습니다")

        self._attach(process)
        self._processes.append(process)

    def dequeue(self) -> Process:
        """큐 맨 앞의 프로세스 제거"""
        if not self._processes:
            raise EmptyQueueError(f"{self!r}가 비어있습니다")

        process = self._processes.popleft()
        process.queue = None
        return process

    def peek(self) -> Optional[Process]:
        return self._processes[0] if self._processes else None

    def is_empty(self) -> bool:
        return not self._processes

    def get_queue_type(self) -> QueueType:
        return self.queue_type

    def get_priority_level(self) -> int:
        return self.priority_level

    def get_quantum(self) -> float:
        return self.quantum

    def do_cpu_work(self, timeslice: float) -> List[QueueOutcome]:
        """
        CPU 작업 실행

        주어진 타임 슬라이스를 예산으로 삼아 큐 앞쪽 프로세스부터 차례로 실행한다.
        각 프로세스는 한 번의 디스패치에서 퀀텀을 넘게 실행되지 않는다.
        예산이 퀀텀 도중에 소진되면 프로세스는 사용한 퀀텀을 유지한 채
        큐 맨 앞으로 돌아간다.

        Args:
            timeslice: 이번 반복에서 사용할 수 있는 시간

        Returns:
            실행된 프로세스별 결과 (종료, PROCESS_BLOCKED, LOWER_PRIORITY, 선점)
        """
        self._check_work(QueueType.CPU_QUEUE)

        budget = timeslice
        outcomes = []

        while budget > 0 and self._processes:
            process = self.dequeue()
            process.state = ProcessState.RUNNING

            run_time = min(self.quantum - process.time_slice_used,
                           process.remaining_cpu_burst, budget)
            process.execute(run_time)
            process.time_slice_used += run_time
            budget -= run_time

            if process.remaining_cpu_burst <= 0:
                # 퀀텀 내에 버스트 완료: 강등하지 않음
                process.time_slice_used = 0
                if process.is_completed():
                    outcomes.append(QueueOutcome(process, run_time, terminated=True))
                else:
                    outcomes.append(QueueOutcome(process, run_time,
                                                 SchedulerInterrupt.PROCESS_BLOCKED))
            elif process.time_slice_used >= self.quantum:
                process.time_slice_used = 0
                outcomes.append(QueueOutcome(process, run_time,
                                             SchedulerInterrupt.LOWER_PRIORITY))
            else:
                # 예산 소진: 남은 퀀텀은 다음 반복에서 이어서 사용
                self._attach(process)
                self._processes.appendleft(process)
                outcomes.append(QueueOutcome(process, run_time))
                break

        return outcomes

    def do_blocking_work(self, timeslice: float) -> List[QueueOutcome]:
        """
        블로킹(I/O) 작업 실행

        큐 앞쪽 프로세스부터 min(블로킹 예산, 남은 블로킹 버스트, 남은 타임 슬라이스)만큼
        대기 시간을 진행한다. 블로킹 버스트가 끝나면 PROCESS_READY,
        아니면 LOWER_PRIORITY(대기 계속)를 보고한다.
        """
        self._check_work(QueueType.BLOCKING_QUEUE)

        budget = timeslice
        outcomes = []

        while budget > 0 and self._processes:
            process = self.dequeue()

            wait_time = min(self.quantum, process.remaining_blocking_burst, budget)
            io_completed = process.wait_io(wait_time)
            budget -= wait_time

            if io_completed:
                process.complete_io()
                outcomes.append(QueueOutcome(process, wait_time,
                                             SchedulerInterrupt.PROCESS_READY))
            else:
                outcomes.append(QueueOutcome(process, wait_time,
                                             SchedulerInterrupt.LOWER_PRIORITY))

        return outcomes

    def _check_work(self, expected: QueueType):
        if self.queue_type != expected:
            raise QueueTypeError(f"{self!r}에서는 {expected.value} 작업을 실행할 수 없습니다")
        if not self._processes:
            raise EmptyQueueError(f"{self!r}가 비어있습니다")

    def _attach(self, process: Process):
        process.queue = self
        if self.queue_type == QueueType.CPU_QUEUE:
            process.priority_level = self.priority_level
            process.state = ProcessState.READY
        else:
            process.state = ProcessState.BLOCKED

    def __len__(self):
        return len(self._processes)

    def __iter__(self) -> Iterator[Process]:
        return iter(list(self._processes))

    def __contains__(self, process):
        return process in self._processes

    def __repr__(self):
        if self.queue_type == QueueType.BLOCKING_QUEUE:
            return f"Queue(Blocking, quantum={self.quantum}, size={len(self)})"
        return f"Queue(Level {self.priority_level}, quantum={self.quantum}, size={len(self)})"
