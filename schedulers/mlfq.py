"""
MLFQ (Multi-Level Feedback Queue) 스케줄러
여러 CPU 우선순위 큐 + 하나의 블로킹(I/O) 큐
"""

from typing import Callable, Dict, List, Optional
from core.process import Process, ProcessState, create_process_copy
from core.queue import Queue
from core.scheduler_base import (BaseScheduler, SchedulerConfig, QueueType, SchedulerInterrupt,
                                 QueueOutcome, InvalidInterruptError)


class MLFQScheduler(BaseScheduler):
    """
    Multi-Level Feedback Queue 스케줄러
    - CPU Queue i: 퀀텀 base_quantum + quantum_step * i (기본 10, 30, 50)
    - Blocking Queue: 블로킹 예산 blocking_quantum (기본 50)
    - 새 프로세스와 I/O를 마친 프로세스는 최상위 큐(0)로 진입
    - 퀀텀을 모두 사용한 프로세스는 한 단계 강등 (최하위 단계에서는 유지)

    매 반복마다 블로킹 작업을 먼저 수행한 뒤 CPU 큐를 우선순위 순서로 실행한다.
    """

    def __init__(self, processes: Optional[List[Process]] = None,
                 config: Optional[SchedulerConfig] = None,
                 clock: Optional[Callable[[], float]] = None):
        """
        Args:
            processes: 시작 시 진입시킬 프로세스 (복사본이 사용됨)
            config: 스케줄러 설정 (None이면 기본값)
            clock: 벽시계 함수 (예: time.monotonic). None이면 반복마다 config.tick만큼 진행하는
                   시뮬레이션 클럭 사용
        """
        super().__init__("Multi-Level Feedback Queue")
        self.config = config or SchedulerConfig()
        self._clock_source = clock
        self.clock = clock() if clock else 0

        self.blocking_queue = Queue(self.config.blocking_quantum, 0, QueueType.BLOCKING_QUEUE)
        self.running_queues = [
            Queue(self.config.quantum_for(level), level, QueueType.CPU_QUEUE)
            for level in range(self.config.priority_levels)
        ]

        for process in processes or []:
            self.add_new_process(create_process_copy(process))

    @property
    def priority_levels(self) -> int:
        return len(self.running_queues)

    def add_new_process(self, process: Process):
        """새 프로세스를 최상위 큐 맨 뒤에 추가"""
        self.running_queues[0].enqueue(process)
        if process.admitted_at is None:
            process.admitted_at = self.current_time
            self.processes.append(process)
        self.log_event(f"P{process.pid} admitted → Queue 0")

    def next_timeslice(self) -> float:
        """마지막 클럭 기록 이후 경과 시간을 계산하고 클럭을 갱신"""
        if self._clock_source is None:
            self.clock += self.config.tick
            return self.config.tick

        now = self._clock_source()
        timeslice = now - self.clock
        self.clock = now
        return timeslice

    def all_queues_empty(self) -> bool:
        return self.blocking_queue.is_empty() and all(q.is_empty() for q in self.running_queues)

    def is_simulation_complete(self) -> bool:
        return self.all_queues_empty()

    def execute_one_step(self, timeslice: Optional[float] = None) -> bool:
        """
        한 번의 디스패치 반복 (실시간 뷰어용)

        각 CPU 큐는 타임 슬라이스 전체를 예산으로 받는다. 따라서 current_time은
        실제로 실행된 CPU 시간과 타임 슬라이스 중 큰 값만큼 진행하고,
        블로킹 큐는 반복마다 타임 슬라이스만큼만 진행한다.

        Args:
            timeslice: 이번 반복의 타임 슬라이스 (None이면 클럭에서 계산).
                       시뮬레이션 클럭이면 지정한 값만큼 클럭도 진행하고,
                       벽시계 클럭은 건드리지 않는다.

        Returns:
            모든 큐가 비었는지 여부
        """
        if self.all_queues_empty():
            return True

        if timeslice is None:
            timeslice = self.next_timeslice()
        elif self._clock_source is None:
            self.clock += timeslice

        step_start = self.current_time

        # 1. 블로킹 작업
        if not self.blocking_queue.is_empty():
            io_cursor = step_start
            for outcome in self.blocking_queue.do_blocking_work(timeslice):
                self.add_to_gantt_chart(outcome.process.pid, io_cursor, io_cursor + outcome.ran,
                                        ProcessState.BLOCKED)
                io_cursor += outcome.ran
                self._route(self.blocking_queue, outcome)

        # 2. CPU 작업 (높은 우선순위부터)
        cpu_cursor = step_start
        for queue in self.running_queues:
            if queue.is_empty():
                continue

            for outcome in queue.do_cpu_work(timeslice):
                self.current_time = cpu_cursor
                self.record_dispatch(outcome.process)
                self.log_event(f"P{outcome.process.pid} dispatched → Queue "
                               f"{queue.get_priority_level()} (ran={outcome.ran})")
                self.add_to_gantt_chart(outcome.process.pid, cpu_cursor, cpu_cursor + outcome.ran,
                                        ProcessState.RUNNING, queue.get_priority_level())
                self.stats.cpu_busy_time += outcome.ran
                cpu_cursor += outcome.ran
                self.current_time = cpu_cursor
                self._route(queue, outcome)

        self.current_time = max(cpu_cursor, step_start + timeslice)
        return self.all_queues_empty()

    def _route(self, queue: Queue, outcome: QueueOutcome):
        """큐 실행 결과를 인터럽트 처리기로 전달"""
        if outcome.terminated:
            self.terminate_process(outcome.process)
        elif outcome.interrupt is not None:
            self.handle_interrupt(queue, outcome.process, outcome.interrupt)
        elif outcome.process.queue is not queue:
            raise InvalidInterruptError(
                f"P{outcome.process.pid}: 인터럽트 없이 {queue!r}를 벗어났습니다")
        else:
            # 예산 소진으로 선점: 큐 맨 앞에서 다시 대기
            outcome.process.state = ProcessState.READY

    def handle_interrupt(self, queue: Queue, process: Process, interrupt: SchedulerInterrupt):
        """
        인터럽트 처리기: 프로세스를 알맞은 큐로 이동

        Args:
            queue: 인터럽트를 보낸 큐
            process: 이동할 프로세스
            interrupt: 인터럽트 종류
        """
        if interrupt == SchedulerInterrupt.PROCESS_BLOCKED:
            self.blocking_queue.enqueue(process)
            self.log_event(f"P{process.pid} → I/O (remaining={process.remaining_blocking_burst}) "
                           f"→ Blocking Queue")
        elif interrupt == SchedulerInterrupt.PROCESS_READY:
            self.stats.io_completions += 1
            self.running_queues[0].enqueue(process)
            self.log_event(f"P{process.pid} I/O completed → Queue 0")
        elif interrupt == SchedulerInterrupt.LOWER_PRIORITY:
            if queue.get_queue_type() == QueueType.CPU_QUEUE:
                level = queue.get_priority_level()
                if level < self.priority_levels - 1:
                    level += 1
                    process.demotions += 1
                    self.stats.demotions += 1
                    self.log_event(f"P{process.pid} demoted → Queue {level}")
                self.running_queues[level].enqueue(process)
            else:
                self.blocking_queue.enqueue(process)
        else:
            raise InvalidInterruptError(f"알 수 없는 인터럽트: {interrupt!r}")

    def get_cpu_queue(self, priority_level: int) -> Queue:
        """테스트용: 특정 단계의 CPU 큐"""
        return self.running_queues[priority_level]

    def get_blocking_queue(self) -> Queue:
        """테스트용: 블로킹 큐"""
        return self.blocking_queue

    def queued_processes(self) -> List[Process]:
        """현재 어떤 큐에든 들어있는 모든 프로세스"""
        queued = list(self.blocking_queue)
        for queue in self.running_queues:
            queued.extend(queue)
        return queued

    def get_current_snapshot(self) -> Dict:
        snapshot = super().get_current_snapshot()
        snapshot['blocking_queue'] = list(self.blocking_queue)
        snapshot['running_queues'] = [list(queue) for queue in self.running_queues]
        return snapshot

    def run(self, verbose: bool = False) -> Dict:
        """MLFQ 스케줄링 실행"""
        self.log_event(f"===== {self.name} Scheduling Started =====")

        while not self.all_queues_empty():
            self.execute_one_step()

            if self.config.max_time is not None and self.current_time > self.config.max_time:
                self.log_event("WARNING: Simulation timeout")
                break

        self.log_event(f"===== {self.name} Scheduling Completed =====")

        if verbose:
            for log in self.event_log:
                print(log)

        return self.get_results()
