"""
프로세스 및 PCB (Process Control Block) 관리 모듈
"""

from enum import Enum
from typing import List, Optional
from copy import deepcopy


class ProcessState(Enum):
    """프로세스 상태"""
    NEW = "New"
    READY = "Ready"
    RUNNING = "Running"
    BLOCKED = "Blocked"
    TERMINATED = "Terminated"


class Process:
    """
    프로세스 제어 블록 (PCB)
    남은 CPU/블로킹 버스트와 현재 우선순위 단계(tier)를 관리
    """

    def __init__(self, pid: int, execution_pattern: List[float]):
        """
        프로세스 초기화

        Args:
            pid: 프로세스 ID
            execution_pattern: 실행 패턴 [CPU_burst1, IO_burst1, CPU_burst2, ...]
                               float('inf')는 끝나지 않는 작업을 의미
        """
        if not execution_pattern:
            raise ValueError("실행 패턴이 비어있습니다")
        if any(t < 0 for t in execution_pattern):
            raise ValueError("버스트 시간은 음수일 수 없습니다")

        self.pid = pid
        self.execution_pattern = list(execution_pattern)

        # 현재 처리 중인 CPU/IO 버스트 쌍
        self.remaining_cpu_burst = self.execution_pattern[0]
        self.remaining_blocking_burst = (self.execution_pattern[1]
                                         if len(self.execution_pattern) > 1 else 0)
        self.next_burst_index = 2

        # 스케줄링 상태
        self.state = ProcessState.NEW
        self.priority_level = 0  # 0: 최상위 큐
        self.queue = None  # 현재 프로세스를 소유한 큐
        self.time_slice_used = 0  # 현재 디스패치에서 사용한 퀀텀

        # 통계 정보
        self.admitted_at: Optional[float] = None  # 시스템 진입 시간
        self.start_time: Optional[float] = None  # 첫 실행 시간
        self.finish_time: Optional[float] = None  # 완료 시간
        self.response_time: Optional[float] = None  # 응답 시간
        self.cpu_time = 0  # 누적 CPU 사용 시간
        self.blocked_time = 0  # 누적 블로킹 시간
        self.waiting_time = 0  # 대기 시간
        self.turnaround_time = 0  # 반환 시간
        self.demotions = 0  # 강등 횟수

    def get_total_burst_time(self) -> float:
        """총 CPU 버스트 시간 계산 (I/O 제외)"""
        return sum(self.execution_pattern[i] for i in range(0, len(self.execution_pattern), 2))

    def get_total_io_time(self) -> float:
        """총 I/O 버스트 시간 계산"""
        return sum(self.execution_pattern[i] for i in range(1, len(self.execution_pattern), 2))

    def has_pending_io(self) -> bool:
        """현재 CPU 버스트 이후 처리할 블로킹 버스트가 남아있는지 확인"""
        return self.remaining_blocking_burst > 0

    def execute(self, time_units: float = 1) -> bool:
        """
        프로세스 실행 (CPU 버스트 시간 감소)

        Args:
            time_units: 실행할 시간 단위

        Returns:
            CPU 버스트가 완료되었는지 여부
        """
        if time_units > self.remaining_cpu_burst:
            raise ValueError(f"P{self.pid}: 남은 CPU 버스트({self.remaining_cpu_burst})보다 "
                             f"오래 실행할 수 없습니다 ({time_units})")

        self.remaining_cpu_burst -= time_units
        self.cpu_time += time_units
        return self.remaining_cpu_burst <= 0

    def wait_io(self, time_units: float = 1) -> bool:
        """
        블로킹 버스트 진행

        Returns:
            블로킹 버스트가 완료되었는지 여부
        """
        if time_units > self.remaining_blocking_burst:
            raise ValueError(f"P{self.pid}: 남은 블로킹 버스트({self.remaining_blocking_burst})보다 "
                             f"오래 대기할 수 없습니다 ({time_units})")

        self.remaining_blocking_burst -= time_units
        self.blocked_time += time_units
        return self.remaining_blocking_burst <= 0

    def complete_io(self):
        """I/O 완료 처리 및 다음 CPU/IO 버스트 쌍으로 이동"""
        self.remaining_blocking_burst = 0

        if self.next_burst_index < len(self.execution_pattern):
            self.remaining_cpu_burst = self.execution_pattern[self.next_burst_index]
            io_index = self.next_burst_index + 1
            if io_index < len(self.execution_pattern):
                self.remaining_blocking_burst = self.execution_pattern[io_index]
            self.next_burst_index += 2

    def is_completed(self) -> bool:
        """프로세스가 완료되었는지 확인"""
        return (self.remaining_cpu_burst <= 0 and self.remaining_blocking_burst <= 0
                and self.next_burst_index >= len(self.execution_pattern))

    def __repr__(self):
        return f"P{self.pid}[{self.state.value}]"

    def __str__(self):
        return f"Process {self.pid}: State={self.state.value}, Level={self.priority_level}, " \
               f"CPU={self.remaining_cpu_burst}, IO={self.remaining_blocking_burst}"


def create_process_copy(process: Process) -> Process:
    """
    프로세스의 깊은 복사본 생성
    같은 입력으로 여러 번 시뮬레이션을 독립적으로 수행하기 위함
    """
    copy = deepcopy(process)
    copy.queue = None
    return copy
