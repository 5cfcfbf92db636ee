"""
스케줄러 기본 프레임워크, 설정 및 인터럽트 정의
"""

from typing import List, Dict, Optional
from dataclasses import dataclass
from enum import Enum
from .process import Process, ProcessState

# 우선순위 단계 수 (CPU 큐 개수)
PRIORITY_LEVELS = 3

# CPU 큐 퀀텀: 10 + 20 * 단계 (10, 30, 50)
BASE_QUANTUM = 10
QUANTUM_STEP = 20

# 블로킹 큐의 디스패치당 실행 예산
BLOCKING_QUANTUM = 50

# 시뮬레이션 클럭이 반복마다 전진하는 시간
DEFAULT_TICK = 10


class QueueType(Enum):
    """큐 종류"""
    CPU_QUEUE = "CPU Queue"
    BLOCKING_QUEUE = "Blocking Queue"


class SchedulerInterrupt(Enum):
    """큐가 스케줄러에 보고하는 인터럽트"""
    PROCESS_BLOCKED = "Process Blocked"  # CPU 버스트 종료, I/O 필요
    PROCESS_READY = "Process Ready"  # I/O 완료
    LOWER_PRIORITY = "Lower Priority"  # 퀀텀 소진 (블로킹 큐에서는 대기 계속)


class SchedulerError(Exception):
    """스케줄러 내부 로직 오류"""


class InvalidInterruptError(SchedulerError):
    """알 수 없는 인터럽트"""


class ProcessAlreadyQueuedError(SchedulerError):
    """이미 다른 큐에 속한 프로세스를 삽입하려는 경우"""


class EmptyQueueError(SchedulerError):
    """빈 큐에서 작업을 실행하려는 경우"""


class QueueTypeError(SchedulerError):
    """큐 종류에 맞지 않는 작업을 실행하려는 경우"""


@dataclass
class SchedulerConfig:
    """MLFQ 스케줄러 설정"""
    priority_levels: int = PRIORITY_LEVELS
    base_quantum: float = BASE_QUANTUM
    quantum_step: float = QUANTUM_STEP
    blocking_quantum: float = BLOCKING_QUANTUM
    tick: float = DEFAULT_TICK
    max_time: Optional[float] = None  # None이면 모든 큐가 빌 때까지 실행

    def __post_init__(self):
        if self.priority_levels < 1:
            raise ValueError(f"우선순위 단계는 1 이상이어야 합니다: {self.priority_levels}")
        if self.base_quantum <= 0 or self.blocking_quantum <= 0:
            raise ValueError("퀀텀은 양수여야 합니다")
        # 하위 단계일수록 퀀텀이 커져야 함
        if self.quantum_step <= 0:
            raise ValueError(f"퀀텀 증가량은 양수여야 합니다: {self.quantum_step}")
        if self.tick <= 0:
            raise ValueError(f"틱은 양수여야 합니다: {self.tick}")
        if self.max_time is not None and self.max_time <= 0:
            raise ValueError(f"최대 시간은 양수여야 합니다: {self.max_time}")

    def quantum_for(self, level: int) -> float:
        """단계별 CPU 퀀텀"""
        if not 0 <= level < self.priority_levels:
            raise ValueError(f"잘못된 우선순위 단계: {level}")
        return self.base_quantum + self.quantum_step * level


@dataclass
class QueueOutcome:
    """
    큐에서 프로세스 하나를 실행한 결과

    interrupt가 None이면 종료(terminated=True)되었거나
    예산이 소진되어 큐 맨 앞에 남아있는 경우
    """
    process: Process
    ran: float
    interrupt: Optional[SchedulerInterrupt] = None
    terminated: bool = False


@dataclass
class GanttEntry:
    """Gantt Chart 엔트리"""
    pid: int
    start_time: float
    end_time: float
    state: ProcessState  # Running, Blocked
    level: Optional[int] = None  # 실행된 CPU 큐 단계


class SchedulerStats:
    """스케줄링 통계"""

    def __init__(self):
        self.total_waiting_time = 0
        self.total_turnaround_time = 0
        self.total_response_time = 0
        self.context_switches = 0
        self.cpu_busy_time = 0
        self.total_simulation_time = 0
        self.process_count = 0
        self.demotions = 0
        self.io_completions = 0

    def calculate_averages(self):
        """평균 계산"""
        if self.process_count == 0:
            return {
                'avg_waiting_time': 0,
                'avg_turnaround_time': 0,
                'avg_response_time': 0,
                'cpu_utilization': 0,
                'context_switches': self.context_switches,
                'demotions': self.demotions,
                'io_completions': self.io_completions,
                'throughput': 0
            }

        return {
            'avg_waiting_time': self.total_waiting_time / self.process_count,
            'avg_turnaround_time': self.total_turnaround_time / self.process_count,
            'avg_response_time': self.total_response_time / self.process_count,
            'cpu_utilization': (min(100.0, self.cpu_busy_time / self.total_simulation_time * 100)
                                if self.total_simulation_time > 0 else 0),
            'context_switches': self.context_switches,
            'demotions': self.demotions,
            'io_completions': self.io_completions,
            'throughput': (self.process_count / self.total_simulation_time
                           if self.total_simulation_time > 0 else 0)
        }


class BaseScheduler:
    """
    기본 스케줄러 클래스
    이벤트 로그, Gantt Chart, 통계 등 공통 기능 제공
    """

    def __init__(self, name: str = "Base Scheduler"):
        self.name = name
        self.current_time = 0
        self.processes: List[Process] = []  # 시스템에 들어온 모든 프로세스
        self.terminated_processes: List[Process] = []
        self.previous_process: Optional[Process] = None

        # Gantt Chart 데이터
        self.gantt_chart: List[GanttEntry] = []

        # 통계
        self.stats = SchedulerStats()

        # 이벤트 로그
        self.event_log: List[str] = []

    def log_event(self, message: str):
        """이벤트 로그 기록"""
        if isinstance(self.current_time, int):
            log_entry = f"[T={self.current_time:3d}] {message}"
        else:
            log_entry = f"[T={self.current_time:7.2f}] {message}"
        self.event_log.append(log_entry)

    def add_to_gantt_chart(self, pid: int, start: float, end: float, state: ProcessState,
                           level: Optional[int] = None):
        """Gantt Chart에 엔트리 추가 (같은 구간이 이어지면 병합)"""
        if start >= end:  # 유효한 시간 구간만 추가
            return

        if self.gantt_chart:
            last = self.gantt_chart[-1]
            if (last.pid == pid and last.state == state and last.level == level
                    and last.end_time == start):
                last.end_time = end
                return

        self.gantt_chart.append(GanttEntry(pid, start, end, state, level))

    def record_dispatch(self, process: Process):
        """프로세스 디스패치 기록 (문맥 전환 및 응답 시간)"""
        if self.previous_process is not None and self.previous_process is not process:
            self.stats.context_switches += 1
        self.previous_process = process

        process.state = ProcessState.RUNNING
        if process.start_time is None:
            process.start_time = self.current_time
            process.response_time = self.current_time - (process.admitted_at or 0)

    def terminate_process(self, process: Process):
        """프로세스 종료 처리"""
        process.state = ProcessState.TERMINATED
        process.queue = None
        if process.finish_time is None:
            process.finish_time = self.current_time
        process.turnaround_time = process.finish_time - (process.admitted_at or 0)
        process.waiting_time = max(0, process.turnaround_time - process.cpu_time - process.blocked_time)

        self.terminated_processes.append(process)
        self.log_event(f"P{process.pid} → Terminated (WT={process.waiting_time}, "
                       f"TT={process.turnaround_time})")

    def update_statistics(self):
        """최종 통계 업데이트"""
        self.stats.total_simulation_time = self.current_time
        self.stats.process_count = len(self.terminated_processes)
        self.stats.total_waiting_time = 0
        self.stats.total_turnaround_time = 0
        self.stats.total_response_time = 0

        for process in self.terminated_processes:
            self.stats.total_waiting_time += process.waiting_time
            self.stats.total_turnaround_time += process.turnaround_time
            if process.response_time is not None:
                self.stats.total_response_time += process.response_time

    def is_simulation_complete(self) -> bool:
        """시뮬레이션 완료 여부 확인 (하위 클래스에서 구현)"""
        raise NotImplementedError("Subclasses must implement is_simulation_complete()")

    def get_current_snapshot(self) -> Dict:
        """
        현재 시뮬레이션 상태 스냅샷 반환 (실시간 뷰어용)

        Returns:
            현재 상태 딕셔너리
        """
        return {
            'time': self.current_time,
            'terminated': list(self.terminated_processes),
            'context_switches': self.stats.context_switches,
            'cpu_busy_time': self.stats.cpu_busy_time,
            'latest_gantt_entry': self.gantt_chart[-1] if self.gantt_chart else None,
            'latest_log': self.event_log[-1] if self.event_log else ""
        }

    def run(self, verbose: bool = False) -> Dict:
        """
        스케줄링 시뮬레이션 실행

        Args:
            verbose: 상세 로그 출력 여부

        Returns:
            시뮬레이션 결과 딕셔너리
        """
        raise NotImplementedError("Subclasses must implement run()")

    def get_results(self) -> Dict:
        """
        시뮬레이션 결과 반환

        Returns:
            결과 딕셔너리 (통계, Gantt Chart, 로그 등)
        """
        self.update_statistics()

        return {
            'algorithm': self.name,
            'statistics': self.stats.calculate_averages(),
            'gantt_chart': self.gantt_chart,
            'event_log': self.event_log,
            'processes': self.terminated_processes
        }
