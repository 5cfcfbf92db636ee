"""
MLFQ 스케줄러 시뮬레이터 - FastAPI 백엔드
"""

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any
import asyncio
import json

from core.process import Process
from core.scheduler_base import SchedulerConfig, SchedulerError, PRIORITY_LEVELS
from schedulers import MLFQScheduler

# 웹 요청은 무한 루프를 막기 위해 항상 시간 제한을 둔다
DEFAULT_MAX_TIME = 100000

app = FastAPI(
    title="MLFQ Scheduler Simulator",
    description="다단계 피드백 큐 CPU 스케줄링 시뮬레이터",
    version="1.0.0"
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Pydantic 모델
class ProcessInput(BaseModel):
    pid: int
    execution_pattern: List[int] = Field(..., min_length=1)


class ConfigInput(BaseModel):
    priority_levels: int = PRIORITY_LEVELS
    base_quantum: int = 10
    quantum_step: int = 20
    blocking_quantum: int = 50
    tick: int = 10
    max_time: int = DEFAULT_MAX_TIME


class SimulationRequest(BaseModel):
    processes: List[ProcessInput]
    config: ConfigInput = Field(default_factory=ConfigInput)


class GanttEntry(BaseModel):
    pid: int
    start_time: float
    end_time: float
    state: str
    level: Optional[int]


class ProcessResult(BaseModel):
    pid: int
    burst_time: float
    io_time: float
    waiting_time: float
    turnaround_time: float
    response_time: Optional[float]
    demotions: int


class SimulationResult(BaseModel):
    algorithm: str
    gantt_chart: List[GanttEntry]
    processes: List[ProcessResult]
    statistics: Dict[str, float]
    event_log: List[str]


def create_process_objects(process_inputs: List[ProcessInput]) -> List[Process]:
    """ProcessInput을 Process 객체로 변환"""
    pids = [p.pid for p in process_inputs]
    if len(pids) != len(set(pids)):
        raise ValueError("PID가 중복되었습니다")
    return [Process(pid=p.pid, execution_pattern=p.execution_pattern) for p in process_inputs]


def create_config(config: ConfigInput) -> SchedulerConfig:
    return SchedulerConfig(
        priority_levels=config.priority_levels,
        base_quantum=config.base_quantum,
        quantum_step=config.quantum_step,
        blocking_quantum=config.blocking_quantum,
        tick=config.tick,
        max_time=config.max_time
    )


def serialize_queues(scheduler: MLFQScheduler) -> Dict[str, Any]:
    """큐 상태를 JSON으로 변환"""
    return {
        'blocking_queue': [
            {'pid': p.pid, 'remaining_io': p.remaining_blocking_burst}
            for p in scheduler.get_blocking_queue()
        ],
        'running_queues': [
            [{'pid': p.pid, 'remaining': p.remaining_cpu_burst, 'used': p.time_slice_used}
             for p in queue]
            for queue in scheduler.running_queues
        ]
    }


def serialize_gantt(entries) -> List[Dict]:
    return [
        {
            'pid': entry.pid,
            'start_time': entry.start_time,
            'end_time': entry.end_time,
            'state': entry.state.value,
            'level': entry.level
        }
        for entry in entries
    ]


def run_scheduler(processes: List[Process], config: SchedulerConfig) -> Dict:
    """스케줄러 실행 및 결과 반환"""
    scheduler = MLFQScheduler(processes, config)
    result = scheduler.run()

    processes_result = [
        {
            'pid': p.pid,
            'burst_time': p.get_total_burst_time(),
            'io_time': p.get_total_io_time(),
            'waiting_time': p.waiting_time,
            'turnaround_time': p.turnaround_time,
            'response_time': p.response_time,
            'demotions': p.demotions
        }
        for p in result['processes']
    ]

    return {
        'algorithm': result['algorithm'],
        'gantt_chart': serialize_gantt(result['gantt_chart']),
        'processes': processes_result,
        'statistics': result['statistics'],
        'event_log': result['event_log']
    }


@app.get("/")
async def root():
    return {"message": "MLFQ Scheduler Simulator API", "version": "1.0.0"}


@app.get("/config")
async def get_config():
    """기본 스케줄러 설정 및 단계별 퀀텀"""
    config = SchedulerConfig()
    return {
        "priority_levels": config.priority_levels,
        "quanta": [config.quantum_for(level) for level in range(config.priority_levels)],
        "blocking_quantum": config.blocking_quantum,
        "tick": config.tick,
        "max_time": DEFAULT_MAX_TIME
    }


@app.post("/simulate", response_model=SimulationResult)
async def simulate(request: SimulationRequest):
    """스케줄링 시뮬레이션 실행"""
    try:
        processes = create_process_objects(request.processes)
        config = create_config(request.config)
        return run_scheduler(processes, config)
    except (ValueError, SchedulerError) as e:
        raise HTTPException(status_code=400, detail=str(e))


# WebSocket을 통한 실시간 시뮬레이션
class RealtimeSimulator:
    def __init__(self, processes: List[Process], config: SchedulerConfig):
        self.scheduler = MLFQScheduler(processes, config)
        self.is_complete = self.scheduler.all_queues_empty()
        self.last_gantt_index = 0
        self.last_log_index = 0

    def step(self) -> Dict:
        """한 스텝 실행 및 상태 반환"""
        if self.is_complete:
            return {'complete': True}

        is_complete = self.scheduler.execute_one_step()
        max_time = self.scheduler.config.max_time
        if max_time is not None and self.scheduler.current_time > max_time:
            self.scheduler.log_event("WARNING: Simulation timeout")
            is_complete = True

        # 새로운 Gantt 엔트리 (마지막 엔트리는 병합될 수 있으므로 다시 보냄)
        gantt = self.scheduler.gantt_chart
        start = max(0, self.last_gantt_index - 1)
        new_gantt = serialize_gantt(gantt[start:])
        self.last_gantt_index = len(gantt)

        new_logs = self.scheduler.event_log[self.last_log_index:]
        self.last_log_index = len(self.scheduler.event_log)

        stats = {
            'current_time': self.scheduler.current_time,
            'context_switches': self.scheduler.stats.context_switches,
            'cpu_busy_time': self.scheduler.stats.cpu_busy_time,
            'completed': len(self.scheduler.terminated_processes),
            'total': len(self.scheduler.processes)
        }

        if is_complete:
            self.is_complete = True
            self.scheduler.update_statistics()
            stats['final'] = self.scheduler.stats.calculate_averages()

        return {
            'complete': is_complete,
            **serialize_queues(self.scheduler),
            'new_gantt': new_gantt,
            'new_logs': new_logs,
            'stats': stats
        }


@app.websocket("/ws/realtime")
async def websocket_realtime(websocket: WebSocket):
    """실시간 시뮬레이션 WebSocket 엔드포인트"""
    await websocket.accept()
    simulator = None

    try:
        while True:
            data = await websocket.receive_text()

            try:
                message = json.loads(data)
                if not isinstance(message, dict):
                    raise ValueError("메시지는 JSON 객체여야 합니다")
                action = message.get('action')

                if action == 'init':
                    request = SimulationRequest(
                        processes=message['processes'],
                        config=message.get('config', {})
                    )
                    simulator = RealtimeSimulator(
                        create_process_objects(request.processes),
                        create_config(request.config)
                    )
                    await websocket.send_json({
                        'type': 'initialized',
                        'algorithm': simulator.scheduler.name,
                        'process_count': len(request.processes)
                    })

                elif action == 'step':
                    if simulator is None:
                        raise ValueError("init이 먼저 필요합니다")
                    await websocket.send_json({'type': 'step_result', **simulator.step()})

                elif action == 'run':
                    # 자동 실행 (속도 조절 가능)
                    if simulator is None:
                        raise ValueError("init이 먼저 필요합니다")
                    speed = float(message.get('speed', 1.0))
                    if speed <= 0:
                        raise ValueError(f"speed는 양수여야 합니다: {speed}")
                    delay = 1.0 / speed

                    while not simulator.is_complete:
                        result = simulator.step()
                        await websocket.send_json({'type': 'step_result', **result})
                        if result['complete']:
                            break
                        await asyncio.sleep(delay)

                else:
                    raise ValueError(f"알 수 없는 action: {action}")

            except (ValueError, TypeError, KeyError, SchedulerError) as e:
                await websocket.send_json({'type': 'error', 'message': str(e)})

    except WebSocketDisconnect:
        pass
    except Exception as e:
        await websocket.send_json({'type': 'error', 'message': str(e)})


@app.get("/sample-processes")
async def get_sample_processes():
    """샘플 프로세스 데이터 반환"""
    return {
        "samples": [
            {
                "name": "CPU 중심 (3개 프로세스)",
                "processes": [
                    {"pid": 1, "execution_pattern": [5]},
                    {"pid": 2, "execution_pattern": [25]},
                    {"pid": 3, "execution_pattern": [80]}
                ]
            },
            {
                "name": "I/O 포함 (3개 프로세스)",
                "processes": [
                    {"pid": 1, "execution_pattern": [5, 8]},
                    {"pid": 2, "execution_pattern": [3, 20, 3]},
                    {"pid": 3, "execution_pattern": [40]}
                ]
            },
            {
                "name": "혼합 (4개 프로세스)",
                "processes": [
                    {"pid": 1, "execution_pattern": [2, 30, 2, 30, 2]},
                    {"pid": 2, "execution_pattern": [60]},
                    {"pid": 3, "execution_pattern": [12, 5, 12]},
                    {"pid": 4, "execution_pattern": [100]}
                ]
            }
        ]
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
