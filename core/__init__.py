"""
Core modules for MLFQ Scheduler Simulator
"""

from .process import Process, ProcessState, create_process_copy
from .scheduler_base import (
    BaseScheduler, SchedulerStats, SchedulerConfig, GanttEntry, QueueType,
    SchedulerInterrupt, QueueOutcome, SchedulerError, InvalidInterruptError,
    ProcessAlreadyQueuedError, EmptyQueueError, QueueTypeError, PRIORITY_LEVELS
)
from .queue import Queue

__all__ = [
    'Process',
    'ProcessState',
    'create_process_copy',
    'BaseScheduler',
    'SchedulerStats',
    'SchedulerConfig',
    'GanttEntry',
    'QueueType',
    'SchedulerInterrupt',
    'QueueOutcome',
    'SchedulerError',
    'InvalidInterruptError',
    'ProcessAlreadyQueuedError',
    'EmptyQueueError',
    'QueueTypeError',
    'PRIORITY_LEVELS',
    'Queue'
]
