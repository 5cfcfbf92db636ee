"""
CPU Scheduling Algorithms
"""

from .mlfq import MLFQScheduler

__all__ = [
    'MLFQScheduler'
]
