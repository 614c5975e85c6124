from .timers import Timer
from .metrics import throughput

__all__ = [
    "Timer",
    "throughput",
]
