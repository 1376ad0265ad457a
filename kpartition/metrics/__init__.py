from .timers import Timer
from .metrics import speedup, efficiency, throughput

__all__ = [
    "Timer",
    "speedup",
    "efficiency",
    "throughput"
]
