from .locks import LOCK_STRIPES, AtomicCounter, RWLock, StripedLocks
from .partition import (
    DEFAULT_DELTA_THRESHOLD,
    DEFAULT_N_ITERS,
    KMeans,
    Plotter,
)

__all__ = [
    "KMeans",
    "Plotter",
    "DEFAULT_DELTA_THRESHOLD",
    "DEFAULT_N_ITERS",
    "LOCK_STRIPES",
    "AtomicCounter",
    "RWLock",
    "StripedLocks",
]
