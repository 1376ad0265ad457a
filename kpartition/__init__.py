"""
kpartition: разбиение наблюдений на k кластеров алгоритмом Ллойда
с параллельным шагом назначения.

Пример:
    from kpartition import KMeans, ParallelConfig

    model = KMeans(delta_threshold=0.01, parallel=ParallelConfig(n_workers=4))
    clusters = model.partition(X, k=3)
"""

from .clusters import Cluster, Clusters
from .core import KMeans, Plotter
from .errors import InvalidArgumentError, KMeansError, ObserverFailureError
from .parallel import ParallelConfig

__all__ = [
    "KMeans",
    "Plotter",
    "Cluster",
    "Clusters",
    "ParallelConfig",
    "KMeansError",
    "InvalidArgumentError",
    "ObserverFailureError",
]
