from .distance import DistanceFunc, euclidean, manhattan, squared_euclidean
from .store import Cluster, Clusters

__all__ = [
    "Cluster",
    "Clusters",
    "DistanceFunc",
    "squared_euclidean",
    "euclidean",
    "manhattan",
]
