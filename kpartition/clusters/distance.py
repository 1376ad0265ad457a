"""
Функции расстояния между наблюдением и набором центроидов.

Сигнатура: ``distance(point[D], centers[K, D]) -> distances[K]``.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

DistanceFunc = Callable[[np.ndarray, np.ndarray], np.ndarray]


def squared_euclidean(point: np.ndarray, centers: np.ndarray) -> np.ndarray:
    # (K, D) → (K,)
    diff = centers - point[None, :]
    return np.einsum("kd,kd->k", diff, diff)


def euclidean(point: np.ndarray, centers: np.ndarray) -> np.ndarray:
    return np.sqrt(squared_euclidean(point, centers))


def manhattan(point: np.ndarray, centers: np.ndarray) -> np.ndarray:
    return np.abs(centers - point[None, :]).sum(axis=1)
