"""
Общие фикстуры для всех тестов.
"""

import numpy as np
import pytest


@pytest.fixture
def simple_2d_dataset():
    """Две явно разделённые группы по три точки около (1,1) и (11,11)."""
    X = np.array([
        [0.0, 0.0],
        [1.0, 1.0],
        [2.0, 2.0],
        [10.0, 10.0],
        [11.0, 11.0],
        [12.0, 12.0],
    ])
    initial_centroids = np.array([
        [0.5, 0.5],
        [11.0, 11.0],
    ])
    return X, initial_centroids


@pytest.fixture
def small_dataset():
    """Небольшой датасет (2D, 3 группы по 40 точек)."""
    rng = np.random.default_rng(42)
    X = np.vstack([
        rng.normal(size=(40, 2)) + [0, 0],
        rng.normal(size=(40, 2)) + [8, 8],
        rng.normal(size=(40, 2)) + [-8, 8],
    ])
    initial_centroids = np.array([
        [1.0, 1.0],
        [7.0, 7.0],
        [-7.0, 7.0],
    ])
    return X, initial_centroids


@pytest.fixture
def medium_dataset():
    """Средний датасет (10D, 4 группы по 100 точек) без начальных центроидов."""
    rng = np.random.default_rng(7)
    centers = rng.uniform(-20, 20, size=(4, 10))
    X = np.vstack([rng.normal(size=(100, 10)) + c for c in centers])
    return X, centers


class RecordingPlotter:
    """Наблюдатель, запоминающий номера раундов."""

    def __init__(self):
        self.iterations = []
        self.sizes = []

    def plot(self, clusters, iteration):
        self.iterations.append(iteration)
        self.sizes.append(clusters.sizes())


@pytest.fixture
def recording_plotter():
    return RecordingPlotter()
