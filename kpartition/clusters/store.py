"""
Хранилище кластеров: центроиды и принадлежность наблюдений.

Наблюдение идентифицируется индексом строки в датасете ``X`` (N, D).
Кластер идентифицируется индексом ``0..k-1``.

Хранилище само не синхронизирует доступ: согласование параллельных
вызовов ``nearest``/``append``/``move`` лежит на вызывающем коде
(см. ``kpartition.core.locks.StripedLocks``), а ``recenter`` и ``reset``
должны вызываться, когда ни один воркер не активен.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List

import numpy as np

from kpartition.clusters.distance import DistanceFunc, squared_euclidean
from kpartition.errors import InvalidArgumentError
from kpartition.parallel.dispatcher import ParallelDispatcher


@dataclass(frozen=True)
class Cluster:
    """Снимок одного кластера: центроид и назначенные наблюдения."""

    center: np.ndarray
    indices: np.ndarray
    observations: np.ndarray

    def __len__(self) -> int:
        return int(self.indices.shape[0])

    def points_in_dimension(self, n: int) -> np.ndarray:
        """Координаты всех наблюдений кластера по измерению ``n``."""
        return self.observations[:, n]


class Clusters:
    """
    Набор из ``k`` кластеров над фиксированным датасетом.

    Помимо принадлежности хранит таблицу назначений ``labels``:
    индекс наблюдения → индекс кластера.
    """

    def __init__(
        self,
        X: np.ndarray,
        centers: np.ndarray,
        distance: DistanceFunc | None = None,
    ) -> None:
        self.X = X
        self.centers = np.array(centers, dtype=np.float64, copy=True)
        self.distance: DistanceFunc = distance or squared_euclidean
        self.labels = np.zeros(X.shape[0], dtype=np.int64)
        self._members: List[List[int]] = [[] for _ in range(self.centers.shape[0])]

    @classmethod
    def new(
        cls,
        k: int,
        X: np.ndarray,
        rng: np.random.Generator | None = None,
        distance: DistanceFunc | None = None,
    ) -> Clusters:
        """
        Создаёт ``k`` кластеров со случайными центроидами.

        Центроиды равномерно распределены внутри ограничивающего
        параллелепипеда датасета.
        """
        if X.shape[0] == 0 or X.ndim != 2 or X.shape[1] == 0:
            raise InvalidArgumentError(
                "there must be at least one dimension in the data set"
            )
        if k < 1:
            raise InvalidArgumentError("k must be greater than 0")

        rng = rng or np.random.default_rng()
        low = X.min(axis=0)
        high = X.max(axis=0)
        centers = rng.uniform(low, high, size=(k, X.shape[1]))
        return cls(X, centers, distance=distance)

    @classmethod
    def from_centers(
        cls,
        X: np.ndarray,
        centers: np.ndarray,
        distance: DistanceFunc | None = None,
    ) -> Clusters:
        """Создаёт кластеры с заданными начальными центроидами."""
        centers = np.asarray(centers, dtype=np.float64)
        if centers.ndim != 2 or centers.shape[1] != X.shape[1]:
            raise InvalidArgumentError(
                f"initial centroids must have shape (k, {X.shape[1]}), "
                f"got {centers.shape}"
            )
        if centers.shape[0] < 1:
            raise InvalidArgumentError("k must be greater than 0")
        return cls(X, centers, distance=distance)

    # --- Доступ ---

    def __len__(self) -> int:
        return len(self._members)

    def __getitem__(self, ci: int) -> Cluster:
        idx = np.array(self._members[ci], dtype=np.int64)
        return Cluster(
            center=self.centers[ci].copy(),
            indices=idx,
            observations=self.X[idx],
        )

    def __iter__(self) -> Iterator[Cluster]:
        for ci in range(len(self)):
            yield self[ci]

    def size(self, ci: int) -> int:
        return len(self._members[ci])

    def sizes(self) -> List[int]:
        return [len(m) for m in self._members]

    def members(self, ci: int) -> List[int]:
        return list(self._members[ci])

    def centers_in_dimension(self, n: int) -> np.ndarray:
        """Координаты всех центроидов по измерению ``n``."""
        return self.centers[:, n]

    # --- Операции, используемые циклом разбиения ---

    def nearest(self, point: np.ndarray) -> int:
        """
        Индекс ближайшего центроида.

        При равенстве расстояний выигрывает меньший индекс (argmin).
        """
        return int(np.argmin(self.distance(point, self.centers)))

    def append(self, ci: int, p: int) -> None:
        self._members[ci].append(p)

    def move(self, p: int, src: int, dst: int) -> None:
        """Переносит наблюдение ``p`` из кластера ``src`` в ``dst``."""
        self._members[src].remove(p)
        self._members[dst].append(p)
        self.labels[p] = dst

    def recenter_cluster(self, ci: int) -> None:
        members = self._members[ci]
        if not members:
            return
        # порядок вставки зависит от планирования потоков;
        # сортировка делает сумму детерминированной
        idx = np.sort(np.asarray(members, dtype=np.int64))
        self.centers[ci] = self.X[idx].mean(axis=0)

    def recenter(self, dispatcher: ParallelDispatcher | None = None) -> None:
        """
        Пересчитывает все центроиды как средние своих наблюдений.

        Кластеры независимы, поэтому при переданном диспетчере пересчёт
        распределяется по воркерам. Пустые кластеры сохраняют центроид.
        """
        if dispatcher is None:
            for ci in range(len(self)):
                self.recenter_cluster(ci)
        else:
            dispatcher.for_each(len(self), self.recenter_cluster)

    def reset(self) -> None:
        """Очищает принадлежность, центроиды сохраняются."""
        for m in self._members:
            m.clear()
