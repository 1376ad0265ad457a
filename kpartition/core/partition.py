from __future__ import annotations

from typing import Any, Protocol

import numpy as np

from kpartition.clusters.distance import DistanceFunc
from kpartition.clusters.store import Clusters
from kpartition.core.locks import LOCK_STRIPES, AtomicCounter, StripedLocks
from kpartition.data.validation import as_observations
from kpartition.errors import InvalidArgumentError, ObserverFailureError
from kpartition.metrics.timers import Timer
from kpartition.parallel.dispatcher import ParallelConfig, ParallelDispatcher

DEFAULT_DELTA_THRESHOLD = 0.01
DEFAULT_N_ITERS = 96


class Plotter(Protocol):
    """
    Наблюдатель за прогоном: вызывается один раз за раунд.

    ``iteration``: номер раунда (с нуля) для обычного раунда или
    отрицательное число переназначений для раунда, в котором
    восстанавливались пустые кластеры. Исключение прерывает прогон.
    """

    def plot(self, clusters: Clusters, iteration: int) -> None: ...


class KMeans:
    """
    K-Means (алгоритм Ллойда) с параллельным шагом назначения.

    Параметры конфигурации проверяются в конструкторе, независимо от датасета:
    - delta_threshold: доля точек в (0.0, 1.0); если за раунд кластер сменило
      меньше ``delta_threshold * N`` точек, алгоритм останавливается;
    - n_iters: жёсткий предел числа раундов;
    - plotter: необязательный наблюдатель, вызывается после каждого раунда;
    - parallel: число потоков и размер чанков;
    - seed: seed генератора для начальных центроидов и восстановления
      пустых кластеров.
    """

    def __init__(
        self,
        delta_threshold: float = DEFAULT_DELTA_THRESHOLD,
        plotter: Plotter | None = None,
        n_iters: int = DEFAULT_N_ITERS,
        parallel: ParallelConfig = ParallelConfig(),
        seed: int | None = None,
        distance: DistanceFunc | None = None,
        logger: Any | None = None,
    ) -> None:
        if not 0.0 < delta_threshold < 1.0:
            raise InvalidArgumentError(
                "threshold is out of bounds (must be >0.0 and <1.0, in percent)"
            )
        if n_iters < 0:
            raise InvalidArgumentError("n_iters must be non-negative")

        self.delta_threshold = float(delta_threshold)
        self.plotter = plotter
        self.n_iters = int(n_iters)
        self.parallel = parallel
        self.seed = seed
        self.distance = distance
        self.logger = logger

        # агрегированные тайминги последнего вызова partition(...)
        self.t_assign_total: float = 0.0
        self.t_recover_total: float = 0.0
        self.t_update_total: float = 0.0

        # Реальное количество выполненных раундов
        self.n_iters_actual: int = 0

    def partition(
        self,
        dataset: Any,
        k: int,
        initial_centroids: np.ndarray | None = None,
    ) -> Clusters:
        """
        Разбивает датасет на ``k`` кластеров.

        Возвращает итоговое хранилище кластеров (центроиды, принадлежность
        и таблицу назначений ``labels``) как при сходимости, так и при
        достижении ``n_iters``.

        Raises:
            InvalidArgumentError: некорректный датасет или ``k > len(dataset)``
            ObserverFailureError: наблюдатель завершился ошибкой
        """
        self.t_assign_total = 0.0
        self.t_recover_total = 0.0
        self.t_update_total = 0.0
        self.n_iters_actual = 0

        X = as_observations(dataset)
        N = X.shape[0]
        if k > N:
            raise InvalidArgumentError(
                "the size of the data set must at least equal k"
            )

        rng = np.random.default_rng(self.seed)
        if initial_centroids is None:
            cc = Clusters.new(k, X, rng=rng, distance=self.distance)
        else:
            cc = Clusters.from_centers(X, initial_centroids, distance=self.distance)
            if len(cc) != k:
                raise InvalidArgumentError(
                    f"expected {k} initial centroids, got {len(cc)}"
                )

        with ParallelDispatcher(self.parallel) as dispatcher:
            self._run(X, cc, rng, dispatcher)
        return cc

    def _run(
        self,
        X: np.ndarray,
        cc: Clusters,
        rng: np.random.Generator,
        dispatcher: ParallelDispatcher,
    ) -> None:
        N = X.shape[0]
        k = len(cc)
        labels = cc.labels
        changes = AtomicCounter()
        # банк не больше числа кластеров: лишние полосы никогда не пишутся
        mut = StripedLocks(min(LOCK_STRIPES, k))

        def assign(p: int) -> None:
            point = X[p]
            # читатель держит все полосы: центроиды не меняются под ногами
            with mut.read_all():
                ci = cc.nearest(point)
            with mut.write(ci):
                cc.append(ci, p)
                if labels[p] != ci:
                    labels[p] = ci
                    changes.add(1)

        def recover(ci: int, seed: int) -> None:
            # Пустому кластеру отдаём случайную точку из кластера, где
            # точек больше одной, иначе опустеет другой кластер.
            local_rng = np.random.default_rng(seed)
            while True:
                ri = int(local_rng.integers(N))
                donor = int(labels[ri])
                if donor == ci:
                    continue
                with mut.write(donor, ci):
                    if labels[ri] == donor and cc.size(donor) > 1:
                        cc.move(ri, donor, ci)
                        break
            # после случайного переноса гарантируем ещё хотя бы один раунд
            changes.add(N)

        t_assign, t_recover, t_update = Timer(), Timer(), Timer()

        i = 0
        while True:
            changes.store(0)
            cc.reset()

            with t_assign:
                dispatcher.for_each(N, assign)
            n_assigned = changes.load()

            empty = [ci for ci in range(k) if cc.size(ci) == 0]
            with t_recover:
                if empty:
                    seeds = rng.integers(np.iinfo(np.int64).max, size=len(empty))
                    dispatcher.for_each(
                        len(empty), lambda j: recover(empty[j], int(seeds[j]))
                    )

            n_changes = changes.load()
            with t_update:
                if n_changes > 0:
                    cc.recenter(dispatcher)

            self.t_assign_total = t_assign.total
            self.t_recover_total = t_recover.total
            self.t_update_total = t_update.total
            self.n_iters_actual = i + 1

            if self.plotter is not None:
                try:
                    self.plotter.plot(cc, -n_changes if empty else i)
                except Exception as err:
                    raise ObserverFailureError(
                        f"failed to plot chart: {err}"
                    ) from err

            converged = n_changes < self.delta_threshold * N
            capped = i >= self.n_iters

            if self.logger and (i == 0 or (i + 1) % 10 == 0 or empty or converged or capped):
                status = " (converged)" if converged else ""
                self.logger.info(
                    f"  Round {i}{status}: changes={n_assigned}, "
                    f"empty_clusters={len(empty)} "
                    f"(T_assign={t_assign.elapsed:.6f}s, "
                    f"T_recover={t_recover.elapsed:.6f}s, "
                    f"T_update={t_update.elapsed:.6f}s)"
                )

            if capped or converged:
                if self.logger:
                    reason = "convergence" if converged else "iteration cap"
                    self.logger.info(
                        f"  Stopped by {reason} after {i + 1} rounds "
                        f"(changes={n_changes}, "
                        f"threshold={self.delta_threshold * N:.2f})"
                    )
                break
            i += 1
