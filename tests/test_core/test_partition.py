"""
Unit-тесты цикла разбиения KMeans.partition.
"""

import itertools

import numpy as np
import pytest

from kpartition.core.partition import KMeans
from kpartition.errors import InvalidArgumentError, ObserverFailureError


def assert_is_partition(clusters, N):
    """Принадлежность разбивает датасет без повторов и пропусков."""
    indices = np.concatenate([c.indices for c in clusters])
    np.testing.assert_array_equal(np.sort(indices), np.arange(N))
    for ci, cluster in enumerate(clusters):
        assert np.all(clusters.labels[cluster.indices] == ci)


class TestPartition:
    """Тесты базовой функциональности разбиения."""

    def test_two_groups(self, simple_2d_dataset):
        X, initial_centroids = simple_2d_dataset
        model = KMeans()

        clusters = model.partition(X, 2, initial_centroids=initial_centroids)

        assert len(clusters) == 2
        assert_is_partition(clusters, len(X))
        np.testing.assert_array_equal(clusters.labels, [0, 0, 0, 1, 1, 1])
        np.testing.assert_allclose(clusters[0].center, [1.0, 1.0], rtol=1e-10)
        np.testing.assert_allclose(clusters[1].center, [11.0, 11.0], rtol=1e-10)
        # раунд 0 переносит вторую группу, раунд 1 изменений не даёт
        assert model.n_iters_actual == 2

    def test_two_groups_random_init(self, simple_2d_dataset):
        X, _ = simple_2d_dataset

        clusters = KMeans(seed=3).partition(X, 2)

        assert_is_partition(clusters, len(X))
        labels = clusters.labels
        assert labels[0] == labels[1] == labels[2]
        assert labels[3] == labels[4] == labels[5]
        assert labels[0] != labels[3]
        centers = clusters.centers[np.argsort(clusters.centers[:, 0])]
        np.testing.assert_allclose(centers, [[1.0, 1.0], [11.0, 11.0]], rtol=1e-10)

    def test_every_observation_assigned_once(self, small_dataset):
        X, _ = small_dataset

        clusters = KMeans(seed=11).partition(X, 3)

        assert len(clusters) == 3
        assert_is_partition(clusters, len(X))
        assert all(size > 0 for size in clusters.sizes())

    def test_centroids_are_means(self, small_dataset):
        X, initial_centroids = small_dataset

        clusters = KMeans().partition(X, 3, initial_centroids=initial_centroids)

        for cluster in clusters:
            np.testing.assert_allclose(
                cluster.center, cluster.observations.mean(axis=0), rtol=1e-10
            )

    def test_k_equals_dataset_size(self):
        X = np.array([[0.0, 0.0], [3.0, 0.0], [0.0, 3.0], [5.0, 5.0], [9.0, 1.0]])
        model = KMeans()

        clusters = model.partition(X, len(X), initial_centroids=X)

        assert model.n_iters_actual == 2
        assert clusters.sizes() == [1, 1, 1, 1, 1]
        np.testing.assert_array_equal(clusters.labels, np.arange(len(X)))

    def test_k_equals_dataset_size_random_init(self):
        X = np.array([[0.0, 0.0], [3.0, 0.0], [0.0, 3.0], [5.0, 5.0], [9.0, 1.0]])

        clusters = KMeans(seed=5).partition(X, len(X))

        assert clusters.sizes() == [1, 1, 1, 1, 1]
        assert_is_partition(clusters, len(X))

    def test_single_round_without_changes(self, recording_plotter):
        """
        Все точки уже в своём кластере: ровно один раунд.

        Таблица назначений стартует с нулей, поэтому раунд без переназначений
        с первой попытки возможен только при k=1: при k>1 точки, ближайшие
        к кластерам 1..k-1, всегда меняют кластер в раунде 0.
        """
        X = np.array([[0.0], [1.0], [2.0]])
        model = KMeans(plotter=recording_plotter)

        clusters = model.partition(X, 1, initial_centroids=[[1.0]])

        assert model.n_iters_actual == 1
        assert recording_plotter.iterations == [0]
        assert clusters.sizes() == [3]

    def test_k_greater_than_dataset(self, simple_2d_dataset, recording_plotter):
        X, _ = simple_2d_dataset
        model = KMeans(plotter=recording_plotter)

        with pytest.raises(InvalidArgumentError, match="at least equal k"):
            model.partition(X, len(X) + 1)

        assert recording_plotter.iterations == []
        assert model.n_iters_actual == 0

    def test_failed_call_resets_run_stats(self, simple_2d_dataset):
        """Статистика отклонённого вызова не наследует прошлый прогон."""
        X, initial_centroids = simple_2d_dataset
        model = KMeans()
        model.partition(X, 2, initial_centroids=initial_centroids)
        assert model.n_iters_actual >= 1

        with pytest.raises(InvalidArgumentError):
            model.partition(X, len(X) + 1)

        assert model.n_iters_actual == 0
        assert model.t_assign_total == 0.0
        assert model.t_recover_total == 0.0
        assert model.t_update_total == 0.0

    @pytest.mark.parametrize("k", [0, -1])
    def test_k_not_positive(self, simple_2d_dataset, k):
        X, _ = simple_2d_dataset
        with pytest.raises(InvalidArgumentError):
            KMeans().partition(X, k)

    def test_wrong_initial_centroids(self, simple_2d_dataset):
        X, initial_centroids = simple_2d_dataset
        with pytest.raises(InvalidArgumentError):
            KMeans().partition(X, 3, initial_centroids=initial_centroids)
        with pytest.raises(InvalidArgumentError):
            KMeans().partition(X, 2, initial_centroids=[[0.0], [1.0]])


class TestEmptyClusterRecovery:
    """Тесты восстановления пустых кластеров."""

    def test_far_centroid_gets_observation(self, simple_2d_dataset, recording_plotter):
        X, initial_centroids = simple_2d_dataset
        centroids = np.vstack([initial_centroids, [[100.0, 100.0]]])
        model = KMeans(plotter=recording_plotter, seed=1)

        clusters = model.partition(X, 3, initial_centroids=centroids)

        # раунд 0: 3 переназначения + N за восстановление пустого кластера
        assert recording_plotter.iterations[0] == -(3 + len(X))
        assert recording_plotter.sizes[0].count(0) == 0
        assert all(size > 0 for size in clusters.sizes())
        assert_is_partition(clusters, len(X))

    def test_recovery_forces_another_round(self, simple_2d_dataset, recording_plotter):
        X, initial_centroids = simple_2d_dataset
        centroids = np.vstack([initial_centroids, [[100.0, 100.0]]])
        model = KMeans(delta_threshold=0.9, plotter=recording_plotter, seed=1)

        model.partition(X, 3, initial_centroids=centroids)

        assert model.n_iters_actual >= 2

    def test_many_empty_clusters_parallel(self, medium_dataset):
        """Несколько пустых кластеров восстанавливаются параллельно."""
        from kpartition.parallel.dispatcher import ParallelConfig

        X, _ = medium_dataset
        far = np.full((6, X.shape[1]), 1_000.0) + np.arange(6)[:, None]
        centroids = np.vstack([X[:2], far])
        model = KMeans(parallel=ParallelConfig(n_workers=4), seed=2)

        clusters = model.partition(X, len(centroids), initial_centroids=centroids)

        assert all(size > 0 for size in clusters.sizes())
        assert_is_partition(clusters, len(X))


class TestTermination:
    """Тесты остановки по пределу раундов и ошибок наблюдателя."""

    def test_iteration_cap_zero(self, small_dataset):
        X, _ = small_dataset
        model = KMeans(n_iters=0, seed=4)

        clusters = model.partition(X, 3)

        assert model.n_iters_actual == 1
        assert_is_partition(clusters, len(X))

    def test_iteration_cap_is_not_an_error(self, simple_2d_dataset, recording_plotter):
        X, initial_centroids = simple_2d_dataset
        # далёкий центроид пустеет, восстановление требует ещё раундов
        centroids = np.vstack([initial_centroids, [[100.0, 100.0]]])
        model = KMeans(n_iters=2, plotter=recording_plotter, seed=1)

        clusters = model.partition(X, 3, initial_centroids=centroids)

        assert model.n_iters_actual <= 3
        assert len(recording_plotter.iterations) == model.n_iters_actual
        assert all(size > 0 for size in clusters.sizes())

    @pytest.mark.parametrize("n_iters", [0, 5, 96])
    def test_iteration_cap_round_count(self, recording_plotter, n_iters):
        """
        Без сходимости выполняется ровно n_iters + 1 раундов (номера 0..n_iters).

        Расстояние чередует ближайший кластер при каждом вызове; при нечётном
        числе точек каждая точка меняет кластер в каждом раунде после нулевого.
        """
        X = np.arange(9, dtype=np.float64).reshape(9, 1)
        calls = itertools.count()

        def alternating(point, centers):
            distances = np.ones(len(centers))
            distances[next(calls) % 2] = 0.0
            return distances

        model = KMeans(n_iters=n_iters, plotter=recording_plotter, distance=alternating)

        clusters = model.partition(X, 2, initial_centroids=[[0.0], [8.0]])

        assert model.n_iters_actual == n_iters + 1
        assert recording_plotter.iterations == list(range(n_iters + 1))
        assert_is_partition(clusters, len(X))

    def test_plotter_failure_aborts(self, simple_2d_dataset):
        X, initial_centroids = simple_2d_dataset

        class FailingPlotter:
            calls = 0

            def plot(self, clusters, iteration):
                self.calls += 1
                raise RuntimeError("disk full")

        plotter = FailingPlotter()
        model = KMeans(plotter=plotter)

        with pytest.raises(ObserverFailureError, match="failed to plot chart: disk full") as exc:
            model.partition(X, 2, initial_centroids=initial_centroids)

        assert isinstance(exc.value.__cause__, RuntimeError)
        assert plotter.calls == 1

    def test_plotter_receives_round_index(self, simple_2d_dataset, recording_plotter):
        X, initial_centroids = simple_2d_dataset

        KMeans(plotter=recording_plotter).partition(
            X, 2, initial_centroids=initial_centroids
        )

        assert recording_plotter.iterations == [0, 1]

    def test_logger_receives_progress(self, simple_2d_dataset):
        X, initial_centroids = simple_2d_dataset

        class ListLogger:
            def __init__(self):
                self.messages = []

            def info(self, msg, *args, **kwargs):
                self.messages.append(msg)

        logger = ListLogger()
        KMeans(logger=logger).partition(X, 2, initial_centroids=initial_centroids)

        assert any("Round 0" in m for m in logger.messages)
        assert any("Stopped by convergence after 2 rounds" in m for m in logger.messages)
