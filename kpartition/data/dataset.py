"""
Загрузка и генерация датасетов для кластеризации.

Модуль предоставляет класс Dataset: наблюдения, истинные метки (если есть)
и метаданные ``N``, ``D``, ``K`` для префикса логов.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np
from sklearn.datasets import make_blobs

from kpartition.data.validation import as_observations


class Dataset:
    """
    Представление датасета для кластеризации.

    Хранит наблюдения ``X`` (N, D), необязательные истинные метки
    ``labels_true`` и словарь ``dataset_info``.
    """

    def __init__(
        self,
        X: Any,
        labels_true: np.ndarray | None = None,
        dataset_info: dict[str, Any] | None = None,
    ) -> None:
        self.X = as_observations(X)
        self.labels_true = labels_true
        info = dict(dataset_info or {})
        info.setdefault("N", int(self.X.shape[0]))
        info.setdefault("D", int(self.X.shape[1]))
        self.dataset_info = info

    def __len__(self) -> int:
        return int(self.X.shape[0])

    @classmethod
    def load(cls, path: str | Path) -> Dataset:
        """
        Загружает наблюдения из файла.

        Форматы:
        - ``.npy``: массив (N, D);
        - текст: по одному наблюдению в строке, координаты через пробел,
          строки с ``#`` пропускаются.
        """
        path = Path(path)
        logging.info(f"Loading dataset from {path}")

        if path.suffix == ".npy":
            X = np.load(path)
        else:
            X = np.loadtxt(path, dtype=np.float64, comments="#", ndmin=2)

        dataset = cls(X, dataset_info={"filepath": str(path), "purpose": "file"})
        logging.info(f"Dataset loaded: X.shape={dataset.X.shape}")
        return dataset

    @classmethod
    def blobs(
        cls,
        N: int,
        D: int,
        K: int,
        cluster_std: float = 1.0,
        center_box_range: tuple[float, float] = (-10.0, 10.0),
        seed: int | None = None,
    ) -> Dataset:
        """
        Генерация синтетического датасета с помощью make_blobs.

        Args:
            N: Количество точек
            D: Размерность пространства
            K: Количество групп
            cluster_std: Стандартное отклонение групп
            center_box_range: Диапазон расположения центров групп
            seed: Seed для воспроизводимости
        """
        data, labels, _ = make_blobs(
            n_samples=N,
            n_features=D,
            centers=K,
            cluster_std=cluster_std,
            center_box=center_box_range,
            random_state=seed,
            return_centers=True,
        )
        return cls(
            data,
            labels_true=labels.astype(np.int32),
            dataset_info={"N": N, "D": D, "K": K, "purpose": "blobs"},
        )
