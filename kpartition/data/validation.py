"""
Валидация входного датасета перед кластеризацией.

Модуль приводит входные данные к массиву наблюдений float64 формы (N, D)
и отвергает некорректные данные до начала любой работы.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from kpartition.errors import InvalidArgumentError


def as_observations(dataset: Any) -> np.ndarray:
    """
    Приводит датасет к массиву наблюдений.

    Args:
        dataset: Массив (N, D) или последовательность векторов одинаковой длины

    Returns:
        Непрерывный массив float64 формы (N, D)

    Raises:
        InvalidArgumentError: Если датасет пуст, не двумерный, без измерений
            или содержит нечисловые/бесконечные значения
    """
    try:
        X = np.ascontiguousarray(dataset, dtype=np.float64)
    except (TypeError, ValueError) as err:
        raise InvalidArgumentError(f"dataset is not numeric: {err}") from err

    if X.ndim != 2:
        raise InvalidArgumentError(
            f"dataset must be two-dimensional (N, D), got ndim={X.ndim}"
        )
    if X.shape[0] == 0 or X.shape[1] == 0:
        raise InvalidArgumentError(
            "there must be at least one dimension in the data set"
        )
    if not np.all(np.isfinite(X)):
        raise InvalidArgumentError("dataset contains NaN or infinite values")

    return X
