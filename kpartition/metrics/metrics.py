"""
Метрики производительности параллельного разбиения.

Ускорение и эффективность считаются относительно прогона с одним воркером,
пропускная способность считается в вычислениях расстояния в секунду.
"""

from __future__ import annotations


def speedup(t_serial: float, t_parallel: float) -> float:
    """
    Ускорение прогона с несколькими воркерами относительно одного воркера.

    Raises:
        ZeroDivisionError: Если t_parallel равно нулю
    """
    if t_parallel == 0:
        raise ZeroDivisionError("Parallel time cannot be zero")
    return t_serial / t_parallel


def efficiency(speedup: float, workers: int) -> float:
    """
    Параллельная эффективность: ``speedup / workers``.

    1.0 соответствует линейному ускорению.

    Raises:
        ZeroDivisionError: Если workers равно нулю
    """
    if workers == 0:
        raise ZeroDivisionError("Number of workers cannot be zero")
    return speedup / workers


def throughput(N: int, K: int, n_rounds: int, total_time: float) -> float:
    """
    Пропускная способность: ``N × K × n_rounds / total_time``.

    Каждый раунд вычисляет расстояние от каждой из N точек до каждого
    из K центроидов.

    Args:
        N: Количество наблюдений
        K: Количество кластеров
        n_rounds: Количество выполненных раундов
        total_time: Время прогона (секунды)

    Raises:
        ZeroDivisionError: Если total_time равно нулю
    """
    if total_time == 0:
        raise ZeroDivisionError("Total time cannot be zero")
    return (N * K * n_rounds) / total_time
