"""
Таймер на time.perf_counter() для замера фаз раунда и целых прогонов.
"""
from __future__ import annotations

import time
from typing import Any


class Timer:
    """
    Накопительный контекстный менеджер.

    После выхода из блока ``elapsed`` содержит длительность последнего
    блока, ``total`` содержит сумму по всем блокам, ``count`` равен числу замеров.
    Один таймер на фазу переиспользуется во всех раундах прогона.

    Пример:
        t_assign = Timer()
        for _ in range(rounds):
            with t_assign:
                ...
        print(t_assign.total / t_assign.count)
    """

    def __init__(self) -> None:
        self.start: float = 0.0
        self.elapsed: float = 0.0
        self.total: float = 0.0
        self.count: int = 0

    def __enter__(self) -> Timer:
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.elapsed = time.perf_counter() - self.start
        self.total += self.elapsed
        self.count += 1
