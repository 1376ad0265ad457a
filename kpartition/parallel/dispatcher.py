"""
Параллельный диспетчер работы: вызывает ``fn(i)`` для каждого ``i`` из
``0..n-1`` и возвращает управление после завершения всех вызовов.

Используется пул потоков: воркеры разделяют изменяемое состояние
хранилища кластеров, синхронизацию которого обеспечивает сам ``fn``.
"""

from __future__ import annotations

from dataclasses import dataclass
from multiprocessing.pool import ThreadPool
from typing import Callable, List, Optional

import numpy as np

from kpartition.errors import InvalidArgumentError


@dataclass(frozen=True)
class ParallelConfig:
    """Параметры параллельного выполнения."""

    n_workers: int = 1
    chunk_size: Optional[int] = None

    def __post_init__(self) -> None:
        if self.chunk_size is not None and int(self.chunk_size) <= 0:
            raise InvalidArgumentError("chunk_size must be positive")


def _run_chunk(fn: Callable[[int], None], idx: np.ndarray) -> None:
    for i in idx:
        fn(int(i))


class ParallelDispatcher:
    """
    Диспетчер с пулом потоков, живущим в рамках одного прогона.

    При ``n_workers <= 1`` пул не создаётся и вызовы идут последовательно
    в вызывающем потоке с тем же наблюдаемым результатом.
    """

    def __init__(self, config: ParallelConfig = ParallelConfig()) -> None:
        self.config = config
        self.n_workers = max(1, int(config.n_workers))
        self._pool: Optional[ThreadPool] = None

    def __enter__(self) -> ParallelDispatcher:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # --- Пул и разбиение ---

    def _make_chunks(self, n: int) -> List[np.ndarray]:
        """Разбиение индексов на чанки."""
        if self.config.chunk_size is None:
            chunks = np.array_split(np.arange(n), self.n_workers)
        else:
            cs = int(self.config.chunk_size)
            chunks = [np.arange(i, min(i + cs, n)) for i in range(0, n, cs)]
        return [idx for idx in chunks if idx.size > 0]

    def _ensure_pool(self) -> ThreadPool:
        """Ленивая инициализация пула."""
        if self._pool is None:
            self._pool = ThreadPool(processes=self.n_workers)
        return self._pool

    def close(self) -> None:
        """Закрыть пул после прогона."""
        if self._pool is not None:
            self._pool.close()
            self._pool.join()
        self._pool = None

    def for_each(self, n: int, fn: Callable[[int], None]) -> None:
        """
        Вызывает ``fn(i)`` ровно один раз для каждого ``i`` в ``range(n)``.

        Исключение из ``fn`` пробрасывается вызывающему после того,
        как пул вернул управление.
        """
        if n <= 0:
            return
        if self.n_workers == 1:
            for i in range(n):
                fn(i)
            return

        pool = self._ensure_pool()
        chunks = self._make_chunks(n)
        pool.starmap(_run_chunk, [(fn, idx) for idx in chunks])


def for_each(n: int, workers: int, fn: Callable[[int], None]) -> None:
    """Одноразовый вариант ``ParallelDispatcher.for_each`` со своим пулом."""
    with ParallelDispatcher(ParallelConfig(n_workers=workers)) as dispatcher:
        dispatcher.for_each(n, fn)
