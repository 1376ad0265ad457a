"""
Тесты параллельного диспетчера.
"""

import threading

import pytest

from kpartition.errors import InvalidArgumentError
from kpartition.parallel.dispatcher import ParallelConfig, ParallelDispatcher, for_each


class TestDispatcher:
    @pytest.mark.parametrize(
        "config",
        [
            ParallelConfig(n_workers=1),
            ParallelConfig(n_workers=4),
            ParallelConfig(n_workers=3, chunk_size=5),
            ParallelConfig(n_workers=0),
        ],
    )
    def test_each_index_once(self, config):
        seen = []
        lock = threading.Lock()

        def fn(i):
            with lock:
                seen.append(i)

        with ParallelDispatcher(config) as dispatcher:
            dispatcher.for_each(37, fn)

        assert sorted(seen) == list(range(37))

    def test_sequential_order(self):
        seen = []
        for_each(5, 1, seen.append)
        assert seen == [0, 1, 2, 3, 4]

    def test_zero_items(self):
        seen = []
        for_each(0, 4, seen.append)
        assert seen == []

    def test_exception_propagates(self):
        def fn(i):
            if i == 7:
                raise KeyError(i)

        with pytest.raises(KeyError):
            for_each(10, 4, fn)

    def test_pool_reused_and_closed(self):
        dispatcher = ParallelDispatcher(ParallelConfig(n_workers=2))
        dispatcher.for_each(4, lambda i: None)
        pool = dispatcher._pool
        dispatcher.for_each(4, lambda i: None)
        assert dispatcher._pool is pool
        dispatcher.close()
        assert dispatcher._pool is None

    @pytest.mark.parametrize("chunk_size", [0, -3])
    def test_invalid_chunk_size(self, chunk_size):
        """Размер чанка проверяется при создании конфигурации."""
        with pytest.raises(InvalidArgumentError, match="chunk_size"):
            ParallelConfig(n_workers=2, chunk_size=chunk_size)
