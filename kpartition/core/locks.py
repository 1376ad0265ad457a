"""
Примитивы синхронизации для параллельного шага назначения.

- RWLock: блокировка «много читателей / один писатель»;
- StripedLocks: банк RW-блокировок фиксированного размера, полоса
  выбирается по индексу кластера по модулю размера банка;
- AtomicCounter: разделяемый счётчик переназначений.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, List

LOCK_STRIPES = 256


class RWLock:
    """Простая RW-блокировка на threading.Condition с приоритетом писателя."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()


class StripedLocks:
    """
    Банк RW-блокировок, индексируемый ключом по модулю размера банка.

    Правило чтения: поиск ближайшего центроида читает весь набор центроидов,
    поэтому читатель захватывает на чтение ВСЕ полосы (в порядке возрастания),
    а не одну. Так запрос никогда не увидит частично обновлённый набор.
    Писатель захватывает только полосу своего кластера, поэтому добавления
    в разные кластеры идут параллельно, а в один кластер сериализуются.

    Все захваты нескольких полос идут в порядке возрастания номера полосы,
    что исключает взаимоблокировки.
    """

    def __init__(self, size: int = LOCK_STRIPES) -> None:
        if size < 1:
            raise ValueError("size must be positive")
        self._locks: List[RWLock] = [RWLock() for _ in range(size)]

    def __len__(self) -> int:
        return len(self._locks)

    def stripe(self, key: int) -> int:
        return key % len(self._locks)

    @contextmanager
    def read_all(self) -> Iterator[None]:
        acquired: List[RWLock] = []
        try:
            for lock in self._locks:
                lock.acquire_read()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release_read()

    @contextmanager
    def write(self, *keys: int) -> Iterator[None]:
        """Захват на запись полос всех переданных ключей (без повторов)."""
        stripes = sorted({self.stripe(k) for k in keys})
        acquired: List[RWLock] = []
        try:
            for s in stripes:
                self._locks[s].acquire_write()
                acquired.append(self._locks[s])
            yield
        finally:
            for lock in reversed(acquired):
                lock.release_write()


class AtomicCounter:
    """Потокобезопасный целочисленный счётчик."""

    def __init__(self, value: int = 0) -> None:
        self._value = value
        self._lock = threading.Lock()

    def add(self, delta: int = 1) -> int:
        with self._lock:
            self._value += delta
            return self._value

    def store(self, value: int) -> None:
        with self._lock:
            self._value = value

    def load(self) -> int:
        with self._lock:
            return self._value
