from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

# Число повторов замера в зависимости от N: крупные датасеты меряем реже
REPEATS_BY_N = {
    1_000: 20,
    10_000: 10,
    100_000: 3,
}


def repeats_for(N: int) -> int:
    """Число повторов для ближайшего сверху порога N."""
    for limit, repeats in sorted(REPEATS_BY_N.items()):
        if N <= limit:
            return repeats
    return 1


@dataclass(frozen=True)
class BenchmarkConfig:
    """Параметры замера масштабирования по числу воркеров."""

    workers: Tuple[int, ...] = field(default=(1, 2, 4, 8))
    repeats: int = 5
    warmup: int = 1
