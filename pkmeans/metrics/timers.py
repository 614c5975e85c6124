"""
Таймеры для измерения шагов кластеризации.

Timer переиспользуется между итерациями: elapsed хранит последний замер,
total и laps накапливаются до вызова reset().
"""
from __future__ import annotations
import time
from typing import Any


class Timer:
    """
    Контекстный менеджер на time.perf_counter() с накоплением по итерациям.

    Пример использования:
        t_assign = Timer()
        for _ in range(n_iters):
            with t_assign:
                reducer.run(centroids, membership)
        t_assign.total, t_assign.laps
    """

    def __init__(self) -> None:
        self.start: float = 0.0
        self.end: float = 0.0
        self.elapsed: float = 0.0
        self.total: float = 0.0
        self.laps: int = 0

    def reset(self) -> None:
        self.elapsed = 0.0
        self.total = 0.0
        self.laps = 0

    def __enter__(self) -> Timer:
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end = time.perf_counter()
        self.elapsed = self.end - self.start
        self.total += self.elapsed
        self.laps += 1
