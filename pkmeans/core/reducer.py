from __future__ import annotations

from concurrent.futures import Executor, wait
from dataclasses import dataclass
from typing import List

import numpy as np

from pkmeans.core.distance import find_nearest_clusters
from pkmeans.exceptions import AllocationError, ConfigurationError


class Accumulator:
    """Суммы координат (K, D) и число точек (K,) по каждому кластеру."""

    def __init__(self, n_clusters: int, n_coords: int, dtype: np.dtype = np.float64) -> None:
        try:
            self.sums = np.zeros((n_clusters, n_coords), dtype=dtype)
            self.counts = np.zeros(n_clusters, dtype=np.int64)
        except MemoryError as e:
            raise AllocationError(
                f"Cannot allocate accumulator for K={n_clusters}, D={n_coords}"
            ) from e

    @property
    def n_clusters(self) -> int:
        return int(self.counts.shape[0])

    def add_block(self, points: np.ndarray, ids: np.ndarray) -> None:
        """Добавляет блок точек в слоты назначенных им кластеров."""
        # add.at не буферизует повторяющиеся индексы, складываем в порядке строк
        np.add.at(self.sums, ids, points)
        self.counts += np.bincount(ids, minlength=self.n_clusters)

    def reset(self) -> None:
        self.sums.fill(0)
        self.counts.fill(0)


@dataclass
class ReductionResult:
    """Итог одного шага назначения и редукции."""

    accumulator: Accumulator
    changed: int
    delta: float


def make_chunks(n_objs: int, chunk_size: int) -> List[slice]:
    """Разбиение индексов 0..n_objs-1 на непрерывные чанки."""
    cs = int(chunk_size)
    if cs <= 0:
        raise ConfigurationError("chunk_size must be positive")
    return [slice(i, min(i + cs, n_objs)) for i in range(0, n_objs, cs)]


def assign_chunks(chunks: List[slice], n_workers: int) -> List[List[slice]]:
    """Статическое расписание: чанк c достаётся воркеру c % n_workers."""
    schedule: List[List[slice]] = [[] for _ in range(n_workers)]
    for c, chunk in enumerate(chunks):
        schedule[c % n_workers].append(chunk)
    return schedule


class ParallelAssignmentReducer:
    """
    Параллельный шаг назначения точек и частичной редукции.

    Каждый воркер обрабатывает только свои чанки: пишет метки в свой диапазон
    индексов и копит суммы в собственном аккумуляторе, поэтому блокировки не
    нужны. После полного ожидания всех воркеров главный поток сливает
    аккумуляторы в общий в фиксированном порядке (по id воркера) и сразу
    обнуляет их для следующей итерации.

    Центроиды передаются воркерам только для чтения.
    """

    def __init__(
        self,
        X: np.ndarray,
        n_clusters: int,
        n_workers: int,
        chunk_size: int,
        executor: Executor,
    ) -> None:
        self.X = X
        self.K = n_clusters
        self.n_workers = max(1, int(n_workers))
        self._executor = executor

        N, D = X.shape
        self._schedule = assign_chunks(make_chunks(N, chunk_size), self.n_workers)
        self._local: List[Accumulator] = [
            Accumulator(n_clusters, D, X.dtype) for _ in range(self.n_workers)
        ]
        self._global = Accumulator(n_clusters, D, X.dtype)

    @property
    def local_accumulators(self) -> List[Accumulator]:
        return self._local

    def _work(self, worker_id: int, centroids: np.ndarray, membership: np.ndarray) -> int:
        """Обработка чанков одного воркера; возвращает число сменивших кластер точек."""
        acc = self._local[worker_id]
        changed = 0
        for sl in self._schedule[worker_id]:
            block = self.X[sl]
            ids = find_nearest_clusters(block, centroids)
            changed += int(np.count_nonzero(membership[sl] != ids))
            membership[sl] = ids
            acc.add_block(block, ids)
        return changed

    def merge(self) -> Accumulator:
        """Однопоточное слияние приватных аккумуляторов в общий."""
        total = self._global
        total.reset()
        for acc in self._local:
            total.sums += acc.sums
            total.counts += acc.counts
            acc.reset()
        return total

    def run(self, centroids: np.ndarray, membership: np.ndarray) -> ReductionResult:
        """
        Одна итерация: назначение всех точек, барьер, слияние.

        :param centroids: текущие центроиды (K, D), не изменяются
        :param membership: метки предыдущей итерации, перезаписываются на месте
        """
        frozen = centroids.view()
        frozen.flags.writeable = False

        futures = [
            self._executor.submit(self._work, wid, frozen, membership)
            for wid, chunks in enumerate(self._schedule)
            if chunks
        ]
        # Барьер: слияние только после завершения всех воркеров
        wait(futures)

        try:
            changed = sum(f.result() for f in futures)
        except Exception:
            for acc in self._local:
                acc.reset()
            raise

        total = self.merge()
        return ReductionResult(
            accumulator=total,
            changed=changed,
            delta=changed / self.X.shape[0],
        )
