from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from multiprocessing import cpu_count
from typing import Any, List, Optional

import numpy as np

from pkmeans.config import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_THRESHOLD,
    MAX_ITERATIONS,
    KMeansConfig,
    check_pool_params,
)
from pkmeans.core.base import KMeansBase, LoopState
from pkmeans.core.reducer import ParallelAssignmentReducer, ReductionResult
from pkmeans.metrics.timers import Timer


class KMeansThreaded(KMeansBase):
    """K-Means на пуле потоков (пул создаётся один раз на fit)."""

    def __init__(
        self,
        n_clusters: int,
        threshold: float = DEFAULT_THRESHOLD,
        max_iters: int = MAX_ITERATIONS,
        n_threads: Optional[int] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        debug: bool = False,
        logger=None,
    ) -> None:
        super().__init__(
            n_clusters=n_clusters,
            threshold=threshold,
            max_iters=max_iters,
            debug=debug,
            logger=logger,
        )
        check_pool_params(n_threads, chunk_size)
        self.n_threads = max(1, int(n_threads if n_threads is not None else cpu_count()))
        self.chunk_size = int(chunk_size)

        # Пул и редуктор переиспользуются в рамках fit
        self._pool: Optional[ThreadPoolExecutor] = None
        self._reducer: Optional[ParallelAssignmentReducer] = None

    @classmethod
    def from_config(cls, config: KMeansConfig, logger=None) -> KMeansThreaded:
        return cls(
            n_clusters=config.n_clusters,
            threshold=config.threshold,
            max_iters=config.max_iters,
            n_threads=config.resolved_threads(),
            chunk_size=config.chunk_size,
            debug=config.debug,
            logger=logger,
        )

    # --- Пул и разбиение ---

    def _ensure_pool(self, X: np.ndarray) -> ParallelAssignmentReducer:
        """Ленивая инициализация пула и редуктора."""
        if self._pool is not None and self._reducer is not None:
            return self._reducer

        self._pool = ThreadPoolExecutor(
            max_workers=self.n_threads,
            thread_name_prefix="pkmeans",
        )
        self._reducer = ParallelAssignmentReducer(
            X,
            n_clusters=self.K,
            n_workers=self.n_threads,
            chunk_size=self.chunk_size,
            executor=self._pool,
        )
        return self._reducer

    def _close_pool(self) -> None:
        """Закрыть пул после fit."""
        if self._pool is not None:
            self._pool.shutdown(wait=True)
        self._pool = None
        self._reducer = None

    def reduce_step(
        self, X: np.ndarray, centroids: np.ndarray, membership: np.ndarray
    ) -> ReductionResult:
        reducer = self._ensure_pool(X)
        return reducer.run(centroids, membership)

    def fit(self, X: Any) -> None:
        """fit с переиспользованием пула и гарантированным закрытием."""
        try:
            super().fit(X)
        finally:
            self._close_pool()


@dataclass
class ClusteringResult:
    """Итог кластеризации для внешних потребителей (запись, отчёт)."""

    centroids: np.ndarray
    membership: np.ndarray
    n_iters: int
    state: LoopState
    delta: float
    elapsed: float
    n_threads: int
    iteration_times: List[float] = field(default_factory=list)


def kmeans_clustering(X: Any, config: KMeansConfig, logger=None) -> ClusteringResult:
    """
    Кластеризация набора точек: начальные центроиды берутся из первых
    config.n_clusters точек, цикл идёт до сходимости или до max_iters.

    Все ошибки (конфигурация, нехватка памяти, сбой воркера) поднимаются
    синхронно из этого вызова.
    """
    model = KMeansThreaded.from_config(config, logger=logger)
    with Timer() as t:
        model.fit(X)

    return ClusteringResult(
        centroids=model.centroids,
        membership=model.membership,
        n_iters=model.n_iters_actual,
        state=model.state,
        delta=model.delta,
        elapsed=t.elapsed,
        n_threads=model.n_threads,
        iteration_times=list(model.iteration_times),
    )
