from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List

import numpy as np

from pkmeans.config import DEFAULT_THRESHOLD, MAX_ITERATIONS, check_loop_params
from pkmeans.core.reducer import Accumulator, ReductionResult
from pkmeans.data.points import PointSet
from pkmeans.exceptions import AllocationError
from pkmeans.metrics.timers import Timer

# Метка «ещё не назначена»: первое назначение всегда считается сменой кластера
UNASSIGNED = -1


class LoopState(str, Enum):
    RUNNING = "running"
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"


class KMeansBase(ABC):
    """
    Базовый класс для реализаций KMeans.

    Отвечает за цикл итераций, обновление центроидов и сбор таймингов:
    - T_назначения: время шага reduce_step (назначение + редукция);
    - T_обновления: время шага update_centroids;
    - T_итерации: сумма двух предыдущих.

    Остановка: доля точек, сменивших кластер (delta), не больше threshold,
    либо выполнено max_iters итераций.
    """

    def __init__(
        self,
        n_clusters: int,
        threshold: float = DEFAULT_THRESHOLD,
        max_iters: int = MAX_ITERATIONS,
        debug: bool = False,
        logger: Any | None = None,
    ):
        check_loop_params(n_clusters, threshold, max_iters)

        self.K = int(n_clusters)
        self.threshold = threshold
        self.max_iters = int(max_iters)
        self.debug = debug
        self.logger = logger

        self.centroids: np.ndarray | None = None
        self.membership: np.ndarray | None = None
        self.state: LoopState = LoopState.RUNNING

        self.delta: float = 1.0
        self.delta_history: List[float] = []

        # агрегированные тайминги за один вызов fit(...)
        self.t_assign_total: float = 0.0
        self.t_update_total: float = 0.0
        self.t_iter_total: float = 0.0
        # время каждой итерации (назначение + обновление)
        self.iteration_times: List[float] = []

        self._t_assign = Timer()
        self._t_update = Timer()

        self.n_iters_actual: int = 0

    def fit(self, X: Any) -> None:
        """
        Основной цикл KMeans.

        Начальные центроиды: первые K точек входа в исходном порядке
        (дубликаты допускаются). Метки инициализируются значением UNASSIGNED.
        """
        points = PointSet(X)
        X = points.X

        try:
            self.centroids = points.head(self.K)
            self.membership = np.full(points.num_objs, UNASSIGNED, dtype=np.int32)
        except MemoryError as e:
            raise AllocationError(
                f"Cannot allocate centroids/membership for N={points.num_objs}, "
                f"K={self.K}"
            ) from e

        self.state = LoopState.RUNNING
        self.delta = 1.0
        self.delta_history = []
        self.iteration_times = []
        self._t_assign.reset()
        self._t_update.reset()
        self.n_iters_actual = 0

        with Timer() as t_fit:
            while self.state is LoopState.RUNNING:
                with self._t_assign as t_assign:
                    step = self.reduce_step(X, self.centroids, self.membership)
                with self._t_update as t_update:
                    self.update_centroids(step.accumulator)

                self.iteration_times.append(t_assign.elapsed + t_update.elapsed)
                self.t_assign_total = t_assign.total
                self.t_update_total = t_update.total
                self.t_iter_total = t_assign.total + t_update.total

                self.n_iters_actual += 1
                self.delta = step.delta
                self.delta_history.append(step.delta)

                if step.delta <= self.threshold:
                    self.state = LoopState.CONVERGED
                elif self.n_iters_actual >= self.max_iters:
                    self.state = LoopState.MAX_ITERATIONS_REACHED

                self._log_iteration(step, t_assign.elapsed, t_update.elapsed)

        if self.logger and self.debug:
            self.logger.info(f"nloops = {self.n_iters_actual:2d} (T = {t_fit.elapsed:7.4f})")
        if self.logger and self.state is LoopState.MAX_ITERATIONS_REACHED:
            self.logger.warning(
                f"No convergence after {self.n_iters_actual} iterations "
                f"(delta={self.delta:.6f} > threshold={self.threshold})"
            )

    def _log_iteration(self, step: ReductionResult, t_assign: float, t_update: float) -> None:
        if not (self.logger and self.debug):
            return
        i = self.n_iters_actual
        done = self.state is not LoopState.RUNNING
        if i == 1 or i % 10 == 0 or done:
            status = f" ({self.state.value})" if done else ""
            self.logger.info(
                f"  Iteration {i}/{self.max_iters}{status} "
                f"(T_assign={t_assign:.6f}s, "
                f"T_update={t_update:.6f}s, "
                f"changed={step.changed}, delta={step.delta:.6f})"
            )

    def update_centroids(self, accumulator: Accumulator) -> np.ndarray:
        """
        Пересчёт центроидов по слитому аккумулятору.

        Центроид заменяется средним только если в кластере больше одной точки;
        при 0 или 1 точке остаётся прежним. Аккумулятор обнуляется.
        """
        counts = accumulator.counts
        sums = accumulator.sums

        moved = counts > 1
        self.centroids[moved] = sums[moved] / counts[moved, None].astype(sums.dtype)

        accumulator.reset()
        return self.centroids

    @abstractmethod
    def reduce_step(
        self, X: np.ndarray, centroids: np.ndarray, membership: np.ndarray
    ) -> ReductionResult:
        """Шаг назначения точек и редукции сумм по кластерам."""
        raise NotImplementedError
