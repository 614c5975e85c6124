from __future__ import annotations

from dataclasses import dataclass
from multiprocessing import cpu_count
from typing import Optional

from pkmeans.exceptions import ConfigurationError

DEFAULT_THRESHOLD = 0.001
DEFAULT_CHUNK_SIZE = 500
MAX_ITERATIONS = 500


def check_loop_params(n_clusters: int, threshold: float, max_iters: int) -> None:
    """Проверка параметров цикла сходимости; общая для конфига и моделей."""
    if int(n_clusters) <= 1:
        raise ConfigurationError(f"n_clusters must be > 1, got {n_clusters}")
    # NaN тоже не проходит
    if not threshold >= 0.0:
        raise ConfigurationError(f"threshold must be non-negative, got {threshold}")
    if int(max_iters) <= 0:
        raise ConfigurationError(f"max_iters must be positive, got {max_iters}")


def check_pool_params(n_threads: Optional[int], chunk_size: int) -> None:
    if n_threads is not None and int(n_threads) <= 0:
        raise ConfigurationError(f"n_threads must be positive, got {n_threads}")
    if int(chunk_size) <= 0:
        raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")


@dataclass(frozen=True)
class KMeansConfig:
    """
    Параметры одного запуска кластеризации.

    n_threads=None означает «сколько ядер видит платформа»; debug заменяет
    глобальный флаг отладки и включает журнал итераций.
    """

    n_clusters: int
    threshold: float = DEFAULT_THRESHOLD
    n_threads: Optional[int] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE
    max_iters: int = MAX_ITERATIONS
    debug: bool = False

    def __post_init__(self) -> None:
        check_loop_params(self.n_clusters, self.threshold, self.max_iters)
        check_pool_params(self.n_threads, self.chunk_size)

    def resolved_threads(self) -> int:
        """Фактическое число потоков пула."""
        if self.n_threads is None:
            return max(1, cpu_count())
        return int(self.n_threads)
