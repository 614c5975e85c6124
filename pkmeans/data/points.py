"""
Представление набора точек для кластеризации.

Точки хранятся как матрица (numObjs, numCoords) с фиксированной шириной
строки, поэтому несовпадение размерностей обнаруживается на входе, а не
при обходе буфера.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from pkmeans.exceptions import ConfigurationError


class PointSet:
    """
    Индексируемый контейнер точек одинаковой длины.

    Args:
        data: двумерный массив или последовательность строк координат
        dtype: тип с плавающей точкой; по умолчанию сохраняется тип входа
            (float32 остаётся float32), целые приводятся к float64
    """

    def __init__(self, data: Any, dtype: np.dtype | None = None) -> None:
        self.X = _as_matrix(data, dtype)

    @property
    def num_objs(self) -> int:
        return int(self.X.shape[0])

    @property
    def num_coords(self) -> int:
        return int(self.X.shape[1])

    @property
    def shape(self) -> tuple[int, int]:
        return self.num_objs, self.num_coords

    @property
    def dtype(self) -> np.dtype:
        return self.X.dtype

    def __len__(self) -> int:
        return self.num_objs

    def __getitem__(self, idx: Any) -> np.ndarray:
        return self.X[idx]

    def head(self, k: int) -> np.ndarray:
        """Копия первых k точек в исходном порядке."""
        if k > self.num_objs:
            raise ConfigurationError(
                f"Need at least {k} points to seed {k} clusters, "
                f"got {self.num_objs}"
            )
        return self.X[:k].copy()


def _as_matrix(data: Any, dtype: np.dtype | None) -> np.ndarray:
    if isinstance(data, PointSet):
        data = data.X

    if not isinstance(data, np.ndarray):
        rows: Sequence[Any] = list(data)
        if not rows:
            raise ConfigurationError("Point set is empty")
        if any(np.ndim(r) != 1 for r in rows):
            raise ConfigurationError(
                "Each point must be a flat sequence of coordinates"
            )
        widths = {len(r) for r in rows}
        if len(widths) > 1:
            raise ConfigurationError(
                f"All points must have the same number of coordinates, "
                f"got lengths {sorted(widths)}"
            )
        data = np.asarray(rows)

    if data.ndim != 2:
        raise ConfigurationError(
            f"Points must form a 2-D array (numObjs, numCoords), got ndim={data.ndim}"
        )
    if data.shape[0] == 0:
        raise ConfigurationError("Point set is empty")
    if data.shape[1] == 0:
        raise ConfigurationError("Points must have at least one coordinate")

    if dtype is None:
        dtype = data.dtype if np.issubdtype(data.dtype, np.floating) else np.float64
    elif not np.issubdtype(np.dtype(dtype), np.floating):
        raise ConfigurationError(f"dtype must be a floating type, got {dtype}")

    return np.ascontiguousarray(data, dtype=dtype)
