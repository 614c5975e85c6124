from __future__ import annotations

import numpy as np

from pkmeans.exceptions import ConfigurationError


def euclid_dist_2(a: np.ndarray, b: np.ndarray) -> float:
    """
    Квадрат евклидова расстояния между двумя точками.

    Корень не извлекается: для выбора ближайшего центроида важен только
    порядок расстояний.
    """
    a = np.asarray(a)
    b = np.asarray(b)
    if a.shape != b.shape:
        raise ConfigurationError(
            f"Points must have equal length, got {a.shape} and {b.shape}"
        )
    diff = a - b
    return float(np.dot(diff, diff))


def squared_distances(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Квадраты расстояний блока точек до всех центроидов: (M, D) x (K, D) → (M, K)."""
    diff = points[:, None, :] - centroids[None, :, :]
    return np.einsum("mkd,mkd->mk", diff, diff, optimize=True)


def find_nearest_cluster(point: np.ndarray, centroids: np.ndarray) -> int:
    """
    Индекс центроида, ближайшего к точке.

    При равных расстояниях побеждает центроид с меньшим индексом
    (argmin возвращает первое вхождение минимума).
    """
    point = np.asarray(point)
    centroids = np.asarray(centroids)
    if point.ndim != 1 or centroids.ndim != 2 or centroids.shape[1] != point.shape[0]:
        raise ConfigurationError(
            f"Point of shape {point.shape} does not match centroids {centroids.shape}"
        )
    return int(np.argmin(squared_distances(point[None, :], centroids)[0]))


def find_nearest_clusters(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Ближайший центроид для каждой строки блока, правило выбора то же."""
    # (M, K) → (M,)
    return np.argmin(squared_distances(points, centroids), axis=1).astype(
        np.int32, copy=False
    )
