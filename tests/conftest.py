"""
Общие фикстуры для всех тестов.
"""

import numpy as np
import pytest


@pytest.fixture
def small_dataset():
    """Фикстура с небольшим тестовым датасетом (2D, 2 кластера)."""
    np.random.seed(42)
    # Два явно разделённых кластера, перемешанных так, что первые две точки
    # (начальные центроиды) лежат в разных кластерах
    cluster1 = np.random.randn(30, 2) + [0, 0]
    cluster2 = np.random.randn(30, 2) + [20, 20]
    X = np.empty((60, 2))
    X[0::2] = cluster1
    X[1::2] = cluster2
    return X


@pytest.fixture
def medium_dataset():
    """Фикстура со средним тестовым датасетом (10D, 3 кластера, N > чанка)."""
    np.random.seed(42)
    cluster1 = np.random.randn(700, 10) + [0] * 10
    cluster2 = np.random.randn(700, 10) + [8] * 10
    cluster3 = np.random.randn(700, 10) + [-8] * 10
    X = np.vstack([cluster1, cluster2, cluster3])
    return X[np.random.permutation(len(X))]


@pytest.fixture
def four_points():
    """Четыре 2D точки: две пары, далеко разнесённые."""
    return np.array([
        [0.0, 0.0],
        [1.0, 0.0],
        [10.0, 10.0],
        [11.0, 10.0],
    ])


@pytest.fixture
def identical_points():
    """Пять копий одной точки."""
    return np.full((5, 2), 3.0)
