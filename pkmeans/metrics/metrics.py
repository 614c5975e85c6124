"""
Метрики производительности одного запуска кластеризации.
"""

from __future__ import annotations


def throughput(
    N: int, K: int, D: int, n_iters: int, total_time: float
) -> float:
    """
    Вычисляет пропускную способность алгоритма.

    Пропускная способность = (N × K × D × n_iters) / total_time,
    т.е. число вычисленных разностей координат в секунду.

    Args:
        N: Количество точек данных
        K: Количество кластеров
        D: Размерность пространства
        n_iters: Количество выполненных итераций
        total_time: Время кластеризации (секунды)

    Raises:
        ZeroDivisionError: Если total_time равно нулю
    """
    if total_time == 0:
        raise ZeroDivisionError("Total time cannot be zero")
    return (N * K * D * n_iters) / total_time
