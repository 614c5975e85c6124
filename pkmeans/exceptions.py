"""
Исключения пакета pkmeans.

Ошибки конфигурации и нехватки памяти поднимаются синхронно вызывающему коду,
внутри цикла кластеризации ничего не перехватывается и не повторяется.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Некорректные параметры запуска или входные данные."""


class AllocationError(MemoryError):
    """Не удалось выделить буферы центроидов, аккумуляторов или меток."""
