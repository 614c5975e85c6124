"""
Генератор синтетических наборов точек.

Использует sklearn.make_blobs и сохраняет данные в текстовом или бинарном
формате, понятном pkmeans.data.io.file_read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from sklearn.datasets import make_blobs

from pkmeans.data.io import write_binary

logger = logging.getLogger(__name__)


@dataclass
class BlobsConfig:
    """Конфигурация параметров синтетического набора."""

    N: int
    D: int
    K: int
    cluster_std: float = 1.0
    center_box_range: tuple[float, float] = (-10.0, 10.0)
    seed: int = 42


def generate_blobs(config: BlobsConfig) -> tuple[np.ndarray, np.ndarray]:
    """
    Генерация набора точек с помощью make_blobs.

    Returns:
        Кортеж (data, labels):
        - data: массив float32 (N x D)
        - labels: истинные метки кластеров (N,)
    """
    logger.info(
        f"Generating blobs: N={config.N:,}, D={config.D}, K={config.K}, "
        f"cluster_std={config.cluster_std:.2f}, seed={config.seed}"
    )
    data, labels = make_blobs(
        n_samples=config.N,
        n_features=config.D,
        centers=config.K,
        cluster_std=config.cluster_std,
        center_box=config.center_box_range,
        random_state=config.seed,
    )
    return data.astype(np.float32), labels.astype(np.int32)


def save_dataset_txt(data: np.ndarray, filepath: str | Path) -> Path:
    """
    Сохранение точек в текстовом формате: ``<index> c1 c2 ...`` на строку.
    """
    filepath = Path(filepath)
    with open(filepath, "w", encoding="utf-8") as f:
        for i, row in enumerate(data):
            coords = " ".join(f"{float(v):.6f}" for v in row)
            f.write(f"{i} {coords}\n")
    logger.info(f"Saved {len(data)} points to {filepath}")
    return filepath


def save_dataset_bin(data: np.ndarray, filepath: str | Path) -> Path:
    """Сохранение точек в бинарном формате."""
    filepath = write_binary(filepath, data)
    logger.info(f"Saved {len(data)} points to {filepath} (binary)")
    return filepath
