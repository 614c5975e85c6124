"""
Чтение наборов точек и запись результатов кластеризации.

Поддерживаются два входных формата:

- текстовый: одна точка на строку, первый токен с идентификатором
  объекта игнорируется, далее numCoords координат; пустые строки и строки,
  начинающиеся с ``#``, пропускаются;
- бинарный: ``int32 numObjs``, ``int32 numCoords``, затем
  ``numObjs * numCoords`` значений ``float32`` построчно (порядок байт
  платформы).

Результат записывается в два файла рядом со входным:
``<file>.cluster_centres`` и ``<file>.membership``.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from pkmeans.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CENTRES_SUFFIX = ".cluster_centres"
MEMBERSHIP_SUFFIX = ".membership"

_HEADER_DTYPE = np.int32
_COORD_DTYPE = np.float32


def file_read(path: str | Path, binary: bool = False) -> np.ndarray:
    """
    Загружает набор точек из файла.

    Args:
        path: Путь к файлу с данными
        binary: True для бинарного формата

    Returns:
        Массив float32 формы (numObjs, numCoords)

    Raises:
        ConfigurationError: Если файл пуст или строки разной длины
        OSError: Если файл не удалось открыть
    """
    path = Path(path)
    logger.info(f"Loading points from {path}")

    if binary:
        X = _read_binary(path)
    else:
        X = _read_text(path)

    logger.info(f"Points loaded: numObjs={X.shape[0]}, numCoords={X.shape[1]}")
    return X


def _read_text(path: Path) -> np.ndarray:
    rows: list[list[str]] = []
    n_coords: int | None = None

    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            parts = line.split()[1:]
            if n_coords is None:
                n_coords = len(parts)
            if len(parts) != n_coords or n_coords == 0:
                raise ConfigurationError(
                    f"{path}:{lineno}: expected {n_coords} coordinates, "
                    f"got {len(parts)}"
                )
            rows.append(parts)

    if not rows:
        raise ConfigurationError(f"{path}: no points found")

    try:
        return np.array(rows, dtype=_COORD_DTYPE)
    except ValueError as e:
        raise ConfigurationError(f"{path}: malformed coordinate value ({e})") from e


def _read_binary(path: Path) -> np.ndarray:
    with open(path, "rb") as f:
        header = np.fromfile(f, dtype=_HEADER_DTYPE, count=2)
        if header.size != 2:
            raise ConfigurationError(f"{path}: truncated header")

        n_objs, n_coords = (int(v) for v in header)
        if n_objs <= 0 or n_coords <= 0:
            raise ConfigurationError(
                f"{path}: invalid header numObjs={n_objs}, numCoords={n_coords}"
            )

        values = np.fromfile(f, dtype=_COORD_DTYPE, count=n_objs * n_coords)

    if values.size != n_objs * n_coords:
        raise ConfigurationError(
            f"{path}: expected {n_objs * n_coords} values, got {values.size}"
        )
    return values.reshape(n_objs, n_coords)


def write_binary(path: str | Path, X: np.ndarray) -> Path:
    """Сохраняет точки в бинарном формате, который читает file_read(binary=True)."""
    path = Path(path)
    X = np.ascontiguousarray(X, dtype=_COORD_DTYPE)
    with open(path, "wb") as f:
        np.array(X.shape, dtype=_HEADER_DTYPE).tofile(f)
        X.tofile(f)
    return path


def file_write(
    path: str | Path,
    centroids: np.ndarray,
    membership: np.ndarray,
) -> tuple[Path, Path]:
    """
    Записывает центроиды и метки кластеров.

    Формат ``.cluster_centres``: ``<id> c1 c2 ...`` на каждый кластер.
    Формат ``.membership``: ``<index> <cluster id>`` на каждую точку.

    Returns:
        Пути к двум записанным файлам
    """
    path = Path(path)
    centres_path = path.with_name(path.name + CENTRES_SUFFIX)
    membership_path = path.with_name(path.name + MEMBERSHIP_SUFFIX)

    logger.info(f"Writing coordinates of {len(centroids)} cluster centres to {centres_path}")
    with open(centres_path, "w", encoding="utf-8") as f:
        for i, centre in enumerate(centroids):
            coords = " ".join(f"{float(c):f}" for c in centre)
            f.write(f"{i} {coords}\n")

    logger.info(f"Writing membership of {len(membership)} points to {membership_path}")
    with open(membership_path, "w", encoding="utf-8") as f:
        for i, cluster_id in enumerate(membership):
            f.write(f"{i} {int(cluster_id)}\n")

    return centres_path, membership_path
