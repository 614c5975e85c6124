import logging
from typing import Tuple


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """
    Создаёт и настраивает корневой логгер проекта ``pkmeans``.

    :param level: минимальный уровень логирования
    :return: настроенный экземпляр :class:`logging.Logger`
    """
    logger = logging.getLogger("pkmeans")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Чтобы сообщения не дублировались через root-логгер
    logger.propagate = False

    return logger


def format_run_prefix(shape: Tuple[int, int], n_clusters: int) -> str:
    """
    Формирует текстовый префикс для логов по форме набора точек.

    :param shape: ``(numObjs, numCoords)``
    :param n_clusters: число кластеров
    """
    n_objs, n_coords = shape
    return f"[N={n_objs} D={n_coords} K={n_clusters}]"
