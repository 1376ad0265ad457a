import logging
from typing import Any, Dict


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """
    Создаёт и настраивает логгер пакета ``kpartition``.

    :param level: минимальный уровень логирования
    :return: настроенный экземпляр :class:`logging.Logger`
    """
    logger = logging.getLogger("kpartition")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(levelname)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        logger.addHandler(handler)

    # без дублирования через root-логгер
    logger.propagate = False

    return logger


def format_dataset_prefix(meta: Dict[str, Any]) -> str:
    """
    Префикс для логов по метаданным датасета (``N``, ``D`` и опционально
    ``K`` и ``purpose``).
    """
    return (
        f"[N={meta['N']} D={meta['D']} K={meta.get('K', '?')} "
        f"purpose={meta.get('purpose', 'base')}]"
    )
