"""
Настройка логирования для проекта.
"""
import logging
import sys
from pathlib import Path

ROOT_LOGGER_NAME = "apartments_sync"


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: int = logging.INFO,
    log_file: Path = None
) -> logging.Logger:
    """
    Создаёт и настраивает логгер.

    Args:
        name: Имя логгера
        level: Уровень логирования
        log_file: Путь к файлу лога (опционально)

    Returns:
        Настроенный логгер
    """
    logger = logging.getLogger(name)

    # Повторный вызов (например, с --verbose) только меняет уровень
    if logger.handlers:
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Получает логгер по имени.
    Если корневой логгер проекта не настроен — настраивает его по умолчанию.
    """
    full_name = f"{ROOT_LOGGER_NAME}.{name}" if name else ROOT_LOGGER_NAME
    logger = logging.getLogger(full_name)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        setup_logger()

    return logger
