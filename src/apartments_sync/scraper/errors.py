# scraper/errors.py
"""
Ошибки сбора объявлений.
"""


class ScrapeError(Exception):
    """Базовая ошибка сбора."""


class CatalogUnavailableError(ScrapeError):
    """Сетка проектов не появилась: сайт недоступен, заблокирован или переверстан."""


class ScrapeCancelledError(ScrapeError):
    """Сбор остановлен по запросу отмены."""


class ProjectSkipped(ScrapeError):
    """Проект пропущен целиком: модальное окно или карточки не появились."""

    def __init__(self, project_name: str, reason: str):
        super().__init__(f"{project_name}: {reason}")
        self.project_name = project_name
        self.reason = reason
