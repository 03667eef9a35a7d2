"""
Pipeline — оркестратор: БД, синхронизация каталога и выборки из снимка.
"""
from typing import List, Optional

from apartments_sync.config.settings import settings as default_settings, Settings
from apartments_sync.models.listing import ListingRecord, ListingFilter, ListingSort
from apartments_sync.models.sync_result import SyncResult
from apartments_sync.services.database_service import DatabaseService
from apartments_sync.services.sync_service import SyncService
from apartments_sync.utils.logger import get_logger


class Pipeline:
    """
    Точка входа для CLI и API.

    Стадии:
    1. Сбор каталога (Playwright)
    2. Замена снимка в БД
    3. Выборки для фронтенда
    """

    def __init__(self, db_path: str = None, settings: Settings = None, scrape=None):
        """
        Args:
            db_path: Путь к БД. Если не указан, берётся из settings.
            settings: Настройки; по умолчанию глобальные.
            scrape: Функция сбора (подменяется в тестах).
        """
        self.logger = get_logger("Pipeline")
        self.settings = settings or default_settings

        self.db = DatabaseService(db_path or self.settings.database_path)

        sync_kwargs = {"settings": self.settings}
        if scrape is not None:
            sync_kwargs["scrape"] = scrape
        self.sync = SyncService(self.db.listings, **sync_kwargs)

        self.logger.info("Pipeline инициализирован")

    def init_database(self) -> bool:
        """Инициализирует базу данных."""
        return self.db.init_database()

    async def run_sync(self) -> SyncResult:
        """Сбор + замена снимка (асинхронно, для API и планировщика)."""
        return await self.sync.run_sync()

    def run_sync_blocking(self) -> SyncResult:
        """Сбор + замена снимка (для CLI)."""
        return self.sync.run_sync_blocking()

    def query(
        self,
        rooms_count: Optional[int] = None,
        project_name: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc"
    ) -> List[ListingRecord]:
        """
        Выборка из снимка.

        Raises:
            ValueError: неизвестное поле или направление сортировки
        """
        return self.db.listings.query(
            ListingFilter(rooms_count=rooms_count, project_name=project_name),
            ListingSort(sort_by=sort_by, sort_order=sort_order)
        )

    def get_projects(self) -> List[str]:
        return self.db.listings.get_projects()

    def get_statistics(self) -> dict:
        """Возвращает статистику по снимку и последнему запуску."""
        stats = self.db.get_statistics()
        last = self.sync.last_result
        stats["last_sync"] = last.to_dict() if last else None
        stats["sync_running"] = self.sync.is_running
        return stats
