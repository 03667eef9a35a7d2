"""
Сервис для работы с базой данных.
Объединяет репозитории и инициализирует БД.
"""
from pathlib import Path

from apartments_sync.config.settings import settings
from apartments_sync.repositories.listing_repo import ListingRepository
from apartments_sync.utils.logger import get_logger


class DatabaseService:
    """
    Единая точка доступа к базе данных.
    Содержит репозитории и управляет инициализацией.
    """

    def __init__(self, db_path: str = None):
        """
        Args:
            db_path: Путь к БД. Если не указан, берётся из settings.
        """
        self.db_path = db_path or settings.database_path
        self.logger = get_logger("DatabaseService")

        self.listings = ListingRepository(self.db_path)

        self.logger.debug(f"DatabaseService инициализирован: {self.db_path}")

    def init_database(self) -> bool:
        """
        Создаёт все таблицы в БД.

        Returns:
            True если успешно
        """
        self.logger.info("Инициализация базы данных...")

        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        success = self.listings.create_table()

        if success:
            self.logger.info("База данных инициализирована успешно")
        else:
            self.logger.error("Ошибка инициализации базы данных")

        return success

    def get_statistics(self) -> dict:
        """Возвращает статистику по БД."""
        projects = self.listings.get_projects()
        return {
            "listings_count": self.listings.count(),
            "projects_count": len(projects),
            "projects": projects,
            "last_synced_at": self.listings.last_synced_at(),
        }
