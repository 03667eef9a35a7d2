"""
Сервис синхронизации каталога.

Один запуск = полный сбор + полная замена снимка. Одновременно
выполняется не больше одного запуска: ручной триггер во время
планового получает SyncInProgressError, а не второй браузер.
"""
import asyncio
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

from apartments_sync.config.settings import settings as default_settings, Settings
from apartments_sync.models.listing import ListingRecord
from apartments_sync.models.sync_result import SyncResult
from apartments_sync.repositories.listing_repo import ListingRepository
from apartments_sync.scraper.errors import ScrapeError
from apartments_sync.scraper.session import run_scrape
from apartments_sync.utils.logger import get_logger

ScrapeFunc = Callable[[Settings, Optional[asyncio.Event]], Awaitable[List[ListingRecord]]]


class SyncInProgressError(RuntimeError):
    """Синхронизация уже выполняется."""


class SyncService:
    """
    Сервис синхронизации.
    Оборачивает сбор каталога и замену снимка в БД.
    """

    def __init__(
        self,
        listing_repo: ListingRepository,
        scrape: ScrapeFunc = run_scrape,
        settings: Settings = None
    ):
        self.repo = listing_repo
        self.scrape = scrape
        self.settings = settings or default_settings
        self.logger = get_logger("SyncService")
        self.last_result: Optional[SyncResult] = None
        self._lock = asyncio.Lock()
        self._cancel_event: Optional[asyncio.Event] = None

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def run_sync(self) -> SyncResult:
        """
        Собирает каталог и заменяет снимок.

        Raises:
            SyncInProgressError: другой запуск ещё не завершён
        """
        if self._lock.locked():
            raise SyncInProgressError("Sync is already running")

        async with self._lock:
            self._cancel_event = asyncio.Event()
            try:
                result = await self._sync(self._cancel_event)
            finally:
                self._cancel_event = None
            self.last_result = result
            return result

    def cancel(self) -> bool:
        """Просит текущий запуск остановиться на границе проекта."""
        if self._cancel_event is None:
            return False
        self._cancel_event.set()
        self.logger.info("Запрошена отмена синхронизации")
        return True

    async def _sync(self, cancel_event: asyncio.Event) -> SyncResult:
        result = SyncResult(success=False, message="")
        self.logger.info("Запуск синхронизации...")

        try:
            records = await self.scrape(self.settings, cancel_event)
        except ScrapeError as e:
            self.logger.error(f"Сбор не выполнен: {e}")
            return self._finish(result, False, f"sync failed: {e}", error=str(e))
        except Exception as e:
            self.logger.exception(f"Непредвиденная ошибка сбора: {e}")
            return self._finish(result, False, f"sync failed: {e}", error=str(e))

        result.records_found = len(records)
        self.logger.info(f"Собрано {len(records)} квартир")

        if not records and not self.settings.replace_on_empty:
            self.logger.warning("Квартиры не найдены, текущий снимок оставлен без изменений")
            return self._finish(result, True, "no listings found")

        # Запись в SQLite блокирующая: выполняется вне цикла событий
        saved = await asyncio.to_thread(self.repo.replace_all, records)
        if not saved:
            return self._finish(
                result, False, "error saving listings", error="replace_all failed"
            )

        result.records_saved = len(records)
        if not records:
            return self._finish(result, True, "no listings found")
        return self._finish(result, True, f"saved {len(records)} listings")

    def _finish(self, result: SyncResult, success: bool, message: str, error: str = None) -> SyncResult:
        result.success = success
        result.message = message
        result.error = error
        result.finished_at = datetime.now().isoformat()
        self.logger.info(str(result))
        return result

    def run_sync_blocking(self) -> SyncResult:
        """Синхронная обёртка для CLI."""
        return asyncio.run(self.run_sync())
