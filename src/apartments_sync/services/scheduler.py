"""
Периодический запуск синхронизации.
"""
import asyncio
from typing import Optional

from apartments_sync.utils.logger import get_logger
from .sync_service import SyncService, SyncInProgressError


class SyncScheduler:
    """Фоновая задача: синхронизация каждые interval_s секунд."""

    def __init__(self, sync_service: SyncService, interval_s: int):
        self.sync_service = sync_service
        self.interval_s = interval_s
        self.logger = get_logger("SyncScheduler")
        self._task: Optional[asyncio.Task] = None

    @property
    def enabled(self) -> bool:
        return self.interval_s > 0

    def start(self) -> bool:
        if not self.enabled:
            self.logger.info("Плановая синхронизация отключена")
            return False
        self._task = asyncio.create_task(self._loop())
        self.logger.info(f"Плановая синхронизация каждые {self.interval_s} с")
        return True

    async def stop(self):
        if self._task is None:
            return
        self.sync_service.cancel()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self.logger.info("Планировщик остановлен")

    async def _loop(self):
        # Первый запуск сразу при старте, дальше раз в interval_s
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval_s)

    async def run_once(self):
        """Один плановый запуск; ошибки логируются, цикл продолжается."""
        self.logger.info("Плановая синхронизация...")
        try:
            result = await self.sync_service.run_sync()
        except SyncInProgressError:
            self.logger.info("Синхронизация уже идёт, плановый запуск пропущен")
            return None
        except Exception as e:
            self.logger.exception(f"Ошибка плановой синхронизации: {e}")
            return None
        self.logger.info(f"Плановая синхронизация завершена: {result.message}")
        return result
