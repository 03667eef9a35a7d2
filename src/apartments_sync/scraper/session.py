# scraper/session.py
"""
Жизненный цикл браузера для одного сбора.

Браузер запускается на входе и закрывается на любом пути выхода:
нормальное завершение, пропавшая сетка проектов, отмена или
непредвиденное исключение. Ошибка пробрасывается после закрытия.
"""
import asyncio
from typing import List, Optional

from playwright.async_api import async_playwright
from playwright_stealth import Stealth

from apartments_sync.config.settings import settings as default_settings, Settings
from apartments_sync.models.listing import ListingRecord
from apartments_sync.utils.logger import get_logger
from .automation import PlaywrightSession
from .options import ScrapeConfig
from .walker import CatalogWalker

BROWSER_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-accelerated-2d-canvas',
    '--disable-gpu',
    '--disable-blink-features=AutomationControlled',
    '--window-size=1920,1080',
]

VIEWPORT = {'width': 1920, 'height': 1080}


class ScrapeSession:
    """
    Асинхронный контекстный менеджер: Playwright -> Chromium -> страница каталога.

    Пример:
        async with ScrapeSession(config) as session:
            records = await CatalogWalker(session, config).walk()
    """

    def __init__(self, config: ScrapeConfig):
        self.config = config
        self.logger = get_logger("ScrapeSession")
        self._playwright = None
        self._browser = None

    async def __aenter__(self) -> PlaywrightSession:
        try:
            return await self._open()
        except BaseException:
            await self._teardown()
            raise

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.logger.error(f"Сбор прерван: {exc_type.__name__}: {exc_val}")
        await self._teardown()
        return False

    async def _open(self) -> PlaywrightSession:
        self._playwright = await async_playwright().start()

        launch_options = {'headless': self.config.headless, 'args': BROWSER_ARGS}
        if self.config.chrome_bin:
            launch_options['executable_path'] = self.config.chrome_bin
        self._browser = await self._playwright.chromium.launch(**launch_options)
        self.logger.info(
            f"Chromium запущен (headless={self.config.headless}, "
            f"executable={self.config.chrome_bin or 'bundled'})"
        )

        context = await self._browser.new_context(viewport=VIEWPORT)
        page = await context.new_page()

        if self.config.use_stealth:
            await Stealth().apply_stealth_async(page)
            self.logger.debug("Stealth-режим применён")

        session = PlaywrightSession(page)
        self.logger.info(f"Открываю {self.config.catalog_url}")
        await session.goto(self.config.catalog_url, self.config.page_timeout_ms)
        return session

    async def _teardown(self):
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as e:
                self.logger.warning(f"Ошибка закрытия браузера: {e}")
            self._browser = None
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                self.logger.warning(f"Ошибка остановки Playwright: {e}")
            self._playwright = None
        self.logger.info("Браузер закрыт")


async def run_scrape(
    settings: Optional[Settings] = None,
    cancel_event: Optional[asyncio.Event] = None,
    config: Optional[ScrapeConfig] = None
) -> List[ListingRecord]:
    """
    Полный сбор каталога: единственная операция запуска для планировщика и команд.

    Raises:
        CatalogUnavailableError: страница не отрисовала сетку проектов
        ScrapeCancelledError: сбор отменён
    """
    config = config or ScrapeConfig.from_settings(settings or default_settings)
    async with ScrapeSession(config) as session:
        return await CatalogWalker(session, config, cancel_event).walk()


def collect_listings(settings: Optional[Settings] = None) -> List[ListingRecord]:
    """Синхронная обёртка над асинхронным сбором."""
    return asyncio.run(run_scrape(settings))
