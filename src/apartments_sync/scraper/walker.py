# scraper/walker.py
"""
Обход сетки проектов на странице каталога.
"""
import asyncio
from typing import Any, List, Optional

from apartments_sync.models.listing import ListingRecord, ProjectRef
from apartments_sync.utils.logger import get_logger
from . import locators
from .automation import AutomationSession, Found, TimedOut
from .errors import CatalogUnavailableError, ScrapeCancelledError, ProjectSkipped
from .modal import ModalTraversal
from .options import ScrapeConfig


class CatalogWalker:
    """
    Проходит все карточки проектов по порядку и собирает квартиры.

    Фатальна только пропавшая сетка проектов. Ошибка отдельного проекта
    или карточки логируется, обход продолжается.
    """

    def __init__(
        self,
        session: AutomationSession,
        config: ScrapeConfig,
        cancel_event: Optional[asyncio.Event] = None
    ):
        self.session = session
        self.config = config
        self.cancel_event = cancel_event
        self.modal = ModalTraversal(session, config)
        self.logger = get_logger("CatalogWalker")

    async def walk(self) -> List[ListingRecord]:
        """
        Собирает все квартиры каталога.

        Returns:
            Список записей в порядке обнаружения (проект, затем квартира).
            Пустой список — нормальный результат.

        Raises:
            CatalogUnavailableError: сетка проектов не появилась
            ScrapeCancelledError: запрошена отмена
        """
        await self.dismiss_consent()

        grid = await self.session.wait_for(locators.PROJECT_GRID, self.config.grid_timeout_ms)
        if isinstance(grid, TimedOut):
            raise CatalogUnavailableError(
                f"Project grid {grid.selector!r} did not appear within {grid.timeout_ms} ms"
            )
        self.logger.info("Сетка проектов найдена")

        total = len(await self.session.query_all(locators.PROJECT_CARD))
        self.logger.info(f"Найдено {total} карточек проектов")

        records: List[ListingRecord] = []
        for idx in range(total):
            self._check_cancelled()

            # Карточки запрашиваются заново: предыдущее окно могло перерисовать сетку
            project_cards = await self.session.query_all(locators.PROJECT_CARD)
            if idx >= len(project_cards):
                self.logger.warning(
                    f"Сетка сократилась до {len(project_cards)} карточек, обход остановлен"
                )
                break
            card = project_cards[idx]

            project = await self.read_project(card)
            if project is None:
                self.logger.warning(f"Карточка проекта #{idx + 1} пропущена: нет названия или ссылки")
                continue

            self.logger.info(f"Обработка проекта: {project.name} ({project.link})")
            try:
                project_records = await self.modal.traverse(card, project)
            except ProjectSkipped as e:
                self.logger.warning(f"Проект пропущен: {e}")
                continue
            except Exception as e:
                self.logger.error(f"Ошибка обработки проекта {project.name}: {e}")
                continue

            self.logger.info(f"Проект {project.name}: {len(project_records)} квартир")
            records.extend(project_records)

        self.logger.info(f"Всего найдено квартир: {len(records)}")
        return records

    async def dismiss_consent(self) -> bool:
        """Принимает cookies, если баннер появился. Отсутствие баннера — не ошибка."""
        button = await self.session.wait_for(
            locators.CONSENT_BUTTON, self.config.consent_timeout_ms, state="visible"
        )
        if not isinstance(button, Found):
            self.logger.info("Баннер cookies не найден или уже принят")
            return False

        try:
            await self.session.click(button.value)
        except Exception as e:
            self.logger.warning(f"Не удалось принять cookies: {e}")
            return False

        self.logger.info("Cookies приняты")
        await self.session.pause(self.config.consent_settle_ms)
        return True

    async def read_project(self, card: Any) -> Optional[ProjectRef]:
        """Название и ссылка проекта; None если чего-то нет."""
        try:
            name = await self.session.read_text(locators.PROJECT_NAME, card)
            link = await self.session.read_attribute(locators.PROJECT_LINK, "href", card)
        except Exception as e:
            self.logger.debug(f"Ошибка чтения карточки проекта: {e}")
            return None

        if not isinstance(name, Found) or not isinstance(link, Found) or not name.value:
            return None
        return ProjectRef(name=name.value, link=link.value)

    def _check_cancelled(self):
        if self.cancel_event is not None and self.cancel_event.is_set():
            self.logger.warning("Сбор отменён")
            raise ScrapeCancelledError("Scrape cancelled at project boundary")
