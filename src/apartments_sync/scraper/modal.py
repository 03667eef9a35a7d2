# scraper/modal.py
"""
Обход модального окна проекта.

Список квартир в окне подгружается лениво по позиции прокрутки:
без прокрутки до конца в документе оказывается лишь часть карточек.
"""
from enum import Enum
from typing import Any, List

from apartments_sync.models.listing import ListingRecord, ProjectRef
from apartments_sync.utils.logger import get_logger
from . import locators
from .automation import AutomationSession, Found, TimedOut
from .errors import ProjectSkipped
from .extractor import extract_items
from .options import ScrapeConfig

SCROLL_HEIGHT_JS = """(selector) => {
    const el = document.querySelector(selector);
    return el ? el.scrollHeight : null;
}"""

SCROLL_TO_JS = """([selector, top]) => {
    const el = document.querySelector(selector);
    if (el) { el.scrollTop = top; }
}"""

SCROLL_TO_END_JS = """(selector) => {
    const el = document.querySelector(selector);
    if (el) { el.scrollTop = el.scrollHeight; }
}"""


class ModalState(Enum):
    IDLE = "idle"
    BUTTON_CLICKED = "button_clicked"
    MODAL_OPEN = "modal_open"
    SCROLL_LOADING = "scroll_loading"
    CARDS_VISIBLE = "cards_visible"
    EXTRACTING = "extracting"
    MODAL_CLOSING = "modal_closing"
    CLOSED = "closed"


class ModalTraversal:
    """
    Открывает окно проекта, прокручивает его, собирает квартиры и закрывает.

    Таймаут открытия окна или появления карточек — ProjectSkipped,
    который ловит CatalogWalker. Окно закрывается на любом пути выхода
    после открытия; ошибка закрытия только логируется.
    """

    def __init__(self, session: AutomationSession, config: ScrapeConfig):
        self.session = session
        self.config = config
        self.state = ModalState.IDLE
        self.logger = get_logger("ModalTraversal")

    def _enter(self, state: ModalState, project: ProjectRef):
        self.logger.debug(f"[{project.name}] {self.state.value} -> {state.value}")
        self.state = state

    async def traverse(self, card: Any, project: ProjectRef) -> List[ListingRecord]:
        """Собирает квартиры одного проекта."""
        self.state = ModalState.IDLE

        button = await self.session.query_one(locators.PROJECT_OPEN_BUTTON, card)
        if not isinstance(button, Found):
            self.logger.info(f"У проекта {project.name} нет кнопки списка квартир")
            return []

        await self.session.click(button.value)
        self._enter(ModalState.BUTTON_CLICKED, project)

        overlay = await self.session.wait_for(locators.DIALOG_OVERLAY, self.config.modal_timeout_ms)
        if isinstance(overlay, TimedOut):
            raise ProjectSkipped(
                project.name, f"dialog did not open within {overlay.timeout_ms} ms"
            )
        self._enter(ModalState.MODAL_OPEN, project)

        try:
            self._enter(ModalState.SCROLL_LOADING, project)
            await self._scroll_to_bottom()

            visible = await self.session.wait_for(locators.ITEM_CARD, self.config.cards_timeout_ms)
            if isinstance(visible, TimedOut):
                raise ProjectSkipped(
                    project.name, f"no item cards within {visible.timeout_ms} ms"
                )
            self._enter(ModalState.CARDS_VISIBLE, project)

            item_cards = await self.session.query_all(locators.ITEM_CARD)
            self.logger.info(f"Найдено {len(item_cards)} квартир в проекте {project.name}")

            self._enter(ModalState.EXTRACTING, project)
            records = await extract_items(self.session, item_cards, project)
        finally:
            await self._close(project)

        return records

    async def _scroll_to_bottom(self):
        """
        Прокручивает контент окна шагами scroll_step_px с паузой scroll_pause_ms,
        перечитывая высоту после каждого шага, затем до упора.
        """
        content = locators.DIALOG_CONTENT
        height = await self.session.evaluate(SCROLL_HEIGHT_JS, content)
        if height is None:
            self.logger.debug("Контент окна не найден, прокрутка пропущена")
            return

        offset = 0
        steps = 0
        while offset < height and steps < self.config.scroll_max_steps:
            await self.session.evaluate(SCROLL_TO_JS, [content, offset])
            await self.session.pause(self.config.scroll_pause_ms)
            offset += self.config.scroll_step_px
            steps += 1
            height = await self.session.evaluate(SCROLL_HEIGHT_JS, content) or 0

        if steps >= self.config.scroll_max_steps:
            self.logger.warning(f"Прокрутка остановлена на лимите {steps} шагов")

        await self.session.evaluate(SCROLL_TO_END_JS, content)
        self.logger.debug(f"Прокрутка завершена: {steps} шагов, высота {height}")

    async def _close(self, project: ProjectRef):
        """Клик вне контента окна, при неудаче — Escape."""
        self._enter(ModalState.MODAL_CLOSING, project)
        try:
            overlay = await self.session.query_one(locators.DIALOG_OVERLAY)
            if isinstance(overlay, Found):
                await self.session.click(overlay.value, offset=(0, 0))
                hidden = await self.session.wait_for(
                    locators.DIALOG_OVERLAY, self.config.close_timeout_ms, state="hidden"
                )
                if isinstance(hidden, TimedOut):
                    self.logger.warning(f"Окно {project.name} не закрылось кликом, пробую Escape")
                    await self.session.press("Escape")
                    hidden = await self.session.wait_for(
                        locators.DIALOG_OVERLAY, self.config.close_timeout_ms, state="hidden"
                    )
                if isinstance(hidden, TimedOut):
                    self.logger.error(f"Окно {project.name} не закрылось")
                else:
                    self.logger.debug(f"Окно {project.name} закрыто")
        except Exception as e:
            self.logger.error(f"Ошибка закрытия окна {project.name}: {e}")
        self._enter(ModalState.CLOSED, project)
