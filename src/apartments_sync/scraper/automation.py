# scraper/automation.py
"""
Узкий интерфейс к отрендеренной странице.

Каталог рендерится на клиенте, поэтому страница — внешний источник данных
без версии. Код сбора обращается к ней только через AutomationSession:
найти, подождать, кликнуть, прочитать текст/атрибут, выполнить скрипт.
Результаты поиска — явные значения Found / NotFound / TimedOut.
"""
import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, Tuple, TypeVar, Union

from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

T = TypeVar('T')


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    selector: str


@dataclass(frozen=True)
class TimedOut:
    selector: str
    timeout_ms: int


Lookup = Union[Found, NotFound, TimedOut]


class AutomationSession(ABC):
    """
    Операции над живой страницей.

    Handle — непрозрачная ссылка на элемент. Handle не переживают ожидания:
    после каждого wait_for элементы запрашиваются заново.
    """

    @abstractmethod
    async def query_one(self, selector: str, root: Any = None) -> Union[Found, NotFound]:
        """Первый элемент по селектору внутри root (или документа)."""

    @abstractmethod
    async def query_all(self, selector: str, root: Any = None) -> List[Any]:
        """Все элементы по селектору в порядке документа."""

    @abstractmethod
    async def wait_for(
        self,
        selector: str,
        timeout_ms: int,
        state: str = "attached"
    ) -> Union[Found, TimedOut]:
        """
        Ждёт состояния элемента: attached / visible / hidden.
        Для hidden значение Found — None.
        """

    @abstractmethod
    async def click(self, handle: Any, offset: Optional[Tuple[int, int]] = None) -> None:
        """Клик по элементу; offset — точка относительно его левого верхнего угла."""

    @abstractmethod
    async def press(self, key: str) -> None:
        """Нажатие клавиши на странице."""

    @abstractmethod
    async def text_of(self, handle: Any) -> Optional[str]:
        """textContent элемента."""

    @abstractmethod
    async def attribute_of(self, handle: Any, name: str) -> Optional[str]:
        """Значение атрибута элемента."""

    @abstractmethod
    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """Выполняет JS-функцию на странице."""

    @abstractmethod
    async def pause(self, ms: int) -> None:
        """Кооперативная пауза."""

    async def read_text(self, selector: str, root: Any = None) -> Union[Found, NotFound]:
        """Обрезанный текст первого элемента по селектору."""
        lookup = await self.query_one(selector, root)
        if not isinstance(lookup, Found):
            return lookup
        return Found((await self.text_of(lookup.value) or "").strip())

    async def read_attribute(
        self,
        selector: str,
        name: str,
        root: Any = None
    ) -> Union[Found, NotFound]:
        """Атрибут первого элемента по селектору; отсутствующий атрибут -> ""."""
        lookup = await self.query_one(selector, root)
        if not isinstance(lookup, Found):
            return lookup
        return Found(await self.attribute_of(lookup.value, name) or "")

    async def read_all_texts(self, selector: str, root: Any = None) -> List[str]:
        """Обрезанные тексты всех элементов по селектору."""
        texts = []
        for handle in await self.query_all(selector, root):
            texts.append((await self.text_of(handle) or "").strip())
        return texts


class PlaywrightSession(AutomationSession):
    """AutomationSession поверх страницы Playwright."""

    def __init__(self, page: Page):
        self.page = page

    async def goto(self, url: str, timeout_ms: int) -> None:
        await self.page.goto(url, wait_until="networkidle", timeout=timeout_ms)

    async def query_one(self, selector, root=None):
        handle = await (root or self.page).query_selector(selector)
        if handle is None:
            return NotFound(selector)
        return Found(handle)

    async def query_all(self, selector, root=None):
        return await (root or self.page).query_selector_all(selector)

    async def wait_for(self, selector, timeout_ms, state="attached"):
        try:
            handle = await self.page.wait_for_selector(selector, timeout=timeout_ms, state=state)
        except PlaywrightTimeoutError:
            return TimedOut(selector, timeout_ms)
        return Found(handle)

    async def click(self, handle, offset=None):
        if offset is not None:
            await handle.click(position={"x": offset[0], "y": offset[1]})
        else:
            await handle.click()

    async def press(self, key):
        await self.page.keyboard.press(key)

    async def text_of(self, handle):
        return await handle.text_content()

    async def attribute_of(self, handle, name):
        return await handle.get_attribute(name)

    async def evaluate(self, script, arg=None):
        return await self.page.evaluate(script, arg)

    async def pause(self, ms):
        await asyncio.sleep(ms / 1000)
