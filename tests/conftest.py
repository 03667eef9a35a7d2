"""
Общие фикстуры: поддельная страница каталога вместо браузера.
"""
from typing import Callable, Dict, List, Optional

import pytest

from apartments_sync.config.settings import Settings
from apartments_sync.models.listing import ListingRecord
from apartments_sync.scraper import locators
from apartments_sync.scraper.automation import AutomationSession, Found, NotFound, TimedOut
from apartments_sync.scraper.modal import SCROLL_HEIGHT_JS, SCROLL_TO_JS, SCROLL_TO_END_JS
from apartments_sync.scraper.options import ScrapeConfig


class FakeElement:
    """Элемент поддельного документа: текст, атрибуты и дочерние элементы по селектору."""

    def __init__(
        self,
        text: str = "",
        attrs: Optional[Dict[str, str]] = None,
        children: Optional[Dict[str, List["FakeElement"]]] = None,
        raising: tuple = (),
        on_click: Optional[Callable] = None,
    ):
        self.text = text
        self.attrs = attrs or {}
        self.children = children if children is not None else {}
        self.raising = set(raising)
        self.on_click = on_click
        self.clicks = []


class FakeSession(AutomationSession):
    """AutomationSession над деревом FakeElement."""

    def __init__(self, document: FakeElement):
        self.document = document
        self.evaluations = []
        self.pauses = []
        self.keys = []
        self.waits = []
        self.scroll_height = None
        self.scroll_offsets = []
        self.escape_closes = True
        self._pending_cards = []

    def _lookup(self, selector, root):
        node = root or self.document
        if selector in node.raising:
            raise RuntimeError(f"lookup failed: {selector}")
        return node.children.get(selector, [])

    async def query_one(self, selector, root=None):
        found = self._lookup(selector, root)
        return Found(found[0]) if found else NotFound(selector)

    async def query_all(self, selector, root=None):
        return list(self._lookup(selector, root))

    async def wait_for(self, selector, timeout_ms, state="attached"):
        self.waits.append((selector, state))
        present = bool(self.document.children.get(selector))
        if state == "hidden":
            return TimedOut(selector, timeout_ms) if present else Found(None)
        if present:
            return Found(self.document.children[selector][0])
        return TimedOut(selector, timeout_ms)

    async def click(self, handle, offset=None):
        handle.clicks.append(offset)
        if handle.on_click is not None:
            handle.on_click(self)

    async def press(self, key):
        self.keys.append(key)
        if key == "Escape" and self.escape_closes:
            self.close_modal()

    async def text_of(self, handle):
        return handle.text

    async def attribute_of(self, handle, name):
        return handle.attrs.get(name)

    async def evaluate(self, script, arg=None):
        self.evaluations.append((script, arg))
        content_present = bool(self.document.children.get(locators.DIALOG_CONTENT))
        if script == SCROLL_HEIGHT_JS:
            return self.scroll_height if content_present else None
        if script == SCROLL_TO_JS:
            self.scroll_offsets.append(arg[1])
            return None
        if script == SCROLL_TO_END_JS:
            # Ленивая подгрузка: карточки появляются после прокрутки до конца
            if content_present and self._pending_cards:
                self.document.children[locators.ITEM_CARD] = self._pending_cards
                self._pending_cards = []
            return None
        raise AssertionError(f"unexpected script: {script}")

    async def pause(self, ms):
        self.pauses.append(ms)

    def open_modal(self, cards, scroll_height=450, closable=True):
        overlay = FakeElement(on_click=(lambda s: s.close_modal()) if closable else None)
        self.document.children[locators.DIALOG_OVERLAY] = [overlay]
        self.document.children[locators.DIALOG_CONTENT] = [FakeElement()]
        self.scroll_height = scroll_height
        self._pending_cards = list(cards)

    def close_modal(self):
        for selector in (locators.DIALOG_OVERLAY, locators.DIALOG_CONTENT, locators.ITEM_CARD):
            self.document.children.pop(selector, None)
        self._pending_cards = []
        self.scroll_height = None


def make_item(
    title: str = "2-istabu dzīvoklis A-12",
    facts=("2 istabas", "54.3 m²", "€ 129 900", "5. stāvs"),
    status: str = "Pieejams",
    tags=("Jaunums",),
    image: str = "https://img.example/plan-a12.jpg",
    link: str = "https://www.bonava.lv/dzivoklis/a-12",
    missing=(),
    raising=(),
) -> FakeElement:
    """Карточка квартиры; missing — поля, которых нет в вёрстке."""
    children = {
        locators.ITEM_IMAGE: [FakeElement(attrs={"src": image})],
        locators.ITEM_TITLE: [FakeElement(text=f"  {title}\n")],
        locators.ITEM_LINK: [FakeElement(attrs={"href": link})],
        locators.ITEM_FACT: [FakeElement(text=fact) for fact in facts],
        locators.ITEM_STATUS: [FakeElement(text=status)],
        locators.ITEM_TAG: [FakeElement(text=tag) for tag in tags],
    }
    selectors = {
        "image": locators.ITEM_IMAGE,
        "title": locators.ITEM_TITLE,
        "link": locators.ITEM_LINK,
        "status": locators.ITEM_STATUS,
        "tags": locators.ITEM_TAG,
    }
    for field in missing:
        children.pop(selectors[field])
    return FakeElement(children=children, raising=raising)


def make_project(
    name: str,
    link: str,
    items=(),
    has_button: bool = True,
    modal_opens: bool = True,
    closable: bool = True,
    has_name: bool = True,
) -> FakeElement:
    """Карточка проекта; клик по кнопке открывает окно с items."""
    def open_dialog(session: FakeSession):
        if modal_opens:
            session.open_modal(items, closable=closable)

    children = {
        locators.PROJECT_LINK: [FakeElement(attrs={"href": link})],
    }
    if has_name:
        children[locators.PROJECT_NAME] = [FakeElement(text=name)]
    if has_button:
        children[locators.PROJECT_OPEN_BUTTON] = [FakeElement(on_click=open_dialog)]
    return FakeElement(children=children)


def make_catalog(projects=(), grid: bool = True, consent: bool = False) -> FakeSession:
    document = FakeElement()
    if grid:
        document.children[locators.PROJECT_GRID] = [FakeElement()]
        document.children[locators.PROJECT_CARD] = list(projects)
    if consent:
        def accept(session):
            session.document.children.pop(locators.CONSENT_BUTTON, None)
        document.children[locators.CONSENT_BUTTON] = [FakeElement(on_click=accept)]
    return FakeSession(document)


@pytest.fixture
def scrape_config():
    return ScrapeConfig(consent_settle_ms=0, scroll_pause_ms=0)


def make_record(project: str = "Lucavsala", plan: str = "L-1", **fields) -> ListingRecord:
    """Готовая запись снимка для тестов хранилища и синхронизации."""
    values = dict(
        project_name=project,
        project_link=f"https://www.bonava.lv/{project.lower()}",
        price=120000.0,
        sq_meters=55.0,
        rooms_count=2,
        floor=4,
        plan=plan,
        image_url="https://img.example/plan.jpg",
        link=f"https://www.bonava.lv/dzivoklis/{plan.lower()}",
        status="Pieejams",
        tag="[]",
    )
    values.update(fields)
    return ListingRecord(**values)


@pytest.fixture
def settings(tmp_path):
    """Настройки с БД во временной директории и без плановой синхронизации."""
    s = Settings()
    s.database_path = str(tmp_path / "apartments.db")
    s.sync_interval_s = 0
    s.replace_on_empty = False
    return s
