# scraper/extractor.py
"""
Извлечение одной квартиры из карточки в модальном окне проекта.
"""
from dataclasses import dataclass
from typing import Any, List, Union

from apartments_sync.models.listing import ListingRecord, ProjectRef
from apartments_sync.utils.logger import get_logger
from . import locators
from .automation import AutomationSession, Found
from .parsers import parse_int, parse_float, normalize_floor, encode_tags

logger = get_logger("ItemExtractor")


@dataclass(frozen=True)
class ItemFailure:
    """Карточка пропущена: обязательное поле не прочиталось."""

    field: str
    reason: str


def _fact(facts: List[str], index: int) -> str:
    return facts[index] if index < len(facts) else ""


async def _read_tags(session: AutomationSession, card: Any) -> str:
    # Метки необязательны: любая ошибка поиска даёт пустой массив
    try:
        labels = await session.read_all_texts(locators.ITEM_TAG, card)
    except Exception as e:
        logger.debug(f"Метки не прочитаны: {e}")
        return "[]"
    return encode_tags(labels)


async def extract_item(
    session: AutomationSession,
    card: Any,
    project: ProjectRef
) -> Union[ListingRecord, ItemFailure]:
    """
    Читает карточку квартиры.

    Порядок чтения: картинка, заголовок, ссылка, факты (комнаты, площадь,
    цена, этаж), статус, метки. Отсутствие любого поля, кроме меток,
    возвращает ItemFailure.
    """
    image = await session.read_attribute(locators.ITEM_IMAGE, "src", card)
    if not isinstance(image, Found):
        return ItemFailure("image_url", f"not found: {locators.ITEM_IMAGE}")

    title = await session.read_text(locators.ITEM_TITLE, card)
    if not isinstance(title, Found):
        return ItemFailure("plan", f"not found: {locators.ITEM_TITLE}")

    link = await session.read_attribute(locators.ITEM_LINK, "href", card)
    if not isinstance(link, Found):
        return ItemFailure("link", f"not found: {locators.ITEM_LINK}")

    try:
        facts = await session.read_all_texts(locators.ITEM_FACT, card)
    except Exception as e:
        return ItemFailure("facts", str(e))
    logger.debug(f"Факты квартиры: {facts}")

    status = await session.read_text(locators.ITEM_STATUS, card)
    if not isinstance(status, Found):
        return ItemFailure("status", f"not found: {locators.ITEM_STATUS}")

    tag = await _read_tags(session, card)

    return ListingRecord(
        project_name=project.name,
        project_link=project.link,
        price=parse_float(_fact(facts, 2)),
        sq_meters=parse_float(_fact(facts, 1)),
        rooms_count=parse_int(_fact(facts, 0)),
        floor=normalize_floor(parse_int(_fact(facts, 3))),
        plan=title.value,
        image_url=image.value,
        link=link.value,
        status=status.value,
        tag=tag,
    )


async def extract_items(
    session: AutomationSession,
    cards: List[Any],
    project: ProjectRef
) -> List[ListingRecord]:
    """
    Извлекает все карточки проекта.

    Пропущенная карточка не влияет на соседние: из N карточек, где K
    не прочитались, возвращается ровно N-K записей в исходном порядке.
    """
    records: List[ListingRecord] = []
    for idx, card in enumerate(cards, start=1):
        try:
            outcome = await extract_item(session, card, project)
        except Exception as e:
            outcome = ItemFailure("card", f"{type(e).__name__}: {e}")

        if isinstance(outcome, ItemFailure):
            logger.warning(
                f"Квартира #{idx} проекта {project.name} пропущена "
                f"({outcome.field}: {outcome.reason})"
            )
            continue
        records.append(outcome)

    return records
