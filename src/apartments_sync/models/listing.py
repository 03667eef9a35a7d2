"""
Модель объявления о квартире из каталога застройщика.
"""
from dataclasses import dataclass, asdict
from typing import Optional


SORTABLE_FIELDS = ("price", "sq_meters")
SORT_ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class ProjectRef:
    """Проект (жилой комплекс), к которому относятся объявления."""

    name: str
    link: str


@dataclass(frozen=True)
class ListingRecord:
    """
    Квартира из модального окна проекта.

    Создаётся только экстрактором карточки и после создания не меняется.
    """

    project_name: str                           # Название проекта
    project_link: str                           # Ссылка на страницу проекта
    price: float = 0.0                          # Цена
    sq_meters: float = 0.0                      # Площадь в м²
    rooms_count: int = 0                        # Количество комнат
    floor: int = 0                              # Этаж
    plan: str = ""                              # Заголовок / планировка
    image_url: str = ""                         # Картинка планировки
    link: str = ""                              # Ссылка на квартиру
    status: str = ""                            # Статус продажи
    tag: str = "[]"                             # JSON-массив меток

    def to_dict(self) -> dict:
        """Преобразует объект в словарь."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'ListingRecord':
        """Создаёт объект из словаря."""
        return cls(
            project_name=data.get('project_name', ''),
            project_link=data.get('project_link', ''),
            price=float(data.get('price') or 0),
            sq_meters=float(data.get('sq_meters') or 0),
            rooms_count=int(data.get('rooms_count') or 0),
            floor=int(data.get('floor') or 0),
            plan=data.get('plan') or '',
            image_url=data.get('image_url') or '',
            link=data.get('link') or '',
            status=data.get('status') or '',
            tag=data.get('tag') or '[]',
        )

    @classmethod
    def from_row(cls, row) -> 'ListingRecord':
        """Создаёт объект из sqlite3.Row."""
        return cls.from_dict(dict(row))


@dataclass(frozen=True)
class ListingFilter:
    """Фильтр выборки: равенство по количеству комнат и проекту."""

    rooms_count: Optional[int] = None
    project_name: Optional[str] = None

    @property
    def effective_project(self) -> Optional[str]:
        # "all" из меню выбора проекта означает отсутствие фильтра
        if not self.project_name or self.project_name.strip().lower() == "all":
            return None
        return self.project_name


@dataclass(frozen=True)
class ListingSort:
    """Сортировка выборки по цене или площади."""

    sort_by: Optional[str] = None
    sort_order: str = "asc"

    def __post_init__(self):
        if self.sort_by is not None and self.sort_by not in SORTABLE_FIELDS:
            raise ValueError(f"Unsupported sort field: {self.sort_by!r}")
        if self.sort_order.lower() not in SORT_ORDERS:
            raise ValueError(f"Unsupported sort order: {self.sort_order!r}")
        object.__setattr__(self, "sort_order", self.sort_order.lower())
