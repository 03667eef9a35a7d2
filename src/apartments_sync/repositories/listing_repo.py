"""
Репозиторий снимка объявлений.

В таблице всегда лежит ровно одно поколение записей: replace_all
удаляет старое и вставляет новое в одной транзакции.
"""
import sqlite3
from datetime import datetime
from typing import Optional, List

from .base import BaseRepository
from apartments_sync.models.listing import ListingRecord, ListingFilter, ListingSort


_COLUMNS = (
    "project_name", "project_link", "price", "sq_meters", "rooms_count",
    "floor", "plan", "image_url", "link", "status", "tag",
)

# Колонки сортировки только из белого списка
_SORT_COLUMNS = {"price": "price", "sq_meters": "sq_meters"}


class ListingRepository(BaseRepository[ListingRecord]):
    """Репозиторий для снимка объявлений: полная замена и выборка."""

    def create_table(self) -> bool:
        """Создаёт таблицу listings."""
        def _create():
            with self.get_connection() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS listings (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        project_name TEXT NOT NULL,
                        project_link TEXT,
                        price REAL NOT NULL DEFAULT 0,
                        sq_meters REAL NOT NULL DEFAULT 0,
                        rooms_count INTEGER NOT NULL DEFAULT 0,
                        floor INTEGER NOT NULL DEFAULT 0,
                        plan TEXT,
                        image_url TEXT,
                        link TEXT,
                        status TEXT,
                        tag TEXT NOT NULL DEFAULT '[]',
                        stored_at TEXT NOT NULL
                    )
                """)
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_listings_rooms ON listings(rooms_count)"
                )
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_listings_project ON listings(project_name)"
                )
                return True

        try:
            created = self.execute_with_retry(_create) or False
        except sqlite3.Error as e:
            self.logger.error(f"Ошибка создания таблицы listings: {e}")
            return False
        if created:
            self.logger.info("Таблица listings создана/проверена")
        return created

    def save(self, entity: ListingRecord) -> bool:
        """Одиночная запись не поддерживается: снимок заменяется целиком."""
        raise NotImplementedError("Используйте replace_all для сохранения снимка")

    def replace_all(self, records: List[ListingRecord]) -> bool:
        """
        Заменяет снимок целиком.

        DELETE и INSERT выполняются в одной транзакции, поэтому читатель
        видит либо всё старое поколение, либо всё новое.

        Returns:
            True если новое поколение зафиксировано
        """
        stored_at = datetime.now().isoformat()
        rows = [
            tuple(getattr(record, column) for column in _COLUMNS) + (stored_at,)
            for record in records
        ]
        placeholders = ", ".join("?" for _ in range(len(_COLUMNS) + 1))

        def _replace():
            with self.transaction() as conn:
                deleted = conn.execute("DELETE FROM listings").rowcount
                conn.executemany(
                    f"INSERT INTO listings ({', '.join(_COLUMNS)}, stored_at) "
                    f"VALUES ({placeholders})",
                    rows
                )
            self.logger.info(
                f"Снимок заменён: удалено {deleted}, сохранено {len(rows)}"
            )
            return True

        try:
            return self.execute_with_retry(_replace) or False
        except sqlite3.Error as e:
            self.logger.error(f"Ошибка замены снимка, старые данные сохранены: {e}")
            return False

    def query(
        self,
        filters: Optional[ListingFilter] = None,
        sort: Optional[ListingSort] = None
    ) -> List[ListingRecord]:
        """
        Выборка объявлений.

        Args:
            filters: Равенство по rooms_count и project_name
            sort: Сортировка по price или sq_meters; по умолчанию —
                сначала последние сохранённые

        Returns:
            Список ListingRecord
        """
        filters = filters or ListingFilter()
        sort = sort or ListingSort()

        sql = "SELECT * FROM listings WHERE 1=1"
        params: list = []

        if filters.rooms_count is not None:
            sql += " AND rooms_count = ?"
            params.append(filters.rooms_count)

        project = filters.effective_project
        if project is not None:
            sql += " AND project_name = ?"
            params.append(project)

        if sort.sort_by:
            direction = "DESC" if sort.sort_order == "desc" else "ASC"
            sql += f" ORDER BY {_SORT_COLUMNS[sort.sort_by]} {direction}, id ASC"
        else:
            sql += " ORDER BY stored_at DESC, id ASC"

        def _query():
            with self.get_connection() as conn:
                rows = conn.execute(sql, params).fetchall()
                return [ListingRecord.from_row(row) for row in rows]

        records = self.execute_with_retry(_query) or []
        self.logger.debug(f"Найдено {len(records)} объявлений по фильтру {filters}")
        return records

    def get_projects(self) -> List[str]:
        """Уникальные названия проектов в алфавитном порядке."""
        def _get():
            with self.get_connection() as conn:
                rows = conn.execute(
                    "SELECT DISTINCT project_name FROM listings ORDER BY project_name"
                ).fetchall()
                return [row["project_name"] for row in rows]

        return self.execute_with_retry(_get) or []

    def get_by_id(self, id: int) -> Optional[ListingRecord]:
        """Получает объявление по ID."""
        def _get():
            with self.get_connection() as conn:
                row = conn.execute("SELECT * FROM listings WHERE id = ?", (id,)).fetchone()
                return ListingRecord.from_row(row) if row else None

        return self.execute_with_retry(_get)

    def get_all(self) -> List[ListingRecord]:
        """Получает весь текущий снимок."""
        return self.query()

    def delete(self, id: int) -> bool:
        """Удаляет объявление по ID."""
        def _delete():
            with self.get_connection() as conn:
                cursor = conn.execute("DELETE FROM listings WHERE id = ?", (id,))
                return cursor.rowcount > 0

        return self.execute_with_retry(_delete) or False

    def count(self) -> int:
        """Возвращает количество объявлений в снимке."""
        def _count():
            with self.get_connection() as conn:
                return conn.execute("SELECT COUNT(*) FROM listings").fetchone()[0]

        return self.execute_with_retry(_count) or 0

    def last_synced_at(self) -> Optional[str]:
        """Время сохранения текущего поколения."""
        def _last():
            with self.get_connection() as conn:
                return conn.execute("SELECT MAX(stored_at) FROM listings").fetchone()[0]

        return self.execute_with_retry(_last)
