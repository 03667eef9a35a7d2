"""
Модель результата синхронизации.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class SyncResult:
    """
    Результат одного запуска синхронизации каталога.
    Используется для CLI, API и планировщика.
    """

    success: bool                       # Успешно ли выполнен
    message: str                        # Сообщение для пользователя
    records_found: int = 0              # Собрано объявлений
    records_saved: int = 0              # Сохранено в снимок
    started_at: str = ""
    finished_at: str = ""
    error: Optional[str] = None

    def __post_init__(self):
        if not self.started_at:
            self.started_at = datetime.now().isoformat()

    def to_dict(self) -> dict:
        """Преобразует в словарь для JSON."""
        return {
            "success": self.success,
            "message": self.message,
            "records_found": self.records_found,
            "records_saved": self.records_saved,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "error": self.error,
        }

    def __str__(self) -> str:
        status = "✅" if self.success else "❌"
        return f"{status} Sync: {self.message}"
