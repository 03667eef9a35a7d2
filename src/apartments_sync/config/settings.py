"""
Конфигурация проекта через переменные окружения.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


DEFAULT_CATALOG_URL = "https://www.bonava.lv/dzivokli"


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, "true" if default else "false").strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Настройки приложения."""

    # Пути
    base_dir: Path = field(default_factory=lambda: Path(__file__).resolve().parents[3])

    # Источник
    catalog_url: str = DEFAULT_CATALOG_URL

    # Database
    database_path: str = ""

    # Браузер
    headless: bool = True
    use_stealth: bool = False
    chrome_bin: Optional[str] = None
    page_timeout_s: int = 60

    # Ожидания на странице каталога (мс)
    consent_timeout_ms: int = 5000
    grid_timeout_ms: int = 10000
    modal_timeout_ms: int = 5000
    cards_timeout_ms: int = 5000
    close_timeout_ms: int = 5000

    # Прокрутка модального окна
    scroll_step_px: int = 200
    scroll_pause_ms: int = 100
    scroll_max_steps: int = 500

    # Синхронизация
    sync_interval_s: int = 86400
    replace_on_empty: bool = False

    # Логи и API
    log_file: Optional[str] = None
    api_host: str = "127.0.0.1"
    api_port: int = 8080

    def __post_init__(self):
        """Загружает значения из .env или переменных окружения."""
        self._load_dotenv()

        self.catalog_url = os.getenv("CATALOG_URL", self.catalog_url)

        default_db = str(self.base_dir / "results" / "apartments.db")
        self.database_path = os.getenv("DATABASE_PATH", self.database_path or default_db)

        self.headless = _env_bool("SCRAPER_HEADLESS", self.headless)
        self.use_stealth = _env_bool("SCRAPER_USE_STEALTH", self.use_stealth)
        self.chrome_bin = os.getenv("CHROME_BIN") or self.chrome_bin
        self.page_timeout_s = int(os.getenv("SCRAPER_PAGE_TIMEOUT_S", str(self.page_timeout_s)))

        self.consent_timeout_ms = int(os.getenv("CONSENT_TIMEOUT_MS", str(self.consent_timeout_ms)))
        self.grid_timeout_ms = int(os.getenv("GRID_TIMEOUT_MS", str(self.grid_timeout_ms)))
        self.modal_timeout_ms = int(os.getenv("MODAL_TIMEOUT_MS", str(self.modal_timeout_ms)))
        self.cards_timeout_ms = int(os.getenv("CARDS_TIMEOUT_MS", str(self.cards_timeout_ms)))
        self.close_timeout_ms = int(os.getenv("CLOSE_TIMEOUT_MS", str(self.close_timeout_ms)))

        self.scroll_step_px = int(os.getenv("SCROLL_STEP_PX", str(self.scroll_step_px)))
        self.scroll_pause_ms = int(os.getenv("SCROLL_PAUSE_MS", str(self.scroll_pause_ms)))
        self.scroll_max_steps = int(os.getenv("SCROLL_MAX_STEPS", str(self.scroll_max_steps)))

        self.sync_interval_s = int(os.getenv("SYNC_INTERVAL_S", str(self.sync_interval_s)))
        self.replace_on_empty = _env_bool("REPLACE_ON_EMPTY", self.replace_on_empty)

        self.log_file = os.getenv("LOG_FILE") or self.log_file
        self.api_host = os.getenv("API_HOST", self.api_host)
        self.api_port = int(os.getenv("API_PORT", str(self.api_port)))

    def _load_dotenv(self):
        """Загружает .env файл если существует."""
        env_path = self.base_dir / ".env"
        if env_path.exists():
            try:
                with open(env_path, 'r', encoding='utf-8') as f:
                    for line in f:
                        line = line.strip()
                        if line and not line.startswith('#') and '=' in line:
                            key, value = line.split('=', 1)
                            os.environ.setdefault(key.strip(), value.strip())
            except OSError:
                pass

    @property
    def results_dir(self) -> Path:
        """Директория для результатов."""
        return self.base_dir / "results"


# Глобальный экземпляр настроек
settings = Settings()
