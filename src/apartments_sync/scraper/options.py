# scraper/options.py
"""
Параметры обхода каталога.
"""
from dataclasses import dataclass
from typing import Optional

from apartments_sync.config.settings import Settings, DEFAULT_CATALOG_URL


@dataclass(frozen=True)
class ScrapeConfig:
    """Таймауты и шаги прокрутки. Каждое ожидание ограничено."""

    catalog_url: str = DEFAULT_CATALOG_URL
    headless: bool = True
    use_stealth: bool = False
    chrome_bin: Optional[str] = None
    page_timeout_ms: int = 60000
    consent_timeout_ms: int = 5000
    consent_settle_ms: int = 1000
    grid_timeout_ms: int = 10000
    modal_timeout_ms: int = 5000
    cards_timeout_ms: int = 5000
    close_timeout_ms: int = 5000
    scroll_step_px: int = 200
    scroll_pause_ms: int = 100
    scroll_max_steps: int = 500

    @classmethod
    def from_settings(cls, settings: Settings) -> 'ScrapeConfig':
        return cls(
            catalog_url=settings.catalog_url,
            headless=settings.headless,
            use_stealth=settings.use_stealth,
            chrome_bin=settings.chrome_bin,
            page_timeout_ms=settings.page_timeout_s * 1000,
            consent_timeout_ms=settings.consent_timeout_ms,
            grid_timeout_ms=settings.grid_timeout_ms,
            modal_timeout_ms=settings.modal_timeout_ms,
            cards_timeout_ms=settings.cards_timeout_ms,
            close_timeout_ms=settings.close_timeout_ms,
            scroll_step_px=settings.scroll_step_px,
            scroll_pause_ms=settings.scroll_pause_ms,
            scroll_max_steps=settings.scroll_max_steps,
        )
