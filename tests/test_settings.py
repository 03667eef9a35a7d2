"""Настройки из переменных окружения."""
from apartments_sync.config.settings import Settings, DEFAULT_CATALOG_URL
from apartments_sync.scraper.options import ScrapeConfig


def test_defaults(monkeypatch):
    for name in ("CATALOG_URL", "DATABASE_PATH", "SCRAPER_HEADLESS", "SCROLL_STEP_PX", "SYNC_INTERVAL_S", "CHROME_BIN"):
        monkeypatch.delenv(name, raising=False)

    s = Settings()

    assert s.catalog_url == DEFAULT_CATALOG_URL
    assert s.headless is True
    assert s.scroll_step_px == 200
    assert s.sync_interval_s == 86400
    assert s.database_path.endswith("apartments.db")


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CATALOG_URL", "https://catalog.example/")
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "x.db"))
    monkeypatch.setenv("SCRAPER_HEADLESS", "false")
    monkeypatch.setenv("CHROME_BIN", "/usr/bin/chromium")
    monkeypatch.setenv("REPLACE_ON_EMPTY", "yes")
    monkeypatch.setenv("SCROLL_MAX_STEPS", "25")

    s = Settings()

    assert s.catalog_url == "https://catalog.example/"
    assert s.database_path == str(tmp_path / "x.db")
    assert s.headless is False
    assert s.chrome_bin == "/usr/bin/chromium"
    assert s.replace_on_empty is True
    assert s.scroll_max_steps == 25


def test_scrape_config_from_settings(monkeypatch):
    monkeypatch.setenv("SCRAPER_PAGE_TIMEOUT_S", "30")
    monkeypatch.setenv("MODAL_TIMEOUT_MS", "7000")

    config = ScrapeConfig.from_settings(Settings())

    assert config.page_timeout_ms == 30000
    assert config.modal_timeout_ms == 7000
