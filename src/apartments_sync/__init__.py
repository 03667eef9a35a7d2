# apartments_sync
# Снимок квартир из каталога застройщика: сбор (Playwright), хранение (SQLite), API (FastAPI)

__version__ = "1.0.0"
