# scraper module
# Сбор квартир из каталога застройщика (Playwright)

from .errors import ScrapeError, CatalogUnavailableError, ScrapeCancelledError, ProjectSkipped
from .options import ScrapeConfig
from .parsers import parse_int, parse_float, normalize_floor, encode_tags
from .session import ScrapeSession, run_scrape, collect_listings

__all__ = [
    'ScrapeError', 'CatalogUnavailableError', 'ScrapeCancelledError', 'ProjectSkipped',
    'ScrapeConfig',
    'parse_int', 'parse_float', 'normalize_floor', 'encode_tags',
    'ScrapeSession', 'run_scrape', 'collect_listings',
]
