# config/__init__.py
from .settings import settings, Settings, DEFAULT_CATALOG_URL

__all__ = [
    'settings',
    'Settings',
    'DEFAULT_CATALOG_URL',
]
