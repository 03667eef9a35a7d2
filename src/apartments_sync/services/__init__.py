# services/__init__.py
from .database_service import DatabaseService
from .sync_service import SyncService, SyncInProgressError
from .scheduler import SyncScheduler

__all__ = [
    'DatabaseService',
    'SyncService',
    'SyncInProgressError',
    'SyncScheduler',
]
