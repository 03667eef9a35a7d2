# models/__init__.py
from .listing import ListingRecord, ProjectRef, ListingFilter, ListingSort
from .sync_result import SyncResult

__all__ = ['ListingRecord', 'ProjectRef', 'ListingFilter', 'ListingSort', 'SyncResult']
