# repositories/__init__.py
from .base import BaseRepository
from .listing_repo import ListingRepository

__all__ = ['BaseRepository', 'ListingRepository']
