"""Catalog of installable repositories"""
from .models import CatalogEntry
from .store import CatalogStore

__all__ = [
    'CatalogEntry',
    'CatalogStore'
]
