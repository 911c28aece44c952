"""Mini README: Catalog subsystem holding canonical exhibit records.

Exports the record models, the SQLite-backed store, and the bundled sample
catalog used by the simulated detector and demos.
"""

from .models import CatalogStats, Discovery, Item, ItemCategory
from .sample_data import build_sample_items
from .store import CatalogStore

__all__ = [
    "CatalogStats",
    "CatalogStore",
    "Discovery",
    "Item",
    "ItemCategory",
    "build_sample_items",
]
