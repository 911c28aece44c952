"""Mini README: Shared pytest fixtures for the guide test-suite.

Structure:
    * clock - manually advanced millisecond clock.
    * store - in-memory catalog loaded with the sample items.
    * samples - the sample items keyed by id.
"""

from __future__ import annotations

from typing import Dict, Iterator

import pytest

from helpers import FakeClock
from museguide.catalog import CatalogStore, Item, build_sample_items


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> Iterator[CatalogStore]:
    catalog = CatalogStore()
    catalog.bulk_upsert(build_sample_items())
    yield catalog
    catalog.close()


@pytest.fixture
def samples() -> Dict[str, Item]:
    return {item.item_id: item for item in build_sample_items()}
