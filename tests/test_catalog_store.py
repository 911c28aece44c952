"""Mini README: Tests for the SQLite catalog store.

Structure:
    * name search - exact, substring, tie-break and miss behaviour.
    * upsert - round trip equality and full-replace semantics.
    * pack import - valid documents, shape mismatches and partial failures.
    * stats/clear/ordering and storage failure propagation.
"""

from __future__ import annotations

import json
from dataclasses import replace

import pytest

from museguide.catalog import CatalogStore, Discovery, Item, ItemCategory
from museguide.errors import StorageFailure


def _item(item_id: str, name: str, category: ItemCategory = ItemCategory.AMULET) -> Item:
    return Item(item_id=item_id, name=name, category=category, facts=[f"{name} fact"])


def test_search_by_name_exact_match_ignores_case(store: CatalogStore) -> None:
    """A full name in any casing resolves to its record."""

    item = store.search_by_name("golden mask of tutankhamun")
    assert item is not None
    assert item.item_id == "gem_001"

    padded = store.search_by_name("  STATUE OF KHAFRE ")
    assert padded is not None
    assert padded.item_id == "gem_003"


def test_search_by_name_substring_and_miss(store: CatalogStore) -> None:
    """Partial names match by substring; unknown names return None."""

    item = store.search_by_name("MASK")
    assert item is not None
    assert "mask" in item.name.lower()
    assert store.search_by_name("not-a-real-item") is None
    assert store.search_by_name("   ") is None


def test_search_by_name_breaks_ties_by_ascending_id(store: CatalogStore) -> None:
    """Several items contain 'tutankhamun'; the lowest id wins."""

    item = store.search_by_name("tutankhamun")
    assert item is not None
    assert item.item_id == "gem_001"


def test_exact_match_beats_earlier_substring_match() -> None:
    """An exact name match is preferred over a lower-id substring match."""

    catalog = CatalogStore()
    catalog.bulk_upsert([_item("a_001", "Blue Amulet Collection"), _item("z_999", "Blue Amulet")])
    item = catalog.search_by_name("blue amulet")
    assert item is not None
    assert item.item_id == "z_999"


def test_search_folds_non_ascii_names() -> None:
    """Case folding is not limited to ASCII characters."""

    catalog = CatalogStore()
    catalog.upsert(_item("x_001", "Ëgyptian Ämulet"))
    item = catalog.search_by_name("ëgyptian ämulet")
    assert item is not None
    assert item.item_id == "x_001"


def test_upsert_round_trip_preserves_every_field(samples) -> None:
    """Fetching by id returns a record equal to the one inserted."""

    catalog = CatalogStore()
    for item in samples.values():
        catalog.upsert(item)
        assert catalog.get_by_id(item.item_id) == item

    minimal = _item("min_001", "Plain Vessel", ItemCategory.VESSEL)
    catalog.upsert(minimal)
    fetched = catalog.get_by_id("min_001")
    assert fetched == minimal
    assert fetched.discovery is None
    assert fetched.materials is None


def test_upsert_replaces_whole_record(store: CatalogStore, samples) -> None:
    """Upserting the same id overwrites every field instead of merging."""

    original = samples["gem_003"]
    replacement = Item(
        item_id=original.item_id,
        name="Statue of Khafre (cast)",
        category=ItemCategory.STATUE,
        facts=["A plaster cast of the diorite statue"],
    )
    store.upsert(replacement)

    fetched = store.get_by_id("gem_003")
    assert fetched == replacement
    assert fetched.dynasty is None
    assert fetched.discovery is None
    assert store.stats().count == 5


def test_get_by_category_and_get_all_are_sorted_by_name(store: CatalogStore) -> None:
    store.upsert(_item("gem_900", "Amulet of Isis", ItemCategory.FUNERARY_MASK))

    masks = store.get_by_category(ItemCategory.FUNERARY_MASK)
    assert [item.item_id for item in masks] == ["gem_900", "gem_001"]
    assert store.get_by_category("papyrus") == []

    names = [item.name for item in store.get_all()]
    assert names == sorted(names)


def test_import_pack_writes_all_records() -> None:
    catalog = CatalogStore()
    document = {
        "artifacts": [
            {
                "id": "pack_001",
                "name": "Ushabti of Seti I",
                "category": "Ushabti",
                "dynasty": "19th Dynasty",
                "material": ["faience"],
                "discovery": {"date": "1817", "location": "KV17", "discoverer": "Giovanni Belzoni"},
                "storyFacts": ["Servant figures meant to work for the king in the afterlife"],
                "tags": ["servant"],
            },
            {
                "id": "pack_002",
                "name": "Book of the Dead of Ani",
                "category": "papyrus",
                "storyFacts": ["A guide for the soul's journey"],
            },
        ]
    }

    assert catalog.import_pack(document) == 2
    ushabti = catalog.get_by_id("pack_001")
    assert ushabti.category is ItemCategory.USHABTI
    assert ushabti.discovery == Discovery(date="1817", location="KV17", discoverer="Giovanni Belzoni")
    assert catalog.get_by_id("pack_002").materials is None


@pytest.mark.parametrize(
    "document",
    [
        None,
        [],
        {},
        {"items": []},
        {"artifacts": "not-a-list"},
        {"artifacts": [{"id": "ok_001", "name": "Fine", "category": "statue", "storyFacts": ["x"]}, {"id": "bad"}]},
        {"artifacts": [{"id": "bad_001", "name": "Unknown", "category": "spaceship", "storyFacts": ["x"]}]},
        {"artifacts": [{"id": "bad_002", "name": "No facts", "category": "statue", "storyFacts": []}]},
    ],
)
def test_import_pack_rejects_mismatched_documents_without_writing(document) -> None:
    catalog = CatalogStore()
    assert catalog.import_pack(document) == 0
    assert catalog.stats().count == 0


def test_import_pack_file_reads_json(tmp_path, samples) -> None:
    pack_path = tmp_path / "pack.json"
    pack_path.write_text(
        json.dumps({"artifacts": [item.as_dict() for item in samples.values()]}),
        encoding="utf-8",
    )
    broken_path = tmp_path / "broken.json"
    broken_path.write_text("{not json", encoding="utf-8")

    catalog = CatalogStore(tmp_path / "catalog.db")
    assert catalog.import_pack_file(pack_path) == 5
    assert catalog.import_pack_file(broken_path) == 0
    assert catalog.get_by_id("gem_005") == samples["gem_005"]


def test_stats_and_clear(store: CatalogStore) -> None:
    stats = store.stats()
    assert stats.count == 5
    assert stats.categories == sorted(["canopic", "funerary_mask", "jewelry", "statue", "stele"])

    store.clear()
    assert store.stats().count == 0
    assert store.get_by_id("gem_001") is None


def test_file_backed_store_persists_between_connections(tmp_path, samples) -> None:
    path = tmp_path / "nested" / "catalog.db"
    first = CatalogStore(path)
    first.upsert(samples["gem_002"])
    first.close()

    second = CatalogStore(path)
    assert second.get_by_id("gem_002") == samples["gem_002"]
    second.close()


def test_closed_store_raises_storage_failure() -> None:
    catalog = CatalogStore()
    catalog.close()
    with pytest.raises(StorageFailure):
        catalog.get_by_id("gem_001")
    with pytest.raises(StorageFailure):
        catalog.upsert(_item("gem_777", "Lost Relief", ItemCategory.RELIEF))


def test_item_requires_facts_and_known_category() -> None:
    with pytest.raises(ValueError):
        Item(item_id="x", name="Empty", category=ItemCategory.STATUE, facts=[])
    with pytest.raises(ValueError):
        ItemCategory.from_str("spaceship")
    assert replace(_item("y", "Y"), name="Z").name == "Z"


def test_import_pack_counts_repeated_ids_once() -> None:
    catalog = CatalogStore()
    document = {
        "artifacts": [
            {"id": "dup_001", "name": "First Draft", "category": "stele", "storyFacts": ["old"]},
            {"id": "dup_002", "name": "Other Stele", "category": "stele", "storyFacts": ["x"]},
            {"id": "dup_001", "name": "Final Text", "category": "stele", "storyFacts": ["new"]},
        ]
    }

    assert catalog.import_pack(document) == 2
    assert catalog.stats().count == 2
    assert catalog.get_by_id("dup_001").name == "Final Text"


def test_import_pack_file_rejects_non_utf8_bytes(tmp_path) -> None:
    pack_path = tmp_path / "latin1.json"
    pack_path.write_bytes('{"artifacts": [{"name": "Statue de Khéops"}]}'.encode("latin-1"))

    catalog = CatalogStore()
    assert catalog.import_pack_file(pack_path) == 0
    assert catalog.stats().count == 0
