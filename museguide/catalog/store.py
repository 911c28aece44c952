"""Mini README: SQLite-backed catalog store.

Structure:
    * CatalogStore - owns item records; id/category/name lookup, upsert,
      bulk load, pack import, stats.

Records live in a single ``artifacts`` table. List-valued fields are stored
as JSON text and the discovery record is flattened into three columns. All
access goes through one connection guarded by a re-entrant lock so writers
never interleave partial records. Any ``sqlite3.Error`` surfaces as
``StorageFailure``; a missing record is reported as ``None``.

Name search ties (several substring matches) are broken by ascending item
id so results never depend on table iteration order.
"""

from __future__ import annotations

import json
import sqlite3
import threading
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

from ..errors import StorageFailure
from ..logging_utils import get_logger
from .models import CatalogStats, Discovery, Item, ItemCategory

LOGGER = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS artifacts (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    name_arabic TEXT,
    category TEXT NOT NULL,
    dynasty TEXT,
    period TEXT,
    date_approx TEXT,
    material TEXT,
    dimensions TEXT,
    weight TEXT,
    discovery_date TEXT,
    discovery_location TEXT,
    discovery_discoverer TEXT,
    location_in_museum TEXT,
    story_facts TEXT NOT NULL,
    connections TEXT,
    tags TEXT
);
CREATE INDEX IF NOT EXISTS idx_category ON artifacts(category);
CREATE INDEX IF NOT EXISTS idx_name ON artifacts(name);
"""

_COLUMNS = (
    "id",
    "name",
    "name_arabic",
    "category",
    "dynasty",
    "period",
    "date_approx",
    "material",
    "dimensions",
    "weight",
    "discovery_date",
    "discovery_location",
    "discovery_discoverer",
    "location_in_museum",
    "story_facts",
    "connections",
    "tags",
)

_UPSERT = (
    f"INSERT OR REPLACE INTO artifacts ({', '.join(_COLUMNS)}) "
    f"VALUES ({', '.join('?' for _ in _COLUMNS)})"
)


class CatalogStore:
    """Persisted collection of canonical item records."""

    def __init__(self, path: Union[str, Path] = ":memory:") -> None:
        self.path = str(path)
        if self.path != ":memory:":
            Path(self.path).expanduser().parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        try:
            self._connection = sqlite3.connect(self.path, check_same_thread=False)
            self._connection.row_factory = sqlite3.Row
            # SQLite's lower() only folds ASCII; names may be Arabic or accented.
            self._connection.create_function("py_lower", 1, _lower, deterministic=True)
            with self._connection:
                self._connection.executescript(_SCHEMA)
        except sqlite3.Error as error:
            raise StorageFailure(f"Unable to open catalog at {self.path}: {error}") from error
        LOGGER.debug("CatalogStore opened at %s", self.path)

    def get_by_id(self, item_id: str) -> Optional[Item]:
        """Return the item with ``item_id`` or ``None``."""

        row = self._fetch_one("SELECT * FROM artifacts WHERE id = ?", (item_id,))
        return _row_to_item(row) if row is not None else None

    def search_by_name(self, query: str) -> Optional[Item]:
        """Fuzzy name lookup: exact (case-insensitive) first, then substring."""

        normalised = query.strip().lower()
        if not normalised:
            return None
        row = self._fetch_one(
            "SELECT * FROM artifacts WHERE py_lower(name) = ? ORDER BY id LIMIT 1",
            (normalised,),
        )
        if row is None:
            row = self._fetch_one(
                "SELECT * FROM artifacts WHERE instr(py_lower(name), ?) > 0 ORDER BY id LIMIT 1",
                (normalised,),
            )
        if row is None:
            LOGGER.debug("No catalog match for query '%s'", query)
            return None
        return _row_to_item(row)

    def get_by_category(self, category: Union[ItemCategory, str]) -> List[Item]:
        """Return items of ``category`` ordered by name."""

        value = category.value if isinstance(category, ItemCategory) else str(category)
        rows = self._fetch_all(
            "SELECT * FROM artifacts WHERE category = ? ORDER BY name, id", (value,)
        )
        return [_row_to_item(row) for row in rows]

    def get_all(self) -> List[Item]:
        """Return every item ordered by name."""

        rows = self._fetch_all("SELECT * FROM artifacts ORDER BY name, id", ())
        return [_row_to_item(row) for row in rows]

    def upsert(self, item: Item) -> None:
        """Insert ``item`` or entirely replace the record with the same id."""

        with self._lock:
            try:
                with self._connection:
                    self._connection.execute(_UPSERT, _item_to_row(item))
            except sqlite3.Error as error:
                raise StorageFailure(f"Unable to store item {item.item_id}: {error}") from error
        LOGGER.debug("Upserted item %s", item.item_id)

    def bulk_upsert(self, items: Iterable[Item]) -> int:
        """Upsert each item in turn and return how many were written."""

        written = 0
        for item in items:
            self.upsert(item)
            written += 1
        LOGGER.info("Bulk upserted %s items", written)
        return written

    def import_pack(self, document: Any) -> int:
        """Import a museum pack document ``{"artifacts": [...]}``.

        Every record is validated before anything is written, so a structural
        mismatch anywhere in the document imports nothing and returns 0. When
        an id repeats, the last record wins and the id is counted once.
        """

        if not isinstance(document, Mapping):
            LOGGER.warning("Pack import rejected: document is not an object")
            return 0
        records = document.get("artifacts")
        if not isinstance(records, list):
            LOGGER.warning("Pack import rejected: 'artifacts' list missing")
            return 0
        try:
            items = [Item.from_dict(record) for record in records]
        except ValueError as error:
            LOGGER.warning("Pack import rejected: %s", error)
            return 0
        unique = {item.item_id: item for item in items}
        return self.bulk_upsert(list(unique.values()))

    def import_pack_file(self, pack_path: Union[str, Path]) -> int:
        """Read a JSON pack from disk and import it."""

        path = Path(pack_path)
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as error:
            LOGGER.warning("Pack %s is not valid UTF-8 JSON: %s", path, error)
            return 0
        count = self.import_pack(document)
        LOGGER.info("Imported %s items from %s", count, path)
        return count

    def clear(self) -> None:
        """Remove every record."""

        with self._lock:
            try:
                with self._connection:
                    self._connection.execute("DELETE FROM artifacts")
            except sqlite3.Error as error:
                raise StorageFailure(f"Unable to clear catalog: {error}") from error
        LOGGER.info("Catalog cleared")

    def stats(self) -> CatalogStats:
        """Return the record count and distinct categories."""

        count_row = self._fetch_one("SELECT COUNT(*) AS count FROM artifacts", ())
        category_rows = self._fetch_all(
            "SELECT DISTINCT category FROM artifacts ORDER BY category", ()
        )
        return CatalogStats(
            count=int(count_row["count"]) if count_row is not None else 0,
            categories=[row["category"] for row in category_rows],
        )

    def close(self) -> None:
        with self._lock:
            self._connection.close()

    def _fetch_one(self, sql: str, parameters: tuple) -> Optional[sqlite3.Row]:
        with self._lock:
            try:
                return self._connection.execute(sql, parameters).fetchone()
            except sqlite3.Error as error:
                raise StorageFailure(f"Catalog query failed: {error}") from error

    def _fetch_all(self, sql: str, parameters: tuple) -> List[sqlite3.Row]:
        with self._lock:
            try:
                return self._connection.execute(sql, parameters).fetchall()
            except sqlite3.Error as error:
                raise StorageFailure(f"Catalog query failed: {error}") from error


def _lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None


def _dump_list(values: Optional[List[str]]) -> Optional[str]:
    return json.dumps(values, ensure_ascii=False) if values is not None else None


def _load_list(raw: Optional[str]) -> Optional[List[str]]:
    return json.loads(raw) if raw is not None else None


def _item_to_row(item: Item) -> tuple:
    discovery = item.discovery
    return (
        item.item_id,
        item.name,
        item.name_secondary,
        item.category.value,
        item.dynasty,
        item.period,
        item.date_approx,
        _dump_list(item.materials),
        item.dimensions,
        item.weight,
        discovery.date if discovery else None,
        discovery.location if discovery else None,
        discovery.discoverer if discovery else None,
        item.location_in_museum,
        json.dumps(item.facts, ensure_ascii=False),
        _dump_list(item.related_ids),
        _dump_list(item.tags),
    )


def _row_to_item(row: sqlite3.Row) -> Item:
    discovery = None
    if row["discovery_location"] is not None:
        discovery = Discovery(
            date=row["discovery_date"] or "",
            location=row["discovery_location"],
            discoverer=row["discovery_discoverer"],
        )
    return Item(
        item_id=row["id"],
        name=row["name"],
        name_secondary=row["name_arabic"],
        category=ItemCategory.from_str(row["category"]),
        dynasty=row["dynasty"],
        period=row["period"],
        date_approx=row["date_approx"],
        materials=_load_list(row["material"]),
        dimensions=row["dimensions"],
        weight=row["weight"],
        discovery=discovery,
        location_in_museum=row["location_in_museum"],
        facts=json.loads(row["story_facts"]),
        related_ids=_load_list(row["connections"]),
        tags=_load_list(row["tags"]),
    )
