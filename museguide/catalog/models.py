"""Mini README: Catalog record models shared across the guide.

Structure:
    * ItemCategory - enumerated exhibit categories recognised by the guide.
    * Discovery - where, when and by whom an item was found.
    * Item - canonical catalog record with narrative facts.
    * CatalogStats - lightweight summary returned by the store.

Items travel in museum pack documents using camelCase keys (``storyFacts``,
``nameArabic`` ...). ``Item.from_dict`` validates such a record and raises
``ValueError`` on structural problems; ``Item.as_dict`` produces the same
shape so exported packs can be re-imported unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class ItemCategory(str, Enum):
    """Fixed set of exhibit categories."""

    FUNERARY_MASK = "funerary_mask"
    STATUE = "statue"
    SARCOPHAGUS = "sarcophagus"
    CANOPIC = "canopic"
    JEWELRY = "jewelry"
    PAPYRUS = "papyrus"
    STELE = "stele"
    MUMMY = "mummy"
    AMULET = "amulet"
    SCARAB = "scarab"
    USHABTI = "ushabti"
    VESSEL = "vessel"
    WEAPON = "weapon"
    FURNITURE = "furniture"
    RELIEF = "relief"

    @classmethod
    def from_str(cls, value: str) -> "ItemCategory":
        """Coerce arbitrary casing into a valid category."""

        try:
            normalised = value.strip().lower()
            return cls(normalised)
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported item category: {value}") from error

    @property
    def label(self) -> str:
        """Human readable label, e.g. ``Funerary Mask``."""

        return " ".join(word.capitalize() for word in self.value.split("_"))


@dataclass(slots=True)
class Discovery:
    """Discovery record for an item."""

    date: str
    location: str
    discoverer: Optional[str] = None

    def describe(self) -> str:
        text = f"Found in {self.location} ({self.date})"
        if self.discoverer:
            text += f" by {self.discoverer}"
        return text


@dataclass(slots=True)
class Item:
    """Canonical catalog record for one recognisable exhibit."""

    item_id: str
    name: str
    category: ItemCategory
    facts: List[str]
    name_secondary: Optional[str] = None
    dynasty: Optional[str] = None
    period: Optional[str] = None
    date_approx: Optional[str] = None
    materials: Optional[List[str]] = None
    dimensions: Optional[str] = None
    weight: Optional[str] = None
    discovery: Optional[Discovery] = None
    location_in_museum: Optional[str] = None
    related_ids: Optional[List[str]] = None
    tags: Optional[List[str]] = None

    def __post_init__(self) -> None:
        if not self.item_id or not self.item_id.strip():
            raise ValueError("Items require a non-empty id")
        if not self.name or not self.name.strip():
            raise ValueError(f"Item {self.item_id} requires a non-empty name")
        if not self.facts:
            raise ValueError(f"Item {self.item_id} requires at least one fact")
        if not isinstance(self.category, ItemCategory):
            self.category = ItemCategory.from_str(str(self.category))

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "Item":
        """Build an item from a pack record, raising ``ValueError`` on mismatch."""

        if not isinstance(record, Mapping):
            raise ValueError("Item records must be JSON objects")
        for key in ("id", "name", "category", "storyFacts"):
            if key not in record:
                raise ValueError(f"Item record is missing '{key}'")

        discovery_payload = record.get("discovery")
        discovery: Optional[Discovery] = None
        if discovery_payload is not None:
            if not isinstance(discovery_payload, Mapping) or "location" not in discovery_payload:
                raise ValueError("Discovery must be an object with at least a location")
            discovery = Discovery(
                date=str(discovery_payload.get("date", "")),
                location=str(discovery_payload["location"]),
                discoverer=_optional_str(discovery_payload.get("discoverer")),
            )

        return cls(
            item_id=_required_str(record["id"], "id"),
            name=_required_str(record["name"], "name"),
            category=ItemCategory.from_str(str(record["category"])),
            facts=_str_list(record["storyFacts"], "storyFacts"),
            name_secondary=_optional_str(record.get("nameArabic")),
            dynasty=_optional_str(record.get("dynasty")),
            period=_optional_str(record.get("period")),
            date_approx=_optional_str(record.get("dateApprox")),
            materials=_optional_str_list(record.get("material"), "material"),
            dimensions=_optional_str(record.get("dimensions")),
            weight=_optional_str(record.get("weight")),
            discovery=discovery,
            location_in_museum=_optional_str(record.get("locationInMuseum")),
            related_ids=_optional_str_list(record.get("connections"), "connections"),
            tags=_optional_str_list(record.get("tags"), "tags"),
        )

    def as_dict(self) -> Dict[str, Any]:
        """Export the item in pack format, omitting absent optional fields."""

        payload: Dict[str, Any] = {
            "id": self.item_id,
            "name": self.name,
            "category": self.category.value,
            "storyFacts": list(self.facts),
        }
        optional = {
            "nameArabic": self.name_secondary,
            "dynasty": self.dynasty,
            "period": self.period,
            "dateApprox": self.date_approx,
            "material": list(self.materials) if self.materials is not None else None,
            "dimensions": self.dimensions,
            "weight": self.weight,
            "locationInMuseum": self.location_in_museum,
            "connections": list(self.related_ids) if self.related_ids is not None else None,
            "tags": list(self.tags) if self.tags is not None else None,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        if self.discovery is not None:
            discovery: Dict[str, str] = {
                "date": self.discovery.date,
                "location": self.discovery.location,
            }
            if self.discovery.discoverer:
                discovery["discoverer"] = self.discovery.discoverer
            payload["discovery"] = discovery
        return payload


@dataclass(slots=True)
class CatalogStats:
    """Summary of catalog contents."""

    count: int
    categories: List[str] = field(default_factory=list)


def _required_str(value: Any, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"'{key}' must be a non-empty string")
    return value


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _str_list(value: Any, key: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(entry, str) for entry in value):
        raise ValueError(f"'{key}' must be a list of strings")
    return list(value)


def _optional_str_list(value: Any, key: str) -> Optional[List[str]]:
    if value is None:
        return None
    return _str_list(value, key)
