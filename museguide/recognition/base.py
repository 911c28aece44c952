"""Mini README: Abstractions describing exhibit detection.

Structure:
    * BoundingBox - normalised rectangle inside the unit square.
    * DetectionMethod - how an identification was obtained.
    * DetectionResult - an item match with confidence and location.
    * Detector - interface implemented by the real cascade and the simulator.

Consumers only depend on ``Detector.detect`` so the simulated and real
implementations are interchangeable; which one runs is decided once when the
guide is assembled.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from ..catalog import Item

_EPSILON = 1e-9


class DetectionMethod(str, Enum):
    """Channel that produced an identification."""

    VISUAL = "visual"
    TEXT = "text"
    MANUAL = "manual"


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Rectangle in normalised frame coordinates."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        for name in ("x", "y", "width", "height"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Bounding box {name}={value} outside [0, 1]")
        if self.x + self.width > 1.0 + _EPSILON or self.y + self.height > 1.0 + _EPSILON:
            raise ValueError("Bounding box extends beyond the frame")

    @classmethod
    def full_frame(cls) -> "BoundingBox":
        """Default box used when the location is unknown."""

        return cls(x=0.1, y=0.1, width=0.8, height=0.8)

    def as_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True, slots=True)
class DetectionResult:
    """A resolved catalog item seen in a frame."""

    item: Item
    confidence: float
    bounding_box: BoundingBox
    method: DetectionMethod

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence {self.confidence} outside [0, 1]")

    @property
    def item_id(self) -> str:
        return self.item.item_id

    def as_dict(self) -> Dict[str, object]:
        return {
            "item_id": self.item.item_id,
            "name": self.item.name,
            "confidence": self.confidence,
            "bounding_box": self.bounding_box.as_dict(),
            "method": self.method.value,
        }


class Detector(ABC):
    """Base interface for anything able to identify an exhibit in a frame."""

    detector_name: str = "generic"

    @abstractmethod
    def detect(self, frame: bytes) -> Optional[DetectionResult]:
        """Identify the exhibit in ``frame``.

        Returns ``None`` when nothing is recognised. Raises
        ``RecognitionFailure`` when a collaborator errors during this call and
        ``InitializationFailure`` when the detector never loaded.
        """

    def metadata(self) -> Dict[str, str]:
        """Return diagnostic metadata for status displays."""

        return {"detector": self.detector_name}
