"""Mini README: Simulated detector for running without recognition models.

Structure:
    * SimulatedDetector - ``Detector`` that occasionally "sees" a sample item.

Each call first honours a cooldown since the last positive result, then
rolls against a fixed detection probability. Hits cycle deterministically
through the bundled sample catalog; only the bounding box and confidence are
randomised. Clock and random generator are injectable for tests.
"""

from __future__ import annotations

import time
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from ..catalog import Item
from ..logging_utils import get_logger
from .base import BoundingBox, DetectionMethod, DetectionResult, Detector

LOGGER = get_logger(__name__)

DETECTION_PROBABILITY = 0.15
COOLDOWN_MS = 3000


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class SimulatedDetector(Detector):
    """Pretend to recognise sample items at a plausible rate."""

    detector_name = "simulation"

    def __init__(
        self,
        items: Sequence[Item],
        *,
        probability: float = DETECTION_PROBABILITY,
        cooldown_ms: float = COOLDOWN_MS,
        clock: Callable[[], float] = _monotonic_ms,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        if not items:
            raise ValueError("SimulatedDetector needs at least one sample item")
        self._items: List[Item] = list(items)
        self.probability = probability
        self.cooldown_ms = cooldown_ms
        self._clock = clock
        self._rng = rng if rng is not None else np.random.default_rng()
        self._next_index = 0
        self._last_hit_ms: Optional[float] = None
        LOGGER.info("Detection running in simulation mode with %s sample items", len(self._items))

    def detect(self, frame: bytes) -> Optional[DetectionResult]:
        now = self._clock()
        if self._last_hit_ms is not None and now - self._last_hit_ms < self.cooldown_ms:
            return None
        if self._rng.random() >= self.probability:
            return None

        item = self._items[self._next_index % len(self._items)]
        self._next_index += 1
        self._last_hit_ms = now

        box = BoundingBox(
            x=0.15 + self._rng.random() * 0.2,
            y=0.2 + self._rng.random() * 0.2,
            width=0.4 + self._rng.random() * 0.2,
            height=0.3 + self._rng.random() * 0.2,
        )
        confidence = 0.85 + self._rng.random() * 0.1
        LOGGER.info("Simulated detection of '%s'", item.name)
        return DetectionResult(
            item=item,
            confidence=confidence,
            bounding_box=box,
            method=DetectionMethod.VISUAL,
        )

    def metadata(self) -> Dict[str, str]:
        return {
            "detector": self.detector_name,
            "sample_items": str(len(self._items)),
            "probability": f"{self.probability:.2f}",
        }
