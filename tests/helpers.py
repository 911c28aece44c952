"""Mini README: Small test doubles shared across the guide test-suite.

Structure:
    * FakeClock - manually advanced millisecond clock.
    * make_result - helper building a visual detection result for an item.
"""

from __future__ import annotations

from museguide.catalog import Item
from museguide.recognition import BoundingBox, DetectionMethod, DetectionResult


class FakeClock:
    """Callable clock returning ``now`` milliseconds."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, milliseconds: float) -> None:
        self.now += milliseconds


def make_result(item: Item, confidence: float = 0.9) -> DetectionResult:
    return DetectionResult(
        item=item,
        confidence=confidence,
        bounding_box=BoundingBox(x=0.2, y=0.2, width=0.5, height=0.5),
        method=DetectionMethod.VISUAL,
    )
