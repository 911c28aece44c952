"""Mini README: Stability subsystem turning noisy detections into commits.

Exports the pure state machine (``advance``), the ``StabilityFilter``
wrapper, and the fixed-cadence ``DetectionScheduler`` that feeds it.
"""

from .filter import (
    StabilityEvent,
    StabilityEventKind,
    StabilityFilter,
    StabilityPhase,
    StabilizationState,
    advance,
)
from .scheduler import DetectionScheduler

__all__ = [
    "DetectionScheduler",
    "StabilityEvent",
    "StabilityEventKind",
    "StabilityFilter",
    "StabilityPhase",
    "StabilizationState",
    "advance",
]
