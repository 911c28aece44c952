"""Mini README: Temporal stability filter for per-cycle detections.

Structure:
    * StabilityPhase - Idle, Pending or Committed view of the state.
    * StabilizationState - immutable filter state.
    * StabilityEvent - emitted on commit or on decay.
    * advance - pure transition function (state, observation, now) -> state.
    * StabilityFilter - stateful wrapper with an injectable millisecond clock.

Raw detections flicker with occlusion and motion blur. An identity is only
committed after ``threshold`` consecutive agreeing cycles, and a committed
identity survives empty cycles until ``decay_ms`` have passed since the last
non-empty one. Exactly one commit event is emitted per transition.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Tuple

from ..logging_utils import get_logger
from ..recognition import DetectionResult

LOGGER = get_logger(__name__)

STABILITY_THRESHOLD = 3
DECAY_MS = 2000


class StabilityPhase(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"


class StabilityEventKind(str, Enum):
    COMMITTED = "committed"
    CLEARED = "cleared"


@dataclass(frozen=True, slots=True)
class StabilizationState:
    """Snapshot of the filter."""

    pending_id: Optional[str] = None
    agreement_count: int = 0
    last_seen_ms: Optional[float] = None
    committed_id: Optional[str] = None

    @property
    def phase(self) -> StabilityPhase:
        if self.committed_id is not None:
            return StabilityPhase.COMMITTED
        if self.pending_id is not None:
            return StabilityPhase.PENDING
        return StabilityPhase.IDLE


@dataclass(frozen=True, slots=True)
class StabilityEvent:
    """Change of committed identity."""

    kind: StabilityEventKind
    item_id: str
    result: Optional[DetectionResult] = None


def advance(
    state: StabilizationState,
    result: Optional[DetectionResult],
    now_ms: float,
    *,
    threshold: int = STABILITY_THRESHOLD,
    decay_ms: float = DECAY_MS,
) -> Tuple[StabilizationState, Optional[StabilityEvent]]:
    """Apply one cycle's observation and return the new state and any event."""

    if result is None:
        if state.last_seen_ms is None or now_ms - state.last_seen_ms <= decay_ms:
            return state, None
        event = None
        if state.committed_id is not None:
            event = StabilityEvent(kind=StabilityEventKind.CLEARED, item_id=state.committed_id)
        return StabilizationState(), event

    item_id = result.item_id
    if item_id == state.pending_id:
        count = state.agreement_count + 1
    else:
        count = 1
    new_state = replace(state, pending_id=item_id, agreement_count=count, last_seen_ms=now_ms)

    if count >= threshold and item_id != state.committed_id:
        new_state = replace(new_state, committed_id=item_id)
        return new_state, StabilityEvent(kind=StabilityEventKind.COMMITTED, item_id=item_id, result=result)
    return new_state, None


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class StabilityFilter:
    """Debounce a stream of detections into committed identifications."""

    def __init__(
        self,
        *,
        threshold: int = STABILITY_THRESHOLD,
        decay_ms: float = DECAY_MS,
        clock: Callable[[], float] = _monotonic_ms,
    ) -> None:
        if threshold < 1:
            raise ValueError("Stability threshold must be at least 1")
        self.threshold = threshold
        self.decay_ms = decay_ms
        self._clock = clock
        self._state = StabilizationState()
        self._committed_result: Optional[DetectionResult] = None

    @property
    def state(self) -> StabilizationState:
        return self._state

    @property
    def committed_result(self) -> Optional[DetectionResult]:
        """Most recent detection of the committed item, for overlays."""

        return self._committed_result

    def observe(self, result: Optional[DetectionResult]) -> Optional[StabilityEvent]:
        """Feed one cycle's detection (or ``None``) into the filter."""

        self._state, event = advance(
            self._state,
            result,
            self._clock(),
            threshold=self.threshold,
            decay_ms=self.decay_ms,
        )
        if result is not None and result.item_id == self._state.committed_id:
            self._committed_result = result
        if event is not None:
            if event.kind is StabilityEventKind.CLEARED:
                self._committed_result = None
            LOGGER.info("Stability %s: %s", event.kind.value, event.item_id)
        return event

    def reset(self) -> None:
        self._state = StabilizationState()
        self._committed_result = None
