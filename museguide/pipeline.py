"""Mini README: Assembles the guide from its components.

Structure:
    * GuidePipeline - wires store, detector, stability filter, scheduler,
      session tracker and narration controller.

Data flow: scheduler -> detector -> stability filter -> on commit the
tracker records the item and narration starts on a separate executor, so a
slow backend never delays the next detection cycle. Every component is an
explicit instance passed in (or built by ``from_settings``), which lets tests
swap any of them for a fake.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional

import numpy as np

from .capture import FrameSource, StaticFrameSource
from .catalog import CatalogStore, Item
from .configuration import GuideSettings
from .errors import RecognitionFailure
from .logging_utils import get_logger
from .narration import (
    LoggingSpeechPlayer,
    Narration,
    NarrationBackend,
    NarrationController,
    NarrationGenerator,
    SpeechPlayer,
    build_backend,
)
from .recognition import BoundingBox, DetectionMethod, DetectionResult, Detector, build_detector
from .session import SessionTracker
from .stability import DetectionScheduler, StabilityEvent, StabilityEventKind, StabilityFilter

LOGGER = get_logger(__name__)

CommitListener = Callable[[DetectionResult], None]


class GuidePipeline:
    """Run recognition, stabilisation, history and narration together."""

    def __init__(
        self,
        *,
        store: CatalogStore,
        detector: Detector,
        tracker: SessionTracker,
        narration: NarrationController,
        frame_source: Optional[FrameSource] = None,
        stability_filter: Optional[StabilityFilter] = None,
        interval_ms: int = 500,
    ) -> None:
        self.store = store
        self.detector = detector
        self.tracker = tracker
        self.narration = narration
        self.stability_filter = stability_filter or StabilityFilter()
        self.scheduler = DetectionScheduler(
            frame_source or StaticFrameSource(),
            detector,
            self.stability_filter,
            interval_ms=interval_ms,
            on_event=self._handle_event,
        )
        self._listeners: List[CommitListener] = []
        self._frame_lock = threading.Lock()
        self._narration_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="narration")
        self._pending_narration: Optional[Future] = None

    @classmethod
    def from_settings(
        cls,
        settings: GuideSettings,
        *,
        store: Optional[CatalogStore] = None,
        frame_source: Optional[FrameSource] = None,
        player: Optional[SpeechPlayer] = None,
        backend: Optional[NarrationBackend] = None,
        rng: Optional[np.random.Generator] = None,
        **detector_collaborators,
    ) -> "GuidePipeline":
        """Build a pipeline from settings; unspecified parts use defaults."""

        store = store or CatalogStore(settings.catalog_path)
        detector = build_detector(settings, store, rng=rng, **detector_collaborators)
        tracker = SessionTracker(history_path=settings.history_path)
        generator = NarrationGenerator(backend if backend is not None else build_backend(settings))
        controller = NarrationController.from_settings(
            settings,
            generator,
            player or LoggingSpeechPlayer(),
            store,
            tracker,
        )
        return cls(
            store=store,
            detector=detector,
            tracker=tracker,
            narration=controller,
            frame_source=frame_source,
            stability_filter=StabilityFilter(
                threshold=settings.stability_threshold,
                decay_ms=settings.decay_ms,
            ),
            interval_ms=settings.detection_interval_ms,
        )

    def add_listener(self, listener: CommitListener) -> None:
        """Call ``listener`` with each committed detection (haptics, overlays)."""

        self._listeners.append(listener)

    def start(self) -> None:
        self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.stop()

    def shutdown(self) -> None:
        """Stop detection and release worker threads and the catalog."""

        self.scheduler.shutdown()
        self.narration.stop()
        self._narration_executor.shutdown(wait=True)
        self.store.close()

    def process_frame(self, frame: bytes) -> Optional[StabilityEvent]:
        """Run one synchronous detection cycle, e.g. for an uploaded frame."""

        with self._frame_lock:
            try:
                result = self.detector.detect(frame)
            except RecognitionFailure as error:
                LOGGER.warning("Recognition failure treated as no detection: %s", error)
                result = None
            event = self.stability_filter.observe(result)
        if event is not None:
            self._handle_event(event)
        return event

    def search(self, query: str) -> Optional[DetectionResult]:
        """Identify an item by name typed or spoken by the visitor."""

        item = self.store.search_by_name(query)
        if item is None:
            return None
        result = DetectionResult(
            item=item,
            confidence=1.0,
            bounding_box=BoundingBox.full_frame(),
            method=DetectionMethod.MANUAL,
        )
        self._commit(result)
        return result

    def narrate(self, item_id: str) -> Optional[Narration]:
        """Record and narrate ``item_id`` synchronously."""

        item = self.store.get_by_id(item_id)
        if item is None:
            return None
        self.tracker.record(item)
        self.narration.start(item)
        return self.narration.current

    def wait_for_narration(self, timeout: Optional[float] = None) -> None:
        future = self._pending_narration
        if future is not None:
            future.result(timeout=timeout)

    def _handle_event(self, event: StabilityEvent) -> None:
        if event.kind is StabilityEventKind.CLEARED:
            LOGGER.info("Lost sight of %s", event.item_id)
            return
        if event.result is not None:
            self._commit(event.result)

    def _commit(self, result: DetectionResult) -> None:
        item: Item = result.item
        self.tracker.record(item)
        for listener in list(self._listeners):
            try:
                listener(result)
            except Exception as error:
                LOGGER.exception("Commit listener failed: %s", error)
        self._pending_narration = self._narration_executor.submit(self.narration.start, item)
