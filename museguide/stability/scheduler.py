"""Mini README: Fixed-cadence detection loop.

Structure:
    * DetectionScheduler - periodically captures a frame, runs the detector
      and feeds the result to the stability filter.

A daemon timer thread ticks every ``interval_ms``. Each tick dispatches one
cycle to a single-worker executor, but only when the previous cycle has
finished; otherwise the tick is skipped. The filter therefore sees a totally
ordered stream of results. ``stop`` prevents further ticks immediately; a
cycle already in flight still finishes, but its result is discarded.

Recognition failures count as "no detection" for the cycle. Initialisation
and storage failures stop the loop because no later cycle can succeed.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from ..capture import FrameSource
from ..errors import InitializationFailure, RecognitionFailure, StorageFailure
from ..logging_utils import get_logger
from ..recognition import DetectionResult, Detector
from .filter import StabilityEvent, StabilityFilter

LOGGER = get_logger(__name__)

DETECTION_INTERVAL_MS = 500


class DetectionScheduler:
    """Drive the detector on a timer with at most one call outstanding."""

    def __init__(
        self,
        frame_source: FrameSource,
        detector: Detector,
        stability_filter: StabilityFilter,
        *,
        interval_ms: int = DETECTION_INTERVAL_MS,
        on_event: Optional[Callable[[StabilityEvent], None]] = None,
        on_result: Optional[Callable[[Optional[DetectionResult]], None]] = None,
    ) -> None:
        self.frame_source = frame_source
        self.detector = detector
        self.stability_filter = stability_filter
        self.interval_ms = interval_ms
        self.on_event = on_event
        self.on_result = on_result
        self.last_error: Optional[str] = None
        self.skipped_ticks = 0

        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="detection")
        self._in_flight: Optional[Future] = None
        self._generation = 0
        self._running = False
        self._stop_event = threading.Event()
        self._timer_thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Begin ticking. Calling ``start`` on a running scheduler does nothing."""

        with self._lock:
            if self._running:
                return
            self._generation += 1
            self._running = True
            self.last_error = None
            self._stop_event = threading.Event()
            self._timer_thread = threading.Thread(
                target=self._timer_loop,
                args=(self._stop_event,),
                name="detection-timer",
                daemon=True,
            )
            self._timer_thread.start()
        LOGGER.info("Detection started (every %s ms) using %s", self.interval_ms, self.detector.detector_name)

    def stop(self) -> None:
        """Cancel future ticks; an in-flight cycle finishes but is ignored."""

        with self._lock:
            if not self._running:
                return
            self._running = False
            self._generation += 1
            self._stop_event.set()
        LOGGER.info("Detection stopped")

    def shutdown(self) -> None:
        """Stop and release the worker thread."""

        self.stop()
        self._executor.shutdown(wait=False)

    def tick(self) -> Optional[Future]:
        """Dispatch one cycle unless stopped or a previous cycle is pending."""

        with self._lock:
            if not self._running:
                return None
            if self._in_flight is not None and not self._in_flight.done():
                self.skipped_ticks += 1
                LOGGER.debug("Previous detection still running; skipping tick")
                return None
            self._in_flight = self._executor.submit(self._cycle, self._generation)
            return self._in_flight

    def wait_idle(self, timeout: Optional[float] = None) -> None:
        """Block until the outstanding cycle, if any, has finished."""

        future = self._in_flight
        if future is not None:
            future.result(timeout=timeout)

    def _timer_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval_ms / 1000.0):
            self.tick()

    def _cycle(self, generation: int) -> None:
        try:
            frame = self.frame_source.capture()
            result = self.detector.detect(frame)
        except RecognitionFailure as error:
            LOGGER.warning("Recognition failure treated as no detection: %s", error)
            result = None
        except (InitializationFailure, StorageFailure) as error:
            LOGGER.error("Detection cannot continue: %s", error)
            self.last_error = str(error)
            self.stop()
            return
        except Exception as error:
            LOGGER.exception("Unexpected detection error treated as no detection: %s", error)
            result = None

        if generation != self._generation:
            LOGGER.debug("Discarding detection result that resolved after stop")
            return

        if self.on_result is not None:
            self.on_result(result)
        event = self.stability_filter.observe(result)
        if event is not None and self.on_event is not None:
            try:
                self.on_event(event)
            except Exception as error:
                LOGGER.exception("Stability event handler failed: %s", error)
