"""Mini README: Three-tier recognition cascade.

Structure:
    * RecognitionCascade - ``Detector`` that runs the visual tier and then the
      plaque text tier, first success wins.

Model collaborators are loaded once at construction. If any of them fails to
load the cascade stays broken: every ``detect`` call raises
``InitializationFailure`` without attempting another load, until the process
is restarted. Errors raised by collaborators during a call are wrapped in
``RecognitionFailure`` so the scheduler can log them apart from a plain
"nothing recognised".
"""

from __future__ import annotations

from typing import Dict, Optional

from ..catalog import CatalogStore
from ..errors import GuideError, InitializationFailure, RecognitionFailure
from ..logging_utils import get_logger
from ..utils.fallback import FallbackChain
from .base import DetectionResult, Detector
from .embedding_index import EmbeddingIndex
from .tiers import (
    CATEGORY_CONFIDENCE_THRESHOLD,
    SIMILARITY_THRESHOLD,
    CategoryClassifier,
    EmbeddingExtractor,
    PlaqueTextTier,
    TextReader,
    VisualMatchTier,
)

LOGGER = get_logger(__name__)


class RecognitionCascade(Detector):
    """Category -> similarity -> plaque text fallback chain."""

    detector_name = "cascade"

    def __init__(
        self,
        *,
        classifier: CategoryClassifier,
        extractor: EmbeddingExtractor,
        text_reader: TextReader,
        index: EmbeddingIndex,
        store: CatalogStore,
        category_threshold: float = CATEGORY_CONFIDENCE_THRESHOLD,
        similarity_threshold: float = SIMILARITY_THRESHOLD,
    ) -> None:
        self._init_error: Optional[str] = None
        for collaborator in (classifier, extractor, text_reader):
            try:
                collaborator.load()
            except Exception as error:
                self._init_error = f"{type(collaborator).__name__} failed to load: {error}"
                LOGGER.error("Recognition cascade unavailable: %s", self._init_error)
                break

        visual = VisualMatchTier(
            classifier,
            extractor,
            index,
            store,
            category_threshold=category_threshold,
            similarity_threshold=similarity_threshold,
        )
        plaque = PlaqueTextTier(text_reader, store)
        self._chain: FallbackChain[bytes, DetectionResult] = FallbackChain(
            [(visual.name, visual), (plaque.name, plaque)]
        )
        if self._init_error is None:
            LOGGER.info("Recognition cascade ready with tiers %s", self._chain.step_names)

    @property
    def available(self) -> bool:
        return self._init_error is None

    def detect(self, frame: bytes) -> Optional[DetectionResult]:
        if self._init_error is not None:
            raise InitializationFailure(self._init_error)
        try:
            return self._chain.run(frame)
        except GuideError:
            raise
        except Exception as error:
            raise RecognitionFailure(f"Recognition failed: {error}") from error

    def metadata(self) -> Dict[str, str]:
        return {
            "detector": self.detector_name,
            "tiers": ", ".join(self._chain.step_names),
            "status": "ready" if self.available else f"failed: {self._init_error}",
        }
