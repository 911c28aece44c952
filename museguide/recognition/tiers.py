"""Mini README: Recognition tiers and the model collaborators they drive.

Structure:
    * CategoryPrediction - output of the category classifier.
    * CategoryClassifier / EmbeddingExtractor / TextReader - interfaces for
      the external model invocations (no weights live in this package).
    * VisualMatchTier - category gate followed by embedding similarity search.
    * PlaqueTextTier - reads the exhibit plaque and searches names.

Tiers return ``None`` when they cannot identify the exhibit, which lets the
cascade fall through to the next tier. Model collaborators may raise; the
cascade turns those errors into ``RecognitionFailure``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from ..catalog import CatalogStore, ItemCategory
from ..logging_utils import get_logger
from .base import BoundingBox, DetectionMethod, DetectionResult
from .embedding_index import EmbeddingIndex

LOGGER = get_logger(__name__)

CATEGORY_CONFIDENCE_THRESHOLD = 0.70
SIMILARITY_THRESHOLD = 0.85
TEXT_MATCH_CONFIDENCE = 0.70


@dataclass(frozen=True, slots=True)
class CategoryPrediction:
    """Top category guess for a frame."""

    category: ItemCategory
    confidence: float
    bounding_box: BoundingBox


class ModelCollaborator(ABC):
    """Shared lifecycle hook for external model wrappers."""

    def load(self) -> None:
        """Load weights or open sessions. Called once when the cascade is built."""


class CategoryClassifier(ModelCollaborator):
    @abstractmethod
    def classify(self, frame: bytes) -> Optional[CategoryPrediction]:
        """Return the most likely category in the frame, if any."""


class EmbeddingExtractor(ModelCollaborator):
    @abstractmethod
    def extract(self, frame: bytes, box: BoundingBox) -> Sequence[float]:
        """Return an appearance embedding for the region ``box`` of ``frame``."""


class TextReader(ModelCollaborator):
    @abstractmethod
    def read(self, frame: bytes) -> str:
        """Return the text visible in the frame (empty when none)."""


class VisualMatchTier:
    """Category classification gated similarity search."""

    name = "visual"

    def __init__(
        self,
        classifier: CategoryClassifier,
        extractor: EmbeddingExtractor,
        index: EmbeddingIndex,
        store: CatalogStore,
        *,
        category_threshold: float = CATEGORY_CONFIDENCE_THRESHOLD,
        similarity_threshold: float = SIMILARITY_THRESHOLD,
    ) -> None:
        self.classifier = classifier
        self.extractor = extractor
        self.index = index
        self.store = store
        self.category_threshold = category_threshold
        self.similarity_threshold = similarity_threshold

    def __call__(self, frame: bytes) -> Optional[DetectionResult]:
        prediction = self.classifier.classify(frame)
        if prediction is None or prediction.confidence <= self.category_threshold:
            LOGGER.debug("Category tier not confident enough: %s", prediction)
            return None

        vector = self.extractor.extract(frame, prediction.bounding_box)
        match = self.index.search(vector, prediction.category)
        if match is None or match.similarity <= self.similarity_threshold:
            LOGGER.debug("Similarity tier found no match in %s: %s", prediction.category.value, match)
            return None

        item = self.store.get_by_id(match.item_id)
        if item is None:
            LOGGER.warning("Embedding index references unknown item %s", match.item_id)
            return None
        return DetectionResult(
            item=item,
            confidence=match.similarity,
            bounding_box=prediction.bounding_box,
            method=DetectionMethod.VISUAL,
        )


class PlaqueTextTier:
    """Read the plaque next to the exhibit and look the name up."""

    name = "text"

    def __init__(self, reader: TextReader, store: CatalogStore) -> None:
        self.reader = reader
        self.store = store

    def __call__(self, frame: bytes) -> Optional[DetectionResult]:
        text = (self.reader.read(frame) or "").strip()
        if not text:
            return None
        item = self.store.search_by_name(text)
        if item is None:
            LOGGER.debug("Plaque text '%s' matched no catalog item", text)
            return None
        return DetectionResult(
            item=item,
            confidence=TEXT_MATCH_CONFIDENCE,
            bounding_box=BoundingBox.full_frame(),
            method=DetectionMethod.TEXT,
        )
