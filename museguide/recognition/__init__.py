"""Mini README: Exhibit recognition subsystem.

Re-exports the detection abstractions, the three-tier cascade, the simulated
detector, and ``build_detector`` which picks between them once at start-up.
Model collaborators (classifier, embedding extractor, text reader) are
interfaces only; concrete models plug in from outside this package.
"""

from .base import BoundingBox, DetectionMethod, DetectionResult, Detector
from .cascade import RecognitionCascade
from .embedding_index import EmbeddingIndex, SimilarityMatch
from .factory import build_detector
from .simulation import SimulatedDetector
from .tiers import (
    CategoryClassifier,
    CategoryPrediction,
    EmbeddingExtractor,
    PlaqueTextTier,
    TextReader,
    VisualMatchTier,
)

__all__ = [
    "BoundingBox",
    "CategoryClassifier",
    "CategoryPrediction",
    "DetectionMethod",
    "DetectionResult",
    "Detector",
    "EmbeddingExtractor",
    "EmbeddingIndex",
    "PlaqueTextTier",
    "RecognitionCascade",
    "SimilarityMatch",
    "SimulatedDetector",
    "TextReader",
    "VisualMatchTier",
    "build_detector",
]
