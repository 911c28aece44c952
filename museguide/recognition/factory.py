"""Mini README: Detector selection.

Structure:
    * build_detector - choose the simulated detector or the real cascade.

The choice is made exactly once, when the guide is assembled. Simulation is
used when the settings request it or when any model collaborator is missing;
in that case the bundled sample items are written to the catalog so that
simulated hits resolve like real ones.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from ..catalog import CatalogStore, build_sample_items
from ..configuration import GuideSettings
from ..logging_utils import get_logger
from .base import Detector
from .cascade import RecognitionCascade
from .embedding_index import EmbeddingIndex
from .simulation import SimulatedDetector
from .tiers import CategoryClassifier, EmbeddingExtractor, TextReader

LOGGER = get_logger(__name__)


def build_detector(
    settings: GuideSettings,
    store: CatalogStore,
    *,
    classifier: Optional[CategoryClassifier] = None,
    extractor: Optional[EmbeddingExtractor] = None,
    text_reader: Optional[TextReader] = None,
    index: Optional[EmbeddingIndex] = None,
    clock: Optional[Callable[[], float]] = None,
    rng: Optional[np.random.Generator] = None,
) -> Detector:
    """Return the detector the guide should use for its whole lifetime."""

    collaborators = (classifier, extractor, text_reader)
    if settings.simulation_mode or any(collaborator is None for collaborator in collaborators):
        if not settings.simulation_mode:
            LOGGER.warning("Recognition models not supplied; falling back to simulation mode")
        samples = build_sample_items()
        store.bulk_upsert(samples)
        kwargs = {"rng": rng}
        if clock is not None:
            kwargs["clock"] = clock
        return SimulatedDetector(samples, **kwargs)

    return RecognitionCascade(
        classifier=classifier,
        extractor=extractor,
        text_reader=text_reader,
        index=index if index is not None else EmbeddingIndex(),
        store=store,
    )
