"""Mini README: Tests for the recognition cascade and simulated detector.

Structure:
    * fakes - scripted classifier, extractor and text reader collaborators.
    * cascade tiers - thresholds, fall-through order and tier outputs.
    * failure semantics - per-call wrapping and permanent load failure.
    * simulation - cooldown, round-robin selection and result bounds.
    * factory - one-time choice between simulation and the real cascade.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np
import pytest

from helpers import FakeClock
from museguide.catalog import CatalogStore, ItemCategory, build_sample_items
from museguide.configuration import GuideSettings
from museguide.errors import InitializationFailure, RecognitionFailure
from museguide.recognition import (
    BoundingBox,
    CategoryClassifier,
    CategoryPrediction,
    DetectionMethod,
    DetectionResult,
    EmbeddingExtractor,
    EmbeddingIndex,
    RecognitionCascade,
    SimulatedDetector,
    TextReader,
    build_detector,
)

STATUE_BOX = BoundingBox(x=0.25, y=0.1, width=0.5, height=0.8)


class ScriptedClassifier(CategoryClassifier):
    def __init__(self, prediction: Optional[CategoryPrediction] = None, fail_load: bool = False) -> None:
        self.prediction = prediction
        self.fail_load = fail_load
        self.load_calls = 0
        self.error: Optional[Exception] = None

    def load(self) -> None:
        self.load_calls += 1
        if self.fail_load:
            raise RuntimeError("model file missing")

    def classify(self, frame: bytes) -> Optional[CategoryPrediction]:
        if self.error is not None:
            raise self.error
        return self.prediction


class FixedExtractor(EmbeddingExtractor):
    def __init__(self, vector: Sequence[float]) -> None:
        self.vector = list(vector)
        self.calls = 0

    def extract(self, frame: bytes, box: BoundingBox) -> Sequence[float]:
        self.calls += 1
        return self.vector


class FixedReader(TextReader):
    def __init__(self, text: str = "") -> None:
        self.text = text
        self.calls = 0

    def read(self, frame: bytes) -> str:
        self.calls += 1
        return self.text


@pytest.fixture
def index() -> EmbeddingIndex:
    reference = EmbeddingIndex()
    reference.add("gem_003", ItemCategory.STATUE, [1.0, 0.0, 0.0])
    reference.add("gem_001", ItemCategory.FUNERARY_MASK, [0.0, 1.0, 0.0])
    return reference


def _cascade(store, index, *, confidence=0.9, vector=(1.0, 0.0, 0.0), text="", classifier=None):
    classifier = classifier or ScriptedClassifier(
        CategoryPrediction(category=ItemCategory.STATUE, confidence=confidence, bounding_box=STATUE_BOX)
    )
    extractor = FixedExtractor(vector)
    reader = FixedReader(text)
    cascade = RecognitionCascade(
        classifier=classifier,
        extractor=extractor,
        text_reader=reader,
        index=index,
        store=store,
    )
    return cascade, classifier, extractor, reader


def _assert_bounds(result: DetectionResult) -> None:
    box = result.bounding_box
    assert 0.0 <= result.confidence <= 1.0
    for value in (box.x, box.y, box.width, box.height):
        assert 0.0 <= value <= 1.0
    assert box.x + box.width <= 1.0
    assert box.y + box.height <= 1.0


def test_visual_tier_returns_similarity_and_classifier_box(store: CatalogStore, index) -> None:
    cascade, _, _, reader = _cascade(store, index)
    result = cascade.detect(b"frame")

    assert result is not None
    assert result.item.item_id == "gem_003"
    assert result.method is DetectionMethod.VISUAL
    assert result.bounding_box == STATUE_BOX
    assert result.confidence == pytest.approx(1.0)
    assert reader.calls == 0
    _assert_bounds(result)


def test_low_category_confidence_skips_similarity_and_uses_text(store: CatalogStore, index) -> None:
    cascade, _, extractor, _ = _cascade(store, index, confidence=0.70, text="Statue of Khafre")
    result = cascade.detect(b"frame")

    assert extractor.calls == 0
    assert result is not None
    assert result.method is DetectionMethod.TEXT
    assert result.confidence == pytest.approx(0.70)
    assert result.bounding_box == BoundingBox(x=0.1, y=0.1, width=0.8, height=0.8)
    _assert_bounds(result)


def test_weak_similarity_falls_through_to_text(store: CatalogStore, index) -> None:
    # cosine similarity of (1, 1, 0) with (1, 0, 0) is ~0.707
    cascade, _, extractor, reader = _cascade(store, index, vector=(1.0, 1.0, 0.0), text="rosetta")
    result = cascade.detect(b"frame")

    assert extractor.calls == 1
    assert reader.calls == 1
    assert result is not None
    assert result.item.item_id == "gem_005"
    assert result.method is DetectionMethod.TEXT


def test_similarity_is_restricted_to_predicted_category(store: CatalogStore, index) -> None:
    # The vector matches the mask reference exactly, but the classifier says statue.
    cascade, _, _, _ = _cascade(store, index, vector=(0.0, 1.0, 0.0))
    assert cascade.detect(b"frame") is None


def test_no_tier_succeeds_returns_none(store: CatalogStore, index) -> None:
    classifier = ScriptedClassifier(prediction=None)
    cascade, _, _, _ = _cascade(store, index, text="   ", classifier=classifier)
    assert cascade.detect(b"frame") is None

    cascade, _, _, _ = _cascade(store, index, text="unknown plaque", classifier=classifier)
    assert cascade.detect(b"frame") is None


def test_index_entry_missing_from_catalog_falls_through(store: CatalogStore) -> None:
    orphan_index = EmbeddingIndex()
    orphan_index.add("gem_404", ItemCategory.STATUE, [1.0, 0.0, 0.0])
    cascade, _, _, _ = _cascade(store, orphan_index)
    assert cascade.detect(b"frame") is None


def test_collaborator_error_is_wrapped_as_recognition_failure(store: CatalogStore, index) -> None:
    cascade, classifier, _, _ = _cascade(store, index)
    classifier.error = RuntimeError("inference crashed")

    with pytest.raises(RecognitionFailure):
        cascade.detect(b"frame")

    classifier.error = None
    assert cascade.detect(b"frame") is not None


def test_load_failure_is_permanent_and_not_retried(store: CatalogStore, index) -> None:
    classifier = ScriptedClassifier(fail_load=True)
    cascade, _, _, _ = _cascade(store, index, classifier=classifier)

    assert not cascade.available
    for _ in range(3):
        with pytest.raises(InitializationFailure):
            cascade.detect(b"frame")
    assert classifier.load_calls == 1


def test_embedding_index_round_trips_through_npz(tmp_path, index) -> None:
    path = tmp_path / "embeddings.npz"
    index.save(path)
    loaded = EmbeddingIndex.load(path)

    assert len(loaded) == 2
    match = loaded.search([0.9, 0.1, 0.0], "statue")
    assert match.item_id == "gem_003"
    assert match.similarity > 0.95
    assert loaded.search([1.0, 0.0, 0.0], ItemCategory.PAPYRUS) is None


def test_embedding_index_rejects_mismatched_dimensions(index) -> None:
    with pytest.raises(ValueError):
        index.add("gem_002", ItemCategory.CANOPIC, [1.0, 0.0])
    with pytest.raises(ValueError):
        index.search([1.0, 0.0], ItemCategory.STATUE)


def test_bounding_box_rejects_out_of_frame_values() -> None:
    with pytest.raises(ValueError):
        BoundingBox(x=0.6, y=0.1, width=0.5, height=0.2)
    with pytest.raises(ValueError):
        BoundingBox(x=-0.1, y=0.1, width=0.5, height=0.2)


def test_simulation_honours_cooldown_and_cycles_samples() -> None:
    clock = FakeClock(start=10_000)
    samples = build_sample_items()
    detector = SimulatedDetector(samples, probability=1.0, clock=clock, rng=np.random.default_rng(7))

    first = detector.detect(b"")
    assert first is not None and first.item.item_id == "gem_001"

    clock.advance(2_999)
    assert detector.detect(b"") is None

    clock.advance(1)
    second = detector.detect(b"")
    assert second is not None and second.item.item_id == "gem_002"

    seen: List[str] = []
    for _ in range(len(samples)):
        clock.advance(3_000)
        seen.append(detector.detect(b"").item.item_id)
    assert seen == ["gem_003", "gem_004", "gem_005", "gem_001", "gem_002"]


def test_simulation_results_stay_within_bounds() -> None:
    clock = FakeClock()
    detector = SimulatedDetector(build_sample_items(), probability=1.0, clock=clock, rng=np.random.default_rng(1))
    for _ in range(50):
        clock.advance(3_000)
        result = detector.detect(b"")
        assert result is not None
        assert 0.85 <= result.confidence <= 0.95
        assert result.method is DetectionMethod.VISUAL
        _assert_bounds(result)


def test_simulation_misses_when_roll_fails() -> None:
    detector = SimulatedDetector(build_sample_items(), probability=0.0, clock=FakeClock(), rng=np.random.default_rng(3))
    assert all(detector.detect(b"") is None for _ in range(20))


def test_factory_selects_simulation_and_seeds_catalog() -> None:
    catalog = CatalogStore()
    detector = build_detector(GuideSettings(simulation_mode=True), catalog)
    assert isinstance(detector, SimulatedDetector)
    assert catalog.stats().count == 5


def test_factory_builds_cascade_when_models_supplied(index) -> None:
    catalog = CatalogStore()
    detector = build_detector(
        GuideSettings(simulation_mode=False),
        catalog,
        classifier=ScriptedClassifier(),
        extractor=FixedExtractor([1.0, 0.0, 0.0]),
        text_reader=FixedReader(),
        index=index,
    )
    assert isinstance(detector, RecognitionCascade)
    assert catalog.stats().count == 0


def test_factory_falls_back_to_simulation_without_models() -> None:
    detector = build_detector(GuideSettings(simulation_mode=False), CatalogStore(), classifier=ScriptedClassifier())
    assert isinstance(detector, SimulatedDetector)
