"""Mini README: HTTP tests for the FastAPI service using TestClient."""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from helpers import make_result
from museguide.catalog import CatalogStore
from museguide.interface import create_application
from museguide.narration import (
    GenerationParams,
    LoggingSpeechPlayer,
    NarrationBackend,
    NarrationController,
    NarrationGenerator,
)
from museguide.pipeline import GuidePipeline
from museguide.recognition import DetectionResult, Detector
from museguide.session import SessionTracker
from museguide.stability import StabilityFilter


class QueueDetector(Detector):
    detector_name = "queue"

    def __init__(self) -> None:
        self.queue: List[Optional[DetectionResult]] = []

    def detect(self, frame: bytes) -> Optional[DetectionResult]:
        return self.queue.pop(0) if self.queue else None


@pytest.fixture
def detector() -> QueueDetector:
    return QueueDetector()


@pytest.fixture
def pipeline(store: CatalogStore, detector: QueueDetector, clock) -> GuidePipeline:
    tracker = SessionTracker()
    controller = NarrationController(NarrationGenerator(), LoggingSpeechPlayer(), store, tracker)
    return GuidePipeline(
        store=store,
        detector=detector,
        tracker=tracker,
        narration=controller,
        stability_filter=StabilityFilter(clock=clock),
    )


@pytest.fixture
def client(pipeline: GuidePipeline) -> TestClient:
    return TestClient(create_application(pipeline))


def test_list_and_filter_items(client: TestClient) -> None:
    response = client.get("/items")
    assert response.status_code == 200
    assert len(response.json()["items"]) == 5

    statues = client.get("/items", params={"category": "statue"}).json()["items"]
    assert [item["id"] for item in statues] == ["gem_003"]

    assert client.get("/items", params={"category": "spaceship"}).status_code == 400


def test_get_item_and_missing_item(client: TestClient) -> None:
    payload = client.get("/items/gem_001").json()
    assert payload["name"] == "Golden Mask of Tutankhamun"
    assert payload["storyFacts"]
    assert client.get("/items/gem_404").status_code == 404


def test_search_commits_and_narrates(client: TestClient, pipeline: GuidePipeline) -> None:
    response = client.get("/search", params={"q": "khafre"})
    assert response.status_code == 200
    assert response.json()["method"] == "manual"
    pipeline.wait_for_narration(timeout=5)

    assert client.get("/session").json() == {"items": ["gem_003"]}
    assert client.get("/search", params={"q": "unicorn"}).status_code == 404
    assert client.get("/search", params={"q": ""}).status_code == 422


def test_stats_and_import_pack(client: TestClient) -> None:
    assert client.get("/stats").json()["count"] == 5

    document = {
        "artifacts": [
            {"id": "pack_001", "name": "Ushabti of Seti I", "category": "ushabti", "storyFacts": ["A servant figure"]}
        ]
    }
    assert client.post("/import-pack", json=document).json() == {"imported": 1}
    assert client.post("/import-pack", json={"items": []}).json() == {"imported": 0}
    assert client.get("/stats").json()["count"] == 6


def test_detect_reports_stability_progress(client: TestClient, detector: QueueDetector, samples) -> None:
    detector.queue = [make_result(samples["gem_004"])] * 3

    first = client.post("/detect", files={"frame": ("frame.jpg", b"jpeg", "image/jpeg")}).json()
    assert first["phase"] == "pending"
    assert first["agreement_count"] == 1
    assert first["event"] is None

    client.post("/detect", files={"frame": ("frame.jpg", b"jpeg", "image/jpeg")})
    third = client.post("/detect", files={"frame": ("frame.jpg", b"jpeg", "image/jpeg")}).json()
    assert third["phase"] == "committed"
    assert third["event"] == "committed"
    assert third["committed"]["item_id"] == "gem_004"


def test_history_listing_and_clearing(client: TestClient) -> None:
    client.post("/narrate/gem_002")
    client.post("/narrate/gem_005")

    history = client.get("/history").json()["history"]
    assert [entry["item_id"] for entry in history] == ["gem_005", "gem_002"]

    assert client.delete("/history").json() == {"history": []}
    assert client.get("/history").json()["history"] == []
    assert client.get("/session").json()["items"] == ["gem_002", "gem_005"]


def test_narration_endpoints(client: TestClient) -> None:
    assert client.post("/narration/more").status_code == 404
    assert client.post("/narrate/gem_404").status_code == 404

    narration = client.post("/narrate/gem_001").json()
    assert narration["item_id"] == "gem_001"
    assert narration["mode"] == "standard"
    assert narration["duration_seconds"] > 0

    deeper = client.post("/narration/more").json()
    assert deeper["changed"] is True
    assert deeper["narration"]["mode"] == "deep"

    unchanged = client.post("/narration/more").json()
    assert unchanged["changed"] is False
    assert unchanged["narration"]["mode"] == "deep"

    assert client.post("/narration/stop").json() == {"stopped": True}
    assert client.post("/narration/more").status_code == 404


def test_storage_outage_maps_to_503(client: TestClient, store: CatalogStore) -> None:
    store.close()
    response = client.get("/stats")
    assert response.status_code == 503
    assert response.json()["detail"] == "Catalog unavailable"


class GatedBackend(NarrationBackend):
    """Backend that holds each request until the test releases it."""

    backend_name = "gated"

    def __init__(self) -> None:
        self.started = threading.Event()
        self.release = threading.Event()
        self.finished = threading.Event()

    def complete(self, prompt: str, params: GenerationParams) -> str:
        self.started.set()
        self.release.wait(timeout=5)
        self.finished.set()
        return "A story told slowly."


def test_slow_narration_does_not_stall_other_requests(store: CatalogStore, detector, clock) -> None:
    backend = GatedBackend()
    tracker = SessionTracker()
    controller = NarrationController(NarrationGenerator(backend), LoggingSpeechPlayer(), store, tracker)
    pipeline = GuidePipeline(
        store=store,
        detector=detector,
        tracker=tracker,
        narration=controller,
        stability_filter=StabilityFilter(clock=clock),
    )
    responses: Dict[str, object] = {}

    with TestClient(create_application(pipeline)) as client:
        worker = threading.Thread(
            target=lambda: responses.setdefault("narrate", client.post("/narrate/gem_001"))
        )
        worker.start()
        try:
            assert backend.started.wait(timeout=5)
            assert client.get("/stats").status_code == 200
            detected = client.post("/detect", files={"frame": ("frame.jpg", b"jpeg", "image/jpeg")})
            assert detected.status_code == 200
            assert not backend.finished.is_set()
        finally:
            backend.release.set()
            worker.join(timeout=5)

    assert responses["narrate"].json()["text"] == "A story told slowly."
