"""Mini README: FastAPI service exposing the guide.

Structure:
    * create_application - application factory wiring routes to a pipeline.

The service lets a companion app (or a curator) browse and import the
catalog, push camera frames through the detection cycle, read the visit
history, and drive narration. Missing records map to 404, invalid input to
400 and storage outages to 503.

Route handlers are plain functions. FastAPI runs them in its threadpool, so
SQLite access or a slow narration backend never stalls the event loop.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, File, HTTPException, Query, Request, UploadFile
from fastapi.responses import JSONResponse

from ..catalog import ItemCategory
from ..configuration import get_settings
from ..errors import InitializationFailure, StorageFailure
from ..logging_utils import get_logger
from ..pipeline import GuidePipeline

LOGGER = get_logger(__name__)


def create_application(pipeline: Optional[GuidePipeline] = None) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    app = FastAPI(title="Museum Guide", version="0.1.0")
    guide = pipeline or GuidePipeline.from_settings(get_settings())

    @app.exception_handler(StorageFailure)
    async def storage_failure(request: Request, error: StorageFailure) -> JSONResponse:
        LOGGER.error("Storage failure serving %s: %s", request.url.path, error)
        return JSONResponse({"detail": "Catalog unavailable"}, status_code=503)

    @app.exception_handler(InitializationFailure)
    async def initialization_failure(request: Request, error: InitializationFailure) -> JSONResponse:
        LOGGER.error("Initialisation failure serving %s: %s", request.url.path, error)
        return JSONResponse({"detail": str(error)}, status_code=503)

    @app.get("/items")
    def list_items(category: Optional[str] = Query(None)) -> JSONResponse:
        """Return catalog items, optionally filtered by category."""

        if category:
            try:
                items = guide.store.get_by_category(ItemCategory.from_str(category))
            except ValueError as error:
                raise HTTPException(status_code=400, detail=str(error)) from error
        else:
            items = guide.store.get_all()
        return JSONResponse({"items": [item.as_dict() for item in items]})

    @app.get("/items/{item_id}")
    def get_item(item_id: str) -> JSONResponse:
        item = guide.store.get_by_id(item_id)
        if item is None:
            raise HTTPException(status_code=404, detail=f"Item {item_id} not found")
        return JSONResponse(item.as_dict())

    @app.get("/search")
    def search(q: str = Query(..., min_length=1)) -> JSONResponse:
        """Identify an item by name and start narrating it."""

        result = guide.search(q)
        if result is None:
            raise HTTPException(status_code=404, detail=f"No item matches '{q}'")
        return JSONResponse(result.as_dict())

    @app.get("/stats")
    def stats() -> JSONResponse:
        summary = guide.store.stats()
        return JSONResponse({"count": summary.count, "categories": summary.categories})

    @app.post("/import-pack")
    def import_pack(document: Dict[str, Any] = Body(...)) -> JSONResponse:
        """Import a museum pack ``{"artifacts": [...]}``."""

        imported = guide.store.import_pack(document)
        if imported == 0:
            LOGGER.warning("Pack import via API wrote no records")
        return JSONResponse({"imported": imported})

    @app.post("/detect")
    def detect(frame: UploadFile = File(...)) -> JSONResponse:
        """Run one detection cycle on an uploaded frame."""

        data = frame.file.read()
        event = guide.process_frame(data)
        committed = guide.stability_filter.committed_result
        state = guide.stability_filter.state
        return JSONResponse(
            {
                "phase": state.phase.value,
                "pending_id": state.pending_id,
                "agreement_count": state.agreement_count,
                "event": event.kind.value if event is not None else None,
                "committed": committed.as_dict() if committed is not None else None,
            }
        )

    @app.get("/history")
    def history() -> JSONResponse:
        return JSONResponse({"history": [entry.as_dict() for entry in guide.tracker.history]})

    @app.delete("/history")
    def clear_history() -> JSONResponse:
        guide.tracker.clear_history()
        return JSONResponse({"history": []})

    @app.get("/session")
    def session() -> JSONResponse:
        return JSONResponse({"items": guide.tracker.session_context})

    @app.post("/narrate/{item_id}")
    def narrate(item_id: str) -> JSONResponse:
        narration = guide.narrate(item_id)
        if narration is None:
            raise HTTPException(status_code=404, detail=f"Item {item_id} not found")
        return JSONResponse(narration.as_dict())

    @app.post("/narration/more")
    def narration_more() -> JSONResponse:
        """Deepen the current narration; unchanged at the deepest mode."""

        if guide.narration.current is None:
            raise HTTPException(status_code=404, detail="Nothing is being narrated")
        deeper = guide.narration.request_more()
        narration = deeper or guide.narration.current
        return JSONResponse({"changed": deeper is not None, "narration": narration.as_dict()})

    @app.post("/narration/stop")
    def narration_stop() -> JSONResponse:
        guide.narration.stop()
        return JSONResponse({"stopped": True})

    @app.on_event("shutdown")
    def shutdown() -> None:
        guide.shutdown()

    return app
