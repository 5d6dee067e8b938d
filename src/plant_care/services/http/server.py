from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ...api import DraftPayload, ValidationErrorPayload, serialize_event, serialize_events
from ...bootstrap import configure_logging
from ...domain import PersistenceError, ValidationError
from ..context import ServiceContext
from ..events import EventLifecycleCoordinator

logger = logging.getLogger(__name__)


def create_app(context: Optional[ServiceContext] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "context", None) is None:
            app.state.context = ServiceContext()
        await app.state.context.coordinator.initialize()
        yield

    app = FastAPI(title="Plant Care Local API", version="0.1.0", lifespan=lifespan)
    app.state.context = context
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _coordinator(request: Request) -> EventLifecycleCoordinator:
        return request.app.state.context.coordinator

    @app.get("/api/events")
    async def list_events(request: Request, upcoming: bool = False) -> Dict[str, Any]:
        coordinator = _coordinator(request)
        await coordinator.initialize()
        events = coordinator.upcoming() if upcoming else coordinator.list()
        return {"events": serialize_events(events)}

    @app.post("/api/events", status_code=201)
    async def create_event(request: Request, payload: DraftPayload) -> Any:
        try:
            event = await _coordinator(request).create(payload.to_domain())
        except ValidationError as exc:
            logger.info("Rejected plant event draft: %s", exc.message)
            return JSONResponse(status_code=422, content=ValidationErrorPayload.from_error(exc).model_dump())
        except PersistenceError as exc:
            raise HTTPException(status_code=500, detail=exc.message) from exc
        return serialize_event(event)

    @app.delete("/api/events/{event_id}")
    async def delete_event(request: Request, event_id: str) -> Dict[str, Any]:
        try:
            await _coordinator(request).remove(event_id)
        except PersistenceError as exc:
            raise HTTPException(status_code=500, detail=exc.message) from exc
        return {"removed": event_id}

    return app


def run_local_server(host: str = "127.0.0.1", port: int = 8000, *, context: Optional[ServiceContext] = None) -> None:
    import asyncio
    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    configure_logging()
    config = Config()
    config.bind = [f"{host}:{port}"]
    logger.info("Serving plant care API on %s:%s", host, port)
    asyncio.run(serve(create_app(context), config))
