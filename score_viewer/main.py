import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request

from .cloud import ClientFactory, GoogleSheetsClient
from .config import Settings
from .models import CloudSource, HealthResponse, LocalSource, SourceRequest, SourceResponse, TableResponse
from .poller import Poller
from .sources import SourceSelector
from .view import TableView

VERSION = "2.0.0-pre1"

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, client_factory: Optional[ClientFactory] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    if client_factory is None:
        client_factory = lambda: GoogleSheetsClient(settings.credentials_path)  # noqa: E731

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(level=settings.log_level.upper())
        view = TableView()
        poller = Poller(
            SourceSelector(client_factory),
            view,
            tick_seconds=settings.tick_seconds,
            gate_ticks=settings.gate_ticks,
            workers=settings.workers,
        )
        app.state.view = view
        app.state.poller = poller
        runner = asyncio.create_task(poller.run())
        logger.info("Poller started (tick %.1fs, every %d ticks)", settings.tick_seconds, settings.gate_ticks)
        try:
            yield
        finally:
            runner.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await runner
            poller.close()

    app = FastAPI(
        title="Score Viewer",
        description="Normalized result tables from a local CSV file or a Google Sheet",
        version=VERSION,
        lifespan=lifespan,
    )

    @app.get("/health", response_model=HealthResponse)
    def health():
        return {"ok": True}

    @app.get("/table", response_model=TableResponse)
    def table(request: Request):
        return request.app.state.view.to_response()

    @app.get("/source", response_model=SourceResponse)
    def source(request: Request):
        state = request.app.state.poller.state
        return SourceResponse(source=state.source.descriptor if state else None)

    @app.put("/source", response_model=TableResponse)
    async def select_source(body: SourceRequest, request: Request):
        descriptor = body.source
        if isinstance(descriptor, LocalSource) and descriptor.path.suffix.lower() != ".csv":
            raise HTTPException(status_code=422, detail="Only CSV files are supported")
        if isinstance(descriptor, CloudSource) and not descriptor.url.strip():
            raise HTTPException(status_code=422, detail="Spreadsheet URL is required")

        await request.app.state.poller.select(descriptor)
        return request.app.state.view.to_response()

    return app


def serve() -> None:
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


app = create_app()
