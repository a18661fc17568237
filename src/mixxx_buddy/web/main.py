import asyncio
import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger

from mixxx_buddy.core.config import Config
from mixxx_buddy.domain.session.poller import SessionPoller
from mixxx_buddy.domain.session.store import SnapshotStore

from .deps import get_store
from .routers import session
from .schemas import HealthResponse


def create_app(
    config: Optional[Config] = None,
    store: Optional[SnapshotStore] = None,
    conn: Optional[sqlite3.Connection] = None,
) -> FastAPI:
    """Build the API app around an explicitly owned snapshot store.

    Args:
        config: Application configuration (defaults when omitted)
        store: Snapshot store shared by the poller and the routes
        conn: Read-only Mixxx connection; when given, the app lifespan runs
            a SessionPoller against it and stops it on shutdown
    """
    config = config or Config()
    store = store or SnapshotStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        poller = None
        if conn is not None:
            poller = SessionPoller(
                conn,
                store,
                interval_seconds=config.poller.interval_seconds,
                error_backoff_seconds=config.poller.error_backoff_seconds,
            )
            poller.start()
        app.state.poller = poller
        try:
            yield
        finally:
            if poller is not None:
                await asyncio.to_thread(poller.stop)

    app = FastAPI(title="Mixxx Buddy API", version="1.0.0", lifespan=lifespan)
    app.state.config = config
    app.state.store = store
    app.state.poller = None

    if config.web.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.web.allowed_origins,
            allow_methods=["GET"],
            allow_headers=["*"],
        )

    app.include_router(session.router, prefix="/api", tags=["session"])

    @app.get("/health", response_model=HealthResponse)
    def health_check(snapshot_store: SnapshotStore = Depends(get_store)):
        snapshot, updated_at = snapshot_store.current_with_timestamp()
        return HealthResponse(
            status="healthy",
            track_count=len(snapshot),
            updated_at=updated_at.isoformat() if updated_at else None,
        )

    # Mounted last so it never shadows the API routes
    if config.web.static_dir:
        static_dir = Path(config.web.static_dir)
        if static_dir.is_dir():
            app.mount("/", StaticFiles(directory=static_dir, html=True), name="display")
            logger.info(f"Serving display assets from {static_dir}")
        else:
            logger.warning(f"Static directory not found, not serving assets: {static_dir}")

    return app
