"""FastAPI application serving the country stats rows."""

from pathlib import Path
from typing import Callable, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from countrystats.api.stats_api import StatsRowSource, to_records
from countrystats.config.settings import Settings
from countrystats.errors import DataSourceUnavailable
from countrystats.stats.models import StatsRow
from countrystats.utils.logging import get_logger

logger = get_logger(__name__)

RowSource = Callable[[], List[StatsRow]]


def create_app(settings: Settings, row_source: Optional[RowSource] = None) -> FastAPI:
    """
    Build the HTTP app.

    Args:
        settings: Startup settings (CORS origins, static dir, database path)
        row_source: Callable producing StatsRows; defaults to the SQLite source

    Returns:
        Configured FastAPI instance
    """
    if row_source is None:
        row_source = StatsRowSource(settings.storage.sqlite_path)

    app = FastAPI(title="Country Stats API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/healthz")
    def healthz():
        return {"ok": True}

    @app.get("/api/country-stats")
    def country_stats():
        try:
            rows = row_source()
        except DataSourceUnavailable as e:
            logger.error(f"Country stats unavailable: {e}")
            return JSONResponse(status_code=500, content={"error": "Query failed"})
        return to_records(rows)

    if settings.server.static_dir:
        setup_static_files(app, Path(settings.server.static_dir))

    return app


def setup_static_files(app: FastAPI, static_dir: Path) -> None:
    """
    Serve a built single-page front end from static_dir.

    Must be called after the API routes are registered: it adds a catch-all
    route returning index.html for any path that is not a file.
    """
    index_path = static_dir / "index.html"
    if not index_path.exists():
        logger.warning(f"Static serving disabled: {index_path} not found")
        return

    root = static_dir.resolve()

    @app.get("/{full_path:path}", include_in_schema=False)
    def serve_spa(full_path: str) -> FileResponse:
        if full_path.startswith("api/"):
            raise HTTPException(status_code=404)
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(index_path)
