from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .api.routes import router as api_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .middleware import RequestLoggingMiddleware
from .services.storage import JsonEntryStore
from .services.weather import WeatherGateway

logger = logging.getLogger(__name__)
FRONTEND_DIR = Path(__file__).resolve().parents[2] / "frontend"
INDEX_FILE = FRONTEND_DIR / "index.html"

LANDING_PAGE = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>Mood Tracker</title></head>
<body>
<h1>Mood Tracker</h1>
<p>Log how you feel with <code>POST /api/moods</code> and browse entries at
<a href="/api/moods">/api/moods</a>.</p>
</body>
</html>
"""


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Prepare the mood document and weather client before serving requests."""

    configure_logging()
    settings: Settings = get_settings()

    entry_store = JsonEntryStore(settings.moods_file, max_entries=settings.max_entries)
    await entry_store.initialize()

    weather_gateway = WeatherGateway(
        settings.weather_api_key,
        base_url=settings.weather_api_url,
        timeout=settings.weather_timeout_seconds,
        retries=settings.weather_retry_attempts,
    )
    if not weather_gateway.configured:
        logger.warning("WEATHER_API_KEY not set, weather lookups will use the fallback")

    app.state.settings = settings
    app.state.entry_store = entry_store
    app.state.weather_gateway = weather_gateway

    logger.info(
        "Mood Tracker %s ready, data file %s",
        settings.version,
        settings.moods_file,
    )

    try:
        yield
    finally:
        await weather_gateway.close()


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(
        "Rejected request payload",
        extra={"path": request.url.path, "extra_fields": {"errors": len(exc.errors())}},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request payload"},
    )


def create_app() -> FastAPI:
    app = FastAPI(title="Mood Tracker", version=get_settings().version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    if FRONTEND_DIR.exists():
        app.mount("/static", StaticFiles(directory=FRONTEND_DIR, html=False), name="static")

    app.include_router(api_router)

    @app.get("/", response_class=HTMLResponse)
    async def root() -> str:
        if INDEX_FILE.exists():
            return INDEX_FILE.read_text(encoding="utf-8")
        return LANDING_PAGE

    @app.get("/healthz")
    async def healthz(request: Request) -> dict[str, str]:
        return {"status": "ok", "version": request.app.state.settings.version}

    @app.get("/readyz")
    async def readyz(request: Request) -> dict[str, Any]:
        store: JsonEntryStore = request.app.state.entry_store
        store_ok = True
        store_detail = "ok"
        try:
            await store.healthcheck()
        except OSError as exc:
            store_ok = False
            store_detail = str(exc)
        return {"ready": store_ok, "store": {"ok": store_ok, "detail": store_detail}}

    @app.get("/metrics")
    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()
