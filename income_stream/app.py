"""
Income Stream Web API - FastAPI entry point.

Usage:
    uvicorn income_stream.app:app --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from income_stream.api.dependencies import get_common_deps
from income_stream.api.errors import error_response, register_exception_handlers
from income_stream.api.routers import (
    dividends_router,
    exchange_rates_router,
    jobs_router,
    portfolio_router,
    quotes_router,
    settings_router,
    stocks_router,
)
from income_stream.jobs import configure as configure_jobs
from income_stream.jobs import init as init_jobs
from income_stream.jobs import stop as stop_jobs
from income_stream.paths import WEB_DIR
from income_stream.version import VERSION

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize services on startup, cleanup on shutdown."""
    deps = await get_common_deps()

    # Startup
    await deps.db.connect()
    await deps.settings.init_defaults()
    deps.quotes.set_cache_ttl_days(await deps.settings.get("quote_cache_ttl_days"))

    if await deps.settings.get("seed_additional_stocks"):
        added = await deps.stocks.seed_additional_stocks()
        if added:
            logger.info(f"Added {added} stocks to the catalog")

    job_deps = {"stocks": deps.stocks, "portfolio": deps.portfolio, "currency": deps.currency}
    scheduler_started = False
    if await deps.settings.get("scheduler_enabled"):
        await init_jobs(deps.settings, **job_deps)
        scheduler_started = True
        logger.info("Job scheduler started")
    else:
        # Manual runs through /api/jobs still work without the scheduler
        configure_jobs(**job_deps)

    yield

    # Shutdown
    if scheduler_started:
        await stop_jobs()
        logger.info("Job scheduler stopped")
    await deps.db.close()


app = FastAPI(
    title="Income Stream",
    description="Three-tier dividend income portfolio tracker",
    version=VERSION,
    lifespan=lifespan,
)

# CORS for the dashboard dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routers
app.include_router(stocks_router, prefix="/api")
app.include_router(quotes_router, prefix="/api")
app.include_router(portfolio_router, prefix="/api")
app.include_router(dividends_router, prefix="/api")
app.include_router(exchange_rates_router, prefix="/api")
app.include_router(settings_router, prefix="/api")
app.include_router(jobs_router, prefix="/api")


@app.get("/api/health")
async def health() -> dict:
    return {"status": "ok", "version": VERSION}


# -----------------------------------------------------------------------------
# Static Files (Web UI)
# -----------------------------------------------------------------------------

def resolve_spa_file(web_dir: Path, path: str) -> Path:
    """File to serve for a UI path. Anything missing or outside web_dir falls back to index.html."""
    root = web_dir.resolve()
    file_path = (web_dir / path).resolve()
    if file_path.is_relative_to(root) and file_path.is_file():
        return file_path
    return root / "index.html"


if WEB_DIR.exists():
    from fastapi.responses import FileResponse, JSONResponse

    # Serve static assets
    app.mount("/assets", StaticFiles(directory=str(WEB_DIR / "assets")), name="assets")

    # Catch-all for client-side routing - serve index.html
    @app.get("/{path:path}")
    async def serve_spa(path: str):
        """Serve index.html for all non-API routes (SPA support)."""
        # API paths must return API 404, not SPA HTML.
        if path.startswith("api/"):
            return JSONResponse(status_code=404, content=error_response("Not found"))
        return FileResponse(resolve_spa_file(WEB_DIR, path))
