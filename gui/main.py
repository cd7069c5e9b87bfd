"""Platform GUI — FastAPI application entry point.

Invariants:
    - UI routes registered from the explicit ROUTES table (no auto-discovery)
    - Global error handlers map GuiError → redirect or error page
    - SDK initialized on startup and closed on shutdown via lifespan
    - Static files mounted last so every table route takes precedence

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app() factory so tests build an app without touching the network
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from gui import __version__
from gui.api.error_handlers import register_error_handlers
from gui.api.routes import health
from gui.api.routes.table import build_router
from gui.config import get_settings
from gui.infrastructure.observability import setup_logging
from gui.infrastructure.sdk_manager import close_sdk, init_sdk

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.gui_log_level, settings.gui_log_format)
    init_sdk(settings)
    logger.info(f"GUI service started on port {settings.gui_port}")
    yield
    await close_sdk()
    logger.info("GUI service shutting down")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Platform GUI", version=__version__, lifespan=lifespan,
        docs_url=None, redoc_url=None, openapi_url=None,
    )
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(build_router())

    # Mounted after all routes: "/" catch-all for css/js/images
    if STATIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=STATIC_DIR), name="static")
    return app


app = create_app()
