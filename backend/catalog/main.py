"""
FastAPI application for the Catalog Hub backend.

Provides:
- Product pages and htmx fragments (list, search, add, edit, delete)
- CSV/JSON catalog export
- A health check

On startup the database is initialized and the remote catalog import is run
once on a background thread.

Run with:
    cd backend
    uvicorn catalog.main:app --reload --port 8000
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from pydantic import BaseModel

from .config import Settings, configure_logging, load_settings
from .routes import exports, products
from .services.catalog_service import CatalogService
from .services.database import DatabasePool
from .services.product_importer import build_importer
from .services.product_store import ProductStore


logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: datetime
    database: str


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI app; connections are opened in the lifespan."""
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Wires storage -> service -> importer, starts the one-shot import and
        waits for the import before closing the database on shutdown.
        """
        db_pool = DatabasePool(
            database_url=settings.database_url,
            sqlite_path=settings.sqlite_path,
            minconn=settings.db_pool_min,
            maxconn=settings.db_pool_max,
        )
        try:
            db_pool.initialize()
        except Exception as e:
            logger.error("Could not initialize database: %s", e)
            logger.error("Product endpoints will not work without a database connection")

        service = CatalogService(ProductStore(db_pool))
        importer = build_importer(settings, service)

        app.state.settings = settings
        app.state.db_pool = db_pool
        app.state.catalog_service = service
        app.state.importer = importer

        if settings.import_on_startup and db_pool.is_initialized:
            importer.start_background()

        yield

        importer.stop(timeout=settings.shutdown_timeout)
        db_pool.close()
        logger.info("Database connection closed")

    app = FastAPI(
        title="Catalog Hub",
        description="Product catalog with remote catalog import and CSV/JSON export",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(exports.router)
    app.include_router(products.router)

    @app.get("/api/health", response_model=HealthResponse, tags=["health"])
    def health_check(request: Request):
        """
        Health check endpoint.

        Returns:
            Health status including database connectivity
        """
        db_status = "unknown"

        try:
            with request.app.state.db_pool.get_cursor() as cursor:
                cursor.execute("SELECT 1")
                db_status = "connected"
        except Exception as e:
            db_status = f"error: {str(e)}"

        return HealthResponse(
            status="ok",
            timestamp=datetime.utcnow(),
            database=db_status,
        )

    return app


app = create_app()
