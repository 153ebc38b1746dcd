"""Main FastAPI application."""

import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from metaschema.api.deps import get_db, get_schema_cache
from metaschema.api.v1 import api_router
from metaschema.cache.observers import SchemaCacheInvalidator
from metaschema.cache.schema_cache import SchemaCache
from metaschema.config import settings
from metaschema.database import SessionLocal

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Metadata Schema Service",
    description="Multi-tenant metadata schema resolution with brand and category overrides",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix="/v1")

# Invalidate cached schemas when catalog or override rows are committed
SchemaCacheInvalidator(get_schema_cache()).attach(SessionLocal)


@app.get("/health")
def health_check(
    db: Session = Depends(get_db),
    cache: SchemaCache = Depends(get_schema_cache),
):
    """Health check endpoint."""
    # Check database
    db_status = "disconnected"
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {str(e)}"

    # Check cache backend
    cache_status = "disconnected"
    try:
        if cache.backend.ping():
            cache_status = "connected"
    except Exception as e:
        cache_status = f"error: {str(e)}"

    overall_status = "ok" if db_status == "connected" and cache_status == "connected" else "degraded"

    return {
        "status": overall_status,
        "db": db_status,
        "cache": cache_status,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "metaschema.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
