"""API v1 router."""

from fastapi import APIRouter

from metaschema.api.v1.endpoints import health, metadata_schema, metadata_visibility

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(metadata_schema.router, prefix="/metadata", tags=["metadata-schema"])
api_router.include_router(metadata_visibility.router, prefix="/metadata", tags=["metadata-visibility"])
