"""Resolved metadata schema endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from metaschema.api.deps import get_schema_resolver, get_tenant_id, get_upload_schema_resolver
from metaschema.schemas.metadata_schema import ResolvedSchema, UploadSchema
from metaschema.services.errors import InvalidAssetTypeError, ScopeContractError
from metaschema.services.schema_resolver import SchemaResolver
from metaschema.services.upload_schema_resolver import UploadSchemaResolver

logger = logging.getLogger(__name__)

router = APIRouter()


def _unprocessable(error: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=str(error),
    )


@router.get("/schema", response_model=ResolvedSchema)
def get_metadata_schema(
    asset_type: str = Query(..., description="Asset type (image, video, document)"),
    brand_id: Optional[int] = Query(None, description="Brand scope"),
    category_id: Optional[int] = Query(None, description="Category scope"),
    tenant_id: int = Depends(get_tenant_id),
    resolver: SchemaResolver = Depends(get_schema_resolver),
):
    """
    Resolved metadata schema for a tenant/brand/category/asset type context.

    Only visible fields are returned; each carries its effective upload and
    filter flags and its visible options.
    """
    try:
        return resolver.resolve(tenant_id, brand_id, category_id, asset_type)
    except (InvalidAssetTypeError, ScopeContractError) as e:
        logger.info(f"Rejected schema request for tenant {tenant_id}: {e}")
        raise _unprocessable(e)


@router.get("/upload-schema", response_model=UploadSchema)
def get_upload_schema(
    asset_type: str = Query(..., description="Asset type (image, video, document)"),
    brand_id: Optional[int] = Query(None, description="Brand scope"),
    category_id: Optional[int] = Query(None, description="Category scope"),
    user_role: Optional[str] = Query(None, description="Role of the uploading user"),
    tenant_id: int = Depends(get_tenant_id),
    resolver: UploadSchemaResolver = Depends(get_upload_schema_resolver),
):
    """Upload form schema: editable, upload-visible fields grouped by group key."""
    try:
        return resolver.resolve(tenant_id, brand_id, category_id, asset_type, user_role=user_role)
    except (InvalidAssetTypeError, ScopeContractError) as e:
        logger.info(f"Rejected upload schema request for tenant {tenant_id}: {e}")
        raise _unprocessable(e)
