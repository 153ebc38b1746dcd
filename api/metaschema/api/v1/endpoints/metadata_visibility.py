"""Visibility override and system-category suppression endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from metaschema.api.deps import get_db, get_tenant_id
from metaschema.schemas.visibility import (
    FieldVisibilityResponse,
    FieldVisibilityUpdate,
    OptionVisibilityResponse,
    OptionVisibilityUpdate,
    SuppressionResponse,
)
from metaschema.services import visibility_service
from metaschema.services.errors import ScopeContractError

router = APIRouter()


def _http_error(error: Exception) -> HTTPException:
    """Map service errors to HTTP errors."""
    if isinstance(error, LookupError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(error))


@router.put("/fields/{field_id}/visibility", response_model=FieldVisibilityResponse)
def put_field_visibility(
    field_id: int,
    body: FieldVisibilityUpdate,
    tenant_id: int = Depends(get_tenant_id),
    db: Session = Depends(get_db),
):
    """
    Create or replace the field override for one scope.

    The body is the complete flag triple; flags left out are stored as false.
    """
    try:
        return visibility_service.set_field_visibility(
            db,
            tenant_id,
            field_id,
            brand_id=body.brand_id,
            category_id=body.category_id,
            is_hidden=body.is_hidden,
            is_upload_hidden=body.is_upload_hidden,
            is_filter_hidden=body.is_filter_hidden,
        )
    except (LookupError, ValueError, ScopeContractError) as e:
        raise _http_error(e)


@router.delete("/fields/{field_id}/visibility", status_code=status.HTTP_204_NO_CONTENT)
def delete_field_visibility(
    field_id: int,
    brand_id: Optional[int] = Query(None),
    category_id: Optional[int] = Query(None),
    tenant_id: int = Depends(get_tenant_id),
    db: Session = Depends(get_db),
):
    """Remove the field override for one scope; the next broader tier applies again."""
    if not visibility_service.remove_field_visibility(db, tenant_id, field_id, brand_id, category_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No visibility override for field {field_id} at this scope",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/options/{option_id}/visibility", response_model=OptionVisibilityResponse)
def put_option_visibility(
    option_id: int,
    body: OptionVisibilityUpdate,
    tenant_id: int = Depends(get_tenant_id),
    db: Session = Depends(get_db),
):
    """Create or replace the option override for one scope."""
    try:
        return visibility_service.set_option_visibility(
            db,
            tenant_id,
            option_id,
            brand_id=body.brand_id,
            category_id=body.category_id,
            is_hidden=body.is_hidden,
        )
    except (LookupError, ValueError, ScopeContractError) as e:
        raise _http_error(e)


@router.delete("/options/{option_id}/visibility", status_code=status.HTTP_204_NO_CONTENT)
def delete_option_visibility(
    option_id: int,
    brand_id: Optional[int] = Query(None),
    category_id: Optional[int] = Query(None),
    tenant_id: int = Depends(get_tenant_id),
    db: Session = Depends(get_db),
):
    """Remove the option override for one scope."""
    if not visibility_service.remove_option_visibility(db, tenant_id, option_id, brand_id, category_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No visibility override for option {option_id} at this scope",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/system-categories/{system_category_id}/suppressions/{field_id}",
    response_model=SuppressionResponse,
)
def put_suppression(
    system_category_id: int,
    field_id: int,
    db: Session = Depends(get_db),
):
    """Suppress a field for every category linked to a system category (platform level)."""
    try:
        return visibility_service.suppress_field_for_system_category(db, field_id, system_category_id)
    except LookupError as e:
        raise _http_error(e)


@router.delete(
    "/system-categories/{system_category_id}/suppressions/{field_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_suppression(
    system_category_id: int,
    field_id: int,
    db: Session = Depends(get_db),
):
    """Lift a system-category suppression."""
    if not visibility_service.unsuppress_field_for_system_category(db, field_id, system_category_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Field {field_id} is not suppressed for system category {system_category_id}",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
