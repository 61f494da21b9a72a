"""Mock test endpoints: public listing and detail, admin management."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mocktest.common.pagination import PageMeta, PaginationParams, pagination_params
from mocktest.common.responses import ApiResponse, ok
from mocktest.core.dependencies import CurrentUser, require_admin
from mocktest.db.session import get_db
from mocktest.schemas.mock_test import (
    MockTestCreate,
    MockTestList,
    MockTestOut,
    MockTestUpdate,
    PublicMockTest,
)
from mocktest.services import mock_test_service
from mocktest.services.mock_test_service import public_test_view, to_engine_test

router = APIRouter(prefix="/tests", tags=["Tests"])


@router.get("", response_model=ApiResponse[MockTestList])
def list_tests(
    db: Annotated[Session, Depends(get_db)],
    params: Annotated[PaginationParams, Depends(pagination_params)],
):
    """List active tests, newest first. Correct answers are never included."""
    rows, total = mock_test_service.list_active_tests(db, params)
    tests = [public_test_view(to_engine_test(row), created_at=row.created_at) for row in rows]
    return ok({"tests": tests}, pagination=PageMeta.build(params, total))


@router.post("", response_model=ApiResponse[MockTestOut], status_code=status.HTTP_201_CREATED)
def create_test(
    payload: MockTestCreate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
):
    """Create a test (admin). Structural problems are returned as a 400 with details."""
    row = mock_test_service.create_test(db, payload)
    return ok(MockTestOut.model_validate(row), message="Test created successfully")


@router.get("/{test_id}", response_model=ApiResponse[PublicMockTest])
def get_test(
    test_id: UUID,
    db: Annotated[Session, Depends(get_db)],
):
    """Get an active test without answers."""
    row = mock_test_service.get_active_test(db, test_id)
    return ok(public_test_view(to_engine_test(row), created_at=row.created_at))


@router.get("/{test_id}/full", response_model=ApiResponse[MockTestOut])
def get_test_full(
    test_id: UUID,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
):
    """Get a test with answers, active or not (admin)."""
    row = mock_test_service.get_test(db, test_id)
    return ok(MockTestOut.model_validate(row))


@router.put("/{test_id}", response_model=ApiResponse[MockTestOut])
def update_test(
    test_id: UUID,
    payload: MockTestUpdate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
):
    """Partially update a test (admin)."""
    row = mock_test_service.update_test(db, test_id, payload)
    return ok(MockTestOut.model_validate(row), message="Test updated successfully")


@router.delete("/{test_id}", response_model=ApiResponse[None])
def delete_test(
    test_id: UUID,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
):
    """Soft delete a test (admin). Attempts against it are kept."""
    mock_test_service.soft_delete_test(db, test_id)
    return ok(message="Test deleted successfully")
