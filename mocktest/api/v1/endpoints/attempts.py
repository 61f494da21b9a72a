"""Attempt endpoints: start a test, submit it, read results and analytics."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mocktest.common.responses import ApiResponse, ok
from mocktest.core.dependencies import CurrentUser, get_current_user
from mocktest.core.rate_limit_deps import require_rate_limit_submit
from mocktest.db.session import get_db
from mocktest.schemas.analytics import TestAnalytics
from mocktest.schemas.attempt import (
    AttemptDetailOut,
    AttemptStartOut,
    SubmissionResult,
    SubmitAttemptIn,
    TestResultsOut,
)
from mocktest.services import analytics_service, attempt_service, results_service

router = APIRouter(prefix="/tests", tags=["Attempts"])


@router.post("/{test_id}/attempt", response_model=ApiResponse[AttemptStartOut])
def start_attempt(
    test_id: UUID,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
):
    """
    Start a test attempt.

    Options are shuffled per attempt and correct answers are stripped. The
    returned ``attempt_token`` must be sent back with the submission.
    """
    return ok(attempt_service.issue_attempt(db, test_id, current_user))


@router.put(
    "/{test_id}/attempt",
    response_model=ApiResponse[SubmissionResult],
    dependencies=[Depends(require_rate_limit_submit)],
)
def submit_attempt(
    test_id: UUID,
    payload: SubmitAttemptIn,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
):
    """Submit a test attempt. Timing is validated and the score computed server-side."""
    return ok(attempt_service.submit_attempt(db, test_id, current_user, payload))


@router.get(
    "/{test_id}/results",
    response_model=ApiResponse[AttemptDetailOut | TestResultsOut],
)
def get_results(
    test_id: UUID,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    attempt_id: Annotated[UUID | None, Query(description="Return a single attempt")] = None,
):
    """
    Without ``attempt_id``: the caller's attempts, the leaderboard and averages.
    With ``attempt_id``: that attempt and its ranking (owner or admin only).
    """
    if attempt_id is not None:
        return ok(results_service.get_attempt_detail(db, test_id, attempt_id, current_user))
    return ok(results_service.get_test_results(db, test_id, current_user))


@router.get("/{test_id}/analytics", response_model=ApiResponse[TestAnalytics])
def get_analytics(
    test_id: UUID,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
):
    """Averages, leaderboard, distributions, insights and the caller's own standing."""
    return ok(analytics_service.get_test_analytics(db, test_id, current_user))
