"""Attempt results: a caller's attempts, single-attempt detail and the leaderboard."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from mocktest.core.app_exceptions import AuthorizationError, NotFoundError
from mocktest.core.config import settings
from mocktest.core.dependencies import CurrentUser
from mocktest.engine.analytics import attempt_ranking, build_leaderboard
from mocktest.engine.rounding import percent, round2, round_int
from mocktest.engine.types import AttemptRecord
from mocktest.models.attempt import TestAttempt
from mocktest.services.mock_test_service import get_test

logger = logging.getLogger(__name__)


def to_attempt_record(row: TestAttempt, answered_count: int = 0) -> AttemptRecord:
    return AttemptRecord(
        id=row.id,
        user_id=row.user_id,
        user_name=row.user_name,
        score=row.score,
        total_marks=row.total_marks,
        time_spent=row.time_spent,
        completed_at=row.completed_at,
        answered_count=answered_count,
    )


def attempt_view(row: TestAttempt, include_answers: bool = False) -> dict[str, Any]:
    """Stored attempt plus its whole-number percentage."""
    view = {
        "id": row.id,
        "test_id": row.test_id,
        "user_id": row.user_id,
        "user_name": row.user_name,
        "score": row.score,
        "total_marks": row.total_marks,
        "percentage": round_int(percent(row.score, row.total_marks)),
        "time_spent": row.time_spent,
        "started_at": row.started_at,
        "completed_at": row.completed_at,
        "answers": [],
    }
    if include_answers:
        view["answers"] = [
            {
                "question_id": a.question_id,
                "selected_option": a.selected_option,
                "is_correct": a.is_correct,
                "marks_awarded": a.marks_awarded,
            }
            for a in row.answers
        ]
    return view


def list_test_attempts(db: Session, test_id: UUID, with_answers: bool = False) -> list[TestAttempt]:
    """Every completed attempt of a test, most recent first."""
    stmt = (
        select(TestAttempt)
        .where(TestAttempt.test_id == test_id)
        .order_by(TestAttempt.completed_at.desc(), TestAttempt.id)
    )
    if with_answers:
        stmt = stmt.options(selectinload(TestAttempt.answers))
    return list(db.execute(stmt).scalars().all())


def get_attempt_detail(
    db: Session, test_id: UUID, attempt_id: UUID, user: CurrentUser
) -> dict[str, Any]:
    """
    One attempt with its rank among all attempts of the test.

    Raises:
        NotFoundError: Unknown attempt, or attempt of another test
        AuthorizationError: Caller neither owns the attempt nor is an admin
    """
    attempt = db.execute(
        select(TestAttempt)
        .where(TestAttempt.id == attempt_id)
        .options(selectinload(TestAttempt.answers))
    ).scalar_one_or_none()

    if attempt is None or attempt.test_id != test_id:
        raise NotFoundError("Attempt not found")

    if attempt.user_id != user.id and not user.is_admin:
        logger.warning(
            "Attempt access denied",
            extra={
                "event": "attempt_access_denied",
                "attempt_id": str(attempt_id),
                "user_id": str(user.id),
            },
        )
        raise AuthorizationError("Not authorized to access this attempt")

    scores = db.execute(select(TestAttempt.score).where(TestAttempt.test_id == test_id)).scalars().all()

    return {
        "attempt": attempt_view(attempt, include_answers=True),
        "ranking": attempt_ranking(attempt.score, list(scores)),
    }


def get_test_results(db: Session, test_id: UUID, user: CurrentUser) -> dict[str, Any]:
    """Caller's attempts (newest first), the leaderboard and overall averages."""
    get_test(db, test_id)

    attempts = list_test_attempts(db, test_id)
    records = [to_attempt_record(a) for a in attempts]
    total = len(records)

    return {
        "user_attempts": [attempt_view(a) for a in attempts if a.user_id == user.id],
        "leaderboard": build_leaderboard(records, settings.LEADERBOARD_SIZE),
        "stats": {
            "total_attempts": total,
            "average_score": round2(sum(r.score for r in records) / total) if total else 0,
            "average_percentage": round2(sum(r.percentage for r in records) / total) if total else 0,
        },
    }
