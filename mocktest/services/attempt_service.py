"""Attempt issuance and submission.

Issuance hands out a shuffled, answer-free copy of a test together with a
signed attempt token carrying the shuffle seed and the server start time.
Submission replays the shuffle from the seed to map chosen options back onto
the canonical test, validates the elapsed time and scores server-side. Nothing
is written until every check has passed.
"""

import logging
import random
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

import jwt
from sqlalchemy.orm import Session

from mocktest.core.app_exceptions import AuthorizationError, ValidationError
from mocktest.core.config import settings
from mocktest.core.dependencies import CurrentUser
from mocktest.core.security import create_attempt_token, verify_attempt_token
from mocktest.engine.performance import generate_performance_analytics
from mocktest.engine.randomizer import (
    discard_out_of_range,
    randomize_test_questions,
    restore_canonical_answers,
)
from mocktest.engine.scoring import calculate_test_score
from mocktest.engine.timing import parse_timestamp, validate_test_timing
from mocktest.engine.types import Answer, Test
from mocktest.models.attempt import AttemptAnswer, TestAttempt
from mocktest.schemas.attempt import SubmitAttemptIn
from mocktest.services.mock_test_service import (
    commit_or_fail,
    get_active_test,
    public_test_view,
    to_engine_test,
)

logger = logging.getLogger(__name__)

# Extra lifetime of an attempt token beyond duration + buffer, so that a late
# submission is reported as a timing error rather than an expired token.
ATTEMPT_TOKEN_GRACE_MINUTES = 60

_seed_source = random.SystemRandom()


def issue_attempt(db: Session, test_id: UUID, user: CurrentUser) -> dict[str, Any]:
    """
    Start an attempt: randomized options, answers stripped, server start time.

    Raises:
        NotFoundError: Unknown test
        AuthorizationError: Test is inactive
    """
    row = get_active_test(db, test_id)
    test = to_engine_test(row)

    seed = _seed_source.getrandbits(32)
    randomized = randomize_test_questions(test.sections, random.Random(seed))
    start_time = datetime.now(timezone.utc)

    token = create_attempt_token(
        user_id=str(user.id),
        test_id=str(test.id),
        seed=seed,
        start_time=start_time,
        ttl_minutes=test.duration + settings.TIMING_BUFFER_MINUTES + ATTEMPT_TOKEN_GRACE_MINUTES,
    )

    logger.info(
        "Attempt issued",
        extra={"event": "attempt_issued", "test_id": str(test_id), "user_id": str(user.id)},
    )

    return {
        "test": public_test_view(test, randomized, created_at=row.created_at),
        "start_time": start_time,
        "attempt_token": token,
    }


def _resolve_token(token: str, test: Test, user: CurrentUser) -> dict[str, Any]:
    try:
        claims = verify_attempt_token(token)
    except jwt.InvalidTokenError as e:
        raise ValidationError("Invalid attempt token", {"reason": str(e)}) from e

    if claims.get("test_id") != str(test.id):
        raise ValidationError("Attempt token was issued for a different test")
    if claims.get("sub") != str(user.id):
        raise AuthorizationError("Attempt token was issued to a different user")
    return claims


def submit_attempt(
    db: Session,
    test_id: UUID,
    user: CurrentUser,
    payload: SubmitAttemptIn,
) -> dict[str, Any]:
    """
    Score and persist a submission.

    Order of checks: test exists and is active, attempt token (when given),
    timing, then scoring. ``time_spent`` is computed server-side from the
    token's start time and the client's ``end_time``.

    Raises:
        NotFoundError: Unknown test
        AuthorizationError: Inactive test or token issued to someone else
        ValidationError: Bad token, unparseable or out-of-window timing
        InternalError: Persisting the attempt failed
    """
    row = get_active_test(db, test_id)
    test = to_engine_test(row)

    answers = [Answer(a.question_id, a.selected_option) for a in payload.answers]
    start_time: str | datetime = payload.start_time

    if payload.attempt_token:
        claims = _resolve_token(payload.attempt_token, test, user)
        start_time = claims["start_time"]
        randomized = randomize_test_questions(test.sections, random.Random(claims["seed"]))
        answers = restore_canonical_answers(randomized, answers)
    else:
        answers = discard_out_of_range(test.sections, answers)

    timing = validate_test_timing(
        start_time,
        payload.end_time,
        test.duration,
        settings.TIMING_BUFFER_MINUTES,
    )
    if not timing.is_valid:
        logger.info(
            "Attempt rejected: timing",
            extra={
                "event": "attempt_timing_rejected",
                "test_id": str(test_id),
                "user_id": str(user.id),
                "actual_duration": timing.actual_duration,
            },
        )
        raise ValidationError(timing.error or "Invalid test timing")

    result = calculate_test_score(test, answers)
    feedback = generate_performance_analytics(result, timing.actual_duration)

    attempt = TestAttempt(
        user_id=user.id,
        user_name=user.name,
        test_id=test.id,
        score=result.score,
        total_marks=result.total_marks,
        time_spent=timing.actual_duration,
        started_at=parse_timestamp(start_time),
        completed_at=parse_timestamp(payload.end_time),
        answers=[
            AttemptAnswer(
                position=position,
                question_id=answer.question_id,
                selected_option=answer.selected_option,
                is_correct=answer.is_correct,
                marks_awarded=answer.marks_awarded,
            )
            for position, answer in enumerate(result.processed_answers)
        ],
    )
    db.add(attempt)
    commit_or_fail(db, "submit attempt", {"test_id": str(test_id), "user_id": str(user.id)})

    logger.info(
        "Attempt submitted",
        extra={
            "event": "attempt_submitted",
            "attempt_id": str(attempt.id),
            "test_id": str(test_id),
            "user_id": str(user.id),
            "score": result.score,
            "total_marks": result.total_marks,
            "time_spent": timing.actual_duration,
        },
    )

    return {
        "attempt_id": attempt.id,
        "score": result.score,
        "total_marks": result.total_marks,
        "percentage": result.percentage,
        "time_spent": timing.actual_duration,
        "completed_at": attempt.completed_at,
        "section_wise_scores": [s.to_dict() for s in result.section_wise_scores],
        "analytics": feedback,
    }
