"""Mock test management: lookup, listing, creation, updates and soft deletion."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from mocktest.common.pagination import PaginationParams
from mocktest.core.app_exceptions import (
    AuthorizationError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from mocktest.engine.structure import (
    calculate_test_stats,
    format_duration,
    strip_answers,
    validate_test_structure,
)
from mocktest.engine.types import Question, Section, Test
from mocktest.models.attempt import TestAttempt
from mocktest.models.mock_test import MockTest, TestQuestion, TestSection
from mocktest.schemas.mock_test import MockTestCreate, MockTestUpdate, SectionIn

logger = logging.getLogger(__name__)


# ============================================================================
# Conversions
# ============================================================================


def to_engine_test(row: MockTest) -> Test:
    """Canonical engine view of a stored test (with correct answers)."""
    return Test(
        id=row.id,
        title=row.title,
        description=row.description,
        duration=row.duration,
        price=row.price,
        is_active=row.is_active,
        sections=tuple(
            Section(
                id=section.id,
                title=section.title,
                time_limit=section.time_limit,
                questions=tuple(
                    Question(
                        id=q.id,
                        text=q.text,
                        options=tuple(q.options or ()),
                        correct_answer=q.correct_answer,
                        marks=q.marks,
                        explanation=q.explanation,
                    )
                    for q in section.questions
                ),
            )
            for section in row.sections
        ),
    )


def public_test_view(test: Test, sections: tuple[Section, ...] | None = None, created_at=None) -> dict[str, Any]:
    """Candidate-facing representation; ``sections`` may be a randomized copy."""
    sections = test.sections if sections is None else sections
    stats = calculate_test_stats(sections)
    return {
        "id": test.id,
        "title": test.title,
        "description": test.description,
        "duration": test.duration,
        "duration_label": format_duration(test.duration),
        "price": test.price,
        "total_marks": stats["total_marks"],
        "stats": stats,
        "sections": strip_answers(sections),
        "created_at": created_at,
    }


def _build_sections(sections: list[SectionIn]) -> list[TestSection]:
    return [
        TestSection(
            position=s_pos,
            title=section.title.strip(),
            time_limit=section.time_limit,
            questions=[
                TestQuestion(
                    position=q_pos,
                    text=question.text.strip(),
                    options=[option.strip() for option in question.options],
                    correct_answer=question.correct_answer,
                    marks=question.marks,
                    explanation=question.explanation,
                )
                for q_pos, question in enumerate(section.questions)
            ],
        )
        for s_pos, section in enumerate(sections)
    ]


def commit_or_fail(db: Session, action: str, context: dict[str, Any] | None = None) -> None:
    """Commit, or roll back and raise a generic InternalError; the cause is only logged."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            f"Failed to {action}",
            extra={"event": "commit_failed", "action": action, **(context or {})},
            exc_info=e,
        )
        raise InternalError() from e


# ============================================================================
# Queries
# ============================================================================


def get_test(db: Session, test_id: UUID) -> MockTest:
    """Load a test with sections and questions, active or not."""
    test = db.execute(
        select(MockTest)
        .where(MockTest.id == test_id)
        .options(selectinload(MockTest.sections).selectinload(TestSection.questions))
    ).scalar_one_or_none()

    if test is None:
        raise NotFoundError("Test not found")
    return test


def get_active_test(db: Session, test_id: UUID) -> MockTest:
    """Load a test that candidates may see; inactive (soft-deleted) tests are refused."""
    test = get_test(db, test_id)
    if not test.is_active:
        raise AuthorizationError("Test is not available")
    return test


def list_active_tests(db: Session, params: PaginationParams) -> tuple[list[MockTest], int]:
    """Active tests, newest first, plus the total count for pagination."""
    total = db.execute(
        select(func.count()).select_from(MockTest).where(MockTest.is_active.is_(True))
    ).scalar_one()

    tests = (
        db.execute(
            select(MockTest)
            .where(MockTest.is_active.is_(True))
            .options(selectinload(MockTest.sections).selectinload(TestSection.questions))
            .order_by(MockTest.created_at.desc(), MockTest.id)
            .offset(params.offset)
            .limit(params.page_size)
        )
        .scalars()
        .all()
    )
    return list(tests), total


def count_attempts(db: Session, test_id: UUID) -> int:
    return db.execute(
        select(func.count()).select_from(TestAttempt).where(TestAttempt.test_id == test_id)
    ).scalar_one()


# ============================================================================
# Mutations (admin)
# ============================================================================


def create_test(db: Session, payload: MockTestCreate) -> MockTest:
    """
    Create a test after structural validation.

    Raises:
        ValidationError: With the list of structural problems as details
    """
    errors = validate_test_structure(payload.model_dump())
    if errors:
        raise ValidationError("Invalid test structure", errors)

    test = MockTest(
        title=payload.title.strip(),
        description=payload.description.strip(),
        duration=payload.duration,
        price=payload.price,
        is_active=True,
        sections=_build_sections(payload.sections),
    )
    db.add(test)
    commit_or_fail(db, "create test")
    db.refresh(test)

    logger.info("Test created", extra={"event": "test_created", "test_id": str(test.id)})
    return get_test(db, test.id)


def update_test(db: Session, test_id: UUID, payload: MockTestUpdate) -> MockTest:
    """
    Apply a partial update.

    Sections are replaced wholesale. That is refused once attempts exist,
    because stored answers reference the existing question ids.

    Raises:
        NotFoundError: Unknown test
        ConflictError: Sections replaced on a test that has attempts
        ValidationError: Resulting structure is invalid
    """
    test = get_test(db, test_id)
    changes = payload.model_dump(exclude_unset=True)

    if "sections" in changes and changes["sections"] is not None and count_attempts(db, test_id) > 0:
        raise ConflictError(
            "Sections cannot be replaced after attempts have been submitted",
            {"test_id": str(test_id)},
        )

    merged = {
        "title": test.title,
        "description": test.description,
        "duration": test.duration,
        "price": test.price,
        "sections": [
            {
                "title": s.title,
                "questions": [
                    {
                        "text": q.text,
                        "options": q.options,
                        "correct_answer": q.correct_answer,
                        "marks": q.marks,
                    }
                    for q in s.questions
                ],
            }
            for s in test.sections
        ],
    }
    merged.update({k: v for k, v in changes.items() if k != "is_active" and v is not None})
    errors = validate_test_structure(merged)
    if errors:
        raise ValidationError("Invalid test structure", errors)

    for field in ("title", "description"):
        if changes.get(field) is not None:
            setattr(test, field, changes[field].strip())
    for field in ("duration", "price", "is_active"):
        if changes.get(field) is not None:
            setattr(test, field, changes[field])
    if payload.sections is not None:
        # Old rows must be gone before new ones take their positions
        test.sections.clear()
        db.flush()
        test.sections = _build_sections(payload.sections)

    commit_or_fail(db, "update test", {"test_id": str(test_id)})
    logger.info(
        "Test updated",
        extra={"event": "test_updated", "test_id": str(test_id), "fields": sorted(changes)},
    )
    db.expire_all()
    return get_test(db, test_id)


def soft_delete_test(db: Session, test_id: UUID) -> MockTest:
    """Deactivate a test. Tests are never hard-deleted since attempts may reference them."""
    test = get_test(db, test_id)
    test.is_active = False
    commit_or_fail(db, "deactivate test", {"test_id": str(test_id)})
    logger.info("Test deactivated", extra={"event": "test_deactivated", "test_id": str(test_id)})
    return test
