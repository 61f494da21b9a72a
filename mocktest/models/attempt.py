"""Test attempt models (append-only)."""

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from mocktest.db.base import Base


class TestAttempt(Base):
    """One user's scored try at a test.

    IMPORTANT: rows are written once at submission and never updated. A retake
    is a new row.
    """

    __tablename__ = "test_attempts"
    __test__ = False  # not a pytest test class

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False)
    user_name = Column(String(200), nullable=True)  # display name at submission time
    test_id = Column(Uuid, ForeignKey("mock_tests.id"), nullable=False)

    score = Column(Float, nullable=False)
    total_marks = Column(Float, nullable=False)
    time_spent = Column(Integer, nullable=False)  # minutes, server-computed

    started_at = Column(DateTime(timezone=True), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    test = relationship("MockTest", back_populates="attempts")
    answers = relationship(
        "AttemptAnswer",
        back_populates="attempt",
        cascade="all, delete-orphan",
        order_by="AttemptAnswer.position",
    )

    __table_args__ = (
        Index("ix_test_attempts_test_score", "test_id", "score"),
        Index("ix_test_attempts_test_user", "test_id", "user_id"),
        Index("ix_test_attempts_user_completed", "user_id", "completed_at"),
    )


class AttemptAnswer(Base):
    """Processed answer for one question of an attempt."""

    __tablename__ = "attempt_answers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    attempt_id = Column(
        Uuid,
        ForeignKey("test_attempts.id", ondelete="CASCADE"),
        nullable=False,
    )
    position = Column(Integer, nullable=False)
    # No FK: the question row is owned by the test and only referenced here
    question_id = Column(Uuid, nullable=False)
    selected_option = Column(SmallInteger, nullable=False)  # -1 = unanswered
    is_correct = Column(Boolean, nullable=False, default=False)
    marks_awarded = Column(Float, nullable=False, default=0)

    attempt = relationship("TestAttempt", back_populates="answers")

    __table_args__ = (Index("ix_attempt_answers_attempt_id", "attempt_id"),)
