"""Immutable value types shared by the scoring engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

EntityId = UUID | str
QuestionId = EntityId

UNANSWERED = -1

# Largest option index that fits the stored SMALLINT column
MAX_OPTION_INDEX = 32767


@dataclass(frozen=True)
class Question:
    id: QuestionId
    text: str
    options: tuple[str, ...]
    correct_answer: int  # 0-based index into options
    marks: float = 1.0
    explanation: str | None = None


@dataclass(frozen=True)
class RandomizedQuestion(Question):
    """Question whose options were shuffled for one attempt.

    ``correct_answer`` points into the shuffled options. ``original_correct_answer``
    and ``option_order`` are kept for server-side checks only and must never be
    sent to a client. ``option_order[i]`` is the canonical index of delivered
    option ``i``.
    """

    original_correct_answer: int = 0
    option_order: tuple[int, ...] = ()


@dataclass(frozen=True)
class Section:
    id: QuestionId
    title: str
    questions: tuple[Question, ...] = ()
    time_limit: int | None = None  # minutes

    @property
    def total_marks(self) -> float:
        return sum(q.marks for q in self.questions)


@dataclass(frozen=True)
class Test:
    __test__ = False  # not a pytest test class

    id: QuestionId
    title: str
    duration: int  # minutes
    sections: tuple[Section, ...] = ()
    description: str = ""
    price: float = 0.0
    is_active: bool = True

    @property
    def total_marks(self) -> float:
        return sum(section.total_marks for section in self.sections)


@dataclass(frozen=True)
class Answer:
    question_id: QuestionId
    selected_option: int


@dataclass(frozen=True)
class ProcessedAnswer:
    question_id: QuestionId
    selected_option: int  # UNANSWERED (-1) when the question was skipped
    is_correct: bool
    marks_awarded: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "question_id": self.question_id,
            "selected_option": self.selected_option,
            "is_correct": self.is_correct,
            "marks_awarded": self.marks_awarded,
        }


@dataclass(frozen=True)
class SectionScore:
    section_id: QuestionId
    section_title: str
    score: float
    total_marks: float
    percentage: float
    correct_answers: int
    total_questions: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "section_id": self.section_id,
            "section_title": self.section_title,
            "score": self.score,
            "total_marks": self.total_marks,
            "percentage": self.percentage,
            "correct_answers": self.correct_answers,
            "total_questions": self.total_questions,
        }


@dataclass(frozen=True)
class ScoringResult:
    score: float
    total_marks: float
    percentage: float
    processed_answers: tuple[ProcessedAnswer, ...] = field(default_factory=tuple)
    section_wise_scores: tuple[SectionScore, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AttemptRecord:
    """Completed attempt as seen by the analytics engine."""

    id: EntityId
    user_id: EntityId
    score: float
    total_marks: float
    time_spent: int  # minutes
    completed_at: datetime
    user_name: str | None = None
    answered_count: int = 0

    @property
    def percentage(self) -> float:
        if not self.total_marks:
            return 0.0
        return self.score / self.total_marks * 100
