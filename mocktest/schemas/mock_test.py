"""Pydantic schemas for mock tests."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Request Schemas (admin)
# ============================================================================


class QuestionIn(BaseModel):
    """Question definition. Structural rules are checked by the test validator."""

    text: str
    options: list[str]
    correct_answer: int = Field(..., description="0-based index of the correct option")
    marks: float = Field(default=1)
    explanation: str | None = None


class SectionIn(BaseModel):
    title: str
    questions: list[QuestionIn]
    time_limit: int | None = Field(None, ge=1, description="Section time limit in minutes")


class MockTestCreate(BaseModel):
    """Request to create a mock test."""

    title: str = Field(..., max_length=200)
    description: str = Field(..., max_length=1000)
    duration: int = Field(..., description="Duration in minutes")
    price: float = Field(default=0)
    sections: list[SectionIn]


class MockTestUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    title: str | None = Field(None, max_length=200)
    description: str | None = Field(None, max_length=1000)
    duration: int | None = None
    price: float | None = None
    sections: list[SectionIn] | None = None
    is_active: bool | None = None


# ============================================================================
# Response Schemas
# ============================================================================


class QuestionOut(BaseModel):
    """Question as stored, including the answer (admin only)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    text: str
    options: list[str]
    correct_answer: int
    marks: float
    explanation: str | None = None


class SectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    time_limit: int | None = None
    questions: list[QuestionOut]


class MockTestOut(BaseModel):
    """Full test definition (admin only)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str
    duration: int
    price: float
    is_active: bool
    sections: list[SectionOut]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PublicQuestion(BaseModel):
    """Question as delivered to a candidate: no answer, no explanation."""

    id: UUID
    text: str
    options: list[str]
    marks: float


class PublicSection(BaseModel):
    id: UUID
    title: str
    time_limit: int | None = None
    questions: list[PublicQuestion]


class SectionStats(BaseModel):
    title: str
    question_count: int
    marks: float


class TestStats(BaseModel):
    __test__ = False  # not a pytest test class

    total_questions: int
    total_marks: float
    section_count: int
    questions_by_section: list[SectionStats]
    average_marks_per_question: float


class PublicMockTest(BaseModel):
    """Test as shown to candidates."""

    id: UUID
    title: str
    description: str
    duration: int
    duration_label: str
    price: float
    total_marks: float
    stats: TestStats
    sections: list[PublicSection]
    created_at: datetime | None = None


class MockTestList(BaseModel):
    tests: list[PublicMockTest]
