"""Pydantic schemas for test attempts and results."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from mocktest.engine.types import MAX_OPTION_INDEX
from mocktest.schemas.mock_test import PublicMockTest

# ============================================================================
# Attempt issuance / submission
# ============================================================================


class AttemptStartOut(BaseModel):
    """Randomized, answer-free copy of the test plus the server start time."""

    test: PublicMockTest
    start_time: datetime
    attempt_token: str = Field(..., description="Send back unchanged with the submission")


class AnswerIn(BaseModel):
    question_id: UUID
    selected_option: int = Field(
        ..., ge=-1, le=MAX_OPTION_INDEX, description="Index into the options as delivered"
    )


class SubmitAttemptIn(BaseModel):
    """Submission payload. Timestamps are ISO-8601 strings and are re-validated server-side."""

    answers: list[AnswerIn] = Field(..., max_length=1000)
    start_time: str = Field(..., min_length=1)
    end_time: str = Field(..., min_length=1)
    attempt_token: str | None = Field(
        None, description="Token from attempt issuance; maps shuffled options back and fixes the start time"
    )


class SectionScoreOut(BaseModel):
    section_id: UUID
    section_title: str
    score: float
    total_marks: float
    percentage: float
    correct_answers: int
    total_questions: int


class PerformanceAnalytics(BaseModel):
    grade: str
    performance: str
    time_efficiency: str
    strengths: list[str]
    improvements: list[str]


class SubmissionResult(BaseModel):
    attempt_id: UUID
    score: float
    total_marks: float
    percentage: float
    time_spent: int
    completed_at: datetime
    section_wise_scores: list[SectionScoreOut]
    analytics: PerformanceAnalytics


# ============================================================================
# Results
# ============================================================================


class ProcessedAnswerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    question_id: UUID
    selected_option: int
    is_correct: bool
    marks_awarded: float


class AttemptOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    test_id: UUID
    user_id: UUID
    user_name: str | None = None
    score: float
    total_marks: float
    percentage: int
    time_spent: int
    started_at: datetime
    completed_at: datetime
    answers: list[ProcessedAnswerOut] = []


class AttemptRanking(BaseModel):
    rank: int
    total_attempts: int
    percentile: int


class AttemptDetailOut(BaseModel):
    attempt: AttemptOut
    ranking: AttemptRanking


class LeaderboardEntry(BaseModel):
    rank: int
    attempt_id: UUID
    user_id: UUID
    user_name: str | None = None
    score: float
    total_marks: float
    percentage: int
    time_spent: int
    completed_at: datetime


class ResultStats(BaseModel):
    total_attempts: int
    average_score: float
    average_percentage: float


class TestResultsOut(BaseModel):
    __test__ = False  # not a pytest test class

    user_attempts: list[AttemptOut]
    leaderboard: list[LeaderboardEntry]
    stats: ResultStats
