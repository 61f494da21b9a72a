"""Pydantic schemas for test analytics."""

from pydantic import BaseModel

from mocktest.schemas.attempt import LeaderboardEntry


class DistributionBucket(BaseModel):
    range: str
    count: int
    percentage: int


class UserStats(BaseModel):
    """Caller's own standing on the test."""

    total_attempts: int
    best_score: float
    best_percentage: int
    best_time_spent: int
    percentile: int
    rank: int
    improvement_trend: float


class Insights(BaseModel):
    pass_rate: int
    excellent_rate: int
    average_completion_rate: int
    fastest_completion: int
    slowest_completion: int


class TestAnalytics(BaseModel):
    __test__ = False  # not a pytest test class

    total_attempts: int
    average_score: float
    average_percentage: float
    average_time_spent: float
    top_performers: list[LeaderboardEntry]
    score_distribution: list[DistributionBucket]
    time_distribution: list[DistributionBucket]
    user_stats: UserStats | None = None
    insights: Insights
