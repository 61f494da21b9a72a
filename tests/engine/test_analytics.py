"""Tests for leaderboard, distribution and percentile computations."""

from datetime import datetime, timedelta, timezone

import pytest

from mocktest.engine.analytics import (
    attempt_ranking,
    build_leaderboard,
    calculate_percentile,
    compute_insights,
    compute_test_analytics,
    compute_user_stats,
    rank_attempts,
    score_distribution,
    time_distribution,
)
from mocktest.engine.types import AttemptRecord

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _attempt(
    aid: str,
    score: float,
    time_spent: int = 10,
    user_id: str = "u",
    total_marks: float = 100,
    minutes_after: int = 0,
    answered_count: int = 1,
) -> AttemptRecord:
    return AttemptRecord(
        id=aid,
        user_id=user_id,
        user_name=f"User {user_id}",
        score=score,
        total_marks=total_marks,
        time_spent=time_spent,
        completed_at=T0 + timedelta(minutes=minutes_after),
        answered_count=answered_count,
    )


class TestCalculatePercentile:
    def test_counts_strictly_lower_scores(self):
        assert calculate_percentile(70, [50, 60, 70, 80]) == 50

    def test_ties_are_not_below(self):
        assert calculate_percentile(50, [50, 50]) == 0

    def test_top_score_never_reaches_100(self):
        assert calculate_percentile(90, [10, 20, 90]) == 67

    def test_empty(self):
        assert calculate_percentile(10, []) == 0


class TestRanking:
    def test_faster_attempt_wins_tie(self):
        slow = _attempt("slow", 80, time_spent=20)
        fast = _attempt("fast", 80, time_spent=12)
        best = _attempt("best", 90, time_spent=30)

        assert [a.id for a in rank_attempts([slow, fast, best])] == ["best", "fast", "slow"]

    def test_leaderboard_is_limited_and_ranked(self):
        attempts = [_attempt(f"a{i}", score=i) for i in range(15)]

        board = build_leaderboard(attempts)

        assert len(board) == 10
        assert [e["rank"] for e in board] == list(range(1, 11))
        assert board[0]["score"] == 14
        assert board[0]["percentage"] == 14
        assert board[0]["user_name"] == "User u"

    def test_attempt_ranking_shares_rank_on_ties(self):
        assert attempt_ranking(80, [90, 80, 80, 50]) == {
            "rank": 2,
            "total_attempts": 4,
            "percentile": 75,
        }

    def test_attempt_ranking_empty(self):
        assert attempt_ranking(0, [])["percentile"] == 0


class TestDistributions:
    def test_perfect_score_lands_in_last_bucket(self):
        buckets = score_distribution([_attempt("a", 100), _attempt("b", 95), _attempt("c", 5)])

        assert len(buckets) == 10
        assert buckets[9] == {"range": "90-100%", "count": 2, "percentage": 67}
        assert buckets[0]["count"] == 1
        assert sum(b["count"] for b in buckets) == 3

    def test_bucket_boundaries(self):
        buckets = score_distribution([_attempt("a", 10), _attempt("b", 9.99)])

        assert buckets[0]["count"] == 1
        assert buckets[1]["count"] == 1

    def test_time_buckets(self):
        attempts = [_attempt("a", 50, time_spent=t) for t in (1, 4, 5, 12, 23)]

        buckets = time_distribution(attempts)

        # ceil(23 / 5) = 5 minute wide buckets
        assert [b["range"] for b in buckets] == [
            "0-5 min",
            "5-10 min",
            "10-15 min",
            "15-20 min",
            "20-25 min",
        ]
        assert [b["count"] for b in buckets] == [2, 1, 1, 0, 1]

    def test_max_time_clamps_into_last_bucket(self):
        attempts = [_attempt("a", 50, time_spent=t) for t in (0, 10)]

        buckets = time_distribution(attempts)

        assert [b["count"] for b in buckets] == [1, 0, 0, 0, 1]

    def test_all_zero_times(self):
        buckets = time_distribution([_attempt("a", 50, time_spent=0)])

        assert buckets[0]["count"] == 1

    def test_no_attempts(self):
        assert time_distribution([]) == []
        assert sum(b["count"] for b in score_distribution([])) == 0


class TestUserStats:
    def test_best_attempt_rank_percentile_and_trend(self):
        attempts = [
            _attempt("mine-1", 60, user_id="me", minutes_after=0),
            _attempt("mine-2", 80, user_id="me", minutes_after=10),
            _attempt("mine-3", 70, user_id="me", minutes_after=20),
            _attempt("theirs", 90, user_id="them"),
            _attempt("theirs-2", 40, user_id="them"),
        ]

        stats = compute_user_stats(attempts, "me")

        assert stats["total_attempts"] == 3
        assert stats["best_score"] == 80
        assert stats["rank"] == 2
        # 60, 70 and 40 are below 80
        assert stats["percentile"] == 60
        assert stats["improvement_trend"] == -10

    def test_single_attempt_has_no_trend(self):
        stats = compute_user_stats([_attempt("a", 50, user_id="me")], "me")

        assert stats["improvement_trend"] == 0

    def test_no_attempts_for_user(self):
        assert compute_user_stats([_attempt("a", 50, user_id="them")], "me") is None


class TestReport:
    def test_empty_report(self):
        report = compute_test_analytics([], "me")

        assert report["total_attempts"] == 0
        assert report["top_performers"] == []
        assert report["score_distribution"] == []
        assert report["user_stats"] is None
        assert report["insights"]["pass_rate"] == 0

    def test_averages_and_insights(self):
        attempts = [
            _attempt("a", 95, time_spent=10, user_id="me"),
            _attempt("b", 60, time_spent=20),
            _attempt("c", 30, time_spent=31, answered_count=0),
        ]

        report = compute_test_analytics(attempts, "me")

        assert report["total_attempts"] == 3
        assert report["average_score"] == pytest.approx(61.67)
        assert report["average_percentage"] == pytest.approx(61.67)
        assert report["average_time_spent"] == pytest.approx(20.33)
        assert report["top_performers"][0]["attempt_id"] == "a"
        assert report["user_stats"]["rank"] == 1
        assert report["insights"] == {
            "pass_rate": 67,
            "excellent_rate": 33,
            "average_completion_rate": 67,
            "fastest_completion": 10,
            "slowest_completion": 31,
        }

    def test_insights_empty(self):
        assert compute_insights([])["fastest_completion"] == 0

    def test_zero_total_marks_counts_as_zero_percent(self):
        report = compute_test_analytics([_attempt("a", 0, total_marks=0)])

        assert report["average_percentage"] == 0
        assert report["score_distribution"][0]["count"] == 1
