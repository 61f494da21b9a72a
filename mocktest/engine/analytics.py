"""Leaderboard, distribution and percentile computations over completed attempts.

All figures are recomputed from the full list of attempts on every call;
there is no incrementally maintained aggregate.
"""

import math
from collections.abc import Iterable, Sequence
from typing import Any

from mocktest.engine.rounding import percent, round2, round_int
from mocktest.engine.types import AttemptRecord, EntityId

SCORE_BUCKETS = 10
TIME_BUCKETS = 5
DEFAULT_LEADERBOARD_SIZE = 10
PASS_THRESHOLD = 60
EXCELLENCE_THRESHOLD = 90


def calculate_percentile(score: float, all_scores: Sequence[float]) -> int:
    """
    Share of scores strictly below ``score``, as a whole percentage.

    Ties do not count as "below": with scores [50, 50] a score of 50 is at
    the 0th percentile. This is not a rank-based percentile.
    """
    if not all_scores:
        return 0
    below = sum(1 for s in all_scores if s < score)
    return round_int(below / len(all_scores) * 100)


def rank_attempts(attempts: Iterable[AttemptRecord]) -> list[AttemptRecord]:
    """Score descending, then faster first; completion time and id keep the order stable."""
    return sorted(
        attempts,
        key=lambda a: (-a.score, a.time_spent, a.completed_at, str(a.id)),
    )


def attempt_ranking(score: float, all_scores: Sequence[float]) -> dict[str, int]:
    """Rank of a single attempt among all attempts of the test (ties share a rank)."""
    total = len(all_scores)
    rank = sum(1 for s in all_scores if s > score) + 1
    percentile = round_int((total - rank + 1) / total * 100) if total > 0 else 0
    return {"rank": rank, "total_attempts": total, "percentile": percentile}


def leaderboard_entry(attempt: AttemptRecord, rank: int) -> dict[str, Any]:
    return {
        "rank": rank,
        "attempt_id": attempt.id,
        "user_id": attempt.user_id,
        "user_name": attempt.user_name,
        "score": attempt.score,
        "total_marks": attempt.total_marks,
        "percentage": round_int(attempt.percentage),
        "time_spent": attempt.time_spent,
        "completed_at": attempt.completed_at,
    }


def build_leaderboard(
    attempts: Iterable[AttemptRecord], limit: int = DEFAULT_LEADERBOARD_SIZE
) -> list[dict[str, Any]]:
    ranked = rank_attempts(attempts)[:limit]
    return [leaderboard_entry(attempt, rank) for rank, attempt in enumerate(ranked, start=1)]


def _labelled(counts: list[int], total: int, label) -> list[dict[str, Any]]:
    return [
        {
            "range": label(index),
            "count": count,
            "percentage": round_int(percent(count, total)),
        }
        for index, count in enumerate(counts)
    ]


def score_distribution(attempts: Sequence[AttemptRecord]) -> list[dict[str, Any]]:
    """Attempts per 10% band; 100% lands in the last (90-100%) band."""
    counts = [0] * SCORE_BUCKETS
    for attempt in attempts:
        bucket = min(max(int(attempt.percentage // 10), 0), SCORE_BUCKETS - 1)
        counts[bucket] += 1

    return _labelled(counts, len(attempts), lambda i: f"{i * 10}-{(i + 1) * 10}%")


def time_distribution(attempts: Sequence[AttemptRecord]) -> list[dict[str, Any]]:
    """Attempts per time band; bands are ceil(max_time / 5) minutes wide."""
    if not attempts:
        return []

    max_time = max(a.time_spent for a in attempts)
    bucket_size = max(math.ceil(max_time / TIME_BUCKETS), 1)

    counts = [0] * TIME_BUCKETS
    for attempt in attempts:
        bucket = min(attempt.time_spent // bucket_size, TIME_BUCKETS - 1)
        counts[bucket] += 1

    return _labelled(
        counts,
        len(attempts),
        lambda i: f"{i * bucket_size}-{(i + 1) * bucket_size} min",
    )


def compute_user_stats(
    attempts: Sequence[AttemptRecord], user_id: EntityId
) -> dict[str, Any] | None:
    """
    Stats for one user's attempts at a test, or None if they have none.

    - best attempt: highest score; among equal scores the most recent wins
    - rank: position of the best attempt in the leaderboard order
    - improvement_trend: latest score minus the previous one (0 with one attempt)
    """
    user_attempts = sorted(
        (a for a in attempts if str(a.user_id) == str(user_id)),
        key=lambda a: a.completed_at,
        reverse=True,
    )
    if not user_attempts:
        return None

    best = user_attempts[0]
    for attempt in user_attempts[1:]:
        if attempt.score > best.score:
            best = attempt

    ranked = rank_attempts(attempts)
    rank = next(i for i, a in enumerate(ranked, start=1) if a.id == best.id)

    improvement_trend = (
        user_attempts[0].score - user_attempts[1].score if len(user_attempts) > 1 else 0
    )

    return {
        "total_attempts": len(user_attempts),
        "best_score": best.score,
        "best_percentage": round_int(best.percentage),
        "best_time_spent": best.time_spent,
        "percentile": calculate_percentile(best.score, [a.score for a in attempts]),
        "rank": rank,
        "improvement_trend": improvement_trend,
    }


def compute_insights(attempts: Sequence[AttemptRecord]) -> dict[str, Any]:
    total = len(attempts)
    if total == 0:
        return {
            "pass_rate": 0,
            "excellent_rate": 0,
            "average_completion_rate": 0,
            "fastest_completion": 0,
            "slowest_completion": 0,
        }

    passed = sum(1 for a in attempts if a.percentage >= PASS_THRESHOLD)
    excellent = sum(1 for a in attempts if a.percentage >= EXCELLENCE_THRESHOLD)
    completed = sum(1 for a in attempts if a.answered_count > 0)
    times = [a.time_spent for a in attempts]

    return {
        "pass_rate": round_int(percent(passed, total)),
        "excellent_rate": round_int(percent(excellent, total)),
        "average_completion_rate": round_int(percent(completed, total)),
        "fastest_completion": min(times),
        "slowest_completion": max(times),
    }


def compute_test_analytics(
    attempts: Sequence[AttemptRecord],
    user_id: EntityId | None = None,
    leaderboard_size: int = DEFAULT_LEADERBOARD_SIZE,
) -> dict[str, Any]:
    """Full analytics report for one test."""
    total = len(attempts)
    if total == 0:
        return {
            "total_attempts": 0,
            "average_score": 0,
            "average_percentage": 0,
            "average_time_spent": 0,
            "top_performers": [],
            "score_distribution": [],
            "time_distribution": [],
            "user_stats": None,
            "insights": compute_insights(attempts),
        }

    return {
        "total_attempts": total,
        "average_score": round2(sum(a.score for a in attempts) / total),
        "average_percentage": round2(sum(a.percentage for a in attempts) / total),
        "average_time_spent": round2(sum(a.time_spent for a in attempts) / total),
        "top_performers": build_leaderboard(attempts, leaderboard_size),
        "score_distribution": score_distribution(attempts),
        "time_distribution": time_distribution(attempts),
        "user_stats": compute_user_stats(attempts, user_id) if user_id is not None else None,
        "insights": compute_insights(attempts),
    }
