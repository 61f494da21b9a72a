"""Analytics service: full per-test report recomputed from stored attempts."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from mocktest.core.config import settings
from mocktest.core.dependencies import CurrentUser
from mocktest.engine.analytics import compute_test_analytics
from mocktest.engine.types import UNANSWERED
from mocktest.services.mock_test_service import get_test
from mocktest.services.results_service import list_test_attempts, to_attempt_record

logger = logging.getLogger(__name__)


def get_test_analytics(db: Session, test_id: UUID, user: CurrentUser) -> dict[str, Any]:
    """
    Get the analytics report of a test, including the caller's own standing.

    Every call scans all attempts of the test.

    Args:
        db: Database session
        test_id: Test ID
        user: Caller; their attempts drive ``user_stats``

    Returns:
        Dictionary shaped like ``TestAnalytics``
    """
    get_test(db, test_id)

    attempts = list_test_attempts(db, test_id, with_answers=True)
    records = [
        to_attempt_record(
            a,
            answered_count=sum(1 for ans in a.answers if ans.selected_option != UNANSWERED),
        )
        for a in attempts
    ]

    logger.debug(
        "Computing test analytics",
        extra={"test_id": str(test_id), "attempt_count": len(records)},
    )

    return compute_test_analytics(records, user.id, settings.LEADERBOARD_SIZE)
