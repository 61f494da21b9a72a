"""FastAPI dependencies for rate limiting."""

from fastapi import Depends

from mocktest.core.config import settings
from mocktest.core.dependencies import CurrentUser, get_current_user
from mocktest.core.rate_limit import RateLimiter, enforce_rate_limit, get_rate_limiter


def require_rate_limit_submit(
    current_user: CurrentUser = Depends(get_current_user),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> None:
    """Rate limit dependency for attempt submissions, per user."""
    enforce_rate_limit(
        limiter,
        "submit",
        str(current_user.id),
        settings.RL_SUBMIT_USER_LIMIT,
        settings.RL_SUBMIT_USER_WINDOW,
    )
