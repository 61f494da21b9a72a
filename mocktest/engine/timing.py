"""Server-side validation of the elapsed time of a submission."""

from dataclasses import dataclass
from datetime import datetime, timezone

from mocktest.engine.rounding import round_int

DEFAULT_BUFFER_MINUTES = 5


@dataclass(frozen=True)
class TimingResult:
    is_valid: bool
    actual_duration: int  # whole minutes
    error: str | None = None


def parse_timestamp(value: str | datetime) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC. None if unparseable."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def validate_test_timing(
    start_time: str | datetime,
    end_time: str | datetime,
    allowed_duration: int,
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
) -> TimingResult:
    """
    Check the wall-clock time between start and end against the allowed duration.

    The returned ``actual_duration`` is the authoritative time spent; any
    client-reported figure is ignored.

    Args:
        start_time: When the attempt was issued (ISO string or datetime)
        end_time: When the attempt was submitted
        allowed_duration: Test duration in minutes
        buffer_minutes: Grace period on top of the duration

    Returns:
        TimingResult(is_valid, actual_duration, error)
    """
    start = parse_timestamp(start_time)
    end = parse_timestamp(end_time)

    if start is None or end is None:
        return TimingResult(is_valid=False, actual_duration=0, error="Invalid start or end time")

    if end <= start:
        return TimingResult(
            is_valid=False, actual_duration=0, error="End time must be after start time"
        )

    actual_minutes = round_int((end - start).total_seconds() / 60)
    max_allowed = allowed_duration + buffer_minutes

    if actual_minutes > max_allowed:
        return TimingResult(
            is_valid=False,
            actual_duration=actual_minutes,
            error=(
                f"Test duration exceeded. Maximum allowed: {max_allowed} minutes, "
                f"actual: {actual_minutes} minutes"
            ),
        )

    return TimingResult(is_valid=True, actual_duration=actual_minutes)
