"""Database models."""

from mocktest.models.attempt import AttemptAnswer, TestAttempt
from mocktest.models.mock_test import MockTest, TestQuestion, TestSection

__all__ = [
    "MockTest",
    "TestSection",
    "TestQuestion",
    "TestAttempt",
    "AttemptAnswer",
]
