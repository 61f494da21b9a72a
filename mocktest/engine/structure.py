"""Structural helpers for tests: totals, stats, validation and client copies."""

from collections.abc import Iterable, Mapping
from typing import Any

from mocktest.engine.rounding import round2
from mocktest.engine.types import Section


def calculate_total_marks(sections: Iterable[Section]) -> float:
    """Sum of marks over every question of every section."""
    return sum(section.total_marks for section in sections)


def calculate_total_questions(sections: Iterable[Section]) -> int:
    return sum(len(section.questions) for section in sections)


def calculate_test_stats(sections: Iterable[Section]) -> dict[str, Any]:
    """Summary figures shown on test listings."""
    sections = list(sections)
    total_questions = calculate_total_questions(sections)
    total_marks = calculate_total_marks(sections)

    return {
        "total_questions": total_questions,
        "total_marks": total_marks,
        "section_count": len(sections),
        "questions_by_section": [
            {
                "title": section.title,
                "question_count": len(section.questions),
                "marks": section.total_marks,
            }
            for section in sections
        ],
        "average_marks_per_question": (
            round2(total_marks / total_questions) if total_questions > 0 else 0
        ),
    }


def _blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_test_structure(data: Mapping[str, Any]) -> list[str]:
    """
    Validate a test definition given as plain data.

    Args:
        data: Mapping with title, description, duration, price and sections,
            each section holding title and questions (text, options,
            correct_answer, marks).

    Returns:
        List of human-readable errors; empty when the structure is valid.
    """
    errors: list[str] = []

    if _blank(data.get("title")):
        errors.append("Test title is required")

    if _blank(data.get("description")):
        errors.append("Test description is required")

    duration = data.get("duration")
    if not duration or duration <= 0:
        errors.append("Test duration must be greater than 0")

    price = data.get("price")
    if price is None or price < 0:
        errors.append("Test price must be 0 or greater")

    sections = data.get("sections")
    if not sections or not isinstance(sections, (list, tuple)):
        errors.append("At least one section is required")
        return errors

    for section_no, section in enumerate(sections, start=1):
        if _blank(section.get("title")):
            errors.append(f"Section {section_no}: Title is required")

        questions = section.get("questions")
        if not questions or not isinstance(questions, (list, tuple)):
            errors.append(f"Section {section_no}: At least one question is required")
            continue

        for question_no, question in enumerate(questions, start=1):
            prefix = f"Section {section_no}, Question {question_no}"
            if _blank(question.get("text")):
                errors.append(f"{prefix}: Question text is required")

            options = question.get("options") or []
            if len(options) < 2:
                errors.append(f"{prefix}: At least 2 options are required")

            correct = question.get("correct_answer")
            if not isinstance(correct, int) or correct < 0 or correct >= len(options):
                errors.append(f"{prefix}: Invalid correct answer index")

            marks = question.get("marks")
            if not marks or marks <= 0:
                errors.append(f"{prefix}: Marks must be greater than 0")

    return errors


def strip_answers(sections: Iterable[Section]) -> list[dict[str, Any]]:
    """Client-facing copy of the sections: no correct answers, no explanations."""
    return [
        {
            "id": section.id,
            "title": section.title,
            "time_limit": section.time_limit,
            "questions": [
                {
                    "id": question.id,
                    "text": question.text,
                    "options": list(question.options),
                    "marks": question.marks,
                }
                for question in section.questions
            ],
        }
        for section in sections
    ]


def format_duration(minutes: int) -> str:
    """Human readable duration: "45 minutes", "1 hour", "1h 30m"."""
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''}"

    hours, remaining = divmod(minutes, 60)
    if remaining == 0:
        return f"{hours} hour{'s' if hours != 1 else ''}"

    return f"{hours}h {remaining}m"
