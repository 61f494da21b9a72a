"""Feedback attached to a scored submission: grade, time efficiency, hints."""

from typing import Any

from mocktest.engine.types import ScoringResult

OPTIMAL_MINUTES_PER_QUESTION = 1.5
STRENGTH_THRESHOLD = 80
IMPROVEMENT_THRESHOLD = 60

# (minimum percentage, grade, performance), checked top to bottom
GRADE_BANDS = (
    (90, "A+", "Excellent"),
    (80, "A", "Good"),
    (70, "B", "Good"),
    (60, "C", "Average"),
    (50, "D", "Below Average"),
)


def grade_for(percentage: float) -> tuple[str, str]:
    for threshold, grade, performance in GRADE_BANDS:
        if percentage >= threshold:
            return grade, performance
    return "F", "Poor"


def time_efficiency_for(time_spent: float, total_questions: int) -> str:
    optimal = total_questions * OPTIMAL_MINUTES_PER_QUESTION
    if time_spent < optimal * 0.7:
        return "Fast"
    if time_spent <= optimal * 1.3:
        return "Optimal"
    return "Slow"


def generate_performance_analytics(result: ScoringResult, time_spent: float) -> dict[str, Any]:
    """Build the ``analytics`` block returned with a submission result."""
    grade, performance = grade_for(result.percentage)
    total_questions = sum(s.total_questions for s in result.section_wise_scores)
    time_efficiency = time_efficiency_for(time_spent, total_questions)

    strengths: list[str] = []
    improvements: list[str] = []

    for section in result.section_wise_scores:
        if section.percentage >= STRENGTH_THRESHOLD:
            strengths.append(
                f"Strong performance in {section.section_title} ({section.percentage:.1f}%)"
            )
        elif section.percentage < IMPROVEMENT_THRESHOLD:
            improvements.append(f"Focus on {section.section_title} ({section.percentage:.1f}%)")

    if time_efficiency == "Fast" and performance == "Excellent":
        strengths.append("Excellent time management and accuracy")
    elif time_efficiency == "Slow":
        improvements.append("Work on time management and speed")

    if not strengths:
        strengths.append("Completed the test successfully")

    if not improvements and performance != "Excellent":
        improvements.append("Continue practicing to improve overall performance")

    return {
        "grade": grade,
        "performance": performance,
        "time_efficiency": time_efficiency,
        "strengths": strengths,
        "improvements": improvements,
    }
