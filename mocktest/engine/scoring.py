"""Server-side scoring of a submitted attempt."""

from collections.abc import Iterable

from mocktest.engine.rounding import percent, round2
from mocktest.engine.types import (
    UNANSWERED,
    Answer,
    ProcessedAnswer,
    ScoringResult,
    SectionScore,
    Test,
)


def calculate_test_score(test: Test, answers: Iterable[Answer]) -> ScoringResult:
    """
    Score answers against the canonical test.

    Rules:
    - Unanswered questions are recorded with selected_option=-1 and earn nothing.
    - A correct answer earns the question's full marks; wrong answers earn 0
      (no partial credit, no negative marking).
    - Answers for question ids not in the test are ignored; for duplicate ids
      the last answer wins.

    Args:
        test: Test holding the authoritative correct answers
        answers: Raw (question_id, selected_option) pairs from the client

    Returns:
        ScoringResult with per-question and per-section breakdowns
    """
    answer_map = {str(a.question_id): a.selected_option for a in answers}

    processed: list[ProcessedAnswer] = []
    section_scores: list[SectionScore] = []
    total_score = 0.0
    total_marks = 0.0

    for section in test.sections:
        section_score = 0.0
        section_marks = 0.0
        correct_answers = 0

        for question in section.questions:
            section_marks += question.marks
            selected = answer_map.get(str(question.id))

            if selected is None:
                processed.append(
                    ProcessedAnswer(
                        question_id=question.id,
                        selected_option=UNANSWERED,
                        is_correct=False,
                        marks_awarded=0,
                    )
                )
                continue

            is_correct = selected == question.correct_answer
            marks_awarded = question.marks if is_correct else 0
            section_score += marks_awarded
            if is_correct:
                correct_answers += 1

            processed.append(
                ProcessedAnswer(
                    question_id=question.id,
                    selected_option=selected,
                    is_correct=is_correct,
                    marks_awarded=marks_awarded,
                )
            )

        total_score += section_score
        total_marks += section_marks
        section_scores.append(
            SectionScore(
                section_id=section.id,
                section_title=section.title,
                score=section_score,
                total_marks=section_marks,
                percentage=round2(percent(section_score, section_marks)),
                correct_answers=correct_answers,
                total_questions=len(section.questions),
            )
        )

    return ScoringResult(
        score=total_score,
        total_marks=total_marks,
        percentage=round2(percent(total_score, total_marks)),
        processed_answers=tuple(processed),
        section_wise_scores=tuple(section_scores),
    )
