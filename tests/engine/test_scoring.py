"""Tests for server-side scoring."""

import pytest

from mocktest.engine.scoring import calculate_test_score
from mocktest.engine.types import UNANSWERED, Answer, Question, Section, Test


def _test(*sections: Section) -> Test:
    return Test(id="t1", title="Mock", duration=30, sections=sections)


def _q(qid: str, correct: int, marks: float = 1, options: int = 4) -> Question:
    return Question(
        id=qid,
        text=f"Question {qid}",
        options=tuple(f"opt{i}" for i in range(options)),
        correct_answer=correct,
        marks=marks,
    )


class TestCalculateTestScore:
    """Scoring of a submission against the canonical test."""

    def test_half_right(self):
        """Two one-mark questions, one right: 1/2, 50%."""
        test = _test(Section(id="s1", title="A", questions=(_q("q1", 0), _q("q2", 1))))

        result = calculate_test_score(test, [Answer("q1", 0), Answer("q2", 0)])

        assert result.score == 1
        assert result.total_marks == 2
        assert result.percentage == 50.00

    def test_unanswered_questions_score_nothing(self):
        test = _test(Section(id="s1", title="A", questions=(_q("q1", 0), _q("q2", 1))))

        result = calculate_test_score(test, [Answer("q1", 0)])

        skipped = result.processed_answers[1]
        assert skipped.question_id == "q2"
        assert skipped.selected_option == UNANSWERED
        assert skipped.is_correct is False
        assert skipped.marks_awarded == 0
        assert result.total_marks == 2

    def test_empty_submission_is_valid(self):
        test = _test(Section(id="s1", title="A", questions=(_q("q1", 0),)))

        result = calculate_test_score(test, [])

        assert result.score == 0
        assert result.percentage == 0
        assert len(result.processed_answers) == 1

    def test_full_marks_only_for_exact_match(self):
        """No partial credit and no negative marking."""
        test = _test(Section(id="s1", title="A", questions=(_q("q1", 2, marks=4), _q("q2", 1, marks=2))))

        result = calculate_test_score(test, [Answer("q1", 2), Answer("q2", 3)])

        assert [a.marks_awarded for a in result.processed_answers] == [4, 0]
        assert result.score == 4
        assert result.percentage == pytest.approx(66.67)

    def test_unknown_question_ids_are_ignored(self):
        test = _test(Section(id="s1", title="A", questions=(_q("q1", 0),)))

        result = calculate_test_score(test, [Answer("nope", 0), Answer("q1", 0)])

        assert result.score == 1
        assert len(result.processed_answers) == 1

    def test_last_duplicate_answer_wins(self):
        test = _test(Section(id="s1", title="A", questions=(_q("q1", 0),)))

        result = calculate_test_score(test, [Answer("q1", 0), Answer("q1", 3)])

        assert result.processed_answers[0].selected_option == 3
        assert result.score == 0

    def test_zero_total_marks_gives_zero_percentage(self):
        result = calculate_test_score(_test(), [])

        assert result.total_marks == 0
        assert result.percentage == 0

    def test_section_breakdown(self):
        test = _test(
            Section(id="s1", title="Physics", questions=(_q("q1", 0), _q("q2", 1))),
            Section(id="s2", title="Chemistry", questions=(_q("q3", 2, marks=3),)),
        )

        result = calculate_test_score(test, [Answer("q1", 0), Answer("q2", 1), Answer("q3", 0)])

        physics, chemistry = result.section_wise_scores
        assert (physics.score, physics.total_marks, physics.percentage) == (2, 2, 100.0)
        assert (physics.correct_answers, physics.total_questions) == (2, 2)
        assert (chemistry.score, chemistry.total_marks, chemistry.percentage) == (0, 3, 0.0)
        assert chemistry.section_title == "Chemistry"
        assert result.score == 2
        assert result.total_marks == 5
        assert result.percentage == 40.0

    def test_question_ids_match_across_str_and_uuid(self):
        """Submitted ids are compared by their string form."""
        from uuid import uuid4

        qid = uuid4()
        test = _test(Section(id="s1", title="A", questions=(_q(qid, 1),)))

        result = calculate_test_score(test, [Answer(str(qid), 1)])

        assert result.score == 1
