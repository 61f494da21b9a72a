"""Per-attempt option shuffling.

Every function returns new objects; the canonical test passed in is never
mutated, so one cached test definition can serve concurrent requests.
"""

import random
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import TypeVar

from mocktest.engine.types import UNANSWERED, Answer, Question, RandomizedQuestion, Section

T = TypeVar("T")


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Fisher-Yates shuffle of a copy of ``items``.

    A fresh ``random.Random`` is used when no generator is given, so repeated
    attempts see different orderings.
    """
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def randomize_question_options(
    question: Question, rng: random.Random | None = None
) -> RandomizedQuestion:
    """Shuffle options and remap ``correct_answer`` to the new position."""
    order = shuffle(range(len(question.options)), rng)

    # Position of the previously correct option after this shuffle
    new_correct = order.index(question.correct_answer) if question.correct_answer in order else -1

    return RandomizedQuestion(
        id=question.id,
        text=question.text,
        options=tuple(question.options[i] for i in order),
        correct_answer=new_correct,
        marks=question.marks,
        explanation=question.explanation,
        original_correct_answer=question.correct_answer,
        option_order=tuple(order),
    )


def randomize_test_questions(
    sections: Iterable[Section], rng: random.Random | None = None
) -> tuple[Section, ...]:
    """Randomize options of every question while preserving test structure.

    Passing ``random.Random(seed)`` reproduces the same orderings, which is how
    a submission is mapped back onto the canonical test.
    """
    rng = rng or random.Random()
    return tuple(
        replace(
            section,
            questions=tuple(randomize_question_options(q, rng) for q in section.questions),
        )
        for section in sections
    )


def restore_canonical_answers(
    randomized_sections: Iterable[Section], answers: Iterable[Answer]
) -> list[Answer]:
    """
    Translate option indices chosen on a shuffled copy back to canonical indices.

    Answers for unknown questions pass through untouched (the scorer ignores
    them); out-of-range selections become UNANSWERED-style misses.
    """
    orders = {
        str(q.id): q.option_order
        for section in randomized_sections
        for q in section.questions
        if isinstance(q, RandomizedQuestion)
    }

    restored: list[Answer] = []
    for answer in answers:
        order = orders.get(str(answer.question_id))
        if order is None:
            restored.append(answer)
        elif 0 <= answer.selected_option < len(order):
            restored.append(Answer(answer.question_id, order[answer.selected_option]))
        else:
            restored.append(Answer(answer.question_id, UNANSWERED))
    return restored


def discard_out_of_range(sections: Iterable[Section], answers: Iterable[Answer]) -> list[Answer]:
    """Turn selections that point past a question's options into UNANSWERED."""
    option_counts = {
        str(q.id): len(q.options) for section in sections for q in section.questions
    }
    kept: list[Answer] = []
    for answer in answers:
        count = option_counts.get(str(answer.question_id))
        if count is not None and not 0 <= answer.selected_option < count:
            kept.append(Answer(answer.question_id, UNANSWERED))
        else:
            kept.append(answer)
    return kept
