# app/services/scoring.py
"""
Scoring engine.

Pure functions only: same inputs, same result, no database access, no
exceptions for malformed answers. Answers are dicts in the stored shape
{"question_id": int, "selected_option_index": int}.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

CORRECT = "correct"
INCORRECT = "incorrect"
UNANSWERED = "unanswered"


@dataclass(frozen=True)
class QuestionKey:
    question_id: int
    correct_answer_index: Optional[int]  # None if the question no longer exists


@dataclass(frozen=True)
class QuestionResult:
    question_id: int
    selected_option_index: Optional[int]
    correct_answer_index: Optional[int]
    outcome: str
    marks_awarded: int


@dataclass(frozen=True)
class SectionScore:
    section_number: int
    marks_per_question: int
    results: Tuple[QuestionResult, ...]

    @property
    def total_questions(self) -> int:
        return len(self.results)

    @property
    def attempted(self) -> int:
        return sum(1 for r in self.results if r.outcome != UNANSWERED)

    @property
    def correct(self) -> int:
        return sum(1 for r in self.results if r.outcome == CORRECT)

    @property
    def incorrect(self) -> int:
        return self.attempted - self.correct

    @property
    def unanswered(self) -> int:
        return self.total_questions - self.attempted

    @property
    def score(self) -> int:
        return sum(r.marks_awarded for r in self.results)

    @property
    def max_score(self) -> int:
        return self.total_questions * self.marks_per_question

    def stats(self) -> dict:
        return {
            "section_number": self.section_number,
            "total_questions": self.total_questions,
            "attempted": self.attempted,
            "correct": self.correct,
            "incorrect": self.incorrect,
            "unanswered": self.unanswered,
            "score": self.score,
            "max_score": self.max_score,
            "percentage": percentage(self.score, self.max_score),
        }


@dataclass(frozen=True)
class AttemptScore:
    sections: Tuple[SectionScore, ...]

    @property
    def total_score(self) -> int:
        return sum(s.score for s in self.sections)

    @property
    def max_score(self) -> int:
        return sum(s.max_score for s in self.sections)

    @property
    def total_questions(self) -> int:
        return sum(s.total_questions for s in self.sections)

    @property
    def attempted(self) -> int:
        return sum(s.attempted for s in self.sections)

    @property
    def correct(self) -> int:
        return sum(s.correct for s in self.sections)

    @property
    def incorrect(self) -> int:
        return self.attempted - self.correct

    @property
    def unanswered(self) -> int:
        return self.total_questions - self.attempted

    @property
    def percentage(self) -> float:
        return percentage(self.total_score, self.max_score)

    @property
    def accuracy(self) -> float:
        return percentage(self.correct, self.attempted)

    @property
    def performance(self) -> str:
        return performance_band(self.percentage)


def percentage(score: int, max_score: int) -> float:
    """score / max_score * 100, clamped to [0, 100]; 0 when max_score is 0."""
    if max_score <= 0:
        return 0.0
    value = (score / max_score) * 100
    return round(min(100.0, max(0.0, value)), 2)


def performance_band(pct: float) -> str:
    if pct >= 80:
        return "Excellent"
    if pct >= 60:
        return "Good"
    return "Needs Improvement"


def normalize_answers(
    answers: Iterable[dict], question_ids: Sequence[int]
) -> List[dict]:
    """
    Keep answers that belong to the given questions, last entry per question
    wins. Anything unrecognised is dropped and so counts as unanswered.
    """
    allowed = set(question_ids)
    latest: Dict[int, int] = {}
    for answer in answers or []:
        question_id = answer.get("question_id")
        selected = answer.get("selected_option_index")
        if question_id not in allowed or not isinstance(selected, int):
            continue
        # a repeated question moves to the position of its latest entry
        latest.pop(question_id, None)
        latest[question_id] = selected
    return [
        {"question_id": qid, "selected_option_index": selected}
        for qid, selected in latest.items()
    ]


def score_question(
    key: QuestionKey, selected: Optional[int], marks_per_question: int
) -> QuestionResult:
    if selected is None:
        outcome = UNANSWERED
    elif key.correct_answer_index is not None and selected == key.correct_answer_index:
        outcome = CORRECT
    else:
        # wrong or out-of-range index; no negative marking
        outcome = INCORRECT

    return QuestionResult(
        question_id=key.question_id,
        selected_option_index=selected,
        correct_answer_index=key.correct_answer_index,
        outcome=outcome,
        marks_awarded=marks_per_question if outcome == CORRECT else 0,
    )


def score_section(
    questions: Sequence[QuestionKey],
    answers: Iterable[dict],
    marks_per_question: int,
    section_number: int = 1,
) -> SectionScore:
    selected_by_question = {
        a["question_id"]: a["selected_option_index"]
        for a in normalize_answers(answers, [q.question_id for q in questions])
    }
    results = tuple(
        score_question(key, selected_by_question.get(key.question_id), marks_per_question)
        for key in questions
    )
    return SectionScore(
        section_number=section_number,
        marks_per_question=marks_per_question,
        results=results,
    )


def score_attempt(sections: Sequence[SectionScore]) -> AttemptScore:
    return AttemptScore(sections=tuple(sections))
