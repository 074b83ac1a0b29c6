"""Latest-answer-wins reduction of an exam's answer log into a score."""
from typing import Dict, Iterable, NamedTuple

from quizdrill.errors import NoQuestions
from quizdrill.utils.time_utils import ensure_utc


class ScoreResult(NamedTuple):
    score_percent: float
    correct_count: int
    wrong_count: int


def _record_order(record):
    # later timestamp wins; equal timestamps fall back to insertion sequence
    return (ensure_utc(record.answered_at), record.id or 0)


def resolve_latest(answer_log: Iterable) -> Dict[str, object]:
    """Map each question id to its most recent answer record"""
    latest = {}
    for record in sorted(answer_log, key=_record_order):
        latest[record.question_id] = record
    return latest


def compute_score(total_questions: int, answer_log: Iterable) -> ScoreResult:
    if total_questions <= 0:
        raise NoQuestions("Exam has no questions")

    latest = resolve_latest(answer_log)
    # unanswered questions have no record and count as wrong
    correct = sum(1 for record in latest.values() if record.is_correct)
    wrong = total_questions - correct
    score = correct * 100.0 / total_questions
    return ScoreResult(score_percent=score, correct_count=correct, wrong_count=wrong)


def is_passed(score_percent, pass_threshold: float):
    """Pass/fail verdict; None while the exam has no score yet"""
    if score_percent is None:
        return None
    return score_percent >= pass_threshold
