"""Per-user statistics over finished exams and every recorded submission."""
from datetime import timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from quizdrill.database import storage_errors
from quizdrill.models import Answer, Exam, Question
from quizdrill.utils.time_utils import get_utc_time

RECENT_WINDOW = timedelta(days=30)


def _percent(part, whole):
    if not whole:
        return None
    return part * 100.0 / whole


def split_tags(raw):
    """'OMS, Backoffice,,OMS' -> ['OMS', 'Backoffice']"""
    if not raw:
        return []
    tags = []
    for part in raw.split(","):
        tag = part.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def compute_user_stats(db: Session, user_id: int, pass_threshold: float, now=None) -> dict:
    """Aggregate exam and answer statistics for one user.

    ``pass_threshold`` is the same value the score calculator uses.
    """
    now = now or get_utc_time()
    since = now - RECENT_WINDOW

    with storage_errors("Compute stats"):
        exams = db.query(Exam).filter(Exam.user_id == user_id)
        total_exams = exams.count()
        completed = exams.filter(Exam.finished_at.isnot(None)).count()
        scored = exams.filter(Exam.score_percent.isnot(None))
        passed = scored.filter(Exam.score_percent >= pass_threshold).count()
        failed = scored.filter(Exam.score_percent < pass_threshold).count()
        average = (
            db.query(func.avg(Exam.score_percent))
            .filter(Exam.user_id == user_id, Exam.score_percent.isnot(None))
            .scalar()
        )

        answers = db.query(Answer).join(Exam, Exam.id == Answer.exam_id).filter(Exam.user_id == user_id)
        total_answers = answers.count()
        correct_answers = answers.filter(Answer.is_correct.is_(True)).count()
        recent = answers.filter(Answer.answered_at >= since)
        answers_30d = recent.count()
        correct_30d = recent.filter(Answer.is_correct.is_(True)).count()

        tagged = (
            db.query(Answer.is_correct, Question.tags)
            .join(Exam, Exam.id == Answer.exam_id)
            .join(Question, Question.id == Answer.question_id)
            .filter(Exam.user_id == user_id)
            .all()
        )

    tag_totals, tag_correct = {}, {}
    for is_correct, tags in tagged:
        for tag in split_tags(tags):
            tag_totals[tag] = tag_totals.get(tag, 0) + 1
            if is_correct:
                tag_correct[tag] = tag_correct.get(tag, 0) + 1

    return {
        "total_exams": total_exams,
        "completed_exams": completed,
        "average_score": float(average) if average is not None else None,
        "total_answers": total_answers,
        "correct_answers": correct_answers,
        "accuracy_overall": _percent(correct_answers, total_answers),
        "answers_last_30d": answers_30d,
        "correct_last_30d": correct_30d,
        "accuracy_last_30d": _percent(correct_30d, answers_30d),
        "accuracy_by_tag": {tag: _percent(tag_correct.get(tag, 0), total) for tag, total in tag_totals.items()},
        "answered_by_tag": tag_totals,
        "passed_exams": passed,
        "failed_exams": failed,
        "pass_rate": _percent(passed, completed),
    }
