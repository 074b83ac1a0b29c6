"""Read-only exam history for one identity."""
from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from quizdrill.config import Settings, settings as default_settings
from quizdrill.database import storage_errors
from quizdrill.errors import Forbidden
from quizdrill.models import Exam, ExamQuestion
from quizdrill.services.exam_session import load_answer_log, load_exam, load_question_refs
from quizdrill.services.question_bank import QuestionBank
from quizdrill.services.review import build_review
from quizdrill.services.scoring import is_passed
from quizdrill.utils.time_utils import ensure_utc


def clamp_page(limit: Optional[int], offset: Optional[int], config: Settings = default_settings) -> Tuple[int, int]:
    """Out-of-range paging values fall back to defaults instead of failing"""
    if limit is None or limit <= 0:
        limit = config.history_default_limit
    limit = min(limit, config.history_max_limit)
    if offset is None or offset < 0:
        offset = 0
    return limit, offset


def list_sessions(db: Session, owner_id: int, limit: Optional[int] = None, offset: Optional[int] = None,
                  config: Settings = default_settings) -> dict:
    limit, offset = clamp_page(limit, offset, config)

    with storage_errors("List exams"):
        total = db.query(func.count(Exam.id)).filter(Exam.user_id == owner_id).scalar() or 0
        exams = (
            db.query(Exam)
            .filter(Exam.user_id == owner_id)
            .order_by(Exam.started_at.desc(), Exam.id)
            .limit(limit)
            .offset(offset)
            .all()
        )
        counts = {}
        ids = [e.id for e in exams]
        if ids:
            rows = (
                db.query(ExamQuestion.exam_id, func.count(ExamQuestion.id))
                .filter(ExamQuestion.exam_id.in_(ids))
                .group_by(ExamQuestion.exam_id)
                .all()
            )
            counts = {exam_id: c for exam_id, c in rows}

    items = []
    for exam in exams:
        items.append({
            "id": exam.id,
            "started_at": ensure_utc(exam.started_at),
            "finished_at": ensure_utc(exam.finished_at),
            "duration_sec": exam.duration_seconds,
            "score_percent": exam.score_percent,
            "passed": is_passed(exam.score_percent, config.pass_threshold),
            "question_count": counts.get(exam.id, 0),
        })

    return {"total": total, "limit": limit, "offset": offset, "items": items}


def get_detail(db: Session, exam_id: str, owner_id: int, config: Settings = default_settings) -> dict:
    """Full review payload of one exam, only for the identity that owns it"""
    exam = load_exam(db, exam_id)
    if exam.user_id is None or exam.user_id != owner_id:
        raise Forbidden()

    refs = load_question_refs(db, exam_id)
    answer_log = load_answer_log(db, exam_id, [ref.question_id for ref in refs])
    review = build_review(refs, answer_log, QuestionBank(db), config.explanation_languages)
    correct = sum(1 for item in review if item["was_correct"])

    return {
        "exam_id": exam.id,
        "started_at": ensure_utc(exam.started_at),
        "finished_at": ensure_utc(exam.finished_at),
        "duration_sec": exam.duration_seconds,
        "score_percent": exam.score_percent,
        "passed": is_passed(exam.score_percent, config.pass_threshold),
        "correct_count": correct,
        "wrong_count": len(refs) - correct,
        "review_items": review,
    }
