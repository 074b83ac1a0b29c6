from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from quizdrill.config import settings
from quizdrill.database import get_db
from quizdrill.models import User
from quizdrill.schemas import (
    ExamAnswerRequest, ExamAnswerResponse, ExamDetail, ExamList,
    FinishExamResponse, StartExamRequest, StartExamResponse,
)
from quizdrill.services.exam_session import ExamSessionService
from quizdrill.services.history import get_detail, list_sessions
from quizdrill.utils.auth_utils import get_current_user

router = APIRouter()

@router.post("", response_model=StartExamResponse)
def start_exam(
    payload: Optional[StartExamRequest] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Start an exam: draw and fix the ordered question set"""
    payload = payload or StartExamRequest()
    service = ExamSessionService(db, settings)
    return service.start(
        count=payload.count,
        duration_seconds=payload.duration_seconds,
        seed=payload.seed,
        owner_id=current_user.id,
    )

@router.post("/{exam_id}/answer", response_model=ExamAnswerResponse)
def submit_exam_answer(
    exam_id: str,
    payload: ExamAnswerRequest,
    question_id: str = Query(..., alias="questionId"),
    db: Session = Depends(get_db),
):
    """Record an answer. The response never says whether it was correct."""
    service = ExamSessionService(db, settings)
    return service.submit_answer(exam_id, question_id, payload.selected_option_keys)

@router.post("/{exam_id}/finish", response_model=FinishExamResponse)
def finish_exam(exam_id: str, db: Session = Depends(get_db)):
    """Score the exam and return the full review"""
    service = ExamSessionService(db, settings)
    return service.finish(exam_id)

@router.get("", response_model=ExamList)
def list_my_exams(
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Exam history of the current identity, newest first"""
    return list_sessions(db, current_user.id, _to_int(limit), _to_int(offset), settings)

@router.get("/{exam_id}", response_model=ExamDetail)
def get_my_exam(exam_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Read-only review of one of the current identity's exams"""
    return get_detail(db, exam_id, current_user.id, settings)

def _to_int(value: Optional[str]) -> Optional[int]:
    # malformed paging values fall back to defaults like missing ones
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None
