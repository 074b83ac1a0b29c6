from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from quizdrill.database import get_db
from quizdrill.schemas import LearnAnswerRequest, LearnAnswerResponse, QuestionOut
from quizdrill.services.learning import evaluate
from quizdrill.services.question_bank import QuestionBank, public_question

router = APIRouter()

@router.get("/questions", response_model=List[QuestionOut])
def list_questions(lang: str = Query("en", description="Display language: en or pl"), db: Session = Depends(get_db)):
    """Whole question bank in insertion order, without correctness"""
    language = lang.strip().lower()
    return [public_question(q, language) for q in QuestionBank(db).list_all()]

@router.post("/learn/answer", response_model=LearnAnswerResponse)
def learn_answer(payload: LearnAnswerRequest, db: Session = Depends(get_db)):
    """Learning mode: grade one answer and reveal the key and explanations"""
    return evaluate(db, payload.question_id, payload.selected_option_keys, payload.language)
