"""Learning mode: ungated evaluation with immediate feedback."""
from typing import Sequence

from sqlalchemy.orm import Session

from quizdrill.services.grader import is_fully_correct
from quizdrill.services.question_bank import QuestionBank

DEFAULT_LANGUAGE = "en"


def evaluate(db: Session, question_id: str, selected_keys: Sequence[str], language: str = DEFAULT_LANGUAGE) -> dict:
    bank = QuestionBank(db)
    bank.get(question_id)
    correct = bank.require_correct_keys(question_id)
    language = (language or DEFAULT_LANGUAGE).strip().lower() or DEFAULT_LANGUAGE

    return {
        "is_correct": is_fully_correct(selected_keys, correct),
        "correct_option_keys": sorted(correct),
        "explanations_by_option_key": bank.explanations(question_id, language),
    }
