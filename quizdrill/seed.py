"""Bulk ingestion of a question-bank JSON file.

Accepts either ``[ ... ]`` or ``{"questions": [ ... ]}``. Each question is
inserted together with its options and explanations; the whole batch is one
transaction.
"""
import json
import logging
import os
from collections import Counter
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from quizdrill.database import storage_errors, transaction
from quizdrill.errors import Conflict, InvalidInput
from quizdrill.models import Question
from quizdrill.services.question_bank import QuestionBank

logger = logging.getLogger(__name__)


class SeedModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExplanationItem(SeedModel):
    id: str
    text: str
    url: str = ""

class OptionItem(SeedModel):
    id: str
    text: str
    text_pl: Optional[str] = None

class QuestionItem(SeedModel):
    id: str = Field(min_length=1, max_length=64)
    question_text: str
    question_text_pl: Optional[str] = None
    multi_select: bool = False
    options: List[OptionItem] = []
    correct_option_ids: List[str] = []
    options_explanation: Dict[str, List[ExplanationItem]] = {}  # language -> items
    difficulty: Optional[int] = None
    tags: Optional[str] = None

class QuestionFile(SeedModel):
    questions: List[QuestionItem]


def normalize_key(key: str) -> str:
    """'A ' -> 'a'"""
    return key.strip().lower()


def parse_questions(raw) -> List[QuestionItem]:
    try:
        if isinstance(raw, dict) and "questions" in raw:
            return QuestionFile.model_validate(raw).questions
        if isinstance(raw, list):
            return [QuestionItem.model_validate(item) for item in raw]
    except ValidationError as e:
        raise InvalidInput(f"Invalid question file: {e}")
    raise InvalidInput("Question file must be a list or an object with a 'questions' list")


def load_question_file(path: str) -> List[QuestionItem]:
    try:
        with open(path, encoding="utf-8") as fh:
            raw = json.load(fh)
    except json.JSONDecodeError as e:
        raise InvalidInput(f"json parse: {e}")
    return parse_questions(raw)


def ingest_questions(db: Session, items: List[QuestionItem]) -> int:
    """Insert the batch all-or-nothing; returns the number of questions added"""
    ids = [item.id for item in items]
    duplicates = sorted(qid for qid, n in Counter(ids).items() if n > 1)
    if duplicates:
        raise InvalidInput(f"duplicate question IDs in JSON: {duplicates}")

    with storage_errors("Select existing questions"):
        existing = sorted(row[0] for row in db.query(Question.id).filter(Question.id.in_(ids)).all()) if ids else []
    if existing:
        raise Conflict(f"questions already in the bank: {existing}")

    bank = QuestionBank(db)
    with transaction(db, "Ingest questions"):
        sequence = bank.next_sequence()
        for offset, item in enumerate(items):
            correct = {normalize_key(k) for k in item.correct_option_ids}
            options = [
                {
                    "key": normalize_key(o.id),
                    "text": o.text,
                    "text_pl": o.text_pl,
                    "is_correct": normalize_key(o.id) in correct,
                }
                for o in item.options
            ]
            if not any(o["is_correct"] for o in options):
                logger.warning(f"Question {item.id} has no correct option; exams drawing it will be rejected")
            explanations = [
                {"key": normalize_key(e.id), "lang": lang.strip().lower(), "text": e.text, "url": e.url.strip()}
                for lang, entries in item.options_explanation.items()
                for e in entries
            ]
            bank.add_question(
                question_id=item.id,
                text_en=item.question_text,
                text_pl=item.question_text_pl,
                multi_select=item.multi_select,
                options=options,
                explanations=explanations,
                sequence=sequence + offset,
                difficulty=item.difficulty,
                tags=item.tags,
            )

    logger.info(f"Ingested {len(items)} questions")
    return len(items)


def seed_if_empty(db: Session, path: str) -> int:
    """Ingest ``path`` only into an empty bank"""
    if QuestionBank(db).count() > 0:
        return 0
    if not os.path.exists(path):
        logger.info(f"No seed file at {path}; running with empty bank")
        return 0
    count = ingest_questions(db, load_question_file(path))
    logger.info(f"Seeded questions from {path}")
    return count
