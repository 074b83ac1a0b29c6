"""Read-only lookup over the question bank.

All reads go straight to storage; nothing is cached between requests so a
review built today and one built next month see the same persisted data.
"""
from typing import Dict, Iterable, List, Set

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from quizdrill.database import storage_errors
from quizdrill.errors import Conflict, NotFound
from quizdrill.models import Explanation, Option, Question


class QuestionBank:

    def __init__(self, db: Session):
        self.db = db

    def list_all_ids(self) -> List[str]:
        """Question ids in insertion order"""
        with storage_errors("List question ids"):
            rows = self.db.query(Question.id).order_by(Question.sequence, Question.id).all()
        return [row[0] for row in rows]

    def list_all(self) -> List[Question]:
        with storage_errors("List questions"):
            return (
                self.db.query(Question)
                .options(selectinload(Question.options))
                .order_by(Question.sequence, Question.id)
                .all()
            )

    def count(self) -> int:
        with storage_errors("Count questions"):
            return self.db.query(func.count(Question.id)).scalar() or 0

    def find(self, question_id: str):
        """Question with its options, or None when unknown"""
        with storage_errors("Select question"):
            return (
                self.db.query(Question)
                .options(selectinload(Question.options))
                .filter(Question.id == question_id)
                .first()
            )

    def get(self, question_id: str) -> Question:
        question = self.find(question_id)
        if question is None:
            raise NotFound(f"Question {question_id} not found")
        return question

    def get_many(self, question_ids: Iterable[str]) -> Dict[str, Question]:
        ids = list(question_ids)
        if not ids:
            return {}
        with storage_errors("Select questions"):
            rows = (
                self.db.query(Question)
                .options(selectinload(Question.options))
                .filter(Question.id.in_(ids))
                .all()
            )
        return {q.id: q for q in rows}

    def correct_keys(self, question_id: str) -> Set[str]:
        """Ground truth for grading. May be empty; see require_correct_keys."""
        with storage_errors("Select options"):
            rows = (
                self.db.query(Option.option_key)
                .filter(Option.question_id == question_id, Option.is_correct.is_(True))
                .all()
            )
        return {row[0].lower() for row in rows}

    def require_correct_keys(self, question_id: str) -> Set[str]:
        keys = self.correct_keys(question_id)
        if not keys:
            raise Conflict(f"Question {question_id} has no options/correct answers in DB")
        return keys

    def explanations(self, question_id: str, language: str) -> Dict[str, dict]:
        """OptionKey -> {text, url} for exactly this language; empty is valid"""
        with storage_errors("Select explanations"):
            rows = (
                self.db.query(Explanation)
                .filter(Explanation.question_id == question_id, Explanation.lang == language)
                .order_by(Explanation.id)
                .all()
            )
        return {e.option_key: {"text": e.text, "url": e.url or ""} for e in rows}

    def explanations_by_language(self, question_id: str, languages: Iterable[str]) -> Dict[str, Dict[str, dict]]:
        return {lang: self.explanations(question_id, lang) for lang in languages}

    def next_sequence(self) -> int:
        with storage_errors("Select question sequence"):
            current = self.db.query(func.max(Question.sequence)).scalar()
        return (current or 0) + 1

    def add_question(self, question_id: str, text_en: str, multi_select: bool, options: List[dict],
                     explanations: List[dict], sequence: int, text_pl: str = None,
                     difficulty: int = None, tags: str = None) -> Question:
        """Stage a question with its options and explanations on the session.

        The caller owns the transaction; nothing is committed here.
        """
        question = Question(
            id=question_id,
            sequence=sequence,
            text_en=text_en,
            text_pl=text_pl,
            multi_select=multi_select,
            difficulty=difficulty,
            tags=tags,
            version=1,
        )
        for opt in options:
            question.options.append(Option(
                option_key=opt["key"],
                text_en=opt["text"],
                text_pl=opt.get("text_pl"),
                is_correct=opt["is_correct"],
            ))
        for exp in explanations:
            question.explanations.append(Explanation(
                option_key=exp["key"],
                lang=exp["lang"],
                text=exp["text"],
                url=exp.get("url", ""),
            ))
        self.db.add(question)
        return question


def public_question(question: Question, language: str = "en") -> dict:
    """Display form of a question; never includes correctness"""
    return {
        "id": question.id,
        "text": question.text(language),
        "multi_select": question.multi_select,
        "options": [{"id": o.option_key, "text": o.text(language)} for o in question.options],
    }
