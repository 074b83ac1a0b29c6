"""Exam lifecycle: start -> accept answers -> finish -> review.

Every operation is an independent unit of work against storage. The service
is built per request and keeps nothing between calls.
"""
import logging
from typing import List, Optional, Sequence
from uuid import uuid4

from sqlalchemy.orm import Session

from quizdrill.config import Settings, settings as default_settings
from quizdrill.database import storage_errors, transaction
from quizdrill.errors import Conflict, InvalidInput, NoQuestions, NotFound
from quizdrill.models import Answer, Exam, ExamQuestion
from quizdrill.services.draw import draw_questions
from quizdrill.services.grader import is_fully_correct
from quizdrill.services.question_bank import QuestionBank, public_question
from quizdrill.services.review import build_review
from quizdrill.services.scoring import compute_score, is_passed
from quizdrill.utils.time_utils import get_utc_time

logger = logging.getLogger(__name__)


def load_exam(db: Session, exam_id: str) -> Exam:
    with storage_errors("Select exam"):
        exam = db.query(Exam).filter(Exam.id == exam_id).first()
    if exam is None:
        raise NotFound("Exam not found")
    return exam


def load_question_refs(db: Session, exam_id: str) -> List[ExamQuestion]:
    with storage_errors("Select exam questions"):
        return (
            db.query(ExamQuestion)
            .filter(ExamQuestion.exam_id == exam_id)
            .order_by(ExamQuestion.position)
            .all()
        )


def load_answer_log(db: Session, exam_id: str, question_ids: Optional[Sequence[str]] = None) -> List[Answer]:
    with storage_errors("Select answers"):
        query = db.query(Answer).filter(Answer.exam_id == exam_id)
        if question_ids is not None:
            query = query.filter(Answer.question_id.in_(list(question_ids)))
        return query.order_by(Answer.answered_at, Answer.id).all()


class ExamSessionService:

    def __init__(self, db: Session, config: Settings = default_settings):
        self.db = db
        self.config = config
        self.bank = QuestionBank(db)

    def start(self, count: Optional[int] = None, duration_seconds: Optional[int] = None,
              seed: Optional[int] = None, owner_id: Optional[int] = None, rng=None) -> dict:
        """Draw the exam's questions and persist them as immutable QuestionRefs"""
        if not count or count <= 0:
            count = self.config.default_question_count
        if not duration_seconds or duration_seconds <= 0:
            duration_seconds = self.config.default_duration_seconds

        all_ids = self.bank.list_all_ids()
        if not all_ids:
            raise NoQuestions("No questions")

        drawn = draw_questions(all_ids, count, seed=seed, rng=rng)
        questions = self.bank.get_many(drawn)
        for question_id in drawn:
            question = questions.get(question_id)
            if question is None:
                raise NotFound(f"Question {question_id} not found")
            if not any(option.is_correct for option in question.options):
                raise Conflict(f"Question {question_id} has no options/correct answers in DB")

        exam = Exam(
            id=str(uuid4()),
            user_id=owner_id,
            type="exam",
            started_at=get_utc_time(),
            duration_seconds=duration_seconds,
            seed=seed,
        )
        for position, question_id in enumerate(drawn, start=1):
            exam.questions.append(ExamQuestion(question_id=question_id, position=position))

        # built before commit; committing expires the loaded questions
        payload = {
            "exam_id": exam.id,
            "duration_sec": duration_seconds,
            "ordered_questions": [public_question(questions[qid]) for qid in drawn],
        }
        with transaction(self.db, "Create exam"):
            self.db.add(exam)

        logger.info(f"Exam {payload['exam_id']} started with {len(drawn)} questions (seeded={seed is not None})")
        return payload

    def submit_answer(self, exam_id: str, question_id: str, selected_keys: Sequence[str]) -> dict:
        """Grade and append one answer record. Correctness is never returned."""
        if not exam_id or not question_id:
            raise InvalidInput("missing examId/questionId")
        load_exam(self.db, exam_id)

        with storage_errors("Select exam question"):
            ref = (
                self.db.query(ExamQuestion)
                .filter(ExamQuestion.exam_id == exam_id, ExamQuestion.question_id == question_id)
                .first()
            )
        if ref is None:
            raise NotFound(f"Question {question_id} is not part of exam {exam_id}")

        correct = self.bank.require_correct_keys(question_id)
        selected = [key.strip().lower() for key in selected_keys]
        record = Answer(
            exam_id=exam_id,
            question_id=question_id,
            selected_keys=selected,
            is_correct=is_fully_correct(selected, correct),
            answered_at=get_utc_time(),
        )
        with transaction(self.db, "Insert answer"):
            self.db.add(record)

        return {"accepted": True}

    def finish(self, exam_id: str) -> dict:
        """Reduce the answer log to a score and stamp the exam as finished.

        Calling it again recomputes from the same log and overwrites the
        stored score and finish time.
        """
        exam = load_exam(self.db, exam_id)
        refs = load_question_refs(self.db, exam_id)
        if not refs:
            raise NoQuestions("Exam has no questions")

        question_ids = [ref.question_id for ref in refs]
        answer_log = load_answer_log(self.db, exam_id, question_ids)
        result = compute_score(len(refs), answer_log)
        review = build_review(refs, answer_log, self.bank, self.config.explanation_languages)

        with transaction(self.db, "Update exam"):
            exam.finished_at = get_utc_time()
            exam.score_percent = result.score_percent

        logger.info(f"Exam {exam_id} finished with score {result.score_percent:.1f}%")
        return {
            "score_percent": result.score_percent,
            "correct_count": result.correct_count,
            "wrong_count": result.wrong_count,
            "passed": is_passed(result.score_percent, self.config.pass_threshold),
            "review_items": review,
        }

    def review(self, exam_id: str) -> List[dict]:
        load_exam(self.db, exam_id)
        refs = load_question_refs(self.db, exam_id)
        answer_log = load_answer_log(self.db, exam_id, [ref.question_id for ref in refs])
        return build_review(refs, answer_log, self.bank, self.config.explanation_languages)
