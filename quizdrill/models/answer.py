from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, ForeignKey
from quizdrill.database import Base
from quizdrill.utils.time_utils import get_utc_time

class Answer(Base):
    """One submission for a question of an exam. Rows are append-only."""
    __tablename__ = "answers"

    id = Column(Integer, primary_key=True)  # insertion sequence, breaks timestamp ties
    exam_id = Column(String(36), ForeignKey("exams.id"), nullable=False, index=True)
    question_id = Column(String(64), nullable=False)
    selected_keys = Column(JSON, nullable=False)  # ["a", "c"]
    is_correct = Column(Boolean, nullable=False)  # fixed at submission time
    answered_at = Column(DateTime(timezone=True), nullable=False, default=get_utc_time)

    def __repr__(self):
        return f"<Answer(exam_id={self.exam_id}, question_id={self.question_id}, correct={self.is_correct})>"
