from sqlalchemy import Column, Integer, BigInteger, String, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from quizdrill.database import Base
from quizdrill.utils.time_utils import get_utc_time

class Exam(Base):
    __tablename__ = "exams"

    id = Column(String(36), primary_key=True)  # UUID
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)  # null for anonymous
    type = Column(String(16), nullable=False, default="exam")
    started_at = Column(DateTime(timezone=True), nullable=False, default=get_utc_time)
    finished_at = Column(DateTime(timezone=True), nullable=True)
    duration_seconds = Column(Integer, nullable=False)
    score_percent = Column(Float, nullable=True)
    seed = Column(BigInteger, nullable=True)

    # Relationships
    user = relationship("User", back_populates="exams")
    questions = relationship("ExamQuestion", back_populates="exam", order_by="ExamQuestion.position")

    def __repr__(self):
        return f"<Exam(id={self.id}, user_id={self.user_id}, finished={self.finished_at is not None})>"

class ExamQuestion(Base):
    __tablename__ = "exam_questions"

    id = Column(Integer, primary_key=True)
    exam_id = Column(String(36), ForeignKey("exams.id"), nullable=False, index=True)
    question_id = Column(String(64), nullable=False)
    position = Column(Integer, nullable=False)  # 1..N

    # Positions are dense and unique per exam
    __table_args__ = (
        UniqueConstraint('exam_id', 'position', name='unique_exam_position'),
    )

    exam = relationship("Exam", back_populates="questions")

    def __repr__(self):
        return f"<ExamQuestion(exam_id={self.exam_id}, position={self.position}, question_id={self.question_id})>"
