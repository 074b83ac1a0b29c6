from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from quizdrill.database import Base
from quizdrill.utils.time_utils import get_utc_time

class Question(Base):
    __tablename__ = "questions"

    id = Column(String(64), primary_key=True)
    sequence = Column(Integer, nullable=False, index=True)  # insertion order within the bank
    text_en = Column(String, nullable=False)
    text_pl = Column(String, nullable=True)
    multi_select = Column(Boolean, nullable=False, default=False)
    difficulty = Column(Integer, nullable=True)
    tags = Column(String, nullable=True)  # CSV, e.g. "OMS, Backoffice"
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=get_utc_time)
    updated_at = Column(DateTime(timezone=True), default=get_utc_time, onupdate=get_utc_time)

    options = relationship("Option", back_populates="question", order_by="Option.id", cascade="all, delete-orphan")
    explanations = relationship("Explanation", back_populates="question", cascade="all, delete-orphan")

    def text(self, language: str = "en") -> str:
        if language == "pl" and self.text_pl:
            return self.text_pl
        return self.text_en

    def __repr__(self):
        return f"<Question(id={self.id}, text={self.text_en[:20]})>"

class Option(Base):
    __tablename__ = "options"

    id = Column(Integer, primary_key=True)
    question_id = Column(String(64), ForeignKey("questions.id"), nullable=False, index=True)
    option_key = Column(String(4), nullable=False)  # 'a', 'b', 'c', 'd'
    text_en = Column(String, nullable=False)
    text_pl = Column(String, nullable=True)
    is_correct = Column(Boolean, nullable=False, default=False)

    question = relationship("Question", back_populates="options")

    def text(self, language: str = "en") -> str:
        if language == "pl" and self.text_pl:
            return self.text_pl
        return self.text_en

    def __repr__(self):
        return f"<Option(question_id={self.question_id}, key={self.option_key}, correct={self.is_correct})>"

class Explanation(Base):
    __tablename__ = "explanations"

    id = Column(Integer, primary_key=True)
    question_id = Column(String(64), ForeignKey("questions.id"), nullable=False, index=True)
    option_key = Column(String(4), nullable=False)
    lang = Column(String(8), nullable=False)  # 'en' | 'pl'
    text = Column(String, nullable=False)
    url = Column(String, nullable=False, default="")

    question = relationship("Question", back_populates="explanations")

    def __repr__(self):
        return f"<Explanation(question_id={self.question_id}, key={self.option_key}, lang={self.lang})>"
