from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from quizdrill.database import Base
from quizdrill.utils.time_utils import get_utc_time

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    public_id = Column(String(36), unique=True, nullable=False)  # value of the sq_uid cookie
    display_name = Column(String, nullable=True)
    email = Column(String, unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), default=get_utc_time)
    updated_at = Column(DateTime(timezone=True), default=get_utc_time, onupdate=get_utc_time)

    # Relationships
    exams = relationship("Exam", back_populates="user")

    def __repr__(self):
        return f"<User(id={self.id}, public_id={self.public_id})>"
