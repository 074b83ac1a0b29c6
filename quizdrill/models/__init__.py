from .user import User
from .question import Question, Option, Explanation
from .exam import Exam, ExamQuestion
from .answer import Answer

__all__ = ["User", "Question", "Option", "Explanation", "Exam", "ExamQuestion", "Answer"]
