"""Error taxonomy shared by the exam engine and the HTTP layer.

Every error carries a stable machine-readable ``kind`` and a human ``detail``;
``main.py`` renders them as ``{"error": kind, "detail": detail}``.
"""
from typing import Optional


class QuizError(Exception):
    kind = "internal"
    status_code = 500
    default_detail = "Internal error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {"error": self.kind, "detail": self.detail}


class NotFound(QuizError):
    kind = "not_found"
    status_code = 404
    default_detail = "Not found"


class InvalidInput(QuizError):
    kind = "invalid_input"
    status_code = 400
    default_detail = "Bad request"


class Conflict(QuizError):
    """Data-integrity gap, e.g. a question with no option flagged correct."""
    kind = "conflict"
    status_code = 409
    default_detail = "Question has no options/correct answers"


class InvalidState(QuizError):
    kind = "invalid_state"
    status_code = 400
    default_detail = "Operation not allowed in the current state"


class NoQuestions(InvalidState):
    kind = "no_questions"
    default_detail = "No questions"


class Forbidden(QuizError):
    kind = "forbidden"
    status_code = 403
    default_detail = "Forbidden"


class Unauthorized(QuizError):
    kind = "unauthorized"
    status_code = 401
    default_detail = "Could not validate credentials"


class StorageFailure(QuizError):
    # detail is always generic; the driver message is only logged
    kind = "storage_failure"
    status_code = 500
    default_detail = "Storage error"
