"""Request and response records for every HTTP operation.

Field names are snake_case in Python and camelCase on the wire. Request
models also accept the short names older clients send (``selected``,
``lang``, ``durationSec``).
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Questions
class OptionOut(ApiModel):
    id: str  # 'a'..'d'
    text: str

class QuestionOut(ApiModel):
    id: str
    text: str
    multi_select: bool
    options: List[OptionOut]

class ExplanationOut(ApiModel):
    text: str
    url: str = ""


# Learning mode
class LearnAnswerRequest(ApiModel):
    question_id: str = Field(min_length=1, validation_alias=AliasChoices("questionId", "question_id"))
    selected_option_keys: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("selectedOptionKeys", "selected", "selected_option_keys"),
    )
    language: str = Field("en", validation_alias=AliasChoices("language", "lang"))

class LearnAnswerResponse(ApiModel):
    is_correct: bool
    correct_option_keys: List[str]
    explanations_by_option_key: Dict[str, ExplanationOut]


# Exam mode
class StartExamRequest(ApiModel):
    count: Optional[int] = None  # <= 0 or missing: default
    duration_seconds: Optional[int] = Field(
        None, validation_alias=AliasChoices("durationSeconds", "durationSec", "duration_seconds")
    )
    seed: Optional[int] = Field(None, ge=INT64_MIN, le=INT64_MAX)

class StartExamResponse(ApiModel):
    exam_id: str
    duration_sec: int
    ordered_questions: List[QuestionOut]

class ExamAnswerRequest(ApiModel):
    selected_option_keys: List[str] = Field(
        validation_alias=AliasChoices("selectedOptionKeys", "selected", "selected_option_keys")
    )

class ExamAnswerResponse(ApiModel):
    """Acknowledgement only; an exam never reveals per-answer correctness"""
    accepted: bool = True

class ReviewItem(ApiModel):
    question_id: str
    question_text: str
    selected_keys: List[str]
    correct_keys: List[str]
    explanations_by_language: Dict[str, Dict[str, ExplanationOut]]
    was_correct: bool

class FinishExamResponse(ApiModel):
    score_percent: float
    correct_count: int
    wrong_count: int
    passed: bool
    review_items: List[ReviewItem]


# History
class ExamSummary(ApiModel):
    id: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    duration_sec: int
    score_percent: Optional[float] = None
    passed: Optional[bool] = None
    question_count: int

class ExamList(ApiModel):
    total: int
    limit: int
    offset: int
    items: List[ExamSummary]

class ExamDetail(ApiModel):
    exam_id: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    duration_sec: int
    score_percent: Optional[float] = None
    passed: Optional[bool] = None
    correct_count: int
    wrong_count: int
    review_items: List[ReviewItem]


# Profile
class MeResponse(ApiModel):
    public_id: str
    display_name: Optional[str] = None
    email: Optional[str] = None

class MeUpdateRequest(ApiModel):
    display_name: Optional[str] = None

class ExportKeyResponse(ApiModel):
    public_id: str

class RestoreRequest(ApiModel):
    public_id: str = ""


# Statistics
class StatsResponse(ApiModel):
    total_exams: int
    completed_exams: int
    average_score: Optional[float] = None
    total_answers: int
    correct_answers: int
    accuracy_overall: Optional[float] = None
    answers_last_30d: int = Field(alias="answersLast30d")
    correct_last_30d: int = Field(alias="correctLast30d")
    accuracy_last_30d: Optional[float] = Field(None, alias="accuracyLast30d")
    accuracy_by_tag: Dict[str, float] = {}
    answered_by_tag: Dict[str, int] = {}
    passed_exams: int
    failed_exams: int
    pass_rate: Optional[float] = None
