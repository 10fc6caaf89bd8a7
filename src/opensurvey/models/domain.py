"""Domain models for OpenSurvey.

Pure Python dataclasses representing domain entities.
These models are independent of SQLAlchemy and used throughout
the application for clean separation from the database layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


# ============================================================================
# Response Domain
# ============================================================================


@dataclass(frozen=True)
class SurveyResponseEntity:
    """Domain model for a submitted survey response.

    Frozen: responses are immutable once created. List answers are
    tuples for the same reason. ``created_at`` is kept as an ISO-8601
    string, the form the aggregator consumes.
    """

    id: str
    created_at: str | None = None
    role: str | None = None
    seniority: str | None = None
    company_size: str | None = None
    company_type: str | None = None
    industry: str | None = None
    product_type: str | None = None
    customer_segment: str | None = None
    daily_tools: tuple[str, ...] = ()
    learning_methods: tuple[str, ...] = ()
    main_challenge: str | None = None
    email: str | None = None
    salary_currency: str | None = None
    salary_min: int | None = None
    salary_max: int | None = None
    salary_average: int | None = None


# ============================================================================
# Survey Configuration Domain
# ============================================================================


QUESTION_TYPES: tuple[str, ...] = (
    "single-choice",
    "multi-choice",
    "text",
    "textarea",
    "email",
    "number",
    "date",
)

CHOICE_QUESTION_TYPES: tuple[str, ...] = ("single-choice", "multi-choice")


@dataclass
class SurveyEntity:
    """Domain model for a survey."""

    id: str
    name: str
    description: str | None
    is_active: bool
    settings: dict = field(default_factory=dict)
    created_at: datetime | None = None


@dataclass
class OptionEntity:
    """Domain model for a question option."""

    id: str
    question_id: str
    option_text: str
    option_value: str
    order_index: int
    is_other: bool = False


@dataclass
class QuestionEntity:
    """Domain model for a survey question."""

    id: str
    survey_id: str
    question_text: str
    question_type: str
    is_required: bool
    order_index: int
    validation_rules: dict = field(default_factory=dict)
    options: list[OptionEntity] = field(default_factory=list)
