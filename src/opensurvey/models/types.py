"""Pydantic models for the OpenSurvey API.

Request payloads validate inbound data; response models describe the
aggregation bundle and CRUD payloads returned to the UI.
"""

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from opensurvey.survey.options import (
    COMPANY_SIZE_OPTIONS,
    COMPANY_TYPE_OPTIONS,
    CUSTOMER_SEGMENT_OPTIONS,
    INDUSTRY_OPTIONS,
    PRODUCT_TYPE_OPTIONS,
    ROLE_OPTIONS,
    SALARY_CURRENCIES,
    SENIORITY_OPTIONS,
)

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_option(value: str, options: tuple[str, ...], field_name: str) -> str:
    if value not in options:
        raise ValueError(f"Invalid {field_name}: {value!r}")
    return value


# ============================================================================
# Submission
# ============================================================================


class SurveyResponseSubmission(BaseModel):
    """Survey response submitted by a respondent."""

    role: str
    seniority: str
    company_type: str
    company_size: str | None = None
    industry: str
    product_type: str
    customer_segment: str
    main_challenge: str = Field(min_length=10, max_length=500)
    daily_tools: list[str] = Field(min_length=1, max_length=10)
    learning_methods: list[str] = Field(min_length=1, max_length=5)
    email: str | None = None
    salary_currency: Literal["ARS", "USD"] | None = None
    salary_min: int | None = Field(default=None, ge=0)
    salary_max: int | None = Field(default=None, ge=0)
    salary_average: int | None = Field(default=None, ge=0)

    @field_validator("role")
    @classmethod
    def _valid_role(cls, value: str) -> str:
        return _check_option(value, ROLE_OPTIONS, "role")

    @field_validator("seniority")
    @classmethod
    def _valid_seniority(cls, value: str) -> str:
        return _check_option(value, SENIORITY_OPTIONS, "seniority")

    @field_validator("company_type")
    @classmethod
    def _valid_company_type(cls, value: str) -> str:
        return _check_option(value, COMPANY_TYPE_OPTIONS, "company_type")

    @field_validator("company_size")
    @classmethod
    def _valid_company_size(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _check_option(value, COMPANY_SIZE_OPTIONS, "company_size")

    @field_validator("industry")
    @classmethod
    def _valid_industry(cls, value: str) -> str:
        return _check_option(value, INDUSTRY_OPTIONS, "industry")

    @field_validator("product_type")
    @classmethod
    def _valid_product_type(cls, value: str) -> str:
        return _check_option(value, PRODUCT_TYPE_OPTIONS, "product_type")

    @field_validator("customer_segment")
    @classmethod
    def _valid_customer_segment(cls, value: str) -> str:
        return _check_option(value, CUSTOMER_SEGMENT_OPTIONS, "customer_segment")

    @field_validator("main_challenge")
    @classmethod
    def _no_script(cls, value: str) -> str:
        if "<script>" in value.lower():
            raise ValueError("Invalid content detected")
        return value

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str | None) -> str | None:
        # The form sends "" when the optional email is left blank
        if value is None or value == "":
            return None
        if not _EMAIL_PATTERN.match(value):
            raise ValueError("Invalid email format")
        return value

    @field_validator("salary_currency", mode="before")
    @classmethod
    def _normalize_currency(cls, value):
        if isinstance(value, str):
            value = value.strip().upper() or None
        if value is not None and value not in SALARY_CURRENCIES:
            raise ValueError(f"Invalid salary_currency: {value!r}")
        return value


class SubmissionCreatedResponse(BaseModel):
    """Response for survey submission."""

    success: bool
    message: str
    id: str


class ResponseDetail(BaseModel):
    """Stored survey response for API responses (no request metadata)."""

    id: str
    created_at: str | None
    role: str | None
    seniority: str | None
    company_size: str | None
    company_type: str | None
    industry: str | None
    product_type: str | None
    customer_segment: str | None
    daily_tools: list[str]
    learning_methods: list[str]
    main_challenge: str | None
    email: str | None
    salary_currency: str | None
    salary_min: int | None
    salary_max: int | None
    salary_average: int | None


# ============================================================================
# Analytics
# ============================================================================


class RankedEntry(BaseModel):
    """One row of a ranking: key, count and rounded percentage."""

    key: str
    count: int
    percentage: int


class SalarySummary(BaseModel):
    """Salary averages (by currency, role, industry) and band counts."""

    average_by_currency: dict[str, float]
    average_by_role: dict[str, dict[str, float]]
    average_by_industry: dict[str, dict[str, float]]
    range_distribution: dict[str, int]


class AggregationBundle(BaseModel):
    """All analytics derived from one snapshot of survey responses."""

    distributions: dict[str, dict[str, int]]
    rankings: dict[str, list[RankedEntry]]
    term_frequency: dict[str, int]
    daily_counts: dict[str, int]
    today_count: int
    total_responses: int
    last_7_days: int
    main_challenges: list[str]
    salary: SalarySummary


class DashboardStats(BaseModel):
    """Headline numbers for the admin dashboard."""

    total_responses: int
    today_responses: int
    top_role: str
    top_industry: str
    recent_responses: list[ResponseDetail]


class CacheStats(BaseModel):
    """Response cache counters."""

    hits: int
    misses: int
    size: int
    keys: list[str]


# ============================================================================
# Survey Configuration
# ============================================================================


class OptionCreate(BaseModel):
    """Option supplied with a new choice question."""

    text: str = Field(min_length=1)
    value: str = Field(min_length=1)
    is_other: bool = False


class QuestionCreate(BaseModel):
    """New question for a survey."""

    question_text: str = Field(min_length=1)
    question_type: str
    is_required: bool = True
    order_index: int
    validation_rules: dict = Field(default_factory=dict)
    options: list[OptionCreate] = Field(default_factory=list)


class OptionDetail(BaseModel):
    """Question option for API responses."""

    id: str
    option_text: str
    option_value: str
    order_index: int
    is_other: bool


class QuestionDetail(BaseModel):
    """Survey question for API responses."""

    id: str
    survey_id: str
    question_text: str
    question_type: str
    is_required: bool
    order_index: int
    validation_rules: dict
    options: list[OptionDetail]


class SurveyCreate(BaseModel):
    """New survey."""

    name: str = Field(min_length=1)
    description: str | None = None
    is_active: bool = True
    settings: dict = Field(default_factory=dict)


class SurveyUpdate(BaseModel):
    """Partial survey update; unset fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    is_active: bool | None = None
    settings: dict | None = None


class SurveyDetail(BaseModel):
    """Survey for API responses."""

    id: str
    name: str
    description: str | None
    is_active: bool
    settings: dict
    created_at: str | None
    questions: list[QuestionDetail] | None = None
