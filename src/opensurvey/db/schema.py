"""Database schema for OpenSurvey.

Survey responses are append-only rows; list-valued answers are stored
as JSON text. Survey configuration (surveys, questions, options) is
editable from the admin API.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class SurveyResponse(Base):
    """A submitted survey response (immutable once created)."""

    __tablename__ = "survey_data"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    # Categorical answers
    role: Mapped[str | None] = mapped_column(String(128), nullable=True)
    seniority: Mapped[str | None] = mapped_column(String(128), nullable=True)
    company_size: Mapped[str | None] = mapped_column(String(128), nullable=True)
    company_type: Mapped[str | None] = mapped_column(String(128), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(128), nullable=True)
    product_type: Mapped[str | None] = mapped_column(String(128), nullable=True)
    customer_segment: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # Multi-valued answers (JSON arrays of strings)
    daily_tools_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    learning_methods_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Free text and contact
    main_challenge: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)

    # Salary
    salary_currency: Mapped[str | None] = mapped_column(String(8), nullable=True)
    salary_min: Mapped[int | None] = mapped_column(Integer, nullable=True)
    salary_max: Mapped[int | None] = mapped_column(Integer, nullable=True)
    salary_average: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Submission metadata
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)


class Survey(Base):
    """A configurable survey."""

    __tablename__ = "surveys"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    settings_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )


class SurveyQuestion(Base):
    """A question belonging to a survey."""

    __tablename__ = "survey_questions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    survey_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("surveys.id"), nullable=False
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    question_type: Mapped[str] = mapped_column(String(32), nullable=False)
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    validation_rules_json: Mapped[str | None] = mapped_column(Text, nullable=True)


class SurveyOption(Base):
    """A selectable option of a choice question."""

    __tablename__ = "survey_options"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    question_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("survey_questions.id"), nullable=False
    )
    option_text: Mapped[str] = mapped_column(String(256), nullable=False)
    option_value: Mapped[str] = mapped_column(String(256), nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    is_other: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
