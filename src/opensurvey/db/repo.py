"""Repository pattern for database operations.

Encapsulates all SQLAlchemy queries, keeping domain logic pure.
Returns domain models (not SQLAlchemy entities) to external callers.
Rows are validated here: malformed JSON columns and non-string list
elements never reach the aggregator.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from opensurvey.db.schema import Survey, SurveyOption, SurveyQuestion, SurveyResponse
from opensurvey.models.domain import (
    OptionEntity,
    QuestionEntity,
    SurveyEntity,
    SurveyResponseEntity,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession"]

logger = logging.getLogger(__name__)


# ============================================================================
# Converters: SQLAlchemy -> Domain
# ============================================================================


def _load_string_list(raw: str | None) -> tuple[str, ...]:
    """Decode a JSON array column into a tuple of non-empty strings."""
    if not raw:
        return ()
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.debug(f"Ignoring malformed list column: {raw!r}")
        return ()
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str) and item)


def _load_dict(raw: str | None) -> dict:
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return {}
    return value if isinstance(value, dict) else {}


def _isoformat(value: datetime | None) -> str | None:
    """Format a stored timestamp as ISO-8601, treating naive values as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _response_to_entity(row: SurveyResponse) -> SurveyResponseEntity:
    """Convert SQLAlchemy SurveyResponse to domain entity."""
    return SurveyResponseEntity(
        id=row.id,
        created_at=_isoformat(row.created_at),
        role=row.role,
        seniority=row.seniority,
        company_size=row.company_size,
        company_type=row.company_type,
        industry=row.industry,
        product_type=row.product_type,
        customer_segment=row.customer_segment,
        daily_tools=_load_string_list(row.daily_tools_json),
        learning_methods=_load_string_list(row.learning_methods_json),
        main_challenge=row.main_challenge,
        email=row.email,
        salary_currency=row.salary_currency,
        salary_min=row.salary_min,
        salary_max=row.salary_max,
        salary_average=row.salary_average,
    )


def _option_to_entity(option: SurveyOption) -> OptionEntity:
    """Convert SQLAlchemy SurveyOption to domain entity."""
    return OptionEntity(
        id=option.id,
        question_id=option.question_id,
        option_text=option.option_text,
        option_value=option.option_value,
        order_index=option.order_index,
        is_other=option.is_other,
    )


def _question_to_entity(
    question: SurveyQuestion, options: list[SurveyOption]
) -> QuestionEntity:
    """Convert SQLAlchemy SurveyQuestion (plus its options) to domain entity."""
    return QuestionEntity(
        id=question.id,
        survey_id=question.survey_id,
        question_text=question.question_text,
        question_type=question.question_type,
        is_required=question.is_required,
        order_index=question.order_index,
        validation_rules=_load_dict(question.validation_rules_json),
        options=[_option_to_entity(o) for o in options],
    )


def _survey_to_entity(survey: Survey) -> SurveyEntity:
    """Convert SQLAlchemy Survey to domain entity."""
    return SurveyEntity(
        id=survey.id,
        name=survey.name,
        description=survey.description,
        is_active=survey.is_active,
        settings=_load_dict(survey.settings_json),
        created_at=survey.created_at,
    )


# ============================================================================
# Response Repository
# ============================================================================


def list_responses(
    session: DbSession,
    *,
    limit: int | None = None,
    offset: int = 0,
) -> list[SurveyResponseEntity]:
    """Get responses ordered by creation time, newest first."""
    query = (
        session.query(SurveyResponse)
        .order_by(SurveyResponse.created_at.desc(), SurveyResponse.id)
        .offset(offset)
    )
    if limit is not None:
        query = query.limit(limit)
    return [_response_to_entity(r) for r in query.all()]


def create_response(
    session: DbSession,
    entity: SurveyResponseEntity,
    *,
    created_at: datetime,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> SurveyResponseEntity:
    """Create a new response row."""
    row = SurveyResponse(
        id=entity.id,
        created_at=created_at,
        role=entity.role,
        seniority=entity.seniority,
        company_size=entity.company_size,
        company_type=entity.company_type,
        industry=entity.industry,
        product_type=entity.product_type,
        customer_segment=entity.customer_segment,
        daily_tools_json=json.dumps(list(entity.daily_tools)),
        learning_methods_json=json.dumps(list(entity.learning_methods)),
        main_challenge=entity.main_challenge,
        email=entity.email,
        salary_currency=entity.salary_currency,
        salary_min=entity.salary_min,
        salary_max=entity.salary_max,
        salary_average=entity.salary_average,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    session.add(row)
    return entity


def delete_response(session: DbSession, response_id: str) -> bool:
    """Delete a response. Returns False if it does not exist."""
    deleted = (
        session.query(SurveyResponse).filter(SurveyResponse.id == response_id).delete()
    )
    return deleted > 0


def count_responses(session: DbSession) -> int:
    """Count stored responses."""
    return session.query(SurveyResponse).count()


# ============================================================================
# Survey Repository
# ============================================================================


def list_surveys(session: DbSession, *, active_only: bool = False) -> list[SurveyEntity]:
    """Get surveys ordered by creation time, newest first."""
    query = session.query(Survey)
    if active_only:
        query = query.filter(Survey.is_active.is_(True))
    surveys = query.order_by(Survey.created_at.desc()).all()
    return [_survey_to_entity(s) for s in surveys]


def get_survey(session: DbSession, survey_id: str) -> SurveyEntity | None:
    """Get survey by ID."""
    survey = session.query(Survey).filter(Survey.id == survey_id).first()
    return _survey_to_entity(survey) if survey else None


def create_survey(session: DbSession, entity: SurveyEntity) -> SurveyEntity:
    """Create a new survey."""
    survey = Survey(
        id=entity.id,
        name=entity.name,
        description=entity.description,
        is_active=entity.is_active,
        settings_json=json.dumps(entity.settings),
        created_at=entity.created_at or datetime.now(timezone.utc),
    )
    session.add(survey)
    return entity


def update_survey(
    session: DbSession,
    survey_id: str,
    *,
    name: str | None = None,
    description: str | None = None,
    is_active: bool | None = None,
    settings: dict | None = None,
    clear_description: bool = False,
) -> SurveyEntity | None:
    """Update survey fields. Returns None if the survey does not exist."""
    survey = session.query(Survey).filter(Survey.id == survey_id).first()
    if survey is None:
        return None
    if name is not None:
        survey.name = name
    if description is not None or clear_description:
        survey.description = description
    if is_active is not None:
        survey.is_active = is_active
    if settings is not None:
        survey.settings_json = json.dumps(settings)
    return _survey_to_entity(survey)


def delete_survey(session: DbSession, survey_id: str) -> bool:
    """Delete a survey with its questions and options."""
    survey = session.query(Survey).filter(Survey.id == survey_id).first()
    if survey is None:
        return False

    question_ids = [
        q[0]
        for q in session.query(SurveyQuestion.id)
        .filter(SurveyQuestion.survey_id == survey_id)
        .all()
    ]
    if question_ids:
        session.query(SurveyOption).filter(
            SurveyOption.question_id.in_(question_ids)
        ).delete(synchronize_session=False)
        session.query(SurveyQuestion).filter(
            SurveyQuestion.survey_id == survey_id
        ).delete(synchronize_session=False)
    session.delete(survey)
    return True


# ============================================================================
# Question Repository
# ============================================================================


def get_questions_for_survey(session: DbSession, survey_id: str) -> list[QuestionEntity]:
    """Get questions (with options) for a survey ordered by order_index."""
    questions = (
        session.query(SurveyQuestion)
        .filter(SurveyQuestion.survey_id == survey_id)
        .order_by(SurveyQuestion.order_index)
        .all()
    )
    if not questions:
        return []

    # Get all options in one query and group by question
    options = (
        session.query(SurveyOption)
        .filter(SurveyOption.question_id.in_([q.id for q in questions]))
        .order_by(SurveyOption.order_index)
        .all()
    )
    options_by_question: dict[str, list[SurveyOption]] = {}
    for option in options:
        options_by_question.setdefault(option.question_id, []).append(option)

    return [
        _question_to_entity(q, options_by_question.get(q.id, [])) for q in questions
    ]


def create_question(session: DbSession, entity: QuestionEntity) -> QuestionEntity:
    """Create a new question together with its options."""
    question = SurveyQuestion(
        id=entity.id,
        survey_id=entity.survey_id,
        question_text=entity.question_text,
        question_type=entity.question_type,
        is_required=entity.is_required,
        order_index=entity.order_index,
        validation_rules_json=json.dumps(entity.validation_rules),
    )
    session.add(question)
    for option in entity.options:
        session.add(
            SurveyOption(
                id=option.id,
                question_id=entity.id,
                option_text=option.option_text,
                option_value=option.option_value,
                order_index=option.order_index,
                is_other=option.is_other,
            )
        )
    return entity


# ============================================================================
# Batch Operations
# ============================================================================


def commit(session: DbSession) -> None:
    """Commit current transaction."""
    session.commit()
