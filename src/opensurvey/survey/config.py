"""Survey and question configuration.

Admin use-cases for creating and editing surveys and their questions.
Domain logic is pure - database operations go through repo.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from opensurvey.db import repo
from opensurvey.db.repo import DbSession
from opensurvey.models.domain import (
    CHOICE_QUESTION_TYPES,
    QUESTION_TYPES,
    OptionEntity,
    QuestionEntity,
    SurveyEntity,
)
from opensurvey.models.types import QuestionCreate, SurveyCreate, SurveyUpdate

logger = logging.getLogger(__name__)


def create_survey(session: DbSession, payload: SurveyCreate) -> SurveyEntity:
    """Create a survey."""
    survey = SurveyEntity(
        id=str(uuid.uuid4()),
        name=payload.name,
        description=payload.description,
        is_active=payload.is_active,
        settings=dict(payload.settings),
        created_at=datetime.now(timezone.utc),
    )
    repo.create_survey(session, survey)
    repo.commit(session)
    logger.info(f"Survey {survey.id} created")
    return survey


def update_survey(session: DbSession, survey_id: str, payload: SurveyUpdate) -> SurveyEntity:
    """Apply the fields set in *payload* to a survey.

    Raises:
        ValueError: If the survey does not exist.
    """
    changes = payload.model_dump(exclude_unset=True)
    survey = repo.update_survey(
        session,
        survey_id,
        name=changes.get("name"),
        description=changes.get("description"),
        is_active=changes.get("is_active"),
        settings=changes.get("settings"),
        clear_description="description" in changes and changes["description"] is None,
    )
    if survey is None:
        raise ValueError(f"Survey not found: {survey_id}")
    repo.commit(session)
    return survey


def delete_survey(session: DbSession, survey_id: str) -> None:
    """Delete a survey with its questions and options.

    Raises:
        ValueError: If the survey does not exist.
    """
    if not repo.delete_survey(session, survey_id):
        raise ValueError(f"Survey not found: {survey_id}")
    repo.commit(session)
    logger.info(f"Survey {survey_id} deleted")


def add_question(session: DbSession, survey_id: str, payload: QuestionCreate) -> QuestionEntity:
    """Add a question (and its options) to a survey.

    Options are kept only for choice questions; their order follows the
    payload's list order.

    Raises:
        ValueError: If the survey does not exist or the question type is
            not supported.
    """
    if repo.get_survey(session, survey_id) is None:
        raise ValueError(f"Survey not found: {survey_id}")

    if payload.question_type not in QUESTION_TYPES:
        raise ValueError(
            f"Invalid question_type. Must be one of: {', '.join(QUESTION_TYPES)}"
        )

    question_id = str(uuid.uuid4())
    options: list[OptionEntity] = []
    if payload.question_type in CHOICE_QUESTION_TYPES:
        options = [
            OptionEntity(
                id=str(uuid.uuid4()),
                question_id=question_id,
                option_text=option.text,
                option_value=option.value,
                order_index=index,
                is_other=option.is_other,
            )
            for index, option in enumerate(payload.options)
        ]

    question = QuestionEntity(
        id=question_id,
        survey_id=survey_id,
        question_text=payload.question_text,
        question_type=payload.question_type,
        is_required=payload.is_required,
        order_index=payload.order_index,
        validation_rules=dict(payload.validation_rules),
        options=options,
    )
    repo.create_question(session, question)
    repo.commit(session)
    return question
