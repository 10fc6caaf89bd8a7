"""Survey configuration API endpoints.

GET /api/surveys - List surveys
POST /api/surveys - Create a survey
GET /api/surveys/{survey_id} - Get a survey
PUT /api/surveys/{survey_id} - Update a survey
DELETE /api/surveys/{survey_id} - Delete a survey
GET /api/surveys/{survey_id}/questions - List questions
POST /api/surveys/{survey_id}/questions - Add a question
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from opensurvey.api.app import get_db_session
from opensurvey.db import repo
from opensurvey.db.repo import DbSession
from opensurvey.models.domain import QuestionEntity, SurveyEntity
from opensurvey.models.types import (
    OptionDetail,
    QuestionCreate,
    QuestionDetail,
    SurveyCreate,
    SurveyDetail,
    SurveyUpdate,
)
from opensurvey.survey import config

router = APIRouter()


def _question_to_detail(question: QuestionEntity) -> QuestionDetail:
    return QuestionDetail(
        id=question.id,
        survey_id=question.survey_id,
        question_text=question.question_text,
        question_type=question.question_type,
        is_required=question.is_required,
        order_index=question.order_index,
        validation_rules=question.validation_rules,
        options=[
            OptionDetail(
                id=o.id,
                option_text=o.option_text,
                option_value=o.option_value,
                order_index=o.order_index,
                is_other=o.is_other,
            )
            for o in question.options
        ],
    )


def _survey_to_detail(
    survey: SurveyEntity, questions: list[QuestionEntity] | None = None
) -> SurveyDetail:
    return SurveyDetail(
        id=survey.id,
        name=survey.name,
        description=survey.description,
        is_active=survey.is_active,
        settings=survey.settings,
        created_at=survey.created_at.isoformat() if survey.created_at else None,
        questions=(
            [_question_to_detail(q) for q in questions] if questions is not None else None
        ),
    )


@router.get("/surveys", response_model=list[SurveyDetail])
def list_surveys(
    active: bool = Query(default=False),
    include_questions: bool = Query(default=False),
    session: DbSession = Depends(get_db_session),
) -> list[SurveyDetail]:
    """List surveys, newest first.

    Args:
        active: Only return active surveys.
        include_questions: Embed each survey's questions.
        session: Database session (injected).
    """
    surveys = repo.list_surveys(session, active_only=active)
    return [
        _survey_to_detail(
            s,
            repo.get_questions_for_survey(session, s.id) if include_questions else None,
        )
        for s in surveys
    ]


@router.post("/surveys", response_model=SurveyDetail, status_code=201)
def create_survey(
    payload: SurveyCreate,
    session: DbSession = Depends(get_db_session),
) -> SurveyDetail:
    """Create a survey."""
    survey = config.create_survey(session, payload)
    return _survey_to_detail(survey)


@router.get("/surveys/{survey_id}", response_model=SurveyDetail)
def get_survey(
    survey_id: str,
    include_questions: bool = Query(default=True),
    session: DbSession = Depends(get_db_session),
) -> SurveyDetail:
    """Get a survey by ID.

    Raises:
        HTTPException: 404 if survey not found.
    """
    survey = repo.get_survey(session, survey_id)
    if survey is None:
        raise HTTPException(status_code=404, detail=f"Survey not found: {survey_id}")

    questions = repo.get_questions_for_survey(session, survey_id) if include_questions else None
    return _survey_to_detail(survey, questions)


@router.put("/surveys/{survey_id}", response_model=SurveyDetail)
def update_survey(
    survey_id: str,
    payload: SurveyUpdate,
    session: DbSession = Depends(get_db_session),
) -> SurveyDetail:
    """Update a survey; fields absent from the body are left unchanged.

    Raises:
        HTTPException: 404 if survey not found.
    """
    try:
        survey = config.update_survey(session, survey_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return _survey_to_detail(survey)


@router.delete("/surveys/{survey_id}", status_code=204)
def delete_survey(
    survey_id: str,
    session: DbSession = Depends(get_db_session),
) -> Response:
    """Delete a survey with its questions and options.

    Raises:
        HTTPException: 404 if survey not found.
    """
    try:
        config.delete_survey(session, survey_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return Response(status_code=204)


@router.get("/surveys/{survey_id}/questions", response_model=list[QuestionDetail])
def list_questions(
    survey_id: str,
    session: DbSession = Depends(get_db_session),
) -> list[QuestionDetail]:
    """List a survey's questions in display order.

    Raises:
        HTTPException: 404 if survey not found.
    """
    if repo.get_survey(session, survey_id) is None:
        raise HTTPException(status_code=404, detail=f"Survey not found: {survey_id}")
    return [_question_to_detail(q) for q in repo.get_questions_for_survey(session, survey_id)]


@router.post(
    "/surveys/{survey_id}/questions",
    response_model=QuestionDetail,
    status_code=201,
)
def add_question(
    survey_id: str,
    payload: QuestionCreate,
    session: DbSession = Depends(get_db_session),
) -> QuestionDetail:
    """Add a question to a survey.

    Raises:
        HTTPException: 404 if survey not found, 400 for an unsupported
            question type.
    """
    if repo.get_survey(session, survey_id) is None:
        raise HTTPException(status_code=404, detail=f"Survey not found: {survey_id}")

    try:
        question = config.add_question(session, survey_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _question_to_detail(question)
