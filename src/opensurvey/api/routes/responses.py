"""Survey responses API endpoint.

POST /api/survey/submit - Submit a survey response
GET /api/responses - List stored responses
DELETE /api/responses/{response_id} - Delete a response
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from opensurvey.aggregation.summary import to_response_detail
from opensurvey.api.app import get_db_session, get_response_cache
from opensurvey.db import repo
from opensurvey.db.repo import DbSession
from opensurvey.models.types import (
    ResponseDetail,
    SubmissionCreatedResponse,
    SurveyResponseSubmission,
)
from opensurvey.source.cache import ResponseCache
from opensurvey.source.fetch import RESPONSES_CACHE_PREFIX
from opensurvey.survey.submission import delete_response, submit_response

router = APIRouter()


def _client_ip(request: Request) -> str:
    """Client address, honouring proxy headers."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    return request.client.host if request.client else "unknown"


@router.post(
    "/survey/submit",
    response_model=SubmissionCreatedResponse,
    status_code=201,
)
def submit_survey(
    submission: SurveyResponseSubmission,
    request: Request,
    session: DbSession = Depends(get_db_session),
    cache: ResponseCache = Depends(get_response_cache),
) -> SubmissionCreatedResponse:
    """Submit a survey response.

    Args:
        submission: Validated survey answers.
        request: Incoming request (client address and user agent).
        session: Database session (injected).
        cache: Response cache (injected), invalidated on success.

    Returns:
        SubmissionCreatedResponse with the new response ID.
    """
    result = submit_response(
        session,
        submission,
        client_ip=_client_ip(request),
        user_agent=request.headers.get("user-agent", "unknown"),
    )
    cache.invalidate_prefix(RESPONSES_CACHE_PREFIX)

    return SubmissionCreatedResponse(
        success=True,
        message="Survey response submitted successfully",
        id=result.response_id,
    )


@router.get("/responses", response_model=list[ResponseDetail])
def list_responses(
    limit: int | None = Query(default=None, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    session: DbSession = Depends(get_db_session),
) -> list[ResponseDetail]:
    """List stored responses, newest first."""
    records = repo.list_responses(session, limit=limit, offset=offset)
    return [to_response_detail(r) for r in records]


@router.delete("/responses/{response_id}", status_code=204)
def remove_response(
    response_id: str,
    session: DbSession = Depends(get_db_session),
    cache: ResponseCache = Depends(get_response_cache),
) -> Response:
    """Delete a stored response.

    Raises:
        HTTPException: 404 if response not found.
    """
    try:
        delete_response(session, response_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    cache.invalidate_prefix(RESPONSES_CACHE_PREFIX)
    return Response(status_code=204)
