"""Survey response submission.

Sanitizes validated submissions and stores them as immutable responses.
Domain logic is pure - database operations go through repo.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from opensurvey.db import repo
from opensurvey.db.repo import DbSession
from opensurvey.models.domain import SurveyResponseEntity
from opensurvey.models.types import SurveyResponseSubmission

logger = logging.getLogger(__name__)

_ANGLE_BRACKETS = re.compile(r"[<>]")
_JAVASCRIPT_PROTOCOL = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+=", re.IGNORECASE)


@dataclass
class SubmissionResult:
    """Result of a survey submission."""

    response_id: str
    created_at: datetime


def sanitize_text(value: str) -> str:
    """Strip markup that could be rendered by the admin UI."""
    value = value.strip()
    value = _ANGLE_BRACKETS.sub("", value)
    value = _JAVASCRIPT_PROTOCOL.sub("", value)
    return _EVENT_HANDLER.sub("", value)


def _clean_items(items: list[str]) -> tuple[str, ...]:
    cleaned = (sanitize_text(item) for item in items)
    return tuple(item for item in cleaned if item)


def submit_response(
    session: DbSession,
    submission: SurveyResponseSubmission,
    *,
    client_ip: str | None = None,
    user_agent: str | None = None,
) -> SubmissionResult:
    """Store a survey response.

    Args:
        session: Database session.
        submission: Validated submission.
        client_ip: Address the submission came from.
        user_agent: Submitting client's user agent.

    Returns:
        SubmissionResult with the new response ID and creation time.
    """
    created_at = datetime.now(timezone.utc)
    entity = _create_response_entity(submission, created_at)

    repo.create_response(
        session,
        entity,
        created_at=created_at,
        ip_address=client_ip,
        user_agent=user_agent,
    )
    repo.commit(session)

    logger.info(f"Survey response {entity.id} stored (role={entity.role!r})")

    return SubmissionResult(response_id=entity.id, created_at=created_at)


def _create_response_entity(
    submission: SurveyResponseSubmission, created_at: datetime
) -> SurveyResponseEntity:
    """Create response entity from a submission.

    Pure function - no database access.
    """
    return SurveyResponseEntity(
        id=str(uuid.uuid4()),
        created_at=created_at.isoformat(),
        role=submission.role,
        seniority=submission.seniority,
        company_size=submission.company_size,
        company_type=submission.company_type,
        industry=submission.industry,
        product_type=submission.product_type,
        customer_segment=submission.customer_segment,
        daily_tools=_clean_items(submission.daily_tools),
        learning_methods=_clean_items(submission.learning_methods),
        main_challenge=sanitize_text(submission.main_challenge),
        email=submission.email,
        salary_currency=submission.salary_currency,
        salary_min=submission.salary_min,
        salary_max=submission.salary_max,
        salary_average=submission.salary_average,
    )


def delete_response(session: DbSession, response_id: str) -> None:
    """Delete a stored response.

    Raises:
        ValueError: If the response does not exist.
    """
    if not repo.delete_response(session, response_id):
        raise ValueError(f"Response not found: {response_id}")
    repo.commit(session)
    logger.info(f"Survey response {response_id} deleted")
