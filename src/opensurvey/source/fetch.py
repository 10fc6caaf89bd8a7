"""Fetching response snapshots for aggregation.

fetch_responses never raises for datastore failures: it returns
Unavailable and leaves the fallback policy to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from opensurvey.db import repo
from opensurvey.db.repo import DbSession
from opensurvey.models.domain import SurveyResponseEntity
from opensurvey.source.cache import ResponseCache, make_key

logger = logging.getLogger(__name__)

RESPONSES_CACHE_PREFIX = "responses"


@dataclass(frozen=True)
class Fetched:
    """Successful fetch: a snapshot of responses, newest first."""

    records: tuple[SurveyResponseEntity, ...]
    from_cache: bool = False


@dataclass(frozen=True)
class Unavailable:
    """Failed fetch with a human-readable reason."""

    reason: str


FetchResult = Fetched | Unavailable


def fetch_responses(
    session: DbSession,
    *,
    cache: ResponseCache | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> FetchResult:
    """Fetch a response snapshot, served from *cache* while fresh.

    Args:
        session: Database session.
        cache: Optional cache keyed by the query parameters.
        limit: Maximum number of responses (all if None).
        offset: Number of newest responses to skip.

    Returns:
        Fetched with the records, or Unavailable if the datastore failed.
    """
    key = make_key(RESPONSES_CACHE_PREFIX, {"limit": limit, "offset": offset})

    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            return Fetched(records=cached, from_cache=True)

    try:
        records = tuple(repo.list_responses(session, limit=limit, offset=offset))
    except SQLAlchemyError as e:
        logger.warning(f"Failed to fetch survey responses: {e}")
        return Unavailable(reason=str(e))

    if cache is not None:
        cache.set(key, records)

    logger.debug(f"Fetched {len(records)} survey responses (limit={limit}, offset={offset})")
    return Fetched(records=records)
