"""Analytics API endpoint.

GET /api/analytics - Aggregated survey analytics
GET /api/dashboard - Dashboard headline numbers
GET /api/cache/stats - Response cache counters
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from opensurvey.aggregation.summary import aggregate, build_dashboard
from opensurvey.api.app import get_db_session, get_response_cache, get_settings
from opensurvey.core.config import Settings
from opensurvey.db.repo import DbSession
from opensurvey.models.domain import SurveyResponseEntity
from opensurvey.models.types import AggregationBundle, CacheStats, DashboardStats
from opensurvey.source.cache import ResponseCache
from opensurvey.source.fetch import Unavailable, fetch_responses

router = APIRouter()

logger = logging.getLogger(__name__)


def load_snapshot(
    session: DbSession, cache: ResponseCache
) -> tuple[SurveyResponseEntity, ...]:
    """Fetch all responses or fail the request with 503.

    Raises:
        HTTPException: 503 if the datastore is unavailable.
    """
    result = fetch_responses(session, cache=cache)
    if isinstance(result, Unavailable):
        logger.error(f"Survey data unavailable: {result.reason}")
        raise HTTPException(status_code=503, detail="Data unavailable")
    return result.records


@router.get("/analytics", response_model=AggregationBundle)
def get_analytics(
    top_n: int | None = Query(default=None, ge=1, le=100),
    session: DbSession = Depends(get_db_session),
    cache: ResponseCache = Depends(get_response_cache),
    settings: Settings = Depends(get_settings),
) -> AggregationBundle:
    """Get aggregated analytics over all responses.

    Args:
        top_n: Entries per ranking (configured default when omitted).
        session: Database session (injected).
        cache: Response cache (injected).
        settings: Application settings (injected).

    Returns:
        AggregationBundle with distributions, rankings and counts.

    Raises:
        HTTPException: 503 if the datastore is unavailable.
    """
    records = load_snapshot(session, cache)
    return aggregate(
        records,
        top_n=top_n or settings.top_n,
        min_term_length=settings.min_term_length,
    )


@router.get("/dashboard", response_model=DashboardStats)
def get_dashboard(
    session: DbSession = Depends(get_db_session),
    cache: ResponseCache = Depends(get_response_cache),
) -> DashboardStats:
    """Get dashboard headline numbers.

    Raises:
        HTTPException: 503 if the datastore is unavailable.
    """
    records = load_snapshot(session, cache)
    return build_dashboard(records)


@router.get("/cache/stats", response_model=CacheStats)
def get_cache_stats(cache: ResponseCache = Depends(get_response_cache)) -> CacheStats:
    """Get response cache counters."""
    return cache.stats()
