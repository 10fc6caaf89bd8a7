"""Export API endpoint.

GET /api/analytics/export - Download the analytics report as JSON or CSV
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from opensurvey.aggregation.report import render_report_csv, render_report_json, report_filename
from opensurvey.aggregation.summary import aggregate
from opensurvey.api.app import get_db_session, get_response_cache, get_settings
from opensurvey.api.routes.analytics import load_snapshot
from opensurvey.core.config import Settings
from opensurvey.db.repo import DbSession
from opensurvey.source.cache import ResponseCache

router = APIRouter()


@router.get("/analytics/export")
def export_analytics(
    format: Literal["json", "csv"] = Query(default="json"),
    session: DbSession = Depends(get_db_session),
    cache: ResponseCache = Depends(get_response_cache),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Export the analytics report as a downloadable file.

    Args:
        format: "json" (full bundle) or "csv" (distributions).
        session: Database session (injected).
        cache: Response cache (injected).
        settings: Application settings (injected).

    Returns:
        Response with Content-Disposition header for download.

    Raises:
        HTTPException: 503 if the datastore is unavailable.
    """
    records = load_snapshot(session, cache)
    generated_at = datetime.now(timezone.utc)
    bundle = aggregate(
        records,
        top_n=settings.top_n,
        min_term_length=settings.min_term_length,
        now=generated_at,
    )

    filename = report_filename(format, generated_at)
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}

    if format == "csv":
        return Response(
            content=render_report_csv(bundle),
            media_type="text/csv; charset=utf-8",
            headers=headers,
        )

    # Return as downloadable JSON
    return Response(
        content=render_report_json(bundle, generated_at),
        media_type="application/json",
        headers=headers,
    )
