"""Survey analytics aggregation.

Builds the analytics bundle and the dashboard headline numbers from a
snapshot of responses. Domain logic is pure - fetching goes through
opensurvey.source.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from opensurvey.aggregation.distribution import (
    DEFAULT_MIN_TERM_LENGTH,
    DEFAULT_TOP_N,
    ListSelector,
    ValueSelector,
    bucket_by_day,
    compute_distribution,
    compute_multi_value_distribution,
    compute_term_frequency,
    compute_today_count,
    count_since,
    most_frequent,
    rank_distribution,
)
from opensurvey.aggregation.salary import compute_salary_summary
from opensurvey.models.domain import SurveyResponseEntity
from opensurvey.models.types import AggregationBundle, DashboardStats, ResponseDetail

RECENT_ACTIVITY_DAYS = 7
DASHBOARD_RECENT_COUNT = 5


def _company(record: SurveyResponseEntity) -> str | None:
    # company_size is the primary answer; older rows only have company_type
    return record.company_size or record.company_type


def _industry_or_company_type(record: SurveyResponseEntity) -> str | None:
    return record.industry or record.company_type


SINGLE_VALUE_FIELDS: dict[str, ValueSelector] = {
    "role": lambda r: r.role,
    "seniority": lambda r: r.seniority,
    "company_type": _company,
    "industry": lambda r: r.industry,
    "product_type": lambda r: r.product_type,
    "customer_segment": lambda r: r.customer_segment,
}

MULTI_VALUE_FIELDS: dict[str, ListSelector] = {
    "daily_tools": lambda r: r.daily_tools,
    "learning_methods": lambda r: r.learning_methods,
}


def _created_at(record: SurveyResponseEntity) -> str | None:
    return record.created_at


def aggregate(
    records: Sequence[SurveyResponseEntity],
    *,
    top_n: int = DEFAULT_TOP_N,
    min_term_length: int = DEFAULT_MIN_TERM_LENGTH,
    now: datetime | None = None,
) -> AggregationBundle:
    """Compute every analytics view over a response snapshot.

    Args:
        records: Response snapshot (not mutated).
        top_n: Entries per ranking.
        min_term_length: Shortest token kept in the term frequency map.
        now: Reference time for today/last-7-days counts (UTC now if None).

    Returns:
        AggregationBundle. Identical snapshots give identical bundles
        apart from the time-dependent counts.
    """
    now = now or datetime.now(timezone.utc)

    distributions: dict[str, dict[str, int]] = {
        name: compute_distribution(records, selector)
        for name, selector in SINGLE_VALUE_FIELDS.items()
    }
    distributions.update(
        {
            name: compute_multi_value_distribution(records, selector)
            for name, selector in MULTI_VALUE_FIELDS.items()
        }
    )

    rankings = {
        name: rank_distribution(summary, top_n) for name, summary in distributions.items()
    }

    main_challenges = [
        r.main_challenge.strip()
        for r in records
        if r.main_challenge and r.main_challenge.strip()
    ]

    return AggregationBundle(
        distributions=distributions,
        rankings=rankings,
        term_frequency=compute_term_frequency(
            records, lambda r: r.main_challenge, min_term_length
        ),
        daily_counts=bucket_by_day(records, _created_at),
        today_count=compute_today_count(records, _created_at, now),
        total_responses=len(records),
        last_7_days=count_since(
            records, _created_at, now - timedelta(days=RECENT_ACTIVITY_DAYS)
        ),
        main_challenges=main_challenges,
        salary=compute_salary_summary(records),
    )


def to_response_detail(record: SurveyResponseEntity) -> ResponseDetail:
    """Convert SurveyResponseEntity to ResponseDetail."""
    return ResponseDetail(
        id=record.id,
        created_at=record.created_at,
        role=record.role,
        seniority=record.seniority,
        company_size=record.company_size,
        company_type=record.company_type,
        industry=record.industry,
        product_type=record.product_type,
        customer_segment=record.customer_segment,
        daily_tools=list(record.daily_tools),
        learning_methods=list(record.learning_methods),
        main_challenge=record.main_challenge,
        email=record.email,
        salary_currency=record.salary_currency,
        salary_min=record.salary_min,
        salary_max=record.salary_max,
        salary_average=record.salary_average,
    )


def build_dashboard(
    records: Sequence[SurveyResponseEntity],
    *,
    now: datetime | None = None,
) -> DashboardStats:
    """Compute dashboard headline numbers.

    Records are expected newest first; the first five are returned as
    recent responses.
    """
    return DashboardStats(
        total_responses=len(records),
        today_responses=compute_today_count(records, _created_at, now),
        top_role=most_frequent(r.role for r in records) or "N/A",
        top_industry=most_frequent(_industry_or_company_type(r) for r in records) or "N/A",
        recent_responses=[
            to_response_detail(r) for r in records[:DASHBOARD_RECENT_COUNT]
        ],
    )
