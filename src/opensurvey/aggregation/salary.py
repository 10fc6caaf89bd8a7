"""Salary statistics over survey responses.

Salaries are reported either as an average or as a min/max range, in
ARS or USD. Each response contributes at most one salary value.
"""

from __future__ import annotations

from collections.abc import Iterable

from opensurvey.models.domain import SurveyResponseEntity
from opensurvey.models.types import SalarySummary
from opensurvey.survey.options import SALARY_CURRENCIES

# Upper bounds (exclusive) and labels of the reporting bands
USD_BANDS: tuple[tuple[float, str], ...] = (
    (50_000, "< $50K USD"),
    (80_000, "$50K - $80K USD"),
    (120_000, "$80K - $120K USD"),
    (180_000, "$120K - $180K USD"),
)
USD_TOP_BAND = "> $180K USD"

ARS_BANDS: tuple[tuple[float, str], ...] = (
    (1_000_000, "< $1M ARS"),
    (2_000_000, "$1M - $2M ARS"),
    (3_500_000, "$2M - $3.5M ARS"),
    (5_000_000, "$3.5M - $5M ARS"),
)
ARS_TOP_BAND = "> $5M ARS"


def salary_value(record: SurveyResponseEntity) -> float | None:
    """Return the record's salary, or None when it reported none.

    The reported average wins; otherwise the midpoint of min and max.
    """
    if record.salary_currency not in SALARY_CURRENCIES:
        return None

    value: float = 0
    if record.salary_average:
        value = record.salary_average
    elif record.salary_min and record.salary_max:
        value = (record.salary_min + record.salary_max) / 2

    return value if value > 0 else None


def salary_band(value: float, currency: str) -> str:
    """Label of the reporting band containing *value*."""
    bands, top = (USD_BANDS, USD_TOP_BAND) if currency == "USD" else (ARS_BANDS, ARS_TOP_BAND)
    for upper, label in bands:
        if value < upper:
            return label
    return top


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _averages_by(groups: dict[str, dict[str, list[float]]]) -> dict[str, dict[str, float]]:
    return {
        key: {currency: _mean(values) for currency, values in by_currency.items()}
        for key, by_currency in groups.items()
    }


def compute_salary_summary(records: Iterable[SurveyResponseEntity]) -> SalarySummary:
    """Compute salary averages and band counts.

    Args:
        records: Response snapshot.

    Returns:
        SalarySummary. Per-role and per-industry averages report 0 for a
        currency with no data.
    """
    by_currency: dict[str, list[float]] = {currency: [] for currency in SALARY_CURRENCIES}
    by_role: dict[str, dict[str, list[float]]] = {}
    by_industry: dict[str, dict[str, list[float]]] = {}
    ranges: dict[str, int] = {}

    for record in records:
        value = salary_value(record)
        if value is None:
            continue
        currency = record.salary_currency

        by_currency[currency].append(value)

        if record.role:
            role_bucket = by_role.setdefault(
                record.role, {c: [] for c in SALARY_CURRENCIES}
            )
            role_bucket[currency].append(value)

        if record.industry:
            industry_bucket = by_industry.setdefault(
                record.industry, {c: [] for c in SALARY_CURRENCIES}
            )
            industry_bucket[currency].append(value)

        band = salary_band(value, currency)
        ranges[band] = ranges.get(band, 0) + 1

    return SalarySummary(
        average_by_currency={
            currency: _mean(values) for currency, values in by_currency.items() if values
        },
        average_by_role=_averages_by(by_role),
        average_by_industry=_averages_by(by_industry),
        range_distribution=ranges,
    )
