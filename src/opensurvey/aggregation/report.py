"""Analytics report export.

Serializes an AggregationBundle into downloadable JSON or CSV reports.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone

from opensurvey.aggregation.summary import MULTI_VALUE_FIELDS, SINGLE_VALUE_FIELDS
from opensurvey.models.types import AggregationBundle

CSV_HEADER = ["Category", "Item", "Count", "Percentage"]

CATEGORY_LABELS: dict[str, str] = {
    "role": "Role Distribution",
    "seniority": "Seniority Distribution",
    "industry": "Industry Distribution",
    "product_type": "Product Type Distribution",
    "customer_segment": "Customer Segment Distribution",
    "company_type": "Company Size Distribution",
    "daily_tools": "Tools Usage",
    "learning_methods": "Learning Methods Usage",
}


def report_filename(extension: str, generated_at: datetime | None = None) -> str:
    """Download name, e.g. ``analytics-report-2024-05-01.json``."""
    generated_at = generated_at or datetime.now(timezone.utc)
    return f"analytics-report-{generated_at.date().isoformat()}.{extension}"


def build_report(bundle: AggregationBundle, generated_at: datetime) -> dict:
    """Build the JSON-ready report document.

    Args:
        bundle: Aggregation results.
        generated_at: Report generation time.

    Returns:
        Dict with ``generated_at`` followed by every bundle section.
    """
    return {"generated_at": generated_at.isoformat(), **bundle.model_dump()}


def render_report_json(
    bundle: AggregationBundle,
    generated_at: datetime | None = None,
) -> str:
    """Render the report as an indented JSON document."""
    generated_at = generated_at or datetime.now(timezone.utc)
    return json.dumps(build_report(bundle, generated_at), indent=2, ensure_ascii=False)


def _percentage(count: int, total: int) -> str:
    return f"{count / total * 100:.2f}" if total > 0 else "0.00"


def render_report_csv(bundle: AggregationBundle) -> str:
    """Render distributions and main challenges as CSV.

    Single-valued distributions use the number of responses as the
    denominator; multi-valued ones (a respondent picks several items)
    use their own total.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for name in SINGLE_VALUE_FIELDS:
        label = CATEGORY_LABELS[name]
        for item, count in bundle.distributions.get(name, {}).items():
            writer.writerow([label, item, count, _percentage(count, bundle.total_responses)])

    for name in MULTI_VALUE_FIELDS:
        label = CATEGORY_LABELS[name]
        distribution = bundle.distributions.get(name, {})
        total = sum(distribution.values())
        for item, count in distribution.items():
            writer.writerow([label, item, count, _percentage(count, total)])

    for index, _challenge in enumerate(bundle.main_challenges, start=1):
        writer.writerow(["Main Challenges", f"Response {index}", 1, "N/A"])

    return buffer.getvalue()
