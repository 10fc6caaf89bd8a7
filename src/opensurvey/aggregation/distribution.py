"""Frequency distributions over survey responses.

Pure functions: every call recomputes from the records it is given and
never mutates them. Absent or malformed values are skipped, never
raised.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import date, datetime, timezone

from opensurvey.models.domain import SurveyResponseEntity
from opensurvey.models.types import RankedEntry

Distribution = dict[str, int]

ValueSelector = Callable[[SurveyResponseEntity], str | None]
ListSelector = Callable[[SurveyResponseEntity], Sequence[str] | None]
DateSelector = Callable[[SurveyResponseEntity], str | datetime | None]

DEFAULT_TOP_N = 10
DEFAULT_MIN_TERM_LENGTH = 4

# Anything that is not a word character or whitespace
_PUNCTUATION = re.compile(r"[^\w\s]")


def _is_present(value: object) -> bool:
    return isinstance(value, str) and value != ""


def compute_distribution(
    records: Iterable[SurveyResponseEntity],
    selector: ValueSelector,
) -> Distribution:
    """Count records per distinct value of a single-valued field.

    Args:
        records: Response snapshot.
        selector: Extracts the categorical value (or None) from a record.

    Returns:
        Mapping value -> count. Records without a value are not counted.
    """
    counts: Distribution = {}
    for record in records:
        value = selector(record)
        if _is_present(value):
            counts[value] = counts.get(value, 0) + 1
    return counts


def compute_multi_value_distribution(
    records: Iterable[SurveyResponseEntity],
    selector: ListSelector,
) -> Distribution:
    """Count every element of a list-valued field across records.

    A record contributes once per element, so it may count towards
    several keys.
    """
    counts: Distribution = {}
    for record in records:
        values = selector(record)
        if not values or isinstance(values, str):
            continue
        for value in values:
            if _is_present(value):
                counts[value] = counts.get(value, 0) + 1
    return counts


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rank_distribution(
    summary: Mapping[str, int],
    top_n: int = DEFAULT_TOP_N,
) -> list[RankedEntry]:
    """Rank a distribution by count with rounded percentages.

    Ordering is count descending, then key ascending, so equal counts
    always come out in the same order. Percentages are computed against
    the total of all counts (not only the returned top_n) and rounded
    half-up; if rounding pushes their sum above 100, the lowest-ranked
    entries that were rounded up lose a point until the sum is 100.

    The correction keeps the sum honest at the cost of equal counts
    sometimes showing different percentages: eight equal shares come out
    as 13, 13, 13, 13, 12, 12, 12, 12 (the key order decides which).

    Args:
        summary: Mapping key -> count.
        top_n: Maximum number of entries returned.

    Returns:
        Ranked entries, at most top_n of them.
    """
    ordered = sorted(summary.items(), key=lambda item: (-item[1], item[0]))
    total = sum(count for _, count in ordered)

    if total == 0:
        percentages = [0] * len(ordered)
    else:
        exact = [count / total * 100 for _, count in ordered]
        percentages = [_round_half_up(value) for value in exact]

        overshoot = sum(percentages) - 100
        index = len(percentages) - 1
        while overshoot > 0 and index >= 0:
            if percentages[index] > exact[index]:
                percentages[index] -= 1
                overshoot -= 1
            index -= 1

    return [
        RankedEntry(key=key, count=count, percentage=percentage)
        for (key, count), percentage in zip(ordered, percentages)
    ][: max(top_n, 0)]


def tokenize(text: str, min_length: int = DEFAULT_MIN_TERM_LENGTH) -> list[str]:
    """Lowercase, strip punctuation and keep tokens of at least min_length."""
    cleaned = _PUNCTUATION.sub("", text.lower())
    return [token for token in cleaned.split() if len(token) >= min_length]


def compute_term_frequency(
    records: Iterable[SurveyResponseEntity],
    selector: ValueSelector,
    min_length: int = DEFAULT_MIN_TERM_LENGTH,
) -> Distribution:
    """Count word tokens in a free-text field (word-cloud data).

    No stemming or stopword removal; the length filter is the only one.
    """
    counts: Distribution = {}
    for record in records:
        text = selector(record)
        if not _is_present(text):
            continue
        for token in tokenize(text, min_length):
            counts[token] = counts.get(token, 0) + 1
    return counts


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 timestamp; None when missing or unparseable."""
    if isinstance(value, datetime):
        return value
    if not _is_present(value):
        return None
    text = value.strip()
    # fromisoformat only accepts a trailing "Z" on Python 3.11+
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def day_key(value: str | datetime | None) -> str | None:
    """Calendar-day bucket (YYYY-MM-DD) of a timestamp, without tz conversion."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return parsed.date().isoformat()


def bucket_by_day(
    records: Iterable[SurveyResponseEntity],
    selector: DateSelector,
) -> Distribution:
    """Count records per calendar day. Unparseable timestamps are skipped."""
    counts: Distribution = {}
    for record in records:
        key = day_key(selector(record))
        if key is not None:
            counts[key] = counts.get(key, 0) + 1
    return counts


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def compute_today_count(
    records: Iterable[SurveyResponseEntity],
    selector: DateSelector,
    now: datetime | None = None,
) -> int:
    """Count records whose day bucket is today.

    "Today" is the UTC date at call time unless *now* is given, which
    makes this the one wall-clock dependent operation.
    """
    today: date = (now or _utc_now()).date()
    today_key = today.isoformat()
    return sum(1 for record in records if day_key(selector(record)) == today_key)


def count_since(
    records: Iterable[SurveyResponseEntity],
    selector: DateSelector,
    since: datetime,
) -> int:
    """Count records with a timestamp strictly after *since*.

    Naive timestamps are compared as UTC.
    """
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)

    count = 0
    for record in records:
        parsed = parse_timestamp(selector(record))
        if parsed is None:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        if parsed > since:
            count += 1
    return count


def most_frequent(values: Iterable[str | None]) -> str | None:
    """Return the most common value; ties go to the first one encountered.

    Empty and missing values are ignored. None for an empty input.
    """
    counts: Distribution = {}
    for value in values:
        if _is_present(value):
            counts[value] = counts.get(value, 0) + 1

    best: str | None = None
    for key, count in counts.items():
        if best is None or count > counts[best]:
            best = key
    return best
