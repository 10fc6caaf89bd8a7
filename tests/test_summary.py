"""Tests for the analytics bundle and dashboard numbers."""

from datetime import datetime, timezone

from opensurvey.aggregation.summary import aggregate, build_dashboard, to_response_detail
from opensurvey.models.domain import SurveyResponseEntity

NOW = datetime(2024, 5, 10, 12, tzinfo=timezone.utc)


def make_records() -> list[SurveyResponseEntity]:
    """Three responses, newest first."""
    return [
        SurveyResponseEntity(
            id="r3",
            created_at="2024-05-10T09:00:00+00:00",
            role="Product Manager",
            company_size="Enterprise (10,000+ employees)",
            company_type="Large enterprise (1000+ employees)",
            industry="E-commerce/Retail",
            daily_tools=("Jira", "Notion"),
            learning_methods=("Books",),
            main_challenge="Measuring discovery outcomes",
        ),
        SurveyResponseEntity(
            id="r2",
            created_at="2024-05-08T09:00:00+00:00",
            role="Product Designer / UX/UI Designer (UXer)",
            company_type="Startup (1-50 employees)",
            industry="Technology/Software",
            daily_tools=("Figma",),
            learning_methods=("Online courses", "Books"),
            main_challenge="  ",
        ),
        SurveyResponseEntity(
            id="r1",
            created_at="2024-04-01T09:00:00+00:00",
            role="Product Manager",
            company_type="Startup (1-50 employees)",
            daily_tools=("Jira",),
            main_challenge="Stakeholder alignment around discovery",
            salary_currency="USD",
            salary_average=60000,
        ),
    ]


class TestAggregate:
    """Test aggregate."""

    def test_empty_input(self):
        """No responses give empty maps and zero counts."""
        bundle = aggregate([], now=NOW)

        assert bundle.total_responses == 0
        assert bundle.today_count == 0
        assert bundle.last_7_days == 0
        assert bundle.term_frequency == {}
        assert bundle.daily_counts == {}
        assert bundle.main_challenges == []
        assert all(d == {} for d in bundle.distributions.values())
        assert all(r == [] for r in bundle.rankings.values())

    def test_distributions(self):
        """Single and multi-valued distributions are counted."""
        bundle = aggregate(make_records(), now=NOW)

        assert bundle.distributions["role"] == {
            "Product Manager": 2,
            "Product Designer / UX/UI Designer (UXer)": 1,
        }
        assert bundle.distributions["daily_tools"] == {"Jira": 2, "Notion": 1, "Figma": 1}
        assert bundle.distributions["learning_methods"] == {"Books": 2, "Online courses": 1}

    def test_company_prefers_company_size(self):
        """company_size is used when present, company_type otherwise."""
        bundle = aggregate(make_records(), now=NOW)

        assert bundle.distributions["company_type"] == {
            "Enterprise (10,000+ employees)": 1,
            "Startup (1-50 employees)": 2,
        }

    def test_rankings(self):
        """Rankings carry rounded percentages."""
        bundle = aggregate(make_records(), now=NOW)

        role = bundle.rankings["role"]
        assert role[0].key == "Product Manager"
        assert role[0].percentage == 67
        assert role[1].percentage == 33

    def test_time_based_counts(self):
        """Today and last-seven-days counts use the reference time."""
        bundle = aggregate(make_records(), now=NOW)

        assert bundle.today_count == 1
        assert bundle.last_7_days == 2
        assert bundle.daily_counts == {
            "2024-05-10": 1,
            "2024-05-08": 1,
            "2024-04-01": 1,
        }

    def test_main_challenges_skip_blank(self):
        """Blank challenges are left out of the list."""
        bundle = aggregate(make_records(), now=NOW)

        assert bundle.main_challenges == [
            "Measuring discovery outcomes",
            "Stakeholder alignment around discovery",
        ]
        assert bundle.term_frequency["discovery"] == 2

    def test_same_snapshot_same_bundle(self):
        """Aggregating the same snapshot twice gives equal bundles."""
        records = make_records()
        assert aggregate(records, now=NOW) == aggregate(records, now=NOW)

    def test_top_n_limits_rankings(self):
        """top_n caps each ranking."""
        bundle = aggregate(make_records(), top_n=1, now=NOW)
        assert len(bundle.rankings["daily_tools"]) == 1


class TestBuildDashboard:
    """Test build_dashboard."""

    def test_headline_numbers(self):
        """Totals and top values are reported."""
        stats = build_dashboard(make_records(), now=NOW)

        assert stats.total_responses == 3
        assert stats.today_responses == 1
        assert stats.top_role == "Product Manager"
        assert stats.top_industry == "E-commerce/Retail"
        assert [r.id for r in stats.recent_responses] == ["r3", "r2", "r1"]

    def test_industry_falls_back_to_company_type(self):
        """Records without industry count their company type."""
        records = [
            SurveyResponseEntity(id="a", company_type="Startup (1-50 employees)"),
            SurveyResponseEntity(id="b", company_type="Startup (1-50 employees)"),
            SurveyResponseEntity(id="c", industry="Technology/Software"),
        ]
        stats = build_dashboard(records, now=NOW)
        assert stats.top_industry == "Startup (1-50 employees)"

    def test_empty_gives_na(self):
        """No responses give N/A top values."""
        stats = build_dashboard([], now=NOW)

        assert stats.total_responses == 0
        assert stats.top_role == "N/A"
        assert stats.top_industry == "N/A"
        assert stats.recent_responses == []

    def test_recent_responses_capped_at_five(self):
        """Only the five newest responses are returned."""
        records = [SurveyResponseEntity(id=f"r{i}") for i in range(8)]
        stats = build_dashboard(records, now=NOW)
        assert [r.id for r in stats.recent_responses] == ["r0", "r1", "r2", "r3", "r4"]


class TestToResponseDetail:
    """Test to_response_detail."""

    def test_lists_are_converted(self):
        """Tuple answers become lists."""
        detail = to_response_detail(make_records()[0])
        assert detail.daily_tools == ["Jira", "Notion"]
        assert detail.learning_methods == ["Books"]
        assert detail.id == "r3"
