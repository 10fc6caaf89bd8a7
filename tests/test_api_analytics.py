"""Tests for analytics, dashboard and export API endpoints."""

import csv
import io
import json
import re
from datetime import datetime, timezone

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from opensurvey.core.config import Settings
from opensurvey.db.schema import SurveyResponse


def create_test_app_and_client(**settings):
    """Create app with an in-memory database and return (client, app)."""
    from opensurvey.api.app import create_app

    app = create_app(Settings(database_url="sqlite:///:memory:", **settings))
    client = TestClient(app)

    return client, app


class FailingSession:
    """Session stand-in whose queries always fail."""

    def query(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    def close(self):
        pass


def use_failing_database(app) -> None:
    from opensurvey.api.app import get_db_session

    def override_get_db():
        yield FailingSession()

    app.dependency_overrides[get_db_session] = override_get_db


def seed_responses(app) -> None:
    """Two Product Managers and one Designer."""
    now = datetime.now(timezone.utc)
    rows = [
        SurveyResponse(
            id="r1",
            created_at=now,
            role="Product Manager",
            industry="Technology/Software",
            daily_tools_json=json.dumps(["Jira", "Figma"]),
            learning_methods_json=json.dumps(["Books"]),
            main_challenge="Stakeholder alignment",
        ),
        SurveyResponse(
            id="r2",
            created_at=now,
            role="Product Manager",
            industry="Technology/Software",
            daily_tools_json=json.dumps(["Jira"]),
        ),
        SurveyResponse(
            id="r3",
            created_at=datetime(2023, 1, 1),
            role="Product Designer / UX/UI Designer (UXer)",
            industry="E-commerce/Retail",
        ),
    ]
    with app.state.session_factory() as session:
        session.add_all(rows)
        session.commit()


class TestAnalyticsEndpoint:
    """Test GET /api/analytics."""

    def test_returns_bundle(self):
        """Returns distributions, rankings and counts."""
        client, app = create_test_app_and_client()
        seed_responses(app)

        response = client.get("/api/analytics")
        assert response.status_code == 200

        data = response.json()
        assert data["total_responses"] == 3
        assert data["today_count"] == 2
        assert data["last_7_days"] == 2
        assert data["distributions"]["daily_tools"] == {"Jira": 2, "Figma": 1}
        assert data["rankings"]["role"][0] == {
            "key": "Product Manager",
            "count": 2,
            "percentage": 67,
        }
        assert data["term_frequency"] == {"stakeholder": 1, "alignment": 1}

    def test_empty_database(self):
        """An empty database gives an empty bundle, not an error."""
        client, _ = create_test_app_and_client()

        data = client.get("/api/analytics").json()
        assert data["total_responses"] == 0
        assert data["rankings"]["role"] == []

    def test_top_n_parameter(self):
        """top_n caps the rankings."""
        client, app = create_test_app_and_client()
        seed_responses(app)

        data = client.get("/api/analytics", params={"top_n": 1}).json()
        assert len(data["rankings"]["role"]) == 1

    def test_returns_503_when_database_fails(self):
        """Returns 503 when the datastore is unavailable."""
        client, app = create_test_app_and_client()
        use_failing_database(app)

        response = client.get("/api/analytics")
        assert response.status_code == 503
        assert response.json()["detail"] == "Data unavailable"

    def test_repeat_requests_hit_cache(self):
        """The second request is served from the response cache."""
        client, _ = create_test_app_and_client()

        client.get("/api/analytics")
        client.get("/api/analytics")

        stats = client.get("/api/cache/stats").json()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["keys"] == ["responses:limit=None|offset=0"]

    def test_zero_ttl_disables_cache(self):
        """With a zero TTL nothing is cached."""
        client, _ = create_test_app_and_client(cache_ttl_seconds=0)

        client.get("/api/analytics")
        assert client.get("/api/cache/stats").json()["size"] == 0


class TestDashboardEndpoint:
    """Test GET /api/dashboard."""

    def test_returns_headline_numbers(self):
        """Returns totals and top values."""
        client, app = create_test_app_and_client()
        seed_responses(app)

        data = client.get("/api/dashboard").json()
        assert data["total_responses"] == 3
        assert data["today_responses"] == 2
        assert data["top_role"] == "Product Manager"
        assert data["top_industry"] == "Technology/Software"
        assert len(data["recent_responses"]) == 3

    def test_empty_database(self):
        """An empty database reports N/A top values."""
        client, _ = create_test_app_and_client()

        data = client.get("/api/dashboard").json()
        assert data["top_role"] == "N/A"
        assert data["top_industry"] == "N/A"


class TestExportEndpoint:
    """Test GET /api/analytics/export."""

    def test_json_export(self):
        """JSON export is a downloadable report."""
        client, app = create_test_app_and_client()
        seed_responses(app)

        response = client.get("/api/analytics/export", params={"format": "json"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert re.fullmatch(
            r'attachment; filename="analytics-report-\d{4}-\d{2}-\d{2}\.json"',
            response.headers["content-disposition"],
        )

        data = response.json()
        assert "generated_at" in data
        assert data["total_responses"] == 3
        assert response.text.startswith("{\n  \"generated_at\"")

    def test_csv_export(self):
        """CSV export lists distributions with percentages."""
        client, app = create_test_app_and_client()
        seed_responses(app)

        response = client.get("/api/analytics/export", params={"format": "csv"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.headers["content-disposition"].endswith('.csv"')

        rows = list(csv.reader(io.StringIO(response.text)))
        assert rows[0] == ["Category", "Item", "Count", "Percentage"]
        assert ["Role Distribution", "Product Manager", "2", "66.67"] in rows
        assert ["Main Challenges", "Response 1", "1", "N/A"] in rows

    def test_rejects_unknown_format(self):
        """Returns 422 for an unsupported format."""
        client, _ = create_test_app_and_client()

        response = client.get("/api/analytics/export", params={"format": "xml"})
        assert response.status_code == 422

    def test_returns_503_when_database_fails(self):
        """Returns 503 when the datastore is unavailable."""
        client, app = create_test_app_and_client()
        use_failing_database(app)

        response = client.get("/api/analytics/export")
        assert response.status_code == 503
