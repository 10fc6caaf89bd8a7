#!/usr/bin/env python3
"""Seed a demo database with survey responses.

Creates a handful of realistic responses so the analytics and export
endpoints have something to show.

Usage:
    python scripts/seed_demo.py

This script:
1. Initializes the demo database
2. Submits demo responses through the normal submission path
3. Prints the headline analytics for the seeded data
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from opensurvey.aggregation.summary import aggregate  # noqa: E402
from opensurvey.db import repo  # noqa: E402
from opensurvey.db.session import (  # noqa: E402
    create_db_engine,
    create_session_factory,
    init_db,
    session_scope,
)
from opensurvey.models.types import SurveyResponseSubmission  # noqa: E402
from opensurvey.survey.submission import submit_response  # noqa: E402

# Constants
DEMO_DB_PATH = PROJECT_ROOT / "demo.db"
DEMO_USER_AGENT = "seed_demo.py"

DEMO_RESPONSES = [
    {
        "role": "Product Manager",
        "seniority": "Senior (5-8 years)",
        "company_type": "Scale-up (51-200 employees)",
        "company_size": "Growth-stage Startup (Series A-C)",
        "industry": "Financial Services/Fintech",
        "product_type": "SaaS (B2B)",
        "customer_segment": "B2B Product",
        "main_challenge": "Aligning stakeholders around roadmap priorities",
        "daily_tools": ["Jira", "Figma", "Notion"],
        "learning_methods": ["Books", "Podcasts"],
        "salary_currency": "USD",
        "salary_min": 4000,
        "salary_max": 6000,
    },
    {
        "role": "Product Designer / UX/UI Designer (UXer)",
        "seniority": "Mid-level (2-5 years)",
        "company_type": "Startup (1-50 employees)",
        "industry": "Technology/Software",
        "product_type": "Mobile App",
        "customer_segment": "B2C Product",
        "main_challenge": "Getting research time approved before delivery",
        "daily_tools": ["Figma", "Miro"],
        "learning_methods": ["Online courses"],
        "salary_currency": "ARS",
        "salary_average": 1800000,
    },
    {
        "role": "Product Manager",
        "seniority": "Manager/Lead",
        "company_type": "Large enterprise (1000+ employees)",
        "company_size": "Enterprise (10,000+ employees)",
        "industry": "E-commerce/Retail",
        "product_type": "E-commerce Platform",
        "customer_segment": "Mixed (B2B + B2C)",
        "main_challenge": "Measuring product discovery outcomes across teams",
        "daily_tools": ["Jira", "Amplitude", "Notion"],
        "learning_methods": ["Mentoring", "Books", "Conferences"],
        "email": "pm@example.com",
    },
]


def seed_database(factory) -> int:
    """Submit the demo responses unless the database already has data.

    Returns:
        Number of responses created.
    """
    with session_scope(factory) as session:
        existing = repo.count_responses(session)
        if existing:
            print(f"Demo database already has {existing} responses")
            return 0

        for payload in DEMO_RESPONSES:
            submission = SurveyResponseSubmission(**payload)
            result = submit_response(session, submission, user_agent=DEMO_USER_AGENT)
            print(f"  Created response: {submission.role} ({result.response_id[:8]}...)")

    return len(DEMO_RESPONSES)


def print_summary(factory) -> None:
    """Print the headline analytics for the seeded data."""
    with session_scope(factory) as session:
        bundle = aggregate(repo.list_responses(session))

    print(f"Total responses: {bundle.total_responses}")
    print(f"Today: {bundle.today_count}")
    for entry in bundle.rankings["role"]:
        print(f"  {entry.key}: {entry.count} ({entry.percentage}%)")


def main() -> int:
    """Main entry point."""
    print("=" * 60)
    print("OpenSurvey Demo Seeding Script")
    print("=" * 60)

    # Step 1: Initialize database
    print("\n[1/3] Initializing database...")
    engine = create_db_engine(f"sqlite:///{DEMO_DB_PATH}")
    init_db(engine)
    factory = create_session_factory(engine)

    # Step 2: Seed responses
    print("\n[2/3] Seeding responses...")
    created = seed_database(factory)

    # Step 3: Summarize
    print("\n[3/3] Summarizing...")
    print_summary(factory)

    print("\n" + "=" * 60)
    print(f"Demo seeding complete! ({created} responses created)")
    print(f"Database: {DEMO_DB_PATH}")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
