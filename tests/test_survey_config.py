"""Tests for survey and question configuration."""

import pytest

from opensurvey.db import repo
from opensurvey.db.schema import SurveyOption, SurveyQuestion
from opensurvey.models.types import OptionCreate, QuestionCreate, SurveyCreate, SurveyUpdate
from opensurvey.survey.config import add_question, create_survey, delete_survey, update_survey


def make_question(**overrides) -> QuestionCreate:
    payload = {
        "question_text": "What is your role?",
        "question_type": "single-choice",
        "order_index": 1,
        "options": [
            OptionCreate(text="Product Manager", value="pm"),
            OptionCreate(text="Other", value="other", is_other=True),
        ],
    }
    payload.update(overrides)
    return QuestionCreate(**payload)


class TestCreateSurvey:
    """Test create_survey."""

    def test_creates_survey(self, session):
        """Survey is stored and returned."""
        survey = create_survey(
            session, SurveyCreate(name="Career survey", settings={"theme": "dark"})
        )

        stored = repo.get_survey(session, survey.id)
        assert stored is not None
        assert stored.name == "Career survey"
        assert stored.is_active is True
        assert stored.settings == {"theme": "dark"}


class TestUpdateSurvey:
    """Test update_survey."""

    def test_updates_only_set_fields(self, session):
        """Fields absent from the payload are left unchanged."""
        survey = create_survey(
            session, SurveyCreate(name="Career survey", description="2024 edition")
        )

        updated = update_survey(session, survey.id, SurveyUpdate(is_active=False))

        assert updated.is_active is False
        assert updated.name == "Career survey"
        assert updated.description == "2024 edition"

    def test_explicit_null_clears_description(self, session):
        """Setting description to null clears it."""
        survey = create_survey(
            session, SurveyCreate(name="Career survey", description="2024 edition")
        )

        updated = update_survey(session, survey.id, SurveyUpdate(description=None))
        assert updated.description is None

    def test_missing_raises(self, session):
        """Unknown survey raises ValueError."""
        with pytest.raises(ValueError, match="Survey not found"):
            update_survey(session, "nonexistent", SurveyUpdate(name="x"))


class TestDeleteSurvey:
    """Test delete_survey."""

    def test_deletes_questions_and_options(self, session):
        """Deleting a survey removes its questions and options."""
        survey = create_survey(session, SurveyCreate(name="Career survey"))
        add_question(session, survey.id, make_question())

        delete_survey(session, survey.id)

        assert repo.get_survey(session, survey.id) is None
        assert session.query(SurveyQuestion).count() == 0
        assert session.query(SurveyOption).count() == 0

    def test_missing_raises(self, session):
        """Unknown survey raises ValueError."""
        with pytest.raises(ValueError, match="Survey not found"):
            delete_survey(session, "nonexistent")


class TestAddQuestion:
    """Test add_question."""

    def test_adds_choice_question_with_options(self, session):
        """Options are stored in list order."""
        survey = create_survey(session, SurveyCreate(name="Career survey"))
        add_question(session, survey.id, make_question())

        questions = repo.get_questions_for_survey(session, survey.id)
        assert len(questions) == 1
        assert [o.option_value for o in questions[0].options] == ["pm", "other"]
        assert [o.order_index for o in questions[0].options] == [0, 1]
        assert questions[0].options[1].is_other is True

    def test_text_question_drops_options(self, session):
        """Options are ignored for non-choice questions."""
        survey = create_survey(session, SurveyCreate(name="Career survey"))
        question = add_question(session, survey.id, make_question(question_type="textarea"))

        assert question.options == []
        assert session.query(SurveyOption).count() == 0

    def test_questions_ordered_by_index(self, session):
        """Questions come back ordered by order_index."""
        survey = create_survey(session, SurveyCreate(name="Career survey"))
        add_question(session, survey.id, make_question(question_text="Second", order_index=2))
        add_question(session, survey.id, make_question(question_text="First", order_index=1))

        questions = repo.get_questions_for_survey(session, survey.id)
        assert [q.question_text for q in questions] == ["First", "Second"]

    def test_invalid_type_raises(self, session):
        """Unsupported question types are rejected."""
        survey = create_survey(session, SurveyCreate(name="Career survey"))
        with pytest.raises(ValueError, match="Invalid question_type"):
            add_question(session, survey.id, make_question(question_type="slider"))

    def test_missing_survey_raises(self, session):
        """Unknown survey raises ValueError."""
        with pytest.raises(ValueError, match="Survey not found"):
            add_question(session, "nonexistent", make_question())
