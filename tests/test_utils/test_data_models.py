"""
Tests for data models.
"""

import pytest
from datetime import date

from asylum_timeline.utils.data_models import (
    Alert,
    AlertType,
    Answer,
    CaseFacts,
    CaseOutcome,
    FilingLocation,
    LinkKind,
    Plan,
    Step,
    StepLink,
    StepPriority,
    StepRole,
    StepStatus,
    make_step_id,
)
from asylum_timeline.utils.exceptions import MalformedFactsError


class TestStep:
    """Tests for Step model."""

    def test_create_namespaces_ids(self):
        """Test that Step.create prefixes the bundle id."""
        step = Step.create("after-denial", "file-bia-appeal", "File appeal")

        assert step.id == "after-denial:file-bia-appeal"
        assert step.bundle_id == "after-denial"
        assert step.local_id == "file-bia-appeal"
        assert step.status == StepStatus.PENDING

    def test_create_namespaces_show_after(self):
        """Test that the gating step id is namespaced the same way."""
        step = Step.create("after-denial", "bia-briefing-schedule", "Brief", show_after="file-bia-appeal")

        assert step.show_after_step == "after-denial:file-bia-appeal"

    def test_make_step_id_keeps_qualified_ids(self):
        """Test that an already qualified id is left alone."""
        assert make_step_id("a", "b:c") == "b:c"
        assert make_step_id("a", "c") == "a:c"

    def test_step_defaults(self):
        """Test Step default values."""
        step = Step(id="x:y", bundle_id="x", title="Y")

        assert step.description == ""
        assert step.due_date is None
        assert step.priority == StepPriority.MEDIUM
        assert step.links == ()
        assert step.is_editable_date is False
        assert step.date_overridden is False
        assert not step.is_completed

    def test_step_round_trip(self):
        """Test Step to_dict/from_dict."""
        step = Step(
            id="b:s",
            bundle_id="b",
            title="Step",
            due_date=date(2025, 1, 1),
            status=StepStatus.COMPLETED,
            completed_date=date(2024, 12, 1),
            links=(StepLink("Form", "https://example.com/form", LinkKind.FORM),),
            role=StepRole.FILING_DEADLINE,
        )

        data = step.to_dict()
        assert data["due_date"] == "2025-01-01"
        assert data["status"] == "completed"
        assert data["links"][0]["kind"] == "form"
        assert "show_after_step" not in data
        assert Step.from_dict(data) == step

    def test_step_str(self):
        """Test Step string representation."""
        step = Step(id="b:s", bundle_id="b", title="File", due_date=date(2025, 1, 1))

        result = str(step)
        assert "Step: File" in result
        assert "Due: 2025-01-01" in result
        assert "Priority: medium" in result


class TestStepLink:
    """Tests for StepLink model."""

    def test_from_dict_accepts_type_key(self):
        """Test that links stored with a 'type' key still load."""
        link = StepLink.from_dict({"title": "EOIR", "url": "https://eoir", "type": "status_check"})

        assert link.kind == LinkKind.STATUS_CHECK


class TestCaseFacts:
    """Tests for CaseFacts model."""

    def test_from_dict_camel_case(self, sample_facts_dict):
        """Test building facts from questionnaire keys."""
        facts = CaseFacts.from_dict(sample_facts_dict)

        assert facts.entry_date == date(2024, 1, 1)
        assert facts.has_filed_i589 == Answer.NO
        assert facts.filing_location is None
        assert facts.has_tps == Answer.NOT_SURE
        assert facts.has_attorney is False
        assert facts.assigned_court == "Houston Immigration Court"

    def test_from_dict_aliases(self):
        """Test legacy intake keys."""
        facts = CaseFacts.from_dict(
            {
                "i589SubmissionDate": "2024-03-01",
                "denialDate": "2024-08-01",
                "caseStatus": "denied",
                "nextCourtHearing": "2024-11-01",
            }
        )

        assert facts.i589_filing_date == date(2024, 3, 1)
        assert facts.decision_date == date(2024, 8, 1)
        assert facts.case_outcome == CaseOutcome.DENIED
        assert facts.next_hearing_date == date(2024, 11, 1)
        assert facts.denial_recorded

    def test_from_dict_invalid_date(self):
        """Test that an unparseable date names its field."""
        with pytest.raises(MalformedFactsError) as exc_info:
            CaseFacts.from_dict({"entryDate": "2024-13-45"})

        assert exc_info.value.field == "entry_date"
        assert "entry_date" in str(exc_info.value)

    def test_from_dict_invalid_enum(self):
        """Test that an unknown answer is rejected."""
        with pytest.raises(MalformedFactsError):
            CaseFacts.from_dict({"hasCase": "perhaps"})

    def test_from_dict_boolean_answers(self):
        """Test that booleans map onto yes/no answers."""
        facts = CaseFacts.from_dict({"hasCase": True, "hasTPS": False, "hasAttorney": "yes"})

        assert facts.has_case == Answer.YES
        assert facts.has_tps == Answer.NO
        assert facts.has_attorney is True

    def test_in_court(self):
        """Test the court track detection."""
        assert CaseFacts(has_case=Answer.YES).in_court
        assert CaseFacts(filing_location=FilingLocation.IMMIGRATION_COURT).in_court
        assert CaseFacts(eoir_case_status=Answer.YES).in_court
        assert not CaseFacts(has_case=Answer.NOT_SURE).in_court

    def test_has_filed(self):
        """Test the filing detection."""
        assert CaseFacts(has_filed_i589=Answer.YES).has_filed
        assert CaseFacts(i589_filing_date=date(2024, 1, 1)).has_filed
        assert not CaseFacts(has_filed_i589=Answer.NOT_SURE).has_filed

    def test_exception_flags_need_dates(self):
        """Test that status exceptions require an expiration date."""
        assert not CaseFacts(has_tps=Answer.YES).tps_exception_applies
        assert CaseFacts(has_tps=Answer.YES, tps_expiration_date=date(2025, 1, 1)).tps_exception_applies
        assert not CaseFacts(has_parole=Answer.NO, parole_expiration_date=date(2025, 1, 1)).parole_exception_applies

    def test_facts_round_trip(self, tps_facts):
        """Test CaseFacts to_dict/from_dict."""
        assert CaseFacts.from_dict(tps_facts.to_dict()) == tps_facts


class TestPlan:
    """Tests for Plan model."""

    def test_plan_round_trip(self, engine, court_facts, today):
        """Test that a derived plan survives serialization unchanged."""
        plan = engine.derive_plan(court_facts, today=today)
        step_id = plan.steps[0].id
        plan = engine.mark_step_complete(plan, step_id, today=today).plan

        restored = Plan.from_json(plan.to_json())

        assert restored == plan
        assert restored.next_steps == plan.next_steps
        assert restored.get_step(step_id).status == StepStatus.COMPLETED
        assert restored.get_step(step_id).completed_date == today

    def test_get_step_missing(self):
        """Test get_step with an unknown id."""
        assert Plan(case_facts=CaseFacts()).get_step("nope") is None

    def test_plan_str(self):
        """Test Plan string representation."""
        plan = Plan(
            case_facts=CaseFacts(),
            active_bundle_ids=("affirmative-starter",),
            last_updated=date(2024, 10, 1),
        )

        result = str(plan)
        assert "Plan: 0 steps" in result
        assert "affirmative-starter" in result
        assert "Updated: 2024-10-01" in result


class TestAlert:
    """Tests for Alert model."""

    def test_alert_round_trip(self):
        """Test Alert to_dict/from_dict."""
        alert = Alert(
            type=AlertType.CRITICAL,
            title="Court Hearing in 3 days",
            message="Attend",
            deadline=date(2024, 10, 4),
            days_left=3,
            action_required=True,
            step_id="defensive-starter:master-calendar-hearing",
        )

        assert Alert.from_dict(alert.to_dict()) == alert
        assert "[critical]" in str(alert)
