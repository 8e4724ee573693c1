"""
Tests for the alert compiler.
"""

from dataclasses import replace
from datetime import date

from asylum_timeline.alerts import (
    DISCLAIMER_TITLE,
    AlertThresholds,
    compile_alerts,
    sort_alerts,
)
from asylum_timeline.utils.data_models import (
    Alert,
    AlertType,
    Answer,
    CaseFacts,
    Plan,
    Step,
    StepRole,
    StepStatus,
)

TODAY = date(2024, 10, 1)


def _plan(facts, *steps):
    return Plan(case_facts=facts, steps=tuple(steps))


def _titles(alerts):
    return [alert.title for alert in alerts]


class TestLegalWarnings:
    """Tests for the facts-driven alerts."""

    def test_disclaimer_always_present(self):
        """Test that even empty facts get the disclaimer."""
        alerts = compile_alerts(CaseFacts(has_attorney=True), None, TODAY)

        assert _titles(alerts) == [DISCLAIMER_TITLE]
        assert alerts[0].type == AlertType.INFO

    def test_affirmative_without_attorney(self, affirmative_facts):
        """Test the legal warnings for an unrepresented affirmative case."""
        alerts = compile_alerts(affirmative_facts, None, TODAY)

        assert _titles(alerts) == [
            "One-Year Filing Deadline Approaching",
            "Legal Representation Strongly Recommended",
            DISCLAIMER_TITLE,
        ]
        assert alerts[0].days_left == 92
        assert alerts[0].type == AlertType.LEGAL_WARNING
        assert alerts[1].type == AlertType.LEGAL_WARNING

    def test_deadline_warning_window(self, affirmative_facts):
        """Test that the one-year warning waits for the last 180 days."""
        alerts = compile_alerts(affirmative_facts, None, date(2024, 3, 1))
        assert "One-Year Filing Deadline Approaching" not in _titles(alerts)

    def test_court_without_attorney(self, court_facts):
        """Test that a court case without counsel is critical."""
        alerts = compile_alerts(court_facts, None, TODAY)

        assert alerts[0].type == AlertType.CRITICAL
        assert alerts[0].title == "URGENT: Legal Representation Required"
        assert alerts[0].is_court_related
        assert "Immigration Court Proceedings" in _titles(alerts)

    def test_status_expiring(self):
        """Test TPS and parole expiration warnings."""
        facts = CaseFacts(
            has_attorney=True,
            has_tps=Answer.YES,
            tps_expiration_date=date(2024, 12, 1),
            has_parole=Answer.YES,
            parole_expiration_date=date(2026, 1, 1),
        )
        alerts = compile_alerts(facts, None, TODAY)

        assert "TPS Status Expiring Soon" in _titles(alerts)
        assert "Parole Status Expiring Soon" not in _titles(alerts)
        tps = next(alert for alert in alerts if alert.title == "TPS Status Expiring Soon")
        assert tps.type == AlertType.WARNING
        assert tps.days_left == 61


class TestStepAlerts:
    """Tests for the step-driven alerts."""

    def test_hearing_never_below_warning(self, court_facts):
        """Test that a distant hearing is still a warning."""
        hearing = Step.create(
            "defensive-starter", "master-calendar-hearing", "Hearing",
            due_date=date(2024, 12, 15), role=StepRole.HEARING,
        )
        alerts = compile_alerts(court_facts, _plan(court_facts, hearing), TODAY)

        alert = next(alert for alert in alerts if alert.step_id == hearing.id)
        assert alert.type == AlertType.WARNING
        assert alert.title == "Court Hearing in 75 days"
        assert "Failure to appear" in alert.message

    def test_imminent_interview_is_critical(self):
        """Test the interview alert bands."""
        facts = CaseFacts(has_attorney=True)
        interview = Step.create(
            "affirmative-starter", "asylum-interview", "Interview",
            due_date=date(2024, 10, 5), role=StepRole.INTERVIEW,
        )
        alerts = compile_alerts(facts, _plan(facts, interview), TODAY)

        assert alerts[0].title == "Asylum Interview in 4 days"
        assert alerts[0].type == AlertType.CRITICAL
        assert alerts[0].action_required

    def test_work_permit_is_informational(self):
        """Test that work authorization alerts are always info."""
        facts = CaseFacts(has_attorney=True)
        step = Step.create(
            "affirmative-starter", "work-authorization", "Apply",
            due_date=date(2024, 7, 29), role=StepRole.WORK_AUTHORIZATION,
        )
        alerts = compile_alerts(facts, _plan(facts, step), TODAY)

        alert = next(alert for alert in alerts if alert.step_id == step.id)
        assert alert.type == AlertType.INFO
        assert alert.title == "Work permit eligible now"

    def test_filing_deadline_recommends_attorney(self, affirmative_facts):
        """Test that a close filing date asks for counsel."""
        step = Step.create(
            "affirmative-starter", "file-i589", "File",
            due_date=date(2024, 12, 2), role=StepRole.FILING_DEADLINE,
        )
        alerts = compile_alerts(affirmative_facts, _plan(affirmative_facts, step), TODAY)

        alert = next(alert for alert in alerts if alert.step_id == step.id)
        assert alert.title == "62 days left to file I-589"
        assert alert.type == AlertType.INFO
        assert "STRONGLY RECOMMEND" in alert.message

    def test_generic_overdue_step(self):
        """Test a past-due step without a role."""
        facts = CaseFacts(has_attorney=True)
        step = Step.create("b", "evidence", "Gather evidence", due_date=date(2024, 9, 21))
        alerts = compile_alerts(facts, _plan(facts, step), TODAY)

        assert alerts[0].title == "Gather evidence"
        assert alerts[0].type == AlertType.CRITICAL
        assert alerts[0].days_left == -10

    def test_completed_and_undated_steps_skipped(self):
        """Test that only open dated steps produce alerts."""
        facts = CaseFacts(has_attorney=True)
        done = replace(
            Step.create("b", "done", "Done", due_date=date(2024, 10, 2)),
            status=StepStatus.COMPLETED,
            completed_date=TODAY,
        )
        undated = Step.create("b", "undated", "Undated")
        alerts = compile_alerts(facts, _plan(facts, done, undated), TODAY)

        assert _titles(alerts) == [DISCLAIMER_TITLE]

    def test_custom_thresholds(self, court_facts):
        """Test that thresholds change the bands."""
        hearing = Step.create(
            "defensive-starter", "master-calendar-hearing", "Hearing",
            due_date=date(2024, 12, 15), role=StepRole.HEARING,
        )
        alerts = compile_alerts(
            court_facts, _plan(court_facts, hearing), TODAY, AlertThresholds(critical_days=100)
        )

        alert = next(alert for alert in alerts if alert.step_id == hearing.id)
        assert alert.type == AlertType.CRITICAL


class TestSortAlerts:
    """Tests for alert ordering."""

    def test_group_then_days(self):
        """Test critical, then legal warnings, then the rest by days left."""
        alerts = [
            Alert(AlertType.INFO, "info-none", "m"),
            Alert(AlertType.WARNING, "warn-40", "m", days_left=40),
            Alert(AlertType.INFO, "info-10", "m", days_left=10),
            Alert(AlertType.LEGAL_WARNING, "legal", "m"),
            Alert(AlertType.CRITICAL, "crit-none", "m"),
            Alert(AlertType.CRITICAL, "crit-3", "m", days_left=3),
        ]

        assert _titles(sort_alerts(alerts)) == [
            "crit-3",
            "crit-none",
            "legal",
            "info-10",
            "warn-40",
            "info-none",
        ]
