"""
Tests for deadline calculations.
"""

from datetime import date

from asylum_timeline.deadlines import (
    calculate_deadlines,
    days_until,
    facts_one_year_deadline,
    one_year_deadline,
    work_permit_eligible,
)
from asylum_timeline.utils.data_models import Answer, CaseFacts, CaseOutcome


class TestOneYearDeadline:
    """Tests for one_year_deadline function."""

    def test_base_deadline(self):
        """Test entry date plus one year."""
        assert one_year_deadline(date(2024, 1, 1)) == date(2025, 1, 1)

    def test_leap_day_entry(self):
        """Test that a Feb 29 entry lands on Feb 28."""
        assert one_year_deadline(date(2024, 2, 29)) == date(2025, 2, 28)

    def test_tps_extension(self):
        """Test that TPS expiration plus six months extends the deadline."""
        result = one_year_deadline(date(2023, 1, 1), tps_expiration_date=date(2025, 6, 1))
        assert result == date(2025, 12, 1)

    def test_exception_never_shortens(self):
        """Test that an early expiration keeps the base deadline."""
        result = one_year_deadline(
            date(2024, 1, 1),
            tps_expiration_date=date(2023, 1, 1),
            parole_expiration_date=date(2024, 6, 1),
        )
        assert result == date(2025, 1, 1)

    def test_latest_candidate_wins(self):
        """Test that with both exceptions the later date is used."""
        result = one_year_deadline(
            date(2022, 1, 1),
            tps_expiration_date=date(2024, 1, 1),
            parole_expiration_date=date(2024, 6, 1),
        )
        assert result == date(2024, 9, 1)

    def test_monotonic_extension_for_facts(self, tps_facts):
        """Test that facts with an exception never get an earlier deadline."""
        plain = CaseFacts(entry_date=tps_facts.entry_date)
        assert facts_one_year_deadline(tps_facts) >= facts_one_year_deadline(plain)

    def test_unconfirmed_tps_is_ignored(self):
        """Test that TPS counts only when the answer is yes."""
        facts = CaseFacts(
            entry_date=date(2023, 1, 1),
            has_tps=Answer.NOT_SURE,
            tps_expiration_date=date(2025, 6, 1),
        )
        assert facts_one_year_deadline(facts) == date(2024, 1, 1)


class TestWorkPermitEligible:
    """Tests for work_permit_eligible function."""

    def test_from_filing_date(self):
        """Test filing date plus 150 days."""
        assert work_permit_eligible(date(2024, 3, 1)) == date(2024, 7, 29)

    def test_entry_date_fallback(self):
        """Test the provisional estimate from entry date."""
        assert work_permit_eligible(None, date(2024, 3, 1)) == date(2024, 7, 29)

    def test_filing_date_preferred(self):
        """Test that the filing date replaces the estimate."""
        assert work_permit_eligible(date(2024, 5, 1), date(2024, 3, 1)) == date(2024, 9, 28)

    def test_no_dates(self):
        """Test that no anchor gives no date."""
        assert work_permit_eligible() is None


class TestDaysUntil:
    """Tests for days_until function."""

    def test_future(self):
        """Test days to a future date."""
        assert days_until(date(2025, 1, 1), date(2024, 10, 1)) == 92

    def test_past_is_negative(self):
        """Test days to a past date."""
        assert days_until(date(2025, 1, 1), date(2025, 2, 1)) == -31

    def test_same_day(self):
        """Test days to today."""
        assert days_until(date(2025, 1, 1), date(2025, 1, 1)) == 0


class TestCalculateDeadlines:
    """Tests for calculate_deadlines function."""

    def test_tps_case(self, tps_facts):
        """Test deadlines for a TPS late filer."""
        result = calculate_deadlines(tps_facts)

        assert result.one_year_deadline == date(2025, 12, 1)
        assert result.base_one_year_deadline == date(2024, 1, 1)
        assert result.tps_recommended_apply_by == date(2025, 9, 1)
        assert result.tps_latest_apply_by == date(2025, 12, 1)
        assert result.has_one_year_exception
        assert result.exception_type == "tps"
        assert result.work_permit_is_estimate

    def test_denied_case(self):
        """Test the appeal deadline."""
        facts = CaseFacts(case_outcome=CaseOutcome.DENIED, decision_date=date(2024, 8, 1))
        result = calculate_deadlines(facts)

        assert result.appeal_deadline == date(2024, 8, 31)
        assert result.green_card_eligible is None
        assert result.one_year_deadline is None

    def test_granted_case(self):
        """Test green card eligibility after a grant."""
        facts = CaseFacts(
            case_outcome=CaseOutcome.ASYLUM_GRANTED,
            decision_date=date(2024, 2, 29),
            i589_filing_date=date(2023, 6, 1),
        )
        result = calculate_deadlines(facts)

        assert result.green_card_eligible == date(2025, 2, 28)
        assert result.appeal_deadline is None
        assert not result.work_permit_is_estimate

    def test_missed_hearing(self):
        """Test the motion to reopen deadline."""
        facts = CaseFacts(has_missed_hearing=True, missed_hearing_date=date(2024, 6, 1))
        assert calculate_deadlines(facts).motion_to_reopen_deadline == date(2024, 11, 28)

    def test_empty_facts(self):
        """Test that empty facts give an empty calculation."""
        result = calculate_deadlines(CaseFacts())

        assert result.one_year_deadline is None
        assert result.work_permit_eligible is None
        assert not result.has_one_year_exception
