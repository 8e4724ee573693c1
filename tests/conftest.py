"""
Pytest configuration and fixtures for Asylum Timeline tests.
"""

import logging
from dataclasses import replace
from datetime import date

import pytest

from asylum_timeline.engine import TimelineEngine
from asylum_timeline.utils.data_models import (
    Answer,
    CaseFacts,
    Step,
    StepStatus,
)


@pytest.fixture
def today():
    """Fixed derivation date."""
    return date(2024, 10, 1)


@pytest.fixture
def engine(today):
    """Engine with a pinned clock."""
    return TimelineEngine(today_provider=lambda: today, log_level=logging.WARNING)


@pytest.fixture
def affirmative_facts():
    """Unfiled affirmative case that entered on 2024-01-01."""
    return CaseFacts(entry_date=date(2024, 1, 1), has_filed_i589=Answer.NO)


@pytest.fixture
def court_facts():
    """Court case without an attorney and a scheduled hearing."""
    return CaseFacts(
        entry_date=date(2024, 1, 1),
        has_case=Answer.YES,
        has_filed_i589=Answer.NO,
        next_hearing_date=date(2024, 12, 15),
        eoir_case_number="A123-456-789",
        assigned_court="New York Broadway Immigration Court",
    )


@pytest.fixture
def tps_facts():
    """Late filer with a TPS exception."""
    return CaseFacts(
        entry_date=date(2023, 1, 1),
        has_filed_i589=Answer.NO,
        has_tps=Answer.YES,
        tps_country="Honduras",
        tps_expiration_date=date(2025, 6, 1),
    )


@pytest.fixture
def sample_facts_dict():
    """Intake record as produced by the questionnaire (camelCase keys)."""
    return {
        "entryDate": "2024-01-01",
        "hasFiledI589": "no",
        "filingLocation": "",
        "hasTPS": "not-sure",
        "hasAttorney": False,
        "assignedCourt": "  Houston   Immigration Court ",
    }


@pytest.fixture
def make_step():
    """Factory for ad-hoc steps."""

    def _make(local_id, title=None, bundle_id="test", **kwargs):
        return Step.create(bundle_id, local_id, title or local_id.title(), **kwargs)

    return _make


@pytest.fixture
def completed():
    """Return a completed copy of a step."""
    def _complete(step, on=date(2024, 9, 1)):
        return replace(step, status=StepStatus.COMPLETED, completed_date=on)

    return _complete
