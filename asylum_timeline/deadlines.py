"""
Deadline calculations for asylum cases.

All functions are pure and work on calendar dates.
"""

from datetime import date
from typing import Optional

from .utils.data_models import CaseFacts, CaseOutcome, DeadlineCalculation
from .utils.helpers import add_days, add_months, add_years

# Statutory and practical windows
ONE_YEAR_FILING_YEARS = 1
TPS_EXTENSION_MONTHS = 6
TPS_RECOMMENDED_MONTHS = 3
PAROLE_EXTENSION_MONTHS = 3
WORK_PERMIT_WAIT_DAYS = 150
APPEAL_WINDOW_DAYS = 30
GREEN_CARD_WAIT_YEARS = 1
MOTION_TO_REOPEN_DAYS = 180


def one_year_deadline(
    entry_date: date,
    tps_expiration_date: Optional[date] = None,
    parole_expiration_date: Optional[date] = None,
) -> date:
    """
    Compute the one-year asylum filing deadline.

    The base deadline is one year after entry. A temporary protected status
    exception extends it to six months after TPS expires, a parole exception
    to three months after parole expires. The latest candidate wins, so an
    exception never shortens the deadline.

    Args:
        entry_date: Date of entry
        tps_expiration_date: TPS expiration, when the TPS exception applies
        parole_expiration_date: Parole expiration, when the parole exception applies

    Returns:
        The effective filing deadline
    """
    candidates = [add_years(entry_date, ONE_YEAR_FILING_YEARS)]
    if tps_expiration_date:
        candidates.append(add_months(tps_expiration_date, TPS_EXTENSION_MONTHS))
    if parole_expiration_date:
        candidates.append(add_months(parole_expiration_date, PAROLE_EXTENSION_MONTHS))
    return max(candidates)


def work_permit_eligible(
    filing_date: Optional[date] = None, entry_date: Optional[date] = None
) -> Optional[date]:
    """
    Earliest date to apply for work authorization (150 days after filing).

    Without a filing date the entry date is used as a provisional estimate,
    which must be replaced once the application is actually filed.

    Args:
        filing_date: I-589 filing date
        entry_date: Entry date used as fallback

    Returns:
        Eligibility date, or None when neither date is known
    """
    anchor = filing_date or entry_date
    if anchor is None:
        return None
    return add_days(anchor, WORK_PERMIT_WAIT_DAYS)


def days_until(target: date, today: date) -> int:
    """Whole days from ``today`` to ``target``; negative when already past."""
    return (target - today).days


def facts_one_year_deadline(facts: CaseFacts) -> Optional[date]:
    """One-year deadline for a set of facts, exceptions included."""
    if facts.entry_date is None:
        return None
    return one_year_deadline(
        facts.entry_date,
        tps_expiration_date=facts.tps_expiration_date if facts.tps_exception_applies else None,
        parole_expiration_date=(
            facts.parole_expiration_date if facts.parole_exception_applies else None
        ),
    )


def base_one_year_deadline(facts: CaseFacts) -> Optional[date]:
    """One-year deadline ignoring every exception."""
    if facts.entry_date is None:
        return None
    return one_year_deadline(facts.entry_date)


def calculate_deadlines(facts: CaseFacts) -> DeadlineCalculation:
    """
    Compute every key date that can be derived from the facts.

    Args:
        facts: Case facts

    Returns:
        DeadlineCalculation with the dates that apply (others are None)
    """
    exception_type = None
    if facts.tps_exception_applies:
        exception_type = "tps"
    elif facts.parole_exception_applies:
        exception_type = "parole"

    appeal_deadline = None
    green_card = None
    if facts.decision_date:
        if facts.case_outcome == CaseOutcome.DENIED:
            appeal_deadline = add_days(facts.decision_date, APPEAL_WINDOW_DAYS)
        elif facts.case_outcome == CaseOutcome.ASYLUM_GRANTED:
            green_card = add_years(facts.decision_date, GREEN_CARD_WAIT_YEARS)

    tps_recommended = tps_latest = None
    if facts.tps_exception_applies:
        tps_recommended = add_months(facts.tps_expiration_date, TPS_RECOMMENDED_MONTHS)
        tps_latest = add_months(facts.tps_expiration_date, TPS_EXTENSION_MONTHS)

    parole_latest = None
    if facts.parole_exception_applies:
        parole_latest = add_months(facts.parole_expiration_date, PAROLE_EXTENSION_MONTHS)

    motion_deadline = None
    missed_on = facts.missed_hearing_date or facts.next_hearing_date
    if facts.has_missed_hearing and missed_on:
        motion_deadline = add_days(missed_on, MOTION_TO_REOPEN_DAYS)

    work_permit = work_permit_eligible(facts.i589_filing_date, facts.entry_date)

    return DeadlineCalculation(
        one_year_deadline=facts_one_year_deadline(facts),
        base_one_year_deadline=base_one_year_deadline(facts),
        work_permit_eligible=work_permit,
        work_permit_is_estimate=work_permit is not None and facts.i589_filing_date is None,
        appeal_deadline=appeal_deadline,
        green_card_eligible=green_card,
        tps_recommended_apply_by=tps_recommended,
        tps_latest_apply_by=tps_latest,
        parole_latest_apply_by=parole_latest,
        motion_to_reopen_deadline=motion_deadline,
        has_one_year_exception=exception_type is not None,
        exception_type=exception_type,
    )
