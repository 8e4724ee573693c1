"""
Supplementary advisories derived from questionnaire answers.

These display cards sit next to the timeline. They never decide which
bundles are active; that is the job of the bundle selector alone.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from .deadlines import (
    PAROLE_EXTENSION_MONTHS,
    TPS_EXTENSION_MONTHS,
    WORK_PERMIT_WAIT_DAYS,
    base_one_year_deadline,
    days_until,
    facts_one_year_deadline,
)
from .pipeline import PRIORITY_ORDER
from .utils.data_models import (
    Answer,
    CardType,
    CaseFacts,
    DisplayCard,
    FilingLocation,
    LinkKind,
    StepLink,
    StepPriority,
    _to_dict,
)
from .utils.helpers import add_days, add_months, format_iso

FILING_FEE_EFFECTIVE_DATE = date(2025, 7, 22)
BIOMETRICS_EXPECTED_DAYS = 30
HEARING_ATTENTION_DAYS = 30
FILING_ATTENTION_DAYS = 60

USCIS_STATUS_LINK = StepLink(
    "USCIS Case Status", "https://egov.uscis.gov/casestatus/landing.do", LinkKind.STATUS_CHECK
)
EOIR_STATUS_LINK = StepLink(
    "EOIR Case Status", "https://portal.eoir.justice.gov/InfoSystem/Login", LinkKind.STATUS_CHECK
)


@dataclass(frozen=True)
class Advisories:
    """Cards, warnings and next-step hints for one set of answers."""

    cards: Tuple[DisplayCard, ...] = ()
    warnings: Tuple[str, ...] = ()
    next_steps: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CourtCaseSummary:
    has_court_case: bool
    case_number: Optional[str] = None
    next_hearing: Optional[date] = None
    assigned_court: Optional[str] = None
    days_until_hearing: Optional[int] = None
    requires_attorney: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return _to_dict(self)


class _Collector:
    def __init__(self):
        self.cards: List[DisplayCard] = []
        self.warnings: List[str] = []
        self.next_steps: List[str] = []

    def card(self, card_id, card_type, priority, title, description, due_date=None, links=()):
        self.cards.append(
            DisplayCard(
                id=card_id,
                type=card_type,
                priority=priority,
                title=title,
                description=description,
                due_date=due_date,
                links=tuple(links),
            )
        )

    def warn(self, message: str):
        if message not in self.warnings:
            self.warnings.append(message)

    def next(self, message: str):
        if message not in self.next_steps:
            self.next_steps.append(message)


def _entry_date_cards(facts: CaseFacts, today: date, out: _Collector) -> None:
    if facts.entry_date is None:
        out.card(
            "find-entry-date",
            CardType.ACTION,
            StepPriority.HIGH,
            "Find your entry date",
            "Look up your I-94 arrival/departure record to determine your entry date",
            links=(StepLink("I-94 Official Website", "https://i94.cbp.dhs.gov/", LinkKind.WEBSITE),),
        )
        out.next("Find your entry date using I-94 lookup")
        return

    deadline = base_one_year_deadline(facts)
    if today > deadline:
        out.warn("Past one-year filing deadline - check for exceptions")
        out.card(
            "late-filing-warning",
            CardType.WARNING,
            StepPriority.CRITICAL,
            "LATE FILING: Past One-Year Deadline",
            "You may still be able to file if you qualify for an exception "
            "(TPS, Parole, changed circumstances)",
            due_date=deadline,
        )


def _filing_status_cards(facts: CaseFacts, today: date, out: _Collector) -> None:
    deadline = base_one_year_deadline(facts)
    past_deadline = deadline is not None and today > deadline

    if facts.has_filed_i589 == Answer.NO:
        if deadline is not None and not past_deadline:
            if today >= FILING_FEE_EFFECTIVE_DATE:
                out.card(
                    "filing-fee-banner",
                    CardType.WARNING,
                    StepPriority.MEDIUM,
                    "Filing Fee Required",
                    "Asylum filing now requires $100 fee + $100/year pending",
                )
            out.next("File asylum application (I-589)")
            out.next("Gather evidence")
            out.next("Find attorney")
        elif past_deadline:
            out.warn("Late filing - only Withholding of Removal may be available")
            out.card(
                "withholding-option",
                CardType.INFO,
                StepPriority.HIGH,
                "Withholding of Removal Available",
                "Since you're past the one-year deadline, you may still qualify for "
                "Withholding of Removal protection",
            )
            out.card(
                "late-filing-risk-warning",
                CardType.WARNING,
                StepPriority.CRITICAL,
                "RISK: Applying After One Year",
                "If you are NOT currently in removal proceedings, filing asylum could "
                "put you at risk of deportation if denied",
            )
            out.next("Check for status exceptions (TPS/Parole)")
            out.next("Find attorney (urgent)")

    elif facts.has_filed_i589 == Answer.YES:
        filed_on = facts.i589_filing_date
        if filed_on:
            out.card(
                "ead-eligibility",
                CardType.ELIGIBILITY,
                StepPriority.MEDIUM,
                "EAD Eligibility (Work Authorization)",
                "You can apply for work authorization 150 days after filing",
                due_date=add_days(filed_on, WORK_PERMIT_WAIT_DAYS),
                links=(
                    StepLink("Form I-765 (EAD Application)", "https://www.uscis.gov/i-765", LinkKind.FORM),
                ),
            )
            out.card(
                "biometrics-appointment",
                CardType.INFO,
                StepPriority.HIGH,
                "Biometrics Appointment",
                "Expect biometrics notice approximately 2-6 weeks after filing",
                due_date=add_days(filed_on, BIOMETRICS_EXPECTED_DAYS),
            )
        out.next("Prepare for asylum interview or court hearings")

        if facts.filing_location == FilingLocation.USCIS:
            out.next("Await biometrics appointment")
            out.next("Prepare for asylum interview")
        elif facts.filing_location == FilingLocation.IMMIGRATION_COURT:
            out.next("Find attorney (urgent if none)")
            out.next("Prepare for Master Calendar Hearing")
        elif facts.filing_location == FilingLocation.NOT_SURE:
            out.card(
                "check-filing-location",
                CardType.ACTION,
                StepPriority.HIGH,
                "Determine Where You Filed",
                "Check your receipt notice or case status to determine filing location",
                links=(USCIS_STATUS_LINK, EOIR_STATUS_LINK),
            )
            out.next("Determine where you filed I-589")

    elif facts.has_filed_i589 == Answer.NOT_SURE:
        out.card(
            "check-filing-status",
            CardType.ACTION,
            StepPriority.CRITICAL,
            "Check If You Have Filed I-589",
            "Check your USCIS receipts or EOIR case status to determine if you have filed",
            links=(USCIS_STATUS_LINK, EOIR_STATUS_LINK),
        )
        out.next("Determine if you have filed I-589")


def _court_cards(facts: CaseFacts, out: _Collector) -> None:
    if facts.next_hearing_date is None and facts.eoir_case_status == Answer.YES:
        out.card(
            "check-hearing-date",
            CardType.ACTION,
            StepPriority.CRITICAL,
            "Check Your Next Hearing Date",
            "Find your next hearing date in EOIR case status",
            links=(EOIR_STATUS_LINK,),
        )
        out.next("Check EOIR case info for hearing date")

    if facts.assigned_court:
        out.card(
            "assigned-court-info",
            CardType.INFO,
            StepPriority.MEDIUM,
            "Your Assigned Court",
            f"Your case is assigned to: {facts.assigned_court}",
            links=(
                StepLink(
                    "Change of Venue (EOIR-33)",
                    "https://www.justice.gov/eoir/page/file/1258521/download",
                    LinkKind.FORM,
                ),
            ),
        )
    elif facts.eoir_case_status == Answer.YES:
        out.next("Find your assigned court")

    if facts.eoir_case_status == Answer.NOT_SURE:
        out.card(
            "check-eoir-status",
            CardType.ACTION,
            StepPriority.HIGH,
            "Check EOIR Case Status",
            "Determine if you have a case in Immigration Court",
            links=(EOIR_STATUS_LINK,),
        )
        out.next("Check EOIR case status")


def _protected_status_cards(facts: CaseFacts, today: date, out: _Collector) -> None:
    deadline = base_one_year_deadline(facts)
    past_deadline = deadline is not None and today > deadline
    has_tps = facts.has_tps == Answer.YES
    has_parole = facts.has_parole == Answer.YES

    if past_deadline and (has_tps or has_parole):
        held = "TPS and Parole" if has_tps and has_parole else "TPS" if has_tps else "Parole"
        latest = [
            add_months(facts.tps_expiration_date, TPS_EXTENSION_MONTHS)
            if facts.tps_exception_applies
            else None,
            add_months(facts.parole_expiration_date, PAROLE_EXTENSION_MONTHS)
            if facts.parole_exception_applies
            else None,
        ]
        latest = [d for d in latest if d is not None]
        out.card(
            "status-exception-window",
            CardType.ELIGIBILITY,
            StepPriority.HIGH,
            "Late Filing Exception Available",
            f"Having {held} status may allow asylum application even after one year",
            due_date=max(latest) if latest else None,
        )

    if has_tps and facts.tps_expiration_date is None:
        out.card(
            "find-tps-expiry",
            CardType.ACTION,
            StepPriority.MEDIUM,
            "Find Your TPS Expiration Date",
            "Check your TPS documents or USCIS website for expiration date",
            links=(
                StepLink(
                    "USCIS TPS Information",
                    "https://www.uscis.gov/humanitarian/temporary-protected-status",
                    LinkKind.WEBSITE,
                ),
            ),
        )

    if has_parole and facts.parole_expiration_date is None:
        out.card(
            "find-parole-expiry",
            CardType.ACTION,
            StepPriority.MEDIUM,
            "Find Your Parole Expiration Date",
            "Check your parole documents for expiration date",
        )

    if has_tps and has_parole:
        out.card(
            "multiple-status-info",
            CardType.INFO,
            StepPriority.MEDIUM,
            "Multiple Protected Status",
            "Having both TPS and Parole provides strong exception basis for late asylum filing",
        )

    if past_deadline and facts.has_tps == Answer.NO and facts.has_parole == Answer.NO:
        out.warn("No exception status - only Withholding of Removal may be available")
        out.card(
            "no-exception-warning",
            CardType.WARNING,
            StepPriority.HIGH,
            "Limited Options Available",
            "Without TPS or Parole status, asylum may not be available after one year. "
            "Withholding of Removal may still be possible.",
        )

    if Answer.NOT_SURE in (facts.has_tps, facts.has_parole):
        out.card(
            "check-protected-status",
            CardType.ACTION,
            StepPriority.HIGH,
            "Check Your Protected Status Documents",
            "Review your immigration documents for TPS designation or Parole authorization",
        )


def build_advisories(facts: CaseFacts, today: date) -> Advisories:
    """
    Build supplementary display cards for a set of answers.

    Args:
        facts: Case facts
        today: Reference date for deadline comparisons

    Returns:
        Advisories with cards stably sorted by priority
    """
    out = _Collector()
    _entry_date_cards(facts, today, out)
    _filing_status_cards(facts, today, out)
    _court_cards(facts, out)
    _protected_status_cards(facts, today, out)

    cards = sorted(out.cards, key=lambda card: PRIORITY_ORDER[card.priority])
    return Advisories(
        cards=tuple(cards),
        warnings=tuple(out.warnings),
        next_steps=tuple(out.next_steps),
    )


def requires_immediate_legal_attention(facts: CaseFacts, today: date) -> bool:
    """
    Whether the case needs a lawyer right away.

    True for a court case without an attorney, a hearing within 30 days, or
    an unfiled application whose deadline is within 60 days.
    """
    if facts.in_court and not facts.has_attorney:
        return True

    if facts.next_hearing_date and days_until(facts.next_hearing_date, today) <= HEARING_ATTENTION_DAYS:
        return True

    deadline = facts_one_year_deadline(facts)
    if deadline and not facts.has_filed:
        if days_until(deadline, today) <= FILING_ATTENTION_DAYS:
            return True

    return False


def court_case_summary(facts: CaseFacts, today: date) -> CourtCaseSummary:
    hearing = facts.next_hearing_date
    return CourtCaseSummary(
        has_court_case=facts.in_court,
        case_number=facts.eoir_case_number,
        next_hearing=hearing,
        assigned_court=facts.assigned_court,
        days_until_hearing=days_until(hearing, today) if hearing else None,
        requires_attorney=facts.in_court and not facts.has_attorney,
    )


def summarize_advisories(advisories: Advisories) -> str:
    """Plain-text summary of warnings and critical cards."""
    lines = []
    if advisories.warnings:
        lines.append(f"IMPORTANT: {', '.join(advisories.warnings)}")
        lines.append("")
    critical = [card for card in advisories.cards if card.priority == StepPriority.CRITICAL]
    if critical:
        lines.append("CRITICAL ACTIONS NEEDED:")
        lines.extend(f"- {card.title}" for card in critical)
        lines.append("")
    for card in advisories.cards:
        if card.due_date:
            lines.append(f"{card.title}: {format_iso(card.due_date)}")
    return "\n".join(lines).strip()
