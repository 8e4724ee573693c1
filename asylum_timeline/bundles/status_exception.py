"""
Late filing under a lawful-status exception.

When the base one-year deadline has passed but the person held Temporary
Protected Status or parole, the application may still be filed within a
reasonable period after that status ends.
"""

from datetime import date
from typing import List, Optional

from ..deadlines import (
    PAROLE_EXTENSION_MONTHS,
    TPS_EXTENSION_MONTHS,
    TPS_RECOMMENDED_MONTHS,
    base_one_year_deadline,
)
from ..utils.base import Bundle
from ..utils.data_models import (
    Answer,
    CaseFacts,
    LinkKind,
    Plan,
    Step,
    StepLink,
    StepPriority,
    StepRole,
)
from ..utils.helpers import add_months, format_iso

BUNDLE_ID = "status-exception"

TPS_LINK = StepLink(
    "Temporary Protected Status",
    "https://www.uscis.gov/humanitarian/temporary-protected-status",
    LinkKind.GUIDE,
)


def _triggered(facts: CaseFacts, previous: Optional[Plan], today: date) -> bool:
    base = base_one_year_deadline(facts)
    if base is None or facts.has_filed or today <= base:
        return False
    return facts.has_tps == Answer.YES or facts.has_parole == Answer.YES


def _tps_steps(facts: CaseFacts) -> List[Step]:
    if facts.has_tps != Answer.YES:
        return []
    if facts.tps_expiration_date is None:
        return [
            Step.create(
                BUNDLE_ID,
                "find-tps-expiry",
                "Find your TPS expiration date",
                "Your filing window depends on when your TPS ended. Check your "
                "EAD card or approval notice",
                priority=StepPriority.HIGH,
                links=(TPS_LINK,),
            )
        ]

    latest = add_months(facts.tps_expiration_date, TPS_EXTENSION_MONTHS)
    return [
        Step.create(
            BUNDLE_ID,
            "tps-expiry-window",
            "File within the TPS exception window",
            "File as soon as possible after TPS ends. Aim for three months; "
            f"the latest reasonable date is {format_iso(latest)}",
            due_date=add_months(facts.tps_expiration_date, TPS_RECOMMENDED_MONTHS),
            priority=StepPriority.HIGH,
            links=(TPS_LINK,),
            role=StepRole.FILING_DEADLINE,
        )
    ]


def _parole_steps(facts: CaseFacts) -> List[Step]:
    if facts.has_parole != Answer.YES or facts.parole_expiration_date is None:
        return []
    return [
        Step.create(
            BUNDLE_ID,
            "parole-expiry-window",
            "File within the parole exception window",
            "File within a reasonable time after your parole ends",
            due_date=add_months(facts.parole_expiration_date, PAROLE_EXTENSION_MONTHS),
            priority=StepPriority.HIGH,
            role=StepRole.FILING_DEADLINE,
        )
    ]


def _generate(facts: CaseFacts, previous: Optional[Plan], today: date) -> List[Step]:
    return _tps_steps(facts) + _parole_steps(facts)


STATUS_EXCEPTION_BUNDLE = Bundle(
    id=BUNDLE_ID,
    name="Late Filing - Status Exception",
    description="Filing after the one-year deadline under a TPS or parole exception",
    priority=2,
    trigger=_triggered,
    generate=_generate,
)
