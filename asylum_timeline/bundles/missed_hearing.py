"""
Missed hearing bundle: in absentia removal order and motion to reopen.
"""

from datetime import date
from typing import List, Optional

from ..deadlines import MOTION_TO_REOPEN_DAYS
from ..utils.base import Bundle
from ..utils.data_models import CaseFacts, LinkKind, Plan, Step, StepLink, StepPriority
from ..utils.helpers import add_days

BUNDLE_ID = "missed-hearing"


def _triggered(facts: CaseFacts, previous: Optional[Plan], today: date) -> bool:
    return facts.has_missed_hearing


def _generate(facts: CaseFacts, previous: Optional[Plan], today: date) -> List[Step]:
    missed_on = facts.missed_hearing_date or facts.next_hearing_date
    motion_due = add_days(missed_on, MOTION_TO_REOPEN_DAYS) if missed_on else None

    return [
        Step.create(
            BUNDLE_ID,
            "in-absentia-order-info",
            "You may have an in absentia removal order",
            "When a hearing is missed the judge usually orders removal in your "
            "absence. Contact an attorney immediately",
            priority=StepPriority.CRITICAL,
        ),
        Step.create(
            BUNDLE_ID,
            "motion-to-reopen",
            "File a motion to reopen",
            "A motion to reopen based on exceptional circumstances must be filed "
            "within 180 days of the removal order",
            due_date=motion_due,
            priority=StepPriority.CRITICAL,
            links=(
                StepLink(
                    "Immigration Court Practice Manual",
                    "https://www.justice.gov/eoir/immigration-court-practice-manual",
                    LinkKind.GUIDE,
                ),
            ),
        ),
    ]


MISSED_HEARING_BUNDLE = Bundle(
    id=BUNDLE_ID,
    name="Missed Hearing - Motion to Reopen",
    description="Steps after missing an Immigration Court hearing",
    priority=0,
    trigger=_triggered,
    generate=_generate,
)
