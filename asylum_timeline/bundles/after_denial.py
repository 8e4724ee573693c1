"""
Appeal to the Board of Immigration Appeals after a recorded denial.
"""

from datetime import date
from typing import List, Optional

from ..deadlines import APPEAL_WINDOW_DAYS
from ..utils.base import Bundle
from ..utils.data_models import CaseFacts, LinkKind, Plan, Step, StepLink, StepPriority
from ..utils.helpers import add_days

BUNDLE_ID = "after-denial"

BIA_LINK = StepLink(
    "BIA Information",
    "https://www.justice.gov/eoir/board-of-immigration-appeals",
    LinkKind.WEBSITE,
)


def _triggered(facts: CaseFacts, previous: Optional[Plan], today: date) -> bool:
    return facts.denial_recorded


def _generate(facts: CaseFacts, previous: Optional[Plan], today: date) -> List[Step]:
    if facts.decision_date is None:
        return []
    return [
        Step.create(
            BUNDLE_ID,
            "file-bia-appeal",
            "File appeal with BIA",
            "You have 30 days from the judge's decision to file Form EOIR-26 "
            "with the Board of Immigration Appeals",
            due_date=add_days(facts.decision_date, APPEAL_WINDOW_DAYS),
            priority=StepPriority.CRITICAL,
            links=(BIA_LINK,),
        ),
        Step.create(
            BUNDLE_ID,
            "bia-briefing-schedule",
            "Follow the BIA briefing schedule",
            "The BIA will send a briefing schedule. Submit your brief by the "
            "date it sets",
            priority=StepPriority.MEDIUM,
            links=(BIA_LINK,),
            show_after="file-bia-appeal",
        ),
    ]


AFTER_DENIAL_BUNDLE = Bundle(
    id=BUNDLE_ID,
    name="Appeal to BIA",
    description="Steps to appeal a denied asylum decision",
    priority=0,
    trigger=_triggered,
    generate=_generate,
)
