"""
Appeal bundle for denied cases and for users who report that their case
needs an appeal.

When a decision date is known, the appeal deadline and the notice of appeal
are due 30 days after it. When the denial itself is recorded, the notice of
appeal is owned by the after-denial bundle, so this bundle only emits it
when no denial is on file.
"""

from datetime import date
from typing import List, Optional

from ..deadlines import APPEAL_WINDOW_DAYS
from ..utils.base import Bundle
from ..utils.data_models import (
    CaseFacts,
    CaseOutcome,
    LinkKind,
    Plan,
    Step,
    StepLink,
    StepPriority,
)
from ..utils.helpers import add_days

BUNDLE_ID = "appeal-case"

BIA_LINK = StepLink(
    "Board of Immigration Appeals",
    "https://www.justice.gov/eoir/board-of-immigration-appeals",
    LinkKind.WEBSITE,
)


def _triggered(facts: CaseFacts, previous: Optional[Plan], today: date) -> bool:
    return facts.needs_appeal or facts.case_outcome == CaseOutcome.DENIED


def _generate(facts: CaseFacts, previous: Optional[Plan], today: date) -> List[Step]:
    deadline = add_days(facts.decision_date, APPEAL_WINDOW_DAYS) if facts.decision_date else None
    steps = [
        Step.create(
            BUNDLE_ID,
            "appeal-deadline-warning",
            "Appeal deadline is 30 days from the decision",
            "The BIA must receive the notice of appeal within 30 days. Late "
            "appeals are almost always rejected",
            due_date=deadline,
            priority=StepPriority.CRITICAL,
        )
    ]
    if not facts.denial_recorded:
        steps.append(
            Step.create(
                BUNDLE_ID,
                "file-notice-of-appeal",
                "File notice of appeal (EOIR-26)",
                "Submit Form EOIR-26 with the $110 fee or a fee waiver request",
                due_date=deadline,
                priority=StepPriority.CRITICAL,
                links=(
                    StepLink("EOIR-26 Form", "https://www.justice.gov/eoir/eoir-forms", LinkKind.FORM),
                ),
            )
        )
    steps.extend(
        [
            Step.create(
                BUNDLE_ID,
                "request-transcript",
                "Request the hearing transcript",
                "The BIA prepares the transcript after the appeal is filed. Review "
                "it carefully for errors",
                priority=StepPriority.HIGH,
            ),
            Step.create(
                BUNDLE_ID,
                "prepare-appeal-brief",
                "Prepare the appeal brief",
                "Explain the legal and factual errors in the judge's decision by "
                "the briefing deadline",
                priority=StepPriority.CRITICAL,
                links=(BIA_LINK,),
                show_after="request-transcript",
            ),
            Step.create(
                BUNDLE_ID,
                "await-bia-decision",
                "Await BIA decision",
                "BIA decisions can take many months. You may remain in the U.S. "
                "while the appeal is pending",
                priority=StepPriority.MEDIUM,
            ),
            Step.create(
                BUNDLE_ID,
                "consider-federal-court",
                "Consider federal court review",
                "If the BIA denies the appeal, a petition for review may be filed "
                "with the federal court of appeals within 30 days",
                priority=StepPriority.MEDIUM,
                links=(
                    StepLink(
                        "Federal Court Immigration Appeals",
                        "https://www.uscourts.gov/services-forms/immigration-appeals",
                        LinkKind.GUIDE,
                    ),
                ),
            ),
            Step.create(
                BUNDLE_ID,
                "stay-of-removal",
                "Request a stay of removal if needed",
                "A stay may be needed to prevent removal while a federal appeal "
                "is pending",
                priority=StepPriority.CRITICAL,
            ),
        ]
    )
    return steps


APPEAL_CASE_BUNDLE = Bundle(
    id=BUNDLE_ID,
    name="Appeal Denied Asylum Case",
    description="Steps to appeal a denied asylum case to the BIA and beyond",
    priority=0,
    trigger=_triggered,
    generate=_generate,
)
