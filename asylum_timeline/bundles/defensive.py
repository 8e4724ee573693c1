"""
Defensive asylum bundle.

Active whenever the case is in Immigration Court proceedings. Court cases are
the most urgent track: missing a hearing results in a removal order.
"""

from datetime import date
from typing import List, Optional

from ..deadlines import facts_one_year_deadline, work_permit_eligible
from ..utils.base import Bundle
from ..utils.data_models import (
    CaseFacts,
    LinkKind,
    Plan,
    Step,
    StepLink,
    StepPriority,
    StepRole,
)
from ..utils.helpers import add_days

BUNDLE_ID = "defensive-starter"

HEARING_PREP_LEAD_DAYS = 14

EOIR_STATUS_LINK = StepLink(
    "EOIR Case Status", "https://portal.eoir.justice.gov/InfoSystem/Login", LinkKind.STATUS_CHECK
)
PRACTICE_MANUAL_LINK = StepLink(
    "Immigration Court Practice Manual",
    "https://www.justice.gov/eoir/immigration-court-practice-manual",
    LinkKind.GUIDE,
)


def _triggered(facts: CaseFacts, previous: Optional[Plan], today: date) -> bool:
    return facts.in_court


def _generate(facts: CaseFacts, previous: Optional[Plan], today: date) -> List[Step]:
    steps = [
        Step.create(
            BUNDLE_ID,
            "critical-court-warning",
            "CRITICAL: You MUST attend all hearings",
            "Failure to appear will result in an automatic deportation order",
            priority=StepPriority.CRITICAL,
        )
    ]

    if not facts.has_attorney:
        steps.append(
            Step.create(
                BUNDLE_ID,
                "find-court-attorney",
                "Find an attorney (URGENT)",
                "Legal representation is critical for Immigration Court proceedings",
                priority=StepPriority.CRITICAL,
                links=(
                    StepLink(
                        "Find Immigration Lawyer",
                        "https://www.immigrationadvocates.org/nonprofit/legaldirectory/",
                        LinkKind.WEBSITE,
                    ),
                ),
            )
        )

    hearing = facts.next_hearing_date
    if hearing:
        steps.append(
            Step.create(
                BUNDLE_ID,
                "master-calendar-hearing",
                "Master Calendar Hearing",
                "Court hearing to set the timeline and procedures. Bring all "
                "documents, an interpreter if needed, and your legal representative",
                due_date=hearing,
                priority=StepPriority.CRITICAL,
                links=(EOIR_STATUS_LINK, PRACTICE_MANUAL_LINK),
                role=StepRole.HEARING,
            )
        )
        steps.append(
            Step.create(
                BUNDLE_ID,
                "prepare-hearing-documents",
                "Prepare for hearing - gather documents",
                "Organize all evidence, translations, and supporting documents "
                "for court presentation",
                due_date=add_days(hearing, -HEARING_PREP_LEAD_DAYS),
                priority=StepPriority.HIGH,
            )
        )

    if not facts.has_filed:
        steps.append(
            Step.create(
                BUNDLE_ID,
                "file-i589-court",
                "File Form I-589 with Immigration Court",
                "Submit your asylum application to the court clerk within the "
                "one-year deadline, with a copy to the DHS attorney",
                due_date=facts_one_year_deadline(facts),
                priority=StepPriority.CRITICAL,
                links=(StepLink("Form I-589", "https://www.uscis.gov/i-589", LinkKind.FORM),),
                role=StepRole.FILING_DEADLINE,
            )
        )
    elif facts.i589_filing_date:
        steps.append(
            Step.create(
                BUNDLE_ID,
                "work-authorization",
                "Apply for work authorization (I-765)",
                "You can apply for a work permit 150 days after filing your asylum "
                "application",
                due_date=work_permit_eligible(facts.i589_filing_date),
                priority=StepPriority.MEDIUM,
                links=(StepLink("Form I-765", "https://www.uscis.gov/i-765", LinkKind.FORM),),
                role=StepRole.WORK_AUTHORIZATION,
            )
        )

    steps.extend(
        [
            Step.create(
                BUNDLE_ID,
                "evidence-submission-deadline",
                "Submit evidence by deadline",
                "Submit all supporting evidence and witness lists by the "
                "court-ordered deadline (typically 10-15 days before the individual hearing)",
                priority=StepPriority.CRITICAL,
                links=(PRACTICE_MANUAL_LINK,),
            ),
            Step.create(
                BUNDLE_ID,
                "witness-preparation",
                "Prepare witnesses",
                "If you have witnesses, prepare them for testimony and submit "
                "witness lists to the court by the deadline",
                priority=StepPriority.MEDIUM,
            ),
            Step.create(
                BUNDLE_ID,
                "individual-hearing",
                "Individual Hearing (Merits)",
                "Your asylum trial before an Immigration Judge, where you present "
                "your case and testify",
                priority=StepPriority.CRITICAL,
            ),
            Step.create(
                BUNDLE_ID,
                "post-hearing-wait",
                "Await judge's decision",
                "The judge will grant asylum, deny the case, or continue for further "
                "proceedings. The decision may be oral or written",
                priority=StepPriority.MEDIUM,
            ),
            Step.create(
                BUNDLE_ID,
                "change-of-venue",
                "Change of Venue (if needed)",
                "File form EOIR-33 if you need to transfer your case to a different "
                "court after moving",
                priority=StepPriority.LOW,
                links=(
                    StepLink(
                        "EOIR-33 Form",
                        "https://www.justice.gov/eoir/eoir-forms",
                        LinkKind.FORM,
                    ),
                ),
            ),
        ]
    )
    return steps


DEFENSIVE_BUNDLE = Bundle(
    id=BUNDLE_ID,
    name="Defensive Asylum (Immigration Court)",
    description="Steps for asylum cases in Immigration Court proceedings",
    priority=0,
    trigger=_triggered,
    generate=_generate,
)
