"""
Steps after asylum has been granted.
"""

from datetime import date
from typing import List, Optional

from ..deadlines import GREEN_CARD_WAIT_YEARS
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
from ..utils.helpers import add_years

BUNDLE_ID = "post-grant"


def _triggered(facts: CaseFacts, previous: Optional[Plan], today: date) -> bool:
    return facts.case_outcome == CaseOutcome.ASYLUM_GRANTED


def _generate(facts: CaseFacts, previous: Optional[Plan], today: date) -> List[Step]:
    green_card_due = (
        add_years(facts.decision_date, GREEN_CARD_WAIT_YEARS) if facts.decision_date else None
    )
    return [
        Step.create(
            BUNDLE_ID,
            "apply-ssn-benefits",
            "Apply for Social Security card and benefits",
            "Asylees can get an unrestricted Social Security card and may "
            "qualify for refugee benefits",
            priority=StepPriority.MEDIUM,
            links=(StepLink("Social Security Number", "https://www.ssa.gov/ssnumber/", LinkKind.WEBSITE),),
        ),
        Step.create(
            BUNDLE_ID,
            "apply-green-card",
            "Apply for a green card (I-485)",
            "You can apply for permanent residence one year after asylum is granted",
            due_date=green_card_due,
            priority=StepPriority.HIGH,
            links=(StepLink("Form I-485", "https://www.uscis.gov/i-485", LinkKind.FORM),),
        ),
        Step.create(
            BUNDLE_ID,
            "derivative-family-petitions",
            "Petition for family members (I-730)",
            "File Form I-730 within two years of the grant for a spouse or "
            "unmarried children under 21",
            priority=StepPriority.MEDIUM,
            links=(StepLink("Form I-730", "https://www.uscis.gov/i-730", LinkKind.FORM),),
        ),
    ]


POST_GRANT_BUNDLE = Bundle(
    id=BUNDLE_ID,
    name="After Asylum Approval",
    description="Benefits and next steps after an asylum grant",
    priority=3,
    trigger=_triggered,
    generate=_generate,
)
