"""
Affirmative asylum bundle.

Covers cases that are not in Immigration Court: filing Form I-589 with the
USCIS Asylum Office within the one-year deadline, then the biometrics,
work authorization and interview track that follows a filing.
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

BUNDLE_ID = "affirmative-starter"

FILING_FEE_EFFECTIVE_DATE = date(2025, 7, 22)
FILING_TARGET_LEAD_DAYS = 30
EVIDENCE_LEAD_DAYS = 60
INTERVIEW_PREP_LEAD_DAYS = 14

I589_LINKS = (
    StepLink(
        "Form I-589 (PDF)",
        "https://www.uscis.gov/sites/default/files/document/forms/i-589.pdf",
        LinkKind.FORM,
    ),
    StepLink(
        "I-589 Instructions",
        "https://www.uscis.gov/sites/default/files/document/forms/i-589instr.pdf",
        LinkKind.GUIDE,
    ),
    StepLink(
        "USCIS Asylum Office Locations",
        "https://www.uscis.gov/about-us/find-a-uscis-office/asylum-offices",
        LinkKind.WEBSITE,
    ),
)

ATTORNEY_LINKS = (
    StepLink(
        "Find Pro Bono Legal Services",
        "https://www.immigrationadvocates.org/nonprofit/legaldirectory/",
        LinkKind.WEBSITE,
    ),
    StepLink(
        "American Immigration Lawyers Association",
        "https://www.aila.org/about/member-directory",
        LinkKind.WEBSITE,
    ),
)

I765_LINK = StepLink("Form I-765 (EAD Application)", "https://www.uscis.gov/i-765", LinkKind.FORM)


def _triggered(facts: CaseFacts, previous: Optional[Plan], today: date) -> bool:
    return not facts.in_court and facts.entry_date is not None


def _find_attorney(facts: CaseFacts) -> List[Step]:
    if facts.has_attorney:
        return []
    return [
        Step.create(
            BUNDLE_ID,
            "find-attorney",
            "Find an attorney",
            "Find a qualified immigration attorney. Legal representation "
            "significantly improves success rates",
            priority=StepPriority.HIGH,
            links=ATTORNEY_LINKS,
        )
    ]


def _interview_steps(facts: CaseFacts, gate: Optional[str]) -> List[Step]:
    interview = facts.interview_date
    prep_due = add_days(interview, -INTERVIEW_PREP_LEAD_DAYS) if interview else None
    return [
        Step.create(
            BUNDLE_ID,
            "await-interview-notice",
            "Await interview scheduling notice",
            "After filing, USCIS will mail you an interview notice. This "
            "typically takes 2-4 months",
            priority=StepPriority.LOW,
            show_after=gate,
        ),
        Step.create(
            BUNDLE_ID,
            "prepare-for-interview",
            "Prepare for asylum interview",
            "Practice telling your story clearly and consistently. Review all "
            "evidence with your attorney and prepare for detailed questions",
            due_date=prep_due,
            priority=StepPriority.HIGH,
            links=(
                StepLink(
                    "Interview Preparation Guide",
                    "https://www.uscis.gov/humanitarian/refugees-and-asylum/asylum",
                    LinkKind.GUIDE,
                ),
            ),
            show_after=gate,
        ),
        Step.create(
            BUNDLE_ID,
            "asylum-interview",
            "Attend asylum interview",
            "Your asylum interview with USCIS. Arrive early, bring an interpreter "
            "if needed, and bring all original documents",
            due_date=interview,
            priority=StepPriority.CRITICAL,
            links=(
                StepLink(
                    "What to Expect at Interview",
                    "https://www.uscis.gov/humanitarian/refugees-and-asylum/asylum/the-asylum-interview",
                    LinkKind.GUIDE,
                ),
            ),
            show_after=gate,
            role=StepRole.INTERVIEW,
        ),
    ]


def _unfiled_steps(facts: CaseFacts, today: date) -> List[Step]:
    deadline = facts_one_year_deadline(facts)
    evidence_due = add_days(deadline, -EVIDENCE_LEAD_DAYS)

    steps = [
        Step.create(
            BUNDLE_ID,
            "one-year-deadline",
            "One-year asylum filing deadline",
            "You must file your asylum application within one year of arrival "
            "unless you qualify for an exception",
            due_date=deadline,
            priority=StepPriority.CRITICAL,
            links=(StepLink("Form I-589 Instructions", "https://www.uscis.gov/i-589", LinkKind.FORM),),
            role=StepRole.FILING_DEADLINE,
        ),
        Step.create(
            BUNDLE_ID,
            "file-i589",
            "File asylum application (I-589)",
            "Submit Form I-589 to the USCIS Asylum Office with supporting "
            "documents and the filing fee (if applicable)",
            due_date=add_days(deadline, -FILING_TARGET_LEAD_DAYS),
            priority=StepPriority.HIGH,
            links=I589_LINKS,
            is_editable_date=True,
        ),
    ]

    if today >= FILING_FEE_EFFECTIVE_DATE:
        steps.append(
            Step.create(
                BUNDLE_ID,
                "filing-fee-warning",
                "Filing fee required: $100 + $100/year pending",
                "New asylum filing fees are now in effect",
                priority=StepPriority.MEDIUM,
            )
        )

    steps.extend(_find_attorney(facts))
    steps.extend(
        [
            Step.create(
                BUNDLE_ID,
                "gather-personal-evidence",
                "Gather personal evidence",
                "Collect identity documents, medical records, police reports, "
                "photos, and other personal evidence of persecution",
                due_date=evidence_due,
                priority=StepPriority.HIGH,
            ),
            Step.create(
                BUNDLE_ID,
                "gather-country-conditions",
                "Research country conditions",
                "Gather evidence about persecution in your home country from "
                "reliable sources like State Department and UN reports",
                due_date=evidence_due,
                priority=StepPriority.MEDIUM,
                links=(
                    StepLink(
                        "UNHCR Reports",
                        "https://www.unhcr.org/research-and-publications",
                        LinkKind.WEBSITE,
                    ),
                ),
            ),
            Step.create(
                BUNDLE_ID,
                "prepare-personal-statement",
                "Write personal statement",
                "Prepare a detailed written statement describing the persecution "
                "experienced and feared. Work with an attorney if possible",
                due_date=evidence_due,
                priority=StepPriority.HIGH,
            ),
        ]
    )

    # Interview track appears once the user marks the filing as done
    steps.extend(_interview_steps(facts, gate="file-i589"))
    return steps


def _filed_steps(facts: CaseFacts) -> List[Step]:
    eligible = work_permit_eligible(facts.i589_filing_date) if facts.i589_filing_date else None
    steps = [
        Step.create(
            BUNDLE_ID,
            "biometrics-appointment",
            "Attend biometrics appointment",
            "Expect a biometrics notice approximately 2-6 weeks after filing",
            priority=StepPriority.HIGH,
        ),
        Step.create(
            BUNDLE_ID,
            "work-authorization",
            "Apply for work authorization (I-765)",
            "You can apply for a work permit 150 days after filing your asylum "
            "application",
            due_date=eligible,
            priority=StepPriority.MEDIUM,
            links=(I765_LINK,),
            role=StepRole.WORK_AUTHORIZATION,
        ),
    ]
    steps.extend(_find_attorney(facts))
    steps.extend(_interview_steps(facts, gate=None))
    return steps


def _generate(facts: CaseFacts, previous: Optional[Plan], today: date) -> List[Step]:
    if facts.entry_date is None:
        return []
    if facts.has_filed:
        return _filed_steps(facts)
    return _unfiled_steps(facts, today)


AFFIRMATIVE_BUNDLE = Bundle(
    id=BUNDLE_ID,
    name="Affirmative Asylum Application",
    description="Steps for filing asylum with USCIS (not in court)",
    priority=1,
    trigger=_triggered,
    generate=_generate,
)
