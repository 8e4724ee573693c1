"""
Phase summaries: the plan's steps grouped by bundle.

This is the only place where a bundle's ``priority`` matters. Steps
themselves are always ordered by the ranking sorter.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from .deadlines import days_until
from .pipeline import sort_steps
from .utils.base import RuleTable
from .utils.data_models import Plan, Step, StepLink, _to_dict

MAX_NEXT_STEPS = 3


@dataclass(frozen=True)
class PhaseSummary:
    id: str
    title: str
    status: str
    description: str
    key_action: Optional[str] = None
    deadline: Optional[date] = None
    days_until_deadline: Optional[int] = None
    next_steps: Tuple[str, ...] = ()
    resources: Tuple[StepLink, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return _to_dict(self)


def _resources(steps: List[Step]) -> Tuple[StepLink, ...]:
    seen = set()
    links = []
    for step in steps:
        for link in step.links:
            if link.url not in seen:
                seen.add(link.url)
                links.append(link)
    return tuple(links)


def build_phases(plan: Plan, table: RuleTable, today: date) -> List[PhaseSummary]:
    """
    Summarize each bundle that has steps in the plan.

    Phases are ordered by bundle priority, then rule-table order. The first
    phase with open work is ``current``; fully completed phases are
    ``completed`` and the rest are ``upcoming``.

    Args:
        plan: Derived plan
        table: Rule table the plan was derived from
        today: Reference date for days-until-deadline

    Returns:
        Ordered list of phase summaries
    """
    grouped: Dict[str, List[Step]] = {}
    for step in plan.steps:
        grouped.setdefault(step.bundle_id, []).append(step)

    bundles = [table.get(bundle_id) for bundle_id in grouped if bundle_id in table]
    bundles.sort(key=lambda bundle: (bundle.priority, table.order_of(bundle.id)))

    phases = []
    current_assigned = False
    for bundle in bundles:
        steps = sort_steps(grouped[bundle.id])
        open_steps = [step for step in steps if not step.is_completed]

        if not open_steps:
            status = "completed"
        elif not current_assigned:
            status = "current"
            current_assigned = True
        else:
            status = "upcoming"

        dated = [step.due_date for step in open_steps if step.due_date]
        deadline = min(dated) if dated else None

        phases.append(
            PhaseSummary(
                id=bundle.id,
                title=bundle.name,
                status=status,
                description=bundle.description,
                key_action=open_steps[0].title if open_steps else None,
                deadline=deadline,
                days_until_deadline=days_until(deadline, today) if deadline else None,
                next_steps=tuple(step.title for step in open_steps[:MAX_NEXT_STEPS]),
                resources=_resources(steps),
            )
        )
    return phases
