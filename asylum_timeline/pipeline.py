"""
Derivation pipeline stages.

Each stage is a pure function over steps and facts. The engine chains them in
a fixed order: select, generate, filter, merge, carry, update status, sort.
Stages return new Step objects and never mutate their inputs.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .utils.base import RuleTable
from .utils.data_models import CaseFacts, Plan, Step, StepPriority, StepStatus
from .utils.exceptions import RuleEvaluationError

_logger = logging.getLogger(__name__)

STATUS_ORDER = {
    StepStatus.OVERDUE: 0,
    StepStatus.PENDING: 1,
    StepStatus.COMPLETED: 2,
}

PRIORITY_ORDER = {
    StepPriority.CRITICAL: 0,
    StepPriority.HIGH: 1,
    StepPriority.MEDIUM: 2,
    StepPriority.LOW: 3,
}


def select_bundles(
    table: RuleTable,
    facts: CaseFacts,
    previous: Optional[Plan],
    today: date,
    logger: Optional[logging.Logger] = None,
) -> List[str]:
    """
    Evaluate every trigger in table order and return the active bundle ids.

    A trigger that raises is logged and treated as not triggered; the other
    bundles are still evaluated.

    Args:
        table: Rule table
        facts: Current case facts
        previous: Previously persisted plan, if any
        today: Derivation date
        logger: Logger for rule failures

    Returns:
        Active bundle ids in table order
    """
    logger = logger or _logger
    active = []
    for bundle in table:
        try:
            if bundle.trigger(facts, previous, today):
                active.append(bundle.id)
        except Exception as e:
            error = RuleEvaluationError(str(e), bundle_id=bundle.id, stage="trigger")
            logger.error(f"Bundle trigger failed: {error}")
    logger.debug(f"Selected {len(active)} bundles: {', '.join(active) or 'none'}")
    return active


def generate_steps(
    table: RuleTable,
    active_ids: Sequence[str],
    facts: CaseFacts,
    previous: Optional[Plan],
    today: date,
    logger: Optional[logging.Logger] = None,
) -> Tuple[List[Step], List[str]]:
    """
    Materialize the steps of every active bundle.

    A generator that raises, or that emits an id already taken, is dropped
    for this cycle along with all of its steps.

    Args:
        table: Rule table
        active_ids: Bundle ids returned by ``select_bundles``
        facts: Current case facts
        previous: Previously persisted plan, if any
        today: Derivation date
        logger: Logger for rule failures

    Returns:
        Tuple of (steps tagged with their bundle name, bundle ids that generated)
    """
    logger = logger or _logger
    steps: List[Step] = []
    generated: List[str] = []
    seen: Set[str] = set()

    for bundle_id in active_ids:
        bundle = table.get(bundle_id)
        if bundle is None:
            logger.warning(f"Unknown bundle id skipped: {bundle_id}")
            continue

        try:
            produced = list(bundle.generate(facts, previous, today))
        except Exception as e:
            error = RuleEvaluationError(str(e), bundle_id=bundle_id, stage="generate")
            logger.error(f"Bundle generator failed: {error}")
            continue

        ids = [step.id for step in produced]
        duplicates = sorted({i for i in ids if ids.count(i) > 1 or i in seen})
        if duplicates:
            error = RuleEvaluationError(
                f"Duplicate step ids: {', '.join(duplicates)}",
                bundle_id=bundle_id,
                stage="generate",
            )
            logger.error(f"Bundle generator rejected: {error}")
            continue

        seen.update(ids)
        steps.extend(replace(step, bundle_name=bundle.name) for step in produced)
        generated.append(bundle_id)

    logger.debug(f"Generated {len(steps)} steps from {len(generated)} bundles")
    return steps, generated


def _completed_ids(steps: Iterable[Step]) -> Set[str]:
    return {step.id for step in steps if step.status == StepStatus.COMPLETED}


def filter_visible_steps(
    candidates: Iterable[Step], previous_steps: Iterable[Step] = ()
) -> List[Step]:
    """Drop gated steps whose prerequisite is not completed in the previous plan."""
    completed = _completed_ids(previous_steps)
    return [
        step
        for step in candidates
        if step.show_after_step is None or step.show_after_step in completed
    ]


def merge_completed_steps(
    new_steps: Iterable[Step], previous_steps: Iterable[Step] = ()
) -> List[Step]:
    """
    Carry user progress from the previous plan onto regenerated steps.

    Completion status and date are copied from a previous step with the same
    id. A due date the user moved on an editable step is kept as long as the
    regenerated step is still editable.

    Args:
        new_steps: Freshly generated (and filtered) steps
        previous_steps: Steps of the previously persisted plan

    Returns:
        Merged steps in the input order
    """
    previous_by_id: Dict[str, Step] = {step.id: step for step in previous_steps}
    merged = []
    for step in new_steps:
        old = previous_by_id.get(step.id)
        if old is None:
            merged.append(step)
            continue
        if old.status == StepStatus.COMPLETED:
            step = replace(step, status=StepStatus.COMPLETED, completed_date=old.completed_date)
        if old.date_overridden and old.is_editable_date and step.is_editable_date:
            step = replace(step, due_date=old.due_date, date_overridden=True)
        merged.append(step)
    return merged


def carry_completed_steps(
    merged: Sequence[Step], previous_steps: Iterable[Step] = ()
) -> List[Step]:
    """
    Keep completed history for steps that are no longer generated.

    Incomplete steps whose bundle stopped producing them are not carried,
    and neither are gated steps whose prerequisite is no longer completed.
    """
    previous_steps = list(previous_steps)
    completed = _completed_ids(previous_steps)
    present = {step.id for step in merged}
    carried = [
        step
        for step in previous_steps
        if step.status == StepStatus.COMPLETED
        and step.id not in present
        and (step.show_after_step is None or step.show_after_step in completed)
    ]
    return list(merged) + carried


def resolve_status(step: Step, today: date) -> StepStatus:
    if step.status == StepStatus.COMPLETED:
        return StepStatus.COMPLETED
    if step.due_date is not None and today > step.due_date:
        return StepStatus.OVERDUE
    return StepStatus.PENDING


def update_step_statuses(steps: Iterable[Step], today: date) -> List[Step]:
    """Recompute pending/overdue for every non-completed step."""
    updated = []
    for step in steps:
        status = resolve_status(step, today)
        updated.append(step if status == step.status else replace(step, status=status))
    return updated


def step_sort_key(step: Step) -> tuple:
    return (
        STATUS_ORDER[step.status],
        PRIORITY_ORDER[step.priority],
        0 if step.due_date is not None else 1,
        step.due_date or date.max,
        step.title,
        step.id,
    )


def sort_steps(steps: Iterable[Step]) -> List[Step]:
    """
    Order steps by status, priority, due date (dated first) and title.

    The step id is the last key, so the result does not depend on the input
    order even when two steps share a title.
    """
    return sorted(steps, key=step_sort_key)
