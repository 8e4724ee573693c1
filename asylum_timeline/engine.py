"""
Timeline engine for the Asylum Timeline library.

The engine is stateless between calls: every operation takes a Plan and
returns a new one. Loading and saving plans is the caller's job.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from .advisories import (
    CourtCaseSummary,
    build_advisories,
    court_case_summary,
    requires_immediate_legal_attention,
)
from .alerts import AlertThresholds, compile_alerts
from .bundles import DEFAULT_BUNDLES
from .deadlines import calculate_deadlines
from .phases import PhaseSummary, build_phases
from .pipeline import (
    carry_completed_steps,
    filter_visible_steps,
    generate_steps,
    merge_completed_steps,
    resolve_status,
    select_bundles,
    sort_steps,
    step_sort_key,
    update_step_statuses,
)
from .utils.base import Bundle, RuleTable
from .utils.data_models import (
    Alert,
    CaseFacts,
    DeadlineCalculation,
    Plan,
    Step,
    StepStatus,
)
from .utils.exceptions import InvalidEditError
from .utils.helpers import add_days, parse_date, setup_logger


@dataclass(frozen=True)
class EditResult:
    """
    Outcome of a plan edit.

    When ``ok`` is False the edit was rejected, ``plan`` is the unchanged
    input and ``error`` says why.
    """

    ok: bool
    plan: Plan
    error: Optional[str] = None


class TimelineEngine:
    """
    Derives and edits case plans.

    Pipeline for every derivation: select bundles, generate steps, filter by
    visibility, merge completions from the previous plan, update statuses,
    sort, compile alerts.
    """

    def __init__(
        self,
        bundles: Union[RuleTable, Iterable[Bundle], None] = None,
        today_provider: Optional[Callable[[], date]] = None,
        thresholds: Optional[AlertThresholds] = None,
        upcoming_days: int = 30,
        log_level: int = logging.INFO,
    ):
        """
        Initialize the engine.

        Args:
            bundles: Rule table (defaults to the built-in bundles)
            today_provider: Callable returning today's date
            thresholds: Alert severity thresholds
            upcoming_days: Default window for ``get_upcoming_steps``
            log_level: Logging level for the engine logger
        """
        if bundles is None:
            self.bundles = DEFAULT_BUNDLES
        elif isinstance(bundles, RuleTable):
            self.bundles = bundles
        else:
            self.bundles = RuleTable(bundles)

        self.today_provider = today_provider or date.today
        self.thresholds = thresholds or AlertThresholds()
        self.upcoming_days = upcoming_days

        # Set up logging
        self.logger = setup_logger(f"{self.__class__.__name__}", level=log_level)

    def _today(self, today: Union[date, str, None]) -> date:
        return parse_date(today) or self.today_provider()

    def derive_plan(
        self,
        facts: Union[CaseFacts, Dict[str, Any]],
        previous_plan: Optional[Plan] = None,
        today: Union[date, str, None] = None,
    ) -> Plan:
        """
        Fully re-derive a plan from case facts.

        Completed steps of ``previous_plan`` stay completed, including steps
        whose bundle no longer triggers. Incomplete steps that are no longer
        generated are dropped.

        Args:
            facts: Case facts (a raw dictionary is validated first)
            previous_plan: Previously persisted plan, if any
            today: Derivation date (defaults to the today provider)

        Returns:
            A new Plan

        Raises:
            MalformedFactsError: If ``facts`` is a dictionary that fails validation
        """
        if not isinstance(facts, CaseFacts):
            facts = CaseFacts.from_dict(facts)
        today = self._today(today)
        previous_steps = previous_plan.steps if previous_plan else ()

        active = select_bundles(self.bundles, facts, previous_plan, today, logger=self.logger)
        generated, active = generate_steps(
            self.bundles, active, facts, previous_plan, today, logger=self.logger
        )

        visible = filter_visible_steps(generated, previous_steps)
        merged = merge_completed_steps(visible, previous_steps)
        merged = carry_completed_steps(merged, previous_steps)
        steps = sort_steps(update_step_statuses(merged, today))

        advisories = build_advisories(facts, today)
        plan = Plan(
            case_facts=facts,
            active_bundle_ids=tuple(active),
            steps=tuple(steps),
            last_updated=today,
            deadlines=calculate_deadlines(facts),
            display_cards=advisories.cards,
            warnings=advisories.warnings,
            next_steps=advisories.next_steps,
        )
        plan = replace(plan, alerts=tuple(compile_alerts(facts, plan, today, self.thresholds)))

        self.logger.debug(
            f"Filtered {len(generated) - len(visible)} gated steps, "
            f"carried {len(merged) - len(visible)} completed steps"
        )
        self.logger.info(
            f"Derived plan with {len(plan.steps)} steps and {len(plan.alerts)} alerts "
            f"from bundles: {', '.join(active) or 'none'}"
        )
        return plan

    def refresh_plan(self, plan: Plan, today: Union[date, str, None] = None) -> Plan:
        """Recompute statuses, order and alerts without regenerating steps."""
        today = self._today(today)
        steps = sort_steps(update_step_statuses(plan.steps, today))
        refreshed = replace(plan, steps=tuple(steps), last_updated=today)
        alerts = compile_alerts(plan.case_facts, refreshed, today, self.thresholds)
        return replace(refreshed, alerts=tuple(alerts))

    def _reject(self, plan: Plan, error: InvalidEditError) -> EditResult:
        self.logger.warning(f"Edit rejected: {error}")
        return EditResult(ok=False, plan=plan, error=str(error))

    def mark_step_complete(
        self,
        plan: Plan,
        step_id: str,
        today: Union[date, str, None] = None,
        completed: bool = True,
    ) -> EditResult:
        """
        Mark a step completed (or un-mark it) and re-derive the plan.

        Re-deriving reveals steps gated on the completed one. Marking a step
        that is already completed keeps its original completion date.

        Args:
            plan: Current plan
            step_id: Id of the step to change
            today: Completion date (defaults to the today provider)
            completed: False to return the step to pending/overdue

        Returns:
            EditResult with the re-derived plan
        """
        today = self._today(today)
        step = plan.get_step(step_id)
        if step is None:
            return self._reject(plan, InvalidEditError("Unknown step", step_id=step_id))

        if completed:
            if step.is_completed:
                changed = step
            else:
                changed = replace(step, status=StepStatus.COMPLETED, completed_date=today)
        else:
            changed = replace(step, status=StepStatus.PENDING, completed_date=None)

        interim = replace(
            plan,
            steps=tuple(changed if s.id == step_id else s for s in plan.steps),
        )
        self.logger.info(f"Step {step_id} marked {'complete' if completed else 'incomplete'}")
        return EditResult(ok=True, plan=self.derive_plan(plan.case_facts, interim, today))

    def update_step_due_date(
        self,
        plan: Plan,
        step_id: str,
        new_date: Union[date, str],
        today: Union[date, str, None] = None,
    ) -> EditResult:
        """
        Move the due date of an editable step.

        The user's date survives later re-derivations while the step stays
        editable.

        Args:
            plan: Current plan
            step_id: Id of the step to change
            new_date: New due date
            today: Reference date for the status update

        Returns:
            EditResult with the updated plan
        """
        today = self._today(today)
        step = plan.get_step(step_id)
        if step is None:
            return self._reject(plan, InvalidEditError("Unknown step", step_id=step_id))
        if not step.is_editable_date:
            return self._reject(
                plan, InvalidEditError("Step due date is not editable", step_id=step_id)
            )
        try:
            due = parse_date(new_date)
        except ValueError as e:
            return self._reject(plan, InvalidEditError(str(e), step_id=step_id))
        if due is None:
            return self._reject(plan, InvalidEditError("A due date is required", step_id=step_id))

        changed = replace(step, due_date=due, date_overridden=True)
        changed = replace(changed, status=resolve_status(changed, today))
        edited = replace(
            plan,
            steps=tuple(changed if s.id == step_id else s for s in plan.steps),
        )
        self.logger.info(f"Step {step_id} due date moved to {due.isoformat()}")
        return EditResult(ok=True, plan=self.refresh_plan(edited, today))

    def get_alerts(
        self,
        plan: Plan,
        facts: Optional[CaseFacts] = None,
        today: Union[date, str, None] = None,
    ) -> List[Alert]:
        return compile_alerts(facts or plan.case_facts, plan, self._today(today), self.thresholds)

    def get_steps_by_bundle(self, plan: Plan, bundle_id: str) -> List[Step]:
        return [step for step in plan.steps if step.bundle_id == bundle_id]

    def get_overdue_steps(self, plan: Plan, today: Union[date, str, None] = None) -> List[Step]:
        """Steps past their due date as of ``today``, in plan order."""
        today = self._today(today)
        return [
            step for step in plan.steps if resolve_status(step, today) == StepStatus.OVERDUE
        ]

    def get_upcoming_steps(
        self,
        plan: Plan,
        today: Union[date, str, None] = None,
        within_days: Optional[int] = None,
    ) -> List[Step]:
        """
        Open dated steps due within the window, overdue ones included.

        Args:
            plan: Current plan
            today: Reference date
            within_days: Window length (defaults to ``upcoming_days``)

        Returns:
            Steps ordered by due date, with statuses as of ``today``
        """
        today = self._today(today)
        window = self.upcoming_days if within_days is None else within_days
        horizon = add_days(today, window)
        upcoming = [
            step
            for step in plan.steps
            if not step.is_completed and step.due_date is not None and step.due_date <= horizon
        ]
        upcoming = update_step_statuses(upcoming, today)
        return sorted(upcoming, key=lambda step: (step.due_date, step_sort_key(step)))

    def get_phases(self, plan: Plan, today: Union[date, str, None] = None) -> List[PhaseSummary]:
        return build_phases(plan, self.bundles, self._today(today))

    def get_deadlines(self, facts: CaseFacts) -> DeadlineCalculation:
        return calculate_deadlines(facts)

    def requires_immediate_legal_attention(
        self, plan: Plan, today: Union[date, str, None] = None
    ) -> bool:
        return requires_immediate_legal_attention(plan.case_facts, self._today(today))

    def get_court_case_summary(
        self, plan: Plan, today: Union[date, str, None] = None
    ) -> CourtCaseSummary:
        return court_case_summary(plan.case_facts, self._today(today))
