"""
Command-line interface for the Asylum Timeline library.
"""

import argparse
import json
import logging
import sys
from typing import Iterable, List

from . import __version__
from .bundles import DEFAULT_BUNDLES
from .engine import EditResult, TimelineEngine
from .storage import PlanStore, load_facts
from .utils.data_models import Alert, Plan, Step
from .utils.exceptions import TimelineError
from .utils.helpers import setup_logger


def format_step_line(step: Step) -> str:
    due = step.due_date.isoformat() if step.due_date else "no date"
    return f"[{step.status.value:9}] {step.title} ({due}, {step.priority.value}) - {step.id}"


def format_alert_line(alert: Alert) -> str:
    parts = [f"[{alert.type.value}] {alert.title}"]
    if alert.days_left is not None:
        parts.append(f"({alert.days_left} days)")
    return " ".join(parts) + f"\n    {alert.message}"


def format_plan_output(plan: Plan, format_type: str = "text") -> str:
    """Format a plan for output."""
    if format_type == "json":
        return plan.to_json()

    output = []
    output.append(f"Updated: {plan.last_updated.isoformat() if plan.last_updated else '-'}")
    output.append(f"Active bundles: {', '.join(plan.active_bundle_ids) or 'none'}")
    if plan.deadlines and plan.deadlines.one_year_deadline:
        output.append(f"One-year deadline: {plan.deadlines.one_year_deadline.isoformat()}")
    output.append("-" * 80)
    output.append("Steps:")
    output.extend(f"  {format_step_line(step)}" for step in plan.steps)
    if plan.alerts:
        output.append("-" * 80)
        output.append("Alerts:")
        output.extend(f"  {format_alert_line(alert)}" for alert in plan.alerts)
    if plan.warnings:
        output.append("-" * 80)
        output.append("Warnings:")
        output.extend(f"  {warning}" for warning in plan.warnings)
    if plan.next_steps:
        output.append("-" * 80)
        output.append("Next steps:")
        output.extend(f"  - {item}" for item in plan.next_steps)
    return "\n".join(output)


def format_steps_output(steps: Iterable[Step], format_type: str = "text") -> str:
    steps = list(steps)
    if format_type == "json":
        return json.dumps([step.to_dict() for step in steps], indent=2, ensure_ascii=False)
    if not steps:
        return "No steps."
    return "\n".join(format_step_line(step) for step in steps)


def format_alerts_output(alerts: Iterable[Alert], format_type: str = "text") -> str:
    alerts = list(alerts)
    if format_type == "json":
        return json.dumps([alert.to_dict() for alert in alerts], indent=2, ensure_ascii=False)
    return "\n".join(format_alert_line(alert) for alert in alerts)


def _emit(text: str, args) -> None:
    print(text)
    if getattr(args, "output", None):
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text + "\n")


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _engine(args) -> TimelineEngine:
    return TimelineEngine(log_level=args.verbose)


def _load_plan(path: str) -> Plan:
    plan = PlanStore(path).load()
    if plan is None:
        raise TimelineError(f"No plan found at {path}")
    return plan


def _apply_edit(args, store: PlanStore, result: EditResult) -> None:
    if not result.ok:
        _fail(result.error)
    store.save(result.plan)
    _emit(format_plan_output(result.plan, args.format), args)


def derive_command(args) -> None:
    """Derive a plan from a facts file."""
    logger = setup_logger("cli", level=args.verbose)

    try:
        facts = load_facts(args.facts)
        store = PlanStore(args.plan) if args.plan else None
        previous = store.load() if store else None

        plan = _engine(args).derive_plan(facts, previous, today=args.today)

        if store:
            store.save(plan)
            logger.info(f"Plan saved to {args.plan}")
        _emit(format_plan_output(plan, args.format), args)

    except (TimelineError, ValueError) as e:
        logger.error(f"Derivation failed: {str(e)}")
        _fail(str(e))


def complete_command(args) -> None:
    """Mark a step complete (or incomplete with --undo)."""
    logger = setup_logger("cli", level=args.verbose)

    try:
        store = PlanStore(args.plan)
        result = _engine(args).mark_step_complete(
            _load_plan(args.plan), args.step_id, today=args.today, completed=not args.undo
        )
        _apply_edit(args, store, result)

    except (TimelineError, ValueError) as e:
        logger.error(f"Completion failed: {str(e)}")
        _fail(str(e))


def set_date_command(args) -> None:
    """Move the due date of an editable step."""
    logger = setup_logger("cli", level=args.verbose)

    try:
        store = PlanStore(args.plan)
        result = _engine(args).update_step_due_date(
            _load_plan(args.plan), args.step_id, args.date, today=args.today
        )
        _apply_edit(args, store, result)

    except (TimelineError, ValueError) as e:
        logger.error(f"Date update failed: {str(e)}")
        _fail(str(e))


def alerts_command(args) -> None:
    """Print the alerts of a stored plan."""
    logger = setup_logger("cli", level=args.verbose)

    try:
        engine = _engine(args)
        alerts = engine.get_alerts(_load_plan(args.plan), today=args.today)
        _emit(format_alerts_output(alerts, args.format), args)

    except (TimelineError, ValueError) as e:
        logger.error(f"Alert listing failed: {str(e)}")
        _fail(str(e))


def upcoming_command(args) -> None:
    """Print steps due soon."""
    logger = setup_logger("cli", level=args.verbose)

    try:
        engine = _engine(args)
        steps = engine.get_upcoming_steps(
            _load_plan(args.plan), today=args.today, within_days=args.days
        )
        _emit(format_steps_output(steps, args.format), args)

    except (TimelineError, ValueError) as e:
        logger.error(f"Upcoming listing failed: {str(e)}")
        _fail(str(e))


def list_bundles_command(args) -> None:
    """List the rule table."""
    print("Available bundles:")
    print("=" * 50)

    for bundle in DEFAULT_BUNDLES:
        print(f"{bundle.id:20} - {bundle.name} (priority {bundle.priority})")


def _add_common(parser: argparse.ArgumentParser, with_today: bool = True) -> None:
    if with_today:
        parser.add_argument("--today", help="Reference date (YYYY-MM-DD)", type=str)
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format",
    )
    parser.add_argument("--output", "-o", help="Output file", type=str)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="asylum-timeline",
        description="Asylum Timeline - case deadline planner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  asylum-timeline derive facts.json --plan plan.json
  asylum-timeline complete plan.json affirmative-starter:file-i589
  asylum-timeline set-date plan.json affirmative-starter:file-i589 2025-03-01
  asylum-timeline upcoming plan.json --days 60
  asylum-timeline bundles
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"Asylum Timeline {__version__}"
    )
    parser.add_argument(
        "--verbose", "-v", action="count", default=0, help="Increase verbosity"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Derive command
    derive_parser = subparsers.add_parser("derive", help="Derive a plan from case facts")
    derive_parser.add_argument("facts", help="Case facts JSON file")
    derive_parser.add_argument("--plan", help="Plan JSON file to update", type=str)
    _add_common(derive_parser)
    derive_parser.set_defaults(func=derive_command)

    # Complete command
    complete_parser = subparsers.add_parser("complete", help="Mark a step complete")
    complete_parser.add_argument("plan", help="Plan JSON file")
    complete_parser.add_argument("step_id", help="Step ID")
    complete_parser.add_argument(
        "--undo", action="store_true", help="Mark the step incomplete again"
    )
    _add_common(complete_parser)
    complete_parser.set_defaults(func=complete_command)

    # Set-date command
    date_parser = subparsers.add_parser("set-date", help="Change an editable due date")
    date_parser.add_argument("plan", help="Plan JSON file")
    date_parser.add_argument("step_id", help="Step ID")
    date_parser.add_argument("date", help="New due date (YYYY-MM-DD)")
    _add_common(date_parser)
    date_parser.set_defaults(func=set_date_command)

    # Alerts command
    alerts_parser = subparsers.add_parser("alerts", help="Show alerts for a plan")
    alerts_parser.add_argument("plan", help="Plan JSON file")
    _add_common(alerts_parser)
    alerts_parser.set_defaults(func=alerts_command)

    # Upcoming command
    upcoming_parser = subparsers.add_parser("upcoming", help="Show steps due soon")
    upcoming_parser.add_argument("plan", help="Plan JSON file")
    upcoming_parser.add_argument(
        "--days", help="Window in days", type=int, default=30
    )
    _add_common(upcoming_parser)
    upcoming_parser.set_defaults(func=upcoming_command)

    # Bundles command
    bundles_parser = subparsers.add_parser("bundles", help="List available bundles")
    bundles_parser.set_defaults(func=list_bundles_command)

    return parser


def main(argv: List[str] = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Set verbosity level
    if args.verbose >= 2:
        verbosity = logging.DEBUG
    elif args.verbose >= 1:
        verbosity = logging.INFO
    else:
        verbosity = logging.WARNING

    args.verbose = verbosity

    # Execute command
    args.func(args)


if __name__ == "__main__":
    main()
