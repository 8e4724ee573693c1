"""
Alert compiler for the Asylum Timeline library.

Alerts are derived data: they are rebuilt in full from the facts and the
current steps every time a plan is derived or refreshed.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from .deadlines import days_until, facts_one_year_deadline
from .utils.data_models import (
    Alert,
    AlertType,
    CaseFacts,
    Plan,
    Step,
    StepRole,
    StepStatus,
)
from .utils.helpers import format_date

DISCLAIMER_TITLE = "Legal Information Disclaimer"
DISCLAIMER_MESSAGE = (
    "This app provides general information only and is not legal advice. "
    "Immigration law is complex and changes frequently. Always consult with a "
    "qualified immigration attorney for your specific situation."
)


@dataclass(frozen=True)
class AlertThresholds:
    """
    Day counts that control alert severity.

    Attributes:
        critical_days: Steps due in fewer days (or past due) are critical
        warning_days: Steps due in fewer days are warnings
        deadline_warning_days: Window for the one-year deadline warning
        expiry_warning_days: Window for TPS/parole expiration warnings
        attorney_urgency_days: Below this, filing alerts ask for an attorney
    """

    critical_days: int = 7
    warning_days: int = 30
    deadline_warning_days: int = 180
    expiry_warning_days: int = 180
    attorney_urgency_days: int = 90


DEFAULT_THRESHOLDS = AlertThresholds()

_TYPE_GROUP = {AlertType.CRITICAL: 0, AlertType.LEGAL_WARNING: 1}


def _band(days_left: int, thresholds: AlertThresholds) -> AlertType:
    if days_left < thresholds.critical_days:
        return AlertType.CRITICAL
    if days_left < thresholds.warning_days:
        return AlertType.WARNING
    return AlertType.INFO


def _legal_warnings(facts: CaseFacts, today: date, thresholds: AlertThresholds) -> List[Alert]:
    alerts = []

    if not facts.has_attorney:
        if facts.in_court:
            alerts.append(
                Alert(
                    type=AlertType.CRITICAL,
                    title="URGENT: Legal Representation Required",
                    message=(
                        "You are in Immigration Court proceedings without an attorney. "
                        "A rejected asylum application can lead to deportation. Find "
                        "legal representation immediately."
                    ),
                    action_required=True,
                    is_court_related=True,
                    requires_attorney=True,
                )
            )
        else:
            alerts.append(
                Alert(
                    type=AlertType.LEGAL_WARNING,
                    title="Legal Representation Strongly Recommended",
                    message=(
                        "You should consult an attorney before applying for asylum. "
                        "Legal representation significantly increases your chances "
                        "of success."
                    ),
                    action_required=True,
                    requires_attorney=True,
                )
            )

    deadline = facts_one_year_deadline(facts)
    if deadline and not facts.has_filed:
        days_left = days_until(deadline, today)
        if days_left <= thresholds.deadline_warning_days:
            if days_left >= 0:
                message = (
                    "You must file your asylum application within one year of arrival "
                    f"unless you qualify for an exception. You have {days_left} days remaining."
                )
            else:
                message = (
                    f"The one-year filing deadline passed on {format_date(deadline)}. "
                    "Speak with an attorney about whether an exception applies."
                )
            alerts.append(
                Alert(
                    type=AlertType.LEGAL_WARNING,
                    title="One-Year Filing Deadline Approaching",
                    message=message,
                    deadline=deadline,
                    days_left=days_left,
                    action_required=True,
                    requires_attorney=days_left <= thresholds.attorney_urgency_days,
                )
            )

    if facts.in_court:
        alerts.append(
            Alert(
                type=AlertType.LEGAL_WARNING,
                title="Immigration Court Proceedings",
                message=(
                    "You are in removal proceedings. This is extremely serious and "
                    "deportation is possible. Legal representation is critical for your case."
                ),
                action_required=True,
                is_court_related=True,
                requires_attorney=True,
            )
        )

    for label, expires in (
        ("TPS", facts.tps_expiration_date if facts.tps_exception_applies else None),
        ("Parole", facts.parole_expiration_date if facts.parole_exception_applies else None),
    ):
        if expires is None:
            continue
        days_left = days_until(expires, today)
        if 0 <= days_left <= thresholds.expiry_warning_days:
            alerts.append(
                Alert(
                    type=AlertType.WARNING,
                    title=f"{label} Status Expiring Soon",
                    message=(
                        f"Your {label if label == 'TPS' else 'parole'} status expires in "
                        f"{days_left} days. File your asylum application before "
                        "expiration to maintain protection."
                    ),
                    deadline=expires,
                    days_left=days_left,
                    action_required=True,
                )
            )

    alerts.append(
        Alert(type=AlertType.INFO, title=DISCLAIMER_TITLE, message=DISCLAIMER_MESSAGE)
    )
    return alerts


def _step_alert(
    step: Step, facts: CaseFacts, today: date, thresholds: AlertThresholds
) -> Alert:
    days_left = days_until(step.due_date, today)
    when = format_date(step.due_date)
    alert_type = _band(days_left, thresholds)

    if step.role == StepRole.FILING_DEADLINE:
        title = (
            f"{days_left} days left to file I-589"
            if days_left >= 0
            else f"I-589 filing date passed {-days_left} days ago"
        )
        if facts.in_court:
            message = (
                "You must file your asylum application with Immigration Court before "
                f"{when}. Missing this deadline could result in deportation."
            )
        else:
            message = (
                f"You must file your asylum application with USCIS before {when}. "
                "This is a critical deadline."
            )
        if days_left <= thresholds.attorney_urgency_days and not facts.has_attorney:
            message += " STRONGLY RECOMMEND getting legal representation immediately."
    elif step.role == StepRole.WORK_AUTHORIZATION:
        alert_type = AlertType.INFO
        if days_left <= 0:
            title = "Work permit eligible now"
            message = (
                "You can now apply for a work permit (Form I-765). This allows you "
                "to work legally in the US."
            )
        else:
            title = f"{days_left} days until work permit eligible"
            message = (
                f"You can apply for a work permit on {when} "
                "(150 days after filing I-589)."
            )
    elif step.role == StepRole.INTERVIEW:
        title = f"Asylum Interview in {days_left} days"
        message = (
            f"Your asylum interview is on {when}. Prepare thoroughly: this "
            "determines your case outcome."
        )
    elif step.role == StepRole.HEARING:
        if alert_type == AlertType.INFO:
            alert_type = AlertType.WARNING
        title = f"Court Hearing in {days_left} days"
        message = (
            f"CRITICAL: You have a court hearing on {when}. Failure to appear will "
            "result in an automatic deportation order."
        )
    else:
        title = step.title
        if days_left < 0:
            message = f"This step was due on {when} ({-days_left} days ago)."
        else:
            message = f"Due on {when} ({days_left} days left)."

    return Alert(
        type=alert_type,
        title=title,
        message=message,
        deadline=step.due_date,
        days_left=days_left,
        action_required=days_left < thresholds.warning_days or alert_type == AlertType.CRITICAL,
        is_court_related=facts.in_court,
        requires_attorney=facts.in_court and not facts.has_attorney,
        step_id=step.id,
    )


def alert_sort_key(alert: Alert) -> tuple:
    return (
        _TYPE_GROUP.get(alert.type, 2),
        alert.days_left is None,
        alert.days_left if alert.days_left is not None else 0,
        alert.title,
        alert.step_id or "",
    )


def sort_alerts(alerts: Iterable[Alert]) -> List[Alert]:
    """Critical first, then legal warnings, then the rest by days left (nulls last)."""
    return sorted(alerts, key=alert_sort_key)


def compile_alerts(
    facts: CaseFacts,
    plan: Optional[Plan],
    today: date,
    thresholds: Optional[AlertThresholds] = None,
) -> List[Alert]:
    """
    Build the ranked alert list for a case.

    Args:
        facts: Case facts
        plan: Plan whose steps produce deadline alerts (None for facts-only alerts)
        today: Reference date
        thresholds: Severity thresholds (defaults to ``AlertThresholds()``)

    Returns:
        Sorted list of alerts; always contains the legal disclaimer
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS
    alerts = _legal_warnings(facts, today, thresholds)

    for step in plan.steps if plan else ():
        if step.due_date is None or step.status == StepStatus.COMPLETED:
            continue
        alerts.append(_step_alert(step, facts, today, thresholds))

    return sort_alerts(alerts)
