"""
Data models for the Asylum Timeline library.

Every model serializes to plain dictionaries with ``to_dict`` and is rebuilt
with ``from_dict``; dates travel as ``YYYY-MM-DD`` strings and enums as their
values. A plan that goes through ``Plan.from_dict(plan.to_dict())`` comes back
equal, completion dates and statuses included.
"""

import json
from dataclasses import dataclass, fields
from datetime import date
from enum import Enum
from typing import Optional, Dict, Any, Tuple, Type

from .exceptions import MalformedFactsError
from .helpers import parse_date, sanitize_text, to_snake_case


class Answer(str, Enum):
    """Questionnaire tri-state answer."""
    YES = "yes"
    NO = "no"
    NOT_SURE = "not-sure"


class FilingLocation(str, Enum):
    """Forum where the principal application was filed."""
    USCIS = "uscis"
    IMMIGRATION_COURT = "immigration-court"
    NOT_SURE = "not-sure"


class CaseOutcome(str, Enum):
    PENDING = "pending"
    DENIED = "denied"
    ASYLUM_GRANTED = "asylum_granted"


class StepStatus(str, Enum):
    PENDING = "pending"
    OVERDUE = "overdue"
    COMPLETED = "completed"


class StepPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class StepRole(str, Enum):
    """Semantic role of a dated step, used to word its alert."""
    FILING_DEADLINE = "filing_deadline"
    INTERVIEW = "interview"
    HEARING = "hearing"
    WORK_AUTHORIZATION = "work_authorization"


class LinkKind(str, Enum):
    FORM = "form"
    GUIDE = "guide"
    WEBSITE = "website"
    STATUS_CHECK = "status_check"


class AlertType(str, Enum):
    CRITICAL = "critical"
    LEGAL_WARNING = "legal_warning"
    WARNING = "warning"
    INFO = "info"


class CardType(str, Enum):
    DEADLINE = "deadline"
    ELIGIBILITY = "eligibility"
    WARNING = "warning"
    ACTION = "action"
    INFO = "info"


def _coerce_enum(enum_cls: Type[Enum], value: Any, field_name: str = None):
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, bool) and enum_cls is Answer:
        return Answer.YES if value else Answer.NO
    text = str(value).strip().lower()
    for candidate in (text, text.replace("_", "-"), text.replace("-", "_")):
        try:
            return enum_cls(candidate)
        except ValueError:
            continue
    raise MalformedFactsError(
        f"Unknown {enum_cls.__name__} value: {value!r}", field=field_name
    )


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("yes", "true", "1", "y")
    return bool(value)


def _serialize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


def _to_dict(instance) -> Dict[str, Any]:
    result = {}
    for f in fields(instance):
        value = getattr(instance, f.name)
        if value is not None:
            result[f.name] = _serialize(value)
    return result


def make_step_id(bundle_id: str, local_id: str) -> str:
    """Namespace a bundle-local step id as ``bundle_id:local_id``."""
    if ":" in local_id:
        return local_id
    return f"{bundle_id}:{local_id}"


@dataclass(frozen=True)
class StepLink:
    """External resource attached to a step."""

    title: str
    url: str
    kind: LinkKind = LinkKind.WEBSITE

    def to_dict(self) -> Dict[str, Any]:
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StepLink":
        return cls(
            title=data["title"],
            url=data["url"],
            kind=LinkKind(data.get("kind") or data.get("type") or "website"),
        )


@dataclass(frozen=True)
class Step:
    """
    One actionable, optionally dated task surfaced to the user.
    """

    id: str
    bundle_id: str
    title: str
    description: str = ""
    due_date: Optional[date] = None
    status: StepStatus = StepStatus.PENDING
    priority: StepPriority = StepPriority.MEDIUM
    links: Tuple[StepLink, ...] = ()
    is_editable_date: bool = False
    completed_date: Optional[date] = None
    show_after_step: Optional[str] = None
    bundle_name: Optional[str] = None
    role: Optional[StepRole] = None
    date_overridden: bool = False

    @classmethod
    def create(
        cls,
        bundle_id: str,
        local_id: str,
        title: str,
        description: str = "",
        due_date: Optional[date] = None,
        priority: StepPriority = StepPriority.MEDIUM,
        links: Tuple[StepLink, ...] = (),
        is_editable_date: bool = False,
        show_after: Optional[str] = None,
        role: Optional[StepRole] = None,
    ) -> "Step":
        """
        Build a freshly generated (pending) step with a namespaced id.

        Args:
            bundle_id: Owning bundle
            local_id: Id unique within the bundle
            title: Display title
            description: Longer explanation
            due_date: Optional due date
            priority: Step priority
            links: Related resources
            is_editable_date: Whether the user may move the due date
            show_after: Local (or fully qualified) id of the gating step
            role: Semantic role for alert wording

        Returns:
            Step instance
        """
        return cls(
            id=make_step_id(bundle_id, local_id),
            bundle_id=bundle_id,
            title=title,
            description=description,
            due_date=due_date,
            priority=priority,
            links=tuple(links),
            is_editable_date=is_editable_date,
            show_after_step=make_step_id(bundle_id, show_after) if show_after else None,
            role=role,
        )

    @property
    def local_id(self) -> str:
        return self.id.split(":", 1)[-1]

    @property
    def is_completed(self) -> bool:
        return self.status == StepStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        """Convert the step to a dictionary."""
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Step":
        return cls(
            id=data["id"],
            bundle_id=data["bundle_id"],
            title=data["title"],
            description=data.get("description", ""),
            due_date=parse_date(data.get("due_date")),
            status=StepStatus(data.get("status", "pending")),
            priority=StepPriority(data.get("priority", "medium")),
            links=tuple(StepLink.from_dict(link) for link in data.get("links", [])),
            is_editable_date=bool(data.get("is_editable_date", False)),
            completed_date=parse_date(data.get("completed_date")),
            show_after_step=data.get("show_after_step"),
            bundle_name=data.get("bundle_name"),
            role=StepRole(data["role"]) if data.get("role") else None,
            date_overridden=bool(data.get("date_overridden", False)),
        )

    def __str__(self) -> str:
        parts = [f"Step: {self.title}", f"Status: {self.status.value}"]
        if self.due_date:
            parts.append(f"Due: {self.due_date.isoformat()}")
        parts.append(f"Priority: {self.priority.value}")
        return " | ".join(parts)


@dataclass(frozen=True)
class Alert:
    """Derived, human-facing warning or informational message."""

    type: AlertType
    title: str
    message: str
    deadline: Optional[date] = None
    days_left: Optional[int] = None
    action_required: bool = False
    is_court_related: Optional[bool] = None
    requires_attorney: Optional[bool] = None
    step_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Alert":
        return cls(
            type=AlertType(data["type"]),
            title=data["title"],
            message=data["message"],
            deadline=parse_date(data.get("deadline")),
            days_left=data.get("days_left"),
            action_required=bool(data.get("action_required", False)),
            is_court_related=data.get("is_court_related"),
            requires_attorney=data.get("requires_attorney"),
            step_id=data.get("step_id"),
        )

    def __str__(self) -> str:
        parts = [f"[{self.type.value}] {self.title}"]
        if self.deadline:
            parts.append(f"Deadline: {self.deadline.isoformat()}")
        if self.days_left is not None:
            parts.append(f"Days left: {self.days_left}")
        return " | ".join(parts)


@dataclass(frozen=True)
class DisplayCard:
    """Auxiliary card shown next to the timeline; never selects bundles."""

    id: str
    type: CardType
    priority: StepPriority
    title: str
    description: str
    due_date: Optional[date] = None
    links: Tuple[StepLink, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DisplayCard":
        return cls(
            id=data["id"],
            type=CardType(data["type"]),
            priority=StepPriority(data["priority"]),
            title=data["title"],
            description=data["description"],
            due_date=parse_date(data.get("due_date")),
            links=tuple(StepLink.from_dict(link) for link in data.get("links", [])),
        )


_DATE_FIELDS = (
    "entry_date",
    "i589_filing_date",
    "next_hearing_date",
    "interview_date",
    "tps_expiration_date",
    "parole_expiration_date",
    "decision_date",
    "missed_hearing_date",
)

_ANSWER_FIELDS = ("has_filed_i589", "has_case", "eoir_case_status", "has_tps", "has_parole")

_TEXT_FIELDS = (
    "eoir_case_number",
    "a_number",
    "assigned_court",
    "tps_country",
    "parole_type",
)

_BOOL_FIELDS = ("has_attorney", "has_missed_hearing", "needs_appeal")

# Keys used by older intake screens
_FIELD_ALIASES = {
    "i589_submission_date": "i589_filing_date",
    "denial_date": "decision_date",
    "next_court_hearing": "next_hearing_date",
    "case_status": "case_outcome",
    "has_tps_status": "has_tps",
    "has_parole_status": "has_parole",
}


@dataclass(frozen=True)
class CaseFacts:
    """
    Canonical snapshot of what is known about a case.

    Produced by intake and treated as immutable for one derivation cycle.
    """

    entry_date: Optional[date] = None
    has_filed_i589: Optional[Answer] = None
    i589_filing_date: Optional[date] = None
    filing_location: Optional[FilingLocation] = None
    has_case: Optional[Answer] = None
    eoir_case_status: Optional[Answer] = None
    eoir_case_number: Optional[str] = None
    a_number: Optional[str] = None
    assigned_court: Optional[str] = None
    next_hearing_date: Optional[date] = None
    interview_date: Optional[date] = None
    has_tps: Optional[Answer] = None
    tps_country: Optional[str] = None
    tps_expiration_date: Optional[date] = None
    has_parole: Optional[Answer] = None
    parole_type: Optional[str] = None
    parole_expiration_date: Optional[date] = None
    has_attorney: bool = False
    case_outcome: CaseOutcome = CaseOutcome.PENDING
    decision_date: Optional[date] = None
    has_missed_hearing: bool = False
    missed_hearing_date: Optional[date] = None
    needs_appeal: bool = False

    @property
    def in_court(self) -> bool:
        """True when the case is on the defensive (Immigration Court) track."""
        return (
            self.has_case == Answer.YES
            or self.filing_location == FilingLocation.IMMIGRATION_COURT
            or self.eoir_case_status == Answer.YES
        )

    @property
    def has_filed(self) -> bool:
        return self.has_filed_i589 == Answer.YES or self.i589_filing_date is not None

    @property
    def tps_exception_applies(self) -> bool:
        return self.has_tps == Answer.YES and self.tps_expiration_date is not None

    @property
    def parole_exception_applies(self) -> bool:
        return self.has_parole == Answer.YES and self.parole_expiration_date is not None

    @property
    def denial_recorded(self) -> bool:
        return self.case_outcome == CaseOutcome.DENIED and self.decision_date is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the facts to a dictionary (unset fields are omitted)."""
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CaseFacts":
        """
        Build validated facts from an intake record.

        Accepts camelCase or snake_case keys. Unknown keys are ignored.

        Args:
            data: Raw intake answers

        Returns:
            CaseFacts instance

        Raises:
            MalformedFactsError: If a date cannot be parsed or an enum value is unknown
        """
        normalized = {}
        for key, value in (data or {}).items():
            snake = to_snake_case(key)
            normalized[_FIELD_ALIASES.get(snake, snake)] = value

        values: Dict[str, Any] = {}

        for name in _DATE_FIELDS:
            raw = normalized.get(name)
            try:
                values[name] = parse_date(raw)
            except ValueError as e:
                raise MalformedFactsError(str(e), field=name) from e

        for name in _ANSWER_FIELDS:
            values[name] = _coerce_enum(Answer, normalized.get(name), name)

        for name in _TEXT_FIELDS:
            raw = normalized.get(name)
            text = sanitize_text(str(raw)) if raw is not None else ""
            values[name] = text or None

        for name in _BOOL_FIELDS:
            values[name] = _coerce_bool(normalized.get(name, False))

        values["filing_location"] = _coerce_enum(
            FilingLocation, normalized.get("filing_location"), "filing_location"
        )
        values["case_outcome"] = (
            _coerce_enum(CaseOutcome, normalized.get("case_outcome"), "case_outcome")
            or CaseOutcome.PENDING
        )

        if values["has_case"] is None and _coerce_bool(normalized.get("visited_eoir", False)):
            values["has_case"] = Answer.YES

        return cls(**values)


@dataclass(frozen=True)
class DeadlineCalculation:
    """Key statutory dates derived from a set of facts."""

    one_year_deadline: Optional[date] = None
    base_one_year_deadline: Optional[date] = None
    work_permit_eligible: Optional[date] = None
    work_permit_is_estimate: bool = False
    appeal_deadline: Optional[date] = None
    green_card_eligible: Optional[date] = None
    tps_recommended_apply_by: Optional[date] = None
    tps_latest_apply_by: Optional[date] = None
    parole_latest_apply_by: Optional[date] = None
    motion_to_reopen_deadline: Optional[date] = None
    has_one_year_exception: bool = False
    exception_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeadlineCalculation":
        values = {}
        for f in fields(cls):
            raw = data.get(f.name)
            if f.name in ("work_permit_is_estimate", "has_one_year_exception"):
                values[f.name] = bool(raw)
            elif f.name == "exception_type":
                values[f.name] = raw
            else:
                values[f.name] = parse_date(raw)
        return cls(**values)


@dataclass(frozen=True)
class Plan:
    """
    Aggregate result of a derivation: the unit that is persisted and redisplayed.
    """

    case_facts: CaseFacts
    active_bundle_ids: Tuple[str, ...] = ()
    steps: Tuple[Step, ...] = ()
    alerts: Tuple[Alert, ...] = ()
    last_updated: Optional[date] = None
    deadlines: Optional[DeadlineCalculation] = None
    display_cards: Tuple[DisplayCard, ...] = ()
    warnings: Tuple[str, ...] = ()
    next_steps: Tuple[str, ...] = ()

    def get_step(self, step_id: str) -> Optional[Step]:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the plan to a dictionary."""
        return _to_dict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, sort_keys=True, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Plan":
        deadlines = data.get("deadlines")
        return cls(
            case_facts=CaseFacts.from_dict(data.get("case_facts", {})),
            active_bundle_ids=tuple(data.get("active_bundle_ids", [])),
            steps=tuple(Step.from_dict(item) for item in data.get("steps", [])),
            alerts=tuple(Alert.from_dict(item) for item in data.get("alerts", [])),
            last_updated=parse_date(data.get("last_updated")),
            deadlines=DeadlineCalculation.from_dict(deadlines) if deadlines else None,
            display_cards=tuple(
                DisplayCard.from_dict(item) for item in data.get("display_cards", [])
            ),
            warnings=tuple(data.get("warnings", [])),
            next_steps=tuple(data.get("next_steps", [])),
        )

    @classmethod
    def from_json(cls, text: str) -> "Plan":
        return cls.from_dict(json.loads(text))

    def __str__(self) -> str:
        parts = [f"Plan: {len(self.steps)} steps", f"{len(self.alerts)} alerts"]
        if self.active_bundle_ids:
            parts.append(f"Bundles: {', '.join(self.active_bundle_ids)}")
        if self.last_updated:
            parts.append(f"Updated: {self.last_updated.isoformat()}")
        return " | ".join(parts)
