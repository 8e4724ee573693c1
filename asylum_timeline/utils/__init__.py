"""
Utilities for the Asylum Timeline library.
"""

from .base import Bundle, RuleTable
from .exceptions import (
    TimelineError,
    RuleEvaluationError,
    RuleTableError,
    InvalidEditError,
    MalformedFactsError,
    StorageError,
)
from .data_models import (
    Alert,
    AlertType,
    Answer,
    CardType,
    CaseFacts,
    CaseOutcome,
    DeadlineCalculation,
    DisplayCard,
    FilingLocation,
    LinkKind,
    Plan,
    Step,
    StepLink,
    StepPriority,
    StepRole,
    StepStatus,
)
from .helpers import parse_date, format_date, sanitize_text, setup_logger

__all__ = [
    "Bundle",
    "RuleTable",
    "TimelineError",
    "RuleEvaluationError",
    "RuleTableError",
    "InvalidEditError",
    "MalformedFactsError",
    "StorageError",
    "Alert",
    "AlertType",
    "Answer",
    "CardType",
    "CaseFacts",
    "CaseOutcome",
    "DeadlineCalculation",
    "DisplayCard",
    "FilingLocation",
    "LinkKind",
    "Plan",
    "Step",
    "StepLink",
    "StepPriority",
    "StepRole",
    "StepStatus",
    "parse_date",
    "format_date",
    "sanitize_text",
    "setup_logger",
]
