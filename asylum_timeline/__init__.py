"""
Asylum Timeline - a deterministic deadline and step planner for asylum cases.

Author: The Asylum Timeline Contributors
License: MIT
"""

__version__ = "1.0.0"
__author__ = "The Asylum Timeline Contributors"
__email__ = "contributors@asylumtimeline.org"
__description__ = "A deterministic deadline and step planner for asylum cases"

from .engine import TimelineEngine, EditResult
from .alerts import AlertThresholds, compile_alerts
from .advisories import build_advisories
from .bundles import DEFAULT_BUNDLES
from .deadlines import (
    calculate_deadlines,
    days_until,
    one_year_deadline,
    work_permit_eligible,
)
from .storage import PlanStore

from .utils import (
    Alert,
    AlertType,
    Bundle,
    CaseFacts,
    Plan,
    RuleTable,
    Step,
    StepPriority,
    StepStatus,
    TimelineError,
    InvalidEditError,
    MalformedFactsError,
    RuleEvaluationError,
    RuleTableError,
    StorageError,
    parse_date,
    setup_logger,
)

__all__ = [
    # Engine
    "TimelineEngine",
    "EditResult",
    "AlertThresholds",
    "compile_alerts",
    "build_advisories",
    "DEFAULT_BUNDLES",
    "calculate_deadlines",
    "days_until",
    "one_year_deadline",
    "work_permit_eligible",
    "PlanStore",
    # Models
    "Alert",
    "AlertType",
    "Bundle",
    "CaseFacts",
    "Plan",
    "RuleTable",
    "Step",
    "StepPriority",
    "StepStatus",
    # Errors
    "TimelineError",
    "InvalidEditError",
    "MalformedFactsError",
    "RuleEvaluationError",
    "RuleTableError",
    "StorageError",
    # Utilities
    "parse_date",
    "setup_logger",
]
