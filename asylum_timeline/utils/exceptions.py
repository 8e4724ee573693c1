"""
Custom exceptions for the Asylum Timeline library.
"""


class TimelineError(Exception):
    """Base exception for all timeline engine errors."""

    def __init__(self, message: str, bundle_id: str = None, step_id: str = None):
        self.message = message
        self.bundle_id = bundle_id
        self.step_id = step_id
        super().__init__(self.message)

    def __str__(self):
        error_parts = [self.message]
        if self.bundle_id:
            error_parts.append(f"Bundle: {self.bundle_id}")
        if self.step_id:
            error_parts.append(f"Step: {self.step_id}")
        return " - ".join(error_parts)


class RuleEvaluationError(TimelineError):
    """Raised when a bundle's trigger or generator fails for one cycle."""

    def __init__(self, message: str, bundle_id: str = None, stage: str = None):
        self.stage = stage
        super().__init__(message, bundle_id=bundle_id)

    def __str__(self):
        error_str = super().__str__()
        if self.stage:
            error_str += f" - Stage: {self.stage}"
        return error_str


class RuleTableError(TimelineError):
    """Raised when the rule table itself is misconfigured."""
    pass


class InvalidEditError(TimelineError):
    """Describes an edit request that cannot be applied to a plan."""
    pass


class MalformedFactsError(TimelineError):
    """Raised when case facts fail structural validation at intake."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)

    def __str__(self):
        error_str = super().__str__()
        if self.field:
            error_str += f" - Field: {self.field}"
        return error_str


class StorageError(TimelineError):
    """Raised when a persisted plan cannot be read or written."""

    def __init__(self, message: str, path: str = None):
        self.path = path
        super().__init__(message)

    def __str__(self):
        error_str = super().__str__()
        if self.path:
            error_str += f" - Path: {self.path}"
        return error_str
