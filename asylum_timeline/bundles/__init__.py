"""
Rule table for the Asylum Timeline library.

Each module defines one Bundle. ``DEFAULT_BUNDLES`` fixes the evaluation
order; adding a scenario means adding a module and listing it here.
"""

from .affirmative import AFFIRMATIVE_BUNDLE
from .defensive import DEFENSIVE_BUNDLE
from .after_denial import AFTER_DENIAL_BUNDLE
from .missed_hearing import MISSED_HEARING_BUNDLE
from .status_exception import STATUS_EXCEPTION_BUNDLE
from .post_grant import POST_GRANT_BUNDLE
from .appeal_case import APPEAL_CASE_BUNDLE
from ..utils.base import RuleTable

DEFAULT_BUNDLES = RuleTable(
    [
        AFFIRMATIVE_BUNDLE,
        DEFENSIVE_BUNDLE,
        AFTER_DENIAL_BUNDLE,
        MISSED_HEARING_BUNDLE,
        STATUS_EXCEPTION_BUNDLE,
        POST_GRANT_BUNDLE,
        APPEAL_CASE_BUNDLE,
    ]
)

__all__ = [
    "AFFIRMATIVE_BUNDLE",
    "DEFENSIVE_BUNDLE",
    "AFTER_DENIAL_BUNDLE",
    "MISSED_HEARING_BUNDLE",
    "STATUS_EXCEPTION_BUNDLE",
    "POST_GRANT_BUNDLE",
    "APPEAL_CASE_BUNDLE",
    "DEFAULT_BUNDLES",
]
