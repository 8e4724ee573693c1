"""
Rule table primitives for the Asylum Timeline library.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Iterator, List, Optional, TYPE_CHECKING

from .exceptions import RuleTableError

if TYPE_CHECKING:
    from .data_models import CaseFacts, Plan, Step


TriggerFunction = Callable[["CaseFacts", Optional["Plan"], date], bool]
GeneratorFunction = Callable[["CaseFacts", Optional["Plan"], date], List["Step"]]


@dataclass(frozen=True)
class Bundle:
    """
    A named legal scenario: an activation predicate plus a step generator.

    Both functions are pure. They receive the current facts, the previously
    persisted plan (or None) and the derivation date, and must not perform
    I/O. ``priority`` only orders legacy phase summaries.
    """

    id: str
    name: str
    description: str
    priority: int
    trigger: TriggerFunction
    generate: GeneratorFunction

    def __repr__(self) -> str:
        return f"Bundle(id='{self.id}', name='{self.name}', priority={self.priority})"


class RuleTable:
    """
    Fixed, ordered registry of bundles.

    Bundle ids are checked for uniqueness when the table is built; a clash is
    a configuration error and raises ``RuleTableError`` immediately.
    """

    def __init__(self, bundles: Iterable[Bundle]):
        self._bundles = tuple(bundles)
        self._by_id = {}
        for bundle in self._bundles:
            if not bundle.id:
                raise RuleTableError(f"Bundle '{bundle.name}' has an empty id")
            if ":" in bundle.id:
                raise RuleTableError(
                    "Bundle ids may not contain ':'", bundle_id=bundle.id
                )
            if bundle.id in self._by_id:
                raise RuleTableError("Duplicate bundle id", bundle_id=bundle.id)
            self._by_id[bundle.id] = bundle

    def get(self, bundle_id: str) -> Optional[Bundle]:
        return self._by_id.get(bundle_id)

    def order_of(self, bundle_id: str) -> int:
        """Position of a bundle in table order (unknown ids sort last)."""
        for index, bundle in enumerate(self._bundles):
            if bundle.id == bundle_id:
                return index
        return len(self._bundles)

    @property
    def ids(self) -> List[str]:
        return [bundle.id for bundle in self._bundles]

    def __iter__(self) -> Iterator[Bundle]:
        return iter(self._bundles)

    def __len__(self) -> int:
        return len(self._bundles)

    def __contains__(self, bundle_id: object) -> bool:
        return bundle_id in self._by_id
