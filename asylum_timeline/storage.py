"""
JSON file persistence for plans.

The engine never touches storage; callers load a plan before an engine call
and save the returned plan afterwards.
"""

import json
from pathlib import Path
from typing import Optional, Union

from .utils.data_models import Plan
from .utils.exceptions import MalformedFactsError, StorageError
from .utils.helpers import setup_logger


class PlanStore:
    """Stores one plan per file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.logger = setup_logger(f"{self.__class__.__name__}")

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Optional[Plan]:
        """
        Read the stored plan.

        Returns:
            The plan, or None when no file exists yet

        Raises:
            StorageError: If the file cannot be read or does not hold a plan
        """
        if not self.exists():
            return None
        try:
            text = self.path.read_text(encoding="utf-8")
            plan = Plan.from_json(text)
        except OSError as e:
            raise StorageError(f"Failed to read plan: {e}", path=str(self.path)) from e
        except (ValueError, KeyError, TypeError, AttributeError, MalformedFactsError) as e:
            raise StorageError(f"Corrupt plan file: {e}", path=str(self.path)) from e
        self.logger.debug(f"Loaded plan from {self.path}")
        return plan

    def save(self, plan: Plan) -> None:
        """
        Write the plan, replacing any previous version.

        Raises:
            StorageError: If the file cannot be written
        """
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(plan.to_json() + "\n", encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise StorageError(f"Failed to write plan: {e}", path=str(self.path)) from e
        self.logger.debug(f"Saved plan to {self.path}")


def load_facts(path: Union[str, Path]) -> dict:
    """Read a raw case-facts JSON document."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise StorageError(f"Failed to read facts: {e}", path=str(path)) from e
    except ValueError as e:
        raise StorageError(f"Invalid facts JSON: {e}", path=str(path)) from e
    if not isinstance(data, dict):
        raise StorageError("Facts file must contain a JSON object", path=str(path))
    return data
