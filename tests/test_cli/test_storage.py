"""
Tests for plan persistence.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from asylum_timeline.storage import PlanStore, load_facts
from asylum_timeline.utils.data_models import CaseFacts, Plan
from asylum_timeline.utils.exceptions import StorageError


class TestPlanStore:
    """Tests for PlanStore class."""

    def test_missing_file(self, tmp_path):
        """Test that a missing plan loads as None."""
        store = PlanStore(tmp_path / "plan.json")

        assert not store.exists()
        assert store.load() is None

    def test_save_and_load(self, tmp_path, engine, court_facts, today):
        """Test that a saved plan loads back equal."""
        plan = engine.derive_plan(court_facts, today=today)
        store = PlanStore(tmp_path / "nested" / "plan.json")

        store.save(plan)

        assert store.exists()
        assert not (tmp_path / "nested" / "plan.json.tmp").exists()
        assert store.load() == plan

    def test_completed_plan_survives_storage(self, tmp_path, engine, affirmative_facts, today):
        """Test that completion state and overrides persist."""
        plan = engine.derive_plan(affirmative_facts, today=today)
        plan = engine.mark_step_complete(plan, "affirmative-starter:file-i589", today=today).plan
        store = PlanStore(tmp_path / "plan.json")
        store.save(plan)

        loaded = store.load()
        step = loaded.get_step("affirmative-starter:file-i589")
        assert step.completed_date == today
        assert engine.derive_plan(affirmative_facts, loaded, today=today) == plan

    def test_corrupt_file(self, tmp_path):
        """Test that garbage in the file is a storage error."""
        path = tmp_path / "plan.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError) as exc_info:
            PlanStore(path).load()

        assert "Corrupt plan file" in str(exc_info.value)
        assert str(path) in str(exc_info.value)

    def test_wrong_shape(self, tmp_path):
        """Test that a JSON document without steps structure is rejected."""
        path = tmp_path / "plan.json"
        path.write_text(json.dumps({"steps": [{"title": "no id"}]}), encoding="utf-8")

        with pytest.raises(StorageError):
            PlanStore(path).load()

    def test_write_failure(self, tmp_path):
        """Test that OS errors while writing are wrapped."""
        store = PlanStore(tmp_path / "plan.json")

        with patch.object(Path, "replace", side_effect=OSError("disk full")):
            with pytest.raises(StorageError) as exc_info:
                store.save(Plan(case_facts=CaseFacts()))

        assert "disk full" in str(exc_info.value)


class TestLoadFacts:
    """Tests for load_facts function."""

    def test_valid(self, tmp_path, sample_facts_dict):
        """Test reading a facts document."""
        path = tmp_path / "facts.json"
        path.write_text(json.dumps(sample_facts_dict), encoding="utf-8")

        assert load_facts(path) == sample_facts_dict

    def test_missing(self, tmp_path):
        """Test a missing facts file."""
        with pytest.raises(StorageError):
            load_facts(tmp_path / "missing.json")

    def test_not_an_object(self, tmp_path):
        """Test that a JSON list is rejected."""
        path = tmp_path / "facts.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(StorageError) as exc_info:
            load_facts(path)

        assert "JSON object" in str(exc_info.value)
