"""
JSON file storage for workout plans.

One ``<plan_id>.json`` document per plan inside a store directory.  At most
one plan is active at a time; activating a plan deactivates the others.
"""

import json
import logging
from pathlib import Path

from ..core.engine.config_loader import get_app_dir
from ..core.models import Plan
from .serializers import ValidationError, dict_to_plan, plan_to_dict

logger = logging.getLogger(__name__)


def get_default_store_dir() -> Path:
    """Default plan directory: <app dir>/plans."""
    return get_app_dir() / "plans"


class PlanStore:
    """
    Manages plans stored as JSON files.

    The store never generates or mutates plans itself; it only persists
    what the planner produces.
    """

    def __init__(self, directory: str | Path):
        """
        Initialize the plan store.

        Args:
            directory: Directory holding the plan files (created on first save)
        """
        self.directory = Path(directory)

    def _path(self, plan_id: str) -> Path:
        if not plan_id or "/" in plan_id or "\\" in plan_id or plan_id.startswith("."):
            raise ValidationError(f"Invalid plan id: {plan_id!r}")
        return self.directory / f"{plan_id}.json"

    def exists(self, plan_id: str) -> bool:
        return self._path(plan_id).exists()

    def save_plan(self, plan: Plan) -> Path:
        """
        Write a plan, replacing any previous version with the same id.

        Returns:
            Path of the written file
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(plan.id)
        tmp = path.with_suffix(".json.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(plan_to_dict(plan), f, indent=2)
        tmp.replace(path)
        logger.debug("Saved plan %s to %s", plan.id, path)
        return path

    def load_plan(self, plan_id: str) -> Plan:
        """
        Load a plan by id.

        Raises:
            FileNotFoundError: If no plan with this id is stored
            ValidationError: If the file is not a valid plan document
        """
        path = self._path(plan_id)
        if not path.exists():
            raise FileNotFoundError(f"Plan not found: {plan_id} (looked in {self.directory})")
        return self._read(path)

    def _read(self, path: Path) -> Plan:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValidationError(f"Error parsing {path}: {e}") from e
        return dict_to_plan(data)

    def list_plans(self) -> list[Plan]:
        """
        Load every stored plan, newest first.

        Unreadable files are skipped with a warning.
        """
        if not self.directory.exists():
            return []

        plans: list[Plan] = []
        for path in sorted(self.directory.glob("*.json")):
            try:
                plans.append(self._read(path))
            except ValidationError as e:
                logger.warning("Skipping %s: %s", path.name, e)

        plans.sort(key=lambda p: p.created, reverse=True)
        return plans

    def get_active_plan(self) -> Plan | None:
        """Return the active plan (the newest one if several are flagged), or None."""
        for plan in self.list_plans():
            if plan.active:
                return plan
        return None

    def set_active_plan(self, plan_id: str) -> Plan:
        """
        Mark one plan active and every other plan inactive.

        Raises:
            FileNotFoundError: If the plan does not exist
        """
        target = self.load_plan(plan_id)
        for plan in self.list_plans():
            should_be_active = plan.id == plan_id
            if plan.active != should_be_active:
                plan.active = should_be_active
                self.save_plan(plan)
        target.active = True
        return target

    def delete_plan(self, plan_id: str) -> bool:
        """
        Remove a plan file.

        Returns:
            True if a file was deleted, False if the plan did not exist
        """
        path = self._path(plan_id)
        if not path.exists():
            return False
        path.unlink()
        logger.debug("Deleted plan %s", plan_id)
        return True
