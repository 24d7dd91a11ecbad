"""
GoalRepository: goal collection with load-on-start, save-on-mutation.

Persisted through a Store (data/goals.json by default). The repository also
provides the goal lookup the scoring engine needs to resolve a parent goal.
"""
from typing import Any, Dict, Iterable, List, Optional

from core.exceptions import DuplicateGoalError, GoalNotFoundError, StoreError
from core.logger import get_logger
from core.models import Goal, GoalPeriod, GoalStatus, now_iso
from core.organization import OrganizationRepository
from core.seed_data import seed_goals
from core.store import Store

logger = get_logger("goals_repository")

STATE_VERSION = 1


class GoalRepository:
    """In-memory goal list mirrored to a Store after every change."""

    def __init__(
        self,
        store: Store,
        organization: Optional[OrganizationRepository] = None,
        seed_on_empty: bool = True,
    ):
        self._store = store
        self._organization = organization
        self._goals: List[Goal] = []
        self._load(seed_on_empty)

    def _load(self, seed_on_empty: bool) -> None:
        state = self._store.load()
        if state is None:
            if seed_on_empty:
                self._goals = seed_goals()
                logger.info(f"Seeded goal store with {len(self._goals)} goals")
                self.save()
            return

        goals = []
        for index, raw in enumerate(state.get("goals", [])):
            try:
                goals.append(Goal.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.error(f"Invalid goal record #{index} in store: {e}")
                raise StoreError(f"Invalid goal record #{index}: {e}") from e
        self._goals = goals
        logger.info(f"Loaded {len(goals)} goals")

    def save(self) -> None:
        self._store.save({
            "version": STATE_VERSION,
            "goals": [g.to_dict() for g in self._goals],
        })

    def set_goals(self, goals: Iterable[Goal]) -> None:
        self._goals = list(goals)
        self.save()

    # --- queries -----------------------------------------------------------

    def list_goals(self) -> List[Goal]:
        return list(self._goals)

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        return next((g for g in self._goals if g.id == goal_id), None)

    def require_goal(self, goal_id: str) -> Goal:
        goal = self.get_goal(goal_id)
        if goal is None:
            raise GoalNotFoundError(goal_id)
        return goal

    def resolve_parent(self, goal: Goal) -> Optional[Goal]:
        """Parent goal used for Relevant/alignment scoring, if it exists."""
        parent_id = goal.primary_parent_id()
        if not parent_id or parent_id == goal.id:
            return None
        return self.get_goal(parent_id)

    def get_goals_by_org_unit(self, org_unit_id: str) -> List[Goal]:
        return [g for g in self._goals if g.org_unit_id == org_unit_id]

    def get_child_goals(self, parent_goal_id: str) -> List[Goal]:
        return [g for g in self._goals if parent_goal_id in g.parent_ids()]

    def get_parent_goals(self, org_unit_id: str) -> List[Goal]:
        """ACTIVE goals of the parent org unit: what a new goal can align to."""
        if self._organization is None:
            return []
        parent_unit = self._organization.get_parent_org_unit(org_unit_id)
        if parent_unit is None:
            return []
        return [
            g for g in self._goals
            if g.org_unit_id == parent_unit.id and g.status == GoalStatus.ACTIVE
        ]

    @staticmethod
    def search(
        goals: Iterable[Goal],
        term: Optional[str] = None,
        status: Optional[GoalStatus] = None,
        period: Optional[GoalPeriod] = None,
    ) -> List[Goal]:
        filtered = list(goals)
        if term:
            needle = term.lower()
            filtered = [
                g for g in filtered
                if needle in g.title.lower()
                or needle in g.description.lower()
                or any(needle in tag.lower() for tag in g.tags)
            ]
        if status is not None:
            filtered = [g for g in filtered if g.status == status]
        if period is not None:
            filtered = [g for g in filtered if g.period == period]
        return filtered

    # --- mutations ---------------------------------------------------------

    def add_goal(self, goal: Goal) -> Goal:
        if self.get_goal(goal.id) is not None:
            raise DuplicateGoalError(goal.id)
        self._goals.append(goal)
        self.save()
        logger.info(f"Goal added: {goal.id} ({goal.status.value})")
        return goal

    def update_goal(self, goal_id: str, updates: Dict[str, Any]) -> Goal:
        """
        Apply a partial update given in client JSON keys (e.g. "title",
        "status", "metrics") and stamp updatedAt.
        """
        current = self.require_goal(goal_id)
        merged = current.to_dict()
        merged.update({k: v for k, v in updates.items() if k != "id"})
        merged["updatedAt"] = now_iso()
        updated = Goal.from_dict(merged)

        self._goals = [updated if g.id == goal_id else g for g in self._goals]
        self.save()
        logger.info(f"Goal updated: {goal_id} fields={sorted(k for k in updates if k != 'id')}")
        return updated

    def delete_goal(self, goal_id: str) -> None:
        self.require_goal(goal_id)
        self._goals = [g for g in self._goals if g.id != goal_id]
        self.save()
        logger.info(f"Goal deleted: {goal_id}")
