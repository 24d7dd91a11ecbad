"""
OrganizationRepository: org chart and users.

Read-mostly; the demo organisation is seeded at start and kept in memory.
"""
from typing import Any, Callable, Dict, Iterable, List, Optional

from core.models import Goal, GoalStatus, OrgUnit, User
from core.seed_data import seed_org_units, seed_users

GoalsByOrgUnit = Callable[[str], List[Goal]]


class OrganizationRepository:
    """Org units and users, with hierarchy queries."""

    def __init__(
        self,
        org_units: Optional[Iterable[OrgUnit]] = None,
        users: Optional[Iterable[User]] = None,
    ):
        self._org_units: List[OrgUnit] = list(org_units if org_units is not None else seed_org_units())
        self._users: List[User] = list(users if users is not None else seed_users())

    @property
    def org_units(self) -> List[OrgUnit]:
        return list(self._org_units)

    @property
    def users(self) -> List[User]:
        return list(self._users)

    def set_org_units(self, units: Iterable[OrgUnit]) -> None:
        self._org_units = list(units)

    def set_users(self, users: Iterable[User]) -> None:
        self._users = list(users)

    def get_org_unit(self, org_unit_id: str) -> Optional[OrgUnit]:
        return next((u for u in self._org_units if u.id == org_unit_id), None)

    def get_parent_org_unit(self, org_unit_id: str) -> Optional[OrgUnit]:
        unit = self.get_org_unit(org_unit_id)
        if unit is None or not unit.parent_id:
            return None
        return self.get_org_unit(unit.parent_id)

    def get_child_org_units(self, parent_id: str) -> List[OrgUnit]:
        return [u for u in self._org_units if u.parent_id == parent_id]

    def get_users_by_org_unit(self, org_unit_id: str) -> List[User]:
        return [u for u in self._users if u.org_unit_id == org_unit_id]

    def get_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self._users if u.id == user_id), None)

    def find_user_by_email(self, email: str) -> Optional[User]:
        wanted = (email or "").strip().lower()
        if not wanted:
            return None
        return next((u for u in self._users if u.email.lower() == wanted), None)

    def build_tree(
        self,
        search: Optional[str] = None,
        goals_by_org_unit: Optional[GoalsByOrgUnit] = None,
    ) -> List[Dict[str, Any]]:
        """
        Nested org chart starting at the root units.

        Each node carries its depth, user count and ACTIVE goal count. With
        ``search``, a node stays when its name matches (case-insensitive) or
        when any descendant does.
        """
        def build(parent_id: Optional[str], level: int) -> List[Dict[str, Any]]:
            nodes = []
            for unit in self._org_units:
                if unit.parent_id != parent_id:
                    continue
                active_goals = 0
                if goals_by_org_unit is not None:
                    active_goals = sum(
                        1 for g in goals_by_org_unit(unit.id) if g.status == GoalStatus.ACTIVE
                    )
                node = unit.to_dict()
                node["level"] = level
                node["userCount"] = len(self.get_users_by_org_unit(unit.id))
                node["activeGoalCount"] = active_goals
                node["children"] = build(unit.id, level + 1)
                nodes.append(node)
            return nodes

        tree = build(None, 0)
        if not search:
            return tree

        term = search.lower()

        def prune(nodes: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
            kept = []
            for node in nodes:
                children = prune(node["children"])
                if term in node["name"].lower() or children:
                    kept.append({**node, "children": children})
            return kept

        return prune(tree)
