"""
Core data models for Acelera.

Organisation (org units, users), goals with metrics, plans and reviews, and
the SMART feedback record produced by the scoring engine.

JSON keys use the camelCase names of the dashboard client.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


class GoalPeriod(str, Enum):
    ANUAL = "ANUAL"            # annual
    TRIMESTRAL = "TRIMESTRAL"  # quarterly
    MENSUAL = "MENSUAL"        # monthly


class GoalStatus(str, Enum):
    DRAFT = "DRAFT"
    IN_REVIEW = "IN_REVIEW"
    APPROVED = "APPROVED"
    ACTIVE = "ACTIVE"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


class OrgUnitType(str, Enum):
    COMPANY = "COMPANY"
    C_LEVEL = "C_LEVEL"
    VP = "VP"
    GERENCIA = "GERENCIA"
    EQUIPO = "EQUIPO"
    INDIVIDUAL = "INDIVIDUAL"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    DIRECTOR = "DIRECTOR"
    VP = "VP"
    GERENTE = "GERENTE"
    LIDER_EQUIPO = "LIDER_EQUIPO"
    COLABORADOR = "COLABORADOR"


class PlanStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    BLOCKED = "BLOCKED"


class PlanPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ReviewStatus(str, Enum):
    ON_TRACK = "ON_TRACK"
    AT_RISK = "AT_RISK"
    BEHIND = "BEHIND"
    AHEAD = "AHEAD"


def now_iso() -> str:
    """UTC timestamp in the client's ISO format (millisecond precision, Z suffix)."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# --- Metric values ---------------------------------------------------------

@dataclass(frozen=True)
class Numeric:
    """A metric baseline/target given as a number."""
    value: Union[int, float]


@dataclass(frozen=True)
class Text:
    """A metric baseline/target given as free text (e.g. "alto", "100")."""
    value: str


MetricValue = Optional[Union[Numeric, Text]]  # None means absent


def metric_value(raw: Any) -> MetricValue:
    """
    Coerce a raw JSON value into a MetricValue.

    Only real numbers become Numeric; numeric-looking strings stay Text.
    Empty strings count as absent.
    """
    if raw is None or isinstance(raw, (Numeric, Text)):
        return raw
    if isinstance(raw, bool):
        return Text(str(raw).lower())
    if isinstance(raw, (int, float)):
        return Numeric(raw)
    text = str(raw)
    if text == "":
        return None
    return Text(text)


def metric_value_to_json(value: MetricValue) -> Any:
    if value is None:
        return None
    return value.value


@dataclass
class GoalMetric:
    name: str
    baseline: MetricValue = None
    target: MetricValue = None
    unit: Optional[str] = None

    def __post_init__(self):
        self.baseline = metric_value(self.baseline)
        self.target = metric_value(self.target)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.baseline is not None:
            data["baseline"] = metric_value_to_json(self.baseline)
        if self.target is not None:
            data["target"] = metric_value_to_json(self.target)
        if self.unit is not None:
            data["unit"] = self.unit
        return data

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GoalMetric":
        return cls(
            name=d.get("name") or "",
            baseline=d.get("baseline"),
            target=d.get("target"),
            unit=d.get("unit"),
        )


@dataclass
class ParentGoalAlignment:
    parent_goal_id: str
    relevance_reason: Optional[str] = None  # why this goal supports the parent

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"parentGoalId": self.parent_goal_id}
        if self.relevance_reason is not None:
            data["relevanceReason"] = self.relevance_reason
        return data

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ParentGoalAlignment":
        return cls(
            parent_goal_id=d.get("parentGoalId") or "",
            relevance_reason=d.get("relevanceReason"),
        )


@dataclass
class GoalPlan:
    """Action plan attached to a goal."""
    id: str
    goal_id: str
    title: str
    description: str
    due_date: str
    status: PlanStatus = PlanStatus.PENDING
    priority: PlanPriority = PlanPriority.MEDIUM
    assigned_to: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "goalId": self.goal_id,
            "title": self.title,
            "description": self.description,
            "dueDate": self.due_date,
            "status": self.status.value,
            "priority": self.priority.value,
            "assignedTo": self.assigned_to,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GoalPlan":
        return cls(
            id=d["id"],
            goal_id=d.get("goalId", ""),
            title=d.get("title", ""),
            description=d.get("description", ""),
            due_date=d.get("dueDate", ""),
            status=PlanStatus(d.get("status", PlanStatus.PENDING.value)),
            priority=PlanPriority(d.get("priority", PlanPriority.MEDIUM.value)),
            assigned_to=d.get("assignedTo"),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )


@dataclass
class GoalReview:
    """Periodic progress review of a goal."""
    id: str
    goal_id: str
    review_date: str
    progress: int  # 0-100
    status: ReviewStatus
    reviewer_user_id: str
    achievements: List[str] = field(default_factory=list)
    challenges: List[str] = field(default_factory=list)
    next_actions: List[str] = field(default_factory=list)
    notes: Optional[str] = None
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "goalId": self.goal_id,
            "reviewDate": self.review_date,
            "progress": self.progress,
            "status": self.status.value,
            "achievements": list(self.achievements),
            "challenges": list(self.challenges),
            "nextActions": list(self.next_actions),
            "reviewerUserId": self.reviewer_user_id,
            "notes": self.notes,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GoalReview":
        return cls(
            id=d["id"],
            goal_id=d.get("goalId", ""),
            review_date=d.get("reviewDate", ""),
            progress=int(d.get("progress", 0)),
            status=ReviewStatus(d.get("status", ReviewStatus.ON_TRACK.value)),
            reviewer_user_id=d.get("reviewerUserId", ""),
            achievements=list(d.get("achievements") or []),
            challenges=list(d.get("challenges") or []),
            next_actions=list(d.get("nextActions") or []),
            notes=d.get("notes"),
            created_at=d.get("createdAt"),
        )


@dataclass
class Goal:
    """Organisational goal; the unit scored by the SMART engine."""
    id: str
    title: str
    description: str
    period: GoalPeriod
    start_date: Any  # ISO string as sent by the client, or date/datetime
    end_date: Any
    org_unit_id: str = ""
    owner_user_id: str = ""
    metrics: List[GoalMetric] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    status: GoalStatus = GoalStatus.DRAFT
    parent_goal_id: Optional[str] = None  # legacy single-parent link
    parent_goal_alignments: List[ParentGoalAlignment] = field(default_factory=list)
    plans: List[GoalPlan] = field(default_factory=list)
    reviews: List[GoalReview] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def primary_parent_id(self) -> Optional[str]:
        """Legacy parentGoalId first, then the first filled alignment."""
        if self.parent_goal_id:
            return self.parent_goal_id
        for alignment in self.parent_goal_alignments:
            if alignment.parent_goal_id:
                return alignment.parent_goal_id
        return None

    def parent_ids(self) -> List[str]:
        ids = [self.parent_goal_id] if self.parent_goal_id else []
        for alignment in self.parent_goal_alignments:
            if alignment.parent_goal_id and alignment.parent_goal_id not in ids:
                ids.append(alignment.parent_goal_id)
        return ids

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "orgUnitId": self.org_unit_id,
            "title": self.title,
            "description": self.description,
            "ownerUserId": self.owner_user_id,
            "period": self.period.value,
            "startDate": _date_to_json(self.start_date),
            "endDate": _date_to_json(self.end_date),
            "metrics": [m.to_dict() for m in self.metrics],
            "tags": list(self.tags),
            "status": self.status.value,
            "parentGoalAlignments": [a.to_dict() for a in self.parent_goal_alignments],
            "plans": [p.to_dict() for p in self.plans],
            "reviews": [r.to_dict() for r in self.reviews],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.parent_goal_id:
            data["parentGoalId"] = self.parent_goal_id
        return data

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Goal":
        return cls(
            id=d.get("id") or "",
            org_unit_id=d.get("orgUnitId") or "",
            title=d.get("title") or "",
            description=d.get("description") or "",
            owner_user_id=d.get("ownerUserId") or "",
            period=GoalPeriod(d.get("period") or GoalPeriod.TRIMESTRAL.value),
            start_date=d.get("startDate"),
            end_date=d.get("endDate"),
            metrics=[GoalMetric.from_dict(m) for m in d.get("metrics") or []],
            tags=list(d.get("tags") or []),
            status=GoalStatus(d.get("status") or GoalStatus.DRAFT.value),
            parent_goal_id=d.get("parentGoalId"),
            parent_goal_alignments=[
                ParentGoalAlignment.from_dict(a) for a in d.get("parentGoalAlignments") or []
            ],
            plans=[GoalPlan.from_dict(p) for p in d.get("plans") or []],
            reviews=[GoalReview.from_dict(r) for r in d.get("reviews") or []],
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )


def _date_to_json(value: Any) -> Any:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


@dataclass
class OrgUnit:
    """Node of the company hierarchy."""
    id: str
    name: str
    type: OrgUnitType
    parent_id: Optional[str] = None
    leader_user_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "parentId": self.parent_id,
            "leaderUserId": self.leader_user_id,
        }


@dataclass
class User:
    id: str
    name: str
    email: str
    role: UserRole
    org_unit_id: str
    label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "orgUnitId": self.org_unit_id,
            "label": self.label,
        }


# --- Scoring output --------------------------------------------------------

CRITERIA = ("S", "M", "A", "R", "T")


@dataclass(frozen=True)
class CriterionResult:
    ok: bool
    message: str
    score: int

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "message": self.message, "score": self.score}


@dataclass(frozen=True)
class SmartFeedback:
    """Result of one SMART evaluation. Never mutated after creation."""
    smart_score: int
    breakdown: Mapping[str, CriterionResult]
    alignment_score: int
    alignment_notes: Tuple[str, ...]
    overall_grade: str  # excellent | good | needs-work | poor

    def __post_init__(self):
        # read-only view over a private copy
        object.__setattr__(self, "breakdown", MappingProxyType(dict(self.breakdown)))
        object.__setattr__(self, "alignment_notes", tuple(self.alignment_notes))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "smartScore": self.smart_score,
            "breakdown": {code: self.breakdown[code].to_dict() for code in CRITERIA},
            "alignmentScore": self.alignment_score,
            "alignmentNotes": list(self.alignment_notes),
            "overallGrade": self.overall_grade,
        }
