"""
Request bodies shared by the routers.

Field names are snake_case in Python and camelCase on the wire, matching the
dashboard client.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.models import GoalPeriod, GoalStatus, PlanPriority, ReviewStatus

MetricRaw = Optional[Union[int, float, str]]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_client_dict(self, exclude_unset: bool = False) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=exclude_unset)


class MetricPayload(CamelModel):
    name: str = ""
    baseline: MetricRaw = None
    target: MetricRaw = None
    unit: Optional[str] = None


class AlignmentPayload(CamelModel):
    parent_goal_id: str = ""
    relevance_reason: Optional[str] = None


class GoalDraftRequest(CamelModel):
    title: str = ""
    description: str = ""
    period: GoalPeriod = GoalPeriod.TRIMESTRAL
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    metrics: List[MetricPayload] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    parent_goal_alignments: List[AlignmentPayload] = Field(default_factory=list)
    parent_goal_id: Optional[str] = None


class GoalCreateRequest(GoalDraftRequest):
    submit: bool = False  # send straight to IN_REVIEW


class GoalUpdateRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    period: Optional[GoalPeriod] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    metrics: Optional[List[MetricPayload]] = None
    tags: Optional[List[str]] = None
    status: Optional[GoalStatus] = None
    parent_goal_alignments: Optional[List[AlignmentPayload]] = None
    parent_goal_id: Optional[str] = None


class GoalPayload(GoalDraftRequest):
    """A complete goal sent inline for scoring."""
    id: str = "temp"
    org_unit_id: str = ""
    owner_user_id: str = ""
    status: GoalStatus = GoalStatus.DRAFT


class EvaluateRequest(CamelModel):
    goal: GoalPayload
    parent_goal_id: Optional[str] = None


class StatusChangeRequest(CamelModel):
    status: GoalStatus


class PlanRequest(CamelModel):
    title: str
    description: str = ""
    due_date: str = ""
    priority: PlanPriority = PlanPriority.MEDIUM
    assigned_to: Optional[str] = None


class ReviewRequest(CamelModel):
    progress: int = Field(ge=0, le=100)
    status: ReviewStatus
    achievements: List[str] = Field(default_factory=list)
    challenges: List[str] = Field(default_factory=list)
    next_actions: List[str] = Field(default_factory=list)
    notes: Optional[str] = None


class LoginRequest(CamelModel):
    email: str
