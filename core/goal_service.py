"""
Goal application service.

Creation workflow (draft -> stored goal), on-demand SMART evaluation of
stored goals and unsaved drafts, status moves, plans and reviews.
"""
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from core.config_manager import SystemConfig
from core.exceptions import ValidationError
from core.goals_repository import GoalRepository
from core.logger import get_logger
from core.models import (
    Goal,
    GoalMetric,
    GoalPeriod,
    GoalPlan,
    GoalReview,
    GoalStatus,
    ParentGoalAlignment,
    PlanPriority,
    PlanStatus,
    ReviewStatus,
    SmartFeedback,
    User,
    now_iso,
)
from core.smart_validator import evaluate_smart_goal, simulate_ai_validation

logger = get_logger("goal_service")

CREATION_STATUSES = (GoalStatus.DRAFT, GoalStatus.IN_REVIEW)
DEFAULT_PREVIEW_DAYS = 90


@dataclass
class GoalDraft:
    """What the creation form holds before the goal is stored."""
    title: str = ""
    description: str = ""
    period: GoalPeriod = GoalPeriod.TRIMESTRAL
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    metrics: List[GoalMetric] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    parent_goal_alignments: List[ParentGoalAlignment] = field(default_factory=list)
    parent_goal_id: Optional[str] = None

    def fingerprint(self) -> tuple:
        """Fields whose change requires a new evaluation."""
        return (
            self.title,
            self.description,
            getattr(self.period, "value", self.period),
            self.start_date,
            self.end_date,
            tuple((m.name, m.baseline, m.target, m.unit) for m in self.metrics),
            tuple(self.tags),
            tuple((a.parent_goal_id, a.relevance_reason) for a in self.parent_goal_alignments),
            self.parent_goal_id,
        )


class GoalService:
    """Application service for goal operations."""

    def __init__(self, repository: GoalRepository, config: SystemConfig):
        self.repository = repository
        self.config = config

    # ---------------------------------------------------------------------
    # Draft handling
    # ---------------------------------------------------------------------
    def _new_goal_id(self) -> str:
        candidate = int(time.time() * 1000)
        while self.repository.get_goal(f"goal-{candidate}") is not None:
            candidate += 1
        return f"goal-{candidate}"

    def build_goal(
        self,
        draft: GoalDraft,
        user: User,
        status: GoalStatus = GoalStatus.DRAFT,
        goal_id: Optional[str] = None,
    ) -> Goal:
        timestamp = now_iso()
        return Goal(
            id=goal_id or self._new_goal_id(),
            org_unit_id=user.org_unit_id,
            owner_user_id=user.id,
            title=draft.title,
            description=draft.description,
            period=draft.period,
            start_date=draft.start_date,
            end_date=draft.end_date,
            metrics=[m for m in draft.metrics if m.name.strip()],
            tags=list(draft.tags),
            status=status,
            parent_goal_id=draft.parent_goal_id,
            parent_goal_alignments=[a for a in draft.parent_goal_alignments if a.parent_goal_id],
            created_at=timestamp,
            updated_at=timestamp,
        )

    def _check_draft(self, draft: GoalDraft) -> None:
        if len(draft.title.strip()) < self.config.PREVIEW_MIN_TITLE_LENGTH:
            raise ValidationError(
                f"Title must have at least {self.config.PREVIEW_MIN_TITLE_LENGTH} characters",
                field="title",
            )
        if len(draft.description.strip()) < self.config.MIN_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Description must have at least {self.config.MIN_DESCRIPTION_LENGTH} characters",
                field="description",
            )
        if not draft.start_date:
            raise ValidationError("Start date is required", field="startDate")
        if not draft.end_date:
            raise ValidationError("End date is required", field="endDate")
        if not any(m.name.strip() for m in draft.metrics):
            raise ValidationError("Define at least one metric for the goal", field="metrics")

    def create_goal(
        self,
        draft: GoalDraft,
        user: User,
        status: GoalStatus = GoalStatus.DRAFT,
    ) -> Goal:
        """Store a new goal as a draft or send it straight to review."""
        if status not in CREATION_STATUSES:
            raise ValidationError(
                f"New goals start as DRAFT or IN_REVIEW, not {status.value}", field="status"
            )
        self._check_draft(draft)
        goal = self.build_goal(draft, user, status)
        return self.repository.add_goal(goal)

    # ---------------------------------------------------------------------
    # Evaluation
    # ---------------------------------------------------------------------
    def evaluate(self, goal_id: str) -> SmartFeedback:
        goal = self.repository.require_goal(goal_id)
        return self.evaluate_goal(goal)

    def evaluate_goal(self, goal: Goal) -> SmartFeedback:
        return evaluate_smart_goal(goal, self.repository.resolve_parent(goal))

    def _preview_goal(self, draft: GoalDraft, user: User) -> Optional[Goal]:
        if not draft.title or not draft.description:
            return None
        if len(draft.title) < self.config.PREVIEW_MIN_TITLE_LENGTH:
            return None

        now = datetime.now(timezone.utc)
        provisional = GoalDraft(
            title=draft.title,
            description=draft.description,
            period=draft.period or GoalPeriod.TRIMESTRAL,
            start_date=draft.start_date or now.isoformat(),
            end_date=draft.end_date or (now + timedelta(days=DEFAULT_PREVIEW_DAYS)).isoformat(),
            metrics=draft.metrics,
            tags=draft.tags,
            parent_goal_alignments=draft.parent_goal_alignments,
            parent_goal_id=draft.parent_goal_id,
        )
        return self.build_goal(provisional, user, goal_id="temp")

    def preview(self, draft: GoalDraft, user: User) -> Optional[SmartFeedback]:
        """
        Score an unsaved draft. Returns None while the title is too short or
        the description is empty; missing dates default to a 90-day window.
        """
        goal = self._preview_goal(draft, user)
        if goal is None:
            return None
        return self.evaluate_goal(goal)

    async def preview_with_ai(self, draft: GoalDraft, user: User) -> Optional[SmartFeedback]:
        """Same as preview, behind the simulated AI review latency."""
        goal = self._preview_goal(draft, user)
        if goal is None:
            return None
        return await simulate_ai_validation(
            goal,
            self.repository.resolve_parent(goal),
            min_delay_ms=self.config.AI_VALIDATION_MIN_DELAY_MS,
            max_delay_ms=self.config.AI_VALIDATION_MAX_DELAY_MS,
        )

    # ---------------------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------------------
    def change_status(self, goal_id: str, status: GoalStatus) -> Goal:
        goal = self.repository.require_goal(goal_id)
        logger.info(f"Goal {goal_id} status {goal.status.value} -> {status.value}")
        return self.repository.update_goal(goal_id, {"status": status.value})

    def add_plan(
        self,
        goal_id: str,
        title: str,
        description: str,
        due_date: str,
        priority: PlanPriority = PlanPriority.MEDIUM,
        assigned_to: Optional[str] = None,
    ) -> GoalPlan:
        goal = self.repository.require_goal(goal_id)
        if not title.strip():
            raise ValidationError("Plan title is required", field="title")

        timestamp = now_iso()
        plan = GoalPlan(
            id=f"plan-{uuid.uuid4().hex[:8]}",
            goal_id=goal_id,
            title=title,
            description=description,
            due_date=due_date,
            status=PlanStatus.PENDING,
            priority=priority,
            assigned_to=assigned_to,
            created_at=timestamp,
            updated_at=timestamp,
        )
        plans = [p.to_dict() for p in goal.plans] + [plan.to_dict()]
        self.repository.update_goal(goal_id, {"plans": plans})
        return plan

    def add_review(
        self,
        goal_id: str,
        reviewer: User,
        progress: int,
        status: ReviewStatus,
        achievements: Optional[List[str]] = None,
        challenges: Optional[List[str]] = None,
        next_actions: Optional[List[str]] = None,
        notes: Optional[str] = None,
    ) -> GoalReview:
        goal = self.repository.require_goal(goal_id)
        if not 0 <= progress <= 100:
            raise ValidationError("Progress must be between 0 and 100", field="progress")

        timestamp = now_iso()
        review = GoalReview(
            id=f"review-{uuid.uuid4().hex[:8]}",
            goal_id=goal_id,
            review_date=timestamp,
            progress=progress,
            status=status,
            reviewer_user_id=reviewer.id,
            achievements=list(achievements or []),
            challenges=list(challenges or []),
            next_actions=list(next_actions or []),
            notes=notes,
            created_at=timestamp,
        )
        reviews = [r.to_dict() for r in goal.reviews] + [review.to_dict()]
        self.repository.update_goal(goal_id, {"reviews": reviews})
        return review

    @staticmethod
    def draft_from_dict(data: Dict[str, Any]) -> GoalDraft:
        """Build a draft from client JSON keys."""
        return GoalDraft(
            title=data.get("title") or "",
            description=data.get("description") or "",
            period=GoalPeriod(data.get("period") or GoalPeriod.TRIMESTRAL.value),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            metrics=[GoalMetric.from_dict(m) for m in data.get("metrics") or []],
            tags=list(data.get("tags") or []),
            parent_goal_alignments=[
                ParentGoalAlignment.from_dict(a) for a in data.get("parentGoalAlignments") or []
            ],
            parent_goal_id=data.get("parentGoalId"),
        )
