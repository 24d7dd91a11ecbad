from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from core.analytics import visible_goals
from core.app_context import AppContext
from core.goal_service import GoalService
from core.goals_repository import GoalRepository
from core.models import Goal, GoalPeriod, GoalStatus, User
from web.backend.dependencies import get_context, get_current_user
from web.backend.schemas import (
    GoalCreateRequest,
    GoalUpdateRequest,
    PlanRequest,
    ReviewRequest,
    StatusChangeRequest,
)

router = APIRouter()


def goal_with_feedback(context: AppContext, goal: Goal) -> Dict[str, Any]:
    data = goal.to_dict()
    data["feedback"] = context.goal_service.evaluate_goal(goal).to_dict()
    return data


@router.get("")
def list_goals(
    search: Optional[str] = None,
    status: Optional[GoalStatus] = None,
    period: Optional[GoalPeriod] = None,
    user: User = Depends(get_current_user),
    context: AppContext = Depends(get_context),
):
    goals = GoalRepository.search(visible_goals(user, context.goals), search, status, period)
    return {
        "goals": [goal_with_feedback(context, g) for g in goals],
        "total": len(goals),
    }


@router.get("/parents")
def list_parent_goals(
    user: User = Depends(get_current_user),
    context: AppContext = Depends(get_context),
):
    """ACTIVE goals of the parent org unit, for aligning a new goal."""
    parents = context.goals.get_parent_goals(user.org_unit_id)
    return {"goals": [g.to_dict() for g in parents]}


@router.post("", status_code=201)
def create_goal(
    req: GoalCreateRequest,
    user: User = Depends(get_current_user),
    context: AppContext = Depends(get_context),
):
    draft = GoalService.draft_from_dict(req.to_client_dict())
    status = GoalStatus.IN_REVIEW if req.submit else GoalStatus.DRAFT
    goal = context.goal_service.create_goal(draft, user, status)
    return goal_with_feedback(context, goal)


@router.get("/{goal_id}")
def get_goal(goal_id: str, context: AppContext = Depends(get_context)):
    return goal_with_feedback(context, context.goals.require_goal(goal_id))


@router.patch("/{goal_id}")
def update_goal(
    goal_id: str,
    req: GoalUpdateRequest,
    context: AppContext = Depends(get_context),
):
    goal = context.goals.update_goal(goal_id, req.to_client_dict(exclude_unset=True))
    return goal_with_feedback(context, goal)


@router.delete("/{goal_id}")
def delete_goal(goal_id: str, context: AppContext = Depends(get_context)):
    context.goals.delete_goal(goal_id)
    return {"success": True, "id": goal_id}


@router.post("/{goal_id}/status")
def change_status(
    goal_id: str,
    req: StatusChangeRequest,
    context: AppContext = Depends(get_context),
):
    goal = context.goal_service.change_status(goal_id, req.status)
    return goal.to_dict()


@router.post("/{goal_id}/plans", status_code=201)
def add_plan(goal_id: str, req: PlanRequest, context: AppContext = Depends(get_context)):
    plan = context.goal_service.add_plan(
        goal_id,
        title=req.title,
        description=req.description,
        due_date=req.due_date,
        priority=req.priority,
        assigned_to=req.assigned_to,
    )
    return plan.to_dict()


@router.post("/{goal_id}/reviews", status_code=201)
def add_review(
    goal_id: str,
    req: ReviewRequest,
    user: User = Depends(get_current_user),
    context: AppContext = Depends(get_context),
):
    review = context.goal_service.add_review(
        goal_id,
        reviewer=user,
        progress=req.progress,
        status=req.status,
        achievements=req.achievements,
        challenges=req.challenges,
        next_actions=req.next_actions,
        notes=req.notes,
    )
    return review.to_dict()


@router.get("/{goal_id}/children")
def list_child_goals(goal_id: str, context: AppContext = Depends(get_context)):
    context.goals.require_goal(goal_id)
    return {"goals": [g.to_dict() for g in context.goals.get_child_goals(goal_id)]}
