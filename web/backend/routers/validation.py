from typing import Optional

from fastapi import APIRouter, Depends

from core.app_context import AppContext
from core.goal_service import GoalService
from core.models import Goal, User
from core.smart_validator import evaluate_smart_goal, simulate_ai_validation
from web.backend.dependencies import get_context, get_current_user
from web.backend.schemas import EvaluateRequest, GoalDraftRequest

router = APIRouter()


def _resolve(req: EvaluateRequest, context: AppContext):
    goal = Goal.from_dict(req.goal.to_client_dict())
    # An explicit parent id wins; an unknown one scores as "no parent"
    if req.parent_goal_id:
        parent: Optional[Goal] = context.goals.get_goal(req.parent_goal_id)
    else:
        parent = context.goals.resolve_parent(goal)
    return goal, parent


@router.post("/evaluate")
def evaluate(req: EvaluateRequest, context: AppContext = Depends(get_context)):
    goal, parent = _resolve(req, context)
    return evaluate_smart_goal(goal, parent).to_dict()


@router.post("/simulate")
async def simulate(req: EvaluateRequest, context: AppContext = Depends(get_context)):
    """Same scoring as /evaluate behind the simulated AI latency."""
    goal, parent = _resolve(req, context)
    feedback = await simulate_ai_validation(
        goal,
        parent,
        min_delay_ms=context.config.AI_VALIDATION_MIN_DELAY_MS,
        max_delay_ms=context.config.AI_VALIDATION_MAX_DELAY_MS,
    )
    return feedback.to_dict()


@router.post("/preview")
def preview(
    req: GoalDraftRequest,
    user: User = Depends(get_current_user),
    context: AppContext = Depends(get_context),
):
    """Live feedback for the creation form; null until the draft is scoreable."""
    draft = GoalService.draft_from_dict(req.to_client_dict())
    feedback = context.goal_service.preview(draft, user)
    return {"feedback": feedback.to_dict() if feedback else None}
