from fastapi import APIRouter, Depends

from core.analytics import analytics_summary, dashboard_metrics, team_goals_to_review, visible_goals
from core.app_context import AppContext
from core.models import User
from web.backend.dependencies import get_context, get_current_user
from web.backend.routers.goals import goal_with_feedback

router = APIRouter()


@router.get("/dashboard")
def dashboard(
    user: User = Depends(get_current_user),
    context: AppContext = Depends(get_context),
):
    return dashboard_metrics(visible_goals(user, context.goals), context.goals.resolve_parent)


@router.get("/summary")
def summary(
    user: User = Depends(get_current_user),
    context: AppContext = Depends(get_context),
):
    return analytics_summary(user, context.goals, context.organization)


@router.get("/team-review")
def team_review(
    user: User = Depends(get_current_user),
    context: AppContext = Depends(get_context),
):
    goals = team_goals_to_review(user, context.organization, context.goals.list_goals())
    return {"goals": [goal_with_feedback(context, g) for g in goals]}
