"""
Dashboard and analytics aggregates over scored goals.

Every figure is derived on demand from the goal list and the scoring
engine; nothing here is persisted.
"""
from typing import Any, Callable, Dict, Iterable, List, Optional

from core.goals_repository import GoalRepository
from core.models import CRITERIA, Goal, GoalPeriod, GoalStatus, SmartFeedback, User, UserRole
from core.organization import OrganizationRepository
from core.smart_validator import evaluate_smart_goal, round_half_up

ParentResolver = Callable[[Goal], Optional[Goal]]

REVIEWER_ROLES = (UserRole.GERENTE, UserRole.LIDER_EQUIPO, UserRole.VP, UserRole.DIRECTOR)

SUMMARY_STATUSES = (GoalStatus.DRAFT, GoalStatus.ACTIVE, GoalStatus.DONE, GoalStatus.CANCELLED)

# Fixed historical points shown before the current month in the trend chart
IMPROVEMENT_HISTORY = (
    ("Ene", 45, 40),
    ("Feb", 52, 48),
    ("Mar", 61, 55),
    ("Abr", 68, 62),
)
CURRENT_MONTH_LABEL = "May"


def _mean(values: List[int]) -> int:
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def score_goals(goals: Iterable[Goal], resolve_parent: ParentResolver) -> List[SmartFeedback]:
    return [evaluate_smart_goal(g, resolve_parent(g)) for g in goals]


def improvement_trend(avg_smart_score: int) -> int:
    if avg_smart_score > 70:
        return 15
    if avg_smart_score > 50:
        return 5
    return -5


def dashboard_metrics(goals: List[Goal], resolve_parent: ParentResolver) -> Dict[str, Any]:
    """Headline numbers for the goals the user can see."""
    feedbacks = score_goals(goals, resolve_parent)
    avg_smart = _mean([f.smart_score for f in feedbacks])
    return {
        "totalGoals": len(goals),
        "activeGoals": sum(1 for g in goals if g.status == GoalStatus.ACTIVE),
        "avgSmartScore": avg_smart,
        "avgAlignmentScore": _mean([f.alignment_score for f in feedbacks]),
        "goalsByStatus": {
            status.value: sum(1 for g in goals if g.status == status) for status in GoalStatus
        },
        "improvementTrend": improvement_trend(avg_smart),
    }


def analytics_summary(
    user: User,
    repository: GoalRepository,
    organization: OrganizationRepository,
) -> Dict[str, Any]:
    goals = repository.get_goals_by_org_unit(user.org_unit_id)
    feedbacks = score_goals(goals, repository.resolve_parent)
    divisor = max(len(feedbacks), 1)

    criteria_averages = {
        code: round_half_up(sum(f.breakdown[code].score for f in feedbacks) / divisor)
        for code in CRITERIA
    }
    avg_smart = _mean([f.smart_score for f in feedbacks])
    avg_alignment = _mean([f.alignment_score for f in feedbacks])

    improvement = [
        {"month": month, "smartScore": smart, "alignmentScore": alignment}
        for month, smart, alignment in IMPROVEMENT_HISTORY
    ]
    improvement.append({
        "month": CURRENT_MONTH_LABEL,
        "smartScore": avg_smart,
        "alignmentScore": avg_alignment,
    })

    done = sum(1 for g in goals if g.status == GoalStatus.DONE)
    summary = {
        "totalGoals": len(goals),
        "avgSmartScore": avg_smart,
        "avgAlignmentScore": avg_alignment,
        "criteriaAverages": criteria_averages,
        "statusDistribution": {
            status.value: sum(1 for g in goals if g.status == status)
            for status in SUMMARY_STATUSES
        },
        "periodDistribution": {
            period.value: sum(1 for g in goals if g.period == period) for period in GoalPeriod
        },
        "improvementData": improvement,
        "completionRate": round_half_up(done / divisor * 100),
        "orgOverview": None,
    }

    if user.role == UserRole.ADMIN:
        all_goals = repository.list_goals()
        summary["orgOverview"] = {
            "totalUnits": len(organization.org_units),
            "totalGoals": len(all_goals),
            "activeGoals": sum(1 for g in all_goals if g.status == GoalStatus.ACTIVE),
            "avgOrgSmartScore": _mean(
                [f.smart_score for f in score_goals(all_goals, repository.resolve_parent)]
            ),
        }
    return summary


def team_goals_to_review(
    user: User,
    organization: OrganizationRepository,
    goals: Iterable[Goal],
) -> List[Goal]:
    """IN_REVIEW goals owned by members of the user's child org units."""
    if user.role not in REVIEWER_ROLES:
        return []
    team_user_ids = {
        member.id
        for unit in organization.get_child_org_units(user.org_unit_id)
        for member in organization.get_users_by_org_unit(unit.id)
    }
    return [
        g for g in goals
        if g.status == GoalStatus.IN_REVIEW and g.owner_user_id in team_user_ids
    ]


def visible_goals(user: User, repository: GoalRepository) -> List[Goal]:
    if user.role == UserRole.ADMIN:
        return repository.list_goals()
    return repository.get_goals_by_org_unit(user.org_unit_id)
