import asyncio

import pytest

from core.config_manager import SystemConfig
from core.exceptions import GoalNotFoundError, ValidationError
from core.goal_service import GoalDraft, GoalService
from core.models import (
    GoalMetric,
    GoalPeriod,
    GoalStatus,
    ParentGoalAlignment,
    PlanPriority,
    ReviewStatus,
)


@pytest.fixture
def service(goal_repo, fast_config):
    return GoalService(goal_repo, fast_config)


@pytest.fixture
def leader(organization):
    return organization.get_user("user-7")


def _draft(**overrides):
    data = dict(
        title="Incrementar ventas del territorio norte en 10%",
        description="Contribuir al margen operativo con nuevas cuentas corporativas en la zona norte",
        period=GoalPeriod.TRIMESTRAL,
        start_date="2024-04-01",
        end_date="2024-06-30",
        metrics=[GoalMetric("Cuentas corporativas", baseline=10, target=14, unit="cuentas")],
        tags=["ventas", "crecimiento"],
        parent_goal_alignments=[ParentGoalAlignment("goal-40", "Aporta al margen")],
    )
    data.update(overrides)
    return GoalDraft(**data)


def test_create_goal_fills_owner_and_cleans_lists(service, leader, goal_repo):
    draft = _draft(
        metrics=[GoalMetric("  "), GoalMetric("Cuentas nuevas", target=12, unit="cuentas")],
        parent_goal_alignments=[ParentGoalAlignment(""), ParentGoalAlignment("goal-40")],
    )
    goal = service.create_goal(draft, leader)

    assert goal.id.startswith("goal-")
    assert goal.org_unit_id == "org-4"
    assert goal.owner_user_id == "user-7"
    assert goal.status == GoalStatus.DRAFT
    assert [m.name for m in goal.metrics] == ["Cuentas nuevas"]
    assert [a.parent_goal_id for a in goal.parent_goal_alignments] == ["goal-40"]
    assert goal.created_at == goal.updated_at
    assert goal_repo.get_goal(goal.id) is goal


def test_create_goal_submitted_for_review(service, leader):
    goal = service.create_goal(_draft(), leader, GoalStatus.IN_REVIEW)
    assert goal.status == GoalStatus.IN_REVIEW


def test_goal_ids_do_not_collide(service, leader):
    first = service.create_goal(_draft(), leader)
    second = service.create_goal(_draft(), leader)
    assert first.id != second.id


@pytest.mark.parametrize("overrides, field", [
    ({"title": "Meta"}, "title"),
    ({"description": "Corta"}, "description"),
    ({"start_date": None}, "startDate"),
    ({"end_date": ""}, "endDate"),
    ({"metrics": []}, "metrics"),
    ({"metrics": [GoalMetric(" ", target=5)]}, "metrics"),
])
def test_create_goal_rejects_incomplete_drafts(service, leader, goal_repo, overrides, field):
    with pytest.raises(ValidationError) as exc:
        service.create_goal(_draft(**overrides), leader)
    assert exc.value.field == field
    assert len(goal_repo.list_goals()) == 7


def test_create_goal_rejects_other_statuses(service, leader):
    with pytest.raises(ValidationError):
        service.create_goal(_draft(), leader, GoalStatus.ACTIVE)


def test_evaluate_stored_goal_uses_its_parent(service):
    feedback = service.evaluate("goal-4")
    # goal-4 points at goal-1, so Relevant is no longer the top-level 15
    assert feedback.breakdown["R"].score != 15
    assert len(feedback.alignment_notes) == 4

    with pytest.raises(GoalNotFoundError):
        service.evaluate("goal-404")


def test_preview_needs_title_and_description(service, leader):
    assert service.preview(_draft(title="Meta"), leader) is None
    assert service.preview(_draft(description=""), leader) is None
    assert service.preview(_draft(), leader) is not None


def test_preview_defaults_to_ninety_day_window(service, leader):
    feedback = service.preview(_draft(start_date=None, end_date=None), leader)
    # 90 days is three months: coherent for a quarterly goal
    assert feedback.breakdown["T"].score == 20


def test_preview_aligns_against_parent(service, leader):
    feedback = service.preview(_draft(), leader)
    assert feedback.alignment_score < 100
    assert feedback.alignment_notes[0].startswith("✓ Excelente alineación de tags")


def test_preview_with_ai_matches_preview(service, leader):
    draft = _draft()
    assert asyncio.run(service.preview_with_ai(draft, leader)) == service.preview(draft, leader)
    assert asyncio.run(service.preview_with_ai(_draft(title=""), leader)) is None


def test_change_status(service, goal_repo):
    goal = service.change_status("goal-2", GoalStatus.DONE)
    assert goal.status == GoalStatus.DONE
    assert goal_repo.get_goal("goal-2").status == GoalStatus.DONE


def test_add_plan(service, goal_repo):
    plan = service.add_plan(
        "goal-2", "Encuesta trimestral", "Medir NPS por canal", "2024-06-30",
        priority=PlanPriority.HIGH, assigned_to="user-7",
    )
    stored = goal_repo.get_goal("goal-2").plans
    assert [p.id for p in stored] == [plan.id]
    assert stored[0].priority == PlanPriority.HIGH
    assert stored[0].goal_id == "goal-2"

    with pytest.raises(ValidationError):
        service.add_plan("goal-2", " ", "", "2024-06-30")


def test_add_review(service, goal_repo, organization):
    reviewer = organization.get_user("user-2")
    review = service.add_review(
        "goal-1", reviewer, 50, ReviewStatus.AT_RISK, challenges=["Tipo de cambio"],
    )
    reviews = goal_repo.get_goal("goal-1").reviews
    assert [r.id for r in reviews] == ["review-1", review.id]
    assert reviews[-1].reviewer_user_id == "user-2"
    assert reviews[-1].challenges == ["Tipo de cambio"]

    with pytest.raises(ValidationError):
        service.add_review("goal-1", reviewer, 120, ReviewStatus.ON_TRACK)


def test_description_minimum_is_configurable(goal_repo, leader):
    service = GoalService(goal_repo, SystemConfig(MIN_DESCRIPTION_LENGTH=3))
    goal = service.create_goal(_draft(description="Corta"), leader)
    assert goal.description == "Corta"


def test_draft_from_client_json():
    draft = GoalService.draft_from_dict({
        "title": "Reducir costos",
        "period": "MENSUAL",
        "startDate": "2024-01-01",
        "metrics": [{"name": "Costo", "baseline": 10, "target": "8"}],
        "parentGoalAlignments": [{"parentGoalId": "goal-3", "relevanceReason": "Ahorro"}],
    })
    assert draft.period == GoalPeriod.MENSUAL
    assert draft.description == ""
    assert draft.end_date is None
    assert draft.metrics[0].target.value == "8"
    assert draft.parent_goal_alignments[0].relevance_reason == "Ahorro"


def test_fingerprint_tracks_edits():
    assert _draft().fingerprint() == _draft().fingerprint()
    assert _draft().fingerprint() != _draft(tags=["ventas"]).fingerprint()
