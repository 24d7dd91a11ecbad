import pytest
from fastapi.testclient import TestClient

from web.backend.app import create_app

API = "/api/v1"

DRAFT = {
    "title": "Incrementar ventas del territorio norte en 10%",
    "description": "Contribuir al margen operativo con nuevas cuentas corporativas en la zona norte",
    "period": "TRIMESTRAL",
    "startDate": "2024-04-01",
    "endDate": "2024-06-30",
    "metrics": [{"name": "Cuentas corporativas", "baseline": 10, "target": 14, "unit": "cuentas"}],
    "tags": ["ventas"],
    "parentGoalAlignments": [{"parentGoalId": "goal-40", "relevanceReason": "Margen"}],
}


@pytest.fixture
def client(context):
    return TestClient(create_app(context))


@pytest.fixture
def logged_in(client):
    response = client.post(f"{API}/auth/login", json={"email": "luis.herrera@aceleracorp.com"})
    assert response.status_code == 200
    return client


def _login(client, email):
    assert client.post(f"{API}/auth/login", json={"email": email}).status_code == 200


def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "service": "Acelera SMART Goals"}


def test_auth_flow(client):
    assert client.get(f"{API}/auth/me").status_code == 401

    bad = client.post(f"{API}/auth/login", json={"email": "nadie@example.com"})
    assert bad.status_code == 401
    assert bad.json()["hint"] == "Use the email of a registered user"

    _login(client, "ADMIN@aceleracorp.com")
    me = client.get(f"{API}/auth/me").json()
    assert me["user"]["id"] == "user-1"
    assert me["user"]["orgUnitId"] == "org-1"

    assert client.post(f"{API}/auth/logout").json()["isAuthenticated"] is False
    assert client.get(f"{API}/auth/me").status_code == 401


def test_goals_require_login(client):
    assert client.get(f"{API}/goals").status_code == 401


def test_list_goals_with_feedback(logged_in):
    payload = logged_in.get(f"{API}/goals").json()
    assert [g["id"] for g in payload["goals"]] == ["goal-1", "goal-2"]
    assert payload["total"] == 2
    feedback = payload["goals"][0]["feedback"]
    assert set(feedback["breakdown"]) == {"S", "M", "A", "R", "T"}
    assert feedback["overallGrade"] in {"excellent", "good", "needs-work", "poor"}


def test_list_goals_filters(logged_in):
    ids = [g["id"] for g in logged_in.get(f"{API}/goals", params={"search": "nps"}).json()["goals"]]
    assert ids == ["goal-2"]
    assert logged_in.get(f"{API}/goals", params={"status": "DRAFT"}).json()["total"] == 0
    assert logged_in.get(f"{API}/goals", params={"status": "BOGUS"}).status_code == 422


def test_admin_sees_every_goal(client):
    _login(client, "admin@aceleracorp.com")
    assert client.get(f"{API}/goals").json()["total"] == 7


def test_create_goal_and_fetch_it(logged_in):
    created = logged_in.post(f"{API}/goals", json=DRAFT)
    assert created.status_code == 201
    goal = created.json()
    assert goal["status"] == "DRAFT"
    assert goal["ownerUserId"] == "user-7"
    assert goal["orgUnitId"] == "org-4"
    assert goal["feedback"]["alignmentScore"] < 100

    fetched = logged_in.get(f"{API}/goals/{goal['id']}").json()
    assert fetched["title"] == DRAFT["title"]
    assert fetched["metrics"] == DRAFT["metrics"]


def test_create_goal_submitted_for_review(logged_in):
    goal = logged_in.post(f"{API}/goals", json={**DRAFT, "submit": True}).json()
    assert goal["status"] == "IN_REVIEW"


def test_create_goal_validation_error(logged_in):
    response = logged_in.post(f"{API}/goals", json={**DRAFT, "metrics": []})
    assert response.status_code == 400
    assert "metric" in response.json()["detail"]


def test_update_and_delete_goal(logged_in):
    updated = logged_in.patch(f"{API}/goals/goal-2", json={"title": "Mejorar NPS a 92 puntos"})
    assert updated.status_code == 200
    assert updated.json()["title"] == "Mejorar NPS a 92 puntos"
    assert updated.json()["tags"] == ["satisfaccion", "nps", "retencion", "clientes"]

    assert logged_in.delete(f"{API}/goals/goal-2").json() == {"success": True, "id": "goal-2"}
    assert logged_in.get(f"{API}/goals/goal-2").status_code == 404
    assert logged_in.delete(f"{API}/goals/goal-2").status_code == 404


def test_status_plans_and_reviews(logged_in):
    status = logged_in.post(f"{API}/goals/goal-2/status", json={"status": "DONE"})
    assert status.json()["status"] == "DONE"

    plan = logged_in.post(
        f"{API}/goals/goal-2/plans",
        json={"title": "Encuesta", "dueDate": "2024-06-30", "priority": "HIGH"},
    )
    assert plan.status_code == 201
    assert plan.json()["goalId"] == "goal-2"

    review = logged_in.post(
        f"{API}/goals/goal-2/reviews",
        json={"progress": 80, "status": "AHEAD", "nextActions": ["Cerrar Q2"]},
    )
    assert review.status_code == 201
    assert review.json()["reviewerUserId"] == "user-7"
    assert review.json()["nextActions"] == ["Cerrar Q2"]

    too_much = logged_in.post(
        f"{API}/goals/goal-2/reviews", json={"progress": 150, "status": "AHEAD"}
    )
    assert too_much.status_code == 422

    goal = logged_in.get(f"{API}/goals/goal-2").json()
    assert len(goal["plans"]) == 1
    assert len(goal["reviews"]) == 1


def test_children_and_parent_goals(logged_in):
    children = logged_in.get(f"{API}/goals/goal-1/children").json()["goals"]
    assert [g["id"] for g in children] == ["goal-4", "goal-40", "goal-41", "goal-5"]
    assert logged_in.get(f"{API}/goals/goal-404/children").status_code == 404

    parents = logged_in.get(f"{API}/goals/parents").json()["goals"]
    assert [g["id"] for g in parents] == ["goal-40", "goal-41"]


def test_evaluate_inline_goal(client):
    body = {
        "goal": {
            "title": "Incrementar ventas en 25%",
            "description": (
                "Aumentar ingresos del equipo comercial mediante nuevas estrategias "
                "de venta en el territorio norte"
            ),
            "period": "TRIMESTRAL",
            "startDate": "2024-01-01",
            "endDate": "2024-03-31",
            "metrics": [{"name": "Ventas", "baseline": 100, "target": 125, "unit": "K USD"}],
            "tags": ["ventas"],
        }
    }
    feedback = client.post(f"{API}/validation/evaluate", json=body).json()
    assert feedback["smartScore"] == 79
    assert feedback["overallGrade"] == "good"
    assert feedback["alignmentScore"] == 100

    with_parent = client.post(
        f"{API}/validation/evaluate", json={**body, "parentGoalId": "goal-1"}
    ).json()
    assert len(with_parent["alignmentNotes"]) == 4

    unknown_parent = client.post(
        f"{API}/validation/evaluate", json={**body, "parentGoalId": "goal-404"}
    ).json()
    assert unknown_parent == feedback


def test_simulate_matches_evaluate(client):
    body = {"goal": {"title": "Reducir costos operativos", "description": "Procesos"}}
    evaluated = client.post(f"{API}/validation/evaluate", json=body).json()
    simulated = client.post(f"{API}/validation/simulate", json=body).json()
    assert simulated == evaluated
    assert evaluated["breakdown"]["T"]["score"] == 0


def test_preview_draft(logged_in):
    assert logged_in.post(f"{API}/validation/preview", json={"title": "Meta"}).json() == {
        "feedback": None
    }
    preview = logged_in.post(f"{API}/validation/preview", json=DRAFT).json()
    assert preview["feedback"]["breakdown"]["T"]["score"] == 20


def test_organization_tree_and_users(client):
    tree = client.get(f"{API}/organization/tree").json()["tree"]
    assert tree[0]["id"] == "org-1"
    assert tree[0]["activeGoalCount"] == 1

    filtered = client.get(f"{API}/organization/tree", params={"search": "sur"}).json()["tree"]
    assert filtered[0]["children"][0]["children"][0]["children"][0]["name"] == "Ventas Sur"

    users = client.get(f"{API}/organization/units/org-4/users").json()["users"]
    assert [u["id"] for u in users] == ["user-2", "user-7", "user-11"]
    assert client.get(f"{API}/organization/units/org-404/users").status_code == 404
    assert len(client.get(f"{API}/organization/units").json()["units"]) == 9


def test_analytics_endpoints(client):
    assert client.get(f"{API}/analytics/dashboard").status_code == 401

    _login(client, "admin@aceleracorp.com")
    dashboard = client.get(f"{API}/analytics/dashboard").json()
    assert dashboard["totalGoals"] == 7
    summary = client.get(f"{API}/analytics/summary").json()
    assert summary["orgOverview"]["totalUnits"] == 9
    assert client.get(f"{API}/analytics/team-review").json() == {"goals": []}


def test_team_review_endpoint(client):
    _login(client, "sofia.vargas@aceleracorp.com")
    created = client.post(f"{API}/goals", json={**DRAFT, "submit": True}).json()

    _login(client, "ana.martinez@aceleracorp.com")
    goals = client.get(f"{API}/analytics/team-review").json()["goals"]
    assert [g["id"] for g in goals] == [created["id"]]
    assert "feedback" in goals[0]


def test_evaluate_survives_extreme_growth(client):
    body = {
        "goal": {
            "title": "Incrementar ventas en 25%",
            "period": "MENSUAL",
            "startDate": "2024-01-01",
            "endDate": "2024-01-31",
            "metrics": [{"name": "Ventas", "baseline": 1e-300, "target": 1e300}],
        }
    }
    response = client.post(f"{API}/validation/evaluate", json=body)
    assert response.status_code == 200
    assert response.json()["breakdown"]["A"]["score"] == 10
