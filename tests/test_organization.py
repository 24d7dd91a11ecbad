from core.models import OrgUnit, OrgUnitType
from core.organization import OrganizationRepository


def _flatten(nodes):
    for node in nodes:
        yield node
        yield from _flatten(node["children"])


def test_hierarchy_queries(organization):
    assert organization.get_parent_org_unit("org-4").id == "org-3"
    assert organization.get_parent_org_unit("org-1") is None
    assert organization.get_parent_org_unit("org-404") is None
    assert [u.id for u in organization.get_child_org_units("org-2")] == ["org-3", "org-6", "org-9"]
    assert [u.id for u in organization.get_users_by_org_unit("org-4")] == [
        "user-2", "user-7", "user-11",
    ]


def test_find_user_by_email_ignores_case(organization):
    assert organization.find_user_by_email(" ADMIN@aceleracorp.com ").id == "user-1"
    assert organization.find_user_by_email("nobody@aceleracorp.com") is None
    assert organization.find_user_by_email("") is None


def test_tree_levels_and_counts(organization, goal_repo):
    tree = organization.build_tree(goals_by_org_unit=goal_repo.get_goals_by_org_unit)

    assert [n["id"] for n in tree] == ["org-1"]
    nodes = {n["id"]: n for n in _flatten(tree)}
    assert len(nodes) == 9
    assert nodes["org-1"]["level"] == 0
    assert nodes["org-4"]["level"] == 3
    assert nodes["org-4"]["userCount"] == 3
    assert nodes["org-4"]["activeGoalCount"] == 2
    assert nodes["org-3"]["activeGoalCount"] == 2
    assert nodes["org-9"]["activeGoalCount"] == 0
    assert nodes["org-4"]["parentId"] == "org-3"


def test_tree_without_goal_lookup_counts_zero(organization):
    nodes = list(_flatten(organization.build_tree()))
    assert all(n["activeGoalCount"] == 0 for n in nodes)


def test_tree_search_keeps_ancestors_of_matches(organization):
    tree = organization.build_tree(search="norte")
    path = []
    nodes = tree
    while nodes:
        assert len(nodes) == 1
        path.append(nodes[0]["id"])
        nodes = nodes[0]["children"]
    assert path == ["org-1", "org-2", "org-3", "org-4"]


def test_tree_search_no_match(organization):
    assert organization.build_tree(search="marketing") == []


def test_custom_org_units():
    org = OrganizationRepository(
        org_units=[
            OrgUnit("a", "Alpha", OrgUnitType.COMPANY),
            OrgUnit("b", "Beta", OrgUnitType.EQUIPO, parent_id="a"),
        ],
        users=[],
    )
    tree = org.build_tree(search="BETA")
    assert tree[0]["children"][0]["name"] == "Beta"
    assert tree[0]["children"][0]["userCount"] == 0
