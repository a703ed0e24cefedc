"""Tests for category ordering and removal."""


def create_category(client, user, project_id, name):
    return client.post(
        "/categories/",
        json={"name": name, "color": "#00ff00", "project_id": project_id},
        headers=user.headers,
    )


def test_order_starts_at_zero_and_increments(client, make_user, make_project):
    alice = make_user("Alice")
    project = make_project(alice)

    first = create_category(client, alice, project["id"], "Backlog")
    second = create_category(client, alice, project["id"], "Doing")

    assert first.status_code == 201
    assert first.json()["order"] == 0
    assert second.json()["order"] == 1


def test_order_is_per_project(client, make_user, make_project):
    alice = make_user("Alice")
    one = make_project(alice, name="One")
    two = make_project(alice, name="Two")

    create_category(client, alice, one["id"], "A")
    create_category(client, alice, one["id"], "B")

    assert create_category(client, alice, two["id"], "C").json()["order"] == 0


def test_list_sorted_by_order(client, make_user, make_project):
    alice = make_user("Alice")
    project = make_project(alice)
    for name in ("Backlog", "Doing", "Done"):
        create_category(client, alice, project["id"], name)

    response = client.get(f"/categories/project/{project['id']}", headers=alice.headers)
    assert [c["name"] for c in response.json()] == ["Backlog", "Doing", "Done"]


def test_update_changes_only_given_fields(client, make_user, make_project):
    alice = make_user("Alice")
    project = make_project(alice)
    category = create_category(client, alice, project["id"], "Backlog").json()

    response = client.patch(f"/categories/{category['id']}", json={"name": "Icebox"}, headers=alice.headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Icebox"
    assert response.json()["color"] == "#00ff00"


def test_non_member_is_denied_everywhere(client, make_user, make_project):
    alice, eve = make_user("Alice"), make_user("Eve")
    project = make_project(alice)
    category = create_category(client, alice, project["id"], "Backlog").json()

    assert client.get(f"/categories/project/{project['id']}", headers=eve.headers).status_code == 403
    assert create_category(client, eve, project["id"], "Mine").status_code == 403
    assert client.patch(f"/categories/{category['id']}", json={"name": "x"}, headers=eve.headers).status_code == 403
    assert client.delete(f"/categories/{category['id']}", headers=eve.headers).status_code == 403


def test_delete_uncategorizes_tasks_instead_of_deleting_them(client, make_user, make_project, make_task):
    alice = make_user("Alice")
    project = make_project(alice)
    category = create_category(client, alice, project["id"], "Backlog").json()
    tasks = [
        make_task(alice, project["id"], title=f"Task {i}", category_id=category["id"])
        for i in range(3)
    ]

    response = client.delete(f"/categories/{category['id']}", headers=alice.headers)
    assert response.status_code == 204

    for task in tasks:
        fetched = client.get(f"/tasks/{task['id']}", headers=alice.headers)
        assert fetched.status_code == 200
        assert fetched.json()["category_id"] is None

    remaining = client.get(f"/categories/project/{project['id']}", headers=alice.headers).json()
    assert remaining == []


def test_delete_unknown_category(client, make_user):
    alice = make_user("Alice")
    assert client.delete("/categories/77", headers=alice.headers).status_code == 404
