from datetime import datetime, timedelta, timezone

def _iso(dt: datetime) -> str:
    return dt.isoformat()

def test_dashboard_only_shows_assigned_tasks(client, team):
    me = team["contributor"]
    owner = team["owner"]
    url = f"/projects/{team['project_id']}/tasks"
    now = datetime.now(timezone.utc)

    def create(title, priority="MEDIUM", due=None, assignees=(me,)):
        body = {"title": title, "priority": priority, "assignee_ids": [str(a.id) for a in assignees]}
        if due is not None:
            body["due_date"] = _iso(due)
        r = client.post(url, json=body, headers=owner.headers)
        assert r.status_code == 201, r.text
        return r.json()["id"]

    create("undated urgent", "URGENT")
    create("soon urgent", "URGENT", due=now + timedelta(days=1))
    create("late high", "HIGH", due=now - timedelta(days=2))
    late_done = create("late but done", "LOW", due=now - timedelta(days=3))
    create("not mine", "URGENT", assignees=(owner,))

    r = client.put(f"{url}/{late_done}", json={"status": "DONE"}, headers=me.headers)
    assert r.status_code == 200

    r = client.get("/dashboard/tasks", headers=me.headers)
    assert r.status_code == 200
    assert [t["title"] for t in r.json()] == ["soon urgent", "undated urgent", "late high", "late but done"]

    r = client.get("/dashboard/stats", headers=me.headers)
    assert r.status_code == 200
    assert r.json() == {
        "tasks": {
            "total": 4,
            "urgent": 3,
            "overdue": 1,
            "by_status": {"TODO": 3, "IN_PROGRESS": 0, "DONE": 1, "CANCELLED": 0},
        },
        "projects": {"total": 1},
    }

def test_dashboard_projects_group_assigned_tasks(client, team):
    me = team["admin"]
    owner = team["owner"]

    r = client.post("/projects", json={"name": "another project"}, headers=owner.headers)
    other_id = r.json()["id"]
    r = client.post(f"/projects/{other_id}/contributors", json={"email": me.email}, headers=owner.headers)
    assert r.status_code == 201

    for project_id, title in ((team["project_id"], "in shared"), (other_id, "in another")):
        r = client.post(
            f"/projects/{project_id}/tasks",
            json={"title": title, "assignee_ids": [str(me.id)]},
            headers=owner.headers,
        )
        assert r.status_code == 201, r.text
    client.post(f"/projects/{other_id}/tasks", json={"title": "unassigned"}, headers=owner.headers)

    r = client.get("/dashboard/projects", headers=me.headers)
    assert r.status_code == 200
    body = r.json()
    assert [p["name"] for p in body] == ["another project", "shared project"]
    assert [t["title"] for t in body[0]["tasks"]] == ["in another"]
    assert body[0]["owner"]["email"] == owner.email

def test_empty_dashboard(client, team):
    me = team["stranger"]
    assert client.get("/dashboard/tasks", headers=me.headers).json() == []
    assert client.get("/dashboard/projects", headers=me.headers).json() == []

    r = client.get("/dashboard/stats", headers=me.headers)
    assert r.json()["tasks"]["total"] == 0
    assert r.json()["projects"]["total"] == 0

    assert client.get("/dashboard/stats").status_code == 401
