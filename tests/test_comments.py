def _task(client, team) -> str:
    r = client.post(f"/projects/{team['project_id']}/tasks", json={"title": "discuss"}, headers=team["owner"].headers)
    assert r.status_code == 201, r.text
    return f"/projects/{team['project_id']}/tasks/{r.json()['id']}"

def test_comment_lifecycle(client, team):
    task_url = _task(client, team)
    contributor, admin = team["contributor"], team["admin"]

    r = client.post(f"{task_url}/comments", json={"content": " first "}, headers=contributor.headers)
    assert r.status_code == 201, r.text
    first = r.json()
    assert first["content"] == "first"
    assert first["author"]["email"] == contributor.email

    r = client.post(f"{task_url}/comments", json={"content": "second"}, headers=admin.headers)
    assert r.status_code == 201

    r = client.get(f"{task_url}/comments", headers=team["owner"].headers)
    assert [c["content"] for c in r.json()] == ["first", "second"]

    # task responses carry comments oldest first too
    r = client.get(task_url, headers=team["owner"].headers)
    assert [c["content"] for c in r.json()["comments"]] == ["first", "second"]

    comment_url = f"{task_url}/comments/{first['id']}"
    r = client.get(comment_url, headers=admin.headers)
    assert r.status_code == 200
    assert r.json()["id"] == first["id"]

    r = client.put(comment_url, json={"content": "edited"}, headers=contributor.headers)
    assert r.status_code == 200, r.text
    assert r.json()["content"] == "edited"

def test_only_the_author_edits(client, team):
    task_url = _task(client, team)

    r = client.post(f"{task_url}/comments", json={"content": "mine"}, headers=team["contributor"].headers)
    comment_url = f"{task_url}/comments/{r.json()['id']}"

    # not even the owner
    r = client.put(comment_url, json={"content": "theirs now"}, headers=team["owner"].headers)
    assert r.status_code == 403

    r = client.put(comment_url, json={"content": "theirs now"}, headers=team["stranger"].headers)
    assert r.status_code == 403

def test_delete_by_author_or_task_editor(client, team):
    task_url = _task(client, team)

    r = client.post(f"{task_url}/comments", json={"content": "one"}, headers=team["contributor"].headers)
    one = f"{task_url}/comments/{r.json()['id']}"
    r = client.post(f"{task_url}/comments", json={"content": "two"}, headers=team["contributor"].headers)
    two = f"{task_url}/comments/{r.json()['id']}"

    r = client.delete(one, headers=team["stranger"].headers)
    assert r.status_code == 403

    r = client.delete(one, headers=team["contributor"].headers)
    assert r.status_code == 200
    assert r.json() == {"deleted": True}

    r = client.delete(two, headers=team["admin"].headers)
    assert r.status_code == 200

    r = client.get(two, headers=team["admin"].headers)
    assert r.status_code == 404
    assert r.json()["detail"]["code"] == "COMMENT_NOT_FOUND"

def test_comment_content_is_validated(client, team):
    task_url = _task(client, team)

    for content in ("   ", "c" * 2001):
        r = client.post(f"{task_url}/comments", json={"content": content}, headers=team["owner"].headers)
        assert r.status_code == 400
        assert r.json()["detail"]["errors"][0]["field"] == "content"

def test_comments_are_scoped_to_their_task(client, team):
    task_a = _task(client, team)
    task_b = _task(client, team)

    r = client.post(f"{task_a}/comments", json={"content": "on a"}, headers=team["owner"].headers)
    comment_id = r.json()["id"]

    r = client.get(f"{task_b}/comments/{comment_id}", headers=team["owner"].headers)
    assert r.status_code == 404

    r = client.get(f"{task_b}/comments", headers=team["owner"].headers)
    assert r.json() == []
