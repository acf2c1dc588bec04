import json

from mileage.core.config import settings


def _post(client, meetup_id, content, headers):
    return client.post(f"/meetups/{meetup_id}/comments", json={"comment": {"content": content}}, headers=headers)


def test_create_comment(client, signup, create_meetup):
    headers, user = signup()
    meetup = create_meetup(headers)

    response = _post(client, meetup["id"], "Bring water", headers)

    assert response.status_code == 201
    comment = response.json()
    assert comment["content"] == "Bring water"
    assert comment["user"]["id"] == user["id"]


def test_blank_comment_is_rejected(client, signup, create_meetup):
    headers, _ = signup()
    meetup = create_meetup(headers)

    response = _post(client, meetup["id"], "   ", headers)

    assert response.status_code == 422
    assert response.json() == {"errors": ["Content can't be blank"]}


def test_overlong_comment_is_rejected(client, signup, create_meetup):
    headers, _ = signup()
    meetup = create_meetup(headers)

    response = _post(client, meetup["id"], "x" * 2001, headers)

    assert response.status_code == 422
    assert response.json() == {"errors": ["Content is too long (maximum is 2000 characters)"]}


def test_comment_requires_auth(client, signup, create_meetup):
    headers, _ = signup()
    meetup = create_meetup(headers)

    response = _post(client, meetup["id"], "hello", headers={})

    assert response.status_code == 401


def test_comment_on_missing_meetup(client, signup):
    headers, _ = signup()

    assert _post(client, 12345, "hello", headers).status_code == 404


def test_comments_are_paginated(client, signup, create_meetup, monkeypatch):
    monkeypatch.setattr(settings, "COMMENTS_PER_PAGE", 2)
    headers, _ = signup()
    meetup = create_meetup(headers)
    for i in range(5):
        _post(client, meetup["id"], f"comment {i}", headers)

    body = client.get(f"/meetups/{meetup['id']}/comments", params={"page": 3}).json()

    assert body["total_pages"] == 3
    assert body["current_page"] == 3
    assert [c["content"] for c in json.loads(body["comments"])] == ["comment 4"]


def test_author_can_edit_and_delete(client, signup, create_meetup):
    headers, _ = signup()
    meetup = create_meetup(headers)
    comment = _post(client, meetup["id"], "typo", headers).json()
    url = f"/meetups/{meetup['id']}/comments/{comment['id']}"

    edited = client.patch(url, json={"comment": {"content": "fixed"}}, headers=headers)
    assert edited.status_code == 200
    assert edited.json()["content"] == "fixed"

    assert client.delete(url, headers=headers).status_code == 204
    listed = client.get(f"/meetups/{meetup['id']}/comments").json()
    assert json.loads(listed["comments"]) == []


def test_other_users_cannot_touch_a_comment(client, signup, create_meetup):
    author_headers, _ = signup("author1")
    other_headers, _ = signup("other1")
    meetup = create_meetup(author_headers)
    comment = _post(client, meetup["id"], "mine", author_headers).json()
    url = f"/meetups/{meetup['id']}/comments/{comment['id']}"

    assert client.patch(url, json={"comment": {"content": "hijack"}}, headers=other_headers).status_code == 401
    assert client.delete(url, headers=other_headers).status_code == 401


def test_comment_must_belong_to_meetup(client, signup, create_meetup):
    headers, _ = signup()
    first = create_meetup(headers)
    second = create_meetup(headers, title="Evening ride", activity="bicycle")
    comment = _post(client, first["id"], "on the first", headers).json()

    response = client.delete(f"/meetups/{second['id']}/comments/{comment['id']}", headers=headers)

    assert response.status_code == 404
    assert response.json() == {"errors": ["Comment not found"]}
