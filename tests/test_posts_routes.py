"""
tests/test_posts_routes.py -- Integration tests for /api/posts routes.

Covers:
  - Create with author name/avatar copied, validation, listing newest first
  - Single post lookup and 404
  - Owner-only deletion
  - Like/unlike guards (no toggling, no duplicates)
  - Comments: newest first, owner-only deletion, removal keyed by the caller
"""

from __future__ import annotations

from conftest import auth, register


def _post(client, token, text="Hello world"):
    resp = client.post("/api/posts", json={"text": text}, headers=auth(token))
    assert resp.status_code == 200, resp.text
    return resp.json()


class TestPosts:
    def test_create_copies_author(self, client):
        token, user_id = register(client, name="Ada")
        post = _post(client, token)
        assert post["user"] == user_id
        assert post["name"] == "Ada"
        assert post["avatar"].startswith("//www.gravatar.com/avatar/")
        assert post["likes"] == []
        assert post["comments"] == []
        assert post["_id"]

    def test_create_requires_text(self, client):
        token, _ = register(client)
        resp = client.post("/api/posts", json={"text": "   "}, headers=auth(token))
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["msg"] == "Text is required"
        assert resp.json()["errors"][0]["param"] == "text"

    def test_create_without_body(self, client):
        token, _ = register(client)
        resp = client.post("/api/posts", headers=auth(token))
        assert resp.status_code == 400
        assert resp.json()["errors"] == [{"msg": "Text is required", "param": "text", "location": "body"}]

    def test_list_newest_first(self, client):
        token, _ = register(client)
        for text in ("first", "second", "third"):
            _post(client, token, text)
        resp = client.get("/api/posts", headers=auth(token))
        assert resp.status_code == 200
        assert [p["text"] for p in resp.json()] == ["third", "second", "first"]

    def test_get_post(self, client):
        token, _ = register(client)
        post = _post(client, token)
        resp = client.get(f"/api/posts/{post['_id']}", headers=auth(token))
        assert resp.status_code == 200
        assert resp.json()["text"] == "Hello world"

    def test_get_unknown_post(self, client):
        token, _ = register(client)
        resp = client.get("/api/posts/000000000000000000000000", headers=auth(token))
        assert resp.status_code == 404
        assert resp.json() == {"msg": "Post not found"}


class TestDeletePost:
    def test_non_owner_cannot_delete(self, client):
        owner, _ = register(client, email="ada@example.com")
        other, _ = register(client, email="grace@example.com")
        post = _post(client, owner)
        resp = client.delete(f"/api/posts/{post['_id']}", headers=auth(other))
        assert resp.status_code == 401
        assert resp.json() == {"msg": "User not authorized"}
        assert client.get(f"/api/posts/{post['_id']}", headers=auth(owner)).status_code == 200

    def test_owner_deletes(self, client):
        token, _ = register(client)
        post = _post(client, token)
        resp = client.delete(f"/api/posts/{post['_id']}", headers=auth(token))
        assert resp.status_code == 200
        assert resp.json() == {"msg": "Post removed"}
        assert client.get(f"/api/posts/{post['_id']}", headers=auth(token)).status_code == 404

    def test_delete_unknown_post(self, client):
        token, _ = register(client)
        resp = client.delete("/api/posts/000000000000000000000000", headers=auth(token))
        assert resp.status_code == 404


class TestLikes:
    def test_like_once(self, client):
        token, user_id = register(client)
        post = _post(client, token)
        resp = client.put(f"/api/posts/like/{post['_id']}", headers=auth(token))
        assert resp.status_code == 200
        likes = resp.json()
        assert len(likes) == 1
        assert likes[0]["user"] == user_id

        again = client.put(f"/api/posts/like/{post['_id']}", headers=auth(token))
        assert again.status_code == 400
        assert again.json() == {"msg": "Post already liked"}
        stored = client.get(f"/api/posts/{post['_id']}", headers=auth(token)).json()
        assert len(stored["likes"]) == 1

    def test_newest_like_first(self, client):
        t1, _ = register(client, email="ada@example.com")
        t2, u2 = register(client, email="grace@example.com")
        post = _post(client, t1)
        client.put(f"/api/posts/like/{post['_id']}", headers=auth(t1))
        likes = client.put(f"/api/posts/like/{post['_id']}", headers=auth(t2)).json()
        assert likes[0]["user"] == u2
        assert len(likes) == 2

    def test_unlike(self, client):
        token, _ = register(client)
        post = _post(client, token)
        client.put(f"/api/posts/like/{post['_id']}", headers=auth(token))
        resp = client.put(f"/api/posts/unlike/{post['_id']}", headers=auth(token))
        assert resp.status_code == 200
        assert resp.json() == []

    def test_unlike_without_like(self, client):
        token, _ = register(client)
        post = _post(client, token)
        resp = client.put(f"/api/posts/unlike/{post['_id']}", headers=auth(token))
        assert resp.status_code == 400
        assert resp.json() == {"msg": "Post has not yet been liked"}

    def test_like_unknown_post(self, client):
        token, _ = register(client)
        resp = client.put("/api/posts/like/000000000000000000000000", headers=auth(token))
        assert resp.status_code == 404
        assert resp.json() == {"msg": "Post not found"}


class TestComments:
    def test_add_comment(self, client):
        t1, _ = register(client, name="Ada", email="ada@example.com")
        t2, u2 = register(client, name="Grace", email="grace@example.com")
        post = _post(client, t1)
        client.post(f"/api/posts/comment/{post['_id']}", json={"text": "first"}, headers=auth(t1))
        resp = client.post(f"/api/posts/comment/{post['_id']}", json={"text": "second"}, headers=auth(t2))
        assert resp.status_code == 200
        comments = resp.json()
        assert [c["text"] for c in comments] == ["second", "first"]
        assert comments[0]["user"] == u2
        assert comments[0]["name"] == "Grace"
        assert comments[0]["date"]

    def test_comment_requires_text(self, client):
        token, _ = register(client)
        post = _post(client, token)
        resp = client.post(f"/api/posts/comment/{post['_id']}", json={}, headers=auth(token))
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["msg"] == "Text is required"

    def test_comment_on_unknown_post(self, client):
        token, _ = register(client)
        resp = client.post("/api/posts/comment/000000000000000000000000", json={"text": "hi"}, headers=auth(token))
        assert resp.status_code == 404

    def test_delete_own_comment(self, client):
        token, _ = register(client)
        post = _post(client, token)
        comments = client.post(f"/api/posts/comment/{post['_id']}", json={"text": "hi"}, headers=auth(token)).json()
        resp = client.delete(f"/api/posts/comment/{post['_id']}/{comments[0]['_id']}", headers=auth(token))
        assert resp.status_code == 200
        assert resp.json() == []

    def test_delete_missing_comment(self, client):
        token, _ = register(client)
        post = _post(client, token)
        resp = client.delete(f"/api/posts/comment/{post['_id']}/000000000000000000000000", headers=auth(token))
        assert resp.status_code == 404
        assert resp.json() == {"msg": "Comment does not exist"}

    def test_delete_someone_elses_comment(self, client):
        t1, _ = register(client, email="ada@example.com")
        t2, _ = register(client, email="grace@example.com")
        post = _post(client, t1)
        comments = client.post(f"/api/posts/comment/{post['_id']}", json={"text": "mine"}, headers=auth(t1)).json()
        resp = client.delete(f"/api/posts/comment/{post['_id']}/{comments[0]['_id']}", headers=auth(t2))
        assert resp.status_code == 401
        assert resp.json() == {"msg": "User not authorized"}

    def test_delete_removes_callers_newest_comment(self, client):
        token, _ = register(client)
        post = _post(client, token)
        url = f"/api/posts/comment/{post['_id']}"
        client.post(url, json={"text": "older"}, headers=auth(token))
        comments = client.post(url, json={"text": "newer"}, headers=auth(token)).json()
        older_id = comments[1]["_id"]

        resp = client.delete(f"{url}/{older_id}", headers=auth(token))
        assert resp.status_code == 200
        assert [c["text"] for c in resp.json()] == ["older"]
