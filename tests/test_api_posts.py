from blog_platform.auth.security import issue_token
from conftest import TEST_SECRET, bearer, create_category, create_post, register


def _setup(client):
    token, user = register(client)
    category = create_category(client, token)
    return token, user, category


class TestListPosts:
    def test_empty(self, client):
        resp = client.get("/api/posts")
        assert resp.status_code == 200
        assert resp.json() == {
            "success": True,
            "data": [],
            "pagination": {"page": 1, "limit": 10, "total": 0, "pages": 0},
        }

    def test_default_page_size_and_order(self, client):
        token, _, category = _setup(client)
        for i in range(13):
            create_post(client, token, category["id"], title=f"Post {i}")

        body = client.get("/api/posts").json()
        assert len(body["data"]) == 10
        assert body["data"][0]["title"] == "Post 12"
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 13, "pages": 2}

        body = client.get("/api/posts", params={"page": 2, "limit": 5}).json()
        assert [p["title"] for p in body["data"]] == [f"Post {i}" for i in (7, 6, 5, 4, 3)]
        assert body["pagination"]["pages"] == 3

    def test_junk_query_falls_back_to_defaults(self, client):
        resp = client.get("/api/posts", params={"page": "x", "limit": "-1"})
        assert resp.status_code == 200
        assert resp.json()["pagination"]["page"] == 1
        assert resp.json()["pagination"]["limit"] == 10

    def test_huge_page_is_an_empty_page(self, client):
        token, _, category = _setup(client)
        create_post(client, token, category["id"])
        resp = client.get("/api/posts", params={"page": "99999999999999999999"})
        assert resp.status_code == 200
        assert resp.json()["data"] == []
        assert resp.json()["pagination"]["total"] == 1


class TestCreatePost:
    def test_create(self, client):
        token, user, category = _setup(client)
        post = create_post(
            client, token, category["id"], excerpt="Short", tags=["python", "python", "web"]
        )
        assert post["author"]["id"] == user["id"]
        assert post["category"] == {"id": category["id"], "name": "Tech", "slug": "tech"}
        assert post["tags"] == ["python", "web"]
        assert post["featuredImage"] == "default-post.jpg"
        assert post["viewCount"] == 0
        assert post["isPublished"] is True
        assert post["comments"] == []

    def test_requires_auth(self, client):
        resp = client.post("/api/posts", json={"title": "t", "content": "c"})
        assert resp.status_code == 401

    def test_validation(self, client):
        token, _, _ = _setup(client)
        resp = client.post(
            "/api/posts",
            json={"title": "t" * 101, "content": "", "categoryId": "123"},
            headers=bearer(token),
        )
        assert resp.status_code == 400
        assert resp.json()["errors"] == [
            {"field": "title", "msg": "Title cannot exceed 100 characters"},
            {"field": "content", "msg": "Content is required"},
            {"field": "categoryId", "msg": "Invalid category ID"},
        ]
        assert client.get("/api/posts").json()["pagination"]["total"] == 0

    def test_unknown_category(self, client):
        token, _, _ = _setup(client)
        resp = client.post(
            "/api/posts",
            json={"title": "t", "content": "c", "categoryId": "65a1b2c3d4e5f6a7b8c9d0e1"},
            headers=bearer(token),
        )
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Category not found"}

    def test_token_for_deleted_user(self, client):
        token, _, category = _setup(client)
        ghost = issue_token(secret=TEST_SECRET, user_id="65a1b2c3d4e5f6a7b8c9d0ff")
        resp = client.post(
            "/api/posts",
            json={"title": "t", "content": "c", "categoryId": category["id"]},
            headers=bearer(ghost),
        )
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "User not found"}
        assert client.get("/api/posts").json()["pagination"]["total"] == 0


class TestGetPost:
    def test_view_count_increments(self, client):
        token, _, category = _setup(client)
        post = create_post(client, token, category["id"])
        for n in (1, 2, 3):
            resp = client.get(f"/api/posts/{post['id']}")
            assert resp.status_code == 200
            assert resp.json()["data"]["viewCount"] == n

    def test_author_views_count_too(self, client):
        token, _, category = _setup(client)
        post = create_post(client, token, category["id"])
        client.get(f"/api/posts/{post['id']}", headers=bearer(token))
        assert client.get(f"/api/posts/{post['id']}").json()["data"]["viewCount"] == 2

    def test_not_found(self, client):
        for post_id in ("65a1b2c3d4e5f6a7b8c9d0e1", "garbage"):
            resp = client.get(f"/api/posts/{post_id}")
            assert resp.status_code == 404
            assert resp.json() == {"success": False, "error": "Post not found"}


class TestUpdateDelete:
    def test_author_updates(self, client):
        token, _, category = _setup(client)
        post = create_post(client, token, category["id"], featuredImage="cover.png")
        resp = client.put(
            f"/api/posts/{post['id']}",
            json={"title": "Edited", "content": "New body", "categoryId": category["id"]},
            headers=bearer(token),
        )
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["title"] == "Edited"
        assert data["featuredImage"] == "cover.png"
        assert data["tags"] == []

    def test_other_user_forbidden(self, client):
        token, _, category = _setup(client)
        post = create_post(client, token, category["id"])
        other, _ = register(client, name="Bob", email="bob@example.com")

        resp = client.put(
            f"/api/posts/{post['id']}",
            json={"title": "Mine now", "content": "x", "categoryId": category["id"]},
            headers=bearer(other),
        )
        assert resp.status_code == 403
        assert resp.json() == {"success": False, "error": "Not authorized to update this post"}

        resp = client.delete(f"/api/posts/{post['id']}", headers=bearer(other))
        assert resp.status_code == 403
        assert resp.json() == {"success": False, "error": "Not authorized to delete this post"}

        data = client.get(f"/api/posts/{post['id']}").json()["data"]
        assert data["title"] == "Hello"

    def test_update_missing(self, client):
        token, _, category = _setup(client)
        resp = client.put(
            "/api/posts/65a1b2c3d4e5f6a7b8c9d0e1",
            json={"title": "t", "content": "c", "categoryId": category["id"]},
            headers=bearer(token),
        )
        assert resp.status_code == 404

    def test_delete(self, client):
        token, _, category = _setup(client)
        post = create_post(client, token, category["id"])
        resp = client.delete(f"/api/posts/{post['id']}", headers=bearer(token))
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Post deleted successfully"}
        assert client.get(f"/api/posts/{post['id']}").status_code == 404
        assert client.delete(f"/api/posts/{post['id']}", headers=bearer(token)).status_code == 404


class TestComments:
    def test_add_comment(self, client):
        token, _, category = _setup(client)
        post = create_post(client, token, category["id"])
        other, bob = register(client, name="Bob", email="bob@example.com")

        resp = client.post(
            f"/api/posts/{post['id']}/comments", json={"content": "Great read"}, headers=bearer(other)
        )
        assert resp.status_code == 201
        comments = resp.json()["data"]["comments"]
        assert len(comments) == 1
        assert comments[0]["content"] == "Great read"
        assert comments[0]["user"]["id"] == bob["id"]
        assert comments[0]["user"]["name"] == "Bob"

    def test_whitespace_comment(self, client):
        token, _, category = _setup(client)
        post = create_post(client, token, category["id"])
        resp = client.post(
            f"/api/posts/{post['id']}/comments", json={"content": "   "}, headers=bearer(token)
        )
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Comment content is required"}
        assert client.get(f"/api/posts/{post['id']}").json()["data"]["comments"] == []

    def test_requires_auth(self, client):
        token, _, category = _setup(client)
        post = create_post(client, token, category["id"])
        resp = client.post(f"/api/posts/{post['id']}/comments", json={"content": "hi"})
        assert resp.status_code == 401

    def test_missing_post(self, client):
        token, _, _ = _setup(client)
        resp = client.post(
            "/api/posts/65a1b2c3d4e5f6a7b8c9d0e1/comments", json={"content": "hi"}, headers=bearer(token)
        )
        assert resp.status_code == 404
