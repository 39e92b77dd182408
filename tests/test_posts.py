"""
Tests for post and comment endpoints.
"""
from campusfeed.models import Post


class TestPostsEndpoints:
    """Test posts endpoints."""

    def test_create_post(self, client, test_user, context):
        """Test creating a post."""
        response = client.post(
            "/posts",
            json={"userId": test_user.id, "content": "hi", "mediaUrl": "https://cdn.example/x.png"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["content"] == "hi"
        assert data["userId"] == test_user.id
        assert data["schoolId"] == test_user.school_id
        assert data["mediaUrl"] == "https://cdn.example/x.png"
        assert data["commentsCount"] == 0
        assert data["upvotes"] == 0
        assert data["downvotes"] == 0

    def test_create_post_user_from_query(self, client, test_user):
        """Test the acting user can be named in the query string."""
        response = client.post(f"/posts?userId={test_user.id}", json={"content": "hi"})
        assert response.status_code == 201

    def test_create_post_content_boundary(self, client, test_user):
        """Test 300 characters is accepted, 301 and empty are not."""
        response = client.post("/posts", json={"userId": test_user.id, "content": "a" * 300})
        assert response.status_code == 201

        response = client.post("/posts", json={"userId": test_user.id, "content": "a" * 301})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "content must be 300 characters or less"

        response = client.post("/posts", json={"userId": test_user.id, "content": ""})
        assert response.status_code == 400

    def test_create_post_missing_content(self, client, test_user):
        """Test content is required."""
        response = client.post("/posts", json={"userId": test_user.id})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "content is required"

    def test_create_post_non_string_content(self, client, test_user):
        """Test content must be a string."""
        response = client.post("/posts", json={"userId": test_user.id, "content": 42})
        assert response.status_code == 400

    def test_create_post_without_user(self, client):
        """Test posting without a userId fails."""
        response = client.post("/posts", json={"content": "hi"})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "userId is required"

    def test_create_post_unknown_user(self, client):
        """Test posting as a user that doesn't exist."""
        response = client.post("/posts", json={"userId": 4242, "content": "hi"})
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "User not found"

    def test_get_post_not_found(self, client):
        """Test getting non-existent post."""
        response = client.get("/posts/99999")
        assert response.status_code == 404
        assert response.json() == {"error": {"message": "Post not found", "statusCode": 404}}

    def test_get_post_with_comment_pages(self, client, make_post, make_comment):
        """Test the detail view pages through comments newest first."""
        post = make_post(created_at=1_000)
        comments = [make_comment(post, content=f"c{i}", created_at=2_000 + i) for i in range(5)]

        response = client.get(f"/posts/{post.id}?limit=2")
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == post.id
        assert [c["content"] for c in data["comments"]] == ["c4", "c3"]
        assert data["comments_has_more"] is True
        assert data["comments_next_cursor"] == str(comments[3].created_at)

        seen = [c["id"] for c in data["comments"]]
        cursor = data["comments_next_cursor"]
        while data["comments_has_more"]:
            data = client.get(f"/posts/{post.id}?limit=2&cursor={cursor}").json()
            seen.extend(c["id"] for c in data["comments"])
            cursor = data["comments_next_cursor"]

        assert seen == [c.id for c in reversed(comments)]

    def test_get_post_invalid_cursor(self, client, make_post):
        """Test a non-numeric cursor is rejected before paging."""
        post = make_post()
        response = client.get(f"/posts/{post.id}?cursor=yesterday")
        assert response.status_code == 400

        response = client.get(f"/posts/{post.id}?cursor=²")
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "cursor must be a valid timestamp"

    def test_get_post_invalid_id(self, client):
        """Test malformed post ids, including Unicode digits, are 400s."""
        for post_id in ("abc", "²", "-1"):
            response = client.get(f"/posts/{post_id}")
            assert response.status_code == 400
            assert response.json() == {"error": {"message": "Invalid post ID", "statusCode": 400}}

    def test_content_checked_before_user_lookup(self, client):
        """Test malformed content is a 400 even when the user doesn't exist."""
        response = client.post("/posts", json={"userId": 4242, "content": "a" * 301})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "content must be 300 characters or less"

        response = client.post("/comments", json={"userId": 4242, "postId": 1, "content": ""})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "content must be a non-empty string"


class TestCommentsEndpoints:
    """Test comment endpoints."""

    def test_create_comment_updates_count(self, client, test_user, make_post, context):
        """Test a comment is returned at once and the count catches up."""
        post = make_post()

        response = client.post(
            "/comments",
            json={"userId": test_user.id, "postId": post.id, "content": "hey"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["postId"] == post.id
        assert data["content"] == "hey"

        context.tasks.join()
        assert client.get(f"/posts/{post.id}").json()["commentsCount"] == 1

    def test_create_comment_post_not_found(self, client, test_user):
        """Test commenting on a missing post."""
        response = client.post(
            "/comments",
            json={"userId": test_user.id, "postId": 999, "content": "hey"},
        )
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Post not found"

    def test_create_comment_validation(self, client, test_user, make_post):
        """Test postId and content are validated."""
        post = make_post()

        response = client.post("/comments", json={"userId": test_user.id, "content": "hey"})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "postId is required"

        response = client.post(
            "/comments",
            json={"userId": test_user.id, "postId": "nope", "content": "hey"},
        )
        assert response.status_code == 400

        response = client.post(
            "/comments",
            json={"userId": test_user.id, "postId": post.id, "content": "x" * 301},
        )
        assert response.status_code == 400


class TestEndToEnd:
    """School -> user -> post -> comment through the HTTP surface."""

    def test_full_flow(self, client, context):
        response = client.post("/schools", json={"name": "X"})
        assert response.status_code == 201
        school_id = response.json()["id"]

        response = client.post("/users", json={"name": "A", "schoolId": school_id})
        assert response.status_code == 201
        user_id = response.json()["id"]
        assert user_id == 1

        response = client.post("/posts", json={"userId": user_id, "content": "hi"})
        assert response.status_code == 201
        post = response.json()
        assert post["id"] == 1
        assert post["commentsCount"] == 0

        response = client.post("/comments", json={"userId": user_id, "postId": 1, "content": "hey"})
        assert response.status_code == 201

        context.tasks.join()
        response = client.get("/posts/1")
        assert response.status_code == 200
        assert response.json()["commentsCount"] == 1
        assert [c["content"] for c in response.json()["comments"]] == ["hey"]

    def test_flagged_post_is_retracted(self, client, test_user, context, db):
        """Test flagged content is served first, then disappears."""
        response = client.post("/posts", json={"userId": test_user.id, "content": "this is forbidden"})
        assert response.status_code == 201
        post_id = response.json()["id"]

        context.tasks.join()
        assert client.get(f"/posts/{post_id}").status_code == 404
        assert db.get(Post, post_id) is None
