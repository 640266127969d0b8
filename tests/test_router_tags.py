"""
Tests for the tag endpoints and the health check.
"""
from uuid import uuid4


def _create_tag(client, name, **fields):
    response = client.post("/api/tags", json={"name": name, **fields})
    assert response.status_code == 201
    return response.json()


def _register(client, name, is_hidden=False):
    response = client.post(
        "/api/users/register",
        json={
            "name": name,
            "birth_date": "1990-05-17",
            "email": f"{name}@x.com",
            "password": "12345678",
            "is_hidden": is_hidden,
        },
    )
    assert response.status_code == 201
    return response.json()


class TestHealthEndpoint:
    """Tests for GET /health"""

    def test_health_returns_healthy_status(self, client):
        """Test health check returns the service name."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "user-tags-service"}


class TestCreateTagEndpoint:
    """Tests for POST /api/tags"""

    def test_create_tag(self, client):
        """Test a tag is created with all its fields."""
        data = _create_tag(client, "python", description="Language", category="language")

        assert data["name"] == "python"
        assert data["description"] == "Language"
        assert data["category"] == "language"
        assert data["is_active"] is True
        assert data["id"]

    def test_duplicate_name_returns_400(self, client):
        """Test creating a name twice returns 400."""
        _create_tag(client, "python")

        response = client.post("/api/tags", json={"name": "python"})

        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]

    def test_whitespace_name_returns_400(self, client):
        """Test an invalid name returns 400."""
        response = client.post("/api/tags", json={"name": "   "})

        assert response.status_code == 400


class TestListTagsEndpoint:
    """Tests for GET /api/tags and GET /api/tags/search"""

    def test_second_page(self, client):
        """Test paging over 15 tags."""
        for index in range(15):
            _create_tag(client, f"tag-{index:02d}")

        response = client.get("/api/tags", params={"page": 2, "pageSize": 10})

        assert response.status_code == 200
        data = response.json()
        assert len(data["tags"]) == 5
        assert data["pagination"]["total_pages"] == 2
        assert data["pagination"]["current_page"] == 2
        assert data["pagination"]["total"] == 15

    def test_invalid_paging_falls_back_to_defaults(self, client):
        """Test non-numeric and non-positive values use page 1 and size 10."""
        for index in range(12):
            _create_tag(client, f"tag-{index:02d}")

        response = client.get("/api/tags", params={"page": "abc", "pageSize": "0"})

        data = response.json()
        assert response.status_code == 200
        assert len(data["tags"]) == 10
        assert data["pagination"]["current_page"] == 1
        assert data["pagination"]["page_size"] == 10

    def test_search(self, client):
        """Test search matches text fields case-insensitively."""
        _create_tag(client, "Python")
        _create_tag(client, "django", description="python web framework")
        _create_tag(client, "rust")

        response = client.get("/api/tags/search", params={"q": "PYTHON"})

        assert response.status_code == 200
        assert [tag["name"] for tag in response.json()["tags"]] == ["Python", "django"]


class TestSingleTagEndpoints:
    """Tests for GET, PUT and DELETE /api/tags/{tag_id}"""

    def test_update_with_null_flag_keeps_tag_active(self, client):
        """Test an explicit null is_active leaves the tag unchanged."""
        created = _create_tag(client, "python")

        response = client.put(f"/api/tags/{created['id']}", json={"is_active": None})

        assert response.status_code == 200
        assert response.json()["is_active"] is True
        assert response.json()["name"] == "python"

    def test_create_long_name(self, client):
        """Test a long tag name is accepted."""
        created = _create_tag(client, "x" * 150)

        assert created["name"] == "x" * 150

    def test_get_tag(self, client):
        """Test retrieving a tag by id."""
        created = _create_tag(client, "python")

        response = client.get(f"/api/tags/{created['id']}")

        assert response.status_code == 200
        assert response.json()["name"] == "python"

    def test_get_missing_tag(self, client):
        """Test an unknown id returns 404."""
        response = client.get(f"/api/tags/{uuid4()}")

        assert response.status_code == 404

    def test_get_malformed_id(self, client):
        """Test a malformed id returns 400."""
        response = client.get("/api/tags/not-a-uuid")

        assert response.status_code == 400

    def test_partial_update(self, client):
        """Test only the given fields change."""
        created = _create_tag(client, "python", category="language")

        response = client.put(f"/api/tags/{created['id']}", json={"description": "Snakes"})

        assert response.status_code == 200
        data = response.json()
        assert data["description"] == "Snakes"
        assert data["category"] == "language"

    def test_update_duplicate_name(self, client):
        """Test renaming onto another tag returns 400."""
        _create_tag(client, "python")
        created = _create_tag(client, "rust")

        response = client.put(f"/api/tags/{created['id']}", json={"name": "python"})

        assert response.status_code == 400

    def test_update_missing_tag(self, client):
        """Test updating an unknown id returns 404."""
        response = client.put(f"/api/tags/{uuid4()}", json={"name": "x"})

        assert response.status_code == 404

    def test_delete_unreferenced_tag(self, client):
        """Test an unreferenced tag is removed."""
        created = _create_tag(client, "python")

        response = client.delete(f"/api/tags/{created['id']}")

        assert response.status_code == 200
        assert response.json()["soft_deleted"] is False
        assert client.get(f"/api/tags/{created['id']}").status_code == 404

    def test_delete_referenced_tag(self, client):
        """Test a referenced tag is deactivated and still retrievable."""
        created = _create_tag(client, "python")
        user = _register(client, "alice")
        client.post(f"/api/users/{user['id']}/tags", json={"tag_ids": [created["id"]]})

        response = client.delete(f"/api/tags/{created['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["soft_deleted"] is True
        assert data["tag"]["is_active"] is False
        fetched = client.get(f"/api/tags/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["is_active"] is False

    def test_delete_missing_tag(self, client):
        """Test deleting an unknown id returns 404."""
        response = client.delete(f"/api/tags/{uuid4()}")

        assert response.status_code == 404


class TestTagUsersEndpoints:
    """Tests for users-by-tag and popularity endpoints."""

    def test_users_by_tag(self, client):
        """Test visible users holding a tag are listed."""
        tag = _create_tag(client, "python")
        alice = _register(client, "alice")
        ghost = _register(client, "ghost", is_hidden=True)
        for user in (alice, ghost):
            client.post(f"/api/users/{user['id']}/tags", json={"tag_ids": [tag["id"]]})

        response = client.get(f"/api/tags/{tag['id']}/users")

        assert response.status_code == 200
        data = response.json()
        assert [user["name"] for user in data["users"]] == ["alice"]
        assert "password" not in data["users"][0]

    def test_users_by_unknown_tag_name(self, client):
        """Test an unknown name yields an empty page."""
        response = client.get("/api/tags/by-name/nope/users")

        assert response.status_code == 200
        data = response.json()
        assert data["users"] == []
        assert data["pagination"]["total"] == 0
        assert data["pagination"]["total_pages"] == 0

    def test_users_by_tag_name(self, client):
        """Test lookup by exact tag name."""
        alice = _register(client, "alice")
        client.post(f"/api/users/{alice['id']}/tags/by-name", json={"names": ["python"]})

        response = client.get("/api/tags/by-name/python/users")

        assert [user["id"] for user in response.json()["users"]] == [alice["id"]]

    def test_popular(self, client):
        """Test popularity ranking and limit."""
        tag_a = _create_tag(client, "A")
        tag_b = _create_tag(client, "B")
        tag_c = _create_tag(client, "C")
        for name, tags in [("u1", [tag_a, tag_b]), ("u2", [tag_a]), ("u3", [tag_b, tag_c])]:
            user = _register(client, name)
            client.post(
                f"/api/users/{user['id']}/tags",
                json={"tag_ids": [tag["id"] for tag in tags]},
            )

        response = client.get("/api/tags/popular", params={"limit": 2})

        assert response.status_code == 200
        assert response.json() == [
            {"tag_id": tag_a["id"], "count": 2},
            {"tag_id": tag_b["id"], "count": 2},
        ]
