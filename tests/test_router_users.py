"""
Tests for the user endpoints.
"""
from uuid import uuid4

import pytest


def _register(client, name, password="12345678", is_hidden=False):
    return client.post(
        "/api/users/register",
        json={
            "name": name,
            "birth_date": "1990-05-17",
            "email": f"{name}@x.com",
            "password": password,
            "is_hidden": is_hidden,
        },
    )


def _create_tag(client, name):
    return client.post("/api/tags", json={"name": name}).json()


class TestRegisterEndpoint:
    """Tests for POST /api/users/register"""

    def test_register(self, client):
        """Test registration returns the user without password."""
        response = _register(client, "alice")

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "alice"
        assert data["email"] == "alice@x.com"
        assert data["tags"] == []
        assert "password" not in data

    def test_duplicate_identity(self, client):
        """Test registering the same name twice returns 400."""
        _register(client, "alice")

        response = _register(client, "alice")

        assert response.status_code == 400

    def test_weak_password(self, client):
        """Test short passwords return 400."""
        response = _register(client, "alice", password="short")

        assert response.status_code == 400

    def test_invalid_email(self, client):
        """Test malformed emails return 400."""
        response = client.post(
            "/api/users/register",
            json={
                "name": "alice",
                "birth_date": "1990-05-17",
                "email": "not-an-email",
                "password": "12345678",
            },
        )

        assert response.status_code == 400


class TestListUsersEndpoint:
    """Tests for GET /api/users and GET /api/users/count"""

    @pytest.mark.parametrize("page_size", ["10", "25", "50"])
    def test_allowed_page_sizes(self, client, page_size):
        """Test the supported page sizes are accepted."""
        response = client.get("/api/users", params={"pageSize": page_size})

        assert response.status_code == 200
        assert response.json()["pagination"]["page_size"] == int(page_size)

    def test_unsupported_page_size(self, client):
        """Test other page sizes return 400."""
        response = client.get("/api/users", params={"pageSize": "30"})

        assert response.status_code == 400

    def test_visible_users_first(self, client):
        """Test hidden users are listed after visible ones."""
        _register(client, "aaron", is_hidden=True)
        _register(client, "bob")

        response = client.get("/api/users")

        assert [user["name"] for user in response.json()["users"]] == ["bob", "aaron"]

    def test_count(self, client):
        """Test only visible users are counted."""
        _register(client, "alice")
        _register(client, "ghost", is_hidden=True)

        response = client.get("/api/users/count")

        assert response.status_code == 200
        assert response.json() == {"count": 1}


class TestLoginEndpoint:
    """Tests for POST /api/users/login"""

    def test_login_outcomes(self, client):
        """Test 401 wrong password, 200 success and 403 hidden user."""
        user = _register(client, "alice").json()

        wrong = client.post("/api/users/login", json={"email": "alice@x.com", "password": "nope-nope"})
        assert wrong.status_code == 401

        ok = client.post("/api/users/login", json={"email": "alice@x.com", "password": "12345678"})
        assert ok.status_code == 200
        assert ok.json()["id"] == user["id"]

        client.put(f"/api/users/{user['id']}/hidden", json={"is_hidden": True})
        hidden = client.post("/api/users/login", json={"email": "alice@x.com", "password": "12345678"})
        assert hidden.status_code == 403

    def test_unknown_email(self, client):
        """Test an unknown email returns 404."""
        response = client.post("/api/users/login", json={"email": "x@x.com", "password": "12345678"})

        assert response.status_code == 404


class TestSingleUserEndpoints:
    """Tests for GET, PUT and DELETE /api/users/{user_id}"""

    def test_update_with_null_fields(self, client):
        """Test explicit nulls leave the profile unchanged."""
        user = _register(client, "alice").json()

        response = client.put(
            f"/api/users/{user['id']}", json={"is_admin": None, "email": None}
        )

        assert response.status_code == 200
        assert response.json()["is_admin"] is False
        assert response.json()["email"] == "alice@x.com"

    def test_get_user_born_in_far_future(self, client):
        """Test the age lookup handles the latest representable birth date."""
        response = client.post(
            "/api/users/register",
            json={
                "name": "zed",
                "birth_date": "9999-12-31",
                "email": "zed@x.com",
                "password": "12345678",
            },
        )
        assert response.status_code == 201

        lookup = client.get(f"/api/users/{response.json()['id']}")

        assert lookup.status_code == 200
        assert lookup.json()["age"] > 7000

    def test_get_user_with_age(self, client):
        """Test the detail lookup includes age."""
        user = _register(client, "alice").json()

        response = client.get(f"/api/users/{user['id']}")

        assert response.status_code == 200
        assert response.json()["age"] >= 36

    def test_get_missing_user(self, client):
        """Test an unknown id returns 404."""
        assert client.get(f"/api/users/{uuid4()}").status_code == 404

    def test_get_malformed_id(self, client):
        """Test a malformed id returns 400."""
        assert client.get("/api/users/not-a-uuid").status_code == 400

    def test_update(self, client):
        """Test partial profile update."""
        user = _register(client, "alice").json()

        response = client.put(f"/api/users/{user['id']}", json={"is_admin": True})

        assert response.status_code == 200
        assert response.json()["is_admin"] is True
        assert response.json()["name"] == "alice"

    def test_update_duplicate_email(self, client):
        """Test an email collision returns 400."""
        _register(client, "alice")
        bob = _register(client, "bob").json()

        response = client.put(f"/api/users/{bob['id']}", json={"email": "alice@x.com"})

        assert response.status_code == 400

    def test_update_missing_user(self, client):
        """Test updating an unknown id returns 404."""
        assert client.put(f"/api/users/{uuid4()}", json={"name": "x"}).status_code == 404

    def test_delete(self, client):
        """Test deleting a user, then again."""
        user = _register(client, "alice").json()

        response = client.delete(f"/api/users/{user['id']}")

        assert response.status_code == 200
        assert client.get(f"/api/users/{user['id']}").status_code == 404
        assert client.delete(f"/api/users/{user['id']}").status_code == 404

    def test_set_hidden_missing_user(self, client):
        """Test hiding an unknown id returns 404."""
        response = client.put(f"/api/users/{uuid4()}/hidden", json={"is_hidden": True})

        assert response.status_code == 404


class TestUserTagsEndpoints:
    """Tests for the user tag endpoints."""

    def test_attach_and_list(self, client):
        """Test attaching tags by id and listing them."""
        user = _register(client, "alice").json()
        first = _create_tag(client, "t1")
        second = _create_tag(client, "t2")

        response = client.post(
            f"/api/users/{user['id']}/tags",
            json={"tag_ids": [first["id"], second["id"], first["id"]]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["tags"] == [first["id"], second["id"]]
        assert [tag["name"] for tag in data["tags"]] == ["t1", "t2"]

        listed = client.get(f"/api/users/{user['id']}/tags")
        assert [tag["name"] for tag in listed.json()] == ["t1", "t2"]

    def test_attach_malformed_tag_id(self, client):
        """Test a malformed tag id returns 400."""
        user = _register(client, "alice").json()

        response = client.post(f"/api/users/{user['id']}/tags", json={"tag_ids": ["bad"]})

        assert response.status_code == 400

    def test_attach_unknown_tag(self, client):
        """Test an unknown tag returns 404."""
        user = _register(client, "alice").json()

        response = client.post(f"/api/users/{user['id']}/tags", json={"tag_ids": [str(uuid4())]})

        assert response.status_code == 404

    def test_attach_to_unknown_user(self, client):
        """Test an unknown user returns 404."""
        tag = _create_tag(client, "t1")

        response = client.post(f"/api/users/{uuid4()}/tags", json={"tag_ids": [tag["id"]]})

        assert response.status_code == 404

    def test_attach_requires_tags(self, client):
        """Test an empty tag list is rejected."""
        user = _register(client, "alice").json()

        response = client.post(f"/api/users/{user['id']}/tags", json={"tag_ids": []})

        assert response.status_code == 422

    def test_attach_by_name(self, client):
        """Test tagging by name creates missing tags."""
        user = _register(client, "alice").json()

        response = client.post(
            f"/api/users/{user['id']}/tags/by-name", json={"names": ["python", "fastapi"]}
        )

        assert response.status_code == 200
        tags = response.json()["tags"]
        assert [tag["name"] for tag in tags] == ["python", "fastapi"]
        assert all(tag["category"] == "user-generated" for tag in tags)

    def test_attach_by_name_unknown_user(self, client):
        """Test tagging a missing user by name returns 404."""
        response = client.post(f"/api/users/{uuid4()}/tags/by-name", json={"names": ["python"]})

        assert response.status_code == 404

    def test_detach(self, client):
        """Test detaching a held tag and an absent one."""
        user = _register(client, "alice").json()
        tag = _create_tag(client, "t1")
        client.post(f"/api/users/{user['id']}/tags", json={"tag_ids": [tag["id"]]})

        absent = client.delete(f"/api/users/{user['id']}/tags/{uuid4()}")
        assert absent.status_code == 200
        assert absent.json()["user"]["tags"] == [tag["id"]]

        response = client.delete(f"/api/users/{user['id']}/tags/{tag['id']}")
        assert response.status_code == 200
        assert response.json()["user"]["tags"] == []

    def test_detach_unknown_user(self, client):
        """Test detaching from a missing user returns 404."""
        response = client.delete(f"/api/users/{uuid4()}/tags/{uuid4()}")

        assert response.status_code == 404


class TestUsersByTagsEndpoint:
    """Tests for GET /api/users/by-tags"""

    def test_users_with_all_tags(self, client):
        """Test only users holding every tag are returned."""
        first = _create_tag(client, "t1")
        second = _create_tag(client, "t2")
        both = _register(client, "both").json()
        only_first = _register(client, "only-first").json()
        client.post(f"/api/users/{both['id']}/tags", json={"tag_ids": [first["id"], second["id"]]})
        client.post(f"/api/users/{only_first['id']}/tags", json={"tag_ids": [first["id"]]})

        response = client.get(
            "/api/users/by-tags", params=[("tags", first["id"]), ("tags", second["id"])]
        )

        assert response.status_code == 200
        assert [user["name"] for user in response.json()["users"]] == ["both"]

    def test_no_tags_given(self, client):
        """Test omitting tags returns 400."""
        assert client.get("/api/users/by-tags").status_code == 400

    def test_malformed_tag_id(self, client):
        """Test a malformed tag id returns 400."""
        response = client.get("/api/users/by-tags", params={"tags": "bad"})

        assert response.status_code == 400
