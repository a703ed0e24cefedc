"""Tests for registration, login and bearer-token resolution."""

from taskboard.auth.auth_router import create_access_token
from taskboard.models.user import User

PASSWORD = "Sup3r$ecret"


def register(client, email="dana@example.com", name="Dana"):
    return client.post(
        "/auth/register",
        json={"email": email, "password": PASSWORD, "confirm_password": PASSWORD, "name": name},
    )


class TestRegisterAndLogin:

    def test_register_then_login_then_me(self, client):
        response = register(client)
        assert response.status_code == 201
        assert response.json()["email"] == "dana@example.com"
        assert response.json()["name"] == "Dana"

        login = client.post("/auth/login", json={"email": "dana@example.com", "password": PASSWORD})
        assert login.status_code == 200
        token = login.json()["access_token"]
        assert login.json()["token_type"] == "bearer"

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "dana@example.com"

    def test_duplicate_email_rejected(self, client):
        assert register(client).status_code == 201
        response = register(client)
        assert response.status_code == 400
        assert response.json()["detail"] == "Email already registered"

    def test_weak_password_rejected(self, client):
        response = client.post(
            "/auth/register",
            json={"email": "x@example.com", "password": "short", "confirm_password": "short"},
        )
        assert response.status_code == 422

    def test_mismatched_confirmation_rejected(self, client):
        response = client.post(
            "/auth/register",
            json={"email": "x@example.com", "password": PASSWORD, "confirm_password": PASSWORD + "x"},
        )
        assert response.status_code == 422

    def test_wrong_password(self, client):
        register(client)
        response = client.post("/auth/login", json={"email": "dana@example.com", "password": "Wr0ng!pass"})
        assert response.status_code == 401


class TestAuthentication:

    def test_missing_token(self, client):
        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json()["detail"] == "Not authenticated"

    def test_garbage_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_token_for_unknown_user(self, client):
        token = create_access_token("9999")
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_expired_token(self, client, make_user):
        user = make_user()
        token = create_access_token(str(user.id), minutes=-1)
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_every_router_requires_auth(self, client):
        requests = [
            ("get", "/projects/"),
            ("get", "/users/"),
            ("get", "/categories/project/1"),
            ("get", "/tasks/personal"),
            ("post", "/tasks/upload-url"),
            ("get", "/comments/task/1"),
            ("get", "/calendar/labels"),
            ("get", "/calendar/events?start_date=2026-01-01T00:00:00&end_date=2026-02-01T00:00:00"),
            ("get", "/notifications/"),
            ("post", "/notifications/read_all"),
        ]
        for method, url in requests:
            response = getattr(client, method)(url)
            assert response.status_code == 401, url


class TestTeamMembers:

    def test_lists_all_users_with_display_name(self, client, make_user, db):
        alice = make_user("Alice")
        make_user("Bob")

        db.add(User(email="nameless@example.com", password_hash="!"))
        db.commit()

        response = client.get("/users/", headers=alice.headers)
        assert response.status_code == 200
        names = [u["name"] for u in response.json()]
        assert names == ["Alice", "Bob", "nameless@example.com"]
