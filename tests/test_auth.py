from datetime import timedelta

import pytest
from rest_framework_simplejwt.tokens import AccessToken

from backend.exceptions import Forbidden
from users.authentication import Identity
from users.models import User
from users.roles import Capability, Role, has_capability, require_capability


@pytest.mark.django_db
class TestRegistration:
    def test_register(self, api_client):
        response = api_client.post(
            "/auth/register/",
            {"username": "ada", "email": "ada@example.com", "password": "analytical1"},
            format="json",
        )

        assert response.status_code == 201
        body = response.data["user"]
        assert body["username"] == "ada"
        assert body["role"] == "ordinary"
        assert "password" not in body
        assert User.objects.get(email="ada@example.com").check_password("analytical1")

    def test_duplicate_email_conflicts(self, api_client, user):
        response = api_client.post(
            "/auth/register/",
            {"username": "someone-new", "email": user.email, "password": "analytical1"},
            format="json",
        )
        assert response.status_code == 409
        assert response.data["code"] == "conflict"

    def test_anonymous_cannot_register_admin(self, api_client):
        response = api_client.post(
            "/auth/register/",
            {
                "username": "mallory",
                "email": "mallory@example.com",
                "password": "analytical1",
                "role": "admin",
            },
            format="json",
        )

        assert response.status_code == 403
        assert response.data["code"] == "forbidden"
        assert not User.objects.filter(email="mallory@example.com").exists()

    def test_ordinary_user_cannot_register_admin(self, client_for, user):
        response = client_for(user).post(
            "/auth/register/",
            {
                "username": "mallory",
                "email": "mallory@example.com",
                "password": "analytical1",
                "role": "admin",
            },
            format="json",
        )

        assert response.status_code == 403
        assert not User.objects.filter(email="mallory@example.com").exists()

    def test_admin_can_register_admin(self, client_for, admin_account):
        response = client_for(admin_account).post(
            "/auth/register/",
            {
                "username": "grace",
                "email": "grace@example.com",
                "password": "analytical1",
                "role": "admin",
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["user"]["role"] == "admin"
        assert User.objects.get(email="grace@example.com").role == Role.ADMIN

    def test_missing_fields(self, api_client):
        response = api_client.post("/auth/register/", {"username": "x"}, format="json")
        assert response.status_code == 400
        assert set(response.data["errors"]) == {"email", "password"}


@pytest.mark.django_db
class TestLogin:
    def test_login_returns_usable_token(self, api_client, user):
        response = api_client.post(
            "/auth/login/",
            {"email": user.email, "password": "correct-horse-1"},
            format="json",
        )

        assert response.status_code == 200
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['token']}")
        profile = api_client.get("/user/profile/")
        assert profile.status_code == 200
        assert profile.data["email"] == user.email

    def test_wrong_password(self, api_client, user):
        response = api_client.post(
            "/auth/login/", {"email": user.email, "password": "nope-nope"}, format="json"
        )
        assert response.status_code == 401
        assert response.data["message"] == "Invalid email or password."

    def test_missing_password(self, api_client, user):
        response = api_client.post("/auth/login/", {"email": user.email}, format="json")
        assert response.status_code == 400


@pytest.mark.django_db
class TestBearerAuthentication:
    def test_missing_header(self, api_client):
        response = api_client.get("/orders/")
        assert response.status_code == 401
        assert response["WWW-Authenticate"] == 'Bearer realm="api"'

    def test_malformed_header(self, api_client, user):
        api_client.credentials(HTTP_AUTHORIZATION=f"Token {AccessToken.for_user(user)}")
        assert api_client.get("/orders/").status_code == 401

    def test_tampered_token(self, api_client, user):
        token = str(AccessToken.for_user(user))
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token[:-2]}xx")

        response = api_client.get("/orders/")

        assert response.status_code == 401
        assert response.data["message"] == "Invalid or expired token."

    def test_expired_token(self, api_client, user):
        token = AccessToken.for_user(user)
        token.set_exp(lifetime=-timedelta(minutes=5))
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        assert api_client.get("/orders/").status_code == 401

    def test_token_for_deleted_user(self, api_client, make_user):
        ghost = make_user()
        token = AccessToken.for_user(ghost)
        ghost.delete()
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = api_client.get("/orders/")

        assert response.status_code == 401
        assert response.data["message"] == "User not found."

    def test_request_user_is_identity_projection(self, client_for, user):
        response = client_for(user).get("/user/profile/")
        assert response.status_code == 200
        assert response.wsgi_request.user == Identity(
            id=user.id, username=user.username, email=user.email, role="ordinary"
        )


@pytest.mark.django_db
class TestProfile:
    def test_update_username(self, client_for, user):
        response = client_for(user).patch(
            "/user/profile/", {"username": "renamed"}, format="json"
        )
        assert response.status_code == 200
        assert response.data["username"] == "renamed"

    def test_empty_update(self, client_for, user):
        response = client_for(user).patch("/user/profile/", {}, format="json")
        assert response.status_code == 400
        assert response.data["message"] == "No valid fields provided for update."

    def test_duplicate_email(self, client_for, user, other_user):
        response = client_for(user).patch(
            "/user/profile/", {"email": other_user.email}, format="json"
        )
        assert response.status_code == 409


class TestRoles:
    def test_admin_capabilities(self):
        assert has_capability(Role.ADMIN, Capability.MANAGE_ORDERS)
        assert has_capability("admin", Capability.MANAGE_CATALOG)

    def test_ordinary_has_none(self):
        assert not has_capability(Role.ORDINARY, Capability.MANAGE_ORDERS)

    def test_unknown_role(self):
        assert not has_capability("superhero", Capability.MANAGE_ORDERS)

    def test_require_capability(self):
        shopper = Identity(id=1, username="s", email="s@example.com", role="ordinary")
        with pytest.raises(Forbidden):
            require_capability(shopper, Capability.MANAGE_ORDERS)
        with pytest.raises(Forbidden):
            require_capability(None, Capability.MANAGE_ORDERS)
