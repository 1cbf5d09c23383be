# =============================================================================
# CREMERIA v1.0 - TEST AUTENTICACION
# =============================================================================
# Test de endpoint de autenticacion y autorizacion
# =============================================================================

import pytest
from datetime import timedelta
from fastapi.testclient import TestClient

from cremeria.auth.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from cremeria.models import UserRole

from conftest import TEST_PASSWORD, login


class TestSecurity:
    """Test de hash de password y JWT."""

    def test_password_hash_roundtrip(self):
        hashed = hash_password("Secreta123!")

        assert hashed != "Secreta123!"
        assert verify_password("Secreta123!", hashed)
        assert not verify_password("otra", hashed)

    def test_verify_password_rejects_garbage(self):
        assert not verify_password("x", "no-es-un-hash")
        assert not verify_password("", None)

    def test_token_payload(self):
        token, jti, _ = create_access_token("u1", "a@b.mx", UserRole.VENDEDOR)

        payload = decode_access_token(token)
        assert payload["sub"] == "u1"
        assert payload["role"] == "vendedor"
        assert payload["jti"] == jti

    def test_expired_token(self):
        token, _, _ = create_access_token(
            "u1", "a@b.mx", UserRole.ADMIN, expires_delta=timedelta(seconds=-5)
        )

        assert decode_access_token(token) is None


@pytest.mark.integration
class TestLogin:
    """Test login endpoint."""

    def test_login_success(self, client: TestClient, make_user):
        user = make_user(user_role="vendedor")

        response = client.post(
            "/api/v1/auth/login",
            json={"email": user["email"].upper(), "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] > 0
        assert data["user"]["user_role"] == "vendedor"
        assert "password_hash" not in data["user"]

    def test_login_invalid_password(self, client: TestClient, make_user):
        user = make_user()

        response = client.post(
            "/api/v1/auth/login",
            json={"email": user["email"], "password": "incorrecta"}
        )

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "INVALID_CREDENTIALS"

    def test_login_unknown_email(self, client: TestClient):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "nadie@cremeria.test", "password": TEST_PASSWORD}
        )

        assert response.status_code == 401

    def test_login_disabled_user(self, client: TestClient, make_user):
        user = make_user(is_active=False)

        response = client.post(
            "/api/v1/auth/login",
            json={"email": user["email"], "password": TEST_PASSWORD}
        )

        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "USER_DISABLED"


@pytest.mark.integration
class TestSession:
    """Test sesion: /me, logout y tokens invalidos."""

    def test_me(self, client: TestClient, customer, customer_headers):
        response = client.get("/api/v1/auth/me", headers=customer_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "cliente"
        assert data["assigned_client_id"] == customer["client"]["id"]

    def test_logout_revokes_token(self, client: TestClient, make_user):
        user = make_user(user_role="bodega_secos")
        headers = login(client, user["email"])

        response = client.post("/api/v1/auth/logout", headers=headers)
        assert response.status_code == 204

        response = client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 401

    def test_logout_keeps_other_sessions(self, client: TestClient, make_user):
        user = make_user(user_role="vendedor")
        first = login(client, user["email"])
        second = login(client, user["email"])

        client.post("/api/v1/auth/logout", headers=first)

        assert client.get("/api/v1/auth/me", headers=second).status_code == 200

    def test_missing_token(self, client: TestClient):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "TOKEN_INVALID"

    def test_forged_token(self, client: TestClient):
        response = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": "Bearer abc.def.ghi"}
        )

        assert response.status_code == 401

    def test_admin_only_endpoint(self, client: TestClient, headers_for, admin_headers):
        assert client.get("/api/v1/users", headers=headers_for("vendedor")).status_code == 403
        assert client.get("/api/v1/users", headers=admin_headers).status_code == 200


@pytest.mark.integration
class TestHealth:

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "sqlite"
        assert data["stats"]["users"] == 1
