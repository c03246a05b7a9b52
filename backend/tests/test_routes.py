"""
Tests for API route endpoints.

Tests: register, login, profile, recommend, support, error rendering and CORS,
driven through the ASGI app with an in-memory database.
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from datetime import timedelta

import pytest
from fastapi import status
from sqlalchemy import delete, select

from conftest import ALICE, ALLOWED_ORIGIN
from db_models import User
from domain.constants import NO_GAMES_REPLY, RECOMMEND_SYSTEM_PROMPT, SUPPORT_SYSTEM_PROMPT
from domain.errors import GatewayError
from middleware.auth import issue_access_token


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestRoot:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_root_banner(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.text == "GameHub Backend Running"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_health_reports_database(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database_connected"] is True


class TestRegister:
    """Tests for POST /api/register."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_register_success(self, client, db_session):
        response = await client.post("/api/register", json=ALICE)
        assert response.status_code == 200
        body = response.json()
        assert body == {"message": "User registered successfully"}

        user = (await db_session.execute(select(User).where(User.email == "a@x.com"))).scalar_one()
        assert user.name == "Alice"
        assert user.phone is None
        assert user.password_hash != "secret1"
        assert user.password_hash.startswith("$2")

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_register_does_not_echo_password(self, client):
        response = await client.post("/api/register", json=ALICE)
        assert "secret1" not in response.text
        assert "password" not in response.text

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_register_with_phone(self, client, db_session):
        payload = {**ALICE, "phone": " 555-0100 "}
        response = await client.post("/api/register", json=payload)
        assert response.status_code == 200
        user = (await db_session.execute(select(User))).scalar_one()
        assert user.phone == "555-0100"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, client):
        first = await client.post("/api/register", json=ALICE)
        second = await client.post("/api/register", json={**ALICE, "name": "Other Alice"})
        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json() == {"error": "Email already registered", "code": "conflict"}

    @pytest.mark.api
    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["name", "email", "password"])
    async def test_missing_field_rejected(self, client, field):
        payload = {k: v for k, v in ALICE.items() if k != field}
        response = await client.post("/api/register", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == f"Missing required field: {field}"
        assert response.json()["code"] == "validation"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, client):
        response = await client.post("/api/register", json={**ALICE, "name": "   "})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required field: name"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_malformed_json_rejected(self, client):
        response = await client.post(
            "/api/register",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"


class TestLogin:
    """Tests for POST /api/login."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_login_returns_token(self, client, registered_user):
        response = await client.post(
            "/api/login", json={"email": "a@x.com", "password": "secret1"}
        )
        assert response.status_code == 200
        data = response.json()
        assert isinstance(data["token"], str) and data["token"].count(".") == 2
        assert data["expiresIn"] == 2 * 60 * 60

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, client, registered_user):
        wrong_password = await client.post(
            "/api/login", json={"email": "a@x.com", "password": "nope"}
        )
        unknown_email = await client.post(
            "/api/login", json={"email": "ghost@x.com", "password": "secret1"}
        )
        assert wrong_password.status_code == unknown_email.status_code == 400
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["error"] == "Invalid email or password"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_login_missing_password(self, client):
        response = await client.post("/api/login", json={"email": "a@x.com"})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required field: password"


class TestProfile:
    """Tests for GET /api/profile."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_register_login_profile_scenario(self, client):
        assert (await client.post("/api/register", json=ALICE)).status_code == 200
        login = await client.post("/api/login", json={"email": "a@x.com", "password": "secret1"})
        assert login.status_code == 200

        response = await client.get("/api/profile", headers=_bearer(login.json()["token"]))
        assert response.status_code == 200
        assert response.json() == {"name": "Alice", "email": "a@x.com", "phone": None}

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_profile_without_token(self, client):
        response = await client.get("/api/profile")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"] == "Access denied"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_profile_with_non_bearer_header(self, client, auth_token):
        response = await client.get("/api/profile", headers={"Authorization": f"Token {auth_token}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_profile_with_tampered_token(self, client, auth_token):
        header, payload, signature = auth_token.split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"
        response = await client.get("/api/profile", headers=_bearer(tampered))
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"] == "Invalid token"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_profile_with_expired_token(self, client, test_settings, db_session, registered_user):
        user = (await db_session.execute(select(User))).scalar_one()
        expired = issue_access_token(
            test_settings, user_id=user.id, email=user.email, ttl=timedelta(seconds=-30)
        )
        response = await client.get("/api/profile", headers=_bearer(expired))
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"] == "Invalid token"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_profile_for_deleted_user(self, client, db_session, auth_token):
        await db_session.execute(delete(User).where(User.email == "a@x.com"))
        await db_session.commit()

        response = await client.get("/api/profile", headers=_bearer(auth_token))
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "User not found", "code": "not_found"}

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_profile_never_exposes_hash(self, client, auth_token):
        response = await client.get("/api/profile", headers=_bearer(auth_token))
        assert set(response.json()) == {"name", "email", "phone"}


class TestRecommend:
    """Tests for POST /api/recommend."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_empty_catalog_skips_gateway(self, client, fake_gateway):
        response = await client.post("/api/recommend", json={"userMessage": "I like puzzles"})
        assert response.status_code == 200
        assert response.json() == {"reply": NO_GAMES_REPLY}
        assert fake_gateway.call_count == 0

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_recommend_sends_catalog_in_order(self, client, fake_gateway, sample_games):
        response = await client.post("/api/recommend", json={"userMessage": "Something hard but fair"})
        assert response.status_code == 200
        assert response.json() == {"reply": fake_gateway.reply}

        assert fake_gateway.call_count == 1
        system_prompt, user_prompt = fake_gateway.calls[0]
        assert system_prompt == RECOMMEND_SYSTEM_PROMPT
        assert "Something hard but fair" in user_prompt
        assert (
            "- Hades (Roguelike) - $24.99\n"
            "- Celeste (Platformer) - $19.99\n"
            "- Civilization VI (Strategy) - $59.99"
        ) in user_prompt

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_recommend_missing_message(self, client, fake_gateway):
        response = await client.post("/api/recommend", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required field: userMessage"
        assert fake_gateway.call_count == 0

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_recommend_gateway_failure_is_generic(self, client, fake_gateway, sample_games):
        fake_gateway.error = GatewayError()
        response = await client.post("/api/recommend", json={"userMessage": "anything"})
        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to generate a reply. Please try again later.",
            "code": "gateway",
        }


class TestSupport:
    """Tests for POST /api/support."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_support_forwards_message(self, client, fake_gateway):
        response = await client.post("/api/support", json={"message": "My download is stuck"})
        assert response.status_code == 200
        assert response.json() == {"reply": fake_gateway.reply}
        assert fake_gateway.calls == [(SUPPORT_SYSTEM_PROMPT, "My download is stuck")]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_support_missing_message(self, client, fake_gateway):
        response = await client.post("/api/support", json={"text": "hi"})
        assert response.status_code == 400
        assert fake_gateway.call_count == 0

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_support_gateway_failure(self, client, fake_gateway):
        fake_gateway.error = GatewayError()
        response = await client.post("/api/support", json={"message": "help"})
        assert response.status_code == 500
        assert response.json()["code"] == "gateway"


class TestHttpSurface:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get("/api/nothing-here")
        assert response.status_code == 404
        assert "error" in response.json()

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_cors_preflight_allowed_origin(self, client):
        response = await client.options(
            "/api/login",
            headers={"Origin": ALLOWED_ORIGIN, "Access-Control-Request-Method": "POST"},
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == ALLOWED_ORIGIN

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_cors_preflight_rejects_unknown_origin(self, client):
        response = await client.options(
            "/api/login",
            headers={"Origin": "http://evil.example", "Access-Control-Request-Method": "POST"},
        )
        assert response.status_code == 400
        assert "access-control-allow-origin" not in response.headers

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_cors_preflight_rejects_put(self, client):
        response = await client.options(
            "/api/login",
            headers={"Origin": ALLOWED_ORIGIN, "Access-Control-Request-Method": "PUT"},
        )
        assert response.status_code == 400
