from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from accounts.api.v1.models import ProviderName, SocialProfile
from accounts.api.v1.repositories import get_role_repository, get_user_repository
from accounts.core.config import settings
from accounts.db import get_session
from accounts.main import app


API_KEY_HEADER = {"X-API-Key": "test-api-key"}
USERS_URL = f"{settings.API_V1_STR}/users"


@pytest.fixture
async def client(db, user_repository, role_repository):
    async def override_session():
        yield db

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_user_repository] = lambda: user_repository
    app.dependency_overrides[get_role_repository] = lambda: role_repository

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test", headers=API_KEY_HEADER) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def ana(db, user_repository, default_role):
    return await user_repository.create(db, {"email": "ana@example.com", "first_name": "Ana"})


async def test_requests_without_api_key_are_rejected(client, ana):
    response = await client.get(f"{USERS_URL}/{ana.id}", headers={"X-API-Key": "wrong"})

    assert response.status_code == 403


async def test_read_user_includes_roles(client, ana):
    response = await client.get(f"{USERS_URL}/{ana.id}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "ana@example.com"
    assert [role["name"] for role in data["roles"]] == ["users"]


async def test_read_unknown_user_returns_404(client):
    response = await client.get(f"{USERS_URL}/{uuid4()}")

    assert response.status_code == 404
    assert response.json()["error_type"] == "ModelNotFoundError"


async def test_create_user_assigns_default_role(client, default_role, event_sink):
    response = await client.post(USERS_URL, json={"email": "new@example.com", "password": "long-enough"})

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["confirmed"] is True
    assert data["language"] == settings.APP_LOCALE
    assert [role["id"] for role in data["roles"]] == [str(default_role.id)]
    assert "password" not in data
    assert len(event_sink.events) == 1


async def test_create_user_with_explicit_roles(client, default_role, admin_role):
    response = await client.post(USERS_URL, json={"email": "new@example.com", "roles": [str(admin_role.id)]})

    assert response.status_code == 201
    assert [role["name"] for role in response.json()["data"]["roles"]] == ["admin"]


async def test_create_user_rejects_invalid_payload(client):
    response = await client.post(USERS_URL, json={"email": "not-an-email", "timezone": "Mars/Base"})

    assert response.status_code == 422


async def test_create_duplicate_email_returns_400(client, ana):
    response = await client.post(USERS_URL, json={"email": "ana@example.com"})

    assert response.status_code == 400


async def test_update_user_syncs_roles(client, ana, admin_role, editor_role):
    response = await client.put(
        f"{USERS_URL}/{ana.id}",
        json={"first_name": "Ana Maria", "roles": [str(admin_role.id), str(editor_role.id)], "permissions": ["files.view"]},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["first_name"] == "Ana Maria"
    assert sorted(role["name"] for role in data["roles"]) == ["admin", "editor"]
    assert data["permissions"] == {"files.view": True}


async def test_delete_multiple(client, user_repository, ana):
    response = await client.post(f"{USERS_URL}/delete-multiple", json={"ids": [str(ana.id), str(uuid4())]})

    assert response.status_code == 200
    assert response.json()["data"] == {"deleted": 1}


async def test_attach_and_detach_roles(client, ana, default_role, admin_role):
    response = await client.post(f"{USERS_URL}/{ana.id}/roles/attach", json={"roles": [str(admin_role.id)]})

    assert response.status_code == 200
    assert sorted(role["name"] for role in response.json()["data"]["roles"]) == ["admin", "users"]

    response = await client.post(f"{USERS_URL}/{ana.id}/roles/detach", json={"roles": [str(default_role.id)]})

    assert response.status_code == 200
    assert [role["name"] for role in response.json()["data"]["roles"]] == ["admin"]


async def test_add_and_remove_permissions(client, ana):
    response = await client.post(f"{USERS_URL}/{ana.id}/permissions/add", json={"permissions": ["files.view", "files.create"]})

    assert response.status_code == 200
    assert response.json()["data"]["permissions"] == {"files.view": True, "files.create": True}

    response = await client.post(f"{USERS_URL}/{ana.id}/permissions/remove", json={"permissions": ["files.view"]})

    assert response.json()["data"]["permissions"] == {"files.create": True}


async def test_create_and_read_role(client):
    response = await client.post(
        f"{settings.API_V1_STR}/roles", json={"name": "support", "permissions": {"tickets.view": True, "tickets.close": False}}
    )

    assert response.status_code == 201
    role = response.json()["data"]
    assert role["permissions"] == {"tickets.view": True}

    response = await client.get(f"{settings.API_V1_STR}/roles/{role['id']}")

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "support"


async def test_api_responses_carry_security_headers(client, ana):
    response = await client.get(f"{USERS_URL}/{ana.id}")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["Cache-Control"] == "no-store"
    assert "Strict-Transport-Security" not in response.headers


async def test_read_user_with_requested_relations(client, db, ana):
    db.add(SocialProfile(service_name=ProviderName.github, user_service_id="gh-7", username="ana", user_id=ana.id))
    await db.commit()

    response = await client.get(f"{USERS_URL}/{ana.id}", params={"with": "social_profiles,notifications"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert [profile["service_name"] for profile in data["social_profiles"]] == ["github"]
    assert data["notifications"] == []
    assert "subscriptions" not in data


async def test_read_user_with_unknown_relation_returns_400(client, ana):
    response = await client.get(f"{USERS_URL}/{ana.id}", params={"with": "purchases"})

    assert response.status_code == 400


async def test_list_roles(client, default_role, admin_role):
    response = await client.get(f"{settings.API_V1_STR}/roles", params={"limit": 1})

    assert response.status_code == 200
    assert [role["name"] for role in response.json()["data"]] == ["users"]


async def test_read_user_with_permissions_relation(client, ana):
    response = await client.get(f"{USERS_URL}/{ana.id}", params={"with": "roles,permissions"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["permissions"] == {}
    assert [role["name"] for role in data["roles"]] == ["users"]
