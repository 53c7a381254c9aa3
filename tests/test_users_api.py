import pytest


@pytest.mark.asyncio
async def test_read_own_profile(client, user):
    response = await client.get("/api/users/me")
    assert response.status_code == 200
    assert response.json()["email"] == "quester@example.com"
    assert response.json()["id"] == str(user.id)


@pytest.mark.asyncio
async def test_update_display_name(client):
    response = await client.patch("/api/users/me", json={"display_name": "Quester"})
    assert response.status_code == 200
    assert response.json()["display_name"] == "Quester"


@pytest.mark.asyncio
async def test_empty_profile_update_is_rejected(client):
    response = await client.patch("/api/users/me", json={})
    assert response.status_code == 400
    assert response.json()["detail"] == "No fields provided for update"


@pytest.mark.asyncio
async def test_profile_update_ignores_account_flags(client):
    response = await client.patch("/api/users/me", json={"display_name": "Q", "is_superuser": True})
    assert response.status_code == 200
    assert response.json()["is_superuser"] is False
