from datetime import timedelta

import pytest

from goalquest.utils.progress import utcnow


def in_days(days: float) -> str:
    return (utcnow() + timedelta(days=days)).isoformat()


@pytest.mark.asyncio
async def test_list_blueprints(client):
    response = await client.get("/api/blueprints")
    assert response.status_code == 200
    blueprints = response.json()
    assert len(blueprints) == 4
    assert blueprints[0]["id"] == "career-growth"
    assert [g["type"] for g in blueprints[0]["goals"]] == ["short", "medium", "long"]


@pytest.mark.asyncio
async def test_blueprint_workload(client):
    response = await client.post("/api/blueprints/workload", json={"blueprint_id": "career-growth"})
    assert response.status_code == 200
    data = response.json()
    assert data["policy"] == "blueprint"
    assert data["current_score"] == 0
    assert data["future_score"] == 4.5
    assert data["level"] == "low"

    for _ in range(2):
        await client.post("/api/goals", json={"title": "Ship it", "type": "long", "deadline": in_days(200)})
    data = (await client.post("/api/blueprints/workload", json={"blueprint_id": "career-growth"})).json()
    assert data["current"]["long"] == 2
    assert data["future_score"] == 8.5
    assert data["level"] == "medium"


@pytest.mark.asyncio
async def test_apply_blueprint_uses_default_deadlines(client):
    response = await client.post("/api/blueprints/apply", json={"blueprint_id": "learning-journey"})
    assert response.status_code == 201
    goals = response.json()
    assert [g["title"] for g in goals] == [
        "Complete Fundamentals", "Build Practice Project", "Achieve Certification",
    ]
    assert goals[0]["time_left"] == "14 days left"
    assert all(g["progress"] == 0 for g in goals)

    assert len((await client.get("/api/goals")).json()) == 3


@pytest.mark.asyncio
async def test_apply_custom_blueprint(client):
    response = await client.post("/api/blueprints/apply", json={
        "goals": [
            {"type": "short", "title": "Sketch the garden", "deadline": in_days(10)},
            {"type": "medium", "title": "Plant the beds"},
        ],
        "is_public": True,
    })
    assert response.status_code == 201
    goals = response.json()
    assert goals[0]["time_left"] == "10 days left"
    assert all(g["is_public"] for g in goals)


@pytest.mark.asyncio
async def test_apply_is_all_or_nothing(client):
    for i in range(3):
        await client.post("/api/goals", json={"title": f"Sprint {i}", "type": "short", "deadline": in_days(10)})

    response = await client.post("/api/blueprints/apply", json={"blueprint_id": "financial-growth"})
    assert response.status_code == 400
    assert response.json()["detail"] == "You can only have a maximum of 3 active short-term goals"
    assert len((await client.get("/api/goals")).json()) == 3


@pytest.mark.asyncio
async def test_blueprint_selection_errors(client):
    assert (await client.post("/api/blueprints/apply", json={"blueprint_id": "moon-landing"})).status_code == 404
    assert (await client.post("/api/blueprints/apply", json={})).status_code == 422
    assert (await client.post("/api/blueprints/workload", json={
        "blueprint_id": "career-growth",
        "goals": [{"type": "short", "title": "Both"}],
    })).status_code == 422
    assert (await client.post("/api/blueprints/apply", json={"goals": []})).status_code == 422
