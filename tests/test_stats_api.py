from datetime import datetime, timedelta

import pytest
from sqlalchemy import update

from goalquest.models.task import Task
from goalquest.utils.progress import utcnow


def in_days(days: float) -> str:
    return (utcnow() + timedelta(days=days)).isoformat()


async def seed_tasks(client, scheduled_dates):
    goal = (await client.post(
        "/api/goals", json={"title": "Read more", "type": "long", "deadline": in_days(200)}
    )).json()
    ids = []
    for scheduled in scheduled_dates:
        response = await client.post(
            "/api/tasks",
            json={"goal_id": goal["id"], "title": "Read a chapter", "scheduled_date": scheduled.isoformat()},
        )
        ids.append(response.json()["id"])
    return goal, ids


async def mark_completed(session_factory, completions):
    """Backdate completions straight in the database: {task_id: completed_at}."""
    async with session_factory() as session:
        for task_id, completed_at in completions.items():
            await session.execute(
                update(Task)
                .where(Task.id == task_id)
                .values(is_completed=True, completed_at=completed_at, completed_on_time=True)
            )
        await session.commit()


@pytest.mark.asyncio
async def test_stats_for_a_new_user(client):
    response = await client.get("/api/user/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["tasks_completed"] == 0
    assert data["current_streak"] == 0
    assert data["goals_shared"] == 0


@pytest.mark.asyncio
async def test_recalculate_from_backdated_completions(client, session_factory):
    days = [datetime(2029, 3, d, 9, 0) for d in (1, 2, 3)]
    _, ids = await seed_tasks(client, days)
    await mark_completed(session_factory, {
        ids[0]: datetime(2029, 3, 1, 20, 0),
        ids[1]: datetime(2029, 3, 2, 14, 0),
        ids[2]: datetime(2029, 3, 3, 15, 0),
    })

    response = await client.post("/api/user/stats/recalculate")
    assert response.status_code == 200
    data = response.json()
    assert data["current_streak"] == 3
    assert data["longest_streak"] == 3
    assert data["tasks_completed"] == 3
    assert data["most_productive_time"] == "Afternoon"
    assert data["most_tasks_completed_in_day"] == 1
    assert data["on_time_completion_rate"] == 100
    assert data["long_term_completion_rate"] == 100
    assert data["longest_break_between_completions"] == 1
    assert data["recurring_ratio"] == {"recurring": 0, "one_time": 3, "ratio": "0:3", "percentage": 0}

    stored = (await client.get("/api/user/stats")).json()
    assert stored["current_streak"] == 3
    assert stored["most_productive_time"] == "Afternoon"


@pytest.mark.asyncio
async def test_longest_streak_survives_a_broken_streak(client, session_factory):
    _, ids = await seed_tasks(client, [datetime(2029, 3, d, 9, 0) for d in (1, 2, 10)])
    await mark_completed(session_factory, {
        ids[0]: datetime(2029, 3, 1, 9, 0),
        ids[1]: datetime(2029, 3, 2, 9, 0),
    })
    assert (await client.post("/api/user/stats/recalculate")).json()["longest_streak"] == 2

    await mark_completed(session_factory, {ids[2]: datetime(2029, 3, 10, 9, 0)})
    data = (await client.post("/api/user/stats/recalculate")).json()
    assert data["current_streak"] == 1
    assert data["longest_streak"] == 2
    assert data["longest_break_between_completions"] == 8


@pytest.mark.asyncio
async def test_heatmap(client, session_factory):
    _, ids = await seed_tasks(client, [datetime(2029, 3, 1, 9, 0)] * 2 + [datetime(2028, 3, 1, 9, 0)])
    await mark_completed(session_factory, {
        ids[0]: datetime(2029, 3, 1, 9, 0),
        ids[1]: datetime(2029, 3, 1, 19, 0),
        ids[2]: datetime(2028, 3, 1, 9, 0),
    })

    response = await client.get("/api/user/heatmap", params={"year": 2029})
    assert response.status_code == 200
    data = response.json()
    assert data["year"] == 2029
    assert data["total_completed"] == 2
    assert len(data["days"]) == 365
    busy = [d for d in data["days"] if d["count"]]
    assert busy == [{"date": "2029-03-01", "count": 2, "level": 2}]

    assert len((await client.get("/api/user/heatmap", params={"year": 2028})).json()["days"]) == 366


@pytest.mark.asyncio
async def test_heatmap_defaults_to_current_year(client):
    data = (await client.get("/api/user/heatmap")).json()
    assert data["year"] == utcnow().year
    assert data["total_completed"] == 0

    assert (await client.get("/api/user/heatmap", params={"year": 1900})).status_code == 422
