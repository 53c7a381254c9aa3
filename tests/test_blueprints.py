from datetime import datetime

from goalquest.utils.blueprints import DEFAULT_BLUEPRINTS, default_deadline, get_blueprint


def test_every_preset_has_one_goal_per_type():
    assert [b["id"] for b in DEFAULT_BLUEPRINTS] == [
        "career-growth", "learning-journey", "health-transformation", "financial-growth",
    ]
    for blueprint in DEFAULT_BLUEPRINTS:
        assert sorted(g["type"] for g in blueprint["goals"]) == ["long", "medium", "short"]


def test_get_blueprint():
    assert get_blueprint("learning-journey")["title"] == "Learning Journey"
    assert get_blueprint("nope") is None


def test_default_deadlines():
    now = datetime(2024, 8, 31, 12, 0)
    assert default_deadline("short", now) == datetime(2024, 9, 14, 12, 0)
    assert default_deadline("medium", now) == datetime(2024, 10, 31, 12, 0)
    assert default_deadline("long", now) == datetime(2025, 2, 28, 12, 0)
