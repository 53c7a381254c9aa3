# goalquest/utils/blueprints.py
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from goalquest.utils.progress import enum_value, utcnow
from goalquest.utils.recurrence import add_months

# Built-in blueprints offered to every user
DEFAULT_BLUEPRINTS: List[dict] = [
    {
        "id": "career-growth",
        "title": "Career Growth",
        "description": "Advance your professional path strategically",
        "goals": [
            {"type": "short", "title": "Develop Project Proposal", "description": "Create a detailed proposal for a high-impact project"},
            {"type": "medium", "title": "Lead a Team Project", "description": "Successfully manage a project with measurable outcomes"},
            {"type": "long", "title": "Secure Senior Position", "description": "Position yourself for promotion through demonstrated leadership"},
        ],
    },
    {
        "id": "learning-journey",
        "title": "Learning Journey",
        "description": "Master a new skill through structured learning",
        "goals": [
            {"type": "short", "title": "Complete Fundamentals", "description": "Learn the basic principles and core concepts"},
            {"type": "medium", "title": "Build Practice Project", "description": "Apply knowledge by creating a tangible project"},
            {"type": "long", "title": "Achieve Certification", "description": "Obtain formal recognition of your expertise"},
        ],
    },
    {
        "id": "health-transformation",
        "title": "Health Transformation",
        "description": "Improve physical wellness systematically",
        "goals": [
            {"type": "short", "title": "Establish Exercise Routine", "description": "Create and follow a consistent weekly workout schedule"},
            {"type": "medium", "title": "Nutrition Overhaul", "description": "Implement a sustainable, balanced eating plan"},
            {"type": "long", "title": "Reach Fitness Milestone", "description": "Achieve specific measurable health improvements"},
        ],
    },
    {
        "id": "financial-growth",
        "title": "Financial Growth",
        "description": "Build wealth through strategic planning",
        "goals": [
            {"type": "short", "title": "Create Budget System", "description": "Establish tracking and spending controls"},
            {"type": "medium", "title": "Build Emergency Fund", "description": "Save 3-6 months of expenses"},
            {"type": "long", "title": "Investment Strategy", "description": "Develop and implement a diversified portfolio"},
        ],
    },
]


def get_blueprint(blueprint_id: str) -> Optional[Dict[str, Any]]:
    for blueprint in DEFAULT_BLUEPRINTS:
        if blueprint["id"] == blueprint_id:
            return blueprint
    return None


def default_deadline(goal_type: Any, now: Optional[datetime] = None) -> datetime:
    """Short: two weeks out. Medium: two months. Long: six months."""
    now = now or utcnow()
    goal_type = enum_value(goal_type)
    if goal_type == "short":
        return now + timedelta(days=14)
    if goal_type == "medium":
        return add_months(now, 2)
    return add_months(now, 6)
