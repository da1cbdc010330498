"""
Repository Interfaces (Ports) for the LiftLog API.

This package defines abstract interfaces that decouple domain logic from
infrastructure (database, external services). Implementations are provided
in the infrastructure layer.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the domain needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import SessionRepository, UserRepository

    class SessionService:
        def __init__(self, session_repo: SessionRepository):
            self._session_repo = session_repo
"""

from application.ports.user_repository import UserRepository
from application.ports.exercise_repository import ExerciseRepository
from application.ports.plan_repository import PlanRepository
from application.ports.session_repository import SessionRepository
from application.ports.achievement_repository import AchievementRepository

__all__ = [
    "UserRepository",
    "ExerciseRepository",
    "PlanRepository",
    "SessionRepository",
    "AchievementRepository",
]
