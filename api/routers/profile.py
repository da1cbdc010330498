"""
Profile router for the user's display name, weight unit and goals.

The user record is created on first access, so GET never returns 404.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.deps import get_registered_user, get_user_repo
from application.ports import UserRepository
from domain.models.training import WeightUnit

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/profile",
    tags=["Profile"],
)


class ProfileResponse(BaseModel):
    """Response model for the user profile."""
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    units: WeightUnit = "lb"
    goals: Optional[str] = None
    weekly_goal: Optional[int] = None
    current_streak: int = 0
    longest_streak: int = 0


class ProfileUpdateRequest(BaseModel):
    """Partial profile update. Omitted fields are left unchanged."""
    display_name: Optional[str] = Field(None, max_length=100)
    units: Optional[WeightUnit] = None
    goals: Optional[str] = Field(None, max_length=1000)

    class Config:
        json_schema_extra = {
            "example": {
                "display_name": "Sam",
                "units": "kg",
                "goals": "Bench 100kg",
            }
        }


def _profile_response(user) -> ProfileResponse:
    return ProfileResponse(
        id=user["id"],
        email=user.get("email"),
        display_name=user.get("display_name"),
        units=user.get("units") or "lb",
        goals=user.get("goals"),
        weekly_goal=user.get("weekly_goal"),
        current_streak=user.get("current_streak") or 0,
        longest_streak=user.get("longest_streak") or 0,
    )


@router.get("", response_model=ProfileResponse)
def get_profile(
    user_id: str = Depends(get_registered_user),
    repo: UserRepository = Depends(get_user_repo),
) -> ProfileResponse:
    return _profile_response(repo.get_or_create(user_id))


@router.patch("", response_model=ProfileResponse)
def update_profile(
    request: ProfileUpdateRequest,
    user_id: str = Depends(get_registered_user),
    repo: UserRepository = Depends(get_user_repo),
) -> ProfileResponse:
    """Update the fields present in the request body."""
    fields = request.model_dump(exclude_unset=True)
    if not fields:
        return _profile_response(repo.get_or_create(user_id))

    logger.info(f"Updating profile fields {sorted(fields)} for user {user_id}")
    return _profile_response(repo.update(user_id, fields))
