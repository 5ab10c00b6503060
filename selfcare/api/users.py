"""User discovery, public profiles, leaderboards and achievements."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.application.users import UserService
from selfcare.auth.dependencies import get_current_user
from selfcare.database import get_db_session
from selfcare.models.analytics import LeaderboardResponse
from selfcare.models.database import UserDB
from selfcare.models.user import AchievementUnlock, PrivacyUpdate

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(db: AsyncSession = Depends(get_db_session)) -> UserService:
    return UserService(db)


@router.get("/search", summary="Search users by username or name")
async def search_users(
    q: Optional[str] = Query(None, description="At least 2 characters"),
    limit: int = Query(10, ge=1, le=50),
    current_user: UserDB = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return {"users": await service.search(current_user, q, limit=limit)}


@router.get("/leaderboard", response_model=LeaderboardResponse, summary="Leaderboard")
async def leaderboard(
    type: str = Query("streak", description="streak | activities | social"),
    period: str = Query("all", description="all | week | month | year"),
    limit: int = Query(50, ge=1, le=100),
    current_user: UserDB = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> LeaderboardResponse:
    return await service.leaderboard(current_user, board_type=type, period=period, limit=limit)


@router.get("/suggestions", summary="Friend suggestions")
async def friend_suggestions(
    current_user: UserDB = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return {"suggestions": await service.suggestions(current_user)}


@router.get("/{user_id}/profile", summary="Public profile of a user")
async def get_user_profile(
    user_id: UUID,
    current_user: UserDB = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return {"user": await service.get_profile(current_user, user_id)}


@router.post("/achievements/unlock", summary="Unlock an achievement")
async def unlock_achievement(
    data: AchievementUnlock,
    current_user: UserDB = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    achievement = await service.unlock_achievement(current_user, data)
    return {"message": "Achievement unlocked successfully", "achievement": achievement}


@router.put("/privacy", summary="Update privacy settings")
async def update_privacy(
    data: PrivacyUpdate,
    current_user: UserDB = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    privacy = await service.update_privacy(current_user, data)
    return {"message": "Privacy settings updated successfully", "privacy": privacy}
