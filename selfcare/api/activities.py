"""
SelfCare Planner - Activity API Endpoints
CRUD, completion and social engagement on wellness activities
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.application.activities import ActivityService
from selfcare.auth.dependencies import get_current_user
from selfcare.database import get_db_session
from selfcare.models.activity import (
    ActivityComplete,
    ActivityCreate,
    ActivityResponse,
    ActivityShare,
    ActivityUpdate,
    CommentCreate,
)
from selfcare.models.database import UserDB
from selfcare.models.enums import ActivityType, PrimaryGoal

router = APIRouter(prefix="/activities", tags=["activities"])


def get_activity_service(db: AsyncSession = Depends(get_db_session)) -> ActivityService:
    return ActivityService(db)


# ============================================================================
# COLLECTION
# ============================================================================


@router.get("", summary="List the current user's activities")
async def list_activities(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    type: Optional[ActivityType] = None,
    category: Optional[PrimaryGoal] = None,
    completed: Optional[bool] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    sort: str = Query("-created_at", description="Field name, prefix with - for descending"),
    current_user: UserDB = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    filters = {
        "type": type.value if type else None,
        "category": category.value if category else None,
        "completed": completed,
        "start_date": start_date,
        "end_date": end_date,
    }
    return await service.list_activities(current_user, page=page, limit=limit, filters=filters, sort=sort)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create an activity")
async def create_activity(
    data: ActivityCreate,
    current_user: UserDB = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    activity = await service.create_activity(current_user, data)
    return {"message": "Activity created successfully", "activity": activity}


@router.get("/stats/summary", summary="Activity statistics for the current user")
async def stats_summary(
    current_user: UserDB = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    return await service.stats_summary(current_user)


@router.get("/trending", summary="Trending shared activities")
async def trending_activities(
    limit: int = Query(10, ge=1, le=50),
    current_user: UserDB = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    return {"activities": await service.trending(limit)}


# ============================================================================
# SINGLE ACTIVITY
# ============================================================================


@router.get("/{activity_id}", summary="Get one of the current user's activities")
async def get_activity(
    activity_id: UUID,
    current_user: UserDB = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    return {"activity": await service.get_activity(current_user, activity_id)}


@router.put("/{activity_id}", summary="Update an activity")
async def update_activity(
    activity_id: UUID,
    data: ActivityUpdate,
    current_user: UserDB = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    activity: ActivityResponse = await service.update_activity(current_user, activity_id, data)
    return {"message": "Activity updated successfully", "activity": activity}


@router.delete("/{activity_id}", summary="Delete an activity")
async def delete_activity(
    activity_id: UUID,
    current_user: UserDB = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    await service.delete_activity(current_user, activity_id)
    return {"message": "Activity deleted successfully"}


@router.post("/{activity_id}/complete", summary="Mark an activity completed")
async def complete_activity(
    activity_id: UUID,
    data: Optional[ActivityComplete] = None,
    current_user: UserDB = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    return await service.complete_activity(current_user, activity_id, data or ActivityComplete())


@router.post("/{activity_id}/like", summary="Like or unlike an activity")
async def toggle_like(
    activity_id: UUID,
    current_user: UserDB = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    return await service.toggle_like(current_user, activity_id)


@router.post("/{activity_id}/comment", summary="Comment on an activity")
async def add_comment(
    activity_id: UUID,
    data: CommentCreate,
    current_user: UserDB = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    return await service.add_comment(current_user, activity_id, data)


@router.post("/{activity_id}/share", summary="Share an activity")
async def share_activity(
    activity_id: UUID,
    data: ActivityShare,
    current_user: UserDB = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    return await service.share_activity(current_user, activity_id, data)
