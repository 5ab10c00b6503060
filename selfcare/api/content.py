"""Personalised content endpoints backed by the language model."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.application.content import ContentService
from selfcare.auth.dependencies import get_current_user
from selfcare.content import ContentGenerator, get_content_generator
from selfcare.database import get_db_session
from selfcare.models.activity import GenerateActivityRequest, MotivationalMessageRequest
from selfcare.models.database import UserDB

router = APIRouter(prefix="/content", tags=["content"])


def get_content_service(
    db: AsyncSession = Depends(get_db_session),
    generator: ContentGenerator = Depends(get_content_generator),
) -> ContentService:
    return ContentService(db, generator=generator)


@router.get("/daily-affirmation", summary="Today's personalised affirmation")
async def daily_affirmation(
    current_user: UserDB = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
):
    return await service.daily_affirmation(current_user)


@router.post("/generate-activity", summary="Generate a self-care activity")
async def generate_activity(
    request: Optional[GenerateActivityRequest] = None,
    current_user: UserDB = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
):
    request = request or GenerateActivityRequest()
    return await service.generate_activity(
        current_user,
        activity_type=request.activity_type,
        custom_prompt=request.custom_prompt,
    )


@router.get("/recommendations", summary="Personalised recommendations")
async def recommendations(
    current_user: UserDB = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
):
    return await service.recommendations(current_user)


@router.post("/motivational-message", summary="Generate a short motivational message")
async def motivational_message(
    request: Optional[MotivationalMessageRequest] = None,
    current_user: UserDB = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
):
    context = request.context if request else None
    return await service.motivational_message(current_user, context)


@router.get("/daily-dashboard", summary="Home screen content for today")
async def daily_dashboard(
    current_user: UserDB = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
):
    return await service.daily_dashboard(current_user)
