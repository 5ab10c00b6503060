"""Streaks, progress trends, insights and data export."""

from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.application.analytics import AnalyticsService
from selfcare.auth.dependencies import get_current_user
from selfcare.database import get_db_session
from selfcare.models.analytics import InsightsResponse
from selfcare.models.database import UserDB

router = APIRouter(prefix="/analytics", tags=["analytics"])


def get_analytics_service(db: AsyncSession = Depends(get_db_session)) -> AnalyticsService:
    return AnalyticsService(db)


@router.get("/streaks", summary="Streak data and 30-day calendar")
async def streaks(
    current_user: UserDB = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await service.streaks(current_user)


@router.get("/progress", summary="Progress trends over a period")
async def progress(
    period: str = Query("30d", description="7d | 30d | 90d | 1y"),
    current_user: UserDB = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await service.progress(current_user, period=period)


@router.get("/insights", response_model=InsightsResponse, summary="Personal wellness insights")
async def insights(
    current_user: UserDB = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
) -> InsightsResponse:
    return await service.insights(current_user)


@router.get("/export", summary="Export all of the user's activity data")
async def export_data(
    format: str = Query("json", pattern="^(json|csv)$"),
    current_user: UserDB = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
) -> Response:
    if format == "csv":
        return Response(
            content=await service.export_csv(current_user),
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="wellness-data.csv"'},
        )

    return JSONResponse(
        content=jsonable_encoder(await service.export_json(current_user)),
        headers={"Content-Disposition": 'attachment; filename="wellness-data.json"'},
    )
