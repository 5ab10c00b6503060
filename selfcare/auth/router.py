"""
SelfCare Planner Authentication API Router
Endpoints for registration, login, passwords and profile management
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.database import get_db_session
from selfcare.models.database import UserDB
from selfcare.models.user import UserResponse

from .dependencies import get_current_user
from .models import (
    AccountDeactivate,
    AuthResponse,
    ForgotPasswordRequest,
    PasswordChange,
    ProfileUpdate,
    ResetPasswordRequest,
    UserCreate,
    UserLogin,
)
from .service import AuthService

router = APIRouter(prefix="/auth", tags=["authentication"])


def get_auth_service(db: AsyncSession = Depends(get_db_session)) -> AuthService:
    return AuthService(db)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create a new user account and return an authentication token",
)
async def register(
    user_data: UserCreate,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    return await service.register_user(user_data)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="User login",
    description="Authenticate with email and password, return a JWT token",
)
async def login(
    credentials: UserLogin,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    return await service.login(email=credentials.email, password=credentials.password)


@router.get("/me", summary="Get current user")
async def get_me(current_user: UserDB = Depends(get_current_user)):
    """Get the authenticated user's full account view"""
    return {"user": UserResponse.from_user(current_user)}


@router.put("/profile", summary="Update profile")
async def update_profile(
    update_data: ProfileUpdate,
    current_user: UserDB = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    user = await service.update_profile(current_user, update_data)
    return {"message": "Profile updated successfully", "user": user}


@router.post("/change-password", summary="Change password")
async def change_password(
    password_data: PasswordChange,
    current_user: UserDB = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    await service.change_password(
        current_user,
        current_password=password_data.current_password,
        new_password=password_data.new_password,
    )
    return {"message": "Password changed successfully"}


@router.post("/forgot-password", summary="Request a password reset token")
async def forgot_password(
    request: ForgotPasswordRequest,
    service: AuthService = Depends(get_auth_service),
):
    return await service.forgot_password(request.email)


@router.post("/reset-password", summary="Reset password with a reset token")
async def reset_password(
    request: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_service),
):
    await service.reset_password(request)
    return {"message": "Password reset successfully"}


@router.delete("/account", summary="Deactivate account")
async def deactivate_account(
    request: AccountDeactivate,
    current_user: UserDB = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    await service.deactivate_account(current_user, request.password)
    return {"message": "Account deactivated successfully"}


@router.post(
    "/verify-token",
    summary="Verify token",
    description="Verify that the current token is valid",
)
async def verify_token(current_user: UserDB = Depends(get_current_user)):
    return {
        "valid": True,
        "user_id": str(current_user.id),
        "email": current_user.email,
        "username": current_user.username,
    }
