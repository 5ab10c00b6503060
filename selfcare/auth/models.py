"""
SelfCare Planner Authentication Models
Pydantic models for authentication requests and responses
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from selfcare.models.enums import Mood, PrimaryGoal
from selfcare.models.user import PreferencesUpdate, UserResponse


class UserCreate(BaseModel):
    """User registration request"""

    username: str = Field(
        ..., min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_.-]+$", description="Unique username"
    )
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(
        ..., min_length=6, max_length=128, description="Password (min 6 characters)"
    )
    first_name: str = Field(default="", max_length=50)
    last_name: str = Field(default="", max_length=50)
    primary_goal: PrimaryGoal = Field(..., description="Wellness goal chosen at sign-up")
    current_mood: Mood = Mood.NEUTRAL

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class UserLogin(BaseModel):
    """User login request"""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class TokenData(BaseModel):
    """JWT token payload data"""

    user_id: UUID
    email: str
    username: str


class AuthResponse(BaseModel):
    """Register / login response"""

    message: str
    token: str
    user: UserResponse


class ProfileUpdate(BaseModel):
    """User profile update request"""

    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = Field(None, max_length=500)
    avatar: Optional[str] = Field(None, max_length=500)
    timezone: Optional[str] = Field(None, max_length=50)
    current_mood: Optional[Mood] = None
    primary_goal: Optional[PrimaryGoal] = None
    preferences: Optional[PreferencesUpdate] = None


class PasswordChange(BaseModel):
    """Password change request"""

    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(
        ..., min_length=6, max_length=128, description="New password (min 6 chars)"
    )


class ForgotPasswordRequest(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class AccountDeactivate(BaseModel):
    password: str = Field(..., min_length=1, description="Current password to confirm")
