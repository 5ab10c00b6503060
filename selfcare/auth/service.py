"""
SelfCare Planner Authentication Service
Business logic for registration, login, passwords and account lifecycle
"""

from datetime import timedelta
from typing import Any, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.models.database import UserDB
from selfcare.models.user import Preferences, UserResponse
from selfcare.repositories.users import UserRepository
from selfcare.utils.config import get_settings
from selfcare.utils.errors import AuthenticationError, ValidationError
from selfcare.utils.logger import get_logger
from selfcare.utils.metrics import metrics
from selfcare.utils.time import as_utc, utcnow

from .models import (
    AuthResponse,
    ProfileUpdate,
    ResetPasswordRequest,
    UserCreate,
)
from .utils import create_access_token, generate_token_hex, get_password_hash, verify_password

logger = get_logger(__name__)

RESET_LINK_SENT = "If an account with that email exists, a password reset link has been sent"


def issue_token(user: UserDB) -> str:
    return create_access_token(user_id=user.id, email=user.email, username=user.username)


class AuthService:
    """
    Authentication service handling user registration, login, and account operations
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def register_user(self, user_data: UserCreate) -> AuthResponse:
        """
        Register a new user

        Args:
            user_data: User registration data

        Returns:
            AuthResponse with access token and user details

        Raises:
            ValidationError: If email/username already exists
        """
        existing = await self.user_repo.find_by_email_or_username(user_data.email, user_data.username)
        if existing is not None:
            if existing.email == user_data.email:
                raise ValidationError("User with this email already exists")
            raise ValidationError("Username is already taken")

        user = self.user_repo.create(
            UserDB(
                username=user_data.username,
                email=user_data.email,
                password_hash=get_password_hash(user_data.password),
                first_name=user_data.first_name,
                last_name=user_data.last_name,
                primary_goal=user_data.primary_goal.value,
                current_mood=user_data.current_mood.value,
                preferences=Preferences().model_dump(mode="json"),
                email_verification_token=generate_token_hex(),
                friendships=[],
                achievements=[],
            )
        )
        await self.user_repo.commit()

        logger.info(f"User registered: {user.email}")
        metrics.log_event("user_registered", {"primary_goal": user.primary_goal}, user_id=str(user.id))

        return AuthResponse(
            message="User registered successfully",
            token=issue_token(user),
            user=UserResponse.from_user(user),
        )

    async def login(self, email: str, password: str) -> AuthResponse:
        """
        Authenticate user and return token

        Raises:
            AuthenticationError: If credentials are invalid or the account is deactivated
        """
        user = await self.user_repo.get_by_email(email)

        if user is None:
            logger.warning(f"Login attempt for non-existent email: {email}")
            raise AuthenticationError("Invalid credentials")

        if not user.is_active:
            logger.warning(f"Login attempt for inactive user: {email}")
            raise AuthenticationError("Account is deactivated")

        if not verify_password(password, user.password_hash):
            logger.warning(f"Invalid password attempt for: {email}")
            raise AuthenticationError("Invalid credentials")

        await self._record_login(user)
        logger.info(f"User logged in: {user.email}")

        return AuthResponse(
            message="Login successful",
            token=issue_token(user),
            user=UserResponse.from_user(user),
        )

    async def _record_login(self, user: UserDB) -> None:
        """Stamp last_login; a failure here does not block the login"""
        user.last_login = utcnow()
        try:
            await self.user_repo.commit()
        except SQLAlchemyError as e:
            logger.warning(f"Could not record last login for {user.id}: {e}")
            await self.user_repo.rollback()
            await self.user_repo.refresh(user)

    async def update_profile(self, user: UserDB, update: ProfileUpdate) -> UserResponse:
        """Apply a partial profile update; each given preference section replaces the stored one"""
        data = update.model_dump(exclude_unset=True, exclude={"preferences"}, mode="json")
        for field, value in data.items():
            if value is not None:
                setattr(user, field, value)

        if update.preferences is not None:
            stored = Preferences.from_stored(user.preferences).model_dump(mode="json")
            stored.update(update.preferences.model_dump(exclude_none=True, mode="json"))
            user.preferences = Preferences.model_validate(stored).model_dump(mode="json")

        await self.user_repo.commit()
        logger.info(f"Profile updated for user: {user.id}")
        return UserResponse.from_user(user)

    async def change_password(self, user: UserDB, current_password: str, new_password: str) -> None:
        """
        Change user password

        Raises:
            AuthenticationError: If current password is wrong
        """
        if not verify_password(current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")

        user.password_hash = get_password_hash(new_password)
        await self.user_repo.commit()
        logger.info(f"Password changed for user: {user.email}")

    async def forgot_password(self, email: str) -> Dict[str, Any]:
        """Issue a one-hour reset token; the response never reveals whether the email exists"""
        response: Dict[str, Any] = {"message": RESET_LINK_SENT}

        user = await self.user_repo.get_by_email(email)
        if user is None:
            return response

        settings = get_settings()
        user.password_reset_token = generate_token_hex()
        user.password_reset_expires = utcnow() + timedelta(seconds=settings.password_reset_expiration)
        await self.user_repo.commit()
        logger.info(f"Password reset requested for user: {user.id}")

        # No mail delivery yet, so development builds hand the token back directly
        if settings.is_development:
            response["reset_token"] = user.password_reset_token
        return response

    async def reset_password(self, request: ResetPasswordRequest) -> None:
        """
        Raises:
            ValidationError: If the token is unknown or expired
        """
        user = await self.user_repo.get_by_reset_token(request.token)
        expires = as_utc(user.password_reset_expires) if user is not None else None
        if user is None or expires is None or expires <= utcnow():
            raise ValidationError("Invalid or expired reset token")

        user.password_hash = get_password_hash(request.new_password)
        user.password_reset_token = None
        user.password_reset_expires = None
        await self.user_repo.commit()
        logger.info(f"Password reset for user: {user.id}")

    async def deactivate_account(self, user: UserDB, password: str) -> None:
        """
        Soft-delete the account; the user keeps their data but can no longer sign in

        Raises:
            AuthenticationError: If the password is wrong
        """
        if not verify_password(password, user.password_hash):
            raise AuthenticationError("Password is incorrect")

        user.is_active = False
        await self.user_repo.commit()
        logger.info(f"Account deactivated: {user.id}")
