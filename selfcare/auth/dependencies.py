"""
SelfCare Planner Authentication Dependencies
FastAPI dependency injection for authentication
"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.database import get_db_session
from selfcare.models.database import UserDB
from selfcare.repositories.users import UserRepository
from selfcare.utils.logger import get_logger

from .models import TokenData
from .utils import decode_access_token

logger = get_logger(__name__)

# HTTP Bearer security scheme
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def token_data_from_jwt(token: str) -> Optional[TokenData]:
    """Decode a bearer token into TokenData, or None when it is unusable"""
    payload = decode_access_token(token)
    if payload is None:
        return None

    try:
        return TokenData(
            user_id=UUID(payload["sub"]),
            email=payload.get("email", ""),
            username=payload.get("username", ""),
        )
    except (KeyError, ValueError) as e:
        logger.warning(f"Invalid token payload: {e}")
        return None


async def load_active_user(db: AsyncSession, token: str) -> Optional[UserDB]:
    """Resolve a bearer token to an existing, active user row"""
    token_data = token_data_from_jwt(token)
    if token_data is None:
        return None

    user = await UserRepository(db).get_by_id(token_data.user_id)
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db_session),
) -> UserDB:
    """
    FastAPI dependency returning the authenticated user row

    Usage:
    ```python
    @router.get("/protected")
    async def protected_endpoint(current_user: UserDB = Depends(get_current_user)):
        return {"user_id": current_user.id}
    ```

    Raises:
        HTTPException 401: If the token is missing, invalid, or the account is gone/inactive
    """
    if credentials is None:
        raise _unauthorized("No token, authorization denied")

    if token_data_from_jwt(credentials.credentials) is None:
        raise _unauthorized("Token is not valid")

    user = await load_active_user(db, credentials.credentials)
    if user is None:
        raise _unauthorized("Token is not valid")

    return user
