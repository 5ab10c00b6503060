"""
SelfCare Planner - User Repository
Users, friendships and achievements
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import func, or_, select

from selfcare.models.database import FriendshipDB, UserDB

from .base import BaseRepository


class UserRepository(BaseRepository):
    """Repository for user accounts and their owned social rows"""

    # ------------------------------------------------------------------ lookups

    async def get_by_id(self, user_id: UUID) -> Optional[UserDB]:
        return await self.db.get(UserDB, user_id)

    async def get_by_email(self, email: str) -> Optional[UserDB]:
        result = await self.db.execute(select(UserDB).where(UserDB.email == email.lower()))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[UserDB]:
        result = await self.db.execute(select(UserDB).where(UserDB.username == username))
        return result.scalar_one_or_none()

    async def find_by_email_or_username(self, email: str, username: str) -> Optional[UserDB]:
        result = await self.db.execute(
            select(UserDB)
            .where(or_(UserDB.email == email.lower(), UserDB.username == username))
            .limit(1)
        )
        return result.scalars().first()

    async def get_by_reset_token(self, token: str) -> Optional[UserDB]:
        result = await self.db.execute(
            select(UserDB).where(UserDB.password_reset_token == token)
        )
        return result.scalars().first()

    async def get_many(self, user_ids: Iterable[UUID]) -> Dict[UUID, UserDB]:
        """Fetch users by id, keyed by id (missing ids are simply absent)"""
        ids = {uid for uid in user_ids if uid is not None}
        if not ids:
            return {}
        result = await self.db.execute(select(UserDB).where(UserDB.id.in_(ids)))
        return {user.id: user for user in result.scalars()}

    # ------------------------------------------------------------------ writes

    def create(self, user: UserDB) -> UserDB:
        self.add(user)
        return user

    # ------------------------------------------------------------------ search

    async def search(self, query: str, exclude_id: UUID, limit: int = 10) -> List[UserDB]:
        """Case-insensitive substring match on username, first or last name"""
        needle = query.lower()
        stmt = (
            select(UserDB)
            .where(
                UserDB.id != exclude_id,
                UserDB.is_active.is_(True),
                or_(
                    func.lower(UserDB.username).contains(needle, autoescape=True),
                    func.lower(UserDB.first_name).contains(needle, autoescape=True),
                    func.lower(UserDB.last_name).contains(needle, autoescape=True),
                ),
            )
            .order_by(UserDB.username)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def list_active(
        self,
        order_by: list,
        since: Optional[datetime] = None,
        limit: int = 50,
    ) -> List[UserDB]:
        """Active users ordered for a leaderboard, optionally filtered by last login"""
        stmt = select(UserDB).where(UserDB.is_active.is_(True))
        if since is not None:
            stmt = stmt.where(UserDB.last_login >= since)
        stmt = stmt.order_by(*order_by, UserDB.created_at).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def list_suggestion_candidates(
        self, exclude_ids: Iterable[UUID], scan_limit: int = 500
    ) -> List[UserDB]:
        """Active users outside the given ids, newest first"""
        stmt = (
            select(UserDB)
            .where(UserDB.is_active.is_(True), UserDB.id.not_in(list(exclude_ids)))
            .order_by(UserDB.created_at.desc())
            .limit(scan_limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars())

    # ------------------------------------------------------------------ friendships

    @staticmethod
    def find_friendship(user: UserDB, friend_id: UUID) -> Optional[FriendshipDB]:
        for friendship in user.friendships:
            if friendship.friend_id == friend_id:
                return friendship
        return None

    @staticmethod
    def friend_ids(user: UserDB, status: Optional[str] = None) -> List[UUID]:
        return [
            f.friend_id
            for f in user.friendships
            if status is None or f.status == status
        ]
