"""
Social Service
Friend-request state machine and the friends activity feed.

A friendship is stored as one row per direction. Both rows are written in
the same transaction so the pair is always symmetric.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.models.database import FriendshipDB, UserDB
from selfcare.models.enums import FriendStatus
from selfcare.models.social import FriendResponse
from selfcare.models.user import UserSummary
from selfcare.realtime.hub import EventType, NotificationHub, notification_hub
from selfcare.repositories.activities import ActivityRepository
from selfcare.repositories.users import UserRepository
from selfcare.utils.errors import ConflictError, NotFoundError, ValidationError
from selfcare.utils.logger import get_logger
from selfcare.utils.metrics import metrics
from selfcare.utils.time import utcnow

from .activities import paginate
from .serializers import activity_response, activity_user_ids

logger = get_logger(__name__)

USER_NOT_FOUND = "User not found"
REQUEST_NOT_FOUND = "Friend request not found"


class SocialService:
    """Friends and the shared-activity feed"""

    def __init__(self, db_session: AsyncSession, notifier: Optional[NotificationHub] = None):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.activity_repo = ActivityRepository(db_session)
        self.notifier = notifier or notification_hub

    async def _get_active_user(self, user_id: UUID) -> UserDB:
        other = await self.user_repo.get_by_id(user_id)
        if other is None or not other.is_active:
            raise NotFoundError(USER_NOT_FOUND)
        return other

    async def _friend_responses(self, friendships: List[FriendshipDB]) -> List[FriendResponse]:
        users = await self.user_repo.get_many(f.friend_id for f in friendships)
        return [
            FriendResponse(
                user=UserSummary.from_user(users[f.friend_id]),
                current_streak=users[f.friend_id].current_streak or 0,
                status=f.status,
                initiated_by=f.initiated_by,
                added_at=f.added_at,
            )
            for f in friendships
            if f.friend_id in users
        ]

    # ========================================================================
    # FRIENDS
    # ========================================================================

    async def list_friends(self, user: UserDB) -> List[FriendResponse]:
        accepted = [f for f in user.friendships if f.status == FriendStatus.ACCEPTED.value]
        return await self._friend_responses(accepted)

    async def list_requests(self, user: UserDB) -> Dict[str, List[FriendResponse]]:
        """Pending requests split into received and sent"""
        pending = [f for f in user.friendships if f.status == FriendStatus.PENDING.value]
        received = [f for f in pending if f.initiated_by != user.id]
        sent = [f for f in pending if f.initiated_by == user.id]
        return {
            "received": await self._friend_responses(received),
            "sent": await self._friend_responses(sent),
        }

    async def send_request(self, user: UserDB, username: str) -> None:
        """
        Create the pending pair of friendship rows

        Raises:
            ValidationError: Request to yourself
            NotFoundError: Unknown or inactive username
            ConflictError: Already friends, already pending, or blocked
        """
        if username == user.username:
            raise ValidationError("Cannot send friend request to yourself")

        target = await self.user_repo.get_by_username(username)
        if target is None or not target.is_active:
            raise NotFoundError(USER_NOT_FOUND)

        existing = self.user_repo.find_friendship(user, target.id) or self.user_repo.find_friendship(
            target, user.id
        )
        if existing is not None:
            if existing.status == FriendStatus.ACCEPTED.value:
                raise ConflictError("Already friends")
            if existing.status == FriendStatus.PENDING.value:
                raise ConflictError("Friend request already sent")
            raise ConflictError("Cannot send friend request to this user")

        now = utcnow()
        user.friendships.append(
            FriendshipDB(
                friend_id=target.id,
                status=FriendStatus.PENDING.value,
                initiated_by=user.id,
                added_at=now,
            )
        )
        target.friendships.append(
            FriendshipDB(
                friend_id=user.id,
                status=FriendStatus.PENDING.value,
                initiated_by=user.id,
                added_at=now,
            )
        )
        await self.user_repo.commit()

        logger.info(f"Friend request {user.id} -> {target.id}")
        metrics.log_event("friend_request_sent", {"to": str(target.id)}, user_id=str(user.id))
        await self.notifier.emit_to_user(
            target.id, EventType.FRIEND_REQUEST, {"from": UserSummary.from_user(user)}
        )

    async def accept_request(self, user: UserDB, requester_id: UUID) -> None:
        """
        Flip both pending rows to accepted

        Raises:
            NotFoundError: Unknown requester
            ValidationError: No pending request from that user, or accepting your own request
        """
        requester = await self._get_active_user(requester_id)

        mine = self.user_repo.find_friendship(user, requester.id)
        theirs = self.user_repo.find_friendship(requester, user.id)
        if mine is None or theirs is None or mine.status != FriendStatus.PENDING.value:
            raise ValidationError(REQUEST_NOT_FOUND)
        if mine.initiated_by == user.id:
            raise ValidationError("Cannot accept your own friend request")

        now = utcnow()
        for row in (mine, theirs):
            row.status = FriendStatus.ACCEPTED.value
            row.added_at = now
        await self.user_repo.commit()
        logger.info(f"Friend request accepted {requester.id} <-> {user.id}")

    async def remove_friend(self, user: UserDB, friend_id: UUID) -> None:
        """Delete both rows; a missing pair is a no-op"""
        other = await self.user_repo.get_by_id(friend_id)
        if other is None:
            raise NotFoundError(USER_NOT_FOUND)

        mine = self.user_repo.find_friendship(user, other.id)
        if mine is not None:
            user.friendships.remove(mine)
        theirs = self.user_repo.find_friendship(other, user.id)
        if theirs is not None:
            other.friendships.remove(theirs)
        await self.user_repo.commit()

    # ========================================================================
    # FEED
    # ========================================================================

    async def feed(self, user: UserDB, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        """Shared activities from accepted friends and the user, newest first"""
        author_ids = self.user_repo.friend_ids(user, FriendStatus.ACCEPTED.value) + [user.id]
        activities, total = await self.activity_repo.feed(author_ids, skip=(page - 1) * limit, limit=limit)
        users = await self.user_repo.get_many(activity_user_ids(activities))
        return {
            "feed": [activity_response(a, users) for a in activities],
            "pagination": paginate(page, limit, len(activities), total),
        }
