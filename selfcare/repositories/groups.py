"""
SelfCare Planner - Group Repository
Groups with their members, challenges, posts and invitations
"""

from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_, select

from selfcare.models.database import (
    ChallengeDB,
    ChallengeParticipantDB,
    GroupDB,
    GroupInvitationDB,
    GroupMemberDB,
    GroupPostDB,
)
from selfcare.models.enums import GroupPrivacy
from selfcare.utils.time import as_utc

from .base import BaseRepository

LISTED_PRIVACY = (GroupPrivacy.PUBLIC.value, GroupPrivacy.INVITE_ONLY.value)


def _active_member_count():
    return (
        select(func.count(GroupMemberDB.id))
        .where(GroupMemberDB.group_id == GroupDB.id, GroupMemberDB.is_active.is_(True))
        .correlate(GroupDB)
        .scalar_subquery()
    )


def _running_challenge_count(now: datetime):
    return (
        select(func.count(ChallengeDB.id))
        .where(
            ChallengeDB.group_id == GroupDB.id,
            ChallengeDB.is_active.is_(True),
            ChallengeDB.start_date <= now,
            ChallengeDB.end_date >= now,
        )
        .correlate(GroupDB)
        .scalar_subquery()
    )


# ============================================================================
# IN-MEMORY HELPERS ON A LOADED GROUP
# ============================================================================


def active_member_count(group: GroupDB) -> int:
    return sum(1 for m in group.members if m.is_active)


def running_challenge_count(group: GroupDB, now: datetime) -> int:
    return sum(
        1
        for c in group.challenges
        if c.is_active and as_utc(c.start_date) <= now <= as_utc(c.end_date)
    )


def find_member(group: GroupDB, user_id: UUID, active_only: bool = True) -> Optional[GroupMemberDB]:
    for member in group.members:
        if member.user_id == user_id and (member.is_active or not active_only):
            return member
    return None


def find_challenge(group: GroupDB, challenge_id: UUID) -> Optional[ChallengeDB]:
    for challenge in group.challenges:
        if challenge.id == challenge_id:
            return challenge
    return None


def find_participant(challenge: ChallengeDB, user_id: UUID) -> Optional[ChallengeParticipantDB]:
    for participant in challenge.participants:
        if participant.user_id == user_id:
            return participant
    return None


def find_post(group: GroupDB, post_id: UUID) -> Optional[GroupPostDB]:
    for post in group.posts:
        if post.id == post_id:
            return post
    return None


def find_invitation(group: GroupDB, user_id: UUID) -> Optional[GroupInvitationDB]:
    for invitation in group.invitations:
        if invitation.user_id == user_id:
            return invitation
    return None


class GroupRepository(BaseRepository):
    """Repository for support groups"""

    def create(self, group: GroupDB) -> GroupDB:
        self.add(group)
        return group

    async def get_active(self, group_id: UUID) -> Optional[GroupDB]:
        result = await self.db.execute(
            select(GroupDB).where(GroupDB.id == group_id, GroupDB.is_active.is_(True))
        )
        return result.scalar_one_or_none()

    async def memberships_for_user(self, user_id: UUID) -> List[Tuple[GroupMemberDB, GroupDB]]:
        """The user's active memberships in active groups, oldest first"""
        result = await self.db.execute(
            select(GroupMemberDB, GroupDB)
            .join(GroupDB, GroupDB.id == GroupMemberDB.group_id)
            .where(
                GroupMemberDB.user_id == user_id,
                GroupMemberDB.is_active.is_(True),
                GroupDB.is_active.is_(True),
            )
            .order_by(GroupMemberDB.joined_at)
        )
        return [(row[0], row[1]) for row in result]

    async def active_group_ids_for_user(self, user_id: UUID) -> List[UUID]:
        result = await self.db.execute(
            select(GroupMemberDB.group_id)
            .join(GroupDB, GroupDB.id == GroupMemberDB.group_id)
            .where(
                GroupMemberDB.user_id == user_id,
                GroupMemberDB.is_active.is_(True),
                GroupDB.is_active.is_(True),
            )
        )
        return list(result.scalars())

    async def discover(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[GroupDB], int]:
        """Listed (public / invite-only) active groups, largest first"""
        conditions = [GroupDB.is_active.is_(True), GroupDB.privacy.in_(LISTED_PRIVACY)]
        if category:
            conditions.append(GroupDB.category == category)
        if search:
            needle = search.lower()
            conditions.append(
                or_(
                    func.lower(GroupDB.name).contains(needle, autoescape=True),
                    func.lower(GroupDB.description).contains(needle, autoescape=True),
                )
            )

        total = await self.db.scalar(select(func.count(GroupDB.id)).where(*conditions))
        result = await self.db.execute(
            select(GroupDB)
            .where(*conditions)
            .order_by(_active_member_count().desc(), GroupDB.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars()), total or 0

    async def popular(self, now: datetime, limit: int = 10) -> List[GroupDB]:
        """Listed groups by active members, then running challenges, then recency"""
        result = await self.db.execute(
            select(GroupDB)
            .where(GroupDB.is_active.is_(True), GroupDB.privacy.in_(LISTED_PRIVACY))
            .order_by(
                _active_member_count().desc(),
                _running_challenge_count(now).desc(),
                GroupDB.created_at.desc(),
            )
            .limit(limit)
        )
        return list(result.scalars())
