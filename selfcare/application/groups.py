"""
Group Service
Support groups: membership, invitations, roles, challenges and posts
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.models.database import (
    ChallengeDB,
    ChallengeParticipantDB,
    GroupDB,
    GroupInvitationDB,
    GroupMemberDB,
    GroupPostDB,
    PostCommentDB,
    PostReactionDB,
    UserDB,
)
from selfcare.models.enums import GroupPrivacy, MemberRole
from selfcare.models.social import (
    ChallengeCreate,
    ChallengeResponse,
    GroupCreate,
    GroupDetail,
    GroupSummary,
    PostCommentCreate,
    PostCreate,
    PostResponse,
    ReactionCreate,
)
from selfcare.models.user import UserSummary
from selfcare.realtime.hub import EventType, NotificationHub, notification_hub
from selfcare.repositories.groups import (
    GroupRepository,
    active_member_count,
    find_challenge,
    find_invitation,
    find_member,
    find_participant,
    find_post,
)
from selfcare.repositories.users import UserRepository
from selfcare.utils.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from selfcare.utils.logger import get_logger
from selfcare.utils.metrics import metrics
from selfcare.utils.time import utcnow

from .activities import paginate
from .serializers import group_detail, group_summary, group_user_ids, post_response

logger = get_logger(__name__)

GROUP_NOT_FOUND = "Group not found"
CHALLENGE_NOT_FOUND = "Challenge not found"
STAFF_ROLES = (MemberRole.ADMIN.value, MemberRole.MODERATOR.value)


class GroupService:
    """Business logic for groups and everything they own"""

    def __init__(self, db_session: AsyncSession, notifier: Optional[NotificationHub] = None):
        self.db = db_session
        self.group_repo = GroupRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.notifier = notifier or notification_hub

    async def _get_group(self, group_id: UUID) -> GroupDB:
        group = await self.group_repo.get_active(group_id)
        if group is None:
            raise NotFoundError(GROUP_NOT_FOUND)
        return group

    @staticmethod
    def _require_member(group: GroupDB, user: UserDB, message: str) -> GroupMemberDB:
        member = find_member(group, user.id)
        if member is None:
            raise AuthorizationError(message)
        return member

    async def _detail(self, group: GroupDB, viewer: UserDB) -> GroupDetail:
        users = await self.user_repo.get_many(group_user_ids(group))
        return group_detail(group, utcnow(), users, viewer.id)

    # ========================================================================
    # LISTING
    # ========================================================================

    async def my_groups(self, user: UserDB) -> List[GroupSummary]:
        now = utcnow()
        return [
            group_summary(group, now, viewer_id=user.id)
            for _, group in await self.group_repo.memberships_for_user(user.id)
        ]

    async def discover(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Dict[str, Any]:
        groups, total = await self.group_repo.discover(
            category=category, search=search, skip=(page - 1) * limit, limit=limit
        )
        users = await self.user_repo.get_many(g.created_by for g in groups)
        now = utcnow()
        return {
            "groups": [group_summary(g, now, users) for g in groups],
            "pagination": paginate(page, limit, len(groups), total),
        }

    async def popular(self, limit: int = 10) -> List[GroupSummary]:
        now = utcnow()
        groups = await self.group_repo.popular(now, limit)
        users = await self.user_repo.get_many(g.created_by for g in groups)
        return [group_summary(g, now, users) for g in groups]

    async def get_group(self, user: UserDB, group_id: UUID) -> GroupDetail:
        group = await self._get_group(group_id)
        if group.privacy == GroupPrivacy.PRIVATE.value and find_member(group, user.id) is None:
            raise AuthorizationError("This group is private")
        return await self._detail(group, user)

    # ========================================================================
    # MEMBERSHIP
    # ========================================================================

    async def create_group(self, user: UserDB, data: GroupCreate) -> GroupDetail:
        """The creator becomes the group's first admin"""
        group = self.group_repo.create(
            GroupDB(
                name=data.name,
                description=data.description,
                avatar=data.avatar,
                category=data.category.value,
                privacy=data.privacy.value,
                **data.settings.model_dump(),
                created_by=user.id,
                members=[GroupMemberDB(user_id=user.id, role=MemberRole.ADMIN.value, joined_at=utcnow())],
                challenges=[],
                posts=[],
                invitations=[],
            )
        )
        await self.group_repo.commit()
        logger.info(f"Group {group.id} created by user {user.id}")
        return await self._detail(group, user)

    async def join_group(self, user: UserDB, group_id: UUID) -> None:
        """
        Append or reactivate the user's membership

        Raises:
            NotFoundError: Unknown or inactive group
            AuthorizationError: Private group without an invitation
            ConflictError: Already an active member, or the group is full
        """
        group = await self._get_group(group_id)
        invitation = find_invitation(group, user.id)

        if group.privacy == GroupPrivacy.PRIVATE.value and invitation is None:
            raise AuthorizationError("Cannot join private group without invitation")

        if find_member(group, user.id) is not None:
            raise ConflictError("Already a member of this group")

        if active_member_count(group) >= group.max_members:
            raise ConflictError("Group has reached maximum member limit")

        now = utcnow()
        previous = find_member(group, user.id, active_only=False)
        if previous is not None:
            previous.is_active = True
            previous.joined_at = now
        else:
            group.members.append(GroupMemberDB(user_id=user.id, role=MemberRole.MEMBER.value, joined_at=now))

        if invitation is not None:
            group.invitations.remove(invitation)

        await self.group_repo.commit()
        logger.info(f"User {user.id} joined group {group.id}")

    async def leave_group(self, user: UserDB, group_id: UUID) -> None:
        group = await self._get_group(group_id)
        member = find_member(group, user.id)
        if member is None:
            raise ValidationError("Not a member of this group")
        member.is_active = False
        await self.group_repo.commit()
        logger.info(f"User {user.id} left group {group.id}")

    async def invite(self, user: UserDB, group_id: UUID, invitee_id: UUID) -> None:
        """
        Record an invitation and notify the invitee

        Raises:
            AuthorizationError: Inviter is not a member, or invites are staff-only
            NotFoundError: Unknown invitee
            ConflictError: Invitee is already a member or already invited
        """
        group = await self._get_group(group_id)
        inviter = self._require_member(group, user, "Must be a group member to invite others")
        if not group.allow_invites and inviter.role not in STAFF_ROLES:
            raise AuthorizationError("Only admins and moderators can invite to this group")

        invitee = await self.user_repo.get_by_id(invitee_id)
        if invitee is None or not invitee.is_active:
            raise NotFoundError("User not found")
        if find_member(group, invitee.id) is not None:
            raise ConflictError("User is already a member of this group")
        if find_invitation(group, invitee.id) is not None:
            raise ConflictError("User has already been invited")

        group.invitations.append(GroupInvitationDB(user_id=invitee.id, invited_by=user.id))
        await self.group_repo.commit()

        await self.notifier.emit_to_user(
            invitee.id,
            EventType.GROUP_INVITATION,
            {"group_id": group.id, "group_name": group.name, "invited_by": UserSummary.from_user(user)},
        )

    async def update_member_role(
        self, user: UserDB, group_id: UUID, member_user_id: UUID, role: MemberRole
    ) -> None:
        group = await self._get_group(group_id)
        acting = find_member(group, user.id)
        if acting is None or acting.role != MemberRole.ADMIN.value:
            raise AuthorizationError("Only admins can change member roles")

        member = find_member(group, member_user_id)
        if member is None:
            raise NotFoundError("Member not found")

        member.role = role.value
        await self.group_repo.commit()
        logger.info(f"User {member_user_id} is now {role.value} in group {group.id}")

    # ========================================================================
    # CHALLENGES
    # ========================================================================

    async def create_challenge(self, user: UserDB, group_id: UUID, data: ChallengeCreate) -> ChallengeResponse:
        group = await self._get_group(group_id)
        member = find_member(group, user.id)
        if member is None or member.role not in STAFF_ROLES:
            raise AuthorizationError("Only admins and moderators can create challenges")

        challenge = ChallengeDB(
            title=data.title,
            description=data.description,
            type=data.type.value,
            goal_target=data.goal.target,
            goal_unit=data.goal.unit.value,
            start_date=data.start_date,
            end_date=data.end_date,
            rewards=[r.model_dump(mode="json") for r in data.rewards],
            created_by=user.id,
            participants=[],
        )
        group.challenges.append(challenge)
        await self.group_repo.commit()
        logger.info(f"Challenge {challenge.id} created in group {group.id}")
        return ChallengeResponse.from_challenge(challenge)

    @staticmethod
    def _get_challenge(group: GroupDB, challenge_id: UUID) -> ChallengeDB:
        challenge = find_challenge(group, challenge_id)
        if challenge is None or not challenge.is_active:
            raise NotFoundError(CHALLENGE_NOT_FOUND)
        return challenge

    async def join_challenge(self, user: UserDB, group_id: UUID, challenge_id: UUID) -> None:
        """Repeat joins are no-ops"""
        group = await self._get_group(group_id)
        self._require_member(group, user, "Must be a group member to join challenges")
        challenge = self._get_challenge(group, challenge_id)

        if find_participant(challenge, user.id) is None:
            challenge.participants.append(
                ChallengeParticipantDB(user_id=user.id, progress=0, last_update=utcnow(), is_completed=False)
            )
            await self.group_repo.commit()

    async def update_progress(
        self, user: UserDB, group_id: UUID, challenge_id: UUID, progress: float
    ) -> ChallengeResponse:
        """
        Set the caller's absolute progress.

        Progress may go down; completion, once reached, stays. A first-time
        completion bumps the group's completed-challenges counter.
        """
        group = await self._get_group(group_id)
        self._require_member(group, user, "Must be a group member to update challenge progress")
        challenge = self._get_challenge(group, challenge_id)

        participant = find_participant(challenge, user.id)
        if participant is None:
            raise ValidationError("Not participating in this challenge")

        participant.progress = progress
        participant.last_update = utcnow()
        newly_completed = not participant.is_completed and progress >= challenge.goal_target
        if newly_completed:
            participant.is_completed = True
            group.total_challenges_completed = (group.total_challenges_completed or 0) + 1

        await self.group_repo.commit()

        if newly_completed:
            metrics.log_event(
                "challenge_completed",
                {"group_id": str(group.id), "challenge_id": str(challenge.id)},
                user_id=str(user.id),
            )
        await self.notifier.emit_to_group(
            group.id,
            EventType.CHALLENGE_PROGRESS,
            {"challenge_id": challenge.id, "user_id": user.id, "progress": progress},
        )
        return ChallengeResponse.from_challenge(challenge)

    # ========================================================================
    # POSTS
    # ========================================================================

    @staticmethod
    def _get_post(group: GroupDB, post_id: UUID) -> GroupPostDB:
        post = find_post(group, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    async def create_post(self, user: UserDB, group_id: UUID, data: PostCreate) -> PostResponse:
        group = await self._get_group(group_id)
        member = self._require_member(group, user, "Must be a group member to post")
        if not group.allow_member_posts and member.role not in STAFF_ROLES:
            raise AuthorizationError("Only admins and moderators can post in this group")

        post = GroupPostDB(
            user_id=user.id,
            content=data.content,
            type=data.type.value,
            attachments=[a.model_dump(mode="json") for a in data.attachments],
            is_pinned=False,
            reactions=[],
            comments=[],
        )
        group.posts.insert(0, post)
        group.total_activities = (group.total_activities or 0) + 1
        await self.group_repo.commit()
        return post_response(post, {user.id: user})

    async def react_to_post(
        self, user: UserDB, group_id: UUID, post_id: UUID, data: ReactionCreate
    ) -> PostResponse:
        """One reaction per user; reacting again replaces the type"""
        group = await self._get_group(group_id)
        self._require_member(group, user, "Must be a group member to react")
        post = self._get_post(group, post_id)

        existing = next((r for r in post.reactions if r.user_id == user.id), None)
        if existing is not None:
            existing.type = data.type.value
        else:
            post.reactions.append(PostReactionDB(user_id=user.id, type=data.type.value, created_at=utcnow()))
        await self.group_repo.commit()

        users = await self.user_repo.get_many({post.user_id} | {c.user_id for c in post.comments})
        return post_response(post, users)

    async def comment_on_post(
        self, user: UserDB, group_id: UUID, post_id: UUID, data: PostCommentCreate
    ) -> PostResponse:
        group = await self._get_group(group_id)
        self._require_member(group, user, "Must be a group member to comment")
        post = self._get_post(group, post_id)

        post.comments.append(PostCommentDB(user_id=user.id, content=data.content, created_at=utcnow()))
        await self.group_repo.commit()

        users = await self.user_repo.get_many({post.user_id} | {c.user_id for c in post.comments})
        return post_response(post, users)
