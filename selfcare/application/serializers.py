"""
Response serializers
Build API response models from ORM rows plus a preloaded user map
"""

from datetime import datetime
from typing import Dict, Iterable, Optional, Set
from uuid import UUID

from selfcare.models.activity import (
    ActivityResponse,
    CommentResponse,
    CompletionData,
    LikeResponse,
    SocialData,
    TrendingActivity,
)
from selfcare.models.database import ActivityDB, GroupDB, GroupPostDB, UserDB
from selfcare.models.social import (
    ChallengeResponse,
    GroupDetail,
    GroupSettings,
    GroupStats,
    GroupSummary,
    MemberResponse,
    PostCommentResponse,
    PostResponse,
    ReactionResponse,
)
from selfcare.models.user import UserSummary
from selfcare.repositories.groups import active_member_count, find_member, running_challenge_count

from .engagement import engagement_score

UserMap = Dict[UUID, UserDB]


def _summary(users: UserMap, user_id: Optional[UUID]) -> Optional[UserSummary]:
    user = users.get(user_id) if user_id is not None else None
    return UserSummary.from_user(user) if user is not None else None


# ============================================================================
# ACTIVITIES
# ============================================================================


def activity_user_ids(activities: Iterable[ActivityDB]) -> Set[UUID]:
    """Every user id referenced by the activities, their likes and comments"""
    ids: Set[UUID] = set()
    for activity in activities:
        ids.add(activity.user_id)
        ids.update(like.user_id for like in activity.likes)
        ids.update(comment.user_id for comment in activity.comments)
    return ids


def comment_response(comment, users: UserMap) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        user_id=comment.user_id,
        user=_summary(users, comment.user_id),
        content=comment.content,
        created_at=comment.created_at,
    )


def activity_response(activity: ActivityDB, users: Optional[UserMap] = None) -> ActivityResponse:
    users = users or {}
    return ActivityResponse(
        id=activity.id,
        user_id=activity.user_id,
        user=_summary(users, activity.user_id),
        type=activity.type,
        category=activity.category,
        title=activity.title,
        content=activity.content,
        description=activity.description,
        duration=activity.duration,
        difficulty=activity.difficulty,
        tags=activity.tags or [],
        is_ai_generated=activity.is_ai_generated,
        completion_data=CompletionData(
            is_completed=activity.is_completed,
            completed_at=activity.completed_at,
            rating=activity.rating,
            feedback=activity.feedback,
            mood_before=activity.mood_before,
            mood_after=activity.mood_after,
            notes=activity.notes,
        ),
        social_data=SocialData(
            is_shared=activity.is_shared,
            shared_with=[share.user_id for share in activity.shares],
            likes=[
                LikeResponse(user_id=like.user_id, user=_summary(users, like.user_id), liked_at=like.liked_at)
                for like in activity.likes
            ],
            comments=[comment_response(c, users) for c in activity.comments],
        ),
        like_count=len(activity.likes),
        comment_count=len(activity.comments),
        scheduled_for=activity.scheduled_for,
        created_at=activity.created_at,
        updated_at=activity.updated_at,
    )


def trending_activity(
    activity: ActivityDB, like_count: int, comment_count: int, users: UserMap
) -> TrendingActivity:
    return TrendingActivity(
        id=activity.id,
        type=activity.type,
        category=activity.category,
        title=activity.title,
        content=activity.content,
        description=activity.description,
        duration=activity.duration,
        difficulty=activity.difficulty,
        tags=activity.tags or [],
        like_count=like_count,
        comment_count=comment_count,
        engagement_score=engagement_score(like_count, comment_count),
        created_at=activity.created_at,
        user=_summary(users, activity.user_id),
    )


# ============================================================================
# GROUPS
# ============================================================================


def group_user_ids(group: GroupDB) -> Set[UUID]:
    ids: Set[UUID] = {group.created_by}
    ids.update(m.user_id for m in group.members if m.is_active)
    for post in group.posts:
        ids.add(post.user_id)
        ids.update(c.user_id for c in post.comments)
    return ids


def group_summary(
    group: GroupDB,
    now: datetime,
    users: Optional[UserMap] = None,
    viewer_id: Optional[UUID] = None,
) -> GroupSummary:
    users = users or {}
    membership = find_member(group, viewer_id) if viewer_id is not None else None
    return GroupSummary(
        id=group.id,
        name=group.name,
        description=group.description,
        avatar=group.avatar or "",
        category=group.category,
        privacy=group.privacy,
        member_count=active_member_count(group),
        active_challenges_count=running_challenge_count(group, now),
        stats=GroupStats(
            total_activities=group.total_activities,
            total_challenges_completed=group.total_challenges_completed,
            average_engagement=group.average_engagement,
        ),
        created_at=group.created_at,
        creator=_summary(users, group.created_by),
        user_role=membership.role if membership else None,
        joined_at=membership.joined_at if membership else None,
    )


def post_response(post: GroupPostDB, users: Optional[UserMap] = None) -> PostResponse:
    users = users or {}
    return PostResponse(
        id=post.id,
        user_id=post.user_id,
        user=_summary(users, post.user_id),
        content=post.content,
        type=post.type,
        attachments=post.attachments or [],
        is_pinned=post.is_pinned,
        reactions=[
            ReactionResponse(user_id=r.user_id, type=r.type, created_at=r.created_at)
            for r in post.reactions
        ],
        comments=[
            PostCommentResponse(
                id=c.id,
                user_id=c.user_id,
                user=_summary(users, c.user_id),
                content=c.content,
                created_at=c.created_at,
            )
            for c in post.comments
        ],
        created_at=post.created_at,
    )


def group_detail(group: GroupDB, now: datetime, users: UserMap, viewer_id: UUID) -> GroupDetail:
    """Full group view; posts are pinned first, then newest first"""
    summary = group_summary(group, now, users, viewer_id)
    posts = sorted(group.posts, key=lambda p: not p.is_pinned)
    return GroupDetail(
        **summary.model_dump(),
        settings=GroupSettings(
            allow_member_posts=group.allow_member_posts,
            require_approval=group.require_approval,
            allow_invites=group.allow_invites,
            max_members=group.max_members,
        ),
        members=[
            MemberResponse(
                user_id=m.user_id,
                user=_summary(users, m.user_id),
                role=m.role,
                joined_at=m.joined_at,
            )
            for m in group.members
            if m.is_active
        ],
        challenges=[ChallengeResponse.from_challenge(c) for c in group.challenges if c.is_active],
        posts=[post_response(p, users) for p in posts],
    )
