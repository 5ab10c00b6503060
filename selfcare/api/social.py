"""
SelfCare Planner - Social API Endpoints
Friends, support groups, group challenges, group posts and the activity feed
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.application.groups import GroupService
from selfcare.application.social import SocialService
from selfcare.auth.dependencies import get_current_user
from selfcare.database import get_db_session
from selfcare.models.database import UserDB
from selfcare.models.enums import GroupCategory
from selfcare.models.social import (
    ChallengeCreate,
    ChallengeProgressUpdate,
    FriendAccept,
    FriendRequestCreate,
    GroupCreate,
    GroupDetail,
    GroupInvite,
    MemberRoleUpdate,
    PostCommentCreate,
    PostCreate,
    ReactionCreate,
)

router = APIRouter(prefix="/social", tags=["social"])


def get_social_service(db: AsyncSession = Depends(get_db_session)) -> SocialService:
    return SocialService(db)


def get_group_service(db: AsyncSession = Depends(get_db_session)) -> GroupService:
    return GroupService(db)


# ============================================================================
# FRIENDS
# ============================================================================


@router.get("/friends", summary="Accepted friends")
async def list_friends(
    current_user: UserDB = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
):
    return {"friends": await service.list_friends(current_user)}


@router.get("/friends/requests", summary="Pending friend requests")
async def list_friend_requests(
    current_user: UserDB = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
):
    return await service.list_requests(current_user)


@router.post("/friends/request", summary="Send a friend request")
async def send_friend_request(
    data: FriendRequestCreate,
    current_user: UserDB = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
):
    await service.send_request(current_user, data.username)
    return {"message": "Friend request sent successfully"}


@router.post("/friends/accept", summary="Accept a friend request")
async def accept_friend_request(
    data: FriendAccept,
    current_user: UserDB = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
):
    await service.accept_request(current_user, data.user_id)
    return {"message": "Friend request accepted"}


@router.delete("/friends/{user_id}", summary="Remove a friend")
async def remove_friend(
    user_id: UUID,
    current_user: UserDB = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
):
    await service.remove_friend(current_user, user_id)
    return {"message": "Friend removed successfully"}


# ============================================================================
# GROUPS
# ============================================================================


@router.get("/groups", summary="Groups the current user belongs to")
async def my_groups(
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    return {"groups": await service.my_groups(current_user)}


@router.get("/groups/discover", summary="Browse public groups")
async def discover_groups(
    category: Optional[GroupCategory] = None,
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    return await service.discover(
        category=category.value if category else None,
        search=search,
        page=page,
        limit=limit,
    )


@router.get("/groups/popular", summary="Most popular groups")
async def popular_groups(
    limit: int = Query(10, ge=1, le=50),
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    return {"groups": await service.popular(limit)}


@router.post("/groups", status_code=status.HTTP_201_CREATED, summary="Create a group")
async def create_group(
    data: GroupCreate,
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    group: GroupDetail = await service.create_group(current_user, data)
    return {"message": "Group created successfully", "group": group}


@router.get("/groups/{group_id}", summary="Group details")
async def get_group(
    group_id: UUID,
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    return {"group": await service.get_group(current_user, group_id)}


@router.post("/groups/{group_id}/join", summary="Join a group")
async def join_group(
    group_id: UUID,
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    await service.join_group(current_user, group_id)
    return {"message": "Successfully joined group"}


@router.post("/groups/{group_id}/leave", summary="Leave a group")
async def leave_group(
    group_id: UUID,
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    await service.leave_group(current_user, group_id)
    return {"message": "Successfully left group"}


@router.post("/groups/{group_id}/invite", summary="Invite a user to a group")
async def invite_to_group(
    group_id: UUID,
    data: GroupInvite,
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    await service.invite(current_user, group_id, data.user_id)
    return {"message": "Invitation sent successfully"}


@router.put("/groups/{group_id}/members/{user_id}/role", summary="Change a member's role")
async def update_member_role(
    group_id: UUID,
    user_id: UUID,
    data: MemberRoleUpdate,
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    await service.update_member_role(current_user, group_id, user_id, data.role)
    return {"message": "Member role updated successfully"}


# ============================================================================
# CHALLENGES
# ============================================================================


@router.post(
    "/groups/{group_id}/challenges",
    status_code=status.HTTP_201_CREATED,
    summary="Create a group challenge",
)
async def create_challenge(
    group_id: UUID,
    data: ChallengeCreate,
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    challenge = await service.create_challenge(current_user, group_id, data)
    return {"message": "Challenge created successfully", "challenge": challenge}


@router.post("/groups/{group_id}/challenges/{challenge_id}/join", summary="Join a challenge")
async def join_challenge(
    group_id: UUID,
    challenge_id: UUID,
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    await service.join_challenge(current_user, group_id, challenge_id)
    return {"message": "Successfully joined challenge"}


@router.post(
    "/groups/{group_id}/challenges/{challenge_id}/progress",
    summary="Report challenge progress",
)
async def update_challenge_progress(
    group_id: UUID,
    challenge_id: UUID,
    data: ChallengeProgressUpdate,
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    challenge = await service.update_progress(current_user, group_id, challenge_id, data.progress)
    return {"message": "Progress updated successfully", "challenge": challenge}


# ============================================================================
# POSTS
# ============================================================================


@router.post("/groups/{group_id}/posts", status_code=status.HTTP_201_CREATED, summary="Post to a group")
async def create_post(
    group_id: UUID,
    data: PostCreate,
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    post = await service.create_post(current_user, group_id, data)
    return {"message": "Post created successfully", "post": post}


@router.post("/groups/{group_id}/posts/{post_id}/react", summary="React to a group post")
async def react_to_post(
    group_id: UUID,
    post_id: UUID,
    data: ReactionCreate,
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    post = await service.react_to_post(current_user, group_id, post_id, data)
    return {"message": "Reaction saved", "post": post}


@router.post("/groups/{group_id}/posts/{post_id}/comment", summary="Comment on a group post")
async def comment_on_post(
    group_id: UUID,
    post_id: UUID,
    data: PostCommentCreate,
    current_user: UserDB = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    post = await service.comment_on_post(current_user, group_id, post_id, data)
    return {"message": "Comment added successfully", "post": post}


# ============================================================================
# FEED
# ============================================================================


@router.get("/feed", summary="Shared activities from friends")
async def activity_feed(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    current_user: UserDB = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
):
    return await service.feed(current_user, page=page, limit=limit)
