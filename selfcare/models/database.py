"""
SelfCare Planner - Database Models
SQLAlchemy ORM models.

Owned collections (likes, comments, members, challenges, posts, ...) are
child tables keyed by their own id plus a foreign key to the parent row and
are eagerly loaded with the parent.
"""

from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import declarative_base, relationship

from selfcare.utils.time import utcnow

Base = declarative_base()


# ============================================================================
# USERS
# ============================================================================


class UserDB(Base):
    """User account with profile, streak counters and privacy settings"""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid4)
    username = Column(String(30), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    first_name = Column(String(50), default="")
    last_name = Column(String(50), default="")
    avatar = Column(String(500), default="")
    bio = Column(String(500))
    date_of_birth = Column(DateTime(timezone=True))
    timezone = Column(String(50), default="UTC")

    current_mood = Column(String(20), nullable=False, default="neutral")
    primary_goal = Column(String(30), nullable=False)
    preferences = Column(JSON, default=dict)

    # Streak data
    current_streak = Column(Integer, nullable=False, default=0)
    longest_streak = Column(Integer, nullable=False, default=0)
    last_activity_date = Column(DateTime(timezone=True))
    total_activities_completed = Column(Integer, nullable=False, default=0)

    # Privacy
    profile_visibility = Column(String(20), nullable=False, default="friends")
    share_progress = Column(Boolean, nullable=False, default=True)

    # Account state
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True))
    email_verified = Column(Boolean, nullable=False, default=False)
    email_verification_token = Column(String(64))
    password_reset_token = Column(String(64), index=True)
    password_reset_expires = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    friendships = relationship(
        "FriendshipDB",
        foreign_keys="FriendshipDB.user_id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    achievements = relationship(
        "AchievementDB",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="AchievementDB.unlocked_at",
    )


class FriendshipDB(Base):
    """One direction of a friendship; a relationship is stored as two rows"""

    __tablename__ = "friendships"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    friend_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")
    initiated_by = Column(Uuid, nullable=False)
    added_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "friend_id", name="uq_friendship_pair"),
    )


class AchievementDB(Base):
    """Unlocked achievement"""

    __tablename__ = "achievements"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(30), nullable=False)
    description = Column(String(255))
    unlocked_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "type", name="uq_user_achievement"),
    )


# ============================================================================
# ACTIVITIES
# ============================================================================


class ActivityDB(Base):
    """Wellness activity, user-authored or AI-generated"""

    __tablename__ = "activities"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    type = Column(String(20), nullable=False, index=True)
    category = Column(String(30), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    description = Column(String(500))
    duration = Column(Integer, default=5)
    difficulty = Column(String(20), default="beginner")
    tags = Column(JSON, default=list)

    is_ai_generated = Column(Boolean, nullable=False, default=False)
    ai_prompt = Column(Text)

    # Completion data
    is_completed = Column(Boolean, nullable=False, default=False, index=True)
    completed_at = Column(DateTime(timezone=True))
    rating = Column(Integer)
    feedback = Column(String(500))
    mood_before = Column(String(20))
    mood_after = Column(String(20))
    notes = Column(String(1000))

    is_shared = Column(Boolean, nullable=False, default=False, index=True)
    scheduled_for = Column(DateTime(timezone=True))
    reminder_sent = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    likes = relationship(
        "ActivityLikeDB",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ActivityLikeDB.liked_at",
    )
    comments = relationship(
        "ActivityCommentDB",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ActivityCommentDB.created_at",
    )
    shares = relationship(
        "ActivityShareDB",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ActivityShareDB.shared_at",
    )

    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="valid_rating"),
    )


class ActivityLikeDB(Base):
    __tablename__ = "activity_likes"

    id = Column(Uuid, primary_key=True, default=uuid4)
    activity_id = Column(Uuid, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    liked_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("activity_id", "user_id", name="uq_activity_like"),
    )


class ActivityCommentDB(Base):
    __tablename__ = "activity_comments"

    id = Column(Uuid, primary_key=True, default=uuid4)
    activity_id = Column(Uuid, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(String(300), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class ActivityShareDB(Base):
    __tablename__ = "activity_shares"

    id = Column(Uuid, primary_key=True, default=uuid4)
    activity_id = Column(Uuid, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    shared_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("activity_id", "user_id", name="uq_activity_share"),
    )


# ============================================================================
# GROUPS
# ============================================================================


class GroupDB(Base):
    """Support group with members, challenges and posts"""

    __tablename__ = "groups"

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(String(100), nullable=False)
    description = Column(String(500))
    avatar = Column(String(500), default="")
    category = Column(String(30), nullable=False, default="general", index=True)
    privacy = Column(String(20), nullable=False, default="public", index=True)

    # Settings
    allow_member_posts = Column(Boolean, nullable=False, default=True)
    require_approval = Column(Boolean, nullable=False, default=False)
    allow_invites = Column(Boolean, nullable=False, default=True)
    max_members = Column(Integer, nullable=False, default=100)

    # Stats
    total_activities = Column(Integer, nullable=False, default=0)
    total_challenges_completed = Column(Integer, nullable=False, default=0)
    average_engagement = Column(Float, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_by = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    members = relationship(
        "GroupMemberDB",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="GroupMemberDB.joined_at",
    )
    challenges = relationship(
        "ChallengeDB",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ChallengeDB.created_at",
    )
    posts = relationship(
        "GroupPostDB",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="GroupPostDB.created_at.desc()",
    )
    invitations = relationship(
        "GroupInvitationDB",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class GroupMemberDB(Base):
    __tablename__ = "group_members"

    id = Column(Uuid, primary_key=True, default=uuid4)
    group_id = Column(Uuid, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default="member")
    joined_at = Column(DateTime(timezone=True), default=utcnow)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_group_member"),
    )


class GroupInvitationDB(Base):
    __tablename__ = "group_invitations"

    id = Column(Uuid, primary_key=True, default=uuid4)
    group_id = Column(Uuid, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    invited_by = Column(Uuid, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_group_invitation"),
    )


class ChallengeDB(Base):
    __tablename__ = "challenges"

    id = Column(Uuid, primary_key=True, default=uuid4)
    group_id = Column(Uuid, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(String(1000))
    type = Column(String(30), nullable=False)
    goal_target = Column(Float, nullable=False)
    goal_unit = Column(String(20), nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    rewards = Column(JSON, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(Uuid, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    participants = relationship(
        "ChallengeParticipantDB",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ChallengeParticipantDB.last_update",
    )


class ChallengeParticipantDB(Base):
    __tablename__ = "challenge_participants"

    id = Column(Uuid, primary_key=True, default=uuid4)
    challenge_id = Column(Uuid, ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    progress = Column(Float, nullable=False, default=0)
    last_update = Column(DateTime(timezone=True), default=utcnow)
    is_completed = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("challenge_id", "user_id", name="uq_challenge_participant"),
    )


class GroupPostDB(Base):
    __tablename__ = "group_posts"

    id = Column(Uuid, primary_key=True, default=uuid4)
    group_id = Column(Uuid, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    type = Column(String(30), nullable=False, default="text")
    attachments = Column(JSON, default=list)
    is_pinned = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    reactions = relationship(
        "PostReactionDB",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PostReactionDB.created_at",
    )
    comments = relationship(
        "PostCommentDB",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PostCommentDB.created_at",
    )


class PostReactionDB(Base):
    __tablename__ = "post_reactions"

    id = Column(Uuid, primary_key=True, default=uuid4)
    post_id = Column(Uuid, ForeignKey("group_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(20), nullable=False, default="like")
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_post_reaction"),
    )


class PostCommentDB(Base):
    __tablename__ = "post_comments"

    id = Column(Uuid, primary_key=True, default=uuid4)
    post_id = Column(Uuid, ForeignKey("group_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(String(500), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
