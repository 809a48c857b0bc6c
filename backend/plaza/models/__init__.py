# backend/plaza/models/__init__.py
from __future__ import annotations

"""
Core ORM models for the plaza backend.

This module depends on:
- plaza.db.session.Base for the declarative base

It is used by:
- plaza.schemas (for type references)
- the repositories under plaza.services (for querying and persisting data)
- API routes

Models:
- User, PlusTier, UserWeapon: community members and their profile extras
- UnvalidatedUserSubmittedImage: every uploaded image; validated ones are
  what the site shows
- AllTeam / AllTeamMember: teams and memberships, soft deleted / left
- LFGPost: "looking for group" posts, optionally on behalf of a team
- Art, ArtTag, TaggedArt, ArtUserMetadata: the art gallery
- TournamentTeam, TournamentTeamMember, TournamentTeamCheckIn: tournament
  registrations and check-ins
- LiveStream: live streams currently known for a tournament
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from plaza.db.session import Base


# ---------- Users ----------


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, nullable=False)
    discord_id = Column(String, unique=True, nullable=False)
    discord_avatar = Column(String, nullable=True)
    custom_url = Column(String, unique=True, nullable=True)
    country = Column(String, nullable=True)
    patron_tier = Column(Integer, nullable=True)
    # Art from trusted artists skips image validation
    is_artist = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    weapons = relationship(
        "UserWeapon",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class PlusTier(Base):
    __tablename__ = "plus_tiers"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    tier = Column(Integer, nullable=False)


class UserWeapon(Base):
    __tablename__ = "user_weapons"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    weapon_spl_id = Column(Integer, primary_key=True)
    is_favorite = Column(Boolean, nullable=False, default=False)
    order = Column(Integer, nullable=False, default=0)

    user = relationship("User", back_populates="weapons")


# ---------- Images ----------


class UnvalidatedUserSubmittedImage(Base):
    """
    Every user submitted image. Only rows with ``validated_at`` set are
    shown publicly (the "user submitted image" view of the data).
    """

    __tablename__ = "unvalidated_user_submitted_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    submitter_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    url = Column(String, nullable=False)
    validated_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


# ---------- Teams ----------


class AllTeam(Base):
    """
    Team row including disbanded teams. ``deleted_at`` marks a soft delete.
    """

    __tablename__ = "all_teams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    custom_url = Column(String, unique=True, nullable=False)
    invite_code = Column(String, unique=True, nullable=False)
    bio = Column(Text, nullable=True)
    bsky = Column(String, nullable=True)
    css = Column(Text, nullable=True)

    avatar_img_id = Column(
        Integer,
        ForeignKey("unvalidated_user_submitted_images.id", ondelete="SET NULL"),
        nullable=True,
    )
    banner_img_id = Column(
        Integer,
        ForeignKey("unvalidated_user_submitted_images.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True)

    members = relationship(
        "AllTeamMember",
        back_populates="team",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class AllTeamMember(Base):
    """
    Membership row including members that left (``left_at`` set).
    """

    __tablename__ = "all_team_members"
    __table_args__ = (UniqueConstraint("user_id", "team_id", name="uq_team_member"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(Integer, ForeignKey("all_teams.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    role = Column(String, nullable=True)
    is_owner = Column(Boolean, nullable=False, default=False)
    is_manager = Column(Boolean, nullable=False, default=False)
    is_main_team = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    left_at = Column(DateTime, nullable=True)

    team = relationship("AllTeam", back_populates="members")
    user = relationship("User")


class LFGPost(Base):
    __tablename__ = "lfg_posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    team_id = Column(Integer, ForeignKey("all_teams.id", ondelete="CASCADE"), nullable=True)
    type = Column(String, nullable=False, default="TEAM_FOR_PLAYER")
    text = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


# ---------- Art ----------


class Art(Base):
    __tablename__ = "arts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    img_id = Column(
        Integer,
        ForeignKey("unvalidated_user_submitted_images.id", ondelete="CASCADE"),
        nullable=False,
    )
    description = Column(Text, nullable=True)
    # Single featured piece per author
    is_showcase = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    image = relationship("UnvalidatedUserSubmittedImage")
    tags = relationship(
        "ArtTag",
        secondary="tagged_arts",
        order_by="ArtTag.name",
        viewonly=True,
    )
    linked_users = relationship(
        "User",
        secondary="art_user_metadata",
        order_by="User.id",
        viewonly=True,
    )


class ArtTag(Base):
    __tablename__ = "art_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class TaggedArt(Base):
    __tablename__ = "tagged_arts"

    art_id = Column(Integer, ForeignKey("arts.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(Integer, ForeignKey("art_tags.id", ondelete="CASCADE"), primary_key=True)


class ArtUserMetadata(Base):
    """Users linked to (appearing in / commissioned) an art piece."""

    __tablename__ = "art_user_metadata"

    art_id = Column(Integer, ForeignKey("arts.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)


# ---------- Tournaments ----------


class TournamentTeam(Base):
    __tablename__ = "tournament_teams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tournament_id = Column(Integer, nullable=False, index=True)
    name = Column(String, nullable=False)
    seed = Column(Integer, nullable=True)
    team_id = Column(Integer, ForeignKey("all_teams.id", ondelete="SET NULL"), nullable=True)
    avatar_img_id = Column(
        Integer,
        ForeignKey("unvalidated_user_submitted_images.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    members = relationship(
        "TournamentTeamMember",
        back_populates="tournament_team",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    check_ins = relationship(
        "TournamentTeamCheckIn",
        back_populates="tournament_team",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class TournamentTeamMember(Base):
    __tablename__ = "tournament_team_members"

    tournament_team_id = Column(
        Integer,
        ForeignKey("tournament_teams.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    is_owner = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    tournament_team = relationship("TournamentTeam", back_populates="members")
    user = relationship("User")


class TournamentTeamCheckIn(Base):
    """
    Check-in of a tournament team. ``bracket_idx`` is null for the
    tournament-wide check-in and set for a per-bracket check-in.
    """

    __tablename__ = "tournament_team_check_ins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tournament_team_id = Column(
        Integer,
        ForeignKey("tournament_teams.id", ondelete="CASCADE"),
        nullable=False,
    )
    bracket_idx = Column(Integer, nullable=True)
    checked_in_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    tournament_team = relationship("TournamentTeam", back_populates="check_ins")


class LiveStream(Base):
    __tablename__ = "live_streams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tournament_id = Column(Integer, nullable=False, index=True)
    twitch_user_name = Column(String, nullable=False)
    # Null for casters that are not registered participants
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    viewer_count = Column(Integer, nullable=False, default=0)
    thumbnail_url = Column(String, nullable=True)
    started_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
