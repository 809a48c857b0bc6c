# backend/plaza/schemas/__init__.py
from __future__ import annotations

"""
Pydantic schemas for request/response models.

This module is the API contract layer. It is used by the API routes; the
repositories take and return plain values, dicts and ORM rows.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# ---------- Navigation ----------


class NavItemRead(BaseModel):
    name: str
    url: str
    prefetch: bool


# ---------- Art Schemas ----------


class ArtTagInput(BaseModel):
    """Reference an existing tag by id, or create one by name."""

    id: Optional[int] = None
    name: Optional[str] = Field(default=None, max_length=100)

    @model_validator(mode="after")
    def ensure_id_or_name(self) -> "ArtTagInput":
        if self.name is not None:
            self.name = self.name.strip() or None
        if not self.id and not self.name:
            raise ValueError("tag name must be provided if no id")
        return self


class ArtCreate(BaseModel):
    url: str
    description: Optional[str] = Field(default=None, max_length=1000)
    linked_users: List[int] = Field(default_factory=list)
    tags: List[ArtTagInput] = Field(default_factory=list)

    @field_validator("linked_users")
    @classmethod
    def dedupe_linked_users(cls, value: List[int]) -> List[int]:
        return list(dict.fromkeys(value))


class ArtUpdate(BaseModel):
    description: Optional[str] = Field(default=None, max_length=1000)
    is_showcase: bool = False
    linked_users: List[int] = Field(default_factory=list)
    tags: List[ArtTagInput] = Field(default_factory=list)

    @field_validator("linked_users")
    @classmethod
    def dedupe_linked_users(cls, value: List[int]) -> List[int]:
        return list(dict.fromkeys(value))


class ArtTagRead(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class LinkedUserRead(BaseModel):
    id: int
    username: str

    class Config:
        from_attributes = True


class ArtRead(BaseModel):
    id: int
    author_id: int
    description: Optional[str]
    is_showcase: bool
    url: str
    created_at: datetime
    tags: List[ArtTagRead]
    linked_users: List[LinkedUserRead]


class ArtCreated(BaseModel):
    id: int


# ---------- Team Schemas ----------


class TeamCreate(BaseModel):
    name: str = Field(min_length=2, max_length=64)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return value.strip()


class TeamUpdate(BaseModel):
    name: str = Field(min_length=2, max_length=64)
    bio: Optional[str] = Field(default=None, max_length=2000)
    bsky: Optional[str] = Field(default=None, max_length=100)
    css: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return value.strip()


class TeamLeave(BaseModel):
    new_owner_user_id: Optional[int] = None


class TeamJoin(BaseModel):
    invite_code: str


class TeamListMember(BaseModel):
    id: int
    username: str
    plus_tier: Optional[int]


class TeamListItem(BaseModel):
    custom_url: str
    name: str
    avatar_src: Optional[str]
    members: List[TeamListMember]


class WeaponRead(BaseModel):
    weapon_spl_id: int
    is_favorite: bool


class TeamMemberRead(BaseModel):
    id: int
    username: str
    discord_id: str
    discord_avatar: Optional[str]
    custom_url: Optional[str]
    role: Optional[str]
    is_owner: bool
    is_manager: bool
    is_main_team: bool
    country: Optional[str]
    patron_tier: Optional[int]
    weapons: List[WeaponRead]


class TeamDetail(BaseModel):
    id: int
    name: str
    bsky: Optional[str]
    bio: Optional[str]
    custom_url: str
    css: Optional[str]
    avatar_src: Optional[str]
    banner_src: Optional[str]
    members: List[TeamMemberRead]
    invite_code: Optional[str] = None


class TeamRead(BaseModel):
    id: int
    name: str
    custom_url: str
    bio: Optional[str]
    bsky: Optional[str]
    css: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class TeamMemberOf(BaseModel):
    id: int
    custom_url: str
    name: str
    logo_url: Optional[str]


class InviteCodeRead(BaseModel):
    invite_code: str


# ---------- Tournament Schemas ----------


class TournamentActionRequest(BaseModel):
    """
    Form payload of the tournament participant actions. Field names match
    the posted form (``_action``, ``bracketIdx``).
    """

    action: Literal["CHECK_IN", "BRACKET_CHECK_IN"] = Field(alias="_action")
    bracket_idx: Optional[int] = Field(default=None, alias="bracketIdx", ge=0)

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def ensure_bracket_idx(self) -> "TournamentActionRequest":
        if self.action == "BRACKET_CHECK_IN" and self.bracket_idx is None:
            raise ValueError("bracketIdx is required for BRACKET_CHECK_IN")
        return self


class TournamentActionResult(BaseModel):
    action: str
    tournament_team_id: int
    bracket_idx: Optional[int]
    created: bool


class TournamentStreamItem(BaseModel):
    twitch_user_name: str
    viewer_count: int = 0
    thumbnail_url: Optional[str] = None
    user_id: Optional[int] = None
    started_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TournamentStreamsRead(BaseModel):
    streams: List[TournamentStreamItem]
    streaming_participants: List[int]


class TournamentStreamsUpdate(BaseModel):
    streams: List[TournamentStreamItem]
