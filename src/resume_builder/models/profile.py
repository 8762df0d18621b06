"""Pydantic models for user profiles and the caller session context."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

NOT_PROVIDED = "Not provided"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DisplayNamePreference(str, Enum):
    FULL_NAME = "full_name"
    FIRST_NAME = "first_name"
    USERNAME = "username"


class CallerIdentity(BaseModel):
    """Identity of the authenticated caller, issued by the identity service."""

    user_id: str
    email: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def email_local_part(self) -> str | None:
        if not self.email:
            return None
        return self.email.split("@")[0] or None


class ProfileSnapshot(BaseModel):
    """The profile fields sent along with a generation request."""

    full_name: str | None = None
    phone: str | None = None
    website: str | None = None
    bio: str | None = None

    def prompt_fields(self) -> dict[str, str]:
        """Field values for the prompt, with blanks replaced by ``Not provided``."""
        return {
            "full_name": _or_not_provided(self.full_name),
            "phone": _or_not_provided(self.phone),
            "website": _or_not_provided(self.website),
            "bio": _or_not_provided(self.bio),
        }


class Profile(BaseModel):
    id: str
    username: str | None = None
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    display_name_preference: DisplayNamePreference = DisplayNamePreference.FULL_NAME
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_identity(cls, caller: CallerIdentity) -> Profile:
        """Build the initial profile for a caller that has no stored record.

        Signup providers populate metadata inconsistently, so every field is
        resolved here once with an explicit fallback.
        """
        meta = caller.metadata or {}
        local_part = caller.email_local_part
        return cls(
            id=caller.user_id,
            full_name=meta.get("full_name") or local_part,
            username=meta.get("username") or local_part,
            email=caller.email,
            avatar_url=meta.get("avatar_url") or meta.get("picture"),
            website=meta.get("website"),
        )

    def snapshot(self) -> ProfileSnapshot:
        return ProfileSnapshot(
            full_name=self.full_name,
            phone=self.phone,
            website=self.website,
            bio=self.bio,
        )

    def display_name(self) -> str:
        pref = self.display_name_preference
        if pref == DisplayNamePreference.FIRST_NAME and self.full_name:
            return self.full_name.split()[0]
        if pref == DisplayNamePreference.USERNAME and self.username:
            return self.username
        if self.full_name:
            return self.full_name
        if self.username:
            return self.username
        if self.email:
            return self.email.split("@")[0]
        return self.id


# Fields a caller may change through ``ProfileStore.update``.
EDITABLE_FIELDS = frozenset(
    {
        "username",
        "full_name",
        "phone",
        "website",
        "bio",
        "avatar_url",
        "display_name_preference",
    }
)


def _or_not_provided(value: str | None) -> str:
    if value is None or not str(value).strip():
        return NOT_PROVIDED
    return value
