"""Data models for the resume builder."""

from resume_builder.models.profile import (
    NOT_PROVIDED,
    CallerIdentity,
    DisplayNamePreference,
    Profile,
    ProfileSnapshot,
)
from resume_builder.models.resume import GeneratedResume, GenerationRequest

__all__ = [
    "NOT_PROVIDED",
    "CallerIdentity",
    "DisplayNamePreference",
    "GeneratedResume",
    "GenerationRequest",
    "Profile",
    "ProfileSnapshot",
]
