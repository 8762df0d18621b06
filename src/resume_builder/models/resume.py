"""Pydantic models for generation requests and archived resumes."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from resume_builder.models.profile import ProfileSnapshot


class GenerationRequest(BaseModel):
    """Body of a generation call. Wire names follow the browser client."""

    model_config = ConfigDict(populate_by_name=True)

    job_description: str = Field(default="", alias="jobDescription")
    profile: ProfileSnapshot | None = Field(default=None, alias="userProfile")


class GeneratedResume(BaseModel):
    """A resume stored in the archive. Immutable once created."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    job_description: str
    resume_content: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}

    @property
    def download_filename(self) -> str:
        return f"resume-{self.created_at.date().isoformat()}.txt"

    def job_description_preview(self, length: int = 100) -> str:
        if len(self.job_description) <= length:
            return self.job_description
        return self.job_description[:length] + "..."
