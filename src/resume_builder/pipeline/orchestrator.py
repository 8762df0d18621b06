"""Client orchestrator - generate, archive and render resumes for a caller."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from resume_builder.clients.llm_client import LLMClient
from resume_builder.config import AppConfig
from resume_builder.exceptions import (
    ArchiveWriteError,
    EmptyJobDescription,
    ResumeNotFound,
    ResumeSaveError,
    Unauthenticated,
)
from resume_builder.export.pdf_renderer import render, render_pdf, render_text_download
from resume_builder.export.templates import TemplateId
from resume_builder.models.profile import CallerIdentity, ProfileSnapshot
from resume_builder.models.resume import GeneratedResume
from resume_builder.pipeline.resume_writer import ResumeWriter
from resume_builder.storage.profile_store import ProfileStore
from resume_builder.storage.resume_archive import ResumeArchive

logger = logging.getLogger(__name__)

DOWNLOAD_FORMATS = ("pdf", "html", "txt")


@dataclass
class BuildResult:
    """A generated and archived resume."""

    resume: GeneratedResume
    elapsed_seconds: float = 0.0
    metadata: dict = field(default_factory=dict)


@dataclass
class Download:
    filename: str
    media_type: str
    content: bytes


class ResumeBuilder:
    """Runs generation, then archiving, as two sequential steps."""

    def __init__(
        self,
        writer: ResumeWriter,
        profiles: ProfileStore,
        archive: ResumeArchive,
    ):
        self.writer = writer
        self.profiles = profiles
        self.archive = archive

    @classmethod
    def from_config(cls, config: AppConfig, api_key: str | None) -> ResumeBuilder:
        """Wire the builder from configuration.

        Raises:
            MisconfiguredService: ``api_key`` is missing.
        """
        llm = LLMClient(api_key=api_key, timeout=config.llm.timeout)
        db_path = config.storage.resolved_db_path
        return cls(
            writer=ResumeWriter(llm, model=config.llm.model),
            profiles=ProfileStore(db_path),
            archive=ResumeArchive(db_path),
        )

    def profile_snapshot(self, caller: CallerIdentity) -> ProfileSnapshot:
        return self.profiles.get_or_create(caller).snapshot()

    async def generate(
        self,
        job_description: str,
        caller: CallerIdentity | None,
        profile: ProfileSnapshot | None = None,
    ) -> str:
        """Generate resume text without archiving it.

        When ``profile`` is omitted the caller's stored profile is used. Input
        is checked before the profile store is touched.
        """
        if caller is None:
            raise Unauthenticated()
        if not job_description or not job_description.strip():
            raise EmptyJobDescription()
        if profile is None:
            profile = self.profile_snapshot(caller)
        return await self.writer.write(job_description, profile, caller)

    async def build(
        self,
        job_description: str,
        caller: CallerIdentity | None,
        profile: ProfileSnapshot | None = None,
    ) -> BuildResult:
        """Generate a resume and store it in the caller's archive.

        Raises:
            ResumeSaveError: Generation succeeded but the archive write
                failed. The generated text is attached to the error.
        """
        start = time.monotonic()
        text = await self.generate(job_description, caller, profile)
        try:
            record = self.archive.add(caller.user_id, job_description, text)
        except ArchiveWriteError as e:
            logger.error("Resume generated for user %s but not saved", caller.user_id, exc_info=True)
            raise ResumeSaveError(
                f"Resume was generated but could not be saved: {e.message}",
                resume=text,
            ) from e
        elapsed = time.monotonic() - start
        return BuildResult(resume=record, elapsed_seconds=elapsed)

    def history(self, caller: CallerIdentity | None, limit: int = 50) -> list[GeneratedResume]:
        if caller is None:
            raise Unauthenticated()
        return self.archive.list_for_user(caller.user_id, limit=limit)

    def download(
        self,
        caller: CallerIdentity | None,
        resume_id: str,
        template_id: str | TemplateId = TemplateId.PROFESSIONAL,
        fmt: str = "pdf",
    ) -> Download:
        """Render an archived resume for download in ``fmt``."""
        if caller is None:
            raise Unauthenticated()
        if fmt not in DOWNLOAD_FORMATS:
            raise ValueError(f"Unsupported download format: {fmt}")
        resume = self.archive.get(caller.user_id, resume_id)
        if resume is None:
            raise ResumeNotFound(f"Resume not found: {resume_id}")

        if fmt == "txt":
            filename, content = render_text_download(resume)
            return Download(filename, "text/plain; charset=utf-8", content)

        stem = resume.download_filename.rsplit(".", 1)[0]
        if fmt == "html":
            document = render(resume.resume_content, template_id)
            return Download(f"{stem}.html", "text/html; charset=utf-8", document.html.encode("utf-8"))
        return Download(
            f"{stem}.pdf",
            "application/pdf",
            render_pdf(resume.resume_content, template_id),
        )
