"""Tests for the generate-archive-render orchestrator."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from resume_builder.config import AppConfig, StorageConfig
from resume_builder.exceptions import (
    ArchiveWriteError,
    EmptyJobDescription,
    MisconfiguredService,
    ProviderError,
    ResumeNotFound,
    ResumeSaveError,
    Unauthenticated,
    UnknownTemplate,
)
from resume_builder.models.profile import CallerIdentity, ProfileSnapshot
from resume_builder.pipeline.orchestrator import BuildResult, ResumeBuilder
from resume_builder.pipeline.resume_writer import ResumeWriter
from resume_builder.storage.resume_archive import ResumeArchive


class TestBuild:
    async def test_build_archives_result(self, builder, caller, sample_jd_text, sample_resume_text):
        result = await builder.build(sample_jd_text, caller)

        assert isinstance(result, BuildResult)
        assert result.resume.resume_content == sample_resume_text
        assert result.resume.job_description == sample_jd_text
        assert result.resume.user_id == caller.user_id
        assert builder.history(caller) == [result.resume]

    async def test_uses_stored_profile_when_none_given(self, builder, caller, mock_llm_client):
        builder.profiles.update(caller, full_name="Jane Stored", phone="555-0000")
        await builder.build("Backend role", caller)

        prompt = mock_llm_client.generate.await_args.kwargs["prompt"]
        assert "Full Name: Jane Stored" in prompt
        assert "Phone: 555-0000" in prompt

    async def test_explicit_profile_wins(self, builder, caller, mock_llm_client):
        builder.profiles.update(caller, full_name="Jane Stored")
        await builder.build("Backend role", caller, ProfileSnapshot(full_name="Jane Given"))

        prompt = mock_llm_client.generate.await_args.kwargs["prompt"]
        assert "Full Name: Jane Given" in prompt

    async def test_archive_failure_is_distinct_error(self, mock_llm_client, profile_store, caller, sample_resume_text):
        archive = MagicMock(spec=ResumeArchive)
        archive.add.side_effect = ArchiveWriteError("disk full")
        builder = ResumeBuilder(ResumeWriter(mock_llm_client), profile_store, archive)

        with pytest.raises(ResumeSaveError) as exc_info:
            await builder.build("Backend role", caller)

        error = exc_info.value
        assert error.kind == "ResumeSaveError"
        assert error.resume == sample_resume_text
        assert "disk full" in error.message
        assert mock_llm_client.generate.await_count == 1

    async def test_failed_generation_is_not_stored(self, builder, caller, mock_llm_client):
        mock_llm_client.generate.side_effect = ProviderError("overloaded", status_code=529)
        with pytest.raises(ProviderError):
            await builder.build("Backend role", caller)
        assert builder.history(caller) == []

    async def test_empty_job_description_not_stored(self, builder, caller, mock_llm_client):
        with pytest.raises(EmptyJobDescription):
            await builder.build("   ", caller)
        assert mock_llm_client.generate.await_count == 0
        assert builder.history(caller) == []

    async def test_empty_job_description_leaves_profile_store_untouched(self, builder, caller):
        with pytest.raises(EmptyJobDescription):
            await builder.generate("  \n ", caller)
        assert builder.profiles.get(caller.user_id) is None

    async def test_unauthenticated(self, builder, mock_llm_client):
        with pytest.raises(Unauthenticated):
            await builder.build("Backend role", None)
        assert mock_llm_client.generate.await_count == 0


class TestGenerate:
    async def test_generate_does_not_archive(self, builder, caller, sample_resume_text):
        text = await builder.generate("Backend role", caller)
        assert text == sample_resume_text
        assert builder.history(caller) == []


class TestDownload:
    async def test_txt_download(self, builder, caller, sample_resume_text):
        result = await builder.build("Backend role", caller)
        download = builder.download(caller, result.resume.id, fmt="txt")

        assert download.filename == result.resume.download_filename
        assert download.media_type.startswith("text/plain")
        assert download.content.decode("utf-8") == sample_resume_text

    async def test_html_download(self, builder, caller):
        result = await builder.build("Backend role", caller)
        download = builder.download(caller, result.resume.id, "modern", "html")

        assert download.filename.endswith(".html")
        assert b"resume--modern" in download.content

    async def test_pdf_download(self, builder, caller):
        result = await builder.build("Backend role", caller)
        download = builder.download(caller, result.resume.id, "executive", "pdf")

        assert download.filename.endswith(".pdf")
        assert download.content[:4] == b"%PDF"

    async def test_other_users_resume_not_found(self, builder, caller):
        result = await builder.build("Backend role", caller)
        with pytest.raises(ResumeNotFound):
            builder.download(CallerIdentity(user_id="someone-else"), result.resume.id, fmt="txt")

    async def test_unknown_template(self, builder, caller):
        result = await builder.build("Backend role", caller)
        with pytest.raises(UnknownTemplate):
            builder.download(caller, result.resume.id, "fancy", "html")

    def test_unsupported_format(self, builder, caller):
        with pytest.raises(ValueError, match="format"):
            builder.download(caller, "any", fmt="docx")


class TestFromConfig:
    def test_missing_key_is_misconfigured(self, tmp_path):
        config = AppConfig(storage=StorageConfig(db_path=str(tmp_path / "r.db")))
        with pytest.raises(MisconfiguredService):
            ResumeBuilder.from_config(config, None)

    def test_wires_components(self, tmp_path):
        config = AppConfig(storage=StorageConfig(db_path=str(tmp_path / "r.db")))
        builder = ResumeBuilder.from_config(config, "test-key")
        assert builder.writer.model == config.llm.model
        assert builder.archive.db_path == tmp_path / "r.db"
        assert builder.profiles.db_path == tmp_path / "r.db"
