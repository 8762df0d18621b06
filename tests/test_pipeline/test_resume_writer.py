"""Tests for the resume generation service."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from resume_builder.clients.llm_client import LLMClient
from resume_builder.exceptions import (
    EmptyCompletion,
    EmptyJobDescription,
    MisconfiguredService,
    ProviderError,
    Unauthenticated,
)
from resume_builder.models.profile import NOT_PROVIDED, ProfileSnapshot
from resume_builder.pipeline.resume_writer import (
    MAX_TOKENS,
    SYSTEM_PROMPT,
    TEMPERATURE,
    ResumeWriter,
    build_user_prompt,
)

GRAMMAR_SECTIONS = ("CONTACT", "SKILLS", "ACHIEVEMENTS", "PROFILE", "WORK EXPERIENCE", "EDUCATION")


class TestPrompts:
    def test_system_prompt_defines_grammar(self):
        for section in GRAMMAR_SECTIONS:
            assert f"\n{section}\n" in SYSTEM_PROMPT
        assert "[Full Name]\n[Job Title]" in SYSTEM_PROMPT
        assert "(List 5-7 relevant skills)" in SYSTEM_PROMPT
        assert "(List 3-4 significant achievements)" in SYSTEM_PROMPT
        assert "(Include 2-3 relevant positions)" in SYSTEM_PROMPT

    def test_user_prompt_embeds_job_description_verbatim(self):
        jd = "  Staff SRE\n- on-call {rotation} | 50%  "
        prompt = build_user_prompt(jd, ProfileSnapshot())
        assert jd in prompt

    def test_user_prompt_substitutes_missing_fields(self):
        prompt = build_user_prompt("Engineer", ProfileSnapshot(full_name="Jane Doe"))
        assert "Full Name: Jane Doe" in prompt
        assert f"Phone: {NOT_PROVIDED}" in prompt
        assert f"Website: {NOT_PROVIDED}" in prompt
        assert f"Bio: {NOT_PROVIDED}" in prompt
        assert "None" not in prompt

    def test_user_prompt_without_profile(self):
        prompt = build_user_prompt("Engineer", None)
        assert prompt.count(NOT_PROVIDED) == 4


class TestResumeWriter:
    async def test_returns_provider_text(self, mock_llm_client, caller, jane_profile, sample_resume_text):
        writer = ResumeWriter(mock_llm_client, model="test-model")
        result = await writer.write("Backend role", jane_profile, caller)
        assert result == sample_resume_text

    async def test_uses_fixed_generation_policy(self, mock_llm_client, caller, jane_profile):
        writer = ResumeWriter(mock_llm_client, model="test-model")
        await writer.write("Backend role", jane_profile, caller)

        kwargs = mock_llm_client.generate.await_args.kwargs
        assert kwargs["system"] == SYSTEM_PROMPT
        assert kwargs["temperature"] == TEMPERATURE == 0.7
        assert kwargs["max_tokens"] == MAX_TOKENS == 1500
        assert kwargs["model"] == "test-model"
        assert "Full Name: Jane Doe" in kwargs["prompt"]

    @pytest.mark.parametrize("jd", ["", "   ", "\n\t "])
    async def test_empty_job_description_makes_no_call(self, mock_llm_client, caller, jd):
        writer = ResumeWriter(mock_llm_client)
        with pytest.raises(EmptyJobDescription):
            await writer.write(jd, ProfileSnapshot(), caller)
        assert mock_llm_client.generate.await_count == 0

    async def test_missing_caller_makes_no_call(self, mock_llm_client):
        writer = ResumeWriter(mock_llm_client)
        with pytest.raises(Unauthenticated):
            await writer.write("Backend role", ProfileSnapshot(), None)
        assert mock_llm_client.generate.await_count == 0

    async def test_profile_with_all_fields_absent(self, mock_llm_client, caller):
        writer = ResumeWriter(mock_llm_client)
        result = await writer.write("Backend role", ProfileSnapshot(), caller)
        assert result


class TestGenerationEndToEnd:
    """Writer and LLMClient together, with the SDK transport mocked."""

    def _writer(self, mock_cls, **create_kwargs) -> tuple[ResumeWriter, MagicMock]:
        mock_client = MagicMock()
        mock_client.messages.create = AsyncMock(**create_kwargs)
        mock_cls.return_value = mock_client
        return ResumeWriter(LLMClient(api_key="test-key")), mock_client

    async def test_grammar_resume_returned_unmodified(
        self, api_message, caller, sample_jd_text, jane_profile, sample_resume_text
    ):
        with patch("resume_builder.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            writer, mock_client = self._writer(mock_cls, return_value=api_message(sample_resume_text))
            result = await writer.write(sample_jd_text, jane_profile, caller)

        assert result == sample_resume_text
        for section in GRAMMAR_SECTIONS:
            assert section in result
        prompt = mock_client.messages.create.await_args.kwargs["messages"][0]["content"]
        assert sample_jd_text in prompt
        assert "Phone: 555-1234" in prompt
        assert mock_client.messages.create.await_count == 1

    async def test_rate_limited_provider(self, caller, sample_jd_text):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        body = {"type": "error", "error": {"type": "rate_limit_error", "message": "Rate limit exceeded"}}
        error = anthropic.RateLimitError(
            "Error code: 429",
            response=httpx.Response(429, request=request, json=body),
            body=body,
        )
        with patch("resume_builder.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            writer, mock_client = self._writer(mock_cls, side_effect=error)
            with pytest.raises(ProviderError) as exc_info:
                await writer.write(sample_jd_text, None, caller)

        assert exc_info.value.message == "Rate limit exceeded"
        assert exc_info.value.to_dict()["kind"] == "ProviderError"
        assert mock_client.messages.create.await_count == 1

    async def test_empty_choices(self, api_message, caller, sample_jd_text):
        with patch("resume_builder.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            writer, _ = self._writer(mock_cls, return_value=api_message(None))
            with pytest.raises(EmptyCompletion):
                await writer.write(sample_jd_text, None, caller)

    def test_missing_credentials_detected_without_network(self):
        with patch("resume_builder.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            with pytest.raises(MisconfiguredService):
                ResumeWriter(LLMClient(api_key=None))
            mock_cls.assert_not_called()
