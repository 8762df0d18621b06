"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from resume_builder.clients.llm_client import LLMClient, LLMResponse
from resume_builder.models.profile import CallerIdentity, ProfileSnapshot
from resume_builder.pipeline.orchestrator import ResumeBuilder
from resume_builder.pipeline.resume_writer import ResumeWriter
from resume_builder.storage.profile_store import ProfileStore
from resume_builder.storage.resume_archive import ResumeArchive

SAMPLE_RESUME = """Jane Doe
Senior Backend Engineer

CONTACT
- Email: jane.doe@example.com
- Phone: 555-1234
- Location: Berlin, Germany
- LinkedIn: linkedin.com/in/janedoe

SKILLS
- Go
- Kubernetes
- PostgreSQL
- gRPC
- Terraform

ACHIEVEMENTS
- Cut p99 latency of the payments API by 40%
- Led migration of 30 services to Kubernetes
- Reduced cloud spend by 25%

PROFILE
Backend engineer with eight years of experience building distributed systems.
Focused on reliability, observability and developer experience.

WORK EXPERIENCE
Acme Payments | Berlin
Senior Backend Engineer | 2020 - Present
- Designed event-driven settlement pipeline in Go
- Operated multi-region Kubernetes clusters

Globex | Munich
Backend Engineer | 2016 - 2020
- Built REST and gRPC services for logistics tracking

EDUCATION
Technical University of Munich | Munich
B.Sc. Computer Science | 2012 - 2016
- Thesis on consensus protocols
"""


def make_api_message(text: str | None, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    """Build a mock anthropic Message-like object. ``None`` means no content."""
    message = MagicMock()
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    message.content = [] if text is None else [MagicMock(text=text)]
    return message


@pytest.fixture
def sample_jd_text() -> str:
    return "Senior Backend Engineer, Go, Kubernetes"


@pytest.fixture
def sample_resume_text() -> str:
    return SAMPLE_RESUME


@pytest.fixture
def caller() -> CallerIdentity:
    return CallerIdentity(user_id="user-123", email="jane.doe@example.com")


@pytest.fixture
def jane_profile() -> ProfileSnapshot:
    return ProfileSnapshot(full_name="Jane Doe", phone="555-1234")


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text=SAMPLE_RESUME, input_tokens=100, output_tokens=50)
    )
    return client


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "resumes.db"


@pytest.fixture
def profile_store(db_path: Path) -> ProfileStore:
    return ProfileStore(db_path)


@pytest.fixture
def resume_archive(db_path: Path) -> ResumeArchive:
    return ResumeArchive(db_path)


@pytest.fixture
def builder(mock_llm_client, profile_store, resume_archive) -> ResumeBuilder:
    return ResumeBuilder(
        writer=ResumeWriter(mock_llm_client),
        profiles=profile_store,
        archive=resume_archive,
    )


@pytest.fixture
def api_message():
    """Factory fixture for mock anthropic messages."""
    return make_api_message
