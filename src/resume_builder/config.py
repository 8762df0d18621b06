"""Application configuration loaded from config.yaml."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from resume_builder.export.templates import AVAILABLE_TEMPLATES

API_KEY_ENV = "ANTHROPIC_API_KEY"


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    timeout: int = 120

    def __post_init__(self) -> None:
        if not 1 <= self.timeout <= 600:
            raise ValueError(f"llm.timeout must be between 1 and 600, got {self.timeout}")
        if not self.model:
            raise ValueError("llm.model must not be empty")


@dataclass(frozen=True)
class RenderConfig:
    default_template: str = "professional"

    def __post_init__(self) -> None:
        if self.default_template not in AVAILABLE_TEMPLATES:
            raise ValueError(
                f"render.default_template must be one of {AVAILABLE_TEMPLATES}, "
                f"got {self.default_template!r}"
            )


@dataclass(frozen=True)
class StorageConfig:
    db_path: str = "~/.resume-builder/resumes.db"
    history_limit: int = 50

    def __post_init__(self) -> None:
        if self.history_limit < 1:
            raise ValueError(f"storage.history_limit must be positive, got {self.history_limit}")

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8000

    def __post_init__(self) -> None:
        if not 1 <= self.port <= 65535:
            raise ValueError(f"server.port must be between 1 and 65535, got {self.port}")


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        render=RenderConfig(**raw.get("render", {})),
        storage=StorageConfig(**raw.get("storage", {})),
        server=ServerConfig(**raw.get("server", {})),
    )


def get_api_key() -> str | None:
    """Return the provider API key from the environment, or None if unset."""
    key = os.environ.get(API_KEY_ENV, "").strip()
    return key or None
