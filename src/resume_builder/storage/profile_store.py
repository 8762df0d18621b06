"""SQLite-backed profile store keyed by user identity."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from resume_builder.exceptions import ProfileStoreError
from resume_builder.models.profile import EDITABLE_FIELDS, CallerIdentity, Profile

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".resume-builder" / "resumes.db"


class ProfileStore:
    """Per-user profile records with read-one and upsert operations.

    Database failures surface as ``ProfileStoreError``.
    """

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS profiles (
                    id TEXT PRIMARY KEY,
                    profile_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

    def get(self, user_id: str) -> Profile | None:
        """Return the stored profile for ``user_id``, if any."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT profile_json FROM profiles WHERE id = ?",
                    (user_id,),
                ).fetchone()
        except sqlite3.Error as e:
            raise ProfileStoreError(f"Failed to load profile: {e}") from e
        if row is None:
            return None
        return Profile.model_validate_json(row[0])

    def upsert(self, profile: Profile) -> Profile:
        """Insert or replace a profile record."""
        try:
            with self._connect() as conn:
                conn.execute(
                    """INSERT OR REPLACE INTO profiles (id, profile_json, updated_at)
                       VALUES (?, ?, ?)""",
                    (profile.id, profile.model_dump_json(), profile.updated_at.isoformat()),
                )
        except sqlite3.Error as e:
            raise ProfileStoreError(f"Failed to save profile: {e}") from e
        return profile

    def get_or_create(self, caller: CallerIdentity) -> Profile:
        """Load the caller's profile, creating it from identity metadata if missing."""
        profile = self.get(caller.user_id)
        if profile is not None:
            return profile
        logger.info("Creating initial profile for user %s", caller.user_id)
        return self.upsert(Profile.from_identity(caller))

    def update(self, caller: CallerIdentity, **fields) -> Profile:
        """Apply partial updates to the caller's profile.

        Raises:
            ValueError: If a field is not user-editable.
        """
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        current = self.get_or_create(caller)
        updated = Profile.model_validate(
            {
                **current.model_dump(),
                **fields,
                "updated_at": datetime.now(timezone.utc),
            }
        )
        return self.upsert(updated)
