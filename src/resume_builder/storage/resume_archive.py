"""SQLite-backed append-only archive of generated resumes."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from resume_builder.exceptions import ArchiveWriteError
from resume_builder.models.resume import GeneratedResume

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".resume-builder" / "resumes.db"


class ResumeArchive:
    """Per-user collection of generated resumes, listed newest first."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS generated_resumes (
                    id TEXT PRIMARY KEY,
                    job_description TEXT NOT NULL,
                    resume_content TEXT NOT NULL,
                    user_id TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_generated_resumes_user "
                "ON generated_resumes (user_id, created_at)"
            )

    def add(self, user_id: str, job_description: str, resume_content: str) -> GeneratedResume:
        """Append a generated resume.

        Raises:
            ArchiveWriteError: The record could not be written.
        """
        record = GeneratedResume(
            user_id=user_id,
            job_description=job_description,
            resume_content=resume_content,
        )
        try:
            with self._connect() as conn:
                conn.execute(
                    """INSERT INTO generated_resumes
                       (id, job_description, resume_content, user_id, created_at)
                       VALUES (?, ?, ?, ?, ?)""",
                    (
                        record.id,
                        record.job_description,
                        record.resume_content,
                        record.user_id,
                        record.created_at.isoformat(),
                    ),
                )
        except sqlite3.Error as e:
            raise ArchiveWriteError(f"Failed to save resume: {e}") from e
        logger.info("Archived resume %s for user %s", record.id, user_id)
        return record

    def list_for_user(self, user_id: str, limit: int = 50) -> list[GeneratedResume]:
        """Return the user's resumes, newest first."""
        with self._connect() as conn:
            rows = conn.execute(
                """SELECT id, job_description, resume_content, user_id, created_at
                   FROM generated_resumes WHERE user_id = ?
                   ORDER BY created_at DESC, rowid DESC LIMIT ?""",
                (user_id, limit),
            ).fetchall()
        return [self._row_to_resume(row) for row in rows]

    def get(self, user_id: str, resume_id: str) -> GeneratedResume | None:
        """Fetch one resume, scoped to its owner."""
        with self._connect() as conn:
            row = conn.execute(
                """SELECT id, job_description, resume_content, user_id, created_at
                   FROM generated_resumes WHERE id = ? AND user_id = ?""",
                (resume_id, user_id),
            ).fetchone()
        return self._row_to_resume(row) if row else None

    @staticmethod
    def _row_to_resume(row: tuple) -> GeneratedResume:
        return GeneratedResume(
            id=row[0],
            job_description=row[1],
            resume_content=row[2],
            user_id=row[3],
            created_at=datetime.fromisoformat(row[4]),
        )
