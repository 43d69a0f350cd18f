"""Async SQLite repository for the profile and saved applications."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime
from pathlib import Path

import aiosqlite

from tailorloop.storage.models import DEFAULT_STATUS, Application, Profile

PROFILE_ID = 1

CREATE_PROFILE_SQL = """
CREATE TABLE IF NOT EXISTS profile (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    resume_template TEXT NOT NULL DEFAULT '',
    cover_letter_template TEXT NOT NULL DEFAULT '',
    instructions TEXT NOT NULL DEFAULT '',
    cover_letter_instructions TEXT NOT NULL DEFAULT '',
    resume_file_name TEXT NOT NULL DEFAULT '',
    cover_letter_file_name TEXT NOT NULL DEFAULT '',
    current_platform TEXT NOT NULL DEFAULT '',
    updated_at TEXT NOT NULL
)
"""

CREATE_APPLICATIONS_SQL = """
CREATE TABLE IF NOT EXISTS applications (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    company TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'Applied',
    platform TEXT NOT NULL DEFAULT '',
    resume_latex TEXT NOT NULL DEFAULT '',
    cover_letter TEXT NOT NULL DEFAULT '',
    job_description TEXT NOT NULL DEFAULT '',
    ats_score REAL,
    interview_score REAL,
    created_at TEXT NOT NULL
)
"""

CREATE_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_applications_created ON applications(created_at);
"""

PROFILE_FIELDS = tuple(Profile.model_fields)

APPLICATION_COLUMNS = (
    "company",
    "status",
    "platform",
    "resume_latex",
    "cover_letter",
    "job_description",
    "ats_score",
    "interview_score",
)


class StorageRepository:
    """CRUD access to the profile row and the applications table."""

    def __init__(self, db_path: Path | str):
        """Initialize the repository.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None

    @asynccontextmanager
    async def _get_connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        if self._connection is None:
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
        yield self._connection

    async def initialize(self) -> None:
        """Create tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        async with self._get_connection() as conn:
            await conn.execute(CREATE_PROFILE_SQL)
            await conn.execute(CREATE_APPLICATIONS_SQL)
            await conn.executescript(CREATE_INDEX_SQL)
            await conn.commit()

    async def close(self) -> None:
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    # -- profile -----------------------------------------------------------

    async def get_profile(self) -> Profile | None:
        """Return the stored profile, or None if it was never saved."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM profile WHERE id = ?", (PROFILE_ID,)
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return Profile(**{name: row[name] or "" for name in PROFILE_FIELDS})

    async def save_profile(self, profile: Profile) -> None:
        """Insert or replace the single profile row."""
        columns = ", ".join(PROFILE_FIELDS)
        placeholders = ", ".join("?" for _ in PROFILE_FIELDS)
        updates = ", ".join(f"{name} = excluded.{name}" for name in PROFILE_FIELDS)
        values = [getattr(profile, name) for name in PROFILE_FIELDS]

        async with self._get_connection() as conn:
            await conn.execute(
                f"""
                INSERT INTO profile (id, {columns}, updated_at)
                VALUES (?, {placeholders}, ?)
                ON CONFLICT(id) DO UPDATE SET {updates}, updated_at = excluded.updated_at
                """,
                (PROFILE_ID, *values, datetime.now().isoformat()),
            )
            await conn.commit()

    # -- applications ------------------------------------------------------

    async def create_application(self, application: Application) -> Application:
        """Insert an application and return it with its new id."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                f"""
                INSERT INTO applications ({", ".join(APPLICATION_COLUMNS)}, created_at)
                VALUES ({", ".join("?" for _ in APPLICATION_COLUMNS)}, ?)
                """,
                (
                    *(getattr(application, name) for name in APPLICATION_COLUMNS),
                    application.created_at.isoformat(),
                ),
            )
            await conn.commit()
            new_id = cursor.lastrowid

        return replace(application, id=new_id)

    async def get_application(self, application_id: int) -> Application | None:
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM applications WHERE id = ?", (application_id,)
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return self._row_to_application(row)

    async def list_applications(self, limit: int | None = None) -> list[Application]:
        """List applications, newest first."""
        async with self._get_connection() as conn:
            if limit is not None:
                cursor = await conn.execute(
                    "SELECT * FROM applications ORDER BY created_at DESC, id DESC LIMIT ?",
                    (limit,),
                )
            else:
                cursor = await conn.execute(
                    "SELECT * FROM applications ORDER BY created_at DESC, id DESC"
                )
            rows = await cursor.fetchall()

        return [self._row_to_application(row) for row in rows]

    async def update_application(self, application_id: int, **changes) -> Application | None:
        """Update the given columns of an application.

        Returns:
            The updated application, or None if it does not exist.

        Raises:
            ValueError: If a change names an unknown column.
        """
        unknown = set(changes) - set(APPLICATION_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown application fields: {sorted(unknown)}")

        if changes:
            assignments = ", ".join(f"{name} = ?" for name in changes)
            async with self._get_connection() as conn:
                await conn.execute(
                    f"UPDATE applications SET {assignments} WHERE id = ?",
                    (*changes.values(), application_id),
                )
                await conn.commit()

        return await self.get_application(application_id)

    async def delete_application(self, application_id: int) -> bool:
        """Delete an application. Returns True if a row was removed."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "DELETE FROM applications WHERE id = ?", (application_id,)
            )
            await conn.commit()
            return cursor.rowcount > 0

    def _row_to_application(self, row: aiosqlite.Row) -> Application:
        return Application(
            id=row["id"],
            company=row["company"],
            status=row["status"] or DEFAULT_STATUS,
            platform=row["platform"] or "",
            resume_latex=row["resume_latex"] or "",
            cover_letter=row["cover_letter"] or "",
            job_description=row["job_description"] or "",
            ats_score=row["ats_score"],
            interview_score=row["interview_score"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
