# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for database integration tests.

Provides a PostgreSQL engine, a session factory and a seeded directory.
Requires TEST_DATABASE_URL to point at a disposable database.
"""

import os

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.infrastructure.database.models.base import Base
from src.infrastructure.database.models.directory import (
    Section,
    Strand,
    Student,
    StudentEnrollment,
    Subject,
    Teacher,
)


@pytest.fixture(scope="session")
def db_url() -> str:
    """Get portal database URL for tests."""
    url = os.environ.get("TEST_DATABASE_URL")
    if not url:
        pytest.skip("TEST_DATABASE_URL not set")
    return url


async def drop_everything(engine) -> None:
    """Drop all portal tables and the migration version table."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.execute(text("DROP TABLE IF EXISTS alembic_version"))


@pytest.fixture
def drop_schema():
    """Provide the schema teardown helper."""
    return drop_everything


@pytest_asyncio.fixture(scope="function")
async def db_engine(db_url: str):
    """Create async engine with a freshly created schema."""
    engine = create_async_engine(db_url, echo=False)

    await drop_everything(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await drop_everything(engine)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the test engine."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def seeded_directory(session_factory):
    """Seed one STEM section with three students enrolled for 2024-2025 1st semester.

    A fourth student is enrolled in another section of the same term, and a
    fifth has a pending enrollment that does not count.
    """
    async with session_factory() as session:
        session.add(Strand(id="stem", name="STEM"))
        await session.flush()
        session.add_all(
            [
                Section(id="sec-a", name="STEM 11-A", strand_id="stem"),
                Section(id="sec-b", name="STEM 11-B", strand_id="stem"),
                Subject(id="subj-math", name="General Mathematics", strand_id="stem"),
                Subject(id="subj-oral", name="Oral Communication", strand_id="stem"),
                Teacher(employee_id="T-001", first_name="Maria", last_name="Santos"),
                Student(student_id="2024-0001", first_name="Ana", last_name="Bautista"),
                Student(student_id="2024-0002", first_name="ben", last_name="cruz"),
                Student(student_id="2024-0003", first_name="Carlo", last_name="Reyes"),
                Student(student_id="2024-0004", first_name="Dina", last_name="Abad"),
                Student(student_id="2024-0005", first_name="Eli", last_name="Go"),
            ]
        )
        await session.flush()
        session.add_all(
            [
                StudentEnrollment(
                    student_id=student_id,
                    section_id=section_id,
                    school_year="2024-2025",
                    semester="1st",
                    status=status,
                )
                for student_id, section_id, status in [
                    ("2024-0001", "sec-a", "enrolled"),
                    ("2024-0002", "sec-a", "approved"),
                    ("2024-0003", "sec-a", "enrolled"),
                    ("2024-0004", "sec-b", "enrolled"),
                    ("2024-0005", "sec-a", "pending"),
                ]
            ]
        )
        await session.commit()
