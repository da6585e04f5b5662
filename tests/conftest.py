"""
Pytest fixtures for practicum tests.

Every test gets its own file-backed SQLite database, so SQL behaves the same
way across connections and nothing leaks between tests.
"""

import os
import uuid
from datetime import date, time
from typing import AsyncGenerator, Optional

# Settings are read at import time by practicum.database; point them at SQLite
# before anything from practicum is imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./practicum_test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only-0123456789")

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from practicum.config import get_settings

get_settings.cache_clear()

from practicum.kernel.identity.actor import Actor
from practicum.kernel.identity.password import hash_password
from practicum.kernel.models import (
    Activity,
    ActivityStatus,
    ActivityType,
    Base,
    Competency,
    CompetencyLevel,
    MentorAssignment,
    ProfileDocument,
    Qualification,
    SessionStatus,
    StudentCompetency,
    TeachingSession,
    User,
    UserRole,
)


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path):
    """Create a test database engine on a fresh SQLite file."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_maker() as session:
        yield session
        await session.rollback()


async def _make_user(session: AsyncSession, email: str, full_name: str, role: UserRole) -> User:
    user = User(
        id=uuid.uuid4(),
        email=email,
        password_hash=hash_password("TestPassword123"),
        full_name=full_name,
        role=role.value,
    )
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "admin@example.com", "Ada Admin", UserRole.ADMIN)


@pytest_asyncio.fixture
async def mentor(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "mentor@example.com", "Morgan Mentor", UserRole.MENTOR)


@pytest_asyncio.fixture
async def other_mentor(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "mentor2@example.com", "Noor Mentor", UserRole.MENTOR)


@pytest_asyncio.fixture
async def student(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "alex@example.com", "Alex Student", UserRole.STUDENT)


@pytest_asyncio.fixture
async def other_student(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "blake@example.com", "Blake Student", UserRole.STUDENT)


@pytest_asyncio.fixture
async def assigned(db_session: AsyncSession, mentor: User, student: User) -> MentorAssignment:
    """``mentor`` reviews ``student``; ``other_student`` has no mentor."""
    assignment = MentorAssignment(mentor_id=mentor.id, student_id=student.id)
    db_session.add(assignment)
    await db_session.flush()
    return assignment


@pytest.fixture
def as_actor():
    """Build the Actor for a user."""
    return Actor.from_user


class RecordFactory:
    """Inserts portfolio records directly, bypassing the record service."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _add(self, obj):
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)
        return obj

    async def qualification(self, owner: User, title: str = "Teaching Certificate",
                            obtained: date = date(2024, 6, 1)) -> Qualification:
        return await self._add(Qualification(
            student_id=owner.id,
            title=title,
            issuing_organization="State Board",
            date_obtained=obtained,
        ))

    async def session_record(self, owner: User, title: str = "Fractions lesson",
                             status: SessionStatus = SessionStatus.COMPLETED,
                             on: date = date(2025, 3, 10)) -> TeachingSession:
        return await self._add(TeachingSession(
            student_id=owner.id,
            title=title,
            session_date=on,
            start_time=time(9, 0),
            status=status.value,
        ))

    async def activity(self, owner: User, title: str = "Assessment workshop",
                       status: ActivityStatus = ActivityStatus.SUBMITTED,
                       on: date = date(2025, 2, 1)) -> Activity:
        return await self._add(Activity(
            student_id=owner.id,
            title=title,
            activity_type=ActivityType.WORKSHOP.value,
            date_completed=on,
            status=status.value,
        ))

    async def competency(self, name: str = "Classroom management",
                         category: str = "Practice") -> Competency:
        return await self._add(Competency(name=name, category=category))

    async def student_competency(self, owner: User, competency: Optional[Competency] = None,
                                 level: CompetencyLevel = CompetencyLevel.INTERMEDIATE) -> StudentCompetency:
        if competency is None:
            competency = await self.competency()
        return await self._add(StudentCompetency(
            student_id=owner.id,
            competency_id=competency.id,
            level=level.value,
        ))

    async def profile_document(self, owner: User, title: str = "Background check") -> ProfileDocument:
        return await self._add(ProfileDocument(student_id=owner.id, title=title))


@pytest.fixture
def records(db_session: AsyncSession) -> RecordFactory:
    return RecordFactory(db_session)
