"""Pytest configuration and fixtures.

Each test gets a fresh SQLite database file; HTTP tests run against app.main:app
with get_db overridden to use it.
"""

from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.database.base import Base
from app.core.database.engine import get_db
from app.core.limiter import limiter
from app.features.permissions.dependencies import SecurityStore
from app.features.permissions.models import PERMISSION_GRANT, Group, Permission, group_members
from app.features.users.auth import create_access_token
from app.features.users.models import User
from app.main import app


@pytest.fixture
async def session_factory(tmp_path):
    """Session factory bound to a throwaway database with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncSession:
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(db_session: AsyncSession) -> SecurityStore:
    return SecurityStore(db_session)


@pytest.fixture
async def client(session_factory) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_group(db_session: AsyncSession):
    """Create a group, optionally nested and with granted permission codes."""

    async def _make(title: str, parent: Group | None = None, codes: tuple[str, ...] = (), sort: int = 0) -> Group:
        group = Group(title=title, parent_id=parent.id if parent else None, sort=sort)
        db_session.add(group)
        await db_session.flush()
        for code in codes:
            db_session.add(Permission(code=code, group_id=group.id, type=PERMISSION_GRANT))
        await db_session.commit()
        return group

    return _make


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Create a user in the given groups."""

    async def _make(
        email: str,
        first_name: str | None = None,
        surname: str | None = None,
        groups: tuple[Group, ...] = (),
        last_visited: datetime | None = None,
        is_active: bool = True,
    ) -> User:
        user = User(
            email=email,
            first_name=first_name,
            surname=surname,
            last_visited=last_visited,
            is_active=is_active,
        )
        db_session.add(user)
        await db_session.flush()
        for group in groups:
            await db_session.execute(group_members.insert().values(group_id=group.id, user_id=user.id))
        await db_session.commit()
        return user

    return _make


@pytest.fixture
def grant(db_session: AsyncSession):
    """Grant (or deny, with type=0) a code directly to a user."""

    async def _grant(user: User, code: str, type: int = PERMISSION_GRANT) -> Permission:
        permission = Permission(code=code, user_id=user.id, type=type)
        db_session.add(permission)
        await db_session.commit()
        return permission

    return _grant


@pytest.fixture
def headers_for():
    """Authorization headers carrying a bearer token for a user."""

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers
