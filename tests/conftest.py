"""Shared test fixtures - async DB, client, auth helpers, factories.

Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import os

# Set test JWT_SECRET before any other import touches pydantic-settings
os.environ.setdefault("JWT_SECRET", "test-secret-for-ci-do-not-use-in-production")
# Cheap hashing keeps the suite fast
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from orgchart.auth.security import hash_password, issue_access_token
from orgchart.auth.service import build_claims
from orgchart.common.constants import AddressType, Role
from orgchart.config import settings
from orgchart.core_hr.models import Address, Department, Employee
from orgchart.database import Base, get_db
from orgchart.main import create_app

# ── SQLite compat: compile PG-specific types ────────────────────────

from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.ext.compiler import compiles


@compiles(PG_UUID, "sqlite")
def _uuid_sqlite(element, compiler, **kw):
    return "CHAR(36)"


# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine.sync_engine, "connect")
def _register_sqlite_functions(dbapi_conn, connection_record):
    """Register NOW() and enforce foreign keys like PostgreSQL does."""
    dbapi_conn.create_function(
        "NOW", 0, lambda: datetime.now(timezone.utc).isoformat(),
    )
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)

DEFAULT_PASSWORD = "secret123"
# Hashed once; bcrypt is slow even at low cost.
DEFAULT_PASSWORD_HASH = hash_password(DEFAULT_PASSWORD)


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from orgchart.common.rate_limit import limiter

    limiter.reset()
    yield


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance with DB dependency overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Model factories ─────────────────────────────────────────────────

def _make_department(
    *,
    name: str = "Engineering",
    description: Optional[str] = "Builds the product",
) -> dict:
    return dict(
        id=uuid.uuid4(),
        name=name,
        description=description,
    )


def _make_employee(
    *,
    first_name: str = "Test",
    last_name: str = "User",
    official_email: Optional[str] = None,
    contact_number: Optional[str] = None,
    role: Optional[Role] = Role.EMPLOYEE,
    designation: Optional[str] = "Engineer",
    department_id: Optional[uuid.UUID] = None,
    reporting_manager_id: Optional[uuid.UUID] = None,
) -> dict:
    suffix = uuid.uuid4().hex[:8]
    return dict(
        id=uuid.uuid4(),
        first_name=first_name,
        last_name=last_name,
        official_email=official_email or f"user.{suffix}@example.com",
        contact_number=contact_number or f"98{int(suffix, 16) % 10**8:08d}",
        password_hash=DEFAULT_PASSWORD_HASH,
        role=role,
        designation=designation,
        department_id=department_id,
        reporting_manager_id=reporting_manager_id,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


def _make_address(*, address_type: AddressType = AddressType.PERMANENT) -> dict:
    return dict(
        address_type=address_type.value,
        line1="12 MG Road",
        city="Pune",
        state="Maharashtra",
        pincode="411001",
        country="India",
    )


# ── Seeding helpers ─────────────────────────────────────────────────
# Each helper commits and clears the identity map so services under
# test always load fresh rows.


async def seed_department(db: AsyncSession, **kwargs) -> Department:
    dept = Department(**_make_department(**kwargs))
    db.add(dept)
    await db.commit()
    db.expunge_all()
    return dept


async def seed_employee(
    db: AsyncSession,
    *,
    addresses: Optional[list[AddressType]] = None,
    **kwargs,
) -> Employee:
    emp = Employee(**_make_employee(**kwargs))
    emp.addresses = [
        Address(**{**_make_address(address_type=t), "address_type": t})
        for t in (addresses or [])
    ]
    db.add(emp)
    await db.commit()
    db.expunge_all()
    return emp


async def seed_orphaned_report(db: AsyncSession, **kwargs) -> Employee:
    """Employee whose reporting-manager id points at no row."""
    await db.execute(text("PRAGMA foreign_keys=OFF"))
    try:
        return await seed_employee(db, reporting_manager_id=uuid.uuid4(), **kwargs)
    finally:
        await db.execute(text("PRAGMA foreign_keys=ON"))
        await db.commit()


def signup_payload(**overrides) -> dict:
    """JSON body for POST /auth/signup."""
    suffix = uuid.uuid4().hex[:8]
    body = {
        "first_name": "Priya",
        "last_name": "Sharma",
        "official_email": f"priya.{suffix}@example.com",
        "contact_number": f"97{int(suffix, 16) % 10**8:08d}",
        "password": DEFAULT_PASSWORD,
        "designation": "Analyst",
    }
    body.update(overrides)
    return body


# ── Auth helpers ────────────────────────────────────────────────────

def create_access_token(employee: Employee) -> str:
    """Sign a token exactly as login would for *employee*."""
    token, _ = issue_access_token(employee.official_email, build_claims(employee))
    return token


def create_expired_token(employee: Employee) -> str:
    payload = {
        **build_claims(employee),
        "sub": employee.official_email,
        "type": "access",
        "exp": datetime.now(timezone.utc) - timedelta(hours=1),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth_headers_for(employee: Employee) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(employee)}"}


@pytest.fixture
async def super_admin(db) -> Employee:
    return await seed_employee(
        db,
        first_name="Asha",
        last_name="Rao",
        role=Role.SUPER_ADMIN,
        designation="CEO",
    )


@pytest.fixture
async def admin(db) -> Employee:
    return await seed_employee(db, first_name="Arjun", last_name="Mehta", role=Role.ADMIN)


@pytest.fixture
async def employee(db) -> Employee:
    return await seed_employee(db, first_name="Neha", last_name="Iyer", role=Role.EMPLOYEE)
