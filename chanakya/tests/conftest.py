"""
Test fixtures - in-memory SQLite database + HTTP client bound to the app
"""
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from chanakya.database import Base, get_db
from chanakya.main import app
from chanakya.models.supplier import SupplierStatus
from chanakya.tests.factories import make_supplier
from chanakya.utils.helpers import utcnow
from datetime import timedelta


@pytest_asyncio.fixture()
async def db_session():
    """Create a fresh in-memory SQLite database for each test"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """Insert baseline suppliers: two scored and active, one pending and unscored"""
    now = utcnow()
    alpha = make_supplier(
        "Alpha Tech", industry="Technology", score=90,
        certifications=["ISO 9001"], established_year=2010,
        created_at=now - timedelta(days=3), updated_at=now - timedelta(days=3),
    )
    beta = make_supplier(
        "Beta Manufacturing", industry="Manufacturing", score=75,
        created_at=now - timedelta(days=2), updated_at=now - timedelta(days=2),
    )
    gamma = make_supplier(
        "Gamma Green", industry="Sustainable Materials", status=SupplierStatus.PENDING,
        created_at=now - timedelta(days=1), updated_at=now - timedelta(days=1),
    )

    db_session.add_all([alpha, beta, gamma])
    await db_session.commit()
    await db_session.refresh(alpha)
    await db_session.refresh(beta)
    await db_session.refresh(gamma)

    return {"alpha": alpha, "beta": beta, "gamma": gamma}


@pytest_asyncio.fixture()
async def client(db_session, seed_data):
    """httpx AsyncClient bound to the FastAPI app"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def empty_client(db_session):
    """Client over an empty supplier table"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
