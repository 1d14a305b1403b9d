"""
Test fixtures - in-memory SQLite database + HTTP client
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from civicresolve.database import Base, get_db
from civicresolve.main import app
from civicresolve.models.contractor import Contractor
from civicresolve.services import blob_store
from civicresolve.services.blob_store import LocalBlobStore


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
async def file_sessions(tmp_path):
    """
    Session factory over a file-backed SQLite database, for tests that
    open several sessions at once.

    Transactions start with BEGIN IMMEDIATE so concurrent writers queue on
    the busy timeout instead of failing on a lock upgrade.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'civicresolve-test.db'}",
        connect_args={"timeout": 30},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _no_implicit_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """Insert baseline test data: two contractors"""
    acme = Contractor(id="CTR-001", name="Acme Roadworks", points=10, quality_rating=4.0)
    bolt = Contractor(id="CTR-002", name="Bolt Electricals", points=0, quality_rating=3.5)

    db_session.add_all([acme, bolt])
    await db_session.commit()

    return {"acme": acme, "bolt": bolt}


@pytest.fixture()
def upload_dir(tmp_path, monkeypatch):
    """Point photo uploads at a temporary directory"""
    monkeypatch.setattr(blob_store.settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture()
def photo_store(upload_dir):
    return LocalBlobStore(upload_dir=str(upload_dir))


@pytest_asyncio.fixture()
async def client(db_session, seed_data, upload_dir):
    """httpx AsyncClient bound to the FastAPI app"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
