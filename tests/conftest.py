# ruff: noqa: E402
# File: /tests/conftest.py
import asyncio
import pathlib
import sys

# Make repo root importable as "taskviews"
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from taskviews.core.errors import RecordFetchError
from taskviews.db.base_class import Base
from taskviews.main import app
from taskviews.store.persistence import InMemoryPersistenceBridge

TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def _create_schema():
    Base.metadata.create_all(bind=engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session():
    connection = engine.connect()
    trans = connection.begin()
    try:
        session = TestingSessionLocal(bind=connection)
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


@pytest.fixture()
def client(db_session):
    from taskviews.db.session import get_db  # late import to avoid circulars

    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def bridge():
    return InMemoryPersistenceBridge()


class FakeRecordSource:
    """Serves canned partitions; partitions listed in `failing` raise.

    A `(partition, subject_id)` key serves rows for that subject only.
    """

    def __init__(self, data=None, failing=()):
        self.data = data or {}
        self.failing = set(failing)
        self.calls = []

    async def fetch(self, partition, subject_id=None):
        self.calls.append((partition, subject_id))
        await asyncio.sleep(0)
        if partition in self.failing:
            raise RecordFetchError(partition, "HTTP 503")
        rows = self.data.get((partition, subject_id), self.data.get(partition, []))
        return [dict(r) for r in rows]


@pytest.fixture()
def fake_source_cls():
    return FakeRecordSource
