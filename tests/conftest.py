import os
import tempfile
import time
import uuid
from types import SimpleNamespace

# settings 는 import 시점에 읽히므로 sehat import 전에 세팅
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BLOB_STORAGE_DIR", tempfile.mkdtemp(prefix="sehat-blobs-"))
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret")

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sehat.core.config import settings
from sehat.core.security import UserContext
from sehat.db.base import Base
from sehat.db.session import get_db
import sehat.db.models  # noqa: F401
from sehat.main import app
from sehat.services.analysis_gateway import AnalysisGateway, get_analysis_gateway
from sehat.services.blob_store import LocalBlobStore, get_blob_store

GOOD_CONTENT = '```json\n{"english":"Haemoglobin is low.","romanUrdu":"Khoon ki kami hai."}\n```'


class FakeCompletions:
    def __init__(self, content=GOOD_CONTENT, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    """chat.completions.create 만 흉내내는 클라이언트"""

    def __init__(self, content=GOOD_CONTENT, error=None):
        self.completions = FakeCompletions(content=content, error=error)
        self.chat = SimpleNamespace(completions=self.completions)

    @property
    def calls(self):
        return self.completions.calls


class SpyBlobStore(LocalBlobStore):
    def __init__(self, root, public_base_url="http://testserver/files"):
        super().__init__(root, public_base_url)
        self.puts = []
        self.deletes = []

    def put(self, key, data):
        self.puts.append(key)
        return super().put(key, data)

    def delete(self, key):
        self.deletes.append(key)
        return super().delete(key)


def make_gateway(content=GOOD_CONTENT, error=None, api_key="test-key"):
    client = FakeOpenAI(content=content, error=error)
    gateway = AnalysisGateway(
        api_key=api_key,
        base_url="https://gateway.test/v1",
        model="test-model",
        client=client,
    )
    return gateway, client


def make_token(user_id, expires_in=3600):
    payload = {"sub": str(user_id), "exp": int(time.time()) + expires_in}
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user():
    return UserContext(user_id=uuid.uuid4())


@pytest.fixture
def other_user():
    return UserContext(user_id=uuid.uuid4())


@pytest.fixture
def blob_store(tmp_path):
    return SpyBlobStore(tmp_path / "blobs")


@pytest.fixture
def gateway_and_client():
    return make_gateway()


@pytest.fixture
def client(db, blob_store, gateway_and_client):
    gateway, _ = gateway_and_client

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_analysis_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {make_token(user.user_id)}"}


@pytest.fixture
def other_auth_headers(other_user):
    return {"Authorization": f"Bearer {make_token(other_user.user_id)}"}
