import os
import sys
import uuid
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Keep tests off any developer database
os.environ.setdefault("DATABASE_URL", "sqlite://")

# Ensure the project root is on sys.path so `import triagex` works when running
# pytest from the repository root without installing the package.
ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from triagex.app import app
from triagex.db.session import Base, get_db
from triagex.auth.jwt import create_access_token, hash_password
from triagex.models.user import User
from triagex.utils.rate_limit import limiter


# In-memory SQLite shared across connections
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def create_schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = _override_get_db

# Code that imports SessionLocal/engine directly should see the test engine too
import triagex.db.session as session_mod
session_mod.engine = engine
session_mod.SessionLocal = TestingSessionLocal
import triagex.models as models_mod
models_mod.engine = engine


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    limiter.reset()
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def make_user(db, email=None, password="secret123", name="Test User"):
    user = User(
        id=str(uuid.uuid4()),
        email=email or f"{uuid.uuid4().hex[:8]}@example.com",
        hashed_password=hash_password(password),
        name=name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers_for(user_id: str):
    token = create_access_token({"sub": user_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def auth_headers(user):
    return auth_headers_for(user.id)


@pytest.fixture
def other_user(db):
    return make_user(db, name="Someone Else")


@pytest.fixture
def headers_for():
    return auth_headers_for
