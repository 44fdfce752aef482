import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.auth.utils import create_access_token, get_password_hash, scope_for_role
from app.api.users.models import User
from app.database.database import Base, get_db
from app.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, username, role="USER"):
    user = User(
        username=username,
        email=f"{username}@example.com",
        password=get_password_hash(PASSWORD),
        role=role,
        display_name=username,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token({"sub": user.username, "scope": scope_for_role(user.role)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(db):
    return make_user(db, "alice")


@pytest.fixture
def bob(db):
    return make_user(db, "bob")


@pytest.fixture
def carol(db):
    return make_user(db, "carol")


@pytest.fixture
def admin(db):
    return make_user(db, "admin", role="ADMIN")
