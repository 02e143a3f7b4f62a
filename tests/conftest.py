import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace.main import app
from marketplace.api.deps import get_db
from marketplace.core.auth import create_access_token
from marketplace.core.database import Base
from marketplace.core.security import hash_password
from marketplace.models.property import Property
from marketplace.models.user import User


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="TENANT", name=None, email=None):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"{role.title()} {n}",
            email=email or f"{role.lower()}{n}@example.com",
            password_hash=hash_password("secret123"),
            phone_number=f"0300-000000{n}",
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_property(db):
    def _make(owner, **overrides):
        data = {
            "title": "Two bedroom flat",
            "description": "Near the park",
            "type": "apartment",
            "area": 850.0,
            "amount": Decimal("25000.00"),
            "location": "Lahore",
        }
        data.update(overrides)
        prop = Property(owner_id=owner.id, **data)
        db.add(prop)
        db.commit()
        db.refresh(prop)
        return prop

    return _make


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def owner(make_user):
    return make_user("OWNER")


@pytest.fixture
def tenant(make_user):
    return make_user("TENANT")


@pytest.fixture
def headers():
    return auth_headers
