"""
Shared fixtures: an in-memory SQLite database per test, a session on it and
a FastAPI TestClient whose ``get_db`` dependency uses the same database.
"""

from datetime import datetime
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from plaza import models
from plaza.db.session import Base, get_db
from plaza.main import app


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    ids = count(1)

    def _make_user(username: str | None = None, **kwargs) -> models.User:
        n = next(ids)
        user = models.User(
            username=username or f"user{n}",
            discord_id=str(10_000 + n),
            **kwargs,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_image(db):
    def _make_image(user: models.User, url: str, *, validated: bool = True):
        img = models.UnvalidatedUserSubmittedImage(
            submitter_user_id=user.id,
            url=url,
            validated_at=datetime.utcnow() if validated else None,
        )
        db.add(img)
        db.commit()
        db.refresh(img)
        return img

    return _make_image
