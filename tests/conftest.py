# tests/conftest.py
import os
import tempfile

# Settings are cached on first import, so the environment goes first
os.environ["NV_DATABASE_URL"] = "sqlite://"
os.environ["NV_SECRET_KEY"] = "test-secret-key"
os.environ["NV_PASSWORD_HASH_METHOD"] = "pbkdf2:sha256:1000"
os.environ["NV_UPLOAD_DIR"] = tempfile.mkdtemp(prefix="newsverify-uploads-")
os.environ["NV_PUBLIC_BASE_URL"] = "http://testserver"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from newsverify.app import app
from newsverify.database import Base, Comment, News, User, Vote, get_db
from newsverify.models import NewsStatus, UserRole, Visibility
from newsverify.security import hash_password, issue_token


PASSWORD = "secret123"


@pytest.fixture()
def engine():
    # One shared in-memory database per test
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
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


@pytest.fixture()
def make_user(session_factory):
    counter = {"n": 0}

    def _make(role=UserRole.READER, email=None, first_name="Test", last_name="User"):
        counter["n"] += 1
        with session_factory() as s:
            user = User(
                email=email or f"user{counter['n']}@example.com",
                password_hash=hash_password(PASSWORD),
                first_name=first_name,
                last_name=last_name,
                role=UserRole(role).value,
            )
            s.add(user)
            s.commit()
            return user.id

    return _make


@pytest.fixture()
def make_news(session_factory):
    counter = {"n": 0}

    def _make(reporter_id, topic=None, short_detail="Short detail", full_detail="Full detail",
              status=NewsStatus.UNKNOWN, hidden=False):
        counter["n"] += 1
        with session_factory() as s:
            news = News(
                topic=topic or f"Topic {counter['n']}",
                short_detail=short_detail,
                full_detail=full_detail,
                status=NewsStatus(status).value,
                visibility=Visibility.HIDDEN.value if hidden else Visibility.ACTIVE.value,
                reporter_id=reporter_id,
            )
            s.add(news)
            s.commit()
            return news.id

    return _make


@pytest.fixture()
def make_comment(session_factory):
    def _make(news_id, user_id, content="A comment", hidden=False):
        with session_factory() as s:
            comment = Comment(
                news_id=news_id,
                user_id=user_id,
                content=content,
                visibility=Visibility.HIDDEN.value if hidden else Visibility.ACTIVE.value,
            )
            s.add(comment)
            s.commit()
            return comment.id

    return _make


@pytest.fixture()
def make_vote(session_factory):
    def _make(news_id, user_id, vote="FAKE"):
        with session_factory() as s:
            v = Vote(news_id=news_id, user_id=user_id, vote=vote)
            s.add(v)
            s.commit()
            return v.id

    return _make


@pytest.fixture()
def auth():
    def _headers(user_id, role=UserRole.READER):
        return {"Authorization": f"Bearer {issue_token(user_id, role)}"}

    return _headers


@pytest.fixture()
def admin(make_user):
    return make_user(UserRole.ADMIN, email="admin@example.com")


@pytest.fixture()
def member(make_user):
    return make_user(UserRole.MEMBER, email="member@example.com")


@pytest.fixture()
def reader(make_user):
    return make_user(UserRole.READER, email="reader@example.com")
