import os

# Must be set before zenith is imported
os.environ["ENVIRONMENT"] = "development"
os.environ["LOCAL_DATABASE_URL"] = "sqlite://"
os.environ["CLEANUP_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from zenith.core.security import get_password_hash
from zenith.db.base_class import Base
from zenith.db.session import enable_sqlite_foreign_keys, get_db
from zenith.main import app
from zenith.models import Category, Post, PostStatus, Role, User
from zenith.services.authorization import Actor
from tests.utils_jwt import auth_header_for

TEST_PASSWORD = "SecurePass123!"
# Hashing once keeps bcrypt out of every fixture
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture
def engine():
    """In-memory SQLite engine, fresh for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Create a SQLAlchemy session for tests."""
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    """Create a FastAPI test client."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    # Clear dependency overrides
    app.dependency_overrides = {}


@pytest.fixture
def make_user(db_session):
    """Factory creating persisted users with the shared test password."""
    def _make_user(username, role=Role.USER, email=None):
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            password=TEST_PASSWORD_HASH,
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def author(make_user):
    return make_user("alice")


@pytest.fixture
def other_user(make_user):
    return make_user("bob")


@pytest.fixture
def moderator(make_user):
    return make_user("mod", role=Role.MODERATOR)


@pytest.fixture
def admin(make_user):
    return make_user("root", role=Role.ADMIN)


@pytest.fixture
def author_actor(author):
    return Actor.from_user(author)


@pytest.fixture
def other_actor(other_user):
    return Actor.from_user(other_user)


@pytest.fixture
def moderator_actor(moderator):
    return Actor.from_user(moderator)


@pytest.fixture
def admin_actor(admin):
    return Actor.from_user(admin)


@pytest.fixture
def auth_header(author):
    """Return an Authorization header with a valid JWT for the post author."""
    return auth_header_for(author)


@pytest.fixture
def category(db_session):
    category = Category(name="Engineering")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def make_post(db_session, category):
    """Factory inserting posts directly, bypassing the service rules."""
    counter = {"n": 0}

    def _make_post(author, status=PostStatus.PUBLISHED, title=None, **kwargs):
        counter["n"] += 1
        title = title or f"Post {counter['n']}"
        post = Post(
            title=title,
            slug=f"post-{counter['n']}",
            content=kwargs.pop("content", "Some words to read"),
            status=status,
            author_id=author.id,
            category_id=kwargs.pop("category_id", category.id),
            **kwargs,
        )
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make_post
