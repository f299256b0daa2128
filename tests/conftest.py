from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

import portfolio_cms.data.db as app_db
from portfolio_cms.api.main import app
from portfolio_cms.data.db import init_db
from portfolio_cms.data.models import Project, ProjectCategory, ProjectStatus, User, UserRole
from portfolio_cms.services.auth import hash_password, set_verification_sender

DEFAULT_PASSWORD = "s3cret-pass"


@pytest.fixture
def api_db(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Use a temporary SQLite DB for the test."""
    db_path = tmp_path / "portfolio.db"
    monkeypatch.setenv("DB_URL", f"sqlite:///{db_path.as_posix()}")
    app_db._engine = None
    app_db._SessionLocal = None
    init_db()
    yield
    # Dispose engine to release connections
    app_db.dispose_engine()


@pytest.fixture
def session(api_db: None) -> Iterator[Session]:
    """A session on the temporary DB, committed when the test succeeds."""
    with app_db.get_session() as db_session:
        yield db_session


@pytest.fixture
def sent_verifications() -> Iterator[list[tuple[str, str]]]:
    """Capture ``(email, token)`` for every verification message sent."""
    sent: list[tuple[str, str]] = []
    set_verification_sender(lambda user, token, _url: sent.append((user.email, token)))
    yield sent
    set_verification_sender(None)


@pytest.fixture
def make_user(session: Session) -> Callable[..., User]:
    """Factory for verified, active accounts."""
    counter = {"n": 0}

    def factory(
        role: UserRole = UserRole.USER,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        **fields,
    ) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            password=hash_password(password),
            role=role,
            email_verified=True,
            **fields,
        )
        session.add(user)
        session.flush()
        return user

    return factory


@pytest.fixture
def make_project(session: Session, make_user: Callable[..., User]) -> Callable[..., Project]:
    """Factory for projects written straight to the DB."""
    counter = {"n": 0}

    def factory(author: User | None = None, **fields) -> Project:
        counter["n"] += 1
        values = {
            "title": f"Project {counter['n']}",
            "slug": f"project-{counter['n']}",
            "description": "A building.",
            "category": ProjectCategory.RESIDENTIAL,
            "status": ProjectStatus.PUBLISHED,
        }
        values.update(fields)
        author = author or make_user(UserRole.CRAFTER)
        project = Project(author_id=author.id, **values)
        session.add(project)
        session.flush()
        return project

    return factory


@pytest.fixture
def client(api_db: None) -> TestClient:
    """Create a test client for the API."""
    return TestClient(app)


@pytest.fixture
def auth_headers(api_db: None, client: TestClient) -> Callable[..., dict[str, str]]:
    """Factory: create a verified account with ``role`` and return its bearer header."""
    counter = {"n": 0}

    def factory(role: UserRole = UserRole.USER, email: str | None = None) -> dict[str, str]:
        counter["n"] += 1
        email = email or f"{role.value.lower()}{counter['n']}@example.com"
        with app_db.get_session() as db_session:
            db_session.add(
                User(
                    email=email,
                    password=hash_password(DEFAULT_PASSWORD),
                    role=role,
                    email_verified=True,
                )
            )
        response = client.post(
            "/api/auth/login", json={"email": email, "password": DEFAULT_PASSWORD}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return factory


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Automatically add api_db fixture to tests in API test files."""
    for item in items:
        # Check if test file name contains "api" (case-insensitive)
        test_file_path = Path(str(item.fspath))
        if "api" in test_file_path.stem.lower():
            item.add_marker(pytest.mark.usefixtures("api_db"))
