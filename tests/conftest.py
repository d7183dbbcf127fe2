import os
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from core.database import build_engine, build_session_factory, init_db
from core.security import hash_password
from crud import card as crud_card
from crud import user as crud_user
from main import create_app
from models import CardStatus, Category, Role
from services import auth_service
from utils.config import Settings

PASSWORD = "correct-horse-9"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        game_sweep_interval_secs=3600,
    )


@pytest.fixture
def engine(settings):
    engine = build_engine(settings.database_url)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def api_db(client, app):
    """A session on the same database the test client talks to."""
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def make_user(db, username, role=Role.USER, password=PASSWORD):
    return crud_user.create_user(
        db,
        first_name="Test",
        last_name="User",
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(password),
        role=role,
    )


def login_as(db, username, role=Role.USER):
    make_user(db, username, role=role)
    return auth_service.login(db, username, PASSWORD)


def make_card(db, category=Category.BONES, status=CardStatus.APPROVED, english="Femur", created_by=None):
    return crud_card.create_card(
        db,
        category=category,
        english=english,
        latin=f"{english} (lat)",
        image_path=f"/cards/{category.value.lower()}/{english.lower()}.png",
        status=status,
        created_by=created_by,
    )


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_token(db):
    return login_as(db, "admin", role=Role.ADMIN)


@pytest.fixture
def user_token(db):
    return login_as(db, "player")
