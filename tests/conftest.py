# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from cms_forms.core.security import create_access_token, get_password_hash
from cms_forms.db.base import Base

# Import all models to ensure they are registered with Base
from cms_forms.models import *  # noqa: F401,F403
from cms_forms.models.form import Form, FormField
from cms_forms.models.user import User
from cms_forms.services.data_loader import DataLoader


@pytest.fixture(scope="function")
def test_engine():
    """
    Create an in-memory database per test.
    StaticPool keeps one connection so every session sees the same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db(test_engine) -> Generator[Session, None, None]:
    """
    Create a test database session.
    """
    session_factory = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine, expire_on_commit=False
    )
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def test_user(test_db: Session) -> User:
    """
    Create a test user in the database.
    """
    user = User(
        user_name="testuser",
        password_hash=get_password_hash("testpassword123"),
        email="test@example.com",
        is_active=True,
    )
    test_db.add(user)
    test_db.commit()
    test_db.refresh(user)
    return user


@pytest.fixture(scope="function")
def test_token(test_user: User) -> str:
    """
    Create a valid JWT token for the test user.
    """
    return create_access_token(data={"sub": test_user.user_name})


@pytest.fixture(scope="function")
def auth_headers(test_token: str) -> dict:
    return {"Authorization": f"Bearer {test_token}"}


@pytest.fixture(scope="function")
def loader(test_db: Session) -> DataLoader:
    """
    Silent data loader bound to the test session.
    """
    return DataLoader(test_db, silent_mode=True)


@pytest.fixture(scope="function")
def contact_form(loader: DataLoader) -> Form:
    """
    Create a contact form that shows its confirmation text inline.
    """
    form = loader.create_form(
        "contact",
        {
            "name": "Contact Us",
            "show_text": True,
            "confirmation_text": "Thanks for getting in touch.",
            "notification_email": "",
        },
    )
    loader.create_form_field(
        "contact_name",
        {"form": form, "label": "Name", "name": "name", "required": True, "position": 1},
    )
    loader.create_form_field(
        "contact_email",
        {
            "form": form,
            "label": "Email",
            "name": "email",
            "field_type": "email",
            "required": True,
            "position": 2,
        },
    )
    loader.create_form_field(
        "contact_topic",
        {
            "form": form,
            "label": "Topic",
            "name": "topic",
            "field_type": "select",
            "options": ["General", "Sales"],
            "default_value": "General",
            "position": 3,
        },
    )
    return loader.forms("contact")


@pytest.fixture(scope="function")
def test_client(test_db: Session) -> TestClient:
    """
    Create a test client with database dependency override.
    """
    from cms_forms.api.dependencies import get_db
    from cms_forms.main import create_app

    app = create_app()

    # Return the test_db session directly so all requests share it
    def override_get_db():
        try:
            yield test_db
        except Exception:
            test_db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    return TestClient(app)
