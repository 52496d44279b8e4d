"""
Test configuration and fixtures.
"""
import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import Engine
from sqlmodel import Session, SQLModel

TEST_SECRET = "test-secret-for-pos-api-0123456789abcdef"

# Модульные настройки приложения читаются при импорте, секрет задаём до него
os.environ["AUTH_SECRET"] = TEST_SECRET

from restaurant_pos.db import create_db_engine
from restaurant_pos.db.menu import Category, Item
from restaurant_pos.db.tables import DiningTable, TableSession
from restaurant_pos.settings import Settings
from restaurant_pos.web import app


@pytest.fixture
def settings() -> Settings:
    return Settings(db_url="sqlite://", run_migrations=False, auth_secret=TEST_SECRET)


@pytest.fixture
def engine(settings: Settings) -> Generator[Engine, None, None]:
    """Fresh in-memory database per test."""
    engine = create_db_engine(settings)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine: Engine, settings: Settings) -> TestClient:
    """Test client wired to the test engine. Lifespan is not run, so no migrations."""
    app.state.settings = settings
    app.state.engine = engine
    return TestClient(app)


def make_token(subject: str = "user-1", secret: str = TEST_SECRET, expires_in: timedelta = timedelta(hours=1)) -> str:
    claims = {
        "sub": subject,
        "email": "cashier@example.com",
        "name": "Cashier",
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(claims, secret, algorithm="HS256")


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def menu(db: Session) -> dict:
    """Two categories with two items each."""
    appetizers = Category(name="Appetizers")
    beverages = Category(name="Beverages")
    db.add(appetizers)
    db.add(beverages)
    db.commit()

    items = {
        "spring_rolls": Item(name="Spring Rolls", price=Decimal("5.99"), category_id=appetizers.id),
        "garlic_bread": Item(name="Garlic Bread", price=Decimal("4.50"), category_id=appetizers.id),
        "coke": Item(name="Coke", price=Decimal("2.00"), category_id=beverages.id),
        "lemonade": Item(name="Lemonade", price=Decimal("2.50"), category_id=beverages.id),
    }
    for item in items.values():
        db.add(item)
    db.commit()

    result = {"appetizers": appetizers.id, "beverages": beverages.id}
    result.update({key: item.id for key, item in items.items()})
    return result


@pytest.fixture
def table_session(db: Session) -> dict:
    """Table 1 with one active session."""
    table = DiningTable(table_number=1)
    db.add(table)
    db.commit()

    table_session = TableSession(table_id=table.id, customer_name="Alice")
    db.add(table_session)
    db.commit()
    return {"table_id": table.id, "session_id": table_session.id}


@pytest.fixture
def token_factory():
    return make_token
