"""Shared fixtures: in-memory database per test and small record factories."""

import os

# Settings are read once at import time: point them at SQLite before any app import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["SMTP_HOST"] = ""
os.environ["SECRET_KEY"] = "test-secret"

from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy.orm import Session, sessionmaker

from app.config import get_settings
from app.domain.models.category import Category
from app.domain.models.client import Client
from app.domain.models.import_job import ImportJob  # noqa: F401
from app.domain.models.product import Product
from app.domain.models.sale import Sale, SaleItem  # noqa: F401
from app.domain.models.user import User  # noqa: F401
from app.infrastructure.database import Base, build_engine


@pytest.fixture
def engine():
    """Fresh in-memory SQLite engine (StaticPool) with all tables."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine) -> Session:
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def file_dirs(tmp_path: Path, monkeypatch):
    """Receipts and uploads go to a per-test temporary directory."""
    settings = get_settings()
    monkeypatch.setattr(settings, "RECEIPTS_DIR", str(tmp_path / "receipts"))
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    return tmp_path


@pytest.fixture
def make_client(db):
    """Factory persisting a Client."""
    counter = {"n": 0}

    def _make(**overrides) -> Client:
        counter["n"] += 1
        values = {
            "first_name": "Ana",
            "last_name": "Gomez",
            "email": f"client{counter['n']}@example.com",
            "phone_number": "3001234567",
            "address": "Calle 1",
            "role": "Client",
        }
        values.update(overrides)
        client = Client(**values)
        db.add(client)
        db.commit()
        return client

    return _make


@pytest.fixture
def make_product(db):
    """Factory persisting a Product."""
    counter = {"n": 0}

    def _make(**overrides) -> Product:
        counter["n"] += 1
        values = {
            "name": f"Product {counter['n']}",
            "description": "Test product",
            "unit_price": Decimal("10.00"),
            "stock": 10,
        }
        values.update(overrides)
        product = Product(**values)
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def category(db) -> Category:
    category = Category(name="Cement")
    db.add(category)
    db.commit()
    return category
