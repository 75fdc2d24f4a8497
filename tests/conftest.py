"""Shared pytest fixtures for the billing backend tests.

Each test gets a fresh application bound to an in-memory SQLite database
holding a small catalog:

    1  Pen       10.00   stock 5
    2  Notebook  45.50   stock 20
    3  Eraser     5.00   stock 0
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy.pool import StaticPool

from billing.main import create_app
from billing.models import db, Bill, BillItem, Product


TEST_CATALOG = [
    (1, "Pen", Decimal("10.00"), 5),
    (2, "Notebook", Decimal("45.50"), 20),
    (3, "Eraser", Decimal("5.00"), 0),
]


def make_app(uri: str = "sqlite://", **overrides):
    config = {
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": uri,
        "SEED_CATALOG": False,
        "RESET_STOCK_DEFAULT": 500,
    }
    if uri == "sqlite://":
        # one shared in-memory database for every session of the app
        config["SQLALCHEMY_ENGINE_OPTIONS"] = {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    config.update(overrides)
    return create_app(config)


def dispose_app(app) -> None:
    """Release the scoped session before closing the engine's connections."""
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


def add_catalog(app, catalog=TEST_CATALOG) -> None:
    with app.app_context():
        for pid, name, price, stock in catalog:
            db.session.add(Product(id=pid, name=name, price=price, stock=stock))
        db.session.commit()


@pytest.fixture
def app():
    """Application with the test catalog loaded."""
    application = make_app()
    add_catalog(application)
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()
    dispose_app(application)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def stock_of(app):
    """Return a function reading the committed stock of a product."""

    def _stock(product_id: int) -> int:
        with app.app_context():
            return db.session.get(Product, product_id).stock

    return _stock


@pytest.fixture
def row_counts(app):
    """Return a function giving (bills, bill_items) row counts."""

    def _counts() -> tuple[int, int]:
        with app.app_context():
            return Bill.query.count(), BillItem.query.count()

    return _counts
