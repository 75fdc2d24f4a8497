# billing/seed.py
import logging
from decimal import Decimal

from sqlalchemy import inspect

from billing.models import db, Product

logger = logging.getLogger(__name__)

# (id, name, price, default stock)
DEFAULT_CATALOG = [
    (1, "Basmati Rice 1kg", Decimal("120.00"), 500),
    (2, "Toor Dal 1kg", Decimal("145.00"), 1000),
    (3, "Sugar 1kg", Decimal("48.00"), 950),
    (4, "Sunflower Oil 1L", Decimal("165.00"), 600),
    (5, "Wheat Flour 5kg", Decimal("260.00"), 450),
    (6, "Tea Powder 250g", Decimal("135.00"), 800),
    (7, "Instant Coffee 100g", Decimal("290.00"), 700),
    (8, "Milk 1L", Decimal("62.00"), 400),
    (9, "Paneer 200g", Decimal("90.00"), 300),
    (10, "Butter 100g", Decimal("58.00"), 500),
    (11, "Ghee 500ml", Decimal("340.00"), 220),
    (12, "Bread Loaf", Decimal("45.00"), 600),
    (13, "Eggs (12)", Decimal("84.00"), 350),
    (14, "Salt 1kg", Decimal("28.00"), 650),
    (15, "Turmeric Powder 100g", Decimal("38.00"), 720),
    (16, "Red Chilli Powder 100g", Decimal("42.00"), 300),
    (17, "Bath Soap", Decimal("40.00"), 480),
    (18, "Toothpaste 150g", Decimal("105.00"), 900),
    (19, "Detergent Powder 1kg", Decimal("120.00"), 260),
    (20, "Dishwash Liquid 500ml", Decimal("99.00"), 200),
]


def default_stock_levels() -> dict:
    """product id -> stock level the catalog ships with"""
    return {pid: stock for pid, _name, _price, stock in DEFAULT_CATALOG}


def seed_catalog(session=None) -> int:
    session = session if session is not None else db.session
    for pid, name, price, stock in DEFAULT_CATALOG:
        session.add(Product(id=pid, name=name, price=price, stock=stock))
    session.commit()
    return len(DEFAULT_CATALOG)


def init_database(seed: bool = True) -> None:
    """
    Create missing tables. The catalog is seeded only when the products
    table did not exist before this call.
    """
    had_products = inspect(db.engine).has_table(Product.__tablename__)
    db.create_all()
    if had_products:
        return
    logger.info("products table missing, initializing database")
    if seed:
        count = seed_catalog()
        logger.info(f"Database initialized with {count} products")
