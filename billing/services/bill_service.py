"""
Bill creation and bill lookups.
"""

import logging
from collections.abc import Mapping
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from billing.models import db, Bill, BillItem, Product
from billing.services.exceptions import (
    BillingError,
    BillNotFoundError,
    InsufficientStockError,
    ProductNotFoundError,
    ValidationError,
)
from billing.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class BillService:
    """Write path for bills and bill items, plus read-only bill queries"""

    @staticmethod
    def parse_items(items):
        """
        Validate cart lines and return them as (product_id, quantity) tuples.

        Args:
            items: list of {"product_id": int, "quantity": int}

        Returns:
            list of (product_id, quantity) in input order
        """
        if not isinstance(items, list) or not items:
            raise ValidationError("Invalid request")

        lines = []
        for position, item in enumerate(items, start=1):
            if not isinstance(item, Mapping):
                raise ValidationError(f"Item {position} must be an object")
            product_id = item.get("product_id")
            quantity = item.get("quantity")
            if not _is_int(product_id):
                raise ValidationError(f"Item {position}: product_id must be an integer")
            if not _is_int(quantity) or quantity <= 0:
                raise ValidationError(f"Item {position}: quantity must be a positive integer")
            lines.append((product_id, quantity))
        return lines

    @staticmethod
    def create_bill(customer_name, items) -> int:
        """
        Record a bill for a cart and decrement stock, atomically.

        Every line is checked against the stock left by the lines before it.
        Any failure rolls back the bill row, its items and all stock changes.

        Args:
            customer_name: non-empty customer name
            items: list of {"product_id": int, "quantity": int}

        Returns:
            id of the new bill
        """
        customer_name = customer_name.strip() if isinstance(customer_name, str) else ""
        if not customer_name or not items:
            raise ValidationError("Invalid request")
        lines = BillService.parse_items(items)

        try:
            with unit_of_work() as session:
                bill = Bill(customer_name=customer_name, total_amount=Decimal("0"))
                session.add(bill)
                session.flush()

                total_amount = Decimal("0")
                for product_id, quantity in lines:
                    product = session.execute(
                        select(Product)
                        .where(Product.id == product_id)
                        .with_for_update()
                        .execution_options(populate_existing=True)
                    ).scalar_one_or_none()
                    if product is None:
                        raise ProductNotFoundError("Product not found")
                    if quantity > product.stock:
                        raise InsufficientStockError(f"Not enough stock for {product.name}")

                    price = Decimal(str(product.price))
                    line_total = price * quantity
                    total_amount += line_total

                    session.add(BillItem(
                        bill_id=bill.id,
                        product_id=product.id,
                        quantity=quantity,
                        price=price,
                        total=line_total,
                    ))

                    # conditional decrement: never lets stock go below zero
                    result = session.execute(
                        update(Product)
                        .where(Product.id == product.id, Product.stock >= quantity)
                        .values(stock=Product.stock - quantity)
                    )
                    if result.rowcount != 1:
                        raise InsufficientStockError(f"Not enough stock for {product.name}")

                bill.total_amount = total_amount
                bill_id = bill.id
        except BillingError as e:
            logger.warning(f"Bill for {customer_name!r} rejected: {e}")
            raise
        except SQLAlchemyError:
            logger.exception(f"Bill transaction failed for {customer_name!r}")
            raise

        logger.info(f"Bill {bill_id} created for {customer_name!r}: {len(lines)} lines, total {total_amount}")
        return bill_id

    @staticmethod
    def get_bill(bill_id: int) -> Bill:
        """Bill with its items (each item carries its product)."""
        bill = db.session.get(Bill, bill_id)
        if bill is None:
            raise BillNotFoundError("Bill not found")
        return bill

    @staticmethod
    def get_customer_bills(customer_name: str):
        """Bills of one customer, newest first. Empty list for unknown customers."""
        customer_name = customer_name.strip() if isinstance(customer_name, str) else ""
        return (
            Bill.query
            .filter(Bill.customer_name == customer_name)
            .order_by(Bill.id.desc())
            .all()
        )
