"""
Catalog reads and administrative stock updates
"""

import logging
from collections.abc import Mapping

from sqlalchemy import case, update
from sqlalchemy.exc import SQLAlchemyError

from billing.models import Product
from billing.services.exceptions import ProductNotFoundError, ValidationError
from billing.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)


def _valid_stock(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class StockService:
    """Product listing and stock overwrites (no sale logic here)"""

    @staticmethod
    def list_products():
        return Product.query.order_by(Product.id.asc()).all()

    @staticmethod
    def set_stock(product_id: int, stock) -> None:
        """
        Overwrite the stock of one product.

        Args:
            product_id: product id
            stock: new stock, integer >= 0
        """
        if not _valid_stock(stock):
            raise ValidationError("Invalid stock")

        with unit_of_work() as session:
            result = session.execute(
                update(Product).where(Product.id == product_id).values(stock=stock)
            )
            if result.rowcount == 0:
                raise ProductNotFoundError("Product not found")

        logger.info(f"Stock of product {product_id} set to {stock}")

    @staticmethod
    def reset_all_stock(defaults) -> int:
        """
        Bulk overwrite of product stock.

        Args:
            defaults: an int applied to every product, or a mapping
                product_id -> stock; products missing from the mapping keep
                their current stock

        Returns:
            number of products updated
        """
        if isinstance(defaults, Mapping):
            if not all(_valid_stock(v) for v in defaults.values()):
                raise ValidationError("Invalid stock")
            if not defaults:
                return 0
            stmt = (
                update(Product)
                .where(Product.id.in_(list(defaults)))
                .values(stock=case(dict(defaults), value=Product.id, else_=Product.stock))
            )
        elif _valid_stock(defaults):
            stmt = update(Product).values(stock=defaults)
        else:
            raise ValidationError("Invalid stock")

        try:
            with unit_of_work() as session:
                result = session.execute(stmt.execution_options(synchronize_session=False))
                updated = result.rowcount
        except SQLAlchemyError:
            logger.exception("Stock reset failed")
            raise

        logger.info(f"Stock reset applied to {updated} products")
        return updated
