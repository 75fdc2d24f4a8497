# billing/blueprints/products.py
import logging

from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError

from billing.models import Product
from billing.services.exceptions import ProductNotFoundError, ValidationError
from billing.services.stock_service import StockService

logger = logging.getLogger(__name__)

bp = Blueprint("products", __name__)


def product_to_dict(p: Product):
    return {
        "id": p.id,
        "name": p.name,
        "price": float(p.price or 0),
        "stock": int(p.stock or 0),
    }


@bp.get("/products")
def list_products():
    try:
        products = StockService.list_products()
    except SQLAlchemyError as e:
        logger.error(f"GET /products error: {e}")
        return jsonify({"error": "Database error"}), 500
    return jsonify([product_to_dict(p) for p in products])


@bp.put("/products/<int:pid>/stock")
def update_stock(pid: int):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid stock"}), 400
    try:
        StockService.set_stock(pid, data.get("stock"))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ProductNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except SQLAlchemyError as e:
        logger.error(f"PUT /products/{pid}/stock error: {e}")
        return jsonify({"error": "Database error"}), 500
    return jsonify({"success": True})
