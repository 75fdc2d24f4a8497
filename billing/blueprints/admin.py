# billing/blueprints/admin.py
import logging

from flask import Blueprint, current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from billing.seed import default_stock_levels
from billing.services.stock_service import StockService

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__)


@admin_bp.post("/reset-stock")
def reset_stock():
    # same stock value for every product (demo/testing)
    try:
        StockService.reset_all_stock(current_app.config["RESET_STOCK_DEFAULT"])
    except SQLAlchemyError as e:
        logger.error(f"Reset stock error: {e}")
        return jsonify({"error": "Failed to reset stock"}), 500
    return jsonify({"message": "Stock reset successfully"})


@admin_bp.put("/reset-stock")
def reset_stock_to_defaults():
    try:
        StockService.reset_all_stock(default_stock_levels())
    except SQLAlchemyError as e:
        logger.error(f"Reset stock to defaults error: {e}")
        return jsonify({"error": "Failed to reset stock"}), 500
    return jsonify({"message": "Stock reset to defaults"})
