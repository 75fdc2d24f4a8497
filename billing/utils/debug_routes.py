# billing/utils/debug_routes.py
import logging

from flask import jsonify
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from billing.models import db, Bill, Product

logger = logging.getLogger(__name__)

HIDDEN_METHODS = {"HEAD", "OPTIONS"}


def _store_status():
    """Reachability of the store plus catalog and ledger sizes."""
    try:
        db.session.execute(text("SELECT 1"))
        products = db.session.scalar(select(func.count(Product.id)))
        out_of_stock = db.session.scalar(
            select(func.count(Product.id)).where(Product.stock == 0)
        )
        bills = db.session.scalar(select(func.count(Bill.id)))
    except SQLAlchemyError as e:
        logger.error(f"Store check failed: {e}")
        db.session.rollback()
        return {"reachable": False, "error": "Database error"}
    return {
        "reachable": True,
        "products": products,
        "out_of_stock": out_of_stock,
        "bills": bills,
    }


def register_debug_routes(app):
    """
    Route map and a store check, only when DEBUG_ROUTES is on.
    """
    if not app.config.get("DEBUG_ROUTES"):
        return

    @app.get("/_routes")
    def _routes():
        routes = [
            {
                "path": rule.rule,
                "blueprint": rule.endpoint.rpartition(".")[0] or None,
                "methods": sorted(rule.methods - HIDDEN_METHODS),
            }
            for rule in app.url_map.iter_rules()
            if rule.endpoint != "static"
        ]
        return jsonify(sorted(routes, key=lambda r: (r["path"], r["methods"])))

    @app.get("/health/full")
    def _health_full():
        store = _store_status()
        body = {
            "status": "ok" if store["reachable"] else "degraded",
            "backend": db.engine.url.get_backend_name(),
            "store": store,
            "reset_stock_default": app.config["RESET_STOCK_DEFAULT"],
        }
        return jsonify(body), 200 if store["reachable"] else 503
