# billing/blueprints/bills.py
import logging

from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from billing.models import Bill, BillItem
from billing.services.bill_service import BillService
from billing.services.exceptions import BillingError, BillNotFoundError, ValidationError

logger = logging.getLogger(__name__)

bp = Blueprint("bills", __name__)


def _created_at(b: Bill):
    return b.created_at.isoformat() if b.created_at else None


def bill_to_dict(b: Bill):
    return {
        "id": b.id,
        "customer_name": b.customer_name,
        "total_amount": float(b.total_amount or 0),
        "created_at": _created_at(b),
    }


def bill_summary(b: Bill):
    return {
        "id": b.id,
        "total_amount": float(b.total_amount or 0),
        "created_at": _created_at(b),
    }


def bill_item_to_dict(it: BillItem):
    return {
        "id": it.id,
        "bill_id": it.bill_id,
        "product_id": it.product_id,
        "product_name": it.product.name if it.product else None,
        "quantity": it.quantity,
        "price": float(it.price),
        "total": float(it.total),
    }


@bp.post("/bill")
def create_bill():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid request"}), 400
    try:
        bill_id = BillService.create_bill(data.get("customer_name"), data.get("items"))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except BillingError as e:
        # stock and missing-product failures; the transaction is already rolled back
        return jsonify({"error": str(e)}), 500
    except SQLAlchemyError:
        return jsonify({"error": "Database error"}), 500
    return jsonify({"bill_id": bill_id}), 201


@bp.get("/bill/<bill_id>")
def get_bill(bill_id: str):
    if not bill_id.isdecimal():
        return jsonify({"error": "Bill not found"}), 404
    try:
        bill = BillService.get_bill(int(bill_id))
    except BillNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except SQLAlchemyError as e:
        logger.error(f"GET /bill/{bill_id} error: {e}")
        return jsonify({"error": "Database error"}), 500
    return jsonify({
        "bill": bill_to_dict(bill),
        "items": [bill_item_to_dict(it) for it in bill.items],
    })


def _customer_bills_response(customer_name: str):
    customer_name = customer_name.strip()
    try:
        bills = BillService.get_customer_bills(customer_name)
    except SQLAlchemyError as e:
        logger.error(f"Customer bills lookup failed for {customer_name!r}: {e}")
        return jsonify({"error": "Database error"}), 500
    return jsonify({
        "customer": customer_name,
        "exists": bool(bills),
        "bills": [bill_summary(b) for b in bills],
    })


@bp.get("/bills/<customer_name>")
def customer_bills(customer_name: str):
    return _customer_bills_response(customer_name)


@bp.get("/customer/<customer_name>/bills")
def customer_bills_alias(customer_name: str):
    return _customer_bills_response(customer_name)
