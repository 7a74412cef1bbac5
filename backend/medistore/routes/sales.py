# Overview: Flask API routes for checkout and sale history.

"""
Sales API Routes

Cart lines are always rebuilt server-side from medicine ids, so prices and
stock caps come from the catalogue, never from the client.

Request line format (used by /totals and /):
    {"medicine_id": "med_...", "quantity": 2, "discount_pct": 10}
"""

from flask import Blueprint, current_app, jsonify, request

from ..errors import InvalidField, PharmacyError
from ..records import CustomerInfo, PaymentInfo
from ..services.sales_service import check_distinct_medicines
from . import error_response, get_services, json_body, sale_to_dict

sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


def _cart_lines(items) -> list:
    if not isinstance(items, list):
        raise InvalidField("items", "items must be a list")
    recorder = get_services().sales
    lines = []
    for item in items:
        if not isinstance(item, dict):
            raise InvalidField("items", "each item must be an object")
        lines.append(recorder.build_cart_line(
            item.get("medicine_id"),
            item.get("quantity", 1),
            item.get("discount_pct", 0),
        ))
    check_distinct_medicines(lines)
    return lines


@sales_bp.post("/totals")
def sale_totals_route():
    """Preview totals for a cart without recording anything."""
    try:
        data = json_body()
        lines = _cart_lines(data.get("items") or [])
        totals = get_services().sales.calculate_totals(lines, data.get("global_discount_pct") or 0)
        return jsonify({"totals": totals.to_dict()}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to calculate totals")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.post("")
def record_sale_route():
    """
    Record a sale and take its quantities out of stock.

    Request body:
    {
        "items": [{"medicine_id": "med_...", "quantity": 2, "discount_pct": 0}],
        "payment": {"method": "cash", "cash_received": 500},
        "customer": {"name": "Ali", "phone": "0300..."},  (optional)
        "global_discount_pct": 5  (optional)
    }

    Returns:
        201: Sale recorded
        400: Empty cart, insufficient cash or stock, invalid input
        404: Unknown medicine
    """
    try:
        data = json_body()
        payment = data.get("payment") or {}
        customer = data.get("customer") or {}
        if not isinstance(payment, dict) or not isinstance(customer, dict):
            raise InvalidField("payment", "payment and customer must be objects")

        sale = get_services().sales.record_sale(
            _cart_lines(data.get("items") or []),
            PaymentInfo(method=payment.get("method", "cash"), cash_received=payment.get("cash_received")),
            CustomerInfo(name=customer.get("name"), phone=customer.get("phone")),
            data.get("global_discount_pct") or 0,
        )
        return jsonify({"sale": sale_to_dict(sale)}), 201
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to record sale")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("")
def list_sales_route():
    """List sales; optional ?date_from=YYYY-MM-DD&date_to=YYYY-MM-DD."""
    try:
        sales = get_services().sales.list_sales(
            request.args.get("date_from"),
            request.args.get("date_to"),
        )
        return jsonify({"sales": [sale_to_dict(s) for s in sales]}), 200
    except ValueError:
        return jsonify({"error": "Dates must be ISO-8601"}), 400
    except Exception:
        current_app.logger.exception("Failed to list sales")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("/search")
def search_sales_route():
    """Sales containing a medicine whose name matches ?name=."""
    try:
        sales = get_services().sales.search_sales_by_medicine_name(request.args.get("name", ""))
        return jsonify({"sales": [sale_to_dict(s) for s in sales]}), 200
    except Exception:
        current_app.logger.exception("Failed to search sales")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("/by-medicine/<medicine_id>")
def sales_by_medicine_route(medicine_id: str):
    try:
        sales = get_services().sales.get_sales_referencing_medicine(medicine_id)
        return jsonify({"sales": [sale_to_dict(s) for s in sales]}), 200
    except Exception:
        current_app.logger.exception("Failed to list sales by medicine")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("/<sale_id>")
def get_sale_route(sale_id: str):
    try:
        sale = get_services().sales.get_sale(sale_id)
        return jsonify({"sale": sale_to_dict(sale)}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to get sale")
        return jsonify({"error": "Internal server error"}), 500
