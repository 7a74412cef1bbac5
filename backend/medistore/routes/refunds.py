# Overview: Flask API routes for refunds; parses input and returns JSON responses.

"""
Refund API Routes

- POST /check      how many units of one sale line can still be refunded
- POST /preview    refund lines + amount, nothing written
- POST /           submit a refund (re-validated, stock restored)
- GET  /           refund log, optionally ?sale_id=
- GET  /sales/<id>/summary   per-line sold / refunded / available / status

Refund line format:
    {"medicine_id": "med_...", "quantity": 1}
"""

from flask import Blueprint, current_app, jsonify, request

from ..errors import InvalidField, InvalidQuantity, PharmacyError
from ..records import REFUND_STATUS_COMPLETED, records_to_dicts
from . import error_response, get_services, json_body

refunds_bp = Blueprint("refunds", __name__, url_prefix="/api/refunds")


def _refund_lines(sale, items) -> list:
    if not isinstance(items, list) or not items:
        raise InvalidField("items", "Select at least one item to refund")
    engine = get_services().refunds
    # Repeated medicines are summed before the availability check
    quantities: dict[str, int] = {}
    for item in items:
        if not isinstance(item, dict):
            raise InvalidField("items", "each item must be an object")
        medicine_id = item.get("medicine_id")
        quantity = item.get("quantity")
        if not isinstance(medicine_id, str):
            raise InvalidField("medicine_id", "medicine_id must be a string")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidQuantity(quantity)
        quantities[medicine_id] = quantities.get(medicine_id, 0) + quantity

    lines = []
    for medicine_id, quantity in quantities.items():
        engine.validate_refund(sale.id, medicine_id, quantity)
        lines.append(engine.build_refund_line(sale, medicine_id, quantity))
    return lines


@refunds_bp.post("/check")
def check_refund_route():
    """
    Request body:
    {"sale_id": "sale_...", "medicine_id": "med_...", "quantity": 2}

    Returns:
        200: {"valid": bool, "available_quantity": int, "message": str|null}
    """
    try:
        data = json_body()
        check = get_services().refunds.check_refund(
            data.get("sale_id"),
            data.get("medicine_id"),
            data.get("quantity"),
        )
        return jsonify(check.to_dict()), 200
    except Exception:
        current_app.logger.exception("Failed to check refund")
        return jsonify({"error": "Internal server error"}), 500


@refunds_bp.post("/preview")
def preview_refund_route():
    try:
        data = json_body()
        services = get_services()
        sale = services.sales.get_sale(data.get("sale_id"))
        lines = _refund_lines(sale, data.get("items"))
        return jsonify({
            "items": records_to_dicts(lines),
            "amount": services.refunds.compute_refund_amount(sale, lines),
        }), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to preview refund")
        return jsonify({"error": "Internal server error"}), 500


@refunds_bp.post("")
def submit_refund_route():
    """
    Submit a refund against a stored sale.

    Request body:
    {
        "sale_id": "sale_...",
        "items": [{"medicine_id": "med_...", "quantity": 1}],
        "reason": "defective",
        "note": "Box damaged",  (optional)
        "status": "completed"   (optional)
    }

    Returns:
        201: Refund recorded, stock restored
        400: Missing reason, quantity above what is left, invalid input
        404: Sale or line not found
    """
    try:
        data = json_body()
        services = get_services()
        sale = services.sales.get_sale(data.get("sale_id"))
        lines = _refund_lines(sale, data.get("items"))
        refund = services.refunds.submit_refund(
            sale,
            lines,
            data.get("reason"),
            note=data.get("note"),
            status=data.get("status") or REFUND_STATUS_COMPLETED,
        )
        return jsonify({"refund": refund.to_dict()}), 201
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to submit refund")
        return jsonify({"error": "Internal server error"}), 500


@refunds_bp.get("")
def list_refunds_route():
    try:
        engine = get_services().refunds
        sale_id = request.args.get("sale_id")
        refunds = engine.get_refunds_for_sale(sale_id) if sale_id else engine.list_refunds()
        return jsonify({"refunds": records_to_dicts(refunds)}), 200
    except Exception:
        current_app.logger.exception("Failed to list refunds")
        return jsonify({"error": "Internal server error"}), 500


@refunds_bp.get("/sales/<sale_id>/summary")
def refund_summary_route(sale_id: str):
    try:
        summary = get_services().refunds.refund_summary(sale_id)
        return jsonify({"sale_id": sale_id, "lines": summary}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to build refund summary")
        return jsonify({"error": "Internal server error"}), 500
