# Overview: Flask API routes for the medicine catalogue and stock adjustments.

from flask import Blueprint, current_app, jsonify, request

from ..errors import InvalidField, PharmacyError
from ..records import records_to_dicts
from ..validation import coerce_int
from . import error_response, get_services, json_body

medicines_bp = Blueprint("medicines", __name__, url_prefix="/api/medicines")


@medicines_bp.get("")
def list_medicines_route():
    """List medicines; ?search= filters by name, company or category."""
    try:
        catalog = get_services().catalog
        search = request.args.get("search")
        medicines = catalog.search_medicines(search) if search else catalog.list_medicines()
        return jsonify({"medicines": records_to_dicts(medicines)}), 200
    except Exception:
        current_app.logger.exception("Failed to list medicines")
        return jsonify({"error": "Internal server error"}), 500


@medicines_bp.post("")
def create_medicine_route():
    """
    Create a medicine.

    Request body:
    {
        "name": "Panadol", "company": "GSK", "category": "Tablet",
        "cost_price": 10, "sale_price": 15, "stock": 100,
        "reorder_level": 20, "expiry": "2026-01-31", "batch_number": "B1"
    }

    Returns:
        201: Medicine created
        400: Invalid input
        409: Same name + company already exists
    """
    try:
        medicine = get_services().catalog.add_medicine(json_body())
        return jsonify({"medicine": medicine.to_dict()}), 201
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create medicine")
        return jsonify({"error": "Internal server error"}), 500


@medicines_bp.get("/low-stock")
def low_stock_route():
    try:
        threshold = request.args.get("threshold")
        if threshold is not None:
            threshold = coerce_int(threshold, "threshold")
        medicines = get_services().ledger.low_stock(threshold)
        return jsonify({"medicines": records_to_dicts(medicines)}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to list low stock medicines")
        return jsonify({"error": "Internal server error"}), 500


@medicines_bp.get("/expiring")
def expiring_route():
    """Medicines expiring within ?days= (default: the expiry alert setting)."""
    try:
        services = get_services()
        days = request.args.get("days")
        days = coerce_int(days, "days") if days is not None else services.settings.get_settings().expiry_alert_days
        medicines = services.ledger.expiring_soon(days)
        return jsonify({"medicines": records_to_dicts(medicines), "days": days}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to list expiring medicines")
        return jsonify({"error": "Internal server error"}), 500


@medicines_bp.get("/<medicine_id>")
def get_medicine_route(medicine_id: str):
    try:
        medicine = get_services().catalog.get_medicine(medicine_id)
        return jsonify({"medicine": medicine.to_dict()}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to get medicine")
        return jsonify({"error": "Internal server error"}), 500


@medicines_bp.put("/<medicine_id>")
def update_medicine_route(medicine_id: str):
    try:
        medicine = get_services().catalog.update_medicine(medicine_id, json_body())
        return jsonify({"medicine": medicine.to_dict()}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update medicine")
        return jsonify({"error": "Internal server error"}), 500


@medicines_bp.delete("/<medicine_id>")
def delete_medicine_route(medicine_id: str):
    try:
        get_services().catalog.delete_medicine(medicine_id)
        return jsonify({"deleted": medicine_id}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete medicine")
        return jsonify({"error": "Internal server error"}), 500


@medicines_bp.post("/<medicine_id>/stock")
def adjust_stock_route(medicine_id: str):
    """
    Manual stock adjustment.

    Request body:
    {
        "action": "add" | "remove",
        "quantity": 10
    }

    Returns:
        200: Updated medicine
        400: Invalid quantity or removal below zero
        404: Medicine not found
    """
    try:
        data = json_body()
        ledger = get_services().ledger
        action = data.get("action")
        quantity = coerce_int(data.get("quantity"), "quantity", minimum=1)

        if action == "add":
            medicine = ledger.restock(medicine_id, quantity)
        elif action == "remove":
            medicine = ledger.remove_stock(medicine_id, quantity)
        else:
            raise InvalidField("action", "action must be 'add' or 'remove'")

        return jsonify({"medicine": medicine.to_dict()}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to adjust stock")
        return jsonify({"error": "Internal server error"}), 500
