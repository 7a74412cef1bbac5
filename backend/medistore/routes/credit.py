# Overview: Flask API routes for customer credit (udhar) and shop expenses.

from flask import Blueprint, current_app, jsonify, request

from ..errors import PharmacyError
from ..records import records_to_dicts
from ..validation import coerce_date
from ..time_utils import parse_iso_date
from . import error_response, get_services, json_body

credit_bp = Blueprint("credit", __name__, url_prefix="/api/udhar")
expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


# =============================================================================
# CREDIT
# =============================================================================

@credit_bp.get("")
def list_credits_route():
    """?status=paid|unpaid|all&search=<name, phone or invoice>"""
    try:
        credits = get_services().credit.list_credits(
            status=request.args.get("status"),
            search=request.args.get("search"),
        )
        return jsonify({"records": records_to_dicts(credits)}), 200
    except Exception:
        current_app.logger.exception("Failed to list udhar records")
        return jsonify({"error": "Internal server error"}), 500


@credit_bp.get("/summary")
def credit_summary_route():
    try:
        ledger = get_services().credit
        return jsonify({
            "total_unpaid": ledger.total_unpaid(),
            "paid_this_month": ledger.paid_this_month(),
        }), 200
    except Exception:
        current_app.logger.exception("Failed to summarise udhar")
        return jsonify({"error": "Internal server error"}), 500


@credit_bp.post("")
def create_credit_route():
    """
    Request body:
    {
        "customer_name": "Ali", "customer_phone": "0300...",
        "amount": 250, "invoice_no": "sale_1700000", "due_date": "2024-02-01",
        "note": "..."
    }
    """
    try:
        credit = get_services().credit.add_credit(json_body())
        return jsonify({"record": credit.to_dict()}), 201
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create udhar record")
        return jsonify({"error": "Internal server error"}), 500


@credit_bp.get("/<credit_id>")
def get_credit_route(credit_id: str):
    try:
        credit = get_services().credit.get_credit(credit_id)
        return jsonify({"record": credit.to_dict()}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to get udhar record")
        return jsonify({"error": "Internal server error"}), 500


@credit_bp.put("/<credit_id>")
def update_credit_route(credit_id: str):
    try:
        credit = get_services().credit.update_credit(credit_id, json_body())
        return jsonify({"record": credit.to_dict()}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update udhar record")
        return jsonify({"error": "Internal server error"}), 500


@credit_bp.post("/<credit_id>/pay")
def pay_credit_route(credit_id: str):
    try:
        paid_on = coerce_date(json_body().get("paid_date"), "paid_date")
        credit = get_services().credit.mark_paid(credit_id, parse_iso_date(paid_on) if paid_on else None)
        return jsonify({"record": credit.to_dict()}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to mark udhar paid")
        return jsonify({"error": "Internal server error"}), 500


@credit_bp.delete("/<credit_id>")
def delete_credit_route(credit_id: str):
    try:
        get_services().credit.delete_credit(credit_id)
        return jsonify({"deleted": credit_id}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete udhar record")
        return jsonify({"error": "Internal server error"}), 500


# =============================================================================
# EXPENSES
# =============================================================================

@expenses_bp.get("")
def list_expenses_route():
    try:
        expenses = get_services().expenses.list_expenses()
        return jsonify({"expenses": records_to_dicts(expenses)}), 200
    except Exception:
        current_app.logger.exception("Failed to list expenses")
        return jsonify({"error": "Internal server error"}), 500


@expenses_bp.post("")
def create_expense_route():
    """Request body: {"type": "Rent", "amount": 5000, "note": "...", "date": "2024-01-01"}"""
    try:
        data = json_body()
        expense = get_services().expenses.add_expense(
            data.get("type"),
            data.get("amount"),
            note=data.get("note"),
            on=data.get("date"),
        )
        return jsonify({"expense": expense.to_dict()}), 201
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create expense")
        return jsonify({"error": "Internal server error"}), 500


@expenses_bp.delete("/<expense_id>")
def delete_expense_route(expense_id: str):
    try:
        get_services().expenses.delete_expense(expense_id)
        return jsonify({"deleted": expense_id}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete expense")
        return jsonify({"error": "Internal server error"}), 500
