# Overview: Flask API routes for the dashboard and sales reports.

from flask import Blueprint, current_app, jsonify, request

from ..errors import PharmacyError
from ..validation import coerce_date
from . import error_response, get_services

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/dashboard")
def dashboard_route():
    try:
        return jsonify(get_services().reports.dashboard()), 200
    except Exception:
        current_app.logger.exception("Failed to build dashboard")
        return jsonify({"error": "Internal server error"}), 500


@reports_bp.get("/sales")
def sales_report_route():
    """
    Daily / weekly / monthly sales.

    Query params:
        date_from, date_to: optional ISO dates (inclusive)
    """
    try:
        report = get_services().reports.sales_report(
            coerce_date(request.args.get("date_from"), "date_from"),
            coerce_date(request.args.get("date_to"), "date_to"),
        )
        return jsonify(report), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to build sales report")
        return jsonify({"error": "Internal server error"}), 500
