# Overview: Shared helpers for the JSON blueprints.

from flask import current_app, jsonify, request

from ..errors import PharmacyError

# PharmacyError.kind -> HTTP status
STATUS_BY_KIND = {
    "not_found": 404,
    "validation": 400,
    "duplicate": 409,
}


def get_services():
    """Service container built by create_app()."""
    return current_app.extensions["medistore"]


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def error_response(exc: PharmacyError):
    return jsonify(exc.to_dict()), STATUS_BY_KIND.get(exc.kind, 400)


def sale_to_dict(sale) -> dict:
    return {**sale.to_dict(), "invoice_no": sale.invoice_no}
