# Overview: Flask API routes for shop settings and the advisory user list.

from flask import Blueprint, current_app, jsonify

from ..errors import PharmacyError
from ..records import ROLE_STAFF, records_to_dicts
from . import error_response, get_services, json_body

settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")
users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@settings_bp.get("")
def get_settings_route():
    try:
        return jsonify({"settings": get_services().settings.get_settings().to_dict()}), 200
    except Exception:
        current_app.logger.exception("Failed to load settings")
        return jsonify({"error": "Internal server error"}), 500


@settings_bp.put("")
def update_settings_route():
    """Partial update; unknown keys and out-of-range values are rejected."""
    try:
        settings = get_services().settings.update_settings(json_body())
        return jsonify({"settings": settings.to_dict()}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update settings")
        return jsonify({"error": "Internal server error"}), 500


@settings_bp.delete("")
def reset_settings_route():
    try:
        settings = get_services().settings.reset_settings()
        return jsonify({"settings": settings.to_dict()}), 200
    except Exception:
        current_app.logger.exception("Failed to reset settings")
        return jsonify({"error": "Internal server error"}), 500


# =============================================================================
# USERS
# =============================================================================

@users_bp.get("")
def list_users_route():
    try:
        return jsonify({"users": records_to_dicts(get_services().users.list_users())}), 200
    except Exception:
        current_app.logger.exception("Failed to list users")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.post("")
def create_user_route():
    """Request body: {"email": "staff@example.com", "role": "staff"}"""
    try:
        data = json_body()
        user = get_services().users.add_user(data.get("email"), data.get("role") or ROLE_STAFF)
        return jsonify({"user": user.to_dict()}), 201
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create user")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.put("/<user_id>/role")
def update_role_route(user_id: str):
    try:
        user = get_services().users.update_role(user_id, json_body().get("role"))
        return jsonify({"user": user.to_dict()}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update user role")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.delete("/<user_id>")
def delete_user_route(user_id: str):
    try:
        get_services().users.delete_user(user_id)
        return jsonify({"deleted": user_id}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete user")
        return jsonify({"error": "Internal server error"}), 500
