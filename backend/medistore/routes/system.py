# backend/medistore/routes/system.py
"""
System health and data maintenance endpoints.

- GET  /health               store round-trip check
- GET  /api/system/export    full backup document
- POST /api/system/import    restore a backup document
- GET  /api/system/stats     record counts per collection
- POST /api/system/clear     wipe every collection ({"confirm": true})
"""

import time

from flask import Blueprint, current_app, jsonify

from ..errors import InvalidField, PharmacyError, StorageError
from . import error_response, get_services, json_body

system_bp = Blueprint("system", __name__)


def check_store_health() -> dict:
    start_time = time.time()
    try:
        stats = get_services().backup.data_stats()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "storage": current_app.config.get("STORAGE_METHOD"),
            "details": stats,
        }
    except StorageError:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Store health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Storage error",
        }


@system_bp.get("/health")
def health():
    result = check_store_health()
    status_code = 200 if result["status"] == "healthy" else 503
    return jsonify(result), status_code


@system_bp.get("/api/system/export")
def export_route():
    try:
        return jsonify(get_services().backup.export_data()), 200
    except Exception:
        current_app.logger.exception("Failed to export data")
        return jsonify({"error": "Internal server error"}), 500


@system_bp.post("/api/system/import")
def import_route():
    try:
        stats = get_services().backup.import_data(json_body())
        return jsonify({"imported": stats}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to import data")
        return jsonify({"error": "Internal server error"}), 500


@system_bp.get("/api/system/stats")
def stats_route():
    try:
        return jsonify(get_services().backup.data_stats()), 200
    except Exception:
        current_app.logger.exception("Failed to collect data stats")
        return jsonify({"error": "Internal server error"}), 500


@system_bp.post("/api/system/clear")
def clear_route():
    try:
        if json_body().get("confirm") is not True:
            raise InvalidField("confirm", "Pass {\"confirm\": true} to delete all data")
        get_services().backup.clear_all()
        return jsonify({"cleared": True}), 200
    except PharmacyError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to clear data")
        return jsonify({"error": "Internal server error"}), 500
