# backend/medistore/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Only used when STORAGE_METHOD is "sql" (hosted relational backend)
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "sqlite:///medistore.sqlite3",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # "local" (JSON key-value file), "sql" or "memory"
    STORAGE_METHOD = os.environ.get("MEDISTORE_STORAGE", "local")
    STORAGE_PATH = os.environ.get("MEDISTORE_DATA_DIR", "data")
    STORAGE_NAMESPACE = os.environ.get("MEDISTORE_NAMESPACE", "pharmacy")

    LOG_LEVEL = os.environ.get("MEDISTORE_LOG_LEVEL", "INFO")
