"""
BotCRUD configuration.
Environment defaults are read once at import; helpers re-read values that tests toggle.
"""

import os
from pathlib import Path

# Service identity
SERVICE_NAME = os.getenv("SERVICE_NAME", "botcrud-api")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

# HTTP server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

# Debug flag is also exposed as a function to be dynamic
DEBUG = os.getenv("DEBUG", "true").lower() == "true"

# Datastore: one <collection>.json file per collection under DATA_DIR
DATA_DIR = os.getenv("DATA_DIR", "./data")
COLLECTIONS = ("bots", "workers", "logs")

# Pagination
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))

# Free-text fields run through the XSS sanitizer on create/update
SANITIZE_FIELDS = ("name", "description", "message")

# Version string
VERSION = "1.0.0"


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "true").lower() == "true"


def get_service_name():
    """Get the service name reported by health checks."""
    return os.getenv("SERVICE_NAME", SERVICE_NAME)


def get_environment():
    """Get the deployment environment name."""
    return os.getenv("ENVIRONMENT", ENVIRONMENT)


def get_data_dir() -> Path:
    """Get the directory holding the collection JSON files."""
    return Path(os.getenv("DATA_DIR", DATA_DIR))


def get_cors_origins():
    """Get allowed CORS origins as a list."""
    raw = os.getenv("CORS_ORIGINS", CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if not 0 < PORT < 65536:
        issues.append(f"Invalid PORT: {PORT}")

    if MAX_PAGE_SIZE < 1:
        issues.append("MAX_PAGE_SIZE must be >= 1")

    if not 1 <= DEFAULT_PAGE_SIZE <= MAX_PAGE_SIZE:
        issues.append(f"DEFAULT_PAGE_SIZE must be between 1 and MAX_PAGE_SIZE ({MAX_PAGE_SIZE})")

    if not get_cors_origins():
        issues.append("CORS_ORIGINS must name at least one origin")

    return issues
