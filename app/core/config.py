"""
Application configuration.

This module centralizes environment-based configuration for the
Sensory Screen Guide API, including database and dataset paths,
pagination limits, and database reconnect behaviour.
"""

import os

# SQLite database location (rebuilt by the importer, read-only for the API)
DB_PATH = os.getenv("SHOWS_DB_PATH", "data/shows.db")

# Source dataset and show artwork used by the import jobs
SHOWS_JSON_PATH = os.getenv("SHOWS_JSON_PATH", "data/reviewed_shows.json")
SHOW_IMAGES_DIR = os.getenv("SHOW_IMAGES_DIR", "data/images")

# All routes are mounted under this prefix
API_PREFIX = os.getenv("API_PREFIX", "/api")

# Catalog pagination
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))

# Comparison and autocomplete bounds
MAX_COMPARE_SHOWS = int(os.getenv("MAX_COMPARE_SHOWS", "3"))
SUGGESTION_LIMIT = int(os.getenv("SUGGESTION_LIMIT", "10"))

# Bounded reconnect when the database handle is lost
DB_RECONNECT_ATTEMPTS = int(os.getenv("DB_RECONNECT_ATTEMPTS", "2"))
DB_RECONNECT_DELAY = float(os.getenv("DB_RECONNECT_DELAY", "0.1"))

# Browser frontends are served from a different origin
RAW_CORS_ALLOW_ORIGINS = os.getenv("CORS_ALLOW_ORIGINS", "*")
CORS_ALLOW_ORIGINS = [
    o.strip() for o in RAW_CORS_ALLOW_ORIGINS.split(",") if o.strip()
]
