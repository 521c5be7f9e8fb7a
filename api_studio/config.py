"""
Runtime configuration for API Studio.

Values are read once from the process environment at import time.
"""

import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# SQLite database URL - file-based storage for environments and history
DATABASE_URL = os.environ.get("API_STUDIO_DATABASE_URL", "sqlite:///./api_studio.db")

# Forwarding proxy that performs the actual HTTP call
PROXY_URL = os.environ.get("API_STUDIO_PROXY_URL", "http://localhost:3001/proxy")

# Maximum number of execution records kept in history
HISTORY_CAPACITY = int(os.environ.get("API_STUDIO_HISTORY_CAPACITY", "50"))

# Whether sends that never reached the target are recorded in history
RECORD_TRANSPORT_ERRORS = _env_bool("API_STUDIO_RECORD_TRANSPORT_ERRORS", False)

LOG_LEVEL = os.environ.get("API_STUDIO_LOG_LEVEL", "INFO")
