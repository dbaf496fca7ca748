"""Root conftest — shared test configuration."""

import os

# Settings are read at import time by the route modules
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
os.environ.setdefault("LOG_FORMAT", "text")
