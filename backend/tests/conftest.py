"""Root conftest — shared test configuration."""

import os

# Ensure tests never touch a real db.json in the working directory
os.environ.setdefault("DB_PATH", "test-db.json")
os.environ.setdefault("LOG_LEVEL", "WARNING")
