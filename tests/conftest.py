"""Point the app at SQLite before any test imports it; tests bind their own in-memory engines."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
