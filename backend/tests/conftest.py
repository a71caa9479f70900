"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach real third-party services
os.environ.setdefault("GEMINI_API_KEY", "")
os.environ.setdefault("SPEECHMATICS_API_KEY", "")
os.environ.setdefault("FIREBASE_SERVICE_ACCOUNT_KEY", "")
os.environ.setdefault("CLERK_WEBHOOK_SECRET", "")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SEED_MASTER_DATA", "false")
os.environ.setdefault("LOG_FORMAT", "text")
