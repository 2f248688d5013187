import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in the environment")

# Empty string disables schema-qualified table names (e.g. SQLite)
SCHEMA: str | None = os.getenv("DB_SCHEMA", "villa") or None

ALLOWED_ORIGINS_RAW = os.getenv("ALLOWED_ORIGINS")
if not ALLOWED_ORIGINS_RAW:
    raise ValueError("ALLOWED_ORIGINS must be set in the environment")

ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in ALLOWED_ORIGINS_RAW.split(",")
]

# Compare-and-swap on bookings.sync_version before writing a status change
OPTIMISTIC_LOCKING = os.getenv("OPTIMISTIC_LOCKING", "false").lower() == "true"
MAX_VERSION_RETRIES = int(os.getenv("MAX_VERSION_RETRIES", "3"))

POST_APPROVAL_HOOKS: list[str] = [
    name.strip() for name in os.getenv("POST_APPROVAL_HOOKS", "").split(",") if name.strip()
]

SYNC_EVENT_PLATFORM = os.getenv("SYNC_EVENT_PLATFORM", "web")
