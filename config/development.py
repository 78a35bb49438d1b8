import os

from .config import Config

DB_CONFIG = Config.db_config()

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

SCAN_RETRY_ATTEMPTS = Config.SCAN_RETRY_ATTEMPTS
SCAN_RETRY_BACKOFF_SECONDS = Config.SCAN_RETRY_BACKOFF_SECONDS

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
