import os

from .config import Config

DB_CONFIG = dict(Config.db_config(), database=os.getenv("DB_NAME", "biometric_attendance_test"))

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

# No waiting between retries in tests
SCAN_RETRY_ATTEMPTS = 3
SCAN_RETRY_BACKOFF_SECONDS = 0.0

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
