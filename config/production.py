import os

from .config import Config

DB_CONFIG = Config.db_config()

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL

SCAN_RETRY_ATTEMPTS = Config.SCAN_RETRY_ATTEMPTS
SCAN_RETRY_BACKOFF_SECONDS = Config.SCAN_RETRY_BACKOFF_SECONDS

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
