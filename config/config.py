import os


class Config:
    """Values shared by every environment; each settings module overrides a few."""

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "biometric_attendance")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Deadlock / lock-wait retries around each scan transaction
    SCAN_RETRY_ATTEMPTS = int(os.environ.get("SCAN_RETRY_ATTEMPTS", "3"))
    SCAN_RETRY_BACKOFF_SECONDS = float(os.environ.get("SCAN_RETRY_BACKOFF_SECONDS", "0.05"))

    @classmethod
    def db_config(cls) -> dict:
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "user": cls.DB_USER,
            "password": cls.DB_PASSWORD,
            "database": cls.DB_NAME,
        }
