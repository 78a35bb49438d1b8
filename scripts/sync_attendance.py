"""Rebuild attendance from every stored biometric scan.

Usage: python scripts/sync_attendance.py
Exits non-zero when any employee-day failed to sync.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.biometric_attendance.biometric_attendance.container import build_container
from src.biometric_attendance.biometric_attendance.main import configure_logging, load_settings


def main() -> int:
    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        retry_attempts=int(getattr(settings, "SCAN_RETRY_ATTEMPTS", 3)),
        retry_backoff_seconds=float(getattr(settings, "SCAN_RETRY_BACKOFF_SECONDS", 0.05)),
    )
    report = container.scan_service.sync_all()
    print(json.dumps(report.to_dict(), indent=2))
    return 1 if report.errors else 0


if __name__ == "__main__":
    sys.exit(main())
