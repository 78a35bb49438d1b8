from __future__ import annotations

from dataclasses import dataclass

from .core.constants import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_BACKOFF_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_unit_of_work import mysql_unit_of_work_factory
from .reconciliation.engine import ReconciliationEngine
from .reconciliation.service import AttendanceScanService
from .reconciliation.sync import BulkSyncJob
from .reconciliation.unit_of_work import UnitOfWorkFactory
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.provider import RepositorySettingsProvider
from .settings.service import AttendanceSettingsService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    settings_repo: MySQLSettingsRepository
    settings_provider: RepositorySettingsProvider
    uow_factory: UnitOfWorkFactory

    engine: ReconciliationEngine
    sync_job: BulkSyncJob
    scan_service: AttendanceScanService
    settings_service: AttendanceSettingsService


def build_container(
    *,
    db_config: dict,
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
    retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    settings_repo = MySQLSettingsRepository(conn)
    settings_provider = RepositorySettingsProvider(settings_repo)
    uow_factory = mysql_unit_of_work_factory(conn)

    engine = ReconciliationEngine(
        uow_factory,
        settings_provider,
        retry_attempts=retry_attempts,
        retry_backoff_seconds=retry_backoff_seconds,
    )
    sync_job = BulkSyncJob(
        uow_factory,
        engine,
        retry_attempts=retry_attempts,
        retry_backoff_seconds=retry_backoff_seconds,
    )
    scan_service = AttendanceScanService(
        uow_factory,
        engine,
        sync_job,
        retry_attempts=retry_attempts,
        retry_backoff_seconds=retry_backoff_seconds,
    )
    settings_service = AttendanceSettingsService(settings_repo, settings_provider, engine=engine)

    return Container(
        conn=conn,
        settings_repo=settings_repo,
        settings_provider=settings_provider,
        uow_factory=uow_factory,
        engine=engine,
        sync_job=sync_job,
        scan_service=scan_service,
        settings_service=settings_service,
    )
