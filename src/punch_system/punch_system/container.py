from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .common.clock import Clock, ZoneClock
from .core.constants import DEFAULT_PUNCH_MAX_RETRIES, DEFAULT_PUNCH_RETRY_BACKOFF, DEFAULT_TIMEZONE
from .core.enums import PunchStoreKind
from .database.connection import DBConfig, DatabaseConnection
from .punches.memory_punch_store import MemoryPunchHistoryStore
from .punches.mysql_punch_store import MySQLPunchHistoryStore
from .punches.repository import PunchHistoryStore
from .punches.resolver import PresenceResolver
from .punches.service import PunchRecorder
from .settings.mysql_settings_store import MySQLSettingsStore
from .settings.repository import SettingsStore
from .settings.service import SettingsService
from .workers.mysql_worker_directory import MySQLWorkerDirectory
from .workers.repository import WorkerDirectory


@dataclass(frozen=True)
class Container:
    clock: Clock

    workers_repo: WorkerDirectory
    settings_repo: SettingsStore
    punches_repo: PunchHistoryStore

    punch_recorder: PunchRecorder
    settings_service: SettingsService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    workers_repo: WorkerDirectory,
    settings_repo: SettingsStore,
    punches_repo: PunchHistoryStore,
    clock: Clock,
    max_retries: int = DEFAULT_PUNCH_MAX_RETRIES,
    retry_backoff: float = DEFAULT_PUNCH_RETRY_BACKOFF,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    punch_recorder = PunchRecorder(
        punches_repo,
        workers_repo,
        settings_repo,
        clock,
        resolver=PresenceResolver(),
        max_retries=max_retries,
        retry_backoff=retry_backoff,
    )
    return Container(
        clock=clock,
        workers_repo=workers_repo,
        settings_repo=settings_repo,
        punches_repo=punches_repo,
        punch_recorder=punch_recorder,
        settings_service=SettingsService(settings_repo),
        conn=conn,
    )


def build_container(
    *,
    db_config: Mapping,
    timezone: str = DEFAULT_TIMEZONE,
    punch_store: str = PunchStoreKind.MYSQL.value,
    max_retries: int = DEFAULT_PUNCH_MAX_RETRIES,
    retry_backoff: float = DEFAULT_PUNCH_RETRY_BACKOFF,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    if PunchStoreKind(punch_store) is PunchStoreKind.MEMORY:
        punches_repo: PunchHistoryStore = MemoryPunchHistoryStore()
    else:
        punches_repo = MySQLPunchHistoryStore(conn)

    return build_services(
        workers_repo=MySQLWorkerDirectory(conn),
        settings_repo=MySQLSettingsStore(conn),
        punches_repo=punches_repo,
        clock=ZoneClock(timezone),
        max_retries=max_retries,
        retry_backoff=retry_backoff,
        conn=conn,
    )
