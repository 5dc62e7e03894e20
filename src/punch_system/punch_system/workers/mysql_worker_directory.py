from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, store_errors
from .model import Department, Worker
from .repository import WorkerDirectory

_WORKER_COLUMNS = "worker_id, tenant, badge, name, username, department_id, salary_per_day, photo"


def _to_worker(r: Dict[str, Any]) -> Worker:
    return Worker(
        worker_id=int(r["worker_id"]),
        tenant=r["tenant"],
        badge=r["badge"],
        name=r["name"],
        username=r["username"],
        department_id=int(r["department_id"]),
        salary_per_day=Decimal(str(r.get("salary_per_day") or 0)),
        photo=r.get("photo"),
    )


class MySQLWorkerDirectory(WorkerDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_badge(self, tenant: str, badge: str) -> Optional[Worker]:
        with store_errors("load worker"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_WORKER_COLUMNS} FROM workers WHERE tenant=%s AND badge=%s",
                (tenant, badge),
            )
            r = fetchone(cur)
            return _to_worker(r) if r else None

    def find_by_badge_any_tenant(self, badge: str) -> Optional[Worker]:
        with store_errors("load worker"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_WORKER_COLUMNS} FROM workers WHERE badge=%s LIMIT 1", (badge,))
            r = fetchone(cur)
            return _to_worker(r) if r else None

    def find_department(self, department_id: int) -> Optional[Department]:
        with store_errors("load department"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT department_id, tenant, name FROM departments WHERE department_id=%s",
                (int(department_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Department(department_id=int(r["department_id"]), tenant=r["tenant"], name=r["name"])
