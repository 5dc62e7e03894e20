from __future__ import annotations

from datetime import time
from typing import Any, Dict

from ..core.constants import DEFAULT_END_OF_SHIFT
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time, store_errors
from .model import TenantSettings
from .repository import SettingsStore


def _to_settings(r: Dict[str, Any]) -> TenantSettings:
    return TenantSettings(
        tenant=r["tenant"],
        default_end_of_shift=normalize_mysql_time(r["default_end_of_shift"]) or DEFAULT_END_OF_SHIFT,
        updated_at=r.get("updated_at"),
    )


class MySQLSettingsStore(SettingsStore):
    def __init__(self, conn_factory: DatabaseConnection, *, fallback_end_of_shift: time = DEFAULT_END_OF_SHIFT):
        self._conn_factory = conn_factory
        self._fallback = fallback_end_of_shift

    def get_for_tenant(self, tenant: str) -> TenantSettings:
        with store_errors("load settings"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT tenant, default_end_of_shift, updated_at FROM tenant_settings WHERE tenant=%s",
                (tenant,),
            )
            r = fetchone(cur)
            if r:
                return _to_settings(r)

            cur.execute(
                """
                INSERT IGNORE INTO tenant_settings(tenant, default_end_of_shift)
                VALUES(%s,%s)
                """,
                (tenant, self._fallback),
            )
            return TenantSettings(tenant=tenant, default_end_of_shift=self._fallback)

    def default_end_of_shift(self, tenant: str) -> time:
        return self.get_for_tenant(tenant).default_end_of_shift

    def update_default_end_of_shift(self, tenant: str, value: time) -> TenantSettings:
        with store_errors("update settings"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tenant_settings(tenant, default_end_of_shift)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE default_end_of_shift=VALUES(default_end_of_shift)
                """,
                (tenant, value),
            )
            cur.execute(
                "SELECT tenant, default_end_of_shift, updated_at FROM tenant_settings WHERE tenant=%s",
                (tenant,),
            )
            return _to_settings(fetchone(cur))
