from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..common.datetime_utils import format_clock_time, format_iso_date, parse_clock_time
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, store_errors
from .model import PunchDraft, PunchRecord, entry_order_key
from .repository import PunchHistoryStore

_COLUMNS = """
    record_id, tenant, badge, worker_id, worker_name, department_id, department_name,
    punch_date, punch_time, presence, is_missed_out_punch, created_at
"""
_ORDER = "ORDER BY punch_date ASC, punch_time ASC, created_at ASC, record_id ASC"


def _to_record(r: Dict[str, Any]) -> PunchRecord:
    return PunchRecord(
        record_id=int(r["record_id"]),
        tenant=r["tenant"],
        badge=r["badge"],
        worker_id=int(r["worker_id"]),
        worker_name=r["worker_name"],
        department_id=int(r["department_id"]),
        department_name=r["department_name"],
        date=format_iso_date(r["punch_date"]),
        time=format_clock_time(normalize_mysql_time(r["punch_time"])),
        presence=bool(r["presence"]),
        is_missed_out_punch=bool(r["is_missed_out_punch"]),
        created_at=r["created_at"],
    )


class MySQLPunchHistoryStore(PunchHistoryStore):
    """Punch history in MySQL.

    ``punch_heads`` caches the last record per (tenant, badge). Appends lock the
    head row, compare it with what the caller read, insert, then move the head,
    all in one transaction.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, draft: PunchDraft, *, expected_last_id: Optional[int]) -> int:
        return self.append_all([draft], expected_last_id=expected_last_id)[0]

    def append_all(self, drafts: Sequence[PunchDraft], *, expected_last_id: Optional[int]) -> List[int]:
        if not drafts:
            return []
        tenant, badge = drafts[0].tenant, drafts[0].badge
        if any((d.tenant, d.badge) != (tenant, badge) for d in drafts):
            raise ValueError("append_all only accepts drafts of a single (tenant, badge)")

        with store_errors("append punches"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT h.last_record_id, r.punch_date, r.punch_time
                FROM punch_heads h
                LEFT JOIN punch_records r ON r.record_id = h.last_record_id
                WHERE h.tenant=%s AND h.badge=%s
                FOR UPDATE
                """,
                (tenant, badge),
            )
            head = fetchone(cur)
            current = int(head["last_record_id"]) if head else None
            if current != expected_last_id:
                raise ConflictError(
                    f"history of {badge!r} moved (expected last={expected_last_id}, found={current})"
                )

            head_id = current
            head_key = (
                entry_order_key(format_iso_date(head["punch_date"]), format_clock_time(normalize_mysql_time(head["punch_time"])))
                if head and head.get("punch_date") is not None
                else None
            )

            ids: List[int] = []
            for d in drafts:
                cur.execute(
                    """
                    INSERT INTO punch_records(
                        tenant, badge, worker_id, worker_name, department_id, department_name,
                        punch_date, punch_time, presence, is_missed_out_punch
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        d.tenant,
                        d.badge,
                        int(d.worker_id),
                        d.worker_name,
                        int(d.department_id),
                        d.department_name,
                        d.date,
                        parse_clock_time(d.time),
                        int(d.presence),
                        int(d.is_missed_out_punch),
                    ),
                )
                record_id = int(cur.lastrowid)
                ids.append(record_id)
                key = entry_order_key(d.date, d.time)
                if head_key is None or key >= head_key:
                    head_id, head_key = record_id, key

            if head is None:
                cur.execute(
                    "INSERT INTO punch_heads(tenant, badge, last_record_id) VALUES(%s,%s,%s)",
                    (tenant, badge, head_id),
                )
            else:
                cur.execute(
                    "UPDATE punch_heads SET last_record_id=%s WHERE tenant=%s AND badge=%s",
                    (head_id, tenant, badge),
                )
            return ids

    def last_for(self, tenant: str, badge: str) -> Optional[PunchRecord]:
        with store_errors("load last punch"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM punch_records
                WHERE record_id = (SELECT last_record_id FROM punch_heads WHERE tenant=%s AND badge=%s)
                """,
                (tenant, badge),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_by_id(self, record_id: int) -> Optional[PunchRecord]:
        with store_errors("load punch"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM punch_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_ordered(self, tenant: str, badge: str) -> Sequence[PunchRecord]:
        with store_errors("list punches"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM punch_records WHERE tenant=%s AND badge=%s {_ORDER}",
                (tenant, badge),
            )
            return tuple(_to_record(r) for r in fetchall(cur))

    def list_for_tenant(self, tenant: str) -> Sequence[PunchRecord]:
        with store_errors("list punches"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM punch_records WHERE tenant=%s {_ORDER}", (tenant,))
            return tuple(_to_record(r) for r in fetchall(cur))
