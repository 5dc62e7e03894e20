from __future__ import annotations

import threading
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from ..core.exceptions import ConflictError
from .model import PunchDraft, PunchRecord, history_order_key
from .repository import PunchHistoryStore

Key = Tuple[str, str]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemoryPunchHistoryStore(PunchHistoryStore):
    """Process-local punch history.

    Records live in one arena list (``record_id`` is the index + 1); each
    (tenant, badge) keeps the ids of its records and a cached head so the
    recorder never has to rescan history to find the last punch.
    """

    def __init__(self, *, now: Optional[Callable[[], datetime]] = None):
        self._now = now or _utcnow
        self._lock = threading.Lock()
        self._arena: List[PunchRecord] = []
        self._by_key: Dict[Key, List[int]] = {}
        self._heads: Dict[Key, int] = {}
        self._missed_days: Set[Tuple[str, str, str]] = set()

    def append(self, draft: PunchDraft, *, expected_last_id: Optional[int]) -> int:
        return self.append_all([draft], expected_last_id=expected_last_id)[0]

    def append_all(self, drafts: Sequence[PunchDraft], *, expected_last_id: Optional[int]) -> List[int]:
        if not drafts:
            return []
        key = (drafts[0].tenant, drafts[0].badge)
        if any((d.tenant, d.badge) != key for d in drafts):
            raise ValueError("append_all only accepts drafts of a single (tenant, badge)")

        with self._lock:
            current = self._heads.get(key)
            if current != expected_last_id:
                raise ConflictError(
                    f"history of {key[1]!r} moved (expected last={expected_last_id}, found={current})"
                )

            missed = {(d.tenant, d.badge, d.date) for d in drafts if d.is_missed_out_punch}
            if missed & self._missed_days or len(missed) < sum(1 for d in drafts if d.is_missed_out_punch):
                raise ConflictError(f"missed-out punch already recorded for {key[1]!r}")

            ids: List[int] = []
            head = self._arena[current - 1] if current else None
            for d in drafts:
                record = PunchRecord(record_id=len(self._arena) + 1, created_at=self._now(), **asdict(d))
                self._arena.append(record)
                ids.append(record.record_id)
                if head is None or history_order_key(record) >= history_order_key(head):
                    head = record

            self._by_key.setdefault(key, []).extend(ids)
            self._heads[key] = head.record_id
            self._missed_days |= missed
            return ids

    def last_for(self, tenant: str, badge: str) -> Optional[PunchRecord]:
        with self._lock:
            head = self._heads.get((tenant, badge))
            return self._arena[head - 1] if head else None

    def get_by_id(self, record_id: int) -> Optional[PunchRecord]:
        with self._lock:
            if 1 <= int(record_id) <= len(self._arena):
                return self._arena[int(record_id) - 1]
            return None

    def list_ordered(self, tenant: str, badge: str) -> Sequence[PunchRecord]:
        with self._lock:
            records = [self._arena[i - 1] for i in self._by_key.get((tenant, badge), [])]
        return tuple(sorted(records, key=history_order_key))

    def list_for_tenant(self, tenant: str) -> Sequence[PunchRecord]:
        with self._lock:
            records = [r for r in self._arena if r.tenant == tenant]
        return tuple(sorted(records, key=history_order_key))
