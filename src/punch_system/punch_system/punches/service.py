from __future__ import annotations

import logging
import time as _time
from dataclasses import asdict, dataclass
from typing import Callable, List, Optional, Sequence, TypeVar

from ..common.clock import Clock
from ..common.validators import require_non_empty, require_tenant
from ..core.constants import DEFAULT_PUNCH_MAX_RETRIES, DEFAULT_PUNCH_RETRY_BACKOFF
from ..core.exceptions import ConflictError, InternalError, NotFoundError, TransientStoreError
from ..settings.repository import SettingsStore
from ..workers.model import Department, Worker
from ..workers.repository import WorkerDirectory
from .locks import KeyedLocks
from .model import PunchDraft, PunchOutcome, PunchRecord
from .repository import PunchHistoryStore
from .resolver import PresenceResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class PunchRowUI:
    date: str
    time: str
    badge: str
    name: str
    department: str
    status: str
    missed_out: bool


class PunchRecorder:
    """Turn one badge scan into persisted history.

    Scans of the same (tenant, badge) run one at a time inside this process;
    the store's conditional append catches writers in other processes, and
    those conflicts are retried against a fresh read.
    """

    def __init__(
        self,
        punches: PunchHistoryStore,
        workers: WorkerDirectory,
        settings: SettingsStore,
        clock: Clock,
        *,
        resolver: PresenceResolver | None = None,
        locks: KeyedLocks | None = None,
        max_retries: int = DEFAULT_PUNCH_MAX_RETRIES,
        retry_backoff: float = DEFAULT_PUNCH_RETRY_BACKOFF,
        sleep: Callable[[float], None] = _time.sleep,
    ):
        self._punches = punches
        self._workers = workers
        self._settings = settings
        self._clock = clock
        self._resolver = resolver or PresenceResolver()
        self._locks = locks or KeyedLocks()
        self._max_retries = max(1, int(max_retries))
        self._retry_backoff = float(retry_backoff)
        self._sleep = sleep

    def record_punch(self, tenant: str, badge: str) -> PunchOutcome:
        tenant = require_tenant(tenant)
        badge = require_non_empty(badge, "RFID")

        worker = self._retrying(tenant, badge, lambda: self._workers.find_by_badge(tenant, badge))
        if not worker:
            raise NotFoundError("Worker not found")
        return self._record(worker, self._department_of(worker))

    def record_badge_punch(self, badge: str) -> PunchOutcome:
        """Scan from a reader that only knows the badge; the tenant comes from the worker."""

        badge = require_non_empty(badge, "RFID")
        worker = self._retrying("*", badge, lambda: self._workers.find_by_badge_any_tenant(badge))
        if not worker:
            raise NotFoundError("Worker not found")
        require_tenant(worker.tenant)
        return self._record(worker, self._department_of(worker))

    def list_history(self, tenant: str, badge: Optional[str] = None) -> Sequence[PunchRecord]:
        tenant = require_tenant(tenant)
        if badge is None:
            return self._punches.list_for_tenant(tenant)
        return self._punches.list_ordered(tenant, require_non_empty(badge, "RFID"))

    def history_rows(self, tenant: str, badge: Optional[str] = None) -> List[dict]:
        """Flat rows for reports and exports."""

        return [asdict(self._to_row(r)) for r in self.list_history(tenant, badge)]

    def _department_of(self, worker: Worker) -> Department:
        department = self._retrying(
            worker.tenant, worker.badge, lambda: self._workers.find_department(worker.department_id)
        )
        if not department:
            raise NotFoundError("Department not found")
        return department

    def _record(self, worker: Worker, department: Department) -> PunchOutcome:
        with self._locks.hold((worker.tenant, worker.badge)):
            ids = self._retrying(worker.tenant, worker.badge, lambda: self._append(worker, department))

        # Reads only from here on: a retry must never append twice.
        record = self._retrying(worker.tenant, worker.badge, lambda: self._punches.get_by_id(ids[-1]))
        missed_out = None
        if len(ids) > 1:
            missed_out = self._retrying(worker.tenant, worker.badge, lambda: self._punches.get_by_id(ids[0]))
        if missed_out:
            logger.warning(
                "Missed out-punch closed for %s/%s on %s at %s", worker.tenant, worker.badge, missed_out.date, missed_out.time
            )
        logger.info("Punch %s for %s/%s at %s %s", record.label.value, worker.tenant, worker.badge, record.date, record.time)
        return PunchOutcome(label=record.label, record=record, missed_out=missed_out)

    def _retrying(self, tenant: str, badge: str, action: Callable[[], T]) -> T:
        attempt = 0
        while True:
            try:
                return action()
            except ConflictError:
                attempt += 1
                if attempt >= self._max_retries:
                    logger.error("Punch for %s/%s still conflicting after %d attempts", tenant, badge, attempt)
                    raise
                logger.warning("Punch history of %s/%s moved, retrying (%d)", tenant, badge, attempt)
            except TransientStoreError as e:
                attempt += 1
                if attempt >= self._max_retries:
                    logger.error("Punch store unavailable for %s/%s: %s", tenant, badge, e)
                    raise InternalError("Could not record attendance, try again") from e
                delay = self._retry_backoff * (2 ** (attempt - 1))
                logger.warning("Punch store error for %s/%s, retrying in %.2fs: %s", tenant, badge, delay, e)
                self._sleep(delay)

    def _append(self, worker: Worker, department: Department) -> List[int]:
        reading = self._clock.now(worker.tenant)
        end_of_shift = self._settings.default_end_of_shift(worker.tenant)
        last = self._punches.last_for(worker.tenant, worker.badge)

        outcome = self._resolver.resolve_after(
            last, today=reading.date, now=reading.time, default_end_of_shift=end_of_shift
        )
        drafts = [
            PunchDraft(
                tenant=worker.tenant,
                badge=worker.badge,
                worker_id=worker.worker_id,
                worker_name=worker.name,
                department_id=department.department_id,
                department_name=department.name,
                date=entry.date,
                time=entry.time,
                presence=entry.presence,
                is_missed_out_punch=entry.is_missed_out_punch,
            )
            for entry in outcome.entries
        ]
        return self._punches.append_all(drafts, expected_last_id=last.record_id if last else None)

    def _to_row(self, r: PunchRecord) -> PunchRowUI:
        return PunchRowUI(
            date=r.date,
            time=r.time,
            badge=r.badge,
            name=r.worker_name,
            department=r.department_name,
            status="IN" if r.presence else "OUT",
            missed_out=r.is_missed_out_punch,
        )
