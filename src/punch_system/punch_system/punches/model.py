from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ..common.datetime_utils import parse_clock_time, parse_iso_date
from ..core.enums import PunchLabel


@dataclass(frozen=True)
class PunchDraft:
    """A punch ready to be persisted (no identity yet)."""

    tenant: str
    badge: str
    worker_id: int
    worker_name: str
    department_id: int
    department_name: str
    date: str
    time: str
    presence: bool
    is_missed_out_punch: bool = False


@dataclass(frozen=True)
class PunchRecord:
    """Domain entity: one entry of a worker's punch history.

    ``department_name`` is a snapshot taken when the punch was recorded.
    ``date`` is ``YYYY-MM-DD`` and ``time`` is a 12-hour clock string, both in
    the tenant's local calendar.
    """

    record_id: int
    tenant: str
    badge: str
    worker_id: int
    worker_name: str
    department_id: int
    department_name: str
    date: str
    time: str
    presence: bool
    is_missed_out_punch: bool
    created_at: datetime

    @property
    def label(self) -> PunchLabel:
        return PunchLabel.from_presence(self.presence)


def entry_order_key(day: str, clock: str) -> Tuple:
    return (parse_iso_date(day), parse_clock_time(clock))


def history_order_key(record: PunchRecord) -> Tuple:
    """Logical order of history: local date, local time, then insertion."""

    return entry_order_key(record.date, record.time) + (record.created_at, record.record_id)


@dataclass(frozen=True)
class PunchEntry:
    """What the resolver decides; the recorder turns entries into drafts."""

    date: str
    time: str
    presence: bool
    is_missed_out_punch: bool = False


@dataclass(frozen=True)
class ResolverOutcome:
    """Zero or one synthesized missed-out entry, then exactly one real entry."""

    entries: Tuple[PunchEntry, ...]

    def __post_init__(self):
        if not self.entries or len(self.entries) > 2:
            raise ValueError("outcome holds one real entry and at most one missed-out entry")
        if self.entries[-1].is_missed_out_punch:
            raise ValueError("the last entry of an outcome must be a real punch")

    @property
    def real(self) -> PunchEntry:
        return self.entries[-1]

    @property
    def missed_out(self) -> Optional[PunchEntry]:
        return self.entries[0] if len(self.entries) == 2 else None


@dataclass(frozen=True)
class PunchOutcome:
    label: PunchLabel
    record: PunchRecord
    missed_out: Optional[PunchRecord] = None

    @property
    def message(self) -> str:
        return f"Attendance marked as {self.label.value}"
