from __future__ import annotations

import threading
from dataclasses import replace
from datetime import time

import mysql.connector
import pytest

from src.punch_system.punch_system.core.enums import PunchLabel
from src.punch_system.punch_system.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    TransientStoreError,
    ValidationError,
)
from src.punch_system.punch_system.punches.memory_punch_store import MemoryPunchHistoryStore
from src.punch_system.punch_system.punches.service import PunchRecorder
from src.punch_system.punch_system.workers.mysql_worker_directory import MySQLWorkerDirectory


def _presences(store, badge="LF3643"):
    return [r.presence for r in store.list_ordered("techvaseegrah", badge)]


def test_first_second_third_punch_scenario(recorder, punch_store, fixed_clock):
    first = recorder.record_punch("techvaseegrah", "LF3643")
    fixed_clock.set("2024-01-01", "6:10:00 PM")
    second = recorder.record_punch("techvaseegrah", "LF3643")
    fixed_clock.set("2024-01-02", "9:05:00 AM")
    third = recorder.record_punch("techvaseegrah", "LF3643")

    assert first.label is PunchLabel.IN and first.record.presence is True
    assert second.label is PunchLabel.OUT and second.record.presence is False
    assert third.label is PunchLabel.IN and third.missed_out is None
    assert first.message == "Attendance marked as in"
    assert second.message == "Attendance marked as out"
    assert _presences(punch_store) == [True, False, True]


def test_forgotten_out_is_backfilled_on_the_open_day(recorder, punch_store, fixed_clock):
    recorder.record_punch("techvaseegrah", "LF3643")
    fixed_clock.set("2024-01-03", "8:50:00 AM")

    outcome = recorder.record_punch("techvaseegrah", "LF3643")

    assert outcome.label is PunchLabel.IN
    assert outcome.record.date == "2024-01-03"
    assert outcome.missed_out is not None
    assert outcome.missed_out.date == "2024-01-01"
    assert outcome.missed_out.time == "7:00:00 PM"
    assert outcome.missed_out.presence is False
    assert outcome.missed_out.is_missed_out_punch is True

    history = punch_store.list_ordered("techvaseegrah", "LF3643")
    assert [(r.date, r.presence, r.is_missed_out_punch) for r in history] == [
        ("2024-01-01", True, False),
        ("2024-01-01", False, True),
        ("2024-01-03", True, False),
    ]


def test_backfill_uses_tenant_setting(recorder, settings_store, fixed_clock):
    settings_store.update_default_end_of_shift("techvaseegrah", time(17, 30))
    recorder.record_punch("techvaseegrah", "LF3643")
    fixed_clock.set("2024-01-02", "9:00:00 AM")

    outcome = recorder.record_punch("techvaseegrah", "LF3643")

    assert outcome.missed_out.time == "5:30:00 PM"


def test_record_snapshots_worker_and_department(recorder):
    record = recorder.record_punch("techvaseegrah", "LF3643").record

    assert record.tenant == "techvaseegrah"
    assert record.badge == "LF3643"
    assert record.worker_id == 1
    assert record.worker_name == "Arun R"
    assert record.department_name == "Production"
    assert record.date == "2024-01-01"
    assert record.time == "9:15:00 AM"
    assert record.is_missed_out_punch is False


@pytest.mark.parametrize("tenant", [None, "", "   ", "main"])
def test_missing_or_placeholder_tenant_is_rejected(recorder, punch_store, tenant):
    with pytest.raises(ValidationError):
        recorder.record_punch(tenant, "LF3643")
    assert punch_store.list_for_tenant("techvaseegrah") == ()


@pytest.mark.parametrize("badge", [None, "", "  "])
def test_empty_badge_is_rejected(recorder, badge):
    with pytest.raises(ValidationError):
        recorder.record_punch("techvaseegrah", badge)


def test_unknown_worker_is_not_found(recorder):
    with pytest.raises(NotFoundError, match="Worker not found"):
        recorder.record_punch("techvaseegrah", "NOPE")


def test_worker_of_other_tenant_is_not_found(recorder):
    with pytest.raises(NotFoundError):
        recorder.record_punch("techvaseegrah", "OC1")


def test_unknown_department_is_not_found(recorder, punch_store):
    with pytest.raises(NotFoundError, match="Department not found"):
        recorder.record_punch("techvaseegrah", "ORPHAN")
    assert punch_store.list_ordered("techvaseegrah", "ORPHAN") == ()


def test_badge_only_punch_derives_tenant_from_worker(recorder, punch_store):
    outcome = recorder.record_badge_punch("OC1")

    assert outcome.record.tenant == "othercorp"
    assert outcome.record.department_name == "Stores"
    assert len(punch_store.list_ordered("othercorp", "OC1")) == 1


def test_badge_only_punch_unknown_badge(recorder):
    with pytest.raises(NotFoundError):
        recorder.record_badge_punch("NOPE")


def test_list_history_per_badge_and_per_tenant(recorder, fixed_clock):
    recorder.record_punch("techvaseegrah", "LF3643")
    fixed_clock.set("2024-01-01", "9:20:00 AM")
    recorder.record_punch("techvaseegrah", "LF3644")
    recorder.record_badge_punch("OC1")

    assert [r.badge for r in recorder.list_history("techvaseegrah", "LF3643")] == ["LF3643"]
    assert [r.badge for r in recorder.list_history("techvaseegrah")] == ["LF3643", "LF3644"]
    with pytest.raises(ValidationError):
        recorder.list_history("main")


def test_history_rows_for_reports(recorder, fixed_clock):
    recorder.record_punch("techvaseegrah", "LF3643")
    fixed_clock.set("2024-01-02", "9:00:00 AM")
    recorder.record_punch("techvaseegrah", "LF3643")

    rows = recorder.history_rows("techvaseegrah", "LF3643")

    assert [r["status"] for r in rows] == ["IN", "OUT", "IN"]
    assert [r["missed_out"] for r in rows] == [False, True, False]
    assert rows[0]["name"] == "Arun R"
    assert rows[0]["department"] == "Production"


class FlakyStore(MemoryPunchHistoryStore):
    """Fails the first ``failures`` appends with the given error."""

    def __init__(self, error: Exception, failures: int):
        super().__init__()
        self.error = error
        self.failures = failures
        self.append_calls = 0

    def append_all(self, drafts, *, expected_last_id):
        self.append_calls += 1
        if self.append_calls <= self.failures:
            raise self.error
        return super().append_all(drafts, expected_last_id=expected_last_id)


def _recorder(store, workers, settings_store, fixed_clock, sleeps, *, max_retries=3):
    return PunchRecorder(
        store, workers, settings_store, fixed_clock, max_retries=max_retries, retry_backoff=0.1, sleep=sleeps.append
    )


def test_conflict_is_retried_against_fresh_history(workers, settings_store, fixed_clock):
    store = FlakyStore(ConflictError("moved"), failures=2)
    sleeps: list[float] = []

    outcome = _recorder(store, workers, settings_store, fixed_clock, sleeps).record_punch("techvaseegrah", "LF3643")

    assert outcome.label is PunchLabel.IN
    assert store.append_calls == 3
    assert fixed_clock.calls == 3
    assert sleeps == []


def test_conflict_surfaces_after_retry_budget(workers, settings_store, fixed_clock):
    store = FlakyStore(ConflictError("moved"), failures=10)

    with pytest.raises(ConflictError):
        _recorder(store, workers, settings_store, fixed_clock, []).record_punch("techvaseegrah", "LF3643")
    assert store.append_calls == 3
    assert store.list_ordered("techvaseegrah", "LF3643") == ()


def test_transient_errors_back_off_then_succeed(workers, settings_store, fixed_clock):
    store = FlakyStore(TransientStoreError("connection reset"), failures=2)
    sleeps: list[float] = []

    outcome = _recorder(store, workers, settings_store, fixed_clock, sleeps).record_punch("techvaseegrah", "LF3643")

    assert outcome.record.presence is True
    assert sleeps == [0.1, 0.2]


def test_transient_errors_surface_as_internal_error(workers, settings_store, fixed_clock):
    store = FlakyStore(TransientStoreError("connection reset"), failures=10)
    sleeps: list[float] = []

    with pytest.raises(InternalError) as exc_info:
        _recorder(store, workers, settings_store, fixed_clock, sleeps).record_punch("techvaseegrah", "LF3643")
    assert isinstance(exc_info.value.__cause__, TransientStoreError)
    assert len(sleeps) == 2


def test_validation_errors_are_not_retried(workers, settings_store, fixed_clock):
    store = FlakyStore(ConflictError("moved"), failures=0)

    with pytest.raises(ValidationError):
        _recorder(store, workers, settings_store, fixed_clock, []).record_punch("main", "LF3643")
    assert store.append_calls == 0


class DownConnection:
    def __init__(self):
        self.attempts = 0

    def connect(self):
        self.attempts += 1
        raise mysql.connector.errors.OperationalError(msg="Lost connection to MySQL server", errno=2013)


@pytest.mark.parametrize(
    "scan",
    [
        lambda r: r.record_punch("techvaseegrah", "LF3643"),
        lambda r: r.record_badge_punch("LF3643"),
    ],
)
def test_worker_lookup_outage_surfaces_as_internal_error(punch_store, settings_store, fixed_clock, scan):
    conn = DownConnection()
    sleeps: list[float] = []
    recorder = _recorder(punch_store, MySQLWorkerDirectory(conn), settings_store, fixed_clock, sleeps)

    with pytest.raises(InternalError) as exc_info:
        scan(recorder)
    assert isinstance(exc_info.value.__cause__, TransientStoreError)
    assert conn.attempts == 3
    assert sleeps == [0.1, 0.2]
    assert punch_store.list_for_tenant("techvaseegrah") == ()


class FlakyWorkers:
    """Directory whose first department lookup fails with a transient error."""

    def __init__(self, inner):
        self.inner = inner
        self.department_calls = 0

    def find_by_badge(self, tenant, badge):
        return self.inner.find_by_badge(tenant, badge)

    def find_by_badge_any_tenant(self, badge):
        return self.inner.find_by_badge_any_tenant(badge)

    def find_department(self, department_id):
        self.department_calls += 1
        if self.department_calls == 1:
            raise TransientStoreError("load department: connection reset")
        return self.inner.find_department(department_id)


def test_department_lookup_is_retried(punch_store, workers, settings_store, fixed_clock):
    flaky = FlakyWorkers(workers)
    sleeps: list[float] = []

    outcome = _recorder(punch_store, flaky, settings_store, fixed_clock, sleeps).record_punch("techvaseegrah", "LF3643")

    assert outcome.record.department_name == "Production"
    assert flaky.department_calls == 2
    assert sleeps == [0.1]


class RacingStore(MemoryPunchHistoryStore):
    """Lets a second writer slip in between our read and our append, once."""

    def __init__(self):
        super().__init__()
        self.raced = False

    def append_all(self, drafts, *, expected_last_id):
        if not self.raced:
            self.raced = True
            intruder = replace(drafts[-1], time="9:14:00 AM")
            super().append_all([intruder], expected_last_id=expected_last_id)
        return super().append_all(drafts, expected_last_id=expected_last_id)


def test_write_from_another_process_is_not_duplicated(workers, settings_store, fixed_clock):
    store = RacingStore()
    recorder = PunchRecorder(store, workers, settings_store, fixed_clock, retry_backoff=0.0)

    outcome = recorder.record_punch("techvaseegrah", "LF3643")

    assert outcome.label is PunchLabel.OUT
    assert _presences(store) == [True, False]


def test_concurrent_scans_of_one_badge_keep_alternation(recorder, punch_store):
    barrier = threading.Barrier(8)
    errors: list[Exception] = []

    def scan():
        barrier.wait()
        try:
            recorder.record_punch("techvaseegrah", "LF3643")
        except Exception as e:  # pragma: no cover - surfaced by the assertion below
            errors.append(e)

    threads = [threading.Thread(target=scan) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    presences = _presences(punch_store)
    assert len(presences) == 8
    assert presences[0] is True
    assert all(a != b for a, b in zip(presences, presences[1:]))


def test_concurrent_scans_of_different_badges_are_independent(recorder, punch_store):
    barrier = threading.Barrier(2)

    def scan(badge):
        barrier.wait()
        recorder.record_punch("techvaseegrah", badge)

    threads = [threading.Thread(target=scan, args=(b,)) for b in ("LF3643", "LF3644")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert _presences(punch_store, "LF3643") == [True]
    assert _presences(punch_store, "LF3644") == [True]
