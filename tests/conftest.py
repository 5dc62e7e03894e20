from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Optional

import pytest

from src.punch_system.punch_system.common.clock import ClockReading
from src.punch_system.punch_system.core.constants import DEFAULT_END_OF_SHIFT
from src.punch_system.punch_system.punches.memory_punch_store import MemoryPunchHistoryStore
from src.punch_system.punch_system.punches.service import PunchRecorder
from src.punch_system.punch_system.settings.model import TenantSettings
from src.punch_system.punch_system.workers.model import Department, Worker


class FixedClock:
    """Clock that only moves when a test moves it."""

    def __init__(self, date: str, time: str):
        self.reading = ClockReading(date=date, time=time)
        self.calls = 0

    def set(self, date: str, time: str) -> None:
        self.reading = ClockReading(date=date, time=time)

    def now(self, tenant: str) -> ClockReading:
        self.calls += 1
        return self.reading


@dataclass
class InMemoryWorkers:
    workers: dict[tuple[str, str], Worker]
    departments: dict[int, Department]

    def find_by_badge(self, tenant: str, badge: str) -> Optional[Worker]:
        return self.workers.get((tenant, badge))

    def find_by_badge_any_tenant(self, badge: str) -> Optional[Worker]:
        for (_, b), w in self.workers.items():
            if b == badge:
                return w
        return None

    def find_department(self, department_id: int) -> Optional[Department]:
        return self.departments.get(department_id)


@dataclass
class InMemorySettings:
    end_of_shift: dict[str, time] = field(default_factory=dict)

    def get_for_tenant(self, tenant: str) -> TenantSettings:
        value = self.end_of_shift.setdefault(tenant, DEFAULT_END_OF_SHIFT)
        return TenantSettings(tenant=tenant, default_end_of_shift=value)

    def default_end_of_shift(self, tenant: str) -> time:
        return self.get_for_tenant(tenant).default_end_of_shift

    def update_default_end_of_shift(self, tenant: str, value: time) -> TenantSettings:
        self.end_of_shift[tenant] = value
        return self.get_for_tenant(tenant)


TENANT = "techvaseegrah"
BADGE = "LF3643"


@pytest.fixture
def workers() -> InMemoryWorkers:
    return InMemoryWorkers(
        workers={
            (TENANT, BADGE): Worker(
                worker_id=1, tenant=TENANT, badge=BADGE, name="Arun R", username="arun", department_id=10
            ),
            (TENANT, "LF3644"): Worker(
                worker_id=2, tenant=TENANT, badge="LF3644", name="Divya S", username="divya", department_id=10
            ),
            (TENANT, "ORPHAN"): Worker(
                worker_id=3, tenant=TENANT, badge="ORPHAN", name="No Dept", username="nodept", department_id=99
            ),
            ("othercorp", "OC1"): Worker(
                worker_id=4, tenant="othercorp", badge="OC1", name="Meena K", username="meena", department_id=20
            ),
        },
        departments={
            10: Department(department_id=10, tenant=TENANT, name="Production"),
            20: Department(department_id=20, tenant="othercorp", name="Stores"),
        },
    )


@pytest.fixture
def settings_store() -> InMemorySettings:
    return InMemorySettings()


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock("2024-01-01", "9:15:00 AM")


@pytest.fixture
def punch_store() -> MemoryPunchHistoryStore:
    return MemoryPunchHistoryStore()


@pytest.fixture
def recorder(punch_store, workers, settings_store, fixed_clock) -> PunchRecorder:
    return PunchRecorder(punch_store, workers, settings_store, fixed_clock, retry_backoff=0.0)
