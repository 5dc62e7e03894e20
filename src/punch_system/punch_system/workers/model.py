from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Worker:
    """Domain entity: a badge holder inside a tenant.

    Read-only for the punch core. ``salary_per_day`` is only consumed by the
    leave workflow.
    """

    worker_id: int
    tenant: str
    badge: str
    name: str
    username: str
    department_id: int
    salary_per_day: Decimal = Decimal("0")
    photo: Optional[str] = None


@dataclass(frozen=True)
class Department:
    department_id: int
    tenant: str
    name: str
