from __future__ import annotations

from typing import Optional, Protocol

from .model import Department, Worker


class WorkerDirectory(Protocol):
    """Lookup interface for workers and their departments.

    Note (DIP): the punch service depends on this interface, not on a concrete DB.
    """

    def find_by_badge(self, tenant: str, badge: str) -> Optional[Worker]:
        raise NotImplementedError

    def find_by_badge_any_tenant(self, badge: str) -> Optional[Worker]:
        """Badges are globally unique, so a reader without tenant context can still resolve one."""

        raise NotImplementedError

    def find_department(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError
