from __future__ import annotations

from datetime import time
from typing import Protocol

from .model import TenantSettings


class SettingsStore(Protocol):
    def get_for_tenant(self, tenant: str) -> TenantSettings:
        """Return the tenant's settings, creating a default row on first access."""

        raise NotImplementedError

    def default_end_of_shift(self, tenant: str) -> time:
        raise NotImplementedError

    def update_default_end_of_shift(self, tenant: str, value: time) -> TenantSettings:
        raise NotImplementedError
