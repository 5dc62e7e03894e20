from __future__ import annotations

from datetime import time
from typing import Union

from ..common.datetime_utils import format_clock_time, parse_clock_time
from ..common.validators import require_non_empty, require_tenant
from ..core.exceptions import ValidationError
from .model import TenantSettings
from .repository import SettingsStore


class SettingsService:
    """Admin-facing read/update of the settings the punch core depends on."""

    def __init__(self, settings: SettingsStore):
        self._settings = settings

    def get(self, tenant: str) -> TenantSettings:
        return self._settings.get_for_tenant(require_tenant(tenant))

    def update_default_end_of_shift(self, tenant: str, value: Union[str, time]) -> TenantSettings:
        tenant = require_tenant(tenant)
        if isinstance(value, time):
            end_of_shift = value
        else:
            raw = require_non_empty(value, "defaultEndOfShift")
            try:
                end_of_shift = parse_clock_time(raw)
            except ValueError as e:
                raise ValidationError(f"defaultEndOfShift is not a valid time: {raw}") from e
        return self._settings.update_default_end_of_shift(tenant, end_of_shift.replace(microsecond=0))

    def to_dict(self, settings: TenantSettings) -> dict:
        return {
            "subdomain": settings.tenant,
            "defaultEndOfShift": settings.default_end_of_shift.strftime("%H:%M"),
            "defaultEndOfShiftLabel": format_clock_time(settings.default_end_of_shift),
            "updatedAt": settings.updated_at.isoformat() if settings.updated_at else None,
        }
