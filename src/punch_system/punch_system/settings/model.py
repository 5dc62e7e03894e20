from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional


@dataclass(frozen=True)
class TenantSettings:
    """Per-tenant knobs read by the punch core."""

    tenant: str
    default_end_of_shift: time
    updated_at: Optional[datetime] = None
