from __future__ import annotations

from typing import Optional

from ..core.constants import NO_TENANT
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_tenant(value: Optional[str]) -> str:
    """Tenant keys are subdomains; the placeholder means the caller never picked one."""
    if not value or not str(value).strip() or str(value).strip() == NO_TENANT:
        raise ValidationError("Company name is missing, login again")
    return str(value).strip()
