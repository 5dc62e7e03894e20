from __future__ import annotations

from enum import Enum


class PunchLabel(str, Enum):
    """Human-readable outcome of a scan."""

    IN = "in"
    OUT = "out"

    @classmethod
    def from_presence(cls, presence: bool) -> "PunchLabel":
        return cls.IN if presence else cls.OUT


class PunchStoreKind(str, Enum):
    """Backends available for punch history."""

    MYSQL = "mysql"
    MEMORY = "memory"
