from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import time
from typing import Optional

from ..model import PunchRecord, ResolverOutcome


class PunchStrategy(ABC):
    """Strategy Pattern: encapsulate how a scan turns into history entries."""

    @abstractmethod
    def decide(
        self,
        *,
        last: Optional[PunchRecord],
        today: str,
        now: str,
        default_end_of_shift: time,
    ) -> ResolverOutcome:
        raise NotImplementedError
