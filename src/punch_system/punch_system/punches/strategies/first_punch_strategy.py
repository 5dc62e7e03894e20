from __future__ import annotations

from datetime import time
from typing import Optional

from ..model import PunchEntry, PunchRecord, ResolverOutcome
from .base import PunchStrategy


class FirstPunchStrategy(PunchStrategy):
    """No history yet: the first punch is always IN."""

    def decide(self, *, last: Optional[PunchRecord], today: str, now: str, default_end_of_shift: time) -> ResolverOutcome:
        return ResolverOutcome(entries=(PunchEntry(date=today, time=now, presence=True),))
