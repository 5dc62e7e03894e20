from __future__ import annotations

from datetime import time
from typing import Optional

from ..model import PunchEntry, PunchRecord, ResolverOutcome
from .base import PunchStrategy


class ToggleStrategy(PunchStrategy):
    """Flip the last presence (IN -> OUT, OUT -> IN)."""

    def decide(self, *, last: Optional[PunchRecord], today: str, now: str, default_end_of_shift: time) -> ResolverOutcome:
        presence = not last.presence if last is not None else True
        return ResolverOutcome(entries=(PunchEntry(date=today, time=now, presence=presence),))
