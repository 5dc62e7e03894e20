from __future__ import annotations

from datetime import time
from typing import Optional, Sequence

from .factory import PunchStrategyFactory
from .model import PunchRecord, ResolverOutcome


class PresenceResolver:
    """Decide what a new scan appends to a worker's history.

    Pure: no clock, no store. Callers pass the local ``today`` (``YYYY-MM-DD``),
    the local ``now`` (12-hour clock string) and the tenant's default end of
    shift.
    """

    def __init__(self, strategy_factory: PunchStrategyFactory | None = None):
        self._factory = strategy_factory or PunchStrategyFactory()

    def resolve(
        self,
        history: Sequence[PunchRecord],
        *,
        today: str,
        now: str,
        default_end_of_shift: time,
    ) -> ResolverOutcome:
        last = history[-1] if len(history) else None
        return self.resolve_after(last, today=today, now=now, default_end_of_shift=default_end_of_shift)

    def resolve_after(
        self,
        last: Optional[PunchRecord],
        *,
        today: str,
        now: str,
        default_end_of_shift: time,
    ) -> ResolverOutcome:
        strategy = self._factory.for_scan(last=last, today=today)
        return strategy.decide(last=last, today=today, now=now, default_end_of_shift=default_end_of_shift)
