from __future__ import annotations

from datetime import time
from typing import Optional

from ...common.datetime_utils import format_clock_time, parse_clock_time
from ..model import PunchEntry, PunchRecord, ResolverOutcome
from .base import PunchStrategy


class MissedOutStrategy(PunchStrategy):
    """Last punch is an IN from an earlier day: close that day, then punch IN.

    The closing OUT is dated on the open IN's day at the tenant's default end of
    shift. When the IN itself was later than that, the OUT takes the IN's time
    so it still sorts after it.
    """

    def decide(self, *, last: Optional[PunchRecord], today: str, now: str, default_end_of_shift: time) -> ResolverOutcome:
        if last is None or not last.presence:
            raise ValueError("missed-out closure needs an open IN punch")

        closing = default_end_of_shift.replace(microsecond=0)
        opened = parse_clock_time(last.time)
        if closing < opened:
            closing = opened

        missed_out = PunchEntry(
            date=last.date,
            time=format_clock_time(closing),
            presence=False,
            is_missed_out_punch=True,
        )
        return ResolverOutcome(entries=(missed_out, PunchEntry(date=today, time=now, presence=True)))
