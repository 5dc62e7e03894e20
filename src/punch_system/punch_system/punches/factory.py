from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .model import PunchRecord
from .strategies.base import PunchStrategy
from .strategies.first_punch_strategy import FirstPunchStrategy
from .strategies.missed_out_strategy import MissedOutStrategy
from .strategies.toggle_strategy import ToggleStrategy


@dataclass
class PunchStrategyFactory:
    """Factory Pattern: choose the strategy from the last punch alone."""

    def for_scan(self, *, last: Optional[PunchRecord], today: str) -> PunchStrategy:
        if last is None:
            return FirstPunchStrategy()
        if last.presence and last.date != today:
            return MissedOutStrategy()
        return ToggleStrategy()
