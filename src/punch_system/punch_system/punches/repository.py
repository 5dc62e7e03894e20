from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

from .model import PunchDraft, PunchRecord


class PunchHistoryStore(Protocol):
    """Append-only punch history per (tenant, badge).

    Appends are conditional: ``expected_last_id`` is the id of the last record
    the caller based its decision on (``None`` for an empty history). If the
    stored last record differs, nothing is written and ``ConflictError`` is
    raised. I/O failures surface as ``TransientStoreError``.
    """

    def append(self, draft: PunchDraft, *, expected_last_id: Optional[int]) -> int:
        raise NotImplementedError

    def append_all(self, drafts: Sequence[PunchDraft], *, expected_last_id: Optional[int]) -> List[int]:
        """Persist drafts of one (tenant, badge) atomically, in order."""

        raise NotImplementedError

    def last_for(self, tenant: str, badge: str) -> Optional[PunchRecord]:
        raise NotImplementedError

    def get_by_id(self, record_id: int) -> Optional[PunchRecord]:
        raise NotImplementedError

    def list_ordered(self, tenant: str, badge: str) -> Sequence[PunchRecord]:
        raise NotImplementedError

    def list_for_tenant(self, tenant: str) -> Sequence[PunchRecord]:
        raise NotImplementedError
