from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True, frozen=True)
class AuditEntry:
    """
    One status-change record of a case file (append only).

    'status_before' is "NEW" on creation, 'status_after' is "DELETED" on
    deletion; otherwise both are BerkasStatus values.
    """
    id: Optional[int]
    berkas_id: str
    status_before: str
    status_after: str
    actor_name: str
    note: str
    created_at: datetime
    forwarded_to: Optional[str] = None
