from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .audit_entry import AuditEntry
from .berkas import Berkas


@dataclass(slots=True)
class BerkasListItem:
    """
    Read model for list/detail views.

    'is_overdue' and 'days_since_activity' are computed at read time and
    never stored.
    """
    berkas: Berkas
    last_entry: Optional[AuditEntry]
    is_overdue: bool
    days_since_activity: Optional[int]
