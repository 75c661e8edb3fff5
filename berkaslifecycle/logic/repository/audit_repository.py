"""
Audit Repository Protocol – append-only status history.

There is deliberately no update or delete method.
"""
from __future__ import annotations
from typing import Dict, Iterable, List, Protocol

from berkaslifecycle.models.audit_entry import AuditEntry


class AuditRepository(Protocol):
    def append(self, entry: AuditEntry) -> AuditEntry:
        """Store *entry* and return it with its id set."""
        ...

    def list_for(self, berkas_id: str) -> List[AuditEntry]:
        """Entries of one file, oldest first (ties by insertion order)."""
        ...

    def latest_for_many(self, berkas_ids: Iterable[str]) -> Dict[str, AuditEntry]:
        """Newest entry per file id; files without entries are absent."""
        ...
