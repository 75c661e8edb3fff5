"""Status-history service and the wording of its notes.

Notes are stored as human-readable Indonesian text, the same text the
history timeline shows.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from core.helpers.date_time_helper import utc_now
from core.models.user import User
from berkaslifecycle.logic.repository.audit_repository import AuditRepository
from berkaslifecycle.models.audit_entry import AuditEntry
from berkaslifecycle.models.qc import QcDecision, QcGate


def created_note(actor: User) -> str:
    return f"Berkas dibuat oleh {actor.role.value}: {actor.name}"


def edited_note(actor: User, sections: Iterable[str]) -> str:
    return f"Berkas diedit oleh {actor.role.value}: {actor.name}. Section: {', '.join(sections)}"


def moved_note(actor: User) -> str:
    return f"Berkas dipindahkan oleh {actor.role.value}: {actor.name}"


def deleted_note(actor: User) -> str:
    return f"Berkas dihapus oleh {actor.role.value}: {actor.name}"


def qc_note(gate: QcGate, decision: QcDecision, actor: User, note: Optional[str]) -> str:
    text = f"QC {gate.value} {decision.value} oleh {actor.name}"
    return f"{text}: {note}" if note else text


class AuditService:
    """Append and read audit entries; there is no way to change one."""

    def __init__(self, repo: AuditRepository, *, clock: Callable[[], datetime] = utc_now) -> None:
        self._repo = repo
        self._clock = clock

    def record(
        self,
        berkas_id: str,
        before: str,
        after: str,
        actor: User,
        note: str,
        forwarded_to: Optional[str] = None,
    ) -> AuditEntry:
        entry = AuditEntry(
            id=None,
            berkas_id=berkas_id,
            status_before=str(getattr(before, "value", before)),
            status_after=str(getattr(after, "value", after)),
            actor_name=actor.name,
            note=note,
            created_at=self._clock(),
            forwarded_to=(forwarded_to or "").strip() or None,
        )
        return self._repo.append(entry)

    def list_for(self, berkas_id: str) -> List[AuditEntry]:
        return self._repo.list_for(berkas_id)

    def latest_for_many(self, berkas_ids: Sequence[str]) -> Dict[str, AuditEntry]:
        return self._repo.latest_for_many(berkas_ids)
