"""
===============================================================================
BerkasService – create / edit / delete / read case files
-------------------------------------------------------------------------------
Rules
    - Every call takes the acting user explicitly.
    - Authorization and validation errors are raised before any write.
      Edit/delete check existence and SELESAI first, so a finished file
      answers TerminalState to every role.
    - Edit payloads are filtered to the role's sections first, then
      classified; a payload left empty by filtering counts as a
      DATA_BERKAS edit and is accepted. The status is resolved forward
      from section completeness.
    - A record write and its audit entry commit in one transaction; the
      whole unit is retried on transient storage errors.
    - Overdue flags are computed at read time only.

Collaborators
    - BerkasRepository / AuditService
    - RolePolicy, SectionClassifier, auto_advance, overdue_policy
===============================================================================
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from core.common.errors import NotFoundError, ValidationError
from core.config.config_service import config_service
from core.helpers.date_time_helper import utc_now
from core.logging.logic.logger import logger
from core.models.user import User
from berkaslifecycle.exceptions.errors import TerminalStateError
from berkaslifecycle.logic.policy import auto_advance, overdue_policy
from berkaslifecycle.logic.policy.role_policy import BerkasAction
from berkaslifecycle.logic.policy.section_classifier import SectionClassifier
from berkaslifecycle.logic.repository.berkas_repository import BerkasRepository
from berkaslifecycle.logic.services.audit_service import (
    AuditService,
    created_note,
    deleted_note,
    edited_note,
)
from berkaslifecycle.logic.services.service_support import (
    FEATURE,
    WriteRunner,
    log_denied,
    require_action,
    require_actor,
)
from berkaslifecycle.logic.util.field_coercion import coerce_values
from berkaslifecycle.models.audit_entry import AuditEntry
from berkaslifecycle.models.berkas import Berkas
from berkaslifecycle.models.berkas_list_item import BerkasListItem
from berkaslifecycle.models.berkas_status import STATUS_DELETED, STATUS_NEW, BerkasStatus
from berkaslifecycle.models.section import CREATE_REQUIRED, SECTION_ORDER

_log = logging.getLogger(__name__)


class BerkasService:
    """Case-file use cases apart from explicit stage moves."""

    def __init__(
        self,
        repo: BerkasRepository,
        audit: AuditService,
        runner: WriteRunner,
        *,
        clock: Callable[[], datetime] = utc_now,
        optimistic_locking: Optional[bool] = None,
        overdue_days: Optional[int] = None,
        list_limit: Optional[int] = None,
    ) -> None:
        wf = config_service.workflow
        self._repo = repo
        self._audit = audit
        self._run = runner
        self._clock = clock
        self._optimistic = wf.optimistic_locking if optimistic_locking is None else optimistic_locking
        self._overdue_days = wf.overdue_days if overdue_days is None else overdue_days
        self._list_limit = wf.list_limit if list_limit is None else list_limit

    # ------------------------------------------------------------------ #
    # Create                                                             #
    # ------------------------------------------------------------------ #
    def create(self, values: Mapping[str, Any], actor: User) -> Berkas:
        user = require_action(actor, BerkasAction.CREATE)

        data = coerce_values(SectionClassifier.filter_allowed(values, user.role))
        missing = [name for name in CREATE_REQUIRED if data.get(name) is None]
        if missing:
            raise ValidationError(
                "Nomor berkas, nama pemohon, dan jenis permohonan wajib diisi",
                missing=missing,
            )

        def unit() -> Berkas:
            now = self._clock()
            berkas = Berkas(
                id=uuid.uuid4().hex,
                status=BerkasStatus.DATA_BERKAS,
                created_at=now,
                updated_at=now,
            )
            berkas.apply(data)
            self._repo.insert(berkas)
            self._audit.record(berkas.id, STATUS_NEW, berkas.status, user, created_note(user))
            return berkas

        berkas = self._run(unit)
        logger.log(feature=FEATURE, event="Created", user_id=user.id, username=user.name,
                   reference_id=berkas.id, message=f"No. berkas {berkas.no_berkas}")
        return berkas

    # ------------------------------------------------------------------ #
    # Edit                                                               #
    # ------------------------------------------------------------------ #
    def edit(self, berkas_id: str, payload: Mapping[str, Any], actor: User) -> Berkas:
        user = require_actor(actor)

        filtered = SectionClassifier.filter_allowed(payload, user.role)
        touched = SectionClassifier.classify(filtered)
        sections = [s.value for s in SECTION_ORDER if s in touched]

        def unit() -> Berkas:
            berkas = self._load_mutable(berkas_id, user, "edit")
            require_action(user, BerkasAction.EDIT, berkas_id)
            data = coerce_values(filtered)
            version = berkas.version
            before = berkas.status
            berkas.apply(data)
            berkas.status = auto_advance.resolve(before, berkas.field_values())
            berkas.updated_at = self._clock()
            self._repo.update(berkas, expected_version=version if self._optimistic else None)
            self._audit.record(berkas.id, before, berkas.status, user, edited_note(user, sections))
            return berkas

        berkas = self._run(unit)
        _log.debug("Edited %s sections=%s status=%s", berkas_id, sections, berkas.status.value)
        logger.log(feature=FEATURE, event="Edited", user_id=user.id, username=user.name,
                   reference_id=berkas_id,
                   message=f"Section: {', '.join(sections)}; status {berkas.status.value}")
        return berkas

    # ------------------------------------------------------------------ #
    # Delete                                                             #
    # ------------------------------------------------------------------ #
    def delete(self, berkas_id: str, actor: User) -> None:
        user = require_actor(actor)

        def unit() -> AuditEntry:
            berkas = self._load_mutable(berkas_id, user, "delete")
            require_action(user, BerkasAction.DELETE, berkas_id)
            entry = self._audit.record(berkas.id, berkas.status, STATUS_DELETED, user, deleted_note(user))
            if not self._repo.delete(berkas.id):
                raise NotFoundError("Berkas tidak ditemukan")
            return entry

        self._run(unit)
        logger.log(feature=FEATURE, event="Deleted", user_id=user.id, username=user.name,
                   reference_id=berkas_id, message="Berkas dihapus")

    # ------------------------------------------------------------------ #
    # Read                                                               #
    # ------------------------------------------------------------------ #
    def get(self, berkas_id: str, actor: User) -> BerkasListItem:
        require_action(actor, BerkasAction.VIEW, berkas_id)
        berkas = self._repo.get_by_id(berkas_id)
        if berkas is None:
            raise NotFoundError("Berkas tidak ditemukan")
        entries = self._audit.list_for(berkas_id)
        return self._to_item(berkas, entries[-1] if entries else None)

    def list(
        self,
        actor: User,
        status: Optional[BerkasStatus | str] = None,
        query: Optional[str] = None,
        overdue_only: bool = False,
        limit: Optional[int] = None,
    ) -> List[BerkasListItem]:
        require_action(actor, BerkasAction.VIEW)
        if status is not None and not isinstance(status, BerkasStatus):
            try:
                status = BerkasStatus(str(status).strip().upper())
            except ValueError as ex:
                raise ValidationError(f"Status tidak valid: {status}") from ex
        limit = self._list_limit if limit is None else limit

        # overdue filtering happens after the read, so fetch without a limit
        rows = self._repo.search(query=query, status=status, limit=None if overdue_only else limit)
        latest = self._audit.latest_for_many([b.id for b in rows])
        items = [self._to_item(b, latest.get(b.id)) for b in rows]
        if overdue_only:
            items = [i for i in items if i.is_overdue][:limit]
        return items

    def history(self, berkas_id: str, actor: User) -> List[AuditEntry]:
        require_action(actor, BerkasAction.VIEW, berkas_id)
        return self._audit.list_for(berkas_id)

    def statistics(self, actor: User) -> Dict[str, int]:
        """Counts per status plus 'tunggakan' (overdue) and 'total'."""
        require_action(actor, BerkasAction.VIEW)
        counts = self._repo.count_by_status()
        rows = self._repo.search(status=None, limit=None)
        latest = self._audit.latest_for_many([b.id for b in rows])
        overdue = sum(1 for b in rows if self._to_item(b, latest.get(b.id)).is_overdue)

        stats: Dict[str, int] = {s.value: counts.get(s, 0) for s in BerkasStatus}
        stats["tunggakan"] = overdue
        stats["total"] = sum(counts.values())
        return stats

    # ------------------------------------------------------------------ #
    # Helpers                                                            #
    # ------------------------------------------------------------------ #
    def _load_mutable(self, berkas_id: str, user: User, action: str) -> Berkas:
        berkas = self._repo.get_by_id(berkas_id)
        if berkas is None:
            raise NotFoundError("Berkas tidak ditemukan")
        if berkas.is_terminal():
            log_denied(user, action, "file is SELESAI", berkas_id)
            raise TerminalStateError("Berkas sudah selesai dan tidak dapat diubah")
        return berkas

    def _to_item(self, berkas: Berkas, last: Optional[AuditEntry]) -> BerkasListItem:
        entries = [last] if last else []
        now = self._clock()
        return BerkasListItem(
            berkas=berkas,
            last_entry=last,
            is_overdue=overdue_policy.is_overdue(berkas, entries, now=now, threshold_days=self._overdue_days),
            days_since_activity=overdue_policy.days_since_activity(entries, now),
        )
