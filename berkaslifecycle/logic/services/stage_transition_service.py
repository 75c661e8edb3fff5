"""
===============================================================================
StageTransitionService – explicit stage moves and QC gate decisions
-------------------------------------------------------------------------------
Transitions:
    DATA_BERKAS -> DATA_UKUR -> PEMETAAN -> KKS -> KASI -> SELESAI

    move_stage : successor of the current stage (any role with move_stage)
    submit_qc  : decision at the gate the file is parked at
                 ACC    -> successor
                 REVISI -> status unchanged (never reverts)

Precondition order for submit_qc (first failure wins):
    role -> existence -> gate/decision values -> REVISI note
    -> file at that gate -> (KASI) KKS accepted

Collaborators
    - BerkasRepository / AuditService
    - RolePolicy
===============================================================================
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from core.common.errors import ForbiddenError, NotFoundError, ValidationError
from core.config.config_service import config_service
from core.helpers.date_time_helper import utc_now
from core.logging.logic.logger import logger
from core.models.user import User
from berkaslifecycle.exceptions.errors import (
    GatePrerequisiteUnmetError,
    TerminalStateError,
    WrongGateStageError,
)
from berkaslifecycle.logic.policy.role_policy import BerkasAction, RolePolicy
from berkaslifecycle.logic.repository.berkas_repository import BerkasRepository
from berkaslifecycle.logic.services.audit_service import AuditService, moved_note, qc_note
from berkaslifecycle.logic.services.service_support import (
    FEATURE,
    WriteRunner,
    log_denied,
    require_action,
    require_actor,
)
from berkaslifecycle.models.audit_entry import AuditEntry
from berkaslifecycle.models.berkas import Berkas
from berkaslifecycle.models.qc import QcDecision, QcGate, QcRecord


@dataclass(frozen=True)
class TransitionResult:
    berkas: Berkas
    entry: AuditEntry


def _parse_gate(gate: QcGate | str) -> Optional[QcGate]:
    if isinstance(gate, QcGate):
        return gate
    try:
        return QcGate(str(gate).strip().upper())
    except ValueError:
        return None


def _parse_decision(decision: QcDecision | str) -> Optional[QcDecision]:
    if isinstance(decision, QcDecision):
        return decision
    try:
        return QcDecision(str(decision).strip().upper())
    except ValueError:
        return None


class StageTransitionService:
    """Encapsulates stage transitions and their persistence."""

    def __init__(
        self,
        repo: BerkasRepository,
        audit: AuditService,
        runner: WriteRunner,
        *,
        clock: Callable[[], datetime] = utc_now,
        optimistic_locking: Optional[bool] = None,
    ) -> None:
        self._repo = repo
        self._audit = audit
        self._run = runner
        self._clock = clock
        self._optimistic = (
            config_service.workflow.optimistic_locking if optimistic_locking is None else optimistic_locking
        )

    # ------------------------------------------------------------------ #
    # move_stage                                                         #
    # ------------------------------------------------------------------ #
    def move_stage(
        self,
        berkas_id: str,
        actor: User,
        note: Optional[str] = None,
        forwarded_to: Optional[str] = None,
    ) -> TransitionResult:
        user = require_action(actor, BerkasAction.MOVE_STAGE, berkas_id)

        def unit() -> TransitionResult:
            berkas = self._load(berkas_id)
            successor = berkas.status.successor()
            if successor is None:
                log_denied(user, "move_stage", "file is SELESAI", berkas_id)
                raise TerminalStateError("Berkas sudah selesai")

            before = berkas.status
            version = berkas.version
            berkas.status = successor
            berkas.updated_at = self._clock()
            self._repo.update(berkas, expected_version=version if self._optimistic else None)
            entry = self._audit.record(
                berkas.id, before, successor, user,
                (note or "").strip() or moved_note(user),
                forwarded_to=forwarded_to,
            )
            return TransitionResult(berkas=berkas, entry=entry)

        result = self._run(unit)
        logger.log(feature=FEATURE, event="StageMoved", user_id=user.id, username=user.name,
                   reference_id=berkas_id,
                   message=f"{result.entry.status_before} -> {result.entry.status_after}")
        return result

    # ------------------------------------------------------------------ #
    # submit_qc                                                          #
    # ------------------------------------------------------------------ #
    def submit_qc(
        self,
        berkas_id: str,
        gate: QcGate | str,
        decision: QcDecision | str,
        note: Optional[str],
        actor: User,
    ) -> TransitionResult:
        user = require_actor(actor)
        if not RolePolicy.can_submit_qc(user.role):
            log_denied(user, "qc", f"role {user.role.value} cannot decide QC gates", berkas_id)
            raise ForbiddenError("Hanya ADMIN atau QUALITY_CONTROL yang dapat melakukan QC", action="qc")

        note = (note or "").strip() or None

        def unit() -> TransitionResult:
            berkas = self._load(berkas_id)

            parsed_gate = _parse_gate(gate)
            parsed_decision = _parse_decision(decision)
            if parsed_gate is None or parsed_decision is None:
                raise ValidationError("Tipe QC harus KKS/KASI dan keputusan harus ACC/REVISI")
            if parsed_decision is QcDecision.REVISI and not note:
                raise ValidationError("Keterangan wajib diisi untuk REVISI", missing=["note"])
            if berkas.status is not parsed_gate.status:
                raise WrongGateStageError(
                    f"QC {parsed_gate.value} hanya dapat dilakukan saat status {parsed_gate.value} "
                    f"(status sekarang {berkas.status.value})"
                )
            if parsed_gate is QcGate.KASI and not berkas.qc_kks.is_accepted():
                raise GatePrerequisiteUnmetError("QC KKS harus ACC sebelum QC KASI")

            before = berkas.status
            version = berkas.version
            now = self._clock()
            record = QcRecord(decision=parsed_decision, note=note, decided_by=user.name, decided_at=now)
            if parsed_gate is QcGate.KKS:
                berkas.qc_kks = record
            else:
                berkas.qc_kasi = record
            if parsed_decision is QcDecision.ACC:
                berkas.status = before.successor() or before
            berkas.updated_at = now
            self._repo.update(berkas, expected_version=version if self._optimistic else None)
            entry = self._audit.record(
                berkas.id, before, berkas.status, user,
                qc_note(parsed_gate, parsed_decision, user, note),
            )
            return TransitionResult(berkas=berkas, entry=entry)

        result = self._run(unit)
        logger.log(feature=FEATURE, event="QcSubmitted", user_id=user.id, username=user.name,
                   reference_id=berkas_id, message=result.entry.note)
        return result

    # ------------------------------------------------------------------ #
    def _load(self, berkas_id: str) -> Berkas:
        berkas = self._repo.get_by_id(berkas_id)
        if berkas is None:
            raise NotFoundError("Berkas tidak ditemukan")
        return berkas
