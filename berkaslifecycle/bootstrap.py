"""
Composition root: wires repositories and services around ONE shared
SQLite handle so record writes and audit entries share a transaction.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from core.common.db_interface import SQLiteRepository
from core.helpers.date_time_helper import utc_now
from usermanagement.logic.authenticator import Authenticator
from usermanagement.logic.session_repository import SessionRepository
from usermanagement.logic.user_manager import UserManager
from usermanagement.logic.user_repository import UserRepository
from berkaslifecycle.logic.repository.sqlite.audit_repository_sqlite import AuditRepositorySQLite
from berkaslifecycle.logic.repository.sqlite.base_sqlite_repo import open_database
from berkaslifecycle.logic.repository.sqlite.berkas_repository_sqlite import BerkasRepositorySQLite
from berkaslifecycle.logic.services.audit_service import AuditService
from berkaslifecycle.logic.services.berkas_service import BerkasService
from berkaslifecycle.logic.services.printing_service import PrintingService
from berkaslifecycle.logic.services.service_support import WriteRunner
from berkaslifecycle.logic.services.stage_transition_service import StageTransitionService


@dataclass(slots=True)
class BerkasApp:
    db: SQLiteRepository
    users: UserRepository
    authenticator: Authenticator
    user_manager: UserManager
    audit: AuditService
    berkas: BerkasService
    stages: StageTransitionService
    printing: PrintingService

    def close(self) -> None:
        self.db.close()


def build_app(
    db_path: Optional[Path | str] = None,
    *,
    clock: Callable[[], datetime] = utc_now,
    sleep: Optional[Callable[[float], None]] = None,
    optimistic_locking: Optional[bool] = None,
) -> BerkasApp:
    """
    Build every service on top of *db_path* (default: [Database] berkas).

    *clock* and *sleep* are injectable for tests.
    """
    db = open_database(db_path)
    users = UserRepository(db)
    sessions = SessionRepository(db)
    berkas_repo = BerkasRepositorySQLite(db)
    audit = AuditService(AuditRepositorySQLite(db), clock=clock)
    runner = WriteRunner(db, sleep=sleep)

    return BerkasApp(
        db=db,
        users=users,
        authenticator=Authenticator(users, sessions, clock=clock),
        user_manager=UserManager(users, sessions),
        audit=audit,
        berkas=BerkasService(berkas_repo, audit, runner, clock=clock, optimistic_locking=optimistic_locking),
        stages=StageTransitionService(berkas_repo, audit, runner, clock=clock, optimistic_locking=optimistic_locking),
        printing=PrintingService(berkas_repo, audit, clock=clock),
    )
