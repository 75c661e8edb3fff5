"""
Overdue ("tunggakan") classification.

A file is overdue when it is not SELESAI and its newest audit entry is at
least `threshold_days` old. Computed at read time, never stored.
"""
from __future__ import annotations
from datetime import datetime, timedelta
from typing import Optional, Sequence

from core.config.config_service import config_service
from core.helpers.date_time_helper import ensure_utc, utc_now
from berkaslifecycle.models.audit_entry import AuditEntry
from berkaslifecycle.models.berkas import Berkas
from berkaslifecycle.models.berkas_status import BerkasStatus


def latest_activity(entries: Sequence[AuditEntry]) -> Optional[datetime]:
    if not entries:
        return None
    return max(ensure_utc(e.created_at) for e in entries)


def days_since_activity(entries: Sequence[AuditEntry], now: Optional[datetime] = None) -> Optional[int]:
    """Whole days since the newest entry; None without entries."""
    last = latest_activity(entries)
    if last is None:
        return None
    delta = ensure_utc(now or utc_now()) - last
    return max(delta.days, 0)


def is_overdue(
    berkas: Berkas,
    entries: Sequence[AuditEntry],
    now: Optional[datetime] = None,
    threshold_days: Optional[int] = None,
) -> bool:
    if berkas.status is BerkasStatus.SELESAI:
        return False
    last = latest_activity(entries)
    if last is None:
        return False
    days = config_service.workflow.overdue_days if threshold_days is None else threshold_days
    return last <= ensure_utc(now or utc_now()) - timedelta(days=days)
