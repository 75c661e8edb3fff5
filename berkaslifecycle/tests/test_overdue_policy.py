from __future__ import annotations

from datetime import datetime, timedelta, timezone

from berkaslifecycle.logic.policy.overdue_policy import days_since_activity, is_overdue
from berkaslifecycle.models.audit_entry import AuditEntry
from berkaslifecycle.models.berkas import Berkas
from berkaslifecycle.models.berkas_status import BerkasStatus

NOW = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)


def _entry(days_ago: float, entry_id: int = 1) -> AuditEntry:
    return AuditEntry(
        id=entry_id,
        berkas_id="b1",
        status_before="DATA_BERKAS",
        status_after="DATA_UKUR",
        actor_name="Ani",
        note="x",
        created_at=NOW - timedelta(days=days_ago),
    )


def test_stale_file_is_overdue():
    berkas = Berkas(id="b1", status=BerkasStatus.DATA_UKUR)
    assert is_overdue(berkas, [_entry(8)], now=NOW, threshold_days=7)
    assert days_since_activity([_entry(8)], NOW) == 8


def test_selesai_is_never_overdue():
    berkas = Berkas(id="b1", status=BerkasStatus.SELESAI)
    assert not is_overdue(berkas, [_entry(400)], now=NOW, threshold_days=7)


def test_threshold_is_inclusive():
    berkas = Berkas(id="b1", status=BerkasStatus.KKS)
    assert is_overdue(berkas, [_entry(7)], now=NOW, threshold_days=7)
    assert not is_overdue(berkas, [_entry(6.9)], now=NOW, threshold_days=7)


def test_newest_entry_counts():
    berkas = Berkas(id="b1", status=BerkasStatus.PEMETAAN)
    entries = [_entry(30, 1), _entry(2, 2)]
    assert not is_overdue(berkas, entries, now=NOW, threshold_days=7)
    assert days_since_activity(entries, NOW) == 2


def test_no_entries_means_not_overdue():
    berkas = Berkas(id="b1", status=BerkasStatus.DATA_BERKAS)
    assert not is_overdue(berkas, [], now=NOW)
    assert days_since_activity([], NOW) is None


def test_naive_timestamps_are_taken_as_utc():
    berkas = Berkas(id="b1", status=BerkasStatus.DATA_UKUR)
    naive = AuditEntry(
        id=1, berkas_id="b1", status_before="NEW", status_after="DATA_BERKAS",
        actor_name="Ani", note="x", created_at=datetime(2024, 5, 1, 12, 0),
    )
    assert is_overdue(berkas, [naive], now=NOW, threshold_days=7)
