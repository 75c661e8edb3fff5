from .audit_entry import AuditEntry
from .berkas import Berkas
from .berkas_list_item import BerkasListItem
from .berkas_status import STATUS_DELETED, STATUS_NEW, STATUS_PROGRESSION, BerkasStatus
from .qc import QcDecision, QcGate, QcRecord
from .section import Section

__all__ = [
    "AuditEntry",
    "Berkas",
    "BerkasListItem",
    "BerkasStatus",
    "QcDecision",
    "QcGate",
    "QcRecord",
    "Section",
    "STATUS_DELETED",
    "STATUS_NEW",
    "STATUS_PROGRESSION",
]
