from __future__ import annotations
from enum import Enum
from typing import Optional


class BerkasStatus(str, Enum):
    """Stage of a case file. Declaration order is the progression order."""
    DATA_BERKAS = "DATA_BERKAS"
    DATA_UKUR = "DATA_UKUR"
    PEMETAAN = "PEMETAAN"
    KKS = "KKS"
    KASI = "KASI"
    SELESAI = "SELESAI"

    @property
    def rank(self) -> int:
        return STATUS_PROGRESSION.index(self)

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    def successor(self) -> Optional["BerkasStatus"]:
        """Next stage, or None at SELESAI."""
        idx = self.rank + 1
        return STATUS_PROGRESSION[idx] if idx < len(STATUS_PROGRESSION) else None

    def is_terminal(self) -> bool:
        return self is BerkasStatus.SELESAI


STATUS_PROGRESSION: tuple[BerkasStatus, ...] = tuple(BerkasStatus)

STATUS_LABELS: dict[BerkasStatus, str] = {
    BerkasStatus.DATA_BERKAS: "Data Berkas",
    BerkasStatus.DATA_UKUR: "Data Ukur",
    BerkasStatus.PEMETAAN: "Pemetaan",
    BerkasStatus.KKS: "KKS",
    BerkasStatus.KASI: "KASI",
    BerkasStatus.SELESAI: "Selesai",
}

# pseudo-statuses that only appear in audit entries
STATUS_NEW = "NEW"
STATUS_DELETED = "DELETED"
