from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .berkas_status import BerkasStatus


class QcGate(str, Enum):
    """Quality-control checkpoints; each gate is decided while the file sits at it."""
    KKS = "KKS"
    KASI = "KASI"

    @property
    def status(self) -> BerkasStatus:
        return BerkasStatus(self.value)


class QcDecision(str, Enum):
    ACC = "ACC"
    REVISI = "REVISI"


@dataclass(slots=True)
class QcRecord:
    """Latest decision at one gate. Resubmission overwrites it."""
    decision: Optional[QcDecision] = None
    note: Optional[str] = None
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None

    def is_accepted(self) -> bool:
        return self.decision is QcDecision.ACC
