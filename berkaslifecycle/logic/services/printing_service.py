"""
===============================================================================
PrintingService – printable summary sheet of a case file
-------------------------------------------------------------------------------
Rules
    - Requires the 'print' action (every role has it).
    - Renders the three sections, the QC gates and the status history.
    - Stamps each page with "Dicetak oleh <name>" and the local print time.
    - Returns PDF bytes; sending them to a printer is the caller's concern.
    - Every print is written to the application log.

Collaborators
    - BerkasRepository / AuditService
    - PdfStampService
===============================================================================
"""
from __future__ import annotations

from datetime import date, datetime
from io import BytesIO
from typing import Any, Callable, List, Tuple

from reportlab.lib.pagesizes import A4  # type: ignore
from reportlab.lib.units import cm  # type: ignore
from reportlab.pdfgen import canvas  # type: ignore

from core.common.errors import NotFoundError
from core.config.config_service import config_service
from core.helpers.date_time_helper import format_date, to_utc_iso, utc_now, utc_to_local_str
from core.logging.logic.logger import logger
from core.models.user import User
from berkaslifecycle.logic.policy.role_policy import BerkasAction, RolePolicy
from berkaslifecycle.logic.repository.berkas_repository import BerkasRepository
from berkaslifecycle.logic.services.audit_service import AuditService
from berkaslifecycle.logic.services.pdf_stamp_service import PdfStampService
from berkaslifecycle.logic.services.service_support import FEATURE, require_action
from berkaslifecycle.models.audit_entry import AuditEntry
from berkaslifecycle.models.berkas import Berkas
from berkaslifecycle.models.qc import QcRecord
from berkaslifecycle.models.section import SECTION_FIELDS, SECTION_ORDER

_SECTION_TITLES = {
    "DATA_BERKAS": "Data Berkas",
    "DATA_UKUR": "Data Ukur",
    "DATA_PEMETAAN": "Data Pemetaan",
}


def _label(field_name: str) -> str:
    return field_name.replace("_", " ").title()


def _display(value: Any) -> str:
    if value is None or value == "":
        return "-"
    if isinstance(value, date) and not isinstance(value, datetime):
        return format_date(value)
    if isinstance(value, float):
        return f"{value:,.0f}".replace(",", ".")
    return str(value)


class PrintingService:
    """Render and stamp the summary sheet."""

    def __init__(
        self,
        repo: BerkasRepository,
        audit: AuditService,
        *,
        stamp: PdfStampService | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repo = repo
        self._audit = audit
        self._stamp = stamp or PdfStampService()
        self._clock = clock

    def print_sheet(self, berkas_id: str, actor: User) -> bytes:
        user = require_action(actor, BerkasAction.PRINT, berkas_id)
        berkas = self._repo.get_by_id(berkas_id)
        if berkas is None:
            raise NotFoundError("Berkas tidak ditemukan")
        history = self._audit.list_for(berkas_id)

        raw = self._render(berkas, history)
        printed_at = utc_to_local_str(to_utc_iso(self._clock()))
        role_name = RolePolicy.display_name(user.role)
        pdf = self._stamp.stamp(raw, text=f"Dicetak oleh {user.name} ({role_name}) pada {printed_at}")

        logger.log(feature=FEATURE, event="Printed", user_id=user.id, username=user.name,
                   reference_id=berkas_id, message=f"No. berkas {berkas.no_berkas}")
        return pdf

    # ---- rendering ---- #
    def _render(self, berkas: Berkas, history: List[AuditEntry]) -> bytes:
        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=A4)
        c.setTitle(f"Berkas {berkas.no_berkas or berkas.id}")
        _, height = A4
        y = height - 2 * cm

        def line(text: str, *, font: Tuple[str, int] = ("Helvetica", 9), gap: float = 0.5) -> None:
            nonlocal y
            if y < 2.5 * cm:
                c.showPage()
                y = height - 2 * cm
            c.setFont(*font)
            c.drawString(2 * cm, y, text[:110])
            y -= gap * cm

        line(config_service.general.app_name, font=("Helvetica-Bold", 14), gap=0.8)
        line(f"No. Berkas: {_display(berkas.no_berkas)}", font=("Helvetica-Bold", 11))
        line(f"Status: {berkas.status.label}", font=("Helvetica", 10), gap=0.8)

        for section in SECTION_ORDER:
            line(_SECTION_TITLES[section.value], font=("Helvetica-Bold", 11), gap=0.6)
            for name in SECTION_FIELDS[section]:
                line(f"{_label(name)}: {_display(getattr(berkas, name))}")
            y -= 0.3 * cm

        line("Quality Control", font=("Helvetica-Bold", 11), gap=0.6)
        for title, rec in (("KKS", berkas.qc_kks), ("KASI", berkas.qc_kasi)):
            line(f"{title}: {self._qc_text(rec)}")
        y -= 0.3 * cm

        line("Riwayat", font=("Helvetica-Bold", 11), gap=0.6)
        for e in history:
            stamp = utc_to_local_str(to_utc_iso(e.created_at))
            target = f" -> {e.forwarded_to}" if e.forwarded_to else ""
            line(f"{stamp}  {e.status_before} -> {e.status_after}  {e.note}{target}", font=("Helvetica", 8), gap=0.45)

        c.showPage()
        c.save()
        return buf.getvalue()

    @staticmethod
    def _qc_text(rec: QcRecord) -> str:
        if rec.decision is None:
            return "-"
        when = utc_to_local_str(to_utc_iso(rec.decided_at)) if rec.decided_at else "-"
        text = f"{rec.decision.value} oleh {rec.decided_by or '-'} ({when})"
        return f"{text}: {rec.note}" if rec.note else text
