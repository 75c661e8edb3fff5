from __future__ import annotations

import warnings
from io import BytesIO

import pytest
from pypdf import PdfReader
from reportlab.pdfgen import canvas

from core.models.user import UserRole
from berkaslifecycle.exceptions.errors import NotFoundError, UnauthenticatedError
from berkaslifecycle.logic.services.pdf_stamp_service import PdfStampService
from berkaslifecycle.tests.conftest import make_actor


def _text(pdf: bytes) -> str:
    return "\n".join(page.extract_text() or "" for page in PdfReader(BytesIO(pdf)).pages)


def _blank_pdf(pages: int) -> bytes:
    buf = BytesIO()
    c = canvas.Canvas(buf)
    for i in range(pages):
        c.drawString(100, 700, f"halaman {i + 1}")
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.mark.parametrize("role", list(UserRole))
def test_every_role_can_print(app, actors, berkas_at_kks, role):
    pdf = app.printing.print_sheet(berkas_at_kks.id, actors[role])
    assert pdf.startswith(b"%PDF")
    assert f"Dicetak oleh {actors[role].name}" in _text(pdf)


def test_stamp_names_the_role(app, actors, berkas_at_kks):
    pdf = app.printing.print_sheet(berkas_at_kks.id, actors[UserRole.DATA_UKUR])
    assert "(Operator Data Ukur)" in _text(pdf)


def test_sheet_contains_sections_and_history(app, qc, berkas_at_kks):
    app.stages.submit_qc(berkas_at_kks.id, "KKS", "REVISI", "ulangi ukur", qc)
    text = _text(app.printing.print_sheet(berkas_at_kks.id, qc))
    assert "B-100" in text
    assert "Data Pemetaan" in text
    assert "REVISI" in text
    assert "ulangi ukur" in text


def test_print_unknown_file(app, admin):
    with pytest.raises(NotFoundError):
        app.printing.print_sheet("missing", admin)


def test_print_requires_active_actor(app, berkas_at_kks):
    with pytest.raises(UnauthenticatedError):
        app.printing.print_sheet(berkas_at_kks.id, make_actor(UserRole.DATA_UKUR, active=False))


def test_stamp_keeps_page_count_and_adds_text():
    stamped = PdfStampService().stamp(_blank_pdf(3), text="Dicetak oleh Tester", watermark="SALINAN")
    reader = PdfReader(BytesIO(stamped))
    assert len(reader.pages) == 3
    for page in reader.pages:
        assert "Dicetak oleh Tester" in page.extract_text()


def test_stamp_leaves_source_untouched_and_uses_writer_pages():
    source = _blank_pdf(2)
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        stamped = PdfStampService().stamp(source, text="Dicetak oleh Tester")
    deprecated = [
        w for w in caught
        if issubclass(w.category, DeprecationWarning)
        and ("pypdf" in w.filename or "replace_contents" in str(w.message))
    ]
    assert deprecated == []

    assert "Dicetak oleh Tester" not in _text(source)
    assert "Dicetak oleh Tester" in _text(stamped)
