"""
===============================================================================
PdfStampService – stamp a "dicetak oleh" line onto every page
-------------------------------------------------------------------------------
Implementation
    - reportlab renders one overlay page per page size.
    - pypdf merges the overlay onto all pages.
Works on in-memory PDFs; nothing touches the file system.
===============================================================================
"""
from __future__ import annotations
from io import BytesIO
from typing import Dict, Tuple

from reportlab.pdfgen import canvas  # type: ignore
from reportlab.lib.units import cm  # type: ignore
from reportlab.lib.colors import Color  # type: ignore
from pypdf import PdfReader, PdfWriter, PageObject  # type: ignore


class PdfStampService:
    """Create stamped copies of PDFs."""

    def stamp(self, pdf: bytes, *, text: str, watermark: str | None = None) -> bytes:
        reader = PdfReader(BytesIO(pdf))
        writer = PdfWriter()
        overlays: Dict[Tuple[float, float], PageObject] = {}

        for page in reader.pages:
            w = float(page.mediabox.width)
            h = float(page.mediabox.height)
            key = (round(w, 1), round(h, 1))
            if key not in overlays:
                overlays[key] = PdfReader(BytesIO(self._render_overlay(w, h, text, watermark))).pages[0]
            # merge onto the writer-owned copy; source pages stay untouched
            writer.add_page(page).merge_page(overlays[key])

        out = BytesIO()
        writer.write(out)
        return out.getvalue()

    # ---- helpers ---- #
    @staticmethod
    def _render_overlay(width_pt: float, height_pt: float, text: str, watermark: str | None) -> bytes:
        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=(width_pt, height_pt))

        if watermark:
            # semi-transparent grey text diagonally across the page
            c.saveState()
            c.translate(width_pt / 2.0, height_pt / 2.0)
            c.rotate(45)
            c.setFillColor(Color(0.2, 0.2, 0.2, alpha=0.12))
            c.setFont("Helvetica-Bold", 48)
            c.drawCentredString(0, 0, watermark)
            c.restoreState()

        # footer label
        c.setFillColor(Color(0.1, 0.1, 0.1, alpha=0.6))
        c.setFont("Helvetica", 8)
        c.drawString(1.5 * cm, 1.0 * cm, text)

        c.showPage()
        c.save()
        return buf.getvalue()
