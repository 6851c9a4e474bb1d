"""
PDF Service - renders CV documents with ReportLab.

Input is structured content (a title plus labelled sections); output is the
raw PDF bytes, handed to the client as a download.
"""

from io import BytesIO
from typing import Iterable, Optional, Tuple
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from talentos.core.errors import ExternalServiceError

HEADER_TEXT = "TalentosPlus - Hoja de Vida"
HEADER_COLOR = colors.HexColor("#1E88E5")


def _escape_pdf_text(value) -> str:
    """Escape text for ReportLab Paragraph markup."""
    return escape(str(value or "")).replace("\n", "<br/>")


class PdfService:

    def __init__(self):
        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            "CvTitle", parent=styles["Heading1"], fontSize=18, spaceAfter=12
        )
        self.label_style = ParagraphStyle(
            "CvLabel", parent=styles["Heading3"], fontSize=12, spaceBefore=6, spaceAfter=2
        )
        self.body_style = ParagraphStyle(
            "CvBody", parent=styles["BodyText"], fontSize=12, leading=15
        )

    def _draw_page(self, canv, doc):
        canv.saveState()
        width, height = A4
        canv.setFont("Helvetica-Bold", 20)
        canv.setFillColor(HEADER_COLOR)
        canv.drawString(2 * cm, height - 1.6 * cm, HEADER_TEXT)
        canv.setFont("Helvetica", 9)
        canv.setFillColor(colors.black)
        canv.drawCentredString(width / 2, 1 * cm, f"Page {doc.page}")
        canv.restoreState()

    def generate_pdf(self, title: str, sections: Iterable[Tuple[str, Optional[str]]]) -> bytes:
        """Render `title` and (label, text) sections into an A4 document."""
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=2 * cm,
            rightMargin=2 * cm,
            topMargin=3 * cm,
            bottomMargin=2 * cm,
            title=title,
        )

        elements = [Paragraph(_escape_pdf_text(title), self.title_style), Spacer(1, 0.3 * cm)]
        for label, text in sections:
            elements.append(Paragraph(_escape_pdf_text(label), self.label_style))
            elements.append(Paragraph(_escape_pdf_text(text) or "-", self.body_style))

        try:
            doc.build(elements, onFirstPage=self._draw_page, onLaterPages=self._draw_page)
        except Exception as e:
            raise ExternalServiceError(f"Could not render PDF: {e}") from e

        return buffer.getvalue()


def get_pdf_service() -> PdfService:
    """Get PDF service instance."""
    return PdfService()
