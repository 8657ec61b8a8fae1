"""
PDF Report Renderer (reportlab)
Binary projection of a ReportDocument. Only imported when reportlab is
installed; see select_renderer() in core/report.py.
"""

import io
import html
import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from invoice_roi.core.errors import RenderingUnavailable
from invoice_roi.core.models import ReportDocument
from invoice_roi.core.report import RenderedReport, ReportRenderer

logger = logging.getLogger("PdfRenderer")
logger.setLevel(logging.INFO)


class PdfReportRenderer(ReportRenderer):
    """Renders the report to an A4 PDF, bounded by a timeout."""
    name = "pdf"

    def __init__(self, timeout_seconds: float = 20.0):
        self.timeout_seconds = timeout_seconds
        self.styles = getSampleStyleSheet()

        self.title_style = ParagraphStyle(
            'ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=20,
            textColor=colors.HexColor('#0b74de'),
            spaceAfter=12,
        )
        self.heading_style = ParagraphStyle(
            'ReportHeading',
            parent=self.styles['Heading3'],
            spaceBefore=10,
            spaceAfter=6,
        )
        self.muted_style = ParagraphStyle(
            'Muted',
            parent=self.styles['Normal'],
            textColor=colors.HexColor('#666666'),
            spaceAfter=10,
        )

    def render_binary(self, document: ReportDocument, basename: str) -> Optional[RenderedReport]:
        """
        Build the PDF in a worker thread.

        Raises:
            RenderingUnavailable: On any reportlab failure or timeout
        """
        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(self._build_pdf, document)
        try:
            content = future.result(timeout=self.timeout_seconds)
        except FutureTimeoutError as e:
            raise RenderingUnavailable(
                f"PDF rendering timed out after {self.timeout_seconds}s"
            ) from e
        except Exception as e:
            raise RenderingUnavailable(f"PDF rendering failed: {e}") from e
        finally:
            executor.shutdown(wait=False)

        logger.debug(f"PDF rendered: {basename}.pdf ({len(content)} bytes)")
        return RenderedReport(
            content=content,
            media_type="application/pdf",
            filename=f"{basename}.pdf"
        )

    def _build_pdf(self, document: ReportDocument) -> bytes:
        buffer = io.BytesIO()
        pdf = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            title=document.title,
            leftMargin=0.75 * inch,
            rightMargin=0.75 * inch,
            topMargin=0.75 * inch,
            bottomMargin=0.75 * inch,
        )
        esc = html.escape
        elements = [
            Paragraph(esc(document.title), self.title_style),
            Paragraph(esc(document.intro), self.muted_style),
        ]

        for section in document.sections:
            elements.append(Paragraph(esc(section.heading), self.heading_style))
            data = [[row.label, row.value] for row in section.rows]
            table = Table(data, colWidths=[3.0 * inch, 3.5 * inch])
            style = [
                ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
                ('TEXTCOLOR', (0, 0), (0, -1), colors.HexColor('#444444')),
                ('ROWBACKGROUNDS', (0, 0), (-1, -1), [colors.white, colors.HexColor('#f5f7fa')]),
                ('VALIGN', (0, 0), (-1, -1), 'TOP'),
                ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
            ]
            for index, row in enumerate(section.rows):
                if row.emphasis:
                    style.append(('FONTSIZE', (0, index), (-1, index), 12))
                    style.append(('TEXTCOLOR', (1, index), (1, index), colors.HexColor('#00bb55')))
            table.setStyle(TableStyle(style))
            elements.append(table)
            elements.append(Spacer(1, 8))

        elements.append(Paragraph(esc(document.notes), self.muted_style))
        pdf.build(elements)
        return buffer.getvalue()
