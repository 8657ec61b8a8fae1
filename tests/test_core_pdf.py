"""
Tests for invoice_roi/core/pdf.py (reportlab renderer)
"""

import time

import pytest

from invoice_roi.core.errors import RenderingUnavailable
from invoice_roi.core.metrics import compute_metrics
from invoice_roi.core.pdf import PdfReportRenderer
from invoice_roi.core.report import build_report, render_html, select_renderer


@pytest.fixture
def document(example_scenario):
    return build_report(example_scenario, compute_metrics(example_scenario))


def test_renders_pdf_bytes(document):
    artifact = PdfReportRenderer().render_binary(document, "report-scn-example")

    assert artifact.content.startswith(b"%PDF")
    assert artifact.media_type == "application/pdf"
    assert artifact.filename == "report-scn-example.pdf"


def test_html_projection_is_unchanged(document):
    """The PDF renderer serves the same HTML as the textual renderer."""
    assert PdfReportRenderer().render_html(document) == render_html(document)


def test_build_failure_becomes_rendering_unavailable(document, monkeypatch):
    renderer = PdfReportRenderer()

    def broken(_document):
        raise RuntimeError("font cache corrupted")

    monkeypatch.setattr(renderer, "_build_pdf", broken)

    with pytest.raises(RenderingUnavailable, match="font cache corrupted"):
        renderer.render_binary(document, "report-x")


def test_timeout_becomes_rendering_unavailable(document, monkeypatch):
    renderer = PdfReportRenderer(timeout_seconds=0.05)

    def slow(_document):
        time.sleep(0.5)
        return b"%PDF-late"

    monkeypatch.setattr(renderer, "_build_pdf", slow)

    with pytest.raises(RenderingUnavailable, match="timed out"):
        renderer.render_binary(document, "report-x")


def test_select_renderer_picks_pdf_when_reportlab_is_installed():
    renderer = select_renderer(pdf_enabled=True, pdf_timeout_seconds=5.0)

    assert isinstance(renderer, PdfReportRenderer)
    assert renderer.timeout_seconds == 5.0
    assert renderer.name == "pdf"
