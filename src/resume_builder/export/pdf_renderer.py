from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from resume_builder.export.pdf_fallback import _parse_html_to_lines, html_to_pdf_fpdf2
from resume_builder.export.templates import TemplateId, get_template
from resume_builder.models.resume import GeneratedResume

logger = logging.getLogger(__name__)

BASE_TEMPLATE_DIR = Path(__file__).parent

# Export page geometry
PAGE_SIZE = "A4"
PAGE_MARGIN_MM = 15


@dataclass(frozen=True)
class RenderedDocument:
    """HTML document produced for one template."""

    template_id: TemplateId
    html: str

    @property
    def text(self) -> str:
        return html_to_text(self.html)


def render(
    resume_text: str,
    template_id: str | TemplateId = TemplateId.PROFESSIONAL,
    title: str = "Resume",
) -> RenderedDocument:
    """Screen render: resume text laid out in the template's markup.

    Output is deterministic for the same inputs. Empty text gives an empty
    but styled document.
    """
    template = get_template(template_id)
    return RenderedDocument(
        template_id=template.id,
        html=_to_styled_html(resume_text or "", template_id, title, export=False),
    )


def render_html_preview(
    resume_text: str,
    template_id: str | TemplateId = TemplateId.PROFESSIONAL,
    title: str = "Resume",
) -> str:
    """Convert resume text to themed HTML string (for preview)."""
    return render(resume_text, template_id, title).html


def render_pdf(
    resume_text: str,
    template_id: str | TemplateId = TemplateId.PROFESSIONAL,
    title: str = "Resume",
) -> bytes:
    """Export render: the screen layout on A4 pages, as PDF bytes."""
    html = _to_styled_html(resume_text or "", template_id, title, export=True)
    return _html_to_pdf(html)


def render_text_download(resume: GeneratedResume) -> tuple[str, bytes]:
    """Return ``(filename, content)`` for a plain-text download."""
    return resume.download_filename, resume.resume_content.encode("utf-8")


def html_to_text(html: str) -> str:
    """Visible text of a rendered document, one line per block."""
    lines = _parse_html_to_lines(_body(html))
    return "\n".join(text for kind, text in lines if kind != "break")


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(BASE_TEMPLATE_DIR)),
        autoescape=True,
    )


def _to_styled_html(
    resume_text: str,
    template_id: str | TemplateId,
    title: str,
    *,
    export: bool,
) -> str:
    template = get_template(template_id)
    layout = template.layout(resume_text)
    page_css = (
        f"@page {{ size: {PAGE_SIZE}; margin: {PAGE_MARGIN_MM}mm; }}" if export else ""
    )
    return _environment().get_template("resume.html").render(
        title=title,
        css=Markup(template.stylesheet),
        page_css=Markup(page_css),
        template_id=template.id.value,
        layout=layout,
    )


def _body(html: str) -> str:
    start = html.find("<body>")
    end = html.rfind("</body>")
    if start == -1 or end == -1:
        return html
    return html[start + len("<body>") : end]


def _html_to_pdf(html: str) -> bytes:
    """Convert HTML string to PDF bytes using WeasyPrint, with fpdf2 fallback."""
    try:
        from weasyprint import HTML
        return HTML(string=html).write_pdf()
    except (ImportError, OSError):
        logger.warning("WeasyPrint not available, using fpdf2 fallback")
        return html_to_pdf_fpdf2(html, margin_mm=PAGE_MARGIN_MM)
