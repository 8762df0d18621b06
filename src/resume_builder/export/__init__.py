"""Document rendering: screen HTML and A4 PDF export."""
from resume_builder.export.pdf_renderer import (
    RenderedDocument,
    html_to_text,
    render,
    render_html_preview,
    render_pdf,
    render_text_download,
)
from resume_builder.export.templates import AVAILABLE_TEMPLATES, TemplateId, get_template

__all__ = [
    "AVAILABLE_TEMPLATES",
    "RenderedDocument",
    "TemplateId",
    "get_template",
    "html_to_text",
    "render",
    "render_html_preview",
    "render_pdf",
    "render_text_download",
]
