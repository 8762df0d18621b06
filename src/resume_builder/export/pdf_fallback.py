"""Fallback PDF renderer using fpdf2 (pure Python, no system deps)."""

from __future__ import annotations

import html
import logging
import re
from io import BytesIO
from pathlib import Path

from fpdf import FPDF
from fpdf.enums import XPos, YPos

logger = logging.getLogger(__name__)

# Unicode-capable font search paths (Linux, macOS, Windows)
_UNICODE_FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "C:/Windows/Fonts/arial.ttf",
]

_BLOCK_TAGS = r"h[1-3]|p|li|ul|ol|pre|br\s*/?"


def _find_unicode_font() -> str | None:
    """Search for a Unicode-capable TTF font on the system."""
    for path in _UNICODE_FONT_PATHS:
        if Path(path).exists():
            return path
    return None


def html_to_pdf_fpdf2(html_content: str, margin_mm: float = 15) -> bytes:
    """Fallback PDF generation using fpdf2 when WeasyPrint is unavailable.

    Lays the document out on A4 pages with ``margin_mm`` on every side.
    """
    body_match = re.search(r"<body>(.*?)</body>", html_content, re.DOTALL)
    body = body_match.group(1) if body_match else html_content

    pdf = FPDF(format="A4", unit="mm")
    pdf.set_margins(margin_mm, margin_mm, margin_mm)
    pdf.set_auto_page_break(auto=True, margin=margin_mm)
    pdf.add_page()

    font_name = "Helvetica"
    unicode_font = _find_unicode_font()
    if unicode_font:
        try:
            pdf.add_font("UnicodeFont", "", unicode_font)
            font_name = "UnicodeFont"
        except Exception:
            logger.debug("Failed to load font %s", unicode_font)

    pdf.set_font(font_name, size=10)

    lines = _parse_html_to_lines(body)
    for line_type, text in lines:
        safe_text = _safe_text(text, pdf)
        if line_type == "h1":
            pdf.set_font_size(18)
            pdf.multi_cell(0, 9, safe_text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.set_font_size(10)
        elif line_type == "h2":
            pdf.ln(3)
            pdf.set_font_size(12)
            pdf.multi_cell(0, 7, safe_text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.line(pdf.l_margin, pdf.get_y(), pdf.w - pdf.r_margin, pdf.get_y())
            pdf.ln(2)
            pdf.set_font_size(10)
        elif line_type == "h3":
            pdf.ln(1)
            pdf.set_font_size(10.5)
            pdf.multi_cell(0, 6, safe_text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.set_font_size(10)
        elif line_type == "bullet":
            pdf.multi_cell(0, 5, f"  - {safe_text}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        elif line_type == "pre":
            pdf.multi_cell(0, 5, safe_text or " ", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        elif line_type == "text" and safe_text.strip():
            pdf.multi_cell(0, 5, safe_text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        elif line_type == "break":
            pdf.ln(2)

    buf = BytesIO()
    pdf.output(buf)
    return buf.getvalue()


def _safe_text(text: str, pdf: FPDF) -> str:
    """Ensure text is encodable by the current font. Replace if needed."""
    if pdf.is_ttf_font:
        return text
    # For built-in fonts (Helvetica etc.), strip non-latin chars
    try:
        text.encode("latin-1")
        return text
    except UnicodeEncodeError:
        return text.encode("latin-1", errors="replace").decode("latin-1")


def _parse_html_to_lines(body_html: str) -> list[tuple[str, str]]:
    """Parse simple HTML into (type, text) pairs."""
    lines: list[tuple[str, str]] = []
    parts = re.split(rf"(</?(?:{_BLOCK_TAGS})(?:\s[^>]*)?>)", body_html)
    current_tag = "text"
    for part in parts:
        tag_match = re.match(rf"<(/?)({_BLOCK_TAGS})(?:\s[^>]*)?>$", part.strip())
        if tag_match:
            closing = tag_match.group(1) == "/"
            tag = tag_match.group(2).rstrip("/").strip()
            if closing:
                if tag in ("ul", "ol"):
                    lines.append(("break", ""))
                current_tag = "text"
            else:
                if tag in ("h1", "h2", "h3", "pre"):
                    current_tag = tag
                elif tag == "li":
                    current_tag = "bullet"
                elif tag.startswith("br"):
                    lines.append(("break", ""))
                elif tag == "p":
                    current_tag = "text"
        elif current_tag == "pre":
            for raw in html.unescape(part).splitlines():
                lines.append(("pre", raw.rstrip()))
        else:
            text = _strip_html(part)
            if text:
                lines.append((current_tag, text))
    return lines


def _strip_html(text: str) -> str:
    """Remove HTML tags and decode entities."""
    text = re.sub(r"<[^>]+>", "", text)
    return html.unescape(text).strip()
