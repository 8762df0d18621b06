"""Fixed registry of resume templates (style sheet + layout function)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from resume_builder.exceptions import UnknownTemplate
from resume_builder.export.layout import (
    ResumeLayout,
    banner_layout,
    executive_layout,
    sidebar_layout,
    single_column_layout,
)

CSS_THEMES_DIR = Path(__file__).parent / "css_themes"


class TemplateId(str, Enum):
    PROFESSIONAL = "professional"
    MODERN = "modern"
    CREATIVE = "creative"
    EXECUTIVE = "executive"


@dataclass(frozen=True)
class Template:
    id: TemplateId
    label: str
    layout: Callable[[str], ResumeLayout]

    @property
    def stylesheet(self) -> str:
        return (CSS_THEMES_DIR / f"{self.id.value}.css").read_text(encoding="utf-8")


TEMPLATES: dict[TemplateId, Template] = {
    TemplateId.PROFESSIONAL: Template(TemplateId.PROFESSIONAL, "Professional", single_column_layout),
    TemplateId.MODERN: Template(TemplateId.MODERN, "Modern", sidebar_layout),
    TemplateId.CREATIVE: Template(TemplateId.CREATIVE, "Creative", banner_layout),
    TemplateId.EXECUTIVE: Template(TemplateId.EXECUTIVE, "Executive", executive_layout),
}

AVAILABLE_TEMPLATES = tuple(t.value for t in TemplateId)


def get_template(template_id: str | TemplateId) -> Template:
    """Look up a template by id.

    Raises:
        UnknownTemplate: ``template_id`` is not one of the registered templates.
    """
    try:
        key = TemplateId(template_id)
    except ValueError:
        raise UnknownTemplate(str(template_id)) from None
    return TEMPLATES[key]


def list_templates() -> list[Template]:
    return list(TEMPLATES.values())
