"""Parse resume text into a document structure for the HTML templates.

The generation prompt asks for a fixed grammar (name, title, then upper-case
section headings). Providers do not always comply, so text without any
recognised heading is kept as a single preformatted block.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace

SECTION_HEADINGS = (
    "CONTACT",
    "SKILLS",
    "ACHIEVEMENTS",
    "PROFILE",
    "WORK EXPERIENCE",
    "EDUCATION",
)

_BULLET_RE = re.compile(r"^\s*(?:[-*•])\s+(.*)$")
_HEADING_DECOR_RE = re.compile(r"^\s*(?:#+\s*|\*\*)|[:*\s]*$")


@dataclass(frozen=True)
class Block:
    """One run of content inside a section.

    kind is ``bullets`` (items are list entries), ``entry`` (items are the
    ``|``-separated parts of one line) or ``text`` (items are lines).
    """

    kind: str
    items: tuple[str, ...]


@dataclass(frozen=True)
class Section:
    heading: str
    slug: str
    blocks: tuple[Block, ...]


@dataclass(frozen=True)
class ResumeLayout:
    name: str | None = None
    title: str | None = None
    header_extra: tuple[str, ...] = ()
    sections: tuple[Section, ...] = ()
    preformatted: str | None = None
    # Presentation hints set by the template layout functions.
    variant: str = "single"
    aside: frozenset[str] = field(default_factory=frozenset)
    inline: frozenset[str] = field(default_factory=frozenset)


def _match_heading(line: str) -> str | None:
    candidate = _HEADING_DECOR_RE.sub("", line).upper()
    return candidate if candidate in SECTION_HEADINGS else None


def _slug(heading: str) -> str:
    return heading.lower().replace(" ", "-")


def _parse_blocks(lines: list[str]) -> tuple[Block, ...]:
    blocks: list[Block] = []
    kind: str | None = None
    items: list[str] = []

    def flush() -> None:
        nonlocal kind, items
        if kind and items:
            blocks.append(Block(kind=kind, items=tuple(items)))
        kind, items = None, []

    for raw in lines:
        line = raw.strip()
        if not line:
            flush()
            continue
        bullet = _BULLET_RE.match(line)
        if bullet:
            if kind != "bullets":
                flush()
                kind = "bullets"
            items.append(bullet.group(1).strip())
        elif "|" in line:
            flush()
            parts = tuple(p.strip() for p in line.split("|") if p.strip())
            blocks.append(Block(kind="entry", items=parts))
        else:
            if kind != "text":
                flush()
                kind = "text"
            items.append(line)
    flush()
    return tuple(blocks)


def parse_resume_text(text: str) -> ResumeLayout:
    """Split resume text into header and sections."""
    if not text or not text.strip():
        return ResumeLayout()

    lines = text.splitlines()
    heading_rows = [(i, h) for i, line in enumerate(lines) if (h := _match_heading(line))]
    if not heading_rows:
        return ResumeLayout(preformatted=text)

    header = [line.strip() for line in lines[: heading_rows[0][0]] if line.strip()]
    sections = []
    for n, (start, heading) in enumerate(heading_rows):
        end = heading_rows[n + 1][0] if n + 1 < len(heading_rows) else len(lines)
        sections.append(
            Section(
                heading=heading,
                slug=_slug(heading),
                blocks=_parse_blocks(lines[start + 1 : end]),
            )
        )

    return ResumeLayout(
        name=header[0] if header else None,
        title=header[1] if len(header) > 1 else None,
        header_extra=tuple(header[2:]),
        sections=tuple(sections),
    )


# --- Template layout functions -------------------------------------------
# Layouts change presentation hints only; section order and text are kept
# so every template shows the same content.


def single_column_layout(text: str) -> ResumeLayout:
    return parse_resume_text(text)


def sidebar_layout(text: str) -> ResumeLayout:
    return replace(
        parse_resume_text(text),
        variant="sidebar",
        aside=frozenset({"contact", "skills"}),
    )


def banner_layout(text: str) -> ResumeLayout:
    return replace(
        parse_resume_text(text),
        variant="banner",
        inline=frozenset({"skills"}),
    )


def executive_layout(text: str) -> ResumeLayout:
    return replace(
        parse_resume_text(text),
        variant="executive",
        inline=frozenset({"contact"}),
    )
