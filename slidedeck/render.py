"""Views of a parsed document: source round-trip, JSON-ready dict, text outline."""

from __future__ import annotations

import logging

from .grammar import LANDSLIDE, Grammar
from .models import CodeBlock, ContentBlock, Document, ListBlock, MediaEmbed, Paragraph

logger = logging.getLogger(__name__)


def to_source(document: Document, grammar: Grammar = LANDSLIDE) -> str:
    """Reassemble the deck text, one normalized delimiter line between slides."""
    return f"{grammar.delimiter_text}\n".join(slide.source for slide in document.slides)


def to_dict(document: Document) -> dict:
    """Return a JSON-serializable representation of *document*."""
    return {
        "grammar": document.grammar,
        "slides": [
            {
                "index": slide.index,
                "title": slide.title,
                "title_level": slide.title_level,
                "directives": dict(slide.directives),
                "body": [_block_to_dict(block) for block in slide.body],
                "notes": slide.notes,
                "start_line": slide.start_line,
            }
            for slide in document.slides
        ],
    }


def _block_to_dict(block: ContentBlock) -> dict:
    if isinstance(block, Paragraph):
        return {"kind": block.kind, "text": block.text}
    if isinstance(block, CodeBlock):
        return {"kind": block.kind, "language": block.language, "text": block.text}
    if isinstance(block, MediaEmbed):
        return {
            "kind": block.kind,
            "media": block.media,
            "src": block.src,
            "attributes": dict(block.attributes),
        }
    if isinstance(block, ListBlock):
        return {"kind": block.kind, "items": list(block.items), "ordered": block.ordered}
    raise ValueError(f"Unknown content block: {block!r}")


def render_outline(document: Document, presenter: bool = False) -> str:
    """Render a numbered plain-text outline of the deck.

    Presenter notes are included only when *presenter* is true; the audience
    view never shows them.
    """
    out: list[str] = []
    for slide in document.slides:
        heading = f"[{slide.index}] {slide.title or '(untitled)'}"
        if slide.directives:
            flags = ", ".join(f"{k}={v}" for k, v in slide.directives.items())
            heading += f"  {{{flags}}}"
        out.append(heading)
        for block in slide.body:
            out.extend(f"    {line}" for line in _block_lines(block))
        if presenter and slide.notes:
            out.append("    Notes:")
            out.extend(f"      {line}" for line in slide.notes.splitlines())
        out.append("")
    logger.debug("Rendered outline for %d slide(s), presenter=%s", len(document), presenter)
    return "\n".join(out)


def _block_lines(block: ContentBlock) -> list[str]:
    if block.kind == "paragraph":
        return block.text.splitlines()
    if block.kind == "code":
        return [f"```{block.language or ''}", *block.text.splitlines(), "```"]
    if block.kind == "media":
        return [f"<{block.media}: {block.src}>"]
    if block.kind == "list":
        if block.ordered:
            return [f"{i}. {item}" for i, item in enumerate(block.items, start=1)]
        return [f"- {item}" for item in block.items]
    raise ValueError(f"Unknown content block kind: {block.kind!r}")
