"""Slide segmenter: splits a deck into slides, directives, content and notes."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from .detect import detect_grammar
from .grammar import LANDSLIDE, Grammar, get_grammar
from .models import (
    CodeBlock,
    ContentBlock,
    Document,
    ListBlock,
    MediaEmbed,
    Paragraph,
    ParseError,
    Slide,
)

logger = logging.getLogger(__name__)

# Opening fence: ```python, ~~~ yaml, ``` (no hint).
_FENCE_OPEN_RE = re.compile(r"^\s*(`{3,}|~{3,})\s*([^\s`]*)[^`]*$")
_FENCE_CLOSE_RE = re.compile(r"^\s*(`{3,}|~{3,})\s*$")

# Landslide code blocks are indented and may open with a "!lang" hint line.
_INDENT_RE = re.compile(r"^( {4}|\t)")
_LANG_HINT_RE = re.compile(r"^!([\w+#.-]+)\s*$")

_LIST_ITEM_RE = re.compile(r"^\s*([-*+]|\d+[.)])\s+(.*)$")

# <img src="...">, <video src="..." controls></video>,
# <video controls><source src="..." type="..."></video>, ![alt](src "title")
_MEDIA_RE = re.compile(
    r"<(?P<tag>img|video)\b(?P<attrs>[^>]*?)/?>"
    r"(?P<sources>(?:\s*<source\b[^>]*>)*)(?:\s*</video>)?"
    r"|!\[(?P<alt>[^\]]*)\]\(\s*(?P<src>[^\s)]+)(?:\s+\"(?P<title>[^\"]*)\")?\s*\)",
    re.IGNORECASE,
)
_ATTR_RE = re.compile(r"""([^\s=/>]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+)))?""")
_SOURCE_RE = re.compile(r"<source\b([^>]*?)/?>", re.IGNORECASE)


@dataclass
class _Fence:
    marker: str
    language: str | None
    line_number: int
    lines: list[str] = field(default_factory=list)


@dataclass
class _SlideState:
    """Accumulator threaded through the lines of one slide."""

    index: int
    start_line: int
    title: str | None = None
    title_level: int | None = None
    blocks: list[ContentBlock] = field(default_factory=list)
    directives: dict[str, str] = field(default_factory=dict)
    note_fragments: list[str] = field(default_factory=list)
    notes_section: list[str] | None = None
    paragraph: list[str] = field(default_factory=list)
    list_items: list[str] = field(default_factory=list)
    list_ordered: bool = False
    fence: _Fence | None = None
    indented: list[str] | None = None
    indented_language: str | None = None
    seen_content: bool = False
    prev_blank: bool = True


def segment(text: str, grammar: Grammar = LANDSLIDE) -> Document:
    """Parse deck *text* into a :class:`Document`.

    The text is split on lines matching ``grammar.delimiter``; every segment
    becomes one slide, so a non-empty text with *n* delimiter lines yields
    *n + 1* slides.  Empty text yields an empty document.
    """
    if not text:
        return Document(slides=(), grammar=grammar.name)

    segments, starts = _split(text, grammar)
    logger.debug("Segmenting with %s grammar: %d slide(s)", grammar.name, len(segments))

    slides = tuple(
        _parse_slide(i + 1, lines, start, grammar)
        for i, (lines, start) in enumerate(zip(segments, starts))
    )
    return Document(slides=slides, grammar=grammar.name)


def load_document(path: str | Path, grammar: Grammar | str | None = None) -> Document:
    """Read a deck from *path* and segment it.

    *grammar* may be a :class:`Grammar`, a preset name, or ``None`` to
    auto-detect the dialect from the file contents.
    """
    with open(path, encoding="utf-8") as f:
        text = f.read()

    if grammar is None:
        grammar = detect_grammar(text)
    if isinstance(grammar, str):
        grammar = get_grammar(grammar)

    document = segment(text, grammar)
    logger.info("Parsed %s: %d slide(s)", path, len(document))
    return document


def _split(text: str, grammar: Grammar) -> tuple[list[list[str]], list[int]]:
    segments: list[list[str]] = [[]]
    starts = [1]
    for number, line in enumerate(text.splitlines(keepends=True), start=1):
        if grammar.delimiter_re.match(line.rstrip("\r\n")):
            segments.append([])
            starts.append(number + 1)
        else:
            segments[-1].append(line)
    return segments, starts


def _parse_slide(index: int, lines: list[str], start_line: int, grammar: Grammar) -> Slide:
    state = _SlideState(index=index, start_line=start_line)
    for offset, line in enumerate(lines):
        _step(state, line, start_line + offset, grammar)

    if state.fence is not None:
        raise ParseError(
            f"unterminated code fence {state.fence.marker!r}",
            slide_index=index,
            line_number=state.fence.line_number,
        )
    _flush_indented(state)
    _flush_text(state)

    notes_parts = list(state.note_fragments)
    if state.notes_section is not None:
        notes_parts.append("".join(state.notes_section).strip())
    notes = "\n".join(notes_parts) if notes_parts else None

    slide = Slide(
        index=index,
        title=state.title,
        title_level=state.title_level,
        body=tuple(state.blocks),
        directives=state.directives,
        notes=notes,
        source="".join(lines),
        start_line=start_line,
    )
    logger.debug(
        "  Slide %d: title=%r, %d block(s), directives=%s, notes=%d chars",
        index, slide.title, len(slide.body), dict(slide.directives), len(notes or ""),
    )
    return slide


def _step(state: _SlideState, line: str, number: int, grammar: Grammar) -> None:
    """Fold one source line into the slide accumulator."""
    text = line.rstrip("\r\n")

    if state.fence is not None:
        close = _FENCE_CLOSE_RE.match(text)
        if (
            close
            and close.group(1)[0] == state.fence.marker[0]
            and len(close.group(1)) >= len(state.fence.marker)
        ):
            state.blocks.append(CodeBlock(state.fence.language, "".join(state.fence.lines)))
            state.fence = None
        else:
            state.fence.lines.append(line)
        return

    if state.notes_section is not None:
        state.notes_section.append(line)
        return

    if state.indented is not None:
        if not text.strip() or _INDENT_RE.match(text):
            state.indented.append(_INDENT_RE.sub("", line, count=1) if text.strip() else "\n")
            return
        _flush_indented(state)

    if not text.strip():
        _flush_text(state)
        state.prev_blank = True
        return

    was_blank = state.prev_blank
    state.prev_blank = False

    fence = _FENCE_OPEN_RE.match(text)
    if fence:
        _flush_text(state)
        state.fence = _Fence(fence.group(1), fence.group(2) or None, number)
        state.seen_content = True
        return

    if grammar.notes_marker_re.match(text):
        _flush_text(state)
        state.notes_section = []
        return

    directive = grammar.directive_re.match(text)
    if directive and not (grammar.directives_leading_only and state.seen_content):
        _flush_text(state)
        name, value = directive.group(1), directive.group(2)
        if name == grammar.notes_directive:
            state.note_fragments.append(value)
            return
        if not grammar.is_known(name):
            logger.debug("Slide %d: passing through unknown directive %r", state.index, name)
        if name in state.directives:
            logger.debug("Slide %d: directive %r overrides earlier value", state.index, name)
        state.directives[name] = value
        return

    state.seen_content = True

    if was_blank and _INDENT_RE.match(text):
        _flush_text(state)
        hint = _LANG_HINT_RE.match(text.strip())
        state.indented = []
        state.indented_language = hint.group(1) if hint else None
        if not hint:
            state.indented.append(_INDENT_RE.sub("", line, count=1))
        return

    heading = grammar.heading_re.match(text)
    if heading:
        _flush_text(state)
        if state.title is None:
            state.title = heading.group(2)
            state.title_level = len(heading.group(1))
        else:
            state.blocks.append(Paragraph(text.strip()))
        return

    embeds = _parse_media(text)
    if embeds:
        _flush_text(state)
        state.blocks.extend(embeds)
        return

    item = _LIST_ITEM_RE.match(text)
    if item:
        ordered = item.group(1)[0].isdigit()
        if state.paragraph or (state.list_items and ordered != state.list_ordered):
            _flush_text(state)
        state.list_ordered = ordered
        state.list_items.append(item.group(2).strip())
        return

    if state.list_items and text[:1].isspace():
        state.list_items[-1] = f"{state.list_items[-1]} {text.strip()}"
        return

    if state.list_items:
        _flush_text(state)
    state.paragraph.append(text.strip())


def _flush_text(state: _SlideState) -> None:
    if state.paragraph:
        state.blocks.append(Paragraph("\n".join(state.paragraph)))
        state.paragraph = []
    if state.list_items:
        state.blocks.append(ListBlock(tuple(state.list_items), ordered=state.list_ordered))
        state.list_items = []


def _flush_indented(state: _SlideState) -> None:
    if state.indented is None:
        return
    lines = state.indented
    while lines and lines[-1] == "\n":
        lines.pop()
    if lines:
        state.blocks.append(CodeBlock(state.indented_language, "".join(lines)))
    state.indented = None
    state.indented_language = None


def _parse_media(text: str) -> list[MediaEmbed] | None:
    """Return the media embeds on a line made up solely of media tags."""
    stripped = text.strip()
    embeds: list[MediaEmbed] = []
    pos = 0
    for m in _MEDIA_RE.finditer(stripped):
        if stripped[pos:m.start()].strip():
            return None
        embed = _media_from_match(m)
        if embed is None:
            return None
        embeds.append(embed)
        pos = m.end()
    if not embeds or stripped[pos:].strip():
        return None
    return embeds


def _media_from_match(m: re.Match) -> MediaEmbed | None:
    if m.group("tag"):
        attributes = _parse_attributes(m.group("attrs"))
        src = attributes.pop("src", "")
        if not src and m.group("sources"):
            first = _SOURCE_RE.search(m.group("sources"))
            source_attributes = _parse_attributes(first.group(1))
            src = source_attributes.pop("src", "")
            for key, value in source_attributes.items():
                attributes.setdefault(key, value)
        if not src:
            return None
        media = "image" if m.group("tag").lower() == "img" else "video"
        return MediaEmbed(media, src, attributes)

    attributes = {"alt": m.group("alt")}
    if m.group("title") is not None:
        attributes["title"] = m.group("title")
    return MediaEmbed("image", m.group("src"), attributes)


def _parse_attributes(text: str) -> dict[str, str]:
    """Parse HTML tag attributes; boolean attributes map to ``""``."""
    attributes: dict[str, str] = {}
    for m in _ATTR_RE.finditer(text):
        value = next((g for g in m.group(2, 3, 4) if g is not None), "")
        attributes[m.group(1).lower()] = value
    return attributes
