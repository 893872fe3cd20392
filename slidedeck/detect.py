"""Auto-detect whether a deck is written for Landslide or remark."""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# Landslide macros: .fx: extra-large, .notes: ..., .qr: 450|http://...
_LANDSLIDE_DIRECTIVE_RE = re.compile(r"^\.[A-Za-z][\w-]*:", re.MULTILINE)

_LANDSLIDE_NOTES_RE = re.compile(r"^#{1,6}\s*presenter\s+notes\s*$", re.MULTILINE | re.IGNORECASE)

_REMARK_NOTES_RE = re.compile(r"^\?\?\?\s*$", re.MULTILINE)

# remark slide properties sit on the first line(s) of a slide
_REMARK_PROPERTY_RE = re.compile(
    r"(?:\A|^---\s*\n)(?:class|layout|name|template|background-image|count)\s*:",
    re.MULTILINE,
)

_FENCE_OPEN_RE = re.compile(r"^\s*(`{3,}|~{3,})")
_FENCE_CLOSE_RE = re.compile(r"^\s*(`{3,}|~{3,})\s*$")
_INDENT_RE = re.compile(r"^( {4}|\t)")


def _strip_code(text: str) -> str:
    """Drop fenced and indented code so snippets can't look like signals."""
    kept: list[str] = []
    fence: str | None = None
    prev_blank = True
    in_indented = False
    for line in text.splitlines(keepends=True):
        stripped = line.strip()
        if fence is not None:
            close = _FENCE_CLOSE_RE.match(line.rstrip("\r\n"))
            if close and close.group(1)[0] == fence[0] and len(close.group(1)) >= len(fence):
                fence = None
            continue
        opening = _FENCE_OPEN_RE.match(line)
        if opening:
            fence = opening.group(1)
            continue
        if stripped and _INDENT_RE.match(line) and (prev_blank or in_indented):
            in_indented = True
            continue
        in_indented = in_indented and not stripped
        prev_blank = not stripped
        kept.append(line)
    return "".join(kept)


def detect_grammar(text: str) -> str:
    """Detect which built-in grammar *text* is written in.

    Returns ``"landslide"`` or ``"remark"``.
    """
    text = _strip_code(text)

    # 1. Landslide macros
    if _LANDSLIDE_DIRECTIVE_RE.search(text):
        logger.info("Detected Landslide grammar (.macro: directive lines)")
        return "landslide"

    # 2. Landslide presenter notes heading
    if _LANDSLIDE_NOTES_RE.search(text):
        logger.info("Detected Landslide grammar (Presenter Notes heading)")
        return "landslide"

    # 3. remark presenter notes separator
    if _REMARK_NOTES_RE.search(text):
        logger.info("Detected remark grammar (??? notes separator)")
        return "remark"

    # 4. remark slide properties
    if _REMARK_PROPERTY_RE.search(text):
        logger.info("Detected remark grammar (slide properties)")
        return "remark"

    # 5. Fallback: Landslide
    logger.info("No grammar signals found, defaulting to Landslide")
    return "landslide"
