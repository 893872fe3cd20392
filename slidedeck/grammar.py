"""Configurable line grammar for slide decks (delimiters, directives, notes)."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Grammar:
    """The line patterns that define one deck dialect.

    ``directive`` must expose two groups: the directive name and its value.
    ``heading`` must expose the marker run (its length is the level) and the
    heading text.  When ``directives_leading_only`` is set, directive lines
    are recognised only before the first content line of a slide.
    """

    name: str
    delimiter: str = r"^---\s*$"
    delimiter_text: str = "---"
    heading: str = r"^(#{1,6})\s+(.*?)\s*$"
    directive: str = r"^\.([A-Za-z][\w-]*):\s*(.*?)\s*$"
    directives_leading_only: bool = False
    known_directives: tuple[str, ...] = ()
    notes_marker: str = r"^#{1,6}\s*presenter\s+notes\s*$"
    notes_directive: str | None = None

    delimiter_re: re.Pattern = field(init=False, repr=False, compare=False)
    heading_re: re.Pattern = field(init=False, repr=False, compare=False)
    directive_re: re.Pattern = field(init=False, repr=False, compare=False)
    notes_marker_re: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "known_directives", tuple(self.known_directives))
        for attr in ("delimiter", "heading", "directive", "notes_marker"):
            pattern = getattr(self, attr)
            flags = re.IGNORECASE if attr == "notes_marker" else 0
            try:
                compiled = re.compile(pattern, flags)
            except re.error as exc:
                raise ValueError(f"Invalid {attr} pattern {pattern!r}: {exc}") from exc
            object.__setattr__(self, f"{attr}_re", compiled)
        if self.directive_re.groups < 2:
            raise ValueError("Directive pattern must capture a name and a value")
        if self.heading_re.groups < 2:
            raise ValueError("Heading pattern must capture a marker and a title")

    def is_known(self, directive: str) -> bool:
        return directive in self.known_directives


LANDSLIDE = Grammar(
    name="landslide",
    known_directives=("fx", "notes", "qr", "footnote", "class"),
    notes_directive="notes",
)

# remark.js: slide properties are bare "key: value" lines at the top of a
# slide, and "???" starts the presenter notes.
REMARK = Grammar(
    name="remark",
    directive=r"^([A-Za-z][\w-]*):\s*(.*?)\s*$",
    directives_leading_only=True,
    known_directives=(
        "name", "class", "layout", "template", "background-image", "count", "exclude",
    ),
    notes_marker=r"^\?\?\?\s*$",
)

PRESETS: dict[str, Grammar] = {g.name: g for g in (LANDSLIDE, REMARK)}

_CONFIG_KEYS = {f.name for f in fields(Grammar) if f.init}

_BOOL_KEYS = {"directives_leading_only"}
_LIST_KEYS = {"known_directives"}
_OPTIONAL_KEYS = {"notes_directive"}


def _check_value(key: str, value: object) -> None:
    """Raise ValueError unless *value* has the JSON type *key* expects."""
    if key in _BOOL_KEYS:
        ok, expected = isinstance(value, bool), "a boolean"
    elif key in _LIST_KEYS:
        ok = isinstance(value, list) and all(isinstance(v, str) for v in value)
        expected = "a list of strings"
    elif key in _OPTIONAL_KEYS:
        ok, expected = value is None or isinstance(value, str), "a string or null"
    else:
        ok, expected = isinstance(value, str), "a string"
    if not ok:
        raise ValueError(f"Grammar setting {key!r} must be {expected}, got {json.dumps(value)}")


def get_grammar(name: str) -> Grammar:
    """Return the built-in grammar called *name*."""
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown grammar {name!r}; choose one of: {', '.join(sorted(PRESETS))}"
        ) from None


def load_grammar(path: Path) -> Grammar:
    """Load a grammar from a JSON file.

    The file is a flat object of :class:`Grammar` fields.  An optional
    ``"base"`` key names the preset to start from (default ``landslide``);
    the remaining keys override it, e.g.
    ``{"base": "landslide", "delimiter": "^<hr\\\\s*/?>\\\\s*$"}``.
    """
    with open(path, encoding="utf-8") as f:
        config = json.load(f)
    if not isinstance(config, dict):
        raise ValueError(f"Grammar file must be a JSON object, got {type(config).__name__}")

    config = dict(config)
    base_name = config.pop("base", "landslide")
    if not isinstance(base_name, str):
        raise ValueError(f"Grammar setting 'base' must be a string, got {json.dumps(base_name)}")
    base = get_grammar(base_name)
    unknown = sorted(set(config) - _CONFIG_KEYS)
    if unknown:
        raise ValueError(f"Unknown grammar setting(s): {', '.join(unknown)}")
    for key, value in config.items():
        _check_value(key, value)
    config.setdefault("name", Path(path).stem)

    grammar = replace(base, **config)
    logger.debug("Loaded grammar %s from %s (base=%s)", grammar.name, path, base.name)
    return grammar
