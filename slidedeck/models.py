"""Document model shared by the segmenter and the renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Union


class ParseError(ValueError):
    """Raised when a slide cannot be segmented (e.g. an unterminated fence)."""

    def __init__(self, message: str, slide_index: int, line_number: int) -> None:
        super().__init__(f"slide {slide_index}, line {line_number}: {message}")
        self.slide_index = slide_index
        self.line_number = line_number


@dataclass(frozen=True)
class Paragraph:
    text: str
    kind: str = field(default="paragraph", init=False)


@dataclass(frozen=True)
class CodeBlock:
    language: str | None
    text: str
    kind: str = field(default="code", init=False)


@dataclass(frozen=True)
class MediaEmbed:
    media: str  # "image" or "video"
    src: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    kind: str = field(default="media", init=False)

    # unhashable: attributes is a mappingproxy
    __hash__ = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))


@dataclass(frozen=True)
class ListBlock:
    items: tuple[str, ...]
    ordered: bool = False
    kind: str = field(default="list", init=False)


ContentBlock = Union[Paragraph, CodeBlock, MediaEmbed, ListBlock]


@dataclass(frozen=True)
class Slide:
    index: int
    title: str | None
    body: tuple[ContentBlock, ...]
    directives: Mapping[str, str] = field(default_factory=dict)
    notes: str | None = None
    title_level: int | None = None
    source: str = ""
    start_line: int = 1

    # unhashable: directives is a mappingproxy
    __hash__ = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "directives", MappingProxyType(dict(self.directives)))

    @property
    def presenter_notes(self) -> str | None:
        """Alias for :attr:`notes`, the text hidden from the audience."""
        return self.notes


@dataclass(frozen=True)
class Document:
    slides: tuple[Slide, ...]
    grammar: str = "landslide"

    def __len__(self) -> int:
        return len(self.slides)

    def __iter__(self):
        return iter(self.slides)
