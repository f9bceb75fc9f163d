"""
Page Snapshot Module
Immutable feature records extracted from one HTML document.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class Position:
    # geometry is never rendered; always the zero box
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class TextBlock:
    text: str
    tag: str


@dataclass(frozen=True)
class Element:
    tag: str
    text: str
    position: Position = field(default_factory=Position)


@dataclass(frozen=True)
class StyledEntity:
    """Attributes used when pairing entities for styling comparison."""
    class_name: Optional[str] = None
    element_id: Optional[str] = None
    style: Optional[str] = None


@dataclass(frozen=True)
class Heading(StyledEntity):
    level: int = 1
    text: str = ''


@dataclass(frozen=True)
class Paragraph(StyledEntity):
    text: str = ''


@dataclass(frozen=True)
class Link(StyledEntity):
    text: str = ''
    href: Optional[str] = None


@dataclass(frozen=True)
class Image(StyledEntity):
    alt: Optional[str] = None
    src: Optional[str] = None


@dataclass(frozen=True)
class ListBlock(StyledEntity):
    type: str = 'ul'
    items: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Container(StyledEntity):
    tag: str = 'div'


@dataclass(frozen=True)
class PageStructure:
    headings: Tuple[Heading, ...] = ()
    paragraphs: Tuple[Paragraph, ...] = ()
    links: Tuple[Link, ...] = ()
    images: Tuple[Image, ...] = ()
    lists: Tuple[ListBlock, ...] = ()
    containers: Tuple[Container, ...] = ()

    CATEGORIES = ('headings', 'paragraphs', 'links', 'images', 'lists', 'containers')

    def category(self, name: str) -> Tuple[StyledEntity, ...]:
        return getattr(self, name, ())


@dataclass(frozen=True)
class PageMetadata:
    title: str = ''
    description: str = ''
    keywords: str = ''
    viewport: str = ''
    charset: str = ''


@dataclass(frozen=True)
class PageSnapshot:
    url: str
    title: str = ''
    text_blocks: Tuple[TextBlock, ...] = ()
    elements: Tuple[Element, ...] = ()
    structure: PageStructure = field(default_factory=PageStructure)
    metadata: PageMetadata = field(default_factory=PageMetadata)

    def to_dict(self) -> Dict:
        """Convert the snapshot to a JSON-serialisable dictionary."""
        data = asdict(self)
        # tuples become lists for JSON output
        return _listify(data)


def _listify(value):
    if isinstance(value, dict):
        return {k: _listify(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_listify(v) for v in value]
    return value
