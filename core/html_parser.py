"""
HTML Parser Module
Extracts a page snapshot (title, text blocks, elements, structure, metadata)
from raw HTML using tag patterns rather than a full DOM.
"""

import re
import logging
from typing import Callable, Dict, Optional, Tuple, TypeVar

from bs4 import BeautifulSoup

from .page_snapshot import (
    Container,
    Element,
    Heading,
    Image,
    Link,
    ListBlock,
    PageMetadata,
    PageSnapshot,
    PageStructure,
    Paragraph,
    TextBlock,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')

TEXT_BLOCK_TAGS = ('h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'p', 'span', 'div', 'a', 'li')
CONTAINER_TAGS = ('div', 'section', 'article', 'main', 'aside', 'header', 'footer')
MIN_TEXT_BLOCK_LENGTH = 3
ELEMENT_TEXT_LIMIT = 100

SCRIPT_RE = re.compile(r'<script[^>]*>[\s\S]*?</script>', re.IGNORECASE)
STYLE_RE = re.compile(r'<style[^>]*>[\s\S]*?</style>', re.IGNORECASE)
TITLE_RE = re.compile(r'<title[^>]*>([^<]+)</title>', re.IGNORECASE)
ELEMENT_RE = re.compile(r'(<(\w+)[^>]*>)([^<]+)</\2>', re.IGNORECASE)
IMAGE_RE = re.compile(r'<img[^>]*>', re.IGNORECASE)
LIST_RE = re.compile(r'(<(ul|ol)[^>]*>)([\s\S]*?)</\2>', re.IGNORECASE)
LIST_ITEM_RE = re.compile(r'<li[^>]*>([^<]+)</li>', re.IGNORECASE)
CONTAINER_RE = re.compile(
    r'(<(' + '|'.join(CONTAINER_TAGS) + r')[^>]*>)([^<]+)</\2>', re.IGNORECASE
)
CHARSET_RE = re.compile(r'<meta[^>]*charset=["\']([^"\']+)["\']', re.IGNORECASE)


def tag_pattern(tag: str) -> re.Pattern:
    """Pattern for a tag whose body is a single run of text with no nested markup."""
    return re.compile(rf'(<{tag}[^>]*>)([^<]+)</{tag}>', re.IGNORECASE)


def meta_pattern(name: str) -> re.Pattern:
    return re.compile(
        rf'<meta[^>]*name=["\']{name}["\'][^>]*content=["\']([^"\']+)["\']',
        re.IGNORECASE
    )


TAG_PATTERNS = {tag: tag_pattern(tag) for tag in TEXT_BLOCK_TAGS}
META_PATTERNS = {name: meta_pattern(name) for name in ('description', 'keywords', 'viewport')}


def strip_scripts_and_styles(html: str) -> str:
    """Remove script and style bodies so their text never counts as content."""
    return STYLE_RE.sub('', SCRIPT_RE.sub('', html))


class HTMLParser:
    """Pattern-based feature extractor for HTML pages."""

    def __init__(self, resolve_attributes: bool = False):
        """
        Initialize the parser.

        Args:
            resolve_attributes: When True, the opening tag of each structural
                entity is parsed to fill class, id, style and the image/link
                attributes. When False those fields stay None and entities
                never pair up for styling comparison.
        """
        self.resolve_attributes = resolve_attributes

    def extract(self, html: str, url: str) -> PageSnapshot:
        """Build a snapshot of ``html``. Never raises; failures degrade to empty parts."""
        if not isinstance(html, str):
            logger.warning(f"Expected HTML text for {url}, got {type(html).__name__}")
            html = ''
        logger.info(f"Extracting page snapshot for {url}")
        logger.debug(f"Input HTML content length: {len(html)}")

        title = self._attempt('title', lambda: self.extract_title(html), '')
        metadata = self._attempt('metadata', lambda: self.extract_metadata(html), PageMetadata(title=title))
        clean_html = self._attempt('script removal', lambda: strip_scripts_and_styles(html), '')
        text_blocks = self._attempt('text blocks', lambda: self.extract_text_blocks(clean_html), ())
        elements = self._attempt('elements', lambda: self.extract_elements(clean_html), ())
        structure = self._attempt('structure', lambda: self.extract_structure(clean_html), PageStructure())

        snapshot = PageSnapshot(
            url=url,
            title=title,
            text_blocks=text_blocks,
            elements=elements,
            structure=structure,
            metadata=metadata
        )
        logger.debug(
            f"Snapshot for {url}: {len(elements)} elements, {len(text_blocks)} text blocks, "
            f"{len(structure.headings)} headings"
        )
        return snapshot

    def _attempt(self, label: str, func: Callable[[], T], fallback: T) -> T:
        try:
            return func()
        except Exception as e:
            logger.error(f"Error extracting {label}, falling back to empty value: {str(e)}", exc_info=True)
            return fallback

    def extract_title(self, html: str) -> str:
        match = TITLE_RE.search(html)
        return match.group(1).strip() if match else ''

    def extract_metadata(self, html: str) -> PageMetadata:
        """Extract title, description, keywords, viewport and charset from the raw HTML."""
        values = {}
        for name, pattern in META_PATTERNS.items():
            match = pattern.search(html)
            values[name] = match.group(1) if match else ''
        charset_match = CHARSET_RE.search(html)
        return PageMetadata(
            title=self.extract_title(html),
            description=values['description'],
            keywords=values['keywords'],
            viewport=values['viewport'],
            charset=charset_match.group(1) if charset_match else ''
        )

    def extract_text_blocks(self, clean_html: str) -> Tuple[TextBlock, ...]:
        """
        Collect text runs one tag type at a time.

        Blocks are grouped by tag in the order of TEXT_BLOCK_TAGS, not in
        document order. Runs of three characters or fewer are dropped.
        """
        blocks = []
        for tag in TEXT_BLOCK_TAGS:
            for match in TAG_PATTERNS[tag].finditer(clean_html):
                text = match.group(2).strip()
                if len(text) > MIN_TEXT_BLOCK_LENGTH:
                    blocks.append(TextBlock(text=text, tag=tag))
        return tuple(blocks)

    def extract_elements(self, clean_html: str) -> Tuple[Element, ...]:
        elements = []
        for match in ELEMENT_RE.finditer(clean_html):
            text = match.group(3).strip()
            if text:
                elements.append(Element(tag=match.group(2).lower(), text=text[:ELEMENT_TEXT_LIMIT]))
        return tuple(elements)

    def extract_structure(self, clean_html: str) -> PageStructure:
        """Categorize headings, paragraphs, links, images, lists and containers."""
        headings = []
        for level in range(1, 7):
            for match in TAG_PATTERNS[f'h{level}'].finditer(clean_html):
                headings.append(Heading(level=level, text=match.group(2).strip(), **self._styling(match.group(1))))

        paragraphs = [
            Paragraph(text=match.group(2).strip(), **self._styling(match.group(1)))
            for match in TAG_PATTERNS['p'].finditer(clean_html)
        ]

        links = []
        for match in TAG_PATTERNS['a'].finditer(clean_html):
            attrs = self._attributes(match.group(1))
            links.append(Link(text=match.group(2).strip(), href=attrs.get('href'), **self._styling_from(attrs)))

        images = []
        for match in IMAGE_RE.finditer(clean_html):
            attrs = self._attributes(match.group(0))
            images.append(Image(alt=attrs.get('alt'), src=attrs.get('src'), **self._styling_from(attrs)))

        lists = []
        for match in LIST_RE.finditer(clean_html):
            items = tuple(item.group(1).strip() for item in LIST_ITEM_RE.finditer(match.group(3)))
            lists.append(ListBlock(type=match.group(2).lower(), items=items, **self._styling(match.group(1))))

        containers = [
            Container(tag=match.group(2).lower(), **self._styling(match.group(1)))
            for match in CONTAINER_RE.finditer(clean_html)
        ]

        return PageStructure(
            headings=tuple(headings),
            paragraphs=tuple(paragraphs),
            links=tuple(links),
            images=tuple(images),
            lists=tuple(lists),
            containers=tuple(containers)
        )

    def _attributes(self, opening_tag: str) -> Dict[str, str]:
        """Parse the attributes of a single opening tag, if resolution is enabled."""
        if not self.resolve_attributes:
            return {}
        soup = BeautifulSoup(opening_tag, 'html.parser')
        node = soup.find()
        if node is None:
            return {}

        attrs = {}
        for key, value in node.attrs.items():
            # class is multi-valued in BeautifulSoup
            attrs[key] = ' '.join(value) if isinstance(value, list) else value
        return attrs

    def _styling_from(self, attrs: Dict[str, str]) -> Dict[str, Optional[str]]:
        return {
            'class_name': attrs.get('class'),
            'element_id': attrs.get('id'),
            'style': attrs.get('style'),
        }

    def _styling(self, opening_tag: str) -> Dict[str, Optional[str]]:
        return self._styling_from(self._attributes(opening_tag))


def extract(html: str, url: str, resolve_attributes: bool = False) -> PageSnapshot:
    """Extract a page snapshot with a default parser."""
    return HTMLParser(resolve_attributes=resolve_attributes).extract(html, url)
