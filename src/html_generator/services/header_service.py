# src/html_generator/services/header_service.py
"""
Heading identifiers and table of contents.

Every h1..h6 gets a slug id (unique within the document) and the configured
classes. Ids that already exist in the document are reserved: the first
element carrying an id keeps it, and a heading that already has its own id
keeps it unless regeneration is requested, so processing is idempotent.
"""
import html as html_lib
import re
import logging
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup
from pydantic import BaseModel, Field

from html_generator.core.constants import DEFAULT_MAX_INPUT_SIZE
from html_generator.core.errors import InputTooLargeError, InvalidInputError, ParsingError
from html_generator.core.utils.markup_utils import compile_pattern

logger = logging.getLogger(__name__)

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

_SLUG_SEPARATORS = compile_pattern(r"[\W_]+")
_HEADER_PATTERN = compile_pattern(r"^\s*<(h[1-6])>(.+?)</\1>\s*$", re.DOTALL)
_TAG_PATTERN = compile_pattern(r"<[^>]+>")


class HeaderInfo(BaseModel):
    """A processed heading in document order."""
    text: str
    id: str
    level: int = Field(ge=1, le=6)
    classes: Tuple[str, ...] = ()


class TocEntry(BaseModel):
    """Node of the table of contents forest."""
    text: str
    id: str
    level: int
    children: List["TocEntry"] = Field(default_factory=list)


def generate_slug(text: str) -> str:
    """
    Lower-cases the text, collapses every run of non-alphanumeric characters
    into a single '-' and trims separators from both ends.

    >>> generate_slug("Hello, World!")
    'hello-world'
    """
    return _SLUG_SEPARATORS.sub("-", text.lower()).strip("-")


def _text_of(tag: Tag) -> str:
    return tag.get_text(" ", strip=True)


class HeaderProcessor:
    """Assigns ids and classes to headings; see the module docstring for the id rules."""

    def __init__(
            self,
            id_prefix: str = "",
            classes: Sequence[str] = (),
            regenerate: bool = False,
            max_size: int = DEFAULT_MAX_INPUT_SIZE
    ):
        self.id_prefix = id_prefix
        self.classes = tuple(classes)
        self.regenerate = regenerate
        self.max_size = max_size

    def process(self, soup: BeautifulSoup) -> List[HeaderInfo]:
        """Mutates the headings of soup in place and returns them in document order."""
        headings = soup.find_all(HEADING_TAGS)
        heading_keys = {id(h) for h in headings}

        # First owner of every existing id
        owners: Dict[str, int] = {}
        for tag in soup.find_all(id=True):
            if self.regenerate and id(tag) in heading_keys:
                continue
            value = tag.get("id")
            if isinstance(value, str) and value and value not in owners:
                owners[value] = id(tag)
        used: Set[str] = set(owners)

        headers = []
        for position, tag in enumerate(headings, start=1):
            text = _text_of(tag)
            current = tag.get("id")
            if not self.regenerate and isinstance(current, str) and owners.get(current) == id(tag):
                header_id = current
            else:
                header_id = self._unique(self._base_id(text, position), used)
                tag["id"] = header_id

            if self.classes:
                existing = tag.get("class") or []
                if isinstance(existing, str):
                    existing = existing.split()
                tag["class"] = list(existing) + [c for c in self.classes if c not in existing]

            headers.append(HeaderInfo(
                text=text,
                id=header_id,
                level=int(tag.name[1]),
                classes=tuple(tag.get("class") or ())
            ))

        logger.debug(f"Processed {len(headers)} heading(s)")
        return headers

    def process_html(self, html: str) -> Tuple[str, List[HeaderInfo]]:
        """
        String-in, string-out variant of process.

        Raises:
            InputTooLargeError: before parsing when html exceeds max_size bytes.
            ParsingError: when the markup is rejected by the parser.
        """
        soup = parse_html(html, self.max_size)
        headers = self.process(soup)
        return str(soup), headers

    def _base_id(self, text: str, position: int) -> str:
        slug = generate_slug(text) or f"section-{position}"
        return f"{self.id_prefix}{slug}"

    @staticmethod
    def _unique(candidate: str, used: Set[str]) -> str:
        result = candidate
        suffix = 2
        while result in used:
            result = f"{candidate}-{suffix}"
            suffix += 1
        used.add(result)
        return result


def parse_html(html: str, max_size: int = DEFAULT_MAX_INPUT_SIZE) -> BeautifulSoup:
    """Admission check followed by parsing with the stdlib-backed bs4 parser."""
    size = len(html.encode("utf-8"))
    if size > max_size:
        raise InputTooLargeError(size, max_size)
    try:
        return BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as e:
        raise ParsingError(str(e)) from e


def build_toc(headers: Sequence[HeaderInfo]) -> List[TocEntry]:
    """
    Nests headings by level: a heading closes every open entry at its level
    or deeper and becomes a child of the nearest shallower open entry.
    Level jumps are kept as they are.
    """
    roots: List[TocEntry] = []
    stack: List[TocEntry] = []
    for header in headers:
        entry = TocEntry(text=header.text, id=header.id, level=header.level)
        while stack and stack[-1].level >= entry.level:
            stack.pop()
        if stack:
            stack[-1].children.append(entry)
        else:
            roots.append(entry)
        stack.append(entry)
    return roots


def render_toc(entries: Sequence[TocEntry]) -> str:
    """Renders the ToC forest as nested <ul> lists of in-page links."""
    parts = ["<ul>"]
    for entry in entries:
        parts.append(
            f'<li class="toc-h{entry.level}">'
            f'<a href="#{html_lib.escape(entry.id)}">{html_lib.escape(entry.text)}</a>'
        )
        if entry.children:
            parts.append(render_toc(entry.children))
        parts.append("</li>")
    parts.append("</ul>")
    return "".join(parts)


def generate_table_of_contents(html: str, max_size: int = DEFAULT_MAX_INPUT_SIZE) -> str:
    """
    Builds the rendered ToC for an HTML string without modifying it.

    Raises:
        InvalidInputError: for empty input.
        InputTooLargeError: when html exceeds max_size bytes.
    """
    if not html:
        raise InvalidInputError("Empty input")
    soup = parse_html(html, max_size)
    headers = HeaderProcessor().process(soup)
    return render_toc(build_toc(headers))


def format_header_with_id_class(
        header_html: str,
        id_generator: Optional[Callable[[str], str]] = None,
        class_generator: Optional[Callable[[str], str]] = None
) -> str:
    """
    Adds id and class attributes to a single '<hN>...</hN>' string. Both
    default to the slug of the heading text.

    >>> format_header_with_id_class("<h2>Hello, World!</h2>")
    '<h2 id="hello-world" class="hello-world">Hello, World!</h2>'

    Raises:
        ParsingError: when the input is not a bare heading element.
    """
    match = _HEADER_PATTERN.match(header_html)
    if not match:
        raise ParsingError("Invalid header format")

    tag, content = match.group(1), match.group(2)
    text = html_lib.unescape(_TAG_PATTERN.sub("", content))
    header_id = id_generator(text) if id_generator else generate_slug(text)
    header_class = class_generator(text) if class_generator else generate_slug(text)
    return (
        f'<{tag} id="{html_lib.escape(header_id)}" class="{html_lib.escape(header_class)}">'
        f'{content}</{tag}>'
    )
