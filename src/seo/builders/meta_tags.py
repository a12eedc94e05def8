# src/seo/builders/meta_tags.py
import logging
from typing import Dict, Iterable, List, Mapping, Tuple, Union

from html_generator.core.errors import InvalidInputError
from seo.errors import SeoError, SeoErrorKind
from seo.services.escape import escape_html

logger = logging.getLogger(__name__)

# Open Graph style keys are emitted with property= instead of name=
PROPERTY_PREFIXES = ("og:", "article:", "fb:")


class MetaTagsBuilder:
    """
    Accumulates meta tag name -> content pairs in insertion order.

    A builder is consumed by build()/render(); use clone() to produce
    several outputs from the same base set.

    >>> MetaTagsBuilder().with_title("A & B").render()
    '<meta name="title" content="A &amp; B">'
    """

    def __init__(self):
        self._tags: Dict[str, str] = {}
        self._consumed = False

    def add_meta_tag(self, name: str, content: str) -> "MetaTagsBuilder":
        """Adds or replaces one tag; replacing keeps the original position."""
        self._ensure_open()
        if not name or not name.strip():
            raise InvalidInputError("Meta tag name cannot be empty")
        self._tags[name.strip()] = str(content)
        return self

    def add_meta_tags(
            self, tags: Union[Mapping[str, str], Iterable[Tuple[str, str]]]
    ) -> "MetaTagsBuilder":
        items = tags.items() if isinstance(tags, Mapping) else tags
        for name, content in items:
            self.add_meta_tag(name, content)
        return self

    def with_title(self, title: str) -> "MetaTagsBuilder":
        return self.add_meta_tag("title", title)

    def with_description(self, description: str) -> "MetaTagsBuilder":
        return self.add_meta_tag("description", description)

    def clone(self) -> "MetaTagsBuilder":
        """An unconsumed copy holding the same tags."""
        copy = MetaTagsBuilder()
        copy._tags = dict(self._tags)
        return copy

    @property
    def tags(self) -> Dict[str, str]:
        return dict(self._tags)

    def build(self) -> List[str]:
        """
        Returns one escaped <meta> string per tag and consumes the builder.

        Raises:
            SeoError(MISSING_META_TAGS): when no tag was added.
        """
        self._ensure_open()
        if not self._tags:
            raise SeoError(SeoErrorKind.MISSING_META_TAGS, "No meta tags to build")
        self._consumed = True

        result = []
        for name, content in self._tags.items():
            attr = "property" if name.startswith(PROPERTY_PREFIXES) else "name"
            result.append(f'<meta {attr}="{escape_html(name)}" content="{escape_html(content)}">')
        logger.debug(f"Built {len(result)} meta tag(s)")
        return result

    def render(self) -> str:
        return "".join(self.build())

    def _ensure_open(self) -> None:
        if self._consumed:
            raise InvalidInputError("MetaTagsBuilder has already been consumed; clone() it first")
