# src/seo/services/seo_service.py
import logging
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from auditor.dom.constants import MAX_HTML_SIZE
from auditor.errors import HtmlTooLargeError
from html_generator.core.utils.markup_utils import select_first
from seo.builders.meta_tags import MetaTagsBuilder
from seo.builders.structured_data import StructuredDataConfig
from seo.errors import SeoError, SeoErrorKind

logger = logging.getLogger(__name__)


def _parse(html: str, max_size: int) -> BeautifulSoup:
    size = len(html.encode("utf-8"))
    if size > max_size:
        raise HtmlTooLargeError(size, max_size)
    return BeautifulSoup(html, "html.parser")


def find_title(soup: BeautifulSoup) -> Optional[str]:
    """Text of <title>, else of the first <h1>; None when neither has text."""
    for selector in ("title", "h1"):
        tag = select_first(soup, selector)
        if tag is not None and tag.get_text(strip=True):
            return tag.get_text(" ", strip=True)
    return None


def find_description(soup: BeautifulSoup) -> Optional[str]:
    """Content of meta[name=description], else the text of the first <p>."""
    meta = select_first(soup, 'meta[name="description"]')
    if meta is not None and meta.get("content"):
        return meta["content"]
    paragraph = select_first(soup, "p")
    if paragraph is not None and paragraph.get_text(strip=True):
        return paragraph.get_text(" ", strip=True)
    return None


def extract_title(soup: BeautifulSoup) -> str:
    """
    Raises:
        SeoError(MISSING_TITLE): when the document has no <title> text.
    """
    tag = select_first(soup, "title")
    if tag is None or not tag.get_text(strip=True):
        raise SeoError(SeoErrorKind.MISSING_TITLE, "Document has no <title>", element="title")
    return tag.get_text(strip=True)


def extract_description(soup: BeautifulSoup) -> str:
    """
    Raises:
        SeoError(MISSING_DESCRIPTION): when there is neither a meta description nor a paragraph.
    """
    description = find_description(soup)
    if description is None:
        raise SeoError(SeoErrorKind.MISSING_DESCRIPTION, "No meta description or paragraph found",
                       element="description")
    return description


def generate_meta_tags(html: str, max_size: int = MAX_HTML_SIZE) -> List[str]:
    """
    title, description and og:type meta tags for a full document.

    Raises:
        HtmlTooLargeError: before parsing when html exceeds max_size bytes.
        SeoError: when the title or description cannot be found.
    """
    soup = _parse(html, max_size)
    return (
        MetaTagsBuilder()
        .with_title(extract_title(soup))
        .with_description(extract_description(soup))
        .add_meta_tag("og:type", "website")
        .build()
    )


def generate_structured_data(
        html: str,
        config: Optional[StructuredDataConfig] = None,
        max_size: int = MAX_HTML_SIZE
) -> str:
    """
    JSON-LD block for the document. Explicit title/description in config win;
    otherwise the document title (or first h1) and description are used, and
    fields that cannot be found are omitted.
    """
    soup = _parse(html, max_size)
    config = config or StructuredDataConfig()
    return config.to_json_ld(
        fallback_title=find_title(soup),
        fallback_description=find_description(soup)
    )


def parse_meta_tags(markup: str) -> Dict[str, str]:
    """Reads <meta name|property=... content=...> tags back into an ordered mapping."""
    soup = BeautifulSoup(markup, "html.parser")
    tags = {}
    for meta in soup.find_all("meta"):
        key = meta.get("name") or meta.get("property")
        if key is not None and meta.get("content") is not None:
            tags[key] = meta["content"]
    return tags
