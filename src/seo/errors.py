# src/seo/errors.py
from enum import Enum

from html_generator.core.errors import HtmlError


class SeoErrorKind(str, Enum):
    MISSING_TITLE = "missing_title"
    MISSING_DESCRIPTION = "missing_description"
    MISSING_META_TAGS = "missing_meta_tags"
    INVALID_STRUCTURED_DATA = "invalid_structured_data"


class SeoError(HtmlError):
    """Failure while building meta tags or structured data."""

    def __init__(self, kind: SeoErrorKind, message: str, element: str = ""):
        self.kind = kind
        self.element = element
        super().__init__(f"SEO error ({kind.value}): {message}")
