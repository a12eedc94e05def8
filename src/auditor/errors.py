# src/auditor/errors.py
from typing import Optional

from html_generator.core.errors import HtmlError, InputTooLargeError


class AccessibilityError(HtmlError):
    """Base class for failures raised by ARIA enrichment and WCAG validation."""
    kind = "accessibility"


class InvalidAriaAttributeError(AccessibilityError):
    """Raised by ARIA enrichment when a planned role or aria-* value fails the allow-lists."""
    kind = "invalid_aria_attribute"

    def __init__(self, attribute: str, message: str):
        self.attribute = attribute
        super().__init__(f"Invalid ARIA Attribute '{attribute}': {message}")


class MalformedHtmlError(AccessibilityError):
    kind = "malformed_html"

    def __init__(self, message: str, fragment: Optional[str] = None):
        self.fragment = fragment
        super().__init__(f"Malformed HTML: {message}")


class HtmlTooLargeError(AccessibilityError, InputTooLargeError):
    """Admission failure for HTML handed directly to the accessibility subsystem."""
    kind = "html_too_large"

    def __init__(self, size: int, max_size: int):
        self.size = size
        self.max_size = max_size
        HtmlError.__init__(self, f"HTML Input Too Large: size {size} exceeds maximum {max_size}")


class HtmlProcessingError(AccessibilityError):
    """The markup parsed but could not be turned into the validator's document model."""
    kind = "html_processing"

    def __init__(self, message: str):
        super().__init__(f"HTML Processing Error: {message}")


class WcagValidationError(AccessibilityError):
    kind = "wcag_validation"

    def __init__(self, level, message: str, guideline: Optional[str] = None):
        self.level = level
        self.guideline = guideline
        super().__init__(f"WCAG {level} Validation Error: {message}")
