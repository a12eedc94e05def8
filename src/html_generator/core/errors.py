# src/html_generator/core/errors.py
"""
Error hierarchy shared by every subsystem.

All public operations either return a value or raise exactly one subclass of
HtmlError. Lower-level failures (OSError, UnicodeDecodeError, re.error,
soupsieve selector errors, pydantic validation errors) are re-raised as the
matching subclass with the original exception chained via ``raise ... from``.
"""
from typing import Optional


class HtmlError(Exception):
    """Root of the html-generator error taxonomy."""

    kind: str = "other"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidInputError(HtmlError):
    kind = "invalid_input"

    def __init__(self, message: str):
        super().__init__(f"Invalid input: {message}")


class InputTooLargeError(HtmlError):
    """Raised by admission control before any traversal starts."""

    kind = "input_too_large"

    def __init__(self, size: int, max_size: Optional[int] = None):
        self.size = size
        self.max_size = max_size
        if max_size is None:
            super().__init__(f"Input too large: size {size} bytes")
        else:
            super().__init__(f"Input too large: size {size} bytes exceeds maximum {max_size} bytes")


class IoError(HtmlError):
    kind = "io"

    def __init__(self, message: str):
        super().__init__(f"IO error: {message}")


class ParsingError(HtmlError):
    kind = "parsing"

    def __init__(self, message: str):
        super().__init__(f"Parsing error: {message}")


class RegexCompilationError(HtmlError):
    kind = "regex_compilation"

    def __init__(self, pattern: str, message: str):
        self.pattern = pattern
        super().__init__(f"Failed to compile regex '{pattern}': {message}")


class SelectorParseError(HtmlError):
    kind = "selector_parse"

    def __init__(self, selector: str, message: str):
        self.selector = selector
        super().__init__(f"Failed to parse selector '{selector}': {message}")


class Utf8ConversionError(HtmlError):
    kind = "utf8_conversion"

    def __init__(self, message: str):
        super().__init__(f"UTF-8 conversion error: {message}")


class MarkdownConversionError(HtmlError):
    kind = "markdown_conversion"

    def __init__(self, message: str):
        super().__init__(f"Markdown conversion error: {message}")


class MinificationError(HtmlError):
    kind = "minification"

    def __init__(self, message: str):
        super().__init__(f"Failed to minify HTML: {message}")


class TemplateRenderingError(HtmlError):
    kind = "template_rendering"

    def __init__(self, message: str):
        super().__init__(f"Template rendering error: {message}")


class OtherError(HtmlError):
    kind = "other"

    def __init__(self, message: str):
        super().__init__(f"Unexpected error: {message}")
