# src/html_generator/core/utils/markup_utils.py
import re
from typing import List, Optional

from bs4 import Tag
from soupsieve import SelectorSyntaxError

from html_generator.core.errors import RegexCompilationError, SelectorParseError


def compile_pattern(pattern: str, flags: int = 0) -> re.Pattern:
    """re.compile that raises RegexCompilationError instead of re.error."""
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise RegexCompilationError(pattern, str(e)) from e


def select_all(root: Tag, selector: str) -> List[Tag]:
    """CSS selection that raises SelectorParseError for invalid selectors."""
    try:
        return root.select(selector)
    except SelectorSyntaxError as e:
        raise SelectorParseError(selector, str(e)) from e


def select_first(root: Tag, selector: str) -> Optional[Tag]:
    try:
        return root.select_one(selector)
    except SelectorSyntaxError as e:
        raise SelectorParseError(selector, str(e)) from e
