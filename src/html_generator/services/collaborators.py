# src/html_generator/services/collaborators.py
"""
Default implementations of the external collaborators the pipeline calls:
Markdown conversion (markdown-it-py), minification (minify-html) and front
matter parsing (PyYAML). Each one can be replaced by any callable with the
same signature when constructing a PipelineController.
"""
import logging
import re
from typing import Any, Dict, Optional, Tuple

import minify_html
import yaml
from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from mdit_py_plugins.tasklists import tasklists_plugin

from html_generator.core.errors import (
    InvalidInputError,
    MarkdownConversionError,
    MinificationError,
    ParsingError,
)
from html_generator.core.utils.markup_utils import compile_pattern

logger = logging.getLogger(__name__)

FRONT_MATTER_PATTERN = compile_pattern(r"^---\s*\n(.*?)\n---\s*(?:\n|$)", re.MULTILINE | re.DOTALL)


def _render_plain_fence(self, tokens, idx, options, env) -> str:
    """Fenced code without the language class, used when highlighting is off."""
    return f"<pre><code>{escapeHtml(tokens[idx].content)}</code></pre>\n"


def build_markdown_parser(enable_highlighting: bool = True) -> MarkdownIt:
    """CommonMark plus GFM tables, strikethrough, bare-URL autolinks and task lists."""
    md = (
        MarkdownIt("commonmark", {"html": True, "linkify": True})
        .enable(["table", "strikethrough", "linkify"])
        .use(tasklists_plugin)
    )
    if not enable_highlighting:
        md.add_render_rule("fence", _render_plain_fence)
    return md


def convert_markdown(markdown: str, enable_highlighting: bool = True, theme: Optional[str] = None) -> str:
    """
    Renders Markdown to an HTML fragment.

    With highlighting enabled, fenced blocks carry class="language-<info>"
    for a client-side highlighter and theme is only recorded in the log.

    Raises:
        MarkdownConversionError: wrapping any failure of the parser.
    """
    try:
        html = build_markdown_parser(enable_highlighting).render(markdown)
    except Exception as e:
        raise MarkdownConversionError(str(e)) from e
    logger.debug(f"Converted {len(markdown)} chars of Markdown (highlighting={enable_highlighting}, theme={theme})")
    return html


def minify(html: str) -> str:
    """
    Minifies HTML while keeping closing tags and the html/head opening tags.

    Raises:
        MinificationError: when the minifier rejects the input.
    """
    try:
        return minify_html.minify(
            html,
            keep_closing_tags=True,
            keep_html_and_head_opening_tags=True,
            keep_comments=False,
            minify_css=True,
            minify_js=True,
            remove_bangs=False,
            remove_processing_instructions=True,
        )
    except Exception as e:
        raise MinificationError(str(e)) from e


def extract_front_matter(content: str) -> Tuple[Dict[str, Any], str]:
    """
    Splits a leading '---' delimited YAML block from the document body.

    Returns (front_matter, body). Documents without front matter return an
    empty mapping and the content unchanged.

    Raises:
        InvalidInputError: for empty input.
        ParsingError: when the block is unterminated, is not valid YAML or
                      is not a mapping.
    """
    if not content:
        raise InvalidInputError("Empty input")
    if not content.startswith("---"):
        return {}, content

    match = FRONT_MATTER_PATTERN.match(content)
    if not match:
        raise ParsingError("Invalid front matter format")

    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        raise ParsingError(f"Invalid front matter: {e}") from e
    if not isinstance(data, dict):
        raise ParsingError("Front matter must be a key/value mapping")

    body = content[match.end():].strip()
    return {str(k): v for k, v in data.items()}, body
