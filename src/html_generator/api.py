# src/html_generator/api.py
"""
Public entry points.

    from html_generator.api import markdown_to_html

    html = markdown_to_html("# Hello\n\nWorld")

Every function returns the final HTML string or raises one HtmlError
subclass. Use PipelineController directly for the report, headers, meta
tags and structured data of a conversion.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from html_generator.controllers.pipeline_controller import ConversionResult, PipelineController
from html_generator.core.config import HtmlConfig
from html_generator.services.io_service import OutputDestination, read_input

logger = logging.getLogger(__name__)

__all__ = [
    "ConversionResult",
    "OutputDestination",
    "async_markdown_to_html",
    "convert",
    "markdown_file_to_html",
    "markdown_to_html",
]


def convert(content: str, config: Optional[HtmlConfig] = None) -> ConversionResult:
    """Runs the full pipeline and returns every output of the conversion."""
    return PipelineController(config).run(content)


def markdown_to_html(content: str, config: Optional[HtmlConfig] = None) -> str:
    return convert(content, config).html


async def async_markdown_to_html(content: str, config: Optional[HtmlConfig] = None) -> str:
    """Asynchronous variant of markdown_to_html; produces the same HTML."""
    result = await PipelineController(config).run_async(content)
    return result.html


def markdown_file_to_html(
        input: Optional[Union[str, Path]] = None,
        output: Optional[OutputDestination] = None,
        config: Optional[HtmlConfig] = None
) -> str:
    """
    Converts a Markdown file (stdin when input is None) and writes the result
    to output (stdout when None). Both paths are validated before anything
    is read.

    Raises:
        InvalidInputError: for a path that is empty, too long, contains '..'
                           or has an unsupported extension.
        IoError / Utf8ConversionError: when reading or writing fails.
    """
    config = config or HtmlConfig()
    output = output or OutputDestination.stdout()
    output.validate(config.max_path_length)

    content = read_input(input, config.max_path_length)
    html = markdown_to_html(content, config)
    output.write(html)
    logger.debug(f"Converted {input or 'stdin'} -> {output}")
    return html
