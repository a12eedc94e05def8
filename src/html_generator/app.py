# src/html_generator/app.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from auditor.model import AccessibilityConfig, WcagLevel
from html_generator.api import markdown_file_to_html
from html_generator.core.config import HtmlConfig
from html_generator.core.errors import HtmlError
from html_generator.core.utils.config_loader import get_nested_config
from html_generator.core.utils.configure_logging import configure_logger
from html_generator.core.utils.emojis import load_emoji_sequences
from html_generator.services.io_service import OutputDestination

logger = logging.getLogger(__name__)


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="html-generator",
        description="Convert Markdown to accessible, SEO-ready HTML."
    )
    p.add_argument("files", nargs="*", help="Markdown files to convert (stdin when omitted)")
    p.add_argument("--out-dir", help="Write <name>.html files here instead of to stdout")
    p.add_argument("--minify", action="store_true", default=None, help="Minify the generated HTML")
    p.add_argument("--lang", help="Document language, e.g. 'en' or 'en-GB'")
    p.add_argument("--log-level", help="Root log level (DEBUG, INFO, WARNING, ...)")
    return p


def build_config(args: argparse.Namespace) -> HtmlConfig:
    """Merges command-line flags over the packaged settings.json defaults."""
    builder = (
        HtmlConfig.builder()
        .with_language(args.lang or get_nested_config("generator.language", "en"))
        .with_minify_output(
            args.minify if args.minify is not None else get_nested_config("generator.minify_output", False)
        )
        .with_syntax_highlighting(True, get_nested_config("generator.syntax_theme", "github"))
        .with_toc(get_nested_config("generator.generate_toc", False))
        .with_structured_data(get_nested_config("generator.generate_structured_data", False))
        .with_accessibility(AccessibilityConfig(
            wcag_level=WcagLevel(get_nested_config("accessibility.wcag_level", "AA")),
            auto_fix=get_nested_config("accessibility.auto_fix", False),
        ))
    )

    emoji_file = get_nested_config("emoji_sequences_file")
    if emoji_file:
        builder.with_emoji_sequences(load_emoji_sequences(emoji_file))
    return builder.build()


def _destination_for(source: Path, out_dir: Optional[Path]) -> OutputDestination:
    if out_dir is None:
        return OutputDestination.stdout()
    return OutputDestination.file(out_dir / f"{source.stem}.html")


def main(argv: Optional[List[str]] = None) -> int:
    args = _parser().parse_args(argv)
    configure_logger(
        args.log_level or get_nested_config("logging.level", "WARNING"),
        get_nested_config("logging.module_levels", {}),
        get_nested_config("logging.silenced", {}),
    )

    try:
        config = build_config(args)
    except HtmlError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    out_dir = Path(args.out_dir) if args.out_dir else None
    if out_dir is not None:
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create output directory '{out_dir}': {e}")
            return 1

    if not args.files:
        try:
            markdown_file_to_html(None, OutputDestination.stdout(), config)
        except HtmlError as e:
            logger.error(f"Conversion of stdin failed: {e}")
            return 1
        return 0

    failures = 0
    for name in tqdm(args.files, desc="Converting", unit="file", disable=out_dir is None):
        source = Path(name)
        try:
            markdown_file_to_html(source, _destination_for(source, out_dir), config)
        except HtmlError as e:
            failures += 1
            logger.error(f"Conversion of '{source}' failed: {e}")

    if out_dir is not None:
        print(f"Converted {len(args.files) - failures}/{len(args.files)} file(s) into {out_dir}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
