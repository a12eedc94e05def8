# src/html_generator/core/utils/emojis.py
import logging
from pathlib import Path
from typing import Dict, Union

from html_generator.core.errors import IoError, Utf8ConversionError

logger = logging.getLogger(__name__)


def parse_emoji_sequences(contents: str) -> Dict[str, str]:
    """
    Parses Unicode emoji data lines into an emoji -> label mapping.

    Line format: ``1F600 ; emoji ; L1 ; none ; j # V6.0 (😀) GRINNING FACE``.
    The label is the comment text after the parenthesised emoji, lower-cased
    and joined with hyphens ('grinning-face'). Ranges and malformed code
    points are skipped.
    """
    mapping = {}
    for raw_line in contents.splitlines():
        line = raw_line.strip()
        if not line or line.startswith('#'):
            continue

        data_part, _, comment = line.partition('#')
        comment = comment.strip()
        close = comment.find(')')
        label_text = comment[close + 1:] if close >= 0 else comment
        label = "-".join(label_text.lower().split())

        hex_seq = data_part.split(';')[0].strip()
        chars = []
        for code in hex_seq.split():
            try:
                chars.append(chr(int(code, 16)))
            except ValueError:
                continue
        emoji = "".join(chars)
        if emoji:
            mapping[emoji] = label

    return mapping


def load_emoji_sequences(path: Union[str, Path]) -> Dict[str, str]:
    """Reads an emoji-sequences file from disk. See parse_emoji_sequences."""
    try:
        contents = Path(path).read_bytes().decode("utf-8")
    except UnicodeDecodeError as e:
        raise Utf8ConversionError(f"{path}: {e}") from e
    except OSError as e:
        raise IoError(f"Could not read emoji sequences from {path}: {e}") from e

    mapping = parse_emoji_sequences(contents)
    logger.debug(f"Loaded {len(mapping)} emoji label(s) from {path}")
    return mapping
