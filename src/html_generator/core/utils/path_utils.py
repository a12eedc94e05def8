# src/html_generator/core/utils/path_utils.py
import logging
from pathlib import Path, PurePath
from typing import Union

from html_generator.core.constants import ALLOWED_FILE_EXTENSIONS, MAX_PATH_LENGTH
from html_generator.core.errors import InvalidInputError

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package paths.
    """

    @staticmethod
    def get_package_root() -> Path:
        """Directory of the html_generator package (where settings.json lives)."""
        return Path(__file__).resolve().parent.parent.parent

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_package_root() / "settings.json"


def validate_file_path(path: Union[str, PurePath], max_length: int = MAX_PATH_LENGTH) -> Path:
    """
    Checks a user-supplied path before it is opened.

    Rejects empty paths, paths longer than max_length characters, any '..'
    component and extensions other than .md / .html (a path without an
    extension is accepted).

    Raises:
        InvalidInputError: describing the first rule that failed.
    """
    raw = str(path)
    if not raw.strip():
        raise InvalidInputError("File path cannot be empty")
    if len(raw) > max_length:
        raise InvalidInputError(f"File path exceeds maximum length of {max_length} characters")

    candidate = Path(raw)
    if ".." in candidate.parts:
        raise InvalidInputError("Directory traversal is not allowed in file paths")

    suffix = candidate.suffix.lower()
    if suffix and suffix not in ALLOWED_FILE_EXTENSIONS:
        raise InvalidInputError(
            f"Invalid file extension '{suffix}'; expected one of {', '.join(ALLOWED_FILE_EXTENSIONS)}"
        )

    logger.debug(f"Validated file path: {raw}")
    return candidate
