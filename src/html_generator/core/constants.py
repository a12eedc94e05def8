# src/html_generator/core/constants.py
import re

# Admission ceilings
DEFAULT_MAX_INPUT_SIZE = 5 * 1024 * 1024
MIN_INPUT_SIZE = 1024
MAX_PATH_LENGTH = 4096

DEFAULT_LANGUAGE = "en-GB"
DEFAULT_SYNTAX_THEME = "github"

# Language tags: primary subtag with an optional upper-case region, e.g. "en" or "en-GB".
LANGUAGE_CODE_PATTERN = r"^[a-z]{2}(?:-[A-Z]{2})?$"
LANGUAGE_CODE_REGEX = re.compile(LANGUAGE_CODE_PATTERN)

ALLOWED_FILE_EXTENSIONS = (".md", ".html")
