# src/html_generator/services/io_service.py
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import IO, Optional, Union

from html_generator.core.constants import MAX_PATH_LENGTH
from html_generator.core.errors import IoError, Utf8ConversionError
from html_generator.core.utils.path_utils import validate_file_path

logger = logging.getLogger(__name__)


class OutputKind(str, Enum):
    STDOUT = "stdout"
    FILE = "file"
    WRITER = "writer"


class OutputDestination:
    """Where converted HTML is written: stdout (default), a file path or a caller-supplied writer."""

    def __init__(self, kind: OutputKind = OutputKind.STDOUT, path: Optional[Path] = None,
                 writer: Optional[IO] = None):
        self.kind = kind
        self.path = path
        self.writer = writer

    @classmethod
    def stdout(cls) -> "OutputDestination":
        return cls(OutputKind.STDOUT)

    @classmethod
    def file(cls, path: Union[str, Path]) -> "OutputDestination":
        return cls(OutputKind.FILE, path=Path(path))

    @classmethod
    def to_writer(cls, writer: IO) -> "OutputDestination":
        return cls(OutputKind.WRITER, writer=writer)

    def validate(self, max_path_length: int = MAX_PATH_LENGTH) -> None:
        if self.kind == OutputKind.FILE:
            validate_file_path(self.path, max_path_length)

    def write(self, content: str) -> None:
        """
        Raises:
            IoError: when the destination cannot be written.
        """
        try:
            if self.kind == OutputKind.FILE:
                self.path.write_text(content, encoding="utf-8")
                logger.info(f"Wrote {len(content)} chars to {self.path}")
            elif self.kind == OutputKind.WRITER:
                self.writer.write(content)
                if hasattr(self.writer, "flush"):
                    self.writer.flush()
            else:
                sys.stdout.write(content)
                sys.stdout.flush()
        except OSError as e:
            raise IoError(f"Failed to write to {self}: {e}") from e

    def __str__(self) -> str:
        if self.kind == OutputKind.FILE:
            return f"File({self.path})"
        return self.kind.value.capitalize()


def read_input(path: Optional[Union[str, Path]] = None, max_path_length: int = MAX_PATH_LENGTH) -> str:
    """
    Reads UTF-8 text from a validated path, or from stdin when path is None.

    Raises:
        InvalidInputError: when the path fails validation.
        IoError: when the file cannot be read.
        Utf8ConversionError: when the content is not valid UTF-8.
    """
    if path is None:
        try:
            raw = sys.stdin.buffer.read()
        except OSError as e:
            raise IoError(f"Failed to read from stdin: {e}") from e
    else:
        checked = validate_file_path(path, max_path_length)
        try:
            raw = checked.read_bytes()
        except OSError as e:
            raise IoError(f"Failed to read input '{path}': {e}") from e

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise Utf8ConversionError(str(e)) from e
