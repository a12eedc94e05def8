# tests/core/test_utils.py
import json
import logging

import pytest
from bs4 import BeautifulSoup

from html_generator.core.errors import (
    InvalidInputError,
    IoError,
    RegexCompilationError,
    SelectorParseError,
    Utf8ConversionError,
)
from html_generator.core.utils import config_loader
from html_generator.core.utils.configure_logging import LogWithTqdm, configure_logger
from html_generator.core.utils.emojis import load_emoji_sequences, parse_emoji_sequences
from html_generator.core.utils.markup_utils import compile_pattern, select_all, select_first
from html_generator.core.utils.path_utils import PathUtils, validate_file_path

MOCK_SETTINGS_CONTENT = {
    "logging": {"level": "DEBUG"},
    "generator": {"language": "nl", "minify_output": True}
}

EMOJI_DATA = """# emoji-sequences.txt
1F600 ; emoji ; L1 ; none ; j # V6.0 (😀) GRINNING FACE
1F44D 1F3FD ; emoji ; L2 ; none ; j # V8.0 (👍🏽) thumbs up: medium skin tone
1F3F3..1F3F5 ; emoji ; L1 ; none ; j # V7.0 (🏳..🏵) range is skipped
"""


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    """
    Points PathUtils at a temporary settings.json so the loader reads a
    predictable configuration.
    """
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(MOCK_SETTINGS_CONTENT))
    monkeypatch.setattr(PathUtils, "get_settings_file", staticmethod(lambda: path))
    return path


# --- Path validation ---

@pytest.mark.parametrize("path", ["notes.md", "docs/page.html", "README", "/tmp/out.HTML"])
def test_valid_paths_are_accepted(path):
    assert str(validate_file_path(path)) == path


@pytest.mark.parametrize("path, message", [
    ("", "cannot be empty"),
    ("../secret.md", "Directory traversal"),
    ("docs/../../etc.md", "Directory traversal"),
    ("script.py", "Invalid file extension"),
])
def test_invalid_paths_are_rejected(path, message):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_file_path(path)
    assert message in str(exc_info.value)


def test_path_length_ceiling():
    with pytest.raises(InvalidInputError) as exc_info:
        validate_file_path("a" * 20 + ".md", max_length=10)
    assert "maximum length of 10" in str(exc_info.value)


# --- Configuration loading ---

def test_load_config_reads_settings(settings_file):
    assert config_loader.load_config() == MOCK_SETTINGS_CONTENT


def test_load_config_missing_file_gives_empty_config(tmp_path, monkeypatch):
    monkeypatch.setattr(PathUtils, "get_settings_file", staticmethod(lambda: tmp_path / "absent.json"))
    assert config_loader.load_config() == {}


def test_get_nested_config(settings_file, monkeypatch):
    monkeypatch.setattr(config_loader, "CONFIG", config_loader.load_config())
    assert config_loader.get_nested_config("generator.language") == "nl"
    assert config_loader.get_nested_config("generator.missing", "fallback") == "fallback"
    assert config_loader.get_nested_config("generator.language.deeper", 1) == 1


def test_packaged_settings_exist():
    assert PathUtils.get_settings_file().exists()


# --- Logging ---

def test_configure_logger_installs_single_tqdm_handler():
    root = configure_logger("DEBUG", {"html_generator.services": "ERROR"}, {"markdown_it": "WARNING"})
    try:
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], LogWithTqdm)
        assert root.level == logging.DEBUG
        assert logging.getLogger("html_generator.services").level == logging.ERROR
        assert logging.getLogger("markdown_it").level == logging.WARNING
    finally:
        root.handlers.clear()
        root.setLevel(logging.WARNING)
        logging.getLogger("html_generator.services").setLevel(logging.NOTSET)


# --- Markup helpers ---

def test_compile_pattern_maps_regex_errors():
    with pytest.raises(RegexCompilationError) as exc_info:
        compile_pattern("(unclosed")
    assert "(unclosed" in str(exc_info.value)


def test_selectors_map_syntax_errors():
    soup = BeautifulSoup("<p class='a'>x</p><p>y</p>", "html.parser")
    assert len(select_all(soup, "p")) == 2
    assert select_first(soup, "p.a").get_text() == "x"
    with pytest.raises(SelectorParseError):
        select_all(soup, "p[")


# --- Emoji sequences ---

def test_parse_emoji_sequences():
    mapping = parse_emoji_sequences(EMOJI_DATA)
    assert mapping == {
        "😀": "grinning-face",
        "👍🏽": "thumbs-up:-medium-skin-tone",
    }


def test_load_emoji_sequences_from_file(tmp_path):
    path = tmp_path / "emoji-sequences.txt"
    path.write_text(EMOJI_DATA, encoding="utf-8")
    assert "😀" in load_emoji_sequences(path)


def test_load_emoji_sequences_errors(tmp_path):
    with pytest.raises(IoError):
        load_emoji_sequences(tmp_path / "missing.txt")

    binary = tmp_path / "binary.txt"
    binary.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(Utf8ConversionError):
        load_emoji_sequences(binary)
