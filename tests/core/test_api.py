# tests/core/test_api.py
import asyncio
import io
import sys

import pytest

from html_generator import app
from html_generator.api import (
    OutputDestination,
    async_markdown_to_html,
    convert,
    markdown_file_to_html,
    markdown_to_html,
)
from html_generator.core.config import HtmlConfig
from html_generator.core.errors import InvalidInputError, IoError, Utf8ConversionError
from html_generator.services.io_service import OutputKind, read_input


@pytest.fixture
def markdown_file(tmp_path):
    path = tmp_path / "page.md"
    path.write_text("# Welcome\n\nFirst paragraph.", encoding="utf-8")
    return path


def test_markdown_to_html():
    assert markdown_to_html("# Hello") == '<h1 id="hello">Hello</h1>\n'


def test_async_markdown_to_html_matches_sync():
    doc = "# Hello\n\n## World\n\n<button></button>"
    assert asyncio.run(async_markdown_to_html(doc)) == markdown_to_html(doc)


def test_convert_returns_all_outputs():
    result = convert("# Hello\n\nIntro text.")
    assert result.report is not None
    assert result.meta_tags[0] == '<meta name="title" content="Hello">'


def test_file_to_file_conversion(markdown_file, tmp_path):
    target = tmp_path / "page.html"
    html = markdown_file_to_html(markdown_file, OutputDestination.file(target))

    assert target.read_text(encoding="utf-8") == html
    assert '<h1 id="welcome">Welcome</h1>' in html


def test_file_to_writer_conversion(markdown_file):
    buffer = io.StringIO()
    markdown_file_to_html(markdown_file, OutputDestination.to_writer(buffer))
    assert "<p>First paragraph.</p>" in buffer.getvalue()


def test_file_to_stdout_conversion(markdown_file, capsys):
    markdown_file_to_html(markdown_file)
    assert '<h1 id="welcome">' in capsys.readouterr().out


def test_output_path_is_validated_before_reading(tmp_path, monkeypatch):
    """An invalid destination fails before the input file is touched."""
    reads = []
    monkeypatch.setattr("html_generator.api.read_input", lambda *args: reads.append(args))

    with pytest.raises(InvalidInputError):
        markdown_file_to_html(tmp_path / "page.md", OutputDestination.file(tmp_path / "out.exe"))
    assert reads == []


def test_input_path_length_is_enforced(tmp_path):
    config = HtmlConfig.builder().with_max_path_length(10).build()
    with pytest.raises(InvalidInputError):
        markdown_file_to_html(tmp_path / "page.md", OutputDestination.to_writer(io.StringIO()), config)


def test_missing_input_file_raises_io_error(tmp_path):
    with pytest.raises(IoError):
        read_input(tmp_path / "absent.md")


def test_non_utf8_input_raises_conversion_error(tmp_path):
    path = tmp_path / "latin1.md"
    path.write_bytes("caf\xe9".encode("latin-1"))
    with pytest.raises(Utf8ConversionError):
        read_input(path)


def test_read_input_from_stdin(monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO("# From stdin".encode("utf-8"))))
    assert read_input() == "# From stdin"


def test_write_failure_raises_io_error(tmp_path):
    destination = OutputDestination.file(tmp_path / "missing-dir" / "out.html")
    assert destination.kind == OutputKind.FILE
    with pytest.raises(IoError):
        destination.write("<p>x</p>")


# --- CLI ---

def test_cli_converts_files_into_out_dir(markdown_file, tmp_path):
    out_dir = tmp_path / "site"
    exit_code = app.main([str(markdown_file), "--out-dir", str(out_dir), "--lang", "en"])

    assert exit_code == 0
    assert '<h1 id="welcome">' in (out_dir / "page.html").read_text(encoding="utf-8")


def test_cli_reports_failures_with_exit_code(markdown_file, tmp_path):
    exit_code = app.main([str(markdown_file), str(tmp_path / "notes.txt"), "--out-dir", str(tmp_path / "site")])
    assert exit_code == 1
    assert (tmp_path / "site" / "page.html").exists()


def test_cli_rejects_invalid_language(markdown_file):
    assert app.main([str(markdown_file), "--lang", "english"]) == 1
