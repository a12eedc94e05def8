# tests/core/test_header_service.py
import pytest
from bs4 import BeautifulSoup

from html_generator.core.errors import InputTooLargeError, InvalidInputError, ParsingError
from html_generator.services.header_service import (
    HeaderProcessor,
    build_toc,
    format_header_with_id_class,
    generate_slug,
    generate_table_of_contents,
    render_toc,
)


@pytest.fixture
def processor():
    """A header processor without prefix or classes."""
    return HeaderProcessor()


@pytest.mark.parametrize("text, slug", [
    ("Hello, World!", "hello-world"),
    ("  Leading and trailing  ", "leading-and-trailing"),
    ("snake_case_words", "snake-case-words"),
    ("Crème brûlée", "crème-brûlée"),
    ("!!!", ""),
])
def test_generate_slug(text, slug):
    assert generate_slug(text) == slug


def test_duplicate_headings_get_numbered_suffixes(processor):
    html, headers = processor.process_html("<h2>Intro</h2><h2>Intro</h2><h2>Intro</h2>")
    assert [h.id for h in headers] == ["intro", "intro-2", "intro-3"]
    assert 'id="intro-3"' in html


def test_empty_heading_gets_positional_placeholder(processor):
    _, headers = processor.process_html("<h1>Title</h1><h2>  </h2><h2>???</h2>")
    assert [h.id for h in headers] == ["title", "section-2", "section-3"]


def test_ids_are_unique_against_existing_document_ids(processor):
    """An id owned by a non-heading element is never reused for a heading."""
    _, headers = processor.process_html('<div id="setup"></div><h2>Setup</h2>')
    assert headers[0].id == "setup-2"


def test_processing_is_idempotent(processor):
    first, first_headers = processor.process_html("<h1>Guide</h1><h2>Guide</h2><h2></h2>")
    second, second_headers = processor.process_html(first)
    assert second == first
    assert [h.id for h in second_headers] == [h.id for h in first_headers]


def test_regenerate_replaces_existing_ids():
    html, headers = HeaderProcessor(regenerate=True).process_html('<h2 id="old">New Name</h2>')
    assert headers[0].id == "new-name"
    assert 'id="old"' not in html


def test_prefix_and_classes_are_applied():
    soup = BeautifulSoup('<h1 class="title">Start</h1>', "html.parser")
    headers = HeaderProcessor(id_prefix="doc-", classes=["anchor", "title"]).process(soup)
    assert headers[0].id == "doc-start"
    assert headers[0].classes == ("title", "anchor")
    assert soup.h1["class"] == ["title", "anchor"]


def test_process_html_rejects_oversized_input():
    with pytest.raises(InputTooLargeError) as exc_info:
        HeaderProcessor(max_size=10).process_html("<h1>Much too long</h1>")
    assert exc_info.value.size == len("<h1>Much too long</h1>")
    assert exc_info.value.max_size == 10


def test_toc_nests_by_level(processor):
    """Title > Sub, with a level jump kept under the nearest shallower entry."""
    _, headers = processor.process_html("<h1>Title</h1><h2>Sub</h2><h4>Deep</h4><h2>Next</h2><h1>Other</h1>")
    roots = build_toc(headers)

    assert [r.id for r in roots] == ["title", "other"]
    assert [c.id for c in roots[0].children] == ["sub", "next"]
    assert [c.id for c in roots[0].children[0].children] == ["deep"]
    assert roots[1].children == []


def test_render_toc_links_to_ids(processor):
    _, headers = processor.process_html("<h1>A &amp; B</h1><h2>Sub</h2>")
    rendered = render_toc(build_toc(headers))
    assert rendered == (
        '<ul><li class="toc-h1"><a href="#a-b">A &amp; B</a>'
        '<ul><li class="toc-h2"><a href="#sub">Sub</a></li></ul>'
        '</li></ul>'
    )


def test_generate_table_of_contents_rejects_empty_input():
    with pytest.raises(InvalidInputError):
        generate_table_of_contents("")


def test_format_header_with_id_class_defaults_to_slug():
    assert format_header_with_id_class("<h2>Hello, World!</h2>") == (
        '<h2 id="hello-world" class="hello-world">Hello, World!</h2>'
    )


def test_format_header_with_custom_generators():
    result = format_header_with_id_class(
        "<h3>Install <em>now</em></h3>",
        id_generator=lambda text: "custom",
        class_generator=lambda text: text.upper()
    )
    assert result == '<h3 id="custom" class="INSTALL NOW">Install <em>now</em></h3>'


@pytest.mark.parametrize("markup", ["<p>Not a header</p>", "<h2>Unclosed", "<h7>Nope</h7>"])
def test_format_header_rejects_non_headers(markup):
    with pytest.raises(ParsingError):
        format_header_with_id_class(markup)
