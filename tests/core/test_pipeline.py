# tests/core/test_pipeline.py
import asyncio
import threading
from unittest.mock import MagicMock

import pytest
from bs4 import BeautifulSoup

from auditor.model import IssueType, WcagLevel
from html_generator.controllers.pipeline_controller import PipelineController, PipelineState
from html_generator.core.config import HtmlConfig
from html_generator.core.errors import (
    InputTooLargeError,
    InvalidInputError,
    MinificationError,
    OtherError,
    ParsingError,
)

SIMPLE_DOC = "# Title\n\n## Sub\n\nText"

FRONT_MATTER_DOC = """---
title: Release notes
description: What changed in this release
---
# Changes

* Faster builds
"""


@pytest.fixture
def controller():
    """A controller with the default configuration and the real collaborators."""
    return PipelineController(HtmlConfig())


def test_simple_document_gets_ids_and_toc(controller):
    result = controller.run(SIMPLE_DOC)

    assert '<h1 id="title">Title</h1>' in result.html
    assert '<h2 id="sub">Sub</h2>' in result.html
    assert [h.id for h in result.headers] == ["title", "sub"]

    assert len(result.toc) == 1
    assert result.toc[0].id == "title"
    assert [c.id for c in result.toc[0].children] == ["sub"]


def test_history_follows_stage_order(controller):
    controller.run(SIMPLE_DOC)
    assert controller.history == [
        PipelineState.START,
        PipelineState.FRONT_MATTER_EXTRACTED,
        PipelineState.MARKDOWN_CONVERTED,
        PipelineState.HEADERS_PROCESSED,
        PipelineState.ARIA_ENRICHED,
        PipelineState.VALIDATED,
        PipelineState.SEO_GENERATED,
        PipelineState.DONE,
    ]


def test_optional_stages_are_skipped_when_disabled():
    config = HtmlConfig.builder().with_validation(False).with_aria_attributes(False).build()
    controller = PipelineController(config)
    result = controller.run(SIMPLE_DOC)

    assert result.report is None
    assert PipelineState.VALIDATED not in controller.history
    assert PipelineState.MINIFIED not in controller.history
    assert controller.state == PipelineState.DONE


def test_clean_document_reaches_target_level(controller):
    result = controller.run(SIMPLE_DOC)
    assert result.report.issues == ()
    assert result.report.wcag_level == WcagLevel.AA


def test_missing_h1_is_reported():
    result = PipelineController().run("## Only a subsection\n\nBody text")
    issues = result.report.issues_of(IssueType.HEADING_STRUCTURE)
    assert [i.guideline for i in issues] == ["WCAG 1.3.1"]
    assert result.report.wcag_level is None


def test_meta_tags_come_from_document_content(controller):
    result = controller.run(SIMPLE_DOC)
    assert result.meta_tags == (
        '<meta name="title" content="Title">',
        '<meta name="description" content="Text">',
        '<meta property="og:type" content="website">',
    )


def test_front_matter_overrides_document_metadata(controller):
    result = controller.run(FRONT_MATTER_DOC)

    assert result.front_matter == {"title": "Release notes", "description": "What changed in this release"}
    assert "---" not in result.html
    assert '<meta name="title" content="Release notes">' in result.meta_tags
    assert '<meta name="description" content="What changed in this release">' in result.meta_tags


def test_structured_data_is_generated_when_enabled():
    config = HtmlConfig.builder().with_structured_data(True).build()
    result = PipelineController(config).run(SIMPLE_DOC)

    assert result.structured_data.startswith('<script type="application/ld+json">')
    assert '"@type": "WebPage"' in result.structured_data
    assert '"name": "Title"' in result.structured_data


def test_toc_is_inserted_as_navigation_landmark():
    config = HtmlConfig.builder().with_toc(True).build()
    result = PipelineController(config).run(SIMPLE_DOC)

    assert result.html.startswith('<nav class="table-of-contents" role="navigation">')
    assert '<a href="#sub">Sub</a>' in result.html


def test_header_policy_is_applied():
    config = HtmlConfig.builder().with_header_policy("doc-", ["anchor"]).build()
    result = PipelineController(config).run(SIMPLE_DOC)
    h1 = BeautifulSoup(result.html, "html.parser").h1
    assert h1.attrs == {"id": "doc-title", "class": ["anchor"]}
    assert h1.get_text() == "Title"


def test_minification_shrinks_output():
    plain = PipelineController(HtmlConfig()).run(SIMPLE_DOC).html

    controller = PipelineController(HtmlConfig.builder().with_minify_output(True).build())
    minified = controller.run(SIMPLE_DOC).html

    assert len(minified) < len(plain)
    assert PipelineState.MINIFIED in controller.history


def test_sync_and_async_produce_identical_output():
    config = HtmlConfig.builder().with_toc(True).with_structured_data(True).build()
    doc = FRONT_MATTER_DOC + "\n<button>Save</button>\n\n![Logo](logo.png)\n"

    sync_result = PipelineController(config).run(doc)
    async_result = asyncio.run(PipelineController(config).run_async(doc))

    assert async_result.html == sync_result.html
    assert async_result.headers == sync_result.headers
    assert async_result.meta_tags == sync_result.meta_tags
    assert async_result.structured_data == sync_result.structured_data
    assert async_result.report.issues == sync_result.report.issues


def test_empty_input_is_rejected(controller):
    with pytest.raises(InvalidInputError) as exc_info:
        controller.run("")
    assert "Input content is empty" in str(exc_info.value)
    assert controller.history == [PipelineState.START, PipelineState.FAILED]


def test_oversized_input_is_rejected_before_any_stage():
    calls = []
    config = HtmlConfig.builder().with_max_input_size(1024).build()
    controller = PipelineController(config, markdown_converter=lambda *args: calls.append(args) or "")

    with pytest.raises(InputTooLargeError) as exc_info:
        controller.run("x" * 2000)

    assert exc_info.value.size == 2000
    assert exc_info.value.max_size == 1024
    assert calls == []
    assert controller.history == [PipelineState.START, PipelineState.FAILED]


def test_size_is_measured_in_utf8_bytes():
    config = HtmlConfig.builder().with_max_input_size(1024).build()
    with pytest.raises(InputTooLargeError) as exc_info:
        PipelineController(config).run("é" * 600)
    assert exc_info.value.size == 1200


def test_collaborator_failure_aborts_pipeline():
    def broken_minifier(html):
        raise MinificationError("boom")

    config = HtmlConfig.builder().with_minify_output(True).build()
    controller = PipelineController(config, minifier=broken_minifier)

    with pytest.raises(MinificationError):
        controller.run(SIMPLE_DOC)
    assert controller.history[-2:] == [PipelineState.SEO_GENERATED, PipelineState.FAILED]


def test_unexpected_errors_are_wrapped():
    def crashing_converter(markdown, highlight, theme):
        raise RuntimeError("converter crashed")

    controller = PipelineController(markdown_converter=crashing_converter)
    with pytest.raises(OtherError) as exc_info:
        controller.run(SIMPLE_DOC)
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert controller.history[-1] == PipelineState.FAILED


def test_async_failure_matches_sync_failure():
    controller = PipelineController()
    with pytest.raises(ParsingError):
        asyncio.run(controller.run_async("---\ntitle: [unclosed\n---\nBody"))
    assert controller.history == [PipelineState.START, PipelineState.FAILED]


def test_custom_collaborators_are_used():
    controller = PipelineController(
        markdown_converter=lambda md, highlight, theme: f"<h1>{md.strip()}</h1>",
        front_matter_parser=lambda content: ({"title": "Injected"}, content)
    )
    result = controller.run("Custom")
    assert result.html == '<h1 id="custom">Custom</h1>'
    assert result.front_matter == {"title": "Injected"}


def test_minifier_receives_enriched_html():
    """The minifier runs last, on the fully processed document."""
    minifier = MagicMock(return_value="<h1>minified</h1>")
    config = HtmlConfig.builder().with_minify_output(True).build()
    result = PipelineController(config, minifier=minifier).run(SIMPLE_DOC)

    minifier.assert_called_once()
    assert '<h1 id="title">Title</h1>' in minifier.call_args.args[0]
    assert result.html == "<h1>minified</h1>"


def test_cancelled_async_run_is_recorded_as_failed():
    started = threading.Event()
    release = threading.Event()

    def blocking_converter(md, highlight, theme):
        started.set()
        release.wait(timeout=5)
        return "<h1>Late</h1>"

    controller = PipelineController(markdown_converter=blocking_converter)

    async def cancel_during_conversion():
        task = asyncio.create_task(controller.run_async(SIMPLE_DOC))
        while not started.is_set():
            await asyncio.sleep(0.01)
        task.cancel()
        try:
            await task
        finally:
            release.set()

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(cancel_during_conversion())
    assert controller.history == [
        PipelineState.START,
        PipelineState.FRONT_MATTER_EXTRACTED,
        PipelineState.FAILED,
    ]
