# src/html_generator/controllers/pipeline_controller.py
import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, Field

from auditor.controllers.validation_controller import validate_soup
from auditor.model import AccessibilityReport
from auditor.services.aria_enrichment_service import AriaEnricher
from html_generator.core.config import HtmlConfig
from html_generator.core.errors import HtmlError, InputTooLargeError, InvalidInputError, OtherError
from html_generator.services import collaborators
from html_generator.services.header_service import HeaderInfo, HeaderProcessor, TocEntry, build_toc, render_toc
from seo.builders.meta_tags import MetaTagsBuilder
from seo.builders.structured_data import StructuredDataConfig
from seo.services.seo_service import find_description, find_title

logger = logging.getLogger(__name__)

MarkdownConverter = Callable[[str, bool, Optional[str]], str]
Minifier = Callable[[str], str]
FrontMatterParser = Callable[[str], Tuple[Dict[str, Any], str]]


class PipelineState(str, Enum):
    START = "start"
    FRONT_MATTER_EXTRACTED = "front_matter_extracted"
    MARKDOWN_CONVERTED = "markdown_converted"
    HEADERS_PROCESSED = "headers_processed"
    ARIA_ENRICHED = "aria_enriched"
    VALIDATED = "validated"
    SEO_GENERATED = "seo_generated"
    MINIFIED = "minified"
    DONE = "done"
    FAILED = "failed"


class ConversionResult(BaseModel):
    """Everything one conversion produced. html is the final (possibly minified) string."""
    model_config = ConfigDict(frozen=True)

    html: str
    front_matter: Dict[str, Any] = Field(default_factory=dict)
    headers: Tuple[HeaderInfo, ...] = ()
    toc: Tuple[TocEntry, ...] = ()
    report: Optional[AccessibilityReport] = None
    meta_tags: Tuple[str, ...] = ()
    structured_data: Optional[str] = None


class _Enriched(BaseModel):
    html: str
    headers: List[HeaderInfo]
    toc: List[TocEntry]
    report: Optional[AccessibilityReport] = None
    meta_tags: List[str] = Field(default_factory=list)
    structured_data: Optional[str] = None


class PipelineController:
    """
    Runs one Markdown document through the conversion stages:

        Start -> FrontMatterExtracted -> MarkdownConverted -> HeadersProcessed
        -> AriaEnriched -> (Validated) -> SeoGenerated -> (Minified) -> Done

    Failed is entered from any stage and the first error is re-raised; no
    partial output is returned. run() and run_async() execute the same
    stages in the same order. run_async() hands the Markdown converter and
    the minifier to a worker thread; the tree stages always run inline.

    A controller tracks the history of its latest run, so use one controller
    per concurrent conversion. The configuration itself is immutable and
    can be shared.
    """

    def __init__(
            self,
            config: Optional[HtmlConfig] = None,
            markdown_converter: Optional[MarkdownConverter] = None,
            minifier: Optional[Minifier] = None,
            front_matter_parser: Optional[FrontMatterParser] = None
    ):
        self.config = config or HtmlConfig()
        self.markdown_converter = markdown_converter or collaborators.convert_markdown
        self.minifier = minifier or collaborators.minify
        self.front_matter_parser = front_matter_parser or collaborators.extract_front_matter
        self.history: List[PipelineState] = []

    @property
    def state(self) -> Optional[PipelineState]:
        return self.history[-1] if self.history else None

    # --- Public API ---

    def run(self, markdown: str) -> ConversionResult:
        """Blocking conversion on the calling thread."""
        self._admit(markdown)
        try:
            front_matter, body = self.front_matter_parser(markdown)
            self._advance(PipelineState.FRONT_MATTER_EXTRACTED)

            html = self.markdown_converter(body, self.config.enable_syntax_highlighting, self.config.syntax_theme)
            self._advance(PipelineState.MARKDOWN_CONVERTED)

            enriched = self._process_tree(html, front_matter)

            final_html = enriched.html
            if self.config.minify_output:
                final_html = self.minifier(final_html)
                self._advance(PipelineState.MINIFIED)

            return self._finish(final_html, front_matter, enriched)
        except Exception as e:
            raise self._fail(e)

    async def run_async(self, markdown: str) -> ConversionResult:
        """Same stages as run(); the external collaborators run in a worker thread."""
        self._admit(markdown)
        try:
            front_matter, body = self.front_matter_parser(markdown)
            self._advance(PipelineState.FRONT_MATTER_EXTRACTED)

            html = await asyncio.to_thread(
                self.markdown_converter, body, self.config.enable_syntax_highlighting, self.config.syntax_theme
            )
            self._advance(PipelineState.MARKDOWN_CONVERTED)

            enriched = self._process_tree(html, front_matter)

            final_html = enriched.html
            if self.config.minify_output:
                final_html = await asyncio.to_thread(self.minifier, final_html)
                self._advance(PipelineState.MINIFIED)

            return self._finish(final_html, front_matter, enriched)
        except asyncio.CancelledError:
            logger.warning(f"Pipeline cancelled after '{self.state.value}'")
            self.history.append(PipelineState.FAILED)
            raise
        except Exception as e:
            raise self._fail(e)

    # --- Stages ---

    def _admit(self, markdown: str) -> None:
        """Admission control; runs before any stage."""
        self.history = [PipelineState.START]
        if not markdown:
            raise self._fail(InvalidInputError("Input content is empty"))
        size = len(markdown.encode("utf-8"))
        if size > self.config.max_input_size:
            raise self._fail(InputTooLargeError(size, self.config.max_input_size))

    def _process_tree(self, html: str, front_matter: Dict[str, Any]) -> _Enriched:
        """Header, ARIA, validation and SEO stages over one exclusively owned tree."""
        soup = BeautifulSoup(html, "html.parser")

        headers = HeaderProcessor(self.config.header_id_prefix, self.config.header_classes).process(soup)
        toc = build_toc(headers)
        if self.config.generate_toc and toc:
            nav = BeautifulSoup(f'<nav class="table-of-contents">{render_toc(toc)}</nav>', "html.parser").nav
            soup.insert(0, nav)
        self._advance(PipelineState.HEADERS_PROCESSED)

        if self.config.add_aria_attributes:
            AriaEnricher(self.config.accessibility, emoji_labels=self.config.emoji_sequences).enrich(soup)
        self._advance(PipelineState.ARIA_ENRICHED)

        report = None
        if self.config.validate_accessibility:
            report = validate_soup(soup, self.config.accessibility, default_language=self.config.language)
            self._advance(PipelineState.VALIDATED)

        meta_tags, structured_data = self._generate_seo(soup, front_matter)
        self._advance(PipelineState.SEO_GENERATED)

        return _Enriched(
            html=str(soup),
            headers=headers,
            toc=toc,
            report=report,
            meta_tags=meta_tags,
            structured_data=structured_data
        )

    def _generate_seo(self, soup: BeautifulSoup, front_matter: Dict[str, Any]) -> Tuple[List[str], Optional[str]]:
        title = front_matter.get("title") or find_title(soup)
        description = front_matter.get("description") or find_description(soup)

        builder = MetaTagsBuilder()
        if title:
            builder.with_title(str(title))
        if description:
            builder.with_description(str(description))
        builder.add_meta_tag("og:type", "website")
        meta_tags = builder.build()

        structured_data = None
        if self.config.generate_structured_data:
            structured_data = StructuredDataConfig.create(
                page_type=str(front_matter.get("type", "WebPage")),
                title=str(title) if title else None,
                description=str(description) if description else None,
            ).to_json_ld()
        return meta_tags, structured_data

    # --- State handling ---

    def _advance(self, state: PipelineState) -> None:
        logger.debug(f"Pipeline: {self.state.value if self.state else '-'} -> {state.value}")
        self.history.append(state)

    def _finish(self, html: str, front_matter: Dict[str, Any], enriched: _Enriched) -> ConversionResult:
        self._advance(PipelineState.DONE)
        return ConversionResult(
            html=html,
            front_matter=front_matter,
            headers=tuple(enriched.headers),
            toc=tuple(enriched.toc),
            report=enriched.report,
            meta_tags=tuple(enriched.meta_tags),
            structured_data=enriched.structured_data
        )

    def _fail(self, error: Exception) -> HtmlError:
        """Records the failure and returns the error to raise (non-library errors are wrapped)."""
        failed_in = self.state
        self.history.append(PipelineState.FAILED)
        if isinstance(error, HtmlError):
            logger.warning(f"Pipeline failed after '{failed_in.value}': {error}")
            return error
        logger.error(f"Unexpected failure after '{failed_in.value}': {error}", exc_info=True)
        wrapped = OtherError(str(error))
        wrapped.__cause__ = error
        return wrapped
