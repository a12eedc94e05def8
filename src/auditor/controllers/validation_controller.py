# src/auditor/controllers/validation_controller.py
import logging
import time
from typing import Iterable, Optional

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from auditor.dom.builder import DOMBuilder
from auditor.dom.constants import MAX_HTML_SIZE
from auditor.dom.qngine import QNGINE
from auditor.errors import HtmlProcessingError, HtmlTooLargeError, WcagValidationError
from auditor.model import AccessibilityConfig, AccessibilityReport

logger = logging.getLogger(__name__)


def validate_wcag(
        html: str,
        config: Optional[AccessibilityConfig] = None,
        disabled_checks: Optional[Iterable] = None,
        default_language: Optional[str] = None,
        max_size: int = MAX_HTML_SIZE
) -> AccessibilityReport:
    """
    Validates HTML against the bounded WCAG rule set and returns a report.

    Args:
        html: Full document or fragment.
        config: Target level and thresholds; defaults to AA.
        disabled_checks: Issue types whose check should be skipped.
        default_language: Language assumed when the markup has no <html> root.
        max_size: Admission ceiling in UTF-8 bytes.

    Raises:
        HtmlTooLargeError: before parsing when the input exceeds max_size.
        WcagValidationError: when the markup cannot be parsed at all.
    """
    config = config or AccessibilityConfig()
    size = len(html.encode("utf-8"))
    if size > max_size:
        raise HtmlTooLargeError(size, max_size)

    if not html.strip():
        return AccessibilityReport(target_level=config.wcag_level, wcag_level=config.wcag_level)

    start = time.perf_counter()
    try:
        soup = BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as e:
        raise WcagValidationError(config.wcag_level, f"HTML could not be parsed: {e}") from e

    return validate_soup(soup, config, disabled_checks, default_language, started_at=start)


def validate_soup(
        soup: BeautifulSoup,
        config: Optional[AccessibilityConfig] = None,
        disabled_checks: Optional[Iterable] = None,
        default_language: Optional[str] = None,
        started_at: Optional[float] = None
) -> AccessibilityReport:
    """
    Validates an already parsed tree; the tree is only read.

    Raises:
        HtmlProcessingError: when the tree is nested too deeply to model.
    """
    config = config or AccessibilityConfig()
    start = started_at if started_at is not None else time.perf_counter()

    try:
        doc = DOMBuilder().build(soup, default_language=default_language)
    except RecursionError as e:
        raise HtmlProcessingError(f"document is nested too deeply to analyse: {e}") from e
    issues = QNGINE().run_audit(doc, config, disabled_checks=disabled_checks)

    duration_ms = (time.perf_counter() - start) * 1000
    report = AccessibilityReport(
        issues=tuple(issues),
        elements_checked=doc.element_count,
        check_duration_ms=duration_ms,
        target_level=config.wcag_level,
        wcag_level=AccessibilityReport.achieved_level(issues, config.wcag_level)
    )
    logger.info(
        f"WCAG validation: {report.issue_count} issue(s) in {report.elements_checked} element(s), "
        f"achieved level {report.wcag_level or 'none'}"
    )
    return report
