# src/auditor/dom/qngine.py
import logging
from typing import List, Callable, Iterable, Optional, Set

from .models import HTMLDocument
from .registry import DOMRegistry
from auditor.model import AccessibilityConfig, Issue, IssueType
from html_generator.core.constants import LANGUAGE_CODE_REGEX

logger = logging.getLogger(__name__)


class QNGINE:
    """
    Quality Engine (QNGINE) for auditing HTML Documents.

    Runs an ordered battery of independent checks. Each check combines a
    document-level pass (heading sequence, root language, id usage) with the
    node rules registered for it, and all checks run even when earlier ones
    report issues.
    """

    BATTERY = (
        IssueType.HEADING_STRUCTURE,
        IssueType.LANGUAGE_DECLARATION,
        IssueType.MISSING_ALT_TEXT,
        IssueType.MISSING_FORM_LABEL,
        IssueType.COLOR_CONTRAST,
        IssueType.KEYBOARD_NAVIGATION,
        IssueType.MISSING_ARIA_ATTRIBUTE,
    )

    def __init__(self):
        """Initializes the engine by discovering and loading all available audit rules."""
        DOMRegistry.discover()
        self._document_checks = {
            IssueType.HEADING_STRUCTURE: self._check_heading_sequence,
            IssueType.LANGUAGE_DECLARATION: self._check_root_language,
            IssueType.MISSING_ARIA_ATTRIBUTE: self._check_id_usage,
        }
        logger.debug(f"QNGINE ready; node rules cover WCAG {', '.join(DOMRegistry.get_all_guidelines())}")

    def run_audit(
            self,
            doc: HTMLDocument,
            config: Optional[AccessibilityConfig] = None,
            disabled_checks: Optional[Iterable] = None
    ) -> List[Issue]:
        """
        Runs the full audit suite on a parsed HTMLDocument.

        Args:
            doc (HTMLDocument): The parsed document model.
            config (AccessibilityConfig): Target level and thresholds.
            disabled_checks: Issue types (or their string values) to skip.

        Returns:
            List[Issue]: Findings in battery order, then document order.
        """
        config = config or AccessibilityConfig()
        disabled: Set[IssueType] = {IssueType(c) for c in (disabled_checks or [])}

        findings: List[Issue] = []
        if doc.root is None or doc.element_count == 0:
            return findings

        for check in self.BATTERY:
            if check in disabled:
                continue
            try:
                findings.extend(self._run_check(check, doc, config))
            except Exception as e:
                logger.warning(f"Check '{check.value}' failed: {e}")
                findings.append(Issue(
                    issue_type=IssueType.MALFORMED_HTML,
                    element="document",
                    message=f"Check '{check.value}' could not complete: {e}",
                    guideline="WCAG 4.1.1",
                    suggestion="Fix the markup so it can be analysed"
                ))

        return findings

    def _run_check(self, check: IssueType, doc: HTMLDocument, config: AccessibilityConfig) -> List[Issue]:
        issues = []
        document_check: Optional[Callable] = self._document_checks.get(check)
        if document_check:
            issues.extend(document_check(doc, config))

        rules = DOMRegistry.get_rules(check)
        if not rules:
            return issues

        for node in doc.iter_elements():
            for rule in rules:
                for (issue_type, msg, guideline, suggestion) in rule(node, config):
                    issues.append(Issue(
                        issue_type=issue_type,
                        element=node.selector or node.tag,
                        message=msg,
                        guideline=guideline,
                        suggestion=suggestion
                    ))
        return issues

    # --- Document-level checks ---

    @staticmethod
    def _check_heading_sequence(doc: HTMLDocument, config: AccessibilityConfig) -> List[Issue]:
        issues = []
        previous = None
        for heading in doc.headings:
            if previous is not None and heading.level - previous.level > config.max_heading_jump:
                issues.append(Issue(
                    issue_type=IssueType.HEADING_STRUCTURE,
                    element=heading.selector,
                    message=f"Skipped heading level from h{previous.level} to h{heading.level}",
                    guideline="WCAG 2.4.6",
                    suggestion="Use sequential heading levels"
                ))
            previous = heading

        if not any(h.level == 1 for h in doc.headings):
            issues.append(Issue(
                issue_type=IssueType.HEADING_STRUCTURE,
                element="document",
                message="Document does not contain an <h1> heading",
                guideline="WCAG 1.3.1",
                suggestion="Add a level-1 heading describing the page"
            ))
        return issues

    @staticmethod
    def _check_root_language(doc: HTMLDocument, config: AccessibilityConfig) -> List[Issue]:
        lang = (doc.root_lang or "").strip()
        if not lang:
            return [Issue(
                issue_type=IssueType.LANGUAGE_DECLARATION,
                element="html",
                message="Missing language declaration",
                guideline="WCAG 3.1.1",
                suggestion="Add a lang attribute to the <html> element"
            )]
        if not LANGUAGE_CODE_REGEX.match(lang):
            return [Issue(
                issue_type=IssueType.LANGUAGE_DECLARATION,
                element="html",
                message=f"Invalid language code: {lang}",
                guideline="WCAG 3.1.2",
                suggestion="Use a valid BCP 47 language code such as 'en' or 'en-GB'"
            )]
        return []

    @staticmethod
    def _check_id_usage(doc: HTMLDocument, config: AccessibilityConfig) -> List[Issue]:
        """Duplicate ids and ARIA references to ids that do not exist."""
        issues = []
        for element_id, count in doc.id_counts.items():
            if count > 1:
                issues.append(Issue(
                    issue_type=IssueType.MALFORMED_HTML,
                    element=f"#{element_id}",
                    message=f"Duplicate id '{element_id}' used {count} times",
                    guideline="WCAG 4.1.1",
                    suggestion="Make every id unique within the document"
                ))

        for usage in doc.idref_usages:
            if usage["id"] not in doc.id_counts:
                issues.append(Issue(
                    issue_type=IssueType.MALFORMED_HTML,
                    element=usage["selector"],
                    message=f"{usage['attribute']} references missing id '{usage['id']}'",
                    guideline="WCAG 4.1.2",
                    suggestion="Point the reference at an existing element id"
                ))
        return issues
