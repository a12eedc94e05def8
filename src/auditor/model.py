from enum import Enum
from typing import Optional, Tuple, List

from pydantic import BaseModel, ConfigDict, Field

from auditor.dom.constants import WCAG_GUIDELINE_LEVELS


class WcagLevel(str, Enum):
    """WCAG conformance level, ordered A < AA < AAA."""
    A = "A"
    AA = "AA"
    AAA = "AAA"

    @property
    def rank(self) -> int:
        return len(self.value)

    def __lt__(self, other):
        if not isinstance(other, WcagLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, WcagLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, WcagLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, WcagLevel):
            return NotImplemented
        return self.rank >= other.rank

    def __str__(self) -> str:
        return self.value


class IssueType(str, Enum):
    """Closed set of issue kinds the validator can emit."""
    MISSING_ALT_TEXT = "missing-alt-text"
    MISSING_ARIA_ATTRIBUTE = "missing-aria-attribute"
    MISSING_FORM_LABEL = "missing-form-label"
    HEADING_STRUCTURE = "heading-structure-violation"
    COLOR_CONTRAST = "color-contrast-violation"
    KEYBOARD_NAVIGATION = "keyboard-navigation-violation"
    LANGUAGE_DECLARATION = "language-declaration-violation"
    MALFORMED_HTML = "malformed-html"


class AccessibilityConfig(BaseModel):
    """
    Settings for ARIA enrichment and WCAG validation.

    auto_fix allows the enrichment engine to rewrite attributes it finds
    invalid instead of leaving them for the validator to report.
    """
    model_config = ConfigDict(frozen=True)

    wcag_level: WcagLevel = WcagLevel.AA
    auto_fix: bool = False
    min_contrast_ratio: float = Field(default=4.5, gt=1.0, le=21.0)
    max_heading_jump: int = Field(default=1, ge=1, le=5)


class Issue(BaseModel):
    """
    A single accessibility finding produced by the validator.
    """
    model_config = ConfigDict(frozen=True)

    issue_type: IssueType
    element: str  # short selector-like description, e.g. 'img[src="logo.png"]'
    message: str
    guideline: str  # e.g. 'WCAG 1.1.1'
    suggestion: Optional[str] = None

    @property
    def criterion(self) -> str:
        """The success criterion number without the 'WCAG ' prefix."""
        return self.guideline.replace("WCAG", "").strip()

    @property
    def level(self) -> WcagLevel:
        """Conformance level of the referenced guideline (unknown criteria count as A)."""
        return WcagLevel(WCAG_GUIDELINE_LEVELS.get(self.criterion, "A"))


class AccessibilityReport(BaseModel):
    """
    Result of one validation call. Never mutated after it is returned.

    wcag_level is the highest level (capped at the target) for which no issue
    references a guideline at or below that level; None when a level A
    guideline is violated.
    """
    model_config = ConfigDict(frozen=True)

    issues: Tuple[Issue, ...] = ()
    elements_checked: int = 0
    check_duration_ms: float = 0.0
    target_level: WcagLevel = WcagLevel.AA
    wcag_level: Optional[WcagLevel] = None

    @property
    def issue_count(self) -> int:
        return len(self.issues)

    def issues_of(self, issue_type: IssueType) -> List[Issue]:
        return [i for i in self.issues if i.issue_type == issue_type]

    @staticmethod
    def achieved_level(issues, target: WcagLevel) -> Optional[WcagLevel]:
        achieved = None
        for level in (WcagLevel.A, WcagLevel.AA, WcagLevel.AAA):
            if level > target:
                break
            if any(issue.level <= level for issue in issues):
                break
            achieved = level
        return achieved
