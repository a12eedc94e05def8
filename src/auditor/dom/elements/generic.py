# src/auditor/dom/elements/generic.py
"""
Rules that apply to every element regardless of tag: language changes,
colour contrast, keyboard reachability and ARIA usage.
"""
from typing import List, Any, Optional

from ..core import ElementBase, ElementDefinition, AuditResult, audit_spec
from ..colors import contrast_ratio
from ..constants import (
    CONTRAST_RATIO_BY_LEVEL,
    INTERACTIVE_ROLES,
    KEYBOARD_HANDLER_ATTRIBUTES,
    NATIVELY_FOCUSABLE_TAGS,
    REQUIRED_ARIA_PROPERTIES,
)
from auditor.model import IssueType, WcagLevel
from auditor.services.aria_enrichment_service import is_valid_aria_attribute, is_valid_aria_role
from html_generator.core.constants import LANGUAGE_CODE_REGEX


def required_contrast(config: Any) -> float:
    """Minimum ratio for the configured target level."""
    minimum = config.min_contrast_ratio
    if config.wcag_level == WcagLevel.AAA:
        minimum = max(minimum, CONTRAST_RATIO_BY_LEVEL["AAA"])
    return minimum


def _parse_tabindex(node: ElementBase) -> Optional[int]:
    value = node.attr('tabindex')
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def is_focusable(node: ElementBase) -> bool:
    """True when the element can receive keyboard focus without scripting."""
    tabindex = _parse_tabindex(node)
    if tabindex is not None:
        return tabindex >= 0
    if node.tag in NATIVELY_FOCUSABLE_TAGS:
        return node.attr('disabled') is None
    if node.tag in ('a', 'area'):
        return node.attr('href') is not None
    return (node.attr('contenteditable') or '').lower() in ('', 'true') and node.attr('contenteditable') is not None


def is_interactive(node: ElementBase) -> bool:
    if node.tag in NATIVELY_FOCUSABLE_TAGS:
        return True
    if node.tag == 'a' and node.attr('href') is not None:
        return True
    return bool(node.role and node.role.split()[0] in INTERACTIVE_ROLES)


# --- AUDIT RULES ---


@audit_spec(check=IssueType.LANGUAGE_DECLARATION, guidelines=["3.1.2"])
def check_language_change(node: ElementBase, config: Any) -> List[AuditResult]:
    """Validates lang attributes on descendants (the root is checked at document level)."""
    res = []
    if node.tag == 'html':
        return res
    lang = node.attr('lang')
    if lang is not None and not LANGUAGE_CODE_REGEX.match(lang.strip()):
        res.append((
            IssueType.LANGUAGE_DECLARATION,
            f"Invalid language code: {lang}",
            "WCAG 3.1.2",
            "Use a valid BCP 47 language code such as 'en' or 'en-GB'"
        ))
    return res


@audit_spec(check=IssueType.COLOR_CONTRAST, guidelines=["1.4.3", "1.4.6"])
def check_color_contrast(node: ElementBase, config: Any) -> List[AuditResult]:
    """
    Computes the contrast ratio for elements that declare a colour and carry
    text, using inherited values for the side they do not declare.
    """
    res = []
    if not node.declares_color or not node.text:
        return res
    if not node.fg_color or not node.bg_color:
        return res

    ratio = contrast_ratio(node.fg_color, node.bg_color)
    if ratio is None:
        return res

    minimum = required_contrast(config)
    if ratio < minimum:
        guideline = "WCAG 1.4.3" if ratio < CONTRAST_RATIO_BY_LEVEL["AA"] else "WCAG 1.4.6"
        res.append((
            IssueType.COLOR_CONTRAST,
            f"Contrast ratio {ratio:.2f}:1 between {node.fg_color} and {node.bg_color} "
            f"is below the required {minimum:.1f}:1",
            guideline,
            "Darken the text or lighten the background"
        ))
    return res


@audit_spec(check=IssueType.KEYBOARD_NAVIGATION, guidelines=["2.1.1"])
def check_keyboard_access(node: ElementBase, config: Any) -> List[AuditResult]:
    """Interactive elements must be reachable and operable from the keyboard."""
    res = []
    tabindex = _parse_tabindex(node)

    if tabindex is not None and tabindex < 0 and is_interactive(node):
        res.append((
            IssueType.KEYBOARD_NAVIGATION,
            f"Negative tabindex ({tabindex}) removes interactive element from keyboard navigation",
            "WCAG 2.1.1",
            "Remove the negative tabindex value"
        ))
        return res

    has_click = node.attr('onclick') is not None
    has_key_handler = any(node.attr(a) is not None for a in KEYBOARD_HANDLER_ATTRIBUTES)

    if (has_click or is_interactive(node)) and not is_focusable(node):
        if tabindex is None or tabindex >= 0:
            res.append((
                IssueType.KEYBOARD_NAVIGATION,
                "Interactive element has no keyboard focus path",
                "WCAG 2.1.1",
                "Use a native control or add tabindex=\"0\""
            ))
    elif has_click and not has_key_handler and node.tag not in ('a', 'button', 'input', 'select', 'textarea', 'summary'):
        res.append((
            IssueType.KEYBOARD_NAVIGATION,
            "Click handler without keyboard equivalent",
            "WCAG 2.1.1",
            "Add keyboard event handlers"
        ))
    return res


@audit_spec(check=IssueType.MISSING_ARIA_ATTRIBUTE, guidelines=["4.1.2"])
def check_aria_usage(node: ElementBase, config: Any) -> List[AuditResult]:
    """Roles must be valid, complex widgets need their required states, aria-* values must parse."""
    res = []
    role_attr = node.attrs.get('role')

    if role_attr is not None:
        tokens = (node.role or '').split()
        if not tokens:
            res.append((
                IssueType.MISSING_ARIA_ATTRIBUTE,
                "Empty ARIA role",
                "WCAG 4.1.2",
                "Remove the role attribute or set a valid role"
            ))
        for token in tokens:
            if not is_valid_aria_role(token):
                res.append((
                    IssueType.MISSING_ARIA_ATTRIBUTE,
                    f"Invalid ARIA role '{token}' for element",
                    "WCAG 4.1.2",
                    "Use a role defined by WAI-ARIA"
                ))

        if tokens and tokens[0] in REQUIRED_ARIA_PROPERTIES:
            missing = [p for p in REQUIRED_ARIA_PROPERTIES[tokens[0]] if node.attr(p) is None]
            if missing:
                res.append((
                    IssueType.MISSING_ARIA_ATTRIBUTE,
                    f"Missing required ARIA properties for role '{tokens[0]}': {', '.join(missing)}",
                    "WCAG 4.1.2",
                    "Add required ARIA properties"
                ))

    for name, value in node.attrs.items():
        if not name.startswith('aria-'):
            continue
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        if not is_valid_aria_attribute(name, value):
            res.append((
                IssueType.MISSING_ARIA_ATTRIBUTE,
                f"Invalid ARIA attribute {name}=\"{value}\"",
                "WCAG 4.1.2",
                "Use a defined aria-* attribute with a valid value"
            ))
    return res


# --- ELEMENT DEFINITION ---

# No tag names: rules run on every node.
DEFINITION = ElementDefinition(
    tag_names=[],
    model=ElementBase,
    audit_rules=[check_language_change, check_color_contrast, check_keyboard_access, check_aria_usage]
)
