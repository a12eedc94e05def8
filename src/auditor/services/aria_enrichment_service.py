# src/auditor/services/aria_enrichment_service.py
"""
ARIA enrichment.

Walks a parsed document once and plans attribute changes per element from a
rule table keyed by tag, role and class tokens. The plan is applied in a
second pass, so the tree is never mutated while it is being traversed.

Existing explicit attributes are never overwritten. With auto_fix enabled,
invalid roles are replaced by the element's implicit role (or removed) and
invalid aria-* attributes are dropped.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Set

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from auditor.dom.constants import (
    BOOLEAN_ARIA_ATTRIBUTES,
    DEFAULT_NAV_ROLE,
    ENUMERATED_ARIA_VALUES,
    IMPLICIT_ROLES,
    INPUT_TYPE_ROLES,
    INTEGER_ARIA_ATTRIBUTES,
    LIVE_REGION_CLASS_TOKENS,
    LIVE_REGION_ROLES,
    MAX_HTML_SIZE,
    NAVIGATION_CLASS_TOKENS,
    NUMBER_ARIA_ATTRIBUTES,
    UNLABELLED_INPUT_TYPES,
    VALID_ARIA_ATTRIBUTES,
    VALID_ARIA_ROLES,
)
from auditor.dom.elements.form_control import find_label_source
from auditor.errors import HtmlTooLargeError, InvalidAriaAttributeError, MalformedHtmlError
from auditor.model import AccessibilityConfig

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"^-?\d+$")


# --- Validity helpers ---

def is_valid_aria_role(role: Optional[str]) -> bool:
    """True when every whitespace-separated token is a concrete WAI-ARIA role."""
    tokens = (role or "").split()
    return bool(tokens) and all(token in VALID_ARIA_ROLES for token in tokens)


def is_valid_aria_attribute(name: str, value: Optional[str]) -> bool:
    """Checks the attribute name against the ARIA allow-list and its value against the attribute's type."""
    if name not in VALID_ARIA_ATTRIBUTES or value is None:
        return False
    value = value.strip()
    if name in BOOLEAN_ARIA_ATTRIBUTES:
        return value in ("true", "false")
    if name in ENUMERATED_ARIA_VALUES:
        return value in ENUMERATED_ARIA_VALUES[name]
    if name in INTEGER_ARIA_ATTRIBUTES:
        return bool(_INTEGER_RE.match(value))
    if name in NUMBER_ARIA_ATTRIBUTES:
        try:
            float(value)
        except ValueError:
            return False
        return True
    return bool(value)


def implicit_role(tag_name: str, input_type: Optional[str] = None) -> Optional[str]:
    """Role an element carries natively, or None."""
    if tag_name == "input":
        return INPUT_TYPE_ROLES.get((input_type or "text").lower())
    return IMPLICIT_ROLES.get(tag_name)


def _attr_text(tag: Tag, name: str) -> str:
    value = tag.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


def _class_tokens(tag: Tag) -> Set[str]:
    value = tag.get("class") or []
    if isinstance(value, str):
        value = value.split()
    return {token.lower() for token in value}


def _has_accessible_name(tag: Tag) -> bool:
    return any(_attr_text(tag, a) for a in ("aria-label", "aria-labelledby"))


@dataclass
class AttributeChange:
    """Planned modification of one element."""
    element: Tag
    set_attrs: Dict[str, str] = field(default_factory=dict)
    remove_attrs: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.set_attrs and not self.remove_attrs


class AriaEnricher:
    """
    Table-driven ARIA enrichment over a BeautifulSoup tree.

    The only state carried across elements is the set of ids already in
    use, so generated ids stay unique within the document.
    """

    def __init__(self, config: Optional[AccessibilityConfig] = None, emoji_labels: Optional[Mapping[str, str]] = None):
        self.config = config or AccessibilityConfig()
        self.emoji_labels = dict(emoji_labels or {})

    def plan(self, soup: BeautifulSoup) -> List[AttributeChange]:
        """First pass: read-only traversal producing the list of changes."""
        self._reserved_ids = {_attr_text(t, "id") for t in soup.find_all(id=True)}
        self._id_counters: Dict[str, int] = {}
        self._changes: Dict[int, AttributeChange] = {}

        for tag in soup.find_all(True):
            tokens = _class_tokens(tag)
            if self.config.auto_fix:
                self._fix_invalid_attributes(tag)
            self._plan_landmark(tag, tokens)
            self._plan_live_region(tag, tokens)

            if tag.name == "button":
                self._plan_button(tag)
            elif tag.name in ("input", "select", "textarea"):
                self._plan_form_control(tag)
            elif tag.name == "form":
                self._plan_form(tag)
            elif tag.name == "table":
                self._propose(tag, "role", "table")
            elif tag.name == "th":
                self._plan_header_cell(tag)

            if self._current_role(tag) == "tablist":
                self._plan_tablist(tag)
            if "accordion" in tokens:
                self._plan_accordion(tag)

        return [c for c in self._changes.values() if not c.is_empty]

    @staticmethod
    def apply(plan: List[AttributeChange]) -> int:
        """
        Second pass: writes the planned changes. Returns the number of attributes touched.

        The whole plan is checked before anything is written.

        Raises:
            InvalidAriaAttributeError: when a planned role or aria-* value is not valid ARIA.
        """
        for change in plan:
            for name, value in change.set_attrs.items():
                if name == "role" and not is_valid_aria_role(value):
                    raise InvalidAriaAttributeError(name, f"'{value}' is not a WAI-ARIA role")
                if name.startswith("aria-") and not is_valid_aria_attribute(name, value):
                    raise InvalidAriaAttributeError(name, f"'{value}' is not an allowed value")

        touched = 0
        for change in plan:
            for name in change.remove_attrs:
                if name in change.element.attrs:
                    del change.element[name]
                    touched += 1
            for name, value in change.set_attrs.items():
                change.element[name] = value
                touched += 1
        return touched

    def enrich(self, soup: BeautifulSoup) -> BeautifulSoup:
        """Plans and applies in one call; the soup is modified in place and returned."""
        plan = self.plan(soup)
        touched = self.apply(plan)
        logger.debug(f"ARIA enrichment: {touched} attribute(s) changed on {len(plan)} element(s)")
        return soup

    # --- Planning helpers ---

    def _change_for(self, tag: Tag) -> AttributeChange:
        key = id(tag)
        if key not in self._changes:
            self._changes[key] = AttributeChange(element=tag)
        return self._changes[key]

    def _planned(self, tag: Tag, name: str) -> Optional[str]:
        change = self._changes.get(id(tag))
        if change is not None and name in change.set_attrs:
            return change.set_attrs[name]
        if change is not None and name in change.remove_attrs:
            return None
        return _attr_text(tag, name) if tag.has_attr(name) else None

    def _propose(self, tag: Tag, name: str, value: str) -> None:
        """Plans name=value only when the element has no such attribute yet."""
        if self._planned(tag, name) is not None:
            return
        self._change_for(tag).set_attrs[name] = value

    def _current_role(self, tag: Tag) -> Optional[str]:
        role = self._planned(tag, "role")
        return role.split()[0] if role else None

    def _unique_id(self, base: str) -> str:
        while True:
            self._id_counters[base] = self._id_counters.get(base, 0) + 1
            candidate = f"{base}-{self._id_counters[base]}"
            if candidate not in self._reserved_ids:
                self._reserved_ids.add(candidate)
                return candidate

    def _ensure_id(self, tag: Tag, base: str) -> str:
        existing = self._planned(tag, "id")
        if existing:
            return existing
        new_id = self._unique_id(base)
        self._change_for(tag).set_attrs["id"] = new_id
        return new_id

    def _fix_invalid_attributes(self, tag: Tag) -> None:
        change = self._change_for(tag)
        if tag.has_attr("role") and not is_valid_aria_role(_attr_text(tag, "role")):
            default = implicit_role(tag.name, _attr_text(tag, "type"))
            if default:
                change.set_attrs["role"] = default
            else:
                change.remove_attrs.append("role")
            logger.debug(f"Replaced invalid role '{_attr_text(tag, 'role')}' on <{tag.name}>")

        for name in list(tag.attrs):
            if name.startswith("aria-") and not is_valid_aria_attribute(name, _attr_text(tag, name)):
                change.remove_attrs.append(name)

    def _plan_landmark(self, tag: Tag, tokens: Set[str]) -> None:
        if tag.has_attr("role"):
            return
        if tag.name == "nav" or tokens & NAVIGATION_CLASS_TOKENS:
            self._propose(tag, "role", DEFAULT_NAV_ROLE)

    def _plan_live_region(self, tag: Tag, tokens: Set[str]) -> None:
        role = self._current_role(tag)
        if role in LIVE_REGION_ROLES:
            self._propose(tag, "aria-live", LIVE_REGION_ROLES[role])
            return
        if role is None:
            for token, politeness in LIVE_REGION_CLASS_TOKENS.items():
                if token in tokens:
                    self._propose(tag, "aria-live", politeness)
                    return

    def _emoji_label(self, text: str) -> Optional[str]:
        for emoji, label in self.emoji_labels.items():
            if emoji and emoji in text:
                return label
        return None

    def _plan_button(self, tag: Tag) -> None:
        if tag.has_attr("disabled"):
            self._propose(tag, "aria-disabled", "true")

        if _has_accessible_name(tag):
            return

        text = tag.get_text(" ", strip=True)
        emoji_label = self._emoji_label(text) if text else None
        if emoji_label:
            remainder = text
            for emoji in self.emoji_labels:
                remainder = remainder.replace(emoji, "")
            if not remainder.strip():
                self._propose(tag, "aria-label", emoji_label)
            return
        if text:
            # Native semantics and visible text are enough.
            return

        if any(_attr_text(img, "alt") for img in tag.find_all("img")):
            return
        title = _attr_text(tag, "title")
        if title:
            self._propose(tag, "aria-label", title)

    def _plan_form_control(self, tag: Tag) -> None:
        control_type = (_attr_text(tag, "type").lower() or "text") if tag.name == "input" else tag.name
        if tag.name == "input" and control_type in UNLABELLED_INPUT_TYPES:
            return
        if _has_accessible_name(tag) or _attr_text(tag, "title") or find_label_source(tag):
            return

        placeholder = _attr_text(tag, "placeholder")
        if placeholder:
            self._propose(tag, "aria-label", placeholder)
            return

        if control_type in ("checkbox", "radio"):
            sibling = tag.next_sibling
            following = sibling.strip() if isinstance(sibling, str) else ""
            if following:
                self._propose(tag, "aria-label", following)

    def _plan_form(self, tag: Tag) -> None:
        if _has_accessible_name(tag):
            return
        title = tag.find(["h1", "h2", "h3", "h4", "h5", "h6", "legend"])
        if title is None or not title.get_text(strip=True):
            return
        title_id = self._ensure_id(title, "form-title")
        self._propose(tag, "aria-labelledby", title_id)

    def _plan_header_cell(self, tag: Tag) -> None:
        if tag.has_attr("scope"):
            return
        row = tag.find_parent("tr")
        if row is None:
            return
        in_head = row.find_parent("thead") is not None
        cells = row.find_all(["td", "th"], recursive=False)
        all_headers = bool(cells) and all(c.name == "th" for c in cells)
        self._propose(tag, "scope", "col" if in_head or all_headers else "row")

    def _plan_tablist(self, tag: Tag) -> None:
        tabs = [
            t for t in tag.find_all(True)
            if self._current_role(t) == "tab" or (t.name == "button" and not t.has_attr("role"))
        ]
        if not tabs:
            return
        has_selected = any(self._planned(t, "aria-selected") == "true" for t in tabs)
        for index, tab in enumerate(tabs):
            self._propose(tab, "role", "tab")
            selected = "true" if index == 0 and not has_selected else "false"
            self._propose(tab, "aria-selected", selected)

    def _plan_accordion(self, tag: Tag) -> None:
        for index, button in enumerate(tag.find_all("button")):
            panel = button.find_next_sibling()
            if panel is None:
                continue
            self._propose(button, "aria-expanded", "false")
            if self._planned(button, "aria-controls") is None:
                panel_id = self._ensure_id(panel, "accordion-panel")
                self._propose(button, "aria-controls", panel_id)


def add_aria_attributes(
        html: str,
        config: Optional[AccessibilityConfig] = None,
        max_size: int = MAX_HTML_SIZE,
        emoji_labels: Optional[Mapping[str, str]] = None
) -> str:
    """
    Enriches an HTML string with ARIA attributes and returns the serialized result.

    Raises:
        HtmlTooLargeError: before parsing when the UTF-8 size exceeds max_size.
        MalformedHtmlError: when the markup cannot be parsed.
        InvalidAriaAttributeError: when enrichment would write an invalid ARIA value.
    """
    size = len(html.encode("utf-8"))
    if size > max_size:
        raise HtmlTooLargeError(size, max_size)
    if not html.strip():
        return html

    try:
        soup = BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as e:
        raise MalformedHtmlError(str(e), fragment=html[:100]) from e

    AriaEnricher(config, emoji_labels=emoji_labels).enrich(soup)
    return str(soup)
