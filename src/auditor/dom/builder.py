# src/auditor/dom/builder.py
import logging
from collections import Counter
from typing import Dict, List, Optional, Tuple
from bs4 import BeautifulSoup, Tag

from .models import HTMLDocument, HeadingRef
from .core import ElementBase
from .colors import declared_colors
from .constants import ID_REFERENCE_ARIA_ATTRIBUTES
from .registry import DOMRegistry

logger = logging.getLogger(__name__)

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")


class DOMBuilder:
    """
    Builder responsible for parsing raw HTML into a structured HTMLDocument model.
    It handles DOM tree construction, inherited colour resolution and the
    document-level facts (headings, ids, id references) the validator needs.
    """

    def __init__(self):
        """Initializes the builder and ensures the DOMRegistry is populated."""
        DOMRegistry.discover()

    def build(self, soup: BeautifulSoup, default_language: Optional[str] = None) -> HTMLDocument:
        """Builds the HTMLDocument from an already parsed soup without modifying it."""
        html_tag = soup.find('html')
        root_lang = html_tag.get('lang') if html_tag is not None else default_language

        state = _BuildState()
        children = [
            self._build_tree(child, parent_selector="", inherited=(None, None), state=state)
            for child in soup.children
            if isinstance(child, Tag)
        ]
        root = ElementBase(tag="[document]", selector="", children=children)

        logger.debug(f"Built DOM model: {state.element_count} elements, {len(state.headings)} headings")

        return HTMLDocument(
            root_lang=root_lang,
            root=root,
            element_count=state.element_count,
            headings=state.headings,
            id_counts=dict(state.id_counts),
            idref_usages=state.idref_usages
        )

    def _build_tree(
            self,
            tag: Tag,
            parent_selector: str,
            inherited: Tuple[Optional[str], Optional[str]],
            state: "_BuildState"
    ) -> ElementBase:
        """
        Recursively builds a simplified element tree from a BeautifulSoup Tag.

        Headings and ids are recorded before descending so that document
        order is preserved.
        """
        state.element_count += 1
        selector = _selector_for(tag, parent_selector)

        if tag.name in HEADING_TAGS:
            state.headings.append(HeadingRef(
                level=int(tag.name[1]),
                text=tag.get_text(" ", strip=True),
                selector=selector
            ))

        element_id = tag.get('id')
        if isinstance(element_id, str) and element_id.strip():
            state.id_counts[element_id.strip()] += 1

        for attr_name in sorted(ID_REFERENCE_ARIA_ATTRIBUTES):
            value = tag.get(attr_name)
            if isinstance(value, list):
                value = " ".join(value)
            for ref in (value or "").split():
                state.idref_usages.append({"attribute": attr_name, "id": ref, "selector": selector})

        # --- Colour inheritance ---
        classes = tag.get('class') or []
        if isinstance(classes, str):
            classes = classes.split()
        own_fg, own_bg = declared_colors(tag.get('style'), classes)
        effective = (own_fg or inherited[0], own_bg or inherited[1])

        children = [
            self._build_tree(child, selector, effective, state)
            for child in tag.children
            if isinstance(child, Tag)
        ]

        # Retrieve specific parser from registry if available
        parser = DOMRegistry.get_parser(tag.name)
        if parser:
            element = parser(tag, children)
        else:
            # Fallback for generic elements
            text = tag.get_text(" ", strip=True)[:50]
            element = ElementBase(tag=tag.name, attrs=dict(tag.attrs), text=text, children=children)

        element.selector = selector
        element.fg_color, element.bg_color = effective
        element.declares_color = own_fg is not None or own_bg is not None
        return element


class _BuildState:
    """Mutable accumulators for one build; never shared between documents."""

    def __init__(self):
        self.element_count = 0
        self.headings: List[HeadingRef] = []
        self.id_counts: Counter = Counter()
        self.idref_usages: List[Dict[str, str]] = []


def _selector_for(tag: Tag, parent_selector: str) -> str:
    """Readable CSS-like path: 'tag#id' when the element has an id, else an nth-of-type chain."""
    element_id = tag.get('id')
    if isinstance(element_id, str) and element_id.strip():
        return f"{tag.name}#{element_id.strip()}"

    part = tag.name
    parent = tag.parent
    if parent is not None:
        same_type = parent.find_all(tag.name, recursive=False)
        if len(same_type) > 1:
            position = next(i for i, sibling in enumerate(same_type) if sibling is tag) + 1
            part = f"{tag.name}:nth-of-type({position})"
    return f"{parent_selector} > {part}" if parent_selector else part
