from typing import List, Any
from bs4 import Tag
from ..core import ElementBase, ElementDefinition, AuditResult, audit_spec
from auditor.model import IssueType


class HeadingElement(ElementBase):
    """
    Model representing a heading element (h1-h6).
    Stores the heading level for structural analysis.
    """
    level: int


def parse_heading(tag: Tag, children: List[ElementBase]) -> HeadingElement:
    """
    Parses heading tags and determines their hierarchy level (e.g., h1 -> 1).
    """
    try:
        # Extract level from tag name (e.g., 'h1' -> 1)
        level = int(tag.name[1])
    except (ValueError, IndexError, TypeError):
        level = 0

    # Retrieve and strip text content
    text_content = tag.get_text(" ", strip=True)

    return HeadingElement(
        tag=tag.name,
        attrs=dict(tag.attrs),
        text=text_content,
        children=children,
        level=level
    )


# --- AUDIT RULES ---


@audit_spec(check=IssueType.HEADING_STRUCTURE, guidelines=["2.4.6"])
def check_heading_not_empty(node: HeadingElement, config: Any) -> List[AuditResult]:
    """
    Rule: A heading must not be empty.
    Text or an image with alternative text (e.g., a logo) counts as content.
    """
    results = []

    has_img_child = any(
        child.tag == 'img' and (child.attr('alt') or '').strip()
        for child in node.children
    )

    if not node.text and not has_img_child:
        results.append((
            IssueType.HEADING_STRUCTURE,
            f"Heading h{node.level} is empty",
            "WCAG 2.4.6",
            "Give the heading descriptive text or remove it"
        ))

    return results


# --- ELEMENT DEFINITION ---

DEFINITION = ElementDefinition(
    tag_names=["h1", "h2", "h3", "h4", "h5", "h6"],
    model=HeadingElement,
    parser=parse_heading,
    audit_rules=[check_heading_not_empty]
)
