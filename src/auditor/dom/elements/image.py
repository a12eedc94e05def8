from typing import List, Optional, Any
from bs4 import Tag
from ..core import ElementBase, ElementDefinition, AuditResult, audit_spec
from auditor.model import IssueType


class ImageElement(ElementBase):
    tag: str = "img"

    @property
    def src(self) -> str: return self.attr('src', '') or ''

    @property
    def alt(self) -> Optional[str]: return self.attr('alt')


def parse_image(tag: Tag, children: list) -> ImageElement:
    return ImageElement(tag="img", attrs=dict(tag.attrs), children=children)


# --- RULES ---

@audit_spec(check=IssueType.MISSING_ALT_TEXT, guidelines=["1.1.1"])
def check_alt_text(node: ImageElement, config: Any) -> List[AuditResult]:
    res = []
    # alt=None means the attribute is missing
    if node.alt is None:
        res.append((
            IssueType.MISSING_ALT_TEXT,
            f"Image missing alt attribute: {node.src}",
            "WCAG 1.1.1",
            "Add an alt attribute describing the image"
        ))
    # alt="" or whitespace counts as no alternative text
    elif not node.alt.strip():
        res.append((
            IssueType.MISSING_ALT_TEXT,
            f"Image has empty alt text: {node.src}",
            "WCAG 1.1.1",
            "Describe the image in its alt attribute"
        ))

    return res


# --- DEFINITION ---
DEFINITION = ElementDefinition(
    tag_names=["img"],
    model=ImageElement,
    parser=parse_image,
    audit_rules=[check_alt_text]
)
