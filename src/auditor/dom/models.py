# src/auditor/dom/models.py
from typing import Optional, List, Dict
from pydantic import BaseModel, Field
from .core import ElementBase


class HeadingRef(BaseModel):
    """A heading in document order, kept for sequence checks."""
    level: int
    text: str = ""
    selector: str = ""


class HTMLDocument(BaseModel):
    """
    Represents a parsed HTML document (or fragment).

    This model serves as the read-only view the validator works on: the
    simplified element tree plus document-level facts gathered while
    building it (root language, heading sequence, id usage).
    """
    root_lang: Optional[str] = None

    # The DOM Tree Structure
    root: Optional[ElementBase] = None
    element_count: int = 0

    # Document-level facts
    headings: List[HeadingRef] = Field(default_factory=list)
    id_counts: Dict[str, int] = Field(default_factory=dict)
    idref_usages: List[Dict[str, str]] = Field(default_factory=list)

    def iter_elements(self):
        """Depth-first, document-order iteration over every element node."""
        if self.root is None:
            return
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))
