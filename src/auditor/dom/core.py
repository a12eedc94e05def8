from typing import Dict, Any, List, Callable, Type, Optional, Tuple, Set, Sequence
from pydantic import BaseModel, Field
from bs4 import Tag

from auditor.model import IssueType


def audit_spec(check: IssueType, guidelines: Sequence[str] = ()):
    """
    Decorator declaring which validator check a rule belongs to and which
    WCAG guidelines it can reference.
    Facilitates auto-discovery by the DOMRegistry.
    """
    def decorator(func):
        func.check = check
        func.defined_guidelines = list(guidelines)
        return func
    return decorator


class ElementBase(BaseModel):
    """
    Base data model representing a generic DOM element in the simplified tree.

    fg_color / bg_color hold the effective (possibly inherited) colours as
    '#rrggbb'; declares_color is True when this element itself declares one.
    """
    tag: str
    attrs: Dict[str, Any] = Field(default_factory=dict)
    text: Optional[str] = ""
    selector: str = ""
    children: List['ElementBase'] = Field(default_factory=list)
    fg_color: Optional[str] = None
    bg_color: Optional[str] = None
    declares_color: bool = False

    @property
    def role(self) -> Optional[str]:
        role = self.attrs.get('role')
        return role.strip() if isinstance(role, str) else None

    def attr(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """String value of an attribute; multi-valued attributes are joined."""
        value = self.attrs.get(name, default)
        if isinstance(value, (list, tuple)):
            return " ".join(value)
        return value


# Type alias for audit findings: (IssueType, Message, Guideline, Suggestion)
AuditResult = Tuple[IssueType, str, str, Optional[str]]

AuditRule = Callable[[Any, Any], List[AuditResult]]


class ElementDefinition:
    """
    Configuration object binding HTML tags to their model, parser, and rules.

    A definition without tag names registers rules only; they apply to every
    node that is an instance of the model.
    """

    def __init__(
            self,
            tag_names: Sequence[str],
            model: Type[ElementBase],
            parser: Optional[Callable[[Tag, List[ElementBase]], ElementBase]] = None,
            audit_rules: Optional[List[AuditRule]] = None,
            possible_guidelines: Optional[List[str]] = None
    ):
        self.tag_names = list(tag_names)
        self.model = model
        self.parser = parser
        self.audit_rules = audit_rules or []

        # --- Auto-Discovery of Guidelines ---
        final_guidelines: Set[str] = set(possible_guidelines or [])

        for rule in self.audit_rules:
            if hasattr(rule, 'defined_guidelines'):
                final_guidelines.update(rule.defined_guidelines)

        self.guidelines = sorted(final_guidelines)
