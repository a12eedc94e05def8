from typing import List, Any, Optional
from bs4 import Tag
from pydantic import model_validator
from ..core import ElementBase, ElementDefinition, AuditResult, audit_spec
from ..constants import UNLABELLED_INPUT_TYPES
from auditor.model import IssueType


class FormControlElement(ElementBase):
    """
    Data model for labelable form controls (<input>, <select>, <textarea>).
    Records whether any accessible-name source was found while parsing.
    """
    control_type: str = "text"
    has_label: bool = False

    @model_validator(mode='after')
    def detect_aria_name(self):
        """Treat a non-empty aria-label / aria-labelledby / title as a label source."""
        if self.has_label:
            return self
        for attr_name in ('aria-label', 'aria-labelledby', 'title'):
            if (self.attr(attr_name) or '').strip():
                self.has_label = True
                break
        return self

    @property
    def needs_label(self) -> bool:
        return self.tag != 'input' or self.control_type not in UNLABELLED_INPUT_TYPES


def _document_root(tag: Tag) -> Tag:
    root = tag
    for parent in tag.parents:
        root = parent
    return root


def find_label_source(tag: Tag) -> Optional[str]:
    """Returns 'wrapping-label' or 'label-for' when a <label> names the control."""
    if tag.find_parent('label') is not None:
        return 'wrapping-label'
    control_id = tag.get('id')
    if control_id:
        label = _document_root(tag).find('label', attrs={'for': control_id})
        if label is not None and label.get_text(strip=True):
            return 'label-for'
    return None


def parse_form_control(tag: Tag, children: list) -> FormControlElement:
    """Parses <input>, <select> and <textarea> into the FormControlElement model."""
    control_type = (tag.get('type') or 'text').strip().lower() if tag.name == 'input' else tag.name
    return FormControlElement(
        tag=tag.name,
        attrs=dict(tag.attrs),
        text=tag.get_text(" ", strip=True)[:50],
        children=children,
        control_type=control_type,
        has_label=find_label_source(tag) is not None
    )


# --- AUDIT RULES ---


@audit_spec(check=IssueType.MISSING_FORM_LABEL, guidelines=["3.3.2"])
def check_form_label(node: FormControlElement, config: Any) -> List[AuditResult]:
    """Every labelable control needs a <label>, aria-label or aria-labelledby."""
    res = []
    if node.needs_label and not node.has_label:
        name = node.attr('name') or node.attr('id') or node.control_type
        res.append((
            IssueType.MISSING_FORM_LABEL,
            f"Form control '{name}' has no associated label",
            "WCAG 3.3.2",
            "Associate a <label for=...> or add an aria-label"
        ))
    return res


# --- ELEMENT DEFINITION ---

DEFINITION = ElementDefinition(
    tag_names=["input", "select", "textarea"],
    model=FormControlElement,
    parser=parse_form_control,
    audit_rules=[check_form_label]
)
