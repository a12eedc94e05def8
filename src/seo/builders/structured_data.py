# src/seo/builders/structured_data.py
import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, JsonValue, ValidationError, field_validator

from seo.errors import SeoError, SeoErrorKind
from seo.services.escape import escape_html

SCHEMA_CONTEXT = "https://schema.org"
RESERVED_KEYS = ("@context", "@type", "name", "description")


def _escape_strings(value: Any) -> Any:
    """Recursively HTML-escapes every string inside a JSON value, object keys included."""
    if isinstance(value, str):
        return escape_html(value)
    if isinstance(value, list):
        return [_escape_strings(v) for v in value]
    if isinstance(value, dict):
        return {escape_html(k): _escape_strings(v) for k, v in value.items()}
    return value


class StructuredDataConfig(BaseModel):
    """
    JSON-LD settings. page_type is mandatory at serialization time; title
    and description fall back to values extracted from the document.
    """
    model_config = ConfigDict(frozen=True)

    page_type: Optional[str] = "WebPage"
    title: Optional[str] = None
    description: Optional[str] = None
    additional_data: Dict[str, JsonValue] = Field(default_factory=dict)

    @field_validator("additional_data")
    @classmethod
    def _no_reserved_keys(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        clashing = [k for k in value if k in RESERVED_KEYS]
        if clashing:
            raise ValueError(f"additional_data may not override {', '.join(clashing)}")
        return value

    @classmethod
    def create(cls, **fields) -> "StructuredDataConfig":
        """
        Validating constructor.

        Raises:
            SeoError(INVALID_STRUCTURED_DATA): for values that are not JSON
            compatible or that override reserved keys.
        """
        try:
            return cls(**fields)
        except ValidationError as e:
            raise SeoError(SeoErrorKind.INVALID_STRUCTURED_DATA, str(e.errors()[0].get("msg", e))) from e

    def to_json_ld(
            self,
            fallback_title: Optional[str] = None,
            fallback_description: Optional[str] = None
    ) -> str:
        """
        Serializes to a <script type="application/ld+json"> block.

        Raises:
            SeoError(INVALID_STRUCTURED_DATA): when page_type is unset.
        """
        if not self.page_type or not self.page_type.strip():
            raise SeoError(SeoErrorKind.INVALID_STRUCTURED_DATA, "page type is required")

        data: Dict[str, Any] = {"@context": SCHEMA_CONTEXT, "@type": self.page_type.strip()}
        name = self.title or fallback_title
        if name:
            data["name"] = name
        description = self.description or fallback_description
        if description:
            data["description"] = description
        data.update(self.additional_data)

        body = json.dumps(_escape_strings(data), indent=2, ensure_ascii=False)
        return f'<script type="application/ld+json">\n{body}\n</script>'
