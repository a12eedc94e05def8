# src/html_generator/core/config.py
"""
Generator configuration.

HtmlConfig is immutable once built and can be shared between concurrent
conversions. It is assembled with HtmlConfigBuilder:

    config = (
        HtmlConfig.builder()
        .with_language("en-GB")
        .with_syntax_highlighting(True, "monokai")
        .with_minify_output(True)
        .build()
    )
"""
import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from auditor.model import AccessibilityConfig
from html_generator.core.constants import (
    DEFAULT_LANGUAGE,
    DEFAULT_MAX_INPUT_SIZE,
    DEFAULT_SYNTAX_THEME,
    LANGUAGE_CODE_REGEX,
    MAX_PATH_LENGTH,
    MIN_INPUT_SIZE,
)
from html_generator.core.errors import InvalidInputError

logger = logging.getLogger(__name__)


def validate_language_code(lang: str) -> bool:
    """True for 'xx' or 'xx-YY' style tags ('en', 'en-GB')."""
    return isinstance(lang, str) and bool(LANGUAGE_CODE_REGEX.match(lang))


class HtmlConfig(BaseModel):
    """Settings for one or many Markdown to HTML conversions."""
    model_config = ConfigDict(frozen=True)

    language: str = DEFAULT_LANGUAGE
    max_input_size: int = DEFAULT_MAX_INPUT_SIZE
    max_path_length: int = Field(default=MAX_PATH_LENGTH, gt=0)
    enable_syntax_highlighting: bool = True
    syntax_theme: Optional[str] = DEFAULT_SYNTAX_THEME
    minify_output: bool = False
    add_aria_attributes: bool = True
    validate_accessibility: bool = True
    generate_structured_data: bool = False
    generate_toc: bool = False
    header_id_prefix: str = ""
    header_classes: Tuple[str, ...] = ()
    emoji_sequences: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    accessibility: AccessibilityConfig = Field(default_factory=AccessibilityConfig)

    @field_validator("language")
    @classmethod
    def _check_language(cls, value: str) -> str:
        if not validate_language_code(value):
            raise ValueError(f"Invalid language code: {value}")
        return value

    @field_validator("emoji_sequences")
    @classmethod
    def _freeze_emoji_sequences(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_validator("max_input_size")
    @classmethod
    def _check_input_size(cls, value: int) -> int:
        if value < MIN_INPUT_SIZE:
            raise ValueError(f"Input size must be at least {MIN_INPUT_SIZE} bytes")
        return value

    @classmethod
    def builder(cls) -> "HtmlConfigBuilder":
        return HtmlConfigBuilder()

    def validate(self) -> None:
        """
        Re-checks the invariants of an existing configuration.

        Raises:
            InvalidInputError: if the language tag or a size limit is invalid.
        """
        if self.max_input_size < MIN_INPUT_SIZE:
            raise InvalidInputError(f"Input size must be at least {MIN_INPUT_SIZE} bytes")
        if self.max_path_length <= 0:
            raise InvalidInputError("Maximum path length must be positive")
        if not validate_language_code(self.language):
            raise InvalidInputError(f"Invalid language code: {self.language}")
        if self.enable_syntax_highlighting and not self.syntax_theme:
            raise InvalidInputError("A syntax theme is required when highlighting is enabled")


class HtmlConfigBuilder:
    """Mutable builder producing a validated, frozen HtmlConfig."""

    def __init__(self):
        self._values: Dict[str, Any] = {}

    def with_language(self, language: str) -> "HtmlConfigBuilder":
        self._values["language"] = language
        return self

    def with_syntax_highlighting(self, enable: bool, theme: Optional[str] = None) -> "HtmlConfigBuilder":
        self._values["enable_syntax_highlighting"] = enable
        self._values["syntax_theme"] = (theme or DEFAULT_SYNTAX_THEME) if enable else None
        return self

    def with_minify_output(self, enable: bool) -> "HtmlConfigBuilder":
        self._values["minify_output"] = enable
        return self

    def with_max_input_size(self, size: int) -> "HtmlConfigBuilder":
        self._values["max_input_size"] = size
        return self

    def with_max_path_length(self, length: int) -> "HtmlConfigBuilder":
        self._values["max_path_length"] = length
        return self

    def with_aria_attributes(self, enable: bool) -> "HtmlConfigBuilder":
        self._values["add_aria_attributes"] = enable
        return self

    def with_accessibility(self, accessibility: AccessibilityConfig) -> "HtmlConfigBuilder":
        self._values["accessibility"] = accessibility
        return self

    def with_validation(self, enable: bool) -> "HtmlConfigBuilder":
        self._values["validate_accessibility"] = enable
        return self

    def with_structured_data(self, enable: bool) -> "HtmlConfigBuilder":
        self._values["generate_structured_data"] = enable
        return self

    def with_toc(self, enable: bool) -> "HtmlConfigBuilder":
        self._values["generate_toc"] = enable
        return self

    def with_header_policy(self, prefix: str = "", classes: Sequence[str] = ()) -> "HtmlConfigBuilder":
        self._values["header_id_prefix"] = prefix
        self._values["header_classes"] = tuple(classes)
        return self

    def with_emoji_sequences(self, mapping: Mapping[str, str]) -> "HtmlConfigBuilder":
        self._values["emoji_sequences"] = dict(mapping)
        return self

    def build(self) -> HtmlConfig:
        """
        Freezes the collected values.

        Raises:
            InvalidInputError: when any value violates the configuration invariants.
        """
        try:
            config = HtmlConfig(**self._values)
        except ValidationError as e:
            first = e.errors()[0]
            raise InvalidInputError(first.get("msg", str(e)).removeprefix("Value error, ")) from e
        config.validate()
        logger.debug(f"Built configuration: language={config.language}, minify={config.minify_output}")
        return config
