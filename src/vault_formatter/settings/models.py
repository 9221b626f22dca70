from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    SILENT = "silent"


class ProseWrap(str, Enum):
    ALWAYS = "always"
    NEVER = "never"
    PRESERVE = "preserve"


class EmbeddedLanguageFormatting(str, Enum):
    AUTO = "auto"
    OFF = "off"


class HtmlWhitespaceSensitivity(str, Enum):
    CSS = "css"
    STRICT = "strict"
    IGNORE = "ignore"


class TrailingComma(str, Enum):
    NONE = "none"
    ES5 = "es5"
    ALL = "all"


class ArrowParens(str, Enum):
    ALWAYS = "always"
    AVOID = "avoid"


class QuoteProps(str, Enum):
    AS_NEEDED = "as-needed"
    CONSISTENT = "consistent"
    PRESERVE = "preserve"


class EndOfLine(str, Enum):
    LF = "lf"
    CRLF = "crlf"
    CR = "cr"
    AUTO = "auto"


class PluginSettings(BaseModel):
    """
    Persisted plugin settings.

    Serialized with camelCase keys. Keys written by other schema versions are kept
    as extras so a load/save round-trip never drops them.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    log_level: LogLevel = LogLevel.ERROR
    show_notices: bool = True

    auto_format: bool = False
    auto_format_debounce_ms: int = Field(default=1000, ge=0)
    auto_format_extensions: Tuple[str, ...] = ("md",)

    # Baseline prettier options, keyed by prettier option name.
    prettier_options: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("auto_format_extensions", mode="before")
    @classmethod
    def _normalize_extensions(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple, set)):
            out = []
            for ext in value:
                normalized = str(ext).strip().lstrip(".").lower()
                if normalized and normalized not in out:
                    out.append(normalized)
            return tuple(out)
        return value

    @property
    def debounce_seconds(self) -> float:
        return self.auto_format_debounce_ms / 1000.0

    def is_extension_eligible(self, path: str) -> bool:
        name = path.rsplit("/", 1)[-1]
        if "." not in name:
            return False
        return name.rsplit(".", 1)[-1].lower() in self.auto_format_extensions

    def to_data(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
